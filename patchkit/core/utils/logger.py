###############################################################################
# Copyright (c) 2025, Advanced Micro Devices, Inc. All rights reserved.
#
# See LICENSE for license information.
###############################################################################

import inspect
import logging
import os
import sys
from dataclasses import dataclass
from typing import Any, List, Optional

from loguru import logger as _loguru_logger

# Usable before setup_logger(): messages go to loguru's default stderr sink.
_logger = _loguru_logger
_handler_ids: List[int] = []

# Global variable to track the maximum module format width
_max_module_format_width = 16

SINK_LEVELS = ["debug", "info", "warning", "error"]

stderr_sink_format = (
    "[<green>{time:YYYYMMDD HH:mm:ss}</>]"
    "[<magenta>{extra[module_name]}</>]"
    "<level>{extra[level_padded]}</level>"
    "<level>{message}</level>"
)
file_sink_format = (
    "[<green>{time:YYYYMMDD HH:mm:ss}</>]"
    "[<magenta>{extra[module_name]}</>]"
    "[<blue>pid-{process}</>]"
    "<level>{extra[level_padded]}</level>"
    "<level>{message}</level>"
)


@dataclass(frozen=True)
class LoggerConfig:
    module_name: str = "patchkit"
    stderr_sink_level: str = "INFO"
    file_sink_level: str = "DEBUG"
    log_dir: Optional[str] = None


def format_level_with_padding(record) -> bool:
    """
    Add a formatted level field with padding outside brackets.

    Examples:
        INFO     -> "[INFO]     " (total 11 chars)
        CRITICAL -> "[CRITICAL]" (total 11 chars)
    """
    record["extra"]["level_padded"] = f"[{record['level'].name}]".ljust(11)
    return True


def add_file_sink(logger, log_dir: str, file_sink_level: str, level: str) -> Optional[int]:
    """
    Add a `<log_dir>/<level>.log` sink receiving records of `level` and above.

    Returns:
        int: Handler ID of the added sink, or None if `level` is below file_sink_level
    """
    assert level in SINK_LEVELS, f"unsupported sink level: {level}"

    if logger.level(level.upper()).no < logger.level(file_sink_level.upper()).no:
        return None
    return logger.add(
        os.path.join(log_dir, f"{level}.log"),
        level=level.upper(),
        format=file_sink_format,
        colorize=False,
        rotation="10 MB",
        encoding="utf-8",
        filter=format_level_with_padding,
    )


class InterceptHandler(logging.Handler):
    """Route standard `logging` records into loguru with the same location prefix."""

    def emit(self, record):
        try:
            level = _logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        module_name = record.name.split(".")[-1] if record.name else "unknown"
        formatted_message = f"{module_format(module_name, record.lineno)}: {record.getMessage()}"
        _logger.opt(exception=record.exc_info).log(level, formatted_message)


def setup_logger(cfg: LoggerConfig) -> None:
    """
    (Re)configure the global logger: a stderr sink plus, when cfg.log_dir is
    set, one file sink per level in SINK_LEVELS.
    """
    global _logger

    reset_logger()
    _loguru_logger.remove()

    bound = _loguru_logger.bind(module_name=cfg.module_name)
    if cfg.log_dir:
        os.makedirs(cfg.log_dir, exist_ok=True)
        for sinked_level in SINK_LEVELS:
            handler_id = add_file_sink(bound, cfg.log_dir, cfg.file_sink_level, sinked_level)
            if handler_id is not None:
                _handler_ids.append(handler_id)

    _handler_ids.append(
        bound.add(
            sys.stderr,
            level=cfg.stderr_sink_level.upper(),
            format=stderr_sink_format,
            colorize=None,
            filter=format_level_with_padding,
        )
    )

    logging.root.handlers = [InterceptHandler()]
    logging.root.setLevel(logging.NOTSET)

    _logger = bound


def reset_logger() -> None:
    """Drop sinks added by setup_logger and fall back to the unconfigured logger."""
    global _logger
    while _handler_ids:
        try:
            _loguru_logger.remove(_handler_ids.pop())
        except ValueError:
            pass
    _logger = _loguru_logger


def module_format(module_name: str, line: int) -> str:
    """
    Format module location with dynamic width adjustment.

    Returns:
        Formatted string like "[------runner.py:10]"
    """
    global _max_module_format_width

    location_str = f"{module_name}.py:{line}"
    if len(location_str) > _max_module_format_width:
        _max_module_format_width = len(location_str)

    return "[" + location_str.rjust(_max_module_format_width, "-") + "]"


def _with_caller(__message: str) -> str:
    caller = inspect.stack()[2]
    module_name = caller.frame.f_globals["__name__"].split(".")[-1]
    return f"{module_format(module_name, caller.lineno)}: {__message}"


def debug(__message: str, *args: Any, **kwargs: Any) -> None:
    _logger.opt(depth=1).debug(_with_caller(__message), *args, **kwargs)


def info(__message: str, *args: Any, **kwargs: Any) -> None:
    _logger.opt(depth=1).info(_with_caller(__message), *args, **kwargs)


def warning(__message: str, *args: Any, **kwargs: Any) -> None:
    _logger.opt(depth=1).warning(_with_caller(__message), *args, **kwargs)


def error(__message: str, *args: Any, **kwargs: Any) -> None:
    _logger.opt(depth=1).error(_with_caller(__message), *args, **kwargs)


def log_kv(key: str, value: Any, width=18, fillchar=" ") -> None:
    __message = f"{key}:".ljust(width, fillchar) + f"{value}"
    _logger.opt(depth=1).info(_with_caller(__message))
