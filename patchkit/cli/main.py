###############################################################################
# Copyright (c) 2025, Advanced Micro Devices, Inc. All rights reserved.
#
# See LICENSE for license information.
###############################################################################

import argparse
import importlib
import os
import pkgutil
import sys
from typing import Callable, Iterable, List, Optional

from patchkit import __version__
from patchkit.core.utils import logger

SUBCOMMAND_PACKAGE = "patchkit.cli.subcommands"
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def _iter_subcommand_modules() -> Iterable[str]:
    """
    Discover every module inside `patchkit.cli.subcommands` (excluding those
    that start with `_`) and yield its full import path.
    """

    package = importlib.import_module(SUBCOMMAND_PACKAGE)
    prefix = package.__name__ + "."
    for _, module_name, is_pkg in pkgutil.walk_packages(package.__path__, prefix):
        leaf = module_name.split(".")[-1]
        if leaf.startswith("_") or is_pkg:
            continue
        yield module_name


def _load_subcommands(subparsers: argparse._SubParsersAction) -> None:
    """
    Dynamically import each discovered module and invoke its
    `register_subcommand(subparsers)` hook.
    """

    for module_path in _iter_subcommand_modules():
        module = importlib.import_module(module_path)
        register: Callable[[argparse._SubParsersAction], argparse.ArgumentParser] = getattr(
            module, "register_subcommand", None
        )
        if register is None:
            continue
        parser = register(subparsers)
        if parser is None:
            continue
        if not hasattr(parser, "get_default") or parser.get_default("func") is None:
            raise RuntimeError(
                f"Subcommand registered by '{module_path}' must call parser.set_defaults(func=...)"
            )


def _default_log_level() -> str:
    level = os.getenv("PATCHKIT_LOG_LEVEL", "INFO").strip().upper()
    return level if level in LOG_LEVELS else "INFO"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="patchkit", description="Modular, all-or-nothing regex patching of a single file"
    )
    parser.add_argument("--version", action="version", version=f"patchkit {__version__}")
    parser.add_argument(
        "--log-level",
        default=_default_log_level(),
        choices=LOG_LEVELS,
        type=str.upper,
        help="Minimum level printed to stderr (env: PATCHKIT_LOG_LEVEL).",
    )
    parser.add_argument("--log-dir", default=None, help="Also write per-level log files here.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    _load_subcommands(subparsers)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    patchkit CLI entry.

    Currently supported:
    - apply: validate and apply patch modules to a file (with backup).
    - list:  list the modules of a catalog.
    """
    parser = build_parser()
    args, unknown_args = parser.parse_known_args(argv)

    logger.setup_logger(
        logger.LoggerConfig(stderr_sink_level=args.log_level, log_dir=args.log_dir)
    )

    return args.func(args, unknown_args) or 0


if __name__ == "__main__":
    sys.exit(main())
