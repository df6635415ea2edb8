###############################################################################
# Copyright (c) 2025, Advanced Micro Devices, Inc. All rights reserved.
#
# See LICENSE for license information.
###############################################################################

"""
Patch Execution Runner.

Drives one run against one target file:

    Start -> BackupCreated -> ModuleLoop -> Reported -> Terminal

Run-scoped failures (target file, backup, commit) raise TargetFileError.
Module-scoped failures are recorded in the PatchReport and the loop moves
on to the next module; modules already committed are never rolled back.
"""

import os
from datetime import datetime
from typing import Callable, List, Optional, Sequence

from patchkit.core.patches.backup import create_backup
from patchkit.core.patches.engine import apply_module
from patchkit.core.patches.errors import (
    SubstitutionError,
    UnknownModuleError,
    ValidationError,
)
from patchkit.core.patches.module import (
    PatchModule,
    PatchOutcome,
    PatchReport,
    PatchStatus,
)
from patchkit.core.patches.registry import ModuleRegistry
from patchkit.core.patches.target import (
    DEFAULT_ENCODING,
    check_encoding,
    check_target,
    commit_bytes,
    encode_text,
    read_text,
)
from patchkit.core.patches.validator import validate_module
from patchkit.core.utils import logger

SEPARATOR = "-" * 80

# -----------------------------------------------------------------------------
# Parse PATCHKIT_MODULES Environment Variable
# -----------------------------------------------------------------------------


def _parse_enabled_modules_from_env() -> Optional[List[str]]:
    """
    Environment variable: PATCHKIT_MODULES

        "all" or ""   -> apply every registered module (default)
        "none"        -> apply nothing
        "a,b,c"       -> apply only a, b, c (in that order)
    """
    raw = os.getenv("PATCHKIT_MODULES", "").strip()
    if not raw or raw.lower() == "all":
        return None
    if raw.lower() == "none":
        return []
    return parse_module_list(raw)


def parse_module_list(raw: str) -> List[str]:
    """Split a comma-separated module list, dropping whitespace and blanks."""
    return [x.strip() for x in raw.split(",") if x.strip()]


def _resolve_selection(registry: ModuleRegistry, modules: Optional[Sequence[str]]) -> List[str]:
    if modules is None:
        modules = _parse_enabled_modules_from_env()
    if modules is None:
        logger.info("No modules specified, applying all available modules...")
        return registry.names()
    return [m.strip() for m in modules if m and m.strip()]


# -----------------------------------------------------------------------------
# Single module
# -----------------------------------------------------------------------------


def _run_module(module: PatchModule, target: str, encoding: str, dry_run: bool) -> PatchOutcome:
    # Re-read every time: earlier modules may have committed changes.
    content = read_text(target, encoding)

    try:
        validate_module(module, content)
    except ValidationError as e:
        logger.error(f"Error: {e}")
        logger.error(f"Module '{module.name}' failed validation - not applying")
        return PatchOutcome(module.name, PatchStatus.VALIDATION_FAILED, str(e), e.operation_index)

    try:
        staged = apply_module(module, content)
    except SubstitutionError as e:
        logger.error(f"Error: Module '{module.name}' failed: {e}; no changes written")
        return PatchOutcome(module.name, PatchStatus.SUBSTITUTION_FAILED, str(e), e.operation_index)

    try:
        data = encode_text(staged, encoding)
    except UnicodeEncodeError as e:
        detail = f"Module '{module.name}' output cannot be encoded as {encoding}: {e.reason}"
        logger.error(f"Error: {detail}; no changes written")
        return PatchOutcome(module.name, PatchStatus.SUBSTITUTION_FAILED, detail)

    if dry_run:
        detail = f"dry-run: would apply {len(module.operations)} operation(s)"
        logger.info(f"[Patch] (dry-run) Would apply: {module.name}")
        return PatchOutcome(module.name, PatchStatus.SKIPPED, detail)

    commit_bytes(target, data)
    logger.info(f"Module '{module.name}' applied successfully")
    return PatchOutcome(module.name, PatchStatus.APPLIED, f"{len(module.operations)} operation(s) applied")


# -----------------------------------------------------------------------------
# Run Patches
# -----------------------------------------------------------------------------


def run_patches(
    target: str,
    registry: ModuleRegistry,
    modules: Optional[Sequence[str]] = None,
    *,
    dry_run: bool = False,
    encoding: str = DEFAULT_ENCODING,
    now: Optional[Callable[[], datetime]] = None,
) -> PatchReport:
    """
    Apply the selected modules of `registry` to the file at `target`.

    Args:
        target:
            Path of the file to patch in place.
        registry:
            Modules available for this run.
        modules:
            Ordered module names to apply. None selects PATCHKIT_MODULES,
            falling back to every registered module in registration order.
        dry_run:
            Validate and substitute in memory only; no backup, no commit.
        encoding:
            Text encoding of the target file.
        now:
            Clock used for the backup timestamp.

    Returns:
        PatchReport; `report.ok` is True iff no module failed.

    Raises:
        TargetFileError: the target is unusable, the encoding is unknown,
            or backup/commit failed.
    """
    check_target(target)
    check_encoding(encoding)
    report = PatchReport(target=target, dry_run=dry_run)

    logger.info(SEPARATOR)
    logger.info(f"Patching: {target}" + (" (dry-run)" if dry_run else ""))

    if not dry_run:
        report.backup_path = create_backup(target, now=now)

    selection = _resolve_selection(registry, modules)
    logger.log_kv("modules", ", ".join(selection) or "<none>")
    logger.debug(f"[Patch] Registered modules: {registry.names()}")

    for name in selection:
        logger.info(SEPARATOR)
        try:
            module = registry.lookup(name)
        except UnknownModuleError as e:
            logger.error(f"Error: {e}")
            report.record(PatchOutcome(name, PatchStatus.UNKNOWN, "unknown module"))
            continue

        logger.info(f"[Patch] Applying {module.name}: {module.description}")
        report.record(_run_module(module, target, encoding, dry_run))

    _log_summary(report)
    return report


def _log_summary(report: PatchReport) -> None:
    logger.info(SEPARATOR)
    if report.applied:
        logger.info(f"Successfully applied modules: {' '.join(report.applied)}")
    if report.dry_run:
        would = [o.module_name for o in report.outcomes if o.status == PatchStatus.SKIPPED]
        if would:
            logger.info(f"Modules that would apply: {' '.join(would)}")
    if report.failed:
        logger.error(f"Failed modules: {' '.join(report.failed)}")
    logger.info(
        f"[Patch] Applied {len(report.applied)}/{len(report.outcomes)} modules, "
        f"{len(report.failed)} failed"
    )
    logger.info(SEPARATOR)
