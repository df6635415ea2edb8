###############################################################################
# Copyright (c) 2025, Advanced Micro Devices, Inc. All rights reserved.
#
# See LICENSE for license information.
###############################################################################

"""
patchkit Patch System

Pattern-based, all-or-nothing patching of a single text file.

Module Structure:
    - module:    PatchOperation / PatchModule records and run outcomes
    - registry:  ModuleRegistry (name-indexed, ordered, freezable)
    - validator: validate_module (fail-fast pattern presence check)
    - engine:    apply_module (sequential in-memory substitution)
    - backup:    create_backup (timestamped copy taken once per run)
    - target:    reading and atomically committing the target file
    - runner:    run_patches (backup + per-module validate/apply/commit)
    - errors:    error hierarchy

Usage:
    registry = ModuleRegistry()
    registry.register(
        "context_limit",
        "Read the context limit from the environment",
        [(r"return 200000\\}", "return Number(process.env.LIMIT||200000)}")],
    )
    registry.freeze()

    report = run_patches("/path/to/cli.js", registry, ["context_limit"])
    sys.exit(report.exit_code)
"""

from patchkit.core.patches.backup import create_backup
from patchkit.core.patches.engine import apply_module
from patchkit.core.patches.errors import (
    CatalogError,
    DuplicateModuleError,
    PatchError,
    SubstitutionError,
    TargetFileError,
    UnknownModuleError,
    ValidationError,
)
from patchkit.core.patches.module import (
    PatchModule,
    PatchOperation,
    PatchOutcome,
    PatchReport,
    PatchStatus,
)
from patchkit.core.patches.registry import ModuleRegistry
from patchkit.core.patches.runner import run_patches
from patchkit.core.patches.validator import find_matches, validate_module

__all__ = [
    "CatalogError",
    "DuplicateModuleError",
    "ModuleRegistry",
    "PatchError",
    "PatchModule",
    "PatchOperation",
    "PatchOutcome",
    "PatchReport",
    "PatchStatus",
    "SubstitutionError",
    "TargetFileError",
    "UnknownModuleError",
    "ValidationError",
    "apply_module",
    "create_backup",
    "find_matches",
    "run_patches",
    "validate_module",
]
