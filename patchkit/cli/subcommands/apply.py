###############################################################################
# Copyright (c) 2025, Advanced Micro Devices, Inc. All rights reserved.
#
# See LICENSE for license information.
###############################################################################

"""
Apply CLI subcommand.

Example:
    patchkit apply --binary ./cli.js
    patchkit apply -b ./cli.js -m context_limit,temperature_setting
    patchkit apply -b ./cli.js --dry-run
"""

from __future__ import annotations

from typing import Any, List

from patchkit.core.patches.errors import PatchError
from patchkit.core.utils import logger


def run(args: Any, extra_args: List[str]) -> int:
    """
    Entry point for the 'apply' subcommand.

    Returns the process exit code: 0 only if the backup succeeded and no
    selected module failed.
    """
    if extra_args:
        logger.warning(f"Ignoring extra CLI args: {extra_args}")

    from patchkit.core.config.catalog_loader import load_catalog
    from patchkit.core.patches.runner import parse_module_list, run_patches

    # An empty -m list falls back to PATCHKIT_MODULES, then all modules.
    modules = parse_module_list(args.modules or "") or None

    try:
        registry = load_catalog(args.catalog)
        report = run_patches(args.binary, registry, modules, dry_run=args.dry_run, encoding=args.encoding)
    except PatchError as e:
        logger.error(f"Error: {e}")
        return 1

    return report.exit_code


def register_subcommand(subparsers):
    """
    Register the 'apply' subcommand to the main CLI parser.

    Args:
        subparsers: argparse subparsers object from main.py
    """

    parser = subparsers.add_parser(
        "apply",
        help="Validate and apply patch modules to a file.",
        description=(
            "Back up the target file, then validate and apply each selected module. "
            "Each module is applied completely or not at all."
        ),
    )
    parser.add_argument("-b", "--binary", required=True, help="Path to the file to patch.")
    parser.add_argument(
        "-m",
        "--modules",
        default=None,
        help="Comma-separated list of modules to apply (default: all, or PATCHKIT_MODULES).",
    )
    parser.add_argument(
        "-c", "--catalog", default=None, help="Module catalog YAML (default: PATCHKIT_CATALOG or bundled)."
    )
    parser.add_argument("--encoding", default="utf-8", help="Text encoding of the target file.")
    parser.add_argument(
        "--dry-run", action="store_true", help="Validate and substitute in memory; write nothing."
    )

    parser.set_defaults(func=run)

    return parser
