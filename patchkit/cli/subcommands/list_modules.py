###############################################################################
# Copyright (c) 2025, Advanced Micro Devices, Inc. All rights reserved.
#
# See LICENSE for license information.
###############################################################################

"""
List CLI subcommand.

Example:
    patchkit list
    patchkit list --catalog my_modules.yaml --binary ./cli.js
"""

from typing import Any, List

from patchkit.core.patches.errors import PatchError
from patchkit.core.utils import logger


def run(args: Any, extra_args: List[str]) -> int:
    from patchkit.core.config.catalog_loader import load_catalog
    from patchkit.core.patches.target import check_target, read_text
    from patchkit.core.patches.validator import find_matches

    try:
        registry = load_catalog(args.catalog)
        content = None
        if args.binary:
            check_target(args.binary)
            content = read_text(args.binary)
    except PatchError as e:
        logger.error(f"Error: {e}")
        return 1

    print("Available patch modules:")
    for name, description in registry.list_all():
        line = f"  - {name}: {description}"
        if content is not None:
            counts = find_matches(registry.lookup(name), content)
            present = sum(1 for c in counts if c > 0)
            line += f" [{present}/{len(counts)} patterns present]"
        print(line)
    return 0


def register_subcommand(subparsers):
    parser = subparsers.add_parser("list", help="List available patch modules.")
    parser.add_argument("-c", "--catalog", default=None, help="Module catalog YAML.")
    parser.add_argument(
        "-b", "--binary", default=None, help="Also show how many patterns of each module this file contains."
    )
    parser.set_defaults(func=run)
    return parser
