###############################################################################
# Copyright (c) 2025, Advanced Micro Devices, Inc. All rights reserved.
#
# See LICENSE for license information.
###############################################################################

"""
Substitution Engine.

Applies the operations of a module to an in-memory copy of the target
content. Nothing here touches the file system: the caller commits the
returned content only when the whole module succeeded, so a failure in
the middle of a module simply discards the staged buffer.
"""

import re
from typing import Tuple

from patchkit.core.patches.errors import SubstitutionError
from patchkit.core.patches.module import PatchModule, PatchOperation
from patchkit.core.utils import logger


def substitute(op: PatchOperation, content: str) -> Tuple[str, int]:
    """
    Replace all non-overlapping matches of `op.pattern` in `content`.

    Returns (new_content, number_of_substitutions). re.error propagates.
    """
    return re.subn(op.pattern, op.replacement, content)


def apply_module(module: PatchModule, content: str) -> str:
    """
    Run every operation of `module` in order and return the staged content.

    Each operation receives the output of the previous one. The first
    operation that fails aborts the module with SubstitutionError:

        - the regex engine raised           -> reason "regex_error"
        - the pattern matched nothing       -> reason "no_match"
        - matches were replaced identically -> reason "unchanged"
    """
    logger.info(f"Applying replacements for module '{module.name}'...")

    staged = content
    for index, op in enumerate(module.operations):
        try:
            result, count = substitute(op, staged)
        except re.error as e:
            logger.error(f"  ✗ Replacement {index + 1} failed: {e}")
            raise SubstitutionError(module.name, index, op.preview, SubstitutionError.REGEX_ERROR) from e

        if result == staged:
            reason = SubstitutionError.UNCHANGED if count else SubstitutionError.NO_MATCH
            logger.error(f"  ✗ Replacement {index + 1} made no changes ({reason})")
            raise SubstitutionError(module.name, index, op.preview, reason)

        logger.info(f"  ✓ Replacement {index + 1} applied successfully ({count} match(es))")
        staged = result

    return staged
