###############################################################################
# Copyright (c) 2025, Advanced Micro Devices, Inc. All rights reserved.
#
# See LICENSE for license information.
###############################################################################

"""
Pattern Validator.

Read-only check that every pattern of a module is present in the current
target content before anything is substituted.
"""

import re
from typing import List

from patchkit.core.patches.errors import ValidationError
from patchkit.core.patches.module import PatchModule
from patchkit.core.utils import logger


def validate_module(module: PatchModule, content: str) -> None:
    """
    Check every operation pattern of `module` against `content`, in order.

    Fails fast: raises ValidationError on the first pattern that does not
    match. Later patterns are not checked. The search is unanchored and
    the whole content is one searchable text (no MULTILINE/DOTALL).
    """
    logger.info(f"Validating patterns for module '{module.name}'...")

    for index, op in enumerate(module.operations):
        try:
            found = re.search(op.pattern, content) is not None
        except re.error as e:
            raise ValidationError(module.name, index, op.preview, f"invalid pattern: {e}") from e

        if not found:
            raise ValidationError(module.name, index, op.preview, "not found")
        logger.info(f"  ✓ Pattern {index + 1} found")

    logger.info(f"All patterns validated for module '{module.name}'")


def find_matches(module: PatchModule, content: str) -> List[int]:
    """
    Count matches of every pattern against `content` without failing fast.

    Invalid patterns count as -1. Each pattern is checked against the same
    content, so later operations that depend on earlier replacements may
    legitimately report 0 here.
    """
    counts = []
    for op in module.operations:
        try:
            counts.append(sum(1 for _ in re.finditer(op.pattern, content)))
        except re.error:
            counts.append(-1)
    return counts
