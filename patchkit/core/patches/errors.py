###############################################################################
# Copyright (c) 2025, Advanced Micro Devices, Inc. All rights reserved.
#
# See LICENSE for license information.
###############################################################################

"""
Patch Error Kinds.

Two scopes of failure exist:

    - Run-scoped (fatal): TargetFileError, CatalogError.
      Nothing is safe to attempt once these are raised.
    - Module-scoped (recorded, run continues): UnknownModuleError,
      ValidationError, SubstitutionError.
"""

from typing import Optional


class PatchError(Exception):
    """Base class for every error raised by patchkit."""


class TargetFileError(PatchError, OSError):
    """Target file missing/unreadable/unwritable, or backup/commit failure."""


class CatalogError(PatchError, ValueError):
    """Malformed module catalog."""


class DuplicateModuleError(PatchError, ValueError):
    def __init__(self, name: str):
        super().__init__(f"Module '{name}' is already registered")
        self.name = name


class UnknownModuleError(PatchError, LookupError):
    def __init__(self, name: str):
        super().__init__(f"Unknown module {name}")
        self.name = name


class _OperationError(PatchError):
    """Failure tied to a specific operation of a module."""

    def __init__(
        self,
        module_name: str,
        operation_index: int,
        pattern_preview: str,
        reason: str,
        message: Optional[str] = None,
    ):
        self.module_name = module_name
        self.operation_index = operation_index
        self.pattern_preview = pattern_preview
        self.reason = reason
        super().__init__(message or self._default_message())

    def _default_message(self) -> str:
        return (
            f"module '{self.module_name}', operation {self.operation_index + 1}: "
            f"{self.reason} ({self.pattern_preview})"
        )


class ValidationError(_OperationError):
    """An expected pattern is absent from the target content."""

    def _default_message(self) -> str:
        if self.reason == "not found":
            return (
                f"Pattern {self.operation_index + 1} not found for module '{self.module_name}': "
                f"{self.pattern_preview}"
            )
        return (
            f"Pattern {self.operation_index + 1} of module '{self.module_name}' "
            f"is unusable ({self.reason}): {self.pattern_preview}"
        )


class SubstitutionError(_OperationError):
    """
    A substitution step failed.

    reason is one of:
        regex_error : the regex engine raised (bad pattern or template)
        no_match    : zero substitutions despite a passing validation
        unchanged   : matches were replaced by identical text
    """

    REGEX_ERROR = "regex_error"
    NO_MATCH = "no_match"
    UNCHANGED = "unchanged"

    def _default_message(self) -> str:
        what = {
            self.REGEX_ERROR: "failed",
            self.NO_MATCH: "matched nothing",
            self.UNCHANGED: "made no changes",
        }.get(self.reason, self.reason)
        return (
            f"Replacement {self.operation_index + 1} of module '{self.module_name}' {what} "
            f"({self.reason}): {self.pattern_preview}"
        )
