###############################################################################
# Copyright (c) 2025, Advanced Micro Devices, Inc. All rights reserved.
#
# See LICENSE for license information.
###############################################################################

"""
Patch Module Data Model.

Defines the records flowing through the engine:
    - PatchOperation: a single (pattern, replacement) pair
    - PatchModule:    a named, ordered, all-or-nothing set of operations
    - PatchStatus / PatchOutcome / PatchReport: per-run results
"""

import enum
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple, Union

PREVIEW_LIMIT = 50


def preview(text: str, limit: int = PREVIEW_LIMIT) -> str:
    """Bound a pattern for display: long patterns become 'first 47 chars...'."""
    if len(text) > limit:
        return text[: limit - 3] + "..."
    return text


# -----------------------------------------------------------------------------
# PatchOperation / PatchModule
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class PatchOperation:
    """
    One regex substitution step.

    Attributes:
        pattern:
            Regular expression (Python `re` syntax) expected to match the
            target content. Matched anywhere, never anchored.
        replacement:
            `re.sub` template; may reference groups (\\1, \\g<name>, \\g<0>).
    """

    pattern: str
    replacement: str

    @property
    def preview(self) -> str:
        return preview(self.pattern)


OperationLike = Union[PatchOperation, Tuple[str, str], Sequence[str]]


def _to_operation(op: OperationLike) -> PatchOperation:
    if isinstance(op, PatchOperation):
        return op
    pattern, replacement = op
    return PatchOperation(pattern=pattern, replacement=replacement)


@dataclass(frozen=True)
class PatchModule:
    """
    A named set of operations applied together.

    Operations run in order, each seeing the output of the previous one,
    so a later pattern may match text introduced by an earlier replacement.
    """

    name: str
    description: str
    operations: Tuple[PatchOperation, ...]

    def __post_init__(self):
        if not self.name or not isinstance(self.name, str):
            raise ValueError("Module name must be a non-empty string")
        ops = tuple(_to_operation(op) for op in self.operations)
        if not ops:
            raise ValueError(f"Module '{self.name}' must contain at least one operation")
        object.__setattr__(self, "operations", ops)

    @classmethod
    def create(cls, name: str, description: str, operations: Iterable[OperationLike]) -> "PatchModule":
        return cls(name=name, description=description, operations=tuple(operations))


# -----------------------------------------------------------------------------
# Outcomes
# -----------------------------------------------------------------------------


class PatchStatus(enum.Enum):
    APPLIED = "applied"
    SKIPPED = "skipped"
    VALIDATION_FAILED = "validation_failed"
    SUBSTITUTION_FAILED = "substitution_failed"
    UNKNOWN = "unknown"

    @property
    def failed(self) -> bool:
        return self in (
            PatchStatus.VALIDATION_FAILED,
            PatchStatus.SUBSTITUTION_FAILED,
            PatchStatus.UNKNOWN,
        )


@dataclass
class PatchOutcome:
    module_name: str
    status: PatchStatus
    detail: str = ""
    operation_index: Optional[int] = None


@dataclass
class PatchReport:
    """Aggregated result of one run against one target file."""

    target: str
    backup_path: Optional[str] = None
    outcomes: List[PatchOutcome] = field(default_factory=list)
    dry_run: bool = False

    def record(self, outcome: PatchOutcome) -> PatchOutcome:
        self.outcomes.append(outcome)
        return outcome

    @property
    def applied(self) -> List[str]:
        return [o.module_name for o in self.outcomes if o.status == PatchStatus.APPLIED]

    @property
    def failed(self) -> List[str]:
        names = []
        for o in self.outcomes:
            if o.status == PatchStatus.UNKNOWN:
                names.append(f"{o.module_name} (unknown)")
            elif o.status.failed:
                names.append(o.module_name)
        return names

    @property
    def ok(self) -> bool:
        return not any(o.status.failed for o in self.outcomes)

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1

    def get(self, module_name: str) -> Optional[PatchOutcome]:
        """Return the last outcome recorded for module_name."""
        for o in reversed(self.outcomes):
            if o.module_name == module_name:
                return o
        return None
