"""Hierarchy and operation-group context for element visits.

The walker passes a ``VisitContext`` down the recursion instead of keeping
the current parent and prefix in mutable fields. Entering a container or an
operation variable group derives a new context; the caller's context is
untouched, so returning from the recursion restores the previous parent and
prefix by construction.
"""

from __future__ import annotations

import itertools
from collections.abc import Iterator
from dataclasses import dataclass, field, replace
from enum import Enum


class OperationGroup(str, Enum):
    """Variable groups of an Operation."""

    INPUT = "In"
    OUTPUT = "Out"
    INOUTPUT = "IO"

    @property
    def prefix(self) -> str:
        return f"{self.value}{GROUP_SEPARATOR}"


GROUP_SEPARATOR = "-"


@dataclass(frozen=True)
class VisitContext:
    """Where in the submodel the next element record is created.

    Attributes:
        submodel_id: Record id of the submodel being walked
        parent_id: Record id of the enclosing element, None at submodel level
        prefix: Operation group prefix prepended to element kind tags
        positions: Pre-order position counter shared within one submodel
    """

    submodel_id: str
    parent_id: str | None = None
    prefix: str = ""
    positions: Iterator[int] = field(
        default_factory=itertools.count, compare=False, repr=False
    )

    def next_position(self) -> int:
        return next(self.positions)

    def child_of(self, parent_id: str) -> VisitContext:
        """Context for the children of the element ``parent_id``."""
        return replace(self, parent_id=parent_id)

    def in_group(self, group: OperationGroup) -> VisitContext:
        """Context for the variables of one operation group."""
        return replace(self, prefix=group.prefix)
