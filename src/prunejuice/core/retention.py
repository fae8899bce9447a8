"""Keep policies, the minimum-keep backstop and the resulting cut index.

Policies are plain predicates combined with OR. They are evaluated against a
sequence already sorted oldest first, so the first entry any policy keeps
marks a single boundary: everything before it is removed, everything from it
onward is kept.

Example
-------
>>> from pathlib import Path
>>> from prunejuice.core.types import DirEntryRecord
>>> entries = [
...     DirEntryRecord(f"d/{n}", Path(f"/d/{n}"), n * 1_000_000_000) for n in range(5)
... ]
>>> plan = plan_retention(entries, [keep_at_or_after(3)], keep_n=1)
>>> plan.cut_index
3
>>> [record.relative_path for record in plan.keep]
['d/3', 'd/4']
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterator, List, Sequence, Tuple

from .types import NANOSECONDS_PER_SECOND, ConfigurationError, DirEntryRecord

logger = logging.getLogger(__name__)

KeepPolicy = Callable[[DirEntryRecord], bool]

REMOVE_LABEL = "REMOVE"
KEEP_LABEL = "KEEP"


def keep_at_or_after(timestamp: int) -> KeepPolicy:
    """Keep entries modified at or after ``timestamp`` (whole epoch seconds).

    The comparison is done in integer nanoseconds so that sub-second
    modification times are never rounded across the boundary.
    """

    threshold_ns = int(timestamp) * NANOSECONDS_PER_SECOND

    def _policy(record: DirEntryRecord) -> bool:
        return record.modified_time_ns >= threshold_ns

    _policy.__name__ = f"keep_at_or_after_{timestamp}"
    return _policy


def validate_keep_count(keep_n: int) -> int:
    if keep_n < 0:
        raise ConfigurationError(
            f"Cannot keep a negative number of files (was given {keep_n})"
        )
    return keep_n


def find_policy_cut(
    entries: Sequence[DirEntryRecord], policies: Sequence[KeepPolicy]
) -> int:
    """Return the index of the first entry any policy keeps.

    ``len(entries)`` is returned when no entry satisfies a policy, including
    when ``policies`` is empty.
    """

    if not policies:
        return len(entries)
    for index, record in enumerate(entries):
        if any(policy(record) for policy in policies):
            return index
    return len(entries)


def backstop_index(total: int, keep_n: int) -> int:
    """Latest cut that still leaves ``keep_n`` of the newest entries."""

    validate_keep_count(keep_n)
    return max(0, total - keep_n)


def compute_cut(
    entries: Sequence[DirEntryRecord],
    policies: Sequence[KeepPolicy],
    keep_n: int,
) -> int:
    policy_cut = find_policy_cut(entries, policies)
    floor_cut = backstop_index(len(entries), keep_n)
    cut = min(policy_cut, floor_cut)
    logger.debug(
        "Cut index %d (policy=%d, backstop=%d, total=%d)",
        cut,
        policy_cut,
        floor_cut,
        len(entries),
    )
    return cut


@dataclass(frozen=True)
class RetentionPlan:
    """Ordered entries plus the boundary between removal and retention."""

    entries: Tuple[DirEntryRecord, ...]
    cut_index: int

    def __post_init__(self) -> None:
        if not 0 <= self.cut_index <= len(self.entries):
            raise ValueError(
                f"cut_index {self.cut_index} outside [0, {len(self.entries)}]"
            )

    @property
    def remove(self) -> Tuple[DirEntryRecord, ...]:
        return self.entries[: self.cut_index]

    @property
    def keep(self) -> Tuple[DirEntryRecord, ...]:
        return self.entries[self.cut_index :]

    def classified(self) -> Iterator[Tuple[str, DirEntryRecord]]:
        """Yield ``(label, record)`` pairs in ascending time order."""

        for index, record in enumerate(self.entries):
            yield (REMOVE_LABEL if index < self.cut_index else KEEP_LABEL), record


def plan_retention(
    entries: Sequence[DirEntryRecord],
    policies: Sequence[KeepPolicy],
    keep_n: int = 1,
) -> RetentionPlan:
    """Build the retention plan for ``entries`` already sorted oldest first."""

    ordered: List[DirEntryRecord] = list(entries)
    cut = compute_cut(ordered, policies, keep_n)
    return RetentionPlan(entries=tuple(ordered), cut_index=cut)


__all__ = [
    "KEEP_LABEL",
    "KeepPolicy",
    "REMOVE_LABEL",
    "RetentionPlan",
    "backstop_index",
    "compute_cut",
    "find_policy_cut",
    "keep_at_or_after",
    "plan_retention",
    "validate_keep_count",
]
