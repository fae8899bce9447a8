"""Dispatch a retention plan to exactly one action.

Move and delete attempt every entry in the batch. Failures are collected and
raised together as :class:`ActionFailure` once the pass is complete.
"""

from __future__ import annotations

import logging
import os
import shutil
import sys
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Sequence, TextIO, cast

from .confirm import ConfirmationGate, describe_batch
from .core.retention import RetentionPlan
from .core.types import ActionFailure, DirEntryRecord, EntryFailure
from .relocation import move_path

logger = logging.getLogger(__name__)


class ActionKind(str, Enum):
    CLASSIFY = "classify"
    PRINT_ONLY = "print-only"
    MOVE = "move"
    DELETE = "delete"


@dataclass(frozen=True)
class Action:
    """The chosen action plus its move destination, if any.

    ``destination`` is the absolute path used for I/O; ``destination_label``
    is how the operator spelled it and is only shown in prompts.
    """

    kind: ActionKind = ActionKind.DELETE
    destination: Optional[Path] = None
    destination_label: Optional[str] = None

    def __post_init__(self) -> None:
        if self.kind is ActionKind.MOVE and self.destination is None:
            raise ValueError("move action requires a destination")

    @property
    def mutates(self) -> bool:
        return self.kind in (ActionKind.MOVE, ActionKind.DELETE)

    @property
    def display_destination(self) -> str:
        if self.destination_label is not None:
            return self.destination_label
        return str(self.destination)


def remove_path(path: Path) -> None:
    """Recursively remove ``path``; a missing path is not an error."""

    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
        return
    try:
        os.unlink(path)
    except FileNotFoundError:
        pass


def _emit(stream: TextIO, line: str) -> None:
    stream.write(f"{line}\n")


def _classify(plan: RetentionPlan, stream: TextIO) -> None:
    for label, record in plan.classified():
        _emit(stream, f"{label} {record.relative_path}")


def _print_removals(plan: RetentionPlan, stream: TextIO) -> None:
    for record in plan.remove:
        _emit(stream, record.relative_path)


def _run_batch(
    records: Sequence[DirEntryRecord],
    operation: Callable[[DirEntryRecord], None],
    *,
    verb: str,
) -> int:
    failures: List[EntryFailure] = []
    for record in records:
        try:
            operation(record)
        except OSError as exc:
            logger.warning("Failed %s %s: %s", verb, record.relative_path, exc)
            failures.append(EntryFailure(record.relative_path, exc))
            continue
        logger.info("Finished %s %s", verb, record.relative_path)

    if failures:
        raise ActionFailure(verb, failures)
    return len(records)


def _delete(plan: RetentionPlan, gate: ConfirmationGate) -> int:
    records = plan.remove
    gate.confirm(
        describe_batch(
            "The following files will be deleted:",
            [record.relative_path for record in records],
        )
    )
    return _run_batch(records, lambda record: remove_path(record.full_path), verb="deleting")


def _move(plan: RetentionPlan, action: Action, gate: ConfirmationGate) -> int:
    destination = cast(Path, action.destination)
    records = plan.remove
    gate.confirm(
        describe_batch(
            f'The following files will be moved to "{action.display_destination}":',
            [record.relative_path for record in records],
        )
    )

    def _relocate(record: DirEntryRecord) -> None:
        move_path(record.full_path, destination / record.name)

    return _run_batch(records, _relocate, verb="moving")


def dispatch(
    plan: RetentionPlan,
    action: Action,
    *,
    confirmation: ConfirmationGate,
    stdout: TextIO | None = None,
) -> int:
    """Carry out ``action`` for ``plan`` and return the number of entries acted on.

    Classify and print-only write to ``stdout`` and never touch the
    filesystem. Move and delete prompt once through ``confirmation``; an
    empty removal set returns immediately without prompting.

    Raises:
        UserDeclined: the operator declined the batch; nothing was changed.
        ActionFailure: one or more entries failed after the whole batch ran.
    """

    stream = stdout or sys.stdout
    if action.kind is ActionKind.CLASSIFY:
        _classify(plan, stream)
        return len(plan.entries)
    if action.kind is ActionKind.PRINT_ONLY:
        _print_removals(plan, stream)
        return len(plan.remove)

    if not plan.remove:
        logger.info("Nothing to remove; %d entries kept", len(plan.keep))
        return 0

    if action.kind is ActionKind.MOVE:
        return _move(plan, action, confirmation)
    return _delete(plan, confirmation)


__all__ = ["Action", "ActionKind", "dispatch", "remove_path"]
