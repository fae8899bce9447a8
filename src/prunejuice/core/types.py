"""Shared data structures and error types for the prunejuice core.

Example
-------
>>> from pathlib import Path
>>> record = DirEntryRecord(
...     relative_path="logs/app.log",
...     full_path=Path("/var/tmp/logs/app.log"),
...     modified_time_ns=1_700_000_000_000_000_000,
... )
>>> record.name
'app.log'
>>> record.modified_time
1700000000.0
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Sequence

NANOSECONDS_PER_SECOND = 1_000_000_000


class EntryKind(str, Enum):
    """Which kind of directory child a scan considers."""

    FILE = "file"
    DIRECTORY = "directory"


@dataclass(frozen=True, slots=True)
class DirEntryRecord:
    """Snapshot of one direct child captured at scan time."""

    relative_path: str
    full_path: Path
    modified_time_ns: int

    @property
    def name(self) -> str:
        return self.full_path.name

    @property
    def modified_time(self) -> float:
        """Modification time in epoch seconds; lossy, use for display only."""

        return self.modified_time_ns / NANOSECONDS_PER_SECOND


@dataclass(frozen=True, slots=True)
class ScanOptions:
    """Filter configuration applied while listing a directory."""

    entry_kind: EntryKind = EntryKind.FILE
    include_dotfiles: bool = False


class PruneError(Exception):
    """Base class for every error raised by prunejuice."""


class ConfigurationError(PruneError, ValueError):
    """Raised when invocation options are invalid; no I/O has happened yet."""


class ScanFailure(PruneError):
    """Represents a failure that prevented a complete directory scan."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{self.reason}: {self.path}")

    def __repr__(self) -> str:  # pragma: no cover - trivial wrapper
        return f"{type(self).__name__}(path={str(self.path)!r}, reason={self.reason!r})"


class ScanNotFound(ScanFailure):
    """The target path does not resolve or does not exist."""


class ScanNotADirectory(ScanFailure):
    """The target path exists but is not a directory."""


class ScanReadFailure(ScanFailure):
    """The directory or one of its children could not be read."""


@dataclass(frozen=True, slots=True)
class EntryFailure:
    """A single entry that could not be deleted or moved."""

    relative_path: str
    error: BaseException

    def describe(self) -> str:
        return f"{self.relative_path}: {self.error}"


class ActionFailure(PruneError):
    """Aggregate error raised after a batch in which some entries failed."""

    def __init__(self, verb: str, failures: Sequence[EntryFailure]) -> None:
        self.verb = verb
        self.failures = tuple(failures)
        lines = [f"Encountered errors when {verb}:"]
        lines.extend(f"  {failure.describe()}" for failure in self.failures)
        super().__init__("\n".join(lines))

    @property
    def failed_paths(self) -> tuple[str, ...]:
        return tuple(failure.relative_path for failure in self.failures)


class UserDeclined(PruneError):
    """The operator answered the confirmation prompt with anything but yes."""

    def __init__(self, message: str = "Aborted; no changes were made.") -> None:
        super().__init__(message)


__all__ = [
    "ActionFailure",
    "ConfigurationError",
    "DirEntryRecord",
    "EntryFailure",
    "EntryKind",
    "NANOSECONDS_PER_SECOND",
    "PruneError",
    "ScanFailure",
    "ScanNotADirectory",
    "ScanNotFound",
    "ScanOptions",
    "ScanReadFailure",
    "UserDeclined",
]
