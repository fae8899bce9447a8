"""prunejuice core module exports."""

from .retention import (
    KeepPolicy,
    RetentionPlan,
    backstop_index,
    compute_cut,
    find_policy_cut,
    keep_at_or_after,
    plan_retention,
)
from .scanner import scan_directory, sort_entries
from .types import (
    ActionFailure,
    ConfigurationError,
    DirEntryRecord,
    EntryFailure,
    EntryKind,
    PruneError,
    ScanFailure,
    ScanNotADirectory,
    ScanNotFound,
    ScanOptions,
    ScanReadFailure,
    UserDeclined,
)

__all__ = [
    "ActionFailure",
    "ConfigurationError",
    "DirEntryRecord",
    "EntryFailure",
    "EntryKind",
    "KeepPolicy",
    "PruneError",
    "RetentionPlan",
    "ScanFailure",
    "ScanNotADirectory",
    "ScanNotFound",
    "ScanOptions",
    "ScanReadFailure",
    "UserDeclined",
    "backstop_index",
    "compute_cut",
    "find_policy_cut",
    "keep_at_or_after",
    "plan_retention",
    "scan_directory",
    "sort_entries",
]
