"""prunejuice: decide which entries of a directory are old, then remove them.

The package exposes the retention-decision core (scan, order, cut) along with
the action dispatcher and the orchestration used by the ``prunejuice`` CLI.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .actions import Action, ActionKind, dispatch
from .config import PruneConfig, load_config_file, merge_config, validate_config
from .confirm import ConfirmationGate, ConfirmMode
from .core import (
    ActionFailure,
    ConfigurationError,
    DirEntryRecord,
    EntryFailure,
    EntryKind,
    PruneError,
    RetentionPlan,
    ScanFailure,
    ScanNotADirectory,
    ScanNotFound,
    ScanOptions,
    ScanReadFailure,
    UserDeclined,
    keep_at_or_after,
    plan_retention,
    scan_directory,
    sort_entries,
)
from .engine import PruneOutcome, build_plan, run_prune
from .relocation import RelocationError, is_cross_device_error, move_path

__all__ = [
    "Action",
    "ActionFailure",
    "ActionKind",
    "ConfigurationError",
    "ConfirmMode",
    "ConfirmationGate",
    "DirEntryRecord",
    "EntryFailure",
    "EntryKind",
    "PruneConfig",
    "PruneError",
    "PruneOutcome",
    "RelocationError",
    "RetentionPlan",
    "ScanFailure",
    "ScanNotADirectory",
    "ScanNotFound",
    "ScanOptions",
    "ScanReadFailure",
    "UserDeclined",
    "__version__",
    "build_plan",
    "dispatch",
    "is_cross_device_error",
    "keep_at_or_after",
    "load_config_file",
    "merge_config",
    "move_path",
    "plan_retention",
    "run_prune",
    "scan_directory",
    "sort_entries",
    "validate_config",
]
