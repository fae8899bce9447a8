"""Invocation options, JSON config files and their validation.

Options come from three layers, lowest to highest precedence: the dataclass
defaults, an optional JSON config file, and explicitly passed CLI flags.
Validation runs before any filesystem scan.
"""

from __future__ import annotations

import json
import os
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Mapping, MutableMapping, Optional

from .actions import Action, ActionKind
from .core.retention import KeepPolicy, keep_at_or_after, validate_keep_count
from .core.types import ConfigurationError, EntryKind, ScanOptions

# JSON key -> (PruneConfig field, expected type)
_FILE_KEYS: Mapping[str, tuple[str, tuple[type, ...]]] = {
    "keep": ("keep", (int,)),
    "since_unix_time": ("since_unix_time", (int,)),
    "directories": ("directories", (bool,)),
    "include_dotfiles": ("include_dotfiles", (bool,)),
    "no_confirm": ("no_confirm", (bool,)),
    "classify": ("classify", (bool,)),
    "print_only": ("print_only", (bool,)),
    "move": ("move_to", (str,)),
}

# Timestamps are accepted as signed 64-bit seconds.
SINCE_UNIX_TIME_MIN = -(2**63)
SINCE_UNIX_TIME_MAX = 2**63 - 1


@dataclass(frozen=True)
class PruneConfig:
    """Everything one invocation needs, already parsed."""

    directory: str
    directories: bool = False
    include_dotfiles: bool = False
    keep: int = 1
    since_unix_time: Optional[int] = None
    no_confirm: bool = False
    classify: bool = False
    print_only: bool = False
    move_to: Optional[str] = None

    @property
    def entry_kind(self) -> EntryKind:
        return EntryKind.DIRECTORY if self.directories else EntryKind.FILE

    @property
    def confirm(self) -> bool:
        return not self.no_confirm

    @property
    def scan_options(self) -> ScanOptions:
        return ScanOptions(
            entry_kind=self.entry_kind, include_dotfiles=self.include_dotfiles
        )

    @property
    def action_kind(self) -> ActionKind:
        if self.classify:
            return ActionKind.CLASSIFY
        if self.print_only:
            return ActionKind.PRINT_ONLY
        if self.move_to:
            return ActionKind.MOVE
        return ActionKind.DELETE

    @property
    def action(self) -> Action:
        kind = self.action_kind
        if kind is ActionKind.MOVE:
            return Action(
                kind=kind,
                destination=Path(os.path.abspath(str(self.move_to))),
                destination_label=str(self.move_to),
            )
        return Action(kind=kind)

    def policies(self) -> List[KeepPolicy]:
        policies: List[KeepPolicy] = []
        if self.since_unix_time is not None:
            policies.append(keep_at_or_after(self.since_unix_time))
        return policies


def _validate_destination(destination: str) -> None:
    try:
        info = os.stat(destination)
    except FileNotFoundError:
        raise ConfigurationError(
            f'Destination directory "{destination}" does not exist'
        ) from None
    except (OSError, ValueError) as exc:
        raise ConfigurationError(
            f'Error determining destination directory "{destination}": {exc}'
        ) from exc
    if not stat.S_ISDIR(info.st_mode):
        raise ConfigurationError(
            f'Destination "{destination}" exists, but is not a directory'
        )


def validate_config(config: PruneConfig) -> PruneConfig:
    """Reject configurations that must never reach the scanner.

    A move destination is checked whenever one is given, even if classify or
    print-only takes precedence over the move.
    """

    validate_keep_count(config.keep)
    if config.since_unix_time is not None and not (
        SINCE_UNIX_TIME_MIN <= config.since_unix_time <= SINCE_UNIX_TIME_MAX
    ):
        raise ConfigurationError(
            f"since-unix-time {config.since_unix_time} is outside the 64-bit range"
        )
    if config.move_to:
        _validate_destination(str(config.move_to))
    if not str(config.directory).strip():
        raise ConfigurationError("Expected 1 path argument but found 0")
    return config


def parse_config_mapping(payload: Mapping[str, Any], *, source: str = "config") -> dict[str, Any]:
    """Translate a JSON object into ``PruneConfig`` keyword arguments."""

    values: dict[str, Any] = {}
    for key, value in payload.items():
        if key not in _FILE_KEYS:
            raise ConfigurationError(f"{source}: unsupported option '{key}'")
        field_name, expected = _FILE_KEYS[key]
        if value is None:
            continue
        # bool is an int subclass; only accept it where a bool is expected.
        if isinstance(value, bool) and bool not in expected:
            raise ConfigurationError(f"{source}: option '{key}' must be an integer")
        if not isinstance(value, expected):
            names = " or ".join(kind.__name__ for kind in expected)
            raise ConfigurationError(f"{source}: option '{key}' must be of type {names}")
        values[field_name] = value
    return values


def load_config_file(path: str | os.PathLike[str]) -> dict[str, Any]:
    """Read option values from a JSON object stored at ``path``."""

    config_path = Path(path).expanduser()
    try:
        text = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Unable to read config file {config_path}: {exc}") from exc
    try:
        payload = json.loads(text)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid JSON in config file {config_path}: {exc}") from exc
    if not isinstance(payload, Mapping):
        raise ConfigurationError(f"Config file {config_path} must contain a JSON object")
    return parse_config_mapping(payload, source=str(config_path))


def merge_config(
    directory: str,
    file_values: Mapping[str, Any] | None,
    cli_values: Mapping[str, Any] | None,
) -> PruneConfig:
    """Layer explicit CLI values over file values over defaults."""

    merged: MutableMapping[str, Any] = {}
    merged.update(file_values or {})
    merged.update(cli_values or {})
    return PruneConfig(directory=directory, **merged)


__all__ = [
    "PruneConfig",
    "load_config_file",
    "merge_config",
    "parse_config_mapping",
    "validate_config",
]
