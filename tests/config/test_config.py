from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

from prunejuice.actions import ActionKind
from prunejuice.config import (
    PruneConfig,
    load_config_file,
    merge_config,
    parse_config_mapping,
    validate_config,
)
from prunejuice.core.types import ConfigurationError, EntryKind


def test_defaults_match_cli_defaults() -> None:
    config = PruneConfig(directory="logs")

    assert config.keep == 1
    assert config.confirm is True
    assert config.entry_kind is EntryKind.FILE
    assert config.scan_options.include_dotfiles is False
    assert config.action_kind is ActionKind.DELETE
    assert config.policies() == []


@pytest.mark.parametrize(
    ("overrides", "expected"),
    [
        ({"classify": True, "print_only": True, "move_to": "/x"}, ActionKind.CLASSIFY),
        ({"print_only": True, "move_to": "/x"}, ActionKind.PRINT_ONLY),
        ({"move_to": "/x"}, ActionKind.MOVE),
        ({}, ActionKind.DELETE),
    ],
)
def test_action_precedence(overrides: dict, expected: ActionKind) -> None:
    assert PruneConfig(directory="d", **overrides).action_kind is expected


def test_since_adds_policy() -> None:
    config = PruneConfig(directory="d", since_unix_time=0)

    assert len(config.policies()) == 1


def test_negative_keep_rejected() -> None:
    with pytest.raises(ConfigurationError, match="negative"):
        validate_config(PruneConfig(directory="d", keep=-2))


def test_missing_move_destination_rejected(tmp_path: Path) -> None:
    config = PruneConfig(directory=str(tmp_path), move_to=str(tmp_path / "nope"))

    with pytest.raises(ConfigurationError, match="does not exist"):
        validate_config(config)


def test_move_destination_must_be_directory(tmp_path: Path) -> None:
    target = tmp_path / "file.txt"
    target.write_text("", encoding="utf-8")

    with pytest.raises(ConfigurationError, match="not a directory"):
        validate_config(PruneConfig(directory=str(tmp_path), move_to=str(target)))


@pytest.mark.parametrize("since", [2**63, -(2**63) - 1, int("1" + "0" * 400)])
def test_since_outside_64_bit_range_rejected(since: int) -> None:
    with pytest.raises(ConfigurationError, match="64-bit range"):
        validate_config(PruneConfig(directory="d", since_unix_time=since))


@pytest.mark.parametrize("since", [2**63 - 1, -(2**63)])
def test_since_at_64_bit_limits_accepted(since: int) -> None:
    config = PruneConfig(directory="d", since_unix_time=since)

    assert validate_config(config) is config


def test_move_destination_with_nul_byte_rejected(tmp_path: Path) -> None:
    config = PruneConfig(directory=str(tmp_path), move_to="ar\x00chive")

    with pytest.raises(ConfigurationError, match="Error determining destination"):
        validate_config(config)


def test_move_action_keeps_typed_destination(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)

    action = PruneConfig(directory="logs", move_to="archive").action

    assert action.destination_label == "archive"
    assert action.display_destination == "archive"
    assert action.destination == Path(os.path.abspath("archive"))


def test_empty_directory_rejected() -> None:
    with pytest.raises(ConfigurationError):
        validate_config(PruneConfig(directory="  "))


def test_load_config_file(tmp_path: Path) -> None:
    path = tmp_path / "prune.json"
    path.write_text(
        json.dumps({"keep": 3, "since_unix_time": 1700000000, "no_confirm": True, "move": "/srv/old"}),
        encoding="utf-8",
    )

    values = load_config_file(path)

    assert values == {
        "keep": 3,
        "since_unix_time": 1700000000,
        "no_confirm": True,
        "move_to": "/srv/old",
    }


@pytest.mark.parametrize(
    ("payload", "message"),
    [
        ({"retention_days": 3}, "unsupported option"),
        ({"keep": "3"}, "must be of type int"),
        ({"keep": True}, "must be an integer"),
        ({"classify": 1}, "must be of type bool"),
    ],
)
def test_parse_config_mapping_rejects_bad_values(payload: dict, message: str) -> None:
    with pytest.raises(ConfigurationError, match=message):
        parse_config_mapping(payload)


def test_load_config_file_rejects_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{keep: 1", encoding="utf-8")

    with pytest.raises(ConfigurationError, match="Invalid JSON"):
        load_config_file(path)


def test_load_config_file_requires_object(tmp_path: Path) -> None:
    path = tmp_path / "list.json"
    path.write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(ConfigurationError, match="JSON object"):
        load_config_file(path)


def test_load_config_file_missing(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="Unable to read"):
        load_config_file(tmp_path / "absent.json")


def test_merge_prefers_cli_values() -> None:
    config = merge_config(
        "logs",
        {"keep": 5, "include_dotfiles": True},
        {"keep": 2},
    )

    assert config.keep == 2
    assert config.include_dotfiles is True
    assert config.directory == "logs"
