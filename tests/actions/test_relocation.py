from __future__ import annotations

import errno
import os
from pathlib import Path

import pytest

from prunejuice import relocation
from prunejuice.relocation import RelocationError, is_cross_device_error, move_path


def _cross_device(*_args: object) -> None:
    raise OSError(errno.EXDEV, "Invalid cross-device link")


def test_move_renames_when_possible(tmp_path: Path) -> None:
    source = tmp_path / "report.txt"
    source.write_text("payload", encoding="utf-8")
    destination = tmp_path / "archive" / "report.txt"
    destination.parent.mkdir()

    move_path(source, destination)

    assert not source.exists()
    assert destination.read_text(encoding="utf-8") == "payload"


def test_cross_device_falls_back_to_copy(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    source = tmp_path / "big.bin"
    source.write_bytes(b"\x00\x01" * 50_000)
    destination = tmp_path / "other" / "big.bin"
    destination.parent.mkdir()
    monkeypatch.setattr(relocation.os, "rename", _cross_device)

    move_path(source, destination)

    assert not source.exists()
    assert destination.read_bytes() == b"\x00\x01" * 50_000


def test_cross_device_directory_copies_tree(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    source = tmp_path / "build-17"
    (source / "logs").mkdir(parents=True)
    (source / "logs" / "out.txt").write_text("done", encoding="utf-8")
    destination = tmp_path / "other" / "build-17"
    destination.parent.mkdir()
    monkeypatch.setattr(relocation.os, "rename", _cross_device)

    move_path(source, destination)

    assert not source.exists()
    assert (destination / "logs" / "out.txt").read_text(encoding="utf-8") == "done"


def test_other_rename_errors_are_not_retried(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    source = tmp_path / "locked.txt"
    source.write_text("x", encoding="utf-8")
    destination = tmp_path / "dest.txt"

    def deny(*_args: object) -> None:
        raise PermissionError(errno.EACCES, "Permission denied")

    monkeypatch.setattr(relocation.os, "rename", deny)

    with pytest.raises(PermissionError):
        move_path(source, destination)

    assert source.exists()
    assert not destination.exists()


def test_fallback_failure_names_step_and_keeps_source(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    source = tmp_path / "keep-me.txt"
    source.write_text("x", encoding="utf-8")
    destination = tmp_path / "missing-dir" / "keep-me.txt"
    monkeypatch.setattr(relocation.os, "rename", _cross_device)

    with pytest.raises(RelocationError) as exc:
        move_path(source, destination)

    assert exc.value.step == "open destination file"
    assert source.exists()


def test_is_cross_device_error_signatures() -> None:
    assert is_cross_device_error(OSError(errno.EXDEV, "whatever"))
    assert is_cross_device_error(OSError("rename a b: invalid cross-device link"))
    assert not is_cross_device_error(OSError(errno.ENOENT, os.strerror(errno.ENOENT)))


def test_copy_fallback_closes_source_before_unlink(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    source = tmp_path / "held.txt"
    source.write_text("payload", encoding="utf-8")
    destination = tmp_path / "other" / "held.txt"
    destination.parent.mkdir()
    monkeypatch.setattr(relocation.os, "rename", _cross_device)

    opened: dict[Path, object] = {}
    real_open = Path.open
    real_unlink = Path.unlink

    def tracking_open(self: Path, *args: object, **kwargs: object):
        handle = real_open(self, *args, **kwargs)
        opened[self] = handle
        return handle

    def checking_unlink(self: Path, *args: object, **kwargs: object) -> None:
        assert opened[self].closed, "source handle still open at unlink"
        real_unlink(self, *args, **kwargs)

    monkeypatch.setattr(Path, "open", tracking_open)
    monkeypatch.setattr(Path, "unlink", checking_unlink)

    move_path(source, destination)

    assert source in opened
    assert not source.exists()
    assert destination.read_text(encoding="utf-8") == "payload"
