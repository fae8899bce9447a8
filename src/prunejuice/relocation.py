"""Best-effort relocation of a single path.

``os.rename`` is always tried first because it is atomic and cheap when it
works. It does not work across filesystem boundaries on POSIX, so that one
failure falls back to copy-then-delete. Every other rename failure is raised
as-is.
"""

from __future__ import annotations

import errno
import logging
import os
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)

_CROSS_DEVICE_MESSAGE = "invalid cross-device link"


class RelocationError(OSError):
    """Raised when the copy-then-delete fallback fails part way."""

    def __init__(self, source: Path, step: str, cause: BaseException) -> None:
        self.source = Path(source)
        self.step = step
        self.cause = cause
        super().__init__(f"move with copy: couldn't {step}: {cause}")


def is_cross_device_error(exc: OSError) -> bool:
    """Return ``True`` when a rename failed because it crossed a device boundary.

    Platforms report this differently; revisit here when adding one.
    """

    if exc.errno == errno.EXDEV:
        return True
    return _CROSS_DEVICE_MESSAGE in str(exc).lower()


def _copy_file_then_remove(source: Path, destination: Path) -> None:
    try:
        source_handle = source.open("rb")
    except OSError as exc:
        raise RelocationError(source, "open source file", exc) from exc
    try:
        try:
            destination_handle = destination.open("wb")
        except OSError as exc:
            raise RelocationError(source, "open destination file", exc) from exc
        with destination_handle:
            try:
                shutil.copyfileobj(source_handle, destination_handle)
            except OSError as exc:
                raise RelocationError(source, "copy to destination from source", exc) from exc
    finally:
        # Some platforms refuse to remove a file with an open handle.
        source_handle.close()

    try:
        source.unlink()
    except OSError as exc:
        raise RelocationError(source, "remove source file", exc) from exc


def _copy_tree_then_remove(source: Path, destination: Path) -> None:
    try:
        shutil.copytree(source, destination, symlinks=True)
    except (OSError, shutil.Error) as exc:
        raise RelocationError(source, "copy directory to destination", exc) from exc
    try:
        shutil.rmtree(source)
    except OSError as exc:
        raise RelocationError(source, "remove source directory", exc) from exc


def move_path(source: str | os.PathLike[str], destination: str | os.PathLike[str]) -> None:
    """Move ``source`` to ``destination``, copying across devices if needed."""

    source_path = Path(source)
    destination_path = Path(destination)
    try:
        os.rename(source_path, destination_path)
        return
    except OSError as exc:
        if not is_cross_device_error(exc):
            raise
        logger.debug(
            "Rename %s -> %s crossed a device boundary; copying instead",
            source_path,
            destination_path,
        )

    if source_path.is_dir() and not source_path.is_symlink():
        _copy_tree_then_remove(source_path, destination_path)
    else:
        _copy_file_then_remove(source_path, destination_path)


__all__ = ["RelocationError", "is_cross_device_error", "move_path"]
