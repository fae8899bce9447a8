"""Directory scanning and ordering for retention decisions.

Only the direct children of the target directory are considered. The scan is
all-or-nothing: a child that disappears between listing and ``stat`` fails
the whole scan instead of producing a partial result.

Examples
--------
>>> import os, tempfile
>>> root = tempfile.mkdtemp()
>>> for name, mtime in (("b.log", 20), ("a.log", 10), (".hidden", 5)):
...     target = os.path.join(root, name)
...     open(target, "w").close()
...     os.utime(target, (mtime, mtime))
>>> [record.name for record in sort_entries(scan_directory(root, ScanOptions()))]
['a.log', 'b.log']
"""

from __future__ import annotations

import logging
import os
import stat
from pathlib import Path
from typing import Iterable, List

from .types import (
    DirEntryRecord,
    EntryKind,
    ScanNotADirectory,
    ScanNotFound,
    ScanOptions,
    ScanReadFailure,
)

logger = logging.getLogger(__name__)


def _resolve_directory(path: str | os.PathLike[str]) -> Path:
    try:
        full_path = Path(os.path.abspath(os.fspath(path)))
    except (OSError, ValueError) as exc:
        raise ScanNotFound(path, f"Failed to determine canonical path ({exc})") from exc
    try:
        info = full_path.stat()
    except (OSError, ValueError) as exc:
        raise ScanNotFound(full_path, "Could not find directory path") from exc
    if not stat.S_ISDIR(info.st_mode):
        raise ScanNotADirectory(full_path, "Path is not a directory")
    return full_path


def _matches_kind(entry: os.DirEntry[str], kind: EntryKind) -> bool:
    try:
        is_dir = entry.is_dir(follow_symlinks=False)
    except OSError:
        is_dir = False
    if kind is EntryKind.DIRECTORY:
        return is_dir
    return not is_dir


def _display_path(base: str, name: str) -> str:
    return os.path.normpath(os.path.join(base, name))


def scan_directory(
    path: str | os.PathLike[str],
    options: ScanOptions,
) -> List[DirEntryRecord]:
    """Return records for the direct children of ``path`` that pass ``options``.

    Children are returned in listing order, which is sorted by name so that
    repeated scans of an unchanged directory agree.

    Raises:
        ScanNotFound: ``path`` does not resolve to an existing path.
        ScanNotADirectory: ``path`` exists but is not a directory.
        ScanReadFailure: the directory cannot be listed or a child vanished
            before its metadata could be read.
    """

    display_base = os.fspath(path)
    full_path = _resolve_directory(path)

    try:
        with os.scandir(full_path) as iterator:
            children = sorted(iterator, key=lambda entry: entry.name)
    except OSError as exc:
        raise ScanReadFailure(
            full_path, f"Could not read contents of directory ({exc})"
        ) from exc

    records: List[DirEntryRecord] = []
    for entry in children:
        if not _matches_kind(entry, options.entry_kind):
            continue
        if entry.name.startswith(".") and not options.include_dotfiles:
            continue
        try:
            info = entry.stat(follow_symlinks=False)
        except OSError as exc:
            raise ScanReadFailure(
                full_path, f'File "{entry.name}" removed after reading dir'
            ) from exc
        records.append(
            DirEntryRecord(
                relative_path=_display_path(display_base, entry.name),
                full_path=full_path / entry.name,
                modified_time_ns=info.st_mtime_ns,
            )
        )

    logger.debug(
        "Scanned %s: %d %s entr%s matched",
        full_path,
        len(records),
        options.entry_kind.value,
        "y" if len(records) == 1 else "ies",
    )
    return records


def sort_entries(entries: Iterable[DirEntryRecord]) -> List[DirEntryRecord]:
    """Return ``entries`` ordered oldest first.

    ``sorted`` is guaranteed stable, so records sharing a timestamp keep their
    listing order.
    """

    return sorted(entries, key=lambda record: record.modified_time_ns)


__all__ = ["scan_directory", "sort_entries"]
