"""Command-line entry point for prunejuice.

``prunejuice [options] dir-path`` reads a directory and removes old entries.
By default it keeps the single newest regular file, ignores directories and
dotfiles, and asks before deleting anything.

Exit codes:

* ``0``: the chosen action completed.
* ``1``: the scan failed or at least one entry could not be deleted/moved.
* ``2``: invalid options (argparse convention).
* ``3``: the operator declined the confirmation prompt; nothing changed.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, Optional, Sequence, TextIO

from . import __version__
from .config import load_config_file, merge_config
from .confirm import InputFunc
from .core.types import ActionFailure, ConfigurationError, ScanFailure
from .engine import run_prune

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_DECLINED = 3

_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="prunejuice",
        description=(
            "Read a directory and remove old files. By default the 1 newest "
            "file is kept and every other file is removed; directories are "
            "ignored."
        ),
        argument_default=argparse.SUPPRESS,
    )
    parser.add_argument("dir_path", metavar="dir-path", help="Directory to prune.")
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-N",
        "--keep",
        type=int,
        metavar="N",
        help=(
            "Keep only the N newest entries (default: 1). Combined with other "
            "options this is the minimum number kept regardless of whether "
            "they would otherwise be removed. Zero is valid but removes "
            "everything no other option protects."
        ),
    )
    parser.add_argument(
        "--print-only",
        action="store_true",
        help="Print the entries that would be removed; take no action.",
    )
    parser.add_argument(
        "--classify",
        action="store_true",
        help="Print every entry considered, prefixed by REMOVE or KEEP.",
    )
    parser.add_argument(
        "--no-confirm",
        action="store_true",
        help='Treat every confirmation check as if it were answered "yes".',
    )
    parser.add_argument(
        "--since-unix-time",
        type=int,
        metavar="TIMESTAMP",
        help="Unix-epoch timestamp; keep entries modified at or after it.",
    )
    parser.add_argument(
        "--directories",
        action="store_true",
        help="Operate on directories instead of regular files.",
    )
    parser.add_argument(
        "--include-dotfiles",
        action="store_true",
        help="Include entries whose names start with '.' (skipped by default).",
    )
    parser.add_argument(
        "--move",
        dest="move_to",
        metavar="DEST",
        help=(
            "Move entries to DEST instead of deleting them. DEST must be an "
            "existing directory."
        ),
    )
    parser.add_argument(
        "--config",
        metavar="FILE",
        help="JSON file with option values; flags given here take precedence.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        help="Log progress to stderr (-v for info, -vv for debug).",
    )
    return parser


def _configure_logging(verbosity: int) -> None:
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format=_LOG_FORMAT, stream=sys.stderr, force=True)


def _cli_values(namespace: argparse.Namespace) -> dict[str, Any]:
    values = dict(vars(namespace))
    for key in ("dir_path", "config", "verbose"):
        values.pop(key, None)
    return values


def main(
    argv: Sequence[str] | None = None,
    *,
    stdout: Optional[TextIO] = None,
    input_func: Optional[InputFunc] = None,
) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(getattr(args, "verbose", 0) or 0)

    try:
        file_values = load_config_file(args.config) if getattr(args, "config", None) else {}
        config = merge_config(args.dir_path, file_values, _cli_values(args))
        outcome = run_prune(config, stdout=stdout, input_func=input_func)
    except ConfigurationError as exc:
        parser.error(str(exc))
        return EXIT_USAGE
    except (ScanFailure, ActionFailure) as exc:
        sys.stderr.write(f"error: {exc}\n")
        return EXIT_FAILURE

    if outcome.declined:
        sys.stderr.write("Aborted; no changes were made.\n")
        return EXIT_DECLINED
    return EXIT_OK


if __name__ == "__main__":  # pragma: no cover - CLI entry
    sys.exit(main())


def console_main() -> None:
    """Entry point for the ``prunejuice`` console script."""

    sys.exit(main())
