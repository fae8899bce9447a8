from __future__ import annotations

import logging
import sys
from enum import Enum
from typing import Callable, Sequence, TextIO

from .core.types import UserDeclined

logger = logging.getLogger(__name__)

_AFFIRMATIVE = {"y", "yes"}
PROMPT = "Proceed? [y/N]: "

InputFunc = Callable[[str], str]


class ConfirmMode(str, Enum):
    CONFIRM = "confirm"
    NO_CONFIRM = "no-confirm"

    @classmethod
    def from_bool(cls, confirm: bool) -> "ConfirmMode":
        return cls.CONFIRM if confirm else cls.NO_CONFIRM


def describe_batch(header: str, paths: Sequence[str]) -> str:
    """Render a batch description: ``header`` then one indented path per line."""

    lines = [header]
    lines.extend(f"  {path}" for path in paths)
    return "\n".join(lines)


class ConfirmationGate:
    """Asks the operator once before a batch mutates anything."""

    def __init__(
        self,
        mode: ConfirmMode = ConfirmMode.CONFIRM,
        *,
        input_func: InputFunc | None = None,
        stdout: TextIO | None = None,
    ) -> None:
        self.mode = mode
        self._input = input_func or input
        self._stdout = stdout

    def confirm(self, description: str) -> None:
        """Return when the batch may proceed; raise ``UserDeclined`` otherwise."""

        if self.mode is ConfirmMode.NO_CONFIRM:
            return

        stream = self._stdout or sys.stdout
        stream.write(f"{description}\n")
        stream.flush()
        try:
            answer = self._input(PROMPT)
        except EOFError:
            logger.info("No answer on stdin; treating as declined")
            raise UserDeclined() from None

        if answer.strip().lower() not in _AFFIRMATIVE:
            logger.info("Operator declined with answer %r", answer)
            raise UserDeclined()


__all__ = ["ConfirmMode", "ConfirmationGate", "PROMPT", "describe_batch"]
