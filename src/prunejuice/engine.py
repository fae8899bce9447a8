"""Run one prune invocation end to end and report a structured outcome.

Nothing in here exits the process. Configuration, scan and action failures
are raised as :class:`~prunejuice.core.types.PruneError` subclasses; a
declined confirmation is reported as a ``declined`` outcome instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, TextIO

from .actions import Action, dispatch
from .config import PruneConfig, validate_config
from .confirm import ConfirmationGate, ConfirmMode, InputFunc
from .core.retention import RetentionPlan, plan_retention
from .core.scanner import scan_directory, sort_entries
from .core.types import UserDeclined

logger = logging.getLogger(__name__)

STATUS_COMPLETED = "completed"
STATUS_DECLINED = "declined"


@dataclass(frozen=True)
class PruneOutcome:
    status: str
    plan: RetentionPlan
    action: Action
    processed: int = 0

    @property
    def declined(self) -> bool:
        return self.status == STATUS_DECLINED


def build_plan(config: PruneConfig) -> RetentionPlan:
    """Scan, order and cut the target directory described by ``config``."""

    records = scan_directory(config.directory, config.scan_options)
    ordered = sort_entries(records)
    return plan_retention(ordered, config.policies(), keep_n=config.keep)


def run_prune(
    config: PruneConfig,
    *,
    stdout: Optional[TextIO] = None,
    input_func: Optional[InputFunc] = None,
) -> PruneOutcome:
    """Validate, scan, plan and dispatch according to ``config``."""

    validate_config(config)
    action = config.action
    plan = build_plan(config)
    logger.info(
        "%s: %d entries, %d to remove, %d to keep (action=%s)",
        config.directory,
        len(plan.entries),
        len(plan.remove),
        len(plan.keep),
        action.kind.value,
    )

    gate = ConfirmationGate(
        ConfirmMode.from_bool(config.confirm),
        input_func=input_func,
        stdout=stdout,
    )
    try:
        processed = dispatch(plan, action, confirmation=gate, stdout=stdout)
    except UserDeclined:
        return PruneOutcome(status=STATUS_DECLINED, plan=plan, action=action)
    return PruneOutcome(
        status=STATUS_COMPLETED, plan=plan, action=action, processed=processed
    )


__all__ = ["PruneOutcome", "STATUS_COMPLETED", "STATUS_DECLINED", "build_plan", "run_prune"]
