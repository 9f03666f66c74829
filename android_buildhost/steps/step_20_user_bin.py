from __future__ import annotations

import logging

from ..context import ProvisionCtx
from ..pipeline import Outcome, StepResult

logger = logging.getLogger(__name__)


class UserBinPathStep:
    """Make sure ~/bin exists; it is exported on PATH in the summary."""

    step_id = "20_user_bin"
    name = "User bin directory"
    report = False

    def run(self, ctx: ProvisionCtx) -> StepResult:
        entry = ctx.plan.user_bin_entry
        if entry.directory.is_dir():
            logger.info("Added %s to PATH", str(entry.directory))
            return StepResult(name=self.name, outcome=Outcome.SUCCESS, detail="exists")

        if entry.create_if_missing and not ctx.dry_run:
            entry.directory.mkdir(parents=True, exist_ok=True)
        logger.info("Created and added %s to PATH", str(entry.directory))
        return StepResult(name=self.name, outcome=Outcome.SUCCESS, detail="created")
