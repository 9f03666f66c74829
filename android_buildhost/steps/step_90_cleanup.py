from __future__ import annotations

import logging

from ..context import ProvisionCtx
from ..lib.apt import apt_autoclean, apt_autoremove
from ..pipeline import Outcome, StepResult

logger = logging.getLogger(__name__)


class CleanupStep:
    step_id = "90_cleanup"
    name = "Cleanup"
    report = True

    def run(self, ctx: ProvisionCtx) -> StepResult:
        logger.info("Cleaning up unused packages...")
        ctx.progress(5, "Cleaning up")
        apt_autoremove(ctx.runner)
        apt_autoclean(ctx.runner)
        return StepResult(name=self.name, outcome=Outcome.SUCCESS)
