from __future__ import annotations

import logging

from ..context import ProvisionCtx
from ..lib.apt import apt_update
from ..pipeline import Outcome, StepResult

logger = logging.getLogger(__name__)


class RefreshPackageIndexStep:
    step_id = "10_refresh_index"
    name = "Package list update"
    report = True

    def run(self, ctx: ProvisionCtx) -> StepResult:
        logger.info("Updating package lists...")
        ctx.progress(5, "Updating package lists")
        apt_update(ctx.runner)
        return StepResult(name=self.name, outcome=Outcome.SUCCESS)
