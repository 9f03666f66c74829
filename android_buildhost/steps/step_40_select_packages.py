from __future__ import annotations

import logging

from ..context import ProvisionCtx
from ..pipeline import Outcome, StepResult

logger = logging.getLogger(__name__)

UNTESTED_WARNING = "Warning: Untested Ubuntu version, using default modern package set"


class SelectAndroidPackagesStep:
    step_id = "40_select_packages"
    name = "Package selection"
    report = False

    def run(self, ctx: ProvisionCtx) -> StepResult:
        sel = ctx.plan.selection
        if sel.untested:
            logger.warning(UNTESTED_WARNING)
        else:
            logger.debug(
                "Ubuntu %s matched %s: %s", ctx.facts.os_version, sel.branch, " ".join(sel.extra)
            )
        return StepResult(name=self.name, outcome=Outcome.SUCCESS, detail=sel.branch)
