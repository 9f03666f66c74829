from __future__ import annotations

import logging

from ..context import ProvisionCtx
from ..lib.apt import apt_install
from ..pipeline import Outcome, StepResult

logger = logging.getLogger(__name__)


class InstallBasePackagesStep:
    step_id = "50_base_packages"
    name = "Base package installation"
    report = True

    def run(self, ctx: ProvisionCtx) -> StepResult:
        logger.info("Installing base packages...")
        ctx.progress(15, "Installing base packages")
        apt_install(ctx.runner, ctx.plan.packages.base)
        return StepResult(name=self.name, outcome=Outcome.SUCCESS)
