from __future__ import annotations

import logging

from ..context import ProvisionCtx
from ..lib.apt import apt_install
from ..pipeline import Outcome, StepResult

logger = logging.getLogger(__name__)


class InstallAndroidPackagesStep:
    step_id = "60_android_packages"
    name = "Android package installation"
    report = True

    def run(self, ctx: ProvisionCtx) -> StepResult:
        logger.info("Installing Android ROM/Kernel build dependencies...")
        ctx.progress(20, "Installing Android build packages")
        apt_install(ctx.runner, ctx.plan.packages.android)
        return StepResult(name=self.name, outcome=Outcome.SUCCESS)
