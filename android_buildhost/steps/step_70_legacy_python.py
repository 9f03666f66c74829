from __future__ import annotations

import logging

from ..context import ProvisionCtx
from ..lib.apt import apt_install
from ..pipeline import Outcome, StepResult

logger = logging.getLogger(__name__)


class LegacyPythonStep:
    """Python 2 for older GCC toolchains, on releases up to the threshold."""

    step_id = "70_legacy_python"
    name = "Python 2 installation"
    report = True

    def run(self, ctx: ProvisionCtx) -> StepResult:
        if not ctx.plan.legacy_interpreter:
            logger.debug(
                "Ubuntu %s is newer than %s, no legacy interpreter needed",
                ctx.facts.os_version,
                ctx.cfg.legacy_threshold,
            )
            return StepResult(name=self.name, outcome=Outcome.SUCCESS, detail="not required")

        logger.info("Installing Python 2 for older GCC compatibility...")
        ctx.progress(5, "Installing Python 2")
        apt_install(ctx.runner, ctx.cfg.legacy_packages)
        return StepResult(name=self.name, outcome=Outcome.SUCCESS)
