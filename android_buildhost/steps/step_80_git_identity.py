from __future__ import annotations

import logging

from ..context import ProvisionCtx
from ..lib.git import git_config_global
from ..pipeline import Outcome, StepResult

logger = logging.getLogger(__name__)


class ConfigureGitIdentityStep:
    step_id = "80_git_identity"
    name = "Git configuration"
    report = True

    def run(self, ctx: ProvisionCtx) -> StepResult:
        logger.info("Configuring Git with user details...")
        git_config_global(ctx.runner, "user.name", ctx.cfg.git_user_name, user=ctx.user)
        git_config_global(ctx.runner, "user.email", ctx.cfg.git_user_email, user=ctx.user)
        return StepResult(name=self.name, outcome=Outcome.SUCCESS)
