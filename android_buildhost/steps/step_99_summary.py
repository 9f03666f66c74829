from __future__ import annotations

import logging
import sys

from ..context import ProvisionCtx
from ..pipeline import Outcome, StepResult

logger = logging.getLogger(__name__)


class SummaryStep:
    """Print the PATH lines the operator has to persist by hand."""

    step_id = "99_summary"
    name = "Summary"
    report = False

    def run(self, ctx: ProvisionCtx) -> StepResult:
        profile = ctx.facts.home_dir / ".bashrc"
        logger.info("Setup complete!")
        logger.info("Note: To make PATH changes permanent, add these lines to %s:", str(profile))
        for line in ctx.plan.path_plan.export_lines():
            print(line, file=sys.stdout)
        sys.stdout.flush()
        return StepResult(name=self.name, outcome=Outcome.SUCCESS)
