from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import List, Protocol, Sequence

from .context import ProvisionCtx
from .errors import ProvisionError

logger = logging.getLogger(__name__)


class Outcome(str, enum.Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    FALLBACK_SUCCESS = "fallback_success"


@dataclass(frozen=True)
class StepResult:
    name: str
    outcome: Outcome
    detail: str = ""


class Step(Protocol):
    """A single provisioning step."""

    step_id: str
    name: str
    # False for steps whose outcome is not echoed as "<name> succeeded".
    report: bool

    def run(self, ctx: ProvisionCtx) -> StepResult:
        ...


@dataclass
class PipelineResult:
    results: List[StepResult] = field(default_factory=list)
    ok: bool = True

    @property
    def failed(self) -> StepResult | None:
        for r in self.results:
            if r.outcome is Outcome.FAILURE:
                return r
        return None


def run_pipeline(*, ctx: ProvisionCtx, steps: Sequence[Step]) -> PipelineResult:
    """Run steps in order, stopping at the first fatal failure.

    Steps signal fatal failure by raising ProvisionError. Nothing already
    applied to the host is rolled back.
    """

    result = PipelineResult()

    for step in steps:
        logger.debug("Running step %s", step.step_id)
        try:
            step_result = step.run(ctx)
        except ProvisionError as e:
            logger.error("%s failed", step.name)
            logger.error("%s", e)
            result.results.append(StepResult(name=step.name, outcome=Outcome.FAILURE, detail=str(e)))
            result.ok = False
            return result

        result.results.append(step_result)
        if not step.report:
            continue
        if step_result.outcome is Outcome.FALLBACK_SUCCESS:
            logger.info("%s succeeded (fallback)", step.name)
        elif step_result.detail:
            logger.info("%s succeeded (%s)", step.name, step_result.detail)
        else:
            logger.info("%s succeeded", step.name)

    return result
