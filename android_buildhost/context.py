from __future__ import annotations

from dataclasses import dataclass

from .host_config import HostConfig
from .lib.command import CommandRunner
from .lib.progress import progress_bar
from .planner import EnvironmentFacts, ProvisionPlan


@dataclass(frozen=True)
class ProvisionCtx:
    cfg: HostConfig
    plan: ProvisionPlan
    runner: CommandRunner
    show_progress: bool = True

    @property
    def facts(self) -> EnvironmentFacts:
        return self.plan.facts

    @property
    def user(self) -> str | None:
        """User that per-user commands (git) must run as."""
        return self.plan.facts.invoking_user

    @property
    def dry_run(self) -> bool:
        return self.runner.dry_run

    def progress(self, seconds: float, message: str) -> None:
        progress_bar(seconds, message, enabled=self.show_progress)
