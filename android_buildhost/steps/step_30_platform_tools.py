from __future__ import annotations

import logging
from typing import Callable, List

from ..context import ProvisionCtx
from ..errors import ExternalCommandError
from ..lib.apt import apt_install
from ..lib.archive import extract_zip, remove_paths
from ..lib.command import CmdResult
from ..lib.net import download
from ..pipeline import Outcome, StepResult

logger = logging.getLogger(__name__)


class PlatformToolsStep:
    """Install Android SDK platform-tools into the user's home.

    Idempotent: an existing platform-tools directory is left untouched.

    The sub-steps are: install download helpers, download, extract, delete
    the archive. With policy "last" they all run and only the final status
    counts (an earlier failure is masked). With policy "each" the first
    failing sub-step aborts.
    """

    step_id = "30_platform_tools"
    name = "Android SDK platform-tools setup"
    report = True

    def _substeps(self, ctx: ProvisionCtx, *, check: bool) -> List[Callable[[], CmdResult | None]]:
        cfg = ctx.cfg
        home = str(ctx.facts.home_dir)
        archive = cfg.platform_tools_archive
        return [
            lambda: apt_install(ctx.runner, cfg.platform_tools_helpers, check=check),
            lambda: download(ctx.runner, cfg.platform_tools_url, archive, check=check),
            lambda: extract_zip(ctx.runner, archive, home, check=check),
            lambda: remove_paths(ctx.runner, [archive], check=check),
        ]

    def run(self, ctx: ProvisionCtx) -> StepResult:
        target = ctx.plan.platform_tools_dir
        if target.is_dir():
            logger.info("%s already exists, skipping download", str(target))
            logger.info("Added %s to PATH", str(target))
            return StepResult(name=self.name, outcome=Outcome.SUCCESS, detail="already installed")

        logger.info("Downloading Android SDK platform-tools...")
        ctx.progress(10, "Downloading and extracting platform-tools")

        policy = ctx.cfg.platform_tools_check
        if policy == "each":
            for sub in self._substeps(ctx, check=True):
                sub()
        else:
            last: CmdResult | None = None
            for sub in self._substeps(ctx, check=False):
                r = sub()
                if r is not None:
                    if not r.ok:
                        logger.debug("platform-tools sub-step exited %s: %s", r.returncode, " ".join(r.argv))
                    last = r
            if last is not None and not last.ok:
                raise ExternalCommandError(last.argv, last.returncode, last.stderr)

        logger.info("Added %s to PATH", str(target))
        return StepResult(name=self.name, outcome=Outcome.SUCCESS)
