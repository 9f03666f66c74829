from __future__ import annotations

import logging

from ..context import ProvisionCtx
from ..errors import ExternalCommandError, FallbackableError
from ..lib.apt import apt_install, dpkg_is_installed
from ..lib.archive import extract_tar_gz, remove_paths
from ..lib.git import git_lfs_force_install, git_lfs_install
from ..lib.net import download
from ..pipeline import Outcome, StepResult

logger = logging.getLogger(__name__)


class ConfigureGitLfsStep:
    """Make git-lfs available and initialize it for the invoking user.

    Binary: apt first, the pinned upstream release as fallback.
    Initialization: `git lfs install`, then exactly one forced retry whose
    combined output goes to the configured error log.
    """

    step_id = "85_git_lfs"
    name = "Git LFS configuration"
    report = True

    def _install_from_release(self, ctx: ProvisionCtx) -> None:
        cfg = ctx.cfg
        logger.info("Installing git-lfs %s from release archive...", cfg.git_lfs_version)
        download(ctx.runner, cfg.git_lfs_url, cfg.git_lfs_archive, check=False)
        extract_tar_gz(ctx.runner, cfg.git_lfs_archive, cfg.git_lfs_extract_dir, check=False)
        r = ctx.runner.run([f"{cfg.git_lfs_release_dir}/install.sh"], check=False)
        if not r.ok:
            logger.warning("git-lfs install.sh exited %s", r.returncode)
        remove_paths(ctx.runner, [cfg.git_lfs_archive, cfg.git_lfs_release_dir], check=False)

    def _ensure_binary(self, ctx: ProvisionCtx) -> bool:
        """Returns True when the release fallback had to be used."""

        if ctx.runner.which("git-lfs"):
            return False

        if dpkg_is_installed(ctx.runner, "git-lfs"):
            logger.info("git-lfs is registered with dpkg but not on PATH, reinstalling...")
        else:
            logger.info("Git LFS not found, attempting manual installation...")
        r = apt_install(ctx.runner, ["git-lfs"], check=False)
        if r is not None and r.ok:
            return False

        self._install_from_release(ctx)
        return True

    def _initialize(self, ctx: ProvisionCtx) -> None:
        r = git_lfs_install(ctx.runner, user=ctx.user)
        if not r.ok:
            raise FallbackableError(r.argv, r.returncode, r.stderr)

    def _force_initialize(self, ctx: ProvisionCtx) -> None:
        log_path = ctx.cfg.git_lfs_error_log
        r = git_lfs_force_install(ctx.runner, user=ctx.user, output_path=log_path)
        if not r.ok:
            raise ExternalCommandError(
                r.argv,
                r.returncode,
                message=f"Git LFS configuration failed completely. Error log available at {log_path}",
            )
        logger.info("Git LFS force configuration succeeded")

    def run(self, ctx: ProvisionCtx) -> StepResult:
        logger.info("Configuring Git LFS...")
        ctx.progress(3, "Setting up Git LFS")

        used_release = self._ensure_binary(ctx)

        try:
            self._initialize(ctx)
        except FallbackableError as e:
            logger.error("Git LFS configuration failed (%s). Trying alternative method...", e.returncode)
            self._force_initialize(ctx)
            return StepResult(name=self.name, outcome=Outcome.FALLBACK_SUCCESS, detail="forced install")

        if used_release:
            return StepResult(
                name=self.name,
                outcome=Outcome.FALLBACK_SUCCESS,
                detail=f"git-lfs {ctx.cfg.git_lfs_version} from release archive",
            )
        return StepResult(name=self.name, outcome=Outcome.SUCCESS)
