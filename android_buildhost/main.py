from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, Dict, Mapping, Optional

from .context import ProvisionCtx
from .errors import PrivilegeError, ProvisionError
from .host_config import PLATFORM_TOOLS_CHECK_POLICIES, load_host_config
from .lib.command import CommandRunner
from .lib.hostinfo import detect_environment, require_privileges
from .lib.manifests import load_packages_manifest
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .pipeline import PipelineResult, run_pipeline
from .planner import build_plan
from .steps import (
    CleanupStep,
    ConfigureGitIdentityStep,
    ConfigureGitLfsStep,
    InstallAndroidPackagesStep,
    InstallBasePackagesStep,
    LegacyPythonStep,
    PlatformToolsStep,
    RefreshPackageIndexStep,
    SelectAndroidPackagesStep,
    SummaryStep,
    UserBinPathStep,
)

logger = logging.getLogger(__name__)


def build_steps():
    return [
        RefreshPackageIndexStep(),
        UserBinPathStep(),
        PlatformToolsStep(),
        SelectAndroidPackagesStep(),
        InstallBasePackagesStep(),
        InstallAndroidPackagesStep(),
        LegacyPythonStep(),
        ConfigureGitIdentityStep(),
        ConfigureGitLfsStep(),
        CleanupStep(),
        SummaryStep(),
    ]


def run(
    *,
    config_path: Optional[str] = None,
    overrides: Optional[Mapping[str, Any]] = None,
    runner: Optional[CommandRunner] = None,
    environ: Optional[Mapping[str, str]] = None,
    dry_run: bool = False,
    show_progress: Optional[bool] = None,
) -> PipelineResult:
    """Resolve the environment, plan, and run the provisioning pipeline.

    Raises PrivilegeError / UserResolutionError / ConfigError before any
    change is made to the host. Step failures are reported in the result.
    """

    cfg = load_host_config(config_path, overrides=overrides)
    runner = runner or CommandRunner(dry_run=dry_run)

    facts = detect_environment(runner, environ=environ)
    plan = build_plan(
        facts,
        manifest=load_packages_manifest(),
        legacy_threshold=cfg.legacy_threshold,
    )

    ctx = ProvisionCtx(
        cfg=cfg,
        plan=plan,
        runner=runner,
        show_progress=cfg.progress_enabled if show_progress is None else show_progress,
    )
    return run_pipeline(ctx=ctx, steps=build_steps())


def _overrides_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    if args.git_name:
        out.setdefault("git", {})["user_name"] = args.git_name
    if args.git_email:
        out.setdefault("git", {})["user_email"] = args.git_email
    if args.platform_tools_check:
        out.setdefault("policy", {})["platform_tools_check"] = args.platform_tools_check
    return out


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(
        prog="android-buildhost",
        description="Provision an Ubuntu host for Android ROM/kernel builds.",
    )
    p.add_argument("--config", default=None, help="YAML file merged over the packaged defaults")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to the provisioning log")
    p.add_argument("--git-name", default=None, help="Global git user.name")
    p.add_argument("--git-email", default=None, help="Global git user.email")
    p.add_argument(
        "--platform-tools-check",
        choices=PLATFORM_TOOLS_CHECK_POLICIES,
        default=None,
        help="Check only the last platform-tools sub-step, or each one",
    )
    p.add_argument("--dry-run", action="store_true", help="Log commands without running them")
    p.add_argument("--no-progress", action="store_true", help="Disable progress bars")
    p.add_argument("-v", "--verbose", action="store_true")

    args = p.parse_args(argv)

    # Checked before logging is configured so a wrong invocation leaves no trace.
    try:
        require_privileges()
    except PrivilegeError as e:
        print(str(e), file=sys.stderr)
        return 1

    configure_logging(log_path=args.log, level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        result = run(
            config_path=args.config,
            overrides=_overrides_from_args(args),
            dry_run=bool(args.dry_run),
            show_progress=False if args.no_progress else None,
        )
    except ProvisionError as e:
        logger.error("%s", e)
        return 1

    return 0 if result.ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
