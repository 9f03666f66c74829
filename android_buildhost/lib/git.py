from __future__ import annotations

from .command import CmdResult, CommandRunner


def git_config_global(
    runner: CommandRunner,
    key: str,
    value: str,
    *,
    user: str | None = None,
) -> CmdResult:
    return runner.run(["git", "config", "--global", key, value], user=user)


def git_lfs_install(runner: CommandRunner, *, user: str | None = None) -> CmdResult:
    return runner.run(["git", "lfs", "install"], check=False, user=user)


def git_lfs_force_install(
    runner: CommandRunner,
    *,
    user: str | None = None,
    output_path: str | None = None,
) -> CmdResult:
    return runner.run(
        ["bash", "-c", "git lfs install --force"],
        check=False,
        user=user,
        output_path=output_path,
    )
