from __future__ import annotations

import logging
from typing import Sequence

from .command import CmdResult, CommandRunner

logger = logging.getLogger(__name__)

APT_ENV = {"DEBIAN_FRONTEND": "noninteractive"}


def apt_update(runner: CommandRunner, *, check: bool = True) -> CmdResult:
    return runner.run(["apt-get", "update", "-y"], check=check, env=APT_ENV)


def apt_install(
    runner: CommandRunner,
    packages: Sequence[str],
    *,
    check: bool = True,
) -> CmdResult | None:
    if not packages:
        return None
    return runner.run(["apt-get", "install", "-y", *packages], check=check, env=APT_ENV)


def apt_autoremove(runner: CommandRunner, *, check: bool = True) -> CmdResult:
    return runner.run(["apt-get", "autoremove", "-y"], check=check, env=APT_ENV)


def apt_autoclean(runner: CommandRunner, *, check: bool = True) -> CmdResult:
    return runner.run(["apt-get", "autoclean", "-y"], check=check, env=APT_ENV)


def dpkg_is_installed(runner: CommandRunner, package: str) -> bool:
    """Return True if dpkg has the package registered on this host."""
    r = runner.query(["dpkg", "-s", package])
    return r.returncode == 0
