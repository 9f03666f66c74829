from __future__ import annotations

import logging

from .command import CmdResult, CommandRunner

logger = logging.getLogger(__name__)


def download(runner: CommandRunner, url: str, dest: str, *, check: bool = True) -> CmdResult:
    """Fetch url into dest with wget (quiet, overwriting dest)."""

    logger.debug("Downloading %s -> %s", url, dest)
    return runner.run(["wget", "-q", url, "-O", dest], check=check)
