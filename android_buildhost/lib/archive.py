from __future__ import annotations

from typing import Sequence

from .command import CmdResult, CommandRunner


def extract_zip(runner: CommandRunner, archive: str, dest_dir: str, *, check: bool = True) -> CmdResult:
    return runner.run(["unzip", "-q", "-o", archive, "-d", dest_dir], check=check)


def extract_tar_gz(runner: CommandRunner, archive: str, dest_dir: str, *, check: bool = True) -> CmdResult:
    return runner.run(["tar", "-xzf", archive, "-C", dest_dir], check=check)


def remove_paths(runner: CommandRunner, paths: Sequence[str], *, check: bool = True) -> CmdResult:
    return runner.run(["rm", "-rf", *paths], check=check)
