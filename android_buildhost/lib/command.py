from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from ..errors import ExternalCommandError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CmdResult:
    argv: list[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def _fmt_argv(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


def as_user(argv: Sequence[str], user: str | None) -> list[str]:
    """Wrap argv so it runs as `user` through sudo (no-op when user is None)."""

    if not user:
        return list(argv)
    return ["sudo", "-u", user, *argv]


def run_cmd(
    argv: Sequence[str],
    *,
    check: bool = True,
    env: Mapping[str, str] | None = None,
    cwd: str | None = None,
    input_text: str | None = None,
    output_path: str | None = None,
    dry_run: bool = False,
) -> CmdResult:
    """Run a command with consistent logging.

    - Always logs the command.
    - Captures stdout/stderr, or writes both to output_path when given.
    - A missing executable is reported as return code 127.
    - An output_path that cannot be opened raises ExternalCommandError
      even with check=False; the command is not run.
    - dry_run logs but does not execute.
    """

    argv_list = list(argv)
    logger.info("CMD %s", _fmt_argv(argv_list))

    if dry_run:
        return CmdResult(argv=argv_list, returncode=0, stdout="", stderr="")

    full_env = dict(os.environ, **(env or {}))
    out = None
    if output_path is not None:
        try:
            out = open(output_path, "w", encoding="utf-8")
        except OSError as e:
            raise ExternalCommandError(
                argv_list, 1, str(e), message=f"Cannot open output log {output_path}: {e}"
            ) from e

    try:
        p = subprocess.run(
            argv_list,
            input=input_text,
            text=True,
            stdout=out if out is not None else subprocess.PIPE,
            stderr=subprocess.STDOUT if out is not None else subprocess.PIPE,
            cwd=cwd,
            env=full_env,
        )
    except FileNotFoundError as e:
        if check:
            raise ExternalCommandError(argv_list, 127, str(e)) from e
        logger.debug("Executable not found: %s", argv_list[0])
        return CmdResult(argv=argv_list, returncode=127, stdout="", stderr=str(e))
    finally:
        if out is not None:
            out.close()

    stdout, stderr = p.stdout or "", p.stderr or ""

    if stdout:
        logger.debug("STDOUT %s", stdout.strip())
    if stderr:
        logger.debug("STDERR %s", stderr.strip())

    if check and p.returncode != 0:
        raise ExternalCommandError(argv_list, p.returncode, stderr)

    return CmdResult(argv=argv_list, returncode=p.returncode, stdout=stdout, stderr=stderr)


class CommandRunner:
    """Executes external commands on behalf of the pipeline steps.

    Steps never call subprocess directly; they go through a runner so that
    dry runs and tests can substitute the execution layer.
    """

    def __init__(self, *, dry_run: bool = False) -> None:
        self.dry_run = dry_run

    def run(
        self,
        argv: Sequence[str],
        *,
        check: bool = True,
        user: str | None = None,
        env: Mapping[str, str] | None = None,
        output_path: str | None = None,
    ) -> CmdResult:
        return run_cmd(
            as_user(argv, user),
            check=check,
            env=env,
            output_path=output_path,
            dry_run=self.dry_run,
        )

    def query(self, argv: Sequence[str]) -> CmdResult:
        # Read-only probes execute even in dry-run mode.
        return run_cmd(argv, check=False)

    def which(self, name: str) -> Optional[str]:
        return shutil.which(name)
