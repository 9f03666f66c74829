"""
Shared test fixtures: a recording command runner and a context factory.
"""

from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import pytest

from android_buildhost.context import ProvisionCtx
from android_buildhost.errors import ExternalCommandError
from android_buildhost.host_config import deep_merge, load_host_config
from android_buildhost.lib.command import CmdResult, CommandRunner
from android_buildhost.lib.manifests import load_packages_manifest
from android_buildhost.planner import EnvironmentFacts, build_plan


class Call:
    def __init__(self, argv: Sequence[str], user: Optional[str], output_path: Optional[str]) -> None:
        self.argv = list(argv)
        self.user = user
        self.output_path = output_path

    def __repr__(self) -> str:
        return f"Call({self.argv!r}, user={self.user!r}, output_path={self.output_path!r})"


class FakeRunner(CommandRunner):
    """Records commands instead of executing them.

    `codes` maps an argv prefix (tuple) to a return code, or to a list of
    return codes consumed one per matching call. `hooks` maps an argv
    prefix to a callable invoked with the argv (to simulate side effects).
    """

    def __init__(self) -> None:
        super().__init__(dry_run=False)
        self.calls: List[Call] = []
        self.queries: List[List[str]] = []
        self.codes: Dict[Tuple[str, ...], object] = {}
        self.outputs: Dict[Tuple[str, ...], str] = {}
        self.hooks: Dict[Tuple[str, ...], Callable[[List[str]], None]] = {}
        self.binaries: Dict[str, str] = {}

    def _lookup(self, table, argv):
        best = None
        for prefix in table:
            if tuple(argv[: len(prefix)]) == prefix and (best is None or len(prefix) > len(best)):
                best = prefix
        return best

    def _code_for(self, argv: List[str]) -> int:
        key = self._lookup(self.codes, argv)
        if key is None:
            return 0
        value = self.codes[key]
        if isinstance(value, list):
            return value.pop(0) if value else 0
        return int(value)

    def run(self, argv, *, check=True, user=None, env=None, output_path=None):
        argv = list(argv)
        self.calls.append(Call(argv, user, output_path))
        hook = self._lookup(self.hooks, argv)
        if hook is not None:
            self.hooks[hook](argv)
        rc = self._code_for(argv)
        if output_path is not None:
            Path(output_path).write_text(f"rc={rc}\n", encoding="utf-8")
        if check and rc != 0:
            raise ExternalCommandError(argv, rc, "boom")
        return CmdResult(argv=argv, returncode=rc, stdout="", stderr="boom" if rc else "")

    def query(self, argv):
        argv = list(argv)
        self.queries.append(argv)
        key = self._lookup(self.outputs, argv)
        rc = self._code_for(argv)
        return CmdResult(argv=argv, returncode=rc, stdout=self.outputs.get(key, "") if key else "", stderr="")

    def which(self, name):
        return self.binaries.get(name)

    def argvs(self) -> List[List[str]]:
        return [c.argv for c in self.calls]


@pytest.fixture
def fake_runner() -> FakeRunner:
    runner = FakeRunner()
    runner.binaries["git-lfs"] = "/usr/bin/git-lfs"
    return runner


@pytest.fixture
def home_dir(tmp_path: Path) -> Path:
    home = tmp_path / "home" / "alice"
    home.mkdir(parents=True)
    return home


@pytest.fixture
def make_ctx(fake_runner: FakeRunner, home_dir: Path, tmp_path: Path):
    """Build a ProvisionCtx for a given release without touching the host."""

    def _make(
        os_version: str = "22.04",
        *,
        user: Optional[str] = "alice",
        overrides: Optional[dict] = None,
    ) -> ProvisionCtx:
        base_overrides = {
            "downloads": {
                "platform_tools": {"archive": str(tmp_path / "platform-tools.zip")},
                "git_lfs": {
                    "archive": str(tmp_path / "git-lfs.tar.gz"),
                    "extract_dir": str(tmp_path),
                    "error_log": str(tmp_path / "git-lfs-error.log"),
                },
            },
        }
        cfg = load_host_config(overrides=deep_merge(base_overrides, overrides or {}))
        facts = EnvironmentFacts(
            is_privileged=True,
            invoking_user=user,
            home_dir=home_dir,
            os_version=os_version,
            os_codename="jammy",
        )
        plan = build_plan(facts, manifest=load_packages_manifest(), legacy_threshold=cfg.legacy_threshold)
        return ProvisionCtx(cfg=cfg, plan=plan, runner=fake_runner, show_progress=False)

    return _make
