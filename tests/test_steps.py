"""
Tests for the individual provisioning steps against a recording runner.
"""

import logging
from pathlib import Path

import pytest

from android_buildhost.errors import ExternalCommandError
from android_buildhost.pipeline import Outcome
from android_buildhost.steps import (
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
from android_buildhost.steps.step_40_select_packages import UNTESTED_WARNING


def test_refresh_index(make_ctx, fake_runner):
    RefreshPackageIndexStep().run(make_ctx())
    assert fake_runner.argvs() == [["apt-get", "update", "-y"]]


def test_refresh_index_failure_is_fatal(make_ctx, fake_runner):
    fake_runner.codes[("apt-get", "update")] = 100
    with pytest.raises(ExternalCommandError):
        RefreshPackageIndexStep().run(make_ctx())


def test_user_bin_created(make_ctx, home_dir: Path):
    result = UserBinPathStep().run(make_ctx())
    assert (home_dir / "bin").is_dir()
    assert result.detail == "created"


def test_user_bin_existing(make_ctx, home_dir: Path):
    (home_dir / "bin").mkdir()
    result = UserBinPathStep().run(make_ctx())
    assert result.outcome is Outcome.SUCCESS
    assert result.detail == "exists"


class TestPlatformTools:
    def test_existing_directory_is_skipped(self, make_ctx, fake_runner, home_dir: Path):
        (home_dir / "platform-tools").mkdir()
        result = PlatformToolsStep().run(make_ctx())
        assert result.outcome is Outcome.SUCCESS
        assert fake_runner.calls == []

    def test_download_extract_delete_in_order(self, make_ctx, fake_runner, home_dir: Path, tmp_path: Path):
        ctx = make_ctx()
        archive = str(tmp_path / "platform-tools.zip")

        PlatformToolsStep().run(ctx)

        assert fake_runner.argvs() == [
            ["apt-get", "install", "-y", "wget", "unzip"],
            ["wget", "-q", ctx.cfg.platform_tools_url, "-O", archive],
            ["unzip", "-q", "-o", archive, "-d", str(home_dir)],
            ["rm", "-rf", archive],
        ]

    def test_earlier_failure_is_masked_by_default(self, make_ctx, fake_runner):
        fake_runner.codes[("wget",)] = 4
        result = PlatformToolsStep().run(make_ctx())
        assert result.outcome is Outcome.SUCCESS
        assert [c.argv[0] for c in fake_runner.calls] == ["apt-get", "wget", "unzip", "rm"]

    def test_final_failure_is_fatal(self, make_ctx, fake_runner):
        fake_runner.codes[("rm",)] = 1
        with pytest.raises(ExternalCommandError):
            PlatformToolsStep().run(make_ctx())
        assert [c.argv[0] for c in fake_runner.calls] == ["apt-get", "wget", "unzip", "rm"]

    def test_each_policy_stops_at_first_failure(self, make_ctx, fake_runner):
        fake_runner.codes[("wget",)] = 4
        ctx = make_ctx(overrides={"policy": {"platform_tools_check": "each"}})
        with pytest.raises(ExternalCommandError) as exc:
            PlatformToolsStep().run(ctx)
        assert exc.value.returncode == 4
        assert [c.argv[0] for c in fake_runner.calls] == ["apt-get", "wget"]


@pytest.mark.parametrize("version", ["16.04", "18.04", "20.04", "22.04", "24.04"])
def test_select_packages_known_release_no_warning(make_ctx, caplog, version):
    with caplog.at_level(logging.DEBUG):
        SelectAndroidPackagesStep().run(make_ctx(version))
    assert UNTESTED_WARNING not in caplog.text


def test_select_packages_unknown_release_warns(make_ctx, caplog):
    with caplog.at_level(logging.WARNING):
        result = SelectAndroidPackagesStep().run(make_ctx("26.04"))
    assert result.outcome is Outcome.SUCCESS
    assert any(r.levelno == logging.WARNING and r.getMessage() == UNTESTED_WARNING for r in caplog.records)


def test_install_base_and_android(make_ctx, fake_runner):
    ctx = make_ctx("20.04")
    InstallBasePackagesStep().run(ctx)
    InstallAndroidPackagesStep().run(ctx)
    base, android = fake_runner.argvs()
    assert base == ["apt-get", "install", "-y", *ctx.plan.packages.base]
    assert android[:3] == ["apt-get", "install", "-y"]
    assert android[-3:] == ["python3-dev", "python-is-python3", "libncurses5"]


def test_android_install_failure_is_fatal(make_ctx, fake_runner):
    fake_runner.codes[("apt-get", "install")] = 100
    with pytest.raises(ExternalCommandError):
        InstallAndroidPackagesStep().run(make_ctx())


def test_legacy_python_on_threshold(make_ctx, fake_runner):
    LegacyPythonStep().run(make_ctx("18.04"))
    assert fake_runner.argvs() == [["apt-get", "install", "-y", "python", "python-dev"]]


def test_legacy_python_after_threshold(make_ctx, fake_runner):
    result = LegacyPythonStep().run(make_ctx("18.05"))
    assert fake_runner.calls == []
    assert result.detail == "not required"


def test_git_identity_runs_as_invoking_user(make_ctx, fake_runner):
    ctx = make_ctx()
    ConfigureGitIdentityStep().run(ctx)
    assert [(c.argv, c.user) for c in fake_runner.calls] == [
        (["git", "config", "--global", "user.name", ctx.cfg.git_user_name], "alice"),
        (["git", "config", "--global", "user.email", ctx.cfg.git_user_email], "alice"),
    ]


def test_git_identity_without_sudo(make_ctx, fake_runner):
    ConfigureGitIdentityStep().run(make_ctx(user=None))
    assert all(c.user is None for c in fake_runner.calls)


class TestGitLfs:
    def test_binary_present(self, make_ctx, fake_runner):
        result = ConfigureGitLfsStep().run(make_ctx())
        assert result.outcome is Outcome.SUCCESS
        assert [(c.argv, c.user) for c in fake_runner.calls] == [(["git", "lfs", "install"], "alice")]

    def test_installed_with_apt_when_missing(self, make_ctx, fake_runner):
        del fake_runner.binaries["git-lfs"]
        result = ConfigureGitLfsStep().run(make_ctx())
        assert result.outcome is Outcome.SUCCESS
        assert fake_runner.argvs() == [
            ["apt-get", "install", "-y", "git-lfs"],
            ["git", "lfs", "install"],
        ]

    def test_release_fallback_when_apt_fails(self, make_ctx, fake_runner, tmp_path: Path):
        del fake_runner.binaries["git-lfs"]
        fake_runner.codes[("apt-get", "install")] = 100
        ctx = make_ctx()
        archive = str(tmp_path / "git-lfs.tar.gz")
        release_dir = str(tmp_path / "git-lfs-3.5.1")

        result = ConfigureGitLfsStep().run(ctx)

        assert result.outcome is Outcome.FALLBACK_SUCCESS
        assert fake_runner.argvs() == [
            ["apt-get", "install", "-y", "git-lfs"],
            ["wget", "-q", ctx.cfg.git_lfs_url, "-O", archive],
            ["tar", "-xzf", archive, "-C", str(tmp_path)],
            [f"{release_dir}/install.sh"],
            ["rm", "-rf", archive, release_dir],
            ["git", "lfs", "install"],
        ]

    def test_forced_retry_after_failed_init(self, make_ctx, fake_runner, tmp_path: Path, caplog):
        fake_runner.codes[("git", "lfs", "install")] = 2
        with caplog.at_level(logging.INFO):
            result = ConfigureGitLfsStep().run(make_ctx())

        retry_notice = [r for r in caplog.records if "Trying alternative method" in r.getMessage()]
        assert [r.levelno for r in retry_notice] == [logging.ERROR]

        assert result.outcome is Outcome.FALLBACK_SUCCESS
        forced = fake_runner.calls[-1]
        assert forced.argv == ["bash", "-c", "git lfs install --force"]
        assert forced.user == "alice"
        assert forced.output_path == str(tmp_path / "git-lfs-error.log")
        assert (tmp_path / "git-lfs-error.log").exists()
        assert len(fake_runner.calls) == 2

    def test_forced_retry_failure_is_fatal(self, make_ctx, fake_runner, tmp_path: Path):
        fake_runner.codes[("git", "lfs", "install")] = 2
        fake_runner.codes[("bash", "-c")] = 1
        with pytest.raises(ExternalCommandError, match="git-lfs-error.log"):
            ConfigureGitLfsStep().run(make_ctx())
        assert len(fake_runner.calls) == 2


def test_cleanup(make_ctx, fake_runner):
    CleanupStep().run(make_ctx())
    assert fake_runner.argvs() == [["apt-get", "autoremove", "-y"], ["apt-get", "autoclean", "-y"]]


def test_cleanup_stops_after_autoremove_failure(make_ctx, fake_runner):
    fake_runner.codes[("apt-get", "autoremove")] = 1
    with pytest.raises(ExternalCommandError):
        CleanupStep().run(make_ctx())
    assert len(fake_runner.calls) == 1


def test_summary_prints_exports_last(make_ctx, capsys, home_dir: Path):
    SummaryStep().run(make_ctx())
    lines = capsys.readouterr().out.strip().splitlines()
    assert lines[-2:] == [
        f'export PATH="{home_dir}/bin:$PATH"',
        f'export PATH="{home_dir}/platform-tools:$PATH"',
    ]
