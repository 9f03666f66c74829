from __future__ import annotations

import copy
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from .errors import ConfigError
from .lib.manifests import load_defaults, load_yaml_file

PLATFORM_TOOLS_CHECK_POLICIES = ("last", "each")


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    out = copy.deepcopy(dict(base))
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(out.get(key), Mapping):
            out[key] = deep_merge(out[key], value)
        else:
            out[key] = copy.deepcopy(value)
    return out


@dataclass(frozen=True)
class HostConfig:
    raw: Dict[str, Any]

    def _section(self, *keys: str) -> Dict[str, Any]:
        node: Any = self.raw
        for k in keys:
            node = (node or {}).get(k) if isinstance(node, dict) else None
        return node or {}

    @property
    def platform_tools_url(self) -> str:
        return str(self._section("downloads", "platform_tools").get("url") or "")

    @property
    def platform_tools_archive(self) -> str:
        return str(self._section("downloads", "platform_tools").get("archive") or "/tmp/platform-tools.zip")

    @property
    def platform_tools_helpers(self) -> List[str]:
        return [str(p) for p in (self._section("downloads", "platform_tools").get("helpers") or [])]

    @property
    def git_lfs_version(self) -> str:
        return str(self._section("downloads", "git_lfs").get("version") or "")

    @property
    def git_lfs_url(self) -> str:
        template = str(self._section("downloads", "git_lfs").get("url") or "")
        return template.format(version=self.git_lfs_version)

    @property
    def git_lfs_archive(self) -> str:
        return str(self._section("downloads", "git_lfs").get("archive") or "/tmp/git-lfs.tar.gz")

    @property
    def git_lfs_extract_dir(self) -> str:
        return str(self._section("downloads", "git_lfs").get("extract_dir") or "/tmp")

    @property
    def git_lfs_release_dir(self) -> str:
        # Release tarballs unpack into git-lfs-<version>/
        return str(Path(self.git_lfs_extract_dir) / f"git-lfs-{self.git_lfs_version}")

    @property
    def git_lfs_error_log(self) -> str:
        return str(self._section("downloads", "git_lfs").get("error_log") or "/tmp/git-lfs-error.log")

    @property
    def git_user_name(self) -> str:
        return str(self._section("git").get("user_name") or "")

    @property
    def git_user_email(self) -> str:
        return str(self._section("git").get("user_email") or "")

    @property
    def legacy_threshold(self) -> str:
        return str(self._section("legacy_interpreter").get("threshold") or "18.04")

    @property
    def legacy_packages(self) -> List[str]:
        return [str(p) for p in (self._section("legacy_interpreter").get("packages") or [])]

    @property
    def platform_tools_check(self) -> str:
        return str(self._section("policy").get("platform_tools_check") or "last")

    @property
    def progress_enabled(self) -> bool:
        return bool(self._section("progress").get("enabled", True))

    def validate(self) -> "HostConfig":
        if self.platform_tools_check not in PLATFORM_TOOLS_CHECK_POLICIES:
            raise ConfigError(
                f"policy.platform_tools_check must be one of {PLATFORM_TOOLS_CHECK_POLICIES}, "
                f"got {self.platform_tools_check!r}"
            )
        for name in ("platform_tools_url", "git_lfs_version", "git_user_name", "git_user_email"):
            if not getattr(self, name):
                raise ConfigError(f"Missing required configuration value: {name}")
        return self


def load_host_config(
    path: Optional[str] = None,
    *,
    overrides: Optional[Mapping[str, Any]] = None,
) -> HostConfig:
    """Load packaged defaults, then merge a user YAML file and CLI overrides."""

    raw = load_defaults()

    if path:
        p = Path(path)
        if not p.exists():
            raise ConfigError(f"Config file not found: {path}")
        if p.suffix.lower() not in {".yaml", ".yml"}:
            raise ConfigError("host config must be YAML")
        raw = deep_merge(raw, load_yaml_file(p))

    if overrides:
        raw = deep_merge(raw, overrides)

    return HostConfig(raw=raw).validate()
