"""Pure planning: from environment facts to what the pipeline will install.

Nothing here touches the host. Every function is deterministic in its inputs,
so the same release string always yields the same package set.
"""

from __future__ import annotations

import fnmatch
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Mapping, Optional, Tuple

from .errors import ConfigError
from .lib.versions import is_at_or_before

DEFAULT_BRANCH = "default"


@dataclass(frozen=True)
class EnvironmentFacts:
    is_privileged: bool
    invoking_user: Optional[str]
    home_dir: Path
    os_version: str
    os_codename: str


@dataclass(frozen=True)
class PackageSelection:
    branch: str
    extra: Tuple[str, ...]
    untested: bool


@dataclass(frozen=True)
class PackageSet:
    base: Tuple[str, ...]
    android: Tuple[str, ...]


@dataclass(frozen=True)
class PathEntry:
    directory: Path
    create_if_missing: bool


@dataclass(frozen=True)
class PathPlan:
    entries: Tuple[PathEntry, ...]

    def export_lines(self) -> List[str]:
        return [f'export PATH="{e.directory}:$PATH"' for e in self.entries]


@dataclass(frozen=True)
class ProvisionPlan:
    facts: EnvironmentFacts
    packages: PackageSet
    selection: PackageSelection
    path_plan: PathPlan
    legacy_interpreter: bool

    @property
    def user_bin_entry(self) -> PathEntry:
        return self.path_plan.entries[0]

    @property
    def platform_tools_dir(self) -> Path:
        return self.path_plan.entries[1].directory


def _str_list(value: Any, *, where: str) -> Tuple[str, ...]:
    if not isinstance(value, list):
        raise ConfigError(f"{where} must be a list of package names")
    return tuple(str(v).strip() for v in value if str(v).strip())


def select_android_packages(os_version: str, manifest: Mapping[str, Any]) -> PackageSelection:
    """Pick the release-specific additions for os_version.

    Releases are matched in manifest order with shell glob patterns
    ("16.*", "22.*"); the first match wins. Unmatched versions get the
    default set and are flagged as untested.
    """

    android = manifest.get("android") or {}
    releases = android.get("releases") or []
    if not isinstance(releases, list):
        raise ConfigError("packages manifest: android.releases must be a list")

    for rel in releases:
        patterns = rel.get("patterns") or []
        if any(fnmatch.fnmatchcase(os_version, str(p)) for p in patterns):
            return PackageSelection(
                branch=str(rel.get("name") or patterns[0]),
                extra=_str_list(rel.get("extra") or [], where=f"android.releases[{rel.get('name')}].extra"),
                untested=False,
            )

    default = android.get("default") or {}
    return PackageSelection(
        branch=DEFAULT_BRANCH,
        extra=_str_list(default.get("extra") or [], where="android.default.extra"),
        untested=True,
    )


def build_package_set(selection: PackageSelection, manifest: Mapping[str, Any]) -> PackageSet:
    base = _str_list(manifest.get("base") or [], where="base")
    common = _str_list((manifest.get("android") or {}).get("common") or [], where="android.common")
    return PackageSet(base=base, android=common + selection.extra)


def needs_legacy_interpreter(os_version: str, threshold: str) -> bool:
    """True when os_version sorts at or before threshold (inclusive)."""
    return is_at_or_before(os_version, threshold)


def build_path_plan(home_dir: Path) -> PathPlan:
    return PathPlan(
        entries=(
            PathEntry(directory=home_dir / "bin", create_if_missing=True),
            PathEntry(directory=home_dir / "platform-tools", create_if_missing=False),
        )
    )


def build_plan(
    facts: EnvironmentFacts,
    *,
    manifest: Mapping[str, Any],
    legacy_threshold: str,
) -> ProvisionPlan:
    selection = select_android_packages(facts.os_version, manifest)
    return ProvisionPlan(
        facts=facts,
        packages=build_package_set(selection, manifest),
        selection=selection,
        path_plan=build_path_plan(facts.home_dir),
        legacy_interpreter=needs_legacy_interpreter(facts.os_version, legacy_threshold),
    )
