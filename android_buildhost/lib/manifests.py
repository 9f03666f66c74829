from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

from ..errors import ConfigError


def _package_root() -> Path:
    # android_buildhost/lib/manifests.py -> android_buildhost
    return Path(__file__).resolve().parents[1]


def load_yaml_file(path: Path) -> Dict[str, Any]:
    try:
        import yaml  # type: ignore
    except Exception as e:  # pragma: no cover
        raise RuntimeError("PyYAML required to load manifests") from e

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Manifest must be a mapping/dict: {path}")
    return data


def load_yaml_rel(rel_path: str) -> Dict[str, Any]:
    """Load a YAML file shipped inside the package (manifests/...)."""
    return load_yaml_file(_package_root() / rel_path.lstrip("/"))


def load_defaults() -> Dict[str, Any]:
    return load_yaml_rel("manifests/defaults.yaml")


def load_packages_manifest() -> Dict[str, Any]:
    return load_yaml_rel("manifests/packages.yaml")
