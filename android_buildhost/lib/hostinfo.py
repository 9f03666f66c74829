from __future__ import annotations

import logging
import os
import pwd
from pathlib import Path
from typing import Dict, Mapping, Optional, Tuple

from ..errors import PrivilegeError, UserResolutionError
from ..planner import EnvironmentFacts
from .command import CommandRunner

logger = logging.getLogger(__name__)

OS_RELEASE_PATH = Path("/etc/os-release")


def is_privileged() -> bool:
    return os.geteuid() == 0


def require_privileges() -> None:
    if not is_privileged():
        raise PrivilegeError("Please run this program as root (use sudo).")


def invoking_user(environ: Mapping[str, str]) -> Optional[str]:
    """Name of the user who elevated with sudo, if any."""
    user = (environ.get("SUDO_USER") or "").strip()
    return user or None


def resolve_home(user: Optional[str], environ: Mapping[str, str]) -> Path:
    """Home directory of the user the build host is being prepared for."""

    if user:
        try:
            entry = pwd.getpwnam(user)
        except KeyError as e:
            raise UserResolutionError(f"Cannot resolve home directory: no account named {user!r}") from e
        if not entry.pw_dir:
            raise UserResolutionError(f"Account {user!r} has no home directory")
        return Path(entry.pw_dir)

    home = (environ.get("HOME") or "").strip()
    if home:
        return Path(home)
    try:
        return Path.home()
    except RuntimeError as e:
        raise UserResolutionError("Cannot resolve home directory for the current user") from e


def parse_os_release(text: str) -> Dict[str, str]:
    out: Dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        out[key.strip()] = value.strip().strip('"').strip("'")
    return out


def _read_os_release(path: Path) -> Dict[str, str]:
    try:
        return parse_os_release(path.read_text(encoding="utf-8"))
    except OSError:
        logger.warning("Cannot read %s", str(path))
        return {}


def detect_os_release(runner: CommandRunner, *, os_release_path: Path = OS_RELEASE_PATH) -> Tuple[str, str]:
    """Return (version, codename), e.g. ("22.04", "jammy").

    No validation of the values: unknown releases are handled by the
    package dispatch default.
    """

    ver = runner.query(["lsb_release", "-rs"])
    code = runner.query(["lsb_release", "-cs"])
    if ver.ok and code.ok:
        return ver.stdout.strip(), code.stdout.strip()

    logger.debug("lsb_release unavailable (rc=%s), reading %s", ver.returncode, str(os_release_path))
    info = _read_os_release(os_release_path)
    return info.get("VERSION_ID", ""), info.get("VERSION_CODENAME", "")


def detect_environment(
    runner: CommandRunner,
    *,
    environ: Optional[Mapping[str, str]] = None,
    os_release_path: Path = OS_RELEASE_PATH,
) -> EnvironmentFacts:
    """Resolve all environment facts; raises before any host mutation."""

    env = os.environ if environ is None else environ

    require_privileges()

    user = invoking_user(env)
    home = resolve_home(user, env)
    logger.info("Using home directory: %s", str(home))

    logger.info("Detecting Ubuntu version...")
    version, codename = detect_os_release(runner, os_release_path=os_release_path)
    logger.info("Found Ubuntu %s (%s)", version, codename)

    return EnvironmentFacts(
        is_privileged=True,
        invoking_user=user,
        home_dir=home,
        os_version=version,
        os_codename=codename,
    )
