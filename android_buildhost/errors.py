from __future__ import annotations

from typing import Sequence


class ProvisionError(Exception):
    """Base class for every error that aborts provisioning."""


class PrivilegeError(ProvisionError, PermissionError):
    pass


class UserResolutionError(ProvisionError):
    """The invoking user's home directory could not be resolved."""


class ConfigError(ProvisionError):
    pass


class ExternalCommandError(ProvisionError):
    def __init__(
        self,
        argv: Sequence[str],
        returncode: int,
        stderr: str = "",
        *,
        message: str | None = None,
    ) -> None:
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr
        if message is None:
            message = f"Command failed ({returncode}): {' '.join(self.argv)}"
            if stderr.strip():
                message += f"\n{stderr.strip()}"
        super().__init__(message)


class FallbackableError(ExternalCommandError):
    """A command failure the caller may retry once with an alternate form."""
