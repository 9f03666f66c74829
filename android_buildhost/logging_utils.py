from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Optional

DEFAULT_LOG_PATH = "/var/log/android-buildhost.log"
MARKER = ">>> "


class _BelowLevel(logging.Filter):
    def __init__(self, level: int) -> None:
        super().__init__()
        self.level = level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self.level


def configure_logging(
    log_path: Optional[str] = DEFAULT_LOG_PATH,
    level: int = logging.INFO,
    also_console: bool = True,
) -> Optional[str]:
    """Configure logging.

    Everything goes to the log file with timestamps. The console gets
    marker-prefixed lines: progress on stdout, failures (ERROR and above)
    on stderr.

    Notes:
    - When the requested log file cannot be opened we fall back to a file in
      the working directory.
    - log_path=None disables the file handler.

    Returns the actual file path being used.
    """

    logger = logging.getLogger()
    logger.setLevel(level)

    # Avoid duplicate handlers if configure_logging() is called multiple times.
    if getattr(logger, "_buildhost_configured", False):
        return getattr(logger, "_buildhost_log_path", log_path)

    chosen_path = log_path
    handlers: list[logging.Handler] = []

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )

    if log_path:
        try:
            Path(os.path.dirname(log_path) or ".").mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_path)
        except OSError:
            # Fall back to a writable location.
            chosen_path = str(Path.cwd() / "android-buildhost.log")
            file_handler = logging.FileHandler(chosen_path)
        file_handler.setFormatter(fmt)
        file_handler.setLevel(logging.DEBUG)
        handlers.append(file_handler)

    if also_console:
        console_fmt = logging.Formatter(fmt=MARKER + "%(message)s")

        out = logging.StreamHandler(sys.stdout)
        out.setFormatter(console_fmt)
        out.setLevel(level)
        out.addFilter(_BelowLevel(logging.ERROR))
        handlers.append(out)

        err = logging.StreamHandler(sys.stderr)
        err.setFormatter(console_fmt)
        err.setLevel(logging.ERROR)
        handlers.append(err)

    for h in handlers:
        logger.addHandler(h)

    # The file always records debug output (captured command output).
    if log_path:
        logger.setLevel(logging.DEBUG)

    setattr(logger, "_buildhost_configured", True)
    setattr(logger, "_buildhost_log_path", chosen_path)

    logging.getLogger(__name__).debug(
        "Logging initialized (requested=%s, actual=%s)", log_path, chosen_path
    )
    return chosen_path
