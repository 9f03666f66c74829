from __future__ import annotations

import logging
import sys
import time
from typing import Callable, Optional, TextIO

logger = logging.getLogger(__name__)

BAR_WIDTH = 20


def render_bar(filled: int, width: int = BAR_WIDTH) -> str:
    filled = max(0, min(filled, width))
    percent = (filled * 100) // width
    return "[" + "#" * filled + "-" * (width - filled) + f"] {percent}%"


def progress_bar(
    seconds: float,
    message: str,
    *,
    enabled: bool = True,
    width: int = BAR_WIDTH,
    stream: Optional[TextIO] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    """Cosmetic progress indicator with fixed pacing.

    Not coupled to the work it decorates: the bar fills over `seconds`
    regardless of how long the following command takes.
    """

    logger.info("%s...", message)
    if not enabled:
        return

    out = stream or sys.stdout
    tick = seconds / width if width else 0
    for i in range(width + 1):
        out.write("\r" + render_bar(i, width))
        out.flush()
        if tick > 0:
            sleep(tick)
    out.write("\n")
    out.flush()
