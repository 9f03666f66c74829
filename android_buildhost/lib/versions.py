from __future__ import annotations

import re
from typing import Tuple

_TOKEN = re.compile(r"\d+|[A-Za-z]+")


def version_key(version: str) -> Tuple[Tuple[int, int, str], ...]:
    """Sort key for dotted release strings such as "18.04" or "22.04.3".

    Numeric runs compare as integers, alphabetic runs compare as text and sort
    after numbers at the same position. Separators are ignored. A prefix sorts
    before any longer version that extends it ("18" < "18.04").
    """

    parts = []
    for tok in _TOKEN.findall(version or ""):
        if tok.isdigit():
            parts.append((0, int(tok), ""))
        else:
            parts.append((1, 0, tok))
    return tuple(parts)


def is_at_or_before(version: str, threshold: str) -> bool:
    return version_key(version) <= version_key(threshold)
