"""Math helpers — numeric parsing, clamping and rounding. No engine imports."""

from __future__ import annotations

import math
import re

# Leading numeric literal, as accepted by CSS/SVG lengths ("12.5px" -> 12.5).
_NUMBER_PREFIX_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

# Every numeric literal in a list such as "0,0 10 0,-5e1".
NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def parse_number_prefix(text: str | None) -> float | None:
    """Parse the numeric prefix of a string. Returns None when absent or non-finite."""
    if text is None:
        return None
    match = _NUMBER_PREFIX_RE.match(text.strip())
    if not match:
        return None
    value = float(match.group(0))
    return value if math.isfinite(value) else None


def parse_numbers(text: str | None) -> list[float]:
    """All finite numbers appearing in a separator-delimited list."""
    if not text:
        return []
    values = (float(m) for m in NUMBER_RE.findall(text))
    return [v for v in values if math.isfinite(v)]


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def round_half_up(value: float) -> int:
    """Round .5 away from the floor (12.5 -> 13), unlike Python's banker's rounding."""
    return int(math.floor(value + 0.5))
