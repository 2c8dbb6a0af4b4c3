"""Style fidelity check — reports where a produced element drifted from its source style.

Mismatches are diagnostics only. They go to a `StyleDiffSink`, which by
default logs a warning; tests and hosts may pass their own collector.
"""

from __future__ import annotations

import logging
from typing import Callable

from breakapart.engine.style import TRANSPARENT, ResolvedStyle
from breakapart.models.elements import BaseElement

logger = logging.getLogger(__name__)

StyleDiffSink = Callable[[str, list[str]], None]


def log_style_diff(tag: str, diffs: list[str]) -> None:
    logger.warning("%s style mismatch: %s", tag, ", ".join(diffs))


def style_diffs(style: ResolvedStyle, element: BaseElement) -> list[str]:
    """Human-readable differences between a resolved style and an element."""
    diffs: list[str] = []
    if (style.stroke_color or TRANSPARENT) != (element.stroke_color or TRANSPARENT):
        diffs.append(f"stroke: {style.stroke_color} -> {element.stroke_color}")
    if (style.background_color or TRANSPARENT) != (element.background_color or TRANSPARENT):
        diffs.append(f"fill: {style.background_color} -> {element.background_color}")
    if (style.stroke_width or 0) != (element.stroke_width or 0):
        diffs.append(f"strokeWidth: {style.stroke_width} -> {element.stroke_width}")
    original_opacity = 1 if style.opacity is None else style.opacity
    if original_opacity != element.opacity:
        diffs.append(f"opacity: {style.opacity} -> {element.opacity}")
    return diffs


def check_style(tag: str, style: ResolvedStyle, element: BaseElement, sink: StyleDiffSink) -> None:
    diffs = style_diffs(style, element)
    if diffs:
        sink(tag, diffs)
