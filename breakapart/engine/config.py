"""Decomposition configuration — sampling and classification thresholds."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class DecomposeConfig:
    """Controls how SVG geometry is sampled and classified."""

    # Path outline sampling: one sample per `path_sample_spacing` user units,
    # bounded so tiny paths stay smooth and huge paths stay cheap.
    path_sample_spacing: float = 4.0
    path_min_samples: int = 32
    path_max_samples: int = 512

    # Diamond detection: vertex tolerance as a fraction of each axis extent
    diamond_tolerance: float = 0.02

    # Round-capped dashes no longer than this multiple of the stroke width read as dots
    dotted_dash_ratio: float = 1.5


DEFAULT_CONFIG = DecomposeConfig()
