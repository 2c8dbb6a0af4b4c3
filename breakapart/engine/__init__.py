"""Break-apart engine — layout session, style resolution, geometry and decomposition."""

from breakapart.engine.config import DecomposeConfig
from breakapart.engine.decompose import decompose_image, decompose_svg
from breakapart.engine.layout import LayoutSession
from breakapart.engine.style import ResolvedStyle, resolve_style

__all__ = [
    "DecomposeConfig",
    "LayoutSession",
    "ResolvedStyle",
    "decompose_image",
    "decompose_svg",
    "resolve_style",
]
