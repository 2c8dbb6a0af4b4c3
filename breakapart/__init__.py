"""Break apart embedded SVG images into native drawing shapes."""

__version__ = "0.1.0"
