"""SVG intake — data URLs, normalization, parsing and attribute readers."""
