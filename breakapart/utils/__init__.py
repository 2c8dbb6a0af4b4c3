"""Leaf helpers. No engine imports."""
