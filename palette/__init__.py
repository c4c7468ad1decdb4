"""Palette: backend for shared two-person diaries."""

__version__ = "0.1.0"
