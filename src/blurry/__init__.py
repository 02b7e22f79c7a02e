"""Blurry image placeholders for AMP-style HTML documents."""

__version__ = "0.1.0"
