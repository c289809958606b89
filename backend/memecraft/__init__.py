"""Memecraft - meme studio backend."""

__version__ = "1.0.0"
