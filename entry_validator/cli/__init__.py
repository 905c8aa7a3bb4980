"""Command-line interface (``entry-validator``)."""

from .__main__ import main

__all__ = ["main"]
