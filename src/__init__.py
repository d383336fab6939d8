# src/__init__.py - v1
"""Kaiville research formatting pipeline."""

from kaiville_research.version import __version__

__all__ = ["__version__"]
