"""
Denormalizer CLI - command line tools for inspecting schemas.
"""

from __future__ import annotations

from .main import main, app

__all__ = ["main", "app"]
