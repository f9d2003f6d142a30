"""
Apollo Config CLI - inspect how a project config resolves.
"""

from __future__ import annotations

from .main import main, app

__all__ = ["main", "app"]
