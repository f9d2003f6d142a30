"""
Documents module - glob expansion and document set resolution.
"""

from __future__ import annotations

from .globbing import expand, matches, validate_pattern
from .resolver import resolve_document_set, resolve_document_sets, schema_paths_for

__all__ = [
    "expand",
    "matches",
    "validate_pattern",
    "resolve_document_set",
    "resolve_document_sets",
    "schema_paths_for",
]
