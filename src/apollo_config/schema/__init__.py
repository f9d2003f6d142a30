"""
Schema module - SDL loading, introspection and schema resolution.
"""

from __future__ import annotations

from .documents import (
    CLIENT_DIRECTIVE,
    ensure_client_directive,
    is_client_field,
    load_document,
    load_documents,
    mark_client_fields,
)
from .introspection import IntrospectionLoader, service_id_from_key, unwrap_introspection
from .resolver import SchemaResolver, extension_chain, resolve_schema

__all__ = [
    # Documents
    "CLIENT_DIRECTIVE",
    "ensure_client_directive",
    "is_client_field",
    "load_document",
    "load_documents",
    "mark_client_fields",
    # Introspection
    "IntrospectionLoader",
    "service_id_from_key",
    "unwrap_introspection",
    # Resolution
    "SchemaResolver",
    "extension_chain",
    "resolve_schema",
]
