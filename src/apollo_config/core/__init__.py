"""
Core module - canonical models and errors.
"""

from __future__ import annotations

from .errors import (
    ApolloConfigError,
    ConfigError,
    CyclicExtension,
    IntrospectionError,
    PatternError,
    SchemaFileNotFound,
    UnknownSchemaReference,
    UnsupportedConfigFormat,
)
from .models import (
    DEFAULT_ENDPOINT_URL,
    DEFAULT_EXCLUDES,
    DEFAULT_INCLUDES,
    ApolloConfig,
    DocumentSet,
    EndpointConfig,
    ResolvedDocumentSet,
    SchemaDependency,
)

__all__ = [
    # Models
    "ApolloConfig",
    "DocumentSet",
    "EndpointConfig",
    "ResolvedDocumentSet",
    "SchemaDependency",
    "DEFAULT_ENDPOINT_URL",
    "DEFAULT_INCLUDES",
    "DEFAULT_EXCLUDES",
    # Errors
    "ApolloConfigError",
    "ConfigError",
    "CyclicExtension",
    "IntrospectionError",
    "PatternError",
    "SchemaFileNotFound",
    "UnknownSchemaReference",
    "UnsupportedConfigFormat",
]
