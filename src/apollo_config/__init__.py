"""
Apollo Config - GraphQL project configuration resolution.

Turns a declarative project config (schemas, services, client schema,
operation document sets) into:
- concrete GraphQL schemas, resolved along `extends` chains
- concrete lists of operation document files per document set
- the endpoint and engine key needed to talk to a live service

Usage:
    from apollo_config import Settings, find_and_load_config, resolve_document_sets

    settings = Settings()
    config = find_and_load_config(".", credential_override=settings.credential_override)
    document_sets = await resolve_document_sets(config, need_schema=True)
"""

from __future__ import annotations

from .config import (
    find_and_load_config,
    load_config,
    load_config_from_file,
    load_document_set,
    load_endpoint_config,
    load_schema_config,
)
from .core import (
    ApolloConfig,
    ApolloConfigError,
    ConfigError,
    CyclicExtension,
    DocumentSet,
    EndpointConfig,
    IntrospectionError,
    PatternError,
    ResolvedDocumentSet,
    SchemaDependency,
    SchemaFileNotFound,
    UnknownSchemaReference,
    UnsupportedConfigFormat,
)
from .documents import resolve_document_sets
from .schema import IntrospectionLoader, SchemaResolver, resolve_schema
from .settings import Settings

__version__ = "0.1.0"

__all__ = [
    # Models
    "ApolloConfig",
    "DocumentSet",
    "EndpointConfig",
    "ResolvedDocumentSet",
    "SchemaDependency",
    # Errors
    "ApolloConfigError",
    "ConfigError",
    "CyclicExtension",
    "IntrospectionError",
    "PatternError",
    "SchemaFileNotFound",
    "UnknownSchemaReference",
    "UnsupportedConfigFormat",
    # Config
    "find_and_load_config",
    "load_config",
    "load_config_from_file",
    "load_document_set",
    "load_endpoint_config",
    "load_schema_config",
    # Resolution
    "IntrospectionLoader",
    "SchemaResolver",
    "resolve_schema",
    "resolve_document_sets",
    # Settings
    "Settings",
]
