"""
Custom exceptions for Apollo project configuration.

Normalization never raises: it only fills in defaults. Everything below is
raised while loading a config source or resolving schemas and document sets.
"""

from __future__ import annotations

from typing import Optional, Sequence


class ApolloConfigError(Exception):
    """Base exception for all configuration errors."""
    pass


class UnsupportedConfigFormat(ApolloConfigError):
    """Raised when a config source file has an unrecognized extension."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Unsupported config file format: {path}")


class ConfigError(ApolloConfigError):
    """Raised when a config source cannot be read or has the wrong shape."""
    pass


class UnknownSchemaReference(ApolloConfigError):
    """Raised when a schema, extends or document set reference names an unknown schema."""

    def __init__(self, name: Optional[str], referrer: Optional[str] = None):
        self.name = name
        self.referrer = referrer
        where = f" (referenced by {referrer})" if referrer else ""
        super().__init__(f"Unknown schema '{name}'{where}")


class CyclicExtension(ApolloConfigError):
    """Raised when an extends chain revisits a schema."""

    def __init__(self, chain: Sequence[str]):
        self.chain = list(chain)
        super().__init__(f"Cyclic schema extension: {' -> '.join(self.chain)}")


class PatternError(ApolloConfigError):
    """Raised when a glob pattern is rejected by the matcher."""

    def __init__(self, pattern: object, message: str = "invalid glob pattern"):
        self.pattern = pattern
        super().__init__(f"{message}: {pattern!r}")


class SchemaFileNotFound(ApolloConfigError):
    """Raised when a schema dependency needs a schema file that is missing."""

    def __init__(self, path: Optional[str], schema: Optional[str] = None):
        self.path = path
        self.schema = schema
        if path is None:
            super().__init__(f"Schema '{schema}' has no schema file")
        else:
            super().__init__(f"Schema file not found: {path}")


class IntrospectionError(ApolloConfigError):
    """Raised when an introspection request fails."""

    def __init__(self, source: str, message: str, status_code: int = 0):
        self.source = source
        self.status_code = status_code
        super().__init__(f"Introspection from '{source}' failed: {message}")
