"""
Schema resolution along `extends` chains.

A terminal dependency (no `extends`) is built either from its own SDL
(`clientSide`) or from an introspection result. Every extending dependency
loads its SDL and applies it as an extension over its resolved base:

    base (introspection) -> api extension -> client extension (@client fields)
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional, Protocol

from graphql import (
    DocumentNode,
    GraphQLError,
    GraphQLSchema,
    build_ast_schema,
    build_client_schema,
    extend_schema,
)

from ..core.errors import ConfigError, CyclicExtension, SchemaFileNotFound
from ..core.models import ApolloConfig, SchemaDependency
from .documents import ensure_client_directive, load_documents, mark_client_fields
from .introspection import IntrospectionLoader

logger = logging.getLogger(__name__)


class IntrospectionSource(Protocol):
    async def load(
        self, dependency: SchemaDependency, config: ApolloConfig, tag: Optional[str] = None
    ) -> Optional[dict]:
        ...


def extension_chain(config: ApolloConfig, name: str) -> list[str]:
    """
    Names along the `extends` chain, from `name` to its terminal schema.

    Raises:
        UnknownSchemaReference: If a name in the chain is not declared
        CyclicExtension: If the chain revisits a name
    """
    chain: list[str] = []
    referrer: Optional[str] = None
    current: Optional[str] = name

    while current is not None:
        if current in chain:
            raise CyclicExtension([*chain, current])
        dependency = config.get_schema(current, referrer)
        chain.append(current)
        referrer, current = current, dependency.extends

    return chain


class SchemaResolver:
    """
    Resolves schema dependencies of one config into GraphQL schemas.

    Results are memoized per (name, tag) for the lifetime of the resolver;
    concurrent requests for the same key share one resolution.

    Usage:
        async with SchemaResolver(config) as resolver:
            schema = await resolver.resolve("client", tag="prod")
    """

    def __init__(self, config: ApolloConfig, loader: Optional[IntrospectionSource] = None):
        self.config = config
        self._owns_loader = loader is None
        self.loader = loader if loader is not None else IntrospectionLoader()
        self._cache: dict[tuple[str, Optional[str]], asyncio.Task] = {}

    async def __aenter__(self) -> "SchemaResolver":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self):
        """Close the introspection loader if this resolver created it."""
        if self._owns_loader and isinstance(self.loader, IntrospectionLoader):
            await self.loader.close()

    async def resolve(self, name: str, tag: Optional[str] = None) -> Optional[GraphQLSchema]:
        """
        Resolve a schema dependency by name.

        Returns:
            The schema, or None when the terminal schema is unavailable

        Raises:
            UnknownSchemaReference: If `name` or an `extends` target is unknown
            CyclicExtension: If the `extends` chain has a cycle
            SchemaFileNotFound: If a client or extension schema file is missing
            IntrospectionError: If fetching an introspection result fails
        """
        chain = extension_chain(self.config, name)
        return await self._resolve(chain, tag)

    async def _resolve(self, chain: list[str], tag: Optional[str]) -> Optional[GraphQLSchema]:
        key = (chain[0], tag)
        task = self._cache.get(key)
        if task is None:
            # Concurrent callers await the same pending resolution
            task = asyncio.ensure_future(self._resolve_uncached(chain, tag))
            self._cache[key] = task
        return await task

    async def _resolve_uncached(self, chain: list[str], tag: Optional[str]) -> Optional[GraphQLSchema]:
        name = chain[0]
        dependency = self.config.schemas[name]
        if dependency.extends:
            document = self._load_ast(name, dependency)
            base = await self._resolve(chain[1:], tag)
            if base is None:
                logger.info(f"Schema '{name}' unavailable: base '{dependency.extends}' unavailable")
                schema = None
            else:
                schema = self._extend(name, base, document, dependency)
        elif dependency.client_side:
            schema = self._build(name, ensure_client_directive(self._load_ast(name, dependency)))
        else:
            introspection = await self.loader.load(dependency, self.config, tag)
            if introspection is None:
                logger.info(f"Schema '{name}' unavailable: no introspection result")
                schema = None
            else:
                schema = self._build_from_introspection(name, introspection)

        logger.debug(f"Resolved schema '{name}' (tag={tag})")
        return schema

    def _load_ast(self, name: str, dependency: SchemaDependency) -> DocumentNode:
        if not dependency.schema_file_path:
            raise SchemaFileNotFound(None, schema=name)

        path = Path(self.config.project_folder) / dependency.schema_file_path
        document = load_documents([path])[0]
        if dependency.client_side:
            document = mark_client_fields(document)
        return document

    def _extend(
        self,
        name: str,
        base: GraphQLSchema,
        document: DocumentNode,
        dependency: SchemaDependency,
    ) -> GraphQLSchema:
        if dependency.client_side:
            document = ensure_client_directive(document, base)
        try:
            return extend_schema(base, document)
        except (GraphQLError, TypeError) as e:
            raise ConfigError(f"Cannot extend '{dependency.extends}' with schema '{name}': {e}") from e

    def _build(self, name: str, document: DocumentNode) -> GraphQLSchema:
        try:
            return build_ast_schema(document)
        except (GraphQLError, TypeError) as e:
            raise ConfigError(f"Cannot build schema '{name}': {e}") from e

    def _build_from_introspection(self, name: str, introspection: dict) -> GraphQLSchema:
        try:
            return build_client_schema(introspection)
        except (GraphQLError, TypeError) as e:
            raise ConfigError(f"Invalid introspection result for schema '{name}': {e}") from e


async def resolve_schema(
    name: str,
    config: ApolloConfig,
    tag: Optional[str] = None,
    *,
    loader: Optional[IntrospectionSource] = None,
) -> Optional[GraphQLSchema]:
    """One-shot schema resolution; see SchemaResolver.resolve."""
    async with SchemaResolver(config, loader) as resolver:
        return await resolver.resolve(name, tag)
