"""
Document set resolution.

Each document set is resolved independently and concurrently:
1. look up its schema dependency (endpoint, engine key)
2. resolve the schema itself, only when requested
3. collect the schema files along the `extends` chain
4. expand include patterns into absolute paths
5. drop paths matching an exclude pattern or a schema file
"""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Iterable, Optional

from ..core.models import ApolloConfig, DocumentSet, ResolvedDocumentSet
from ..schema.resolver import IntrospectionSource, SchemaResolver, extension_chain
from .globbing import expand, matches, validate_pattern

logger = logging.getLogger(__name__)


def _project_relative(path: str, project_folder: str) -> str:
    if os.path.isabs(path):
        path = os.path.relpath(path, project_folder)
    return os.path.normpath(path).replace(os.sep, "/")


def schema_paths_for(config: ApolloConfig, name: Optional[str]) -> list[str]:
    """
    Schema files along the `extends` chain starting at `name`.

    Paths are relative to the project folder so they can be matched like
    exclude patterns.
    """
    if name is None:
        return []

    paths = []
    for link in extension_chain(config, name):
        schema_file = config.schemas[link].schema_file_path
        if schema_file:
            paths.append(_project_relative(schema_file, config.project_folder))
    return paths


def _expand_all(patterns: Iterable[str], root_dir: str) -> set[str]:
    found: set[str] = set()
    for pattern in patterns:
        found |= expand(pattern, root_dir)
    return found


async def resolve_document_set(
    config: ApolloConfig,
    document_set: DocumentSet,
    need_schema: bool,
    tag: Optional[str] = None,
    *,
    resolver: SchemaResolver,
    referrer: Optional[str] = None,
) -> ResolvedDocumentSet:
    """
    Resolve a single document set.

    Raises:
        UnknownSchemaReference: If the set (or its extends chain) names an unknown schema
        CyclicExtension: If the extends chain has a cycle
        PatternError: If an include or exclude pattern is rejected
    """
    schema_name = document_set.schema_name
    dependency = config.get_schema(schema_name, referrer) if schema_name else None

    schema = None
    if need_schema and schema_name:
        schema = await resolver.resolve(schema_name, tag)

    schema_paths = schema_paths_for(config, schema_name)
    excludes = [validate_pattern(pattern) for pattern in document_set.excludes] + schema_paths

    found = await asyncio.to_thread(_expand_all, document_set.includes, config.project_folder)
    document_paths = sorted(
        path
        for path in found
        if not any(
            matches(_project_relative(path, config.project_folder), pattern)
            for pattern in excludes
        )
    )
    logger.debug(
        f"Document set for schema '{schema_name}': {len(document_paths)} of {len(found)} files kept"
    )

    return ResolvedDocumentSet(
        original_set=document_set,
        document_paths=document_paths,
        schema=schema,
        endpoint=dependency.endpoint if dependency else None,
        engine_key=dependency.engine_key if dependency else None,
    )


async def resolve_document_sets(
    config: ApolloConfig,
    need_schema: bool,
    tag: Optional[str] = None,
    *,
    loader: Optional[IntrospectionSource] = None,
) -> list[ResolvedDocumentSet]:
    """
    Resolve every document set of a config concurrently.

    Args:
        config: Canonical configuration
        need_schema: Also resolve each set's schema (network/file IO)
        tag: Schema registry tag passed to introspection
        loader: Introspection source; an IntrospectionLoader is created when omitted

    Returns:
        Resolved sets, in the order of `config.queries`
    """
    async with SchemaResolver(config, loader) as resolver:
        results = await asyncio.gather(
            *(
                resolve_document_set(
                    config,
                    document_set,
                    need_schema,
                    tag,
                    resolver=resolver,
                    referrer=f"queries[{index}]",
                )
                for index, document_set in enumerate(config.queries)
            )
        )
    return list(results)
