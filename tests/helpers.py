"""Test helpers shared across test modules."""

from __future__ import annotations

import asyncio
from typing import Optional

from graphql import build_schema, introspection_from_schema

from apollo_config.core.models import ApolloConfig, SchemaDependency


def introspect(sdl: str) -> dict:
    """Introspection result for an SDL string."""
    return dict(introspection_from_schema(build_schema(sdl)))


class FakeIntrospectionLoader:
    """Introspection source returning canned results per schema name."""

    def __init__(self, results: Optional[dict[str, Optional[dict]]] = None):
        self.results = results or {}
        self.calls: list[tuple[SchemaDependency, Optional[str]]] = []

    async def load(self, dependency, config: ApolloConfig, tag=None):
        self.calls.append((dependency, tag))
        for name, candidate in config.schemas.items():
            if candidate is dependency:
                return self.results.get(name)
        return None


class SlowIntrospectionLoader(FakeIntrospectionLoader):
    """FakeIntrospectionLoader that yields to the event loop before answering."""

    def __init__(self, results: Optional[dict[str, Optional[dict]]] = None, delay: float = 0.01):
        super().__init__(results)
        self.delay = delay

    async def load(self, dependency, config: ApolloConfig, tag=None):
        await asyncio.sleep(self.delay)
        return await super().load(dependency, config, tag)
