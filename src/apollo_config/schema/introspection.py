"""
Introspection loading for schema dependencies.

Obtains an introspection result ({"__schema": {...}}) for a dependency from,
in order of preference:
- a local introspection JSON file or SDL file (`schema`)
- the GraphQL endpoint (`endpoint.url`)
- the schema registry (`engineKey`), for a given tag
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

import httpx
from graphql import (
    GraphQLError,
    build_ast_schema,
    get_introspection_query,
    introspection_from_schema,
)

from ..core.errors import ConfigError, IntrospectionError, SchemaFileNotFound
from ..core.models import ApolloConfig, SchemaDependency
from ..settings import DEFAULT_ENGINE_ENDPOINT
from .documents import load_document

logger = logging.getLogger(__name__)

SDL_SUFFIXES = (".graphql", ".graphqls", ".gql")
DEFAULT_TAG = "current"

ENGINE_SCHEMA_QUERY = """
query SchemaByTag($id: ID!, $tag: String!) {
  service(id: $id) {
    schema(tag: $tag) {
      hash
      __schema: introspection {
        queryType { name }
        mutationType { name }
        subscriptionType { name }
        types(filter: { includeBuiltInTypes: false }) { ...IntrospectionFullType }
        directives {
          name
          description
          locations
          args { ...IntrospectionInputValue }
        }
      }
    }
  }
}

fragment IntrospectionFullType on IntrospectionType {
  kind
  name
  description
  fields {
    name
    description
    args { ...IntrospectionInputValue }
    type { ...IntrospectionTypeRef }
    isDeprecated
    deprecationReason
  }
  inputFields { ...IntrospectionInputValue }
  interfaces { ...IntrospectionTypeRef }
  enumValues(includeDeprecated: true) {
    name
    description
    isDeprecated
    deprecationReason
  }
  possibleTypes { ...IntrospectionTypeRef }
}

fragment IntrospectionInputValue on IntrospectionInputValue {
  name
  description
  type { ...IntrospectionTypeRef }
  defaultValue
}

fragment IntrospectionTypeRef on IntrospectionType {
  kind
  name
  ofType {
    kind
    name
    ofType {
      kind
      name
      ofType {
        kind
        name
        ofType {
          kind
          name
          ofType {
            kind
            name
            ofType { kind name ofType { kind name } }
          }
        }
      }
    }
  }
}
"""


def service_id_from_key(engine_key: str) -> Optional[str]:
    """Extract the service id from a "service:<id>:<secret>" key."""
    parts = engine_key.split(":")
    if len(parts) >= 3 and parts[0] == "service":
        return parts[1]
    return None


def unwrap_introspection(data: Any) -> Optional[dict[str, Any]]:
    """Accept {"data": {"__schema"}} or {"__schema"}; return {"__schema": ...}."""
    if isinstance(data, dict) and isinstance(data.get("data"), dict):
        data = data["data"]
    if isinstance(data, dict) and data.get("__schema"):
        return {"__schema": data["__schema"]}
    return None


class IntrospectionLoader:
    """
    Loads introspection results for schema dependencies.

    Usage:
        async with IntrospectionLoader() as loader:
            result = await loader.load(config.schemas["api"], config)
    """

    def __init__(
        self,
        timeout: float = 30.0,
        engine_endpoint: str = DEFAULT_ENGINE_ENDPOINT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize introspection loader.

        Args:
            timeout: HTTP request timeout in seconds
            engine_endpoint: Schema registry used when a config sets none
            transport: Custom httpx transport (used by tests)
        """
        self.timeout = timeout
        self.engine_endpoint = engine_endpoint
        self.transport = transport
        self._clients: dict[bool, httpx.AsyncClient] = {}

    async def __aenter__(self) -> "IntrospectionLoader":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def _get_client(self, verify: bool = True) -> httpx.AsyncClient:
        """Get or create async HTTP client."""
        client = self._clients.get(verify)
        if client is None:
            client = httpx.AsyncClient(
                timeout=self.timeout,
                verify=verify,
                transport=self.transport,
            )
            self._clients[verify] = client
        return client

    async def close(self):
        """Close the HTTP clients."""
        for client in self._clients.values():
            await client.aclose()
        self._clients = {}

    async def load(
        self,
        dependency: SchemaDependency,
        config: ApolloConfig,
        tag: Optional[str] = None,
    ) -> Optional[dict[str, Any]]:
        """
        Load an introspection result for a dependency.

        Returns:
            {"__schema": {...}}, or None when no source is available

        Raises:
            IntrospectionError: If a request fails or returns GraphQL errors
            SchemaFileNotFound: If the schema file does not exist
        """
        if dependency.schema_file_path:
            path = Path(config.project_folder) / dependency.schema_file_path
            return self._load_from_file(path)

        if dependency.endpoint and dependency.endpoint.url:
            return await self._load_from_endpoint(dependency)

        if dependency.engine_key:
            return await self._load_from_engine(
                dependency.engine_key,
                config.engine_endpoint or self.engine_endpoint,
                tag or DEFAULT_TAG,
            )

        logger.info("Schema dependency has no schema file, endpoint or engine key")
        return None

    def _load_from_file(self, path: Path) -> Optional[dict[str, Any]]:
        if path.suffix in SDL_SUFFIXES:
            document = load_document(path)
            try:
                return dict(introspection_from_schema(build_ast_schema(document)))
            except (GraphQLError, TypeError) as e:
                raise ConfigError(f"Invalid schema in {path}: {e}") from e

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError as e:
            raise SchemaFileNotFound(str(path)) from e
        except ValueError as e:
            raise ConfigError(f"Invalid introspection JSON in {path}: {e}") from e

        introspection = unwrap_introspection(data)
        if introspection is None:
            raise ConfigError(f"No __schema found in {path}")
        return introspection

    async def _post(
        self,
        url: str,
        payload: dict[str, Any],
        headers: Optional[dict[str, str]] = None,
        verify: bool = True,
    ) -> dict[str, Any]:
        client = await self._get_client(verify)

        try:
            response = await client.post(url, json=payload, headers=headers or {})
        except httpx.RequestError as e:
            raise IntrospectionError(source=url, message=str(e)) from e

        if response.status_code != 200:
            raise IntrospectionError(
                source=url,
                message=response.text,
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise IntrospectionError(source=url, message=f"Invalid JSON response: {e}") from e

        if data.get("errors"):
            messages = [error.get("message", str(error)) for error in data["errors"]]
            raise IntrospectionError(source=url, message="; ".join(messages))
        return data

    async def _load_from_endpoint(self, dependency: SchemaDependency) -> Optional[dict[str, Any]]:
        endpoint = dependency.endpoint
        logger.debug(f"Introspecting {endpoint.url}")

        data = await self._post(
            endpoint.url,
            {"query": get_introspection_query(descriptions=True)},
            headers=endpoint.headers,
            verify=not endpoint.skip_ssl_validation,
        )
        introspection = unwrap_introspection(data)
        if introspection is None:
            raise IntrospectionError(source=endpoint.url, message="Response has no __schema")
        return introspection

    async def _load_from_engine(
        self, engine_key: str, engine_endpoint: str, tag: str
    ) -> Optional[dict[str, Any]]:
        service_id = service_id_from_key(engine_key)
        if service_id is None:
            logger.info("Engine key is not a service key, cannot fetch schema")
            return None

        logger.debug(f"Fetching schema for service '{service_id}' tag '{tag}' from {engine_endpoint}")
        data = await self._post(
            engine_endpoint,
            {"query": ENGINE_SCHEMA_QUERY, "variables": {"id": service_id, "tag": tag}},
            headers={"x-api-key": engine_key},
        )

        service = (data.get("data") or {}).get("service") or {}
        schema = service.get("schema") or {}
        if not schema.get("__schema"):
            logger.info(f"No schema registered for service '{service_id}' with tag '{tag}'")
            return None
        return {"__schema": schema["__schema"]}
