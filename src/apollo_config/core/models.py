"""
Pydantic models for the canonical project configuration.

Field aliases are the keys users write in their config source:

    {
        "schemas": {
            "api": {"endpoint": "https://example.com/graphql"},
            "client": {"schema": "src/client.graphql", "clientSide": true, "extends": "api"}
        },
        "queries": [{"schema": "client", "includes": "src/**/*.graphql"}]
    }

All models are frozen once normalization has produced them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from graphql import GraphQLSchema
from pydantic import BaseModel, ConfigDict, Field

from .errors import UnknownSchemaReference

DEFAULT_ENDPOINT_URL = "http://localhost:4000/graphql"
DEFAULT_INCLUDES = ["**"]
DEFAULT_EXCLUDES = ["node_modules/**"]


class EndpointConfig(BaseModel):
    """
    Network endpoint of a GraphQL service.

    Input: "https://example.com/graphql"
    Normalized: EndpointConfig(url="https://example.com/graphql",
                               subscriptions_url="wss://example.com/graphql")
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    url: Optional[str] = None
    subscriptions_url: Optional[str] = Field(default=None, alias="subscriptions")
    headers: Optional[Dict[str, str]] = None
    skip_ssl_validation: Optional[bool] = Field(default=None, alias="skipSSLValidation")


class SchemaDependency(BaseModel):
    """
    A named source of GraphQL type information.

    Type information comes from `schema_file_path`, from introspecting `endpoint`,
    or from the schema registry via `engine_key`. With `extends` set, the
    dependency only adds type definitions on top of the resolved base schema.
    Unknown raw keys are kept as extra attributes.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    schema_file_path: Optional[str] = Field(default=None, alias="schema")
    endpoint: Optional[EndpointConfig] = None
    engine_key: Optional[str] = Field(default=None, alias="engineKey")
    extends: Optional[str] = None
    client_side: Optional[bool] = Field(default=None, alias="clientSide")


class DocumentSet(BaseModel):
    """Pattern-defined collection of operation documents tied to a schema."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    schema_name: Optional[str] = Field(default=None, alias="schema")
    includes: List[str] = Field(default_factory=lambda: list(DEFAULT_INCLUDES))
    excludes: List[str] = Field(default_factory=lambda: list(DEFAULT_EXCLUDES))


class ApolloConfig(BaseModel):
    """Canonical project configuration produced by `load_config`."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    config_file: str
    project_folder: str
    name: Optional[str] = None
    schemas: Dict[str, SchemaDependency] = Field(default_factory=dict)
    queries: List[DocumentSet] = Field(default_factory=list)
    engine_endpoint: Optional[str] = Field(default=None, alias="engineEndpoint")

    def get_schema(self, name: Optional[str], referrer: Optional[str] = None) -> SchemaDependency:
        """
        Look up a schema dependency by name.

        Raises:
            UnknownSchemaReference: If `name` is not a key of `schemas`
        """
        if name is None or name not in self.schemas:
            raise UnknownSchemaReference(name, referrer)
        return self.schemas[name]

    def to_dict(self) -> dict[str, Any]:
        """Convert config to a dictionary keyed the way users write it."""
        return self.model_dump(by_alias=True, exclude_none=True)


@dataclass
class ResolvedDocumentSet:
    """
    A document set ready for use.

    Contains:
    - schema: Resolved schema, None when not requested or unavailable
    - endpoint / engine_key: Taken from the associated schema dependency
    - document_paths: Sorted, deduplicated absolute paths of operation documents
    - original_set: The document set this was resolved from
    """
    original_set: DocumentSet
    document_paths: list[str] = field(default_factory=list)
    schema: Optional[GraphQLSchema] = None
    endpoint: Optional[EndpointConfig] = None
    engine_key: Optional[str] = None
