"""
SDL document loading and client-only field marking.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional

from graphql import (
    DirectiveDefinitionNode,
    DirectiveNode,
    DocumentNode,
    FieldDefinitionNode,
    GraphQLError,
    GraphQLSchema,
    NameNode,
    Source,
    Visitor,
    parse,
    visit,
)

from ..core.errors import ConfigError, SchemaFileNotFound

CLIENT_DIRECTIVE = "client"

_CLIENT_DIRECTIVE_DEFINITION = parse(
    f"directive @{CLIENT_DIRECTIVE} on FIELD_DEFINITION"
).definitions[0]


def load_document(path: Path | str) -> DocumentNode:
    """
    Parse a GraphQL SDL file.

    Raises:
        SchemaFileNotFound: If the file does not exist
        ConfigError: If the file is not valid GraphQL
    """
    path = Path(path)
    try:
        body = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise SchemaFileNotFound(str(path)) from e

    try:
        return parse(Source(body, str(path)))
    except GraphQLError as e:
        raise ConfigError(f"Invalid GraphQL in {path}: {e.message}") from e


def load_documents(paths: Iterable[Path | str]) -> list[DocumentNode]:
    return [load_document(path) for path in paths]


def is_client_field(node: FieldDefinitionNode) -> bool:
    return any(d.name.value == CLIENT_DIRECTIVE for d in node.directives or ())


class _ClientFieldMarker(Visitor):
    def enter_field_definition(self, node: FieldDefinitionNode, *_args) -> Optional[FieldDefinitionNode]:
        if is_client_field(node):
            return None
        return FieldDefinitionNode(
            name=node.name,
            description=node.description,
            arguments=node.arguments,
            type=node.type,
            directives=(
                *(node.directives or ()),
                DirectiveNode(name=NameNode(value=CLIENT_DIRECTIVE), arguments=()),
            ),
            loc=node.loc,
        )


def mark_client_fields(document: DocumentNode) -> DocumentNode:
    """
    Return a copy of `document` where every field definition carries `@client`.

    The input document is left untouched.
    """
    return visit(document, _ClientFieldMarker())


def ensure_client_directive(
    document: DocumentNode, base_schema: Optional[GraphQLSchema] = None
) -> DocumentNode:
    """Add the `@client` directive definition unless the document or base declares it."""
    if base_schema is not None and base_schema.get_directive(CLIENT_DIRECTIVE) is not None:
        return document
    for definition in document.definitions:
        if isinstance(definition, DirectiveDefinitionNode) and definition.name.value == CLIENT_DIRECTIVE:
            return document

    return DocumentNode(
        definitions=(_CLIENT_DIRECTIVE_DEFINITION, *document.definitions),
        loc=document.loc,
    )
