"""
Normalization of raw project configuration into the canonical models.

Raw input is whatever the config source contained: strings where objects are
expected, missing keys, single patterns instead of lists. These functions only
fill in defaults; they never reject a reference or a pattern. Broken references
surface later, during resolution.

Usage:
    config = load_config(
        {"services": {"api": "https://example.com/graphql"}},
        config_file="/project/apollo.config.yaml",
        project_folder="/project",
    )
"""

from __future__ import annotations

import logging
import os
from typing import Any, Mapping, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..core.errors import ConfigError
from ..core.models import (
    DEFAULT_ENDPOINT_URL,
    DEFAULT_EXCLUDES,
    DEFAULT_INCLUDES,
    ApolloConfig,
    DocumentSet,
    EndpointConfig,
    SchemaDependency,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

DEFAULT_SCHEMA_NAME = "default"
DEFAULT_BASE_SCHEMA_NAME = "default-base"


def _validate(model: Type[ModelT], data: Mapping[str, Any]) -> ModelT:
    try:
        return model.model_validate(dict(data))
    except PydanticValidationError as e:
        raise ConfigError(f"Invalid {model.__name__}: {e}") from e


def derive_subscriptions_url(url: str) -> str:
    """Replace the first "http" in `url` with "ws" (https -> wss)."""
    return url.replace("http", "ws", 1)


def load_endpoint_config(raw: Any, should_default_url: bool) -> Optional[EndpointConfig]:
    """
    Normalize an endpoint declaration.

    Args:
        raw: URL string, partial endpoint mapping, EndpointConfig or None
        should_default_url: Fall back to the local development endpoint when absent

    Returns:
        EndpointConfig with `subscriptions_url` derived from `url` when missing,
        or None when there is no endpoint
    """
    if isinstance(raw, str):
        endpoint = EndpointConfig(url=raw)
    elif isinstance(raw, EndpointConfig):
        endpoint = raw
    elif isinstance(raw, Mapping):
        endpoint = _validate(EndpointConfig, raw)
    elif should_default_url:
        endpoint = EndpointConfig(url=DEFAULT_ENDPOINT_URL)
    else:
        return None

    if endpoint.url and not endpoint.subscriptions_url:
        endpoint = endpoint.model_copy(
            update={"subscriptions_url": derive_subscriptions_url(endpoint.url)}
        )
    return endpoint


def load_schema_config(
    raw: Any,
    default_endpoint: bool,
    credential_override: Optional[str] = None,
) -> SchemaDependency:
    """
    Normalize a schema dependency declaration.

    The endpoint is defaulted only when `default_endpoint` is set and the raw
    dependency carries no engine key of its own. `credential_override` replaces
    any configured engine key. Other raw keys pass through unchanged.
    A bare string is shorthand for `{"endpoint": <string>}`.

    Raises:
        ConfigError: If `raw` is neither a mapping nor a string
    """
    if isinstance(raw, str):
        raw = {"endpoint": raw}
    elif raw is not None and not isinstance(raw, Mapping):
        raise ConfigError(
            f"Schema dependency must be a mapping or an endpoint URL, got {type(raw).__name__}"
        )
    data = dict(raw or {})
    raw_endpoint = data.pop("endpoint", None)
    dependency = _validate(SchemaDependency, data)

    return dependency.model_copy(
        update={
            "endpoint": load_endpoint_config(
                raw_endpoint, default_endpoint and not dependency.engine_key
            ),
            "engine_key": credential_override or dependency.engine_key,
        }
    )


def _as_patterns(value: Any, default: Sequence[str]) -> list[str]:
    if value is None:
        return list(default)
    if isinstance(value, str):
        return [value]
    return list(value)


def load_document_set(raw: Any) -> DocumentSet:
    """
    Normalize a document set declaration.

    A bare string is an include pattern. Single-string `includes`/`excludes`
    become one-element lists; missing ones get the defaults.
    """
    if isinstance(raw, DocumentSet):
        return raw
    if isinstance(raw, str):
        raw = {"includes": raw}
    data = dict(raw or {})

    return _validate(
        DocumentSet,
        {
            "schema": data.get("schema"),
            "includes": _as_patterns(data.get("includes"), DEFAULT_INCLUDES),
            "excludes": _as_patterns(data.get("excludes"), DEFAULT_EXCLUDES),
        },
    )


def is_url(maybe_url: Any) -> bool:
    return isinstance(maybe_url, str) and "http" in maybe_url


def is_file(maybe_file: Any, project_folder: Optional[str] = None) -> bool:
    if not isinstance(maybe_file, str) or not maybe_file or is_url(maybe_file):
        return False
    return os.path.isfile(os.path.join(project_folder or os.curdir, maybe_file))


def get_schemas_from_services(
    raw: Mapping[str, Any],
    *,
    default_endpoint: bool,
    default_schema: bool,
    project_folder: Optional[str] = None,
    credential_override: Optional[str] = None,
) -> dict[str, SchemaDependency]:
    """
    Build the schema dependency mapping from a raw config.

    Sources, in order:
    - `schemas`: explicit mapping of name -> raw dependency
    - `services`: shorthand {name: url-or-file}; only the first entry is honored
    - a synthesized `default` dependency when nothing else declared one
    - `clientSchema`: a client-side `default` schema extending the first schema above
    """
    schemas: dict[str, SchemaDependency] = {}

    for name, dependency in (raw.get("schemas") or {}).items():
        schemas[name] = load_schema_config(dependency, default_endpoint, credential_override)

    services = raw.get("services")
    if services:
        entries = list(services.items())
        if len(entries) > 1:
            ignored = [name for name, _ in entries[1:]]
            logger.warning(f"Only the first service is used, ignoring: {ignored}")

        service_name, schema_ref = entries[0]
        schemas[service_name] = SchemaDependency(
            endpoint=load_endpoint_config(schema_ref, True) if is_url(schema_ref) else None,
            engine_key=credential_override,
            client_side=False,
            schema_file_path=schema_ref if is_file(schema_ref, project_folder) else None,
        )

    if not schemas and default_schema:
        schemas[DEFAULT_SCHEMA_NAME] = load_schema_config({}, default_endpoint, credential_override)

    client_schema = raw.get("clientSchema")
    if client_schema:
        base = next(iter(schemas), None)
        if base == DEFAULT_SCHEMA_NAME:
            # The client schema takes over "default"; keep its base reachable
            schemas[DEFAULT_BASE_SCHEMA_NAME] = schemas.pop(DEFAULT_SCHEMA_NAME)
            base = DEFAULT_BASE_SCHEMA_NAME

        schemas[DEFAULT_SCHEMA_NAME] = SchemaDependency(
            schema_file_path=client_schema,
            client_side=True,
            extends=base,
        )

    return schemas


def load_config(
    raw: Optional[Mapping[str, Any]],
    config_file: str,
    project_folder: str,
    default_endpoint: bool = True,
    default_schema: bool = True,
    credential_override: Optional[str] = None,
) -> ApolloConfig:
    """
    Assemble the canonical configuration.

    Args:
        raw: Raw config mapping (None is treated as empty)
        config_file: Path of the config source
        project_folder: Project root; its base name becomes the config name
        default_endpoint: Default schema endpoints to the local development server
        default_schema: Synthesize a `default` schema when none is declared
        credential_override: Engine key that replaces every configured one

    Returns:
        ApolloConfig, with an implicit document set when `queries` is absent
        and exactly one schema is declared (or only `default` over `default-base`)
    """
    raw = raw or {}
    schemas = get_schemas_from_services(
        raw,
        default_endpoint=default_endpoint,
        default_schema=default_schema,
        project_folder=project_folder,
        credential_override=credential_override,
    )

    raw_queries = raw.get("queries")
    if raw_queries is not None:
        queries = list(raw_queries) if isinstance(raw_queries, (list, tuple)) else [raw_queries]
    elif len(schemas) == 1:
        queries = [{"schema": next(iter(schemas))}]
    elif set(schemas) == {DEFAULT_SCHEMA_NAME, DEFAULT_BASE_SCHEMA_NAME}:
        # Only clientSchema over the synthesized default
        queries = [{"schema": DEFAULT_SCHEMA_NAME}]
    else:
        queries = []

    config = ApolloConfig(
        config_file=str(config_file),
        project_folder=str(project_folder),
        name=os.path.basename(os.path.normpath(str(project_folder))),
        schemas=schemas,
        queries=[load_document_set(query) for query in queries],
        engine_endpoint=raw.get("engineEndpoint"),
    )
    logger.debug(
        f"Loaded config '{config.name}': schemas={list(config.schemas)}, "
        f"document sets={len(config.queries)}"
    )
    return config
