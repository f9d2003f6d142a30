"""
Tests for raw config normalization.

Covers:
- endpoint defaulting and subscriptions URL derivation
- schema dependency defaults and credential override
- document set pattern promotion and defaults
- services / clientSchema shorthand expansion
- config assembly and implicit document sets
"""

import logging

import pytest
from pydantic import ValidationError

from apollo_config.config.normalize import (
    derive_subscriptions_url,
    get_schemas_from_services,
    load_config,
    load_document_set,
    load_endpoint_config,
    load_schema_config,
)
from apollo_config.core.errors import ConfigError
from apollo_config.core.models import DEFAULT_ENDPOINT_URL, DocumentSet, EndpointConfig


# =============================================================================
# Endpoints
# =============================================================================


@pytest.mark.parametrize(
    "url, expected",
    [
        ("http://localhost:4000/graphql", "ws://localhost:4000/graphql"),
        ("https://api.example.com/graphql", "wss://api.example.com/graphql"),
        ("http://example.com/http", "ws://example.com/http"),
        ("HTTP://example.com/graphql", "HTTP://example.com/graphql"),
    ],
)
def test_string_endpoint_derives_subscriptions(url, expected):
    endpoint = load_endpoint_config(url, False)

    assert endpoint.url == url
    assert endpoint.subscriptions_url == expected


def test_mapping_endpoint_keeps_explicit_subscriptions():
    endpoint = load_endpoint_config(
        {
            "url": "https://example.com/graphql",
            "subscriptions": "wss://socket.example.com",
            "headers": {"Authorization": "Bearer x"},
            "skipSSLValidation": True,
        },
        False,
    )

    assert endpoint.subscriptions_url == "wss://socket.example.com"
    assert endpoint.headers == {"Authorization": "Bearer x"}
    assert endpoint.skip_ssl_validation is True


def test_mapping_without_url_has_no_subscriptions():
    endpoint = load_endpoint_config({"headers": {"a": "b"}}, True)

    assert endpoint.url is None
    assert endpoint.subscriptions_url is None


def test_absent_endpoint_defaults_to_local_server():
    endpoint = load_endpoint_config(None, True)

    assert endpoint == EndpointConfig(
        url=DEFAULT_ENDPOINT_URL, subscriptions_url="ws://localhost:4000/graphql"
    )


def test_absent_endpoint_without_default():
    assert load_endpoint_config(None, False) is None


def test_derive_subscriptions_url_replaces_first_occurrence_only():
    assert derive_subscriptions_url("http://http.example.com") == "ws://http.example.com"


def test_invalid_endpoint_shape_is_config_error():
    with pytest.raises(ConfigError):
        load_endpoint_config({"headers": "not-a-mapping"}, False)


# =============================================================================
# Schema dependencies
# =============================================================================


def test_schema_config_defaults_endpoint_without_engine_key():
    dependency = load_schema_config({}, True)

    assert dependency.endpoint.url == DEFAULT_ENDPOINT_URL
    assert dependency.engine_key is None


def test_schema_config_engine_key_disables_endpoint_default():
    dependency = load_schema_config({"engineKey": "service:app:secret"}, True)

    assert dependency.endpoint is None
    assert dependency.engine_key == "service:app:secret"


def test_schema_config_without_default_endpoint():
    assert load_schema_config({}, False).endpoint is None


def test_credential_override_wins_over_configured_key():
    dependency = load_schema_config({"engineKey": "service:app:mine"}, True, "service:app:env")

    assert dependency.engine_key == "service:app:env"
    # Endpoint defaulting looks at the configured key, not the override
    assert dependency.endpoint is None


def test_credential_override_fills_missing_key():
    dependency = load_schema_config({}, True, "service:app:env")

    assert dependency.engine_key == "service:app:env"
    assert dependency.endpoint.url == DEFAULT_ENDPOINT_URL


def test_string_schema_is_endpoint_shorthand():
    dependency = load_schema_config("https://api.example.com/graphql", True)

    assert dependency.endpoint.url == "https://api.example.com/graphql"
    assert dependency.endpoint.subscriptions_url == "wss://api.example.com/graphql"


@pytest.mark.parametrize("raw", [["http://api/graphql"], 42, True])
def test_non_mapping_schema_is_config_error(raw):
    with pytest.raises(ConfigError):
        load_schema_config(raw, True)


def test_string_entry_in_schemas_mapping(tmp_path):
    config = load_config(
        {"schemas": {"api": "http://api/graphql"}}, str(tmp_path), str(tmp_path)
    )

    assert config.schemas["api"].endpoint.url == "http://api/graphql"
    assert config.queries[0].schema_name == "api"


def test_schema_config_passes_fields_through():
    dependency = load_schema_config(
        {
            "schema": "schema.graphql",
            "extends": "base",
            "clientSide": True,
            "endpoint": "https://example.com/graphql",
            "custom": 42,
        },
        False,
    )

    assert dependency.schema_file_path == "schema.graphql"
    assert dependency.extends == "base"
    assert dependency.client_side is True
    assert dependency.endpoint.subscriptions_url == "wss://example.com/graphql"
    assert dependency.model_extra == {"custom": 42}


# =============================================================================
# Document sets
# =============================================================================


def test_document_set_defaults():
    assert load_document_set({}) == DocumentSet(
        schema_name=None, includes=["**"], excludes=["node_modules/**"]
    )


def test_document_set_promotes_strings():
    document_set = load_document_set(
        {"schema": "api", "includes": "src/**/*.graphql", "excludes": "src/generated/**"}
    )

    assert document_set.schema_name == "api"
    assert document_set.includes == ["src/**/*.graphql"]
    assert document_set.excludes == ["src/generated/**"]


def test_document_set_keeps_lists_and_empty_lists():
    document_set = load_document_set({"includes": ["a/**", "b/**"], "excludes": []})

    assert document_set.includes == ["a/**", "b/**"]
    assert document_set.excludes == []


def test_bare_string_document_set_is_an_include_pattern():
    document_set = load_document_set("operations/**/*.graphql")

    assert document_set.schema_name is None
    assert document_set.includes == ["operations/**/*.graphql"]
    assert document_set.excludes == ["node_modules/**"]


# =============================================================================
# Services / clientSchema shorthand
# =============================================================================


def test_url_service(tmp_path):
    schemas = get_schemas_from_services(
        {"services": {"api": "https://example.com/graphql"}},
        default_endpoint=True,
        default_schema=True,
        project_folder=str(tmp_path),
    )

    assert list(schemas) == ["api"]
    api = schemas["api"]
    assert api.endpoint.url == "https://example.com/graphql"
    assert api.endpoint.subscriptions_url == "wss://example.com/graphql"
    assert api.schema_file_path is None
    assert api.client_side is False


def test_file_service_resolves_relative_to_project(write_file, tmp_path):
    write_file("schema.json", "{}")

    schemas = get_schemas_from_services(
        {"services": {"api": "schema.json"}},
        default_endpoint=True,
        default_schema=True,
        project_folder=str(tmp_path),
    )

    assert schemas["api"].schema_file_path == "schema.json"
    assert schemas["api"].endpoint is None


def test_service_neither_url_nor_file(tmp_path):
    schemas = get_schemas_from_services(
        {"services": {"api": "missing.json"}},
        default_endpoint=True,
        default_schema=True,
        project_folder=str(tmp_path),
    )

    assert schemas["api"].schema_file_path is None
    assert schemas["api"].endpoint is None


def test_service_gets_credential_override(tmp_path):
    schemas = get_schemas_from_services(
        {"services": {"api": "https://example.com/graphql"}},
        default_endpoint=True,
        default_schema=True,
        project_folder=str(tmp_path),
        credential_override="service:api:secret",
    )

    assert schemas["api"].engine_key == "service:api:secret"


def test_only_first_service_is_used(tmp_path, caplog):
    with caplog.at_level(logging.WARNING):
        schemas = get_schemas_from_services(
            {"services": {"first": "http://one/graphql", "second": "http://two/graphql"}},
            default_endpoint=True,
            default_schema=True,
            project_folder=str(tmp_path),
        )

    assert list(schemas) == ["first"]
    assert "second" in caplog.text


def test_default_schema_synthesized():
    schemas = get_schemas_from_services({}, default_endpoint=True, default_schema=True)

    assert list(schemas) == ["default"]
    assert schemas["default"].endpoint.url == DEFAULT_ENDPOINT_URL


def test_no_default_schema():
    assert get_schemas_from_services({}, default_endpoint=True, default_schema=False) == {}


def test_client_schema_extends_service(tmp_path):
    schemas = get_schemas_from_services(
        {"services": {"api": "http://api/graphql"}, "clientSchema": "client.graphql"},
        default_endpoint=True,
        default_schema=True,
        project_folder=str(tmp_path),
    )

    assert list(schemas) == ["api", "default"]
    client = schemas["default"]
    assert client.schema_file_path == "client.graphql"
    assert client.client_side is True
    assert client.extends == "api"


def test_client_schema_keeps_default_base():
    schemas = get_schemas_from_services(
        {"clientSchema": "client.graphql"}, default_endpoint=True, default_schema=True
    )

    assert schemas["default"].extends == "default-base"
    assert schemas["default-base"].endpoint.url == DEFAULT_ENDPOINT_URL


def test_client_schema_alone_extends_nothing():
    schemas = get_schemas_from_services(
        {"clientSchema": "client.graphql"}, default_endpoint=True, default_schema=False
    )

    assert list(schemas) == ["default"]
    assert schemas["default"].extends is None


def test_explicit_schemas_mapping():
    schemas = get_schemas_from_services(
        {
            "schemas": {
                "api": {"endpoint": "https://example.com/graphql"},
                "client": {"schema": "client.graphql", "clientSide": True, "extends": "api"},
            }
        },
        default_endpoint=True,
        default_schema=True,
    )

    assert list(schemas) == ["api", "client"]
    assert schemas["client"].extends == "api"
    # Explicit schemas still get the endpoint default
    assert schemas["client"].endpoint.url == DEFAULT_ENDPOINT_URL


# =============================================================================
# Config assembly
# =============================================================================


def test_single_schema_gets_implicit_document_set(tmp_path):
    config = load_config({}, str(tmp_path / "package.json"), str(tmp_path))

    assert config.queries == [
        DocumentSet(schema_name="default", includes=["**"], excludes=["node_modules/**"])
    ]
    assert config.name == tmp_path.name


def test_string_queries_do_not_infer_schema(tmp_path):
    config = load_config(
        {"queries": "operations/**/*.graphql"}, str(tmp_path), str(tmp_path)
    )

    assert list(config.schemas) == ["default"]
    assert config.queries == [
        DocumentSet(
            schema_name=None,
            includes=["operations/**/*.graphql"],
            excludes=["node_modules/**"],
        )
    ]


def test_query_list_is_normalized(tmp_path):
    config = load_config(
        {"queries": [{"schema": "default", "includes": "a/**"}, {"excludes": "b/**"}]},
        str(tmp_path),
        str(tmp_path),
    )

    assert [q.includes for q in config.queries] == [["a/**"], ["**"]]
    assert [q.excludes for q in config.queries] == [["node_modules/**"], ["b/**"]]


def test_no_implicit_document_set_with_multiple_schemas(tmp_path):
    config = load_config(
        {"services": {"api": "http://api/graphql"}, "clientSchema": "client.graphql"},
        str(tmp_path),
        str(tmp_path),
    )

    assert config.queries == []


def test_client_schema_over_default_gets_implicit_document_set(tmp_path):
    config = load_config({"clientSchema": "client.graphql"}, str(tmp_path), str(tmp_path))

    assert list(config.schemas) == ["default-base", "default"]
    assert [q.schema_name for q in config.queries] == ["default"]


def test_no_schemas_no_document_sets(tmp_path):
    config = load_config({}, str(tmp_path), str(tmp_path), default_schema=False)

    assert config.schemas == {}
    assert config.queries == []


def test_engine_endpoint_passes_through(tmp_path):
    config = load_config(
        {"engineEndpoint": "https://engine.example.com/api/graphql"},
        str(tmp_path),
        str(tmp_path),
    )

    assert config.engine_endpoint == "https://engine.example.com/api/graphql"


def test_config_is_frozen(tmp_path):
    config = load_config({}, str(tmp_path), str(tmp_path))

    with pytest.raises(ValidationError):
        config.name = "other"
