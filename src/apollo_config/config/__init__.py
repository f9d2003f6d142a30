"""
Config module - raw config normalization and config source loading.
"""

from __future__ import annotations

from .loader import (
    CONFIG_FILE_NAMES,
    find_and_load_config,
    find_config_file,
    load_config_from_file,
    read_raw_config,
)
from .normalize import (
    derive_subscriptions_url,
    get_schemas_from_services,
    load_config,
    load_document_set,
    load_endpoint_config,
    load_schema_config,
)

__all__ = [
    # Normalization
    "derive_subscriptions_url",
    "get_schemas_from_services",
    "load_config",
    "load_document_set",
    "load_endpoint_config",
    "load_schema_config",
    # Loading
    "CONFIG_FILE_NAMES",
    "find_and_load_config",
    "find_config_file",
    "load_config_from_file",
    "read_raw_config",
]
