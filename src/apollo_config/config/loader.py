"""
Config source discovery and loading.

A project directory is searched, in priority order, for:
- apollo.config.py      (module exposing a `config` mapping)
- apollo.config.yaml / apollo.config.yml
- apollo.config.json
- package.json          (the `apollo` key)

Usage:
    config = find_and_load_config(Path.cwd(), credential_override=settings.credential_override)
"""

from __future__ import annotations

import importlib.util
import json
import logging
from pathlib import Path
from typing import Any, Optional

import yaml

from ..core.errors import ConfigError, UnsupportedConfigFormat
from ..core.models import ApolloConfig
from .normalize import load_config

logger = logging.getLogger(__name__)

CONFIG_FILE_NAMES = (
    "apollo.config.py",
    "apollo.config.yaml",
    "apollo.config.yml",
    "apollo.config.json",
    "package.json",
)


def _read_module_config(path: Path) -> Any:
    # Executed fresh on every load so edits are picked up
    spec = importlib.util.spec_from_file_location(f"_apollo_config_{abs(hash(path))}", path)
    if spec is None or spec.loader is None:
        raise ConfigError(f"Cannot import config module: {path}")

    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        raise ConfigError(f"Cannot load config module {path}: {e}") from e
    return getattr(module, "config", None)


def read_raw_config(path: Path | str) -> dict[str, Any]:
    """
    Read a config source into a raw mapping.

    Raises:
        UnsupportedConfigFormat: If the file type is not supported
        ConfigError: If the file cannot be parsed or its root is not a mapping
    """
    path = Path(path)

    try:
        if path.name == "package.json":
            data = json.loads(path.read_text(encoding="utf-8")) or {}
            raw = data.get("apollo") if isinstance(data, dict) else None
        elif path.suffix == ".py":
            raw = _read_module_config(path)
        elif path.suffix in (".yaml", ".yml"):
            raw = yaml.safe_load(path.read_text(encoding="utf-8"))
        elif path.suffix == ".json":
            raw = json.loads(path.read_text(encoding="utf-8"))
        else:
            raise UnsupportedConfigFormat(str(path))
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config in {path} must be a mapping, got {type(raw).__name__}")
    return raw


def load_config_from_file(
    file: Path | str,
    default_endpoint: bool = True,
    default_schema: bool = True,
    credential_override: Optional[str] = None,
) -> ApolloConfig:
    """Load a config source; its directory becomes the project folder."""
    path = Path(file).resolve()
    raw = read_raw_config(path)
    logger.debug(f"Read config from {path}")

    return load_config(
        raw,
        str(path),
        str(path.parent),
        default_endpoint,
        default_schema,
        credential_override,
    )


def find_config_file(directory: Path | str) -> Optional[Path]:
    """Return the highest-priority config source in `directory`, if any."""
    directory = Path(directory)
    for name in CONFIG_FILE_NAMES:
        candidate = directory / name
        if candidate.is_file():
            return candidate
    return None


def find_and_load_config(
    directory: Path | str,
    default_endpoint: bool = True,
    default_schema: bool = True,
    credential_override: Optional[str] = None,
) -> ApolloConfig:
    """
    Find and load the config for a project directory.

    Without a config source the directory is both config file and project
    folder, and the raw config is empty.
    """
    directory = Path(directory).resolve()
    config_file = find_config_file(directory)

    if config_file is None:
        logger.debug(f"No config file in {directory}, using defaults")
        return load_config(
            {},
            str(directory),
            str(directory),
            default_endpoint,
            default_schema,
            credential_override,
        )

    return load_config_from_file(
        config_file,
        default_endpoint,
        default_schema,
        credential_override,
    )
