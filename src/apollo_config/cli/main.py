#!/usr/bin/env python3
"""
Apollo Config CLI - Main entry point.

Usage:
    apollo-config show                 # Print the canonical config
    apollo-config documents            # List operation documents per set
    apollo-config schema <name>        # Print the resolved schema as SDL
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

import yaml
from graphql import print_schema

from ..config import find_and_load_config
from ..core.errors import ApolloConfigError
from ..core.models import ApolloConfig
from ..documents import resolve_document_sets
from ..schema import IntrospectionLoader, resolve_schema
from ..settings import Settings


def _load(args: argparse.Namespace, settings: Settings) -> ApolloConfig:
    return find_and_load_config(
        args.dir,
        default_endpoint=not args.no_default_endpoint,
        default_schema=not args.no_default_schema,
        credential_override=settings.credential_override,
    )


def _loader(settings: Settings) -> IntrospectionLoader:
    return IntrospectionLoader(
        timeout=settings.APOLLO_HTTP_TIMEOUT,
        engine_endpoint=settings.APOLLO_ENGINE_ENDPOINT,
    )


def cmd_show(args: argparse.Namespace, settings: Settings) -> int:
    """Print the canonical config as YAML."""
    config = _load(args, settings)
    print(yaml.dump(config.to_dict(), default_flow_style=False, sort_keys=False), end="")
    return 0


async def _documents(args: argparse.Namespace, settings: Settings) -> int:
    config = _load(args, settings)
    async with _loader(settings) as loader:
        document_sets = await resolve_document_sets(
            config, need_schema=False, tag=args.tag, loader=loader
        )

    for resolved in document_sets:
        print(f"# schema: {resolved.original_set.schema_name or '-'}")
        for path in resolved.document_paths:
            print(path)
    return 0


def cmd_documents(args: argparse.Namespace, settings: Settings) -> int:
    """List resolved operation documents for every document set."""
    return asyncio.run(_documents(args, settings))


async def _schema(args: argparse.Namespace, settings: Settings) -> int:
    config = _load(args, settings)
    async with _loader(settings) as loader:
        schema = await resolve_schema(args.name, config, args.tag, loader=loader)

    if schema is None:
        print(f"Error: schema '{args.name}' is unavailable", file=sys.stderr)
        return 1
    print(print_schema(schema))
    return 0


def cmd_schema(args: argparse.Namespace, settings: Settings) -> int:
    """Print a resolved schema as SDL."""
    return asyncio.run(_schema(args, settings))


def create_parser() -> argparse.ArgumentParser:
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="apollo-config",
        description="Apollo Config - resolve GraphQL project configuration"
    )
    parser.add_argument("--version", action="version", version="%(prog)s 0.1.0")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--dir", "-d", default=".", help="Project directory")
    common.add_argument("--no-default-endpoint", action="store_true", help="Do not default to the local endpoint")
    common.add_argument("--no-default-schema", action="store_true", help="Do not synthesize a default schema")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # show
    subparsers.add_parser("show", parents=[common], help="Print the canonical config")

    # documents
    documents_parser = subparsers.add_parser("documents", parents=[common], help="List operation documents")
    documents_parser.add_argument("--tag", "-t", help="Schema registry tag")

    # schema
    schema_parser = subparsers.add_parser("schema", parents=[common], help="Print a resolved schema")
    schema_parser.add_argument("name", help="Schema name")
    schema_parser.add_argument("--tag", "-t", help="Schema registry tag")

    return parser


def app(args: Optional[List[str]] = None, settings: Optional[Settings] = None) -> int:
    """Main CLI application."""
    parser = create_parser()
    parsed = parser.parse_args(args)

    if not parsed.command:
        parser.print_help()
        return 0

    logging.basicConfig(
        level=logging.DEBUG if parsed.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    commands = {
        "show": cmd_show,
        "documents": cmd_documents,
        "schema": cmd_schema,
    }

    handler = commands.get(parsed.command)
    if handler is None:
        parser.print_help()
        return 1

    try:
        return handler(parsed, settings or Settings())
    except ApolloConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def main() -> None:
    """Entry point for CLI."""
    sys.exit(app())


if __name__ == "__main__":
    main()
