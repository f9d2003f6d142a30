"""
Minimal example - resolve the operation documents of example/project.

Usage:
    python example/main.py
"""

import asyncio
from pathlib import Path

from apollo_config import Settings, find_and_load_config, resolve_document_sets

settings = Settings()
config = find_and_load_config(
    Path(__file__).parent / "project",
    credential_override=settings.credential_override,
)

for document_set in asyncio.run(resolve_document_sets(config, need_schema=False)):
    print(document_set.original_set.schema_name, document_set.document_paths)
