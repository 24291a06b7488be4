"""Load -> escape -> patch: the steps shared by every generator command."""

from pathlib import Path

from tg_bot_codegen.patching.engine import patch_schema
from tg_bot_codegen.patching.rules import DOC_PATCHES
from tg_bot_codegen.schema.base import Schema
from tg_bot_codegen.schema.loader import load_schema
from tg_bot_codegen.schema.naming import escape_keywords


def prepare_schema(schema_path: Path) -> Schema:
    """Load a schema and bring it into the shape the generators expect."""
    schema = load_schema(schema_path)
    schema = escape_keywords(schema)
    return patch_schema(schema, DOC_PATCHES)
