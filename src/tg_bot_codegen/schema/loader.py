"""Schema document loader.

Reads a YAML or JSON methods schema into the ``Schema`` model. Any
problem with the document is reported as ``SchemaError`` before
generation starts.
"""

import json
from pathlib import Path

import yaml
from pydantic import ValidationError

from tg_bot_codegen.errors import SchemaError
from tg_bot_codegen.logging import get_logger

from .base import Schema

logger = get_logger("schema.loader")


def detect_format(file_path: Path) -> str:
    """Detect the format of a schema file.

    Returns: 'json' or 'yaml'.
    """
    if file_path.suffix.lower() == ".json":
        return "json"
    if file_path.suffix.lower() in (".yaml", ".yml"):
        return "yaml"

    text = file_path.read_text(encoding="utf-8")
    try:
        json.loads(text)
    except (json.JSONDecodeError, ValueError):
        return "yaml"
    return "json"


def load_schema(file_path: Path) -> Schema:
    """Load and validate a schema document."""
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as e:
        raise SchemaError(f"cannot read schema {file_path}: {e}") from e

    fmt = detect_format(file_path)
    try:
        # JSON is a YAML subset, but json gives better error positions
        data = json.loads(text) if fmt == "json" else yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise SchemaError(f"cannot parse schema {file_path}: {e}") from e

    if not isinstance(data, dict):
        raise SchemaError(f"schema {file_path} must be a mapping at the top level")

    try:
        schema = Schema.model_validate(data)
    except ValidationError as e:
        raise SchemaError(f"invalid schema {file_path}:\n{e}") from e

    logger.debug(
        "loaded %d methods from %s (Bot API %s)",
        len(schema.methods),
        file_path,
        schema.api_version.ver,
    )
    return schema
