"""Load a schema document from disk."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from .errors import DocumentError
from .schema_parser import SchemaDocument, parse_document

logger = logging.getLogger(__name__)


def load_spec(path: Path) -> dict[str, Any]:
    """Read and decode the JSON document at ``path``."""
    try:
        content = path.read_bytes()
    except OSError as exc:
        raise DocumentError(f"unable to read {path}: {exc}") from exc

    try:
        spec = json.loads(content)
    except ValueError as exc:
        raise DocumentError(f"unable to decode {path}: {exc}") from exc

    if not isinstance(spec, dict):
        raise DocumentError(f"{path} must contain a JSON object, got {type(spec).__name__}")

    logger.debug("loaded %s (%d bytes)", path, len(content))
    return spec


def load_document(path: Path) -> SchemaDocument:
    """Load and parse a schema document."""
    return parse_document(load_spec(path))
