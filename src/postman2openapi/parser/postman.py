"""Postman Collection v2.0 / v2.1 parser.

Parses Postman exported JSON into the Collection model.
"""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .base import Collection
from .detect import detect_format, detect_version

logger = logging.getLogger(__name__)


class CollectionError(ValueError):
    """Raised when input cannot be read as a Postman collection."""


def parse_postman(file_path: Path) -> Collection:
    """Parse a Postman Collection file into a Collection."""
    text = Path(file_path).read_text(encoding="utf-8")
    return parse_postman_str(text)


def parse_postman_str(text: str) -> Collection:
    """Parse Postman Collection JSON text into a Collection."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise CollectionError(f"Invalid JSON: {e}") from e
    return parse_postman_data(data)


def parse_postman_data(data: Any) -> Collection:
    """Validate decoded collection JSON into a Collection."""
    fmt = detect_format(data)
    if fmt == "openapi":
        raise CollectionError("Input is already an OpenAPI document, not a Postman collection.")
    if fmt != "postman":
        raise CollectionError("Input is not a Postman collection: expected an object with 'info' and 'item'.")

    version = detect_version(data)
    if version and not version.startswith("2."):
        logger.warning("Collection schema v%s is not supported; parsing as v2.1", version)

    try:
        return Collection.model_validate(data)
    except ValidationError as e:
        raise CollectionError(f"Invalid Postman collection: {e}") from e
