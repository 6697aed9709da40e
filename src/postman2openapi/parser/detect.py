"""Auto-detect the kind of API document held in parsed JSON."""

import re
from typing import Any

_SCHEMA_VERSION = re.compile(r"/v(\d+\.\d+\.\d+)/")


def detect_format(data: Any) -> str:
    """Detect the format of an already-decoded API document.

    Returns: 'postman', 'openapi', or 'unknown'.
    """
    if not isinstance(data, dict):
        return "unknown"
    if "openapi" in data or "swagger" in data:
        return "openapi"
    if isinstance(data.get("info"), dict) and isinstance(data.get("item", []), list):
        return "postman"
    return "unknown"


def detect_version(data: Any) -> str | None:
    """Return the collection schema version, e.g. '2.1.0', when declared."""
    if not isinstance(data, dict) or not isinstance(data.get("info"), dict):
        return None
    match = _SCHEMA_VERSION.search(str(data["info"].get("schema", "")))
    if match:
        return match.group(1)
    return None
