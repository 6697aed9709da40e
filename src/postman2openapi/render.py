"""Render an OpenAPI document as JSON or YAML text."""

import json

import yaml

from postman2openapi.document import OpenApiDocument


def to_json(document: OpenApiDocument) -> str:
    return json.dumps(document.dump(), indent=2, ensure_ascii=False) + "\n"


def to_yaml(document: OpenApiDocument) -> str:
    return yaml.safe_dump(document.dump(), sort_keys=False, allow_unicode=True)
