"""Postman collection to OpenAPI 3.0 transpiler.

`transpile` turns a parsed Collection into an OpenApiDocument;
`from_str` and `from_path` add parsing and rendering around it.
"""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field

from postman2openapi.document import OpenApiDocument
from postman2openapi.generator.assembler import Assembler
from postman2openapi.generator.variables import DEFAULT_CREDITS, Variables
from postman2openapi.generator.walker import Walker
from postman2openapi.parser.base import Collection
from postman2openapi.parser.postman import parse_postman, parse_postman_str
from postman2openapi.render import to_json, to_yaml


class TargetFormat(str, Enum):
    JSON = "json"
    YAML = "yaml"


class TranspileOptions(BaseModel):
    """Output format and variable substitution limit."""

    format: TargetFormat = TargetFormat.YAML
    replace_credits: int = Field(default=DEFAULT_CREDITS, ge=0)


def transpile(collection: Collection, options: TranspileOptions | None = None) -> OpenApiDocument:
    """Convert a parsed collection into an OpenAPI document."""
    options = options or TranspileOptions()
    variables = Variables.from_collection(collection.variable, options.replace_credits)
    assembler = Assembler(collection.info.name, collection.info.description, variables)
    return Walker(assembler).walk(collection)


def render(document: OpenApiDocument, fmt: TargetFormat = TargetFormat.YAML) -> str:
    if fmt == TargetFormat.JSON:
        return to_json(document)
    return to_yaml(document)


def from_str(text: str, options: TranspileOptions | None = None) -> str:
    """Parse collection JSON text and return the rendered OpenAPI document."""
    options = options or TranspileOptions()
    return render(transpile(parse_postman_str(text), options), options.format)


def from_path(file_path: Path, options: TranspileOptions | None = None) -> str:
    """Read a collection file and return the rendered OpenAPI document."""
    options = options or TranspileOptions()
    return render(transpile(parse_postman(file_path), options), options.format)
