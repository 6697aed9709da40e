"""Request and response body synthesis.

Each body mode maps to a content type, a schema, and a named example.
Repeated bodies for the same operation merge into the existing media type
and add to its examples instead of replacing them.
"""

import json
import logging
from typing import Any

from postman2openapi.document import Example, MediaType, RequestBody, Schema
from postman2openapi.generator.schema import infer, merge
from postman2openapi.generator.variables import Variables
from postman2openapi.parser.base import Body, Header

logger = logging.getLogger(__name__)

JSON = "application/json"
TEXT = "text/plain"
OCTET_STREAM = "application/octet-stream"
FORM_URLENCODED = "application/x-www-form-urlencoded"
MULTIPART = "multipart/form-data"

LANGUAGE_CONTENT_TYPES = {
    "xml": "application/xml",
    "json": JSON,
    "html": "text/html",
}

GRAPHQL_SCHEMA = Schema(
    schema_type="object",
    properties={
        "query": Schema(schema_type="string"),
        "variables": Schema(schema_type="object"),
    },
)


def language_content_type(language: str | None) -> str | None:
    """Content type for a raw body language hint (xml/json/html/other)."""
    if language is None:
        return None
    return LANGUAGE_CONTENT_TYPES.get(language.lower(), TEXT)


def parse_json(text: str) -> Any:
    """Decode `text` when it holds a JSON object or array, else None."""
    try:
        value = json.loads(text)
    except ValueError:
        return None
    if isinstance(value, (dict, list)):
        return value
    return None


def add_media(
    content: dict[str, MediaType],
    content_type: str,
    schema: Schema | None = None,
    example_name: str | None = None,
    example: Any = None,
) -> MediaType:
    """Merge a schema and a named example into `content[content_type]`."""
    media = content.setdefault(content_type, MediaType())
    if schema is not None:
        media.schema_ = schema if media.schema_ is None else merge(media.schema_, schema)
    if example_name is not None:
        if media.examples is None:
            media.examples = {}
        media.examples[example_name] = Example(value=example)
    return media


def merge_media(content: dict[str, MediaType], incoming: dict[str, MediaType]) -> None:
    """Merge every media type of `incoming` into `content`."""
    for content_type, media in incoming.items():
        target = content.setdefault(content_type, MediaType())
        if media.schema_ is not None:
            target.schema_ = media.schema_ if target.schema_ is None else merge(target.schema_, media.schema_)
        if media.examples:
            target.examples = {**(target.examples or {}), **media.examples}


def apply_request_body(
    request_body: RequestBody | None,
    body: Body,
    name: str,
    variables: Variables,
    content_type: str | None = None,
) -> RequestBody:
    """Add `body` to `request_body` (created when None) and return it.

    `content_type` is the declared Content-Type header, used when the body
    itself does not determine one.
    """
    if request_body is None:
        request_body = RequestBody()
    content = request_body.content

    if body.mode == "raw":
        _apply_raw(content, body, name, variables, content_type)
    elif body.mode == "urlencoded":
        data = {p.key: p.value for p in body.urlencoded if p.value is not None}
        add_media(content, FORM_URLENCODED, infer(data), name, data)
    elif body.mode == "formdata":
        data = {f.key: f.value for f in body.formdata if f.param_type != "file" and f.value is not None}
        add_media(content, MULTIPART, _formdata_schema(body), name, data)
    elif body.mode == "graphql":
        _apply_graphql(content, body, name)
    elif body.mode == "file":
        add_media(content, content_type or OCTET_STREAM, Schema(schema_type="string", format="binary"))
    else:
        add_media(content, content_type or OCTET_STREAM)
    return request_body


def _apply_raw(
    content: dict[str, MediaType],
    body: Body,
    name: str,
    variables: Variables,
    content_type: str | None,
) -> None:
    if body.raw is None:
        add_media(content, content_type or language_content_type(body.language) or TEXT)
        return

    resolved = variables.resolve(body.raw)
    value = parse_json(resolved)
    if value is not None:
        add_media(content, JSON, infer(value), name, value)
        return

    ct = language_content_type(body.language) or content_type or TEXT
    add_media(content, ct, example_name=name, example=resolved)


def _formdata_schema(body: Body) -> Schema:
    properties = {}
    for field in body.formdata:
        if field.value is not None:
            prop = infer(field.value)
        else:
            prop = Schema(schema_type="string")
        if field.param_type == "file":
            prop = Schema(schema_type="string", format="binary")
        prop.description = field.description
        properties[field.key] = prop
    return Schema(schema_type="object", properties=properties)


def _apply_graphql(content: dict[str, MediaType], body: Body, name: str) -> None:
    add_media(content, JSON, GRAPHQL_SCHEMA.model_copy(deep=True))

    graphql = body.graphql
    if graphql is None or graphql.query is None:
        return
    example: dict[str, Any] = {"query": graphql.query}
    if graphql.variables:
        try:
            example["variables"] = json.loads(graphql.variables)
        except ValueError:
            logger.debug("GraphQL variables of %r are not JSON; left out of the example", name)
    add_media(content, JSON, example_name=name, example=example)


def response_content(
    body: str | None,
    headers: list[Header],
    name: str,
    variables: Variables,
) -> dict[str, MediaType]:
    """Content map for a sample response body; empty when there is no body."""
    content: dict[str, MediaType] = {}
    if not body:
        return content

    resolved = variables.resolve(body)
    value = parse_json(resolved)
    if value is not None:
        add_media(content, JSON, infer(value), name, value)
        return content

    declared = next((h.value for h in headers if (h.key or "").lower() == "content-type" and h.value), None)
    ct = declared.split(";")[0].strip() if declared else TEXT
    add_media(content, ct or TEXT, example_name=name, example=resolved)
    return content
