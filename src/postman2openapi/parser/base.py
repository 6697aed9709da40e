"""Data models for parsed Postman collections.

Postman exports the same field in several shapes: a URL may be a string or
an object, a description a string or an object, auth attributes a list or a
mapping. Validators normalize every field to one shape so the transform
code only ever sees a single form.
"""

import json
from typing import Annotated, Any, Literal

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator

BODY_MODES = ("raw", "urlencoded", "formdata", "graphql", "file")


def _text(value: Any) -> str | None:
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, (bool, int, float)):
        return json.dumps(value)
    return str(value)


def _description(value: Any) -> str | None:
    if isinstance(value, dict):
        return _text(value.get("content"))
    return _text(value)


def _as_list(value: Any) -> Any:
    return [] if value is None else value


def _segment(value: Any) -> str:
    # Path segments are strings or {"type": "string", "value": ...} objects.
    if isinstance(value, dict):
        value = value.get("value")
    return _text(value) or ""


def _split_header_lines(text: str) -> list[dict]:
    headers = []
    for line in text.splitlines():
        key, sep, value = line.partition(":")
        if sep and key.strip():
            headers.append({"key": key.strip(), "value": value.strip()})
    return headers


def _headers(value: Any) -> Any:
    """Accept a header list, a raw header block, or a list mixing both."""
    if value is None:
        return []
    if isinstance(value, str):
        return _split_header_lines(value)
    if isinstance(value, list):
        headers = []
        for h in value:
            if isinstance(h, str):
                headers.extend(_split_header_lines(h))
            elif isinstance(h, dict):
                headers.append(h)
        return headers
    return value


Text = Annotated[str | None, BeforeValidator(_text)]
Description = Annotated[str | None, BeforeValidator(_description)]


class Variable(BaseModel):
    """A collection-level or URL path variable."""

    key: str | None = None
    value: Any = None
    description: Description = None
    disabled: bool = False


class QueryParam(BaseModel):
    key: Text = None
    value: Text = None
    description: Description = None
    disabled: bool = False


class Header(BaseModel):
    key: Text = ""
    value: Text = ""
    description: Description = None
    disabled: bool = False


class Url(BaseModel):
    """A structured request URL.

    Literal URL strings are parsed into this form by `from_raw`.
    """

    raw: str | None = None
    protocol: str | None = None
    host: list[str] | None = None
    port: Text = None
    path: list[str] | None = None
    query: Annotated[list[QueryParam], BeforeValidator(_as_list)] = []
    variable: Annotated[list[Variable], BeforeValidator(_as_list)] = []

    @field_validator("host", mode="before")
    @classmethod
    def _host(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [value]
        return value

    @field_validator("path", mode="before")
    @classmethod
    def _path(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.lstrip("/").split("/")
        if isinstance(value, list):
            return [_segment(p) for p in value]
        return value

    @classmethod
    def from_raw(cls, raw: str) -> "Url":
        """Parse a literal URL such as `{{baseUrl}}/users/:id?page=1`."""
        rest = raw.strip()
        protocol = None
        if "://" in rest:
            protocol, rest = rest.split("://", 1)
        rest = rest.split("#", 1)[0]
        rest, _, query_string = rest.partition("?")
        host_part, slash, path_part = rest.partition("/")

        port = None
        head, colon, tail = host_part.rpartition(":")
        if colon and tail.isdigit():
            host_part, port = head, tail

        query = []
        if query_string:
            for pair in query_string.split("&"):
                if not pair:
                    continue
                key, eq, value = pair.partition("=")
                query.append({"key": key, "value": value if eq else None})

        return cls(
            raw=raw,
            protocol=protocol,
            host=host_part.split(".") if host_part else None,
            port=port,
            path=path_part.split("/") if slash else None,
            query=query,
        )


class FormParam(BaseModel):
    """A urlencoded or form-data body field."""

    key: Text = ""
    value: Text = None
    param_type: str | None = Field(default=None, alias="type")
    description: Description = None
    disabled: bool = False
    src: Any = None


class GraphQlBody(BaseModel):
    query: Text = None
    variables: str | None = None

    @field_validator("variables", mode="before")
    @classmethod
    def _variables(cls, value: Any) -> Any:
        if isinstance(value, (dict, list)):
            return json.dumps(value)
        return value


class RawOptions(BaseModel):
    language: str | None = None


class BodyOptions(BaseModel):
    raw: RawOptions | None = None


class Body(BaseModel):
    """A request body; `mode` selects which of the payload fields is used."""

    mode: Literal["raw", "urlencoded", "formdata", "graphql", "file"] | None = None
    raw: Text = None
    urlencoded: Annotated[list[FormParam], BeforeValidator(_as_list)] = []
    formdata: Annotated[list[FormParam], BeforeValidator(_as_list)] = []
    graphql: GraphQlBody | None = None
    file: Any = None
    options: BodyOptions | None = None

    @field_validator("mode", mode="before")
    @classmethod
    def _mode(cls, value: Any) -> Any:
        return value if value in BODY_MODES else None

    @property
    def language(self) -> str | None:
        if self.options and self.options.raw:
            return self.options.raw.language
        return None


class Auth(BaseModel):
    """Authentication helper attached to a collection, folder, or request.

    `type` names the scheme kind; the attributes of that kind live under a
    key of the same name, either as a `[{key, value}]` list (v2.1) or a
    plain mapping (v2.0).
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    auth_type: str = Field(default="noauth", alias="type")

    def attributes(self) -> dict[str, Any]:
        raw = (self.model_extra or {}).get(self.auth_type)
        if isinstance(raw, list):
            return {a["key"]: a.get("value") for a in raw if isinstance(a, dict) and "key" in a}
        if isinstance(raw, dict):
            return dict(raw)
        return {}

    def attribute(self, key: str) -> str | None:
        return _text(self.attributes().get(key))


class Request(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    method: str = "GET"
    url: Url | None = None
    header: Annotated[list[Header], BeforeValidator(_headers)] = []
    body: Body | None = None
    auth: Auth | None = None
    description: Description = None

    @field_validator("method", mode="before")
    @classmethod
    def _method(cls, value: Any) -> Any:
        return value or "GET"

    @field_validator("url", mode="before")
    @classmethod
    def _url(cls, value: Any) -> Any:
        if isinstance(value, str):
            return Url.from_raw(value) if value.strip() else None
        return value


class Response(BaseModel):
    """A sample response saved alongside a request."""

    model_config = ConfigDict(populate_by_name=True)

    name: str | None = None
    code: int | None = None
    status: str | None = None
    header: Annotated[list[Header], BeforeValidator(_headers)] = []
    body: Text = None
    original_request: Request | None = Field(default=None, alias="originalRequest")

    @field_validator("original_request", mode="before")
    @classmethod
    def _original_request(cls, value: Any) -> Any:
        if isinstance(value, str):
            return {"url": value}
        return value


class Item(BaseModel):
    """A collection node: a folder when it holds `item`, otherwise a request."""

    name: str | None = None
    description: Description = None
    item: list["Item"] | None = None
    request: Request | None = None
    response: Annotated[list[Response], BeforeValidator(_as_list)] = []
    auth: Auth | None = None

    @field_validator("request", mode="before")
    @classmethod
    def _request(cls, value: Any) -> Any:
        if isinstance(value, str):
            return {"url": value}
        return value

    @property
    def is_folder(self) -> bool:
        return self.item is not None


class Info(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = ""
    description: Description = None
    schema_url: str | None = Field(default=None, alias="schema")
    postman_id: str | None = Field(default=None, alias="_postman_id")
    version: Text = None


class Collection(BaseModel):
    """A whole Postman collection."""

    info: Info = Info()
    item: Annotated[list[Item], BeforeValidator(_as_list)] = []
    auth: Auth | None = None
    variable: Annotated[list[Variable], BeforeValidator(_as_list)] = []
