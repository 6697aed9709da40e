"""OpenAPI 3.0 document models.

The transform engine builds these incrementally. Field names follow Python
conventions; aliases carry the OpenAPI spelling used when dumping.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

OPENAPI_VERSION = "3.0.3"

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")


class _Model(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class Schema(_Model):
    """A JSON Schema subset: object, array, scalar, null, or anyOf."""

    schema_type: str | None = Field(default=None, alias="type")
    format: str | None = None
    description: str | None = None
    nullable: bool | None = None
    example: Any = None
    properties: dict[str, "Schema"] | None = None
    items: "Schema | None" = None
    any_of: list["Schema"] | None = Field(default=None, alias="anyOf")


class Example(_Model):
    summary: str | None = None
    value: Any = None


class MediaType(_Model):
    schema_: Schema | None = Field(default=None, alias="schema")
    examples: dict[str, Example] | None = None


class Header(_Model):
    description: str | None = None
    schema_: Schema | None = Field(default=None, alias="schema")


class Parameter(_Model):
    name: str
    location: str = Field(alias="in")  # path / query / header
    description: str | None = None
    required: bool | None = None
    schema_: Schema | None = Field(default=None, alias="schema")


class RequestBody(_Model):
    description: str | None = None
    content: dict[str, MediaType] = Field(default_factory=dict)


class Response(_Model):
    description: str = ""
    headers: dict[str, Header] | None = None
    content: dict[str, MediaType] | None = None


class Operation(_Model):
    operation_id: str | None = Field(default=None, alias="operationId")
    summary: str | None = None
    description: str | None = None
    tags: list[str] | None = None
    parameters: list[Parameter] | None = None
    request_body: RequestBody | None = Field(default=None, alias="requestBody")
    responses: dict[str, Response] = Field(default_factory=dict)
    security: list[dict[str, list[str]]] | None = None


class PathItem(_Model):
    parameters: list[Parameter] | None = None
    get: Operation | None = None
    put: Operation | None = None
    post: Operation | None = None
    delete: Operation | None = None
    options: Operation | None = None
    head: Operation | None = None
    patch: Operation | None = None
    trace: Operation | None = None

    def operation(self, method: str) -> Operation | None:
        return getattr(self, method)

    def operations(self) -> dict[str, Operation]:
        return {m: getattr(self, m) for m in HTTP_METHODS if getattr(self, m) is not None}


class OAuthFlow(_Model):
    authorization_url: str | None = Field(default=None, alias="authorizationUrl")
    token_url: str | None = Field(default=None, alias="tokenUrl")
    refresh_url: str | None = Field(default=None, alias="refreshUrl")
    scopes: dict[str, str] = Field(default_factory=dict)


class OAuthFlows(_Model):
    authorization_code: OAuthFlow | None = Field(default=None, alias="authorizationCode")
    client_credentials: OAuthFlow | None = Field(default=None, alias="clientCredentials")
    password: OAuthFlow | None = None
    implicit: OAuthFlow | None = None


class SecurityScheme(_Model):
    scheme_type: str = Field(alias="type")  # http / apiKey / oauth2
    scheme: str | None = None
    bearer_format: str | None = Field(default=None, alias="bearerFormat")
    name: str | None = None
    location: str | None = Field(default=None, alias="in")
    flows: OAuthFlows | None = None


class Components(_Model):
    security_schemes: dict[str, SecurityScheme] = Field(default_factory=dict, alias="securitySchemes")


class Contact(_Model):
    name: str | None = None
    url: str | None = None
    email: str | None = None


class Info(_Model):
    title: str
    description: str | None = None
    version: str = "1.0.0"
    contact: Contact = Field(default_factory=Contact)


class Server(_Model):
    url: str
    description: str | None = None


class Tag(_Model):
    name: str
    description: str | None = None


class OpenApiDocument(_Model):
    """An assembled OpenAPI 3.0 document."""

    openapi: str = OPENAPI_VERSION
    info: Info
    servers: list[Server] = Field(default_factory=list)
    tags: list[Tag] = Field(default_factory=list)
    paths: dict[str, PathItem] = Field(default_factory=dict)
    components: Components | None = None
    security: list[dict[str, list[str]]] | None = None

    def dump(self) -> dict:
        """Return JSON-compatible data using OpenAPI field names."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
