"""Document assembler.

Adds servers, tags, and operations to an OpenAPI document. A (path, method)
pair owns exactly one operation: a second request resolving to the same key
is merged into it instead of replacing it.
"""

import logging
import re
from dataclasses import dataclass, field

from postman2openapi.document import (
    HTTP_METHODS,
    Header,
    Info,
    OpenApiDocument,
    Operation,
    PathItem,
    Response,
    Schema,
    Server,
    Tag,
)
from postman2openapi.generator.body import apply_request_body, language_content_type, merge_media, response_content
from postman2openapi.generator.parameters import (
    build_path,
    header_parameters,
    merge_parameters,
    path_parameters,
    query_parameters,
    resolve_segments,
)
from postman2openapi.generator.schema import merge
from postman2openapi.generator.security import Requirement, SecurityBuilder
from postman2openapi.generator.variables import Variables
from postman2openapi.parser.base import Auth, Item, Request, Url
from postman2openapi.parser.base import Response as SampleResponse

logger = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r"[^A-Za-z0-9]")


def operation_id_base(name: str) -> str:
    """camelCase id from a display name: 'Get user by ID' -> 'getUserById'."""
    words = _NON_ALNUM.sub(" ", name).split()
    if not words:
        return ""
    return words[0].lower() + "".join(w.capitalize() for w in words[1:])


def is_success(code: str) -> bool:
    return len(code) == 3 and code.startswith("2") and code.isdigit()


@dataclass
class OperationIds:
    """Hands out unique operation ids: base, base1, base2, ..."""

    counters: dict[str, int] = field(default_factory=dict)
    issued: set[str] = field(default_factory=set)

    def next_id(self, name: str, fallback: str = "operation") -> str:
        base = operation_id_base(name) or fallback
        if base not in self.counters:
            self.counters[base] = 0
            if base not in self.issued:
                self.issued.add(base)
                return base
        op_id = base
        while op_id in self.issued:
            self.counters[base] += 1
            op_id = f"{base}{self.counters[base]}"
        self.issued.add(op_id)
        return op_id


class Assembler:
    """Incrementally builds one OpenAPI document."""

    def __init__(self, title: str, description: str | None, variables: Variables):
        self.document = OpenApiDocument(info=Info(title=title, description=description))
        self.variables = variables
        self.security = SecurityBuilder(self.document, variables)
        self.operation_ids = OperationIds()

    def add_server(self, url: Url) -> None:
        """Register the server of a request URL, once per distinct URL."""
        if not url.host:
            return
        server_url = ".".join(url.host)
        if url.port:
            server_url = f"{server_url}:{url.port}"
        if url.protocol:
            server_url = f"{url.protocol}://{server_url}"
        server_url = self.variables.resolve(server_url)
        if not any(s.url == server_url for s in self.document.servers):
            self.document.servers.append(Server(url=server_url))

    def add_tag(self, name: str, description: str | None = None) -> str:
        """Register a tag and return its name, suffixed when already taken."""
        taken = {t.name for t in self.document.tags}
        tag_name = name
        i = 0
        while tag_name in taken:
            i += 1
            tag_name = f"{name}{i}"
        self.document.tags.append(Tag(name=tag_name, description=description))
        return tag_name

    def add_root_security(self, auth: Auth) -> None:
        """Attach collection-level auth as the document default requirement."""
        requirement = self.security.build(auth)
        if requirement is None:
            return
        if self.document.security is None:
            self.document.security = []
        if requirement.as_dict() not in self.document.security:
            self.document.security.append(requirement.as_dict())

    def add_operation(
        self,
        item: Item,
        request: Request,
        url: Url,
        name: str,
        tags: list[str],
        auth: Auth | None,
    ) -> Operation:
        """Create or merge the operation for `request` and return it."""
        requirement = self.security.build(auth) if auth is not None else None

        resolved = resolve_segments(url.path or [], self.variables)
        path = build_path(resolved)
        path_item = self.document.paths.setdefault(path, PathItem())

        method = request.method.lower()
        if method not in HTTP_METHODS:
            logger.warning("Unsupported HTTP method %r for %r; treated as GET", request.method, name)
            method = "get"

        op = path_item.operation(method)
        is_merge = op is not None
        if op is None:
            op = Operation(operation_id=self.operation_ids.next_id(name, method))
            setattr(path_item, method, op)
        logger.debug("%s %s %s (%s)", "Merging" if is_merge else "Adding", method.upper(), path, name)

        path_params = path_parameters(resolved, url.variable, self.variables)
        if path_params:
            path_item.parameters = merge_parameters(path_item.parameters, path_params)

        if requirement is not None:
            self._add_operation_security(op, requirement)

        query_params = query_parameters(url.query, self.variables)
        if query_params:
            op.parameters = merge_parameters(op.parameters, query_params)

        header_params, content_type = header_parameters(request.header, self.variables)
        if header_params:
            op.parameters = merge_parameters(op.parameters, header_params)

        if request.body is not None:
            op.request_body = apply_request_body(op.request_body, request.body, name, self.variables, content_type)

        if not is_merge:
            op.summary = name
            op.description = request.description or name

        if tags:
            op.tags = (op.tags or []) + [t for t in tags if t not in (op.tags or [])]

        for sample in item.response:
            self._add_sample_response(op, sample, name)

        if not any(is_success(code) for code in op.responses):
            op.responses["200"] = Response(description="")
        return op

    def _add_operation_security(self, op: Operation, requirement: Requirement) -> None:
        if op.security is None:
            op.security = []
        if requirement.as_dict() not in op.security:
            op.security.append(requirement.as_dict())

    def _add_sample_response(self, op: Operation, sample: SampleResponse, request_name: str) -> None:
        example_name = sample.name or ""

        original = sample.original_request
        if original is not None and original.body is not None:
            ct = language_content_type(original.body.language) or "text/plain"
            op.request_body = apply_request_body(
                op.request_body, original.body, sample.name or request_name, self.variables, ct
            )

        if sample.code is None:
            return

        response = Response(description=sample.name or "")
        headers = {}
        for h in sample.header:
            if not h.key or not h.value or h.key.lower() == "content-type":
                continue
            headers[h.key] = Header(schema_=Schema(schema_type="string", example=h.value))
        if headers:
            response.headers = headers
        content = response_content(sample.body, sample.header, example_name, self.variables)
        if content:
            response.content = content

        code = str(sample.code)
        existing = op.responses.get(code)
        if existing is None:
            op.responses[code] = response
        else:
            _merge_response(existing, response)


def _merge_response(existing: Response, new: Response) -> None:
    if new.description:
        if existing.description:
            existing.description = f"{existing.description} / {new.description}"
        else:
            existing.description = new.description
    if new.headers:
        headers = dict(existing.headers or {})
        for key, header in new.headers.items():
            if key in headers and headers[key].schema_ is not None and header.schema_ is not None:
                headers[key].schema_ = merge(headers[key].schema_, header.schema_)
            else:
                headers.setdefault(key, header)
        existing.headers = headers
    if new.content:
        if existing.content is None:
            existing.content = {}
        merge_media(existing.content, new.content)
