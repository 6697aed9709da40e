"""Path and parameter synthesis.

Turns Postman URL path segments into an OpenAPI path template and builds
the path, query, and header parameter lists of an operation.
"""

from collections.abc import Iterable

from postman2openapi.document import Parameter, Schema
from postman2openapi.generator.schema import merge
from postman2openapi.generator.variables import Variables, scan_placeholders, to_path_template
from postman2openapi.parser.base import Header, QueryParam, Variable

EXCLUDED_HEADERS = {"accept", "authorization"}


def resolve_segments(segments: Iterable[str], variables: Variables) -> list[str]:
    """Resolve each segment; leftover `{{x}}` and `:x` become `{x}`."""
    resolved = []
    for segment in segments:
        seg = variables.resolve(segment, transform=to_path_template)
        if seg.startswith(":"):
            seg = "{" + seg[1:] + "}"
        resolved.append(seg)
    return resolved


def build_path(resolved_segments: list[str]) -> str:
    return "/" + "/".join(resolved_segments)


def path_parameters(
    resolved_segments: list[str],
    url_variables: list[Variable],
    variables: Variables,
) -> list[Parameter]:
    """One required string parameter per `{name}` in the path."""
    params: list[Parameter] = []
    seen = set()
    for segment in resolved_segments:
        for p in scan_placeholders(segment, "{", "}"):
            if p.name in seen:
                continue
            seen.add(p.name)
            schema = Schema(schema_type="string")
            param = Parameter(name=p.name, location="path", required=True, schema_=schema)

            match = next((v for v in url_variables if v.key == p.name), None)
            if match is not None:
                param.description = match.description
                if isinstance(match.value, str):
                    schema.example = variables.resolve(match.value)
            params.append(param)
    return params


def query_parameters(query: list[QueryParam], variables: Variables) -> list[Parameter]:
    """Query parameters; the first occurrence of each key wins."""
    params: list[Parameter] = []
    seen = set()
    for q in query:
        if q.key is None or q.key in seen:
            continue
        seen.add(q.key)
        example = variables.resolve(q.value) if q.value is not None else None
        params.append(
            Parameter(
                name=q.key,
                location="query",
                description=q.description,
                schema_=Schema(schema_type="string", example=example),
            )
        )
    return params


def header_parameters(headers: list[Header], variables: Variables) -> tuple[list[Parameter], str | None]:
    """Header parameters plus the declared Content-Type, if any.

    Accept and Authorization are dropped; Content-Type is returned rather
    than emitted so the body synthesizer can use it.
    """
    params: list[Parameter] = []
    content_type = None
    for h in headers:
        if not h.key:
            continue
        key = h.key.lower()
        if key in EXCLUDED_HEADERS:
            continue
        if key == "content-type":
            content_type = (h.value or "").split(";")[0].strip() or None
            continue
        param = Parameter(
            name=h.key,
            location="header",
            description=h.description,
            schema_=Schema(schema_type="string", example=variables.resolve(h.value or "")),
        )
        params = merge_parameters(params, [param])
    return params, content_type


def merge_parameters(existing: list[Parameter] | None, incoming: list[Parameter]) -> list[Parameter]:
    """Merge parameters by (name, in); matching schemas merge, others append."""
    merged = [p.model_copy(deep=True) for p in existing or []]
    for param in incoming:
        found = next((p for p in merged if p.name == param.name and p.location == param.location), None)
        if found is None:
            merged.append(param.model_copy(deep=True))
            continue
        if found.schema_ is None:
            found.schema_ = param.schema_
        elif param.schema_ is not None:
            found.schema_ = merge(found.schema_, param.schema_)
        if not found.description:
            found.description = param.description
    return merged
