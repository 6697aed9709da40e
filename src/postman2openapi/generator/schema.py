"""Schema inference from example values and schema merging.

`infer` maps one literal value to a Schema. `merge` folds two schemas into
one without losing any observed shape: type conflicts become `anyOf`.
"""

from collections.abc import Iterable
from typing import Any

from postman2openapi.document import Schema


def infer(value: Any) -> Schema:
    """Infer a schema from a decoded JSON value."""
    if isinstance(value, dict):
        return Schema(
            schema_type="object",
            properties={str(k): infer(v) for k, v in value.items()},
        )
    if isinstance(value, list):
        items = merge_all(infer(v) for v in value)
        return Schema(schema_type="array", items=items or Schema(), example=value)
    if value is None:
        return Schema(nullable=True)
    if isinstance(value, bool):
        return Schema(schema_type="boolean", example=value)
    if isinstance(value, (int, float)):
        return Schema(schema_type="number", example=value)
    if isinstance(value, str):
        return Schema(schema_type="string", example=value)
    return Schema(schema_type="string", example=str(value))


def merge_all(schemas: Iterable[Schema]) -> Schema | None:
    """Left-fold `merge` over schemas; None when there are none."""
    merged = None
    for s in schemas:
        merged = s if merged is None else merge(merged, s)
    return merged


def merge(original: Schema, new: Schema) -> Schema:
    """Merge `new` into a copy of `original`."""
    result = original.model_copy(deep=True)

    if new.nullable:
        result.nullable = True

    if result.any_of is not None:
        for branch in _branches(new):
            if not any(_shape(b) == _shape(branch) for b in result.any_of):
                result.any_of.append(branch)
        return result

    if _untyped(result):
        # An untyped (null) schema takes the shape of whatever it meets.
        if _untyped(new):
            return result
        adopted = new.model_copy(deep=True)
        adopted.nullable = result.nullable or new.nullable
        return adopted

    if _untyped(new):
        return result

    if new.schema_type != result.schema_type:
        branches = [_branch(original)]
        for branch in _branches(new):
            if not any(_shape(b) == _shape(branch) for b in branches):
                branches.append(branch)
        return Schema(
            any_of=branches,
            nullable=result.nullable,
            description=original.description,
        )

    if result.schema_type == "object" and new.properties:
        properties = result.properties or {}
        for key, prop in new.properties.items():
            if key in properties:
                properties[key] = merge(properties[key], prop)
            else:
                properties[key] = prop.model_copy(deep=True)
        result.properties = properties

    if result.schema_type == "array" and new.items is not None:
        result.items = new.items.model_copy(deep=True) if result.items is None else merge(result.items, new.items)

    return result


def _untyped(schema: Schema) -> bool:
    return schema.schema_type is None and schema.any_of is None


def _branch(schema: Schema) -> Schema:
    branch = schema.model_copy(deep=True)
    branch.nullable = None
    return branch


def _branches(schema: Schema) -> list[Schema]:
    """anyOf branches contributed by `schema`; nullability stays on the parent."""
    candidates = schema.any_of if schema.any_of is not None else [schema]
    return [_branch(b) for b in candidates if not _untyped(b)]


def _shape(schema: Schema) -> Any:
    """Structural identity of a schema, ignoring examples and descriptions."""
    return (
        schema.schema_type,
        schema.format,
        bool(schema.nullable),
        tuple(sorted((k, _shape(v)) for k, v in (schema.properties or {}).items())),
        _shape(schema.items) if schema.items is not None else None,
        tuple(_shape(b) for b in schema.any_of) if schema.any_of is not None else None,
    )
