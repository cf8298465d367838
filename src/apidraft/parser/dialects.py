"""Decode raw parameter objects into explicit per-dialect variants.

OpenAPI 3 and Swagger 2 describe parameters differently:

* OpenAPI 3 nests the value shape in a ``schema`` object and only allows
  ``in`` to be ``query``, ``header``, ``path`` or ``cookie``.
* Swagger 2 puts ``type``/``format``/``enum``/``items`` directly on the
  parameter, and adds the ``body`` and ``formData`` locations (a ``body``
  parameter carries a ``schema`` instead).

Documents in the wild mix both shapes, so the dialect is inferred *per
parameter* rather than from the document's version field. Each raw dict is
decoded exactly once, by :func:`decode_parameter`, into either an
:class:`OpenAPIParameter` or a :class:`SwaggerParameter`; the rest of the
importer works with these variants and never re-inspects the raw dicts.

:func:`parameter_example` derives the string value placed in a draft's
header, query parameter, path placeholder, or form field.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Literal, Mapping, Optional, Union

from apidraft.models import SchemaNode
from apidraft.parser.resolver import ref_name
from apidraft.parser.synthesizer import schema_type_of

_SWAGGER_ONLY_LOCATIONS = frozenset({"body", "formData"})

# Canned literals for well-known string formats
_FORMAT_EXAMPLES = {
    "date": "2024-01-01",
    "date-time": "2024-01-01T00:00:00Z",
    "email": "user@example.com",
    "uuid": "3fa85f64-5717-4562-b3fc-2c963f66afa6",
}


@dataclass(frozen=True)
class ValueShape:
    """The type information needed to derive a canned example value.

    Attributes:
        type: JSON Schema / Swagger type name, ``None`` when undeclared.
        format: Format hint such as ``date-time`` or ``binary``.
        enum: Declared enum values, empty when none.
        example: Explicit example or default, when ``has_example`` is set.
        has_example: Distinguishes an explicit ``null`` example from none.
    """

    type: Optional[str] = None
    format: Optional[str] = None
    enum: tuple[Any, ...] = ()
    example: Any = None
    has_example: bool = False


@dataclass(frozen=True)
class OpenAPIParameter:
    """An OpenAPI 3 *Parameter Object* (value shape lives in ``schema``)."""

    name: str
    location: str
    description: Optional[str] = None
    required: bool = False
    schema: SchemaNode = field(default_factory=dict)
    shape: ValueShape = field(default_factory=ValueShape)
    dialect: Literal["openapi"] = "openapi"


@dataclass(frozen=True)
class SwaggerParameter:
    """A Swagger 2 *Parameter Object* (value shape inline on the parameter).

    ``schema`` is only populated for ``in: body`` parameters.
    """

    name: str
    location: str
    description: Optional[str] = None
    required: bool = False
    schema: SchemaNode = field(default_factory=dict)
    shape: ValueShape = field(default_factory=ValueShape)
    dialect: Literal["swagger"] = "swagger"

    @property
    def is_file(self) -> bool:
        return self.shape.type == "file"


Parameter = Union[OpenAPIParameter, SwaggerParameter]


def decode_parameter(
    raw: Mapping[str, Any], definitions: Mapping[str, SchemaNode]
) -> Parameter | None:
    """Decode one raw parameter dict into its dialect variant.

    Args:
        raw: The parameter object, already ``$ref``-resolved by the caller.
        definitions: Named schemas, used to look through a ``$ref`` on the
            parameter's nested schema.

    Returns:
        The decoded parameter, or ``None`` when *raw* has no usable ``name``.
    """
    name = raw.get("name")
    if not isinstance(name, str) or not name:
        return None
    location = str(raw.get("in", "query"))
    description = raw.get("description") if isinstance(raw.get("description"), str) else None
    required = bool(raw.get("required", False))
    schema = raw.get("schema")
    schema = schema if isinstance(schema, dict) else {}

    if location in _SWAGGER_ONLY_LOCATIONS or ("type" in raw and not schema):
        return SwaggerParameter(
            name=name,
            location=location,
            description=description,
            required=required,
            schema=schema,
            shape=_shape_of(raw, fallback=_look_through(schema, definitions)),
        )

    return OpenAPIParameter(
        name=name,
        location=location,
        description=description,
        required=required,
        schema=schema,
        shape=_shape_of(_look_through(schema, definitions), override=raw),
    )


def schema_shape(schema: Any, definitions: Mapping[str, SchemaNode]) -> ValueShape:
    """Return the :class:`ValueShape` of a standalone schema (e.g. a form property)."""
    if not isinstance(schema, dict):
        return ValueShape()
    return _shape_of(_look_through(schema, definitions))


def parameter_example(shape: ValueShape) -> str:
    """Derive the string value for a header, query, path or form field.

    An explicit example or default wins. Otherwise a canned value is chosen
    from the type: ``"0"`` for integers, ``"0.0"`` for numbers, ``"true"``
    for booleans, the first enum entry or a format literal for strings.
    Arrays and unrecognised shapes yield ``""``.
    """
    if shape.has_example:
        return _stringify(shape.example)
    if shape.type == "integer":
        return "0"
    if shape.type == "number":
        return "0.0"
    if shape.type == "boolean":
        return "true"
    if shape.type == "string" or (shape.type is None and shape.enum):
        if shape.enum:
            return _stringify(shape.enum[0])
        return _FORMAT_EXAMPLES.get(shape.format or "", "")
    return ""


def _shape_of(
    source: Mapping[str, Any],
    fallback: Optional[Mapping[str, Any]] = None,
    override: Optional[Mapping[str, Any]] = None,
) -> ValueShape:
    """Build a shape from *source*, letting *override* supply the example.

    ``override`` is the OpenAPI parameter itself, whose ``example`` takes
    precedence over the schema's. ``fallback`` is consulted for an example
    only when *source* has none.
    """
    enum_values = source.get("enum")
    example, has_example = _explicit_example(override or {})
    if not has_example:
        example, has_example = _explicit_example(source)
    if not has_example and fallback:
        example, has_example = _explicit_example(fallback)
    fmt = source.get("format")
    return ValueShape(
        type=schema_type_of(dict(source)),
        format=str(fmt) if fmt is not None else None,
        enum=tuple(enum_values) if isinstance(enum_values, list) else (),
        example=example,
        has_example=has_example,
    )


def _explicit_example(source: Mapping[str, Any]) -> tuple[Any, bool]:
    for key in ("example", "default"):
        if key in source:
            return source[key], True
    return None, False


def _look_through(schema: SchemaNode, definitions: Mapping[str, SchemaNode]) -> SchemaNode:
    """Follow a chain of schema ``$ref`` pointers to the named definition."""
    seen: set[str] = set()
    while isinstance(schema.get("$ref"), str):
        name = ref_name(schema["$ref"])
        target = definitions.get(name)
        if name in seen or not isinstance(target, dict):
            return {}
        seen.add(name)
        schema = target
    return schema


def _stringify(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)
