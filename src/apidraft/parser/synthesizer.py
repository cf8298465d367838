"""Synthesize representative example values from JSON Schema fragments.

Given a schema node and the document's definitions map, :func:`synthesize`
builds a value shaped like a valid instance: objects get every declared
property, arrays a single item, scalars a canned placeholder. The same routine
produces request-body examples and documented response examples for both
OpenAPI 3 and Swagger 2 documents.

Reference cycles (a ``TreeNode`` whose ``children`` are ``TreeNode`` items,
or ``A -> B -> A``) are cut by a *per-branch* ``visited`` set of reference
names. The set is an immutable :class:`frozenset` threaded through every
recursive call by value; expanding a reference derives a new set with
``visited | {name}``, so a reference expanded in one property never
suppresses the same reference in a sibling property. A reference already on
the current path synthesizes to an empty object.

Synthesis never raises on malformed schemas; anything it cannot interpret
becomes ``None``.
"""

from __future__ import annotations

import json
import logging
from datetime import date, datetime, timezone
from typing import Any, Mapping

from apidraft.models import SchemaNode
from apidraft.parser.resolver import ref_name

logger = logging.getLogger(__name__)

_NO_VISITS: frozenset[str] = frozenset()
_COMPOSITION_KEYWORDS = ("allOf", "oneOf", "anyOf")


def synthesize(
    schema: Any,
    definitions: Mapping[str, SchemaNode],
    visited: frozenset[str] = _NO_VISITS,
) -> Any:
    """Return an example value for *schema*.

    Args:
        schema: A schema node (dict). Non-dict input synthesizes to ``None``.
        definitions: Bare reference name -> schema, as built by
            :func:`~apidraft.parser.resolver.collect_definitions`.
        visited: Reference names already expanded on the path from the root
            to this node.

    Returns:
        A JSON-compatible value: dict, list, str, int, float, bool or None.

    Example::

        >>> synthesize({"type": "object", "properties": {"id": {"type": "integer"}}}, {})
        {'id': 0}
    """
    if not isinstance(schema, dict):
        return None

    ref = schema.get("$ref")
    if isinstance(ref, str):
        name = ref_name(ref)
        if name in visited:
            logger.debug("Reference cycle at %s, emitting empty object", name)
            return {}
        target = definitions.get(name)
        if target is None:
            logger.debug("Unresolvable schema reference %s", ref)
            return None
        return synthesize(target, definitions, visited | {name})

    if "example" in schema:
        return schema["example"]

    schema_type = schema_type_of(schema)
    if schema_type is None:
        if any(keyword in schema for keyword in _COMPOSITION_KEYWORDS):
            return _synthesize_composition(schema, definitions, visited)
        schema_type = _implied_type(schema)
    if schema_type == "object":
        return _synthesize_object(schema, definitions, visited)
    if schema_type == "array":
        items = schema.get("items")
        if not isinstance(items, dict):
            return []
        return [synthesize(items, definitions, visited)]
    if schema_type == "string":
        return _synthesize_string(schema)
    if schema_type == "integer":
        return 0
    if schema_type == "number":
        return 0.0
    if schema_type == "boolean":
        return True
    return None


def schema_type_of(schema: SchemaNode) -> str | None:
    """Return the declared ``type`` of *schema*, or ``None`` when absent.

    Handles OpenAPI 3.1 type arrays (e.g., ``["string", "null"]``) by
    returning the first non-null entry.
    """
    type_value = schema.get("type")
    if isinstance(type_value, list):
        non_null = [t for t in type_value if t != "null"]
        return str(non_null[0]) if non_null else None
    if type_value is None:
        return None
    return str(type_value)


def _implied_type(schema: SchemaNode) -> str | None:
    # Untyped fragments such as allOf parts often carry only properties or items
    if isinstance(schema.get("properties"), dict):
        return "object"
    if isinstance(schema.get("items"), dict):
        return "array"
    return None


def example_json(value: Any, indent: int = 2) -> str:
    """Serialise a synthesized value as the JSON text used in request drafts."""
    return json.dumps(value, indent=indent, ensure_ascii=False, default=str)


def _synthesize_object(
    schema: SchemaNode, definitions: Mapping[str, SchemaNode], visited: frozenset[str]
) -> dict[str, Any]:
    properties = schema.get("properties")
    if not isinstance(properties, dict):
        return {}
    return {
        name: synthesize(prop, definitions, visited)
        for name, prop in properties.items()
    }


def _synthesize_string(schema: SchemaNode) -> Any:
    enum_values = schema.get("enum")
    if isinstance(enum_values, list) and enum_values:
        return enum_values[0]
    fmt = schema.get("format")
    if fmt == "date":
        return date.today().isoformat()
    if fmt == "date-time":
        return datetime.now(timezone.utc).isoformat()
    return "string"


def _synthesize_composition(
    schema: SchemaNode, definitions: Mapping[str, SchemaNode], visited: frozenset[str]
) -> Any:
    all_of = schema.get("allOf")
    if isinstance(all_of, list):
        merged: dict[str, Any] = {}
        for sub in all_of:
            value = synthesize(sub, definitions, visited)
            if isinstance(value, dict):
                merged.update(value)
        return merged

    # oneOf / anyOf: the first alternative is representative enough
    for keyword in ("oneOf", "anyOf"):
        options = schema.get(keyword)
        if isinstance(options, list) and options:
            return synthesize(options[0], definitions, visited)

    return None
