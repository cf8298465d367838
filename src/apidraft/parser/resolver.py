"""Look up ``$ref`` JSON Reference pointers inside a specification document.

Two kinds of lookup are needed by the importer:

* **Schema references** are resolved by bare name against a merged
  definitions map (Swagger 2 ``definitions`` plus OpenAPI 3
  ``components/schemas``); see :func:`ref_name` and
  :func:`collect_definitions`. The recursive, cycle-guarded expansion lives
  in :mod:`apidraft.parser.synthesizer`.
* **Component references** on parameters, request bodies and responses
  (``#/components/parameters/Limit``, ``#/responses/NotFound``) are resolved
  one level by JSON Pointer via :func:`resolve_pointer`.

Only internal references (those starting with ``#/``) are followed. Unlike a
validating loader, nothing here raises: an unresolvable pointer yields
``None`` and the caller falls back to a safe default.
"""

from __future__ import annotations

import logging
from typing import Any

from apidraft.models import SchemaNode

logger = logging.getLogger(__name__)

_SCHEMA_PREFIXES = ("#/definitions/", "#/components/schemas/")


def ref_name(ref: str) -> str:
    """Strip a definitions or components prefix from *ref*, leaving the bare name.

    ``"#/components/schemas/Pet"`` and ``"#/definitions/Pet"`` both become
    ``"Pet"``. Any other pointer is returned from its last segment, so an
    unusual location still maps onto a name in the definitions map.
    """
    for prefix in _SCHEMA_PREFIXES:
        if ref.startswith(prefix):
            return _unescape(ref[len(prefix):])
    return _unescape(ref.rsplit("/", 1)[-1])


def collect_definitions(doc: dict[str, Any]) -> dict[str, SchemaNode]:
    """Merge both dialects' named schemas into one name -> schema map.

    OpenAPI 3 ``components/schemas`` entries win over Swagger 2
    ``definitions`` entries of the same name.
    """
    definitions: dict[str, SchemaNode] = {}
    legacy = doc.get("definitions")
    if isinstance(legacy, dict):
        definitions.update(legacy)
    components = doc.get("components")
    if isinstance(components, dict) and isinstance(components.get("schemas"), dict):
        definitions.update(components["schemas"])
    return definitions


def resolve_pointer(ref: str, root: dict[str, Any]) -> Any:
    """Resolve a single ``#/...`` pointer against the root document.

    Handles RFC 6901 JSON Pointer escaping (``~0`` for ``~``, ``~1`` for
    ``/``) and numeric list indices.

    Returns:
        The value found at the referenced path, or ``None`` when the pointer
        is external or any segment does not exist.
    """
    if not ref.startswith("#/"):
        logger.debug("Ignoring external $ref %s", ref)
        return None

    current: Any = root
    for segment in ref[2:].split("/"):
        segment = _unescape(segment)
        if isinstance(current, dict):
            if segment not in current:
                logger.debug("Cannot resolve $ref %s: key %r not found", ref, segment)
                return None
            current = current[segment]
        elif isinstance(current, list):
            try:
                current = current[int(segment)]
            except (ValueError, IndexError):
                logger.debug("Cannot resolve $ref %s: bad index %r", ref, segment)
                return None
        else:
            return None
    return current


def deref(obj: Any, root: dict[str, Any]) -> Any:
    """Follow ``$ref`` on *obj* one level at a time until a concrete object is reached.

    Used for parameter, request-body and response objects, which may be
    defined once under ``components`` and referenced from many operations.
    Chains are followed with a ``seen`` set so that a pointer loop resolves
    to ``None`` instead of spinning.
    """
    seen: set[str] = set()
    while isinstance(obj, dict) and isinstance(obj.get("$ref"), str):
        ref = obj["$ref"]
        if ref in seen:
            logger.debug("Circular component $ref %s", ref)
            return None
        seen.add(ref)
        obj = resolve_pointer(ref, root)
    return obj


def _unescape(segment: str) -> str:
    return segment.replace("~1", "/").replace("~0", "~")
