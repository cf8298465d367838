"""Group imported drafts by tag and assemble the final :class:`ParseResult`.

This is the last stage of the document pipeline and also hosts its public
entry points:

* :func:`parse_spec_text` -- JSON text in, :class:`~apidraft.models.ParseResult`
  (or ``None``) out.
* :func:`import_document` -- the same for an already-decoded document, as
  produced by :func:`~apidraft.parser.loader.load_document`.

Groups keep the document order of their drafts, are sorted by name, and the
``"default"`` group (untagged operations) always comes last. Group
descriptions come from the document's top-level ``tags`` list.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Optional

from apidraft.ids import IdFactory
from apidraft.models import ParseResult, RequestDraft, TagGroup
from apidraft.parser.document import DEFAULT_TAG, ImportedOperation, parse_document

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Imported API"


def group_by_tag(
    operations: list[ImportedOperation],
    descriptions: Optional[dict[str, str]] = None,
) -> list[TagGroup]:
    """Bucket drafts by tag and order the buckets.

    Args:
        operations: Drafts with their resolved tag, in creation order.
        descriptions: Tag name -> description, from the document's ``tags``.

    Returns:
        Tag groups sorted alphabetically with ``"default"`` last.
    """
    buckets: dict[str, list[RequestDraft]] = {}
    for op in operations:
        buckets.setdefault(op.tag, []).append(op.draft)

    descriptions = descriptions or {}
    return [
        TagGroup(name=name, description=descriptions.get(name), requests=buckets[name])
        for name in sorted(buckets, key=lambda name: (name == DEFAULT_TAG, name))
    ]


def tag_descriptions(doc: dict[str, Any]) -> dict[str, str]:
    """Map tag name -> description from the document's top-level ``tags`` list."""
    descriptions: dict[str, str] = {}
    tags = doc.get("tags")
    if not isinstance(tags, list):
        return descriptions
    for tag in tags:
        if not isinstance(tag, dict):
            continue
        name, description = tag.get("name"), tag.get("description")
        if isinstance(name, str) and isinstance(description, str):
            descriptions[name] = description
    return descriptions


def document_title(doc: dict[str, Any]) -> str:
    """Return ``info.title``, falling back to ``"Imported API"``."""
    info = doc.get("info")
    if isinstance(info, dict) and isinstance(info.get("title"), str) and info["title"]:
        return info["title"]
    return DEFAULT_TITLE


def assemble(doc: dict[str, Any], operations: list[ImportedOperation]) -> ParseResult:
    """Build the :class:`ParseResult` for *doc* from its imported operations."""
    return ParseResult(
        title=document_title(doc),
        tag_groups=group_by_tag(operations, tag_descriptions(doc)),
    )


def import_document(
    doc: Any,
    ids: Optional[Callable[[], str]] = None,
    example_indent: int = 2,
) -> ParseResult | None:
    """Run the full import pipeline over a decoded document.

    Returns:
        The assembled result, or ``None`` when the document has no ``paths``
        or declares no importable operation.
    """
    operations = parse_document(
        doc, ids if ids is not None else IdFactory(), example_indent=example_indent
    )
    if not operations:
        return None
    return assemble(doc, operations)


def parse_spec_text(
    text: str,
    ids: Optional[Callable[[], str]] = None,
    example_indent: int = 2,
) -> ParseResult | None:
    """Parse an OpenAPI / Swagger JSON text into grouped request drafts.

    Returns:
        The assembled result, or ``None`` when *text* is not valid JSON, has
        no ``paths``, or declares no importable operation.

    Example::

        result = parse_spec_text(Path("petstore.json").read_text())
        if result is not None:
            for group in result.tag_groups:
                print(group.name, len(group.requests))
    """
    try:
        doc = json.loads(text)
    except (json.JSONDecodeError, TypeError, RecursionError) as exc:
        logger.debug("Specification text is not valid JSON: %s", exc)
        return None
    return import_document(doc, ids, example_indent)
