"""Render request drafts back into ``curl`` commands.

The inverse direction of :mod:`apidraft.parser.curl`: a
:class:`~apidraft.models.RequestDraft` is written as a multi-line ``curl``
command that the parser reads back with the same method, URL, headers and
raw body. Every argument is single-quoted for POSIX shells.

Also provides the query-string helpers used to keep a draft's URL and its
parameter list in sync.
"""

from __future__ import annotations

from typing import Callable, Iterable, Optional
from urllib.parse import quote, unquote

from apidraft.ids import IdFactory
from apidraft.models import BodyType, FieldKind, KeyValueEntry, RequestDraft

_CONTINUATION = " \\\n  "
_BODYLESS_METHODS = frozenset({"GET", "HEAD"})


def shell_quote(arg: str) -> str:
    """Single-quote *arg* for a POSIX shell, dropping NUL bytes."""
    return "'" + arg.replace("\x00", "").replace("'", "'\\''") + "'"


def draft_to_curl(draft: RequestDraft) -> str:
    """Return a ``curl`` command that replays *draft*.

    Disabled or keyless headers and form fields are skipped. GET and HEAD
    requests never carry a body.

    Example::

        curl -X POST 'https://api.example.com/pets' \\
          -H 'Content-Type: application/json' \\
          --data-raw '{"name": "Rex"}'
    """
    method = draft.method.upper()
    parts = [f"curl -X {method} {shell_quote(draft.url)}"]

    for header in _active(draft.headers):
        parts.append(f"-H {shell_quote(f'{header.key}: {header.value}')}")

    if method not in _BODYLESS_METHODS:
        if draft.body_type == BodyType.RAW and draft.body_raw:
            parts.append(f"--data-raw {shell_quote(draft.body_raw)}")
        elif draft.body_type == BodyType.URLENCODED:
            for item in _active(draft.body_form):
                parts.append(f"--data {shell_quote(f'{item.key}={item.value}')}")
        elif draft.body_type == BodyType.FORM_DATA:
            for item in _active(draft.body_form):
                prefix = "@" if item.type == FieldKind.FILE else ""
                parts.append(f"--form {shell_quote(f'{item.key}={prefix}{item.value}')}")

    return _CONTINUATION.join(parts)


def params_to_query_string(params: Iterable[KeyValueEntry]) -> str:
    """Encode enabled, keyed parameters as ``a=1&b=2`` (percent-encoded)."""
    return "&".join(
        f"{quote(p.key, safe='')}={quote(p.value, safe='')}" for p in _active(params)
    )


def query_string_to_params(
    query: str, ids: Optional[Callable[[], str]] = None
) -> list[KeyValueEntry]:
    """Decode ``a=1&b=2`` into enabled parameter entries, preserving order.

    A pair without ``=`` becomes a key with an empty value.
    """
    if not query:
        return []
    next_id = ids if ids is not None else IdFactory()
    entries: list[KeyValueEntry] = []
    for pair in query.lstrip("?").split("&"):
        key, _, value = pair.partition("=")
        entries.append(KeyValueEntry(id=next_id(), key=unquote(key), value=unquote(value)))
    return entries


def _active(entries: Iterable[KeyValueEntry]) -> list[KeyValueEntry]:
    return [entry for entry in entries if entry.enabled and entry.key]
