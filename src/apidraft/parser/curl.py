"""Extract a request draft from a pasted ``curl`` command.

This is a best-effort, pattern-based extractor rather than a shell parser:
it recognises the common flag shapes produced by browser "Copy as cURL"
actions and API documentation, and silently ignores everything else.
Quoted arguments are matched as simple quote pairs; escaped quotes inside
them are not unescaped.

Recognised flags:

* ``-X`` / ``--request`` -- the method (uppercased).
* the first ``http://`` or ``https://`` token -- the URL, whose query string
  is also decomposed into parameters.
* ``-H`` / ``--header`` -- every quoted ``Key: Value`` header.
* ``--data-raw``, ``--data-binary``, ``--data-urlencode``, ``--data``, ``-d``,
  ``--form``, ``-F`` -- the first quoted body argument. A body flag without
  an explicit method implies ``POST``.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, Optional
from urllib.parse import parse_qsl, urlsplit

from apidraft.ids import IdFactory
from apidraft.models import BodyType, CurlImport, FieldKind, KeyValueEntry, RequestDraft

logger = logging.getLogger(__name__)

_CONTINUATION_RE = re.compile(r"\\\r?\n")
_NEWLINES_RE = re.compile(r"[\r\n]+")
# -x is the proxy flag, so only the long form is case-insensitive
_METHOD_RE = re.compile(r"(?<!\S)(?:-X|(?i:--request))\s+([A-Za-z]+)")
_PROXY_RE = re.compile(r"(?<!\S)(?:-x|--proxy)\s+(?:'[^']*'|\"[^\"]*\"|\S+)")
_URL_RE = re.compile(r"https?://[^\s'\"]+", re.IGNORECASE)
_HEADER_RE = re.compile(r"(?:-H|--header)\s+(['\"])(.*?)\1")
_DATA_RE = re.compile(
    r"(--data-raw|--data-binary|--data-urlencode|--data|-d|--form|-F)\s+(['\"])(.*?)\2",
    re.DOTALL,
)
_FORM_FLAGS = frozenset({"--form", "-F"})

IMPORTED_REQUEST_NAME = "Imported Request"


def parse_curl(text: str, ids: Optional[Callable[[], str]] = None) -> CurlImport | None:
    """Parse *text* as a curl command.

    Args:
        text: The pasted command, possibly spanning several lines joined
            with trailing backslashes.
        ids: Identifier source for the produced entries. A fresh
            :class:`~apidraft.ids.IdFactory` is used when omitted.

    Returns:
        The extracted :class:`~apidraft.models.CurlImport`, or ``None`` when
        the text does not start with ``curl``.

    Example::

        >>> draft = parse_curl("curl -X DELETE https://api.example.com/pets/1")
        >>> draft.method, draft.url
        ('DELETE', 'https://api.example.com/pets/1')
    """
    if not text or not text.strip().lower().startswith("curl"):
        logger.debug("Input does not start with 'curl', nothing to import")
        return None

    next_id = ids if ids is not None else IdFactory()
    command = _NEWLINES_RE.sub(" ", _CONTINUATION_RE.sub(" ", text)).strip()

    method_match = _METHOD_RE.search(command)
    method = method_match.group(1).upper() if method_match else "GET"

    url: Optional[str] = None
    params: list[KeyValueEntry] = []
    url_match = _URL_RE.search(_PROXY_RE.sub(" ", command))
    if url_match:
        url = _strip_quotes(url_match.group(0))
        params = [
            KeyValueEntry(id=next_id(), key=key, value=value)
            for key, value in parse_qsl(_query_of(url), keep_blank_values=True)
        ]

    headers: list[KeyValueEntry] = []
    for header_match in _HEADER_RE.finditer(command):
        content = header_match.group(2)
        separator = content.find(":")
        if separator > 0:
            headers.append(
                KeyValueEntry(
                    id=next_id(),
                    key=content[:separator].strip(),
                    value=content[separator + 1:].strip(),
                )
            )

    body_type = BodyType.RAW
    body_raw = ""
    body_form: Optional[list[KeyValueEntry]] = None
    data_match = _DATA_RE.search(command)
    if data_match:
        flag, argument = data_match.group(1), data_match.group(3)
        if flag in _FORM_FLAGS:
            body_type = BodyType.FORM_DATA
            key, sep, value = argument.partition("=")
            if sep:
                body_form = [
                    KeyValueEntry(id=next_id(), key=key, value=value, type=FieldKind.TEXT)
                ]
        else:
            body_raw = argument
        if not method_match:
            method = "POST"

    return CurlImport(
        method=method,
        url=url,
        headers=headers,
        params=params,
        body_type=body_type,
        body_raw=body_raw,
        body_form=body_form,
    )


def curl_to_draft(text: str, ids: Optional[Callable[[], str]] = None) -> RequestDraft | None:
    """Parse *text* and complete the result into a full :class:`RequestDraft`.

    The draft is named after the URL path, or the URL origin when the path is
    the root; without a URL it is called ``"Imported Request"``.
    """
    next_id = ids if ids is not None else IdFactory()
    parsed = parse_curl(text, next_id)
    if parsed is None:
        return None

    return RequestDraft(
        id=next_id(),
        name=_name_from_url(parsed.url),
        url=parsed.url or "",
        method=parsed.method,
        headers=parsed.headers,
        params=parsed.params,
        body_type=parsed.body_type,
        body_raw=parsed.body_raw,
        body_form=parsed.body_form or [],
    )


def _name_from_url(url: Optional[str]) -> str:
    if not url:
        return IMPORTED_REQUEST_NAME
    try:
        parts = urlsplit(url)
    except ValueError:
        return IMPORTED_REQUEST_NAME
    if not parts.scheme or not parts.netloc:
        return IMPORTED_REQUEST_NAME
    if parts.path in ("", "/"):
        return f"{parts.scheme}://{parts.netloc}"
    return parts.path


def _query_of(url: str) -> str:
    try:
        return urlsplit(url).query
    except ValueError:
        logger.debug("Unparseable URL %s, skipping query parameters", url)
        return ""


def _strip_quotes(token: str) -> str:
    if len(token) >= 2 and token[0] == token[-1] and token[0] in "'\"":
        return token[1:-1]
    return token
