"""Read import sources from a URL, local file, or stdin.

This module is the only part of :mod:`apidraft.parser` that performs I/O. It
turns a source descriptor into text (:func:`load_text`) or into a decoded
document (:func:`load_document`), raising
:class:`~apidraft.exceptions.SourceLoadError` on failure. The pure import
functions downstream never raise.

Source descriptors:

* ``-`` -- read everything from stdin.
* ``http://...`` / ``https://...`` -- fetched with :mod:`httpx`, honouring
  the timeout and SSL settings of :class:`~apidraft.models.FetchConfig`.
* anything else -- a local file path.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

import httpx
import yaml

from apidraft.exceptions import SourceLoadError
from apidraft.models import FetchConfig

logger = logging.getLogger(__name__)


def load_text(source: str, fetch: Optional[FetchConfig] = None) -> str:
    """Load raw text from URL, file path, or stdin ('-').

    Args:
        source: A URL (http/https), file path, or '-' for stdin.
        fetch: Network settings for URL sources; defaults when omitted.

    Returns:
        The source content.

    Raises:
        SourceLoadError: If the source cannot be read or is empty.
    """
    if source == "-":
        text = _load_from_stdin()
    elif source.startswith(("http://", "https://")):
        text = _load_from_url(source, fetch or FetchConfig())
    else:
        text = _load_from_file(source)

    if not text.strip():
        raise SourceLoadError(f"Source is empty: {source}")
    return text


def load_document(source: str, fetch: Optional[FetchConfig] = None) -> Any:
    """Load and decode a specification document.

    JSON is tried first; ``.yaml``/``.yml`` files and content that is not
    valid JSON fall back to YAML, which lets YAML-authored documents flow
    into the same importer.

    Raises:
        SourceLoadError: If the source cannot be read or decoded as either
            format.
    """
    text = load_text(source, fetch)
    hint = "yaml" if source.lower().endswith((".yaml", ".yml")) else ""
    return decode_document(text, hint=hint)


def decode_document(content: str, hint: str = "") -> Any:
    """Decode *content* as JSON, falling back to YAML.

    Args:
        content: The raw document text.
        hint: ``"yaml"`` to skip the JSON attempt.

    Raises:
        SourceLoadError: If neither format can decode the content.
    """
    json_error: Exception | None = None
    if hint != "yaml":
        try:
            return json.loads(content)
        except (json.JSONDecodeError, RecursionError) as exc:
            json_error = exc
            logger.debug("Content is not JSON, trying YAML: %s", exc)

    try:
        return yaml.safe_load(content)
    except (yaml.YAMLError, RecursionError) as exc:
        msg = "Failed to parse document as JSON or YAML"
        if json_error:
            msg += f"\n  JSON error: {json_error}"
        msg += f"\n  YAML error: {exc}"
        raise SourceLoadError(msg) from exc


def _load_from_stdin() -> str:
    try:
        return sys.stdin.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceLoadError(f"Failed to read from stdin: {exc}") from exc


def _load_from_url(url: str, fetch: FetchConfig) -> str:
    """Fetch *url*, following redirects.

    Raises:
        SourceLoadError: On HTTP error status or network failure.
    """
    logger.debug("Fetching %s (timeout=%ss)", url, fetch.timeout)
    try:
        response = httpx.get(
            url,
            timeout=fetch.timeout,
            verify=fetch.verify_ssl,
            follow_redirects=True,
        )
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SourceLoadError(
            f"HTTP {exc.response.status_code} fetching {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise SourceLoadError(f"Failed to fetch {url}: {exc}") from exc
    return response.text


def _load_from_file(path: str) -> str:
    file_path = Path(path)
    if not file_path.is_file():
        raise SourceLoadError(f"File not found: {path}")
    try:
        return file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceLoadError(f"Failed to read {path}: {exc}") from exc
