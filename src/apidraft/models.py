"""Canonical Pydantic models shared across all apidraft modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into two groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`OutputConfig`, :class:`FetchConfig`, :class:`SynthesisConfig`,
    and :class:`GlobalConfig`.

**Import output models** -- produced by the parsers and handed to the
request-editing workspace:
    :class:`HTTPMethod`, :class:`BodyType`, :class:`FieldKind`,
    :class:`KeyValueEntry`, :class:`ExpectedResponse`, :class:`RequestDraft`,
    :class:`CurlImport`, :class:`TagGroup`, and :class:`ParseResult`.

Import output models are frozen: a parse call hands the caller an immutable
snapshot. They serialise with the workspace's camelCase field names when
dumped with ``by_alias=True``.
"""

from __future__ import annotations

import enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


SchemaNode = dict[str, Any]
"""A loosely-typed JSON Schema fragment, kept as the raw decoded mapping."""


# --- Config ---


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class FetchConfig(BaseModel):
    """Settings used when an import source is an ``http(s)://`` URL."""

    timeout: float = Field(default=30.0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")


class SynthesisConfig(BaseModel):
    """Settings for serialising synthesized example bodies."""

    example_indent: int = Field(
        default=2, ge=0, description="JSON indent for synthesized bodies"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/apidraft/config.json``.

    Loaded and saved by :func:`~apidraft.config.load_global_config` and
    :func:`~apidraft.config.save_global_config`. See
    :func:`~apidraft.config.resolve_config` for the full precedence chain.
    """

    output: OutputConfig = Field(default_factory=OutputConfig)
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    synthesis: SynthesisConfig = Field(default_factory=SynthesisConfig)


# --- Import Output Models ---


class HTTPMethod(str, enum.Enum):
    """HTTP verbs imported from a specification document's path items."""

    GET = "get"
    POST = "post"
    PUT = "put"
    DELETE = "delete"
    PATCH = "patch"
    HEAD = "head"
    OPTIONS = "options"


class BodyType(str, enum.Enum):
    """How a draft's body is encoded; selects ``body_raw`` or ``body_form``."""

    NONE = "none"
    RAW = "raw"
    URLENCODED = "x-www-form-urlencoded"
    FORM_DATA = "form-data"


class FieldKind(str, enum.Enum):
    """Kind of a form field: plain text or a file upload."""

    TEXT = "text"
    FILE = "file"


class _Snapshot(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class KeyValueEntry(_Snapshot):
    """A single header, query parameter, or form field.

    Keys need not be unique within a list; list order is insertion order.
    ``type`` is only set on form fields.
    """

    id: str
    key: str
    value: str = ""
    enabled: bool = True
    type: Optional[FieldKind] = None
    description: Optional[str] = None


class ExpectedResponse(_Snapshot):
    """The documented response of an imported operation.

    ``example`` holds the synthesized response body already serialised as
    JSON text, ready for display next to a live response.
    """

    status: int = 200
    description: Optional[str] = None
    schema_: Optional[dict[str, Any]] = Field(default=None, alias="schema")
    example: Optional[str] = None


def _check_body_consistency(
    body_type: BodyType, body_raw: str, body_form: Optional[list[KeyValueEntry]]
) -> None:
    if body_type in (BodyType.NONE, BodyType.RAW) and body_form:
        raise ValueError(f"bodyType {body_type.value!r} cannot carry form fields")
    if body_type != BodyType.RAW and body_raw:
        raise ValueError(f"bodyType {body_type.value!r} cannot carry a raw body")


class RequestDraft(_Snapshot):
    """A structured, not-yet-sent HTTP request produced by an importer.

    ``url`` may be relative (``/v2/pets``) when the source document only
    declared a base path; the workspace re-bases it against the active
    environment.
    """

    id: str
    name: str
    description: Optional[str] = None
    url: str = ""
    method: str = "GET"
    headers: list[KeyValueEntry] = Field(default_factory=list)
    params: list[KeyValueEntry] = Field(default_factory=list)
    body_type: BodyType = Field(default=BodyType.NONE, alias="bodyType")
    body_raw: str = Field(default="", alias="bodyRaw")
    body_form: list[KeyValueEntry] = Field(default_factory=list, alias="bodyForm")
    expected_response: Optional[ExpectedResponse] = Field(
        default=None, alias="expectedResponse"
    )

    @model_validator(mode="after")
    def _body_matches_type(self) -> RequestDraft:
        _check_body_consistency(self.body_type, self.body_raw, self.body_form)
        return self


class CurlImport(_Snapshot):
    """The partial draft extracted from a curl command.

    Only the fields a curl command can express are present; ``url`` is
    ``None`` when no ``http(s)://`` token was found and ``body_form`` is
    ``None`` unless a form flag carried a ``key=value`` pair.
    """

    method: str = "GET"
    url: Optional[str] = None
    headers: list[KeyValueEntry] = Field(default_factory=list)
    params: list[KeyValueEntry] = Field(default_factory=list)
    body_type: BodyType = Field(default=BodyType.RAW, alias="bodyType")
    body_raw: str = Field(default="", alias="bodyRaw")
    body_form: Optional[list[KeyValueEntry]] = Field(default=None, alias="bodyForm")

    @model_validator(mode="after")
    def _body_matches_type(self) -> CurlImport:
        _check_body_consistency(self.body_type, self.body_raw, self.body_form)
        return self


class TagGroup(_Snapshot):
    """A named bucket of drafts that share a specification-declared tag."""

    name: str
    description: Optional[str] = None
    requests: list[RequestDraft] = Field(default_factory=list)


class ParseResult(_Snapshot):
    """Complete result of importing one specification document.

    ``tag_groups`` are ordered alphabetically by name, except that the
    ``"default"`` group (operations without tags) always comes last.
    """

    title: str
    tag_groups: list[TagGroup] = Field(default_factory=list, alias="tagGroups")

    @property
    def request_count(self) -> int:
        """Total number of drafts across all groups."""
        return sum(len(group.requests) for group in self.tag_groups)
