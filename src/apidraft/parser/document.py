"""Turn the operations of an OpenAPI 3 / Swagger 2 document into request drafts.

This module walks a decoded specification document and produces one
:class:`~apidraft.models.RequestDraft` per path + HTTP verb, ready to be
grouped by :mod:`apidraft.parser.assembler`.

The dialect is inferred field by field instead of from the ``openapi`` /
``swagger`` version string, because real documents are frequently hybrids:

* base URL -- ``servers[0].url`` (OpenAPI 3), else the relative ``basePath``
  (Swagger 2). No host is ever invented; relative URLs are re-based by the
  workspace's environment settings.
* parameters -- decoded once into dialect variants by
  :func:`~apidraft.parser.dialects.decode_parameter`; path-level parameters
  are merged with operation-level ones (operation wins on the same
  ``name`` + ``in``).
* body -- ``requestBody.content`` (OpenAPI 3) takes precedence over
  ``in: body`` / ``in: formData`` parameters (Swagger 2).
* responses -- ``content['application/json'].schema`` (OpenAPI 3) or
  ``schema`` (Swagger 2).

Missing or malformed per-operation fields degrade to safe defaults; only a
document without a ``paths`` object is rejected.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

from apidraft.ids import IdFactory
from apidraft.models import (
    BodyType,
    ExpectedResponse,
    FieldKind,
    HTTPMethod,
    KeyValueEntry,
    RequestDraft,
    SchemaNode,
)
from apidraft.parser.dialects import (
    Parameter,
    SwaggerParameter,
    decode_parameter,
    parameter_example,
    schema_shape,
)
from apidraft.parser.resolver import collect_definitions, deref, ref_name
from apidraft.parser.synthesizer import example_json, synthesize

logger = logging.getLogger(__name__)

# HTTP methods imported from path items
_HTTP_METHODS = frozenset(m.value for m in HTTPMethod)

DEFAULT_TAG = "default"

JSON_MEDIA_TYPE = "application/json"
URLENCODED_MEDIA_TYPE = "application/x-www-form-urlencoded"
MULTIPART_MEDIA_TYPE = "multipart/form-data"

_RESPONSE_KEYS = ("200", "201", "default")


@dataclass(frozen=True)
class ImportedOperation:
    """A draft together with the tag it will be grouped under."""

    tag: str
    draft: RequestDraft


@dataclass
class _Body:
    type: BodyType = BodyType.NONE
    raw: str = ""
    form: Optional[list[KeyValueEntry]] = None
    content_type: Optional[str] = None


class _Context:
    """Per-document state shared by the helpers of one :func:`parse_document` call."""

    def __init__(self, doc: dict[str, Any], ids: Callable[[], str], indent: int) -> None:
        self.doc = doc
        self.ids = ids
        self.indent = indent
        self.definitions = collect_definitions(doc)

    def entry(self, key: str, value: str = "", **extra: Any) -> KeyValueEntry:
        return KeyValueEntry(id=self.ids(), key=key, value=value, **extra)

    def example_text(self, schema: Any) -> str:
        try:
            return example_json(synthesize(schema, self.definitions), self.indent)
        except RecursionError:
            # Reference chains deeper than the interpreter stack
            logger.debug("Schema nests too deeply to synthesize, using an empty object")
            return "{}"


def parse_document(
    doc: Any,
    ids: Optional[Callable[[], str]] = None,
    example_indent: int = 2,
) -> list[ImportedOperation] | None:
    """Extract one draft per path + verb from a decoded specification document.

    Args:
        doc: The decoded JSON document.
        ids: Identifier source; a fresh :class:`~apidraft.ids.IdFactory`
            when omitted.
        example_indent: JSON indent of synthesized bodies and examples.

    Returns:
        The imported operations in document order, or ``None`` when *doc*
        is not an object or has no ``paths`` object.
    """
    if not isinstance(doc, dict) or not isinstance(doc.get("paths"), dict):
        logger.debug("Document has no 'paths' object, nothing to import")
        return None

    ctx = _Context(doc, ids if ids is not None else IdFactory(), example_indent)
    base_url = _base_url(doc)
    imported: list[ImportedOperation] = []

    for path, path_item in doc["paths"].items():
        path_item = deref(path_item, doc)
        if not isinstance(path_item, dict):
            continue
        path_params = _as_list(path_item.get("parameters"))

        for method_name, operation in path_item.items():
            if not isinstance(method_name, str) or method_name.lower() not in _HTTP_METHODS:
                continue
            if not isinstance(operation, dict):
                logger.debug("Skipping malformed operation %s %s", method_name, path)
                continue
            imported.append(
                _import_operation(ctx, base_url, str(path), method_name, operation, path_params)
            )

    logger.debug("Imported %d operations", len(imported))
    return imported


def _import_operation(
    ctx: _Context,
    base_url: str,
    path: str,
    method_name: str,
    operation: dict[str, Any],
    path_params: list[Any],
) -> ImportedOperation:
    method = method_name.upper()
    merged = _merge_parameters(
        [deref(p, ctx.doc) for p in path_params],
        [deref(p, ctx.doc) for p in _as_list(operation.get("parameters"))],
    )
    parameters = [
        param
        for param in (decode_parameter(raw, ctx.definitions) for raw in merged)
        if param is not None
    ]

    url_path = path
    headers: list[KeyValueEntry] = []
    params: list[KeyValueEntry] = []
    for param in parameters:
        if param.location == "query":
            params.append(
                ctx.entry(param.name, parameter_example(param.shape), description=param.description)
            )
        elif param.location == "header":
            headers.append(
                ctx.entry(param.name, parameter_example(param.shape), description=param.description)
            )
        elif param.location == "path":
            value = parameter_example(param.shape)
            if value:
                url_path = url_path.replace("{" + param.name + "}", value)

    body = _openapi_body(ctx, operation) or _swagger_body(ctx, operation, parameters)
    if body.content_type:
        headers.append(ctx.entry("Content-Type", body.content_type))

    name = operation.get("summary") or operation.get("operationId") or f"{method} {path}"
    draft = RequestDraft(
        id=ctx.ids(),
        name=str(name),
        description=_text(operation.get("description")),
        url=base_url + url_path,
        method=method,
        headers=headers,
        params=params,
        body_type=body.type,
        body_raw=body.raw,
        body_form=body.form or [],
        expected_response=_expected_response(ctx, operation),
    )
    return ImportedOperation(tag=_first_tag(operation), draft=draft)


def _base_url(doc: dict[str, Any]) -> str:
    servers = doc.get("servers")
    if isinstance(servers, list) and servers and isinstance(servers[0], dict):
        url = servers[0].get("url")
        if isinstance(url, str) and url:
            return url.rstrip("/")
    base_path = doc.get("basePath")
    if isinstance(base_path, str):
        return base_path.rstrip("/")
    return ""


def _merge_parameters(path_params: list[Any], op_params: list[Any]) -> list[dict[str, Any]]:
    """Merge path-level and operation-level parameters.

    Operation-level parameters override path-level parameters with the same
    name and location (``in`` field). Non-object entries are dropped.
    """
    op_dicts = [p for p in op_params if isinstance(p, dict)]
    overridden = {(p.get("name", ""), p.get("in", "")) for p in op_dicts}
    merged = [
        p
        for p in path_params
        if isinstance(p, dict) and (p.get("name", ""), p.get("in", "")) not in overridden
    ]
    merged.extend(op_dicts)
    return merged


# --- Bodies ---


def _openapi_body(ctx: _Context, operation: dict[str, Any]) -> _Body | None:
    request_body = deref(operation.get("requestBody"), ctx.doc)
    if not isinstance(request_body, dict):
        return None
    content = request_body.get("content")
    if not isinstance(content, dict):
        return None

    media = _media_type(content, JSON_MEDIA_TYPE)
    if media is not None:
        if "example" in media:
            raw = example_json(media["example"], ctx.indent)
        elif isinstance(media.get("schema"), dict):
            raw = ctx.example_text(media["schema"])
        else:
            raw = "{}"
        return _Body(BodyType.RAW, raw=raw, content_type=JSON_MEDIA_TYPE)

    media = _media_type(content, URLENCODED_MEDIA_TYPE)
    if media is not None:
        return _Body(
            BodyType.URLENCODED,
            form=_schema_form_fields(ctx, media.get("schema")),
            content_type=URLENCODED_MEDIA_TYPE,
        )

    media = _media_type(content, MULTIPART_MEDIA_TYPE)
    if media is not None:
        # No Content-Type header: the client must generate the boundary
        return _Body(BodyType.FORM_DATA, form=_schema_form_fields(ctx, media.get("schema")))

    return None


def _swagger_body(
    ctx: _Context, operation: dict[str, Any], parameters: list[Parameter]
) -> _Body:
    for param in parameters:
        if isinstance(param, SwaggerParameter) and param.location == "body":
            return _Body(BodyType.RAW, raw=ctx.example_text(param.schema), content_type=JSON_MEDIA_TYPE)

    form_params = [
        p for p in parameters if isinstance(p, SwaggerParameter) and p.location == "formData"
    ]
    if not form_params:
        return _Body()

    fields = [
        ctx.entry(
            p.name,
            "" if p.is_file else parameter_example(p.shape),
            type=FieldKind.FILE if p.is_file else FieldKind.TEXT,
            description=p.description,
        )
        for p in form_params
    ]
    consumes = operation.get("consumes") or ctx.doc.get("consumes") or []
    if isinstance(consumes, list) and MULTIPART_MEDIA_TYPE in consumes:
        return _Body(BodyType.FORM_DATA, form=fields)
    return _Body(BodyType.URLENCODED, form=fields, content_type=URLENCODED_MEDIA_TYPE)


def _schema_form_fields(ctx: _Context, schema: Any) -> list[KeyValueEntry]:
    """One form field per property of *schema*; ``binary`` properties are files."""
    fields: list[KeyValueEntry] = []
    for name, prop in _form_properties(ctx.definitions, schema, frozenset()).items():
        shape = schema_shape(prop, ctx.definitions)
        is_file = shape.format == "binary"
        description = _text(prop.get("description")) if isinstance(prop, dict) else None
        fields.append(
            ctx.entry(
                str(name),
                "" if is_file else parameter_example(shape),
                type=FieldKind.FILE if is_file else FieldKind.TEXT,
                description=description,
            )
        )
    return fields


def _form_properties(
    definitions: Mapping[str, SchemaNode], schema: Any, visited: frozenset[str]
) -> dict[str, Any]:
    """Collect the properties of a form schema, looking through ``$ref`` and ``allOf``."""
    if not isinstance(schema, dict):
        return {}
    ref = schema.get("$ref")
    if isinstance(ref, str):
        name = ref_name(ref)
        if name in visited:
            return {}
        return _form_properties(definitions, definitions.get(name), visited | {name})

    properties: dict[str, Any] = {}
    for sub in _as_list(schema.get("allOf")):
        properties.update(_form_properties(definitions, sub, visited))
    if isinstance(schema.get("properties"), dict):
        properties.update(schema["properties"])
    return properties


# --- Responses ---


def _expected_response(ctx: _Context, operation: dict[str, Any]) -> ExpectedResponse | None:
    responses = operation.get("responses")
    if not isinstance(responses, dict):
        return None
    # YAML documents may key responses by integer status codes
    by_code = {str(code): response for code, response in responses.items()}
    key = next((k for k in _RESPONSE_KEYS if k in by_code), None)
    if key is None:
        return None

    response = deref(by_code[key], ctx.doc)
    status = 201 if key == "201" else 200
    if not isinstance(response, dict):
        return ExpectedResponse(status=status)

    schema: Optional[SchemaNode] = None
    example: Optional[str] = None
    content = response.get("content")
    if isinstance(content, dict):
        media = _media_type(content, JSON_MEDIA_TYPE)
        if media is not None:
            if isinstance(media.get("schema"), dict):
                schema = media["schema"]
            if "example" in media:
                example = example_json(media["example"], ctx.indent)
    elif isinstance(response.get("schema"), dict):
        schema = response["schema"]
        examples = response.get("examples")
        if isinstance(examples, dict) and JSON_MEDIA_TYPE in examples:
            example = example_json(examples[JSON_MEDIA_TYPE], ctx.indent)

    if example is None and schema is not None:
        example = ctx.example_text(schema)

    return ExpectedResponse(
        status=status,
        description=_text(response.get("description")),
        schema=schema,
        example=example,
    )


# --- Helpers ---


def _media_type(content: dict[str, Any], media_type: str) -> dict[str, Any] | None:
    """Find *media_type* in a ``content`` map, ignoring case and parameters."""
    for key, media in content.items():
        if str(key).split(";", 1)[0].strip().lower() == media_type:
            return media if isinstance(media, dict) else {}
    return None


def _first_tag(operation: dict[str, Any]) -> str:
    tags = operation.get("tags")
    if isinstance(tags, list) and tags and isinstance(tags[0], str) and tags[0]:
        return tags[0]
    return DEFAULT_TAG


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def _text(value: Any) -> str | None:
    return value if isinstance(value, str) else None
