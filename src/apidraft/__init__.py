"""apidraft -- Import curl commands and OpenAPI/Swagger documents as request drafts.

This package turns two loosely-structured inputs into the structured
:class:`~apidraft.models.RequestDraft` objects consumed by a request-editing
workspace:

* a shell ``curl`` command (:func:`apidraft.parser.parse_curl`), and
* an OpenAPI 3.x or Swagger 2.x JSON document
  (:func:`apidraft.parser.parse_spec_text`), with example request and
  response bodies synthesized from the document's schemas.

Typical workflow::

    apidraft import openapi.json          # grouped request drafts as JSON
    apidraft curl "curl https://api.example.com/users"
    apidraft to-curl openapi.json --tag pets

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models shared across the entire package.
    config: XDG-aware configuration with precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    export: Render request drafts back into curl commands.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
