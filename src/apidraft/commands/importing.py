"""Import commands -- turn curl commands and API documents into request drafts.

Provides the top-level ``apidraft curl``, ``apidraft import`` and
``apidraft to-curl`` commands. Each resolves its input through
:mod:`apidraft.parser.loader`, runs the pure import core, and prints the
result through :mod:`apidraft.output`. Failures are reported on stderr and
mapped to the exit codes of :mod:`apidraft.exit_codes`.
"""

from __future__ import annotations

from typing import NoReturn, Optional

import typer

from apidraft.exceptions import ApidraftError, ImportParseError
from apidraft.models import GlobalConfig, ParseResult
from apidraft.output import (
    OutputFormat,
    debug,
    error,
    get_output,
    info,
    print_code,
    print_json,
    warning,
)


def _config(ctx: typer.Context) -> GlobalConfig:
    if ctx.obj and isinstance(ctx.obj.get("config"), GlobalConfig):
        return ctx.obj["config"]
    return GlobalConfig()


def _fail(exc: ApidraftError) -> NoReturn:
    error(str(exc))
    raise typer.Exit(code=exc.exit_code)


def _load_result(ctx: typer.Context, source: str) -> ParseResult:
    from apidraft.parser import import_document, load_document

    config = _config(ctx)
    try:
        doc = load_document(source, config.fetch)
    except ApidraftError as exc:
        _fail(exc)

    result = import_document(doc, example_indent=config.synthesis.example_indent)
    if result is None:
        _fail(ImportParseError(f"No operations found in {source}"))
    debug(f"Parsed {result.request_count} operations from {source}")
    return result


def curl_command(
    ctx: typer.Context,
    text: Optional[str] = typer.Argument(
        None, help="The curl command. Read from stdin when omitted or '-'."
    ),
) -> None:
    """Convert a curl command into a request draft.

    Example::

        apidraft curl "curl -X POST https://api.example.com/users -d '{}'"
        pbpaste | apidraft curl
    """
    from apidraft.parser import curl_to_draft, load_text

    if text is None or text == "-":
        try:
            text = load_text("-")
        except ApidraftError as exc:
            _fail(exc)

    draft = curl_to_draft(text)
    if draft is None:
        _fail(ImportParseError("Input is not a curl command"))
    print_json(draft.model_dump(mode="json", by_alias=True))


def import_command(
    ctx: typer.Context,
    source: str = typer.Argument(help="Spec file, http(s) URL, or '-' for stdin."),
) -> None:
    """Import an OpenAPI 3 / Swagger 2 document as grouped request drafts.

    Prints the full result as JSON with ``--json`` or ``-o``; otherwise a
    summary table of the imported requests.

    Example::

        apidraft --json import petstore.json > drafts.json
        apidraft import https://petstore.swagger.io/v2/swagger.json
    """
    result = _load_result(ctx, source)
    output = get_output()

    if output.format == OutputFormat.JSON or ctx.obj and ctx.obj.get("output_file"):
        print_json(result.model_dump(mode="json", by_alias=True))
    else:
        rows = [
            [group.name, draft.method, draft.name, draft.url]
            for group in result.tag_groups
            for draft in group.requests
        ]
        output.print_table(["Group", "Method", "Name", "URL"], rows, title=result.title)

    info(f"Imported {result.request_count} requests in {len(result.tag_groups)} groups.")


def to_curl_command(
    ctx: typer.Context,
    source: str = typer.Argument(help="Spec file, http(s) URL, or '-' for stdin."),
    tag: Optional[str] = typer.Option(
        None, "--tag", "-t", help="Only export requests from this group."
    ),
) -> None:
    """Print a curl command for every request imported from a document.

    Example::

        apidraft to-curl petstore.json --tag pets
    """
    from apidraft.export import draft_to_curl

    result = _load_result(ctx, source)
    groups = [g for g in result.tag_groups if tag is None or g.name == tag]
    if not groups:
        _fail(ImportParseError(f"No group named '{tag}' in {source}"))

    if get_output().format == OutputFormat.JSON:
        print_json(
            [
                {"group": group.name, "name": draft.name, "curl": draft_to_curl(draft)}
                for group in groups
                for draft in group.requests
            ]
        )
        return

    relative = 0
    for group in groups:
        for draft in group.requests:
            print_code(f"# [{group.name}] {draft.name}\n{draft_to_curl(draft)}\n")
            if not draft.url.lower().startswith(("http://", "https://")):
                relative += 1
    if relative:
        warning(f"{relative} requests have relative URLs; {source} declares no server host.")
