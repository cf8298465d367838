"""Import parsers -- curl commands and OpenAPI/Swagger documents to request drafts.

This sub-package holds the pure import core plus its I/O edge:

    from apidraft.parser import load_text, parse_curl, parse_spec_text

    draft = parse_curl("curl -X POST https://api.example.com/users -d '{}'")
    result = parse_spec_text(load_text("petstore.json"))

Sub-modules:

* :mod:`~apidraft.parser.curl` -- curl command extraction.
* :mod:`~apidraft.parser.synthesizer` -- schema-driven example synthesis with
  a per-branch reference cycle guard.
* :mod:`~apidraft.parser.resolver` -- ``$ref`` name and pointer lookups.
* :mod:`~apidraft.parser.dialects` -- OpenAPI 3 / Swagger 2 parameter variants.
* :mod:`~apidraft.parser.document` -- one draft per path + verb.
* :mod:`~apidraft.parser.assembler` -- tag grouping and the document entry
  points.
* :mod:`~apidraft.parser.loader` -- read sources from files, URLs, or stdin.

Everything except the loader is free of I/O and signals unusable input by
returning ``None`` rather than raising.
"""

from apidraft.parser.assembler import import_document, parse_spec_text
from apidraft.parser.curl import curl_to_draft, parse_curl
from apidraft.parser.loader import load_document, load_text
from apidraft.parser.synthesizer import synthesize

__all__ = [
    "curl_to_draft",
    "import_document",
    "load_document",
    "load_text",
    "parse_curl",
    "parse_spec_text",
    "synthesize",
]
