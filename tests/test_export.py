"""Tests for apidraft.export -- curl rendering and query-string helpers."""

from __future__ import annotations

from apidraft.export import (
    draft_to_curl,
    params_to_query_string,
    query_string_to_params,
    shell_quote,
)
from apidraft.ids import IdFactory
from apidraft.models import BodyType, FieldKind, KeyValueEntry, RequestDraft
from apidraft.parser.curl import parse_curl


ids = IdFactory()


def _kv(key: str, value: str = "", **extra) -> KeyValueEntry:
    return KeyValueEntry(id=ids(), key=key, value=value, **extra)


# ---------------------------------------------------------------------------
# shell_quote
# ---------------------------------------------------------------------------


class TestShellQuote:
    def test_wraps_in_single_quotes(self) -> None:
        assert shell_quote("a b") == "'a b'"

    def test_escapes_single_quotes(self) -> None:
        assert shell_quote("it's") == "'it'\\''s'"

    def test_drops_nul_bytes(self) -> None:
        assert shell_quote("a\x00b") == "'ab'"


# ---------------------------------------------------------------------------
# draft_to_curl
# ---------------------------------------------------------------------------


class TestDraftToCurl:
    def test_get_request(self) -> None:
        draft = RequestDraft(id=ids(), name="n", url="https://x.io/pets", headers=[_kv("Accept", "*/*")])
        assert draft_to_curl(draft) == "curl -X GET 'https://x.io/pets' \\\n  -H 'Accept: */*'"

    def test_raw_body(self) -> None:
        draft = RequestDraft(
            id=ids(),
            name="n",
            method="POST",
            url="https://x.io/pets",
            headers=[_kv("Content-Type", "application/json")],
            body_type=BodyType.RAW,
            body_raw='{"name": "Rex"}',
        )
        assert draft_to_curl(draft).splitlines()[-1] == "  --data-raw '{\"name\": \"Rex\"}'"

    def test_get_never_carries_body(self) -> None:
        draft = RequestDraft(id=ids(), name="n", url="https://x.io", body_type=BodyType.RAW, body_raw="x")
        assert "--data" not in draft_to_curl(draft)

    def test_disabled_and_keyless_entries_skipped(self) -> None:
        draft = RequestDraft(
            id=ids(),
            name="n",
            url="https://x.io",
            headers=[_kv("A", "1", enabled=False), _kv("", "orphan"), _kv("B", "2")],
        )
        command = draft_to_curl(draft)
        assert "A: 1" not in command
        assert "orphan" not in command
        assert "-H 'B: 2'" in command

    def test_urlencoded_fields(self) -> None:
        draft = RequestDraft(
            id=ids(),
            name="n",
            method="POST",
            url="https://x.io/login",
            body_type=BodyType.URLENCODED,
            body_form=[_kv("user", "bob", type=FieldKind.TEXT), _kv("pw", "s3", type=FieldKind.TEXT)],
        )
        command = draft_to_curl(draft)
        assert "--data 'user=bob'" in command
        assert "--data 'pw=s3'" in command

    def test_multipart_file_fields(self) -> None:
        draft = RequestDraft(
            id=ids(),
            name="n",
            method="PUT",
            url="https://x.io/upload",
            body_type=BodyType.FORM_DATA,
            body_form=[
                _kv("caption", "hi", type=FieldKind.TEXT),
                _kv("file", "cat.png", type=FieldKind.FILE),
            ],
        )
        command = draft_to_curl(draft)
        assert "--form 'caption=hi'" in command
        assert "--form 'file=@cat.png'" in command

    def test_parses_back(self) -> None:
        draft = RequestDraft(
            id=ids(),
            name="n",
            method="PATCH",
            url="https://api.example.com/pets/1?dry=true",
            headers=[_kv("Authorization", "Bearer abc"), _kv("Content-Type", "application/json")],
            body_type=BodyType.RAW,
            body_raw='{\n  "name": "Rex"\n}',
        )
        parsed = parse_curl(draft_to_curl(draft))
        assert parsed.method == "PATCH"
        assert parsed.url == draft.url
        assert [(h.key, h.value) for h in parsed.headers] == [
            ("Authorization", "Bearer abc"),
            ("Content-Type", "application/json"),
        ]
        assert [(p.key, p.value) for p in parsed.params] == [("dry", "true")]
        assert parsed.body_raw == '{   "name": "Rex" }'


# ---------------------------------------------------------------------------
# Query strings
# ---------------------------------------------------------------------------


class TestQueryStrings:
    def test_params_to_query_string(self) -> None:
        params = [_kv("q", "a b&c"), _kv("off", "1", enabled=False), _kv("page", "2")]
        assert params_to_query_string(params) == "q=a%20b%26c&page=2"

    def test_empty_params(self) -> None:
        assert params_to_query_string([]) == ""

    def test_query_string_to_params(self) -> None:
        entries = query_string_to_params("?q=a%20b&flag&x=1=2")
        assert [(e.key, e.value) for e in entries] == [("q", "a b"), ("flag", ""), ("x", "1=2")]
        assert all(e.enabled for e in entries)

    def test_empty_query(self) -> None:
        assert query_string_to_params("") == []
