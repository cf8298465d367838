"""Tests for apidraft.parser.synthesizer -- example synthesis and the cycle guard."""

from __future__ import annotations

import json
from datetime import date, datetime
from typing import Any

import pytest

from apidraft.parser.resolver import collect_definitions
from apidraft.parser.synthesizer import example_json, schema_type_of, synthesize


# ---------------------------------------------------------------------------
# Scalars
# ---------------------------------------------------------------------------


class TestScalars:
    @pytest.mark.parametrize(
        "schema, expected",
        [
            ({"type": "integer"}, 0),
            ({"type": "number"}, 0.0),
            ({"type": "boolean"}, True),
            ({"type": "string"}, "string"),
            ({"type": "string", "format": "email"}, "string"),
            ({"type": "string", "enum": ["b", "a"]}, "b"),
            ({"type": "null"}, None),
            ({"type": "whatever"}, None),
            ({}, None),
        ],
    )
    def test_canned_values(self, schema: dict[str, Any], expected: Any) -> None:
        assert synthesize(schema, {}) == expected

    def test_date_format_is_today(self) -> None:
        assert synthesize({"type": "string", "format": "date"}, {}) == date.today().isoformat()

    def test_date_time_format_is_iso_timestamp(self) -> None:
        value = synthesize({"type": "string", "format": "date-time"}, {})
        assert isinstance(value, str)
        assert datetime.fromisoformat(value).tzinfo is not None

    @pytest.mark.parametrize("schema", [None, "string", 42, ["type"]])
    def test_non_dict_schema_is_none(self, schema: Any) -> None:
        assert synthesize(schema, {}) is None


# ---------------------------------------------------------------------------
# Explicit examples
# ---------------------------------------------------------------------------


class TestExplicitExample:
    """A node's ``example`` is returned exactly as written."""

    def test_object_example_returned_verbatim(self) -> None:
        example = {"id": 7, "tags": ["x"], "nested": {"ok": False}}
        schema = {"type": "object", "properties": {"id": {"type": "integer"}}, "example": example}
        assert synthesize(schema, {}) == example

    def test_example_beats_type_and_enum(self) -> None:
        assert synthesize({"type": "string", "enum": ["a"], "example": "zzz"}, {}) == "zzz"

    def test_null_example_is_kept(self) -> None:
        assert synthesize({"type": "string", "example": None}, {}) is None

    def test_property_example(self) -> None:
        schema = {"type": "object", "properties": {"tag": {"type": "string", "example": "dog"}}}
        assert synthesize(schema, {}) == {"tag": "dog"}


# ---------------------------------------------------------------------------
# Objects and arrays
# ---------------------------------------------------------------------------


class TestContainers:
    def test_object_with_every_property(self) -> None:
        schema = {
            "type": "object",
            "properties": {
                "id": {"type": "integer"},
                "name": {"type": "string"},
                "scores": {"type": "array", "items": {"type": "number"}},
            },
        }
        assert synthesize(schema, {}) == {"id": 0, "name": "string", "scores": [0.0]}

    def test_object_without_properties(self) -> None:
        assert synthesize({"type": "object"}, {}) == {}

    def test_array_without_items(self) -> None:
        assert synthesize({"type": "array"}, {}) == []

    def test_untyped_properties_imply_object(self) -> None:
        assert synthesize({"properties": {"a": {"type": "integer"}}}, {}) == {"a": 0}

    def test_untyped_items_imply_array(self) -> None:
        assert synthesize({"items": {"type": "boolean"}}, {}) == [True]

    def test_openapi_31_type_list(self) -> None:
        assert synthesize({"type": ["null", "integer"]}, {}) == 0


# ---------------------------------------------------------------------------
# References
# ---------------------------------------------------------------------------


class TestReferences:
    def test_components_ref_expanded(self) -> None:
        definitions = {"Pet": {"type": "object", "properties": {"id": {"type": "integer"}}}}
        assert synthesize({"$ref": "#/components/schemas/Pet"}, definitions) == {"id": 0}

    def test_definitions_ref_expanded(self) -> None:
        definitions = {"Name": {"type": "string"}}
        assert synthesize({"$ref": "#/definitions/Name"}, definitions) == "string"

    def test_missing_ref_is_none(self) -> None:
        assert synthesize({"$ref": "#/components/schemas/Missing"}, {}) is None

    def test_ref_beats_sibling_example(self) -> None:
        definitions = {"N": {"type": "integer"}}
        assert synthesize({"$ref": "#/definitions/N", "example": 5}, definitions) == 0


# ---------------------------------------------------------------------------
# Cycle guard
# ---------------------------------------------------------------------------


class TestCycleGuard:
    """Recursive schemas terminate, and only the current branch is guarded."""

    def test_self_reference_terminates(self, circular_raw: dict[str, Any]) -> None:
        definitions = collect_definitions(circular_raw)
        result = synthesize({"$ref": "#/components/schemas/TreeNode"}, definitions)
        assert result == {"value": "string", "children": [{}]}

    def test_direct_self_reference_is_empty_object(self) -> None:
        definitions = {"Loop": {"$ref": "#/definitions/Loop"}}
        assert synthesize({"$ref": "#/definitions/Loop"}, definitions) == {}

    def test_mutual_reference_terminates(self, circular_raw: dict[str, Any]) -> None:
        definitions = collect_definitions(circular_raw)
        result = synthesize({"$ref": "#/components/schemas/Author"}, definitions)
        assert result == {"name": "string", "books": [{"title": "string", "author": {}}]}

    def test_sibling_branches_each_expand_shared_ref(self) -> None:
        definitions = {"Money": {"type": "object", "properties": {"cents": {"type": "integer"}}}}
        schema = {
            "type": "object",
            "properties": {
                "price": {"$ref": "#/definitions/Money"},
                "tax": {"$ref": "#/definitions/Money"},
                "lines": {"type": "array", "items": {"$ref": "#/definitions/Money"}},
            },
        }
        assert synthesize(schema, definitions) == {
            "price": {"cents": 0},
            "tax": {"cents": 0},
            "lines": [{"cents": 0}],
        }

    def test_caller_visited_set_is_not_mutated(self) -> None:
        definitions = {"A": {"type": "object", "properties": {"b": {"$ref": "#/definitions/B"}}},
                       "B": {"type": "integer"}}
        visited = frozenset({"Z"})
        synthesize({"$ref": "#/definitions/A"}, definitions, visited)
        assert visited == frozenset({"Z"})

    def test_preseeded_visited_name_is_cut(self) -> None:
        definitions = {"A": {"type": "integer"}}
        assert synthesize({"$ref": "#/definitions/A"}, definitions, frozenset({"A"})) == {}


# ---------------------------------------------------------------------------
# Composition
# ---------------------------------------------------------------------------


class TestComposition:
    def test_all_of_merges_properties(self) -> None:
        schema = {
            "allOf": [
                {"properties": {"a": {"type": "string"}}},
                {"properties": {"b": {"type": "integer"}}},
            ]
        }
        result = synthesize(schema, {})
        assert result == {"a": "string", "b": 0}

    def test_all_of_untyped_properties_still_present(self) -> None:
        result = synthesize({"allOf": [{"properties": {"a": {}}}, {"properties": {"b": {}}}]}, {})
        assert set(result) == {"a", "b"}

    def test_all_of_with_ref_parts(self) -> None:
        definitions = {"Base": {"type": "object", "properties": {"id": {"type": "integer"}}}}
        schema = {
            "allOf": [
                {"$ref": "#/components/schemas/Base"},
                {"type": "object", "properties": {"name": {"type": "string"}}},
            ]
        }
        assert synthesize(schema, definitions) == {"id": 0, "name": "string"}

    def test_all_of_later_part_wins(self) -> None:
        schema = {"allOf": [{"properties": {"a": {"type": "integer"}}},
                            {"properties": {"a": {"type": "string"}}}]}
        assert synthesize(schema, {}) == {"a": "string"}

    def test_all_of_ignores_non_object_parts(self) -> None:
        schema = {"allOf": [{"type": "string"}, {"properties": {"a": {"type": "boolean"}}}]}
        assert synthesize(schema, {}) == {"a": True}

    def test_one_of_uses_first_option(self) -> None:
        assert synthesize({"oneOf": [{"type": "integer"}, {"type": "string"}]}, {}) == 0

    def test_any_of_uses_first_option(self) -> None:
        assert synthesize({"anyOf": [{"type": "boolean"}, {"type": "string"}]}, {}) is True

    def test_empty_one_of_is_none(self) -> None:
        assert synthesize({"oneOf": []}, {}) is None

    def test_declared_type_beats_composition(self) -> None:
        schema = {"type": "string", "oneOf": [{"type": "integer"}]}
        assert synthesize(schema, {}) == "string"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestHelpers:
    def test_schema_type_of_list_skips_null(self) -> None:
        assert schema_type_of({"type": ["null", "string"]}) == "string"

    def test_schema_type_of_only_null(self) -> None:
        assert schema_type_of({"type": ["null"]}) is None

    def test_schema_type_of_missing(self) -> None:
        assert schema_type_of({}) is None

    def test_example_json_indent(self) -> None:
        assert example_json({"a": 1}, indent=4) == '{\n    "a": 1\n}'

    def test_example_json_keeps_unicode(self) -> None:
        assert json.loads(example_json({"name": "Ünïcode"})) == {"name": "Ünïcode"}
        assert "Ünïcode" in example_json({"name": "Ünïcode"})
