"""
Unit tests for schema normalization and dot-path helpers.
"""
import copy
from datetime import date
from typing import Any

import pytest

from fieldguard.core.errors import ValidationConfigError
from fieldguard.services.paths import find_rule, get_path
from fieldguard.services.rules import make_required, normalize_schema, resolve_type


def is_even(value):
    return value % 2 == 0


class TestResolveType:
    @pytest.mark.parametrize("name,expected", [
        ("str", str),
        ("String", str),
        ("int", int),
        ("number", float),
        ("bool", bool),
        ("date", date),
        ("any", Any),
    ])
    def test_names(self, name, expected):
        assert resolve_type(name, "x") is expected

    def test_python_types_pass_through(self):
        assert resolve_type(int, "x") is int

    def test_unknown_name(self):
        with pytest.raises(ValidationConfigError, match="Unknown type 'uuid'"):
            resolve_type("uuid", "x")

    def test_array_shorthand(self):
        assert resolve_type(["str"], "tags") == list[str]
        assert resolve_type([["int"]], "grid") == list[list[int]]
        assert resolve_type([], "tags") is list

    def test_array_shorthand_needs_one_item_type(self):
        with pytest.raises(ValidationConfigError, match="exactly one item type"):
            resolve_type(["str", "int"], "tags")

    def test_generic_alias_passes_through(self):
        assert resolve_type(list[int], "x") == list[int]

    @pytest.mark.parametrize("spec", [5, 2.5, True, object()])
    def test_values_are_not_types(self, spec):
        with pytest.raises(ValidationConfigError, match="Invalid type declaration"):
            resolve_type(spec, "x")


class TestNormalizeSchema:
    def test_shorthand_is_expanded(self):
        schema = normalize_schema({"name": "str", "age": int})
        assert schema == {
            "name": {"type": str, "required": False},
            "age": {"type": int, "required": False},
        }

    def test_groups_are_kept(self):
        schema = normalize_schema({"address": {"city": "str"}})
        assert schema == {"address": {"city": {"type": str, "required": False}}}

    def test_input_is_not_mutated(self):
        original = {"name": {"type": "str", "default": "anon", "validate": "even"}}
        before = copy.deepcopy(original)
        normalized = normalize_schema(original, {"even": is_even})
        make_required(find_rule(normalized, "name"))
        assert original == before

    def test_validator_names_are_bound(self):
        schema = normalize_schema({"n": {"type": "int", "validate": "even"}}, {"even": is_even})
        assert schema["n"]["validate"] == [{"validator": is_even, "message": None}]

    def test_validator_mapping_keeps_message(self):
        schema = normalize_schema(
            {"n": {"type": "int", "validate": {"validator": "even", "message": "odd!"}}},
            {"even": is_even},
        )
        assert schema["n"]["validate"] == [{"validator": is_even, "message": "odd!"}]

    def test_validator_mapping_without_validator(self):
        with pytest.raises(ValidationConfigError):
            normalize_schema({"n": {"type": "int", "validate": {"message": "odd!"}}})

    def test_unknown_rule_key(self):
        with pytest.raises(ValidationConfigError, match="minlength"):
            normalize_schema({"name": {"type": "str", "minlength": 2}})

    @pytest.mark.parametrize("rule", [
        {"type": "int", "pattern": "^x$"},
        {"type": "int", "min_length": 2},
        {"type": "bool", "max_length": 1},
        {"type": "str", "ge": 0},
        {"type": "any", "lt": 5},
    ])
    def test_constraint_must_fit_type(self, rule):
        with pytest.raises(ValidationConfigError, match="does not apply"):
            normalize_schema({"field": rule})

    @pytest.mark.parametrize("rule", [
        {"type": "str", "pattern": "^x$", "max_length": 3},
        {"type": ["str"], "min_length": 1},
        {"type": "dict", "max_length": 4},
        {"type": "decimal", "gt": 0},
        {"type": "date", "le": "2030-01-01"},
    ])
    def test_constraint_fits_type(self, rule):
        assert normalize_schema({"field": rule})["field"]["required"] is False

    def test_choices_must_be_a_list(self):
        with pytest.raises(ValidationConfigError):
            normalize_schema({"status": {"type": "str", "choices": "active"}})

    def test_non_mapping_schema(self):
        with pytest.raises(ValidationConfigError):
            normalize_schema(["name"])


class TestMakeRequired:
    def test_clears_default_and_sets_required(self):
        rule = {"type": str, "required": False, "default": "anon"}
        make_required(rule)
        assert rule == {"type": str, "required": True}


class TestPaths:
    def test_get_path(self):
        data = {"a": {"b": [{"c": 1}]}}
        assert get_path(data, "a.b.0.c") == 1
        assert get_path(data, "a.x") is None
        assert get_path(data, "a.b.5") is None
        assert get_path(data, "a.b.c") is None
        assert get_path("text", "a") is None

    def test_find_rule(self):
        schema = normalize_schema({"name": "str", "address": {"city": "str"}})
        assert find_rule(schema, "name") == {"type": str, "required": False}
        assert find_rule(schema, "address.city") is schema["address"]["city"]

    def test_find_rule_misses(self):
        schema = normalize_schema({"name": "str", "address": {"city": "str"}})
        assert find_rule(schema, "address") is None
        assert find_rule(schema, "name.first") is None
        assert find_rule(schema, "nickname") is None
        assert find_rule(schema, "") is None

    def test_empty_path_resolves_to_nothing(self):
        assert get_path({"x": 1}, "") is None
        assert get_path({"x": 1}, "", default="missing") == "missing"

    def test_empty_segment_resolves_to_nothing(self):
        data = {"a": {"b": 1}}
        assert get_path(data, "a..b") is None
        assert get_path(data, "a.b.") is None
        assert get_path(data, ".a") is None

    def test_literal_dotted_key_wins(self):
        assert get_path({"a.b": 1}, "a.b") == 1
        assert get_path({"a.b": 1, "a": {"b": 2}}, "a.b") == 1
        assert get_path({"a": {"b": 2}}, "a.b") == 2

    def test_find_rule_literal_dotted_key(self):
        schema = normalize_schema({"a.b": "str"})
        assert find_rule(schema, "a.b") is schema["a.b"]
        assert find_rule(schema, "a..b") is None
