"""Validity agrees with jsonschema's Draft 7 validator on shared ground"""
import pytest
from jsonschema import Draft7Validator

from sieve import Validator, load_schema

# integer-valued cases only: the two implementations treat float multipleOf differently
CASES = [
    ({"type": "integer"}, [1, 1.0, 1.5, "1", True, None]),
    ({"type": ["string", "null"]}, ["a", None, 0, []]),
    ({"required": ["a"], "properties": {"a": {"type": "string"}}}, [{"a": "x"}, {"a": 1}, {}, [], "a"]),
    ({"additionalProperties": False, "patternProperties": {"^S_": {"type": "string"}}},
     [{"S_1": "x"}, {"S_1": 1}, {"x_S_": "a"}, {}]),
    ({"propertyNames": {"maxLength": 2}, "minProperties": 1}, [{"ab": 1}, {"abc": 1}, {}]),
    ({"dependencies": {"a": ["b"], "c": {"required": ["d"]}}}, [{"a": 1}, {"a": 1, "b": 2}, {"c": 1}, {"c": 1, "d": 1}]),
    ({"items": {"minimum": 0}, "maxItems": 2, "uniqueItems": True}, [[0, 1], [1, 1], [-1], [0, 1, 2], []]),
    ({"items": [{"type": "string"}], "additionalItems": False}, [["a"], ["a", "b"], [1], []]),
    ({"contains": {"const": 2}}, [[1, 2], [1], []]),
    ({"minLength": 2, "maxLength": 3, "pattern": "b"}, ["ab", "a", "abcd", "xyz", 5]),
    ({"minimum": 1, "exclusiveMaximum": 10, "multipleOf": 3}, [3, 9, 10, 0, 12, 4]),
    ({"enum": [1, "a", None, [1, 2]]}, [1, 1.0, "a", None, [1, 2], [2, 1], False]),
    ({"const": {"a": [1]}}, [{"a": [1]}, {"a": [1, 1]}, {}]),
    ({"allOf": [{"minimum": 2}, {"maximum": 5}]}, [1, 3, 6]),
    ({"anyOf": [{"type": "string"}, {"minimum": 2}]}, ["x", 3, 1]),
    ({"oneOf": [{"type": "integer"}, {"minimum": 2}]}, [1, 3, 2.5, 0.5]),
    ({"not": {"type": "object"}}, [{}, 1]),
    ({"if": {"exclusiveMaximum": 0}, "then": {"minimum": -10}, "else": {"multipleOf": 2}}, [-100, -1, 3, 4, "s"]),
    ({"allOf": [{"if": {"exclusiveMaximum": 0}}, {"then": {"minimum": -10}}, {"else": {"multipleOf": 2}}]}, [-100, 3]),
    ({"properties": {"a": {"if": {"type": "string"}, "then": {"minLength": 3}}}}, [{"a": "ab"}, {"a": "abc"}, {"a": 1}]),
]

@pytest.mark.parametrize("schema_doc, subjects", CASES)
def test_agrees_with_draft7(schema_doc, subjects):
    ours = Validator()
    schema = load_schema(schema_doc)
    reference = Draft7Validator(schema_doc)
    for subject in subjects:
        assert ours.is_valid(schema, subject) == reference.is_valid(subject), subject

@pytest.mark.parametrize("schema_doc, subjects", CASES)
def test_reports_every_violation_once(schema_doc, subjects):
    ours = Validator()
    schema = load_schema(schema_doc)
    for subject in subjects:
        result = ours.validate(schema, subject)
        assert result.valid == (not result.failures)
        assert len({(f.pointer, f.keyword, f.message) for f in result.failures}) == len(result.failures)
