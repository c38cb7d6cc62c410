"""if/then/else semantics, alone and inside combinators"""
import pytest

from sieve import Validator, load_schema

SUBJECTS = [-100, -1, 0, 3, 4, 2.5, "text", None, True, [], [1, 2], {}, {"a": 1}]

IF_NEGATIVE = {"exclusiveMaximum": 0}

@pytest.mark.parametrize("schema_doc, subject, valid, keywords", [
    ({"if": IF_NEGATIVE, "then": {"minimum": -10}}, -1, True, []),
    ({"if": IF_NEGATIVE, "then": {"minimum": -10}}, -100, False, ["minimum"]),
    ({"if": IF_NEGATIVE, "then": {"minimum": -10}}, 3, True, []),
    ({"if": IF_NEGATIVE, "else": {"multipleOf": 2}}, 4, True, []),
    ({"if": IF_NEGATIVE, "else": {"multipleOf": 2}}, 3, False, ["multipleOf"]),
    ({"if": IF_NEGATIVE, "else": {"multipleOf": 2}}, -1, True, []),
    ({"allOf": [{"if": IF_NEGATIVE}, {"then": {"minimum": -10}}, {"else": {"multipleOf": 2}}]}, -100, True, []),
    ({"allOf": [{"if": IF_NEGATIVE}, {"then": {"minimum": -10}}, {"else": {"multipleOf": 2}}]}, 3, True, []),
])
def test_end_to_end_scenarios(run, schema_doc, subject, valid, keywords):
    result = run(schema_doc, subject)
    assert result.valid is valid
    assert result.keywords() == keywords

@pytest.mark.parametrize("subject", SUBJECTS)
def test_if_alone_is_a_no_op(run, subject):
    assert run({"if": False}, subject).valid
    assert run({"if": {"type": "string"}}, subject).valid

@pytest.mark.parametrize("subject", SUBJECTS)
@pytest.mark.parametrize("schema_doc", [
    {"then": False},
    {"else": False},
    {"then": False, "else": False},
    {"then": {"minimum": 1000}, "else": {"type": "null"}},
])
def test_then_and_else_without_if_are_never_evaluated(run, schema_doc, subject):
    result = run(schema_doc, subject)
    assert result.valid
    assert result.failures == []

@pytest.mark.parametrize("subject", [-5, 0, 7, 12])
def test_then_decides_when_if_passes(run, subject):
    cond = {"if": {"type": "integer"}, "then": {"minimum": 0, "multipleOf": 3}}
    assert run(cond, subject).valid == run(cond["then"], subject).valid
    assert run(cond, subject).keywords() == run(cond["then"], subject).keywords()

@pytest.mark.parametrize("subject", ["a", "abcdef", "", "xyz"])
def test_else_decides_when_if_fails(run, subject):
    cond = {"if": {"type": "integer"}, "else": {"minLength": 2, "pattern": "^x"}}
    assert run(cond, subject).valid == run(cond["else"], subject).valid
    assert run(cond, subject).keywords() == run(cond["else"], subject).keywords()

def test_if_failures_never_reach_the_report(run):
    cond = {"if": {"required": ["kind"], "properties": {"kind": {"const": "card"}}},
            "then": {"required": ["number"]}}
    assert run(cond, {"kind": "cash"}).valid
    result = run(cond, {"kind": "card"})
    assert [(f.keyword, f.message) for f in result.failures] == [("required", "required key [number] not found")]

def test_then_failures_keep_nested_paths(run):
    cond = {"if": {"properties": {"a": {"type": "integer"}}},
            "then": {"properties": {"b": {"maximum": 1}}}}
    result = run(cond, {"a": 1, "b": 5})
    assert [f.pointer for f in result.failures] == ["#/b"]

def test_conditional_inside_any_of_branch(run):
    schema_doc = {"anyOf": [
        {"if": {"type": "string"}, "then": {"maxLength": 1}, "else": False},
        {"type": "integer"},
    ]}
    assert run(schema_doc, "a").valid
    assert run(schema_doc, 3).valid
    result = run(schema_doc, "abc")
    assert result.keywords() == ["anyOf"]
    assert [c.keyword for c in result.failures[0].causes] == ["maxLength", "type"]

def test_conditional_next_to_other_keywords(run):
    schema_doc = {"type": "number", "if": {"minimum": 10}, "then": {"multipleOf": 5}}
    assert run(schema_doc, 15).valid
    assert run(schema_doc, 3).valid
    assert run(schema_doc, 12).keywords() == ["multipleOf"]
    assert run(schema_doc, "x").keywords() == ["type"]

def test_same_schema_serves_many_subjects(validator):
    schema = load_schema({"if": IF_NEGATIVE, "then": {"minimum": -10}, "else": {"multipleOf": 2}})
    verdicts = [validator.is_valid(schema, s) for s in (-1, -100, 4, 3)]
    assert verdicts == [True, False, True, False]
