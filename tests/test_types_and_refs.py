"""type, nullable, boolean schemas, readOnly/writeOnly and references"""
import pytest

from sieve import Reference, SchemaError, Validator, ValidatorConfig, load_schema


@pytest.mark.parametrize("subject, found", [
    ("s", "string"), (1, "integer"), (1.5, "number"), (True, "boolean"),
    (None, "null"), ([], "array"), ({}, "object"),
])
def test_type_mismatch_message(run, subject, found):
    expected = "boolean" if found != "boolean" else "string"
    result = run({"type": expected}, subject)
    assert [(f.keyword, f.message) for f in result.failures] == [("type", f"expected type: {expected}, found: {found}")]

def test_type_list(run):
    schema_doc = {"type": ["string", "null"]}
    assert run(schema_doc, None).valid
    assert run(schema_doc, "x").valid
    assert run(schema_doc, 1).failures[0].message == "expected type: one of [null, string], found: integer"

def test_nullable_lets_null_through(run):
    assert run({"type": "string", "nullable": True}, None).valid
    assert not run({"type": "string"}, None).valid
    assert not run({"type": "string", "nullable": True}, 3).valid

def test_boolean_schemas(run):
    for subject in (None, 0, "x", [], {}):
        assert run(True, subject).valid
        result = run(False, subject)
        assert [(f.keyword, f.message) for f in result.failures] == [("false", "false schema always fails")]

def test_false_property_schema_forbids_presence(run):
    schema_doc = {"properties": {"gone": False}}
    assert run(schema_doc, {}).valid
    assert [f.pointer for f in run(schema_doc, {"gone": 1}).failures] == ["#/gone"]

def test_read_write_context(run):
    schema_doc = {"properties": {"id": {"readOnly": True}, "secret": {"writeOnly": True}}}
    subject = {"id": 1, "secret": "x"}
    assert run(schema_doc, subject).valid
    write = run(schema_doc, subject, read_write_context="write")
    assert [(f.pointer, f.message) for f in write.failures] == [("#/id", "value is read-only")]
    read = run(schema_doc, subject, read_write_context="read")
    assert [(f.pointer, f.message) for f in read.failures] == [("#/secret", "value is write-only")]
    assert run(schema_doc, {}, read_write_context="write").valid

def test_references_are_collected_and_bound():
    refs = []
    schema = load_schema({"properties": {"child": {"$ref": "#/definitions/leaf"}}}, references=refs)
    assert [r.ref for r in refs] == ["#/definitions/leaf"]
    leaf = load_schema({"type": "integer"}, location="#/definitions/leaf")
    refs[0].bind(leaf)
    v = Validator()
    assert v.validate(schema, {"child": 3}).valid
    result = v.validate(schema, {"child": "x"})
    assert [(f.pointer, f.schema_location) for f in result.failures] == [("#/child", "#/definitions/leaf")]

def test_reference_binds_once():
    ref = Reference("#/x")
    a, b = load_schema(True), load_schema(False)
    ref.bind(a)
    ref.bind(a)
    with pytest.raises(SchemaError):
        ref.bind(b)

def test_unbound_reference_is_a_schema_error():
    schema = load_schema({"$ref": "#/nowhere"})
    with pytest.raises(SchemaError, match="unresolved reference"):
        Validator().validate(schema, 1)

def test_recursive_schema_terminates():
    refs = []
    schema = load_schema({"allOf": [{"$ref": "#"}], "properties": {"next": {"$ref": "#"}}, "type": "object"},
                         references=refs)
    for ref in refs:
        ref.bind(schema)
    v = Validator()
    assert v.validate(schema, {"next": {"next": {}}}).valid
    result = v.validate(schema, {"next": {"next": 3}})
    assert [f.pointer for f in result.failures] == ["#/next/next"]

def test_recursive_schema_with_defaults_terminates():
    refs = []
    schema = load_schema({"allOf": [{"$ref": "#"}], "properties": {"n": {"default": 0}}}, references=refs)
    refs[0].bind(schema)
    subject = {}
    assert Validator(ValidatorConfig(apply_defaults=True)).validate(schema, subject).defaults_applied == 1
    assert subject == {"n": 0}

def test_one_schema_many_subjects(validator):
    schema = load_schema({"type": "object", "required": ["a"]})
    outcomes = [validator.validate(schema, s).valid for s in ({"a": 1}, {}, [], {"a": None})]
    assert outcomes == [True, False, False, True]

def test_one_schema_validated_from_many_threads():
    from concurrent.futures import ThreadPoolExecutor
    refs = []
    schema = load_schema({
        "type": "object",
        "required": ["id"],
        "properties": {"id": {"type": "integer", "minimum": 0}, "next": {"$ref": "#"}},
        "if": {"required": ["card"]},
        "then": {"required": ["billing"]},
    }, references=refs)
    refs[0].bind(schema)
    validator = Validator()

    def subject(i):
        doc = {"id": i if i % 3 else -i - 1}
        if i % 2:
            doc["card"] = "x"
        doc["next"] = {"id": i}
        return doc

    def expected(i):
        keywords = []
        if i % 3 == 0:
            keywords.append("minimum")
        if i % 2:
            keywords.append("required")
        return keywords

    subjects = [subject(i) for i in range(200)]
    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda s: validator.validate(schema, s), subjects))
    assert [r.keywords() for r in results] == [expected(i) for i in range(200)]
