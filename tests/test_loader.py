"""Building Schema trees from schema documents"""
import pytest

from sieve import SchemaError, load_schema


@pytest.mark.parametrize("doc", [
    {"pattern": "("},
    {"patternProperties": {"[": {}}},
    {"minLength": -1},
    {"maxItems": 1.5},
    {"minProperties": True},
    {"multipleOf": 0},
    {"multipleOf": -2},
    {"minimum": "3"},
    {"type": "float"},
    {"type": []},
    {"enum": "abc"},
    {"required": ["a", 1]},
    {"readOnly": "yes"},
    {"uniqueItems": 1},
    {"properties": []},
    {"format": 5},
    {"$ref": 5},
    {"not": 1},
    "string",
])
def test_malformed_schemas_raise(doc):
    with pytest.raises(SchemaError):
        load_schema(doc)

def test_error_names_the_location():
    with pytest.raises(SchemaError, match=r"#/properties/a/pattern"):
        load_schema({"properties": {"a": {"pattern": "(("}}})

def test_integral_float_counts_are_accepted():
    schema = load_schema({"minItems": 2.0})
    assert schema.array_role.min_items == 2

def test_roles_are_only_built_when_used():
    schema = load_schema({"type": "string", "minLength": 1})
    assert schema.string_role is not None
    assert schema.object_role is None and schema.array_role is None and schema.number_role is None

def test_exclusive_bounds_in_both_forms():
    old = load_schema({"minimum": 1, "exclusiveMinimum": True}).number_role
    new = load_schema({"exclusiveMinimum": 1}).number_role
    assert old.exclusive_minimum and old.minimum == 1 and old.exclusive_minimum_limit is None
    assert not new.exclusive_minimum and new.exclusive_minimum_limit == 1

def test_dependencies_are_split():
    role = load_schema({"dependencies": {"a": ["b", "b", "c"], "d": {"required": ["e"]}}}).object_role
    assert dict(role.property_dependencies) == {"a": ("b", "c")}
    assert list(role.schema_dependencies) == ["d"]

def test_locations_are_escaped():
    schema = load_schema({"properties": {"a/b": {"items": [{"type": "string"}]}}})
    child = schema.object_role.properties["a/b"]
    assert child.location == "#/properties/a~1b"
    assert child.array_role.item_schemas[0].location == "#/properties/a~1b/items/0"

def test_loaded_maps_are_read_only():
    schema = load_schema({"properties": {"a": {}}})
    with pytest.raises(TypeError):
        schema.object_role.properties["b"] = schema

def test_default_and_const_keep_null():
    schema = load_schema({"default": None, "const": None})
    assert schema.has_default and schema.default is None
    assert schema.has_const
    assert not load_schema({}).has_default

def test_metaschema_errors_are_pointers():
    from sieve.loader import metaschema_errors
    assert metaschema_errors({"type": "string", "minLength": 2}) == []
    errs = metaschema_errors({"properties": {"a": {"minLength": -1}}})
    assert len(errs) == 1 and errs[0].startswith("#/properties/a/minLength: ")

def test_metaschema_check_is_opt_in():
    doc = {"minimum": 1, "exclusiveMinimum": True}
    assert load_schema(doc).number_role.exclusive_minimum
    with pytest.raises(SchemaError, match="draft 7"):
        load_schema(doc, check_meta=True)

def test_roles_construct_with_no_arguments():
    from sieve.schema import ArrayRole, NumberRole, ObjectRole, StringRole
    role = ObjectRole()
    assert dict(role.properties) == {}
    assert dict(role.property_dependencies) == {} and dict(role.schema_dependencies) == {}
    assert role.additional_properties is True
    with pytest.raises(TypeError):
        role.properties["a"] = None
    assert ArrayRole().unique_items is False
    assert StringRole().pattern is None and NumberRole().multiple_of is None
