#!/usr/bin/env python3
"""
Schema loader

Builds the immutable ``Schema`` tree from an already-parsed schema document
(the dicts/lists/bools that ``json.load`` or ``yaml.safe_load`` return).

Rules:
- ``true`` is the empty schema, ``false`` always fails.
- ``type`` may be a name or a list of names.
- ``items`` may be a single schema (uniform) or a list (positional).
- ``exclusiveMinimum``/``exclusiveMaximum`` accept the boolean draft-4 form
  (modifying ``minimum``/``maximum``) and the numeric draft-6+ form.
- ``dependencies`` values are either a list of names or a schema.
- ``$ref`` becomes an unbound ``Reference``; resolving it is the caller's job.
- Malformed keyword values raise ``SchemaError`` right away.
"""

from __future__ import annotations
import re
from types import MappingProxyType
from typing import Any, Dict, List, Optional, Tuple

from jsonschema import Draft7Validator

from .failures import SchemaError, escape_segment, render_pointer
from .schema import (
    JSON_TYPES, ArrayRole, NumberRole, ObjectRole,
    Reference, Schema, StringRole,
)

_OBJECT_KEYWORDS = ("properties", "required", "patternProperties", "additionalProperties",
                    "dependencies", "minProperties", "maxProperties", "propertyNames")
_ARRAY_KEYWORDS = ("items", "additionalItems", "minItems", "maxItems", "uniqueItems", "contains")
_STRING_KEYWORDS = ("minLength", "maxLength", "pattern", "format")
_NUMBER_KEYWORDS = ("minimum", "maximum", "exclusiveMinimum", "exclusiveMaximum", "multipleOf")


def load_schema(document: Any, location: str = "#", references: Optional[List[Reference]] = None,
                check_meta: bool = False) -> Schema:
    """
    Build a ``Schema`` from a parsed schema document.

    Every ``Reference`` created on the way is appended to ``references`` (when
    given) so an external resolver can bind them afterwards. ``check_meta``
    first checks the document against the draft-7 meta-schema.
    """
    if check_meta:
        errs = metaschema_errors(document)
        if errs:
            raise SchemaError(f"{location}: schema does not conform to draft 7: " + "; ".join(errs))
    loader = _Loader()
    schema = loader.load(document, location)
    if references is not None:
        references.extend(loader.references)
    return schema


def metaschema_errors(document: Any) -> List[str]:
    """Draft-7 meta-schema violations of a schema document, as "pointer: message" lines."""
    errs: List[str] = []
    meta = Draft7Validator(Draft7Validator.META_SCHEMA)
    for e in sorted(meta.iter_errors(document), key=lambda e: [str(s) for s in e.absolute_path]):
        errs.append(f"{render_pointer(tuple(e.absolute_path))}: {e.message}")
    return errs


def _child(location: str, *segments: Any) -> str:
    return location + "".join("/" + escape_segment(s) for s in segments)


def _is_number(v: Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool)


class _Loader:
    def __init__(self):
        self.references: List[Reference] = []

    def load(self, doc: Any, loc: str) -> Schema:
        if doc is True:
            return Schema(location=loc)
        if doc is False:
            return Schema(location=loc, verdict=False)
        if not isinstance(doc, dict):
            raise SchemaError(f"{loc}: schema must be an object or boolean, got {type(doc).__name__}")

        fields: Dict[str, Any] = {"location": loc}

        for key in ("title", "description"):
            if key in doc:
                fields[key] = doc[key]
        if "default" in doc:
            fields["default"] = doc["default"]
        if "nullable" in doc:
            fields["nullable"] = self._flag(doc, "nullable", loc)
        if "readOnly" in doc:
            fields["read_only"] = self._flag(doc, "readOnly", loc)
        if "writeOnly" in doc:
            fields["write_only"] = self._flag(doc, "writeOnly", loc)
        if "type" in doc:
            fields["types"] = self._types(doc["type"], loc)

        if "$ref" in doc:
            ref = doc["$ref"]
            if not isinstance(ref, str):
                raise SchemaError(f"{loc}/$ref: must be a string")
            reference = Reference(ref)
            self.references.append(reference)
            fields["ref"] = reference

        if any(k in doc for k in _OBJECT_KEYWORDS):
            fields["object_role"] = self._object_role(doc, loc)
        if any(k in doc for k in _ARRAY_KEYWORDS):
            fields["array_role"] = self._array_role(doc, loc)
        if any(k in doc for k in _STRING_KEYWORDS):
            fields["string_role"] = self._string_role(doc, loc)
        if any(k in doc for k in _NUMBER_KEYWORDS):
            fields["number_role"] = self._number_role(doc, loc)

        if "const" in doc:
            fields["const"] = doc["const"]
        if "enum" in doc:
            values = doc["enum"]
            if not isinstance(values, list):
                raise SchemaError(f"{loc}/enum: must be an array")
            fields["enum"] = tuple(values)

        for key, attr in (("allOf", "all_of"), ("anyOf", "any_of"), ("oneOf", "one_of")):
            if key in doc:
                fields[attr] = self._schema_list(doc[key], _child(loc, key), allow_empty=False)
        if "not" in doc:
            fields["not_"] = self.load(doc["not"], _child(loc, "not"))

        for key, attr in (("if", "if_"), ("then", "then"), ("else", "else_")):
            if key in doc:
                fields[attr] = self.load(doc[key], _child(loc, key))

        return Schema(**fields)

    # -- helpers ------------------------------------------------------------

    def _flag(self, doc: Dict[str, Any], key: str, loc: str) -> bool:
        value = doc[key]
        if not isinstance(value, bool):
            raise SchemaError(f"{loc}/{key}: must be a boolean")
        return value

    def _count(self, doc: Dict[str, Any], key: str, loc: str) -> Optional[int]:
        if key not in doc:
            return None
        value = doc[key]
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        if not isinstance(value, int) or isinstance(value, bool) or value < 0:
            raise SchemaError(f"{loc}/{key}: must be a non-negative integer, got {value!r}")
        return value

    def _number(self, doc: Dict[str, Any], key: str, loc: str) -> Optional[Any]:
        if key not in doc:
            return None
        value = doc[key]
        if not _is_number(value):
            raise SchemaError(f"{loc}/{key}: must be a number, got {value!r}")
        return value

    def _types(self, value: Any, loc: str) -> frozenset:
        names = [value] if isinstance(value, str) else value
        if not isinstance(names, list) or not names:
            raise SchemaError(f"{loc}/type: must be a type name or a non-empty array of names")
        for name in names:
            if name not in JSON_TYPES:
                raise SchemaError(f"{loc}/type: unknown type {name!r}")
        return frozenset(names)

    def _regex(self, pattern: Any, loc: str) -> "re.Pattern":
        if not isinstance(pattern, str):
            raise SchemaError(f"{loc}: pattern must be a string")
        try:
            return re.compile(pattern)
        except re.error as e:
            raise SchemaError(f"{loc}: invalid regular expression {pattern!r}: {e}") from e

    def _schema_list(self, value: Any, loc: str, allow_empty: bool = True) -> Tuple[Schema, ...]:
        if not isinstance(value, list) or (not value and not allow_empty):
            raise SchemaError(f"{loc}: must be a non-empty array of schemas")
        return tuple(self.load(v, _child(loc, i)) for i, v in enumerate(value))

    def _schema_map(self, value: Any, loc: str) -> Dict[str, Schema]:
        if not isinstance(value, dict):
            raise SchemaError(f"{loc}: must be an object of schemas")
        return {k: self.load(v, _child(loc, k)) for k, v in value.items()}

    def _names(self, value: Any, loc: str) -> Tuple[str, ...]:
        if not isinstance(value, list) or not all(isinstance(n, str) for n in value):
            raise SchemaError(f"{loc}: must be an array of strings")
        # keep first occurrence order, drop repeats
        return tuple(dict.fromkeys(value))

    # -- roles --------------------------------------------------------------

    def _object_role(self, doc: Dict[str, Any], loc: str) -> ObjectRole:
        fields: Dict[str, Any] = {}
        if "properties" in doc:
            fields["properties"] = MappingProxyType(self._schema_map(doc["properties"], _child(loc, "properties")))
        if "required" in doc:
            fields["required"] = self._names(doc["required"], _child(loc, "required"))
        if "patternProperties" in doc:
            raw = doc["patternProperties"]
            ploc = _child(loc, "patternProperties")
            if not isinstance(raw, dict):
                raise SchemaError(f"{ploc}: must be an object of schemas")
            fields["pattern_properties"] = tuple(
                (self._regex(p, _child(ploc, p)), self.load(s, _child(ploc, p))) for p, s in raw.items()
            )
        if "additionalProperties" in doc:
            raw = doc["additionalProperties"]
            if isinstance(raw, bool):
                fields["additional_properties"] = raw
            else:
                fields["additional_properties"] = self.load(raw, _child(loc, "additionalProperties"))
        if "dependencies" in doc:
            raw = doc["dependencies"]
            dloc = _child(loc, "dependencies")
            if not isinstance(raw, dict):
                raise SchemaError(f"{dloc}: must be an object")
            names: Dict[str, Tuple[str, ...]] = {}
            schemas: Dict[str, Schema] = {}
            for trigger, dep in raw.items():
                if isinstance(dep, list):
                    names[trigger] = self._names(dep, _child(dloc, trigger))
                else:
                    schemas[trigger] = self.load(dep, _child(dloc, trigger))
            fields["property_dependencies"] = MappingProxyType(names)
            fields["schema_dependencies"] = MappingProxyType(schemas)
        fields["min_properties"] = self._count(doc, "minProperties", loc)
        fields["max_properties"] = self._count(doc, "maxProperties", loc)
        if "propertyNames" in doc:
            fields["property_names"] = self.load(doc["propertyNames"], _child(loc, "propertyNames"))
        return ObjectRole(**fields)

    def _array_role(self, doc: Dict[str, Any], loc: str) -> ArrayRole:
        fields: Dict[str, Any] = {}
        if "items" in doc:
            raw = doc["items"]
            if isinstance(raw, list):
                fields["item_schemas"] = self._schema_list(raw, _child(loc, "items"))
            else:
                fields["all_items"] = self.load(raw, _child(loc, "items"))
        if "additionalItems" in doc:
            raw = doc["additionalItems"]
            if isinstance(raw, bool):
                fields["additional_items"] = raw
            else:
                fields["additional_items"] = self.load(raw, _child(loc, "additionalItems"))
        fields["min_items"] = self._count(doc, "minItems", loc)
        fields["max_items"] = self._count(doc, "maxItems", loc)
        if "uniqueItems" in doc:
            fields["unique_items"] = self._flag(doc, "uniqueItems", loc)
        if "contains" in doc:
            fields["contains"] = self.load(doc["contains"], _child(loc, "contains"))
        return ArrayRole(**fields)

    def _string_role(self, doc: Dict[str, Any], loc: str) -> StringRole:
        fields: Dict[str, Any] = {
            "min_length": self._count(doc, "minLength", loc),
            "max_length": self._count(doc, "maxLength", loc),
        }
        if "pattern" in doc:
            fields["pattern"] = self._regex(doc["pattern"], _child(loc, "pattern"))
        if "format" in doc:
            if not isinstance(doc["format"], str):
                raise SchemaError(f"{loc}/format: must be a string")
            fields["format"] = doc["format"]
        return StringRole(**fields)

    def _number_role(self, doc: Dict[str, Any], loc: str) -> NumberRole:
        fields: Dict[str, Any] = {
            "minimum": self._number(doc, "minimum", loc),
            "maximum": self._number(doc, "maximum", loc),
        }
        for key, flag, limit in (("exclusiveMinimum", "exclusive_minimum", "exclusive_minimum_limit"),
                                 ("exclusiveMaximum", "exclusive_maximum", "exclusive_maximum_limit")):
            if key not in doc:
                continue
            if isinstance(doc[key], bool):
                fields[flag] = doc[key]
            else:
                fields[limit] = self._number(doc, key, loc)
        multiple = self._number(doc, "multipleOf", loc)
        if multiple is not None and multiple <= 0:
            raise SchemaError(f"{loc}/multipleOf: must be greater than 0, got {multiple!r}")
        fields["multiple_of"] = multiple
        return NumberRole(**fields)
