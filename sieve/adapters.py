"""
Document adapters.

The engine never touches a subject directly; it asks an adapter. Two
representations are supported out of the box:

- ``PlainAdapter``: the dict/list/scalar values produced by ``json.load`` or
  ``yaml.safe_load``.
- ``YamlNodeAdapter``: PyYAML's representation graph (``yaml.compose``), which
  keeps source marks for every value.
"""

from __future__ import annotations
import copy
import math
from typing import Any, Iterable, List, Tuple

import yaml
from yaml.constructor import ConstructorError, SafeConstructor
from yaml.nodes import MappingNode, Node, ScalarNode, SequenceNode
from yaml.representer import SafeRepresenter

OBJECT = "object"
ARRAY = "array"
STRING = "string"
NUMBER = "number"
BOOLEAN = "boolean"
NULL = "null"


class DocumentAdapter:
    """Uniform read access (plus default injection) over one document representation."""

    def kind(self, value: Any) -> str:
        """One of object/array/string/number/boolean/null."""
        raise NotImplementedError

    def keys(self, obj: Any) -> List[str]:
        raise NotImplementedError

    def lookup(self, obj: Any, key: str) -> Tuple[bool, Any]:
        raise NotImplementedError

    def put(self, obj: Any, key: str, value: Any) -> None:
        raise NotImplementedError

    def length(self, arr: Any) -> int:
        raise NotImplementedError

    def item(self, arr: Any, index: int) -> Any:
        raise NotImplementedError

    def scalar(self, value: Any) -> Any:
        """Python value of a string/number/boolean/null."""
        raise NotImplementedError

    def wrap(self, raw: Any) -> Any:
        """Turn a plain Python value into this representation."""
        raise NotImplementedError

    def has(self, obj: Any, key: str) -> bool:
        return self.lookup(obj, key)[0]

    def get(self, obj: Any, key: str) -> Any:
        return self.lookup(obj, key)[1]

    def items(self, arr: Any) -> Iterable[Any]:
        for i in range(self.length(arr)):
            yield self.item(arr, i)

    def is_object(self, value: Any) -> bool:
        return self.kind(value) == OBJECT

    def is_array(self, value: Any) -> bool:
        return self.kind(value) == ARRAY

    def is_string(self, value: Any) -> bool:
        return self.kind(value) == STRING

    def is_number(self, value: Any) -> bool:
        return self.kind(value) == NUMBER

    def is_boolean(self, value: Any) -> bool:
        return self.kind(value) == BOOLEAN

    def is_null(self, value: Any) -> bool:
        return self.kind(value) == NULL

    def is_integer(self, value: Any) -> bool:
        if not self.is_number(value):
            return False
        n = self.scalar(value)
        if isinstance(n, int):
            return True
        return math.isfinite(n) and float(n).is_integer()

    def to_python(self, value: Any) -> Any:
        """Deep plain copy, used for equality (``const``, ``enum``, ``uniqueItems``)."""
        kind = self.kind(value)
        if kind == OBJECT:
            return {k: self.to_python(self.get(value, k)) for k in self.keys(value)}
        if kind == ARRAY:
            return [self.to_python(v) for v in self.items(value)]
        return self.scalar(value)


class PlainAdapter(DocumentAdapter):
    def kind(self, value: Any) -> str:
        if value is None:
            return NULL
        if isinstance(value, bool):
            return BOOLEAN
        if isinstance(value, (int, float)):
            return NUMBER
        if isinstance(value, str):
            return STRING
        if isinstance(value, dict):
            return OBJECT
        if isinstance(value, (list, tuple)):
            return ARRAY
        raise TypeError(f"not a JSON value: {type(value).__name__}")

    def keys(self, obj: Any) -> List[str]:
        return list(obj.keys())

    def lookup(self, obj: Any, key: str) -> Tuple[bool, Any]:
        if key in obj:
            return True, obj[key]
        return False, None

    def put(self, obj: Any, key: str, value: Any) -> None:
        obj[key] = value

    def length(self, arr: Any) -> int:
        return len(arr)

    def item(self, arr: Any, index: int) -> Any:
        return arr[index]

    def items(self, arr: Any) -> Iterable[Any]:
        return iter(arr)

    def scalar(self, value: Any) -> Any:
        return value

    def wrap(self, raw: Any) -> Any:
        return copy.deepcopy(raw)

    def to_python(self, value: Any) -> Any:
        return value


_INT_TAG = "tag:yaml.org,2002:int"
_FLOAT_TAG = "tag:yaml.org,2002:float"
_BOOL_TAG = "tag:yaml.org,2002:bool"
_NULL_TAG = "tag:yaml.org,2002:null"
_STR_TAG = "tag:yaml.org,2002:str"
_MERGE_TAG = "tag:yaml.org,2002:merge"

_SCALAR_KINDS = {
    _INT_TAG: NUMBER,
    _FLOAT_TAG: NUMBER,
    _BOOL_TAG: BOOLEAN,
    _NULL_TAG: NULL,
}


class YamlNodeAdapter(DocumentAdapter):
    """
    Adapter over ``yaml.compose`` output.

    Scalar kinds come from the resolved tags; any other scalar tag (timestamps,
    binary, custom tags) reads as a string holding the raw text. Duplicate
    mapping keys resolve to the last occurrence, keeping the first position.
    ``<<`` merge keys are expanded the way ``yaml.safe_load`` expands them.
    """

    def __init__(self):
        self._constructor = SafeConstructor()

    def kind(self, value: Any) -> str:
        if isinstance(value, MappingNode):
            return OBJECT
        if isinstance(value, SequenceNode):
            return ARRAY
        if isinstance(value, ScalarNode):
            return _SCALAR_KINDS.get(value.tag, STRING)
        raise TypeError(f"not a YAML node: {type(value).__name__}")

    def pairs(self, obj: MappingNode) -> List[Tuple[ScalarNode, Node]]:
        """
        Scalar-keyed pairs of a mapping with ``<<`` merge keys expanded.

        Merged pairs come first so the mapping's own keys win, and within a
        merge list earlier mappings win over later ones. Complex (non-scalar)
        keys are skipped. The node graph itself is left untouched.
        """
        merged: List[Tuple[ScalarNode, Node]] = []
        own: List[Tuple[ScalarNode, Node]] = []
        for k, v in obj.value:
            if not isinstance(k, ScalarNode):
                continue
            if k.tag == _MERGE_TAG:
                merged.extend(self._merge_source(v))
            else:
                own.append((k, v))
        return merged + own

    def _merge_source(self, value: Node) -> List[Tuple[ScalarNode, Node]]:
        sources = value.value if isinstance(value, SequenceNode) else [value]
        out: List[Tuple[ScalarNode, Node]] = []
        for src in reversed(sources):
            if not isinstance(src, MappingNode):
                raise ConstructorError("while expanding a merge key", value.start_mark,
                                       f"expected a mapping for merging, but found {src.id}", src.start_mark)
            out.extend(self.pairs(src))
        return out

    def keys(self, obj: MappingNode) -> List[str]:
        seen = {}
        for k, _ in self.pairs(obj):
            seen.setdefault(str(k.value), None)
        return list(seen)

    def lookup(self, obj: MappingNode, key: str) -> Tuple[bool, Any]:
        found = False
        out = None
        for k, v in self.pairs(obj):
            if str(k.value) == key:
                found, out = True, v
        return found, out

    def put(self, obj: MappingNode, key: str, value: Node) -> None:
        # own keys only: an appended pair overrides a merged one
        for i, (k, _) in enumerate(obj.value):
            if isinstance(k, ScalarNode) and k.tag != _MERGE_TAG and str(k.value) == key:
                obj.value[i] = (k, value)
                return
        obj.value.append((ScalarNode(_STR_TAG, key), value))

    def length(self, arr: SequenceNode) -> int:
        return len(arr.value)

    def item(self, arr: SequenceNode, index: int) -> Node:
        return arr.value[index]

    def items(self, arr: SequenceNode) -> Iterable[Node]:
        return iter(arr.value)

    def scalar(self, value: ScalarNode) -> Any:
        tag = value.tag
        if tag == _INT_TAG:
            return self._constructor.construct_yaml_int(value)
        if tag == _FLOAT_TAG:
            return self._constructor.construct_yaml_float(value)
        if tag == _BOOL_TAG:
            return self._constructor.construct_yaml_bool(value)
        if tag == _NULL_TAG:
            return None
        return value.value

    def wrap(self, raw: Any) -> Node:
        # a fresh representer per call: it memoizes represented objects
        return SafeRepresenter().represent_data(raw)


def detect_adapter(subject: Any) -> DocumentAdapter:
    """Pick the adapter for ``subject``'s representation."""
    if isinstance(subject, yaml.Node):
        return YamlNodeAdapter()
    return PlainAdapter()


def describe_kind(adapter: DocumentAdapter, value: Any) -> str:
    """JSON type name used in type-mismatch messages (integers report as ``integer``)."""
    kind = adapter.kind(value)
    if kind == NUMBER and adapter.is_integer(value):
        return "integer"
    return kind
