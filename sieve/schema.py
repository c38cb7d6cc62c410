"""
Schema model.

A ``Schema`` is one immutable node of the schema tree. Instead of one class
per JSON Schema construct, a node carries an optional payload per role
(object, array, string, number) next to the value, combinator and
conditional keywords, so a single node can constrain several aspects of a
subject at once. Nodes are built once by ``sieve.loader`` and shared freely
between threads.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, FrozenSet, Mapping, Optional, Pattern, Tuple, Union

from .failures import SchemaError


class _Missing:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()

EMPTY_MAP: Mapping[str, Any] = MappingProxyType({})

JSON_TYPES = frozenset({"object", "array", "string", "number", "integer", "boolean", "null"})


class Reference:
    """Placeholder for a ``$ref``; the resolver binds the target exactly once."""

    __slots__ = ("ref", "_target")

    def __init__(self, ref: str):
        self.ref = ref
        self._target: Optional["Schema"] = None

    def bind(self, target: "Schema") -> None:
        if self._target is not None and self._target is not target:
            raise SchemaError(f"reference {self.ref} is already bound")
        self._target = target

    @property
    def bound(self) -> bool:
        return self._target is not None

    @property
    def target(self) -> "Schema":
        if self._target is None:
            raise SchemaError(f"unresolved reference {self.ref}")
        return self._target

    def __repr__(self) -> str:
        return f"Reference({self.ref!r}, bound={self.bound})"


@dataclass(frozen=True, eq=False)
class ObjectRole:
    properties: Mapping[str, "Schema"] = field(default_factory=lambda: EMPTY_MAP)
    required: Tuple[str, ...] = ()
    pattern_properties: Tuple[Tuple[Pattern, "Schema"], ...] = ()
    # True: unconstrained, False: forbidden, Schema: constrained by sub-schema
    additional_properties: Union[bool, "Schema"] = True
    property_dependencies: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: EMPTY_MAP)
    schema_dependencies: Mapping[str, "Schema"] = field(default_factory=lambda: EMPTY_MAP)
    min_properties: Optional[int] = None
    max_properties: Optional[int] = None
    property_names: Optional["Schema"] = None

    def matches_any_pattern(self, key: str) -> bool:
        return any(rx.search(key) for rx, _ in self.pattern_properties)


@dataclass(frozen=True, eq=False)
class ArrayRole:
    all_items: Optional["Schema"] = None
    item_schemas: Optional[Tuple["Schema", ...]] = None
    additional_items: Union[bool, "Schema"] = True
    min_items: Optional[int] = None
    max_items: Optional[int] = None
    unique_items: bool = False
    contains: Optional["Schema"] = None


@dataclass(frozen=True, eq=False)
class StringRole:
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    pattern: Optional[Pattern] = None
    format: Optional[str] = None


@dataclass(frozen=True, eq=False)
class NumberRole:
    minimum: Optional[Union[int, float]] = None
    exclusive_minimum: bool = False
    maximum: Optional[Union[int, float]] = None
    exclusive_maximum: bool = False
    # draft-6+ numeric exclusive bounds, independent of minimum/maximum
    exclusive_minimum_limit: Optional[Union[int, float]] = None
    exclusive_maximum_limit: Optional[Union[int, float]] = None
    multiple_of: Optional[Union[int, float]] = None


@dataclass(frozen=True, eq=False)
class Schema:
    # identity
    title: Optional[str] = None
    description: Optional[str] = None
    location: str = "#"
    types: Optional[FrozenSet[str]] = None
    nullable: bool = False
    read_only: bool = False
    write_only: bool = False
    # False only for the boolean ``false`` schema
    verdict: Optional[bool] = None
    default: Any = MISSING

    # roles
    object_role: Optional[ObjectRole] = None
    array_role: Optional[ArrayRole] = None
    string_role: Optional[StringRole] = None
    number_role: Optional[NumberRole] = None

    # values
    const: Any = MISSING
    enum: Optional[Tuple[Any, ...]] = None

    # combinators
    all_of: Tuple["Schema", ...] = ()
    any_of: Tuple["Schema", ...] = ()
    one_of: Tuple["Schema", ...] = ()
    not_: Optional["Schema"] = None

    # conditional
    if_: Optional["Schema"] = None
    then: Optional["Schema"] = None
    else_: Optional["Schema"] = None

    ref: Optional[Reference] = None

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING

    @property
    def has_const(self) -> bool:
        return self.const is not MISSING

    def __repr__(self) -> str:
        label = self.title or self.location
        return f"Schema({label})"
