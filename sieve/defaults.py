from __future__ import annotations
from typing import Any, Set, Tuple

from .adapters import ARRAY, OBJECT, DocumentAdapter
from .logging import log
from .schema import Schema

def materialize_defaults(schema: Schema, subject: Any, adapter: DocumentAdapter) -> int:
    """
    Write declared ``default`` values into ``subject`` for absent properties.

    Follows ``properties`` (into present values too), ``items`` and ``allOf``
    members, and bound references. Values go through ``adapter.wrap`` so they
    share the subject's representation. Returns the number of injections.
    """
    return _Materializer(adapter).visit(schema, subject)

class _Materializer:
    def __init__(self, adapter: DocumentAdapter):
        self.adapter = adapter
        self._active: Set[Tuple[int, int]] = set()

    def visit(self, schema: Schema, subject: Any) -> int:
        key = (id(schema), id(subject))
        if key in self._active:
            return 0
        self._active.add(key)
        try:
            return self._visit(schema, subject)
        finally:
            self._active.discard(key)

    def _visit(self, schema: Schema, subject: Any) -> int:
        count = 0
        if schema.ref is not None:
            count += self.visit(schema.ref.target, subject)
        kind = self.adapter.kind(subject)
        if kind == OBJECT and schema.object_role is not None:
            count += self._visit_properties(schema, subject)
        elif kind == ARRAY and schema.array_role is not None:
            count += self._visit_items(schema, subject)
        for sub in schema.all_of:
            count += self.visit(sub, subject)
        return count

    def _visit_properties(self, schema: Schema, subject: Any) -> int:
        count = 0
        for name, sub in schema.object_role.properties.items():
            present, value = self.adapter.lookup(subject, name)
            if present:
                count += self.visit(sub, value)
            elif sub.has_default:
                self.adapter.put(subject, name, self.adapter.wrap(sub.default))
                log().debug(f"default injected for [{name}] from {sub.location}")
                count += 1
        return count

    def _visit_items(self, schema: Schema, subject: Any) -> int:
        role = schema.array_role
        count = 0
        if role.all_items is not None:
            for value in self.adapter.items(subject):
                count += self.visit(role.all_items, value)
        elif role.item_schemas is not None:
            size = self.adapter.length(subject)
            for i, sub in enumerate(role.item_schemas[:size]):
                count += self.visit(sub, self.adapter.item(subject, i))
        return count
