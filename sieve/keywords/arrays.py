from __future__ import annotations
from typing import Any, List

from ..failures import Failure, prefixed
from ..schema import ArrayRole, Schema
from .values import json_equal

def check_array(ctx, schema: Schema, subject: Any) -> List[Failure]:
    role: ArrayRole = schema.array_role
    size = ctx.adapter.length(subject)
    errs: List[Failure] = []
    errs.extend(_check_size(ctx, schema, role, size))
    if role.unique_items:
        errs.extend(_check_unique(ctx, schema, subject))
    if role.contains is not None:
        errs.extend(_check_contains(ctx, schema, role, subject))
    errs.extend(_check_items(ctx, schema, role, subject, size))
    return errs

def _check_size(ctx, schema: Schema, role: ArrayRole, size: int) -> List[Failure]:
    errs: List[Failure] = []
    if role.min_items is not None and size < role.min_items:
        errs.append(ctx.failure(f"expected minimum item count: {role.min_items}, found: {size}", "minItems", schema))
    if role.max_items is not None and size > role.max_items:
        errs.append(ctx.failure(f"expected maximum item count: {role.max_items}, found: {size}", "maxItems", schema))
    return errs

def _check_unique(ctx, schema: Schema, subject: Any) -> List[Failure]:
    seen: List[Any] = []
    for value in ctx.adapter.items(subject):
        plain = ctx.adapter.to_python(value)
        if any(json_equal(plain, prev) for prev in seen):
            return [ctx.failure("array items are not unique", "uniqueItems", schema)]
        seen.append(plain)
    return []

def _check_contains(ctx, schema: Schema, role: ArrayRole, subject: Any) -> List[Failure]:
    for value in ctx.adapter.items(subject):
        if not ctx.check(role.contains, value):
            return []
    return [ctx.failure("expected at least one array item to match 'contains' schema", "contains", schema)]

def _check_items(ctx, schema: Schema, role: ArrayRole, subject: Any, size: int) -> List[Failure]:
    errs: List[Failure] = []
    if role.all_items is not None:
        for i, value in enumerate(ctx.adapter.items(subject)):
            errs.extend(prefixed(ctx.check(role.all_items, value), i))
        return errs
    if role.item_schemas is None:
        return errs
    positional = role.item_schemas
    for i in range(min(size, len(positional))):
        errs.extend(prefixed(ctx.check(positional[i], ctx.adapter.item(subject, i)), i))
    if size <= len(positional):
        return errs
    policy = role.additional_items
    if policy is False:
        errs.append(ctx.failure(f"expected: [{len(positional)}] array items, found: [{size}]", "additionalItems", schema))
    elif policy is not True:
        for i in range(len(positional), size):
            errs.extend(prefixed(ctx.check(policy, ctx.adapter.item(subject, i)), i))
    return errs
