from __future__ import annotations
from typing import Any, List

from ..failures import Failure, prefixed
from ..schema import ObjectRole, Schema

def check_object(ctx, schema: Schema, subject: Any) -> List[Failure]:
    """Run every object keyword of ``schema`` against an object subject, in report order."""
    role: ObjectRole = schema.object_role
    keys = ctx.adapter.keys(subject) or []
    errs: List[Failure] = []
    errs.extend(_check_required(ctx, schema, role, subject))
    errs.extend(_check_property_names(ctx, role, keys))
    errs.extend(_check_size(ctx, schema, role, len(keys)))
    errs.extend(_check_property_dependencies(ctx, schema, role, subject))
    errs.extend(_check_additional_properties(ctx, schema, role, subject, keys))
    errs.extend(_check_pattern_properties(ctx, role, subject, keys))
    errs.extend(_check_properties(ctx, role, subject))
    errs.extend(_check_schema_dependencies(ctx, role, subject))
    return errs

def _check_required(ctx, schema: Schema, role: ObjectRole, subject: Any) -> List[Failure]:
    errs: List[Failure] = []
    for name in role.required:
        if not ctx.adapter.has(subject, name):
            errs.append(ctx.failure(f"required key [{name}] not found", "required", schema))
    return errs

def _check_property_names(ctx, role: ObjectRole, keys: List[str]) -> List[Failure]:
    if role.property_names is None or not keys:
        return []
    errs: List[Failure] = []
    for name in keys:
        # the name itself is the subject here
        errs.extend(prefixed(ctx.check(role.property_names, ctx.adapter.wrap(name)), name))
    return errs

def _check_size(ctx, schema: Schema, role: ObjectRole, size: int) -> List[Failure]:
    errs: List[Failure] = []
    if role.min_properties is not None and size < role.min_properties:
        errs.append(ctx.failure(f"minimum size: [{role.min_properties}], found: [{size}]", "minProperties", schema))
    if role.max_properties is not None and size > role.max_properties:
        errs.append(ctx.failure(f"maximum size: [{role.max_properties}], found: [{size}]", "maxProperties", schema))
    return errs

def _check_property_dependencies(ctx, schema: Schema, role: ObjectRole, subject: Any) -> List[Failure]:
    errs: List[Failure] = []
    for trigger, names in role.property_dependencies.items():
        if not ctx.adapter.has(subject, trigger):
            continue
        for name in names:
            if not ctx.adapter.has(subject, name):
                errs.append(ctx.failure(f"property [{name}] is required", "dependencies", schema))
    return errs

def additional_keys(role: ObjectRole, keys: List[str]) -> List[str]:
    """Keys that are neither declared properties nor matched by a pattern property."""
    if not keys:
        return []
    return [k for k in keys if k not in role.properties and not role.matches_any_pattern(k)]

def _check_additional_properties(ctx, schema: Schema, role: ObjectRole, subject: Any, keys: List[str]) -> List[Failure]:
    policy = role.additional_properties
    if policy is True:
        return []
    extra = additional_keys(role, keys)
    if not extra:
        return []
    errs: List[Failure] = []
    if policy is False:
        for key in extra:
            errs.append(ctx.failure(f"extraneous key [{key}] is not permitted", "additionalProperties", schema))
        return errs
    for key in extra:
        errs.extend(prefixed(ctx.check(policy, ctx.adapter.get(subject, key)), key))
    return errs

def _check_pattern_properties(ctx, role: ObjectRole, subject: Any, keys: List[str]) -> List[Failure]:
    if not role.pattern_properties or not keys:
        return []
    errs: List[Failure] = []
    for rx, sub in role.pattern_properties:
        for key in keys:
            if rx.search(key):
                errs.extend(prefixed(ctx.check(sub, ctx.adapter.get(subject, key)), key))
    return errs

def _check_properties(ctx, role: ObjectRole, subject: Any) -> List[Failure]:
    errs: List[Failure] = []
    for name, sub in role.properties.items():
        present, value = ctx.adapter.lookup(subject, name)
        if present:
            errs.extend(prefixed(ctx.check(sub, value), name))
    return errs

def _check_schema_dependencies(ctx, role: ObjectRole, subject: Any) -> List[Failure]:
    errs: List[Failure] = []
    for trigger, sub in role.schema_dependencies.items():
        if ctx.adapter.has(subject, trigger):
            # whole object, reported at the current path
            errs.extend(ctx.check(sub, subject))
    return errs
