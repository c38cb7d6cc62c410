from __future__ import annotations
from typing import Any, List

from ..failures import Failure
from ..logging import log
from ..schema import Schema, StringRole

def check_string(ctx, schema: Schema, subject: Any) -> List[Failure]:
    """Length bounds count code points; ``pattern`` matches anywhere in the string."""
    role: StringRole = schema.string_role
    text = ctx.adapter.scalar(subject)
    length = len(text)
    errs: List[Failure] = []
    if role.min_length is not None and length < role.min_length:
        errs.append(ctx.failure(f"expected minLength: {role.min_length}, actual: {length}", "minLength", schema))
    if role.max_length is not None and length > role.max_length:
        errs.append(ctx.failure(f"expected maxLength: {role.max_length}, actual: {length}", "maxLength", schema))
    if role.pattern is not None and not role.pattern.search(text):
        errs.append(ctx.failure(f"string [{text}] does not match pattern {role.pattern.pattern}", "pattern", schema))
    if role.format is not None:
        errs.extend(_check_format(ctx, schema, role.format, text))
    return errs

def _check_format(ctx, schema: Schema, name: str, text: str) -> List[Failure]:
    check = ctx.formats.get(name)
    if check is None:
        if ctx.config.strict_formats:
            return [ctx.failure(f"unknown format [{name}]", "format", schema)]
        log().debug(f"format [{name}] is not registered, accepting [{text}]")
        return []
    message = check(text)
    if message is None:
        return []
    return [ctx.failure(message, "format", schema)]
