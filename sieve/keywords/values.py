from __future__ import annotations
from typing import Any, List

from ..failures import Failure
from ..schema import Schema

def _is_number(v: Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool)

def json_equal(a: Any, b: Any) -> bool:
    """
    Structural JSON equality over plain values.

    Numbers compare by value (``1 == 1.0``), booleans never equal numbers,
    objects compare key sets and values, arrays compare in order.
    """
    if _is_number(a) and _is_number(b):
        return a == b
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b
    if isinstance(a, dict) and isinstance(b, dict):
        if a.keys() != b.keys():
            return False
        return all(json_equal(a[k], b[k]) for k in a)
    if isinstance(a, (list, tuple)) and isinstance(b, (list, tuple)):
        return len(a) == len(b) and all(json_equal(x, y) for x, y in zip(a, b))
    if a is None or b is None:
        return a is None and b is None
    if type(a) is not type(b) and not (isinstance(a, str) and isinstance(b, str)):
        return False
    return a == b

def check_const(ctx, schema: Schema, subject: Any) -> List[Failure]:
    if json_equal(ctx.adapter.to_python(subject), schema.const):
        return []
    return [ctx.failure("value does not match the constant", "const", schema)]

def check_enum(ctx, schema: Schema, subject: Any) -> List[Failure]:
    plain = ctx.adapter.to_python(subject)
    if any(json_equal(plain, option) for option in schema.enum):
        return []
    return [ctx.failure(f"{_render(plain)} is not a valid enum value", "enum", schema)]

def _render(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(value)
