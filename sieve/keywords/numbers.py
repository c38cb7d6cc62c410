from __future__ import annotations
import math
from fractions import Fraction
from typing import Any, List, Union

from ..failures import Failure
from ..schema import NumberRole, Schema

Number = Union[int, float]

def check_number(ctx, schema: Schema, subject: Any) -> List[Failure]:
    role: NumberRole = schema.number_role
    n = ctx.adapter.scalar(subject)
    errs: List[Failure] = []
    if role.minimum is not None:
        if role.exclusive_minimum and n <= role.minimum:
            errs.append(ctx.failure(f"{n} is not greater than {role.minimum}", "exclusiveMinimum", schema))
        elif not role.exclusive_minimum and n < role.minimum:
            errs.append(ctx.failure(f"{n} is not greater or equal to {role.minimum}", "minimum", schema))
    if role.exclusive_minimum_limit is not None and n <= role.exclusive_minimum_limit:
        errs.append(ctx.failure(f"{n} is not greater than {role.exclusive_minimum_limit}", "exclusiveMinimum", schema))
    if role.maximum is not None:
        if role.exclusive_maximum and n >= role.maximum:
            errs.append(ctx.failure(f"{n} is not less than {role.maximum}", "exclusiveMaximum", schema))
        elif not role.exclusive_maximum and n > role.maximum:
            errs.append(ctx.failure(f"{n} is not less or equal to {role.maximum}", "maximum", schema))
    if role.exclusive_maximum_limit is not None and n >= role.exclusive_maximum_limit:
        errs.append(ctx.failure(f"{n} is not less than {role.exclusive_maximum_limit}", "exclusiveMaximum", schema))
    if role.multiple_of is not None and not is_multiple_of(n, role.multiple_of):
        errs.append(ctx.failure(f"{n} is not a multiple of {role.multiple_of}", "multipleOf", schema))
    return errs

def _exact(n: Number) -> Fraction:
    # the shortest repr of a float is the decimal the document spelled,
    # so 0.1 becomes 1/10 rather than its binary approximation
    if isinstance(n, int):
        return Fraction(n)
    return Fraction(repr(n))

def is_multiple_of(n: Number, divisor: Number) -> bool:
    """Exact check: the quotient of the two decimal values must be integral."""
    if isinstance(n, float) and not math.isfinite(n):
        return False
    return (_exact(n) / _exact(divisor)).denominator == 1
