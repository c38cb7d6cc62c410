"""
Keyword validators, one module per role.

Every check takes the running pass (``ctx``), the schema node and the
subject, and returns the ordered list of failures it found. Sub-schemas are
evaluated through ``ctx.check``, which returns their failures relative to the
value it was given; callers prefix the path segment they descended through.
"""

from .arrays import check_array
from .numbers import check_number, is_multiple_of
from .objects import additional_keys, check_object
from .strings import check_string
from .values import check_const, check_enum, json_equal

__all__ = [
    "check_array",
    "check_number", "is_multiple_of",
    "additional_keys", "check_object",
    "check_string",
    "check_const", "check_enum", "json_equal",
]
