"""
Validation failures and outcomes.

A validation pass never raises for invalid data: every violated constraint
becomes a ``Failure`` value and the pass returns them, in order, inside a
``ValidationResult``. Exceptions are reserved for unusable schemas
(``SchemaError``) and for callers that explicitly ask for one
(``ValidationResult.raise_for_failures``).
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple, Union

Segment = Union[str, int]


class SchemaError(ValueError):
    """The schema itself is unusable (bad regex, malformed keyword, unbound $ref)."""


def escape_segment(segment: Segment) -> str:
    """JSON-Pointer escaping: ``~`` -> ``~0`` and ``/`` -> ``~1``."""
    return str(segment).replace("~", "~0").replace("/", "~1")


def render_pointer(path: Tuple[Segment, ...]) -> str:
    return "#" + "".join("/" + escape_segment(s) for s in path)


@dataclass(frozen=True)
class Failure:
    """One violated constraint."""
    message: str
    keyword: str
    path: Tuple[Segment, ...] = ()
    causes: Tuple["Failure", ...] = ()
    schema_location: Optional[str] = None

    @property
    def pointer(self) -> str:
        return render_pointer(self.path)

    def prepend(self, segment: Segment) -> "Failure":
        """Copy of this failure (and its causes) one level deeper, under ``segment``."""
        return replace(
            self,
            path=(segment,) + self.path,
            causes=tuple(c.prepend(segment) for c in self.causes),
        )

    def all_messages(self) -> List[str]:
        if not self.causes:
            return [f"{self.pointer}: {self.message}"]
        out: List[str] = []
        for cause in self.causes:
            out.extend(cause.all_messages())
        return out

    def to_json(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "pointerToViolation": self.pointer,
            "keyword": self.keyword,
            "message": self.message,
            "causingExceptions": [c.to_json() for c in self.causes],
        }
        if self.schema_location is not None:
            out["schemaLocation"] = self.schema_location
        return out

    def __str__(self) -> str:
        return f"{self.pointer}: {self.message}"


def prefixed(failures: List[Failure], segment: Segment) -> List[Failure]:
    return [f.prepend(segment) for f in failures]


class ValidationError(Exception):
    """Raised on request when a subject does not satisfy its schema."""

    def __init__(self, failures: List[Failure]):
        self.failures = list(failures)
        super().__init__(self.summary())

    def summary(self) -> str:
        if len(self.failures) == 1:
            return str(self.failures[0])
        return f"#: {len(self.failures)} schema violations found"

    def all_messages(self) -> List[str]:
        out: List[str] = []
        for f in self.failures:
            out.extend(f.all_messages())
        return out


@dataclass
class ValidationResult:
    """Result of one top-level validation call."""
    failures: List[Failure] = field(default_factory=list)
    defaults_applied: int = 0

    @property
    def valid(self) -> bool:
        return not self.failures

    def __bool__(self) -> bool:
        return self.valid

    def keywords(self) -> List[str]:
        return [f.keyword for f in self.failures]

    def all_messages(self) -> List[str]:
        out: List[str] = []
        for f in self.failures:
            out.extend(f.all_messages())
        return out

    def to_json(self) -> List[Dict[str, Any]]:
        return [f.to_json() for f in self.failures]

    def raise_for_failures(self) -> None:
        if self.failures:
            raise ValidationError(self.failures)
