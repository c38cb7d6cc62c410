from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Dict, Optional

READ = "read"
WRITE = "write"

_TRUTHY = {"1", "true", "yes", "on"}

def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY

@dataclass
class ValidatorConfig:
    strict_formats: bool = False
    apply_defaults: bool = False
    read_write_context: Optional[str] = None

    def __post_init__(self) -> None:
        if self.read_write_context not in (None, READ, WRITE):
            raise ValueError(f"read_write_context must be 'read' or 'write', got {self.read_write_context!r}")

    @staticmethod
    def from_env() -> "ValidatorConfig":
        context = os.environ.get("SIEVE_RW_CONTEXT") or None
        if context is not None:
            context = context.strip().lower()
        return ValidatorConfig(
            strict_formats=_env_flag("SIEVE_STRICT_FORMATS"),
            apply_defaults=_env_flag("SIEVE_APPLY_DEFAULTS"),
            read_write_context=context,
        )

    def override(self, **changes) -> "ValidatorConfig":
        """Copy with the non-None values of ``changes`` applied."""
        values = self.as_dict()
        values.update({k: v for k, v in changes.items() if v is not None})
        return ValidatorConfig(**values)

    def as_dict(self) -> Dict[str, object]:
        return {
            "strict_formats": self.strict_formats,
            "apply_defaults": self.apply_defaults,
            "read_write_context": self.read_write_context,
        }
