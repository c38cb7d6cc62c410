# -*- coding: utf-8 -*-
"""
sieve: JSON-document validation against declarative schemas.

Collects every violation in one pass and reports each with a JSON-Pointer
location. Works over plain Python documents and PyYAML node graphs.
"""

from .adapters import DocumentAdapter, PlainAdapter, YamlNodeAdapter, detect_adapter
from .config import ValidatorConfig
from .engine import Validator, validate
from .failures import Failure, SchemaError, ValidationError, ValidationResult
from .formats import FormatRegistry
from .loader import load_schema
from .schema import Reference, Schema

__version__ = "0.4.0"

__all__ = [
    "DocumentAdapter", "PlainAdapter", "YamlNodeAdapter", "detect_adapter",
    "ValidatorConfig",
    "Validator", "validate",
    "Failure", "SchemaError", "ValidationError", "ValidationResult",
    "FormatRegistry",
    "load_schema",
    "Reference", "Schema",
]
