"""
Validation engine.

``Validator.validate`` walks one schema node at a time. For each node the
checks run in a fixed order and every failure is collected:

1. the ``false`` schema verdict (nothing else runs)
2. ``$ref`` target
3. ``type`` (a mismatch skips only the role keywords below)
4. ``readOnly``/``writeOnly`` against the configured context
5. role keywords for the subject's kind (object, array, string, number)
6. ``const``, ``enum``
7. ``allOf``, ``anyOf``, ``oneOf``, ``not``
8. ``if``/``then``/``else``

Sub-schemas are evaluated by recursive calls that *return* their failures.
Branches that only decide something (``anyOf`` members, ``if``, ``not``)
simply drop what they got back unless it ends up in the report.
"""

from __future__ import annotations
from typing import Any, List, Optional, Set, Tuple

from .adapters import ARRAY, NULL, NUMBER, OBJECT, STRING, DocumentAdapter, describe_kind, detect_adapter
from .config import READ, WRITE, ValidatorConfig
from .defaults import materialize_defaults
from .failures import Failure, ValidationResult
from .formats import FormatRegistry
from .keywords import check_array, check_const, check_enum, check_number, check_object, check_string
from .loader import load_schema
from .logging import log
from .schema import Schema


class _Pass:
    """State of one top-level validation call. Never shared between calls."""

    def __init__(self, adapter: DocumentAdapter, config: ValidatorConfig, formats: FormatRegistry):
        self.adapter = adapter
        self.config = config
        self.formats = formats
        # (schema, subject) pairs currently being evaluated on the call stack
        self._active: Set[Tuple[int, int]] = set()

    def failure(self, message: str, keyword: str, schema: Schema) -> Failure:
        return Failure(message=message, keyword=keyword, schema_location=schema.location)

    def check(self, schema: Schema, subject: Any) -> List[Failure]:
        """Failures of ``subject`` against ``schema``, with paths relative to ``subject``."""
        key = (id(schema), id(subject))
        if key in self._active:
            # a reference cycle came back to the same value without descending
            log().debug(f"skipping re-entry of {schema.location}")
            return []
        self._active.add(key)
        try:
            return self._evaluate(schema, subject)
        finally:
            self._active.discard(key)

    def _evaluate(self, schema: Schema, subject: Any) -> List[Failure]:
        if schema.verdict is False:
            return [self.failure("false schema always fails", "false", schema)]

        errs: List[Failure] = []
        if schema.ref is not None:
            errs.extend(self.check(schema.ref.target, subject))

        kind = self.adapter.kind(subject)
        type_errs = self._check_type(schema, subject, kind)
        errs.extend(type_errs)
        errs.extend(self._check_read_write(schema))

        if not type_errs:
            errs.extend(self._check_roles(schema, subject, kind))

        if schema.has_const:
            errs.extend(check_const(self, schema, subject))
        if schema.enum is not None:
            errs.extend(check_enum(self, schema, subject))

        for sub in schema.all_of:
            errs.extend(self.check(sub, subject))
        if schema.any_of:
            errs.extend(self._check_any_of(schema, subject))
        if schema.one_of:
            errs.extend(self._check_one_of(schema, subject))
        if schema.not_ is not None and not self.check(schema.not_, subject):
            errs.append(self.failure("subject must not be valid against schema", "not", schema))

        errs.extend(self._check_conditional(schema, subject))
        return errs

    def _check_type(self, schema: Schema, subject: Any, kind: str) -> List[Failure]:
        types = schema.types
        if types is None or kind in types:
            return []
        if kind == NULL and schema.nullable:
            return []
        if kind == NUMBER and "integer" in types and self.adapter.is_integer(subject):
            return []
        expected = next(iter(types)) if len(types) == 1 else "one of [" + ", ".join(sorted(types)) + "]"
        found = describe_kind(self.adapter, subject)
        return [self.failure(f"expected type: {expected}, found: {found}", "type", schema)]

    def _check_read_write(self, schema: Schema) -> List[Failure]:
        context = self.config.read_write_context
        if context == WRITE and schema.read_only:
            return [self.failure("value is read-only", "readOnly", schema)]
        if context == READ and schema.write_only:
            return [self.failure("value is write-only", "writeOnly", schema)]
        return []

    def _check_roles(self, schema: Schema, subject: Any, kind: str) -> List[Failure]:
        if kind == OBJECT and schema.object_role is not None:
            return check_object(self, schema, subject)
        if kind == ARRAY and schema.array_role is not None:
            return check_array(self, schema, subject)
        if kind == STRING and schema.string_role is not None:
            return check_string(self, schema, subject)
        if kind == NUMBER and schema.number_role is not None:
            return check_number(self, schema, subject)
        return []

    def _check_any_of(self, schema: Schema, subject: Any) -> List[Failure]:
        causes: List[Failure] = []
        for sub in schema.any_of:
            branch = self.check(sub, subject)
            if not branch:
                return []
            causes.extend(branch)
        total = len(schema.any_of)
        log().debug(f"anyOf at {schema.location}: 0 of {total} matched")
        return [Failure(
            message=f"no subschema matched out of the total {total} subschemas",
            keyword="anyOf",
            causes=tuple(causes),
            schema_location=schema.location,
        )]

    def _check_one_of(self, schema: Schema, subject: Any) -> List[Failure]:
        causes: List[Failure] = []
        matched = 0
        for sub in schema.one_of:
            branch = self.check(sub, subject)
            if branch:
                causes.extend(branch)
            else:
                matched += 1
        total = len(schema.one_of)
        log().debug(f"oneOf at {schema.location}: {matched} of {total} matched")
        if matched == 1:
            return []
        if matched == 0:
            return [Failure(
                message=f"no subschema matched out of the total {total} subschemas",
                keyword="oneOf",
                causes=tuple(causes),
                schema_location=schema.location,
            )]
        return [self.failure(f"{matched} subschemas matched instead of one", "oneOf", schema)]

    def _check_conditional(self, schema: Schema, subject: Any) -> List[Failure]:
        # then/else mean nothing without an if on the same node
        if schema.if_ is None:
            return []
        passed = not self.check(schema.if_, subject)
        branch = schema.then if passed else schema.else_
        log().debug(f"if at {schema.location} {'passed' if passed else 'failed'}, "
                    f"{'then' if passed else 'else'} {'absent' if branch is None else 'applied'}")
        if branch is None:
            return []
        return self.check(branch, subject)


class Validator:
    """
    Validates subjects against ``Schema`` trees.

    A validator holds only configuration; every ``validate`` call builds its
    own pass state, so one instance (and one schema) can serve many threads.
    Default injection is the only write to a subject and happens only when
    ``config.apply_defaults`` is set or ``materialize_defaults`` is called;
    callers sharing one mutable subject across threads must serialize that.
    """

    def __init__(self, config: Optional[ValidatorConfig] = None, formats: Optional[FormatRegistry] = None):
        self.config = config or ValidatorConfig()
        self.formats = formats if formats is not None else FormatRegistry()

    def validate(self, schema: Schema, subject: Any, adapter: Optional[DocumentAdapter] = None) -> ValidationResult:
        adapter = adapter or detect_adapter(subject)
        failures = _Pass(adapter, self.config, self.formats).check(schema, subject)
        result = ValidationResult(failures=failures)
        if self.config.apply_defaults:
            result.defaults_applied = materialize_defaults(schema, subject, adapter)
        log().debug(f"validated against {schema.location}: {len(failures)} failure(s)")
        return result

    def is_valid(self, schema: Schema, subject: Any, adapter: Optional[DocumentAdapter] = None) -> bool:
        adapter = adapter or detect_adapter(subject)
        return not _Pass(adapter, self.config, self.formats).check(schema, subject)

    def materialize_defaults(self, schema: Schema, subject: Any, adapter: Optional[DocumentAdapter] = None) -> int:
        """Inject declared defaults for absent properties; returns how many were injected."""
        return materialize_defaults(schema, subject, adapter or detect_adapter(subject))


def validate(schema: Any, subject: Any, config: Optional[ValidatorConfig] = None,
             formats: Optional[FormatRegistry] = None,
             adapter: Optional[DocumentAdapter] = None, **options: Any) -> ValidationResult:
    """
    Validate and raise ``ValidationError`` carrying every failure if invalid.

    ``schema`` may be a ``Schema`` or a parsed schema document. Keyword
    ``options`` (``strict_formats``, ``apply_defaults``, ``read_write_context``)
    override the matching fields of ``config``.
    """
    if not isinstance(schema, Schema):
        schema = load_schema(schema)
    if options:
        config = (config or ValidatorConfig()).override(**options)
    result = Validator(config, formats).validate(schema, subject, adapter)
    result.raise_for_failures()
    return result
