#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
sieve CLI: validate documents against a schema

Usage:
  python -m sieve check --schema schema.json --data doc.json
  python -m sieve check --schema schema.yml --data rows.jsonl --jsonl --report build/report.json
  python -m sieve formats
"""
from __future__ import annotations
import argparse, sys, time
from pathlib import Path
from typing import Any, Dict, List, Tuple

import yaml
from rich.console import Console
from rich.text import Text

from .config import READ, WRITE, ValidatorConfig
from .engine import Validator
from .failures import Failure, SchemaError
from .formats import FormatRegistry
from .io import load_document, read_jsonl, report_payload, write_json
from .loader import load_schema
from .logging import log, set_verbosity

console = Console()

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_ERROR = 2

def print_success(message: str, duration_ms: float = None):
    if duration_ms is not None:
        console.print(Text(f"✓ {message} in {duration_ms:.0f}ms", style="green"))
    else:
        console.print(Text(f"✓ {message}", style="green"))

def print_failure(message: str):
    console.print(Text(f"✗ {message}", style="red bold"))

def print_error(message: str):
    console.print(Text(f"❌ {message}", style="red bold"))

def print_failures(failures: List[Failure], label: str = ""):
    for f in failures:
        prefix = f"{label} " if label else ""
        console.print(Text(f"  - {prefix}{f.pointer} [{f.keyword}] {f.message}", style="red"))
        for cause in f.causes:
            console.print(Text(f"      · {cause.pointer} [{cause.keyword}] {cause.message}", style="dim"))

def main(argv: List[str] = None):
    ap = argparse.ArgumentParser(prog="sieve", description="Validate JSON/YAML documents against a schema")
    sub = ap.add_subparsers(dest="cmd", required=True)

    check = sub.add_parser("check", help="Validate a document (or JSONL rows) against a schema")
    check.add_argument("--schema", required=True, help="Schema file (.json, .yml, .yaml)")
    check.add_argument("--data", required=True, help="Document to validate")
    check.add_argument("--jsonl", action="store_true", help="Treat --data as JSONL, one subject per line")
    check.add_argument("--yaml-nodes", action="store_true", help="Validate the YAML node graph instead of plain values")
    check.add_argument("--strict-formats", action="store_true", default=None, help="Reject unknown format names")
    check.add_argument("--defaults", action="store_true", default=None, help="Inject schema defaults for absent properties")
    check.add_argument("--check-schema", action="store_true", help="Check the schema against the draft-7 meta-schema first")
    check.add_argument("--context", choices=[READ, WRITE], default=None, help="readOnly/writeOnly context")
    check.add_argument("--out", default=None, help="Write the (defaults-applied) document here; not with --jsonl")
    check.add_argument("--report", default=None, help="Write a JSON report here")
    check.add_argument("--verbose", action="store_true")

    sub.add_parser("formats", help="List registered format names")

    args = ap.parse_args(argv)
    if args.cmd == "check" and args.jsonl and args.out:
        ap.error("--out cannot be combined with --jsonl")

    if args.cmd == "formats":
        for name in FormatRegistry():
            console.print(name)
        sys.exit(EXIT_OK)

    set_verbosity(args.verbose)
    rc = run_check(args)
    sys.exit(rc)

def run_check(args: argparse.Namespace) -> int:
    """Validate --data against --schema. Returns the process exit code."""
    config = ValidatorConfig.from_env().override(
        strict_formats=args.strict_formats,
        apply_defaults=args.defaults,
        read_write_context=args.context,
    )
    start = time.time()
    try:
        schema = load_schema(load_document(Path(args.schema)), check_meta=args.check_schema)
        subjects = _load_subjects(Path(args.data), args.jsonl, args.yaml_nodes)
    except (OSError, ValueError, yaml.YAMLError) as e:
        # SchemaError is a ValueError
        kind = "schema error" if isinstance(e, SchemaError) else "cannot load input"
        print_error(f"{kind}: {e}")
        return EXIT_ERROR

    validator = Validator(config)
    errors: List[Dict[str, Any]] = []
    applied = 0
    try:
        for label, subject in subjects:
            result = validator.validate(schema, subject)
            applied += result.defaults_applied
            for f in result.failures:
                entry = f.to_json()
                if label:
                    entry["line"] = label
                errors.append(entry)
            if result.failures and args.verbose:
                print_failures(result.failures, f"line {label}:" if label else "")
    except SchemaError as e:
        print_error(f"schema error: {e}")
        return EXIT_ERROR
    except (TypeError, yaml.YAMLError) as e:
        # values outside the JSON model (sets, bad merge keys)
        print_error(f"cannot load input: {e}")
        return EXIT_ERROR

    if args.out:
        _write_document(Path(args.out), subjects[0][1], args.yaml_nodes)

    duration_ms = (time.time() - start) * 1000
    if args.report:
        write_json(Path(args.report), report_payload(
            errors, schema=str(args.schema), data=str(args.data),
            subjects=len(subjects), defaults_applied=applied,
        ))

    if errors:
        print_failure(f"{args.data}: {len(errors)} violation(s) in {len(subjects)} subject(s)")
        if not args.verbose:
            for entry in errors[:20]:
                console.print(Text(f"  - {entry['pointerToViolation']} [{entry['keyword']}] {entry['message']}", style="red"))
            if len(errors) > 20:
                console.print(Text(f"  … {len(errors) - 20} more (use --report for all)", style="yellow"))
        return EXIT_INVALID

    print_success(f"{args.data}: valid ({len(subjects)} subject(s))", duration_ms)
    if applied:
        log().info(f"{applied} default value(s) injected")
    return EXIT_OK

def _load_subjects(path: Path, jsonl: bool, nodes: bool) -> List[Tuple[Any, Any]]:
    if jsonl:
        return [(lineno, value) for lineno, value in read_jsonl(path)]
    return [(None, load_document(path, nodes=nodes))]

def _write_document(path: Path, document: Any, nodes: bool) -> None:
    if nodes:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(yaml.serialize(document, Dumper=yaml.SafeDumper), encoding="utf-8")
    else:
        write_json(path, document)

if __name__ == "__main__":
    main()
