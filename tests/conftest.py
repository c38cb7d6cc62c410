"""Pytest configuration and fixtures for sieve tests"""
import json
import subprocess
import sys
from pathlib import Path
import pytest

from sieve import Validator, ValidatorConfig, load_schema

ROOT = Path(__file__).resolve().parents[1]

@pytest.fixture
def validator():
    return Validator()

@pytest.fixture
def run():
    """Validate ``subject`` against a schema document and return the result"""
    def _run(schema_doc, subject, **config):
        v = Validator(ValidatorConfig(**config)) if config else Validator()
        return v.validate(load_schema(schema_doc), subject)
    return _run

@pytest.fixture
def write(tmp_path):
    """Write a JSON/JSONL/text file under tmp_path and return its path"""
    def _write(name, obj):
        p = tmp_path / name
        p.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(obj, str):
            p.write_text(obj, encoding="utf-8")
        else:
            p.write_text(json.dumps(obj, ensure_ascii=False, indent=2), encoding="utf-8")
        return p
    return _write

@pytest.fixture
def cli():
    """Run ``python -m sieve`` from the repository root"""
    def _cli(*args, env=None):
        proc = subprocess.run(
            [sys.executable, "-m", "sieve", *map(str, args)],
            capture_output=True, text=True, cwd=str(ROOT), env=env,
        )
        return proc.returncode, proc.stdout, proc.stderr
    return _cli
