from __future__ import annotations
import json
from pathlib import Path
from typing import Any, Dict, Iterator, Tuple
import yaml

_YAML_SUFFIXES = {".yml", ".yaml"}

class JsonSafeLoader(yaml.SafeLoader):
    """SafeLoader that keeps timestamps and binary scalars as their source text."""

def _construct_raw(loader: yaml.SafeLoader, node: yaml.ScalarNode) -> str:
    return loader.construct_scalar(node)

for _tag in ("tag:yaml.org,2002:timestamp", "tag:yaml.org,2002:binary"):
    JsonSafeLoader.add_constructor(_tag, _construct_raw)

def read_json(p: Path) -> Any:
    return json.loads(Path(p).read_text(encoding="utf-8"))

def write_json(p: Path, obj: Any) -> None:
    p = Path(p)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(obj, ensure_ascii=False, indent=2), encoding="utf-8")

def read_jsonl(p: Path) -> Iterator[Tuple[int, Any]]:
    """Yield (lineno, value) for each JSONL line; blank lines and // comments are skipped."""
    for i, raw in enumerate(Path(p).read_text(encoding="utf-8").splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("//"):
            continue
        try:
            yield i, json.loads(line)
        except json.JSONDecodeError as e:
            raise ValueError(f"{p}:{i}: invalid JSON: {e}") from e

def read_yaml(p: Path) -> Any:
    """Plain JSON-compatible values; scalars outside JSON (dates, binary) stay strings."""
    return yaml.load(Path(p).read_text(encoding="utf-8"), Loader=JsonSafeLoader)

def compose_yaml(p: Path) -> yaml.Node:
    """Read a YAML file as a representation graph (nodes keep their source marks)."""
    return yaml.compose(Path(p).read_text(encoding="utf-8"), Loader=yaml.SafeLoader)

def load_document(p: Path, nodes: bool = False) -> Any:
    """Load JSON or YAML by suffix. ``nodes`` keeps YAML documents as node graphs."""
    p = Path(p)
    if p.suffix.lower() in _YAML_SUFFIXES:
        return compose_yaml(p) if nodes else read_yaml(p)
    if nodes:
        # JSON is a YAML subset, so the node graph is available for .json too
        return compose_yaml(p)
    return read_json(p)

def report_payload(errors: list, **extra: Any) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "ok": len(errors) == 0,
        "error_count": len(errors),
        "errors": errors,
    }
    out.update(extra)
    return out
