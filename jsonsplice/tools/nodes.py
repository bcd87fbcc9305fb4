"""Edit text for a node of an upstream tree view.

A tree model shows each JSON node as rows: one row per scalar member of an
object (``key`` set), or a single row without a key for a scalar node. Rows
for nested arrays/objects only link to child nodes and carry no value.

``normalize_node_rows`` turns those rows into the text a user edits and that
is later handed to ``apply_edit`` as the raw value.

CLI:
  jsonsplice node rows.json     # rows as a JSON array of {"key", "value", "type"}
  jsonsplice node -             # read rows from stdin
"""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

CONTAINER_TYPES = ("array", "object")


@dataclass(frozen=True)
class NodeRow:
    key: Optional[str]
    value: Any
    type: str = "string"


def _field(row: Any, name: str) -> Any:
    if isinstance(row, dict):
        return row.get(name)
    return getattr(row, name, None)


def scalar_text(value: Any) -> str:
    """Render a scalar the way it reads in a text field (strings unquoted)."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def normalize_node_rows(rows: Optional[Iterable[Any]]) -> str:
    rows = list(rows or [])
    if not rows:
        return "{}"
    if len(rows) == 1 and not _field(rows[0], "key"):
        return scalar_text(_field(rows[0], "value"))

    obj: Dict[str, Any] = {}
    for row in rows:
        if _field(row, "type") in CONTAINER_TYPES:
            continue
        key = _field(row, "key")
        if key:
            obj[key] = _field(row, "value")
    return json.dumps(obj, indent=2, ensure_ascii=False)


def main(argv: List[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="jsonsplice node")
    ap.add_argument("rows", help="JSON file holding the node's rows ('-' for stdin)")
    args = ap.parse_args(argv)

    try:
        text = sys.stdin.read() if args.rows == "-" else Path(args.rows).read_text(encoding="utf-8")
        rows = json.loads(text)
    except (OSError, ValueError) as e:
        print(f"Failed to read/parse rows: {e}", file=sys.stderr)
        return 3

    if rows is not None and not (isinstance(rows, list) and all(isinstance(r, dict) for r in rows)):
        print("rows must be a JSON array of objects", file=sys.stderr)
        return 2

    sys.stdout.write(normalize_node_rows(rows) + "\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
