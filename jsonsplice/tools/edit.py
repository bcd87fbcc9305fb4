"""Edit one value of a JSON file by path, preserving its formatting.

CLI:
  jsonsplice edit doc.json --path '["customer", 0, "name"]' --value Ada
  jsonsplice edit doc.json --pointer /customer/0/age --value 42 --in-place
  jsonsplice edit doc.json --request edit.json [--json-edits]

Every request (from flags or from --request) is validated against the
bundled edit request schema before the document is touched.

Exit codes:
  0 OK (in non-strict mode also when the edit fell back to the original)
  2 invalid request, or edit failure with --strict
  3 IO/JSON read error
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import jsonschema

from jsonsplice.engine import SpliceEngine
from jsonsplice.tools.errors import SpliceError
from jsonsplice.tools.pointer import Path as JsonPath
from jsonsplice.tools.pointer import normalize_path, path_from_pointer, path_to_pointer, path_to_string
from jsonsplice.tools.splice import describe_edits

log = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parent.parent / "schema" / "edit_request.schema.json"


def load_schema_text() -> str:
    # Namespace package: no importlib.resources reader on 3.10/3.11.
    return SCHEMA_PATH.read_text(encoding="utf-8")


def load_schema() -> Dict[str, Any]:
    return json.loads(load_schema_text())


def validate_request(request: Any, schema: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
    validator = jsonschema.Draft202012Validator(schema if schema is not None else load_schema())
    errors: List[Dict[str, Any]] = []
    for err in validator.iter_errors(request):
        errors.append(
            {
                "pointer": path_to_pointer(list(err.absolute_path)),
                "message": err.message,
                "validator": err.validator,
            }
        )
    errors.sort(key=lambda e: (e["pointer"], e["message"]))
    return errors


def request_path(request: Dict[str, Any], document_text: str) -> JsonPath:
    """Turn a validated request into a Path.

    Pointer tokens are matched against the document so that ``/items/0``
    indexes an array but ``/map/0`` looks up the key ``"0"``.
    """
    if "pointer" in request:
        try:
            doc = json.loads(document_text)
        except ValueError:
            doc = None
        return path_from_pointer(request["pointer"], doc)
    # Draft 2020-12 counts 1.0 as an integer.
    segs = [int(s) if isinstance(s, float) else s for s in request["path"]]
    return normalize_path(segs)


def build_request(args: argparse.Namespace) -> Any:
    if args.request:
        return json.loads(Path(args.request).read_text(encoding="utf-8"))
    request: Dict[str, Any] = {}
    if args.json_path is not None:
        request["path"] = json.loads(args.json_path)
    if args.pointer is not None:
        request["pointer"] = args.pointer
    if args.value is not None:
        request["value"] = args.value
    return request


def main(argv: List[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="jsonsplice edit")
    ap.add_argument("file", help="Path to the JSON document")
    target = ap.add_mutually_exclusive_group(required=True)
    target.add_argument("--path", dest="json_path", help='Path as a JSON array, e.g. \'["a", 0]\' ([] for the root)')
    target.add_argument("--pointer", help="Path as an RFC 6901 JSON pointer")
    target.add_argument("--request", help="Read path and value from a JSON request file")
    ap.add_argument("--value", help="Raw text of the new value (JSON literal or plain string)")
    ap.add_argument("--in-place", action="store_true", help="Overwrite the input file")
    ap.add_argument("--out", help="Write the edited document to this file")
    ap.add_argument("--strict", action="store_true", help="Fail with exit 2 instead of leaving the document unchanged")
    ap.add_argument("--json-edits", action="store_true", help="Print the computed text edits as JSON instead of the document")
    ap.add_argument("--tab-size", type=int, default=2, help="Indent width for inserted multi-line values")
    ap.add_argument("--use-tabs", action="store_true", help="Indent inserted values with tabs")
    ap.add_argument("--verbose", action="store_true", help="Log engine decisions to stderr")
    args = ap.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)

    file_path = Path(args.file)
    try:
        document_text = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        print(f"Failed to read document: {e}", file=sys.stderr)
        return 3

    try:
        request = build_request(args)
    except (OSError, ValueError) as e:
        print(f"Failed to read/parse request: {e}", file=sys.stderr)
        return 3

    errors = validate_request(request)
    if errors:
        for e in errors:
            print(f"{e['pointer'] or '/'}: {e['message']}", file=sys.stderr)
        return 2

    try:
        engine = SpliceEngine(tab_size=args.tab_size, insert_spaces=not args.use_tabs)
        path = request_path(request, document_text)
    except (ValueError, SpliceError) as e:
        print(f"edit error: {e}", file=sys.stderr)
        return 2

    result = engine.edit(document_text, path, request["value"])
    if not result.ok:
        if args.strict:
            print(f"edit error at {path_to_string(path)}: {result.error}", file=sys.stderr)
            return 2
        log.info("document left unchanged: %s", result.error)

    if args.json_edits:
        sys.stdout.write(json.dumps(describe_edits(document_text, result.edits), indent=2, ensure_ascii=False) + "\n")
        return 0

    updated = result.text
    if document_text.endswith("\n") and not updated.endswith("\n"):
        updated += "\n"

    if args.in_place:
        file_path.write_text(updated, encoding="utf-8")
        return 0

    if args.out:
        Path(args.out).write_text(updated, encoding="utf-8")
        return 0

    sys.stdout.write(updated)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
