"""Path helpers: validation, JSON Pointer conversion and display rendering.

A Path is a sequence of object keys (str) and array indices (non-negative
int). The engine normalizes every Path to a tuple before use.

CLI:
  jsonsplice path '["customer", 0, "name"]'        -> $["customer"][0]["name"]
  jsonsplice path --from-pointer /customer/0/name
  jsonsplice path '["a", "b/c"]' --format pointer  -> /a/b~1c
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Iterable, List, Optional, Tuple, Union

from jsonsplice.tools.errors import AddressError

Segment = Union[str, int]
Path = Tuple[Segment, ...]


def normalize_path(path: Optional[Iterable[Any]]) -> Path:
    """Return ``path`` as a tuple, rejecting segments that are not keys or indices."""
    if path is None:
        return ()
    if isinstance(path, (str, bytes)):
        raise AddressError(f"Path must be a sequence of segments, got {type(path).__name__}", ())
    segs = tuple(path)
    for seg in segs:
        if isinstance(seg, bool) or not isinstance(seg, (str, int)):
            raise AddressError(f"Invalid path segment {seg!r}", segs)
        if isinstance(seg, int) and seg < 0:
            raise AddressError(f"Negative array index {seg}", segs)
    return segs


def escape_segment(seg: str) -> str:
    return seg.replace("~", "~0").replace("/", "~1")


def unescape_segment(seg: str) -> str:
    return seg.replace("~1", "/").replace("~0", "~")


def split_pointer(pointer: str) -> List[str]:
    if pointer == "":
        return []
    if not pointer.startswith("/"):
        raise AddressError(f"Invalid JSON pointer (must start with '/'): {pointer}", ())
    return [unescape_segment(p) for p in pointer[1:].split("/")]


def path_to_pointer(path: Iterable[Segment]) -> str:
    segs = normalize_path(path)
    return "".join("/" + escape_segment(str(s)) for s in segs)


def path_from_pointer(pointer: str, doc: Any = None) -> Path:
    """Convert an RFC 6901 pointer to a Path.

    With ``doc``, a numeric token becomes an index only where the container at
    that position is an array. Without it, every all-digit token is an index.
    """
    out: List[Segment] = []
    cur: Any = doc
    for raw in split_pointer(pointer):
        is_index = raw.isdigit() and raw.isascii() and (raw == "0" or not raw.startswith("0"))
        if doc is None:
            seg: Segment = int(raw) if is_index else raw
        elif isinstance(cur, list) and is_index:
            seg = int(raw)
        else:
            seg = raw
        out.append(seg)
        if doc is not None:
            cur = _step(cur, seg)
    return tuple(out)


def _step(cur: Any, seg: Segment) -> Any:
    if isinstance(cur, dict) and isinstance(seg, str):
        return cur.get(seg)
    if isinstance(cur, list) and isinstance(seg, int) and seg < len(cur):
        return cur[seg]
    return None


def path_to_string(path: Optional[Iterable[Segment]]) -> str:
    """Render a Path for display: ``$["customer"][0]["name"]``; ``$`` for the root."""
    segs = tuple(path or ())
    if not segs:
        return "$"
    parts = [str(s) if isinstance(s, int) and not isinstance(s, bool) else json.dumps(str(s), ensure_ascii=False) for s in segs]
    return "$[" + "][".join(parts) + "]"


def main(argv: List[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="jsonsplice path")
    ap.add_argument("path", help="Path as a JSON array, or a JSON pointer with --from-pointer")
    ap.add_argument("--from-pointer", action="store_true", help="Interpret the argument as an RFC 6901 pointer")
    ap.add_argument("--format", choices=["display", "pointer"], default="display")
    args = ap.parse_args(argv)

    try:
        if args.from_pointer:
            path = path_from_pointer(args.path)
        else:
            raw = json.loads(args.path)
            if not isinstance(raw, list):
                print("path must be a JSON array", file=sys.stderr)
                return 2
            path = normalize_path(raw)
    except ValueError as e:
        print(f"Failed to parse path: {e}", file=sys.stderr)
        return 2
    except AddressError as e:
        print(f"path error: {e}", file=sys.stderr)
        return 2

    if args.format == "pointer":
        print(path_to_pointer(path))
    else:
        print(path_to_string(path))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
