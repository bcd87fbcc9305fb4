#!/usr/bin/env python3
"""jsonsplice unified CLI.

Argument parsing is delegated to the individual tool modules, so each tool is
usable both as:
- `jsonsplice <tool> ...`
- `python -m jsonsplice.tools.<tool> ...`

Commands:
- edit      Replace or insert the value at a path, keeping the file's formatting
- path      Render a path as $["a"][0] or as a JSON pointer
- node      Print the edit text for a tree node's rows
- version   Show current version

Example:
  jsonsplice edit package.json --path '["version"]' --value '"2.0.0"' --in-place
"""

from __future__ import annotations

import sys
from importlib.metadata import PackageNotFoundError, version
from typing import List, Optional

from jsonsplice.tools import edit, nodes, pointer


def _help() -> str:
    return (
        "jsonsplice CLI\n\n"
        "Usage:\n"
        "  jsonsplice <command> [args...]\n\n"
        "Commands:\n"
        "  edit          Edit the value at a path, preserving formatting\n"
        "  path          Render a path for display or as a JSON pointer\n"
        "  node          Print the edit text for a tree node's rows\n"
        "  version       Show current version\n"
    )


def _version() -> str:
    try:
        return version("jsonsplice")
    except PackageNotFoundError:
        return "unknown"


def main(argv: Optional[List[str]] = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    if not argv or argv[0] in {"-h", "--help", "help"}:
        sys.stdout.write(_help())
        return 0

    cmd, rest = argv[0], argv[1:]
    if cmd in {"version", "--version", "-V"}:
        print(_version())
        return 0
    if cmd == "edit":
        return edit.main(rest)
    if cmd == "path":
        return pointer.main(rest)
    if cmd == "node":
        return nodes.main(rest)

    sys.stderr.write(f"Unknown command: {cmd}\n\n")
    sys.stderr.write(_help())
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
