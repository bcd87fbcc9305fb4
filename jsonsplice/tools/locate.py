"""Resolve a Path against document text into text edits.

Given the document text, a non-empty Path and the new value, produce the
EditDescriptors that place the value at that path:

- the node exists: one edit replacing the node's token span
- a key missing from its parent object: one insert after the last member
  (or between the braces of an empty object)
- an index at or past the end of its parent array: one insert after the last
  element (or inside the empty array)

Formatting follows the surrounding text. Inside a container that spans
several lines, values are dumped with indentation and re-indented to the
target line; inside a one-line container they are dumped on one line.

Anything else (missing intermediate node, indexing a scalar, a key into an
array, an index into an object) raises AddressError.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Optional

from jsonsplice.tools import jsonpos
from jsonsplice.tools.coerce import DEFAULT_FORMATTING, FormattingOptions, dump_value
from jsonsplice.tools.errors import AddressError
from jsonsplice.tools.jsonpos import Path, Span
from jsonsplice.tools.pointer import Segment, normalize_path, path_to_string
from jsonsplice.tools.splice import EditDescriptor


def _line_prefix(text: str, index: int) -> str:
    """Return the whitespace prefix of the line containing *index*."""
    ls = text.rfind("\n", 0, index) + 1
    prefix = text[ls:index]
    i = 0
    while i < len(prefix) and prefix[i] in " \t":
        i += 1
    return prefix[:i]


def _starts_line(text: str, index: int) -> bool:
    ls = text.rfind("\n", 0, index) + 1
    return text[ls:index].strip(" \t") == ""


def _indent_after_first_line(s: str, indent: str, eol: str = "\n") -> str:
    """Indent all lines *after* the first by `indent`, joining them with `eol`."""
    if "\n" not in s:
        return s
    lines = s.split("\n")
    return lines[0] + eol + eol.join(indent + ln for ln in lines[1:])


def _detect_eol(text: str) -> str:
    nl = text.find("\n")
    if nl > 0 and text[nl - 1] == "\r":
        return "\r\n"
    return "\n"


def _is_multiline(text: str, span: Span) -> bool:
    return "\n" in text[span[0] : span[1]]


def _describe(node: Any) -> str:
    if isinstance(node, dict):
        return "object"
    if isinstance(node, list):
        return "array"
    return "scalar"


def _walk(root: Any, path: Path) -> Any:
    cur = root
    for depth, seg in enumerate(path):
        where = path_to_string(path[:depth])
        if isinstance(cur, dict):
            if not isinstance(seg, str):
                raise AddressError(f"Cannot index object at {where} with {seg!r}", path)
            if seg not in cur:
                raise AddressError(f"Missing key {seg!r} at {where}", path)
            cur = cur[seg]
        elif isinstance(cur, list):
            if not isinstance(seg, int):
                raise AddressError(f"Cannot look up key {seg!r} in array at {where}", path)
            if seg >= len(cur):
                raise AddressError(f"Index {seg} out of range at {where}", path)
            cur = cur[seg]
        else:
            raise AddressError(f"Cannot traverse into {_describe(cur)} at {where}", path)
    return cur


class _Resolver:
    def __init__(self, text: str, options: FormattingOptions) -> None:
        self.text = text
        self.options = options
        self.eol = _detect_eol(text)
        self.value, self.spans, self.pair_spans = jsonpos.parse_with_positions(text)

    def _member_indent(self, container: Span, first_start: int, last_start: int) -> str:
        """Indentation used by a container's members, taken from the last one on its own line."""
        for start in (last_start, first_start):
            if _starts_line(self.text, start):
                return _line_prefix(self.text, start)
        return _line_prefix(self.text, container[0]) + self.options.unit

    def _dump(self, value: Any, multiline: bool, indent: str) -> str:
        dumped = dump_value(value, self.options, multiline=multiline)
        return _indent_after_first_line(dumped, indent, self.eol) if multiline else dumped

    def replace(self, path: Path, parent_path: Path, value: Any) -> List[EditDescriptor]:
        span = self.spans[path]
        multiline = _is_multiline(self.text, self.spans[parent_path])
        content = self._dump(value, multiline, _line_prefix(self.text, span[0]))
        return [EditDescriptor(span[0], span[1] - span[0], content)]

    def _fill_empty(self, container: Span, first_line: str) -> List[EditDescriptor]:
        # Replace whatever whitespace sits between the brackets.
        inner = (container[0] + 1, container[1] - 1)
        if _is_multiline(self.text, container):
            base = _line_prefix(self.text, container[0])
            content = self.eol + first_line + self.eol + base
        else:
            content = first_line
        return [EditDescriptor(inner[0], inner[1] - inner[0], content)]

    def insert_member(self, parent_path: Path, parent: dict, key: str, value: Any) -> List[EditDescriptor]:
        container = self.spans[parent_path]
        multiline = _is_multiline(self.text, container)
        key_json = dump_value(key, self.options, multiline=False)

        if not parent:
            indent = _line_prefix(self.text, container[0]) + self.options.unit
            member = f"{key_json}: {self._dump(value, multiline, indent)}"
            return self._fill_empty(container, indent + member if multiline else member)

        members = [self.pair_spans[parent_path + (k,)] for k in parent]
        first_start = min(s[0] for s in members)
        last_start, last_end = max(members, key=lambda s: s[1])
        if multiline:
            indent = self._member_indent(container, first_start, last_start)
            member = f"{key_json}: {self._dump(value, True, indent)}"
            return [EditDescriptor(last_end, 0, "," + self.eol + indent + member)]
        member = f"{key_json}: {self._dump(value, False, '')}"
        return [EditDescriptor(last_end, 0, ", " + member)]

    def append_element(self, parent_path: Path, parent: list, value: Any) -> List[EditDescriptor]:
        container = self.spans[parent_path]
        multiline = _is_multiline(self.text, container)

        if not parent:
            indent = _line_prefix(self.text, container[0]) + self.options.unit
            item = self._dump(value, multiline, indent)
            return self._fill_empty(container, indent + item if multiline else item)

        first_start = self.spans[parent_path + (0,)][0]
        last_start, last_end = self.spans[parent_path + (len(parent) - 1,)]
        if multiline:
            indent = self._member_indent(container, first_start, last_start)
            return [EditDescriptor(last_end, 0, "," + self.eol + indent + self._dump(value, True, indent))]
        return [EditDescriptor(last_end, 0, ", " + self._dump(value, False, ""))]

    def resolve(self, path: Path, value: Any) -> List[EditDescriptor]:
        parent_path, last = path[:-1], path[-1]
        parent = _walk(self.value, parent_path)

        if isinstance(parent, dict):
            if not isinstance(last, str):
                raise AddressError(f"Cannot index object at {path_to_string(parent_path)} with {last!r}", path)
            if last in parent:
                return self.replace(path, parent_path, value)
            return self.insert_member(parent_path, parent, last, value)

        if isinstance(parent, list):
            if not isinstance(last, int):
                raise AddressError(f"Cannot look up key {last!r} in array at {path_to_string(parent_path)}", path)
            if last < len(parent):
                return self.replace(path, parent_path, value)
            return self.append_element(parent_path, parent, value)

        raise AddressError(f"Cannot traverse into {_describe(parent)} at {path_to_string(parent_path)}", path)


def resolve_edits(
    text: str,
    path: Iterable[Segment],
    value: Any,
    options: Optional[FormattingOptions] = None,
) -> List[EditDescriptor]:
    """Return the edits that place ``value`` at ``path`` in ``text``.

    Raises AddressError for unresolvable paths and DocumentParseError if
    ``text`` is not JSON.
    """
    segs = normalize_path(path)
    if not segs:
        raise AddressError("Empty path addresses the document root", segs)
    return _Resolver(text, options or DEFAULT_FORMATTING).resolve(segs, value)
