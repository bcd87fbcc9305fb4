"""Position-aware JSON parser.

Splicing a value into a document needs the exact text range of every node,
which Python's ``json`` module does not expose. This parser:

1) Parses JSON into Python objects (dict/list/scalars)
2) Records a span (start_index, end_index) for every node, keyed by its Path
3) Records, for object members, the span of the whole ``"key": value`` pair

Paths are tuples of object keys (str) and array indices (int); the root is
``()``.

Limitations / notes:
- Strict JSON only (no comments, trailing commas, NaN, etc.).
- Spans are Python string indices (codepoints). ``TextIndex`` converts them to
  line / UTF-16 character positions for editors.
"""

from __future__ import annotations

from typing import Any, Dict, List, Tuple, Union

from jsonsplice.tools.errors import DocumentParseError


Segment = Union[str, int]
Path = Tuple[Segment, ...]
Span = Tuple[int, int]
PathSpans = Dict[Path, Span]

_WS = " \t\r\n"


class _Parser:
    def __init__(self, text: str) -> None:
        self.text = text
        self.n = len(text)
        self.i = 0
        self.spans: PathSpans = {}
        # Keyed by the member's value path; covers '"key": value'.
        self.pair_spans: PathSpans = {}

    def _peek(self) -> str:
        return self.text[self.i] if self.i < self.n else ""

    def _consume(self, ch: str) -> None:
        if self._peek() != ch:
            raise DocumentParseError(f"Expected {ch!r}", self.i)
        self.i += 1

    def _skip_ws(self) -> None:
        while self.i < self.n and self.text[self.i] in _WS:
            self.i += 1

    def parse(self) -> Any:
        self._skip_ws()
        val = self._parse_value(())
        self._skip_ws()
        if self.i != self.n:
            raise DocumentParseError("Trailing characters", self.i)
        return val

    def _parse_value(self, path: Path) -> Any:
        self._skip_ws()
        start = self.i
        ch = self._peek()
        if ch == "{":
            return self._parse_object(path, start)
        if ch == "[":
            return self._parse_array(path, start)
        if ch == '"':
            val: Any = self._parse_string()
        elif ch and ch in "-0123456789":
            val = self._parse_number()
        elif self.text.startswith("true", self.i):
            self.i += 4
            val = True
        elif self.text.startswith("false", self.i):
            self.i += 5
            val = False
        elif self.text.startswith("null", self.i):
            self.i += 4
            val = None
        else:
            raise DocumentParseError("Invalid value", self.i)
        self.spans[path] = (start, self.i)
        return val

    def _parse_object(self, path: Path, start: int) -> Dict[str, Any]:
        self._consume("{")
        obj: Dict[str, Any] = {}
        self._skip_ws()
        if self._peek() == "}":
            self.i += 1
            self.spans[path] = (start, self.i)
            return obj

        while True:
            self._skip_ws()
            if self._peek() != '"':
                raise DocumentParseError("Expected string key", self.i)
            key_start = self.i
            key = self._parse_string()
            self._skip_ws()
            self._consume(":")
            child = path + (key,)
            obj[key] = self._parse_value(child)
            self.pair_spans[child] = (key_start, self.spans[child][1])
            self._skip_ws()
            if self._peek() == "}":
                self.i += 1
                break
            self._consume(",")

        self.spans[path] = (start, self.i)
        return obj

    def _parse_array(self, path: Path, start: int) -> List[Any]:
        self._consume("[")
        arr: List[Any] = []
        self._skip_ws()
        if self._peek() == "]":
            self.i += 1
            self.spans[path] = (start, self.i)
            return arr

        while True:
            arr.append(self._parse_value(path + (len(arr),)))
            self._skip_ws()
            if self._peek() == "]":
                self.i += 1
                break
            self._consume(",")

        self.spans[path] = (start, self.i)
        return arr

    def _parse_string(self) -> str:
        self._consume('"')
        out_chars: List[str] = []
        while True:
            if self.i >= self.n:
                raise DocumentParseError("Unterminated string", self.i)
            ch = self.text[self.i]
            self.i += 1
            if ch == '"':
                break
            if ch == "\\":
                if self.i >= self.n:
                    raise DocumentParseError("Unterminated escape", self.i)
                esc = self.text[self.i]
                self.i += 1
                if esc in '"\\/':
                    out_chars.append(esc)
                elif esc == "b":
                    out_chars.append("\b")
                elif esc == "f":
                    out_chars.append("\f")
                elif esc == "n":
                    out_chars.append("\n")
                elif esc == "r":
                    out_chars.append("\r")
                elif esc == "t":
                    out_chars.append("\t")
                elif esc == "u":
                    code = self._hex4()
                    # Join surrogate pairs the way json.loads does.
                    if 0xD800 <= code <= 0xDBFF and self.text.startswith("\\u", self.i):
                        save = self.i
                        self.i += 2
                        low = self._hex4()
                        if 0xDC00 <= low <= 0xDFFF:
                            code = 0x10000 + ((code - 0xD800) << 10) + (low - 0xDC00)
                        else:
                            self.i = save
                    out_chars.append(chr(code))
                else:
                    raise DocumentParseError("Invalid escape", self.i)
            elif ch < " ":
                raise DocumentParseError("Control character in string", self.i - 1)
            else:
                out_chars.append(ch)
        return "".join(out_chars)

    def _hex4(self) -> int:
        hexs = self.text[self.i : self.i + 4]
        if len(hexs) != 4 or any(c not in "0123456789abcdefABCDEF" for c in hexs):
            raise DocumentParseError("Invalid unicode escape", self.i)
        self.i += 4
        return int(hexs, 16)

    def _at_digit(self) -> bool:
        ch = self._peek()
        return ch != "" and ch in "0123456789"

    def _digits(self) -> None:
        if not self._at_digit():
            raise DocumentParseError("Invalid number", self.i)
        while self._at_digit():
            self.i += 1

    def _parse_number(self) -> Any:
        start = self.i
        if self._peek() == "-":
            self.i += 1
        if self._peek() == "0":
            self.i += 1
        else:
            self._digits()
        if self._peek() == ".":
            self.i += 1
            self._digits()
        if self._peek() and self._peek() in "eE":
            self.i += 1
            if self._peek() and self._peek() in "+-":
                self.i += 1
            self._digits()
        raw = self.text[start : self.i]
        if any(c in raw for c in ".eE"):
            return float(raw)
        try:
            return int(raw)
        except ValueError:
            # Past int()'s digit limit. The value only steers path lookup.
            return float(raw)


def parse_with_positions(text: str) -> Tuple[Any, PathSpans, PathSpans]:
    """Parse JSON and return:

    - value: parsed Python value
    - spans: path -> node span (value span)
    - pair_spans: path -> member span for object members (key through value)
    """
    if not isinstance(text, str):
        raise DocumentParseError(f"Document must be text, got {type(text).__name__}", 0)
    p = _Parser(text)
    try:
        value = p.parse()
    except RecursionError:
        raise DocumentParseError("Document nested too deeply", p.i)
    return value, p.spans, p.pair_spans


class TextIndex:
    """Converts absolute string offsets to (line, utf16-character) positions.

    - ``line`` is 0-based
    - ``character`` is measured in UTF-16 code units, as editors expect
    """

    def __init__(self, text: str) -> None:
        self.text = text
        self.starts: List[int] = [0]
        for i, ch in enumerate(text):
            if ch == "\n":
                self.starts.append(i + 1)

    def _find_line(self, index: int) -> int:
        lo, hi = 0, len(self.starts)
        while lo + 1 < hi:
            mid = (lo + hi) // 2
            if self.starts[mid] <= index:
                lo = mid
            else:
                hi = mid
        return lo

    def position(self, index: int) -> Dict[str, int]:
        index = max(0, min(index, len(self.text)))
        line = self._find_line(index)
        prefix = self.text[self.starts[line] : index]
        return {"line": line, "character": len(prefix.encode("utf-16-le")) // 2}

    def range(self, span: Span) -> Dict[str, Any]:
        start, end = span
        return {"start": self.position(start), "end": self.position(end)}
