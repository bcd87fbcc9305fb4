"""Raw value coercion and serialization.

Edited values arrive as text typed by a user. The text is first read as a
JSON literal; anything that does not parse is taken as a plain string:

    "true"      -> True
    "123"       -> 123
    '{"a": 1}'  -> {"a": 1}
    "hello"     -> "hello"

The same policy applies to root replacement and to path edits.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, List, Optional

from jsonsplice.tools.errors import ValueParseError


@dataclass(frozen=True)
class FormattingOptions:
    tab_size: int = 2
    insert_spaces: bool = True

    def __post_init__(self) -> None:
        if isinstance(self.tab_size, bool) or not isinstance(self.tab_size, int) or self.tab_size < 1:
            raise ValueError("tab_size must be a positive integer")

    @property
    def unit(self) -> str:
        """One level of indentation."""
        return " " * self.tab_size if self.insert_spaces else "\t"


DEFAULT_FORMATTING = FormattingOptions()


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def _finite_float(text: str) -> float:
    value = float(text)
    if value in (float("inf"), float("-inf")):
        raise ValueError(f"{text} overflows a float")
    return value


class RawJson(str):
    """Valid JSON text written out verbatim.

    Used for literals holding integers too long for ``int()``, which
    ``json.dumps`` could not re-serialize.
    """


def parse_literal(raw: Optional[str]) -> Any:
    """Parse ``raw`` as a JSON literal. ``None`` reads as ``null``."""
    if raw is None:
        return None
    too_long: List[str] = []

    def parse_int(text: str) -> int:
        try:
            return int(text)
        except ValueError:
            too_long.append(text)
            return 0

    try:
        value = json.loads(raw, parse_constant=_reject_constant, parse_float=_finite_float, parse_int=parse_int)
    except (ValueError, RecursionError) as e:
        raise ValueParseError(str(e)) from e
    if too_long:
        return RawJson(raw.strip(" \t\r\n"))
    return value


def coerce_value(raw: Any) -> Any:
    if raw is not None and not isinstance(raw, str):
        raw = str(raw)
    try:
        return parse_literal(raw)
    except ValueParseError:
        return raw


def dump_value(value: Any, options: FormattingOptions = DEFAULT_FORMATTING, *, multiline: bool = True) -> str:
    if isinstance(value, RawJson):
        return str(value)
    if multiline:
        return json.dumps(value, ensure_ascii=False, indent=options.unit)
    return json.dumps(value, ensure_ascii=False)
