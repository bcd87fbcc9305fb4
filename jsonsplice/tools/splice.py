"""Apply text edits to a document string.

Every EditDescriptor is expressed against the *original* text. Edits are
applied highest offset first, so applying one never shifts the position of
an edit still waiting to be applied.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence

from jsonsplice.tools.errors import PatchBoundsError, PatchOverlapError
from jsonsplice.tools.jsonpos import TextIndex


@dataclass(frozen=True)
class EditDescriptor:
    offset: int
    length: int
    content: str

    @property
    def end(self) -> int:
        return self.offset + self.length

    def to_dict(self, index: Optional[TextIndex] = None) -> Dict[str, Any]:
        out: Dict[str, Any] = {"offset": self.offset, "length": self.length, "content": self.content}
        if index is not None:
            out["range"] = index.range((self.offset, self.end))
        return out


def check_edits(text: str, edits: Sequence[EditDescriptor]) -> None:
    """Raise PatchBoundsError / PatchOverlapError if ``edits`` cannot be applied to ``text``."""
    n = len(text)
    for e in edits:
        if e.offset < 0 or e.length < 0 or e.end > n:
            raise PatchBoundsError(
                f"Edit [{e.offset}, {e.end}) outside text of length {n}", e.offset, e.length
            )

    ordered = sorted(edits, key=lambda e: (e.offset, e.end))
    for a, b in zip(ordered, ordered[1:]):
        # Two inserts at one offset are fine; a span may not cut into another.
        if b.offset < a.end:
            raise PatchOverlapError(f"Edits [{a.offset}, {a.end}) and [{b.offset}, {b.end}) overlap", b.offset, b.length)


def apply_edits(text: str, edits: Iterable[EditDescriptor]) -> str:
    """Splice ``edits`` into ``text`` and return the new text.

    The result does not depend on the order of ``edits``, except that inserts
    sharing an offset keep their relative order. An insert sharing its offset
    with a replacement lands before the replaced text.
    """
    edits = list(edits)
    check_edits(text, edits)

    out = text
    indexed = sorted(enumerate(edits), key=lambda p: (p[1].offset, p[1].length, p[0]), reverse=True)
    for _, e in indexed:
        out = out[: e.offset] + e.content + out[e.end :]
    return out


def describe_edits(text: str, edits: Iterable[EditDescriptor]) -> List[Dict[str, Any]]:
    """Edits as dicts with line/character ranges, for editor clients."""
    index = TextIndex(text)
    return [e.to_dict(index) for e in edits]
