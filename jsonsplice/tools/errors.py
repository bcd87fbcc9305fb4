"""Error types raised inside the splice engine.

None of these cross ``jsonsplice.engine.apply_edit``: the engine catches every
``SpliceError`` and returns the input document unchanged. They are surfaced
only through ``EditResult.error`` or a strict ``SpliceEngine``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Tuple


@dataclass(eq=False)
class SpliceError(Exception):
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(eq=False)
class DocumentParseError(SpliceError):
    """The document text is not strict JSON."""

    index: int = 0

    def __str__(self) -> str:
        return f"{self.message} at index {self.index}"


@dataclass(eq=False)
class AddressError(SpliceError):
    """A path cannot be resolved against the document structure."""

    path: Tuple[Any, ...] = ()


@dataclass(eq=False)
class ValueParseError(SpliceError):
    """Raw value text is not a JSON literal. Absorbed by coercion."""


@dataclass(eq=False)
class PatchBoundsError(SpliceError):
    offset: int = 0
    length: int = 0


class PatchOverlapError(PatchBoundsError):
    pass
