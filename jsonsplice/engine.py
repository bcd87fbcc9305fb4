"""Path-addressed editing of JSON text.

Typical usage:

    from jsonsplice.engine import apply_edit

    text = apply_edit('{"a": 1, "b": 2}', ["a"], "42")
    # '{"a": 42, "b": 2}'

``apply_edit`` never raises: if the path cannot be resolved, the document is
not JSON, or the edits do not fit the text, the document comes back
unchanged. Callers that need to tell a failed edit from a no-op use
``edit()``, which returns an ``EditResult``, or a strict ``SpliceEngine``,
whose ``apply()`` raises the underlying ``SpliceError``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Tuple

from jsonsplice.tools import jsonpos
from jsonsplice.tools.coerce import FormattingOptions, coerce_value, dump_value
from jsonsplice.tools.errors import SpliceError
from jsonsplice.tools.locate import resolve_edits
from jsonsplice.tools.pointer import normalize_path
from jsonsplice.tools.splice import EditDescriptor, apply_edits

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class EditResult:
    text: str
    changed: bool
    edits: Tuple[EditDescriptor, ...] = ()
    error: Optional[SpliceError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class SpliceEngine:
    def __init__(self, *, strict: bool = False, tab_size: int = 2, insert_spaces: bool = True):
        self.strict = strict
        self.options = FormattingOptions(tab_size=tab_size, insert_spaces=insert_spaces)

    def compute_edits(self, document_text: str, path: Optional[Iterable[Any]], new_value_raw: Optional[str]) -> List[EditDescriptor]:
        segs = normalize_path(path)
        value = coerce_value(new_value_raw)
        if not segs:
            # Root replacement: the old text only has to be JSON.
            jsonpos.parse_with_positions(document_text)
            return [EditDescriptor(0, len(document_text), dump_value(value, self.options))]
        return resolve_edits(document_text, segs, value, self.options)

    def edit(self, document_text: str, path: Optional[Iterable[Any]], new_value_raw: Optional[str]) -> EditResult:
        try:
            edits = self.compute_edits(document_text, path, new_value_raw)
            text = apply_edits(document_text, edits)
        except SpliceError as e:
            log.debug("edit at %r left document unchanged: %s", path, e)
            return EditResult(text=document_text, changed=False, error=e)
        except Exception as e:
            log.debug("edit at %r failed unexpectedly", path, exc_info=True)
            err = SpliceError(f"Unexpected {type(e).__name__}: {e}")
            return EditResult(text=document_text, changed=False, error=err)
        return EditResult(text=text, changed=text != document_text, edits=tuple(edits))

    def apply(self, document_text: str, path: Optional[Iterable[Any]], new_value_raw: Optional[str]) -> str:
        result = self.edit(document_text, path, new_value_raw)
        if result.error is not None and self.strict:
            raise result.error
        return result.text


_default = SpliceEngine()


def edit(document_text: str, path: Optional[Iterable[Any]], new_value_raw: Optional[str]) -> EditResult:
    return _default.edit(document_text, path, new_value_raw)


def apply_edit(document_text: str, path: Optional[Iterable[Any]], new_value_raw: Optional[str]) -> str:
    return _default.apply(document_text, path, new_value_raw)
