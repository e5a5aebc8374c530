"""Line-oriented extraction of exported declarations and their doc comments.

The scanner does not parse source code. It walks the file one line at a time
and relies on a fixed source style: declarations start at column zero, doc
comments sit directly above them, type blocks end at the first empty line and
function headers end at the first line ending with ``{``.
"""

from __future__ import annotations

from enum import Enum
from typing import List

from .models import ExportedUnit, LineSpan, UnitKind

DOC_OPENER = "/**"
DOC_CLOSER = "*/"
TYPE_KEYWORD = "export type"
FUNCTION_KEYWORD = "export function"
FUNCTION_HEADER_END = "{"


class ScanState(Enum):
    """Exclusive scanner states."""

    IDLE = "idle"
    IN_DOC = "in_doc"
    IN_TYPE = "in_type"
    IN_FUNCTION = "in_function"


class _Scanner:
    """Single-pass state machine fed one line at a time."""

    def __init__(self) -> None:
        self.state = ScanState.IDLE
        self.doc_lines: List[str] = []
        self.signature_lines: List[str] = []
        self.start_line = 0
        self.units: List[ExportedUnit] = []

    def feed(self, line_number: int, line: str) -> None:
        if self.state is ScanState.IN_DOC:
            self.doc_lines.append(line)
            if line.endswith(DOC_CLOSER):
                self.state = ScanState.IDLE
        elif self.state is ScanState.IN_TYPE:
            self.signature_lines.append(line)
            if not line:
                self._emit(UnitKind.TYPE, line_number)
        elif self.state is ScanState.IN_FUNCTION:
            self.signature_lines.append(line)
        elif line.startswith(DOC_OPENER):
            self.state = ScanState.IN_DOC
            self.doc_lines.append(line)
        elif line.startswith(TYPE_KEYWORD):
            self._begin(ScanState.IN_TYPE, line_number, line)
        elif line.startswith(FUNCTION_KEYWORD):
            self._begin(ScanState.IN_FUNCTION, line_number, line)

        # Checked after the line is consumed so a one-line header closes immediately.
        if self.state is ScanState.IN_FUNCTION and line.endswith(FUNCTION_HEADER_END):
            self._emit(UnitKind.FUNCTION, line_number)

    def _begin(self, state: ScanState, line_number: int, line: str) -> None:
        self.state = state
        self.start_line = line_number
        self.signature_lines.append(line)

    def _emit(self, kind: UnitKind, line_number: int) -> None:
        self.units.append(
            ExportedUnit(
                kind=kind,
                signature_lines=tuple(self.signature_lines),
                doc_lines=tuple(self.doc_lines),
                span=LineSpan(start=self.start_line, end=line_number),
            )
        )
        self.doc_lines = []
        self.signature_lines = []
        self.state = ScanState.IDLE


def extract(text: str) -> List[ExportedUnit]:
    """Return the exported units of ``text`` in source order.

    Never raises. Doc lines attach to whichever declaration closes next, and a
    doc comment that is never closed swallows the rest of the file. Blocks
    still open at the end of the text are dropped.
    """
    scanner = _Scanner()
    for line_number, line in enumerate(text.split("\n")):
        scanner.feed(line_number, line)
    return scanner.units


__all__ = ["ScanState", "extract"]
