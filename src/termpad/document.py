"""Row buffer: the document being edited.

Rows hold raw characters (one per byte, files are decoded as latin-1), the
tab-expanded render string and its highlight array. Every mutation goes
through ``Document`` so the derived fields never go stale.
"""

from __future__ import annotations

import logging

from .constants import TERMPAD_TAB_STOP
from .models import EditorSyntax, Row
from .syntax import find_syntax, update_syntax

logger = logging.getLogger(__name__)

FILE_ENCODING = "latin-1"


def render_row(chars: str, tab_stop: int = TERMPAD_TAB_STOP) -> str:
    out: list[str] = []
    idx = 0
    for ch in chars:
        if ch == "\t":
            out.append(" ")
            idx += 1
            while idx % tab_stop != 0:
                out.append(" ")
                idx += 1
        else:
            out.append(ch)
            idx += 1
    return "".join(out)


def cx_to_rx(row: Row, cx: int, tab_stop: int = TERMPAD_TAB_STOP) -> int:
    rx = 0
    for ch in row.chars[:cx]:
        if ch == "\t":
            rx += (tab_stop - 1) - (rx % tab_stop)
        rx += 1
    return rx


def rx_to_cx(row: Row, rx: int, tab_stop: int = TERMPAD_TAB_STOP) -> int:
    cur_rx = 0
    for cx, ch in enumerate(row.chars):
        if ch == "\t":
            cur_rx += (tab_stop - 1) - (cur_rx % tab_stop)
        cur_rx += 1
        if cur_rx > rx:
            return cx
    return row.size


class Document:
    def __init__(self, filename: str | None = None) -> None:
        self.rows: list[Row] = []
        self.dirty = 0
        self.filename = filename
        self.syntax: EditorSyntax | None = None

    @property
    def numrows(self) -> int:
        return len(self.rows)

    def select_syntax_highlight(self, filename: str | None) -> None:
        self.syntax = find_syntax(filename)
        logger.debug(
            "syntax for %r: %s", filename, self.syntax.filetype if self.syntax else "none"
        )
        for row in self.rows:
            update_syntax(row, self.syntax)

    def update_row(self, row: Row) -> None:
        row.render = render_row(row.chars)
        update_syntax(row, self.syntax)

    def insert_row(self, at: int, s: str) -> None:
        if at < 0 or at > self.numrows:
            return
        row = Row(chars=s)
        self.rows.insert(at, row)
        self.update_row(row)
        self.dirty += 1

    def del_row(self, at: int) -> None:
        if at < 0 or at >= self.numrows:
            return
        del self.rows[at]
        self.dirty += 1

    def row_insert_char(self, row: Row, at: int, c: str) -> None:
        if at < 0 or at > row.size:
            return
        row.chars = row.chars[:at] + c + row.chars[at:]
        self.update_row(row)
        self.dirty += 1

    def row_append_string(self, row: Row, s: str) -> None:
        row.chars += s
        self.update_row(row)
        self.dirty += 1

    def row_del_char(self, row: Row, at: int) -> None:
        if at < 0 or at >= row.size:
            return
        row.chars = row.chars[:at] + row.chars[at + 1 :]
        self.update_row(row)
        self.dirty += 1

    def split_row(self, at: int, col: int) -> None:
        """Move everything from ``col`` onward into a new row below ``at``."""
        if at < 0 or at >= self.numrows:
            return
        row = self.rows[at]
        col = max(0, min(col, row.size))
        self.insert_row(at + 1, row.chars[col:])
        row.chars = row.chars[:col]
        self.update_row(row)

    def rows_to_string(self) -> str:
        return "".join(f"{row.chars}\n" for row in self.rows)

    def to_bytes(self) -> bytes:
        return self.rows_to_string().encode(FILE_ENCODING)

    def load(self, filename: str) -> None:
        self.filename = filename
        self.select_syntax_highlight(filename)
        with open(filename, "rb") as f:
            for line in f:
                if line.endswith(b"\n"):
                    line = line[:-1]
                line = line.rstrip(b"\r")
                self.insert_row(self.numrows, line.decode(FILE_ENCODING))
        self.dirty = 0
        logger.info("loaded %s (%d rows)", filename, self.numrows)
