"""Incremental search.

The prompt drives ``SearchState`` after every keypress. A hit moves the
cursor, scrolls the match into view and paints it with ``HL_MATCH``; the
row's previous highlight is kept aside and put back on the next keypress.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .constants import (
    ARROW_DOWN,
    ARROW_LEFT,
    ARROW_RIGHT,
    ARROW_UP,
    ENTER,
    ESC,
    HL_MATCH,
)
from .document import rx_to_cx
from .ui import prompt

if TYPE_CHECKING:
    from .editor import Editor

logger = logging.getLogger(__name__)


class SearchState:
    def __init__(self, editor: Editor) -> None:
        self.editor = editor
        self.last_match = -1
        self.direction = 1
        self.saved_hl_line = -1
        self.saved_hl: list[int] | None = None

    def restore_hl(self) -> None:
        doc = self.editor.doc
        if self.saved_hl is not None and 0 <= self.saved_hl_line < doc.numrows:
            doc.rows[self.saved_hl_line].hl = self.saved_hl
        self.saved_hl = None
        self.saved_hl_line = -1

    def __call__(self, query: str, key: int) -> None:
        self.restore_hl()

        if key in (ENTER, ESC):
            self.last_match = -1
            self.direction = 1
            return
        if key in (ARROW_RIGHT, ARROW_DOWN):
            self.direction = 1
        elif key in (ARROW_LEFT, ARROW_UP):
            self.direction = -1
        else:
            self.last_match = -1
            self.direction = 1

        if self.last_match == -1:
            self.direction = 1
        if not query:
            return

        doc = self.editor.doc
        cfg = self.editor.cfg
        current = self.last_match
        for _ in range(doc.numrows):
            current += self.direction
            if current == -1:
                current = doc.numrows - 1
            elif current == doc.numrows:
                current = 0

            row = doc.rows[current]
            offset = row.render.find(query)
            if offset == -1:
                continue

            self.last_match = current
            cfg.cy = current
            cfg.cx = rx_to_cx(row, offset)
            # Past the end so the next scroll puts the match on the top line.
            cfg.rowoff = doc.numrows

            self.saved_hl_line = current
            self.saved_hl = row.hl.copy()
            end = min(offset + len(query), row.rsize)
            row.hl[offset:end] = [HL_MATCH] * (end - offset)
            logger.debug("match for %r at row %d, render col %d", query, current, offset)
            break


def find(editor: Editor) -> None:
    cfg = editor.cfg
    saved_cx = cfg.cx
    saved_cy = cfg.cy
    saved_coloff = cfg.coloff
    saved_rowoff = cfg.rowoff

    query = prompt(editor, "Search: %s (Use ESC/Arrows/Enter)", SearchState(editor))
    if query is None:
        cfg.cx = saved_cx
        cfg.cy = saved_cy
        cfg.coloff = saved_coloff
        cfg.rowoff = saved_rowoff
