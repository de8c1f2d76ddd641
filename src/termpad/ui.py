from __future__ import annotations

import os
import time
from typing import TYPE_CHECKING, Callable

from .constants import (
    ANSI_CLEAR_LINE,
    ANSI_CURSOR_HOME,
    ANSI_DEFAULT_FG,
    ANSI_HIDE_CURSOR,
    ANSI_INVERT_OFF,
    ANSI_INVERT_ON,
    ANSI_SHOW_CURSOR,
    BACKSPACE,
    CTRL_H,
    DEL_KEY,
    ENTER,
    ESC,
    HL_NORMAL,
    TERMPAD_VERSION,
)
from .document import Document, cx_to_rx
from .models import EditorConfig, Row
from .syntax import syntax_to_color
from .terminal import read_key

if TYPE_CHECKING:
    from .editor import Editor

PromptCallback = Callable[[str, int], None]


def scroll(cfg: EditorConfig, doc: Document) -> None:
    cfg.rx = 0
    if cfg.cy < doc.numrows:
        cfg.rx = cx_to_rx(doc.rows[cfg.cy], cfg.cx)

    if cfg.cy < cfg.rowoff:
        cfg.rowoff = cfg.cy
    if cfg.cy >= cfg.rowoff + cfg.screenrows:
        cfg.rowoff = cfg.cy - cfg.screenrows + 1
    if cfg.rx < cfg.coloff:
        cfg.coloff = cfg.rx
    if cfg.rx >= cfg.coloff + cfg.screencols:
        cfg.coloff = cfg.rx - cfg.screencols + 1


def draw_welcome(cfg: EditorConfig, ab: list[str]) -> None:
    welcome = f"Termpad editor -- version {TERMPAD_VERSION}"
    if len(welcome) > cfg.screencols:
        welcome = welcome[: cfg.screencols]
    padding = (cfg.screencols - len(welcome)) // 2
    if padding:
        ab.append("~")
        padding -= 1
    if padding > 0:
        ab.append(" " * padding)
    ab.append(welcome)


def draw_row(cfg: EditorConfig, row: Row, ab: list[str]) -> None:
    text = row.render[cfg.coloff : cfg.coloff + cfg.screencols]
    hl = row.hl[cfg.coloff : cfg.coloff + cfg.screencols]
    current_color = -1
    for ch, h in zip(text, hl):
        if ord(ch) < 32 or ord(ch) == 127:
            sym = chr(ord("@") + ord(ch)) if ord(ch) <= 26 else "?"
            ab.append(ANSI_INVERT_ON)
            ab.append(sym)
            ab.append(ANSI_INVERT_OFF)
            # Reverse-video reset clears the color too.
            if current_color != -1:
                ab.append(f"\x1b[{current_color}m")
        elif h == HL_NORMAL:
            if current_color != -1:
                ab.append(ANSI_DEFAULT_FG)
                current_color = -1
            ab.append(ch)
        else:
            color = syntax_to_color(h)
            if color != current_color:
                ab.append(f"\x1b[{color}m")
                current_color = color
            ab.append(ch)
    ab.append(ANSI_DEFAULT_FG)


def draw_rows(cfg: EditorConfig, doc: Document, ab: list[str]) -> None:
    for y in range(cfg.screenrows):
        filerow = cfg.rowoff + y
        if filerow >= doc.numrows:
            if doc.numrows == 0 and y == cfg.screenrows // 3:
                draw_welcome(cfg, ab)
            else:
                ab.append("~")
        else:
            draw_row(cfg, doc.rows[filerow], ab)
        ab.append(ANSI_CLEAR_LINE)
        ab.append("\r\n")


def draw_status_bar(cfg: EditorConfig, doc: Document, ab: list[str]) -> None:
    ab.append(ANSI_INVERT_ON)
    filename = doc.filename if doc.filename else "[No Name]"
    status = f"{filename:.20} - {doc.numrows} lines {'(modified)' if doc.dirty else ''}"
    filetype = doc.syntax.filetype if doc.syntax else "no ft"
    rstatus = f"{filetype} | {cfg.cy + 1}/{doc.numrows}"
    if len(status) > cfg.screencols:
        status = status[: cfg.screencols]
    ab.append(status)
    fill = len(status)
    while fill < cfg.screencols:
        if cfg.screencols - fill == len(rstatus):
            ab.append(rstatus)
            break
        ab.append(" ")
        fill += 1
    ab.append(ANSI_INVERT_OFF)
    ab.append("\r\n")


def draw_message_bar(cfg: EditorConfig, ab: list[str], timeout: float, now: float) -> None:
    ab.append(ANSI_CLEAR_LINE)
    if cfg.statusmsg and now - cfg.statusmsg_time < timeout:
        ab.append(cfg.statusmsg[: cfg.screencols])


def compose_frame(editor: Editor, now: float | None = None) -> str:
    cfg = editor.cfg
    ab: list[str] = [ANSI_HIDE_CURSOR, ANSI_CURSOR_HOME]
    draw_rows(cfg, editor.doc, ab)
    draw_status_bar(cfg, editor.doc, ab)
    draw_message_bar(cfg, ab, editor.settings.message_timeout, time.time() if now is None else now)
    ab.append(f"\x1b[{(cfg.cy - cfg.rowoff) + 1};{(cfg.rx - cfg.coloff) + 1}H")
    ab.append(ANSI_SHOW_CURSOR)
    return "".join(ab)


def refresh_screen(editor: Editor) -> None:
    scroll(editor.cfg, editor.doc)
    frame = compose_frame(editor)
    os.write(editor.stdout_fd, frame.encode("latin-1", errors="replace"))


def prompt(editor: Editor, fmt: str, callback: PromptCallback | None = None) -> str | None:
    """Collect a line of input in the message bar.

    Returns the entered text, or ``None`` when the user pressed ESC.
    ``callback`` sees the buffer and the key after every keypress.
    """
    buf = ""
    while True:
        editor.set_status_message(fmt, buf)
        editor.refresh_screen()

        c = read_key(editor.stdin_fd)
        if c in (DEL_KEY, CTRL_H, BACKSPACE):
            buf = buf[:-1]
        elif c == ESC:
            editor.set_status_message("")
            if callback is not None:
                callback(buf, c)
            return None
        elif c == ENTER:
            if buf:
                editor.set_status_message("")
                if callback is not None:
                    callback(buf, c)
                return buf
        elif 32 <= c < 127:
            buf += chr(c)

        if callback is not None:
            callback(buf, c)
