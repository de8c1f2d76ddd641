from __future__ import annotations

import logging
import os
import signal
import time

from .config import Settings
from .constants import (
    ANSI_CLEAR_SCREEN,
    ANSI_CURSOR_HOME,
    ARROW_DOWN,
    ARROW_LEFT,
    ARROW_RIGHT,
    ARROW_UP,
    BACKSPACE,
    CTRL_F,
    CTRL_H,
    CTRL_L,
    CTRL_Q,
    CTRL_S,
    DEL_KEY,
    END_KEY,
    ENTER,
    ESC,
    HOME_KEY,
    PAGE_DOWN,
    PAGE_UP,
    TERMPAD_STATUS_LEN,
)
from .document import Document
from .models import EditorConfig, Row
from .search import find
from .terminal import RawMode, get_window_size, read_key
from .ui import prompt, refresh_screen

logger = logging.getLogger(__name__)

HELP_MESSAGE = "HELP: Ctrl-S = save | Ctrl-Q = quit | Ctrl-F = find"


class Editor:
    """One editing session: the document, cursor and viewport, and the tty."""

    def __init__(self, stdin_fd: int, stdout_fd: int, settings: Settings | None = None) -> None:
        self.cfg = EditorConfig()
        self.doc = Document()
        self.settings = settings if settings is not None else Settings()
        self.quit_times = self.settings.quit_times
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd

    def update_window_size(self) -> None:
        rows, cols = get_window_size(self.stdin_fd, self.stdout_fd)
        self.cfg.screenrows = max(1, rows - 2)
        self.cfg.screencols = max(1, cols)
        logger.debug("window size %dx%d", cols, rows)

    def handle_sigwinch(self, _signum: int, _frame) -> None:
        self.update_window_size()
        if self.cfg.cy > self.doc.numrows:
            self.cfg.cy = self.doc.numrows
        self.cfg.cx = min(self.cfg.cx, self.current_row_len())
        self.refresh_screen()

    def set_status_message(self, fmt: str, *args: object) -> None:
        msg = fmt % args if args else fmt
        self.cfg.statusmsg = msg[:TERMPAD_STATUS_LEN]
        self.cfg.statusmsg_time = time.time()

    def current_row(self) -> Row | None:
        if self.cfg.cy < self.doc.numrows:
            return self.doc.rows[self.cfg.cy]
        return None

    def current_row_len(self) -> int:
        row = self.current_row()
        return row.size if row is not None else 0

    def open_file(self, filename: str) -> None:
        self.doc.load(filename)

    def insert_char(self, c: int) -> None:
        if self.cfg.cy == self.doc.numrows:
            self.doc.insert_row(self.doc.numrows, "")
        self.doc.row_insert_char(self.doc.rows[self.cfg.cy], self.cfg.cx, chr(c))
        self.cfg.cx += 1

    def insert_newline(self) -> None:
        if self.cfg.cx == 0:
            self.doc.insert_row(self.cfg.cy, "")
        else:
            self.doc.split_row(self.cfg.cy, self.cfg.cx)
        self.cfg.cy += 1
        self.cfg.cx = 0

    def del_char(self) -> None:
        row = self.current_row()
        if row is None or (self.cfg.cx == 0 and self.cfg.cy == 0):
            return

        if self.cfg.cx > 0:
            self.doc.row_del_char(row, self.cfg.cx - 1)
            self.cfg.cx -= 1
        else:
            prev = self.doc.rows[self.cfg.cy - 1]
            self.cfg.cx = prev.size
            self.doc.row_append_string(prev, row.chars)
            self.doc.del_row(self.cfg.cy)
            self.cfg.cy -= 1

    def save(self) -> None:
        if self.doc.filename is None:
            filename = prompt(self, "Save as: %s (ESC to cancel)")
            if filename is None:
                self.set_status_message("Save aborted")
                return
            self.doc.filename = filename
            self.doc.select_syntax_highlight(filename)

        data = self.doc.to_bytes()
        try:
            fd = os.open(self.doc.filename, os.O_RDWR | os.O_CREAT, 0o644)
        except OSError as exc:
            self._report_save_error(exc)
            return
        try:
            os.ftruncate(fd, len(data))
            written = 0
            while written < len(data):
                written += os.write(fd, data[written:])
        except OSError as exc:
            self._report_save_error(exc)
            return
        finally:
            os.close(fd)

        self.doc.dirty = 0
        self.set_status_message("%d bytes written to disk", len(data))
        logger.info("saved %s (%d bytes)", self.doc.filename, len(data))

    def _report_save_error(self, exc: OSError) -> None:
        reason = exc.strerror or str(exc)
        logger.warning("save to %s failed: %s", self.doc.filename, reason)
        self.set_status_message("Can't save! I/O error: %s", reason)

    def refresh_screen(self) -> None:
        refresh_screen(self)

    def find(self) -> None:
        find(self)

    def move_cursor(self, key: int) -> None:
        cfg = self.cfg
        row = self.current_row()

        if key == ARROW_LEFT:
            if cfg.cx != 0:
                cfg.cx -= 1
            elif cfg.cy > 0:
                cfg.cy -= 1
                cfg.cx = self.doc.rows[cfg.cy].size
        elif key == ARROW_RIGHT:
            if row is not None and cfg.cx < row.size:
                cfg.cx += 1
            elif row is not None and cfg.cx == row.size:
                cfg.cy += 1
                cfg.cx = 0
        elif key == ARROW_UP:
            if cfg.cy != 0:
                cfg.cy -= 1
        elif key == ARROW_DOWN:
            if cfg.cy < self.doc.numrows:
                cfg.cy += 1

        rowlen = self.current_row_len()
        if cfg.cx > rowlen:
            cfg.cx = rowlen

    def page(self, key: int) -> None:
        cfg = self.cfg
        if key == PAGE_UP:
            cfg.cy = cfg.rowoff
        else:
            cfg.cy = min(cfg.rowoff + cfg.screenrows - 1, self.doc.numrows)
        for _ in range(cfg.screenrows):
            self.move_cursor(ARROW_UP if key == PAGE_UP else ARROW_DOWN)

    def quit(self) -> None:
        if self.doc.dirty and self.quit_times > 1:
            self.quit_times -= 1
            self.set_status_message(
                "WARNING!!! File has unsaved changes. Press Ctrl-Q %d more times to quit.",
                self.quit_times,
            )
            return
        os.write(self.stdout_fd, (ANSI_CLEAR_SCREEN + ANSI_CURSOR_HOME).encode())
        raise SystemExit(0)

    def process_keypress(self) -> None:
        c = read_key(self.stdin_fd)
        if c == CTRL_Q:
            self.quit()
            return

        if c == ENTER:
            self.insert_newline()
        elif c == CTRL_S:
            self.save()
        elif c == CTRL_F:
            self.find()
        elif c == HOME_KEY:
            self.cfg.cx = 0
        elif c == END_KEY:
            self.cfg.cx = self.current_row_len()
        elif c in (BACKSPACE, CTRL_H, DEL_KEY):
            if c == DEL_KEY:
                self.move_cursor(ARROW_RIGHT)
            self.del_char()
        elif c in (PAGE_UP, PAGE_DOWN):
            self.page(c)
        elif c in (ARROW_UP, ARROW_DOWN, ARROW_LEFT, ARROW_RIGHT):
            self.move_cursor(c)
        elif c in (CTRL_L, ESC):
            pass
        elif 32 <= c < 128 or c == ord("\t"):
            self.insert_char(c)

        self.quit_times = self.settings.quit_times

    def run(self) -> None:
        """Edit until the user quits. Raises ``SystemExit`` on quit."""
        with RawMode(self.stdin_fd):
            self.update_window_size()
            signal.signal(signal.SIGWINCH, self.handle_sigwinch)
            self.set_status_message(HELP_MESSAGE)
            while True:
                self.refresh_screen()
                self.process_keypress()
