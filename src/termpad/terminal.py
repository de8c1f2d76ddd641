"""Raw-mode terminal lifecycle and key decoding.

Everything that talks to the tty lives here: the ``RawMode`` guard, the
escape-sequence decoder and the window-size probes. Failures surface as
``OSError`` and are treated as fatal by the caller.
"""

from __future__ import annotations

import errno
import fcntl
import logging
import os
import re
import struct
import termios
from contextlib import AbstractContextManager

from .constants import (
    CSI_SIMPLE_MAP,
    CSI_TILDE_MAP,
    ESC,
    SS3_SIMPLE_MAP,
)

logger = logging.getLogger(__name__)

_CURSOR_REPORT = re.compile(rb"\x1b\[(\d+);(\d+)R")


def _read_byte_once(fd: int) -> int | None:
    try:
        data = os.read(fd, 1)
    except (BlockingIOError, InterruptedError):
        return None
    if not data:
        return None
    return data[0]


def _read_byte_blocking(fd: int) -> int:
    while True:
        c = _read_byte_once(fd)
        if c is not None:
            return c


def read_key(fd: int) -> int:
    c = _read_byte_blocking(fd)
    if c != ESC:
        return c

    seq0 = _read_byte_once(fd)
    if seq0 is None:
        return ESC
    seq1 = _read_byte_once(fd)
    if seq1 is None:
        return ESC

    if seq0 == ord("["):
        if ord("0") <= seq1 <= ord("9"):
            seq2 = _read_byte_once(fd)
            if seq2 is None:
                return ESC
            if seq2 == ord("~"):
                return CSI_TILDE_MAP.get(seq1, ESC)
            return ESC
        return CSI_SIMPLE_MAP.get(seq1, ESC)
    if seq0 == ord("O"):
        return SS3_SIMPLE_MAP.get(seq1, ESC)
    return ESC


def get_cursor_position(ifd: int, ofd: int) -> tuple[int, int]:
    if os.write(ofd, b"\x1b[6n") != 4:
        raise OSError(errno.EIO, "cursor query write failed")

    buf = bytearray()
    while len(buf) < 31:
        c = _read_byte_once(ifd)
        if c is None:
            break
        buf.append(c)
        if c == ord("R"):
            break

    match = _CURSOR_REPORT.match(bytes(buf))
    if not match:
        raise OSError(errno.EIO, "invalid cursor position response")
    return int(match.group(1)), int(match.group(2))


def get_window_size(ifd: int, ofd: int) -> tuple[int, int]:
    try:
        packed = fcntl.ioctl(ofd, termios.TIOCGWINSZ, struct.pack("HHHH", 0, 0, 0, 0))
        rows, cols, _, _ = struct.unpack("HHHH", packed)
        if cols:
            return rows, cols
    except OSError as exc:
        logger.debug("TIOCGWINSZ failed: %s", exc)

    # Push the cursor to the bottom-right corner and ask where it ended up.
    logger.info("window size ioctl unavailable, probing with cursor report")
    if os.write(ofd, b"\x1b[999C\x1b[998B") != 12:
        raise OSError(errno.EIO, "window query write failed")
    return get_cursor_position(ifd, ofd)


class RawMode(AbstractContextManager["RawMode"]):
    """Hold the tty in raw mode for the duration of a ``with`` block.

    The original attributes are restored on every way out of the block,
    including ``SystemExit`` and fatal ``OSError`` unwinding.
    """

    def __init__(self, fd: int) -> None:
        self.fd = fd
        self._orig: list | None = None

    def __enter__(self) -> "RawMode":
        if not os.isatty(self.fd):
            raise OSError(errno.ENOTTY, "stdin is not a tty")

        self._orig = termios.tcgetattr(self.fd)
        raw = termios.tcgetattr(self.fd)
        raw[0] &= ~(termios.BRKINT | termios.ICRNL | termios.INPCK | termios.ISTRIP | termios.IXON)
        raw[1] &= ~termios.OPOST
        raw[2] |= termios.CS8
        raw[3] &= ~(termios.ECHO | termios.ICANON | termios.IEXTEN | termios.ISIG)
        raw[6][termios.VMIN] = 0
        raw[6][termios.VTIME] = 1
        termios.tcsetattr(self.fd, termios.TCSAFLUSH, raw)
        logger.debug("raw mode enabled on fd %d", self.fd)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._orig is not None:
            termios.tcsetattr(self.fd, termios.TCSAFLUSH, self._orig)
            self._orig = None
            logger.debug("terminal attributes restored on fd %d", self.fd)
