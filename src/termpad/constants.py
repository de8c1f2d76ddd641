from __future__ import annotations

TERMPAD_VERSION = "0.2.0"
TERMPAD_TAB_STOP = 8
TERMPAD_QUIT_TIMES = 3
TERMPAD_MESSAGE_TIMEOUT = 5.0
TERMPAD_STATUS_LEN = 80

# Syntax highlight types.
HL_NORMAL = 0
HL_COMMENT = 1
HL_KEYWORD1 = 2
HL_KEYWORD2 = 3
HL_STRING = 4
HL_NUMBER = 5
HL_MATCH = 6

HL_HIGHLIGHT_NUMBERS = 1 << 0
HL_HIGHLIGHT_STRINGS = 1 << 1

# Foreground colors for each highlight type.
COLOR_NUMBER = 31
COLOR_KEYWORD1 = 32
COLOR_KEYWORD2 = 33
COLOR_MATCH = 34
COLOR_STRING = 35
COLOR_COMMENT = 36
COLOR_DEFAULT = 37

ANSI_HIDE_CURSOR = "\x1b[?25l"
ANSI_SHOW_CURSOR = "\x1b[?25h"
ANSI_CLEAR_SCREEN = "\x1b[2J"
ANSI_CURSOR_HOME = "\x1b[H"
ANSI_CLEAR_LINE = "\x1b[K"
ANSI_INVERT_ON = "\x1b[7m"
ANSI_INVERT_OFF = "\x1b[m"
ANSI_DEFAULT_FG = "\x1b[39m"


def ctrl(ch: str) -> int:
    return ord(ch.upper()) & 0x1F


# Key actions.
CTRL_F = ctrl("f")
CTRL_H = ctrl("h")
CTRL_L = ctrl("l")
CTRL_Q = ctrl("q")
CTRL_S = ctrl("s")
ENTER = 13
ESC = 27
BACKSPACE = 127

ARROW_LEFT = 1000
ARROW_RIGHT = 1001
ARROW_UP = 1002
ARROW_DOWN = 1003
DEL_KEY = 1004
HOME_KEY = 1005
END_KEY = 1006
PAGE_UP = 1007
PAGE_DOWN = 1008

CSI_SIMPLE_MAP = {
    ord("A"): ARROW_UP,
    ord("B"): ARROW_DOWN,
    ord("C"): ARROW_RIGHT,
    ord("D"): ARROW_LEFT,
    ord("H"): HOME_KEY,
    ord("F"): END_KEY,
}
CSI_TILDE_MAP = {
    ord("1"): HOME_KEY,
    ord("3"): DEL_KEY,
    ord("4"): END_KEY,
    ord("5"): PAGE_UP,
    ord("6"): PAGE_DOWN,
    ord("7"): HOME_KEY,
    ord("8"): END_KEY,
}
SS3_SIMPLE_MAP = {
    ord("H"): HOME_KEY,
    ord("F"): END_KEY,
}
