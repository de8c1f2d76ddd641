from __future__ import annotations

import string

from .constants import (
    COLOR_COMMENT,
    COLOR_DEFAULT,
    COLOR_KEYWORD1,
    COLOR_KEYWORD2,
    COLOR_MATCH,
    COLOR_NUMBER,
    COLOR_STRING,
    HL_COMMENT,
    HL_HIGHLIGHT_NUMBERS,
    HL_HIGHLIGHT_STRINGS,
    HL_KEYWORD1,
    HL_KEYWORD2,
    HL_MATCH,
    HL_NORMAL,
    HL_NUMBER,
    HL_STRING,
)
from .models import EditorSyntax, Row

SEPARATORS = ",.()+-/*=~%<>[];"

C_HL_EXTENSIONS = (".c", ".h", ".cpp", ".hpp", ".cc")
C_HL_KEYWORDS = (
    # C keywords.
    "auto",
    "break",
    "case",
    "continue",
    "default",
    "do",
    "else",
    "enum",
    "extern",
    "for",
    "goto",
    "if",
    "register",
    "return",
    "sizeof",
    "static",
    "struct",
    "switch",
    "typedef",
    "union",
    "volatile",
    "while",
    "NULL",
    # C++ keywords.
    "class",
    "constexpr",
    "delete",
    "explicit",
    "false",
    "friend",
    "inline",
    "namespace",
    "new",
    "nullptr",
    "operator",
    "private",
    "protected",
    "public",
    "template",
    "this",
    "throw",
    "true",
    "try",
    "typename",
    "virtual",
    # C types (secondary class).
    "int|",
    "long|",
    "double|",
    "float|",
    "char|",
    "unsigned|",
    "signed|",
    "void|",
    "short|",
    "const|",
    "bool|",
)

PY_HL_EXTENSIONS = (".py", ".pyw")
PY_HL_KEYWORDS = (
    "and",
    "as",
    "assert",
    "async",
    "await",
    "break",
    "class",
    "continue",
    "def",
    "del",
    "elif",
    "else",
    "except",
    "finally",
    "for",
    "from",
    "global",
    "if",
    "import",
    "in",
    "is",
    "lambda",
    "nonlocal",
    "not",
    "or",
    "pass",
    "raise",
    "return",
    "try",
    "while",
    "with",
    "yield",
    "None|",
    "True|",
    "False|",
    "int|",
    "float|",
    "str|",
    "bytes|",
    "bool|",
    "list|",
    "dict|",
    "set|",
    "tuple|",
    "self|",
)

HLDB: tuple[EditorSyntax, ...] = (
    EditorSyntax(
        filetype="c",
        filematch=C_HL_EXTENSIONS,
        keywords=C_HL_KEYWORDS,
        singleline_comment_start="//",
        flags=HL_HIGHLIGHT_NUMBERS | HL_HIGHLIGHT_STRINGS,
    ),
    EditorSyntax(
        filetype="python",
        filematch=PY_HL_EXTENSIONS,
        keywords=PY_HL_KEYWORDS,
        singleline_comment_start="#",
        flags=HL_HIGHLIGHT_NUMBERS | HL_HIGHLIGHT_STRINGS,
    ),
)


def is_separator(c: str) -> bool:
    return not c or c in string.whitespace or c in SEPARATORS


def syntax_to_color(hl: int) -> int:
    if hl == HL_COMMENT:
        return COLOR_COMMENT
    if hl == HL_KEYWORD1:
        return COLOR_KEYWORD1
    if hl == HL_KEYWORD2:
        return COLOR_KEYWORD2
    if hl == HL_STRING:
        return COLOR_STRING
    if hl == HL_NUMBER:
        return COLOR_NUMBER
    if hl == HL_MATCH:
        return COLOR_MATCH
    return COLOR_DEFAULT


def find_syntax(filename: str | None) -> EditorSyntax | None:
    """Return the first profile whose patterns match ``filename``.

    Patterns starting with a dot must equal the text from the last dot of
    the name on; anything else matches as a substring of the name.
    """
    if not filename:
        return None
    dot = filename.rfind(".")
    ext = filename[dot:] if dot != -1 else None
    for syntax in HLDB:
        for pattern in syntax.filematch:
            if pattern.startswith("."):
                if ext == pattern:
                    return syntax
            elif pattern in filename:
                return syntax
    return None


def _match_keyword(render: str, i: int, keywords: tuple[str, ...]) -> tuple[int, int] | None:
    for kw in keywords:
        kw2 = kw.endswith("|")
        token = kw[:-1] if kw2 else kw
        klen = len(token)
        tail = render[i + klen] if i + klen < len(render) else ""
        if render.startswith(token, i) and is_separator(tail):
            return klen, HL_KEYWORD2 if kw2 else HL_KEYWORD1
    return None


def highlight(render: str, syntax: EditorSyntax | None) -> list[int]:
    hl = [HL_NORMAL] * len(render)
    if syntax is None:
        return hl

    scs = syntax.singleline_comment_start
    flags = syntax.flags
    prev_sep = True
    in_string = ""

    i = 0
    while i < len(render):
        ch = render[i]
        prev_hl = hl[i - 1] if i > 0 else HL_NORMAL

        if scs and not in_string and render.startswith(scs, i):
            hl[i:] = [HL_COMMENT] * (len(render) - i)
            break

        if flags & HL_HIGHLIGHT_STRINGS:
            if in_string:
                hl[i] = HL_STRING
                if ch == "\\" and i + 1 < len(render):
                    hl[i + 1] = HL_STRING
                    i += 2
                    continue
                if ch == in_string:
                    in_string = ""
                i += 1
                prev_sep = True
                continue
            if ch in ("'", '"'):
                in_string = ch
                hl[i] = HL_STRING
                i += 1
                continue

        if flags & HL_HIGHLIGHT_NUMBERS:
            if (ch in string.digits and (prev_sep or prev_hl == HL_NUMBER)) or (
                ch == "." and prev_hl == HL_NUMBER
            ):
                hl[i] = HL_NUMBER
                i += 1
                prev_sep = False
                continue

        if prev_sep:
            matched = _match_keyword(render, i, syntax.keywords)
            if matched is not None:
                klen, mark = matched
                hl[i : i + klen] = [mark] * klen
                i += klen
                prev_sep = False
                continue

        prev_sep = is_separator(ch)
        i += 1

    return hl


def update_syntax(row: Row, syntax: EditorSyntax | None) -> None:
    row.hl = highlight(row.render, syntax)
