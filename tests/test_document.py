"""Tests for the row buffer and the tab-aware coordinate mapping."""

from __future__ import annotations

import os
import tempfile
import unittest

from termpad.constants import HL_KEYWORD2, HL_NORMAL
from termpad.document import Document, cx_to_rx, render_row, rx_to_cx
from termpad.models import Row


def _doc(*lines: str) -> Document:
    doc = Document()
    for line in lines:
        doc.insert_row(doc.numrows, line)
    return doc


class CoordinateMappingTests(unittest.TestCase):
    def test_tab_expands_to_next_stop(self) -> None:
        doc = _doc("hello\tworld")
        row = doc.rows[0]
        self.assertEqual(row.render, "hello   world")
        self.assertEqual(cx_to_rx(row, 6), 8)
        self.assertEqual(cx_to_rx(row, 5), 5)

    def test_tab_on_a_stop_takes_a_full_width(self) -> None:
        self.assertEqual(render_row("\tx"), " " * 8 + "x")
        self.assertEqual(render_row("abcdefgh\tx"), "abcdefgh" + " " * 8 + "x")

    def test_rx_to_cx_inverts_cx_to_rx(self) -> None:
        samples = ["", "plain", "\t", "\t\tx", "a\tb\tc", "1234567\t8", "tab at end\t"]
        for text in samples:
            row = Row(chars=text, render=render_row(text))
            for cx in range(row.size + 1):
                self.assertEqual(rx_to_cx(row, cx_to_rx(row, cx)), cx, (text, cx))

    def test_rx_inside_a_tab_maps_to_the_tab(self) -> None:
        row = Row(chars="a\tb", render=render_row("a\tb"))
        for rx in range(1, 8):
            self.assertEqual(rx_to_cx(row, rx), 1)
        self.assertEqual(rx_to_cx(row, 8), 2)
        self.assertEqual(rx_to_cx(row, 50), 3)

    def test_render_is_never_shorter_than_raw(self) -> None:
        for text in ("", "abc", "\t", "x\ty\tz"):
            self.assertGreaterEqual(len(render_row(text)), len(text))


class RowMutationTests(unittest.TestCase):
    def test_insert_then_delete_restores_row(self) -> None:
        for pos in range(len("abcdef") + 1):
            doc = _doc("abcdef")
            row = doc.rows[0]
            doc.row_insert_char(row, pos, "Z")
            self.assertEqual(row.size, 7)
            doc.row_del_char(row, pos)
            self.assertEqual(row.chars, "abcdef")
            self.assertEqual(row.size, 6)

    def test_split_then_join_restores_row(self) -> None:
        original = "one\ttwo three"
        for col in range(len(original) + 1):
            doc = _doc(original, "tail")
            doc.split_row(0, col)
            self.assertEqual(doc.numrows, 3)
            self.assertEqual(doc.rows[0].chars, original[:col])
            self.assertEqual(doc.rows[1].chars, original[col:])

            doc.row_append_string(doc.rows[0], doc.rows[1].chars)
            doc.del_row(1)
            self.assertEqual([r.chars for r in doc.rows], [original, "tail"])

    def test_mutations_regenerate_render_and_highlight(self) -> None:
        doc = _doc("x")
        doc.select_syntax_highlight("main.c")
        row = doc.rows[0]
        doc.row_del_char(row, 0)
        for ch in "int\t":
            doc.row_insert_char(row, row.size, ch)
        self.assertEqual(row.render, "int     ")
        self.assertEqual(len(row.hl), row.rsize)
        self.assertEqual(row.hl[:3], [HL_KEYWORD2] * 3)
        self.assertEqual(row.hl[3:], [HL_NORMAL] * 5)

    def test_every_mutation_bumps_dirty(self) -> None:
        doc = Document()
        doc.insert_row(0, "ab")
        self.assertEqual(doc.dirty, 1)
        doc.row_insert_char(doc.rows[0], 1, "x")
        doc.row_del_char(doc.rows[0], 0)
        doc.row_append_string(doc.rows[0], "!")
        doc.insert_row(1, "")
        doc.del_row(1)
        self.assertEqual(doc.dirty, 6)

    def test_out_of_range_positions_are_ignored(self) -> None:
        doc = _doc("abc")
        doc.insert_row(5, "nope")
        doc.del_row(3)
        doc.row_del_char(doc.rows[0], 3)
        self.assertEqual([r.chars for r in doc.rows], ["abc"])
        self.assertEqual(doc.dirty, 1)

    def test_insert_char_outside_row_is_ignored(self) -> None:
        doc = _doc("abc")
        doc.row_insert_char(doc.rows[0], 99, "d")
        doc.row_insert_char(doc.rows[0], -1, "d")
        self.assertEqual(doc.rows[0].chars, "abc")
        self.assertEqual(doc.dirty, 1)
        doc.row_insert_char(doc.rows[0], 3, "d")
        self.assertEqual(doc.rows[0].chars, "abcd")


class SerializationTests(unittest.TestCase):
    def test_rows_are_newline_terminated(self) -> None:
        doc = _doc("a", "", "b")
        self.assertEqual(doc.rows_to_string(), "a\n\nb\n")
        self.assertEqual(_doc().rows_to_string(), "")

    def test_load_strips_line_endings_and_keeps_bytes(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = os.path.join(td, "sample.py")
            with open(path, "wb") as f:
                f.write(b"def f():\r\n\treturn 1\n\xe9t\xe9")

            doc = Document()
            doc.load(path)

        self.assertEqual([r.chars for r in doc.rows], ["def f():", "\treturn 1", "\xe9t\xe9"])
        self.assertEqual(doc.dirty, 0)
        self.assertEqual(doc.filename, path)
        self.assertIsNotNone(doc.syntax)
        self.assertEqual(doc.syntax.filetype, "python")
        self.assertEqual(doc.to_bytes(), b"def f():\n\treturn 1\n\xe9t\xe9\n")

    def test_load_missing_file_raises(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            with self.assertRaises(FileNotFoundError):
                Document().load(os.path.join(td, "missing.txt"))


if __name__ == "__main__":
    unittest.main()
