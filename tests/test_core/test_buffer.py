# tests/test_core/test_buffer.py
"""Unit tests for the line `Buffer`.
=====================================

Covers the never-empty invariant, clamped single-character edits, line
split/join, multi-line insertion and range deletion.
"""

import pytest

from tuiedit.core.Buffer import Buffer


def test_empty_buffer_has_one_line() -> None:
    buf = Buffer()
    assert buf.lines == [""]
    assert len(buf) == 1

    buf.set_lines([])
    assert buf.lines == [""]


def test_lines_returns_a_copy() -> None:
    buf = Buffer(["abc"])
    buf.lines.append("zzz")
    assert buf.lines == ["abc"]


def test_insert_char_clamps_position() -> None:
    buf = Buffer(["abc"])
    buf.insert_char(5, 99, "!")
    assert buf.lines == ["abc!"]
    buf.insert_char(-3, -3, ">")
    assert buf.lines == [">abc!"]


def test_insert_char_newline_splits() -> None:
    buf = Buffer(["hello world"])
    buf.insert_char(0, 5, "\n")
    assert buf.lines == ["hello", " world"]


def test_insert_text_multiline_returns_end_position() -> None:
    buf = Buffer(["head|tail"])
    end = buf.insert_text(0, 5, "one\ntwo\nthree")
    assert buf.lines == ["head|one", "two", "threetail"]
    assert end == (2, 5)


def test_insert_text_single_line() -> None:
    buf = Buffer(["ab"])
    assert buf.insert_text(0, 1, "XYZ") == (0, 4)
    assert buf.lines == ["aXYZb"]


def test_delete_char_out_of_range_is_noop() -> None:
    buf = Buffer(["ab"])
    assert buf.delete_char(0, 2) == ""
    assert buf.delete_char(0, -1) == ""
    assert buf.delete_char(0, 0) == "a"
    assert buf.lines == ["b"]


def test_split_and_join_roundtrip_positions() -> None:
    buf = Buffer(["abcdef"])
    new_row = buf.split_line(0, 2)
    assert new_row == 1
    assert buf.lines == ["ab", "cdef"]

    assert buf.join_with_next(0) == 2
    assert buf.lines == ["abcdef"]
    assert buf.join_with_next(0) is None


def test_duplicate_and_delete_line() -> None:
    buf = Buffer(["a", "b"])
    assert buf.duplicate_line(0) == 1
    assert buf.lines == ["a", "a", "b"]

    assert buf.delete_line(2) == "b"
    buf.delete_line(0)
    buf.delete_line(0)
    assert buf.lines == [""]


def test_char_count_includes_newlines() -> None:
    assert Buffer(["ab", "c"]).char_count() == 4
    assert Buffer().char_count() == 0


@pytest.mark.parametrize(
    "start, end, expected_lines, removed",
    [
        ((0, 1), (0, 3), ["ade", "fghij", "klmno"], "bc"),
        ((0, 2), (2, 3), ["abno"], "cde\nfghij\nklm"),
        ((2, 3), (0, 2), ["abno"], "cde\nfghij\nklm"),
        ((0, 5), (1, 0), ["abcdefghij", "klmno"], "\n"),
    ],
)
def test_delete_range(start, end, expected_lines, removed) -> None:
    buf = Buffer(["abcde", "fghij", "klmno"])
    assert buf.delete_range(*start, *end) == removed
    assert buf.lines == expected_lines


def test_multibyte_text_is_indexed_by_codepoint() -> None:
    buf = Buffer(["héllo wörld"])
    buf.insert_char(0, 2, "X")
    assert buf.lines == ["héXllo wörld"]
    assert buf.text_range(0, 6, 0, 12) == " wörld"
    assert buf.line_length(0) == 12
