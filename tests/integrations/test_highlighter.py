# tests/integrations/test_highlighter.py
"""Tests for the pygments-backed line highlighter."""

import pytest

from tuiedit.integrations.Highlighter import PLAIN_TEXT, Highlighter, style_for_token
from pygments.token import Token


@pytest.fixture
def highlighter() -> Highlighter:
    return Highlighter()


@pytest.mark.parametrize(
    "language, line",
    [
        ("Python", "def greet(name): return f'hi {name}'  # done"),
        ("Rust", "fn main() { let x = vec![1, 2]; }"),
        ("JavaScript", "const a = 1 === 2 ? 'x' : \"y\";"),
        ("JSON", '{"key": [1, 2.5, null]}'),
        ("Markdown", "# Title with `code`"),
        ("Python", "   leading and trailing   "),
        ("Python", "s = '''unterminated"),
    ],
)
def test_segments_concatenate_to_line(highlighter: Highlighter, language: str, line: str) -> None:
    segments = highlighter.highlight_line(line, language)
    assert "".join(text for text, _ in segments) == line
    assert all(text for text, _ in segments)


def test_python_tokens_get_semantic_styles(highlighter: Highlighter) -> None:
    segments = dict((text.strip(), style) for text, style in highlighter.highlight_line("def f():  # note", "Python"))
    assert segments["def"] == "keyword"
    assert segments["f"] == "function"
    assert segments["# note"] == "comment"


def test_unknown_language_is_default(highlighter: Highlighter) -> None:
    assert highlighter.highlight_line("anything", "NoSuchLanguage") == [("anything", "default")]
    assert highlighter.highlight_line("plain", PLAIN_TEXT) == [("plain", "default")]


def test_empty_line_has_no_segments(highlighter: Highlighter) -> None:
    assert highlighter.highlight_line("", "Python") == []


def test_repeated_lines_come_from_cache(highlighter: Highlighter) -> None:
    first = highlighter.highlight_line("x = 1", "Python")
    second = highlighter.highlight_line("x = 1", "Python")
    assert first == second
    assert first is not second


@pytest.mark.parametrize(
    "filename, language",
    [
        ("main.rs", "Rust"),
        ("/tmp/script.PY", "Python"),
        ("notes.txt", PLAIN_TEXT),
        ("config.yml", "YAML"),
        ("data.unknown-extension", PLAIN_TEXT),
        (None, PLAIN_TEXT),
        ("", PLAIN_TEXT),
    ],
)
def test_detect_language(highlighter: Highlighter, filename, language: str) -> None:
    assert highlighter.detect_language(filename) == language


def test_detect_language_falls_back_to_pygments(highlighter: Highlighter) -> None:
    assert highlighter.detect_language("Makefile") == "Makefile"


def test_next_language_cycles(highlighter: Highlighter) -> None:
    languages = highlighter.supported_languages()
    assert languages[0] == PLAIN_TEXT
    assert highlighter.next_language(PLAIN_TEXT) == languages[1]
    assert highlighter.next_language(languages[-1]) == PLAIN_TEXT
    assert highlighter.next_language("Makefile") == PLAIN_TEXT


def test_style_for_token_walks_parents() -> None:
    assert style_for_token(Token.Keyword.Namespace) == "keyword"
    assert style_for_token(Token.Literal.String.Double) == "string"
    assert style_for_token(Token.Text) == "default"
