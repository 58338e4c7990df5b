# tuiedit/integrations/Highlighter.py
"""Highlighter.py
==================
Pygments-backed syntax highlighting for single lines.

The editor core asks for one line at a time and gets back a list of
``(segment, style_name)`` pairs whose concatenation is exactly the input
line. Style names are semantic (``keyword``, ``string``, ``comment``...); the
curses ``DrawScreen`` maps them to colour pairs.

Highlighting never fails: an unknown language, a lexer error or a lexer that
rewrites the text all degrade to ``[(text, "default")]``.
"""

import logging
import os
from functools import lru_cache
from typing import Optional

from pygments import lex
from pygments.lexer import Lexer
from pygments.lexers import find_lexer_class, get_lexer_by_name, get_lexer_for_filename
from pygments.token import Token
from pygments.util import ClassNotFound

PLAIN_TEXT = "Plain Text"

# Display label -> pygments alias. Order is the cycle order used by the editor.
LANGUAGES: dict[str, Optional[str]] = {
    PLAIN_TEXT: None,
    "Python": "python",
    "Rust": "rust",
    "JavaScript": "javascript",
    "TypeScript": "typescript",
    "HTML": "html",
    "CSS": "css",
    "JSON": "json",
    "XML": "xml",
    "YAML": "yaml",
    "TOML": "toml",
    "Markdown": "markdown",
}

EXTENSIONS: dict[str, str] = {
    "rs": "Rust",
    "py": "Python",
    "js": "JavaScript",
    "jsx": "JavaScript",
    "ts": "TypeScript",
    "tsx": "TypeScript",
    "html": "HTML",
    "css": "CSS",
    "json": "JSON",
    "xml": "XML",
    "yaml": "YAML",
    "yml": "YAML",
    "toml": "TOML",
    "md": "Markdown",
    "txt": PLAIN_TEXT,
}

# Token type -> semantic style. Lookups walk up Token.parent until a match.
TOKEN_STYLES = {
    Token.Keyword: "keyword",
    Token.Keyword.Constant: "constant",
    Token.Keyword.Type: "type",
    Token.Name.Function: "function",
    Token.Name.Class: "type",
    Token.Name.Decorator: "decorator",
    Token.Name.Builtin: "builtin",
    Token.Name.Tag: "tag",
    Token.Name.Attribute: "attribute",
    Token.Name.Variable: "variable",
    Token.Name.Constant: "constant",
    Token.Literal.String: "string",
    Token.Literal.String.Doc: "comment",
    Token.Literal.Number: "number",
    Token.Comment: "comment",
    Token.Operator: "operator",
    Token.Operator.Word: "keyword",
    Token.Generic.Heading: "keyword",
    Token.Generic.Subheading: "function",
    Token.Generic.Emph: "string",
    Token.Generic.Strong: "keyword",
    Token.Error: "error",
}


def style_for_token(token_type) -> str:
    current = token_type
    while current:
        style = TOKEN_STYLES.get(current)
        if style:
            return style
        current = current.parent
    return "default"


class Highlighter:
    """Line highlighter with a small per-line result cache."""

    def __init__(self, cache_size: int = 2048) -> None:
        self._lexers: dict[str, Optional[Lexer]] = {}
        self._cached_highlight = lru_cache(maxsize=cache_size)(self._highlight_uncached)

    def supported_languages(self) -> list[str]:
        return list(LANGUAGES)

    def detect_language(self, filename: Optional[str]) -> str:
        """Language label for a filename; ``Plain Text`` when nothing matches."""
        if not filename:
            return PLAIN_TEXT
        _, ext = os.path.splitext(os.path.basename(filename))
        label = EXTENSIONS.get(ext[1:].lower()) if ext else None
        if label:
            return label
        try:
            lexer = get_lexer_for_filename(filename)
            logging.debug("Highlighter: pygments detected '%s' for %s", lexer.name, filename)
            return lexer.name
        except ClassNotFound:
            return PLAIN_TEXT

    def next_language(self, current: str) -> str:
        """The language after ``current`` in the cycle order."""
        labels = list(LANGUAGES)
        if current not in labels:
            return labels[0]
        return labels[(labels.index(current) + 1) % len(labels)]

    def _lexer_for(self, language_id: str) -> Optional[Lexer]:
        if language_id in self._lexers:
            return self._lexers[language_id]

        lexer: Optional[Lexer] = None
        alias = LANGUAGES.get(language_id)
        try:
            if alias:
                lexer = get_lexer_by_name(alias, stripnl=False, ensurenl=False)
            elif language_id not in LANGUAGES:
                lexer_cls = find_lexer_class(language_id)
                if lexer_cls is not None:
                    lexer = lexer_cls(stripnl=False, ensurenl=False)
        except ClassNotFound:
            logging.debug("Highlighter: no pygments lexer for '%s'", language_id)
            lexer = None

        self._lexers[language_id] = lexer
        return lexer

    def highlight_line(self, text: str, language_id: str) -> list[tuple[str, str]]:
        if not text:
            return []
        return list(self._cached_highlight(text, language_id))

    def _highlight_uncached(self, text: str, language_id: str) -> tuple[tuple[str, str], ...]:
        lexer = self._lexer_for(language_id)
        if lexer is None:
            return ((text, "default"),)

        try:
            segments: list[tuple[str, str]] = []
            for token_type, value in lex(text, lexer):
                if not value:
                    continue
                style = style_for_token(token_type)
                if segments and segments[-1][1] == style:
                    segments[-1] = (segments[-1][0] + value, style)
                else:
                    segments.append((value, style))
        except Exception as e:
            logging.error("Pygments tokenization error for line '%s...': %s", text[:70], e)
            return ((text, "default"),)

        if "".join(seg for seg, _ in segments) != text:
            logging.debug("Highlighter: lexer '%s' altered the line; using plain text", language_id)
            return ((text, "default"),)
        return tuple(segments)
