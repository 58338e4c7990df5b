# tuiedit/integrations/LinterBridge.py
"""LinterBridge.py
========================
Built-in, dependency-free diagnostics for the editor buffer.

The bridge runs a set of regex rules chosen by file extension on top of a
universal rule set (trailing whitespace, long lines, mixed indentation):

- Python (``.py``): PEP 8 line length, 4-space indentation, comma spacing,
  ``print`` calls.
- JavaScript / TypeScript (``.js``, ``.ts``): Biome-style rules such as
  ``console.log``, loose equality, ``var``, ``debugger``, double negation,
  empty blocks and missing semicolons.
- Rust (``.rs``): ``.unwrap()``, ``panic!`` and missing semicolons.
- JSON (``.json``): parse errors via the ``json`` module plus trailing commas.

Line numbers in ``LintIssue`` are 1-based, columns are 1-based codepoints.
Disabling the bridge makes ``lint`` return an empty list.
"""

import enum
import json
import logging
import re
from collections import Counter
from dataclasses import dataclass
from typing import Optional


logger = logging.getLogger(__name__)


class LintSeverity(enum.Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    HINT = "hint"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {
    LintSeverity.ERROR: 3,
    LintSeverity.WARNING: 2,
    LintSeverity.INFO: 1,
    LintSeverity.HINT: 0,
}


@dataclass(frozen=True)
class LintIssue:
    line: int
    column: int
    message: str
    severity: LintSeverity
    rule_name: str


# (rule_name, pattern, severity, message)
_JS_RULES = [
    ("biome/no-console-log", r"console\.log\s*\(", LintSeverity.WARNING,
     "Avoid console.log in production code"),
    ("biome/no-var", r"\bvar\s+", LintSeverity.ERROR,
     "Use 'let' or 'const' instead of 'var'"),
    ("biome/no-debugger", r"\bdebugger\s*;?", LintSeverity.ERROR,
     "Remove debugger statements"),
    ("biome/no-double-negation", r"!!\s*\w", LintSeverity.INFO,
     "Use Boolean() instead of double negation (!!)"),
    ("biome/no-empty-block", r"\{\s*\}", LintSeverity.WARNING,
     "Empty block statement"),
]

_RUST_UNWRAP = re.compile(r"\.unwrap\(\)")
_RUST_PANIC = re.compile(r"panic!\s*\(")
_RUST_SEMICOLON = re.compile(r"^\s*(println!|print!|return\s+[^;]+|let\s+.*=\s*[^;]+)\s*$")
_JS_LOOSE_EQ = re.compile(r"\s==\s")
_JS_STATEMENT = re.compile(r"^\s*[a-zA-Z_$].*[^;{}\s]\s*$")
_PY_COMMA = re.compile(r",[^\s]")
_PY_PRINT = re.compile(r"\bprint\s*\(")


class LinterBridge:
    """Runs the rule sets and summarizes the results.

    Args:
        enabled: Initial on/off state.
        max_line_length: Universal long-line threshold.
        python_max_line_length: PEP 8 threshold for ``.py`` files.
    """

    def __init__(
        self,
        enabled: bool = True,
        max_line_length: int = 100,
        python_max_line_length: int = 79,
    ) -> None:
        self.enabled = enabled
        self.max_line_length = max_line_length
        self.python_max_line_length = python_max_line_length
        self._js_rules = [
            (name, re.compile(pattern), severity, message)
            for name, pattern, severity, message in _JS_RULES
        ]

    def toggle(self) -> bool:
        self.enabled = not self.enabled
        logger.info("Linting %s", "enabled" if self.enabled else "disabled")
        return self.enabled

    def lint(self, content: str, filename: Optional[str] = None) -> list[LintIssue]:
        if not self.enabled:
            return []

        lines = content.splitlines()
        issues = self._lint_universal(lines)

        name = (filename or "").lower()
        try:
            if name.endswith(".py"):
                issues.extend(self._lint_python(lines))
            elif name.endswith((".js", ".ts")):
                issues.extend(self._lint_javascript(lines))
            elif name.endswith(".rs"):
                issues.extend(self._lint_rust(lines))
            elif name.endswith(".json"):
                issues.extend(self._lint_json(content, lines))
        except Exception:
            logger.exception("Language rules failed for %s; keeping universal results", filename)

        issues.sort(key=lambda issue: (issue.line, issue.column))
        return issues

    # --- rule sets ----------------------------------------------------------

    def _lint_universal(self, lines: list[str]) -> list[LintIssue]:
        issues: list[LintIssue] = []
        for number, line in enumerate(lines, start=1):
            if line.endswith((" ", "\t")):
                issues.append(LintIssue(
                    number, len(line.rstrip()) + 1, "Trailing whitespace",
                    LintSeverity.INFO, "trailing-whitespace",
                ))
            if len(line) > self.max_line_length:
                issues.append(LintIssue(
                    number, self.max_line_length + 1,
                    f"Line too long (>{self.max_line_length} characters)",
                    LintSeverity.WARNING, "long-line",
                ))
            if line.startswith(" ") and "\t" in line:
                issues.append(LintIssue(
                    number, 1, "Mixed indentation (tabs and spaces)",
                    LintSeverity.WARNING, "mixed-indentation",
                ))
        return issues

    def _lint_python(self, lines: list[str]) -> list[LintIssue]:
        issues: list[LintIssue] = []
        limit = self.python_max_line_length
        for number, line in enumerate(lines, start=1):
            if len(line) > limit:
                issues.append(LintIssue(
                    number, limit + 1, f"Line too long (PEP 8 recommends ≤{limit} characters)",
                    LintSeverity.INFO, "pep8-line-length",
                ))
            leading = len(line) - len(line.lstrip(" "))
            if line.startswith(" ") and leading % 4 != 0 and line.strip():
                issues.append(LintIssue(
                    number, 1, "PEP 8: Use 4 spaces per indentation level",
                    LintSeverity.WARNING, "pep8-indentation",
                ))
            match = _PY_COMMA.search(line)
            if match:
                issues.append(LintIssue(
                    number, match.start() + 2, "PEP 8: Missing whitespace after ','",
                    LintSeverity.INFO, "pep8-comma-spacing",
                ))
            match = _PY_PRINT.search(line)
            if match:
                issues.append(LintIssue(
                    number, match.start() + 1,
                    "Consider using logging instead of print for production code",
                    LintSeverity.HINT, "prefer-logging",
                ))
        return issues

    def _lint_javascript(self, lines: list[str]) -> list[LintIssue]:
        issues: list[LintIssue] = []
        for number, line in enumerate(lines, start=1):
            for name, regex, severity, message in self._js_rules:
                match = regex.search(line)
                if match:
                    issues.append(LintIssue(number, match.start() + 1, message, severity, name))

            match = _JS_LOOSE_EQ.search(line)
            if match and "===" not in line:
                issues.append(LintIssue(
                    number, match.start() + 1, "Use '===' instead of '==' for strict equality",
                    LintSeverity.ERROR, "biome/use-strict-equality",
                ))

            stripped = line.strip()
            if (
                _JS_STATEMENT.match(line)
                and not stripped.endswith(",")
                and not stripped.startswith(("//", "/*"))
            ):
                issues.append(LintIssue(
                    number, len(line) + 1, "Missing semicolon",
                    LintSeverity.WARNING, "biome/use-semicolons",
                ))
        return issues

    def _lint_rust(self, lines: list[str]) -> list[LintIssue]:
        issues: list[LintIssue] = []
        for number, line in enumerate(lines, start=1):
            for match in _RUST_UNWRAP.finditer(line):
                issues.append(LintIssue(
                    number, match.start() + 1,
                    "Avoid using .unwrap(), consider .expect() with a descriptive message",
                    LintSeverity.WARNING, "avoid-unwrap",
                ))
            stripped = line.strip()
            if _RUST_SEMICOLON.match(line) and not stripped.endswith(("{", ",")):
                issues.append(LintIssue(
                    number, len(line) + 1, "Missing semicolon",
                    LintSeverity.ERROR, "missing-semicolon",
                ))
            match = _RUST_PANIC.search(line)
            if match:
                issues.append(LintIssue(
                    number, match.start() + 1,
                    "Consider using Result<T, E> or expect() instead of panic!()",
                    LintSeverity.WARNING, "avoid-panic",
                ))
        return issues

    def _lint_json(self, content: str, lines: list[str]) -> list[LintIssue]:
        if not content.strip():
            return []
        try:
            json.loads(content)
        except json.JSONDecodeError as e:
            return [LintIssue(
                e.lineno, e.colno, f"JSON syntax error: {e.msg}",
                LintSeverity.ERROR, "json-syntax",
            )]

        issues: list[LintIssue] = []
        for number, line in enumerate(lines, start=1):
            if line.strip().endswith(",") and ("}" in line or "]" in line):
                issues.append(LintIssue(
                    number, line.rfind(",") + 1, "Trailing comma not allowed in JSON",
                    LintSeverity.ERROR, "no-trailing-comma",
                ))
        return issues

    # --- summaries ----------------------------------------------------------

    @staticmethod
    def issue_counts(issues: list[LintIssue]) -> dict[LintSeverity, int]:
        counts = Counter(issue.severity for issue in issues)
        return {severity: counts.get(severity, 0) for severity in LintSeverity}

    @staticmethod
    def markers_by_line(issues: list[LintIssue]) -> dict[int, LintSeverity]:
        """Most severe issue per 0-based document row."""
        markers: dict[int, LintSeverity] = {}
        for issue in issues:
            row = issue.line - 1
            current = markers.get(row)
            if current is None or issue.severity.rank > current.rank:
                markers[row] = issue.severity
        return markers
