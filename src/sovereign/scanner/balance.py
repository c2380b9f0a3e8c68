"""Bracket balance checker — a small string/comment-aware lexer.

Used after cleaning to catch rewrites that left a file structurally broken.
It has no knowledge of vendor patterns and never raises: every problem is
reported as a :class:`ScanIssue`.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from sovereign.scanner.models import ScanIssue, Severity

_PAIRS = {"{": "}", "[": "]", "(": ")"}
_OPENERS_FOR = {close: open_ for open_, close in _PAIRS.items()}
_QUOTES = {"'", '"', "`"}

# Only the innermost unclosed brackets are worth reporting
MAX_UNCLOSED_REPORTED = 3


class _Comment(enum.Enum):
    NONE = 0
    LINE = 1
    BLOCK = 2


@dataclass
class Cursor:
    """Position in the input, advanced one character at a time."""

    line: int = 1
    column: int = 1
    offset: int = 0

    def advance(self, char: str) -> None:
        self.offset += 1
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1


@dataclass(frozen=True)
class _Open:
    char: str
    line: int
    column: int


def check_balance(content: str, file_path: str = "") -> list[ScanIssue]:
    """Report mismatched, orphaned and unclosed brackets in ``content``."""
    issues: list[ScanIssue] = []
    stack: list[_Open] = []
    cursor = Cursor()
    quote: str | None = None
    escaped = False
    comment = _Comment.NONE
    length = len(content)

    while cursor.offset < length:
        char = content[cursor.offset]
        nxt = content[cursor.offset + 1] if cursor.offset + 1 < length else ""

        if comment is _Comment.LINE:
            if char == "\n":
                comment = _Comment.NONE
        elif comment is _Comment.BLOCK:
            if char == "*" and nxt == "/":
                comment = _Comment.NONE
                cursor.advance(char)
                char = nxt
        elif quote is not None:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == quote:
                quote = None
            elif char == "\n" and quote != "`":
                # Plain string literals cannot span lines
                quote = None
        elif char == "/" and nxt == "/":
            comment = _Comment.LINE
        elif char == "/" and nxt == "*":
            comment = _Comment.BLOCK
            cursor.advance(char)
            char = nxt
        elif char in _QUOTES:
            quote = char
        elif char in _PAIRS:
            stack.append(_Open(char, cursor.line, cursor.column))
        elif char in _OPENERS_FOR:
            issue = _check_closer(stack, char, cursor, file_path)
            if issue is not None:
                issues.append(issue)

        cursor.advance(char)

    for opener in stack[-MAX_UNCLOSED_REPORTED:]:
        issues.append(
            _issue(
                file_path,
                opener.line,
                opener.column,
                opener.char,
                "unclosed bracket",
                f"'{opener.char}' is never closed",
            )
        )
    return issues


def _check_closer(
    stack: list[_Open], char: str, cursor: Cursor, file_path: str
) -> ScanIssue | None:
    if not stack:
        return _issue(
            file_path,
            cursor.line,
            cursor.column,
            char,
            "orphan closer",
            f"'{char}' has no matching '{_OPENERS_FOR[char]}'",
        )
    opener = stack.pop()
    expected = _PAIRS[opener.char]
    if expected != char:
        return _issue(
            file_path,
            cursor.line,
            cursor.column,
            char,
            "bracket mismatch",
            f"expected '{expected}' (opened at {opener.line}:{opener.column}) "
            f"but found '{char}'",
        )
    return None


def _issue(
    file_path: str, line: int, column: int, char: str, name: str, message: str
) -> ScanIssue:
    return ScanIssue(
        file=file_path,
        line=line,
        column=column,
        matched_text=char,
        severity=Severity.CRITICAL,
        pattern_name=name,
        suggestion="Review the rewritten code around this position",
        message=message,
    )
