"""Markup scanner for annotated review files.

Classifies every physical line of a review file on its own, without looking
at its neighbours. All structural interpretation (which comment belongs to
which line) happens later in the comment assembler.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

QUOTE_PREFIX = "> "
QUOTE_MARKER = ">"
SNIP_MARKERS = ("[...]", "[..]")


class TokenKind(Enum):
    """Classification of a review file line."""

    QUOTED = "quoted"
    BLANK = "blank"
    FREE_TEXT = "free_text"
    SNIP = "snip"


@dataclass(frozen=True)
class Token:
    """A classified line of the review file.

    Attributes:
        kind: What the line is
        text: Quoted diff text (prefix removed) or the raw free-text line
        line_number: 1-based line in the review file
    """

    kind: TokenKind
    text: str
    line_number: int

    @property
    def is_quoted(self) -> bool:
        return self.kind == TokenKind.QUOTED


def split_lines(text: str) -> list[str]:
    """Split text into lines on newline characters only.

    Diff content may contain form feeds and other characters that
    str.splitlines() would also treat as line breaks.
    """
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def classify_line(line: str, line_number: int) -> Token:
    """Classify a single review file line."""
    if line.startswith(QUOTE_PREFIX):
        return Token(TokenKind.QUOTED, line[len(QUOTE_PREFIX):], line_number)
    if line == QUOTE_MARKER:
        # Empty diff lines are written as a bare marker
        return Token(TokenKind.QUOTED, "", line_number)
    if not line.strip():
        return Token(TokenKind.BLANK, "", line_number)
    if line in SNIP_MARKERS:
        return Token(TokenKind.SNIP, line, line_number)
    return Token(TokenKind.FREE_TEXT, line, line_number)


def scan_document(contents: str) -> list[Token]:
    """Scan a review file into an ordered token stream.

    Args:
        contents: Full text of the annotated review file

    Returns:
        One token per line, in document order
    """
    return [
        classify_line(line.removesuffix("\r"), line_number)
        for line_number, line in enumerate(split_lines(contents), start=1)
    ]


def quote_diff(diff_content: str) -> str:
    """Render diff text as the quoted body of a review file."""
    quoted = [
        f"{QUOTE_PREFIX}{line}" if line else QUOTE_MARKER
        for line in split_lines(diff_content)
    ]
    return "\n".join(quoted) + "\n" if quoted else ""
