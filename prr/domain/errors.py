"""Parse and validation errors raised while reading a review.

Every error aborts the whole operation: nothing is submitted when a review
file fails to parse. Each error carries the 1-based source line it was
detected on so the CLI can point the reviewer at it.
"""

from __future__ import annotations


class ParseError(Exception):
    """Base class for all review parse errors."""

    kind = "ParseError"

    def __init__(self, line_number: int, detail: str = ""):
        self.line_number = line_number
        self.detail = detail
        message = f"{self.kind} on line {line_number}"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class MalformedDiffError(ParseError):
    """Raised when diff text does not match the header/hunk grammar."""

    kind = "MalformedDiff"


class DuplicateFileCommentError(ParseError):
    """Raised when a file section carries more than one file-level comment."""

    kind = "DuplicateFileComment"


class UnterminatedSpanError(ParseError):
    """Raised when a span is still open at a hunk/file boundary or end of document."""

    kind = "UnterminatedSpan"


class MixedSideSpanError(ParseError):
    """Raised when a span covers both added and removed lines."""

    kind = "MixedSideSpan"


class ModifiedQuotedLineError(ParseError):
    """Raised when quoted diff content was edited, dropped, or added."""

    kind = "ModifiedQuotedLine"


class AmbiguousSnipResyncError(ParseError):
    """Raised when the lines after a snip cannot be placed in the canonical diff."""

    kind = "AmbiguousSnipResync"


class DuplicateDirectiveError(ParseError):
    """Raised when more than one @prr directive is present."""

    kind = "DuplicateDirective"


class MisplacedCommentError(ParseError):
    """Raised when a comment follows something it cannot attach to."""

    kind = "MisplacedComment"
