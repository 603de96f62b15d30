"""Domain models for review comments.

The comment assembler produces an AssembledReview whose anchors only know
where their quoted line sits in the review file. The alignment engine turns
it into a ResolvedReview whose anchors carry real diff coordinates.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from prr.domain.markup import Token, TokenKind


# ============================================================
# Enums
# ============================================================


class Side(Enum):
    """Side of the diff a comment is attached to."""

    LEFT = "LEFT"
    RIGHT = "RIGHT"
    BOTH = "BOTH"


class Directive(Enum):
    """Top-level vote extracted from an `@prr <vote>` line."""

    APPROVE = "approve"
    REJECT = "reject"
    COMMENT = "comment"

    @property
    def review_event(self) -> str:
        """The pull request review event this directive submits as."""
        return {
            Directive.APPROVE: "APPROVE",
            Directive.REJECT: "REQUEST_CHANGES",
            Directive.COMMENT: "COMMENT",
        }[self]


# ============================================================
# Comment Models
# ============================================================


@dataclass(frozen=True)
class Anchor:
    """Where an inline comment attaches.

    Before alignment only `file`, `source_line` and `pattern_index` are set.
    Alignment fills in the side and coordinates from the canonical diff.

    Attributes:
        file: Repository path of the commented file
        source_line: Line in the review file of the quoted diff line
        pattern_index: Index of that line in its file section's retained pattern
        side: LEFT for old-file lines, RIGHT for new-file lines
        old_line: Line number in the old file, if the line exists there
        new_line: Line number in the new file, if the line exists there
        position: Offset below the file's first hunk header
    """

    file: str
    source_line: int
    pattern_index: int
    side: Side | None = None
    old_line: int | None = None
    new_line: int | None = None
    position: int | None = None

    @property
    def line(self) -> int | None:
        """The line number on the anchor's side."""
        if self.side == Side.LEFT:
            return self.old_line
        return self.new_line


@dataclass(frozen=True)
class ReviewComment:
    """The overall review body written above the diff."""

    body: str


@dataclass(frozen=True)
class FileComment:
    """A comment on a whole file, written in the file's header region."""

    file: str
    body: str
    line_number: int


@dataclass(frozen=True)
class InlineComment:
    """A comment on a single diff line."""

    anchor: Anchor
    body: str
    line_number: int

    @property
    def file(self) -> str:
        return self.anchor.file


@dataclass(frozen=True)
class SpanComment:
    """A comment on a contiguous run of diff lines within one hunk.

    The last line of the run is the reported anchor; the first line is the
    start of the range.
    """

    anchors: tuple[Anchor, ...]
    body: str
    line_number: int

    @property
    def file(self) -> str:
        return self.anchors[-1].file

    @property
    def anchor(self) -> Anchor:
        return self.anchors[-1]

    @property
    def start_anchor(self) -> Anchor:
        return self.anchors[0]


LineComment = Union[InlineComment, SpanComment]


# ============================================================
# Review Models
# ============================================================


@dataclass(frozen=True)
class FileSection:
    """One file's part of the review file, as the reviewer left it.

    Attributes:
        path: File path taken from the quoted "diff --git" line
        pattern: Retained quoted lines and snip markers, in document order
        file_comment: File-level comment, if any
        comments: Inline and span comments, in document order
        end_line_number: Last review file line belonging to this section
    """

    path: str
    pattern: tuple[Token, ...]
    file_comment: FileComment | None = None
    comments: tuple[LineComment, ...] = ()
    end_line_number: int = 0

    @property
    def header_line_number(self) -> int:
        return self.pattern[0].line_number

    @property
    def header_text(self) -> str:
        return self.pattern[0].text

    @property
    def ends_with_snip(self) -> bool:
        return bool(self.pattern) and self.pattern[-1].kind == TokenKind.SNIP


@dataclass(frozen=True)
class AssembledReview:
    """Comments grouped by the assembler, anchored to the review file only."""

    review_comment: ReviewComment | None = None
    directive: Directive | None = None
    sections: tuple[FileSection, ...] = ()
    leading_snip: bool = False

    @property
    def has_comments(self) -> bool:
        """Whether the reviewer wrote anything at all."""
        return (
            self.review_comment is not None
            or self.directive is not None
            or any(s.file_comment is not None or s.comments for s in self.sections)
        )


@dataclass(frozen=True)
class ResolvedReview:
    """Final review with every anchor resolved against the canonical diff."""

    review_comment: ReviewComment | None = None
    directive: Directive | None = None
    file_comments: tuple[FileComment, ...] = ()
    comments: tuple[LineComment, ...] = ()

    @property
    def event(self) -> str:
        """Review event to submit; no directive means a plain comment."""
        return (self.directive or Directive.COMMENT).review_event

    @property
    def body(self) -> str:
        return self.review_comment.body if self.review_comment else ""

    @property
    def is_empty(self) -> bool:
        return (
            self.review_comment is None
            and self.directive is None
            and not self.file_comments
            and not self.comments
        )
