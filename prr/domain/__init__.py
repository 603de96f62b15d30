"""Domain models for prr."""

from prr.domain.comments import (
    Anchor,
    AssembledReview,
    Directive,
    FileComment,
    FileSection,
    InlineComment,
    ResolvedReview,
    ReviewComment,
    Side,
    SpanComment,
)
from prr.domain.diff import DiffLine, DiffLineType, DiffModel, FileDiff, Hunk, PatchLine
from prr.domain.errors import (
    AmbiguousSnipResyncError,
    DuplicateDirectiveError,
    DuplicateFileCommentError,
    MalformedDiffError,
    MisplacedCommentError,
    MixedSideSpanError,
    ModifiedQuotedLineError,
    ParseError,
    UnterminatedSpanError,
)
from prr.domain.markup import Token, TokenKind
from prr.domain.review_metadata import PullRequestRef, ReviewMetadata, ReviewStatus

__all__ = [
    "AmbiguousSnipResyncError",
    "Anchor",
    "AssembledReview",
    "DiffLine",
    "DiffLineType",
    "DiffModel",
    "Directive",
    "DuplicateDirectiveError",
    "DuplicateFileCommentError",
    "FileComment",
    "FileDiff",
    "FileSection",
    "Hunk",
    "InlineComment",
    "MalformedDiffError",
    "MisplacedCommentError",
    "MixedSideSpanError",
    "ModifiedQuotedLineError",
    "ParseError",
    "PatchLine",
    "PullRequestRef",
    "ResolvedReview",
    "ReviewComment",
    "ReviewMetadata",
    "ReviewStatus",
    "Side",
    "SpanComment",
    "Token",
    "TokenKind",
    "UnterminatedSpanError",
]
