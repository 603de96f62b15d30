"""Comment assembler.

Groups the scanner's token stream into the review comment, the directive,
and per-file sections holding file, inline, and span comments. A single
left-to-right pass with explicit state enforces the adjacency and boundary
rules of the review file format:

- Free text before the first quoted file header is the review comment;
  an `@prr approve|reject|comment` line in it is the directive.
- Free text in a file's header region is that file's comment.
- Free text right after a quoted line is an inline comment on that line.
- A blank line before a run of quoted lines opens a span that the next
  free-text block closes.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum

from prr.domain.comments import (
    Anchor,
    AssembledReview,
    Directive,
    FileComment,
    FileSection,
    InlineComment,
    LineComment,
    ReviewComment,
    SpanComment,
)
from prr.domain.diff import FILE_HEADER_PREFIX, HUNK_HEADER_PREFIX, parse_file_header
from prr.domain.errors import (
    DuplicateDirectiveError,
    DuplicateFileCommentError,
    MisplacedCommentError,
    ModifiedQuotedLineError,
    UnterminatedSpanError,
)
from prr.domain.markup import Token, TokenKind

_DIRECTIVE_RE = re.compile(r"^@prr (approve|reject|comment)$")


class _Phase(Enum):
    REVIEW = "review"
    FILE_PREAMBLE = "file_preamble"
    HUNK = "hunk"


@dataclass
class _SectionAccumulator:
    """Mutable accumulator for the file section currently being read."""

    path: str
    pattern: list[Token] = field(default_factory=list)
    file_comment: FileComment | None = None
    comments: list[LineComment] = field(default_factory=list)

    def anchor(self, pattern_index: int) -> Anchor:
        return Anchor(
            file=self.path,
            source_line=self.pattern[pattern_index].line_number,
            pattern_index=pattern_index,
        )

    def finish(self, end_line_number: int) -> FileSection:
        return FileSection(
            path=self.path,
            pattern=tuple(self.pattern),
            file_comment=self.file_comment,
            comments=tuple(self.comments),
            end_line_number=end_line_number,
        )


@dataclass
class _AssemblerState:
    """Everything the pass carries from one token to the next."""

    phase: _Phase = _Phase.REVIEW
    review_tokens: list[Token] = field(default_factory=list)
    directive: Directive | None = None
    sections: list[FileSection] = field(default_factory=list)
    section: _SectionAccumulator | None = None
    pending: list[Token] = field(default_factory=list)
    span_armed: bool = False
    span_start: int | None = None
    span_start_line: int = 0


class CommentAssembler:
    """Assembles scanned tokens into comments anchored to the review file."""

    # --------------------------------------------------------
    # Public API
    # --------------------------------------------------------

    def assemble(self, tokens: list[Token]) -> AssembledReview:
        """Group tokens into review, file, inline, and span comments.

        Args:
            tokens: Output of scan_document()

        Returns:
            AssembledReview whose anchors still only reference review file lines

        Raises:
            ParseError: On the first structural rule violation
        """
        state = _AssemblerState()
        for token in tokens:
            if state.phase == _Phase.REVIEW:
                self._handle_review_token(state, token)
            else:
                self._handle_file_token(state, token)

        last_line_number = tokens[-1].line_number if tokens else 0
        return self._finish(state, last_line_number)

    # --------------------------------------------------------
    # Review Region
    # --------------------------------------------------------

    def _handle_review_token(self, state: _AssemblerState, token: Token) -> None:
        if token.kind == TokenKind.QUOTED:
            if not token.text.startswith(FILE_HEADER_PREFIX):
                raise ModifiedQuotedLineError(
                    token.line_number, "quoted line before the first file header"
                )
            self._open_section(state, token)
            return

        if token.kind == TokenKind.FREE_TEXT:
            match = _DIRECTIVE_RE.match(token.text)
            if match:
                if state.directive is not None:
                    raise DuplicateDirectiveError(token.line_number, token.text)
                state.directive = Directive(match.group(1))
                return

        state.review_tokens.append(token)

    def _close_review(self, state: _AssemblerState) -> tuple[ReviewComment | None, bool]:
        """Build the review comment and report whether it ended with a snip."""
        tokens = list(state.review_tokens)
        while tokens and tokens[-1].kind == TokenKind.BLANK:
            tokens.pop()

        leading_snip = bool(tokens) and tokens[-1].kind == TokenKind.SNIP
        if leading_snip:
            tokens.pop()

        body = _join_body(tokens)
        return (ReviewComment(body) if body else None), leading_snip

    # --------------------------------------------------------
    # File Sections
    # --------------------------------------------------------

    def _handle_file_token(self, state: _AssemblerState, token: Token) -> None:
        if token.kind == TokenKind.FREE_TEXT:
            if not state.pending and state.span_start is None:
                # A blank between a quoted line and its comment is only a separator
                state.span_armed = False
            state.pending.append(token)

        elif token.kind == TokenKind.BLANK:
            if state.pending:
                state.pending.append(token)
            elif state.phase == _Phase.HUNK and state.span_start is None:
                state.span_armed = True

        elif token.kind == TokenKind.SNIP:
            self._flush_pending(state)
            state.section.pattern.append(token)

        else:
            self._handle_quoted_token(state, token)

    def _handle_quoted_token(self, state: _AssemblerState, token: Token) -> None:
        self._flush_pending(state)

        if token.text.startswith(FILE_HEADER_PREFIX):
            if state.span_start is not None:
                raise UnterminatedSpanError(
                    token.line_number, "span still open at the next file header"
                )
            state.sections.append(state.section.finish(token.line_number - 1))
            self._open_section(state, token)
            return

        if token.text.startswith(HUNK_HEADER_PREFIX):
            if state.span_start is not None:
                raise UnterminatedSpanError(
                    token.line_number, "span still open at the next hunk header"
                )
            state.span_armed = False
            state.phase = _Phase.HUNK
            state.section.pattern.append(token)
            return

        state.section.pattern.append(token)
        if state.phase == _Phase.HUNK and state.span_armed and state.span_start is None:
            state.span_start = len(state.section.pattern) - 1
            state.span_start_line = token.line_number
            state.span_armed = False

    def _open_section(self, state: _AssemblerState, token: Token) -> None:
        paths = parse_file_header(token.text)
        path = paths[1] if paths else ""
        state.section = _SectionAccumulator(path=path, pattern=[token])
        state.phase = _Phase.FILE_PREAMBLE
        state.span_armed = False

    def _flush_pending(self, state: _AssemblerState) -> None:
        """Commit the pending free-text block as a file, inline, or span comment."""
        if not state.pending:
            return

        text_tokens = state.pending
        state.pending = []
        line_number = text_tokens[0].line_number
        body = _join_body(text_tokens)
        section = state.section

        if state.phase == _Phase.FILE_PREAMBLE:
            if section.file_comment is not None:
                raise DuplicateFileCommentError(
                    line_number, f"{section.path} already has a file comment"
                )
            section.file_comment = FileComment(section.path, body, line_number)
            return

        if section.pattern[-1].kind == TokenKind.SNIP:
            raise MisplacedCommentError(line_number, "comment directly follows a snip marker")

        if state.span_start is not None:
            indices = [
                i
                for i in range(state.span_start, len(section.pattern))
                if section.pattern[i].is_quoted
            ]
            state.span_start = None
        else:
            indices = [len(section.pattern) - 1]

        if len(indices) > 1:
            anchors = tuple(section.anchor(i) for i in indices)
            section.comments.append(SpanComment(anchors, body, line_number))
        else:
            section.comments.append(InlineComment(section.anchor(indices[0]), body, line_number))

        if text_tokens[-1].kind == TokenKind.BLANK:
            state.span_armed = True

    # --------------------------------------------------------
    # End of Document
    # --------------------------------------------------------

    def _finish(self, state: _AssemblerState, last_line_number: int) -> AssembledReview:
        if state.phase == _Phase.REVIEW:
            review_comment, leading_snip = self._close_review(state)
            return AssembledReview(
                review_comment=review_comment,
                directive=state.directive,
                leading_snip=leading_snip,
            )

        self._flush_pending(state)
        if state.span_start is not None:
            raise UnterminatedSpanError(
                state.span_start_line, "span still open at end of review"
            )
        state.sections.append(state.section.finish(last_line_number))

        review_comment, leading_snip = self._close_review(state)
        return AssembledReview(
            review_comment=review_comment,
            directive=state.directive,
            sections=tuple(state.sections),
            leading_snip=leading_snip,
        )


def _join_body(tokens: list[Token]) -> str:
    """Join free-text and blank tokens, trimming blank lines at both ends."""
    return "\n".join(token.text for token in tokens).strip("\n")


def assemble_comments(tokens: list[Token]) -> AssembledReview:
    """Convenience wrapper around CommentAssembler.assemble()."""
    return CommentAssembler().assemble(tokens)
