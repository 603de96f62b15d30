"""Alignment engine.

Reconciles the reviewer's (possibly abbreviated) copy of the diff against a
freshly fetched canonical diff. Every retained quoted line is matched to a
canonical patch line by text, and the matched line's coordinates are copied
onto the anchors that reference it.

Snip markers let the reviewer drop any number of lines. After a snip, the
cursor advances to the first place where the run of retained lines up to the
next snip matches the canonical diff. A run with no match is an ambiguous
elision.

Files are independent: each section is aligned against its own FileDiff with
its own cursor, so nothing is shared between files except the read-only
canonical model.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from prr.domain.comments import (
    Anchor,
    AssembledReview,
    FileComment,
    FileSection,
    InlineComment,
    LineComment,
    ResolvedReview,
    Side,
    SpanComment,
)
from prr.domain.diff import DiffLineType, DiffModel, FileDiff, PatchLine
from prr.domain.errors import (
    AmbiguousSnipResyncError,
    MisplacedCommentError,
    MixedSideSpanError,
    ModifiedQuotedLineError,
    UnterminatedSpanError,
)
from prr.domain.markup import Token, TokenKind


@dataclass(frozen=True)
class _Segment:
    """A run of retained quoted lines, optionally introduced by a snip."""

    snip: Token | None
    pattern_indices: tuple[int, ...]


@dataclass(frozen=True)
class AlignedFile:
    """Comments of one file section with resolved anchors."""

    file_comment: FileComment | None
    comments: tuple[LineComment, ...]


class AlignmentEngine:
    """Resolves assembled comments against a canonical diff model."""

    # --------------------------------------------------------
    # Public API
    # --------------------------------------------------------

    def align(self, assembled: AssembledReview, canonical: DiffModel) -> ResolvedReview:
        """Resolve every anchor of an assembled review.

        Args:
            assembled: Output of the comment assembler
            canonical: DiffModel built from the diff as it is right now

        Returns:
            ResolvedReview with line, side, and position on every anchor

        Raises:
            ParseError: On the first mismatch between the review file and the diff
        """
        file_comments: list[FileComment] = []
        comments: list[LineComment] = []

        for section, file_diff in self.pair_sections(assembled, canonical):
            aligned = self.align_file(section, file_diff)
            if aligned.file_comment is not None:
                file_comments.append(aligned.file_comment)
            comments.extend(aligned.comments)

        return ResolvedReview(
            review_comment=assembled.review_comment,
            directive=assembled.directive,
            file_comments=tuple(file_comments),
            comments=tuple(comments),
        )

    def pair_sections(
        self, assembled: AssembledReview, canonical: DiffModel
    ) -> list[tuple[FileSection, FileDiff]]:
        """Match each file section to its canonical FileDiff, in order.

        Canonical files may only be skipped where a snip marker stands in
        for them: at the end of the previous section, or just above the
        first file.
        """
        files = canonical.files
        cursor = 0
        may_skip = assembled.leading_snip
        pairs: list[tuple[FileSection, FileDiff]] = []

        for section in assembled.sections:
            header = _normalize(section.header_text)
            index = next(
                (i for i in range(cursor, len(files)) if _normalize(files[i].header) == header),
                None,
            )
            if index is None:
                raise ModifiedQuotedLineError(
                    section.header_line_number, "file header not found in the current diff"
                )
            if index > cursor and not may_skip:
                raise ModifiedQuotedLineError(
                    section.header_line_number,
                    f"{index - cursor} file(s) removed above this one without a snip marker",
                )
            pairs.append((section, files[index]))
            cursor = index + 1
            may_skip = section.ends_with_snip

        if cursor < len(files) and not may_skip:
            line_number = assembled.sections[-1].end_line_number if assembled.sections else 1
            raise ModifiedQuotedLineError(
                line_number,
                f"{len(files) - cursor} trailing file(s) removed without a snip marker",
            )
        return pairs

    def align_file(self, section: FileSection, file_diff: FileDiff) -> AlignedFile:
        """Align one file section and resolve its comments."""
        canonical = file_diff.patch_lines()
        matches = self._match_pattern(section, canonical)
        path = file_diff.path

        file_comment = None
        if section.file_comment is not None:
            file_comment = replace(section.file_comment, file=path)

        comments: list[LineComment] = []
        for comment in section.comments:
            if isinstance(comment, SpanComment):
                comments.append(self._resolve_span(comment, canonical, matches, path))
            else:
                comments.append(self._resolve_inline(comment, canonical, matches, path))

        return AlignedFile(file_comment=file_comment, comments=tuple(comments))

    # --------------------------------------------------------
    # Line Matching
    # --------------------------------------------------------

    def _match_pattern(self, section: FileSection, canonical: list[PatchLine]) -> dict[int, int]:
        """Map each retained pattern index to a canonical patch line index."""
        segments = _split_segments(section.pattern)
        matches: dict[int, int] = {}
        cursor = 0

        for segment_index, segment in enumerate(segments):
            if segment.snip is None:
                for pattern_index in segment.pattern_indices:
                    token = section.pattern[pattern_index]
                    if cursor >= len(canonical):
                        raise ModifiedQuotedLineError(
                            token.line_number, "quoted line beyond the end of the file's diff"
                        )
                    if _normalize(canonical[cursor].text) != _normalize(token.text):
                        raise ModifiedQuotedLineError(
                            token.line_number, f"expected {canonical[cursor].text!r}"
                        )
                    matches[pattern_index] = cursor
                    cursor += 1
                continue

            if not segment.pattern_indices:
                continue

            is_final_run = segment_index == len(segments) - 1
            start = self._resync(section, canonical, segment, cursor, is_final_run)
            for offset, pattern_index in enumerate(segment.pattern_indices):
                matches[pattern_index] = start + offset
            cursor = start + len(segment.pattern_indices)

        if cursor < len(canonical) and not section.ends_with_snip:
            raise ModifiedQuotedLineError(
                section.end_line_number,
                f"{len(canonical) - cursor} quoted line(s) removed without a snip marker",
            )
        return matches

    def _resync(
        self,
        section: FileSection,
        canonical: list[PatchLine],
        segment: _Segment,
        cursor: int,
        is_final_run: bool,
    ) -> int:
        """Find where the run after a snip picks up again.

        The cursor advances to the first offset where the whole run matches.
        The final run must also end exactly at the end of the file's diff.
        """
        texts = [_normalize(section.pattern[i].text) for i in segment.pattern_indices]
        run_length = len(texts)

        if is_final_run:
            # Nothing may be elided after the last run unless another snip says so
            starts = [len(canonical) - run_length] if len(canonical) - run_length >= cursor else []
        else:
            starts = range(cursor, len(canonical) - run_length + 1)

        for start in starts:
            if all(_normalize(canonical[start + k].text) == text for k, text in enumerate(texts)):
                return start

        raise AmbiguousSnipResyncError(
            segment.snip.line_number, "the lines after this snip are not in the current diff"
        )

    # --------------------------------------------------------
    # Anchor Resolution
    # --------------------------------------------------------

    def _resolve_inline(
        self,
        comment: InlineComment,
        canonical: list[PatchLine],
        matches: dict[int, int],
        path: str,
    ) -> InlineComment:
        line = canonical[matches[comment.anchor.pattern_index]]
        if line.diff_line is None or not line.diff_line.is_addressable:
            raise MisplacedCommentError(
                comment.line_number, "comments must follow a changed or context line"
            )

        side = Side.LEFT if line.diff_line.line_type == DiffLineType.REMOVED else Side.RIGHT
        return replace(comment, anchor=_resolved(comment.anchor, line, path, side))

    def _resolve_span(
        self,
        comment: SpanComment,
        canonical: list[PatchLine],
        matches: dict[int, int],
        path: str,
    ) -> SpanComment:
        first = matches[comment.start_anchor.pattern_index]
        last = matches[comment.anchor.pattern_index]
        covered = canonical[first:last + 1]

        if covered[0].hunk_index != covered[-1].hunk_index:
            raise UnterminatedSpanError(
                comment.start_anchor.source_line, "span crosses a hunk boundary"
            )
        for endpoint in (covered[0], covered[-1]):
            if endpoint.diff_line is None or not endpoint.diff_line.is_addressable:
                raise MisplacedCommentError(
                    comment.line_number, "spans must start and end on changed or context lines"
                )

        side = _span_side(covered)
        if side == Side.BOTH:
            raise MixedSideSpanError(
                comment.line_number, "span covers both added and removed lines"
            )

        anchors = tuple(
            _resolved(anchor, canonical[matches[anchor.pattern_index]], path, side)
            for anchor in comment.anchors
            if canonical[matches[anchor.pattern_index]].diff_line.is_addressable
        )
        return replace(comment, anchors=anchors)


# ============================================================
# Private Helpers
# ============================================================


def _normalize(text: str) -> str:
    """Editors may strip trailing whitespace; compare without it."""
    return text.rstrip()


def _split_segments(pattern: tuple[Token, ...]) -> list[_Segment]:
    """Split a section pattern into runs of quoted lines separated by snips."""
    segments: list[_Segment] = []
    snip: Token | None = None
    run: list[int] = []

    for index, token in enumerate(pattern):
        if token.kind == TokenKind.SNIP:
            segments.append(_Segment(snip, tuple(run)))
            snip, run = token, []
        else:
            run.append(index)
    segments.append(_Segment(snip, tuple(run)))
    return segments


def _span_side(covered: list[PatchLine]) -> Side:
    """Pick the single side every line of a span can be addressed on."""
    line_types = {line.diff_line.line_type for line in covered if line.diff_line is not None}
    if DiffLineType.ADDED in line_types and DiffLineType.REMOVED in line_types:
        return Side.BOTH
    if DiffLineType.REMOVED in line_types:
        return Side.LEFT
    return Side.RIGHT


def _resolved(anchor: Anchor, line: PatchLine, path: str, side: Side) -> Anchor:
    return replace(
        anchor,
        file=path,
        side=side,
        old_line=line.diff_line.old_line_number,
        new_line=line.diff_line.new_line_number,
        position=line.position,
    )


def align_review(assembled: AssembledReview, canonical: DiffModel) -> ResolvedReview:
    """Convenience wrapper around AlignmentEngine.align()."""
    return AlignmentEngine().align(assembled, canonical)
