"""Review parsing pipeline.

Runs the three stages that turn a reviewer's annotated file into postable
comments: scan -> assemble -> align. Only the last stage needs the canonical
diff, so callers that just want to know whether a review has comments (for
status reporting) can stop after assembly.
"""

from __future__ import annotations

from prr.domain.comments import AssembledReview, ResolvedReview
from prr.domain.diff import DiffModel
from prr.domain.markup import scan_document
from prr.services.alignment import AlignmentEngine
from prr.services.comment_assembler import CommentAssembler


class ReviewParser:
    """Parses annotated review files.

    Stages are injected so each can be exercised on its own.
    """

    def __init__(
        self,
        assembler: CommentAssembler | None = None,
        engine: AlignmentEngine | None = None,
    ):
        self.assembler = assembler or CommentAssembler()
        self.engine = engine or AlignmentEngine()

    def assemble(self, contents: str) -> AssembledReview:
        """Scan and assemble a review file without touching any diff."""
        return self.assembler.assemble(scan_document(contents))

    def parse(self, contents: str, canonical: DiffModel | str) -> ResolvedReview:
        """Parse a review file and resolve its anchors.

        Args:
            contents: The annotated review file
            canonical: The current diff, raw or already parsed

        Returns:
            ResolvedReview ready for submission

        Raises:
            ParseError: On the first problem found, in document order
        """
        if isinstance(canonical, str):
            canonical = DiffModel.from_diff_content(canonical)
        return self.engine.align(self.assemble(contents), canonical)


def parse_review(contents: str, canonical: DiffModel | str) -> ResolvedReview:
    """Convenience wrapper around ReviewParser.parse()."""
    return ReviewParser().parse(contents, canonical)
