"""Tests for ReviewParser.

Tests cover:
- Parsing an untouched review file
- End-to-end parsing of review, file, inline, and span comments
- Accepting the canonical diff as raw text or a DiffModel
- Stopping after assembly for status checks
- Form feeds and carriage returns inside diff lines
"""

import unittest

from prr.domain.comments import Directive, InlineComment, SpanComment
from prr.domain.diff import DiffModel
from prr.domain.errors import ModifiedQuotedLineError, ParseError
from prr.domain.markup import quote_diff
from prr.services.review_parser import ReviewParser, parse_review

DIFF = "\n".join([
    "diff --git a/src/app.py b/src/app.py",
    "index 5f3a1c2..9b7e4d0 100644",
    "--- a/src/app.py",
    "+++ b/src/app.py",
    "@@ -4,5 +4,7 @@ import logging",
    " ",
    " def handler(event):",
    "-    data = event['body']",
    "+    data = event.get('body')",
    "+    if data is None:",
    "+        return None",
    "     return process(data)",
    " ",
]) + "\n"

FORM_FEED_DIFF = "\n".join([
    "diff --git a/src/util.py b/src/util.py",
    "--- a/src/util.py",
    "+++ b/src/util.py",
    "@@ -1,2 +1,4 @@",
    " import os",
    "+\x0c# section two",
    "+def helper():",
    " print(os.getcwd())",
]) + "\n"

# Content lines of a CRLF file keep their carriage returns in the diff
_DIFF_LINES = DIFF.split("\n")
CRLF_DIFF = "\n".join(_DIFF_LINES[:5] + [line + "\r" for line in _DIFF_LINES[5:-1]]) + "\n"


def annotate(document, after, text):
    """Insert comment lines after the first line equal to `after`."""
    lines = document.split("\n")
    index = lines.index(after) + 1
    return "\n".join(lines[:index] + text + lines[index:])


class TestReviewParser(unittest.TestCase):
    """Tests for ReviewParser.parse."""

    def setUp(self):
        self.parser = ReviewParser()
        self.document = quote_diff(DIFF)

    def test_untouched_review_is_empty(self):
        review = self.parser.parse(self.document, DIFF)
        self.assertTrue(review.is_empty)

    def test_empty_context_lines_round_trip(self):
        self.assertIn(">  \n", self.document)
        review = self.parser.parse(self.document.replace(">  \n", ">\n"), DIFF)
        self.assertTrue(review.is_empty)

    def test_full_review(self):
        document = "Thanks!\n@prr reject\n\n" + self.document
        document = annotate(document, "> diff --git a/src/app.py b/src/app.py", ["Add tests."])
        document = annotate(document, "> -    data = event['body']", [""])
        document = annotate(document, "> +        return None", ["Raise instead?"])

        review = self.parser.parse(document, DIFF)

        self.assertEqual(review.body, "Thanks!")
        self.assertEqual(review.directive, Directive.REJECT)
        self.assertEqual(review.event, "REQUEST_CHANGES")
        self.assertEqual(review.file_comments[0].body, "Add tests.")
        self.assertEqual(len(review.comments), 1)

        span = review.comments[0]
        self.assertIsInstance(span, SpanComment)
        self.assertEqual(span.body, "Raise instead?")
        self.assertEqual(len(span.anchors), 3)
        self.assertEqual((span.start_anchor.new_line, span.anchor.new_line), (6, 8))

    def test_mixed_span_reported_as_parse_error(self):
        document = annotate(self.document, ">  def handler(event):", [""])
        document = annotate(document, "> +        return None", ["Raise instead?"])

        with self.assertRaises(ParseError) as ctx:
            self.parser.parse(document, DIFF)
        self.assertEqual(ctx.exception.kind, "MixedSideSpan")

    def test_inline_comment_with_parsed_model(self):
        document = annotate(self.document, "> +    if data is None:", ["Use a guard clause."])
        review = self.parser.parse(document, DiffModel.from_diff_content(DIFF))

        comment = review.comments[0]
        self.assertIsInstance(comment, InlineComment)
        self.assertEqual(comment.file, "src/app.py")
        self.assertEqual(comment.anchor.new_line, 7)
        self.assertEqual(comment.anchor.position, 5)

    def test_drifted_diff_is_rejected(self):
        drifted = DIFF.replace("return None", "return {}")
        document = annotate(self.document, "> +    if data is None:", ["Use a guard clause."])

        with self.assertRaises(ModifiedQuotedLineError):
            self.parser.parse(document, drifted)

    def test_assemble_only(self):
        document = "Nice work\n" + self.document
        assembled = self.parser.assemble(document)

        self.assertTrue(assembled.has_comments)
        self.assertEqual(assembled.sections[0].path, "src/app.py")

    def test_parse_review_wrapper(self):
        document = annotate(self.document, "> +    if data is None:", ["nit"])
        self.assertEqual(parse_review(document, DIFF).comments[0].body, "nit")


class TestLineBreaks(unittest.TestCase):
    """Tests for diff content that contains line-break-like characters."""

    def setUp(self):
        self.parser = ReviewParser()

    def test_form_feed_line_stays_one_quoted_line(self):
        document = quote_diff(DiffModel.from_diff_content(FORM_FEED_DIFF).render())

        self.assertIn("> +\x0c# section two\n", document)
        self.assertTrue(self.parser.parse(document, FORM_FEED_DIFF).is_empty)

    def test_comment_on_form_feed_line(self):
        document = annotate(quote_diff(FORM_FEED_DIFF), "> +\x0c# section two", ["Drop the page break."])
        comment = self.parser.parse(document, FORM_FEED_DIFF).comments[0]

        self.assertEqual(comment.body, "Drop the page break.")
        self.assertEqual(comment.anchor.new_line, 2)
        self.assertEqual(comment.anchor.position, 2)

    def test_crlf_content_lines(self):
        document = quote_diff(CRLF_DIFF)
        self.assertTrue(self.parser.parse(document, CRLF_DIFF).is_empty)

        document = document.replace(
            "> +    if data is None:\r\n", "> +    if data is None:\r\nUse a guard clause.\n"
        )
        comment = self.parser.parse(document, CRLF_DIFF).comments[0]

        self.assertEqual(comment.body, "Use a guard clause.")
        self.assertEqual(comment.anchor.new_line, 7)
        self.assertEqual(comment.anchor.position, 5)


if __name__ == "__main__":
    unittest.main()
