"""Tests for DiffModel parsing.

Tests cover:
- File and hunk structure of a multi-file diff
- Line number counters, including a hunk with unequal old/new lengths
- GitHub position numbering across hunks
- Renamed, added, and deleted file paths
- "\\ No newline at end of file" markers
- Rendering the model back to text
- Malformed diffs
"""

import unittest

from prr.domain.diff import DiffLineType, DiffModel, parse_file_header
from prr.domain.errors import MalformedDiffError

TWO_FILE_DIFF = "\n".join([
    "diff --git a/foo.py b/foo.py",
    "index 1111111..2222222 100644",
    "--- a/foo.py",
    "+++ b/foo.py",
    "@@ -1,3 +1,4 @@",
    " import os",
    "-import sys",
    "+import re",
    "+import json",
    " def main():",
    "@@ -10,3 +11,3 @@ def main():",
    "     x = 1",
    "-    y = 2",
    "+    y = 3",
    "     return x",
    "diff --git a/README.md b/README.md",
    "index 3333333..4444444 100644",
    "--- a/README.md",
    "+++ b/README.md",
    "@@ -1,2 +1,2 @@",
    " # Project",
    "-Old text",
    "+New text",
]) + "\n"


class TestDiffModelStructure(unittest.TestCase):
    """Tests for files and hunks parsed from a diff."""

    def setUp(self):
        self.model = DiffModel.from_diff_content(TWO_FILE_DIFF)

    def test_parses_every_file(self):
        self.assertEqual([f.path for f in self.model.files], ["foo.py", "README.md"])

    def test_keeps_header_lines(self):
        foo = self.model.files[0]
        self.assertEqual(foo.header, "diff --git a/foo.py b/foo.py")
        self.assertEqual(
            foo.header_lines,
            ("index 1111111..2222222 100644", "--- a/foo.py", "+++ b/foo.py"),
        )

    def test_parses_hunk_headers(self):
        hunks = self.model.files[0].hunks
        self.assertEqual(len(hunks), 2)
        self.assertEqual((hunks[1].old_start, hunks[1].old_length), (10, 3))
        self.assertEqual((hunks[1].new_start, hunks[1].new_length), (11, 3))
        self.assertTrue(hunks[1].raw_header.endswith("@@ def main():"))

    def test_assigns_line_numbers(self):
        lines = self.model.files[0].hunks[0].lines
        self.assertEqual(
            [(line.line_type, line.old_line_number, line.new_line_number) for line in lines],
            [
                (DiffLineType.CONTEXT, 1, 1),
                (DiffLineType.REMOVED, 2, None),
                (DiffLineType.ADDED, None, 2),
                (DiffLineType.ADDED, None, 3),
                (DiffLineType.CONTEXT, 3, 4),
            ],
        )

    def test_empty_diff(self):
        model = DiffModel.from_diff_content("")
        self.assertEqual(model.files, ())
        self.assertEqual(model.render(), "")


class TestLineCounters(unittest.TestCase):
    """Tests for old/new counters in a hunk that grows the file."""

    def test_counts_follow_header(self):
        diff = "\n".join([
            "diff --git a/lib.c b/lib.c",
            "--- a/lib.c",
            "+++ b/lib.c",
            "@@ -10,5 +10,7 @@",
            " a",
            " b",
            "+c",
            "+d",
            " e",
            "-f",
            "+g",
            " h",
        ])
        lines = DiffModel.from_diff_content(diff).files[0].hunks[0].lines

        self.assertEqual(lines[1].new_line_number, 11)
        self.assertEqual(lines[2].new_line_number, 12)
        self.assertEqual(lines[3].new_line_number, 13)
        self.assertEqual((lines[4].old_line_number, lines[4].new_line_number), (12, 14))
        self.assertEqual(lines[5].old_line_number, 13)
        self.assertEqual(lines[6].new_line_number, 15)
        self.assertEqual((lines[7].old_line_number, lines[7].new_line_number), (14, 16))

    def test_omitted_lengths_default_to_one(self):
        diff = "\n".join([
            "diff --git a/one b/one",
            "--- a/one",
            "+++ b/one",
            "@@ -3 +3 @@",
            "-old",
            "+new",
        ])
        hunk = DiffModel.from_diff_content(diff).files[0].hunks[0]
        self.assertEqual((hunk.old_length, hunk.new_length), (1, 1))
        self.assertEqual(hunk.lines[1].new_line_number, 3)


class TestPositions(unittest.TestCase):
    """Tests for patch line positions."""

    def test_first_hunk_header_is_position_zero(self):
        patch_lines = DiffModel.from_diff_content(TWO_FILE_DIFF).files[0].patch_lines()

        self.assertEqual([line.position for line in patch_lines[:4]], [None] * 4)
        self.assertEqual(patch_lines[4].text, "@@ -1,3 +1,4 @@")
        self.assertEqual(patch_lines[4].position, 0)
        self.assertIsNone(patch_lines[4].diff_line)

    def test_positions_continue_across_hunks(self):
        patch_lines = DiffModel.from_diff_content(TWO_FILE_DIFF).files[0].patch_lines()
        by_text = {line.text: line for line in patch_lines}

        self.assertEqual(by_text[" def main():"].position, 5)
        self.assertEqual(by_text["@@ -10,3 +11,3 @@ def main():"].position, 6)
        self.assertEqual(by_text["+    y = 3"].position, 9)
        self.assertEqual(by_text["+    y = 3"].hunk_index, 1)

    def test_positions_restart_per_file(self):
        readme = DiffModel.from_diff_content(TWO_FILE_DIFF).files[1].patch_lines()
        self.assertEqual(readme[-1].text, "+New text")
        self.assertEqual(readme[-1].position, 3)


class TestFilePaths(unittest.TestCase):
    """Tests for paths of renamed, new, and deleted files."""

    def test_rename(self):
        diff = "\n".join([
            "diff --git a/old/name.py b/new/name.py",
            "similarity index 100%",
            "rename from old/name.py",
            "rename to new/name.py",
        ])
        file_diff = DiffModel.from_diff_content(diff).files[0]

        self.assertEqual(file_diff.old_path, "old/name.py")
        self.assertEqual(file_diff.new_path, "new/name.py")
        self.assertEqual(file_diff.hunks, ())

    def test_new_file(self):
        diff = "\n".join([
            "diff --git a/added.txt b/added.txt",
            "new file mode 100644",
            "--- /dev/null",
            "+++ b/added.txt",
            "@@ -0,0 +1 @@",
            "+hello",
        ])
        file_diff = DiffModel.from_diff_content(diff).files[0]

        self.assertIsNone(file_diff.old_path)
        self.assertEqual(file_diff.path, "added.txt")
        self.assertEqual(file_diff.hunks[0].lines[0].new_line_number, 1)

    def test_deleted_file_uses_old_path(self):
        diff = "\n".join([
            "diff --git a/gone.txt b/gone.txt",
            "deleted file mode 100644",
            "--- a/gone.txt",
            "+++ /dev/null",
            "@@ -1 +0,0 @@",
            "-bye",
        ])
        file_diff = DiffModel.from_diff_content(diff).files[0]

        self.assertIsNone(file_diff.new_path)
        self.assertEqual(file_diff.path, "gone.txt")

    def test_parse_file_header(self):
        self.assertEqual(parse_file_header("diff --git a/x.py b/y.py"), ("x.py", "y.py"))
        self.assertIsNone(parse_file_header("diff --cc x.py"))


class TestNoNewlineMarker(unittest.TestCase):
    """Tests for "\\ No newline at end of file" lines."""

    DIFF = "\n".join([
        "diff --git a/f b/f",
        "--- a/f",
        "+++ b/f",
        "@@ -1 +1 @@",
        "-last",
        "\\ No newline at end of file",
        "+last",
    ]) + "\n"

    def test_marker_is_kept_without_counting(self):
        lines = DiffModel.from_diff_content(self.DIFF).files[0].hunks[0].lines

        self.assertEqual(len(lines), 3)
        self.assertEqual(lines[1].line_type, DiffLineType.NO_NEWLINE)
        self.assertFalse(lines[1].is_addressable)
        self.assertEqual(lines[2].new_line_number, 1)

    def test_marker_takes_a_position(self):
        patch_lines = DiffModel.from_diff_content(self.DIFF).files[0].patch_lines()
        self.assertEqual(patch_lines[-1].text, "+last")
        self.assertEqual(patch_lines[-1].position, 3)

    def test_trailing_marker_after_complete_hunk(self):
        diff = "\n".join([
            "diff --git a/f b/f",
            "--- a/f",
            "+++ b/f",
            "@@ -1 +1 @@",
            "-a",
            "+b",
            "\\ No newline at end of file",
        ])
        lines = DiffModel.from_diff_content(diff).files[0].hunks[0].lines
        self.assertEqual(lines[-1].line_type, DiffLineType.NO_NEWLINE)


class TestRender(unittest.TestCase):
    """Tests for re-emitting a model as text."""

    def test_round_trips_git_output(self):
        self.assertEqual(DiffModel.from_diff_content(TWO_FILE_DIFF).render(), TWO_FILE_DIFF)

    def test_render_is_stable(self):
        once = DiffModel.from_diff_content(TWO_FILE_DIFF).render()
        self.assertEqual(DiffModel.from_diff_content(once).render(), once)


class TestMalformedDiff(unittest.TestCase):
    """Tests for diffs that do not follow the grammar."""

    def assertMalformed(self, diff, line_number):
        with self.assertRaises(MalformedDiffError) as ctx:
            DiffModel.from_diff_content(diff)
        self.assertEqual(ctx.exception.line_number, line_number)

    def test_text_before_first_file(self):
        self.assertMalformed("garbage\ndiff --git a/x b/x\n", 1)

    def test_hunk_header_before_file(self):
        self.assertMalformed("@@ -1 +1 @@\n-a\n+b\n", 1)

    def test_unparseable_hunk_header(self):
        self.assertMalformed("diff --git a/x b/x\n@@ nonsense @@\n", 2)

    def test_hunk_shorter_than_header(self):
        diff = "diff --git a/x b/x\n@@ -1,3 +1,3 @@\n a\n@@ -9 +9 @@\n-b\n+c\n"
        self.assertMalformed(diff, 4)

    def test_diff_ends_inside_hunk(self):
        diff = "diff --git a/x b/x\n@@ -1,2 +1,2 @@\n a\n"
        self.assertMalformed(diff, 3)

    def test_extra_line_beyond_counts(self):
        diff = "diff --git a/x b/x\n@@ -1 +1 @@\n-a\n+b\n+c\n"
        self.assertMalformed(diff, 5)

    def test_added_line_when_new_count_exhausted(self):
        diff = "diff --git a/x b/x\n@@ -1,2 +1 @@\n+a\n+b\n"
        self.assertMalformed(diff, 4)

    def test_error_message_names_kind_and_line(self):
        with self.assertRaises(MalformedDiffError) as ctx:
            DiffModel.from_diff_content("garbage\n")
        self.assertTrue(str(ctx.exception).startswith("MalformedDiff on line 1"))


if __name__ == "__main__":
    unittest.main()
