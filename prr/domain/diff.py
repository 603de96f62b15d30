"""Domain models for unified diff parsing.

Parse-once pattern: raw diff text is parsed into immutable, coordinate-tagged
models at the boundary. The same model renders the review file handed to the
reviewer and, rebuilt from a freshly fetched diff, is the source of truth for
every line coordinate at submission time.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum

from prr.domain.errors import MalformedDiffError

FILE_HEADER_PREFIX = "diff --git "
HUNK_HEADER_PREFIX = "@@"
NO_NEWLINE_PREFIX = "\\"

_FILE_HEADER_RE = re.compile(r'^diff --git "?a/(.+?)"? "?b/(.+?)"?$')
_HUNK_HEADER_RE = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@(.*)$")


# ============================================================
# Domain Models
# ============================================================


class DiffLineType(Enum):
    """Type of line in a hunk body."""

    ADDED = "added"
    REMOVED = "removed"
    CONTEXT = "context"
    NO_NEWLINE = "no_newline"


_LINE_PREFIXES = {
    DiffLineType.ADDED: "+",
    DiffLineType.REMOVED: "-",
    DiffLineType.CONTEXT: " ",
    DiffLineType.NO_NEWLINE: NO_NEWLINE_PREFIX,
}


@dataclass(frozen=True)
class DiffLine:
    """A single hunk body line with its file coordinates.

    Attributes:
        line_type: Added, removed, context, or a "\\ No newline" marker
        content: The line content without its one-character prefix
        old_line_number: Line number in the old file (context and removed lines)
        new_line_number: Line number in the new file (context and added lines)
    """

    line_type: DiffLineType
    content: str
    old_line_number: int | None = None
    new_line_number: int | None = None

    @property
    def raw_line(self) -> str:
        """The line as it appears in the diff, prefix included."""
        return _LINE_PREFIXES[self.line_type] + self.content

    @property
    def is_addressable(self) -> bool:
        """Whether a review comment can be attached to this line."""
        return self.line_type != DiffLineType.NO_NEWLINE


@dataclass(frozen=True)
class Hunk:
    """A contiguous section of changes within a file, introduced by an @@ header."""

    raw_header: str
    old_start: int
    old_length: int
    new_start: int
    new_length: int
    lines: tuple[DiffLine, ...] = ()


@dataclass(frozen=True)
class PatchLine:
    """One line of a file's patch text as the alignment engine walks it.

    File header lines have no hunk, position, or diff line. Hunk headers
    have a hunk and position but no diff line.
    """

    text: str
    hunk_index: int | None = None
    position: int | None = None
    diff_line: DiffLine | None = None


@dataclass(frozen=True)
class FileDiff:
    """All hunks for one file, with the header lines that introduced them."""

    header: str
    old_path: str | None
    new_path: str | None
    header_lines: tuple[str, ...] = ()
    hunks: tuple[Hunk, ...] = ()

    @property
    def path(self) -> str:
        """Path comments attach to: the new path, or the old one for deletions."""
        return self.new_path or self.old_path or ""

    def patch_lines(self) -> list[PatchLine]:
        """Flatten the file into the addressable line sequence.

        Positions follow GitHub's convention: the first hunk header is
        position 0 and every later line, hunk headers included, adds one.
        """
        lines = [PatchLine(text=self.header)]
        lines.extend(PatchLine(text=header_line) for header_line in self.header_lines)

        position = -1
        for hunk_index, hunk in enumerate(self.hunks):
            position += 1
            lines.append(PatchLine(text=hunk.raw_header, hunk_index=hunk_index, position=position))
            for diff_line in hunk.lines:
                position += 1
                lines.append(
                    PatchLine(
                        text=diff_line.raw_line,
                        hunk_index=hunk_index,
                        position=position,
                        diff_line=diff_line,
                    )
                )
        return lines

    def render_lines(self) -> list[str]:
        """Return the file's diff text, one entry per line."""
        return [line.text for line in self.patch_lines()]


@dataclass(frozen=True)
class DiffModel:
    """A complete unified diff: an ordered sequence of file diffs.

    Use from_diff_content() to parse raw diff output.
    """

    files: tuple[FileDiff, ...] = ()

    # --------------------------------------------------------
    # Factory Methods
    # --------------------------------------------------------

    @classmethod
    def from_diff_content(cls, diff_content: str) -> DiffModel:
        """Parse raw unified diff text.

        Args:
            diff_content: Raw output from git diff or the pull request diff endpoint

        Returns:
            DiffModel with one FileDiff per "diff --git" section

        Raises:
            MalformedDiffError: If a header is unparseable, content appears
                outside a hunk, or a hunk body disagrees with its header counts
        """
        lines = diff_content.split("\n")
        if lines and lines[-1] == "":
            lines.pop()

        files: list[FileDiff] = []
        current: _FileAccumulator | None = None
        hunk: _HunkAccumulator | None = None

        for line_number, line in enumerate(lines, start=1):
            if hunk is not None and not hunk.is_complete:
                if line.startswith((FILE_HEADER_PREFIX, HUNK_HEADER_PREFIX)):
                    raise MalformedDiffError(
                        line_number, "hunk ended before its header line counts were reached"
                    )
                hunk.add_line(line, line_number)
                continue

            if line.startswith(NO_NEWLINE_PREFIX) and hunk is not None:
                hunk.add_line(line, line_number)

            elif line.startswith(FILE_HEADER_PREFIX):
                if current is not None:
                    files.append(current.finish(hunk))
                current = _FileAccumulator.from_header(line, line_number)
                hunk = None

            elif line.startswith(HUNK_HEADER_PREFIX):
                if current is None:
                    raise MalformedDiffError(line_number, "hunk header before any file header")
                if hunk is not None:
                    current.hunks.append(hunk.finish())
                hunk = _HunkAccumulator.from_header(line, line_number)

            elif not line.strip():
                continue

            elif current is None:
                raise MalformedDiffError(line_number, "text before the first file header")

            elif hunk is not None:
                raise MalformedDiffError(line_number, "content beyond the hunk's line counts")

            elif line.startswith(("+", "-", " ")) and not line.startswith(("--- ", "+++ ")):
                raise MalformedDiffError(line_number, "content line before any hunk header")

            else:
                current.header_lines.append(line)

        if hunk is not None and not hunk.is_complete:
            raise MalformedDiffError(len(lines), "diff ended inside a hunk")
        if current is not None:
            files.append(current.finish(hunk))

        return cls(files=tuple(files))

    # --------------------------------------------------------
    # Public API
    # --------------------------------------------------------

    def render(self) -> str:
        """Re-emit the model as unified diff text."""
        lines = [line for file_diff in self.files for line in file_diff.render_lines()]
        return "\n".join(lines) + "\n" if lines else ""


def parse_file_header(line: str) -> tuple[str, str] | None:
    """Extract (old_path, new_path) from a "diff --git a/X b/Y" line."""
    match = _FILE_HEADER_RE.match(line.rstrip())
    if not match:
        return None
    return match.group(1), match.group(2)


# ============================================================
# Private Helpers
# ============================================================


def _strip_header_path(value: str) -> str | None:
    """Turn the operand of a ---/+++ line into a repository path."""
    path = value.split("\t", 1)[0].strip().strip('"')
    if path == "/dev/null":
        return None
    if path.startswith(("a/", "b/")):
        return path[2:]
    return path


@dataclass
class _HunkAccumulator:
    """Mutable accumulator for a hunk whose body is still being read."""

    raw_header: str
    old_start: int
    old_length: int
    new_start: int
    new_length: int
    old_remaining: int
    new_remaining: int
    lines: list[DiffLine] = field(default_factory=list)

    @classmethod
    def from_header(cls, line: str, line_number: int) -> _HunkAccumulator:
        match = _HUNK_HEADER_RE.match(line)
        if not match:
            raise MalformedDiffError(line_number, f"unparseable hunk header: {line!r}")

        old_start = int(match.group(1))
        old_length = int(match.group(2)) if match.group(2) is not None else 1
        new_start = int(match.group(3))
        new_length = int(match.group(4)) if match.group(4) is not None else 1
        return cls(
            raw_header=line,
            old_start=old_start,
            old_length=old_length,
            new_start=new_start,
            new_length=new_length,
            old_remaining=old_length,
            new_remaining=new_length,
        )

    @property
    def is_complete(self) -> bool:
        return self.old_remaining == 0 and self.new_remaining == 0

    def add_line(self, line: str, line_number: int) -> None:
        old_line = self.old_start + self.old_length - self.old_remaining
        new_line = self.new_start + self.new_length - self.new_remaining
        prefix = line[:1]

        if prefix == NO_NEWLINE_PREFIX:
            self.lines.append(DiffLine(DiffLineType.NO_NEWLINE, line[1:]))
        elif prefix in ("", " ") and self.old_remaining and self.new_remaining:
            self.lines.append(DiffLine(DiffLineType.CONTEXT, line[1:], old_line, new_line))
            self.old_remaining -= 1
            self.new_remaining -= 1
        elif prefix == "-" and self.old_remaining:
            self.lines.append(DiffLine(DiffLineType.REMOVED, line[1:], old_line_number=old_line))
            self.old_remaining -= 1
        elif prefix == "+" and self.new_remaining:
            self.lines.append(DiffLine(DiffLineType.ADDED, line[1:], new_line_number=new_line))
            self.new_remaining -= 1
        else:
            raise MalformedDiffError(
                line_number, f"line does not fit hunk {self.raw_header!r}: {line!r}"
            )

    def finish(self) -> Hunk:
        return Hunk(
            raw_header=self.raw_header,
            old_start=self.old_start,
            old_length=self.old_length,
            new_start=self.new_start,
            new_length=self.new_length,
            lines=tuple(self.lines),
        )


@dataclass
class _FileAccumulator:
    """Mutable accumulator for the file section currently being read."""

    header: str
    old_path: str | None
    new_path: str | None
    header_lines: list[str] = field(default_factory=list)
    hunks: list[Hunk] = field(default_factory=list)

    @classmethod
    def from_header(cls, line: str, line_number: int) -> _FileAccumulator:
        paths = parse_file_header(line)
        if paths is None:
            raise MalformedDiffError(line_number, f"unparseable file header: {line!r}")
        return cls(header=line, old_path=paths[0], new_path=paths[1])

    def finish(self, hunk: _HunkAccumulator | None) -> FileDiff:
        if hunk is not None:
            self.hunks.append(hunk.finish())

        old_path, new_path = self.old_path, self.new_path
        for header_line in self.header_lines:
            if header_line.startswith("--- "):
                old_path = _strip_header_path(header_line[4:])
            elif header_line.startswith("+++ "):
                new_path = _strip_header_path(header_line[4:])

        return FileDiff(
            header=self.header,
            old_path=old_path,
            new_path=new_path,
            header_lines=tuple(self.header_lines),
            hunks=tuple(self.hunks),
        )
