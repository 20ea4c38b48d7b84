"""Unified diff parser for diffview.

The parser is deliberately permissive: any string produces a ``ParsedDiff``.
Unrecognised lines inside a hunk become context lines and a file section
without a hunk header simply has no hunks.
"""

import re
from pathlib import Path
from typing import Optional

from diffview.diff.types import (
    DEV_NULL,
    Change,
    DiffStats,
    FileDiff,
    FileStats,
    Hunk,
    HunkRange,
    LineKind,
    ParsedDiff,
)


class ParseError(Exception):
    """Error reading diff content."""

    pass


# Regex patterns for parsing
DIFF_GIT_HEADER = re.compile(r"^diff --git a/(.*) b/(.*)$")
OLD_FILE_HEADER = re.compile(r"^--- (.+?)(?:\t.*)?$")
NEW_FILE_HEADER = re.compile(r"^\+\+\+ (.+?)(?:\t.*)?$")
HUNK_HEADER = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")
BINARY_FILES = re.compile(r"^Binary files (.*) and (.*) differ$")
RENAME_FROM = re.compile(r"^rename from (.+)$")
RENAME_TO = re.compile(r"^rename to (.+)$")


def parse_hunk_header(line: str) -> Optional[HunkRange]:
    """Parse a hunk header like ``@@ -10,7 +10,8 @@ def foo`` into its ranges.

    Omitted lengths default to 1. Returns None when the line is not a hunk
    header.
    """
    match = HUNK_HEADER.match(line)
    if match is None:
        return None
    return HunkRange(
        old_start=int(match.group(1)),
        old_lines=int(match.group(2)) if match.group(2) is not None else 1,
        new_start=int(match.group(3)),
        new_lines=int(match.group(4)) if match.group(4) is not None else 1,
    )


def classify_line(line: str) -> LineKind:
    """Classify a single raw line of diff output, without any parser state."""
    if line.startswith("+") and not line.startswith("+++"):
        return LineKind.ADD
    if line.startswith("-") and not line.startswith("---"):
        return LineKind.DEL
    if line.startswith("@@"):
        return LineKind.HUNK
    if (
        line.startswith("diff --git")
        or line.startswith("index ")
        or line.startswith("---")
        or line.startswith("+++")
    ):
        return LineKind.META
    return LineKind.CTX


def _clean_path(path: str, prefix: str) -> str:
    """Strip quoting and the a/ or b/ prefix from a header path."""
    if len(path) >= 2 and path.startswith('"') and path.endswith('"'):
        path = path[1:-1]
    if path == DEV_NULL:
        return path
    if path.startswith(prefix):
        return path[len(prefix):]
    return path


class _HunkBuilder:
    """Accumulates the changes of one hunk while its lines are scanned."""

    def __init__(self, header: str, hunk_range: HunkRange) -> None:
        self.header = header
        self.range = hunk_range
        self.changes: list[Change] = []
        self.old_line = hunk_range.old_start
        self.new_line = hunk_range.new_start
        self.old_remaining = hunk_range.old_lines
        self.new_remaining = hunk_range.new_lines

    @property
    def exhausted(self) -> bool:
        return self.old_remaining <= 0 and self.new_remaining <= 0

    def accepts(self, line: str) -> bool:
        """Whether the line belongs to this hunk's body."""
        if HUNK_HEADER.match(line):
            return False
        if self.exhausted and (
            not line
            or line.startswith("--- ")
            or line.startswith("+++ ")
            or line.startswith("diff ")
        ):
            return False
        return True

    def feed(self, line: str) -> None:
        # "\ No newline at end of file" annotates the previous line
        if line.startswith("\\"):
            return
        if line.startswith("+"):
            self.changes.append(Change.add(line[1:], self.new_line))
            self.new_line += 1
            self.new_remaining -= 1
        elif line.startswith("-"):
            self.changes.append(Change.delete(line[1:], self.old_line))
            self.old_line += 1
            self.old_remaining -= 1
        else:
            content = line[1:] if line.startswith(" ") else line
            self.changes.append(Change.context(content, self.old_line, self.new_line))
            self.old_line += 1
            self.new_line += 1
            self.old_remaining -= 1
            self.new_remaining -= 1

    def build(self) -> Hunk:
        return Hunk(
            header=self.header,
            changes=tuple(self.changes),
            old_start=self.range.old_start,
            old_lines=self.range.old_lines,
            new_start=self.range.new_start,
            new_lines=self.range.new_lines,
        )


class _FileBuilder:
    """Accumulates the headers and hunks of one file section."""

    def __init__(self, old_name: str = "", new_name: str = "") -> None:
        self.old_name = old_name
        self.new_name = new_name
        self.is_new = False
        self.is_deleted = False
        self.is_binary = False
        self.saw_file_header = False
        self.hunks: list[Hunk] = []
        self.hunk: Optional[_HunkBuilder] = None

    @property
    def has_content(self) -> bool:
        return self.saw_file_header or bool(self.hunks) or self.hunk is not None

    def open_hunk(self, header: str, hunk_range: HunkRange) -> None:
        self.close_hunk()
        self.hunk = _HunkBuilder(header, hunk_range)

    def close_hunk(self) -> None:
        if self.hunk is not None:
            self.hunks.append(self.hunk.build())
            self.hunk = None

    def mark_new(self) -> None:
        self.is_new = True
        self.old_name = DEV_NULL

    def mark_deleted(self) -> None:
        self.is_deleted = True
        self.new_name = DEV_NULL

    def mark_binary(self) -> None:
        self.is_binary = True
        self.hunk = None
        self.hunks = []

    def header_line(self, line: str) -> None:
        """Apply one metadata line seen outside a hunk body."""
        if line.startswith("--- "):
            match = OLD_FILE_HEADER.match(line)
            self.saw_file_header = True
            if match:
                path = _clean_path(match.group(1), "a/")
                if path == DEV_NULL:
                    self.mark_new()
                elif not self.is_new:
                    self.old_name = path
            return
        if line.startswith("+++ "):
            match = NEW_FILE_HEADER.match(line)
            self.saw_file_header = True
            if match:
                path = _clean_path(match.group(1), "b/")
                if path == DEV_NULL:
                    self.mark_deleted()
                elif not self.is_deleted:
                    self.new_name = path
            return
        if line.startswith("new file mode"):
            self.mark_new()
            return
        if line.startswith("deleted file mode"):
            self.mark_deleted()
            return

        # A /dev/null side set by new/deleted markers is never overwritten
        rename_from = RENAME_FROM.match(line)
        if rename_from:
            if not self.is_new:
                self.old_name = rename_from.group(1)
            return
        rename_to = RENAME_TO.match(line)
        if rename_to:
            if not self.is_deleted:
                self.new_name = rename_to.group(1)
            return

        binary = BINARY_FILES.match(line)
        if binary:
            if _clean_path(binary.group(1), "a/") == DEV_NULL:
                self.mark_new()
            if _clean_path(binary.group(2), "b/") == DEV_NULL:
                self.mark_deleted()
            self.mark_binary()
            return
        if line.startswith("GIT binary patch"):
            self.mark_binary()
        # index, similarity and mode lines carry nothing we model

    def build(self) -> FileDiff:
        self.close_hunk()
        hunks = () if self.is_binary else tuple(self.hunks)
        additions = sum(h.additions for h in hunks)
        deletions = sum(h.deletions for h in hunks)
        is_renamed = (
            bool(self.old_name)
            and bool(self.new_name)
            and DEV_NULL not in (self.old_name, self.new_name)
            and self.old_name != self.new_name
        )
        return FileDiff(
            old_name=self.old_name,
            new_name=self.new_name,
            hunks=hunks,
            is_new=self.is_new,
            is_deleted=self.is_deleted,
            is_renamed=is_renamed,
            is_binary=self.is_binary,
            stats=FileStats(additions=additions, deletions=deletions),
        )


def parse_diff(content: str) -> ParsedDiff:
    """Parse unified diff content string.

    Handles multi-file ``git diff`` output as well as plain unified diffs
    that start each file with a ``---``/``+++`` pair. Never raises.

    Args:
        content: The unified diff content as a string.

    Returns:
        ParsedDiff containing all file changes and aggregate statistics.
    """
    if not content or not content.strip():
        return ParsedDiff()

    lines = content.split("\n")
    if lines[-1] == "":
        lines.pop()

    files: list[FileDiff] = []
    current: Optional[_FileBuilder] = None

    for i, raw_line in enumerate(lines):
        # Headers of CRLF patches are matched without the CR; bodies keep it
        line = raw_line[:-1] if raw_line.endswith("\r") else raw_line

        # diff --git header always starts a new file
        if line.startswith("diff --git"):
            if current is not None:
                files.append(current.build())
            git_match = DIFF_GIT_HEADER.match(line)
            if git_match:
                current = _FileBuilder(git_match.group(1), git_match.group(2))
            else:
                current = _FileBuilder()
            continue

        # Binary sections have no parseable body
        if current is not None and current.is_binary:
            continue

        if current is not None and current.hunk is not None and current.hunk.accepts(line):
            current.hunk.feed(raw_line)
            continue

        hunk_range = parse_hunk_header(line)
        if hunk_range is not None:
            # Hunks before any file header have nowhere to go
            if current is not None:
                current.open_hunk(line, hunk_range)
            continue

        # Traditional unified diff: a ---/+++ pair opens the next file
        if (
            line.startswith("--- ")
            and i + 1 < len(lines)
            and lines[i + 1].startswith("+++ ")
            and (current is None or current.has_content)
        ):
            if current is not None:
                files.append(current.build())
            current = _FileBuilder()

        if current is not None:
            current.close_hunk()
            current.header_line(line)

    if current is not None:
        files.append(current.build())

    return ParsedDiff(
        files=tuple(files),
        stats=DiffStats(
            files_changed=len(files),
            additions=sum(f.stats.additions for f in files),
            deletions=sum(f.stats.deletions for f in files),
        ),
    )


def parse_diff_file(path: str) -> ParsedDiff:
    """Parse diff from a file.

    Args:
        path: Path to the diff/patch file.

    Returns:
        ParsedDiff containing all file changes.

    Raises:
        ParseError: If the file cannot be read.
        FileNotFoundError: If the file does not exist.
    """
    filepath = Path(path)
    if not filepath.exists():
        raise FileNotFoundError(f"Diff file not found: {path}")

    try:
        content = filepath.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        try:
            content = filepath.read_text(encoding="latin-1")
        except Exception as e:
            raise ParseError(f"Cannot read diff file: {e}") from e
    except OSError as e:
        raise ParseError(f"Cannot read diff file: {e}") from e

    return parse_diff(content)
