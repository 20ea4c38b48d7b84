"""Diff parsing module for diffview."""

from diffview.diff.parser import (
    ParseError,
    classify_line,
    parse_diff,
    parse_diff_file,
    parse_hunk_header,
)
from diffview.diff.types import (
    DEV_NULL,
    Change,
    ChangeType,
    DiffStats,
    FileDiff,
    FileStats,
    Hunk,
    HunkRange,
    LineKind,
    ParsedDiff,
)

__all__ = [
    "DEV_NULL",
    "ChangeType",
    "Change",
    "HunkRange",
    "Hunk",
    "FileStats",
    "DiffStats",
    "FileDiff",
    "ParsedDiff",
    "LineKind",
    "parse_diff",
    "parse_diff_file",
    "parse_hunk_header",
    "classify_line",
    "ParseError",
]
