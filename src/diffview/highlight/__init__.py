"""Intra-line highlighting for diffview."""

from diffview.highlight.word_diff import (
    SegmentType,
    WordDiffSegment,
    compute_word_diff,
    new_text,
    old_text,
    tokenize,
)

__all__ = [
    "SegmentType",
    "WordDiffSegment",
    "compute_word_diff",
    "tokenize",
    "old_text",
    "new_text",
]
