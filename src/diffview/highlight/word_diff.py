"""Word-level diff of a replaced line pair."""

import re
from dataclasses import dataclass
from enum import Enum

_WHITESPACE_SPLIT = re.compile(r"(\s+)")


class SegmentType(Enum):
    """Type of a word diff segment."""

    EQUAL = "equal"
    ADD = "add"
    DEL = "del"


@dataclass(frozen=True)
class WordDiffSegment:
    """A run of tokens sharing one edit operation."""

    type: SegmentType
    value: str

    def to_dict(self) -> dict:
        return {"type": self.type.value, "value": self.value}


def tokenize(text: str) -> list[str]:
    """Split text into words and whitespace runs.

    Joining the tokens gives back ``text`` exactly.
    """
    return [token for token in _WHITESPACE_SPLIT.split(text) if token]


def compute_word_diff(old_line: str, new_line: str) -> tuple[WordDiffSegment, ...]:
    """Compute a word-level diff between a deleted line and its replacement.

    Tokens are aligned with a longest-common-subsequence table. Backtracking
    from the end prefers additions on ties, so inside one changed region the
    deleted text comes before the added text.

    Args:
        old_line: Content of the deleted line.
        new_line: Content of the added line.

    Returns:
        Segments in order; ``equal`` and ``del`` values rebuild ``old_line``,
        ``equal`` and ``add`` values rebuild ``new_line``.
    """
    if old_line == new_line:
        if not old_line:
            return ()
        return (WordDiffSegment(SegmentType.EQUAL, old_line),)

    old_tokens = tokenize(old_line)
    new_tokens = tokenize(new_line)
    m = len(old_tokens)
    n = len(new_tokens)

    # lcs[i][j] is the LCS length of old_tokens[:i] and new_tokens[:j]
    lcs = [[0] * (n + 1) for _ in range(m + 1)]
    for i in range(1, m + 1):
        for j in range(1, n + 1):
            if old_tokens[i - 1] == new_tokens[j - 1]:
                lcs[i][j] = lcs[i - 1][j - 1] + 1
            else:
                lcs[i][j] = max(lcs[i - 1][j], lcs[i][j - 1])

    ops: list[tuple[SegmentType, str]] = []
    i, j = m, n
    while i > 0 or j > 0:
        if i > 0 and j > 0 and old_tokens[i - 1] == new_tokens[j - 1]:
            ops.append((SegmentType.EQUAL, old_tokens[i - 1]))
            i -= 1
            j -= 1
        elif j > 0 and (i == 0 or lcs[i][j - 1] >= lcs[i - 1][j]):
            ops.append((SegmentType.ADD, new_tokens[j - 1]))
            j -= 1
        else:
            ops.append((SegmentType.DEL, old_tokens[i - 1]))
            i -= 1
    ops.reverse()

    return _merge(ops)


def _merge(ops: list[tuple[SegmentType, str]]) -> tuple[WordDiffSegment, ...]:
    """Merge consecutive tokens of the same type into single segments."""
    merged: list[tuple[SegmentType, list[str]]] = []
    for seg_type, token in ops:
        if merged and merged[-1][0] == seg_type:
            merged[-1][1].append(token)
        else:
            merged.append((seg_type, [token]))
    return tuple(WordDiffSegment(seg_type, "".join(tokens)) for seg_type, tokens in merged)


def old_text(segments: tuple[WordDiffSegment, ...]) -> str:
    """Rebuild the old line from its segments."""
    return "".join(s.value for s in segments if s.type != SegmentType.ADD)


def new_text(segments: tuple[WordDiffSegment, ...]) -> str:
    """Rebuild the new line from its segments."""
    return "".join(s.value for s in segments if s.type != SegmentType.DEL)
