"""Row pairing for side-by-side (split) diff view."""

from dataclasses import dataclass
from typing import Optional, Sequence

from diffview.diff.types import Change, ChangeType


@dataclass(frozen=True)
class SplitLine:
    """One rendered row: old side on the left, new side on the right."""

    left: Optional[Change] = None
    right: Optional[Change] = None

    def __post_init__(self) -> None:
        if self.left is None and self.right is None:
            raise ValueError("SplitLine needs at least one side")

    @property
    def is_replacement(self) -> bool:
        """True for a deletion paired with its replacement addition."""
        return (
            self.left is not None
            and self.right is not None
            and self.left.type == ChangeType.DEL
            and self.right.type == ChangeType.ADD
        )

    def to_dict(self) -> dict:
        return {
            "left": self.left.to_dict() if self.left is not None else None,
            "right": self.right.to_dict() if self.right is not None else None,
        }


def _take_run(changes: Sequence[Change], start: int, change_type: ChangeType) -> list[Change]:
    """Return the maximal run of ``change_type`` beginning at ``start``."""
    end = start
    while end < len(changes) and changes[end].type == change_type:
        end += 1
    return list(changes[start:end])


def pair_changes_for_split(changes: Sequence[Change]) -> tuple[SplitLine, ...]:
    """Pair the changes of one hunk into side-by-side rows.

    Context lines appear on both sides. A deletion run directly followed by
    an addition run is paired row by row; leftover deletions come first,
    then leftover additions, each on its own side only. Lone deletion or
    addition runs produce one-sided rows.

    Args:
        changes: Changes of a single hunk, in document order.

    Returns:
        Rows in display order.
    """
    rows: list[SplitLine] = []
    i = 0

    while i < len(changes):
        change = changes[i]

        if change.type == ChangeType.CTX:
            rows.append(SplitLine(left=change, right=change))
            i += 1
            continue

        if change.type == ChangeType.DEL:
            dels = _take_run(changes, i, ChangeType.DEL)
            i += len(dels)
            adds = _take_run(changes, i, ChangeType.ADD)
            i += len(adds)

            paired = min(len(dels), len(adds))
            for left, right in zip(dels[:paired], adds[:paired]):
                rows.append(SplitLine(left=left, right=right))
            for left in dels[paired:]:
                rows.append(SplitLine(left=left))
            for right in adds[paired:]:
                rows.append(SplitLine(right=right))
            continue

        # Addition with no preceding deletion
        adds = _take_run(changes, i, ChangeType.ADD)
        i += len(adds)
        rows.extend(SplitLine(right=right) for right in adds)

    return tuple(rows)
