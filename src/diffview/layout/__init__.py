"""Layout helpers for diffview."""

from diffview.layout.split import SplitLine, pair_changes_for_split

__all__ = ["SplitLine", "pair_changes_for_split"]
