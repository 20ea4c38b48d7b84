"""Rendered view types for diffview."""

from dataclasses import dataclass, field

from diffview.diff.types import Change, DiffStats, FileDiff
from diffview.highlight.word_diff import WordDiffSegment
from diffview.layout.split import SplitLine


@dataclass(frozen=True)
class RenderedLine:
    """A unified-view row, with word segments when the line was re-worded."""

    change: Change
    segments: tuple[WordDiffSegment, ...] = ()

    def to_dict(self) -> dict:
        result = self.change.to_dict()
        if self.segments:
            result["segments"] = [s.to_dict() for s in self.segments]
        return result


@dataclass(frozen=True)
class RenderedSplitLine:
    """A split-view row with optional word segments for each side."""

    line: SplitLine
    left_segments: tuple[WordDiffSegment, ...] = ()
    right_segments: tuple[WordDiffSegment, ...] = ()

    def to_dict(self) -> dict:
        result = self.line.to_dict()
        if self.left_segments:
            result["left_segments"] = [s.to_dict() for s in self.left_segments]
        if self.right_segments:
            result["right_segments"] = [s.to_dict() for s in self.right_segments]
        return result


@dataclass(frozen=True)
class HunkView:
    """A hunk laid out for one view mode.

    Only the field matching the view mode is populated.
    """

    header: str
    lines: tuple[RenderedLine, ...] = ()
    split_lines: tuple[RenderedSplitLine, ...] = ()
    split: bool = False

    def to_dict(self) -> dict:
        if self.split:
            return {"header": self.header, "rows": [r.to_dict() for r in self.split_lines]}
        return {"header": self.header, "lines": [r.to_dict() for r in self.lines]}


@dataclass(frozen=True)
class FileView:
    """A file diff with its hunks laid out."""

    file: FileDiff
    hunks: tuple[HunkView, ...] = ()

    def to_dict(self) -> dict:
        return {
            "old_name": self.file.old_name,
            "new_name": self.file.new_name,
            "is_new": self.file.is_new,
            "is_deleted": self.file.is_deleted,
            "is_renamed": self.file.is_renamed,
            "is_binary": self.file.is_binary,
            "stats": {
                "additions": self.file.stats.additions,
                "deletions": self.file.stats.deletions,
            },
            "hunks": [h.to_dict() for h in self.hunks],
        }


@dataclass
class DiffView:
    """Result of laying out a diff for display."""

    target: str
    mode: str
    files: list[FileView] = field(default_factory=list)
    stats: DiffStats = field(default_factory=DiffStats)

    @property
    def summary(self) -> dict:
        """Generate summary statistics."""
        return {
            "files_changed": self.stats.files_changed,
            "additions": self.stats.additions,
            "deletions": self.stats.deletions,
        }

    def to_dict(self) -> dict:
        return {
            "target": self.target,
            "mode": self.mode,
            "summary": self.summary,
            "files": [f.to_dict() for f in self.files],
        }
