"""Text output formatter for diffview."""

from typing import Optional

from diffview.core.types import DiffView, FileView, RenderedLine, RenderedSplitLine
from diffview.diff.types import Change, ChangeType
from diffview.highlight.word_diff import SegmentType, WordDiffSegment
from diffview.output.base import Formatter

# ANSI color codes
RED = "\033[31m"
GREEN = "\033[32m"
CYAN = "\033[36m"
GRAY = "\033[90m"
REVERSE = "\033[7m"
RESET = "\033[0m"
BOLD = "\033[1m"

LINE_COLORS = {ChangeType.ADD: GREEN, ChangeType.DEL: RED, ChangeType.CTX: ""}
MARKERS = {ChangeType.ADD: "+", ChangeType.DEL: "-", ChangeType.CTX: " "}

# Plain-text word markers, as in `git diff --word-diff=plain`
WORD_MARKERS = {SegmentType.DEL: ("[-", "-]"), SegmentType.ADD: ("{+", "+}")}

SPLIT_COLUMN_WIDTH = 60


class TextFormatter(Formatter):
    """Human-readable text formatter for terminal output."""

    @property
    def name(self) -> str:
        return "text"

    def format(self, view: DiffView, color: bool = True) -> str:
        """Format a diff view as unified or side-by-side text.

        Args:
            view: The diff view to format.
            color: Whether to use ANSI colors. Without color, changed words
                are wrapped in ``[-...-]`` and ``{+...+}``.

        Returns:
            Formatted text output.
        """
        self._color = color
        lines: list[str] = []

        lines.append(self._paint(BOLD, "diffview"))
        if view.target:
            lines.append(f"Target: {view.target}")
        summary = view.summary
        lines.append(
            f"{summary['files_changed']} file(s) changed, "
            f"{self._paint(GREEN, '+' + str(summary['additions']))} "
            f"{self._paint(RED, '-' + str(summary['deletions']))}"
        )
        lines.append("")

        if not view.files:
            lines.append("No changes.")
            return "\n".join(lines)

        for file_view in view.files:
            lines.extend(self._format_file(file_view, split=view.mode == "split"))
            lines.append("")

        return "\n".join(lines).rstrip("\n")

    def _paint(self, code: str, text: str) -> str:
        if not self._color or not code:
            return text
        return f"{code}{text}{RESET}"

    def _format_file(self, file_view: FileView, split: bool) -> list[str]:
        file_diff = file_view.file
        lines = [self._paint(BOLD, self._file_title(file_view))]

        if file_diff.is_binary:
            lines.append("  Binary file not shown")
            return lines
        if not file_view.hunks:
            lines.append("  No content changes")
            return lines

        for hunk in file_view.hunks:
            lines.append(self._paint(CYAN, hunk.header))
            if split:
                lines.extend(self._format_split_row(row) for row in hunk.split_lines)
            else:
                lines.extend(self._format_unified_line(row) for row in hunk.lines)
        return lines

    def _file_title(self, file_view: FileView) -> str:
        file_diff = file_view.file
        stats = f"(+{file_diff.stats.additions} -{file_diff.stats.deletions})"
        if file_diff.is_renamed:
            title = f"{file_diff.old_name} -> {file_diff.new_name}"
        else:
            title = file_diff.path
        if file_diff.is_new:
            title += " [new]"
        elif file_diff.is_deleted:
            title += " [deleted]"
        if file_diff.is_binary:
            title += " [binary]"
        return f"{title} {stats}"

    def _format_unified_line(self, row: RenderedLine) -> str:
        change = row.change
        numbers = f"{_line_no(change.old_line_no)} {_line_no(change.new_line_no)}"
        content, _ = self._content(change, row.segments)
        marker = self._paint(LINE_COLORS[change.type], MARKERS[change.type])
        return f"{self._paint(GRAY, numbers)} {marker}{content}"

    def _format_split_row(self, row: RenderedSplitLine) -> str:
        left = row.line.left
        right = row.line.right

        if left is not None:
            left_text, left_width = self._content(left, row.left_segments)
            left_cell = f"{self._paint(GRAY, _line_no(left.old_line_no))} {left_text}"
        else:
            left_width = 0
            left_cell = f"{_line_no(None)} "
        padding = " " * max(SPLIT_COLUMN_WIDTH - left_width, 0)

        if right is not None:
            right_text, _ = self._content(right, row.right_segments)
            right_cell = f"{self._paint(GRAY, _line_no(right.new_line_no))} {right_text}"
        else:
            right_cell = ""

        return f"{left_cell}{padding} | {right_cell}".rstrip()

    def _content(
        self, change: Change, segments: tuple[WordDiffSegment, ...]
    ) -> tuple[str, int]:
        """Render a change's content, returning the text and its visible width."""
        if not segments:
            return self._paint(LINE_COLORS[change.type], change.content), len(change.content)

        # Old side shows removed words, new side shows added words
        hidden = SegmentType.ADD if change.type == ChangeType.DEL else SegmentType.DEL
        line_color = LINE_COLORS[change.type]
        parts: list[str] = []
        width = 0
        for segment in segments:
            if segment.type == hidden:
                continue
            if segment.type == SegmentType.EQUAL:
                parts.append(self._paint(line_color, segment.value))
                width += len(segment.value)
            elif self._color:
                parts.append(self._paint(line_color + REVERSE, segment.value))
                width += len(segment.value)
            else:
                start, end = WORD_MARKERS[segment.type]
                parts.append(f"{start}{segment.value}{end}")
                width += len(segment.value) + len(start) + len(end)
        return "".join(parts), width


def _line_no(number: Optional[int]) -> str:
    return f"{number:>5}" if number is not None else " " * 5
