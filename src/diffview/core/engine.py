"""Diff view engine for diffview."""

import sys
from pathlib import Path
from typing import Optional

from diffview.core.config import Config
from diffview.core.types import DiffView, FileView, HunkView, RenderedLine, RenderedSplitLine
from diffview.diff.parser import ParseError, parse_diff, parse_diff_file
from diffview.diff.types import Change, FileDiff, Hunk, ParsedDiff
from diffview.highlight.word_diff import WordDiffSegment, compute_word_diff
from diffview.layout.split import pair_changes_for_split

STDIN_TARGET = "-"


class EngineError(Exception):
    """Error loading or laying out a diff."""

    pass


class DiffViewEngine:
    """Parses diffs and lays them out for unified or split display."""

    def __init__(
        self,
        config: Config,
        verbose: bool = False,
        quiet: bool = False,
    ) -> None:
        """Initialize the engine.

        Args:
            config: Application configuration.
            verbose: Enable verbose output.
            quiet: Suppress progress output.
        """
        self.config = config
        self.verbose = verbose
        self.quiet = quiet

    def load(self, target: str, stdin_text: Optional[str] = None) -> ParsedDiff:
        """Parse a diff from a patch file, or from ``stdin_text`` when target is "-".

        Raises:
            EngineError: If the target is missing or unreadable.
        """
        if target == STDIN_TARGET:
            return parse_diff(stdin_text or "")

        target_path = Path(target)
        try:
            if not target_path.is_file():
                raise EngineError(f"Target not found: {target}")
            return parse_diff_file(str(target_path))
        except ParseError as e:
            raise EngineError(f"Failed to read diff: {e}") from e
        except FileNotFoundError as e:
            raise EngineError(str(e)) from e

    def view(self, target: str, stdin_text: Optional[str] = None) -> DiffView:
        """Load a diff and lay it out according to the configuration."""
        diff = self.load(target, stdin_text)

        if not diff.files:
            self._log("No changes to display")
        elif self.verbose:
            self._log(
                f"Parsed {diff.stats.files_changed} file(s): "
                f"+{diff.stats.additions} -{diff.stats.deletions}"
            )

        return self.build(diff, target)

    def build(self, diff: ParsedDiff, target: str = "") -> DiffView:
        """Lay out a parsed diff for the configured view mode."""
        files = [self._build_file(file_diff) for file_diff in diff.files]
        return DiffView(target=target, mode=self.config.mode, files=files, stats=diff.stats)

    def _build_file(self, file_diff: FileDiff) -> FileView:
        if file_diff.is_binary and self.verbose:
            self._log(f"  Binary file {file_diff.path}")
        if self.config.mode == "split":
            hunks = tuple(self._build_split_hunk(h) for h in file_diff.hunks)
        else:
            hunks = tuple(self._build_unified_hunk(h) for h in file_diff.hunks)
        return FileView(file=file_diff, hunks=hunks)

    def _build_split_hunk(self, hunk: Hunk) -> HunkView:
        rows: list[RenderedSplitLine] = []
        for line in pair_changes_for_split(hunk.changes):
            segments = ()
            if line.is_replacement:
                segments = self._word_diff(line.left, line.right)
            rows.append(
                RenderedSplitLine(line=line, left_segments=segments, right_segments=segments)
            )
        return HunkView(header=hunk.header, split_lines=tuple(rows), split=True)

    def _build_unified_hunk(self, hunk: Hunk) -> HunkView:
        # Pairing for word diff matches the split layout's del/add pairing
        segments: dict[Change, tuple[WordDiffSegment, ...]] = {}
        for line in pair_changes_for_split(hunk.changes):
            if line.is_replacement:
                pair_segments = self._word_diff(line.left, line.right)
                if pair_segments:
                    segments[line.left] = pair_segments
                    segments[line.right] = pair_segments

        lines = tuple(
            RenderedLine(change=change, segments=segments.get(change, ()))
            for change in hunk.changes
        )
        return HunkView(header=hunk.header, lines=lines)

    def _word_diff(self, old: Change, new: Change) -> tuple[WordDiffSegment, ...]:
        """Word diff for a replaced pair, or () to highlight whole lines."""
        if not self.config.word_diff:
            return ()
        limit = self.config.max_word_diff_length
        if len(old.content) > limit or len(new.content) > limit:
            if self.verbose:
                self._log(f"  Skipping word diff for line {old.old_line_no} (longer than {limit})")
            return ()
        return compute_word_diff(old.content, new.content)

    def _log(self, message: str) -> None:
        """Log a message to stderr if not in quiet mode."""
        if not self.quiet:
            print(message, file=sys.stderr)
