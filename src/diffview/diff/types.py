"""Diff data structures for diffview."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

# Sentinel git uses for the missing side of an added or deleted file
DEV_NULL = "/dev/null"


class ChangeType(Enum):
    """Type of change in a diff hunk."""

    ADD = "add"
    DEL = "del"
    CTX = "ctx"


class LineKind(Enum):
    """Kind of a raw diff output line, classified without parser state."""

    ADD = "add"
    DEL = "del"
    HUNK = "hunk"
    META = "meta"
    CTX = "ctx"


@dataclass(frozen=True)
class Change:
    """A single line in a diff hunk.

    Additions carry only ``new_line_no``, deletions only ``old_line_no`` and
    context lines both. The constraint is checked on construction.
    """

    type: ChangeType
    content: str
    old_line_no: Optional[int] = None
    new_line_no: Optional[int] = None

    def __post_init__(self) -> None:
        has_old = self.old_line_no is not None
        has_new = self.new_line_no is not None
        if self.type == ChangeType.ADD and (has_old or not has_new):
            raise ValueError("add change requires only new_line_no")
        if self.type == ChangeType.DEL and (has_new or not has_old):
            raise ValueError("del change requires only old_line_no")
        if self.type == ChangeType.CTX and not (has_old and has_new):
            raise ValueError("ctx change requires both old_line_no and new_line_no")

    @classmethod
    def add(cls, content: str, new_line_no: int) -> "Change":
        return cls(ChangeType.ADD, content, new_line_no=new_line_no)

    @classmethod
    def delete(cls, content: str, old_line_no: int) -> "Change":
        return cls(ChangeType.DEL, content, old_line_no=old_line_no)

    @classmethod
    def context(cls, content: str, old_line_no: int, new_line_no: int) -> "Change":
        return cls(ChangeType.CTX, content, old_line_no=old_line_no, new_line_no=new_line_no)

    def to_dict(self) -> dict:
        """Convert change to dictionary."""
        result: dict = {"type": self.type.value, "content": self.content}
        if self.old_line_no is not None:
            result["old_line_no"] = self.old_line_no
        if self.new_line_no is not None:
            result["new_line_no"] = self.new_line_no
        return result


@dataclass(frozen=True)
class HunkRange:
    """Line ranges declared by a hunk header."""

    old_start: int
    old_lines: int
    new_start: int
    new_lines: int


@dataclass(frozen=True)
class Hunk:
    """A contiguous changed section in a file diff."""

    header: str
    changes: tuple[Change, ...]
    old_start: int = 0
    old_lines: int = 0
    new_start: int = 0
    new_lines: int = 0

    @property
    def additions(self) -> int:
        return sum(1 for c in self.changes if c.type == ChangeType.ADD)

    @property
    def deletions(self) -> int:
        return sum(1 for c in self.changes if c.type == ChangeType.DEL)

    def added_lines(self) -> set[int]:
        """Return set of added line numbers (in new file)."""
        return {c.new_line_no for c in self.changes if c.type == ChangeType.ADD and c.new_line_no is not None}

    def removed_lines(self) -> set[int]:
        """Return set of removed line numbers (in old file)."""
        return {c.old_line_no for c in self.changes if c.type == ChangeType.DEL and c.old_line_no is not None}

    def to_dict(self) -> dict:
        return {
            "header": self.header,
            "old_start": self.old_start,
            "old_lines": self.old_lines,
            "new_start": self.new_start,
            "new_lines": self.new_lines,
            "changes": [c.to_dict() for c in self.changes],
        }


@dataclass(frozen=True)
class FileStats:
    """Added and deleted line counts for one file."""

    additions: int = 0
    deletions: int = 0


@dataclass(frozen=True)
class DiffStats:
    """Totals over every file in a diff."""

    files_changed: int = 0
    additions: int = 0
    deletions: int = 0


@dataclass(frozen=True)
class FileDiff:
    """Changes to a single file."""

    old_name: str
    new_name: str
    hunks: tuple[Hunk, ...] = ()
    is_new: bool = False
    is_deleted: bool = False
    is_renamed: bool = False
    is_binary: bool = False
    stats: FileStats = field(default_factory=FileStats)

    def __post_init__(self) -> None:
        if self.is_binary and self.hunks:
            raise ValueError("binary file diff cannot have hunks")
        if self.is_new and self.old_name != DEV_NULL:
            raise ValueError(f"new file must have old_name {DEV_NULL}, got {self.old_name!r}")
        if self.is_deleted and self.new_name != DEV_NULL:
            raise ValueError(f"deleted file must have new_name {DEV_NULL}, got {self.new_name!r}")
        if self.is_renamed and (
            not self.old_name
            or not self.new_name
            or DEV_NULL in (self.old_name, self.new_name)
            or self.old_name == self.new_name
        ):
            raise ValueError(f"invalid rename {self.old_name!r} -> {self.new_name!r}")

    @property
    def path(self) -> str:
        """Return the current path (old_name for deleted files, else new_name)."""
        if self.is_deleted or self.new_name == DEV_NULL:
            return self.old_name
        return self.new_name

    def changed_lines(self) -> set[int]:
        """Return set of all changed line numbers in new file (added lines)."""
        result: set[int] = set()
        for hunk in self.hunks:
            result.update(hunk.added_lines())
        return result

    def to_dict(self) -> dict:
        return {
            "old_name": self.old_name,
            "new_name": self.new_name,
            "is_new": self.is_new,
            "is_deleted": self.is_deleted,
            "is_renamed": self.is_renamed,
            "is_binary": self.is_binary,
            "stats": {"additions": self.stats.additions, "deletions": self.stats.deletions},
            "hunks": [h.to_dict() for h in self.hunks],
        }


@dataclass(frozen=True)
class ParsedDiff:
    """A complete parsed diff."""

    files: tuple[FileDiff, ...] = ()
    stats: DiffStats = field(default_factory=DiffStats)

    def get_file(self, path: str) -> Optional[FileDiff]:
        """Get FileDiff by path (matches old_name or new_name)."""
        for file_diff in self.files:
            if file_diff.new_name == path or file_diff.old_name == path:
                return file_diff
        return None

    @property
    def changed_files(self) -> list[str]:
        """List of all changed file paths."""
        return [file_diff.path for file_diff in self.files]

    def to_dict(self) -> dict:
        return {
            "stats": {
                "files_changed": self.stats.files_changed,
                "additions": self.stats.additions,
                "deletions": self.stats.deletions,
            },
            "files": [f.to_dict() for f in self.files],
        }
