"""Tests for diff parser."""

from pathlib import Path

import pytest

from diffview.diff.parser import (
    classify_line,
    parse_diff,
    parse_diff_file,
    parse_hunk_header,
)
from diffview.diff.types import DEV_NULL, Change, ChangeType, HunkRange, LineKind


FIXTURES_DIR = Path(__file__).parent / "fixtures" / "diffs"

WORKED_EXAMPLE = """diff --git a/foo.txt b/foo.txt
--- a/foo.txt
+++ b/foo.txt
@@ -1,2 +1,2 @@
-hello world
+hello there
 unchanged
"""


class TestParseDiff:
    """Tests for parse_diff function."""

    def test_parse_empty_diff(self):
        """Test parsing empty content."""
        result = parse_diff("")
        assert result.files == ()
        assert result.stats.files_changed == 0
        assert result.stats.additions == 0
        assert result.stats.deletions == 0

    def test_parse_whitespace_only(self):
        """Test parsing whitespace-only content."""
        result = parse_diff("   \n\n   ")
        assert len(result.files) == 0

    def test_worked_example(self):
        """Test the reference foo.txt diff end to end."""
        result = parse_diff(WORKED_EXAMPLE)

        assert len(result.files) == 1
        file_diff = result.files[0]
        assert file_diff.old_name == "foo.txt"
        assert file_diff.new_name == "foo.txt"
        assert not file_diff.is_new
        assert not file_diff.is_deleted
        assert not file_diff.is_renamed
        assert not file_diff.is_binary

        assert len(file_diff.hunks) == 1
        hunk = file_diff.hunks[0]
        assert hunk.header == "@@ -1,2 +1,2 @@"
        assert hunk.changes == (
            Change.delete("hello world", 1),
            Change.add("hello there", 1),
            Change.context("unchanged", 2, 2),
        )
        assert file_diff.stats.additions == 1
        assert file_diff.stats.deletions == 1

        assert result.stats.files_changed == 1
        assert result.stats.additions == 1
        assert result.stats.deletions == 1

    def test_missing_trailing_newline(self):
        """Test that input without a final newline parses the same."""
        assert parse_diff(WORKED_EXAMPLE.rstrip("\n")) == parse_diff(WORKED_EXAMPLE)

    def test_parse_simple_add(self):
        """Test parsing a diff with added lines."""
        content = (FIXTURES_DIR / "simple_add.patch").read_text()
        result = parse_diff(content)

        assert len(result.files) == 1
        file_diff = result.files[0]
        assert file_diff.path == "test.py"
        assert not file_diff.is_new
        assert not file_diff.is_deleted
        assert len(file_diff.hunks) == 1

        hunk = file_diff.hunks[0]
        added = [c for c in hunk.changes if c.type == ChangeType.ADD]
        assert len(added) == 2
        assert added[0].content == '    print("world")'
        assert added[1].content == "    return True"
        assert [c.new_line_no for c in added] == [3, 4]

    def test_parse_simple_delete(self):
        """Test parsing a diff with deleted lines."""
        content = (FIXTURES_DIR / "simple_delete.patch").read_text()
        result = parse_diff(content)

        hunk = result.files[0].hunks[0]
        removed = [c for c in hunk.changes if c.type == ChangeType.DEL]
        assert len(removed) == 2
        assert removed[0].content == '    print("world")'
        assert removed[1].content == "    return True"
        assert [c.old_line_no for c in removed] == [3, 4]
        assert all(c.new_line_no is None for c in removed)

    def test_parse_multi_file(self):
        """Test parsing a diff with multiple files."""
        content = (FIXTURES_DIR / "multi_file.patch").read_text()
        result = parse_diff(content)

        assert len(result.files) == 2
        assert result.changed_files == ["foo.py", "bar.py"]

        foo = result.get_file("foo.py")
        assert foo is not None
        assert foo.stats.additions == 2
        assert foo.stats.deletions == 1

        bar = result.get_file("bar.py")
        assert bar is not None
        assert len(bar.hunks) == 2
        assert bar.changed_lines() == {8, 21}

        assert result.stats.files_changed == 2
        assert result.stats.additions == 4
        assert result.stats.deletions == 2

    def test_line_counters_reset_per_hunk(self):
        """Test that each hunk starts counting from its own header."""
        content = (FIXTURES_DIR / "multi_file.patch").read_text()
        bar = parse_diff(content).get_file("bar.py")

        second = bar.hunks[1]
        assert second.header == "@@ -20,2 +21,2 @@ def baz():"
        assert second.changes == (
            Change.delete("    return old", 20),
            Change.add("    return new", 21),
            Change.context("    # end", 21, 22),
        )

    def test_parse_new_file(self):
        """Test parsing a diff creating a new file."""
        content = (FIXTURES_DIR / "new_file.patch").read_text()
        result = parse_diff(content)

        assert len(result.files) == 1
        file_diff = result.files[0]
        assert file_diff.is_new
        assert not file_diff.is_renamed
        assert file_diff.old_name == DEV_NULL
        assert file_diff.new_name == "newfile.py"
        assert file_diff.path == "newfile.py"

        hunk = file_diff.hunks[0]
        assert all(c.type == ChangeType.ADD for c in hunk.changes)
        assert len(hunk.changes) == 3
        assert hunk.old_start == 0
        assert hunk.old_lines == 0

    def test_parse_deleted_file(self):
        """Test parsing a diff deleting a file."""
        content = (FIXTURES_DIR / "deleted_file.patch").read_text()
        result = parse_diff(content)

        file_diff = result.files[0]
        assert file_diff.is_deleted
        assert not file_diff.is_renamed
        assert file_diff.old_name == "oldfile.py"
        assert file_diff.new_name == DEV_NULL
        assert file_diff.path == "oldfile.py"

        hunk = file_diff.hunks[0]
        assert all(c.type == ChangeType.DEL for c in hunk.changes)
        assert file_diff.stats.deletions == 2

    def test_parse_binary_file(self):
        """Test parsing a diff with binary files."""
        content = (FIXTURES_DIR / "binary.patch").read_text()
        result = parse_diff(content)

        assert len(result.files) == 1
        file_diff = result.files[0]
        assert file_diff.is_binary
        assert file_diff.path == "image.png"
        assert file_diff.hunks == ()

    def test_binary_new_file(self):
        """Test that a binary file added from nothing is marked new."""
        content = """diff --git a/logo.png b/logo.png
new file mode 100644
index 0000000..89abcde
Binary files /dev/null and b/logo.png differ
"""
        file_diff = parse_diff(content).files[0]
        assert file_diff.is_binary
        assert file_diff.is_new
        assert file_diff.new_name == "logo.png"

    def test_binary_section_does_not_swallow_next_file(self):
        """Test that parsing resumes at the next file after a binary one."""
        content = (FIXTURES_DIR / "binary.patch").read_text() + WORKED_EXAMPLE
        result = parse_diff(content)

        assert len(result.files) == 2
        assert result.files[0].is_binary
        assert result.files[1].old_name == "foo.txt"
        assert len(result.files[1].hunks) == 1

    def test_crlf_binary_header(self):
        """Test that CRLF line endings do not hide binary or name headers."""
        content = "diff --git a/x.png b/x.png\r\nBinary files a/x.png and b/x.png differ\r\n"
        file_diff = parse_diff(content).files[0]

        assert file_diff.is_binary
        assert file_diff.new_name == "x.png"
        assert not file_diff.is_renamed

    def test_parse_crlf_patch(self):
        """Test parsing a patch saved with CRLF line endings."""
        content = (FIXTURES_DIR / "crlf.patch").read_bytes().decode("utf-8")
        result = parse_diff(content)

        assert len(result.files) == 2
        binary, text = result.files
        assert binary.is_binary
        assert binary.old_name == binary.new_name == "logo.png"
        assert not binary.is_renamed

        assert text.old_name == text.new_name == "notes.txt"
        assert not text.is_renamed
        hunk = text.hunks[0]
        assert hunk.header == "@@ -1,2 +1,2 @@ intro"
        # Body content is kept byte for byte
        assert hunk.changes == (
            Change.delete("old line\r", 1),
            Change.add("new line\r", 1),
            Change.context("keep\r", 2, 2),
        )
        assert result.stats.additions == 1
        assert result.stats.deletions == 1

    def test_new_file_name_not_overwritten_by_old_header(self):
        """Test that a --- a/x after new file mode keeps /dev/null."""
        content = """diff --git a/x b/x
new file mode 100644
--- a/x
+++ b/x
@@ -0,0 +1 @@
+hello
"""
        file_diff = parse_diff(content).files[0]
        assert file_diff.is_new
        assert file_diff.old_name == DEV_NULL
        assert file_diff.new_name == "x"
        assert not file_diff.is_renamed

    def test_new_file_name_not_overwritten_by_rename(self):
        """Test that rename from after --- /dev/null keeps /dev/null."""
        content = """--- /dev/null
+++ b/x
rename from q
@@ -0,0 +1 @@
+hello
"""
        file_diff = parse_diff(content).files[0]
        assert file_diff.is_new
        assert file_diff.old_name == DEV_NULL
        assert not file_diff.is_renamed

    def test_deleted_file_name_not_overwritten(self):
        """Test that new-side headers after deleted file mode keep /dev/null."""
        content = """diff --git a/x b/x
deleted file mode 100644
rename to y
+++ b/x
"""
        file_diff = parse_diff(content).files[0]
        assert file_diff.is_deleted
        assert file_diff.new_name == DEV_NULL
        assert file_diff.path == "x"
        assert not file_diff.is_renamed

    def test_parse_rename(self):
        """Test parsing a renamed file with content changes."""
        content = (FIXTURES_DIR / "rename.patch").read_text()
        file_diff = parse_diff(content).files[0]

        assert file_diff.is_renamed
        assert file_diff.old_name == "old_name.py"
        assert file_diff.new_name == "new_name.py"
        assert len(file_diff.hunks) == 1

    def test_pure_rename_has_no_hunks(self):
        """Test a rename without content changes."""
        content = """diff --git a/docs/a.md b/docs/b.md
similarity index 100%
rename from docs/a.md
rename to docs/b.md
"""
        file_diff = parse_diff(content).files[0]
        assert file_diff.is_renamed
        assert file_diff.old_name == "docs/a.md"
        assert file_diff.new_name == "docs/b.md"
        assert file_diff.hunks == ()

    def test_mode_change_has_no_hunks(self):
        """Test a file section with only a mode change."""
        content = """diff --git a/run.sh b/run.sh
old mode 100644
new mode 100755
"""
        file_diff = parse_diff(content).files[0]
        assert file_diff.hunks == ()
        assert not file_diff.is_renamed
        assert file_diff.stats.additions == 0

    def test_no_newline_marker_is_discarded(self):
        """Test that the no-newline annotation is not a content line."""
        content = (FIXTURES_DIR / "no_newline.patch").read_text()
        hunk = parse_diff(content).files[0].hunks[0]

        assert hunk.changes == (
            Change.context("first", 1, 1),
            Change.delete("last", 2),
            Change.add("last line", 2),
        )

    def test_hunk_count_one_omitted(self):
        """Test parsing hunk header where count of 1 is omitted."""
        content = """diff --git a/test.py b/test.py
--- a/test.py
+++ b/test.py
@@ -5 +5,2 @@
 existing
+added
"""
        hunk = parse_diff(content).files[0].hunks[0]
        assert hunk.old_lines == 1
        assert hunk.new_lines == 2
        assert hunk.changes[1] == Change.add("added", 6)

    def test_unrecognized_line_becomes_context(self):
        """Test that garbage inside a hunk defaults to context."""
        content = """diff --git a/a.txt b/a.txt
--- a/a.txt
+++ b/a.txt
@@ -1,3 +1,3 @@
 one
garbage
-two
+2
"""
        hunk = parse_diff(content).files[0].hunks[0]
        assert hunk.changes[1] == Change.context("garbage", 2, 2)
        assert hunk.changes[2] == Change.delete("two", 3)
        assert hunk.changes[3] == Change.add("2", 3)

    def test_blank_context_line(self):
        """Test a context line whose leading space was stripped."""
        content = """diff --git a/a.txt b/a.txt
--- a/a.txt
+++ b/a.txt
@@ -1,3 +1,3 @@
 one

-three
+3
"""
        hunk = parse_diff(content).files[0].hunks[0]
        assert hunk.changes[1] == Change.context("", 2, 2)

    def test_triple_dash_content_inside_hunk(self):
        """Test that a removed line starting with '--' is still a deletion."""
        content = """diff --git a/q.sql b/q.sql
--- a/q.sql
+++ b/q.sql
@@ -1,2 +1,2 @@
--- old comment
+-- new comment
 SELECT 1;
"""
        hunk = parse_diff(content).files[0].hunks[0]
        assert hunk.changes[0] == Change.delete("-- old comment", 1)
        assert hunk.changes[1] == Change.add("-- new comment", 1)

    def test_file_without_hunk_header(self):
        """Test that a truncated file section yields no hunks."""
        content = """diff --git a/a.txt b/a.txt
--- a/a.txt
+++ b/a.txt
diff --git a/b.txt b/b.txt
--- a/b.txt
+++ b/b.txt
@@ -1 +1 @@
-b
+B
"""
        result = parse_diff(content)
        assert len(result.files) == 2
        assert result.files[0].hunks == ()
        assert result.files[1].stats.additions == 1

    def test_lines_before_any_file_are_ignored(self):
        """Test that preamble text such as a commit message is skipped."""
        content = "commit abc123\nAuthor: someone\n\n    Fix things\n\n" + WORKED_EXAMPLE
        result = parse_diff(content)
        assert len(result.files) == 1
        assert result.stats.additions == 1

    def test_parse_inline_diff(self):
        """Test parsing a diff without git header (traditional unified diff)."""
        content = """--- a/test.py
+++ b/test.py
@@ -1,3 +1,4 @@
 line1
 line2
+line3
 line4
"""
        result = parse_diff(content)
        assert len(result.files) == 1
        assert result.files[0].path == "test.py"
        assert result.stats.additions == 1

    def test_parse_inline_multi_file(self):
        """Test traditional unified diffs with several files."""
        content = """--- a/one.txt\t2024-01-01 10:00:00
+++ b/one.txt\t2024-01-02 10:00:00
@@ -1 +1 @@
-a
+b
--- a/two.txt
+++ b/two.txt
@@ -1 +1,2 @@
 c
+d
"""
        result = parse_diff(content)
        assert result.changed_files == ["one.txt", "two.txt"]
        assert result.files[0].hunks[0].changes == (
            Change.delete("a", 1),
            Change.add("b", 1),
        )

    def test_stats_match_change_counts(self):
        """Test that stats equal the number of add/del changes."""
        content = (FIXTURES_DIR / "multi_file.patch").read_text()
        result = parse_diff(content)

        changes = [c for f in result.files for h in f.hunks for c in h.changes]
        assert result.stats.additions == sum(1 for c in changes if c.type == ChangeType.ADD)
        assert result.stats.deletions == sum(1 for c in changes if c.type == ChangeType.DEL)

    def test_changes_reproduce_prefixed_lines(self):
        """Test that add/del contents match the input's +/- lines in order."""
        content = (FIXTURES_DIR / "simple_add.patch").read_text()
        hunk = parse_diff(content).files[0].hunks[0]

        body = content.split("@@\n", 1)[1].splitlines()
        expected = [(line[0], line[1:]) for line in body if line[:1] in ("+", "-")]
        actual = [
            ("+" if c.type == ChangeType.ADD else "-", c.content)
            for c in hunk.changes
            if c.type != ChangeType.CTX
        ]
        assert actual == expected


class TestParseDiffFile:
    """Tests for parse_diff_file function."""

    def test_parse_existing_file(self):
        """Test parsing an existing diff file."""
        path = FIXTURES_DIR / "simple_add.patch"
        result = parse_diff_file(str(path))
        assert len(result.files) == 1

    def test_parse_nonexistent_file(self):
        """Test parsing a file that doesn't exist."""
        with pytest.raises(FileNotFoundError):
            parse_diff_file("/nonexistent/path/to/file.patch")

    def test_parse_latin1_file(self, tmp_path):
        """Test that non-UTF-8 patches fall back to latin-1."""
        path = tmp_path / "latin.patch"
        path.write_bytes(WORKED_EXAMPLE.replace("there", "th\xe9re").encode("latin-1"))
        result = parse_diff_file(str(path))
        assert result.files[0].hunks[0].changes[1].content == "hello th\xe9re"


class TestParseHunkHeader:
    """Tests for parse_hunk_header."""

    def test_full_header(self):
        assert parse_hunk_header("@@ -10,7 +12,8 @@ def foo():") == HunkRange(10, 7, 12, 8)

    def test_omitted_lengths_default_to_one(self):
        assert parse_hunk_header("@@ -3 +4 @@") == HunkRange(3, 1, 4, 1)

    def test_not_a_header(self):
        assert parse_hunk_header("@@ nonsense @@") is None
        assert parse_hunk_header(" context") is None


class TestClassifyLine:
    """Tests for classify_line."""

    @pytest.mark.parametrize(
        "line, kind",
        [
            ("+added", LineKind.ADD),
            ("-removed", LineKind.DEL),
            ("@@ -1 +1 @@", LineKind.HUNK),
            ("diff --git a/x b/x", LineKind.META),
            ("index abc..def 100644", LineKind.META),
            ("--- a/x", LineKind.META),
            ("+++ b/x", LineKind.META),
            (" context", LineKind.CTX),
            ("", LineKind.CTX),
        ],
    )
    def test_classify(self, line, kind):
        assert classify_line(line) == kind
