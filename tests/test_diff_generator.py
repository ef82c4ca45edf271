"""Tests for diff_generator utility functions."""

import pytest

from code2prompt.models import ChangeStatus
from code2prompt.utils.diff_generator import (
    NO_NEWLINE_MARKER,
    OMISSION_MARKER,
    format_added,
    format_change,
    format_deleted,
    format_modified,
    format_plain,
    generate_unified_diff,
    strip_diff_header,
)


def test_generate_unified_diff_basic():
    """Basic diff has --- a/ and +++ b/ headers and changed lines."""
    diff = generate_unified_diff(
        "src/app.py",
        "def sync_func():\n    pass\n",
        "async def async_func():\n    pass\n",
    )
    assert diff.startswith("--- a/src/app.py")
    assert "+++ b/src/app.py" in diff
    assert "-def sync_func():" in diff
    assert "+async def async_func():" in diff


def test_generate_unified_diff_no_changes():
    """Identical content returns empty string."""
    assert generate_unified_diff("a.py", "hello\n", "hello\n") == ""


def test_generate_unified_diff_context_lines():
    """Context size controls how many unchanged lines surround a hunk."""
    original = "".join(f"line{i}\n" for i in range(10))
    modified = original.replace("line5\n", "changed\n")
    narrow = generate_unified_diff("f.txt", original, modified, context_lines=1)
    assert " line4" in narrow
    assert " line3" not in narrow


def test_strip_diff_header():
    diff = generate_unified_diff("f.py", "a\n", "b\n")
    stripped = strip_diff_header(diff)
    assert stripped.startswith("@@")
    assert "--- a/" not in stripped


def test_missing_final_newline_marked():
    """A line without a trailing newline is followed by the no-newline marker."""
    diff = generate_unified_diff("a.txt", "a\nb", "a\nb\n")
    assert strip_diff_header(diff) == (
        f"@@ -1,2 +1,2 @@\n a\n-b\n{NO_NEWLINE_MARKER}\n+b"
    )


def test_unchanged_last_line_without_newline_marked():
    diff = generate_unified_diff("a.txt", "a\nlast", "b\nlast")
    assert diff.endswith(f" last\n{NO_NEWLINE_MARKER}")


def test_newline_terminated_files_have_no_marker():
    diff = generate_unified_diff("a.txt", "a\nb\n", "a\nc\n")
    assert NO_NEWLINE_MARKER not in diff


class TestFormatModified:
    def test_header_and_fence(self):
        record = format_modified("a.js", '"X"\n', '"Y"\n')
        assert record.status == ChangeStatus.MODIFIED
        assert record.content.startswith("# file: a.js  |  change: modified\n\n```diff\n")
        assert '-"X"' in record.content
        assert '+"Y"' in record.content
        assert record.content.endswith("\n```")

    def test_identical_content_returns_none(self):
        assert format_modified("a.js", "same\n", "same\n") is None


class TestFormatDeleted:
    def test_omits_original_content(self):
        record = format_deleted("b.js", "const secret = 1;\nline two\n")
        assert record.status == ChangeStatus.DELETED
        assert "@@ -1,2 +0,0 @@" in record.content
        assert OMISSION_MARKER in record.content
        assert "secret" not in record.content


class TestFormatAdded:
    def test_every_line_prefixed(self):
        record = format_added("c.js", "one\ntwo\nthree\n")
        assert record.status == ChangeStatus.ADDED
        assert "@@ -0,0 +1,3 @@" in record.content
        assert "+one\n+two\n+three" in record.content

    def test_empty_file(self):
        record = format_added("empty.js", "")
        assert "@@ -0,0 +1,0 @@" in record.content


def test_format_plain_uses_extension_tag():
    record = format_plain("src/main.py", "print('hi')")
    assert record.status == ChangeStatus.UNCHANGED
    assert record.content == "# file: src/main.py\n\n```py\nprint('hi')\n```"


def test_format_plain_without_extension():
    record = format_plain("Makefile", "all:")
    assert record.content == "# file: Makefile\n\n```\nall:\n```"


class TestFormatChange:
    def test_dispatches_by_presence(self):
        assert format_change("a", "x\n", "y\n").status == ChangeStatus.MODIFIED
        assert format_change("a", "x\n", None).status == ChangeStatus.DELETED
        assert format_change("a", None, "y\n").status == ChangeStatus.ADDED

    def test_both_absent_raises(self):
        with pytest.raises(ValueError):
            format_change("a", None, None)
