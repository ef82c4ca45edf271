"""Utilities for turning file contents into prompt-ready diff blocks."""

import difflib
from pathlib import PurePosixPath

from code2prompt.models.file_models import ChangeStatus, FileRecord

CONTEXT_LINES = 3
OMISSION_MARKER = "-// contents omitted …"
NO_NEWLINE_MARKER = "\\ No newline at end of file"


def _split_lines(text: str) -> list[str]:
    """Split on ``\\n`` only, keeping line endings; the last line may lack one."""
    lines = text.split("\n")
    tail = lines.pop()
    result = [line + "\n" for line in lines]
    if tail:
        result.append(tail)
    return result


def generate_unified_diff(
    file_path: str,
    original_content: str,
    modified_content: str,
    context_lines: int = CONTEXT_LINES,
) -> str:
    """Generate a git-compatible unified diff.

    A content line that had no trailing newline in its source is followed
    by ``\\ No newline at end of file``.

    Args:
        file_path: Relative path from the root (e.g. "src/app.js").
        original_content: File content before the change.
        modified_content: File content after the change.
        context_lines: Unchanged lines shown around each hunk.

    Returns:
        Unified diff string with a/ b/ prefixes. Empty string if no changes.
    """
    if original_content == modified_content:
        return ""

    diff_gen = difflib.unified_diff(
        _split_lines(original_content),
        _split_lines(modified_content),
        fromfile=f"a/{file_path}",
        tofile=f"b/{file_path}",
        n=context_lines,
        lineterm="",
    )

    # The two file headers and the hunk headers carry no newline (lineterm="")
    diff_lines = []
    for index, line in enumerate(diff_gen):
        if index < 2 or line.startswith("@@"):
            diff_lines.append(line)
        elif line.endswith("\n"):
            diff_lines.append(line[:-1])
        else:
            diff_lines.append(line)
            diff_lines.append(NO_NEWLINE_MARKER)

    return "\n".join(diff_lines)


def strip_diff_header(diff_text: str) -> str:
    """Drop the ``---``/``+++`` file header lines, keeping the hunks."""
    lines = diff_text.split("\n")
    while lines and (lines[0].startswith("--- ") or lines[0].startswith("+++ ")):
        lines.pop(0)
    return "\n".join(lines)


def change_header(relative_path: str, status: ChangeStatus) -> str:
    return f"# file: {relative_path}  |  change: {status.value}"


def _fenced(tag: str, body: str) -> str:
    return f"```{tag}\n{body}\n```"


def format_modified(relative_path: str, before_text: str, after_text: str) -> FileRecord | None:
    """Diff two versions of a file; None when they are identical."""
    diff_text = generate_unified_diff(relative_path, before_text, after_text)
    if not diff_text:
        return None
    body = strip_diff_header(diff_text)
    return FileRecord(
        path=relative_path,
        status=ChangeStatus.MODIFIED,
        content=f"{change_header(relative_path, ChangeStatus.MODIFIED)}\n\n{_fenced('diff', body)}",
    )


def format_deleted(relative_path: str, before_text: str) -> FileRecord:
    """Report a removal by line count only; the old content is not shown."""
    line_count = len(before_text.splitlines())
    body = f"@@ -1,{line_count} +0,0 @@\n{OMISSION_MARKER}"
    return FileRecord(
        path=relative_path,
        status=ChangeStatus.DELETED,
        content=f"{change_header(relative_path, ChangeStatus.DELETED)}\n\n{_fenced('diff', body)}",
    )


def format_added(relative_path: str, after_text: str) -> FileRecord:
    """Show a new file as an all-added hunk."""
    lines = after_text.splitlines()
    added = "\n".join(f"+{line}" for line in lines)
    body = f"@@ -0,0 +1,{len(lines)} @@\n{added}"
    return FileRecord(
        path=relative_path,
        status=ChangeStatus.ADDED,
        content=f"{change_header(relative_path, ChangeStatus.ADDED)}\n\n{_fenced('diff', body)}",
    )


def format_plain(relative_path: str, text: str) -> FileRecord:
    """Wrap raw content in a fence tagged with the file extension."""
    tag = PurePosixPath(relative_path).suffix.lower()[1:]
    return FileRecord(
        path=relative_path,
        status=ChangeStatus.UNCHANGED,
        content=f"# file: {relative_path}\n\n{_fenced(tag, text)}",
    )


def format_change(
    relative_path: str,
    before_text: str | None,
    after_text: str | None,
) -> FileRecord | None:
    """Build the FileRecord for one reconciled path.

    Args:
        relative_path: POSIX relative path.
        before_text: Content under the before root, None if absent.
        after_text: Content under the after root, None if absent.

    Returns:
        A MODIFIED, DELETED or ADDED record, or None for identical content.

    Raises:
        ValueError: If both sides are absent.
    """
    if before_text is not None and after_text is not None:
        return format_modified(relative_path, before_text, after_text)
    if before_text is not None:
        return format_deleted(relative_path, before_text)
    if after_text is not None:
        return format_added(relative_path, after_text)
    raise ValueError(f"No content on either side for {relative_path}")
