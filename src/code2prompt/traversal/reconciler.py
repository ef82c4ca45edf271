"""Reconcile the file listings of two roots into change-classified entries."""

import logging
import os
from fnmatch import fnmatchcase
from pathlib import Path, PurePosixPath
from typing import Callable, Iterable

from code2prompt.models.file_models import ChangeStatus, ReconciledEntry
from code2prompt.traversal.exceptions import TraversalIOError
from code2prompt.traversal.viewers import ViewerRegistry

logger = logging.getLogger(__name__)

ErrorCallback = Callable[[TraversalIOError], None]

EXTENSION_PATTERN_PREFIX = "**/*."


def log_traversal_error(error: TraversalIOError) -> None:
    """Default diagnostic callback: warn and keep going."""
    logger.warning("Skipping unreadable path %s", error)


def adjust_ignore_patterns(
    ignore_patterns: Iterable[str],
    viewer_extensions: Iterable[str],
) -> list[str]:
    """Drop extension-only ignore patterns for extensions that have a viewer.

    Args:
        ignore_patterns: Glob exclusion patterns as configured.
        viewer_extensions: Extensions with a registered viewer, with or
            without a leading dot.

    Returns:
        The patterns that still apply, in their original order.
    """
    normalized = {ViewerRegistry.normalize_extension(ext) for ext in viewer_extensions}
    kept = []
    for pattern in ignore_patterns:
        if pattern.startswith(EXTENSION_PATTERN_PREFIX):
            if PurePosixPath(pattern).suffix.lower() in normalized:
                continue
        kept.append(pattern)
    return kept


def _normalize_pattern(pattern: str) -> str:
    return pattern.strip().replace("\\", "/").removeprefix("./")


def _split_pattern(pattern: str) -> tuple[str, ...]:
    return tuple(part for part in _normalize_pattern(pattern).split("/") if part)


def _match_segments(path_parts: tuple[str, ...], pattern_parts: tuple[str, ...]) -> bool:
    if not pattern_parts:
        return not path_parts
    head, rest = pattern_parts[0], pattern_parts[1:]
    if head == "**":
        return any(
            _match_segments(path_parts[start:], rest) for start in range(len(path_parts) + 1)
        )
    if not path_parts:
        return False
    return fnmatchcase(path_parts[0], head) and _match_segments(path_parts[1:], rest)


def matches_pattern(relative_path: str, pattern: str) -> bool:
    """Case-sensitive glob match of a POSIX relative path, one segment at a time.

    ``*``, ``?`` and ``[...]`` stay within a single path segment; only a
    ``**`` segment spans directories (zero or more). So ``*.md`` matches
    ``README.md`` but not ``docs/README.md``, and ``dir/**`` matches
    everything below ``dir``.
    """
    pattern_parts = _split_pattern(pattern)
    if not pattern_parts:
        return False
    return _match_segments(tuple(relative_path.split("/")), pattern_parts)


def is_excluded(relative_path: str, patterns: Iterable[str]) -> bool:
    return any(matches_pattern(relative_path, pattern) for pattern in patterns)


def _is_excluded_dir(relative_dir: str, patterns: Iterable[str]) -> bool:
    # Only "dir/**" style patterns exclude a whole subtree
    for pattern in patterns:
        pattern_parts = _split_pattern(pattern)
        if len(pattern_parts) < 2 or pattern_parts[-1] != "**":
            continue
        if _match_segments(tuple(relative_dir.split("/")), pattern_parts[:-1]):
            return True
    return False


def has_allowed_extension(relative_path: str, allowed_extensions: Iterable[str]) -> bool:
    """Check a path against an extension allow-list (empty list allows all)."""
    allowed = [ext.lstrip(".").lower() for ext in allowed_extensions]
    if not allowed:
        return True
    return PurePosixPath(relative_path).suffix.lower()[1:] in allowed


def list_files(
    root: str | Path,
    exclude_patterns: Iterable[str] = (),
    on_error: ErrorCallback | None = None,
) -> dict[str, Path]:
    """Enumerate regular files under a root.

    Symlinks (files and directories) are skipped. Unreadable directories
    are reported through ``on_error`` and the walk continues.

    Args:
        root: Directory to enumerate.
        exclude_patterns: Glob patterns applied to root-relative paths.
        on_error: Diagnostic callback for unreadable paths.

    Returns:
        Mapping of POSIX relative path -> absolute path, sorted by relative path.
    """
    report = on_error or log_traversal_error
    patterns = list(exclude_patterns)
    root_path = Path(root).resolve()
    files: dict[str, Path] = {}

    def _walk_error(error: OSError) -> None:
        report(TraversalIOError(str(error.filename or root_path), error.strerror or str(error)))

    for dirpath, dirnames, filenames in os.walk(root_path, onerror=_walk_error):
        current = Path(dirpath)
        kept_dirs = []
        for name in sorted(dirnames):
            child = current / name
            if child.is_symlink():
                continue
            if _is_excluded_dir(child.relative_to(root_path).as_posix(), patterns):
                continue
            kept_dirs.append(name)
        dirnames[:] = kept_dirs

        for name in filenames:
            path = current / name
            if path.is_symlink() or not path.is_file():
                continue
            relative_path = path.relative_to(root_path).as_posix()
            if is_excluded(relative_path, patterns):
                continue
            files[relative_path] = path

    return dict(sorted(files.items()))


def reconcile(
    before_root: str | Path | None,
    after_root: str | Path,
    exclude_patterns: Iterable[str] = (),
    allowed_extensions: Iterable[str] = (),
    viewers: ViewerRegistry | None = None,
    on_error: ErrorCallback | None = None,
) -> list[ReconciledEntry]:
    """Join two roots' file listings on relative path.

    With ``before_root`` set to None every file under ``after_root`` is
    tagged UNCHANGED (plain mode). Otherwise paths present in both roots
    are MODIFIED candidates, before-only paths are DELETED and after-only
    paths are ADDED.

    Args:
        before_root: The "before" root, or None for plain mode.
        after_root: The "after" (current) root.
        exclude_patterns: Glob exclusion patterns; extension-only patterns
            are suppressed for extensions with a registered viewer.
        allowed_extensions: Extension allow-list; empty allows everything.
        viewers: Registered custom viewers.
        on_error: Diagnostic callback for unreadable paths.

    Returns:
        Entries sorted lexicographically by relative path, one per path.
    """
    viewer_extensions = viewers.extensions() if viewers is not None else []
    patterns = adjust_ignore_patterns(exclude_patterns, viewer_extensions)
    allowed = list(allowed_extensions)

    after_files = list_files(after_root, patterns, on_error)
    before_files = (
        list_files(before_root, patterns, on_error) if before_root is not None else {}
    )

    entries = []
    for relative_path in sorted(set(before_files) | set(after_files)):
        if not has_allowed_extension(relative_path, allowed):
            continue
        before = before_files.get(relative_path)
        after = after_files.get(relative_path)
        if before_root is None:
            status = ChangeStatus.UNCHANGED
        elif before is not None and after is not None:
            status = ChangeStatus.MODIFIED
        elif before is not None:
            status = ChangeStatus.DELETED
        else:
            status = ChangeStatus.ADDED
        entries.append(
            ReconciledEntry(
                relative_path=relative_path,
                status=status,
                before_path=str(before) if before is not None else None,
                after_path=str(after) if after is not None else None,
            )
        )
    return entries


def read_content(file_path: str | Path, max_bytes: int | None) -> str:
    """Read a file as UTF-8, keeping at most the first ``max_bytes`` bytes.

    Raises:
        OSError: If the file cannot be opened or read.
    """
    with open(file_path, "rb") as f:
        raw = f.read(max_bytes) if max_bytes is not None else f.read()
    return raw.decode("utf-8", errors="replace")
