"""Context assembler: reconciled paths -> tree text + file records."""

import logging
from pathlib import Path, PurePosixPath

from code2prompt.models.file_models import AssembledContext, FileRecord, ReconciledEntry
from code2prompt.models.options import PromptOptions
from code2prompt.traversal.exceptions import TraversalIOError
from code2prompt.traversal.reconciler import (
    ErrorCallback,
    log_traversal_error,
    read_content,
    reconcile,
)
from code2prompt.traversal.tree import render_tree
from code2prompt.traversal.viewers import ViewerRegistry
from code2prompt.utils.diff_generator import format_change, format_plain

logger = logging.getLogger(__name__)


class ContextAssembler:
    """Builds the ``{tree, files}`` structure consumed by the render step.

    Holds only read-only collaborators; every ``assemble`` call runs a
    fresh reconciliation and builds a fresh record list.
    """

    def __init__(
        self,
        viewers: ViewerRegistry | None = None,
        on_error: ErrorCallback | None = None,
    ):
        """Initialize the assembler.

        Args:
            viewers: Custom content viewers keyed by extension.
            on_error: Diagnostic callback for unreadable files. Defaults
                to logging a warning.
        """
        self.viewers = viewers or ViewerRegistry()
        self.on_error = on_error or log_traversal_error

    def assemble(self, options: PromptOptions) -> AssembledContext:
        """Enumerate, classify and format the configured root(s).

        In diff mode ``options.path`` is the before root and
        ``options.diff_path`` the after root; the tree shows the after
        root only. Otherwise every file under ``options.path`` is shown
        verbatim. Files reported unreadable through ``on_error`` are left
        out of the tree as well as the records.

        Args:
            options: Roots, filters and byte cap for this pass.

        Returns:
            AssembledContext with tree text and path-sorted records.
        """
        absolute_path = Path(options.path).resolve()
        logger.debug(
            "Diff settings - diff: %s, diff_path: %s", options.diff, options.diff_path
        )

        if options.diff_mode:
            after_root = Path(options.diff_path).resolve()
            logger.debug(
                "Diff mode enabled. Comparing %s (before) with %s (current)",
                absolute_path,
                after_root,
            )
            entries = reconcile(
                absolute_path,
                after_root,
                options.ignore,
                options.extensions,
                self.viewers,
                self.on_error,
            )
            unreadable: set[str] = set()
            files = self._diff_records(entries, options.max_bytes_per_file, unreadable)
            tree_paths = [
                entry.relative_path
                for entry in entries
                if entry.after_path and entry.relative_path not in unreadable
            ]
        else:
            entries = reconcile(
                None,
                absolute_path,
                options.ignore,
                options.extensions,
                self.viewers,
                self.on_error,
            )
            files = self._plain_records(entries, options.max_bytes_per_file)
            tree_paths = [record.path for record in files]

        return AssembledContext(
            absolute_path=str(absolute_path),
            tree_text=render_tree(tree_paths),
            files=files,
            diff_mode=options.diff_mode,
        )

    def _diff_records(
        self,
        entries: list[ReconciledEntry],
        max_bytes: int | None,
        unreadable: set[str],
    ) -> list[FileRecord]:
        records = []
        for entry in entries:
            before_text = after_text = None
            if entry.before_path is not None:
                before_text = self._read(entry.before_path, max_bytes)
                if before_text is None:
                    continue
            if entry.after_path is not None:
                after_text = self._read(entry.after_path, max_bytes)
                if after_text is None:
                    unreadable.add(entry.relative_path)
                    continue
            record = format_change(entry.relative_path, before_text, after_text)
            if record is not None:
                records.append(record)
        return records

    def _plain_records(
        self, entries: list[ReconciledEntry], max_bytes: int | None
    ) -> list[FileRecord]:
        records = []
        for entry in entries:
            text = self._read(entry.after_path, max_bytes)
            if text is not None:
                records.append(format_plain(entry.relative_path, text))
        return records

    def _read(self, file_path: str, max_bytes: int | None) -> str | None:
        """Read through a custom viewer or the byte-capped reader.

        Returns None (after reporting) when the file cannot be read.
        """
        extension = PurePosixPath(file_path).suffix.lower()
        viewer = self.viewers.get(extension) if extension else None
        try:
            if viewer is not None:
                logger.debug("Found custom viewer for %s, file: %s", extension, file_path)
                return viewer(file_path)
            return read_content(file_path, max_bytes)
        except OSError as exc:
            self.on_error(TraversalIOError(file_path, exc.strerror or str(exc)))
        except Exception as exc:
            self.on_error(TraversalIOError(file_path, f"viewer failed: {exc}"))
        return None
