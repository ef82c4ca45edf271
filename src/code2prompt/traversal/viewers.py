"""Custom content viewers keyed by file extension."""

import logging
from typing import Callable, Iterator

logger = logging.getLogger(__name__)

FileViewer = Callable[[str], str]


class ViewerRegistry:
    """Extension -> content viewer table (e.g. docx, xlsx, pdf readers).

    Registered viewers replace the raw byte read for matching files and
    override extension-based ignore patterns.
    """

    def __init__(self, viewers: dict[str, FileViewer] | None = None):
        self._viewers: dict[str, FileViewer] = {}
        for ext, viewer in (viewers or {}).items():
            self.register(ext, viewer)

    def register(self, ext: str, viewer: FileViewer) -> None:
        self._viewers[self.normalize_extension(ext)] = viewer
        logger.debug("Viewer registered for %s", self.normalize_extension(ext))

    def has_viewer(self, ext: str) -> bool:
        return self.normalize_extension(ext) in self._viewers

    def get(self, ext: str) -> FileViewer | None:
        return self._viewers.get(self.normalize_extension(ext))

    def extensions(self) -> list[str]:
        return sorted(self._viewers)

    def copy(self) -> "ViewerRegistry":
        return ViewerRegistry(dict(self._viewers))

    def __iter__(self) -> Iterator[str]:
        return iter(self.extensions())

    def __len__(self) -> int:
        return len(self._viewers)

    @staticmethod
    def normalize_extension(value: str) -> str:
        value = value.strip().lower()
        return value if value.startswith(".") else f".{value}"
