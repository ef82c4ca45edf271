"""Exceptions for directory traversal."""


class TraversalError(Exception):
    """Base exception for traversal operations."""


class TraversalIOError(TraversalError):
    """Raised (and reported, never fatal) when a file or directory cannot be read."""

    def __init__(self, path: str, message: str):
        super().__init__(f"{path}: {message}")
        self.path = path
