"""Exceptions for template parsing and script execution."""


class ScriptingError(Exception):
    """Base exception for template and script operations."""


class TemplateParseError(ScriptingError):
    """Raised when a template cannot be loaded (fatal to the template load)."""

    def __init__(self, message: str, line: int | None = None):
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)
        self.line = line


class ScriptExecutionError(ScriptingError):
    """Raised when a pre/post script block fails."""

    def __init__(
        self,
        message: str,
        language: str | None = None,
        block_index: int | None = None,
    ):
        if block_index is not None:
            message = f"block {block_index} ({language}): {message}"
        super().__init__(message)
        self.language = language
        self.block_index = block_index
