"""Options controlling a context prompt build."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_MAX_BYTES_PER_FILE = 8192


class PromptOptions(BaseModel):
    """Configuration surface consumed by the assembler and the facade.

    In diff mode ``path`` is the before root and ``diff_path`` the after
    (current) root.
    """

    model_config = ConfigDict(
        frozen=True, arbitrary_types_allowed=True, populate_by_name=True
    )

    path: str
    diff: bool = False
    diff_path: str | None = None
    extensions: list[str] = Field(default_factory=list)
    ignore: list[str] = Field(default_factory=list)
    max_bytes_per_file: int | None = DEFAULT_MAX_BYTES_PER_FILE
    template: str | None = None
    show_project_path: bool = True
    schema_: Any = Field(default=None, alias="schema")

    @field_validator("extensions")
    @classmethod
    def _normalize_extensions(cls, value: list[str]) -> list[str]:
        return [ext.strip().lstrip(".").lower() for ext in value if ext.strip()]

    @field_validator("max_bytes_per_file")
    @classmethod
    def _positive_cap(cls, value: int | None) -> int | None:
        if value is not None and value <= 0:
            raise ValueError("max_bytes_per_file must be positive")
        return value

    @property
    def diff_mode(self) -> bool:
        """Diff mode needs both the flag and a second root."""
        return self.diff and bool(self.diff_path)
