"""Models for script blocks extracted from prompt templates."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

PRE_SUFFIX = ":pre"

_LANGUAGE_ALIASES = {
    "javascript": ("javascript", "js", "node", "mjs"),
    "python": ("python", "py", "python3"),
    "bash": ("bash", "sh", "shell", "zsh"),
}


class ScriptPhase(str, Enum):
    """When a block runs relative to the render step."""

    PRE = "pre"
    POST = "post"


class ScriptLanguage(str, Enum):
    """Closed set of executable script dialects."""

    JAVASCRIPT = "javascript"
    PYTHON = "python"
    BASH = "bash"

    @classmethod
    def from_tag(cls, tag: str) -> "ScriptLanguage | None":
        """Resolve a fence tag such as ``python:pre`` to a dialect.

        Only the part before the first ``:`` is considered. Returns None
        for tags that do not name a supported dialect.
        """
        base = tag.split(":", 1)[0].strip().lower()
        for value, aliases in _LANGUAGE_ALIASES.items():
            if base in aliases:
                return cls(value)
        return None


class ScriptBlock(BaseModel):
    """A fenced block removed from a template."""

    model_config = ConfigDict(frozen=True)

    index: int  # Position among extracted blocks, in source order
    tag: str  # Raw fence tag, e.g. "python:pre"
    language: ScriptLanguage | None = None  # None for unknown tags
    phase: ScriptPhase = ScriptPhase.POST
    body: str
    line: int = 0  # 1-based line of the opening fence

    @property
    def is_executable(self) -> bool:
        return self.language is not None


class ExtractedTemplate(BaseModel):
    """Result of stripping script and schema blocks from a template."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    template: str
    blocks: list[ScriptBlock] = Field(default_factory=list)
    schema_example: Any = None  # Parsed JSON of the schema block, if any
    response_schema: Any = None  # pydantic model class built from schema_example

    def blocks_for(self, phase: ScriptPhase) -> list[ScriptBlock]:
        """Return blocks of one phase in extraction order."""
        return [block for block in self.blocks if block.phase == phase]
