"""Models for reconciled paths and rendered file records."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ChangeStatus(str, Enum):
    """Classification of a relative path after reconciliation."""

    ADDED = "added"
    DELETED = "deleted"
    MODIFIED = "modified"
    UNCHANGED = "unchanged"


class ReconciledEntry(BaseModel):
    """A relative path joined across the before and after roots."""

    model_config = ConfigDict(frozen=True)

    relative_path: str  # POSIX separators regardless of OS
    status: ChangeStatus  # MODIFIED is a candidate until contents are compared
    before_path: str | None = None  # Absolute path under the before root
    after_path: str | None = None  # Absolute path under the after root


class FileRecord(BaseModel):
    """A single file block ready for the render step."""

    model_config = ConfigDict(frozen=True)

    path: str
    status: ChangeStatus
    content: str  # Fenced, header-prefixed text block


class AssembledContext(BaseModel):
    """Tree text plus ordered file records for one assembly pass."""

    model_config = ConfigDict(frozen=True)

    absolute_path: str
    tree_text: str
    files: list[FileRecord] = Field(default_factory=list)
    diff_mode: bool = False
