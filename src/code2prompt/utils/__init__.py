"""Utilities for code2prompt."""

from code2prompt.utils.diff_generator import (
    format_added,
    format_change,
    format_deleted,
    format_modified,
    format_plain,
    generate_unified_diff,
)
from code2prompt.utils.tokens import count_tokens

__all__ = [
    "count_tokens",
    "format_added",
    "format_change",
    "format_deleted",
    "format_modified",
    "format_plain",
    "generate_unified_diff",
]
