"""Directory traversal, reconciliation and tree rendering."""

from code2prompt.traversal.assembler import ContextAssembler
from code2prompt.traversal.exceptions import TraversalError, TraversalIOError
from code2prompt.traversal.reconciler import (
    adjust_ignore_patterns,
    list_files,
    read_content,
    reconcile,
)
from code2prompt.traversal.tree import build_tree, render_tree, stringify_tree
from code2prompt.traversal.viewers import ViewerRegistry

__all__ = [
    "ContextAssembler",
    "TraversalError",
    "TraversalIOError",
    "ViewerRegistry",
    "adjust_ignore_patterns",
    "build_tree",
    "list_files",
    "read_content",
    "reconcile",
    "render_tree",
    "stringify_tree",
]
