"""Render relative paths as an indented ASCII tree."""

from typing import Iterable, Union

TreeNode = dict[str, Union["TreeNode", str]]

BRANCH = "├── "
LAST_BRANCH = "└── "
PIPE_PREFIX = "|   "
SPACE_PREFIX = "    "


def build_tree(paths: Iterable[str]) -> TreeNode:
    """Build a nested mapping from POSIX relative paths.

    Leaves hold the full relative path; directories hold nested mappings.

    Raises:
        ValueError: If a path segment would be both a file and a directory.
    """
    tree: TreeNode = {}
    for relative_path in sorted(set(paths)):
        parts = relative_path.split("/")
        current = tree
        for part in parts[:-1]:
            node = current.setdefault(part, {})
            if isinstance(node, str):
                raise ValueError(f"'{node}' is both a file and a directory")
            current = node
        leaf = parts[-1]
        if isinstance(current.get(leaf), dict):
            raise ValueError(f"'{relative_path}' is both a file and a directory")
        current[leaf] = relative_path
    return tree


def stringify_tree(tree: TreeNode, prefix: str = "") -> str:
    """Render a tree mapping, one line per node, children sorted by name."""
    result = ""
    keys = sorted(tree)
    for index, key in enumerate(keys):
        is_last = index == len(keys) - 1
        result += f"{prefix}{LAST_BRANCH if is_last else BRANCH}{key}\n"
        child = tree[key]
        if isinstance(child, dict) and child:
            result += stringify_tree(child, prefix + (SPACE_PREFIX if is_last else PIPE_PREFIX))
    return result


def render_tree(paths: Iterable[str]) -> str:
    return stringify_tree(build_tree(paths))
