"""Tests for ASCII tree rendering."""

import pytest

from code2prompt.traversal import build_tree, render_tree, stringify_tree


def test_build_tree_nests_directories():
    tree = build_tree(["src/a.js", "src/util/b.js", "README.md"])
    assert tree == {
        "README.md": "README.md",
        "src": {"a.js": "src/a.js", "util": {"b.js": "src/util/b.js"}},
    }


def test_build_tree_file_directory_conflict():
    with pytest.raises(ValueError):
        build_tree(["a", "a/b.js"])


def test_render_tree_layout():
    text = render_tree(["src/util/b.js", "src/a.js", "z.md"])
    assert text == (
        "├── src\n"
        "|   ├── a.js\n"
        "|   └── util\n"
        "|       └── b.js\n"
        "└── z.md\n"
    )


def test_last_directory_uses_space_prefix():
    text = render_tree(["a/x.js", "b/y.js"])
    assert text.splitlines()[-1] == "    └── y.js"


def test_empty_tree():
    assert stringify_tree({}) == ""
    assert render_tree([]) == ""


def test_input_order_does_not_matter():
    assert render_tree(["b.js", "a.js"]) == render_tree(["a.js", "b.js"])
