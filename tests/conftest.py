from pathlib import Path
from unittest.mock import MagicMock

import pytest

from code2prompt.models import CompletionResult, ProviderSettings


def write_tree(root: Path, files: dict[str, str]) -> Path:
    """Create ``files`` (relative path -> text) under ``root``."""
    root.mkdir(parents=True, exist_ok=True)
    for relative_path, text in files.items():
        path = root / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    return root


@pytest.fixture
def make_tree(tmp_path):
    """Factory fixture: make_tree("name", {"a.js": "..."}) -> root path."""

    def _make(name: str, files: dict[str, str]) -> Path:
        return write_tree(tmp_path / name, files)

    return _make


@pytest.fixture
def project_root(make_tree):
    return make_tree(
        "project",
        {
            "README.md": "# Demo\n",
            "src/app.js": "console.log('app');\n",
            "src/util/helpers.js": "export const add = (a, b) => a + b;\n",
            "src/main.py": "print('hi')\n",
            "node_modules/dep/index.js": "module.exports = {};\n",
        },
    )


@pytest.fixture
def diff_roots(make_tree):
    """Before/after roots covering modified, deleted, added and identical files."""
    before = make_tree(
        "before",
        {
            "a.js": '"X"\n',
            "b.js": "const secret = 1;\nconst other = 2;\n",
            "same.js": "unchanged\n",
        },
    )
    after = make_tree(
        "after",
        {
            "a.js": '"Y"\n',
            "c.js": "one\ntwo\nthree\n",
            "same.js": "unchanged\n",
        },
    )
    return before, after


@pytest.fixture
def all_credentials():
    return ProviderSettings(
        credentials={"OPENAI": "sk-openai", "ANTHROPIC": "sk-anthropic", "GROQ": "gsk-groq"}
    )


@pytest.fixture
def fake_client_factory():
    """Client factory whose clients answer per provider from a script.

    ``behaviors`` maps provider name -> CompletionResult or Exception.
    The returned factory records the providers it was asked for.
    """

    def _make(behaviors: dict):
        calls: list[str] = []

        def factory(spec, api_key):
            calls.append(spec.name)
            client = MagicMock()
            client.provider = spec.name
            outcome = behaviors.get(spec.name, CompletionResult(data=f"answer from {spec.name}"))
            if isinstance(outcome, Exception):
                client.complete.side_effect = outcome
            else:
                client.complete.return_value = outcome
            return client

        factory.calls = calls
        return factory

    return _make
