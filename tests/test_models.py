"""Tests for option and provider models."""

import pytest
from pydantic import BaseModel, ValidationError

from code2prompt.models import (
    DEFAULT_MAX_BYTES_PER_FILE,
    DEFAULT_PREFERENCES,
    PromptOptions,
    ProviderSettings,
    default_provider_specs,
)


class TestPromptOptions:
    def test_defaults(self):
        options = PromptOptions(path=".")
        assert options.max_bytes_per_file == DEFAULT_MAX_BYTES_PER_FILE
        assert options.show_project_path is True
        assert options.diff_mode is False
        assert options.schema_ is None

    def test_extensions_normalized(self):
        assert PromptOptions(path=".", extensions=[".JS", " py ", ""]).extensions == ["js", "py"]

    def test_non_positive_cap_rejected(self):
        with pytest.raises(ValidationError):
            PromptOptions(path=".", max_bytes_per_file=0)

    def test_cap_can_be_disabled(self):
        assert PromptOptions(path=".", max_bytes_per_file=None).max_bytes_per_file is None

    def test_schema_alias(self):
        class Answer(BaseModel):
            text: str

        assert PromptOptions(path=".", schema=Answer).schema_ is Answer
        assert PromptOptions(path=".", schema_={"a": "b"}).schema_ == {"a": "b"}

    def test_diff_mode_needs_flag_and_root(self):
        assert PromptOptions(path="a", diff=True, diff_path="b").diff_mode is True
        assert PromptOptions(path="a", diff_path="b").diff_mode is False


class TestProviderSettings:
    """Tests for provider configuration."""

    def test_default_table(self):
        specs = default_provider_specs()
        assert specs["OPENAI"].model == "gpt-4o"
        assert specs["ANTHROPIC"].context_window == 200_000
        assert specs["GROQ"].base_url == "https://api.groq.com/openai/v1"
        assert ProviderSettings().preferences == DEFAULT_PREFERENCES

    def test_duplicate_preferences_rejected(self):
        with pytest.raises(ValidationError):
            ProviderSettings(preferences=["OPENAI", "OPENAI"])

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-1")
        monkeypatch.setenv("ANTHROPIC_API_KEY", "")
        monkeypatch.delenv("GROQ_API_KEY", raising=False)
        settings = ProviderSettings.from_env(["GROQ", "OPENAI"])
        assert settings.credentials == {"OPENAI": "sk-1"}
        assert settings.preferences == ["GROQ", "OPENAI"]
        assert settings.has_credential("OPENAI")
        assert not settings.has_credential("ANTHROPIC")

    def test_with_helpers_return_copies(self):
        settings = ProviderSettings()
        updated = settings.with_credential("GROQ", "gsk").with_preferences(["GROQ"])
        assert updated.preferences == ["GROQ"]
        assert updated.credentials == {"GROQ": "gsk"}
        assert settings.credentials == {}
        assert settings.preferences == DEFAULT_PREFERENCES
