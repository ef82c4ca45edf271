"""Tests for provider eligibility and selection."""

from code2prompt.models import ProviderSettings
from code2prompt.providers import ProviderSelector


class TestProviderSelector:
    def test_first_eligible_in_order(self, all_credentials):
        selector = ProviderSelector(all_credentials)
        assert selector.select(100, ["GROQ", "OPENAI"]).name == "GROQ"

    def test_missing_credential_never_eligible(self):
        settings = ProviderSettings(credentials={"ANTHROPIC": "key"})
        selector = ProviderSelector(settings)
        assert selector.is_eligible("OPENAI", 10) is False
        assert selector.select(10, ["OPENAI", "ANTHROPIC"]).name == "ANTHROPIC"

    def test_context_window_is_exclusive(self, all_credentials):
        selector = ProviderSelector(all_credentials)
        assert selector.is_eligible("OPENAI", 127_999)
        assert not selector.is_eligible("OPENAI", 128_000)

    def test_large_prompt_falls_through_to_bigger_window(self, all_credentials):
        selector = ProviderSelector(all_credentials)
        assert selector.select(150_000, ["OPENAI", "ANTHROPIC", "GROQ"]).name == "ANTHROPIC"

    def test_unknown_provider_skipped(self, all_credentials):
        selector = ProviderSelector(all_credentials)
        assert selector.select(10, ["MISTRAL"]) is None

    def test_none_when_nothing_fits(self, all_credentials):
        assert ProviderSelector(all_credentials).select(10**7, ["OPENAI", "ANTHROPIC"]) is None
