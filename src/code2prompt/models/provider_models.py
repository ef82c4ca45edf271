"""Models for LLM provider configuration and request outcomes."""

import os
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

OPENAI = "OPENAI"
ANTHROPIC = "ANTHROPIC"
GROQ = "GROQ"

DEFAULT_PREFERENCES = [OPENAI, ANTHROPIC, GROQ]

# Environment variable holding each provider's credential
CREDENTIAL_ENV_VARS = {
    OPENAI: "OPENAI_API_KEY",
    ANTHROPIC: "ANTHROPIC_API_KEY",
    GROQ: "GROQ_API_KEY",
}


class ProviderSpec(BaseModel):
    """Static description of one LLM backend."""

    model_config = ConfigDict(frozen=True)

    name: str
    model: str
    context_window: int  # Prompt token ceiling (exclusive)
    timeout: float  # Seconds, enforced by the SDK client
    base_url: str | None = None
    max_output_tokens: int = 4096


def default_provider_specs() -> dict[str, ProviderSpec]:
    """Return the built-in provider table."""
    return {
        OPENAI: ProviderSpec(
            name=OPENAI,
            model="gpt-4o",
            context_window=128_000,
            timeout=20.0,
        ),
        ANTHROPIC: ProviderSpec(
            name=ANTHROPIC,
            model="claude-3-5-haiku-20241022",
            context_window=200_000,
            timeout=40.0,
        ),
        GROQ: ProviderSpec(
            name=GROQ,
            model="llama-3.3-70b-versatile",
            context_window=128_000,
            timeout=20.0,
            base_url="https://api.groq.com/openai/v1",
        ),
    }


class ProviderSettings(BaseModel):
    """Credentials, provider table and preference order for one facade."""

    model_config = ConfigDict(frozen=True)

    preferences: list[str] = Field(default_factory=lambda: list(DEFAULT_PREFERENCES))
    credentials: dict[str, str] = Field(default_factory=dict)
    providers: dict[str, ProviderSpec] = Field(default_factory=default_provider_specs)

    @field_validator("preferences")
    @classmethod
    def _no_duplicates(cls, value: list[str]) -> list[str]:
        seen: set[str] = set()
        for name in value:
            if name in seen:
                raise ValueError(f"Duplicate provider in preferences: {name}")
            seen.add(name)
        return value

    @field_validator("credentials")
    @classmethod
    def _drop_empty_credentials(cls, value: dict[str, str]) -> dict[str, str]:
        return {name: key for name, key in value.items() if key}

    @classmethod
    def from_env(cls, preferences: list[str] | None = None) -> "ProviderSettings":
        """Build settings from the provider API key environment variables."""
        credentials = {
            name: os.getenv(env_var, "")
            for name, env_var in CREDENTIAL_ENV_VARS.items()
        }
        if preferences is None:
            return cls(credentials=credentials)
        return cls(preferences=preferences, credentials=credentials)

    def has_credential(self, provider: str) -> bool:
        return bool(self.credentials.get(provider))

    def with_preferences(self, preferences: list[str]) -> "ProviderSettings":
        return self.model_validate({**self.model_dump(), "preferences": list(preferences)})

    def with_credential(self, provider: str, api_key: str) -> "ProviderSettings":
        credentials = {**self.credentials, provider: api_key}
        return self.model_validate({**self.model_dump(), "credentials": credentials})


class CompletionResult(BaseModel):
    """Normalized payload returned by an LLM client."""

    model_config = ConfigDict(frozen=False)

    data: Any = None
    usage: dict[str, Any] = Field(default_factory=dict)


class ProviderAttempt(BaseModel):
    """A failed invocation recorded by the fallback driver."""

    model_config = ConfigDict(frozen=True)

    provider: str
    error: str


class RequestOutcome(BaseModel):
    """Successful result of a fallback request."""

    model_config = ConfigDict(frozen=False)

    data: Any = None
    usage: dict[str, Any] = Field(default_factory=dict)
    provider: str | None = None
    failures: list[ProviderAttempt] = Field(default_factory=list)
    context: dict[str, Any] | None = None  # Set when meta output is requested
    code_blocks: list[dict[str, Any]] | None = None


class QARecord(BaseModel):
    """One question/answer pair captured during a recording session."""

    model_config = ConfigDict(frozen=True)

    question: str
    answer: Any = None
