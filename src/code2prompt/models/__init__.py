"""Data models for code2prompt."""

from code2prompt.models.file_models import (
    AssembledContext,
    ChangeStatus,
    FileRecord,
    ReconciledEntry,
)
from code2prompt.models.options import DEFAULT_MAX_BYTES_PER_FILE, PromptOptions
from code2prompt.models.provider_models import (
    ANTHROPIC,
    DEFAULT_PREFERENCES,
    GROQ,
    OPENAI,
    CompletionResult,
    ProviderAttempt,
    ProviderSettings,
    ProviderSpec,
    QARecord,
    RequestOutcome,
    default_provider_specs,
)
from code2prompt.models.script_models import (
    ExtractedTemplate,
    ScriptBlock,
    ScriptLanguage,
    ScriptPhase,
)

__all__ = [
    "ANTHROPIC",
    "AssembledContext",
    "ChangeStatus",
    "CompletionResult",
    "DEFAULT_MAX_BYTES_PER_FILE",
    "DEFAULT_PREFERENCES",
    "ExtractedTemplate",
    "FileRecord",
    "GROQ",
    "OPENAI",
    "PromptOptions",
    "ProviderAttempt",
    "ProviderSettings",
    "ProviderSpec",
    "QARecord",
    "ReconciledEntry",
    "RequestOutcome",
    "ScriptBlock",
    "ScriptLanguage",
    "ScriptPhase",
    "default_provider_specs",
]
