"""Turn a codebase into an LLM prompt, query LLMs with provider fallback, run template scripts."""

from code2prompt.core import Code2Prompt
from code2prompt.models import PromptOptions, ProviderSettings, RequestOutcome
from code2prompt.providers.exceptions import AllProvidersExhausted, ProviderError
from code2prompt.scripting.exceptions import (
    ScriptExecutionError,
    ScriptingError,
    TemplateParseError,
)

__all__ = [
    "AllProvidersExhausted",
    "Code2Prompt",
    "PromptOptions",
    "ProviderError",
    "ProviderSettings",
    "RequestOutcome",
    "ScriptExecutionError",
    "ScriptingError",
    "TemplateParseError",
]
