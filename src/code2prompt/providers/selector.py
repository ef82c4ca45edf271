"""Choose the first eligible provider from a preference list."""

import logging
from typing import Iterable

from code2prompt.models.provider_models import ProviderSettings, ProviderSpec

logger = logging.getLogger(__name__)


class ProviderSelector:
    """Eligibility checks against one explicit settings object."""

    def __init__(self, settings: ProviderSettings):
        self.settings = settings

    def is_eligible(self, provider: str, prompt_tokens: int) -> bool:
        """A provider is eligible when it is known, credentialed and the prompt fits."""
        spec = self.settings.providers.get(provider)
        if spec is None:
            return False
        if not self.settings.has_credential(provider):
            return False
        return prompt_tokens < spec.context_window

    def select(self, prompt_tokens: int, preferences: Iterable[str]) -> ProviderSpec | None:
        """Return the spec of the first eligible provider, or None."""
        for provider in preferences:
            if self.is_eligible(provider, prompt_tokens):
                return self.settings.providers[provider]
            logger.debug("Provider %s not eligible for %d prompt tokens", provider, prompt_tokens)
        return None
