"""Token counting for provider eligibility checks."""

import functools
import logging

import tiktoken

logger = logging.getLogger(__name__)

DEFAULT_TOKENIZER_MODEL = "gpt-4"


@functools.lru_cache(maxsize=8)
def _encoding_for(model: str):
    return tiktoken.encoding_for_model(model)


def count_tokens(text: str, model: str = DEFAULT_TOKENIZER_MODEL) -> int:
    """Count tokens with the tiktoken encoding of ``model``.

    Falls back to a whitespace word count when the encoding cannot be
    loaded (e.g. offline without a cached vocabulary).
    """
    try:
        encoding = _encoding_for(model)
    except Exception as exc:
        logger.warning("tiktoken unavailable (%s), using word count estimate", exc)
        return len(text.split())
    return len(encoding.encode(text, disallowed_special=()))
