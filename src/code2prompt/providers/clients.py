"""Thin adapters over the Anthropic and OpenAI SDKs."""

import json
from typing import Any, Protocol

import openai
from anthropic import Anthropic
from pydantic import BaseModel

from code2prompt.models.provider_models import ANTHROPIC, CompletionResult, ProviderSpec
from code2prompt.providers.exceptions import ProviderFailure
from code2prompt.scripting.schema_builder import unwrap_payload

TOOL_NAME = "respond"
TOOL_DESCRIPTION = "Return the answer in the required structure"


class LLMClient(Protocol):
    """complete(prompt, schema?) -> {data, usage}; raises on any failure."""

    provider: str

    def complete(
        self, prompt: str, schema: type[BaseModel] | None = None
    ) -> CompletionResult: ...


def _usage(input_tokens: Any, output_tokens: Any) -> dict[str, int]:
    prompt_tokens = int(input_tokens or 0)
    completion_tokens = int(output_tokens or 0)
    return {
        "prompt_tokens": prompt_tokens,
        "completion_tokens": completion_tokens,
        "total_tokens": prompt_tokens + completion_tokens,
    }


class AnthropicClient:
    """Anthropic Messages API client; structured output through a forced tool call."""

    def __init__(self, spec: ProviderSpec, api_key: str, client: Anthropic | None = None):
        self.spec = spec
        self.provider = spec.name
        self._client = client or Anthropic(api_key=api_key, timeout=spec.timeout)

    def _get_tool_schema(self, schema: type[BaseModel]) -> dict[str, Any]:
        return {
            "name": TOOL_NAME,
            "description": TOOL_DESCRIPTION,
            "input_schema": schema.model_json_schema(),
        }

    def complete(
        self, prompt: str, schema: type[BaseModel] | None = None
    ) -> CompletionResult:
        messages = [{"role": "user", "content": prompt}]
        if schema is None:
            response = self._client.messages.create(
                model=self.spec.model,
                max_tokens=self.spec.max_output_tokens,
                messages=messages,
            )
            text = "".join(
                block.text for block in response.content if block.type == "text"
            )
            return CompletionResult(data=text, usage=self._parse_usage(response))

        response = self._client.messages.create(
            model=self.spec.model,
            max_tokens=self.spec.max_output_tokens,
            tools=[self._get_tool_schema(schema)],
            tool_choice={"type": "tool", "name": TOOL_NAME},
            messages=messages,
        )
        tool_use = None
        for block in response.content:
            if block.type == "tool_use" and block.name == TOOL_NAME:
                tool_use = block
                break
        if tool_use is None:
            raise ProviderFailure(self.provider, "No tool_use block found in response")
        envelope = schema.model_validate(tool_use.input)
        return CompletionResult(data=unwrap_payload(envelope), usage=self._parse_usage(response))

    @staticmethod
    def _parse_usage(response: Any) -> dict[str, int]:
        usage = getattr(response, "usage", None)
        if usage is None:
            return {}
        return _usage(usage.input_tokens, usage.output_tokens)


class OpenAIChatClient:
    """Chat Completions client for OpenAI and OpenAI-compatible endpoints (Groq)."""

    def __init__(self, spec: ProviderSpec, api_key: str, client: openai.OpenAI | None = None):
        self.spec = spec
        self.provider = spec.name
        self._client = client or openai.OpenAI(
            api_key=api_key, base_url=spec.base_url, timeout=spec.timeout
        )

    def _get_tool_schema(self, schema: type[BaseModel]) -> dict[str, Any]:
        return {
            "type": "function",
            "function": {
                "name": TOOL_NAME,
                "description": TOOL_DESCRIPTION,
                "parameters": schema.model_json_schema(),
            },
        }

    def complete(
        self, prompt: str, schema: type[BaseModel] | None = None
    ) -> CompletionResult:
        messages = [{"role": "user", "content": prompt}]
        if schema is None:
            response = self._client.chat.completions.create(
                model=self.spec.model,
                max_tokens=self.spec.max_output_tokens,
                messages=messages,
            )
            text = response.choices[0].message.content
            if text is None:
                raise ProviderFailure(self.provider, "Empty content in response")
            return CompletionResult(data=text, usage=self._parse_usage(response))

        response = self._client.chat.completions.create(
            model=self.spec.model,
            max_tokens=self.spec.max_output_tokens,
            tools=[self._get_tool_schema(schema)],
            tool_choice={"type": "function", "function": {"name": TOOL_NAME}},
            messages=messages,
        )
        tool_calls = getattr(response.choices[0].message, "tool_calls", None)
        if not tool_calls:
            raise ProviderFailure(self.provider, "No tool call found in response")
        arguments = json.loads(tool_calls[0].function.arguments or "{}")
        envelope = schema.model_validate(arguments)
        return CompletionResult(data=unwrap_payload(envelope), usage=self._parse_usage(response))

    @staticmethod
    def _parse_usage(response: Any) -> dict[str, int]:
        usage = getattr(response, "usage", None)
        if usage is None:
            return {}
        return _usage(usage.prompt_tokens, usage.completion_tokens)


def create_client(spec: ProviderSpec, api_key: str) -> LLMClient:
    """Build the SDK adapter for a provider spec."""
    if spec.name == ANTHROPIC:
        return AnthropicClient(spec, api_key)
    return OpenAIChatClient(spec, api_key)
