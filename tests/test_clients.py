"""Tests for the Anthropic and OpenAI client adapters (SDKs mocked)."""

import json
from unittest.mock import MagicMock, patch

import pytest
from pydantic import ValidationError

from code2prompt.models import default_provider_specs
from code2prompt.providers import (
    AnthropicClient,
    OpenAIChatClient,
    ProviderFailure,
    create_client,
)
from code2prompt.providers.clients import TOOL_NAME
from code2prompt.scripting import build_response_schema

SPECS = default_provider_specs()


def _anthropic_response(content, input_tokens=10, output_tokens=5):
    response = MagicMock()
    response.content = content
    response.usage.input_tokens = input_tokens
    response.usage.output_tokens = output_tokens
    return response


def _text_block(text):
    block = MagicMock()
    block.type = "text"
    block.text = text
    return block


def _tool_block(payload):
    block = MagicMock()
    block.type = "tool_use"
    block.name = TOOL_NAME
    block.input = payload
    return block


def _openai_response(content=None, arguments=None, prompt_tokens=7, completion_tokens=3):
    message = MagicMock()
    message.content = content
    if arguments is None:
        message.tool_calls = None
    else:
        call = MagicMock()
        call.function.arguments = arguments
        message.tool_calls = [call]
    response = MagicMock()
    response.choices = [MagicMock(message=message)]
    response.usage.prompt_tokens = prompt_tokens
    response.usage.completion_tokens = completion_tokens
    return response


class TestAnthropicClient:
    @patch("code2prompt.providers.clients.Anthropic")
    def test_constructed_with_key_and_timeout(self, mock_anthropic_class):
        AnthropicClient(SPECS["ANTHROPIC"], "sk-test")
        mock_anthropic_class.assert_called_once_with(api_key="sk-test", timeout=40.0)

    @patch("code2prompt.providers.clients.Anthropic")
    def test_plain_text_completion(self, mock_anthropic_class):
        mock_client = MagicMock()
        mock_client.messages.create.return_value = _anthropic_response(
            [_text_block("Hello "), _text_block("world")]
        )
        mock_anthropic_class.return_value = mock_client

        result = AnthropicClient(SPECS["ANTHROPIC"], "sk-test").complete("hi")

        assert result.data == "Hello world"
        assert result.usage == {"prompt_tokens": 10, "completion_tokens": 5, "total_tokens": 15}
        kwargs = mock_client.messages.create.call_args.kwargs
        assert kwargs["model"] == "claude-3-5-haiku-20241022"
        assert "tools" not in kwargs

    @patch("code2prompt.providers.clients.Anthropic")
    def test_structured_completion_unwraps_schema(self, mock_anthropic_class):
        mock_client = MagicMock()
        mock_client.messages.create.return_value = _anthropic_response(
            [_tool_block({"schema": {"summary": "done"}})]
        )
        mock_anthropic_class.return_value = mock_client
        envelope = build_response_schema({"summary": "s"})

        result = AnthropicClient(SPECS["ANTHROPIC"], "sk-test").complete("hi", envelope)

        assert result.data == {"summary": "done"}
        kwargs = mock_client.messages.create.call_args.kwargs
        assert kwargs["tools"][0]["name"] == TOOL_NAME
        assert kwargs["tools"][0]["input_schema"] == envelope.model_json_schema()
        assert kwargs["tool_choice"] == {"type": "tool", "name": TOOL_NAME}

    @patch("code2prompt.providers.clients.Anthropic")
    def test_missing_tool_use_raises(self, mock_anthropic_class):
        mock_client = MagicMock()
        mock_client.messages.create.return_value = _anthropic_response([_text_block("nope")])
        mock_anthropic_class.return_value = mock_client
        envelope = build_response_schema({"summary": "s"})

        with pytest.raises(ProviderFailure):
            AnthropicClient(SPECS["ANTHROPIC"], "sk-test").complete("hi", envelope)

    @patch("code2prompt.providers.clients.Anthropic")
    def test_invalid_payload_raises(self, mock_anthropic_class):
        mock_client = MagicMock()
        mock_client.messages.create.return_value = _anthropic_response(
            [_tool_block({"schema": {"other": 1}})]
        )
        mock_anthropic_class.return_value = mock_client
        envelope = build_response_schema({"summary": "s"})

        with pytest.raises(ValidationError):
            AnthropicClient(SPECS["ANTHROPIC"], "sk-test").complete("hi", envelope)


class TestOpenAIChatClient:
    @patch("code2prompt.providers.clients.openai.OpenAI")
    def test_groq_uses_base_url(self, mock_openai_class):
        OpenAIChatClient(SPECS["GROQ"], "gsk-test")
        mock_openai_class.assert_called_once_with(
            api_key="gsk-test",
            base_url="https://api.groq.com/openai/v1",
            timeout=20.0,
        )

    @patch("code2prompt.providers.clients.openai.OpenAI")
    def test_plain_text_completion(self, mock_openai_class):
        mock_client = MagicMock()
        mock_client.chat.completions.create.return_value = _openai_response(content="answer")
        mock_openai_class.return_value = mock_client

        result = OpenAIChatClient(SPECS["OPENAI"], "sk-test").complete("hi")

        assert result.data == "answer"
        assert result.usage["total_tokens"] == 10
        assert mock_client.chat.completions.create.call_args.kwargs["model"] == "gpt-4o"

    @patch("code2prompt.providers.clients.openai.OpenAI")
    def test_empty_content_raises(self, mock_openai_class):
        mock_client = MagicMock()
        mock_client.chat.completions.create.return_value = _openai_response(content=None)
        mock_openai_class.return_value = mock_client

        with pytest.raises(ProviderFailure):
            OpenAIChatClient(SPECS["OPENAI"], "sk-test").complete("hi")

    @patch("code2prompt.providers.clients.openai.OpenAI")
    def test_structured_completion_via_function_tool(self, mock_openai_class):
        mock_client = MagicMock()
        mock_client.chat.completions.create.return_value = _openai_response(
            arguments=json.dumps({"schema": ["a", "b"]})
        )
        mock_openai_class.return_value = mock_client
        envelope = build_response_schema(["item"])

        result = OpenAIChatClient(SPECS["OPENAI"], "sk-test").complete("hi", envelope)

        assert result.data == ["a", "b"]
        kwargs = mock_client.chat.completions.create.call_args.kwargs
        assert kwargs["tools"][0]["type"] == "function"
        assert kwargs["tools"][0]["function"]["parameters"] == envelope.model_json_schema()
        assert kwargs["tool_choice"] == {"type": "function", "function": {"name": TOOL_NAME}}

    @patch("code2prompt.providers.clients.openai.OpenAI")
    def test_missing_tool_call_raises(self, mock_openai_class):
        mock_client = MagicMock()
        mock_client.chat.completions.create.return_value = _openai_response(content="text")
        mock_openai_class.return_value = mock_client

        with pytest.raises(ProviderFailure):
            OpenAIChatClient(SPECS["OPENAI"], "sk-test").complete(
                "hi", build_response_schema({"a": "b"})
            )


@patch("code2prompt.providers.clients.openai.OpenAI")
@patch("code2prompt.providers.clients.Anthropic")
def test_create_client_by_provider(mock_anthropic_class, mock_openai_class):
    assert isinstance(create_client(SPECS["ANTHROPIC"], "k"), AnthropicClient)
    assert isinstance(create_client(SPECS["OPENAI"], "k"), OpenAIChatClient)
    assert isinstance(create_client(SPECS["GROQ"], "k"), OpenAIChatClient)
