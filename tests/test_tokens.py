"""Tests for the token counter."""

from unittest.mock import MagicMock, patch

from code2prompt.utils.tokens import count_tokens


@patch("code2prompt.utils.tokens._encoding_for")
def test_counts_with_tiktoken_encoding(mock_encoding_for):
    encoding = MagicMock()
    encoding.encode.return_value = [1, 2, 3, 4]
    mock_encoding_for.return_value = encoding

    assert count_tokens("some text") == 4
    mock_encoding_for.assert_called_once_with("gpt-4")
    encoding.encode.assert_called_once_with("some text", disallowed_special=())


@patch("code2prompt.utils.tokens._encoding_for", side_effect=KeyError("no vocabulary"))
def test_falls_back_to_word_count(mock_encoding_for):
    assert count_tokens("three little words") == 3


@patch("code2prompt.utils.tokens._encoding_for")
def test_custom_model(mock_encoding_for):
    mock_encoding_for.return_value.encode.return_value = []
    assert count_tokens("", model="gpt-4o") == 0
    mock_encoding_for.assert_called_once_with("gpt-4o")
