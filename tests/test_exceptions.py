"""Tests for the exception hierarchies."""

from code2prompt.models import ProviderAttempt
from code2prompt.providers import AllProvidersExhausted, ProviderError, ProviderFailure
from code2prompt.scripting import ScriptExecutionError, ScriptingError, TemplateParseError
from code2prompt.traversal import TraversalError, TraversalIOError


class TestTraversalExceptions:
    def test_io_error_carries_path(self):
        exc = TraversalIOError("/repo/a.js", "Permission denied")
        assert isinstance(exc, TraversalError)
        assert exc.path == "/repo/a.js"
        assert str(exc) == "/repo/a.js: Permission denied"


class TestScriptingExceptions:
    """Tests for template and script exceptions."""

    def test_parse_error_line_prefix(self):
        exc = TemplateParseError("invalid schema JSON", line=4)
        assert isinstance(exc, ScriptingError)
        assert exc.line == 4
        assert str(exc) == "line 4: invalid schema JSON"

    def test_parse_error_without_line(self):
        assert str(TemplateParseError("bad")) == "bad"

    def test_execution_error_block_prefix(self):
        exc = ScriptExecutionError("boom", language="bash", block_index=2)
        assert isinstance(exc, ScriptingError)
        assert str(exc) == "block 2 (bash): boom"
        assert exc.language == "bash"


class TestProviderExceptions:
    def test_failure_carries_provider(self):
        exc = ProviderFailure("GROQ", "No tool call found in response")
        assert isinstance(exc, ProviderError)
        assert exc.provider == "GROQ"
        assert str(exc) == "GROQ: No tool call found in response"

    def test_exhausted_message(self):
        failures = [ProviderAttempt(provider="OPENAI", error="RuntimeError: down")]
        exc = AllProvidersExhausted(failures, RuntimeError("down"))
        assert isinstance(exc, ProviderError)
        assert "OPENAI" in str(exc)
        assert "Last error: RuntimeError: down" in str(exc)

    def test_exhausted_without_attempts(self):
        exc = AllProvidersExhausted([])
        assert exc.last_error is None
        assert "no eligible provider" in str(exc)
        assert "Last error: none" in str(exc)
