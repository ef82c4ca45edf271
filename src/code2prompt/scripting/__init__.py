"""Template script extraction, rendering and execution."""

from code2prompt.scripting.exceptions import (
    ScriptExecutionError,
    ScriptingError,
    TemplateParseError,
)
from code2prompt.scripting.extractor import extract, extract_code_blocks
from code2prompt.scripting.pipeline import ExecutionPipeline, PipelineState
from code2prompt.scripting.renderer import DEFAULT_TEMPLATE, PromptRenderer
from code2prompt.scripting.runner import (
    BashStrategy,
    JavaScriptStrategy,
    PythonStrategy,
    ScriptRunner,
    context_delta,
    default_strategies,
)
from code2prompt.scripting.schema_builder import (
    build_response_schema,
    model_from_example,
    resolve_response_schema,
    unwrap_payload,
)

__all__ = [
    "BashStrategy",
    "DEFAULT_TEMPLATE",
    "ExecutionPipeline",
    "JavaScriptStrategy",
    "PipelineState",
    "PromptRenderer",
    "PythonStrategy",
    "ScriptExecutionError",
    "ScriptRunner",
    "ScriptingError",
    "TemplateParseError",
    "build_response_schema",
    "context_delta",
    "default_strategies",
    "extract",
    "extract_code_blocks",
    "model_from_example",
    "resolve_response_schema",
    "unwrap_payload",
]
