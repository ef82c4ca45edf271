"""Execute template script blocks in one of several dialects."""

import ast
import copy
import json
import logging
import os
import re
import shutil
import subprocess
from pathlib import Path
from typing import Any, Mapping, Protocol

from code2prompt.models.script_models import ScriptLanguage
from code2prompt.scripting.exceptions import ScriptExecutionError

logger = logging.getLogger(__name__)

RESULT_MARKER = "__CODE2PROMPT_RESULT__"
PYTHON_BLOCK_FUNCTION = "__code2prompt_block__"

_JS_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
_JS_RESERVED = frozenset({
    "break", "case", "catch", "class", "const", "continue", "debugger",
    "default", "delete", "do", "else", "enum", "export", "extends", "false",
    "finally", "for", "function", "if", "import", "in", "instanceof", "let",
    "new", "null", "return", "super", "switch", "this", "throw", "true",
    "try", "typeof", "var", "void", "while", "with", "yield", "await",
})
_ENV_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_KEY_VALUE_RE = re.compile(r"^([A-Za-z_][A-Za-z0-9_]*)=(.*)$")


class ScriptStrategy(Protocol):
    """Runs one block body against a context snapshot."""

    def execute(self, context: dict[str, Any], body: str) -> Any: ...


def json_safe_context(context: Mapping[str, Any]) -> dict[str, Any]:
    """Keep only entries that survive JSON serialization (drops callables)."""
    safe = {}
    for key, value in context.items():
        try:
            json.dumps(value)
        except (TypeError, ValueError):
            continue
        safe[key] = value
    return safe


def parse_key_value_lines(text: str) -> dict[str, str]:
    """Parse ``KEY=value`` lines; other lines are ignored."""
    bindings = {}
    for line in text.splitlines():
        match = _KEY_VALUE_RE.match(line.strip())
        if match:
            bindings[match.group(1)] = match.group(2)
    return bindings


def _parse_marked_result(stdout: str) -> Any:
    for line in reversed(stdout.splitlines()):
        if line.startswith(RESULT_MARKER):
            return json.loads(line[len(RESULT_MARKER):])
    return None


def snapshot_context(context: Mapping[str, Any]) -> dict[str, Any]:
    """Copy a context by value; callables stay bound by reference."""
    return {
        key: value if callable(value) else copy.deepcopy(value)
        for key, value in context.items()
    }


def _wrap_in_function(module: ast.Module) -> ast.Module:
    # Statements keep their own line numbers; no source text is re-indented
    extra = {"type_params": []} if "type_params" in ast.FunctionDef._fields else {}
    function = ast.FunctionDef(
        name=PYTHON_BLOCK_FUNCTION,
        args=ast.arguments(
            posonlyargs=[],
            args=[],
            vararg=None,
            kwonlyargs=[],
            kw_defaults=[],
            kwarg=None,
            defaults=[],
        ),
        body=module.body or [ast.Pass()],
        decorator_list=[],
        returns=None,
        **extra,
    )
    wrapped = ast.Module(body=[function], type_ignores=[])
    return ast.fix_missing_locations(wrapped)


class PythonStrategy:
    """In-process evaluation with the context bound as module globals.

    The body runs as a function body, so ``return {...}`` yields the
    result. Callables in the context (e.g. ``query_llm``) are usable;
    every other value is a deep copy, so mutations stay inside the block.
    """

    def __init__(self, template_dir: str | None = None):
        self.template_dir = template_dir

    def compile_body(self, body: str):
        try:
            module = ast.parse(body, filename="<script block>")
            return compile(_wrap_in_function(module), "<script block>", "exec")
        except SyntaxError as exc:
            raise ScriptExecutionError(
                f"syntax error: {exc.msg} (line {exc.lineno or 1})",
                language=ScriptLanguage.PYTHON.value,
            ) from exc

    def execute(self, context: dict[str, Any], body: str) -> Any:
        code = self.compile_body(body)
        namespace = snapshot_context(context)
        if self.template_dir is not None:
            namespace.setdefault("template_dir", self.template_dir)
        try:
            exec(code, namespace)
            return namespace[PYTHON_BLOCK_FUNCTION]()
        except SystemExit as exc:
            raise ScriptExecutionError(
                f"block called exit ({exc.code})",
                language=ScriptLanguage.PYTHON.value,
            ) from exc


class JavaScriptStrategy:
    """Runs the body inside an async function in a ``node`` sub-process.

    JSON-serializable context entries are bound as constants; the
    function's return value is sent back as JSON.
    """

    def __init__(self, executable: str = "node"):
        self.executable = executable

    def build_script(self, context: Mapping[str, Any], body: str) -> str:
        bindings = "".join(
            f"const {key} = __context[{json.dumps(key)}];\n"
            for key in context
            if _JS_IDENTIFIER_RE.match(key) and key not in _JS_RESERVED
        )
        return (
            'const __context = JSON.parse(require("fs").readFileSync(0, "utf8") || "{}");\n'
            + bindings
            + "(async () => {\n"
            + body
            + "\n})().then((__result) => {\n"
            + f'  process.stdout.write("\\n{RESULT_MARKER}" + '
            + "JSON.stringify(__result === undefined ? null : __result) + \"\\n\");\n"
            + "}).catch((__error) => {\n"
            + "  process.stderr.write(String((__error && __error.stack) || __error));\n"
            + "  process.exit(1);\n"
            + "});\n"
        )

    def execute(self, context: dict[str, Any], body: str) -> Any:
        node = shutil.which(self.executable)
        if node is None:
            raise ScriptExecutionError(
                f"'{self.executable}' executable not found",
                language=ScriptLanguage.JAVASCRIPT.value,
            )
        payload = json_safe_context(context)
        result = subprocess.run(
            [node, "-e", self.build_script(payload, body)],
            input=json.dumps(payload),
            capture_output=True,
            text=True,
        )
        if result.returncode != 0:
            raise ScriptExecutionError(
                result.stderr.strip() or f"exit code {result.returncode}",
                language=ScriptLanguage.JAVASCRIPT.value,
            )
        return _parse_marked_result(result.stdout)


class BashStrategy:
    """Runs the body with ``bash -c``; scalar context entries become env vars.

    ``KEY=value`` lines printed to stdout are returned under ``vars``.
    """

    def __init__(self, executable: str = "bash", cwd: str | None = None):
        self.executable = executable
        self.cwd = cwd

    @staticmethod
    def build_env(context: Mapping[str, Any]) -> dict[str, str]:
        env = dict(os.environ)
        for key, value in context.items():
            if not _ENV_NAME_RE.match(key):
                continue
            if isinstance(value, str):
                env[key] = value
            elif isinstance(value, (bool, int, float)):
                env[key] = json.dumps(value)
        return env

    def execute(self, context: dict[str, Any], body: str) -> dict[str, Any]:
        bash = shutil.which(self.executable)
        if bash is None:
            raise ScriptExecutionError(
                f"'{self.executable}' executable not found",
                language=ScriptLanguage.BASH.value,
            )
        result = subprocess.run(
            [bash, "-c", body],
            env=self.build_env(context),
            cwd=self.cwd,
            capture_output=True,
            text=True,
        )
        if result.returncode != 0:
            raise ScriptExecutionError(
                result.stderr.strip() or f"exit code {result.returncode}",
                language=ScriptLanguage.BASH.value,
            )
        return {"vars": parse_key_value_lines(result.stdout), "stdout": result.stdout}


def default_strategies(template_dir: str | Path | None = None) -> dict[ScriptLanguage, ScriptStrategy]:
    template_dir = str(template_dir) if template_dir is not None else None
    return {
        ScriptLanguage.PYTHON: PythonStrategy(template_dir=template_dir),
        ScriptLanguage.JAVASCRIPT: JavaScriptStrategy(),
        ScriptLanguage.BASH: BashStrategy(cwd=template_dir),
    }


def context_delta(language: ScriptLanguage, result: Any) -> dict[str, Any] | None:
    """Extract the context update from a block result.

    Shell results carry their bindings under ``vars``; other dialects
    return the mapping directly. Non-mapping results change nothing.
    """
    if language is ScriptLanguage.BASH:
        result = result.get("vars") if isinstance(result, dict) else None
    return dict(result) if isinstance(result, dict) else None


class ScriptRunner:
    """Dispatches a block to the strategy registered for its language."""

    def __init__(self, strategies: Mapping[ScriptLanguage, ScriptStrategy] | None = None):
        self.strategies = dict(strategies) if strategies is not None else default_strategies()

    def run(
        self,
        language: ScriptLanguage,
        context: Mapping[str, Any],
        body: str,
        block_index: int | None = None,
    ) -> Any:
        """Execute one block against a snapshot of the context.

        Args:
            language: Dialect of the block.
            context: Accumulated context; copied by value, never mutated.
            body: Block source.
            block_index: Position of the block, for error reporting.

        Returns:
            The raw block result (see ``context_delta``).

        Raises:
            ScriptExecutionError: If the block fails for any reason.
        """
        strategy = self.strategies.get(language)
        if strategy is None:
            raise ScriptExecutionError(
                "no strategy registered", language=language.value, block_index=block_index
            )
        logger.debug("Running %s block %s", language.value, block_index)
        try:
            return strategy.execute(snapshot_context(context), body)
        except ScriptExecutionError as exc:
            if block_index is None or exc.block_index is not None:
                raise
            raise ScriptExecutionError(
                str(exc), language=language.value, block_index=block_index
            ) from exc
        except Exception as exc:
            raise ScriptExecutionError(
                f"{type(exc).__name__}: {exc}",
                language=language.value,
                block_index=block_index,
            ) from exc
