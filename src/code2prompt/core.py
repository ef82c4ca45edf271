"""Code2Prompt facade: codebase context prompts, LLM requests and template scripts."""

import logging
from pathlib import Path
from typing import Any, Callable, Mapping

from code2prompt.models.file_models import AssembledContext
from code2prompt.models.options import PromptOptions
from code2prompt.models.provider_models import ProviderSettings, QARecord, RequestOutcome
from code2prompt.models.script_models import ExtractedTemplate, ScriptLanguage
from code2prompt.providers.clients import create_client
from code2prompt.providers.driver import ClientFactory, FallbackRequestDriver, TokenCounter
from code2prompt.scripting.extractor import extract, extract_code_blocks
from code2prompt.scripting.pipeline import ExecutionPipeline
from code2prompt.scripting.renderer import DEFAULT_TEMPLATE, PromptRenderer
from code2prompt.scripting.runner import ScriptRunner, default_strategies
from code2prompt.traversal.assembler import ContextAssembler
from code2prompt.traversal.reconciler import ErrorCallback
from code2prompt.traversal.viewers import FileViewer, ViewerRegistry
from code2prompt.utils.tokens import count_tokens

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE_KEY = "<default>"


def build_full_prompt(rendered: str, prompt: str | None) -> str:
    """Append the question to the rendered context as a heading."""
    if not prompt:
        return rendered
    if not rendered:
        return f"# {prompt}"
    return f"{rendered}\n\n# {prompt}"


class Code2Prompt:
    """Turns a codebase into an LLM prompt and sends it through the provider fallback loop.

    Example:
        >>> c2p = Code2Prompt(PromptOptions(path="./src", extensions=["py"]))
        >>> text = c2p.generate_context_prompt()
        >>> outcome = c2p.request("Summarize this project")
    """

    def __init__(
        self,
        options: PromptOptions | Mapping[str, Any],
        settings: ProviderSettings | None = None,
        token_counter: TokenCounter = count_tokens,
        client_factory: ClientFactory = create_client,
        on_error: ErrorCallback | None = None,
    ):
        """Initialize the facade.

        Args:
            options: Roots, filters, template and schema for this instance.
            settings: Provider credentials and preferences. Defaults to
                ``ProviderSettings.from_env()``.
            token_counter: Token counter used for provider eligibility.
            client_factory: Builds an LLM client for a provider spec.
            on_error: Diagnostic callback for unreadable files.
        """
        if not isinstance(options, PromptOptions):
            options = PromptOptions.model_validate(dict(options))
        self.options = options
        self.settings = settings if settings is not None else ProviderSettings.from_env()
        self.token_counter = token_counter
        self.client_factory = client_factory
        self.on_error = on_error
        self.viewers = ViewerRegistry()
        self.renderer = PromptRenderer()
        self._templates: dict[str, ExtractedTemplate] = {}
        self._qa_recordings: dict[str, list[QARecord]] = {}
        self._qa_session: str | None = None

    def register_file_viewer(self, ext: str, viewer: FileViewer) -> None:
        """Use ``viewer(path) -> text`` for files with extension ``ext``."""
        self.viewers.register(ext, viewer)

    def set_model_preferences(self, preferences: list[str]) -> None:
        self.settings = self.settings.with_preferences(preferences)

    def set_llm_api(self, provider: str, api_key: str) -> None:
        self.settings = self.settings.with_credential(provider, api_key)

    @property
    def template_dir(self) -> Path:
        """Directory of the template file, or the working directory."""
        if self.options.template:
            return Path(self.options.template).resolve().parent
        return Path.cwd()

    def load_template(self, template_path: str | None = None) -> ExtractedTemplate:
        """Read, extract and cache a template.

        Args:
            template_path: Template file; defaults to ``options.template``
                and then to the built-in template.

        Raises:
            TemplateParseError: If the template is malformed.
            OSError: If the template file cannot be read.
        """
        path = template_path or self.options.template
        key = str(Path(path).resolve()) if path else DEFAULT_TEMPLATE_KEY
        if key not in self._templates:
            if path:
                text = Path(path).read_text(encoding="utf-8")
            else:
                text = DEFAULT_TEMPLATE
            self._templates[key] = extract(text)
            logger.debug(
                "Loaded template %s with %d script block(s)",
                key,
                len(self._templates[key].blocks),
            )
        return self._templates[key]

    def record_qa(self, session: str = "") -> None:
        """Start appending each successful request to ``session``."""
        self._qa_session = session
        self._qa_recordings.setdefault(session, [])

    def get_qa_recordings(self, session: str = "") -> list[QARecord]:
        return list(self._qa_recordings.get(session, []))

    @staticmethod
    def extract_code_blocks(text: str) -> list[dict[str, str | None]]:
        return extract_code_blocks(text)

    def assemble(self) -> AssembledContext:
        assembler = ContextAssembler(viewers=self.viewers, on_error=self.on_error)
        return assembler.assemble(self.options)

    def build_variables(
        self,
        assembled: AssembledContext,
        variables: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Merge generated render variables with caller variables (caller wins)."""
        generated = {
            "absolute_code_path": assembled.absolute_path,
            "source_tree": assembled.tree_text,
            "files": [record.model_dump(mode="json") for record in assembled.files],
            "diff_path": self.options.diff_path if assembled.diff_mode else None,
            "show_project_path": self.options.show_project_path,
        }
        return {**generated, **dict(variables or {})}

    def generate_context_prompt(
        self,
        template: str | None = None,
        as_object: bool = False,
        variables: Mapping[str, Any] | None = None,
    ) -> str | dict[str, Any]:
        """Render the codebase through a template.

        Args:
            template: Template file overriding ``options.template``.
            as_object: Return ``{"context": variables, "rendered": text}``
                instead of the text.
            variables: Extra render variables; they override generated ones.

        Returns:
            Rendered prompt text, or the context/rendered mapping.
        """
        extracted = self.load_template(template)
        context = self.build_variables(self.assemble(), variables)
        rendered = self.renderer.render(extracted.template, context)
        if as_object:
            return {"context": context, "rendered": rendered}
        return rendered

    def _driver(self) -> FallbackRequestDriver:
        return FallbackRequestDriver(
            self.settings,
            token_counter=self.token_counter,
            client_factory=self.client_factory,
        )

    def _response_schema(self, schema: Any) -> Any:
        if schema is not None:
            return schema
        if self.options.schema_ is not None:
            return self.options.schema_
        return self.load_template().response_schema

    def _record(self, question: str, answer: Any) -> None:
        if self._qa_session is None:
            return
        self._qa_recordings.setdefault(self._qa_session, []).append(
            QARecord(question=question, answer=answer)
        )

    def query_llm(self, prompt: str = "", schema: Any = None) -> RequestOutcome:
        """Ask the LLM directly, without any codebase context."""
        return self._driver().request(prompt, schema)

    def request(
        self,
        prompt: str = "",
        schema: Any = None,
        custom_variables: Mapping[str, Any] | None = None,
        custom_context: Mapping[str, Any] | None = None,
        meta: bool = False,
    ) -> RequestOutcome:
        """Ask the LLM about the codebase.

        The rendered context prompt is followed by ``# <prompt>``. With
        ``custom_context`` the codebase is not traversed and only the
        question is sent.

        Args:
            prompt: Question appended to the context.
            schema: Response schema; defaults to ``options.schema`` and
                then to the template's schema block.
            custom_variables: Extra render variables.
            custom_context: Context reported back instead of a rendered one.
            meta: Attach the context variables and script blocks.

        Returns:
            RequestOutcome from the first provider that answered.

        Raises:
            AllProvidersExhausted: Every eligible provider failed.
        """
        if custom_context is None:
            generated = self.generate_context_prompt(
                as_object=True, variables=custom_variables
            )
            context, rendered = generated["context"], generated["rendered"]
        else:
            context, rendered = dict(custom_context), ""

        outcome = self._driver().request(
            build_full_prompt(rendered, prompt), self._response_schema(schema)
        )
        if meta:
            outcome.context = context
            outcome.code_blocks = [
                block.model_dump(mode="json") for block in self.load_template().blocks
            ]
        self._record(prompt, outcome.data)
        return outcome

    def execute_script(
        self,
        code: str,
        context: Mapping[str, Any] | None = None,
        language: ScriptLanguage | str = ScriptLanguage.JAVASCRIPT,
    ) -> Any:
        """Run a code string in one of the script dialects and return its result."""
        if not isinstance(language, ScriptLanguage):
            resolved = ScriptLanguage.from_tag(language)
            if resolved is None:
                raise ValueError(f"Unsupported script language: {language}")
            language = resolved
        runner = ScriptRunner(default_strategies(self.template_dir))
        return runner.run(language, dict(context or {}), code)

    def run_template(
        self,
        prompt: str = "",
        methods: Mapping[str, Callable[..., Any]] | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Run the template's pre scripts, LLM request and post scripts.

        Pre and post blocks can call ``query_llm``, ``query_context``,
        ``extract_code_blocks``, ``execute_script`` and any caller
        ``methods``. When the template renders non-empty text, the LLM
        answer is stored under ``schema`` before the post phase.

        Args:
            prompt: Question appended to the rendered template.
            methods: Extra helpers exposed to script blocks.
            context: Initial variables; they override generated ones.

        Returns:
            The terminal context.

        Raises:
            ScriptExecutionError: A script block failed.
            AllProvidersExhausted: The render-step request failed.
        """
        extracted = self.load_template()
        seed = dict(context or {})
        helpers: dict[str, Callable[..., Any]] = {
            "query_llm": self.query_llm,
            "query_context": self.request,
            "extract_code_blocks": extract_code_blocks,
            **dict(methods or {}),
        }
        helpers["execute_script"] = lambda code, language=ScriptLanguage.JAVASCRIPT: (
            self.execute_script(code, {**helpers, **seed}, language)
        )
        initial = {**helpers, **self.build_variables(self.assemble(), seed)}

        def ask(rendered: str) -> RequestOutcome:
            outcome = self._driver().request(
                build_full_prompt(rendered, prompt), self._response_schema(None)
            )
            self._record(prompt, outcome.data)
            return outcome

        pipeline = ExecutionPipeline(
            extracted,
            runner=ScriptRunner(default_strategies(self.template_dir)),
            renderer=self.renderer,
            requester=ask,
        )
        return pipeline.run(initial)
