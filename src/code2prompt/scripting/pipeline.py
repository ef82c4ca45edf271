"""Two-phase script execution around the render step."""

import logging
from enum import Enum
from typing import Any, Callable, Mapping

from code2prompt.models.script_models import ExtractedTemplate, ScriptPhase
from code2prompt.scripting.renderer import PromptRenderer
from code2prompt.scripting.runner import ScriptRunner, context_delta

logger = logging.getLogger(__name__)

RENDERED_KEY = "rendered"
RESPONSE_KEY = "schema"

Requester = Callable[[str], Any]


class PipelineState(str, Enum):
    """Lifecycle of one pipeline run."""

    IDLE = "idle"
    PRE_RUN = "pre_run"
    RENDERED = "rendered"
    POST_RUN = "post_run"
    DONE = "done"


class ExecutionPipeline:
    """Runs pre blocks, renders, optionally queries an LLM, then runs post blocks.

    Each step receives a snapshot of the context and the merged result
    replaces it, so later blocks see every earlier delta (last write wins
    on key collisions). A failing block aborts the run with
    ScriptExecutionError.
    """

    def __init__(
        self,
        extracted: ExtractedTemplate,
        runner: ScriptRunner | None = None,
        renderer: PromptRenderer | None = None,
        requester: Requester | None = None,
    ):
        """Initialize the pipeline.

        Args:
            extracted: Stripped template and its script blocks.
            runner: Dialect dispatcher (defaults to all built-in dialects).
            renderer: Render step for the stripped template.
            requester: Called with the rendered text when it is non-empty;
                its result's ``data`` is stored under ``schema``.
        """
        self.extracted = extracted
        self.runner = runner or ScriptRunner()
        self.renderer = renderer or PromptRenderer()
        self.requester = requester
        self.state = PipelineState.IDLE

    def run(self, context: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """Execute the full pipeline and return the terminal context."""
        current = dict(context or {})

        self.state = PipelineState.PRE_RUN
        current = self.run_phase(ScriptPhase.PRE, current)

        rendered = self.renderer.render(self.extracted.template, current)
        if rendered.strip():
            self.state = PipelineState.RENDERED
            current = {**current, RENDERED_KEY: rendered}
            if self.requester is not None:
                outcome = self.requester(rendered)
                current = {**current, RESPONSE_KEY: getattr(outcome, "data", outcome)}
        else:
            logger.debug("Template is empty after stripping scripts; skipping render step")

        self.state = PipelineState.POST_RUN
        current = self.run_phase(ScriptPhase.POST, current)

        self.state = PipelineState.DONE
        return current

    def run_phase(self, phase: ScriptPhase, context: Mapping[str, Any]) -> dict[str, Any]:
        """Run every executable block of one phase in source order."""
        current = dict(context)
        for block in self.extracted.blocks_for(phase):
            if not block.is_executable:
                logger.debug("Skipping block %d with unsupported tag '%s'", block.index, block.tag)
                continue
            result = self.runner.run(block.language, current, block.body, block_index=block.index)
            delta = context_delta(block.language, result)
            if delta:
                current = {**current, **delta}
        return current
