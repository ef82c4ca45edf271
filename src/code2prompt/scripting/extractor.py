"""Extract fenced script and schema blocks from prompt templates."""

import json
import re
from typing import NamedTuple

from code2prompt.models.script_models import (
    PRE_SUFFIX,
    ExtractedTemplate,
    ScriptBlock,
    ScriptLanguage,
    ScriptPhase,
)
from code2prompt.scripting.exceptions import TemplateParseError
from code2prompt.scripting.schema_builder import build_response_schema

SCHEMA_TAGS = frozenset({"schema", "json:schema"})

_OPEN_FENCE_RE = re.compile(r"^```([^\s`]*)[ \t]*$")
_CLOSE_FENCE_RE = re.compile(r"^```[ \t]*$")


class FencedBlock(NamedTuple):
    """A fenced region located in a text."""

    tag: str  # Empty string for untagged fences
    body: str
    start: int  # Offset of the opening fence
    end: int  # Offset just past the closing fence (newline excluded)
    line: int  # 1-based line of the opening fence


def find_fenced_blocks(text: str, strict: bool = False) -> list[FencedBlock]:
    """Locate every ``` fenced block in source order.

    Args:
        text: Template or free text.
        strict: Raise on an unclosed tagged fence instead of treating it
            as plain text.

    Returns:
        List of FencedBlock tuples.

    Raises:
        TemplateParseError: If ``strict`` and a tagged fence is never closed.
    """
    lines = text.splitlines(keepends=True)
    offsets = []
    position = 0
    for line in lines:
        offsets.append(position)
        position += len(line)

    blocks = []
    index = 0
    while index < len(lines):
        match = _OPEN_FENCE_RE.match(lines[index].rstrip("\r\n"))
        if not match:
            index += 1
            continue
        tag = match.group(1)
        close = index + 1
        while close < len(lines) and not _CLOSE_FENCE_RE.match(lines[close].rstrip("\r\n")):
            close += 1
        if close >= len(lines):
            if strict and tag:
                raise TemplateParseError(f"unclosed fenced block '{tag}'", line=index + 1)
            index += 1
            continue
        body = "".join(lines[index + 1:close])
        if body.endswith("\n"):
            body = body[:-1]
        if body.endswith("\r"):
            body = body[:-1]
        end = offsets[close] + len(lines[close].rstrip("\r\n"))
        blocks.append(FencedBlock(tag, body, offsets[index], end, index + 1))
        index = close + 1
    return blocks


def phase_for_tag(tag: str) -> ScriptPhase:
    return ScriptPhase.PRE if tag.endswith(PRE_SUFFIX) else ScriptPhase.POST


def extract(template_text: str) -> ExtractedTemplate:
    """Strip tagged fenced blocks from a template and classify them.

    Tagged blocks are removed verbatim. ``schema``/``json:schema`` blocks
    are parsed as JSON example data and turned into a response schema;
    every other tagged block becomes a ScriptBlock. Untagged fences stay
    in the template.

    Args:
        template_text: Raw template source.

    Returns:
        ExtractedTemplate with the stripped text, ordered blocks and the
        optional response schema.

    Raises:
        TemplateParseError: On an unclosed tagged fence, invalid schema
            JSON, or more than one schema block.
    """
    blocks: list[ScriptBlock] = []
    schema_example = None
    schema_line: int | None = None
    pieces = []
    cursor = 0

    for fenced in find_fenced_blocks(template_text, strict=True):
        if not fenced.tag:
            continue
        pieces.append(template_text[cursor:fenced.start])
        cursor = fenced.end

        if fenced.tag in SCHEMA_TAGS:
            if schema_line is not None:
                raise TemplateParseError(
                    f"duplicate schema block (first one at line {schema_line})",
                    line=fenced.line,
                )
            try:
                schema_example = json.loads(fenced.body)
            except json.JSONDecodeError as exc:
                raise TemplateParseError(
                    f"invalid schema JSON: {exc}", line=fenced.line
                ) from exc
            schema_line = fenced.line
            continue

        blocks.append(
            ScriptBlock(
                index=len(blocks),
                tag=fenced.tag,
                language=ScriptLanguage.from_tag(fenced.tag),
                phase=phase_for_tag(fenced.tag),
                body=fenced.body,
                line=fenced.line,
            )
        )

    pieces.append(template_text[cursor:])
    response_schema = (
        build_response_schema(schema_example) if schema_line is not None else None
    )
    return ExtractedTemplate(
        template="".join(pieces),
        blocks=blocks,
        schema_example=schema_example,
        response_schema=response_schema,
    )


def extract_code_blocks(text: str) -> list[dict[str, str | None]]:
    """List every fenced block in free text, e.g. an LLM answer.

    Returns:
        ``[{"lang": tag or None, "code": body}, ...]`` in source order.
    """
    return [
        {"lang": block.tag or None, "code": block.body}
        for block in find_fenced_blocks(text)
    ]
