"""Jinja2 render step for prompt templates."""

from typing import Any

from jinja2 import Environment, TemplateSyntaxError, Undefined

from code2prompt.scripting.exceptions import TemplateParseError

DEFAULT_TEMPLATE = """\
{% if show_project_path %}
Project Path: {{ absolute_code_path }}
{% if diff_path %}
Diff Path: {{ diff_path }}
{% endif %}

---

{% endif %}
Source Tree:

```
{{ source_tree }}
```

---

{% for file in files %}
{% if file.content %}
{{ file.content }}

---

{% endif %}
{% endfor %}
"""


class PromptRenderer:
    """Renders template text with a variables mapping.

    Missing variables render as empty strings; output is not escaped.
    """

    def __init__(self) -> None:
        self.env = Environment(
            undefined=Undefined,
            autoescape=False,  # Prompt text, not HTML
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

    def compile(self, template_text: str):
        """Compile template text, mapping syntax errors to TemplateParseError."""
        try:
            return self.env.from_string(template_text)
        except TemplateSyntaxError as exc:
            raise TemplateParseError(exc.message or str(exc), line=exc.lineno) from exc

    def render(self, template_text: str, variables: dict[str, Any]) -> str:
        return self.compile(template_text).render(dict(variables))
