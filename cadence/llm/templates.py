"""
cadence.llm.templates - Prompt template rendering.

Uses Jinja2 to render the topic-labeling prompt, either the built-in
template or a custom one loaded from a prompts directory.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, Template

TOPIC_TEMPLATE_NAME = "topic_label.txt"

DEFAULT_TOPIC_TEMPLATE = """\
You are helping a presentation coach review a recorded talk.
Below is an excerpt of the transcript.

Name the topic of this excerpt in {{ max_words }} words or fewer.
Respond with JSON only: {"topic": "<label>"}

Transcript excerpt:
\"\"\"
{{ text }}
\"\"\"
"""

MAX_PROMPT_CHARS = 6000


class PromptTemplateManager:
    """Loads prompt templates from a directory, falling back to built-ins."""

    def __init__(self, prompts_dir: Path | None = None) -> None:
        self.prompts_dir = prompts_dir
        loader = FileSystemLoader(str(prompts_dir)) if prompts_dir else None
        self.env = Environment(
            loader=loader,
            autoescape=False,
            keep_trailing_newline=True,
        )
        self._cache: dict[str, Template] = {}

    def get_template(self, name: str) -> Template:
        """Load a template by name, or the built-in topic template."""
        if name not in self._cache:
            if self.prompts_dir and (self.prompts_dir / name).exists():
                self._cache[name] = self.env.get_template(name)
            elif name == TOPIC_TEMPLATE_NAME:
                self._cache[name] = self.env.from_string(DEFAULT_TOPIC_TEMPLATE)
            else:
                raise FileNotFoundError(f"Template not found: {name}")
        return self._cache[name]

    def render(self, template_name: str, variables: dict[str, Any]) -> str:
        return self.get_template(template_name).render(**variables)


def render_topic_prompt(
    text: str,
    max_words: int = 6,
    manager: PromptTemplateManager | None = None,
) -> str:
    """Render the topic prompt for one segment's text.

    Overlong text is cut at a word boundary to keep the prompt small.
    """
    if len(text) > MAX_PROMPT_CHARS:
        text = text[:MAX_PROMPT_CHARS].rsplit(" ", 1)[0] + " ..."
    manager = manager or PromptTemplateManager()
    return manager.render(
        TOPIC_TEMPLATE_NAME,
        {"text": text, "max_words": max_words},
    )
