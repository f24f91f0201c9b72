"""
cadence.llm.topics - Topic labeling of content segments with an LLM.

LLMTopicLabeler plugs into the content segmenter as its labeler. It raises
on any failure; the segmenter turns that into an unknown label.
"""

from __future__ import annotations

from cadence.llm.client import LLMClient
from cadence.llm.parsing import parse_topic_response
from cadence.llm.templates import PromptTemplateManager, render_topic_prompt


class LLMTopicLabeler:
    """Callable labeler: segment text in, short topic label out."""

    def __init__(
        self,
        client: LLMClient,
        template_manager: PromptTemplateManager | None = None,
        max_words: int = 6,
    ) -> None:
        self.client = client
        self.template_manager = template_manager or PromptTemplateManager()
        self.max_words = max_words

    def __call__(self, text: str) -> str:
        prompt = render_topic_prompt(
            text,
            max_words=self.max_words,
            manager=self.template_manager,
        )
        response = self.client.complete(prompt, max_tokens=64, temperature=0.2)
        return parse_topic_response(response)
