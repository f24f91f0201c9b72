"""
cadence.llm.parsing - LLM output parsing for topic labels.

Handles the small JSON objects the topic prompt asks for, with recovery
for the usual ways models wrap or break them.
"""

from __future__ import annotations

import json
import re
from typing import Any

from cadence.exceptions import LLMResponseError

MAX_TOPIC_CHARS = 80


def extract_json_from_response(response: str) -> str:
    """Extract a JSON object from an LLM response.

    Raises:
        LLMResponseError: If no JSON object is found
    """
    text = response.strip()

    if "```" in text:
        text = re.sub(r"```json\s*", "", text)
        text = re.sub(r"```\s*", "", text)
        text = text.strip()

    json_match = re.search(r"\{[\s\S]*\}", text)
    if json_match:
        return json_match.group(0)

    raise LLMResponseError("No JSON object found in response")


def repair_json(text: str) -> str:
    """Remove trailing commas and close unbalanced braces."""
    text = re.sub(r",(\s*[}\]])", r"\1", text)

    open_braces = text.count("{") - text.count("}")
    if open_braces > 0:
        text += "}" * open_braces
    return text


def parse_llm_json(response: str) -> dict[str, Any]:
    """Parse a JSON object from an LLM response, repairing it once if needed.

    Raises:
        LLMResponseError: If parsing fails
    """
    text = extract_json_from_response(response)

    for candidate in (text, repair_json(text)):
        try:
            data = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict):
            return data

    raise LLMResponseError(
        f"Failed to parse LLM response as JSON.\n\nResponse (first 500 chars):\n{text[:500]}"
    )


def clean_topic(label: str) -> str:
    """Strip quotes and trailing punctuation; cap the length."""
    label = label.strip().strip("\"'`").strip()
    label = label.rstrip(".")
    if len(label) > MAX_TOPIC_CHARS:
        label = label[:MAX_TOPIC_CHARS].rsplit(" ", 1)[0]
    return label


def parse_topic_response(response: str) -> str:
    """Pull the topic label out of an LLM response.

    Prefers {"topic": "..."}; falls back to the first non-empty line when the
    model answered in plain text.

    Raises:
        LLMResponseError: If the response contains no usable label
    """
    try:
        data = parse_llm_json(response)
    except LLMResponseError:
        data = None

    if data is not None:
        topic = data.get("topic")
        if isinstance(topic, str) and clean_topic(topic):
            return clean_topic(topic)
        raise LLMResponseError("JSON response has no 'topic' string")

    for line in response.splitlines():
        line = clean_topic(line)
        if line and "```" not in line:
            return line

    raise LLMResponseError("Empty topic response")
