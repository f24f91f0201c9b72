"""
cadence.llm - LLM-backed topic labeling.

Backend abstraction, prompt rendering and response parsing used to name
the topic of each content segment.
"""

from __future__ import annotations
