"""
cadence.llm.client - LLM backend abstraction using litellm.

One small-completion interface over Ollama, LM Studio, Claude and OpenAI,
with privacy mode enforcement, retries and token accounting. Topic labels
are short, so defaults favour low latency over long answers.
"""

from __future__ import annotations

import time
from typing import Any

from cadence.exceptions import LLMError, LLMPrivacyError, LLMResponseError
from cadence.logging import logger

CLOUD_BACKENDS = {"claude", "openai"}

LOCAL_API_BASES = {
    "ollama": "http://localhost:11434",
    "lmstudio": "http://localhost:1234/v1",
}

MODEL_PREFIXES = {
    "ollama": "ollama/",
    "lmstudio": "openai/",
    "claude": "anthropic/",
    "openai": "",
}

_USAGE_KEYS = ("prompt_tokens", "completion_tokens", "total_tokens")


def response_text(response: Any) -> str:
    """Text of the first choice of a litellm completion.

    Raises:
        LLMResponseError: If the response has no choices or no content
    """
    choices = getattr(response, "choices", None)
    if not choices:
        raise LLMResponseError("Empty response from LLM")
    message = getattr(choices[0], "message", None)
    content = getattr(message, "content", None)
    if content is None:
        raise LLMResponseError("No content in LLM message")
    return content


class LLMClient:
    """Completion client with privacy mode enforcement and retry logic."""

    def __init__(
        self,
        backend: str = "ollama",
        model: str = "llama3.1:8b-instruct-q4_K_M",
        privacy_mode: str = "local",
        timeout: int = 60,
        max_retries: int = 3,
        retry_delay: float = 2.0,
    ) -> None:
        self.backend = backend
        self.model = model
        self.privacy_mode = privacy_mode
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self._token_usage = dict.fromkeys(_USAGE_KEYS, 0)

    @property
    def model_string(self) -> str:
        """Model name in litellm's provider/model form."""
        return MODEL_PREFIXES.get(self.backend, "") + self.model

    def _check_privacy(self) -> None:
        if self.privacy_mode == "local" and self.backend in CLOUD_BACKENDS:
            raise LLMPrivacyError(
                f"Cloud LLM backend '{self.backend}' not allowed in local privacy mode. "
                f"Set llm.privacy_mode: hybrid in cadence.yaml to enable cloud APIs."
            )

    def _record_usage(self, response: Any) -> None:
        usage = getattr(response, "usage", None)
        if not usage:
            return
        for key in _USAGE_KEYS:
            self._token_usage[key] += getattr(usage, key, 0) or 0

    def _backoff(self, attempt: int, error: Exception) -> None:
        if "rate limit" in str(error).lower():
            logger.warning("LLM rate limited, waiting...")
            time.sleep(self.retry_delay * 2)
            return
        logger.warning("LLM request failed (attempt %d/%d): %s", attempt, self.max_retries, error)
        if attempt < self.max_retries:
            time.sleep(self.retry_delay)

    def complete(
        self,
        prompt: str,
        max_tokens: int = 256,
        temperature: float = 0.2,
    ) -> str:
        """Send a prompt and return the completion text.

        Transport errors are retried up to max_retries times; a response
        without content is not.

        Raises:
            LLMPrivacyError: If a cloud backend is used in local mode
            LLMResponseError: If the response has no content
            LLMError: If every attempt fails
        """
        self._check_privacy()

        try:
            import litellm
        except ImportError as e:
            raise LLMError("litellm not installed. Install with: pip install litellm") from e

        litellm.telemetry = False
        request = {
            "model": self.model_string,
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": max_tokens,
            "temperature": temperature,
            "timeout": self.timeout,
            "api_base": LOCAL_API_BASES.get(self.backend),
        }

        last_error: Exception | None = None
        for attempt in range(1, self.max_retries + 1):
            try:
                response = litellm.completion(**request)
            except Exception as e:
                last_error = e
                self._backoff(attempt, e)
                continue

            self._record_usage(response)
            return response_text(response)

        raise LLMError(
            f"LLM request failed after {self.max_retries} retries: {last_error}"
        ) from last_error

    def get_token_usage(self) -> dict[str, int]:
        return self._token_usage.copy()

    def reset_token_usage(self) -> None:
        self._token_usage = dict.fromkeys(_USAGE_KEYS, 0)


def create_client_from_config(config: Any) -> LLMClient:
    """Create LLM client from a CadenceConfig's llm section."""
    settings = config.llm
    return LLMClient(
        backend=settings.backend,
        model=settings.model,
        privacy_mode=settings.privacy_mode,
        timeout=settings.timeout,
        max_retries=settings.max_retries,
    )
