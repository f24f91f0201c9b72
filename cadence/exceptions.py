"""
cadence.exceptions - Custom exception classes.

All Cadence-specific exceptions inherit from CadenceError.
"""


class CadenceError(Exception):
    """Base exception for all Cadence errors."""

    pass


class ConfigError(CadenceError):
    """Configuration loading or validation error."""

    pass


class TimelineError(CadenceError):
    """Word timeline violates the ordering contract."""

    def __init__(self, index: int, message: str):
        self.index = index
        self.message = message
        super().__init__(f"word {index}: {message}")


class AnalysisError(CadenceError):
    """Delivery analysis error."""

    pass


class AnalysisCancelledError(AnalysisError):
    """Analysis aborted through the caller's cancellation token."""

    pass


class AudioDecodeError(CadenceError):
    """Audio could not be decoded into PCM samples."""

    pass


class LLMError(CadenceError):
    """LLM backend or prompt error."""

    pass


class LLMPrivacyError(LLMError):
    """Attempted to use cloud LLM in local privacy mode."""

    pass


class LLMResponseError(LLMError):
    """LLM returned malformed or unexpected response."""

    pass


class ValidationError(CadenceError):
    """Input file validation error."""

    pass
