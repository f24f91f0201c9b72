"""
cadence.analyze.cancellation - Cooperative cancellation checks.

Long passes poll the caller's token between units of work (segments,
audio windows). Any object with an is_set() method works; threading.Event
is the usual choice.
"""

from __future__ import annotations

from typing import Protocol

from cadence.exceptions import AnalysisCancelledError


class CancelToken(Protocol):
    def is_set(self) -> bool: ...


def raise_if_cancelled(cancel: CancelToken | None, stage: str) -> None:
    """Raise AnalysisCancelledError when the token has been set."""
    if cancel is not None and cancel.is_set():
        raise AnalysisCancelledError(f"Analysis cancelled during {stage}")
