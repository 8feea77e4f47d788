"""Exception hierarchy for scamscope.

Completion errors are recovered inside the classifier; log and turn errors
are surfaced to callers.
"""

from __future__ import annotations

from typing import Optional


class ScamScopeError(Exception):
    """Base class for all scamscope errors."""


class CompletionError(ScamScopeError):
    """The text-completion endpoint did not produce usable text."""


class CompletionHTTPError(CompletionError):
    """The completion endpoint answered with a non-success status."""

    def __init__(self, status: int, reason: str, message: Optional[str] = None) -> None:
        self.status = status
        self.reason = reason
        self.message = message
        super().__init__(
            f"AI API request failed: {reason or status} - {message or 'Unknown AI error'}"
        )


class MalformedCompletionError(CompletionError):
    """The completion response had no candidate text."""

    def __init__(self, message: str = "Could not understand the AI response. Unexpected format.") -> None:
        super().__init__(message)


class LogError(ScamScopeError):
    """Base class for conversation log failures."""


class LogAppendError(LogError):
    """The backing store rejected or failed an append."""


class LogSubscribeError(LogError):
    """The backing store could not produce a snapshot."""


class TurnError(ScamScopeError):
    """Base class for turn workflow errors."""


class TurnInProgressError(TurnError):
    """A turn is already in flight for this identity."""


class TurnBlockedError(TurnError):
    """A previous turn failed and has not been acknowledged yet."""


class TurnFailedError(TurnError):
    """A turn stopped part-way; already appended records remain."""


class IdentityError(ScamScopeError):
    """No usable identity could be loaded or issued."""
