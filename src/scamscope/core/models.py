"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any storage, HTTP or UI specific types.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class Sender(str, Enum):
    USER = "user"
    AI = "ai"


class ScamLevel(str, Enum):
    SAFE = "SAFE"
    POTENTIAL_SCAM = "POTENTIAL_SCAM"
    HIGHLY_LIKELY_SCAM = "HIGHLY_LIKELY_SCAM"
    UNKNOWN = "UNKNOWN"
    ERROR = "ERROR"


# Levels the model is allowed to report; UNKNOWN and ERROR are ours.
MODEL_LEVELS = frozenset(
    {ScamLevel.SAFE, ScamLevel.POTENTIAL_SCAM, ScamLevel.HIGHLY_LIKELY_SCAM}
)


class TurnState(str, Enum):
    IDLE = "idle"
    SENDING_USER = "sending_user"
    SENDING_PLACEHOLDER = "sending_placeholder"
    CLASSIFYING = "classifying"
    SENDING_FINAL = "sending_final"
    FAILED = "failed"


@dataclass(frozen=True)
class Identity:
    """Opaque per-user key scoping one conversation log."""

    user_id: str


@dataclass(frozen=True)
class Classification:
    """Structured verdict derived from a single classifier call.

    ``confidence_percent`` is advisory and deliberately not clamped or
    re-derived from ``level``.
    """

    level: ScamLevel
    confidence_percent: int
    is_scam: bool
    explanation: str


@dataclass(frozen=True)
class RecordDraft:
    """Partial record handed to the log; id and timestamp are assigned there."""

    text: str
    sender: Sender
    classification: Optional[Classification] = None


@dataclass(frozen=True)
class Record:
    """One persisted conversational entry.

    ``created_at`` is None while the append is pending acknowledgement.
    """

    id: str
    text: str
    sender: Sender
    created_at: Optional[datetime]
    classification: Optional[Classification] = None

    @property
    def is_pending(self) -> bool:
        return self.created_at is None


@dataclass(frozen=True)
class TurnResult:
    """Ids of the three records appended for one turn, plus the verdict."""

    user_record_id: str
    placeholder_record_id: str
    final_record_id: str
    classification: Classification
