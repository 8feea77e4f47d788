"""Turn workflow: one user submission into three log appends.

The workflow enforces a strict order:
1) Append the USER record
2) Append the placeholder AI record
3) Classify the text
4) Append the final AI record carrying the classification

A turn that fails part-way is not rolled back; records already appended
stay in the log and the controller blocks until the failure is
acknowledged.
"""

from __future__ import annotations

import logging
from typing import Optional

from scamscope.core.conversation import ConversationLog
from scamscope.core.errors import TurnBlockedError, TurnFailedError, TurnInProgressError
from scamscope.core.models import Identity, RecordDraft, Sender, TurnResult, TurnState
from scamscope.core.ports import ClassifierPort

LOGGER = logging.getLogger(__name__)

PLACEHOLDER_TEXT = "I've analyzed this message for potential scam indicators."
FINAL_TEXT = "Analysis complete."
SEND_FAILED_MESSAGE = "Failed to send message. Please try again."

_IN_FLIGHT = frozenset(
    {
        TurnState.SENDING_USER,
        TurnState.SENDING_PLACEHOLDER,
        TurnState.CLASSIFYING,
        TurnState.SENDING_FINAL,
    }
)


class TurnController:
    """Orchestrates turns for a single identity, one at a time."""

    def __init__(
        self,
        identity: Identity,
        log: ConversationLog,
        classifier: ClassifierPort,
    ) -> None:
        self._identity = identity
        self._log = log
        self._classifier = classifier
        self._state = TurnState.IDLE
        self._error: Optional[str] = None

    @property
    def identity(self) -> Identity:
        return self._identity

    @property
    def state(self) -> TurnState:
        return self._state

    @property
    def error(self) -> Optional[str]:
        """User-visible error of the last failed turn, if any."""
        return self._error

    @property
    def busy(self) -> bool:
        return self._state in _IN_FLIGHT

    def acknowledge_failure(self) -> None:
        """Clear a FAILED state so new submissions are accepted again."""

        if self._state == TurnState.FAILED:
            self._state = TurnState.IDLE
            self._error = None

    async def submit(self, text: str) -> TurnResult:
        """Run one turn for ``text`` and return the appended record ids."""

        text = text.strip()
        if not text:
            raise ValueError("Message text must not be empty")
        # The guard is checked and set before the first await. The slot lives
        # on the log, so controllers sharing an identity also exclude each other.
        if self.busy:
            raise TurnInProgressError("A message is already being analyzed")
        if self._state == TurnState.FAILED:
            raise TurnBlockedError(self._error or SEND_FAILED_MESSAGE)
        if not self._log.claim_turn(self._identity):
            raise TurnInProgressError("A message is already being analyzed")

        self._state = TurnState.SENDING_USER
        try:
            user_id = await self._log.append(
                self._identity, RecordDraft(text=text, sender=Sender.USER)
            )

            self._state = TurnState.SENDING_PLACEHOLDER
            placeholder_id = await self._log.append(
                self._identity, RecordDraft(text=PLACEHOLDER_TEXT, sender=Sender.AI)
            )

            self._state = TurnState.CLASSIFYING
            classification = await self._classifier.classify(text)

            self._state = TurnState.SENDING_FINAL
            final_id = await self._log.append(
                self._identity,
                RecordDraft(text=FINAL_TEXT, sender=Sender.AI, classification=classification),
            )
        except Exception as exc:
            failed_step = self._state.value
            self._state = TurnState.FAILED
            self._error = SEND_FAILED_MESSAGE
            LOGGER.exception("Turn failed during %s", failed_step)
            raise TurnFailedError(f"Turn failed during {failed_step}: {exc}") from exc
        finally:
            self._log.release_turn(self._identity)

        self._state = TurnState.IDLE
        LOGGER.info("Turn complete for %s (%s)", self._identity.user_id, classification.level.value)
        return TurnResult(
            user_record_id=user_id,
            placeholder_record_id=placeholder_id,
            final_record_id=final_id,
            classification=classification,
        )
