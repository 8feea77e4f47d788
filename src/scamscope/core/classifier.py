"""Scam classifier (core domain).

Every failure of the completion call collapses into an ERROR-level
Classification, so the turn workflow never needs a separate error path for
this step.
"""

from __future__ import annotations

import logging

from scamscope.core.errors import CompletionError
from scamscope.core.models import Classification, ScamLevel
from scamscope.core.parser import parse_response
from scamscope.core.ports import CompletionPort
from scamscope.core.prompt import build_prompt

LOGGER = logging.getLogger(__name__)


def error_classification(message: str) -> Classification:
    return Classification(
        level=ScamLevel.ERROR,
        confidence_percent=0,
        is_scam=False,
        explanation=f"Error during analysis: {message}",
    )


class ScamClassifier:
    """Builds the prompt, calls the completion endpoint once and parses the text."""

    def __init__(self, completion: CompletionPort) -> None:
        self._completion = completion

    async def classify(self, message_text: str) -> Classification:
        prompt = build_prompt(message_text)
        try:
            raw_text = await self._completion.complete(prompt)
        except CompletionError as exc:
            LOGGER.error("AI API error: %s", exc)
            return error_classification(str(exc))
        except Exception as exc:
            # Transport failures (DNS, refused connections, TLS) land here.
            LOGGER.exception("Error calling AI for scam detection")
            return error_classification(str(exc) or exc.__class__.__name__)

        classification = parse_response(raw_text)
        LOGGER.info(
            "Classified message: level=%s confidence=%s",
            classification.level.value,
            classification.confidence_percent,
        )
        return classification
