"""Parsing of raw model output into a Classification (core domain).

The parser is total: every malformed input maps to an UNKNOWN verdict
instead of raising.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from scamscope.core.models import MODEL_LEVELS, Classification, ScamLevel

LOGGER = logging.getLogger(__name__)

DELIMITER = "|"
UNKNOWN_EXPLANATION = "Could not determine scam status from AI response."
MISSING_EXPLANATION = "No specific reason provided."

_LEADING_INT = re.compile(r"[+-]?[0-9]+")
_LEVELS_BY_TOKEN = {level.value: level for level in MODEL_LEVELS}


def unknown_classification() -> Classification:
    return Classification(
        level=ScamLevel.UNKNOWN,
        confidence_percent=0,
        is_scam=False,
        explanation=UNKNOWN_EXPLANATION,
    )


def parse_confidence(raw: str) -> Optional[int]:
    """Parse the leading base-10 integer of a field, or None.

    ``"75%"`` parses as 75; a field without leading digits does not parse.
    """

    match = _LEADING_INT.match(raw.strip())
    if not match:
        return None
    return int(match.group(0), 10)


def parse_response(raw_text: str) -> Classification:
    """Turn ``LEVEL|PERCENTAGE|EXPLANATION`` text into a Classification.

    Matching rules:
    - The level must be one of the three model tokens, case-sensitive.
    - The percentage is passed through unclamped.
    - Anything after the second delimiter is the explanation, delimiters
      included.
    """

    parts = (raw_text or "").split(DELIMITER, 2)
    if len(parts) < 3:
        LOGGER.warning("Unexpected AI response format (%s chars)", len(raw_text or ""))
        return unknown_classification()

    level = _LEVELS_BY_TOKEN.get(parts[0].strip())
    confidence = parse_confidence(parts[1])
    if level is None or confidence is None:
        LOGGER.warning("Unexpected AI response format (%s chars)", len(raw_text))
        return unknown_classification()

    explanation = parts[2].strip() or MISSING_EXPLANATION
    return Classification(
        level=level,
        confidence_percent=confidence,
        is_scam=level != ScamLevel.SAFE,
        explanation=explanation,
    )
