"""Shared record formatting helpers.

Keeping formatting here prevents drift between the chat UI and the CLI and
keeps verdicts consistent regardless of output channel.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from scamscope.core.models import MODEL_LEVELS, Classification, Record, ScamLevel, Sender

PENDING_LABEL = "Sending..."

LEVEL_STYLES = {
    ScamLevel.HIGHLY_LIKELY_SCAM: "bold red",
    ScamLevel.POTENTIAL_SCAM: "bold yellow",
    ScamLevel.SAFE: "green",
    ScamLevel.UNKNOWN: "grey62",
    ScamLevel.ERROR: "magenta",
}


def format_time_label(created_at: Optional[datetime]) -> str:
    """Local HH:MM for acknowledged records, "Sending..." for pending ones."""

    if created_at is None:
        return PENDING_LABEL
    return created_at.astimezone().strftime("%H:%M")


def verdict_icon(level: ScamLevel) -> str:
    if level == ScamLevel.HIGHLY_LIKELY_SCAM:
        return "🚨"
    if level == ScamLevel.POTENTIAL_SCAM:
        return "⚠️"
    if level == ScamLevel.SAFE:
        return "✅"
    return "❔"


def verdict_title(classification: Classification) -> str:
    """Headline for a verdict badge."""

    level = classification.level
    percent = classification.confidence_percent
    if level == ScamLevel.HIGHLY_LIKELY_SCAM:
        return f"HIGHLY LIKELY SCAM! ({percent}% confidence)"
    if level == ScamLevel.POTENTIAL_SCAM:
        return f"POTENTIAL SCAM ({percent}% confidence)"
    if level == ScamLevel.SAFE:
        return f"SAFE ({percent}% confidence)"
    if level == ScamLevel.ERROR:
        return "ANALYSIS FAILED"
    return "UNDETERMINED"


def confidence_bar(percent: int, width: int = 20) -> str:
    """Text bar for a confidence value; out-of-range values are shown clipped."""

    shown = max(0, min(percent, 100))
    filled = round(width * shown / 100)
    return "█" * filled + "░" * (width - filled)


def format_classification_lines(classification: Classification) -> list[str]:
    """Indented badge lines: headline, confidence bar (model verdicts only), explanation."""

    lines = [f"    {verdict_icon(classification.level)} {verdict_title(classification)}"]
    if classification.level in MODEL_LEVELS:
        lines.append(
            f"    {confidence_bar(classification.confidence_percent)} "
            f"Scam confidence: {classification.confidence_percent}%"
        )
    lines.append(f"    {classification.explanation}")
    return lines


def format_record_lines(record: Record) -> list[str]:
    """Plain-text rendering of one record, used by the CLI."""

    who = "you" if record.sender == Sender.USER else "ai"
    lines = [f"[{format_time_label(record.created_at)}] {who}: {record.text}"]
    if record.classification is not None:
        lines.extend(format_classification_lines(record.classification))
    return lines
