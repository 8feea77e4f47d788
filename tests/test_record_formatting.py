from __future__ import annotations

from datetime import datetime, timezone

from scamscope.adapters.record_formatting import (
    PENDING_LABEL,
    confidence_bar,
    format_record_lines,
    format_time_label,
    verdict_title,
)
from scamscope.core.models import Classification, Record, ScamLevel, Sender


def test_pending_record_shows_sending_label() -> None:
    assert format_time_label(None) == PENDING_LABEL
    record = Record(id="1", text="hi", sender=Sender.USER, created_at=None)
    assert format_record_lines(record) == [f"[{PENDING_LABEL}] you: hi"]


def test_verdict_titles() -> None:
    assert verdict_title(Classification(ScamLevel.HIGHLY_LIKELY_SCAM, 88, True, "x")) == (
        "HIGHLY LIKELY SCAM! (88% confidence)"
    )
    assert verdict_title(Classification(ScamLevel.POTENTIAL_SCAM, 35, True, "x")) == (
        "POTENTIAL SCAM (35% confidence)"
    )
    assert verdict_title(Classification(ScamLevel.SAFE, 8, False, "x")) == "SAFE (8% confidence)"
    assert verdict_title(Classification(ScamLevel.ERROR, 0, False, "x")) == "ANALYSIS FAILED"


def test_confidence_bar_clips_out_of_range_values() -> None:
    assert confidence_bar(150, width=10) == "█" * 10
    assert confidence_bar(-20, width=10) == "░" * 10
    assert confidence_bar(50, width=10) == "█" * 5 + "░" * 5


def test_error_verdict_has_no_confidence_bar() -> None:
    record = Record(
        id="2",
        text="Analysis complete.",
        sender=Sender.AI,
        created_at=datetime(2024, 1, 1, 12, 30, tzinfo=timezone.utc),
        classification=Classification(ScamLevel.ERROR, 0, False, "Error during analysis: boom"),
    )
    lines = format_record_lines(record)
    assert lines[0].endswith("ai: Analysis complete.")
    assert len(lines) == 3
    assert "Scam confidence" not in "\n".join(lines)
    assert lines[-1].strip() == "Error during analysis: boom"
