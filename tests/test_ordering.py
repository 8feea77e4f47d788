from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

from scamscope.core.models import Record, Sender
from scamscope.core.ordering import sort_for_display

EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _record(record_id: str, seconds: Optional[float]) -> Record:
    created_at = None if seconds is None else EPOCH + timedelta(seconds=seconds)
    return Record(id=record_id, text=record_id, sender=Sender.USER, created_at=created_at)


def test_pending_records_sort_last() -> None:
    records = [_record("a", None), _record("b", 5), _record("c", 2), _record("d", None)]
    ordered = [record.id for record in sort_for_display(records)]
    assert ordered == ["c", "b", "a", "d"]


def test_fractional_seconds_are_respected() -> None:
    records = [_record("late", 1.75), _record("early", 1.25)]
    ordered = [record.id for record in sort_for_display(records)]
    assert ordered == ["early", "late"]


def test_equal_timestamps_keep_arrival_order() -> None:
    records = [_record("first", 3), _record("second", 3), _record("zero", 0)]
    ordered = [record.id for record in sort_for_display(records)]
    assert ordered == ["zero", "first", "second"]


def test_input_is_not_mutated() -> None:
    records = [_record("b", 2), _record("a", 1)]
    sort_for_display(records)
    assert [record.id for record in records] == ["b", "a"]
