"""Display ordering for conversation snapshots (core domain)."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Tuple

from scamscope.core.models import Record


def display_key(record: Record) -> Tuple[bool, float]:
    """Sort key: timestamped records by time, pending records after them."""

    if record.created_at is None:
        return (True, 0.0)
    return (False, _seconds(record.created_at))


def _seconds(value: datetime) -> float:
    # Naive datetimes come from stores that already write UTC.
    if value.tzinfo is None:
        return (value - datetime(1970, 1, 1)).total_seconds()
    return value.timestamp()


def sort_for_display(records: Iterable[Record]) -> List[Record]:
    """Return records in display order.

    Snapshots arrive unordered. Records are ordered by ``created_at``;
    pending records (no timestamp yet) go last so they read as "still
    sending". The sort is stable, so ties keep arrival order.
    """

    return sorted(records, key=display_key)
