"""Append-only conversation log with live snapshot subscriptions (core domain).

The log keeps one ordered-by-arrival view per identity, backed by a
LogStorePort. Appends become visible to subscribers twice: once as pending
(no timestamp) and once acknowledged by the store. Records are never
removed or edited after acknowledgement.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Optional

from scamscope.core.errors import LogAppendError, LogError, LogSubscribeError
from scamscope.core.models import Identity, Record, RecordDraft, Sender
from scamscope.core.ports import LogStorePort

LOGGER = logging.getLogger(__name__)

_CLOSED = object()


class Subscription:
    """Live sequence of full snapshots for one identity.

    Iterate with ``async for snapshot in subscription``. Snapshots are in
    arrival order; sort them with ``sort_for_display`` before rendering.
    """

    def __init__(self, log: "ConversationLog", identity: Identity) -> None:
        self._log = log
        self.identity = identity
        self._queue: asyncio.Queue = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def _deliver(self, snapshot: list[Record]) -> None:
        if self._closed:
            return
        self._queue.put_nowait(snapshot)

    async def get(self) -> Optional[list[Record]]:
        """Wait for the next snapshot; None once the subscription is closed."""

        item = await self._queue.get()
        if item is _CLOSED:
            # Keep the sentinel so repeated reads after close also end.
            self._queue.put_nowait(_CLOSED)
            return None
        return item

    def drain(self) -> list[list[Record]]:
        """Return every snapshot delivered so far without waiting."""

        snapshots: list[list[Record]] = []
        while not self._queue.empty():
            item = self._queue.get_nowait()
            if item is _CLOSED:
                self._queue.put_nowait(_CLOSED)
                break
            snapshots.append(item)
        return snapshots

    def close(self) -> None:
        """Stop further delivery. In-flight appends are not affected."""

        if self._closed:
            return
        self._closed = True
        self._log._detach(self)
        self._queue.put_nowait(_CLOSED)

    def __aiter__(self) -> "Subscription":
        return self

    async def __anext__(self) -> list[Record]:
        snapshot = await self.get()
        if snapshot is None:
            raise StopAsyncIteration
        return snapshot

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class ConversationLog:
    """Per-identity append/subscribe over a backing store."""

    def __init__(self, store: LogStorePort) -> None:
        self._store = store
        # identity key -> record id -> record, in arrival order
        self._views: dict[str, dict[str, Record]] = {}
        self._subscribers: dict[str, list[Subscription]] = {}
        # identity keys with a turn in flight
        self._turns_in_flight: set[str] = set()

    def claim_turn(self, identity: Identity) -> bool:
        """Reserve the single in-flight turn slot for an identity."""

        if identity.user_id in self._turns_in_flight:
            return False
        self._turns_in_flight.add(identity.user_id)
        return True

    def release_turn(self, identity: Identity) -> None:
        self._turns_in_flight.discard(identity.user_id)

    def _view(self, identity: Identity) -> dict[str, Record]:
        key = identity.user_id
        view = self._views.get(key)
        if view is not None:
            return view
        try:
            stored = self._store.load(identity)
        except Exception as exc:
            raise LogSubscribeError(f"Failed to load messages: {exc}") from exc
        view = {record.id: record for record in stored}
        self._views[key] = view
        LOGGER.info("Loaded %s records for %s", len(view), key)
        return view

    def snapshot(self, identity: Identity) -> list[Record]:
        """Return the current full snapshot (stored plus pending records)."""

        return list(self._view(identity).values())

    def subscribe(self, identity: Identity) -> Subscription:
        """Open a subscription that starts with the current snapshot."""

        snapshot = self.snapshot(identity)
        subscription = Subscription(self, identity)
        self._subscribers.setdefault(identity.user_id, []).append(subscription)
        subscription._deliver(snapshot)
        return subscription

    def _detach(self, subscription: Subscription) -> None:
        subscribers = self._subscribers.get(subscription.identity.user_id, [])
        if subscription in subscribers:
            subscribers.remove(subscription)

    def _publish(self, identity: Identity) -> None:
        snapshot = list(self._views.get(identity.user_id, {}).values())
        for subscription in list(self._subscribers.get(identity.user_id, [])):
            subscription._deliver(snapshot)

    async def append(self, identity: Identity, draft: RecordDraft) -> str:
        """Append a record and return its id.

        Store failures raise LogAppendError; the pending record is withdrawn
        from the view before the error propagates.
        """

        if not draft.text:
            raise ValueError("Record text must not be empty")
        if draft.classification is not None and draft.sender != Sender.AI:
            raise ValueError("Only AI records carry a classification")

        try:
            view = self._view(identity)
        except LogSubscribeError as exc:
            raise LogAppendError(str(exc)) from exc

        pending = Record(
            id=uuid.uuid4().hex,
            text=draft.text,
            sender=draft.sender,
            created_at=None,
            classification=draft.classification,
        )
        view[pending.id] = pending
        self._publish(identity)

        try:
            stored = await self._store.insert(identity, pending)
        except Exception as exc:
            del view[pending.id]
            self._publish(identity)
            if isinstance(exc, LogError):
                raise
            raise LogAppendError(f"Failed to append {draft.sender.value} record: {exc}") from exc

        view[pending.id] = stored
        self._publish(identity)
        LOGGER.debug("Appended %s record %s", draft.sender.value, stored.id)
        return stored.id
