"""Ports (interfaces) used by the core.

Ports define the minimal contracts for the completion endpoint, the
conversation backing store and the classifier so that the core can be
reused with different backends.
"""

from __future__ import annotations

from typing import Protocol

from scamscope.core.models import Classification, Identity, Record


class CompletionPort(Protocol):
    """Opaque text-completion endpoint."""

    async def complete(self, prompt: str) -> str:
        """Return the first candidate's text.

        Raises CompletionHTTPError on a non-success status and
        MalformedCompletionError when no candidate text is present.
        """
        ...


class LogStorePort(Protocol):
    """Append-only per-identity record storage."""

    async def insert(self, identity: Identity, record: Record) -> Record:
        """Persist a pending record and return it with its server timestamp."""
        ...

    def load(self, identity: Identity) -> list[Record]:
        """Return every stored record for the identity, in any order."""
        ...


class ClassifierPort(Protocol):
    """Classification operations required by the turn workflow."""

    async def classify(self, message_text: str) -> Classification:
        ...
