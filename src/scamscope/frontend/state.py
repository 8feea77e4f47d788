"""State container for the chat screen."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ChatState:
    loading: bool = True
    sending: bool = False
    error: str | None = None
    # Transient message that does not lock the composer.
    notice: str | None = None
    record_count: int = 0

    @property
    def input_locked(self) -> bool:
        return self.loading or self.sending or bool(self.error)
