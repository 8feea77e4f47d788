"""Shared constants for the Textual UI."""

from __future__ import annotations

SCOPE_CYAN = "#22D3EE"
USER_BUBBLE = "#0369A1"
AI_BUBBLE = "#334155"
WELCOME_TEXT = (
    "Paste any message you received and the AI will check it for scam "
    "indicators. Verdicts are stored with your conversation."
)
