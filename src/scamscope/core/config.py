"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core and adapters expect so the app layer can build them safely.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

DEFAULT_GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_GEMINI_MODEL = "gemini-2.0-flash"


@dataclass(frozen=True)
class ClassifierConfig:
    """Completion endpoint settings consumed by the Gemini adapter."""

    api_key: str
    model: str = DEFAULT_GEMINI_MODEL
    base_url: str = DEFAULT_GEMINI_BASE_URL
    # None keeps the transport default; no deadline is enforced otherwise.
    timeout_seconds: Optional[float] = None
