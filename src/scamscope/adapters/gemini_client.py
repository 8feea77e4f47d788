"""Gemini generateContent completion adapter.

Implements the core CompletionPort with a single HTTP POST per prompt.
"""

from __future__ import annotations

import asyncio
import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from typing import Any, Optional

from scamscope.core.config import ClassifierConfig
from scamscope.core.errors import CompletionHTTPError, MalformedCompletionError

LOGGER = logging.getLogger(__name__)


def extract_candidate_text(payload: Any) -> str:
    """Return ``candidates[0].content.parts[0].text`` or raise MalformedCompletionError."""

    try:
        candidates = payload["candidates"]
        text = candidates[0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError) as exc:
        raise MalformedCompletionError() from exc
    if not isinstance(text, str):
        raise MalformedCompletionError()
    return text


def _error_message(body: bytes) -> Optional[str]:
    try:
        data = json.loads(body.decode("utf-8", errors="replace"))
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    error = data.get("error")
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return None


class GeminiCompletionClient:
    """CompletionPort adapter for the Gemini REST API."""

    def __init__(self, config: ClassifierConfig) -> None:
        if not config.api_key:
            raise RuntimeError("Missing GEMINI_API_KEY in environment")
        self._config = config

    def _endpoint(self) -> str:
        # The key travels in the query string; log output is redacted in app.py.
        base = self._config.base_url.rstrip("/")
        model = urllib.parse.quote(self._config.model, safe="-._")
        key = urllib.parse.quote(self._config.api_key, safe="")
        return f"{base}/models/{model}:generateContent?key={key}"

    @staticmethod
    def build_payload(prompt: str) -> dict[str, Any]:
        return {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}

    def _post(self, prompt: str) -> str:
        data = json.dumps(self.build_payload(prompt)).encode("utf-8")
        request = urllib.request.Request(self._endpoint(), data=data, method="POST")
        request.add_header("Content-Type", "application/json")

        kwargs: dict[str, Any] = {}
        if self._config.timeout_seconds is not None:
            kwargs["timeout"] = self._config.timeout_seconds
        try:
            with urllib.request.urlopen(request, **kwargs) as response:
                body = response.read()
        except urllib.error.HTTPError as e:
            error_body = e.read() or b""
            raise CompletionHTTPError(e.code, str(e.reason or ""), _error_message(error_body)) from e

        try:
            payload = json.loads(body.decode("utf-8"))
        except ValueError as exc:
            raise MalformedCompletionError() from exc
        return extract_candidate_text(payload)

    async def complete(self, prompt: str) -> str:
        """POST the prompt and return the first candidate's text.

        The blocking urllib call runs in a worker thread so one slow
        classification never stalls the event loop.
        """

        LOGGER.debug("Requesting completion from %s", self._config.model)
        return await asyncio.to_thread(self._post, prompt)
