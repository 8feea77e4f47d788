from __future__ import annotations

import asyncio
import io
import json
import urllib.error
import urllib.request

import pytest

from scamscope.adapters.gemini_client import GeminiCompletionClient, extract_candidate_text
from scamscope.core.classifier import ScamClassifier
from scamscope.core.config import ClassifierConfig
from scamscope.core.errors import CompletionHTTPError, MalformedCompletionError
from scamscope.core.models import ScamLevel


class FakeResponse:
    def __init__(self, payload: dict) -> None:
        self._body = json.dumps(payload).encode("utf-8")

    def read(self) -> bytes:
        return self._body

    def __enter__(self) -> "FakeResponse":
        return self

    def __exit__(self, *exc_info) -> None:
        return None


def _candidates(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}}]}


def _client(**overrides) -> GeminiCompletionClient:
    config = ClassifierConfig(api_key="secret-key", **overrides)
    return GeminiCompletionClient(config)


def test_complete_posts_prompt_and_reads_first_candidate(monkeypatch) -> None:
    seen = {}

    def fake_urlopen(request, **kwargs):
        seen["url"] = request.full_url
        seen["method"] = request.get_method()
        seen["body"] = json.loads(request.data.decode("utf-8"))
        seen["kwargs"] = kwargs
        return FakeResponse(_candidates("SAFE|8|fine"))

    monkeypatch.setattr(urllib.request, "urlopen", fake_urlopen)

    text = asyncio.run(_client().complete("PROMPT"))

    assert text == "SAFE|8|fine"
    assert seen["method"] == "POST"
    assert seen["url"].endswith("/models/gemini-2.0-flash:generateContent?key=secret-key")
    assert seen["body"] == {"contents": [{"role": "user", "parts": [{"text": "PROMPT"}]}]}
    # No timeout override unless configured.
    assert seen["kwargs"] == {}


def test_timeout_is_passed_when_configured(monkeypatch) -> None:
    seen = {}

    def fake_urlopen(request, **kwargs):
        seen.update(kwargs)
        return FakeResponse(_candidates("SAFE|1|ok"))

    monkeypatch.setattr(urllib.request, "urlopen", fake_urlopen)
    asyncio.run(_client(timeout_seconds=7.5).complete("p"))
    assert seen == {"timeout": 7.5}


def test_http_error_carries_status_and_api_message(monkeypatch) -> None:
    def fake_urlopen(request, **kwargs):
        body = io.BytesIO(json.dumps({"error": {"message": "API key not valid"}}).encode("utf-8"))
        raise urllib.error.HTTPError(request.full_url, 400, "Bad Request", {}, body)

    monkeypatch.setattr(urllib.request, "urlopen", fake_urlopen)

    with pytest.raises(CompletionHTTPError) as info:
        asyncio.run(_client().complete("p"))
    assert info.value.status == 400
    assert "Bad Request" in str(info.value)
    assert "API key not valid" in str(info.value)


def test_http_500_maps_to_error_classification(monkeypatch) -> None:
    def fake_urlopen(request, **kwargs):
        raise urllib.error.HTTPError(request.full_url, 500, "Internal Server Error", {}, io.BytesIO(b"oops"))

    monkeypatch.setattr(urllib.request, "urlopen", fake_urlopen)

    result = asyncio.run(ScamClassifier(_client()).classify("hello"))
    assert result.level == ScamLevel.ERROR
    assert result.is_scam is False
    assert "Internal Server Error" in result.explanation
    assert "Unknown AI error" in result.explanation


def test_missing_candidates_is_malformed(monkeypatch) -> None:
    monkeypatch.setattr(urllib.request, "urlopen", lambda request, **kwargs: FakeResponse({"candidates": []}))

    with pytest.raises(MalformedCompletionError):
        asyncio.run(_client().complete("p"))


def test_extract_candidate_text_rejects_partial_shapes() -> None:
    assert extract_candidate_text(_candidates("x")) == "x"
    for payload in (
        {},
        {"candidates": [{}]},
        {"candidates": [{"content": {"parts": []}}]},
        {"candidates": [{"content": {"parts": [{"inlineData": {}}]}}]},
        None,
    ):
        with pytest.raises(MalformedCompletionError):
            extract_candidate_text(payload)


def test_missing_api_key_fails_fast() -> None:
    with pytest.raises(RuntimeError):
        GeminiCompletionClient(ClassifierConfig(api_key=""))
