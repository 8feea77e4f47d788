from __future__ import annotations

import asyncio
from typing import Optional

from scamscope.core.classifier import ScamClassifier
from scamscope.core.errors import CompletionHTTPError, MalformedCompletionError
from scamscope.core.models import ScamLevel


class FakeCompletion:
    def __init__(self, text: str = "", error: Optional[Exception] = None) -> None:
        self.text = text
        self.error = error
        self.prompts: list[str] = []

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.text


def test_lottery_message_is_highly_likely_scam() -> None:
    message = "Congratulations! You won a lottery, click here to claim."
    completion = FakeCompletion("HIGHLY_LIKELY_SCAM|88|Classic lottery scam pattern.")
    result = asyncio.run(ScamClassifier(completion).classify(message))

    assert result.level == ScamLevel.HIGHLY_LIKELY_SCAM
    assert result.confidence_percent == 88
    assert result.is_scam is True
    assert result.explanation == "Classic lottery scam pattern."
    assert len(completion.prompts) == 1
    assert message in completion.prompts[0]


def test_http_error_becomes_error_classification() -> None:
    completion = FakeCompletion(error=CompletionHTTPError(500, "Internal Server Error", "backend down"))
    result = asyncio.run(ScamClassifier(completion).classify("hi"))

    assert result.level == ScamLevel.ERROR
    assert result.confidence_percent == 0
    assert result.is_scam is False
    assert result.explanation.startswith("Error during analysis: ")
    assert "Internal Server Error" in result.explanation
    assert "backend down" in result.explanation


def test_malformed_response_becomes_error_classification() -> None:
    completion = FakeCompletion(error=MalformedCompletionError())
    result = asyncio.run(ScamClassifier(completion).classify("hi"))

    assert result.level == ScamLevel.ERROR
    assert "Unexpected format" in result.explanation


def test_transport_exception_becomes_error_classification() -> None:
    completion = FakeCompletion(error=ConnectionRefusedError("connection refused"))
    result = asyncio.run(ScamClassifier(completion).classify("hi"))

    assert result.level == ScamLevel.ERROR
    assert result.explanation == "Error during analysis: connection refused"


def test_unexpected_model_text_becomes_unknown() -> None:
    completion = FakeCompletion("I think this is probably fine.")
    result = asyncio.run(ScamClassifier(completion).classify("hi"))

    assert result.level == ScamLevel.UNKNOWN
    assert result.is_scam is False
