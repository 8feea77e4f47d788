from __future__ import annotations

import asyncio
import logging

from scamscope import app
from scamscope.core.conversation import ConversationLog
from scamscope.core.errors import TurnFailedError, TurnInProgressError
from scamscope.core.models import Classification, Identity, Record, ScamLevel, Sender
from scamscope.frontend.app import ChatApp, render_record
from scamscope.frontend.state import ChatState


def test_redacting_formatter_masks_api_key(monkeypatch) -> None:
    monkeypatch.setenv("GEMINI_API_KEY", "AIzaSecret123")
    secrets = app._collect_redaction_values({})
    formatter = app._RedactingFormatter(secrets, fmt="%(message)s")
    record = logging.LogRecord(
        "scamscope", logging.INFO, __file__, 1, "GET /models?key=%s", ("AIzaSecret123",), None
    )
    assert formatter.format(record) == "GET /models?key=***"


def test_check_command_prints_verdict(monkeypatch, capsys) -> None:
    class FakeClassifier:
        async def classify(self, message_text: str) -> Classification:
            return Classification(ScamLevel.SAFE, 8, False, "Normal conversation.")

    monkeypatch.setattr(app, "build_classifier", FakeClassifier)
    monkeypatch.setattr(app, "_print_banner", lambda: None)

    app.main(["check", "see you at dinner"])

    out = capsys.readouterr().out
    assert "SAFE (8% confidence)" in out
    assert "Normal conversation." in out


def test_render_record_includes_badge_for_final_record() -> None:
    record = Record(
        id="1",
        text="Analysis complete.",
        sender=Sender.AI,
        created_at=None,
        classification=Classification(ScamLevel.HIGHLY_LIKELY_SCAM, 88, True, "Lottery bait."),
    )
    plain = render_record(record).plain
    assert "AI Analysis" in plain
    assert "HIGHLY LIKELY SCAM! (88% confidence)" in plain
    assert "Scam confidence: 88%" in plain
    assert "Lottery bait." in plain
    assert "Sending..." in plain


class RejectingController:
    def __init__(self, error: Exception) -> None:
        self.error_to_raise = error
        self.error = None

    async def submit(self, text: str) -> None:
        raise self.error_to_raise


class EmptyStore:
    async def insert(self, identity: Identity, record: Record) -> Record:
        return record

    def load(self, identity: Identity) -> list[Record]:
        return []


def _chat_app(monkeypatch, controller: RejectingController) -> ChatApp:
    chat = ChatApp(Identity(user_id="alice"), ConversationLog(EmptyStore()), classifier=None)
    chat._controller = controller
    chat.chat_state.loading = False
    monkeypatch.setattr(chat, "_refresh_status", lambda: None)
    return chat


def test_rejected_submission_keeps_composer_usable(monkeypatch) -> None:
    chat = _chat_app(monkeypatch, RejectingController(TurnInProgressError("busy")))

    asyncio.run(chat._send("second message"))

    assert chat.chat_state.error is None
    assert chat.chat_state.notice == "busy"
    assert not chat.chat_state.input_locked


def test_failed_turn_locks_composer_until_acknowledged(monkeypatch) -> None:
    chat = _chat_app(monkeypatch, RejectingController(TurnFailedError("boom")))

    asyncio.run(chat._send("hello"))

    assert chat.chat_state.error == "boom"
    assert chat.chat_state.input_locked


def test_chat_state_lock_ignores_notice() -> None:
    state = ChatState(loading=False, notice="A message is already being analyzed")
    assert not state.input_locked
    state.sending = True
    assert state.input_locked
