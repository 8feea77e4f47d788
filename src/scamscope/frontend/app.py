"""Main Textual app for the scamscope chat."""

from __future__ import annotations

from typing import Any, Optional

from rich.text import Text
from textual.app import App, ComposeResult
from textual.containers import Container, Horizontal, Vertical, VerticalScroll
from textual.widgets import Footer, Input, Static

from scamscope.adapters.record_formatting import (
    LEVEL_STYLES,
    confidence_bar,
    format_time_label,
    verdict_icon,
    verdict_title,
)
from scamscope.core.conversation import ConversationLog, Subscription
from scamscope.core.errors import LogSubscribeError, TurnError, TurnInProgressError
from scamscope.core.models import MODEL_LEVELS, Identity, Record, Sender
from scamscope.core.ordering import sort_for_display
from scamscope.core.ports import ClassifierPort
from scamscope.core.turns import TurnController

from .constants import AI_BUBBLE, SCOPE_CYAN, USER_BUBBLE, WELCOME_TEXT
from .state import ChatState


def render_record(record: Record) -> Text:
    """Rich text for one chat bubble, including the verdict badge if any."""

    text = Text()
    if record.sender == Sender.AI:
        text.append("AI Analysis\n", style=f"bold {SCOPE_CYAN}")
    text.append(record.text)
    text.append(f"\n{format_time_label(record.created_at)}", style="dim")

    classification = record.classification
    if classification is None:
        return text

    style = LEVEL_STYLES[classification.level]
    text.append(f"\n\n{verdict_icon(classification.level)} {verdict_title(classification)}", style=style)
    if classification.level in MODEL_LEVELS:
        text.append(f"\n{confidence_bar(classification.confidence_percent)}", style=style)
        text.append(f" Scam confidence: {classification.confidence_percent}%", style="dim")
    text.append(f"\n{classification.explanation}", style=style)
    return text


class ChatApp(App):
    """Single-identity chat that classifies every submitted message."""

    CSS = f"""
    Screen {{
        background: #0f172a;
        color: #e2e8f0;
    }}

    #header {{
        height: 4;
        padding: 0 2;
        border-bottom: solid #1e293b;
    }}

    #header-left, #header-right {{
        width: 1fr;
    }}

    #header-right {{
        content-align: right top;
        text-align: right;
    }}

    .subtle {{
        color: #94a3b8;
    }}

    #error-banner {{
        display: none;
        background: #7f1d1d;
        padding: 0 2;
    }}

    #error-banner.visible {{
        display: block;
    }}

    #messages {{
        height: 1fr;
        padding: 1 2;
    }}

    .bubble {{
        max-width: 80;
        padding: 0 1;
        margin-bottom: 1;
    }}

    .bubble--user {{
        background: {USER_BUBBLE};
        margin-left: 20;
    }}

    .bubble--ai {{
        background: {AI_BUBBLE};
    }}

    .welcome {{
        border: round {SCOPE_CYAN};
        padding: 0 1;
        margin-bottom: 1;
    }}

    #composer {{
        height: 3;
        padding: 0 2;
    }}
    """

    BINDINGS = [
        ("ctrl+r", "acknowledge_error", "Retry"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self,
        identity: Identity,
        log: ConversationLog,
        classifier: ClassifierPort,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.chat_state = ChatState()
        self._identity = identity
        self._log = log
        self._controller = TurnController(identity, log, classifier)
        self._subscription: Optional[Subscription] = None

    def compose(self) -> ComposeResult:
        with Container(id="header"):
            with Horizontal():
                with Vertical(id="header-left"):
                    yield Static(self._title_text(), id="title")
                    yield Static("AI scam analysis", classes="subtle")
                with Vertical(id="header-right"):
                    yield Static(f"id: {self._identity.user_id[:8]}", classes="subtle")
                    yield Static("", id="header-status")
        yield Static("", id="error-banner")
        yield VerticalScroll(id="messages")
        yield Input(placeholder="Enter message for AI analysis...", id="composer")
        yield Footer()

    def on_mount(self) -> None:
        self._refresh_status()
        self.run_worker(self._watch_conversation(), exclusive=True, group="conversation")

    def on_unmount(self) -> None:
        if self._subscription is not None:
            self._subscription.close()

    async def _watch_conversation(self) -> None:
        try:
            self._subscription = self._log.subscribe(self._identity)
        except LogSubscribeError:
            self.chat_state.loading = False
            self.chat_state.error = "Failed to load messages. Please restart scamscope."
            self._refresh_status()
            return

        async for snapshot in self._subscription:
            self.chat_state.loading = False
            self.chat_state.record_count = len(snapshot)
            await self._render_snapshot(snapshot)
            self._refresh_status()

    async def _render_snapshot(self, snapshot: list[Record]) -> None:
        container = self.query_one("#messages", VerticalScroll)
        widgets = [Static(WELCOME_TEXT, classes="welcome")]
        for record in sort_for_display(snapshot):
            sender_class = "bubble--user" if record.sender == Sender.USER else "bubble--ai"
            widgets.append(Static(render_record(record), classes=f"bubble {sender_class}"))
        await container.remove_children()
        await container.mount(*widgets)
        container.scroll_end(animate=False)

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        text = event.value.strip()
        if not text or self._controller.busy:
            return
        event.input.value = ""
        self.chat_state.notice = None
        self.run_worker(self._send(text), group="turn")

    async def _send(self, text: str) -> None:
        self.chat_state.sending = True
        self._refresh_status()
        try:
            await self._controller.submit(text)
        except TurnInProgressError as exc:
            self.chat_state.notice = str(exc)
        except TurnError as exc:
            self.chat_state.error = self._controller.error or str(exc)
        finally:
            self.chat_state.sending = False
            self._refresh_status()

    def action_acknowledge_error(self) -> None:
        self._controller.acknowledge_failure()
        self.chat_state.error = None
        if self._subscription is None:
            self.chat_state.loading = True
            self.run_worker(self._watch_conversation(), exclusive=True, group="conversation")
        self._refresh_status()

    def _refresh_status(self) -> None:
        status = self.query_one("#header-status", Static)
        banner = self.query_one("#error-banner", Static)
        composer = self.query_one("#composer", Input)

        if self.chat_state.loading:
            status.update("Connecting...")
        elif self.chat_state.sending:
            status.update("Analyzing...")
        elif self.chat_state.notice:
            status.update(self.chat_state.notice)
        else:
            status.update(f"Connected · {self.chat_state.record_count} messages")

        if self.chat_state.error:
            banner.update(f"{self.chat_state.error}  (ctrl+r to retry)")
            banner.add_class("visible")
        else:
            banner.update("")
            banner.remove_class("visible")

        composer.disabled = self.chat_state.input_locked
        if not composer.disabled:
            composer.focus()

    @staticmethod
    def _title_text() -> Text:
        return Text.assemble(
            ("SCAM", SCOPE_CYAN),
            ("SCOPE > Chat", "bold"),
        )
