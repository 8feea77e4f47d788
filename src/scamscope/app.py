"""Application entry point for scamscope."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

from art import tprint

from scamscope import settings
from scamscope.adapters.gemini_client import GeminiCompletionClient
from scamscope.adapters.identity_store import load_or_create_identity
from scamscope.adapters.record_formatting import format_classification_lines, format_record_lines
from scamscope.adapters.sqlite_store import SQLiteLogStore
from scamscope.core.classifier import ScamClassifier
from scamscope.core.config import ClassifierConfig
from scamscope.core.conversation import ConversationLog
from scamscope.core.errors import ScamScopeError
from scamscope.core.models import Record
from scamscope.core.ordering import sort_for_display

NAME = "SCAMSCOPE"
FONT = "tarty-1"

# Environment values that must never reach a log line.
REDACTED_ENV = ["GEMINI_API_KEY"]


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


class _RedactingFormatter(logging.Formatter):
    def __init__(self, secrets: list[str], fmt: str, datefmt: Optional[str] = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self._secrets = [secret for secret in secrets if secret]

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for secret in self._secrets:
            message = message.replace(secret, "***")
        return message


def _collect_redaction_values(config: dict) -> list[str]:
    redact_cfg = config.get("redact", {}) if config else {}
    names = list(REDACTED_ENV)
    names.extend(redact_cfg.get("patterns", []))
    values = []
    for name in names:
        value = os.getenv(name)
        if value:
            values.append(value)
    return sorted(set(values), key=len, reverse=True)


def _configure_logging(console_allowed: bool = True) -> None:
    config = settings.LOGGING or {}
    if not config.get("enabled", False):
        return

    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    secrets = _collect_redaction_values(config)
    formatter = _RedactingFormatter(secrets, fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    # The chat UI owns the terminal, so console logging is only for CLI commands.
    if console_allowed and config.get("console", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = settings.resolve_path(file_cfg.get("path", "logs/scamscope.log"))
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        max_bytes = int(file_cfg.get("max_bytes", 5 * 1024 * 1024))
        backup_count = int(file_cfg.get("backup_count", 5))
        file_handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers)


def build_classifier() -> ScamClassifier:
    config = ClassifierConfig(
        api_key=settings.GEMINI_API_KEY,
        model=settings.GEMINI_MODEL,
        base_url=settings.GEMINI_BASE_URL,
        timeout_seconds=settings.REQUEST_TIMEOUT_SECONDS,
    )
    return ScamClassifier(GeminiCompletionClient(config))


def build_log() -> ConversationLog:
    storage = SQLiteLogStore(settings.DB_PATH)
    storage.init_db()
    return ConversationLog(storage)


def print_records(records: list[Record]) -> None:
    for record in sort_for_display(records):
        for line in format_record_lines(record):
            print(line)


def _run() -> None:
    _configure_logging(console_allowed=False)
    logger = logging.getLogger(__name__)
    logger.info("Starting scamscope chat")

    from scamscope.frontend.app import ChatApp

    identity = load_or_create_identity(settings.SESSION_PATH)
    ChatApp(identity=identity, log=build_log(), classifier=build_classifier()).run()


def _check(text: str) -> None:
    _configure_logging()
    classifier = build_classifier()
    classification = asyncio.run(classifier.classify(text))
    for line in format_classification_lines(classification):
        print(line.strip())


def _history() -> None:
    _configure_logging()
    identity = load_or_create_identity(settings.SESSION_PATH)
    records = build_log().snapshot(identity)
    if not records:
        print("No messages yet.")
        return
    print_records(records)


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="scamscope")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("run", help="Start the chat UI")
    check_parser = subparsers.add_parser("check", help="Classify one message without storing it")
    check_parser.add_argument("text", help="Message text to analyze")
    subparsers.add_parser("history", help="Print the stored conversation in display order")

    args = parser.parse_args(argv)
    _print_banner()
    try:
        if args.command == "check":
            _check(args.text)
            return
        if args.command == "history":
            _history()
            return
        _run()
    except (ScamScopeError, RuntimeError) as exc:
        parser.exit(1, f"scamscope: {exc}\n")


if __name__ == "__main__":
    main()
