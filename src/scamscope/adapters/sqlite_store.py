"""SQLite storage adapter.

Implements the core LogStorePort using a simple SQLite database.
"""

from __future__ import annotations

import sqlite3
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Optional

from scamscope.core.models import Classification, Identity, Record, ScamLevel, Sender


class SQLiteLogStore:
    """Thin SQLite wrapper that satisfies the LogStorePort contract."""

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def init_db(self) -> None:
        """Create tables if they do not exist.

        Tables:
        - records: append-only log of conversation records for all identities
        """

        with self._connect() as conn:
            # records is append-only; rows are never updated or deleted.
            # Fields:
            # - seq: arrival order across the whole database
            # - id: record id assigned by the conversation log (UNIQUE)
            # - user_id: identity that owns the record
            # - text: message or AI status text
            # - sender: "user" or "ai"
            # - created_at: server timestamp, strictly increasing per user_id
            # - level/confidence_percent/is_scam/explanation: classification,
            #   NULL for user records and placeholders
            # - confidence_percent: decimal text, unbounded like the parsed int
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS records (
                    seq INTEGER PRIMARY KEY AUTOINCREMENT,
                    id TEXT NOT NULL UNIQUE,
                    user_id TEXT NOT NULL,
                    text TEXT NOT NULL,
                    sender TEXT NOT NULL,
                    created_at TIMESTAMP NOT NULL,
                    level TEXT,
                    confidence_percent TEXT,
                    is_scam INTEGER,
                    explanation TEXT
                )
                """
            )
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_records_user ON records (user_id, seq)"
            )

    def _next_timestamp(self, conn: sqlite3.Connection, user_id: str) -> datetime:
        now = datetime.now(timezone.utc)
        row = conn.execute(
            "SELECT created_at FROM records WHERE user_id = ? ORDER BY seq DESC LIMIT 1",
            (user_id,),
        ).fetchone()
        if row is None:
            return now
        last = datetime.fromisoformat(row["created_at"])
        # Clock skew or same-microsecond appends must not break monotonicity.
        if now <= last:
            return last + timedelta(microseconds=1)
        return now

    async def insert(self, identity: Identity, record: Record) -> Record:
        """Persist a record and return it with its server timestamp."""

        classification = record.classification
        with self._connect() as conn:
            created_at = self._next_timestamp(conn, identity.user_id)
            conn.execute(
                """
                INSERT INTO records (
                    id,
                    user_id,
                    text,
                    sender,
                    created_at,
                    level,
                    confidence_percent,
                    is_scam,
                    explanation
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    record.id,
                    identity.user_id,
                    record.text,
                    record.sender.value,
                    created_at.isoformat(),
                    classification.level.value if classification else None,
                    str(classification.confidence_percent) if classification else None,
                    int(classification.is_scam) if classification else None,
                    classification.explanation if classification else None,
                ),
            )
        return replace(record, created_at=created_at)

    def load(self, identity: Identity) -> list[Record]:
        """Return all records for an identity in arrival order."""

        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT id, text, sender, created_at, level, confidence_percent,
                       is_scam, explanation
                FROM records
                WHERE user_id = ?
                ORDER BY seq
                """,
                (identity.user_id,),
            ).fetchall()
        return [self._row_to_record(row) for row in rows]

    @staticmethod
    def _row_to_record(row: sqlite3.Row) -> Record:
        classification: Optional[Classification] = None
        if row["level"] is not None:
            classification = Classification(
                level=ScamLevel(row["level"]),
                confidence_percent=int(row["confidence_percent"]),
                is_scam=bool(row["is_scam"]),
                explanation=row["explanation"] or "",
            )
        return Record(
            id=row["id"],
            text=row["text"],
            sender=Sender(row["sender"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            classification=classification,
        )
