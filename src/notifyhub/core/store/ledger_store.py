"""DeliveryLedger SQLite implementation

messages holds one row per dispatch; message_recipients holds one row per
(message, recipient, channel). Rows start as pending and move once to sent
or failed. Every write failure surfaces as LedgerWriteError so callers can
log and swallow it.
"""

import asyncio
import json
from datetime import UTC, datetime

import aiosqlite
from ulid import ULID

from ..config import LEDGER_ERROR_MAX_LENGTH
from ..exceptions import LedgerWriteError
from ..models import (
    AttemptRecord,
    AttemptStatus,
    Channel,
    DeliveryAttempt,
    Message,
    MessageRecord,
    Recipient,
    validate_transition,
)


class SqliteDeliveryLedger:
    """DeliveryLedger over a shared aiosqlite connection"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn
        # commits on a shared connection must not interleave
        self._write_lock = asyncio.Lock()

    async def create_message(self, message: Message) -> str:
        message_id = str(ULID())
        now = datetime.now(UTC).isoformat()
        await self._write(
            "create_message",
            """
            INSERT INTO messages (message_id, subject, body, channels, schedule_at, created_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            [
                (
                    message_id,
                    message.subject,
                    message.body,
                    json.dumps(sorted(c.value for c in message.channels)),
                    message.schedule_at.isoformat() if message.schedule_at else None,
                    now,
                )
            ],
        )
        return message_id

    async def create_attempt_stubs(
        self,
        message_id: str,
        pairs: list[tuple[Recipient, Channel]],
    ) -> None:
        now = datetime.now(UTC).isoformat()
        rows = [
            (
                message_id,
                recipient.id,
                channel.value,
                recipient.address_for(channel) or "",
                AttemptStatus.PENDING.value,
                now,
                now,
            )
            for recipient, channel in pairs
        ]
        if not rows:
            return
        await self._write(
            "create_attempt_stubs",
            """
            INSERT INTO message_recipients
                (message_id, recipient_id, channel, address, status, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(message_id, recipient_id, channel) DO NOTHING
            """,
            rows,
        )

    async def record_attempt(self, message_id: str, attempt: DeliveryAttempt) -> None:
        """Upsert the terminal status; rows already terminal are left alone"""
        if not validate_transition(AttemptStatus.PENDING, attempt.status):
            raise LedgerWriteError(
                "record_attempt",
                ValueError(f"{attempt.status} is not a terminal attempt status"),
            )
        now = datetime.now(UTC).isoformat()
        error = (attempt.error or "")[:LEDGER_ERROR_MAX_LENGTH]
        await self._write(
            "record_attempt",
            """
            INSERT INTO message_recipients
                (message_id, recipient_id, channel, status, error, provider,
                 created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(message_id, recipient_id, channel) DO UPDATE SET
                status = excluded.status,
                error = excluded.error,
                provider = excluded.provider,
                updated_at = excluded.updated_at
            WHERE message_recipients.status = 'pending'
            """,
            [
                (
                    message_id,
                    attempt.recipient_id,
                    attempt.channel.value,
                    attempt.status.value,
                    error,
                    attempt.provider,
                    now,
                    now,
                )
            ],
        )

    async def get_message(self, message_id: str) -> MessageRecord | None:
        cursor = await self._conn.execute(
            "SELECT message_id, subject, body, channels, schedule_at, created_at "
            "FROM messages WHERE message_id = ?",
            (message_id,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return _message_from_row(row)

    async def list_messages(self, limit: int = 50) -> list[MessageRecord]:
        """Logged messages, newest first"""
        cursor = await self._conn.execute(
            "SELECT message_id, subject, body, channels, schedule_at, created_at "
            "FROM messages ORDER BY created_at DESC, message_id DESC LIMIT ?",
            (limit,),
        )
        rows = await cursor.fetchall()
        return [_message_from_row(row) for row in rows]

    async def get_attempts(self, message_id: str) -> list[AttemptRecord]:
        cursor = await self._conn.execute(
            """
            SELECT message_id, recipient_id, channel, address, status, error,
                   provider, created_at, updated_at
            FROM message_recipients
            WHERE message_id = ?
            ORDER BY recipient_id, channel
            """,
            (message_id,),
        )
        rows = await cursor.fetchall()
        return [
            AttemptRecord(
                message_id=row[0],
                recipient_id=row[1],
                channel=row[2],
                address=row[3],
                status=row[4],
                error=row[5],
                provider=row[6],
                created_at=datetime.fromisoformat(row[7]),
                updated_at=datetime.fromisoformat(row[8]),
            )
            for row in rows
        ]

    async def delete_message(self, message_id: str) -> bool:
        """Remove a message and its attempt rows

        Returns False when no such message was logged.
        """
        async with self._write_lock:
            try:
                await self._conn.execute(
                    "DELETE FROM message_recipients WHERE message_id = ?",
                    (message_id,),
                )
                cursor = await self._conn.execute(
                    "DELETE FROM messages WHERE message_id = ?",
                    (message_id,),
                )
                await self._conn.commit()
            except aiosqlite.Error as e:
                await self._conn.rollback()
                raise LedgerWriteError("delete_message", e) from e
        return cursor.rowcount > 0

    async def _write(self, operation: str, sql: str, rows: list[tuple]) -> None:
        async with self._write_lock:
            try:
                await self._conn.executemany(sql, rows)
                await self._conn.commit()
            except (aiosqlite.Error, ValueError) as e:
                await self._conn.rollback()
                raise LedgerWriteError(operation, e) from e


def _message_from_row(row) -> MessageRecord:
    return MessageRecord(
        message_id=row[0],
        subject=row[1],
        body=row[2],
        channels=json.loads(row[3]),
        schedule_at=datetime.fromisoformat(row[4]) if row[4] else None,
        created_at=datetime.fromisoformat(row[5]),
    )


def attempts_from_records(records: list[AttemptRecord]) -> list[DeliveryAttempt]:
    """Terminal ledger rows as DeliveryAttempts, for report rebuilding"""
    return [
        DeliveryAttempt(
            recipient_id=r.recipient_id,
            channel=r.channel,
            status=r.status,
            error=r.error or None,
            provider=r.provider,
        )
        for r in records
        if r.status != AttemptStatus.PENDING
    ]
