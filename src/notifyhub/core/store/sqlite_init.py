"""SQLite database initialisation

PRAGMA setup + DDL for the personnel directory and the delivery ledger.
Uses aiosqlite.
"""

import aiosqlite

# personnel table: read-only directory from the dispatch path's point of view
_PERSONNEL_DDL = """
CREATE TABLE IF NOT EXISTS personnel (
    id          TEXT PRIMARY KEY,
    first_name  TEXT NOT NULL DEFAULT '',
    last_name   TEXT NOT NULL DEFAULT '',
    email       TEXT,
    phone       TEXT
);
"""

# messages table: one row per dispatch call
_MESSAGES_DDL = """
CREATE TABLE IF NOT EXISTS messages (
    message_id   TEXT PRIMARY KEY,
    subject      TEXT NOT NULL,
    body         TEXT NOT NULL,
    channels     TEXT NOT NULL DEFAULT '[]',
    schedule_at  TEXT,
    created_at   TEXT NOT NULL
);
"""

# message_recipients table: one row per (message, recipient, channel)
_MESSAGE_RECIPIENTS_DDL = """
CREATE TABLE IF NOT EXISTS message_recipients (
    message_id    TEXT NOT NULL,
    recipient_id  TEXT NOT NULL,
    channel       TEXT NOT NULL,
    address       TEXT NOT NULL DEFAULT '',
    status        TEXT NOT NULL DEFAULT 'pending',
    error         TEXT NOT NULL DEFAULT '',
    provider      TEXT NOT NULL DEFAULT '',
    created_at    TEXT NOT NULL,
    updated_at    TEXT NOT NULL,

    PRIMARY KEY (message_id, recipient_id, channel),
    FOREIGN KEY (message_id) REFERENCES messages(message_id)
);
"""

_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_messages_created_at ON messages(created_at DESC);",
    "CREATE INDEX IF NOT EXISTS idx_message_recipients_status ON message_recipients(status);",
    (
        "CREATE INDEX IF NOT EXISTS idx_message_recipients_recipient "
        "ON message_recipients(recipient_id);"
    ),
]


async def init_db(conn: aiosqlite.Connection) -> None:
    """Initialise the database: PRAGMA + tables + indexes

    Args:
        conn: aiosqlite connection
    """
    await conn.execute("PRAGMA journal_mode = WAL;")
    await conn.execute("PRAGMA foreign_keys = ON;")
    await conn.execute("PRAGMA busy_timeout = 5000;")

    await conn.execute(_PERSONNEL_DDL)
    await conn.execute(_MESSAGES_DDL)
    await conn.execute(_MESSAGE_RECIPIENTS_DDL)

    for idx_sql in _INDEXES:
        await conn.execute(idx_sql)

    await conn.commit()


async def verify_wal_mode(conn: aiosqlite.Connection) -> bool:
    """Return True if WAL journaling is active"""
    cursor = await conn.execute("PRAGMA journal_mode;")
    row = await cursor.fetchone()
    return row is not None and row[0].lower() == "wal"
