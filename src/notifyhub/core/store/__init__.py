"""notifyhub Core Store -- SQLite persistence

Factory for the store group that shares one database connection.
"""

from pathlib import Path

import aiosqlite

from .contact_store import SqliteContactDirectory
from .ledger_store import SqliteDeliveryLedger, attempts_from_records
from .sqlite_init import init_db


class StoreGroup:
    """Store instances sharing one database connection"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self.conn = conn
        self.contact_directory = SqliteContactDirectory(conn)
        self.ledger = SqliteDeliveryLedger(conn)


async def create_store_group(db_path: str) -> StoreGroup:
    """Open the database, initialise the schema and build the store group

    Args:
        db_path: SQLite database file path

    Returns:
        StoreGroup instance
    """
    db_dir = Path(db_path).parent
    db_dir.mkdir(parents=True, exist_ok=True)

    conn = await aiosqlite.connect(db_path)
    conn.row_factory = aiosqlite.Row
    await init_db(conn)

    return StoreGroup(conn=conn)


__all__ = [
    "StoreGroup",
    "create_store_group",
    "SqliteContactDirectory",
    "SqliteDeliveryLedger",
    "attempts_from_records",
    "init_db",
]
