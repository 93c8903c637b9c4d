"""ContactDirectory SQLite implementation

Backs the directory with the personnel table. The dispatch path only reads;
upsert_contact exists for seeding and administration.
"""

import aiosqlite

from ..models import ContactRecord


class SqliteContactDirectory:
    """ContactDirectory over the personnel table"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def get_contacts(self, ids: list[str]) -> list[ContactRecord]:
        """Fetch every requested id in one query"""
        if not ids:
            return []
        placeholders = ", ".join("?" for _ in ids)
        cursor = await self._conn.execute(
            f"SELECT id, first_name, last_name, email, phone FROM personnel "
            f"WHERE id IN ({placeholders})",
            tuple(ids),
        )
        rows = await cursor.fetchall()
        return [self._row_to_contact(row) for row in rows]

    async def upsert_contact(self, contact: ContactRecord) -> None:
        """Insert or replace a personnel row"""
        await self._conn.execute(
            """
            INSERT INTO personnel (id, first_name, last_name, email, phone)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                first_name = excluded.first_name,
                last_name = excluded.last_name,
                email = excluded.email,
                phone = excluded.phone
            """,
            (
                contact.id,
                contact.first_name,
                contact.last_name,
                contact.email,
                contact.phone,
            ),
        )
        await self._conn.commit()

    @staticmethod
    def _row_to_contact(row: aiosqlite.Row) -> ContactRecord:
        return ContactRecord(
            id=row[0],
            first_name=row[1] or "",
            last_name=row[2] or "",
            email=row[3],
            phone=row[4],
        )
