"""SQLite library store adapter.

Implements the store ports using SQLite with aiosqlite for async access.
Provides ACID guarantees for loan state with zero operational overhead.
"""

import asyncio
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

import aiosqlite

from issuedesk.core.models import (
    AccessionRecord,
    IssuedItem,
    Item,
    Member,
    MemberType,
)
from issuedesk.core.ports import (
    AccessionRecordStorePort,
    CatalogStorePort,
    IssuedItemStorePort,
)

logger = logging.getLogger(__name__)

_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS items (
        id INTEGER PRIMARY KEY,
        title TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS members (
        id INTEGER PRIMARY KEY,
        name TEXT NOT NULL,
        member_type TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS accession_records (
        id INTEGER PRIMARY KEY,
        item_id INTEGER NOT NULL REFERENCES items(id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS issued_items (
        id INTEGER PRIMARY KEY,
        accession_record_id INTEGER NOT NULL REFERENCES accession_records(id),
        member_id INTEGER NOT NULL REFERENCES members(id),
        issue_date TIMESTAMP NOT NULL,
        is_returned INTEGER NOT NULL DEFAULT 0,
        return_date TIMESTAMP,
        late_fee_per_day INTEGER NOT NULL DEFAULT 0
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_accession_item ON accession_records(item_id)",
    "CREATE INDEX IF NOT EXISTS idx_issued_open ON issued_items(is_returned)",
)

_ACCESSION_SELECT = """
    SELECT ar.id, i.id, i.title
    FROM accession_records ar
    JOIN items i ON i.id = ar.item_id
"""

_ISSUED_SELECT = """
    SELECT ii.id, ii.issue_date, ii.is_returned, ii.return_date,
           ii.late_fee_per_day, ar.id, i.id, i.title,
           m.id, m.name, m.member_type
    FROM issued_items ii
    JOIN accession_records ar ON ar.id = ii.accession_record_id
    JOIN items i ON i.id = ar.item_id
    JOIN members m ON m.id = ii.member_id
"""


class SQLiteLibraryStore(
    AccessionRecordStorePort, IssuedItemStorePort, CatalogStorePort
):
    """SQLite-backed library store with connection pooling and async access."""

    def __init__(self, db_path: str, pool_size: int = 5):
        """Initialize SQLite store with connection pooling.

        Args:
            db_path: Path to SQLite database file.
            pool_size: Number of connections to maintain in the pool.
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._pool: list[aiosqlite.Connection] = []
        self._pool_lock = asyncio.Lock()
        self._schema_lock = asyncio.Lock()
        self._pool_size = pool_size
        self._schema_initialized = False

    async def _get_connection(self) -> aiosqlite.Connection:
        """Get a connection from the pool or create a new one."""
        async with self._pool_lock:
            if self._pool:
                return self._pool.pop()
        conn = await aiosqlite.connect(str(self.db_path))
        await conn.execute("PRAGMA foreign_keys = ON")
        return conn

    async def _return_connection(self, conn: aiosqlite.Connection) -> None:
        """Return a connection to the pool."""
        async with self._pool_lock:
            if len(self._pool) < self._pool_size:
                self._pool.append(conn)
                return
        await conn.close()

    async def close(self) -> None:
        """Close all pooled connections."""
        async with self._pool_lock:
            for conn in self._pool:
                await conn.close()
            self._pool.clear()

    async def _init_schema(self) -> None:
        """Initialize database schema on first use.

        Only runs once per instance. Subsequent calls are no-ops.
        """
        if self._schema_initialized:
            return
        async with self._schema_lock:
            if self._schema_initialized:
                return

            conn = await self._get_connection()
            try:
                for statement in _SCHEMA:
                    await conn.execute(statement)
                await conn.commit()
                self._schema_initialized = True
            finally:
                await self._return_connection(conn)

    async def _fetchall(
        self, sql: str, params: tuple[Any, ...] = ()
    ) -> list[tuple[Any, ...]]:
        await self._init_schema()
        conn = await self._get_connection()
        try:
            cursor = await conn.execute(sql, params)
            return list(await cursor.fetchall())
        finally:
            await self._return_connection(conn)

    async def _fetchone(
        self, sql: str, params: tuple[Any, ...] = ()
    ) -> tuple[Any, ...] | None:
        rows = await self._fetchall(sql, params)
        return rows[0] if rows else None

    async def _write(self, sql: str, params: tuple[Any, ...]) -> None:
        await self._init_schema()
        conn = await self._get_connection()
        try:
            await conn.execute(sql, params)
            await conn.commit()
        except Exception:
            await conn.rollback()
            raise
        finally:
            await self._return_connection(conn)

    async def _next_id(self, table: str) -> int:
        rows = await self._fetchall(f"SELECT COALESCE(MAX(id), 0) + 1 FROM {table}")
        return int(rows[0][0])

    # items
    async def get_item(self, item_id: int) -> Item | None:
        row = await self._fetchone("SELECT id, title FROM items WHERE id = ?", (item_id,))
        return Item(item_id=row[0], title=row[1]) if row else None

    async def get_all_items(self) -> list[Item]:
        rows = await self._fetchall("SELECT id, title FROM items ORDER BY id")
        return [Item(item_id=r[0], title=r[1]) for r in rows]

    async def save_item(self, item: Item) -> None:
        await self._write(
            """
            INSERT INTO items (id, title) VALUES (?, ?)
            ON CONFLICT(id) DO UPDATE SET title = excluded.title
            """,
            (item.item_id, item.title),
        )

    async def next_item_id(self) -> int:
        return await self._next_id("items")

    # members
    async def get_member(self, member_id: int) -> Member | None:
        row = await self._fetchone(
            "SELECT id, name, member_type FROM members WHERE id = ?", (member_id,)
        )
        if row is None:
            return None
        return Member(member_id=row[0], name=row[1], member_type=MemberType(row[2]))

    async def save_member(self, member: Member) -> None:
        await self._write(
            """
            INSERT INTO members (id, name, member_type) VALUES (?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                name = excluded.name,
                member_type = excluded.member_type
            """,
            (member.member_id, member.name, member.member_type.value),
        )

    async def next_member_id(self) -> int:
        return await self._next_id("members")

    # accession records
    async def get_all_accession_records(self) -> list[AccessionRecord]:
        rows = await self._fetchall(_ACCESSION_SELECT + " ORDER BY ar.id")
        return [
            AccessionRecord(
                accession_record_id=r[0], item=Item(item_id=r[1], title=r[2])
            )
            for r in rows
        ]

    async def save_accession_record(self, record: AccessionRecord) -> None:
        await self._write(
            "INSERT INTO accession_records (id, item_id) VALUES (?, ?)",
            (record.accession_record_id, record.item.item_id),
        )

    async def next_accession_record_id(self) -> int:
        return await self._next_id("accession_records")

    # issued items
    async def get_all_issued_items(self) -> list[IssuedItem]:
        rows = await self._fetchall(_ISSUED_SELECT + " ORDER BY ii.id")
        return [self._row_to_issued_item(row) for row in rows]

    async def get_issued_item(self, issued_item_id: int) -> IssuedItem | None:
        row = await self._fetchone(_ISSUED_SELECT + " WHERE ii.id = ?", (issued_item_id,))
        return self._row_to_issued_item(row) if row else None

    async def save_issued_item(self, issued_item: IssuedItem) -> None:
        await self._write(
            """
            INSERT INTO issued_items
            (id, accession_record_id, member_id, issue_date, is_returned,
             return_date, late_fee_per_day)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                is_returned = excluded.is_returned,
                return_date = excluded.return_date
            """,
            (
                issued_item.issued_item_id,
                issued_item.accession_record.accession_record_id,
                issued_item.member.member_id,
                issued_item.issue_date.isoformat(),
                int(issued_item.is_returned),
                issued_item.return_date.isoformat() if issued_item.return_date else None,
                issued_item.late_fee_per_day,
            ),
        )

    async def next_issued_item_id(self) -> int:
        return await self._next_id("issued_items")

    def _row_to_issued_item(self, row: tuple[Any, ...]) -> IssuedItem:
        """Convert a joined database row to an IssuedItem.

        Raises:
            ValueError: If row is malformed or contains invalid data.
        """
        if not row or len(row) != 11:
            raise ValueError(f"Invalid row length: expected 11, got {len(row) if row else 0}")

        (
            issued_id,
            issue_date,
            is_returned,
            return_date,
            late_fee_per_day,
            record_id,
            item_id,
            title,
            member_id,
            member_name,
            member_type,
        ) = row

        try:
            issue_dt = datetime.fromisoformat(issue_date)
            return_dt = datetime.fromisoformat(return_date) if return_date else None
        except (ValueError, TypeError) as e:
            logger.error(f"Invalid date on issued item {issued_id}: {e}")
            raise ValueError(f"Invalid date format: {e}") from e

        try:
            kind = MemberType(member_type)
        except ValueError as e:
            logger.error(f"Invalid member type on member {member_id}: {member_type!r}")
            raise ValueError(f"Invalid member type: {member_type!r}") from e

        return IssuedItem(
            issued_item_id=issued_id,
            accession_record=AccessionRecord(
                accession_record_id=record_id,
                item=Item(item_id=item_id, title=title),
            ),
            member=Member(member_id=member_id, name=member_name, member_type=kind),
            late_fee_per_day=late_fee_per_day,
            issue_date=issue_dt,
            is_returned=bool(is_returned),
            return_date=return_dt,
        )
