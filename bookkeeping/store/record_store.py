"""
Record Store Module

Filter-based access to the relational record store: select with equality,
range, ordering and limit; insert-one; update; upsert; delete.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import delete, insert, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..errors import ConflictError, NotFoundError, RemoteCallError
from .tables import TABLES, metadata

logger = logging.getLogger(__name__)


def _to_utc(value: Any) -> Any:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    return value


class RecordStore:
    """Record store backed by a SQLAlchemy engine."""

    def __init__(self, engine: Engine):
        """Initialize the store.

        Args:
            engine: SQLAlchemy engine (PostgreSQL in production)
        """
        self.engine = engine

    def create_schema(self) -> None:
        """Create all tables that do not exist yet."""
        metadata.create_all(self.engine)

    def _table(self, name: str):
        try:
            return TABLES[name]
        except KeyError:
            raise ValueError(f"Unknown table: {name}") from None

    def _column(self, table, name: str):
        if name not in table.c:
            raise ValueError(f"Unknown column {name!r} on table {table.name}")
        return table.c[name]

    def _row(self, row) -> dict:
        return {key: _to_utc(value) for key, value in row._mapping.items()}

    def _where(self, table, stmt, eq: dict | None, gte: dict | None = None, lte: dict | None = None):
        for name, value in (eq or {}).items():
            stmt = stmt.where(self._column(table, name) == _to_utc(value))
        for name, value in (gte or {}).items():
            stmt = stmt.where(self._column(table, name) >= _to_utc(value))
        for name, value in (lte or {}).items():
            stmt = stmt.where(self._column(table, name) <= _to_utc(value))
        return stmt

    def select(
        self,
        table: str,
        columns: list[str] | None = None,
        eq: dict | None = None,
        gte: dict | None = None,
        lte: dict | None = None,
        order_by: str | None = None,
        ascending: bool = True,
        limit: int | None = None,
    ) -> list[dict]:
        """Filtered select.

        Args:
            table: Logical table name
            columns: Columns to return (all when None)
            eq: Equality filters
            gte: Lower-bound (inclusive) filters
            lte: Upper-bound (inclusive) filters
            order_by: Column to order by
            ascending: Sort direction for order_by
            limit: Maximum number of rows

        Returns:
            List of row dictionaries

        Raises:
            RemoteCallError: If the store call fails
        """
        tbl = self._table(table)
        cols = [self._column(tbl, c) for c in columns] if columns else [tbl]
        stmt = self._where(tbl, select(*cols), eq, gte, lte)

        if order_by:
            col = self._column(tbl, order_by)
            stmt = stmt.order_by(col.asc() if ascending else col.desc())
        if limit is not None:
            stmt = stmt.limit(limit)

        try:
            with self.engine.connect() as conn:
                return [self._row(row) for row in conn.execute(stmt)]
        except SQLAlchemyError as e:
            logger.error(f"Select on {table} failed: {e}")
            raise RemoteCallError(f"Select on {table} failed") from e

    def select_one(self, table: str, eq: dict, columns: list[str] | None = None) -> dict:
        """Select exactly one row.

        Raises:
            NotFoundError: If no row matches
        """
        rows = self.select(table, columns=columns, eq=eq, limit=1)
        if not rows:
            raise NotFoundError(f"No {table} row matching {eq}")
        return rows[0]

    def _insert_stmt(self, table: str, values: dict):
        tbl = self._table(table)
        for name in values:
            self._column(tbl, name)
        return insert(tbl).values(**{k: _to_utc(v) for k, v in values.items()}).returning(tbl)

    def insert(self, table: str, values: dict) -> dict:
        """Insert one row and return it as stored.

        Raises:
            ConflictError: If a unique or primary key constraint is violated
            RemoteCallError: If the store call fails
        """
        return self.insert_many([(table, values)])[0]

    def insert_many(self, rows: list[tuple[str, dict]]) -> list[dict]:
        """Insert rows into one or more tables in a single transaction.

        Either every row is written or none is.

        Args:
            rows: (table, values) pairs, inserted in order

        Returns:
            The stored rows, in the same order

        Raises:
            ConflictError: If a unique or primary key constraint is violated
            RemoteCallError: If the store call fails
        """
        stmts = [(table, self._insert_stmt(table, values)) for table, values in rows]
        tables = ", ".join(dict.fromkeys(table for table, _ in stmts))

        try:
            with self.engine.begin() as conn:
                return [self._row(conn.execute(stmt).one()) for _, stmt in stmts]
        except IntegrityError as e:
            logger.warning(f"Insert into {tables} rejected: {e}")
            raise ConflictError(f"Insert into {tables} conflicts with an existing row") from e
        except SQLAlchemyError as e:
            logger.error(f"Insert into {tables} failed: {e}")
            raise RemoteCallError(f"Insert into {tables} failed") from e

    def update(self, table: str, values: dict, eq: dict) -> list[dict]:
        """Update matching rows and return them."""
        tbl = self._table(table)
        for name in values:
            self._column(tbl, name)
        stmt = self._where(tbl, update(tbl), eq)
        stmt = stmt.values(**{k: _to_utc(v) for k, v in values.items()}).returning(tbl)

        try:
            with self.engine.begin() as conn:
                return [self._row(row) for row in conn.execute(stmt)]
        except SQLAlchemyError as e:
            logger.error(f"Update of {table} failed: {e}")
            raise RemoteCallError(f"Update of {table} failed") from e

    def upsert(self, table: str, values: dict, key: str) -> dict:
        """Insert a row, or update the existing row with the same key."""
        tbl = self._table(table)
        key_col = self._column(tbl, key)
        for name in values:
            self._column(tbl, name)
        values = {k: _to_utc(v) for k, v in values.items()}

        try:
            with self.engine.begin() as conn:
                existing = conn.execute(select(key_col).where(key_col == values[key])).first()
                if existing is None:
                    stmt = insert(tbl).values(**values).returning(tbl)
                else:
                    stmt = update(tbl).where(key_col == values[key]).values(**values).returning(tbl)
                return self._row(conn.execute(stmt).one())
        except SQLAlchemyError as e:
            logger.error(f"Upsert into {table} failed: {e}")
            raise RemoteCallError(f"Upsert into {table} failed") from e

    def delete(self, table: str, eq: dict) -> int:
        """Delete matching rows.

        Returns:
            Number of rows deleted
        """
        if not eq:
            raise ValueError("Refusing to delete without a filter")
        tbl = self._table(table)
        stmt = self._where(tbl, delete(tbl), eq)

        try:
            with self.engine.begin() as conn:
                return conn.execute(stmt).rowcount
        except SQLAlchemyError as e:
            logger.error(f"Delete from {table} failed: {e}")
            raise RemoteCallError(f"Delete from {table} failed") from e

    async def fetch(self, table: str, **filters: Any) -> list[dict]:
        """Awaitable select, run in a worker thread."""
        return await asyncio.to_thread(self.select, table, **filters)
