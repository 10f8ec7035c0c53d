"""
Ledger Module

Sales and cost entry: list, add and delete rows owned by the acting user.
"""

import logging
from datetime import datetime, timezone, tzinfo

from pydantic import BaseModel

from .errors import NotFoundError, RemoteCallError
from .models import Cost, NewCost, NewSale, Sale
from .reports.formatting import to_local
from .store.identity import Capability, SessionContext
from .store.record_store import RecordStore

logger = logging.getLogger(__name__)


class Ledger:
    """Entries of one table, scoped to the acting user."""

    TABLE: str = ""
    LABEL: str = ""
    MODEL: type[BaseModel] = BaseModel
    PAYLOAD: type[BaseModel] = BaseModel

    def __init__(self, store: RecordStore):
        self.store = store

    def list_entries(
        self,
        ctx: SessionContext,
        since: datetime | None = None,
        limit: int | None = None,
    ) -> list:
        """List the user's entries, newest first.

        Args:
            ctx: Session context
            since: Only entries created at or after this time
            limit: Maximum number of entries

        Returns:
            List of entries

        Raises:
            RemoteCallError: With a user-facing message if the read fails
        """
        identity = ctx.require(Capability.VIEW_REPORTS)
        try:
            rows = self.store.select(
                self.TABLE,
                eq={"user_id": identity.user_id},
                gte={"created_at": since} if since else None,
                order_by="created_at",
                ascending=False,
                limit=limit,
            )
        except RemoteCallError as e:
            logger.error(f"Error fetching {self.LABEL}: {e}")
            raise RemoteCallError(f"Failed to fetch {self.LABEL}. Please try again.") from e

        return [self.MODEL(**row) for row in rows]

    def add(self, ctx: SessionContext, payload: BaseModel | dict):
        """Validate and record a new entry for the user.

        Raises:
            pydantic.ValidationError: If the payload is malformed
            RemoteCallError: With a user-facing message if the insert fails
        """
        identity = ctx.require(Capability.RECORD_ENTRIES)
        if isinstance(payload, dict):
            payload = self.PAYLOAD(**payload)

        try:
            row = self.store.insert(self.TABLE, {"user_id": identity.user_id, **payload.model_dump()})
        except RemoteCallError as e:
            logger.error(f"Error adding {self.LABEL}: {e}")
            raise RemoteCallError(f"Failed to add {self.LABEL}. Please try again.") from e

        logger.info(f"User {identity.user_id} added {self.TABLE} entry {row['id']}")
        return self.MODEL(**row)

    def delete(self, ctx: SessionContext, entry_id: int) -> None:
        """Delete one of the user's entries.

        Raises:
            NotFoundError: If the user has no entry with that id
            RemoteCallError: With a user-facing message if the delete fails
        """
        identity = ctx.require(Capability.RECORD_ENTRIES)
        try:
            deleted = self.store.delete(self.TABLE, eq={"id": entry_id, "user_id": identity.user_id})
        except RemoteCallError as e:
            logger.error(f"Error deleting {self.LABEL}: {e}")
            raise RemoteCallError(f"Failed to delete {self.LABEL}. Please try again.") from e

        if deleted == 0:
            raise NotFoundError(f"No {self.TABLE} entry {entry_id}")

    def today(self, ctx: SessionContext, tz: tzinfo | str | None = None) -> list:
        """Entries created since local midnight."""
        midnight = to_local(datetime.now(timezone.utc), tz).replace(hour=0, minute=0, second=0, microsecond=0)
        return self.list_entries(ctx, since=midnight)

    def submit_daily_report(self, ctx: SessionContext, tz: tzinfo | str | None = None) -> dict:
        """Acknowledge today's entries as the day's report."""
        identity = ctx.require(Capability.RECORD_ENTRIES)
        entries = self.today(ctx, tz)
        logger.info(f"User {identity.user_id} submitted daily {self.TABLE} report with {len(entries)} entries")
        return {
            "count": len(entries),
            "message": f"{len(entries)} {self.TABLE} entries have been submitted.",
        }


class SalesLedger(Ledger):
    TABLE = "sales"
    LABEL = "sales"
    MODEL = Sale
    PAYLOAD = NewSale


class CostLedger(Ledger):
    TABLE = "costs"
    LABEL = "costs"
    MODEL = Cost
    PAYLOAD = NewCost

    def recent(self, ctx: SessionContext, limit: int = 10) -> list[Cost]:
        return self.list_entries(ctx, limit=limit)
