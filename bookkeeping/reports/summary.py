"""
Summary Totals Module

Whole-period totals over a user's sales and costs, and the persisted
report snapshot.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal

from ..errors import RemoteCallError
from ..store.identity import Capability, SessionContext
from ..store.record_store import RecordStore
from .daily import window_start

logger = logging.getLogger(__name__)


@dataclass
class SummaryTotals:
    """Totals and row counts for sales and costs."""

    total_sales: Decimal = Decimal("0")
    total_costs: Decimal = Decimal("0")
    sales_count: int = 0
    costs_count: int = 0

    @property
    def profit_loss(self) -> Decimal:
        return self.total_sales - self.total_costs

    def to_dict(self) -> dict:
        return {
            "total_sales": float(self.total_sales),
            "total_costs": float(self.total_costs),
            "profit_loss": float(self.profit_loss),
            "sales_count": self.sales_count,
            "costs_count": self.costs_count,
        }


def summarize(sales: list[dict], costs: list[dict]) -> SummaryTotals:
    """Sum price*quantity over sales and amount over costs."""
    return SummaryTotals(
        total_sales=sum((Decimal(str(s["price"])) * int(s["quantity"]) for s in sales), Decimal("0")),
        total_costs=sum((Decimal(str(c["amount"])) for c in costs), Decimal("0")),
        sales_count=len(sales),
        costs_count=len(costs),
    )


async def fetch_summary(
    store: RecordStore,
    ctx: SessionContext,
    lookback_days: int | None = None,
    now: datetime | None = None,
) -> SummaryTotals:
    """Read the user's rows (unbounded by default) and total them.

    Raises:
        RemoteCallError: If either read fails
    """
    identity = ctx.require(Capability.VIEW_REPORTS)
    since = window_start(lookback_days, now)
    gte = {"created_at": since} if since else None

    try:
        sales, costs = await asyncio.gather(
            store.fetch("sales", columns=["price", "quantity"], eq={"user_id": identity.user_id}, gte=gte),
            store.fetch("costs", columns=["amount"], eq={"user_id": identity.user_id}, gte=gte),
        )
    except RemoteCallError as e:
        logger.error(f"Error fetching summary data: {e}")
        raise RemoteCallError("Failed to load summary. Please try again.") from e

    return summarize(sales, costs)


def save_snapshot(store: RecordStore, ctx: SessionContext, totals: SummaryTotals) -> dict:
    """Persist the totals as the user's report snapshot (one per user)."""
    identity = ctx.require(Capability.VIEW_REPORTS)
    try:
        return store.upsert("reports", {
            "user_id": identity.user_id,
            "total_sales": totals.total_sales,
            "total_costs": totals.total_costs,
            "profit_loss": totals.profit_loss,
            "sales_count": totals.sales_count,
            "costs_count": totals.costs_count,
            "updated_at": datetime.now(timezone.utc),
        }, key="user_id")
    except RemoteCallError as e:
        logger.error(f"Error saving report snapshot: {e}")
        raise RemoteCallError("Failed to save report. Please try again.") from e


def load_snapshot(store: RecordStore, ctx: SessionContext) -> dict:
    """Load the user's report snapshot.

    Raises:
        NotFoundError: If no snapshot has been saved yet
    """
    identity = ctx.require(Capability.VIEW_REPORTS)
    return store.select_one("reports", eq={"user_id": identity.user_id})
