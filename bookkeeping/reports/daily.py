"""
Daily Report Module

Buckets sales and costs by calendar day for a trailing lookback window.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone, tzinfo
from decimal import Decimal

from ..errors import NotFoundError, RemoteCallError
from ..store.identity import Capability, SessionContext
from ..store.record_store import RecordStore
from .formatting import format_date, parse_date_key

logger = logging.getLogger(__name__)

DEFAULT_LOOKBACK_DAYS = 7


@dataclass
class DailyReport:
    """Sales and cost totals for one calendar day. Derived, never stored."""

    date: str
    total_sales: Decimal = Decimal("0")
    total_costs: Decimal = Decimal("0")

    @property
    def net_profit(self) -> Decimal:
        return self.total_sales - self.total_costs

    @property
    def profit_margin(self) -> float:
        """Net profit as a percentage of sales; 0 on a day without sales."""
        if self.total_sales == 0:
            return 0.0
        return float(self.net_profit / self.total_sales * 100)

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "total_sales": float(self.total_sales),
            "total_costs": float(self.total_costs),
            "net_profit": float(self.net_profit),
            "profit_margin": round(self.profit_margin, 2),
        }


def aggregate_daily(
    sales: list[dict],
    costs: list[dict],
    tz: tzinfo | str | None = None,
) -> list[DailyReport]:
    """Aggregate sale and cost rows into per-day reports.

    Args:
        sales: Rows with created_at, price and quantity
        costs: Rows with created_at and amount
        tz: Viewer time zone used to derive the calendar day

    Returns:
        DailyReport list, newest day first
    """
    reports: dict[str, DailyReport] = {}

    for sale in sales:
        key = format_date(sale["created_at"], tz)
        if key not in reports:
            reports[key] = DailyReport(date=key)
        reports[key].total_sales += Decimal(str(sale["price"])) * int(sale["quantity"])

    for cost in costs:
        key = format_date(cost["created_at"], tz)
        if key not in reports:
            reports[key] = DailyReport(date=key)
        reports[key].total_costs += Decimal(str(cost["amount"]))

    return sorted(reports.values(), key=lambda r: parse_date_key(r.date), reverse=True)


def window_start(lookback_days: int | None, now: datetime | None = None) -> datetime | None:
    """Start of a trailing window, or None when unbounded."""
    if lookback_days is None:
        return None
    now = now or datetime.now(timezone.utc)
    return now - timedelta(days=lookback_days)


async def fetch_daily_reports(
    store: RecordStore,
    ctx: SessionContext,
    lookback_days: int | None = DEFAULT_LOOKBACK_DAYS,
    tz: tzinfo | str | None = None,
    now: datetime | None = None,
) -> list[DailyReport]:
    """Read the user's sales and costs for the window and aggregate them.

    Both reads run concurrently; if either fails nothing is aggregated.

    Raises:
        RemoteCallError: If either read fails
    """
    identity = ctx.require(Capability.VIEW_REPORTS)
    since = window_start(lookback_days, now)
    gte = {"created_at": since} if since else None

    try:
        sales, costs = await asyncio.gather(
            store.fetch("sales", columns=["created_at", "price", "quantity"],
                        eq={"user_id": identity.user_id}, gte=gte),
            store.fetch("costs", columns=["created_at", "amount"],
                        eq={"user_id": identity.user_id}, gte=gte),
        )
    except RemoteCallError as e:
        logger.error(f"Error fetching data for daily reports: {e}")
        raise RemoteCallError("Failed to load daily reports. Please try again.") from e

    return aggregate_daily(sales, costs, tz)


def find_daily_report(reports: list[DailyReport], date_key: str) -> DailyReport:
    """Pick one day out of a report list.

    Args:
        reports: Aggregated reports
        date_key: Day as M/D/YYYY or M-D-YYYY

    Raises:
        NotFoundError: If the day has no entries in the window
    """
    wanted = parse_date_key(date_key).date()
    for report in reports:
        if parse_date_key(report.date).date() == wanted:
            return report
    raise NotFoundError(f"No daily report for {date_key}")
