"""
Dashboard API Routes

Provides the landing view: title by role, summary totals and daily reports.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ...config import Settings, get_settings
from ...reports.daily import fetch_daily_reports
from ...reports.formatting import format_currency
from ...reports.summary import fetch_summary
from ...store.identity import Capability, SessionContext
from ...store.record_store import RecordStore
from ..auth import require_reports
from ..database import get_store
from .reports import DailyReportItem, SummaryResponse, daily_item

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


class KPIData(BaseModel):
    """KPI card data."""

    label: str
    value: float
    formatted_value: str


class DashboardResponse(BaseModel):
    """Complete dashboard response."""

    title: str
    role: str
    can_manage_users: bool
    kpis: list[KPIData]
    summary: SummaryResponse
    daily_reports: list[DailyReportItem]


@router.get("", response_model=DashboardResponse)
async def get_dashboard(
    ctx: SessionContext = Depends(require_reports),
    store: RecordStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> DashboardResponse:
    """Get dashboard with summary totals and recent daily reports.

    Args:
        ctx: Session context
        store: Record store
        settings: Dashboard settings

    Returns:
        DashboardResponse
    """
    identity = ctx.require_identity()
    totals = await fetch_summary(store, ctx, settings.summary_lookback_days)
    reports = await fetch_daily_reports(store, ctx, settings.daily_lookback_days, settings.timezone)

    kpis = [
        KPIData(
            label="Total Sales",
            value=float(totals.total_sales),
            formatted_value=format_currency(totals.total_sales, settings.currency),
        ),
        KPIData(
            label="Total Costs",
            value=float(totals.total_costs),
            formatted_value=format_currency(totals.total_costs, settings.currency),
        ),
        KPIData(
            label="Profit/Loss",
            value=float(totals.profit_loss),
            formatted_value=format_currency(totals.profit_loss, settings.currency),
        ),
        KPIData(
            label="Entries",
            value=totals.sales_count + totals.costs_count,
            formatted_value=f"{totals.sales_count} sales, {totals.costs_count} costs",
        ),
    ]

    return DashboardResponse(
        title="Admin Dashboard" if identity.is_admin else settings.business_name,
        role=identity.role.value,
        can_manage_users=ctx.can(Capability.MANAGE_USERS),
        kpis=kpis,
        summary=SummaryResponse(**totals.to_dict()),
        daily_reports=[daily_item(report, settings.currency) for report in reports],
    )
