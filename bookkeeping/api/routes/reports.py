"""
Reports API Routes

Daily reports, summary totals, report snapshots and report exports.
"""

from datetime import datetime

from fastapi import APIRouter, Depends, Query, Response
from pydantic import BaseModel

from ...config import Settings, get_settings
from ...errors import InvalidInputError
from ...export import (
    daily_report_filename,
    export_daily_report_pdf,
    export_daily_reports_csv,
    export_daily_reports_xlsx,
)
from ...reports.daily import DailyReport, fetch_daily_reports, find_daily_report
from ...reports.formatting import format_currency, format_percent
from ...reports.summary import fetch_summary, load_snapshot, save_snapshot
from ...store.identity import SessionContext
from ...store.record_store import RecordStore
from ..auth import require_exports, require_reports
from ..database import get_store

router = APIRouter(prefix="/reports", tags=["reports"])


class DailyReportItem(BaseModel):
    """One day of sales and costs with derived figures."""

    date: str
    total_sales: float
    total_costs: float
    net_profit: float
    profit_margin: float
    formatted_net_profit: str
    formatted_margin: str


class SummaryResponse(BaseModel):
    total_sales: float
    total_costs: float
    profit_loss: float
    sales_count: int
    costs_count: int


class SnapshotResponse(SummaryResponse):
    user_id: str
    created_at: datetime
    updated_at: datetime


def daily_item(report: DailyReport, currency: str) -> DailyReportItem:
    return DailyReportItem(
        **report.to_dict(),
        formatted_net_profit=format_currency(report.net_profit, currency),
        formatted_margin=format_percent(report.profit_margin),
    )


async def load_daily_reports(
    store: RecordStore,
    ctx: SessionContext,
    settings: Settings,
    days: int | None,
) -> list[DailyReport]:
    return await fetch_daily_reports(
        store,
        ctx,
        lookback_days=days if days is not None else settings.daily_lookback_days,
        tz=settings.timezone,
    )


@router.get("/daily", response_model=list[DailyReportItem])
async def daily_reports(
    days: int | None = Query(None, ge=1, le=366, description="Lookback window in days"),
    ctx: SessionContext = Depends(require_reports),
    store: RecordStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> list[DailyReportItem]:
    """Per-day totals for the lookback window, newest day first."""
    reports = await load_daily_reports(store, ctx, settings, days)
    return [daily_item(report, settings.currency) for report in reports]


@router.get("/daily/export.csv")
async def daily_reports_csv(
    days: int | None = Query(None, ge=1, le=366),
    ctx: SessionContext = Depends(require_exports),
    store: RecordStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> Response:
    reports = await load_daily_reports(store, ctx, settings, days)
    return Response(
        content=export_daily_reports_csv(reports, settings.currency, settings.csv_delimiter),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="daily_reports.csv"'},
    )


@router.get("/daily/export.xlsx")
async def daily_reports_xlsx(
    days: int | None = Query(None, ge=1, le=366),
    ctx: SessionContext = Depends(require_exports),
    store: RecordStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> Response:
    reports = await load_daily_reports(store, ctx, settings, days)
    return Response(
        content=export_daily_reports_xlsx(reports, settings.currency),
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": 'attachment; filename="daily_reports.xlsx"'},
    )


async def load_one_day(
    date_key: str,
    store: RecordStore,
    ctx: SessionContext,
    settings: Settings,
) -> DailyReport:
    try:
        reports = await load_daily_reports(store, ctx, settings, None)
        return find_daily_report(reports, date_key)
    except ValueError as e:
        raise InvalidInputError(
            "Invalid input",
            details=[{"loc": ["path", "date_key"], "msg": "expected a date like 1-5-2024"}],
        ) from e


@router.get("/daily/{date_key}", response_model=DailyReportItem)
async def daily_report(
    date_key: str,
    ctx: SessionContext = Depends(require_reports),
    store: RecordStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> DailyReportItem:
    """One day within the lookback window; date as M-D-YYYY."""
    report = await load_one_day(date_key, store, ctx, settings)
    return daily_item(report, settings.currency)


@router.get("/daily/{date_key}/pdf")
async def daily_report_pdf(
    date_key: str,
    ctx: SessionContext = Depends(require_exports),
    store: RecordStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> Response:
    report = await load_one_day(date_key, store, ctx, settings)
    return Response(
        content=export_daily_report_pdf(report, settings.currency),
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{daily_report_filename(report)}"'},
    )


@router.get("/summary", response_model=SummaryResponse)
async def summary(
    days: int | None = Query(None, ge=1, description="Window in days; unbounded by default"),
    ctx: SessionContext = Depends(require_reports),
    store: RecordStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> SummaryResponse:
    """Totals and counts over all of the user's entries."""
    totals = await fetch_summary(store, ctx, days if days is not None else settings.summary_lookback_days)
    return SummaryResponse(**totals.to_dict())


@router.put("/snapshot", response_model=SnapshotResponse)
async def update_snapshot(
    ctx: SessionContext = Depends(require_reports),
    store: RecordStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> SnapshotResponse:
    """Recompute the summary and store it as the user's report."""
    totals = await fetch_summary(store, ctx, settings.summary_lookback_days)
    return snapshot_response(save_snapshot(store, ctx, totals))


@router.get("/snapshot", response_model=SnapshotResponse)
async def get_snapshot(
    ctx: SessionContext = Depends(require_reports),
    store: RecordStore = Depends(get_store),
) -> SnapshotResponse:
    return snapshot_response(load_snapshot(store, ctx))


def snapshot_response(row: dict) -> SnapshotResponse:
    return SnapshotResponse(
        user_id=row["user_id"],
        total_sales=float(row["total_sales"]),
        total_costs=float(row["total_costs"]),
        profit_loss=float(row["profit_loss"]),
        sales_count=row["sales_count"],
        costs_count=row["costs_count"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )
