"""
Costs API Routes

Cost entry, today's and recent costs, the cost table and its exports.
"""

from datetime import datetime

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import BaseModel

from ...config import Settings, get_settings
from ...errors import InvalidInputError
from ...export import export_costs_csv, export_costs_pdf
from ...ledger import CostLedger
from ...models import Cost, NewCost
from ...reports.table_view import COST_FIELDS, SortDirection, filter_rows, sort_rows
from ...store.identity import SessionContext
from ...store.record_store import RecordStore
from ..auth import require_entries, require_exports, require_reports
from ..database import get_store

router = APIRouter(prefix="/costs", tags=["costs"])


class CostItem(BaseModel):
    """Cost row as returned to the dashboard."""

    id: int
    description: str
    amount: float
    created_at: datetime

    @classmethod
    def from_cost(cls, cost: Cost) -> "CostItem":
        return cls(
            id=cost.id,
            description=cost.description,
            amount=float(cost.amount),
            created_at=cost.created_at,
        )


def get_cost_ledger(store: RecordStore = Depends(get_store)) -> CostLedger:
    return CostLedger(store)


def table_rows(
    ctx: SessionContext,
    ledger: CostLedger,
    settings: Settings,
    sort: str | None,
    direction: SortDirection,
    description: str | None,
    date: str | None,
    limit: int | None,
) -> list[Cost]:
    costs = ledger.list_entries(ctx, limit=limit)
    try:
        costs = filter_rows(costs, {"description": description, "created_at": date},
                            COST_FIELDS, settings.timezone)
        if sort:
            costs = sort_rows(costs, sort, direction, COST_FIELDS)
    except ValueError as e:
        raise InvalidInputError("Invalid input", details=[{"loc": ["query", "sort"], "msg": str(e)}]) from e
    return costs


@router.get("", response_model=list[CostItem])
async def list_costs(
    sort: str | None = Query(None, description="Field to sort by"),
    direction: SortDirection = Query(SortDirection.ASC),
    description: str | None = Query(None, description="Description substring"),
    date: str | None = Query(None, description="Date substring, e.g. 1/5/2024"),
    limit: int | None = Query(None, ge=1, le=1000),
    ctx: SessionContext = Depends(require_reports),
    ledger: CostLedger = Depends(get_cost_ledger),
    settings: Settings = Depends(get_settings),
) -> list[CostItem]:
    costs = table_rows(ctx, ledger, settings, sort, direction, description, date, limit)
    return [CostItem.from_cost(cost) for cost in costs]


@router.get("/today", response_model=list[CostItem])
async def todays_costs(
    ctx: SessionContext = Depends(require_reports),
    ledger: CostLedger = Depends(get_cost_ledger),
    settings: Settings = Depends(get_settings),
) -> list[CostItem]:
    return [CostItem.from_cost(cost) for cost in ledger.today(ctx, settings.timezone)]


@router.get("/recent", response_model=list[CostItem])
async def recent_costs(
    limit: int | None = Query(None, ge=1, le=100),
    ctx: SessionContext = Depends(require_reports),
    ledger: CostLedger = Depends(get_cost_ledger),
    settings: Settings = Depends(get_settings),
) -> list[CostItem]:
    costs = ledger.recent(ctx, limit or settings.recent_costs_limit)
    return [CostItem.from_cost(cost) for cost in costs]


@router.post("", response_model=CostItem, status_code=status.HTTP_201_CREATED)
async def add_cost(
    body: NewCost,
    ctx: SessionContext = Depends(require_entries),
    ledger: CostLedger = Depends(get_cost_ledger),
) -> CostItem:
    return CostItem.from_cost(ledger.add(ctx, body))


@router.delete("/{cost_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_cost(
    cost_id: int,
    ctx: SessionContext = Depends(require_entries),
    ledger: CostLedger = Depends(get_cost_ledger),
) -> Response:
    ledger.delete(ctx, cost_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/submit-daily-report")
async def submit_daily_report(
    ctx: SessionContext = Depends(require_entries),
    ledger: CostLedger = Depends(get_cost_ledger),
    settings: Settings = Depends(get_settings),
) -> dict:
    return ledger.submit_daily_report(ctx, settings.timezone)


@router.get("/export.csv")
async def export_csv(
    sort: str | None = Query(None),
    direction: SortDirection = Query(SortDirection.ASC),
    description: str | None = Query(None),
    date: str | None = Query(None),
    ctx: SessionContext = Depends(require_exports),
    ledger: CostLedger = Depends(get_cost_ledger),
    settings: Settings = Depends(get_settings),
) -> Response:
    costs = table_rows(ctx, ledger, settings, sort, direction, description, date, None)
    content = export_costs_csv(costs, settings.timezone, settings.currency, settings.csv_delimiter)
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="costs_report.csv"'},
    )


@router.get("/export.pdf")
async def export_pdf(
    sort: str | None = Query(None),
    direction: SortDirection = Query(SortDirection.ASC),
    description: str | None = Query(None),
    date: str | None = Query(None),
    ctx: SessionContext = Depends(require_exports),
    ledger: CostLedger = Depends(get_cost_ledger),
    settings: Settings = Depends(get_settings),
) -> Response:
    costs = table_rows(ctx, ledger, settings, sort, direction, description, date, None)
    return Response(
        content=export_costs_pdf(costs, settings.timezone, settings.currency),
        media_type="application/pdf",
        headers={"Content-Disposition": 'attachment; filename="costs_report.pdf"'},
    )
