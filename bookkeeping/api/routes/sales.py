"""
Sales API Routes

Sales entry, the sales table (sort/filter) and its exports.
"""

from datetime import datetime

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import BaseModel

from ...config import Settings, get_settings
from ...errors import InvalidInputError
from ...export import export_sales_csv, export_sales_pdf
from ...ledger import SalesLedger
from ...models import NewSale, Sale
from ...reports.table_view import SALE_FIELDS, SortDirection, filter_rows, sort_rows
from ...store.identity import SessionContext
from ...store.record_store import RecordStore
from ..auth import require_entries, require_exports, require_reports
from ..database import get_store

router = APIRouter(prefix="/sales", tags=["sales"])


class SaleItem(BaseModel):
    """Sale row as returned to the dashboard."""

    id: int
    description: str
    quantity: int
    price: float
    total: float
    created_at: datetime

    @classmethod
    def from_sale(cls, sale: Sale) -> "SaleItem":
        return cls(
            id=sale.id,
            description=sale.description,
            quantity=sale.quantity,
            price=float(sale.price),
            total=float(sale.total),
            created_at=sale.created_at,
        )


def get_sales_ledger(store: RecordStore = Depends(get_store)) -> SalesLedger:
    return SalesLedger(store)


def table_rows(
    ctx: SessionContext,
    ledger: SalesLedger,
    settings: Settings,
    sort: str | None,
    direction: SortDirection,
    description: str | None,
    date: str | None,
    limit: int | None,
) -> list[Sale]:
    """Fetch, filter and sort the user's sales."""
    sales = ledger.list_entries(ctx, limit=limit)
    try:
        sales = filter_rows(sales, {"description": description, "created_at": date},
                            SALE_FIELDS, settings.timezone)
        if sort:
            sales = sort_rows(sales, sort, direction, SALE_FIELDS)
    except ValueError as e:
        raise InvalidInputError("Invalid input", details=[{"loc": ["query", "sort"], "msg": str(e)}]) from e
    return sales


@router.get("", response_model=list[SaleItem])
async def list_sales(
    sort: str | None = Query(None, description="Field to sort by"),
    direction: SortDirection = Query(SortDirection.ASC),
    description: str | None = Query(None, description="Description substring"),
    date: str | None = Query(None, description="Date substring, e.g. 1/5/2024"),
    limit: int | None = Query(None, ge=1, le=1000),
    ctx: SessionContext = Depends(require_reports),
    ledger: SalesLedger = Depends(get_sales_ledger),
    settings: Settings = Depends(get_settings),
) -> list[SaleItem]:
    """List the user's sales, newest first unless sorted."""
    sales = table_rows(ctx, ledger, settings, sort, direction, description, date, limit)
    return [SaleItem.from_sale(sale) for sale in sales]


@router.post("", response_model=SaleItem, status_code=status.HTTP_201_CREATED)
async def add_sale(
    body: NewSale,
    ctx: SessionContext = Depends(require_entries),
    ledger: SalesLedger = Depends(get_sales_ledger),
) -> SaleItem:
    return SaleItem.from_sale(ledger.add(ctx, body))


@router.delete("/{sale_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_sale(
    sale_id: int,
    ctx: SessionContext = Depends(require_entries),
    ledger: SalesLedger = Depends(get_sales_ledger),
) -> Response:
    ledger.delete(ctx, sale_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/submit-daily-report")
async def submit_daily_report(
    ctx: SessionContext = Depends(require_entries),
    ledger: SalesLedger = Depends(get_sales_ledger),
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
    ledger: SalesLedger = Depends(get_sales_ledger),
    settings: Settings = Depends(get_settings),
) -> Response:
    sales = table_rows(ctx, ledger, settings, sort, direction, description, date, None)
    content = export_sales_csv(sales, settings.timezone, settings.currency, settings.csv_delimiter)
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="sales_report.csv"'},
    )


@router.get("/export.pdf")
async def export_pdf(
    sort: str | None = Query(None),
    direction: SortDirection = Query(SortDirection.ASC),
    description: str | None = Query(None),
    date: str | None = Query(None),
    ctx: SessionContext = Depends(require_exports),
    ledger: SalesLedger = Depends(get_sales_ledger),
    settings: Settings = Depends(get_settings),
) -> Response:
    sales = table_rows(ctx, ledger, settings, sort, direction, description, date, None)
    return Response(
        content=export_sales_pdf(sales, settings.timezone, settings.currency),
        media_type="application/pdf",
        headers={"Content-Disposition": 'attachment; filename="sales_report.pdf"'},
    )
