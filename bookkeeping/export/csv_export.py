"""
CSV Export Module

Delimited-text exports of the sales, cost and daily report tables.
"""

import csv
from datetime import tzinfo
from decimal import Decimal
from io import StringIO

from ..reports.daily import DailyReport
from ..reports.formatting import DEFAULT_CURRENCY, format_currency, format_date, format_percent
from ..reports.table_view import field_value

SALE_HEADERS = ["Date", "Description", "Quantity", "Price", "Total"]
COST_HEADERS = ["Date", "Description", "Amount"]
DAILY_HEADERS = ["Date", "Total Sales", "Total Costs", "Net Profit", "Profit Margin"]


def rows_to_csv(headers: list[str], rows: list[list[str]], delimiter: str = ",") -> bytes:
    """Write a header row plus data rows as UTF-8 delimited text.

    Args:
        headers: Column headers
        rows: Cell values, one list per row
        delimiter: Single-character field delimiter

    Returns:
        Encoded CSV content
    """
    output = StringIO()
    writer = csv.writer(output, delimiter=delimiter, lineterminator="\n")
    writer.writerow(headers)
    writer.writerows(rows)
    return output.getvalue().encode("utf-8")


def sale_cells(
    sales: list,
    tz: tzinfo | str | None = None,
    currency: str = DEFAULT_CURRENCY,
) -> list[list[str]]:
    """Formatted table cells for sale rows."""
    cells = []
    for sale in sales:
        price = Decimal(str(field_value(sale, "price")))
        quantity = int(field_value(sale, "quantity"))
        cells.append([
            format_date(field_value(sale, "created_at"), tz),
            field_value(sale, "description"),
            str(quantity),
            format_currency(price, currency),
            format_currency(price * quantity, currency),
        ])
    return cells


def cost_cells(
    costs: list,
    tz: tzinfo | str | None = None,
    currency: str = DEFAULT_CURRENCY,
) -> list[list[str]]:
    """Formatted table cells for cost rows."""
    return [
        [
            format_date(field_value(cost, "created_at"), tz),
            field_value(cost, "description"),
            format_currency(field_value(cost, "amount"), currency),
        ]
        for cost in costs
    ]


def daily_cells(reports: list[DailyReport], currency: str = DEFAULT_CURRENCY) -> list[list[str]]:
    return [
        [
            report.date,
            format_currency(report.total_sales, currency),
            format_currency(report.total_costs, currency),
            format_currency(report.net_profit, currency),
            format_percent(report.profit_margin),
        ]
        for report in reports
    ]


def export_sales_csv(sales: list, tz=None, currency: str = DEFAULT_CURRENCY, delimiter: str = ",") -> bytes:
    return rows_to_csv(SALE_HEADERS, sale_cells(sales, tz, currency), delimiter)


def export_costs_csv(costs: list, tz=None, currency: str = DEFAULT_CURRENCY, delimiter: str = ",") -> bytes:
    return rows_to_csv(COST_HEADERS, cost_cells(costs, tz, currency), delimiter)


def export_daily_reports_csv(
    reports: list[DailyReport],
    currency: str = DEFAULT_CURRENCY,
    delimiter: str = ",",
) -> bytes:
    return rows_to_csv(DAILY_HEADERS, daily_cells(reports, currency), delimiter)
