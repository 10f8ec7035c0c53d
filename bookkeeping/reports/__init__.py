"""
Reports Module

Daily aggregation, summary totals, table sorting/filtering and formatting.
"""

from .daily import DailyReport, aggregate_daily, fetch_daily_reports, find_daily_report
from .formatting import format_currency, format_date, format_percent, parse_date_key
from .summary import SummaryTotals, fetch_summary, load_snapshot, save_snapshot, summarize
from .table_view import COST_FIELDS, SALE_FIELDS, SortDirection, filter_rows, sort_rows

__all__ = [
    "DailyReport",
    "aggregate_daily",
    "fetch_daily_reports",
    "find_daily_report",
    "format_currency",
    "format_date",
    "format_percent",
    "parse_date_key",
    "SummaryTotals",
    "fetch_summary",
    "load_snapshot",
    "save_snapshot",
    "summarize",
    "COST_FIELDS",
    "SALE_FIELDS",
    "SortDirection",
    "filter_rows",
    "sort_rows",
]
