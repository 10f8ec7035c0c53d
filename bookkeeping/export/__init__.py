"""
Export Module

CSV, PDF and spreadsheet exports of the bookkeeping tables.
"""

from .csv_export import export_costs_csv, export_daily_reports_csv, export_sales_csv, rows_to_csv
from .excel_export import export_daily_reports_xlsx
from .pdf_export import (
    build_table_pdf,
    daily_report_filename,
    export_costs_pdf,
    export_daily_report_pdf,
    export_sales_pdf,
)

__all__ = [
    "export_costs_csv",
    "export_daily_reports_csv",
    "export_sales_csv",
    "rows_to_csv",
    "export_daily_reports_xlsx",
    "build_table_pdf",
    "daily_report_filename",
    "export_costs_pdf",
    "export_daily_report_pdf",
    "export_sales_pdf",
]
