"""
Excel Export Module

Spreadsheet export of the daily report listing.
"""

from io import BytesIO

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill

from ..reports.daily import DailyReport
from ..reports.formatting import DEFAULT_CURRENCY


def export_daily_reports_xlsx(reports: list[DailyReport], currency: str = DEFAULT_CURRENCY) -> bytes:
    """Write daily reports to an .xlsx workbook.

    Args:
        reports: Reports, in display order
        currency: Currency code shown in the number format

    Returns:
        Workbook content
    """
    wb = Workbook()
    ws = wb.active
    ws.title = "Daily Reports"

    header_fill = PatternFill(start_color="1F4E79", end_color="1F4E79", fill_type="solid")
    header_font = Font(bold=True, color="FFFFFF")
    loss_font = Font(color="C00000")
    money_format = f'"{currency}" #,##0'

    ws.merge_cells('A1:E1')
    ws['A1'] = "Daily Reports"
    ws['A1'].font = Font(bold=True, size=14)

    headers = ['Date', 'Total Sales', 'Total Costs', 'Net Profit', 'Profit Margin']
    for col, header in enumerate(headers, 1):
        cell = ws.cell(row=3, column=col, value=header)
        cell.fill = header_fill
        cell.font = header_font

    for row_num, report in enumerate(reports, 4):
        ws.cell(row=row_num, column=1, value=report.date)
        ws.cell(row=row_num, column=2, value=float(report.total_sales))
        ws.cell(row=row_num, column=3, value=float(report.total_costs))
        ws.cell(row=row_num, column=4, value=float(report.net_profit))
        ws.cell(row=row_num, column=5, value=report.profit_margin / 100)

        for col in [2, 3, 4]:
            ws.cell(row=row_num, column=col).number_format = money_format
        ws.cell(row=row_num, column=5).number_format = '0.00%'

        if report.net_profit < 0:
            ws.cell(row=row_num, column=4).font = loss_font

    for col in ws.iter_cols(min_row=3):
        max_length = max(len(str(cell.value or "")) for cell in col)
        ws.column_dimensions[col[0].column_letter].width = min(max_length + 4, 30)

    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()
