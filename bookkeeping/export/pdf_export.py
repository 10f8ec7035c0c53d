"""
PDF Export Module

Tabular PDF documents for the sales and cost tables and for a single
daily report.
"""

from datetime import datetime
from io import BytesIO

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from ..reports.daily import DailyReport
from ..reports.formatting import DEFAULT_CURRENCY, format_currency, format_percent
from .csv_export import COST_HEADERS, SALE_HEADERS, cost_cells, sale_cells

TABLE_STYLE = TableStyle([
    ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
    ('FONTNAME', (0, 1), (-1, -1), 'Helvetica'),
    ('FONTSIZE', (0, 0), (-1, -1), 9),
    ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#1F4E79')),
    ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
    ('ALIGN', (1, 1), (-1, -1), 'RIGHT'),
    ('LINEBELOW', (0, 0), (-1, 0), 1, colors.black),
    ('GRID', (0, 0), (-1, -1), 0.25, colors.grey),
    ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
])


def build_table_pdf(title: str, headers: list[str], rows: list[list[str]], subtitle: str | None = None) -> bytes:
    """Render a titled table to PDF bytes.

    Args:
        title: Document heading
        headers: Column headers
        rows: Cell values, already formatted
        subtitle: Optional line under the heading

    Returns:
        PDF content
    """
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        rightMargin=0.5*inch,
        leftMargin=0.5*inch,
        topMargin=0.5*inch,
        bottomMargin=0.5*inch,
        title=title,
    )

    styles = getSampleStyleSheet()
    elements = [Paragraph(f"<b>{title}</b>", styles['Heading1'])]
    if subtitle:
        elements.append(Paragraph(subtitle, styles['Normal']))
    elements.append(Spacer(1, 0.2*inch))

    table = Table([headers] + rows, repeatRows=1)
    table.setStyle(TABLE_STYLE)
    elements.append(table)

    elements.append(Spacer(1, 0.3*inch))
    elements.append(Paragraph(
        f"<i>Generated: {datetime.now().strftime('%Y-%m-%d %H:%M')}</i>",
        styles['Normal']
    ))

    doc.build(elements)
    return buffer.getvalue()


def export_sales_pdf(sales: list, tz=None, currency: str = DEFAULT_CURRENCY) -> bytes:
    return build_table_pdf("Sales Report", SALE_HEADERS, sale_cells(sales, tz, currency),
                           subtitle=f"{len(sales)} entries")


def export_costs_pdf(costs: list, tz=None, currency: str = DEFAULT_CURRENCY) -> bytes:
    return build_table_pdf("Costs Report", COST_HEADERS, cost_cells(costs, tz, currency),
                           subtitle=f"{len(costs)} entries")


def export_daily_report_pdf(report: DailyReport, currency: str = DEFAULT_CURRENCY) -> bytes:
    """Single-day report: sales, costs, net profit and margin."""
    rows = [
        ["Total Sales", format_currency(report.total_sales, currency)],
        ["Total Costs", format_currency(report.total_costs, currency)],
        ["Net Profit", format_currency(report.net_profit, currency)],
        ["Profit Margin", format_percent(report.profit_margin)],
    ]
    return build_table_pdf(f"Daily Report for {report.date}", ["Description", "Amount"], rows)


def daily_report_filename(report: DailyReport) -> str:
    return f"daily_report_{report.date.replace('/', '-')}.pdf"
