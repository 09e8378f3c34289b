"""
excel_pack.py — Management Report Workbook Renderer.

Produces a 2-sheet Excel workbook, the spreadsheet companion to the PDF:

    1. Relatório Geral    — title, summary indicators, performance analysis
    2. Análise Detalhada  — per-category totals and the executive summary

Sheet layout (merged title rows, section bands, column widths) is fixed;
every label, value and annotation comes from ReportTables so the workbook
always carries the same numbers as the PDF.
"""

import io
import logging
from typing import Any

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from franchise_report.formatter import DETAIL_HEADER, ReportTables
from franchise_report.narrative import executive_summary_lines

logger = logging.getLogger(__name__)

SHEET_GENERAL = "Relatório Geral"
SHEET_DETAIL = "Análise Detalhada"

GENERAL_WIDTHS = [30, 20, 25, 40]
DETAIL_WIDTHS = [20, 15, 15, 15, 20]

# ---------------------------------------------------------------------------
# Styling helpers
# ---------------------------------------------------------------------------

THIN = Side(style="thin")
THIN_BORDER = Border(left=THIN, right=THIN, top=THIN, bottom=THIN)


def _fill(hex_colour: str) -> PatternFill:
    return PatternFill(fill_type="solid", fgColor=hex_colour.lstrip("#"))


def _font(bold: bool = False, colour: str = "000000", size: int = 10,
          italic: bool = False) -> Font:
    return Font(name="Calibri", bold=bold, color=colour.lstrip("#"),
                size=size, italic=italic)


def _center() -> Alignment:
    return Alignment(horizontal="center", vertical="center", wrap_text=False)


def _set_widths(ws, widths: list[int]) -> None:
    for col_i, w in enumerate(widths, start=1):
        ws.column_dimensions[get_column_letter(col_i)].width = w


def _band(ws, row: int, text: str, last_col: int, fill: str,
          size: int = 11) -> None:
    """Write a merged, filled section band across columns 1..last_col."""
    ws.merge_cells(start_row=row, start_column=1, end_row=row, end_column=last_col)
    c = ws.cell(row=row, column=1, value=text)
    c.fill = _fill(fill)
    c.font = _font(bold=True, colour="FFFFFF", size=size)
    c.alignment = _center()
    ws.row_dimensions[row].height = 20


def _write_header_row(ws, row: int, headers, fill: str) -> None:
    """Write a formatted header row at the given row index."""
    for col_i, h in enumerate(headers, start=1):
        cell = ws.cell(row=row, column=col_i, value=h)
        cell.fill = _fill(fill)
        cell.font = _font(bold=True, colour="FFFFFF", size=10)
        cell.alignment = _center()
        cell.border = THIN_BORDER


def _write_body_row(ws, row: int, values, light: str) -> None:
    for col_i, val in enumerate(values, start=1):
        c = ws.cell(row=row, column=col_i, value=val)
        c.font = _font(size=10)
        c.border = THIN_BORDER
        if col_i > 1:
            c.alignment = _center()
        if row % 2 == 0:
            c.fill = _fill(light)


# ---------------------------------------------------------------------------
# Sheet builders
# ---------------------------------------------------------------------------

def _sheet_general(ws, report: ReportTables, brand: dict) -> None:
    """Summary indicators and performance analysis.

    Rows: 1 title | 2 timestamp | 4 summary band | 6 header | 7-12 summary
    | 14 performance band | 16 header | 17-20 performance.
    """
    primary = brand["primary"]
    light = brand["light"]
    generated = report.generated_at
    ws.sheet_properties.tabColor = primary.lstrip("#")

    _band(ws, 1, "RELATÓRIO GERENCIAL - SISTEMA DE GESTÃO DE FRANQUIAS", 4, primary, size=14)
    ws.row_dimensions[1].height = 28

    ws.merge_cells("A2:D2")
    ws["A2"].value = (
        f"Gerado em: {generated.strftime('%d/%m/%Y')} às {generated.strftime('%H:%M:%S')}"
    )
    ws["A2"].font = _font(italic=True, colour="555555", size=9)
    ws["A2"].alignment = _center()

    _band(ws, 4, "RESUMO DOS INDICADORES", 4, primary)
    _write_header_row(ws, 6, ("Indicador", "Valor", "Status", "Observações"), primary)
    row = 7
    for r in report.summary:
        _write_body_row(ws, row, (r.label, r.value, r.annotation, r.note), light)
        row += 1

    perf_band = row + 1
    _band(ws, perf_band, "ANÁLISE DE PERFORMANCE", 4, brand["performance"])
    _write_header_row(ws, perf_band + 2, ("Métrica", "Valor", "Análise"), brand["performance"])
    row = perf_band + 3
    for r in report.performance:
        _write_body_row(ws, row, (r.label, r.value, r.annotation), light)
        row += 1

    ws.freeze_panes = "A3"
    _set_widths(ws, GENERAL_WIDTHS)


def _sheet_detail(ws, report: ReportTables, brand: dict) -> None:
    """Per-category totals followed by the executive summary lines."""
    primary = brand["primary"]
    ws.sheet_properties.tabColor = brand["performance"].lstrip("#")

    _band(ws, 1, "DADOS DETALHADOS", len(DETAIL_HEADER), primary, size=12)
    _write_header_row(ws, 3, DETAIL_HEADER, primary)
    row = 4
    for d in report.detail:
        _write_body_row(ws, row, (d.category, d.total, d.done, d.pending, d.rate),
                        brand["light"])
        row += 1

    summary_band = row + 1
    _band(ws, summary_band, "RESUMO EXECUTIVO", len(DETAIL_HEADER), primary, size=12)
    for i, line in enumerate(executive_summary_lines(report), start=summary_band + 2):
        c = ws.cell(row=i, column=1, value=line)
        c.font = _font(size=10)

    _set_widths(ws, DETAIL_WIDTHS)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def render_excel(report: ReportTables, brand: dict[str, Any]) -> bytes:
    """Build the management report workbook.

    Args:
        report: Formatted report rows.
        brand: Brand colour dict from config (report.brand).

    Returns:
        The .xlsx file content.
    """
    wb = Workbook()
    wb.remove(wb.active)
    wb.properties.title = "Relatório Gerencial"
    wb.properties.creator = report.system_name
    wb.properties.created = report.generated_at

    sheets = [
        (SHEET_GENERAL, lambda ws: _sheet_general(ws, report, brand)),
        (SHEET_DETAIL,  lambda ws: _sheet_detail(ws, report, brand)),
    ]
    for sheet_name, builder in sheets:
        ws = wb.create_sheet(sheet_name)
        builder(ws)
        logger.debug("Built sheet: %s", sheet_name)

    buf = io.BytesIO()
    wb.save(buf)
    content = buf.getvalue()
    logger.info("Excel workbook rendered (%d bytes, %d sheets)", len(content), len(sheets))
    return content
