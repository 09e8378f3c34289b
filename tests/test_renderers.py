"""
test_renderers.py — Tests for the PDF, workbook and dashboard renderers.

Tests cover:
    - PDF: valid document, summary values present, page footer, determinism
    - Workbook: sheet names, layout (merges, widths), cell contents
    - Both renderers carry the same six summary values
    - Dashboard HTML content
"""

import io
import re
import sys
from datetime import datetime
from pathlib import Path

import pytest
from openpyxl import load_workbook

sys.path.insert(0, str(Path(__file__).parent.parent))

from franchise_report.dashboard import render_dashboard
from franchise_report.excel_pack import SHEET_DETAIL, SHEET_GENERAL, render_excel
from franchise_report.exporter import DEFAULT_BRAND
from franchise_report.formatter import format_report
from franchise_report.metrics import MetricsSnapshot
from franchise_report.pdf_builder import render_pdf

SNAPSHOT = MetricsSnapshot(
    total_suppliers=12,
    total_stores=800,
    open_tickets=3,
    resolved_tickets=27,
    completed_installations=560,
    non_completed_stores=240,
)
GENERATED = datetime(2024, 3, 15, 9, 30, 0)


@pytest.fixture
def report():
    return format_report(SNAPSHOT, generated_at=GENERATED)


@pytest.fixture
def workbook(report):
    return load_workbook(io.BytesIO(render_excel(report, DEFAULT_BRAND)))


def _summary_values():
    return [
        SNAPSHOT.total_stores, SNAPSHOT.total_suppliers, SNAPSHOT.open_tickets,
        SNAPSHOT.resolved_tickets, SNAPSHOT.completed_installations,
        SNAPSHOT.non_completed_stores,
    ]


# ---------------------------------------------------------------------------
# PDF
# ---------------------------------------------------------------------------

class TestPdf:

    def test_is_a_pdf(self, report):
        content = render_pdf(report, DEFAULT_BRAND, include_chart=False)
        assert content.startswith(b"%PDF")
        assert content.rstrip().endswith(b"%%EOF")

    def test_summary_values_drawn(self, report):
        content = render_pdf(report, DEFAULT_BRAND, include_chart=False, compress=False)
        for value in _summary_values():
            assert f"({value})".encode() in content

    def test_generated_timestamp_drawn(self, report):
        content = render_pdf(report, DEFAULT_BRAND, include_chart=False, compress=False)
        assert b"15/03/2024 09:30" in content

    def test_every_page_numbered_with_total(self, report):
        content = render_pdf(report, DEFAULT_BRAND, include_chart=True, compress=False)
        numbers = re.findall(rb"gina (\d+) de (\d+)\)", content)
        assert numbers
        totals = {int(total) for _, total in numbers}
        assert len(totals) == 1
        total = totals.pop()
        assert sorted(int(page) for page, _ in numbers) == list(range(1, total + 1))

    def test_same_report_same_bytes(self, report):
        first = render_pdf(report, DEFAULT_BRAND, include_chart=False)
        second = render_pdf(report, DEFAULT_BRAND, include_chart=False)
        assert first == second

    def test_chart_embeds_an_image(self, report):
        content = render_pdf(report, DEFAULT_BRAND, include_chart=True, compress=False)
        assert b"/Subtype /Image" in content

    def test_zero_snapshot_renders(self):
        empty = format_report(MetricsSnapshot(0, 0, 0, 0, 0, 0), generated_at=GENERATED)
        assert render_pdf(empty, DEFAULT_BRAND).startswith(b"%PDF")


# ---------------------------------------------------------------------------
# Workbook
# ---------------------------------------------------------------------------

class TestExcel:

    def test_sheet_names(self, workbook):
        assert workbook.sheetnames == ["Relatório Geral", "Análise Detalhada"]

    def test_title_and_timestamp(self, workbook):
        ws = workbook[SHEET_GENERAL]
        assert ws["A1"].value == "RELATÓRIO GERENCIAL - SISTEMA DE GESTÃO DE FRANQUIAS"
        assert ws["A2"].value == "Gerado em: 15/03/2024 às 09:30:00"

    def test_general_merges(self, workbook):
        merged = {str(r) for r in workbook[SHEET_GENERAL].merged_cells.ranges}
        assert merged == {"A1:D1", "A2:D2", "A4:D4", "A14:D14"}

    def test_general_column_widths(self, workbook):
        ws = workbook[SHEET_GENERAL]
        assert [ws.column_dimensions[c].width for c in "ABCD"] == [30, 20, 25, 40]

    def test_summary_block(self, workbook):
        ws = workbook[SHEET_GENERAL]
        assert [c.value for c in ws[6]][:4] == ["Indicador", "Valor", "Status", "Observações"]
        assert [ws.cell(row=r, column=2).value for r in range(7, 13)] == _summary_values()
        assert ws["C9"].value == "Requer atenção"

    def test_performance_block(self, workbook):
        ws = workbook[SHEET_GENERAL]
        assert ws["A14"].value == "ANÁLISE DE PERFORMANCE"
        assert [c.value for c in ws[16]][:3] == ["Métrica", "Valor", "Análise"]
        assert (ws["A17"].value, ws["B17"].value, ws["C17"].value) == \
            ("Taxa de Conclusão", "70%", "Bom desempenho")
        assert (ws["A18"].value, ws["B18"].value) == ("Taxa de Resolução de Chamados", "90%")
        assert ws["A20"].value == "Chamados Pendentes"

    def test_detail_sheet(self, workbook):
        ws = workbook[SHEET_DETAIL]
        merged = {str(r) for r in ws.merged_cells.ranges}
        assert merged == {"A1:E1", "A7:E7"}
        assert [c.value for c in ws[4]][:5] == ["Lojas", 800, 560, 240, "70%"]
        assert [c.value for c in ws[5]][:5] == ["Chamados", 30, 27, 3, "90%"]
        assert ws["A7"].value == "RESUMO EXECUTIVO"
        assert ws["A9"].value == "Total de 800 lojas cadastradas no sistema"
        assert [ws.column_dimensions[c].width for c in "ABCDE"] == [20, 15, 15, 15, 20]

    def test_same_report_same_cells(self, report):
        def cells(content):
            wb = load_workbook(io.BytesIO(content))
            return {
                name: [[c.value for c in row] for row in wb[name].iter_rows()]
                for name in wb.sheetnames
            }

        assert cells(render_excel(report, DEFAULT_BRAND)) == \
            cells(render_excel(report, DEFAULT_BRAND))


# ---------------------------------------------------------------------------
# Cross-renderer agreement
# ---------------------------------------------------------------------------

class TestRenderersAgree:

    def test_pdf_and_workbook_carry_the_same_summary(self, report, workbook):
        pdf = render_pdf(report, DEFAULT_BRAND, include_chart=False, compress=False)
        ws = workbook[SHEET_GENERAL]
        xlsx_values = [ws.cell(row=r, column=2).value for r in range(7, 13)]

        assert xlsx_values == _summary_values()
        for value in xlsx_values:
            assert f"({value})".encode() in pdf


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------

class TestDashboard:

    def test_html_document(self, report):
        page = render_dashboard(report, DEFAULT_BRAND).decode("utf-8")
        assert page.startswith("<!DOCTYPE html>")
        assert "Status dos Chamados" in page
        assert "Taxa de Conclusão" in page

    def test_kpi_cards_show_summary(self, report):
        page = render_dashboard(report, DEFAULT_BRAND).decode("utf-8")
        for row in report.summary:
            assert f'<div class="kpi-value">{row.value}</div>' in page

    def test_plotly_inlined_for_offline_use(self, report):
        page = render_dashboard(report, DEFAULT_BRAND).decode("utf-8")
        assert 'src="https://cdn.plot.ly' not in page
        # the plotly.js bundle itself is embedded in the page
        assert len(page) > 1_000_000


class TestSystemName:

    @pytest.fixture
    def named(self):
        return format_report(SNAPSHOT, generated_at=GENERATED, system_name="Rede Norte")

    def test_default_name(self, report):
        assert report.system_name == "Sistema de Gestão de Franquias"

    def test_pdf_uses_name(self, named):
        content = render_pdf(named, DEFAULT_BRAND, include_chart=False, compress=False)
        assert b"Rede Norte" in content

    def test_workbook_uses_name(self, named):
        wb = load_workbook(io.BytesIO(render_excel(named, DEFAULT_BRAND)))
        assert wb.properties.creator == "Rede Norte"

    def test_dashboard_uses_name(self, named):
        page = render_dashboard(named, DEFAULT_BRAND).decode("utf-8")
        assert "Rede Norte" in page
        assert "Sistema de Gestão de Franquias" not in page
