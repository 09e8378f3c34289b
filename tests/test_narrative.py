"""
test_narrative.py — Unit tests for the executive summary generator.

Tests cover:
    - Count/noun formatting helper
    - Headline variant selection
    - Summary lines contain the snapshot counts
"""

import sys
from datetime import datetime
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from franchise_report.formatter import format_report
from franchise_report.metrics import MetricsSnapshot
from franchise_report.narrative import _count, executive_summary_lines, generate_narrative


def _report(stores=800, completed=560, open_=3, resolved=27):
    snapshot = MetricsSnapshot(
        total_suppliers=12,
        total_stores=stores,
        open_tickets=open_,
        resolved_tickets=resolved,
        completed_installations=completed,
        non_completed_stores=stores - completed,
    )
    return format_report(snapshot, generated_at=datetime(2024, 3, 15, 9, 30))


class TestCountHelper:

    def test_singular(self):
        assert _count(1, "loja", "lojas") == "1 loja"

    def test_plural(self):
        assert _count(3, "loja", "lojas") == "3 lojas"

    def test_zero_is_plural(self):
        assert _count(0, "chamado", "chamados") == "0 chamados"


class TestHeadline:

    def test_both_on_target(self):
        headline = generate_narrative(_report()).headline
        assert headline.startswith("Rede com bom desempenho")
        assert "70%" in headline
        assert "90%" in headline

    def test_tickets_off_target(self):
        headline = generate_narrative(_report(open_=5, resolved=5)).headline
        assert "pode melhorar" in headline

    def test_installations_off_target(self):
        headline = generate_narrative(_report(completed=100)).headline
        assert "necessita atenção" in headline

    def test_both_off_target(self):
        headline = generate_narrative(_report(completed=100, open_=5, resolved=5)).headline
        assert headline.startswith("Atenção")


class TestSummaryLines:

    def test_one_line_per_count(self):
        assert len(executive_summary_lines(_report())) == 6

    def test_lines_contain_counts(self):
        text = "\n".join(executive_summary_lines(_report()))
        for value in ("800", "560", "240", "12", "3", "27", "70%"):
            assert value in text

    def test_first_line(self):
        assert executive_summary_lines(_report())[0] == "Total de 800 lojas cadastradas no sistema"
