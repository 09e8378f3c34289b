"""
formatter.py — Report Row Formatter.

Maps a MetricsSnapshot to the row-sets every renderer lays out:

    summary      — the six raw counts, each with a status annotation
    performance  — derived rates and pending volumes, each with an assessment
    detail       — per-category totals (stores, tickets) for the workbook

Annotations follow fixed threshold rules; thresholds can be tuned in the
`thresholds` config block. Pure: no I/O, no clock reads unless the caller
omits `generated_at`.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional, Union

from franchise_report.metrics import MetricsSnapshot

SUMMARY_HEADER = ("Indicador", "Valor", "Status")
PERFORMANCE_HEADER = ("Métrica", "Valor", "Observação")
DETAIL_HEADER = ("Categoria", "Total", "Finalizados", "Pendentes", "Taxa de Conclusão")

SYSTEM_NAME = "Sistema de Gestão de Franquias"

DEFAULT_THRESHOLDS = {
    "completion_rate_good": 70,       # % at or above -> good
    "resolution_rate_excellent": 80,  # % at or above -> excellent
    "pending_stores_high": 50,        # count above -> high volume
    "open_tickets_high": 5,           # count above -> high volume
}


@dataclass(frozen=True)
class ReportRow:
    """One table line: label, value and its annotation."""
    label: str
    value: Union[int, str]
    annotation: str
    note: str = ""


@dataclass(frozen=True)
class DetailRow:
    category: str
    total: int
    done: int
    pending: int
    rate: str


@dataclass(frozen=True)
class ReportTables:
    """Everything a renderer needs for one report."""
    snapshot: MetricsSnapshot
    generated_at: datetime
    completion_rate: int
    resolution_rate: int
    summary: list[ReportRow] = field(default_factory=list)
    performance: list[ReportRow] = field(default_factory=list)
    detail: list[DetailRow] = field(default_factory=list)
    system_name: str = SYSTEM_NAME


def _pct(value: int) -> str:
    return f"{value}%"


def _summary_rows(s: MetricsSnapshot) -> list[ReportRow]:
    return [
        ReportRow("Total de Lojas", s.total_stores, "Base cadastrada",
                  "Total de lojas cadastradas no sistema"),
        ReportRow("Total de Fornecedores", s.total_suppliers, "Parceiros ativos",
                  "Fornecedores disponíveis para instalação"),
        ReportRow("Chamados em Aberto", s.open_tickets,
                  "Requer atenção" if s.open_tickets > 0 else "Ok",
                  "Chamados aguardando resolução"),
        ReportRow("Chamados Resolvidos", s.resolved_tickets, "Finalizados",
                  "Chamados concluídos com sucesso"),
        ReportRow("Lojas Finalizadas", s.completed_installations, "Instalações completas",
                  "Lojas com instalação finalizada"),
        ReportRow("Lojas Não Finalizadas", s.non_completed_stores, "Em processo",
                  "Lojas aguardando finalização"),
    ]


def _performance_rows(s: MetricsSnapshot, t: dict[str, Any]) -> list[ReportRow]:
    completion = s.completion_rate
    resolution = s.resolution_rate
    return [
        ReportRow(
            "Taxa de Conclusão", _pct(completion),
            "Bom desempenho" if completion >= t["completion_rate_good"] else "Necessita atenção",
        ),
        ReportRow(
            "Taxa de Resolução de Chamados", _pct(resolution),
            "Excelente" if resolution >= t["resolution_rate_excellent"] else "Pode melhorar",
        ),
        ReportRow(
            "Lojas Pendentes", s.non_completed_stores,
            "Volume alto" if s.non_completed_stores > t["pending_stores_high"] else "Volume controlado",
        ),
        ReportRow(
            "Chamados Pendentes", s.open_tickets,
            "Alto volume" if s.open_tickets > t["open_tickets_high"] else "Volume normal",
        ),
    ]


def _detail_rows(s: MetricsSnapshot) -> list[DetailRow]:
    return [
        DetailRow("Lojas", s.total_stores, s.completed_installations,
                  s.non_completed_stores, _pct(s.completion_rate)),
        DetailRow("Chamados", s.total_tickets, s.resolved_tickets,
                  s.open_tickets, _pct(s.resolution_rate)),
    ]


def format_report(
    snapshot: MetricsSnapshot,
    thresholds: Optional[dict[str, Any]] = None,
    generated_at: Optional[datetime] = None,
    system_name: str = SYSTEM_NAME,
) -> ReportTables:
    """Build the summary, performance and detail row-sets for a snapshot.

    Args:
        snapshot: Validated metrics snapshot.
        thresholds: Overrides for DEFAULT_THRESHOLDS.
        generated_at: Timestamp printed on the report; defaults to now.
        system_name: Network name printed under the report title.

    Returns:
        ReportTables shared by the PDF, workbook and dashboard renderers.
    """
    t = {**DEFAULT_THRESHOLDS, **(thresholds or {})}
    return ReportTables(
        snapshot=snapshot,
        generated_at=generated_at or datetime.now(),
        completion_rate=snapshot.completion_rate,
        resolution_rate=snapshot.resolution_rate,
        summary=_summary_rows(snapshot),
        performance=_performance_rows(snapshot, t),
        detail=_detail_rows(snapshot),
        system_name=system_name,
    )
