"""
narrative.py — Executive Summary Generator.

Turns the formatted report into the short plain-language lines shown under
"RESUMO EXECUTIVO" in the workbook and "Resumo Executivo" in the PDF.

The headline picks a variant from the performance annotations:
    both rates on target  -> positive headline
    one rate off target   -> mixed headline naming the weak area
    both off target       -> attention headline
"""

import logging
from dataclasses import dataclass

from franchise_report.formatter import ReportTables

logger = logging.getLogger(__name__)

_GOOD_ANNOTATIONS = frozenset({"Bom desempenho", "Excelente"})


@dataclass(frozen=True)
class NarrativePackage:
    headline: str
    lines: list[str]


def _count(n: int, singular: str, plural: str) -> str:
    """Format a count with the right noun form.

    >>> _count(1, "loja", "lojas")
    '1 loja'
    """
    return f"{n} {singular if n == 1 else plural}"


def _headline(report: ReportTables) -> str:
    completion_row, resolution_row = report.performance[0], report.performance[1]
    installs_ok = completion_row.annotation in _GOOD_ANNOTATIONS
    tickets_ok = resolution_row.annotation in _GOOD_ANNOTATIONS

    if installs_ok and tickets_ok:
        return (
            f"Rede com bom desempenho: {report.completion_rate}% das instalações "
            f"concluídas e {report.resolution_rate}% dos chamados resolvidos."
        )
    if installs_ok:
        return (
            f"Instalações dentro da meta ({report.completion_rate}%), mas a resolução "
            f"de chamados ({report.resolution_rate}%) pode melhorar."
        )
    if tickets_ok:
        return (
            f"Chamados sob controle ({report.resolution_rate}% resolvidos), mas a taxa "
            f"de conclusão das instalações ({report.completion_rate}%) necessita atenção."
        )
    return (
        f"Atenção: conclusão das instalações em {report.completion_rate}% e "
        f"resolução de chamados em {report.resolution_rate}%, ambas abaixo da meta."
    )


def executive_summary_lines(report: ReportTables) -> list[str]:
    """One sentence per headline count, in the order the workbook prints them."""
    s = report.snapshot
    return [
        f"Total de {_count(s.total_stores, 'loja cadastrada', 'lojas cadastradas')} no sistema",
        f"{_count(s.completed_installations, 'loja', 'lojas')} com instalação finalizada "
        f"({report.completion_rate}% de conclusão)",
        f"{_count(s.non_completed_stores, 'loja', 'lojas')} aguardando finalização da instalação",
        f"{_count(s.total_suppliers, 'fornecedor ativo disponível', 'fornecedores ativos disponíveis')}",
        f"{_count(s.open_tickets, 'chamado', 'chamados')} aguardando resolução",
        f"{_count(s.resolved_tickets, 'chamado resolvido', 'chamados resolvidos')} com sucesso",
    ]


def generate_narrative(report: ReportTables) -> NarrativePackage:
    """Build the executive summary for a formatted report."""
    narrative = NarrativePackage(
        headline=_headline(report),
        lines=executive_summary_lines(report),
    )
    logger.debug("Narrative generated: %s", narrative.headline)
    return narrative
