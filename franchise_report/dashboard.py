"""
dashboard.py — Interactive Plotly HTML Dashboard.

Generates a self-contained HTML page that mirrors the management report in
interactive form, for opening directly in a browser:

    Header KPI bar  — the six summary counts with their status
    Row 1:          — Ticket status (pie) | Store installation status (bar)
    Row 2:          — Performance analysis table

All charts use the brand colour palette from config.yaml.
"""

import html
import logging

import plotly.graph_objects as go

from franchise_report.formatter import PERFORMANCE_HEADER, ReportTables

logger = logging.getLogger(__name__)

TEMPLATE = "plotly_white"


def _mpl(h: str) -> str:
    """Ensure hex colour has # prefix."""
    return f"#{h.lstrip('#')}"


def _chart_tickets(report: ReportTables, brand: dict) -> go.Figure:
    """Pie: open vs resolved tickets."""
    s = report.snapshot
    fig = go.Figure(go.Pie(
        labels=["Abertos", "Resolvidos"],
        values=[s.open_tickets, s.resolved_tickets],
        marker=dict(colors=[_mpl(brand["attention"]), _mpl(brand["performance"])]),
        textinfo="label+percent",
        hovertemplate="%{label}: %{value}<extra></extra>",
        sort=False,
    ))
    fig.update_layout(
        title=dict(text="Status dos Chamados", font=dict(size=14, color=_mpl(brand["text"]))),
        template=TEMPLATE,
        height=340,
        margin=dict(l=30, r=30, t=60, b=30),
    )
    return fig


def _chart_installations(report: ReportTables, brand: dict) -> go.Figure:
    """Bar: finalised vs pending store installations."""
    s = report.snapshot
    fig = go.Figure(go.Bar(
        x=["Finalizadas", "Não finalizadas"],
        y=[s.completed_installations, s.non_completed_stores],
        marker_color=[_mpl(brand["performance"]), _mpl(brand["attention"])],
        hovertemplate="%{x}: %{y}<extra></extra>",
    ))
    fig.update_layout(
        title=dict(text=f"Instalações — {report.completion_rate}% concluídas",
                   font=dict(size=14, color=_mpl(brand["text"]))),
        template=TEMPLATE,
        yaxis=dict(title="Lojas"),
        height=340,
        margin=dict(l=50, r=30, t=60, b=40),
    )
    return fig


def _build_kpi_header(report: ReportTables, brand: dict) -> str:
    cards = ""
    for row in report.summary:
        cards += f"""
        <div class="kpi">
            <div class="kpi-label">{html.escape(row.label)}</div>
            <div class="kpi-value">{row.value}</div>
            <div class="kpi-status">{html.escape(row.annotation)}</div>
        </div>"""
    return f"""
    <div class="header" style="background:{_mpl(brand['primary'])};">
        <h1>Relatório Gerencial</h1>
        <p>{html.escape(report.system_name)} &nbsp;|&nbsp;
           Gerado em {report.generated_at.strftime('%d/%m/%Y %H:%M')}</p>
        <div class="kpis">{cards}</div>
    </div>"""


def _build_performance_table(report: ReportTables, brand: dict) -> str:
    head = "".join(f"<th>{html.escape(h)}</th>" for h in PERFORMANCE_HEADER)
    body = "".join(
        f"<tr><td>{html.escape(r.label)}</td><td>{r.value}</td>"
        f"<td>{html.escape(r.annotation)}</td></tr>"
        for r in report.performance
    )
    return (
        f'<table class="perf"><thead style="background:{_mpl(brand["performance"])};">'
        f"<tr>{head}</tr></thead><tbody>{body}</tbody></table>"
    )


def render_dashboard(report: ReportTables, brand: dict) -> bytes:
    """Render the dashboard page.

    Args:
        report: Formatted report rows.
        brand: Brand colour dict from config (report.brand).

    Returns:
        UTF-8 encoded HTML document.
    """
    charts = {
        "tickets": _chart_tickets(report, brand),
        "installations": _chart_installations(report, brand),
    }
    # plotly.js is inlined once, with the first chart, so the page works offline
    divs = {
        k: fig.to_html(div_id=f"chart-{k}", include_plotlyjs=(i == 0), full_html=False)
        for i, (k, fig) in enumerate(charts.items())
    }

    page = f"""<!DOCTYPE html>
<html lang="pt-BR">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width,initial-scale=1.0">
    <title>Relatório Gerencial — {report.generated_at.strftime('%d/%m/%Y')}</title>
    <style>
        *{{box-sizing:border-box;margin:0;padding:0;}}
        body{{font-family:'Segoe UI',Arial,sans-serif;background:#F4F7FA;color:#282828;}}
        .header{{color:#fff;padding:20px 24px;}}
        .header p{{opacity:.8;font-size:13px;margin-top:4px;}}
        .kpis{{display:grid;grid-template-columns:repeat(6,1fr);gap:10px;margin-top:16px;}}
        .kpi{{background:rgba(255,255,255,.12);border-radius:6px;padding:10px;text-align:center;}}
        .kpi-label{{font-size:11px;opacity:.85;}}
        .kpi-value{{font-size:22px;font-weight:bold;}}
        .kpi-status{{font-size:11px;opacity:.85;}}
        .grid{{display:grid;grid-template-columns:1fr 1fr;gap:14px;padding:18px;}}
        .card{{background:#fff;border-radius:8px;padding:6px;
               box-shadow:0 2px 8px rgba(0,0,0,.07);}}
        .full{{grid-column:1/-1;padding:14px;}}
        .perf{{width:100%;border-collapse:collapse;font-size:13px;}}
        .perf th{{color:#fff;text-align:left;padding:8px;}}
        .perf td{{padding:8px;border-bottom:1px solid #eee;}}
        .footer{{text-align:center;padding:14px;color:#888;font-size:11px;}}
        @media(max-width:880px){{.grid{{grid-template-columns:1fr;}}.full{{grid-column:1;}}
            .kpis{{grid-template-columns:repeat(2,1fr);}}}}
    </style>
</head>
<body>
    {_build_kpi_header(report, brand)}
    <div class="grid">
        <div class="card">{divs['tickets']}</div>
        <div class="card">{divs['installations']}</div>
        <div class="card full">{_build_performance_table(report, brand)}</div>
    </div>
    <div class="footer">{html.escape(report.system_name)} &nbsp;|&nbsp; Relatório Gerencial</div>
</body>
</html>"""

    content = page.encode("utf-8")
    logger.info("Dashboard rendered (%d bytes)", len(content))
    return content
