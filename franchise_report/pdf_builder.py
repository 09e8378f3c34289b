"""
pdf_builder.py — Management Report PDF Renderer.

Lays out a formatted report as a printable A4 document using ReportLab
(platypus layout engine):

    Header:       "Relatório Gerencial", generation timestamp, system name
    Section 1:    Resumo dos Indicadores — the six summary rows
    Section 2:    Análise de Performance — rates and pending volumes
    Chart:        installation and ticket status bars (matplotlib, optional)
    Section 3:    Resumo Executivo — headline and one line per count
    Footer:       "Página i de N" on every page

The renderer only does layout: all labels, values and annotations come
from ReportTables. Output is returned as bytes; nothing touches disk.
Documents are built in invariant mode, so the same report always renders
to the same bytes.
"""

import io
import logging
from typing import Any

import matplotlib
matplotlib.use("Agg")  # non-interactive backend — no display needed
import matplotlib.pyplot as plt

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_LEFT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.units import cm, mm
from reportlab.pdfgen import canvas as rl_canvas
from reportlab.platypus import (
    Image,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)
from reportlab.platypus.flowables import HRFlowable

from franchise_report.formatter import (
    PERFORMANCE_HEADER,
    SUMMARY_HEADER,
    ReportRow,
    ReportTables,
)
from franchise_report.narrative import generate_narrative

logger = logging.getLogger(__name__)

REPORT_TITLE = "Relatório Gerencial"

PAGE_W, PAGE_H = A4
MARGIN = 20 * mm
CONTENT_W = PAGE_W - 2 * MARGIN
COL_WIDTHS = [70 * mm, 40 * mm, 60 * mm]


def _hex(h: str):
    """Convert a hex colour string to ReportLab Color."""
    h = h.lstrip("#")
    r, g, b = int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)
    return colors.Color(r / 255, g / 255, b / 255)


def _mpl_hex(h: str) -> str:
    """Return hex with # for matplotlib."""
    return f"#{h.lstrip('#')}"


# ---------------------------------------------------------------------------
# Stylesheet
# ---------------------------------------------------------------------------

def _build_styles(brand: dict) -> dict[str, ParagraphStyle]:
    """Create the paragraph styles used in the report."""
    text_col = _hex(brand["text"])
    muted = _hex(brand["muted"])

    styles = {}
    styles["title"] = ParagraphStyle(
        "title",
        fontName="Helvetica-Bold",
        fontSize=20,
        leading=24,
        textColor=text_col,
        alignment=TA_CENTER,
        spaceAfter=6,
    )
    styles["generated"] = ParagraphStyle(
        "generated",
        fontName="Helvetica",
        fontSize=12,
        textColor=muted,
        alignment=TA_CENTER,
        spaceAfter=10,
    )
    styles["system"] = ParagraphStyle(
        "system",
        fontName="Helvetica",
        fontSize=14,
        leading=18,
        textColor=text_col,
        alignment=TA_CENTER,
        spaceAfter=8,
    )
    styles["section_title"] = ParagraphStyle(
        "section_title",
        fontName="Helvetica-Bold",
        fontSize=16,
        leading=20,
        textColor=text_col,
        alignment=TA_LEFT,
        spaceBefore=12,
        spaceAfter=8,
    )
    styles["body"] = ParagraphStyle(
        "body",
        fontName="Helvetica",
        fontSize=10.5,
        leading=15,
        textColor=text_col,
        spaceAfter=4,
    )
    styles["bullet"] = ParagraphStyle(
        "bullet",
        parent=styles["body"],
        leftIndent=12,
        bulletIndent=2,
    )
    return styles


# ---------------------------------------------------------------------------
# Footer: "Página i de N" needs the page total, so pages are held back
# until the document is complete and numbered on save.
# ---------------------------------------------------------------------------

class _NumberedCanvas(rl_canvas.Canvas):
    footer_colour = colors.Color(150 / 255, 150 / 255, 150 / 255)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._saved_page_states = []

    def showPage(self):  # noqa: N802
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        total = len(self._saved_page_states)
        for state in self._saved_page_states:
            self.__dict__.update(state)
            self._draw_footer(total)
            super().showPage()
        super().save()

    def _draw_footer(self, total: int) -> None:
        self.saveState()
        self.setFont("Helvetica", 10)
        self.setFillColor(self.footer_colour)
        self.drawCentredString(PAGE_W / 2, 12 * mm, f"Página {self._pageNumber} de {total}")
        self.restoreState()


# ---------------------------------------------------------------------------
# Chart (matplotlib → BytesIO)
# ---------------------------------------------------------------------------

def _fig_to_image(fig, width: float, height: float) -> Image:
    """Render a matplotlib figure to a ReportLab Image via BytesIO."""
    buf = io.BytesIO()
    fig.savefig(buf, format="png", dpi=150, bbox_inches="tight",
                facecolor=fig.get_facecolor())
    plt.close(fig)
    buf.seek(0)
    return Image(buf, width=width, height=height)


def _chart_status(report: ReportTables, brand: dict) -> Image:
    """Stacked bars: stores finalised vs pending, tickets resolved vs open."""
    s = report.snapshot
    categories = ["Lojas", "Chamados"]
    done = [s.completed_installations, s.resolved_tickets]
    pending = [s.non_completed_stores, s.open_tickets]

    fig, ax = plt.subplots(figsize=(7, 2.4))
    fig.patch.set_facecolor("white")
    ax.set_facecolor("white")

    ax.barh(categories, done, color=_mpl_hex(brand["performance"]),
            label="Finalizados", zorder=3)
    ax.barh(categories, pending, left=done, color=_mpl_hex(brand["attention"]),
            label="Pendentes", zorder=3)
    for i, (d, p) in enumerate(zip(done, pending)):
        ax.text(d + p, i, f"  {d + p}", va="center", fontsize=8,
                color=_mpl_hex(brand["text"]))

    ax.set_title("Status das Instalações e Chamados", fontsize=10,
                 color=_mpl_hex(brand["text"]), fontweight="bold", pad=8)
    ax.legend(fontsize=8, loc="lower right", framealpha=0.5)
    ax.spines[["top", "right"]].set_visible(False)
    ax.grid(axis="x", linestyle="--", alpha=0.4, zorder=0)
    fig.tight_layout()

    return _fig_to_image(fig, CONTENT_W * 0.95, 62 * mm)


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------

def _table_data(header: tuple, rows: list[ReportRow]) -> list[list[str]]:
    return [list(header)] + [[r.label, str(r.value), r.annotation] for r in rows]


def _build_table(header: tuple, rows: list[ReportRow], header_colour: str,
                 brand: dict) -> Table:
    """Striped three-column table with a coloured header row."""
    table = Table(_table_data(header, rows), colWidths=COL_WIDTHS, repeatRows=1)
    ts = TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), _hex(header_colour)),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, 0), 12),
        ("FONTNAME", (0, 1), (-1, -1), "Helvetica"),
        ("FONTSIZE", (0, 1), (-1, -1), 11),
        ("TEXTCOLOR", (0, 1), (-1, -1), _hex(brand["text"])),
        ("ALIGN", (1, 0), (1, -1), "CENTER"),
        ("ROWBACKGROUNDS", (0, 1), (-1, -1), [_hex(brand["light"]), colors.white]),
        ("TOPPADDING", (0, 0), (-1, -1), 5),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 5),
        ("LEFTPADDING", (0, 0), (-1, -1), 6),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
    ])
    table.setStyle(ts)
    table.hAlign = "LEFT"
    return table


# ---------------------------------------------------------------------------
# Story
# ---------------------------------------------------------------------------

def _build_story(report: ReportTables, brand: dict, include_chart: bool) -> list:
    styles = _build_styles(brand)
    generated = report.generated_at.strftime("%d/%m/%Y %H:%M")

    story = [
        Paragraph(REPORT_TITLE, styles["title"]),
        Paragraph(f"Gerado em: {generated}", styles["generated"]),
        Paragraph(report.system_name, styles["system"]),
        HRFlowable(width=CONTENT_W, thickness=0.7,
                   color=colors.Color(200 / 255, 200 / 255, 200 / 255), spaceAfter=6),
        Paragraph("Resumo dos Indicadores", styles["section_title"]),
        _build_table(SUMMARY_HEADER, report.summary, brand["primary"], brand),
        Spacer(1, 0.4 * cm),
        Paragraph("Análise de Performance", styles["section_title"]),
        _build_table(PERFORMANCE_HEADER, report.performance, brand["performance"], brand),
    ]

    if include_chart:
        story.append(Spacer(1, 0.5 * cm))
        story.append(_chart_status(report, brand))

    narrative = generate_narrative(report)
    story.append(Paragraph("Resumo Executivo", styles["section_title"]))
    story.append(Paragraph(narrative.headline, styles["body"]))
    for line in narrative.lines:
        story.append(Paragraph(line, styles["bullet"], bulletText="•"))
    return story


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def render_pdf(
    report: ReportTables,
    brand: dict[str, Any],
    include_chart: bool = True,
    compress: bool = True,
) -> bytes:
    """Render the management report as a PDF document.

    Args:
        report: Formatted report rows.
        brand: Brand colour dict from config (report.brand).
        include_chart: Embed the status chart after the performance table.
        compress: Compress page content streams.

    Returns:
        The PDF file content.
    """
    buf = io.BytesIO()
    doc = SimpleDocTemplate(
        buf,
        pagesize=A4,
        leftMargin=MARGIN,
        rightMargin=MARGIN,
        topMargin=15 * mm,
        bottomMargin=22 * mm,
        title=REPORT_TITLE,
        author=report.system_name,
        invariant=1,
        pageCompression=1 if compress else 0,
    )
    doc.build(_build_story(report, brand, include_chart), canvasmaker=_NumberedCanvas)
    content = buf.getvalue()
    logger.info("PDF report rendered (%d bytes)", len(content))
    return content
