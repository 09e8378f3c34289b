"""
exporter.py — Report Export Orchestrator.

Runs one export end to end:

    fetch metrics -> format rows -> render (pdf | xlsx | html) -> save

Failures are reported once, here, as a single error log line (the
equivalent of the dashboard's failure toast), then raised to the caller:

    MetricsFetchError   — the snapshot could not be obtained
    ReportRenderError   — a renderer raised; nothing was written

No step is retried.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Iterable, Optional

from franchise_report.config import load_config
from franchise_report.dashboard import render_dashboard
from franchise_report.delivery import DEFAULT_PREFIX, save_artifact
from franchise_report.errors import MetricsFetchError, ReportRenderError
from franchise_report.excel_pack import render_excel
from franchise_report.formatter import SYSTEM_NAME, ReportTables, format_report
from franchise_report.metrics import MetricsSnapshot, get_snapshot
from franchise_report.pdf_builder import render_pdf

logger = logging.getLogger(__name__)

DEFAULT_BRAND = {
    "primary":     "428BCA",
    "performance": "5CB85C",
    "attention":   "F0AD4E",
    "text":        "282828",
    "muted":       "646464",
    "light":       "F5F5F5",
}

FORMATS = ("pdf", "xlsx", "html")


def _renderers(cfg: dict[str, Any]) -> dict[str, Callable[[ReportTables, dict], bytes]]:
    rcfg = cfg["report"]
    return {
        "pdf": lambda report, brand: render_pdf(
            report, brand,
            include_chart=rcfg.get("include_chart", True),
            compress=rcfg.get("pdf_compression", True),
        ),
        "xlsx": render_excel,
        "html": render_dashboard,
    }


def _brand(cfg: dict[str, Any]) -> dict[str, str]:
    return {**DEFAULT_BRAND, **(cfg["report"].get("brand") or {})}


def _obtain_snapshot(config_path: str, source: Optional[str]) -> MetricsSnapshot:
    try:
        return get_snapshot(config_path, source=source)
    except MetricsFetchError as exc:
        logger.error("Erro ao obter métricas: %s", exc)
        raise


def _render(fmt: str, report: ReportTables, cfg: dict[str, Any]) -> bytes:
    renderer = _renderers(cfg)[fmt]
    try:
        return renderer(report, _brand(cfg))
    except Exception as exc:
        logger.error("Erro ao gerar relatório %s: %s", fmt.upper(), exc, exc_info=True)
        raise ReportRenderError(fmt, str(exc)) from exc


def export_all(
    formats: Iterable[str] = ("pdf", "xlsx"),
    config_path: str = "config.yaml",
    snapshot: Optional[MetricsSnapshot] = None,
    source: Optional[str] = None,
    now: Optional[datetime] = None,
) -> dict[str, Path]:
    """Export the same snapshot in several formats.

    The metrics are fetched once and every format is rendered from the same
    ReportTables, so all artifacts carry identical numbers and share one
    timestamp in their file names.

    Args:
        formats: Any of 'pdf', 'xlsx', 'html'.
        config_path: Path to configuration YAML.
        snapshot: Use this snapshot instead of fetching one.
        source: Metrics source override ('api' or 'local').
        now: Report timestamp; defaults to the current time.

    Returns:
        Dict of format -> saved file path.

    Raises:
        ValueError: On an unknown format.
        MetricsFetchError: If the snapshot cannot be obtained.
        ReportRenderError: If any renderer fails.
    """
    formats = list(formats)
    unknown = [f for f in formats if f not in FORMATS]
    if unknown:
        raise ValueError(f"Unsupported report format(s): {', '.join(unknown)}")

    cfg = load_config(config_path)
    paths = cfg["paths"]
    now = now or datetime.now()

    if snapshot is None:
        snapshot = _obtain_snapshot(config_path, source)

    report = format_report(
        snapshot, cfg["thresholds"], generated_at=now,
        system_name=cfg["project"].get("system_name", SYSTEM_NAME),
    )
    logger.info(
        "Report formatted -- completion: %d%% | resolution: %d%%",
        report.completion_rate, report.resolution_rate,
    )

    # render everything before saving anything: a failed export leaves no files
    rendered = {fmt: _render(fmt, report, cfg) for fmt in formats}

    stamp = int(now.timestamp() * 1000)
    return {
        fmt: save_artifact(
            content, fmt,
            output_dir=paths.get("output_dir", "data/output"),
            timestamp_ms=stamp,
            prefix=paths.get("filename_prefix", DEFAULT_PREFIX),
        )
        for fmt, content in rendered.items()
    }


def export_report(
    fmt: str,
    config_path: str = "config.yaml",
    snapshot: Optional[MetricsSnapshot] = None,
    source: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Path:
    """Export a single report format; see export_all for the arguments."""
    return export_all([fmt], config_path, snapshot=snapshot, source=source, now=now)[fmt]
