"""
main.py — Franchise Management Report — CLI Entry Point.

Runs any combination of export stages. Stages share one metrics snapshot
in memory, so every artifact of a run carries the same numbers.

Usage:
    python main.py --full-run                   # PDF + Excel from the API
    python main.py --generate-data              # Refresh synthetic CSV exports
    python main.py --pdf --source local         # PDF from the local exports
    python main.py --excel --dashboard --config custom.yaml --log-level DEBUG

Outputs (data/output/):
    relatorio_gerencial_<unix_ms>.pdf    — printable management report
    relatorio_gerencial_<unix_ms>.xlsx   — 2-sheet Excel workbook
    relatorio_gerencial_<unix_ms>.html   — interactive Plotly dashboard
"""

import argparse
import logging
import logging.handlers
import os
import sys
from datetime import datetime
from pathlib import Path

import yaml


def _configure_logging(log_dir: str = "logs", level: str = "INFO") -> None:
    """Configure rotating file handler + stream handler.

    Args:
        log_dir: Directory for log files.
        level: Log level string.
    """
    effective_level = os.environ.get("LOG_LEVEL", level).upper()
    numeric = getattr(logging, effective_level, logging.INFO)

    Path(log_dir).mkdir(parents=True, exist_ok=True)
    log_file = Path(log_dir) / f"reports_{datetime.today().strftime('%Y%m%d')}.log"

    fmt = logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)-35s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    fh = logging.handlers.RotatingFileHandler(
        log_file, maxBytes=10 * 1024 * 1024, backupCount=7, encoding="utf-8"
    )
    fh.setFormatter(fmt)
    sh = logging.StreamHandler(sys.stdout)
    sh.setFormatter(fmt)

    root = logging.getLogger()
    root.setLevel(numeric)
    root.addHandler(fh)
    root.addHandler(sh)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("matplotlib").setLevel(logging.WARNING)


def _parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="franchise-report",
        description="Franchise management report — PDF + Excel + Dashboard export.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py --full-run
  python main.py --generate-data
  python main.py --pdf --excel --source local
  python main.py --full-run --config custom.yaml --log-level DEBUG
        """,
    )
    parser.add_argument("--config", default="config.yaml",
                        help="Path to config.yaml (default: config.yaml)")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--source", choices=["api", "local"], default=None,
                        help="Metrics source (default: metrics.source in config)")

    stages = parser.add_argument_group("Export Stages")
    stages.add_argument("--generate-data", action="store_true",
                        help="Generate synthetic suppliers/stores/tickets exports")
    stages.add_argument("--pdf", action="store_true",
                        help="Export the PDF report")
    stages.add_argument("--excel", action="store_true",
                        help="Export the Excel workbook")
    stages.add_argument("--dashboard", action="store_true",
                        help="Export the interactive HTML dashboard")
    stages.add_argument("--full-run", action="store_true",
                        help="Export every format listed in report.formats")
    return parser.parse_args(argv)


def _selected_formats(args: argparse.Namespace, config_path: str) -> list[str]:
    if args.full_run:
        with open(config_path, "r", encoding="utf-8") as fh:
            cfg = yaml.safe_load(fh) or {}
        return list((cfg.get("report") or {}).get("formats", ["pdf", "xlsx"]))
    selected = []
    if args.pdf:
        selected.append("pdf")
    if args.excel:
        selected.append("xlsx")
    if args.dashboard:
        selected.append("html")
    return selected


def run_pipeline(args: argparse.Namespace, logger: logging.Logger) -> int:
    """Execute the requested export stages.

    Args:
        args: Parsed CLI arguments.
        logger: Configured logger.

    Returns:
        0 on success, 1 on error.
    """
    from franchise_report.data_simulator import generate_all_datasets
    from franchise_report.errors import ReportError
    from franchise_report.exporter import export_all

    config_path = args.config

    # -------------------------------------------------------------------------
    # Stage 1: Data generation
    # -------------------------------------------------------------------------
    if args.generate_data:
        logger.info("=" * 65)
        logger.info("STAGE 1: Data Generation")
        logger.info("=" * 65)
        try:
            datasets = generate_all_datasets(config_path)
            total_rows = sum(len(df) for df in datasets.values())
            logger.info("Data generation complete -- %d total rows across 3 datasets", total_rows)
        except Exception as exc:
            logger.error("Data generation failed: %s", exc, exc_info=True)
            return 1

    # -------------------------------------------------------------------------
    # Stage 2: Export (fetch -> format -> render -> save)
    # -------------------------------------------------------------------------
    try:
        formats = _selected_formats(args, config_path)
    except (OSError, yaml.YAMLError) as exc:
        logger.error("Cannot read config %s: %s", config_path, exc)
        return 1
    if formats:
        logger.info("=" * 65)
        logger.info("STAGE 2: Export (%s)", ", ".join(formats))
        logger.info("=" * 65)
        try:
            saved = export_all(formats, config_path, source=args.source)
        except ReportError:
            # already reported by the exporter
            return 1
        except Exception as exc:
            logger.error("Export failed: %s", exc, exc_info=True)
            return 1
        for fmt, path in saved.items():
            logger.info("  %-5s -> %s", fmt.upper(), path)

    logger.info("=" * 65)
    logger.info("EXPORT COMPLETE")
    logger.info("=" * 65)
    return 0


def main(argv=None) -> None:
    """Parse args, configure logging, and run the export."""
    args = _parse_args(argv)

    try:
        with open(args.config, "r", encoding="utf-8") as fh:
            cfg = yaml.safe_load(fh) or {}
        log_dir = cfg.get("paths", {}).get("log_dir", "logs")
    except (OSError, yaml.YAMLError):
        log_dir = "logs"

    _configure_logging(log_dir=log_dir, level=args.log_level)
    logger = logging.getLogger(__name__)

    no_stage = not any([
        args.full_run, args.generate_data, args.pdf, args.excel, args.dashboard,
    ])
    if no_stage:
        _parse_args(["--help"])

    logger.info(
        "Franchise Management Report v1.0 | %s",
        datetime.today().strftime("%Y-%m-%d %H:%M:%S"),
    )
    sys.exit(run_pipeline(args, logger))


if __name__ == "__main__":
    main()
