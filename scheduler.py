"""
scheduler.py — Weekly Management Report Scheduler.

Exports the management report every Monday at 07:00 São Paulo time so the
week starts with fresh numbers in data/output/.

A failed run is logged and left for the next scheduled run; exports are
never retried within a run.

Usage:
    python scheduler.py              # Start daemon (blocking)
    python scheduler.py --run-now    # One immediate run, then exit
    python scheduler.py --config custom.yaml
"""

import argparse
import logging
import logging.handlers
import signal
import sys
from pathlib import Path

import yaml
from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.cron import CronTrigger


logger = logging.getLogger(__name__)


def _configure_logging(log_dir: str) -> None:
    Path(log_dir).mkdir(parents=True, exist_ok=True)
    fmt = logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)-35s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    fh = logging.handlers.RotatingFileHandler(
        Path(log_dir) / "scheduler.log",
        maxBytes=5 * 1024 * 1024, backupCount=14, encoding="utf-8",
    )
    fh.setFormatter(fmt)
    sh = logging.StreamHandler(sys.stdout)
    sh.setFormatter(fmt)
    root = logging.getLogger()
    root.setLevel(logging.INFO)
    root.addHandler(fh)
    root.addHandler(sh)
    logging.getLogger("apscheduler").setLevel(logging.WARNING)
    logging.getLogger("matplotlib").setLevel(logging.WARNING)


def run_scheduled_export(config_path: str, formats: list[str]) -> bool:
    """Execute one scheduled export.

    Args:
        config_path: Path to configuration YAML.
        formats: Report formats to export.

    Returns:
        True if every format was saved.
    """
    from franchise_report.errors import ReportError
    from franchise_report.exporter import export_all

    logger.info("Starting scheduled report export (%s)", ", ".join(formats))
    try:
        saved = export_all(formats, config_path)
    except ReportError:
        # already logged by the exporter
        logger.warning("Scheduled export failed; next attempt at the next scheduled run")
        return False
    except Exception as exc:
        logger.error("Scheduled export failed: %s", exc, exc_info=True)
        return False
    logger.info("Scheduled export succeeded: %s", ", ".join(str(p) for p in saved.values()))
    return True


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="scheduler",
        description="Weekly franchise management report scheduler (Monday 07:00).",
    )
    parser.add_argument("--config", default="config.yaml")
    parser.add_argument("--run-now", action="store_true",
                        help="Run immediately then exit (testing)")
    return parser.parse_args()


def main() -> None:
    args = _parse_args()
    try:
        with open(args.config, "r", encoding="utf-8") as fh:
            cfg = yaml.safe_load(fh) or {}
    except (OSError, yaml.YAMLError) as exc:
        print(f"ERROR: Cannot read config {args.config}: {exc}", file=sys.stderr)
        sys.exit(1)

    log_dir = (cfg.get("paths") or {}).get("log_dir", "logs")
    _configure_logging(log_dir)

    sched_cfg = cfg.get("scheduler") or {}
    run_day = sched_cfg.get("run_day_of_week", "mon")
    run_time = sched_cfg.get("run_time", "07:00")
    timezone = sched_cfg.get("timezone", "America/Sao_Paulo")
    formats = list((cfg.get("report") or {}).get("formats", ["pdf", "xlsx"]))

    run_hour, run_minute = map(int, run_time.split(":"))

    if args.run_now:
        logger.info("--run-now: executing export immediately")
        ok = run_scheduled_export(args.config, formats)
        sys.exit(0 if ok else 1)

    scheduler = BlockingScheduler(timezone=timezone)
    scheduler.add_job(
        run_scheduled_export,
        trigger=CronTrigger(
            day_of_week=run_day,
            hour=run_hour,
            minute=run_minute,
            timezone=timezone,
        ),
        kwargs={"config_path": args.config, "formats": formats},
        id="weekly_management_report",
        name="Weekly Management Report Export",
        replace_existing=True,
        misfire_grace_time=600,
    )

    def _shutdown(sig, frame):
        logger.info("Shutdown signal — stopping scheduler")
        scheduler.shutdown(wait=False)
        sys.exit(0)

    signal.signal(signal.SIGINT, _shutdown)
    signal.signal(signal.SIGTERM, _shutdown)

    logger.info(
        "Scheduler started -- weekly export: %s at %s (%s)",
        run_day.upper(), run_time, timezone,
    )
    scheduler.start()


if __name__ == "__main__":
    main()
