"""
metrics.py — Dashboard Metrics Snapshot.

Obtains the six aggregate counts a management report is built from and
returns them as an immutable `MetricsSnapshot`, the single source of truth
for the formatter and every renderer downstream.

Sources:
    api    — GET {api_base_url}/api/dashboard/metrics (JSON, camelCase keys)
    local  — counts computed with pandas from the suppliers/stores/tickets
             CSV exports (see data_simulator for a synthetic set)

Derived values:
    completion_rate  — % of stores with a finalised installation
    resolution_rate  — % of tickets resolved out of all tickets opened
"""

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional

import pandas as pd
import requests

from franchise_report.config import load_config
from franchise_report.errors import MetricsFetchError, MetricsValidationError

logger = logging.getLogger(__name__)

METRICS_ENDPOINT = "/api/dashboard/metrics"

OPEN_TICKET_STATUSES = frozenset({"aberto", "open"})
RESOLVED_TICKET_STATUSES = frozenset({"resolvido", "resolved"})


# ---------------------------------------------------------------------------
# Data structure
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MetricsSnapshot:
    """Point-in-time aggregate counts used to generate one report."""
    total_suppliers: int
    total_stores: int
    open_tickets: int
    resolved_tickets: int
    completed_installations: int
    non_completed_stores: int

    # field name -> wire name used by the dashboard API
    WIRE_NAMES = {
        "total_suppliers": "totalSuppliers",
        "total_stores": "totalStores",
        "open_tickets": "openTickets",
        "resolved_tickets": "resolvedTickets",
        "completed_installations": "completedInstallations",
        "non_completed_stores": "nonCompletedStores",
    }

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise MetricsValidationError(
                    f"{f.name} must be an integer, got {type(value).__name__}"
                )
            if value < 0:
                raise MetricsValidationError(f"{f.name} must be >= 0, got {value}")

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "MetricsSnapshot":
        """Build a snapshot from the API's JSON object.

        Missing or null counts are taken as 0, the same way the admin
        dashboard renders an absent metric.

        Raises:
            MetricsValidationError: If the payload is not an object or a
                count is not a non-negative integer.
        """
        if not isinstance(payload, dict):
            raise MetricsValidationError(
                f"metrics payload must be a JSON object, got {type(payload).__name__}"
            )
        values = {}
        for name, wire in cls.WIRE_NAMES.items():
            if payload.get(wire) is None:
                logger.warning("Metrics payload has no value for '%s'; using 0", wire)
                values[name] = 0
            else:
                values[name] = payload[wire]
        return cls(**values)

    def to_dict(self) -> dict[str, int]:
        """Return the camelCase wire form."""
        return {wire: getattr(self, name) for name, wire in self.WIRE_NAMES.items()}

    @property
    def total_tickets(self) -> int:
        return self.open_tickets + self.resolved_tickets

    @property
    def completion_rate(self) -> int:
        return percentage(self.completed_installations, self.total_stores)

    @property
    def resolution_rate(self) -> int:
        return percentage(self.resolved_tickets, self.total_tickets)


def percentage(part: int, whole: int) -> int:
    """Integer percentage of part/whole, rounded half up; 0 when whole is 0.

    >>> percentage(560, 800)
    70
    >>> percentage(1, 8)
    13
    """
    if whole <= 0:
        return 0
    return (200 * part + whole) // (2 * whole)


# ---------------------------------------------------------------------------
# Sources
# ---------------------------------------------------------------------------

def fetch_metrics(
    base_url: str,
    timeout: float = 10,
    session: Optional[requests.Session] = None,
) -> MetricsSnapshot:
    """Fetch the snapshot from the dashboard metrics endpoint.

    Args:
        base_url: Scheme and host of the API, e.g. http://localhost:5000.
        timeout: Request timeout in seconds.
        session: Optional requests session (connection reuse, auth headers).

    Returns:
        MetricsSnapshot built from the response body.

    Raises:
        MetricsFetchError: On network failure, HTTP error status or a body
            that is not JSON.
        MetricsValidationError: If the JSON is not a valid snapshot.
    """
    url = base_url.rstrip("/") + METRICS_ENDPOINT
    http = session or requests
    logger.info("Fetching dashboard metrics from %s", url)
    try:
        resp = http.get(url, timeout=timeout, headers={"Accept": "application/json"})
        resp.raise_for_status()
    except requests.RequestException as exc:
        raise MetricsFetchError(f"GET {url} failed: {exc}") from exc

    try:
        payload = resp.json()
    except ValueError as exc:
        raise MetricsFetchError(f"GET {url} returned a non-JSON body") from exc

    snapshot = MetricsSnapshot.from_dict(payload)
    logger.debug("Metrics received: %s", snapshot.to_dict())
    return snapshot


def _read_csv(name: str, path: str) -> pd.DataFrame:
    p = Path(path)
    if not p.exists():
        raise MetricsFetchError(
            f"{name} export not found at {p}. Run --generate-data first."
        )
    try:
        return pd.read_csv(p)
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as exc:
        raise MetricsFetchError(f"{name} export at {p} is unreadable: {exc}") from exc


def _as_bool(series: pd.Series) -> pd.Series:
    """Normalise a CSV flag column (True/False, 1/0, sim/nao) to booleans."""
    if series.dtype == bool:
        return series
    truthy = {"true", "1", "sim", "yes", "s", "y"}
    return series.astype(str).str.strip().str.lower().isin(truthy)


def compute_snapshot(
    suppliers: pd.DataFrame,
    stores: pd.DataFrame,
    tickets: pd.DataFrame,
) -> MetricsSnapshot:
    """Aggregate the raw tables into a snapshot.

    Args:
        suppliers: One row per supplier.
        stores: One row per store; needs an `installation_completed` column.
        tickets: One row per ticket; needs a `status` column.

    Returns:
        MetricsSnapshot.
    """
    for name, df, column in (("stores", stores, "installation_completed"),
                             ("tickets", tickets, "status")):
        if column not in df.columns:
            raise MetricsValidationError(f"{name} export has no '{column}' column")

    completed = _as_bool(stores["installation_completed"])
    status = tickets["status"].astype(str).str.strip().str.lower()

    return MetricsSnapshot(
        total_suppliers=int(len(suppliers)),
        total_stores=int(len(stores)),
        open_tickets=int(status.isin(OPEN_TICKET_STATUSES).sum()),
        resolved_tickets=int(status.isin(RESOLVED_TICKET_STATUSES).sum()),
        completed_installations=int(completed.sum()),
        non_completed_stores=int((~completed).sum()),
    )


def load_snapshot(cfg: dict[str, Any]) -> MetricsSnapshot:
    """Compute the snapshot from the local CSV exports named in config."""
    paths = cfg["paths"]
    snapshot = compute_snapshot(
        _read_csv("suppliers", paths["suppliers_file"]),
        _read_csv("stores", paths["stores_file"]),
        _read_csv("tickets", paths["tickets_file"]),
    )
    logger.info("Metrics computed from local exports: %s", snapshot.to_dict())
    return snapshot


def get_snapshot(
    config_path: str = "config.yaml",
    source: Optional[str] = None,
) -> MetricsSnapshot:
    """Obtain a fresh snapshot from the configured source.

    This is the single public entry point for the metrics module.

    Args:
        config_path: Path to configuration YAML.
        source: 'api' or 'local'; defaults to metrics.source in config.

    Returns:
        MetricsSnapshot for this report request.
    """
    cfg = load_config(config_path)
    mcfg = cfg["metrics"]
    source = source or mcfg.get("source", "api")

    if source == "api":
        return fetch_metrics(
            mcfg.get("api_base_url", "http://localhost:5000"),
            timeout=mcfg.get("timeout_seconds", 10),
        )
    if source == "local":
        return load_snapshot(cfg)
    raise MetricsFetchError(f"Unknown metrics source '{source}' (expected 'api' or 'local')")
