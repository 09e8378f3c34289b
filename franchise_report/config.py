"""
config.py — YAML configuration loader.

Every public entry point takes a `config_path` and reads the YAML here, so
a run can be pointed at a different config without touching code.
Environment variables win over the file for deployment-specific values:

    METRICS_API_URL   — overrides metrics.api_base_url
    METRICS_SOURCE    — overrides metrics.source ('api' or 'local')
"""

import logging
import os
from typing import Any

import yaml

logger = logging.getLogger(__name__)


def load_config(config_path: str = "config.yaml") -> dict[str, Any]:
    """Read the configuration YAML and apply environment overrides.

    Args:
        config_path: Path to configuration YAML.

    Returns:
        Configuration dict. Missing top-level blocks are present as empty dicts.
    """
    with open(config_path, "r", encoding="utf-8") as fh:
        cfg = yaml.safe_load(fh) or {}

    for block in ("project", "metrics", "paths", "report", "thresholds",
                  "data_simulation", "scheduler"):
        if not isinstance(cfg.get(block), dict):
            cfg[block] = {}

    api_url = os.environ.get("METRICS_API_URL")
    if api_url:
        cfg["metrics"]["api_base_url"] = api_url
        logger.debug("metrics.api_base_url overridden from environment")

    source = os.environ.get("METRICS_SOURCE")
    if source:
        cfg["metrics"]["source"] = source
    return cfg
