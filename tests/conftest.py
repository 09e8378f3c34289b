"""Shared fixtures: a throwaway config.yaml whose paths all live under tmp_path."""

from datetime import datetime

import pytest
import yaml


@pytest.fixture
def config_path(tmp_path):
    cfg = {
        "project": {"system_name": "Sistema de Gestão de Franquias"},
        "metrics": {
            "source": "api",
            "api_base_url": "http://metrics.test",
            "timeout_seconds": 2,
        },
        "paths": {
            "output_dir": str(tmp_path / "output"),
            "log_dir": str(tmp_path / "logs"),
            "suppliers_file": str(tmp_path / "raw" / "suppliers.csv"),
            "stores_file": str(tmp_path / "raw" / "stores.csv"),
            "tickets_file": str(tmp_path / "raw" / "tickets.csv"),
            "filename_prefix": "relatorio_gerencial",
        },
        "report": {
            "formats": ["pdf", "xlsx"],
            "include_chart": False,
            "pdf_compression": False,
        },
        "thresholds": {},
        "data_simulation": {
            "seed": 7,
            "n_suppliers": 10,
            "n_stores": 60,
            "n_tickets": 20,
            "completion_probability": 0.7,
            "resolved_probability": 0.8,
        },
    }
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump(cfg, allow_unicode=True), encoding="utf-8")
    return str(path)


@pytest.fixture
def fixed_now():
    return datetime(2024, 3, 15, 9, 30, 0)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("METRICS_API_URL", raising=False)
    monkeypatch.delenv("METRICS_SOURCE", raising=False)
