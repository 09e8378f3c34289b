"""
data_simulator.py — Synthetic Franchise Dataset Generator.

Generates the three table exports the local metrics source reads, shaped
like the franchise database:

    1. suppliers.csv   — one row per installation supplier (fornecedores)
    2. stores.csv      — one row per store (lojas) with installation status
    3. tickets.csv     — one row per support ticket (chamados)

Sizes and completion/resolution probabilities come from the
`data_simulation` config block; the seed makes runs reproducible.
"""

import logging
from datetime import date, timedelta
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

from franchise_report.config import load_config

logger = logging.getLogger(__name__)

_UFS = ["SP", "RJ", "MG", "PR", "SC", "RS", "BA", "PE", "GO", "DF"]
_REGIONS = {
    "SP": "Sudeste", "RJ": "Sudeste", "MG": "Sudeste",
    "PR": "Sul", "SC": "Sul", "RS": "Sul",
    "BA": "Nordeste", "PE": "Nordeste",
    "GO": "Centro-Oeste", "DF": "Centro-Oeste",
}
_TICKET_SUBJECTS = [
    "Kit incompleto",
    "Peça danificada na entrega",
    "Reagendamento de instalação",
    "Dúvida sobre checklist",
    "Foto final rejeitada",
    "Orçamento divergente",
]


def _generate_suppliers(sim: dict[str, Any], rng: np.random.Generator) -> pd.DataFrame:
    n = sim.get("n_suppliers", 25)
    records = []
    for i in range(1, n + 1):
        records.append({
            "id": i,
            "nome_fornecedor": f"Fornecedor {i:03d}",
            "cnpj": f"{rng.integers(10**13, 10**14 - 1):014d}",
            "valor_orcamento": round(float(rng.uniform(5_000, 60_000)), 2),
        })
    logger.info("Generated suppliers: %d records", len(records))
    return pd.DataFrame(records, columns=["id", "nome_fornecedor", "cnpj", "valor_orcamento"])


def _generate_stores(
    sim: dict[str, Any],
    rng: np.random.Generator,
    n_suppliers: int,
) -> pd.DataFrame:
    """Generate the store list with a completion flag per store.

    Completed stores get an installation date in the last six months;
    pending stores have none.
    """
    n = sim.get("n_stores", 120)
    p_done = sim.get("completion_probability", 0.7)
    today = date.today()

    completed = rng.random(n) < p_done
    ufs = rng.choice(_UFS, size=n)
    suppliers = rng.integers(1, max(n_suppliers, 1) + 1, size=n)

    records = []
    for i in range(n):
        done = bool(completed[i])
        installed_on = (
            (today - timedelta(days=int(rng.integers(0, 180)))).isoformat() if done else ""
        )
        records.append({
            "codigo_loja": f"L{i + 1:04d}",
            "nome_loja": f"Loja {i + 1:04d}",
            "uf": ufs[i],
            "regiao": _REGIONS[ufs[i]],
            "fornecedor_id": int(suppliers[i]),
            "installation_completed": done,
            "data_instalacao": installed_on,
        })
    logger.info("Generated stores: %d records (%d completed)", n, int(completed.sum()))
    return pd.DataFrame(records, columns=[
        "codigo_loja", "nome_loja", "uf", "regiao",
        "fornecedor_id", "installation_completed", "data_instalacao",
    ])


def _generate_tickets(
    sim: dict[str, Any],
    rng: np.random.Generator,
    stores: pd.DataFrame,
) -> pd.DataFrame:
    n = sim.get("n_tickets", 40)
    p_resolved = sim.get("resolved_probability", 0.8)
    today = date.today()

    records = []
    for i in range(1, n + 1):
        store = stores.iloc[int(rng.integers(0, len(stores)))] if len(stores) else None
        records.append({
            "id": i,
            "descricao": _TICKET_SUBJECTS[int(rng.integers(0, len(_TICKET_SUBJECTS)))],
            "status": "resolvido" if rng.random() < p_resolved else "aberto",
            "loja_id": store["codigo_loja"] if store is not None else "",
            "fornecedor_id": int(store["fornecedor_id"]) if store is not None else 0,
            "data_abertura": (today - timedelta(days=int(rng.integers(0, 90)))).isoformat(),
        })
    df = pd.DataFrame(records, columns=[
        "id", "descricao", "status", "loja_id", "fornecedor_id", "data_abertura",
    ])
    logger.info("Generated tickets: %d records", len(df))
    return df


def generate_all_datasets(config_path: str = "config.yaml") -> dict[str, pd.DataFrame]:
    """Orchestrate generation of all three datasets and write them to disk.

    Args:
        config_path: Path to configuration YAML.

    Returns:
        Dict with keys: 'suppliers', 'stores', 'tickets'
    """
    cfg = load_config(config_path)
    sim = cfg["data_simulation"]
    seed = sim.get("seed", 42)
    rng = np.random.default_rng(seed)

    logger.info("Starting dataset generation (seed=%d)", seed)

    suppliers = _generate_suppliers(sim, rng)
    stores = _generate_stores(sim, rng, len(suppliers))
    datasets = {
        "suppliers": suppliers,
        "stores": stores,
        "tickets": _generate_tickets(sim, rng, stores),
    }

    file_map = {
        "suppliers": cfg["paths"]["suppliers_file"],
        "stores": cfg["paths"]["stores_file"],
        "tickets": cfg["paths"]["tickets_file"],
    }

    for key, df in datasets.items():
        path = Path(file_map[key])
        path.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(path, index=False)
        logger.info("Written %s: %d rows -> %s", key, len(df), path)

    return datasets
