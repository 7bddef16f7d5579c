from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional, Sequence

import pandas as pd
from tqdm import tqdm

from . import config
from .io_utils import atomic_write_csv, results_root
from .model import (
    DEFAULT_CONSTANTS,
    Configuration,
    ModelConstants,
    Topology,
    edge_count,
    evaluate,
)

SWEEP_COLS = [
    "topology",
    "n",
    "autonomy",
    "k",
    "edges",
    "baseline",
    "connected",
    "risk_multiple",
]


def sweep_path() -> Path:
    return results_root() / "sweeps" / "topology_sweep.csv"


def run_topology_sweep(
    *,
    n: int,
    autonomy_values: Sequence[int] = tuple(config.SWEEP_AUTONOMY_VALUES),
    k_values: Sequence[int] = tuple(config.SWEEP_K_VALUES),
    topologies: Sequence[Topology] = tuple(Topology),
    constants: ModelConstants = DEFAULT_CONSTANTS,
    logger_info: Callable[[str], None] = lambda msg: None,
    out_path: Optional[Path] = None,
    progress: bool = True,
) -> pd.DataFrame:
    """Risk multiple at a fixed agent count for every (topology, autonomy, k)."""
    rows = []
    seen = set()
    logger_info(f"START topology_sweep: n={n} autonomy in {list(autonomy_values)}, k in {list(k_values)}")

    for topology in tqdm(topologies, desc="topology_sweep", leave=True, disable=not progress):
        for a in autonomy_values:
            for k in k_values:
                cfg = Configuration.clamped(n, a, k, topology)
                key = (cfg.topology, cfg.autonomy, cfg.connection_cap)
                if key in seen:
                    continue
                seen.add(key)

                edges = edge_count(cfg.agent_count, cfg.connection_cap, cfg.topology)
                risk = evaluate(cfg.agent_count, edges, cfg.autonomy, constants)
                rows.append(
                    {
                        "topology": cfg.topology.value,
                        "n": cfg.agent_count,
                        "autonomy": cfg.autonomy,
                        "k": cfg.connection_cap,
                        "edges": int(edges),
                        "baseline": risk.linear,
                        "connected": risk.connected,
                        "risk_multiple": risk.multiple,
                    }
                )

    df = pd.DataFrame(rows, columns=SWEEP_COLS)
    out_path = sweep_path() if out_path is None else Path(out_path)
    atomic_write_csv(df, out_path)
    logger_info(f"END topology_sweep: {len(df)} rows -> {out_path}")
    return df
