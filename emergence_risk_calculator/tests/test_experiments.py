"""Topology sweep."""

from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from emergence_risk_calculator.experiments import SWEEP_COLS, run_topology_sweep
from emergence_risk_calculator.model import Topology


def test_sweep_writes_one_row_per_clamped_combination(tmp_path: Path) -> None:
    out = tmp_path / "sweep.csv"
    df = run_topology_sweep(n=10, autonomy_values=[1, 5], k_values=[0, 3, 9, 20], out_path=out, progress=False)

    # k=20 clamps to 9 and duplicates k=9
    assert len(df) == len(Topology) * 2 * 3
    assert list(df.columns) == SWEEP_COLS
    assert out.exists()
    assert len(pd.read_csv(out)) == len(df)


def test_sweep_values(tmp_path: Path) -> None:
    df = run_topology_sweep(n=30, autonomy_values=[5], k_values=[0, 3], out_path=tmp_path / "s.csv", progress=False)
    bounded = df[(df["topology"] == "bounded") & (df["k"] == 3)].iloc[0]
    assert bounded["edges"] == 84
    assert bounded["risk_multiple"] == pytest.approx(46.2088, abs=1e-4)

    flat = df[df["k"] == 0]
    # Full mesh still has edges at k=0; every other topology collapses to the baseline.
    assert (flat.loc[flat["topology"] != "mesh", "risk_multiple"] == 1.0).all()
    assert flat.loc[flat["topology"] == "mesh", "edges"].iloc[0] == 435


def test_sweep_reports_progress(tmp_path: Path) -> None:
    messages: list[str] = []
    run_topology_sweep(n=4, autonomy_values=[1], k_values=[1], out_path=tmp_path / "s.csv", logger_info=messages.append, progress=False)
    assert messages[0].startswith("START topology_sweep")
    assert messages[-1].startswith("END topology_sweep")
