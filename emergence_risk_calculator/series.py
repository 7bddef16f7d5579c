from __future__ import annotations

from typing import Optional, Sequence

import numpy as np
import pandas as pd

from .model import (
    DEFAULT_CONSTANTS,
    Configuration,
    ModelConstants,
    connected_curve,
    linear_risk,
)
from .scenarios import Scenario, scenario_key


def domain_length(primary: Configuration, compare: Sequence[Scenario] = ()) -> int:
    scenario_max = max((s.config.agent_count for s in compare), default=0)
    return max(primary.agent_count, scenario_max, 1)


def _padded(values: np.ndarray, length: int) -> np.ndarray:
    out = np.full(length, np.nan, dtype=np.float64)
    m = min(len(values), length)
    out[:m] = values[:m]
    return out


def generate(
    primary: Configuration,
    compare: Sequence[Scenario] = (),
    *,
    constants: ModelConstants = DEFAULT_CONSTANTS,
) -> pd.DataFrame:
    """
    Build the aligned risk series for the primary configuration and the compare list.

    One row per agent count 1..domain_length. `baseline` is always defined;
    `current` and each `s_<id>` column are NaN past their own agent count.
    """
    length = domain_length(primary, compare)
    agents = np.arange(1, length + 1, dtype=np.int64)

    data: dict[str, np.ndarray] = {
        "agents": agents,
        "baseline": linear_risk(agents.astype(np.float64), constants),
        "current": _padded(connected_curve(primary, constants), length),
    }
    for s in compare:
        data[scenario_key(s)] = _padded(connected_curve(s.config, constants), length)

    return pd.DataFrame(data)


def value_columns(frame: pd.DataFrame) -> list[str]:
    return [c for c in frame.columns if c != "agents"]


def row_at(frame: pd.DataFrame, agents: int) -> Optional[pd.Series]:
    mask = frame["agents"] == agents
    if not mask.any():
        return None
    return frame.loc[mask].iloc[0]


def chart_rows(frame: pd.DataFrame) -> list[dict]:
    """
    Rows in the shape a line-chart component consumes.

    Missing values become None so a plot can break the line instead of
    drawing it down to zero.
    """
    rows = []
    cols = value_columns(frame)
    for rec in frame.to_dict(orient="records"):
        row = {"agents": int(rec["agents"])}
        for c in cols:
            v = rec[c]
            row[c] = float(v) if v is not None and np.isfinite(v) else None
        rows.append(row)
    return rows
