from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
import pandas as pd

from . import config
from .model import Configuration
from .series import row_at, value_columns


@dataclass(frozen=True)
class DerivedMetrics:
    """Headline numbers shown beside the chart."""

    agents: int
    baseline: float
    connected: float
    risk_multiple: float
    y_axis_max: float

    @property
    def display_multiple(self) -> str:
        return format_multiple(self.risk_multiple)

    @property
    def risk_label_y(self) -> float:
        return self.y_axis_max * config.RISK_LABEL_HEIGHT

    def summary(self) -> str:
        return (
            f"At n={self.agents}: baseline {format_value(self.baseline)} "
            f"connected {format_value(self.connected)} "
            f"risk multiple {self.display_multiple}"
        )


def format_value(x: float) -> str:
    return f"{x:.2f}"


def format_multiple(m: float) -> str:
    # Half-up rounding with thousands separators, e.g. 1234.5 -> "1,235x".
    if not math.isfinite(m):
        m = 0.0
    return f"{math.floor(m + 0.5):,}x"


def _finite_or_zero(x) -> float:
    x = float(x) if x is not None else float("nan")
    return x if math.isfinite(x) else 0.0


def risk_multiple(connected: float, baseline: float) -> float:
    return connected / baseline if baseline > 0 else 0.0


def y_axis_max(frame: pd.DataFrame) -> float:
    """Largest finite value over every series; 1 when there is nothing positive to show."""
    values = frame[value_columns(frame)].to_numpy(dtype=np.float64)
    finite = values[np.isfinite(values)]
    top = float(finite.max()) if finite.size else 0.0
    return top if top > 0 else 1.0


def derive(frame: pd.DataFrame, primary: Configuration) -> DerivedMetrics:
    row = row_at(frame, min(primary.agent_count, len(frame)))
    baseline = _finite_or_zero(row["baseline"]) if row is not None else 0.0
    connected = _finite_or_zero(row["current"]) if row is not None else 0.0
    return DerivedMetrics(
        agents=primary.agent_count,
        baseline=baseline,
        connected=connected,
        risk_multiple=risk_multiple(connected, baseline),
        y_axis_max=y_axis_max(frame),
    )
