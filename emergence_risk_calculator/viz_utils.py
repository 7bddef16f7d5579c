"""
Visualisation utilities for emergence_risk_calculator.

This module only draws: it takes an already generated series frame and its
derived metrics and writes a figure file. It never recomputes the model.
"""

from __future__ import annotations

import colorsys
from pathlib import Path
from typing import Sequence

import numpy as np
import pandas as pd
from matplotlib.colors import to_hex
from matplotlib.figure import Figure

from . import config
from .metrics import DerivedMetrics
from .model import Configuration
from .scenarios import Scenario, scenario_key


def colour_for_index(idx: int) -> str:
    """hsl((idx * 57) mod 360, 70%, 40%) as a hex colour; 0 is the current curve."""
    hue = ((idx * 57) % 360) / 360.0
    r, g, b = colorsys.hls_to_rgb(hue, 0.40, 0.70)
    return to_hex((r, g, b))


def _series_style(primary: Configuration, compare: Sequence[Scenario]) -> list[tuple[str, str, str, float]]:
    """(column, legend label, colour, linewidth) in draw order."""
    styles = [
        ("baseline", "Baseline (linear)", config.BASELINE_COLOUR, 2.5),
        ("current", f"Current (connected, {primary.topology.label})", colour_for_index(0), 2.5),
    ]
    for idx, s in enumerate(compare):
        styles.append((scenario_key(s), s.name or f"Scenario {idx + 1}", colour_for_index(idx + 1), 2.0))
    return styles


def build_figure(
    frame: pd.DataFrame,
    primary: Configuration,
    compare: Sequence[Scenario],
    metrics: DerivedMetrics,
) -> Figure:
    fig = Figure(figsize=(11, 6))
    ax = fig.add_subplot(1, 1, 1)

    x = frame["agents"].to_numpy()
    for col, label, colour, lw in _series_style(primary, compare):
        if col not in frame.columns:
            continue
        # NaN breaks the line where a scenario's agent count ends.
        ax.plot(x, frame[col].to_numpy(dtype=np.float64), label=label, color=colour, linewidth=lw)

    ax.set_xlim(1, max(int(x.max()), 2))
    ax.set_ylim(0, metrics.y_axis_max * 1.05)
    ax.set_xlabel("Number of agents")
    ax.set_ylabel("Risk")
    ax.set_title("Agents + Edges Risk Curve")
    ax.grid(True, linestyle="--", alpha=0.4)
    ax.legend(loc="upper left", fontsize=9)

    ax.annotate(
        f"Risk {metrics.display_multiple}",
        xy=(metrics.agents, metrics.risk_label_y),
        xytext=(-10, 0),
        textcoords="offset points",
        ha="right",
        va="center",
        fontsize=11,
        fontweight="bold",
        color="white",
        bbox=dict(boxstyle="round,pad=0.5", facecolor=config.BASELINE_COLOUR, edgecolor="none", alpha=0.95),
    )
    fig.tight_layout()
    return fig


def plot_risk_curve(
    frame: pd.DataFrame,
    primary: Configuration,
    compare: Sequence[Scenario],
    metrics: DerivedMetrics,
    path: Path,
) -> Path:
    """Write the chart to `path` (format from the suffix, e.g. .png or .pdf)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig = build_figure(frame, primary, compare, metrics)
    fig.savefig(path, dpi=150)
    return path
