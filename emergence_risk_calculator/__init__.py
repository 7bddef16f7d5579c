"""
Agents + Edges Risk Calculator

This package computes a parametric risk curve for multi-agent systems: a
linear baseline (agents summed) against a connected curve that adds edge
coupling and a quadratic cascade term, scaled by autonomy and shaped by the
network topology. It also handles scenario comparison, CSV export and
share-URL state.
"""

from .config import (  # noqa: F401
    ALPHA,
    DEFAULT_AUTONOMY,
    DEFAULT_K,
    DEFAULT_N,
    DEFAULT_TOPOLOGY,
    GAMMA,
    LOAD_L,
    MAX_COMPARE,
    MAX_SAVED,
    R0,
)
from .model import (  # noqa: F401
    Configuration,
    InvalidConfiguration,
    ModelConstants,
    Topology,
    edge_count,
    evaluate,
)
from .scenarios import CalculatorState, Scenario  # noqa: F401
from .series import generate  # noqa: F401
