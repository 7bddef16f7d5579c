from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

import numpy as np

from . import config

_INT_PREFIX = re.compile(r"^\s*([+-]?)0*(\d+)")

# Any magnitude this wide is far outside every parameter domain and clamps the same.
_MAX_INT_DIGITS = 12

ArrayLike = Union[float, np.ndarray]


class InvalidConfiguration(ValueError):
    """Raised when an unclamped agent count or connection cap reaches the formula layer."""


class Topology(str, Enum):
    BOUNDED = "bounded"
    MESH = "mesh"
    HUB = "hub"
    PIPELINE = "pipeline"

    @property
    def label(self) -> str:
        return config.TOPOLOGY_LABELS[self.value]

    @classmethod
    def parse(cls, value: Any) -> "Topology":
        """Strict parse; unknown codes raise ValueError."""
        if isinstance(value, cls):
            return value
        return cls(str(value))

    @classmethod
    def coerce(cls, value: Any) -> "Topology":
        """Boundary parse; anything unrecognised becomes BOUNDED."""
        try:
            return cls.parse(value)
        except ValueError:
            return cls.BOUNDED


@dataclass(frozen=True)
class ModelConstants:
    r0: float = config.R0
    load_l: float = config.LOAD_L
    alpha: float = config.ALPHA
    gamma: float = config.GAMMA


DEFAULT_CONSTANTS = ModelConstants()


@dataclass(frozen=True)
class RiskValues:
    linear: float
    connected: float

    @property
    def multiple(self) -> float:
        return self.connected / self.linear if self.linear > 0 else 0.0


def clamp(x: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, x))


def safe_int(value: Any, fallback: int) -> int:
    """
    Integer coercion with parseInt-style leniency.

    "12", 12, 12.7 and "12abc" all give 12; None, "", "abc", NaN and
    infinities give `fallback`.
    """
    if isinstance(value, bool):
        return fallback
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if np.isfinite(value) else fallback
    if value is None:
        return fallback
    m = _INT_PREFIX.match(str(value))
    if not m:
        return fallback
    sign, digits = m.groups()
    return int(sign + digits[:_MAX_INT_DIGITS])


@dataclass(frozen=True)
class Configuration:
    """One evaluated parameter set. Build it through `clamped` at any external boundary."""

    agent_count: int
    autonomy: int
    connection_cap: int
    topology: Topology = Topology.BOUNDED

    @classmethod
    def clamped(
        cls,
        n: Any = None,
        autonomy: Any = None,
        k: Any = None,
        topology: Any = None,
        *,
        default_n: int = config.DEFAULT_N,
        default_autonomy: int = config.DEFAULT_AUTONOMY,
        default_k: int = config.DEFAULT_K,
    ) -> "Configuration":
        n_c = clamp(safe_int(n, default_n), config.N_MIN, config.N_MAX)
        a_c = clamp(safe_int(autonomy, default_autonomy), config.AUTONOMY_MIN, config.AUTONOMY_MAX)
        k_c = clamp(safe_int(k, default_k), config.K_MIN, n_c - 1)
        return cls(agent_count=n_c, autonomy=a_c, connection_cap=k_c, topology=Topology.coerce(topology))

    @property
    def effective_cap(self) -> int:
        """Connection cap re-clamped to [0, agent_count - 1]."""
        return clamp(self.connection_cap, config.K_MIN, max(0, self.agent_count - 1))


DEFAULT_CONFIGURATION = Configuration.clamped()


# ---------------------------------------------------------------------------
# Edge model
# ---------------------------------------------------------------------------


def edges_bounded(n: int, k: int) -> int:
    return sum(min(k, i - 1) for i in range(2, n + 1))


def edges_full_mesh(n: int) -> int:
    return n * (n - 1) // 2


def edges_hub_and_spoke(n: int, k: int) -> int:
    # k <= 0 leaves even the hub unconnected.
    if k <= 0:
        return 0
    extra_cap = max(0, k - 1)
    return sum(1 + min(extra_cap, i - 2) for i in range(2, n + 1))


def edges_pipeline(n: int, k: int) -> int:
    if k <= 0:
        return 0
    return max(0, n - 1)


def edge_count(n: int, k: int, topology: Topology | str) -> int:
    topology = Topology.parse(topology)
    if topology is Topology.MESH:
        return edges_full_mesh(n)
    if topology is Topology.HUB:
        return edges_hub_and_spoke(n, k)
    if topology is Topology.PIPELINE:
        return edges_pipeline(n, k)
    return edges_bounded(n, k)


def edge_counts(n: int, k: int, topology: Topology | str) -> np.ndarray:
    """
    Edge counts for every agent count 1..n as an int64 array.

    Element i-1 equals edge_count(i, k, topology).
    """
    topology = Topology.parse(topology)
    i = np.arange(1, n + 1, dtype=np.int64)
    if topology is Topology.MESH:
        return i * (i - 1) // 2
    if topology is Topology.PIPELINE:
        return i - 1 if k > 0 else np.zeros_like(i)
    if topology is Topology.HUB:
        if k <= 0:
            return np.zeros_like(i)
        step = np.where(i >= 2, 1 + np.minimum(max(0, k - 1), i - 2), 0)
        return np.cumsum(step)
    return np.cumsum(np.minimum(k, i - 1))


# ---------------------------------------------------------------------------
# Risk formula
# ---------------------------------------------------------------------------


def linear_risk(n: ArrayLike, constants: ModelConstants = DEFAULT_CONSTANTS) -> ArrayLike:
    return n * constants.r0


def _connected(n: ArrayLike, edges: ArrayLike, autonomy: float, constants: ModelConstants) -> ArrayLike:
    coupling = edges * constants.load_l * autonomy
    return n * constants.r0 + constants.alpha * coupling + constants.gamma * (coupling * coupling) / n


def evaluate(
    n: int,
    edges: int,
    autonomy: float,
    constants: ModelConstants = DEFAULT_CONSTANTS,
) -> RiskValues:
    """
    Baseline and connected risk at a single agent count.

      linear    = n * r0
      coupling  = E * L * A
      connected = n * r0 + alpha * coupling + gamma * coupling^2 / n
    """
    if n < 1:
        raise InvalidConfiguration(f"agent count must be >= 1 (got {n})")
    if edges < 0:
        raise InvalidConfiguration(f"edge count must be >= 0 (got {edges})")
    return RiskValues(
        linear=float(linear_risk(n, constants)),
        connected=float(_connected(float(n), float(edges), float(autonomy), constants)),
    )


def evaluate_configuration(cfg: Configuration, constants: ModelConstants = DEFAULT_CONSTANTS) -> RiskValues:
    if cfg.connection_cap < 0:
        raise InvalidConfiguration(f"connection cap must be >= 0 (got {cfg.connection_cap})")
    if cfg.agent_count < 1:
        raise InvalidConfiguration(f"agent count must be >= 1 (got {cfg.agent_count})")
    e = edge_count(cfg.agent_count, cfg.effective_cap, cfg.topology)
    return evaluate(cfg.agent_count, e, cfg.autonomy, constants)


def connected_curve(cfg: Configuration, constants: ModelConstants = DEFAULT_CONSTANTS) -> np.ndarray:
    """Connected risk for agent counts 1..cfg.agent_count (float64 array)."""
    if cfg.agent_count < 1:
        raise InvalidConfiguration(f"agent count must be >= 1 (got {cfg.agent_count})")
    if cfg.connection_cap < 0:
        raise InvalidConfiguration(f"connection cap must be >= 0 (got {cfg.connection_cap})")
    n = np.arange(1, cfg.agent_count + 1, dtype=np.float64)
    edges = edge_counts(cfg.agent_count, cfg.effective_cap, cfg.topology).astype(np.float64, copy=False)
    return _connected(n, edges, float(cfg.autonomy), constants)
