"""Series generation across mixed agent-count domains."""

from __future__ import annotations

import math

import numpy as np
import pytest

from emergence_risk_calculator.model import Configuration, Topology, evaluate_configuration
from emergence_risk_calculator.scenarios import Scenario, scenario_key
from emergence_risk_calculator.series import chart_rows, domain_length, generate, row_at


def _scenario(sid: str, n: int, k: int = 2, topology: str = "bounded", autonomy: int = 4) -> Scenario:
    return Scenario(id=sid, name=sid, config=Configuration.clamped(n, autonomy, k, topology))


def test_domain_covers_largest_scenario() -> None:
    primary = Configuration.clamped(10, 5, 3, "bounded")
    compare = [_scenario("a", 4), _scenario("b", 25)]
    assert domain_length(primary, compare) == 25
    assert domain_length(primary) == 10

    frame = generate(primary, compare)
    assert len(frame) == 25
    assert frame["agents"].tolist() == list(range(1, 26))
    assert list(frame.columns) == ["agents", "baseline", "current", "s_a", "s_b"]


def test_columns_undefined_past_own_agent_count() -> None:
    primary = Configuration.clamped(10, 5, 3, "bounded")
    compare = [_scenario("a", 4), _scenario("b", 25)]
    frame = generate(primary, compare)

    assert frame["baseline"].notna().all()
    assert frame["current"].notna().sum() == 10
    assert frame.loc[frame["agents"] > 10, "current"].isna().all()
    assert frame["s_a"].notna().sum() == 4
    assert frame.loc[frame["agents"] > 4, "s_a"].isna().all()
    assert frame["s_b"].notna().all()


def test_rows_match_pointwise_formula() -> None:
    primary = Configuration.clamped(12, 7, 2, "hub")
    frame = generate(primary)
    for i in (1, 2, 5, 12):
        expected = evaluate_configuration(Configuration.clamped(i, 7, 2, "hub"))
        row = row_at(frame, i)
        assert row["baseline"] == pytest.approx(expected.linear)
        assert row["current"] == pytest.approx(expected.connected)


def test_stale_scenario_cap_is_reclamped() -> None:
    primary = Configuration.clamped(8, 5, 3, "bounded")
    stale = Scenario(id="x", name="x", config=Configuration(agent_count=6, autonomy=5, connection_cap=50))
    clamped = _scenario("y", 6, k=5, autonomy=5)
    frame = generate(primary, [stale, clamped])
    np.testing.assert_allclose(frame["s_x"].to_numpy(), frame["s_y"].to_numpy(), equal_nan=True)


def test_scenario_key_is_stable_per_id() -> None:
    s = _scenario("abc", 3)
    assert scenario_key(s) == "s_abc"


def test_chart_rows_use_none_for_absent_values() -> None:
    primary = Configuration.clamped(3, 5, 1, Topology.PIPELINE)
    frame = generate(primary, [_scenario("long", 5)])
    rows = chart_rows(frame)
    assert len(rows) == 5
    assert rows[0]["agents"] == 1
    assert rows[4]["current"] is None
    assert rows[4]["s_long"] is not None
    assert all(isinstance(r["baseline"], float) and math.isfinite(r["baseline"]) for r in rows)
