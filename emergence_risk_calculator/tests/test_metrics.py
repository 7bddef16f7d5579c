"""Headline metrics derived from a generated series."""

from __future__ import annotations

import pandas as pd
import pytest

from emergence_risk_calculator.metrics import derive, format_multiple, format_value, risk_multiple, y_axis_max
from emergence_risk_calculator.model import Configuration
from emergence_risk_calculator.scenarios import Scenario
from emergence_risk_calculator.series import generate


def test_reference_metrics() -> None:
    primary = Configuration.clamped(30, 5, 3, "bounded")
    m = derive(generate(primary), primary)
    assert m.baseline == 30.0
    assert m.connected == pytest.approx(1386.264)
    assert m.risk_multiple == pytest.approx(46.2088, abs=1e-4)
    assert m.display_multiple == "46x"
    assert m.y_axis_max == pytest.approx(m.connected)
    assert m.risk_label_y == pytest.approx(0.65 * m.y_axis_max)
    assert m.summary() == "At n=30: baseline 30.00 connected 1386.26 risk multiple 46x"


def test_single_agent_multiple_is_one() -> None:
    primary = Configuration.clamped(1, 9, 0, "mesh")
    m = derive(generate(primary), primary)
    assert m.baseline == m.connected == 1.0
    assert m.display_multiple == "1x"


def test_axis_max_includes_compare_scenarios() -> None:
    primary = Configuration.clamped(5, 1, 0, "bounded")
    big = Scenario(id="big", name="big", config=Configuration.clamped(40, 10, 39, "mesh"))
    frame = generate(primary, [big])
    assert y_axis_max(frame) == pytest.approx(frame["s_big"].max())
    m = derive(frame, primary)
    assert m.agents == 5
    assert m.connected == 5.0


def test_axis_max_defaults_to_one() -> None:
    frame = pd.DataFrame({"agents": [1, 2], "baseline": [0.0, 0.0], "current": [float("nan"), 0.0]})
    assert y_axis_max(frame) == 1.0


def test_multiple_guards_zero_baseline() -> None:
    assert risk_multiple(12.0, 0.0) == 0.0
    assert risk_multiple(12.0, 4.0) == 3.0


@pytest.mark.parametrize(
    "m, text",
    [(0.0, "0x"), (2.5, "3x"), (46.2088, "46x"), (1234.5, "1,235x"), (float("nan"), "0x")],
)
def test_format_multiple(m: float, text: str) -> None:
    assert format_multiple(m) == text


def test_format_value() -> None:
    assert format_value(1386.264) == "1386.26"
