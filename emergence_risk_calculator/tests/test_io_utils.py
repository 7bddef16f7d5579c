"""CSV export of the risk series."""

from __future__ import annotations

from pathlib import Path

from emergence_risk_calculator.io_utils import risk_table_csv, write_csv_export
from emergence_risk_calculator.model import Configuration
from emergence_risk_calculator.scenarios import Scenario, scenario_key
from emergence_risk_calculator.series import generate


def _export(primary: Configuration, compare: list[Scenario]) -> tuple[list[str], list[list[str]]]:
    frame = generate(primary, compare)
    text = risk_table_csv(frame, [scenario_key(s) for s in compare])
    lines = text.split("\r\n")
    if lines and lines[-1] == "":
        lines = lines[:-1]
    header = lines[0].split(",")
    rows = [line.split(",") for line in lines[1:]]
    return header, rows


def test_header_and_row_count() -> None:
    primary = Configuration.clamped(5, 5, 2, "bounded")
    compare = [
        Scenario(id="short", name="short", config=Configuration.clamped(3, 2, 0, "bounded")),
        Scenario(id="long", name="long", config=Configuration.clamped(8, 6, 3, "hub")),
    ]
    header, rows = _export(primary, compare)
    assert header == [
        "agents",
        "baseline_linear",
        "current_connected",
        "current_multiple",
        "s_short_connected",
        "s_short_multiple",
        "s_long_connected",
        "s_long_multiple",
    ]
    assert len(rows) == 8
    assert [int(r[0]) for r in rows] == list(range(1, 9))
    assert all(len(r) == len(header) for r in rows)


def test_empty_fields_only_past_each_agent_count() -> None:
    primary = Configuration.clamped(5, 5, 2, "bounded")
    compare = [
        Scenario(id="short", name="short", config=Configuration.clamped(3, 2, 0, "bounded")),
        Scenario(id="long", name="long", config=Configuration.clamped(8, 6, 3, "hub")),
    ]
    header, rows = _export(primary, compare)
    col = {name: i for i, name in enumerate(header)}

    for r in rows:
        agents = int(r[col["agents"]])
        assert (r[col["s_short_connected"]] == "") == (agents > 3)
        assert (r[col["s_short_multiple"]] == "") == (agents > 3)
        assert (r[col["current_connected"]] == "") == (agents > 5)
        assert r[col["s_long_connected"]] != ""


def test_zero_coupling_renders_a_value_not_an_empty_field() -> None:
    # k=0 gives connected == baseline; the multiple is 1, not blank.
    compare = [Scenario(id="flat", name="flat", config=Configuration.clamped(4, 5, 0, "bounded"))]
    header, rows = _export(Configuration.clamped(4, 5, 0, "bounded"), compare)
    col = {name: i for i, name in enumerate(header)}
    for r in rows:
        assert float(r[col["s_flat_multiple"]]) == 1.0
        assert float(r[col["current_multiple"]]) == 1.0


def test_multiple_is_value_over_baseline() -> None:
    header, rows = _export(Configuration.clamped(30, 5, 3, "bounded"), [])
    last = dict(zip(header, rows[-1]))
    assert float(last["current_multiple"]) == float(last["current_connected"]) / float(last["baseline_linear"])


def test_write_csv_export_keeps_crlf(tmp_path: Path) -> None:
    text = risk_table_csv(generate(Configuration.clamped(3, 5, 1, "pipeline")), [])
    path = write_csv_export(text, tmp_path / "out" / "risk.csv")
    assert path.exists()
    raw = path.read_bytes()
    assert raw.count(b"\r\n") == 4
    assert raw.decode("utf-8") == text
