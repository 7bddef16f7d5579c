from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional, Sequence

from . import config
from .experiments import run_topology_sweep
from .io_utils import (
    default_store_path,
    ensure_results_layout,
    get_logger,
    risk_table_csv,
    write_csv_export,
)
from .metrics import derive
from .model import Configuration, Topology
from .scenarios import (
    CalculatorState,
    JsonScenarioStore,
    SavedScenarios,
    Scenario,
    add_saved_to_compare,
    new_scenario_id,
    pin,
    scenario_key,
)
from .series import generate
from .share import build_share_url, decode


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Agents + edges risk curve calculator.")
    p.add_argument("--state", default="", help="Share URL or query string to start from.")
    p.add_argument("--n", dest="n", default=None, help=f"Number of agents ({config.N_MIN}-{config.N_MAX}).")
    p.add_argument(
        "--autonomy",
        default=None,
        help=f"Autonomy score ({config.AUTONOMY_MIN}-{config.AUTONOMY_MAX}).",
    )
    p.add_argument("--k", default=None, help="Max connections per new agent (0 to n-1).")
    p.add_argument("--topology", choices=[t.value for t in Topology], default=None)
    p.add_argument("--pin", action="store_true", help="Pin the current parameters to the compare list.")
    p.add_argument("--name", default=None, help="Name for --pin / --save.")
    p.add_argument(
        "--compare-saved",
        action="append",
        default=[],
        metavar="ID",
        help="Add a saved scenario to the compare list (repeatable).",
    )
    p.add_argument("--save", action="store_true", help="Save the current parameters to the local store.")
    p.add_argument("--delete-saved", action="append", default=[], metavar="ID")
    p.add_argument("--list-saved", action="store_true")
    p.add_argument("--store", type=Path, default=None, help="Saved-scenario JSON file.")
    p.add_argument(
        "--csv",
        nargs="?",
        const="",
        default=None,
        metavar="PATH",
        help=f"Export the series as CSV (default results/exports/{config.CSV_FILENAME}).",
    )
    p.add_argument("--figure", type=Path, default=None, help="Write the chart (png/pdf).")
    p.add_argument("--share-base", default=config.SHARE_BASE_URL)
    p.add_argument("--sweep", action="store_true", help="Run the topology x autonomy x k sweep.")
    return p.parse_args(argv)


def _primary_from_args(args: argparse.Namespace, start: Configuration) -> Configuration:
    return Configuration.clamped(
        args.n if args.n is not None else start.agent_count,
        args.autonomy if args.autonomy is not None else start.autonomy,
        args.k if args.k is not None else start.connection_cap,
        args.topology if args.topology is not None else start.topology,
    )


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)

    ensure_results_layout()
    logger = get_logger()
    warn = logger.warning
    info = logger.info

    state = decode(args.state, warn_hook=warn) if args.state else CalculatorState()
    primary = _primary_from_args(args, state.primary)
    compare = state.compare

    saved = SavedScenarios(JsonScenarioStore(args.store or default_store_path(), warn_hook=warn))

    for scenario_id in args.delete_saved:
        if saved.get(scenario_id) is None:
            warn(f"no saved scenario with id {scenario_id}")
        saved.delete(scenario_id)

    if args.save:
        saved.save(Scenario(id=new_scenario_id(), name=args.name or "Saved", config=primary))
        info(f"saved '{saved.items[0].name}' as {saved.items[0].id}")

    if args.pin:
        before = len(compare)
        compare = pin(compare, primary, args.name)
        if len(compare) == before:
            warn(f"compare list is full ({config.MAX_COMPARE}); pin dropped")

    for scenario_id in args.compare_saved:
        s = saved.get(scenario_id)
        if s is None:
            warn(f"no saved scenario with id {scenario_id}")
            continue
        compare = add_saved_to_compare(compare, s)

    if args.list_saved:
        for s in saved.items:
            c = s.config
            info(f"{s.id} | {s.name} | n={c.agent_count} a={c.autonomy} k={c.connection_cap} t={c.topology.value}")

    state = CalculatorState(primary=primary, compare=compare)
    frame = generate(state.primary, state.compare)
    metrics = derive(frame, state.primary)

    info(metrics.summary())
    for s in state.compare:
        info(f"compare: {s.name} ({scenario_key(s)}) n={s.config.agent_count} t={s.config.topology.label}")
    info(f"share: {build_share_url(args.share_base, state)}")

    if args.csv is not None:
        text = risk_table_csv(frame, [scenario_key(s) for s in state.compare])
        path = write_csv_export(text, Path(args.csv) if args.csv else None)
        info(f"csv: {path}")

    if args.figure is not None:
        from .viz_utils import plot_risk_curve

        path = plot_risk_curve(frame, state.primary, state.compare, metrics, args.figure)
        info(f"figure: {path}")

    if args.sweep:
        run_topology_sweep(n=state.primary.agent_count, logger_info=info)


if __name__ == "__main__":
    main()
