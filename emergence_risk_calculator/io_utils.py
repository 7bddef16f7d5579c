from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional, Sequence
from uuid import uuid4

import numpy as np
import pandas as pd

from . import config

CRLF = "\r\n"


def package_root() -> Path:
    """Return the package directory (repo-relative results live under this)."""
    return Path(__file__).resolve().parent


def results_root() -> Path:
    return package_root() / "results"


def ensure_results_layout() -> None:
    root = results_root()
    (root / "exports").mkdir(parents=True, exist_ok=True)
    (root / "figures").mkdir(parents=True, exist_ok=True)
    (root / "sweeps").mkdir(parents=True, exist_ok=True)


def default_store_path() -> Path:
    return results_root() / f"{config.SAVED_KEY}.json"


def default_csv_path() -> Path:
    return results_root() / "exports" / config.CSV_FILENAME


def get_logger(*, log_dir: Optional[Path] = None) -> logging.Logger:
    """
    Configure and return the diagnostics logger.

    Logs to `results/diagnostics.log` (or `log_dir/diagnostics.log`) and also to stderr.
    """
    logger = logging.getLogger("emergence_risk_calculator")
    logger.setLevel(logging.INFO)

    # Avoid duplicate handlers if called multiple times in-process.
    if getattr(logger, "_configured", False):
        return logger

    if log_dir is None:
        ensure_results_layout()
        log_dir = results_root()
    log_dir.mkdir(parents=True, exist_ok=True)

    fmt = logging.Formatter(
        fmt="%(asctime)s | %(levelname)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    fh = logging.FileHandler(log_dir / "diagnostics.log", mode="a", encoding="utf-8")
    fh.setLevel(logging.INFO)
    fh.setFormatter(fmt)

    sh = logging.StreamHandler()
    sh.setLevel(logging.INFO)
    sh.setFormatter(fmt)

    logger.addHandler(fh)
    logger.addHandler(sh)
    logger.propagate = False
    logger._configured = True  # type: ignore[attr-defined]
    return logger


def atomic_write_text(text: str, path: Path) -> None:
    """
    Atomic text write (temp file -> rename).

    Ensures an interrupted export never leaves a partial file behind.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + f".tmp.{os.getpid()}.{uuid4().hex}")
    # newline="" keeps CRLF terminators exactly as given.
    with open(tmp, "w", encoding="utf-8", newline="") as f:
        f.write(text)
    os.replace(tmp, path)


def atomic_write_csv(df: pd.DataFrame, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + f".tmp.{os.getpid()}.{uuid4().hex}")
    df.to_csv(tmp, index=False)
    os.replace(tmp, path)


def _multiple(values: pd.Series, baseline: pd.Series) -> np.ndarray:
    v = values.to_numpy(dtype=np.float64)
    b = baseline.to_numpy(dtype=np.float64)
    with np.errstate(divide="ignore", invalid="ignore"):
        return np.where(b > 0, v / b, np.nan)


def risk_table(frame: pd.DataFrame, scenario_keys: Sequence[str]) -> pd.DataFrame:
    """
    Export table: agents, baseline, current value and multiple, then a
    (connected, multiple) column pair per scenario key in list order.

    NaN marks "agent count exceeded" and "no multiple because baseline is 0";
    both render as empty fields.
    """
    baseline = frame["baseline"]
    out = {
        "agents": frame["agents"].astype(np.int64),
        "baseline_linear": baseline,
        "current_connected": frame["current"],
        "current_multiple": _multiple(frame["current"], baseline),
    }
    for sk in scenario_keys:
        col = frame[sk] if sk in frame.columns else pd.Series(np.nan, index=frame.index)
        out[f"{sk}_connected"] = col
        out[f"{sk}_multiple"] = _multiple(col, baseline)
    return pd.DataFrame(out)


def risk_table_csv(frame: pd.DataFrame, scenario_keys: Sequence[str]) -> str:
    return risk_table(frame, scenario_keys).to_csv(index=False, na_rep="", lineterminator=CRLF)


def write_csv_export(text: str, path: Optional[Path] = None) -> Path:
    path = default_csv_path() if path is None else Path(path)
    atomic_write_text(text, path)
    return path
