"""
Pinned ("compare") and saved scenarios.

Every list operation is a pure function returning a new tuple; nothing here
mutates its input. The compare list keeps insertion order and is capped at
MAX_COMPARE by truncating after append, so once it is full a new pin is
dropped. The saved list is newest-first and capped at MAX_SAVED, dropping the
oldest entries.
"""

from __future__ import annotations

import itertools
import json
import os
import time
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Callable, Iterable, Optional, Sequence
from uuid import uuid4

from . import config
from .model import DEFAULT_CONFIGURATION, Configuration

WarnHook = Optional[Callable[[str], None]]

_id_counter = itertools.count()


def new_scenario_id() -> str:
    """Short time-based id with a random suffix, unique within the process."""
    return f"{int(time.time() * 1000):x}-{next(_id_counter):x}{uuid4().hex[:6]}"


@dataclass(frozen=True)
class Scenario:
    id: str
    name: str
    config: Configuration

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "n": self.config.agent_count,
            "autonomy": self.config.autonomy,
            "k": self.config.connection_cap,
            "topology": self.config.topology.value,
        }

    @classmethod
    def from_dict(cls, raw: Any, *, default_name: str = "Scenario") -> "Scenario":
        """
        Field-by-field recovery of one wire entry.

        Missing or malformed fields take their defaults; a non-mapping entry
        is treated as an empty one.
        """
        if not isinstance(raw, dict):
            raw = {}
        return cls(
            id=str(raw.get("id") or new_scenario_id()),
            name=str(raw.get("name") or default_name),
            config=Configuration.clamped(
                raw.get("n"), raw.get("autonomy"), raw.get("k"), raw.get("topology")
            ),
        )


def scenario_key(s: Scenario) -> str:
    """Series column key; stable for as long as the scenario stays pinned."""
    return f"s_{s.id}"


def scenarios_from_list(raw: Any, *, default_name: str, cap: int) -> tuple[Scenario, ...]:
    if not isinstance(raw, list):
        return ()
    return tuple(Scenario.from_dict(x, default_name=default_name) for x in raw)[:cap]


@dataclass(frozen=True)
class CalculatorState:
    """Everything a share URL carries: the primary parameters plus the compare list."""

    primary: Configuration = DEFAULT_CONFIGURATION
    compare: tuple[Scenario, ...] = field(default_factory=tuple)


# ---------------------------------------------------------------------------
# Compare list
# ---------------------------------------------------------------------------


def pin(compare: Sequence[Scenario], cfg: Configuration, name: Optional[str] = None) -> tuple[Scenario, ...]:
    name = name or f"Scenario {len(compare) + 1}"
    item = Scenario(id=new_scenario_id(), name=name, config=cfg)
    return (*compare, item)[: config.MAX_COMPARE]


def unpin(compare: Sequence[Scenario], scenario_id: str) -> tuple[Scenario, ...]:
    return tuple(s for s in compare if s.id != scenario_id)


def rename(compare: Sequence[Scenario], scenario_id: str, new_name: str) -> tuple[Scenario, ...]:
    return tuple(replace(s, name=new_name) if s.id == scenario_id else s for s in compare)


def clear_compare() -> tuple[Scenario, ...]:
    return ()


def add_saved_to_compare(compare: Sequence[Scenario], saved: Scenario) -> tuple[Scenario, ...]:
    return pin(compare, saved.config, saved.name or None)


def apply_scenario(s: Scenario) -> Configuration:
    """Copy a scenario's values onto the primary configuration."""
    return Configuration.clamped(
        s.config.agent_count, s.config.autonomy, s.config.connection_cap, s.config.topology
    )


# ---------------------------------------------------------------------------
# Saved list
# ---------------------------------------------------------------------------


def save_scenario(saved: Sequence[Scenario], s: Scenario) -> tuple[Scenario, ...]:
    """Prepend a copy of `s` under a fresh id so the copy and the original never share a curve key."""
    item = Scenario(id=new_scenario_id(), name=s.name or "Saved", config=s.config)
    return (item, *saved)[: config.MAX_SAVED]


def delete_saved(saved: Sequence[Scenario], scenario_id: str) -> tuple[Scenario, ...]:
    return tuple(s for s in saved if s.id != scenario_id)


def find(items: Iterable[Scenario], scenario_id: str) -> Optional[Scenario]:
    return next((s for s in items if s.id == scenario_id), None)


class JsonScenarioStore:
    """
    Single-file JSON store for saved scenarios.

    The file holds one object keyed by SAVED_KEY whose value is the array of
    saved entries. All failures are reported through `warn_hook` and degrade
    to an empty list (load) or False (save).
    """

    def __init__(self, path: Path, *, key: str = config.SAVED_KEY, warn_hook: WarnHook = None):
        self.path = Path(path)
        self.key = key
        self.warn_hook = warn_hook

    def _warn(self, msg: str) -> None:
        if self.warn_hook is not None:
            self.warn_hook(msg)

    def _read_document(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            doc = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, ValueError, RecursionError) as e:
            self._warn(f"saved scenarios unreadable at {self.path}: {e}")
            return {}
        return doc if isinstance(doc, dict) else {}

    def load(self) -> tuple[Scenario, ...]:
        raw = self._read_document().get(self.key)
        if raw is not None and not isinstance(raw, list):
            self._warn(f"saved scenarios under '{self.key}' are not a list; ignoring")
        return scenarios_from_list(raw, default_name="Saved", cap=config.MAX_SAVED)

    def save(self, items: Sequence[Scenario]) -> bool:
        doc = self._read_document()
        doc[self.key] = [s.to_dict() for s in list(items)[: config.MAX_SAVED]]
        tmp = self.path.with_suffix(self.path.suffix + f".tmp.{os.getpid()}.{uuid4().hex}")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(doc, ensure_ascii=False, indent=2), encoding="utf-8")
            os.replace(tmp, self.path)
        except OSError as e:
            self._warn(f"could not write saved scenarios to {self.path}: {e}")
            if tmp.exists():
                tmp.unlink()
            return False
        return True


class SavedScenarios:
    """In-memory saved list, written through to a store after every change."""

    def __init__(self, store: JsonScenarioStore):
        self.store = store
        self.items: tuple[Scenario, ...] = store.load()

    def _commit(self, items: tuple[Scenario, ...]) -> tuple[Scenario, ...]:
        # The in-memory list stays authoritative even when the write fails.
        self.items = items
        self.store.save(items)
        return items

    def save(self, s: Scenario) -> tuple[Scenario, ...]:
        return self._commit(save_scenario(self.items, s))

    def delete(self, scenario_id: str) -> tuple[Scenario, ...]:
        return self._commit(delete_saved(self.items, scenario_id))

    def get(self, scenario_id: str) -> Optional[Scenario]:
        return find(self.items, scenario_id)
