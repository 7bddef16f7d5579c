"""
Share-URL codec.

Query parameters: n, a (autonomy), k, t (topology code) and, when the compare
list is non-empty, sc: base64 of the UTF-8 JSON array of
{id, name, n, autonomy, k, topology}.

Decoding never fails. Bad scalars fall back to defaults and are clamped, a
bad topology becomes "bounded", and an unreadable sc payload yields an empty
compare list.
"""

from __future__ import annotations

import base64
import binascii
import json
from typing import Callable, Optional, Sequence
from urllib.parse import parse_qs, urlencode, urlsplit, urlunsplit

from . import config
from .model import Configuration
from .scenarios import CalculatorState, Scenario, scenarios_from_list


def _b64_encode(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def _b64_decode(payload: str) -> str:
    # A '+' that reached us unescaped was read back as a space.
    payload = payload.strip().replace(" ", "+")
    return base64.b64decode(payload, validate=True).decode("utf-8")


def encode(primary: Configuration, compare: Sequence[Scenario] = ()) -> str:
    params = {
        "n": str(primary.agent_count),
        "a": str(primary.autonomy),
        "k": str(primary.connection_cap),
        "t": primary.topology.value,
    }
    if compare:
        payload = json.dumps([s.to_dict() for s in compare], ensure_ascii=False, separators=(",", ":"))
        params["sc"] = _b64_encode(payload)
    return urlencode(params)


def encode_state(state: CalculatorState) -> str:
    return encode(state.primary, state.compare)


def build_share_url(base: str, state: CalculatorState) -> str:
    parts = urlsplit(base)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, encode_state(state), ""))


def _query_of(url_or_query: str) -> str:
    text = url_or_query.strip()
    if "?" in text:
        return urlsplit(text).query
    return text.lstrip("?")


def _decode_compare(sc: str, warn_hook: Optional[Callable[[str], None]]) -> tuple[Scenario, ...]:
    try:
        parsed = json.loads(_b64_decode(sc))
    except (binascii.Error, UnicodeDecodeError, ValueError, RecursionError) as e:
        if warn_hook is not None:
            warn_hook(f"share state: ignoring unreadable compare list ({e})")
        return ()
    return scenarios_from_list(parsed, default_name="Scenario", cap=config.MAX_COMPARE)


def decode(url_or_query: str, *, warn_hook: Optional[Callable[[str], None]] = None) -> CalculatorState:
    params = parse_qs(_query_of(url_or_query or ""), keep_blank_values=True)

    def first(name: str) -> Optional[str]:
        values = params.get(name)
        return values[0] if values else None

    primary = Configuration.clamped(first("n"), first("a"), first("k"), first("t") or config.DEFAULT_TOPOLOGY)
    sc = first("sc")
    compare = _decode_compare(sc, warn_hook) if sc else ()
    return CalculatorState(primary=primary, compare=compare)
