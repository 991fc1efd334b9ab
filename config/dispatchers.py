from __future__ import annotations

import json
from typing import Dict, Optional

from errors import ConfigError


# Dispatcher id -> display name. Order matters: when a driver is listed
# under several dispatchers, the one iterated last wins.
DEFAULT_DISPATCHERS: Dict[int, str] = {
    12: "Marko",
    28: "Mario",
    53: "Paul",
    57: "Milos",
    65: "Aleks",
    70: "Luka",
    72: "Adrian",
    78: "David",
    79: "Kevin",
    80: "Monte",
    81: "Austin",
}


def parse_dispatchers(raw: Optional[str]) -> Dict[int, str]:
    """Parse a dispatcher roster from its settings representation.

    Accepts either a JSON object (``{"12": "Marko"}``) or a comma-separated
    list of ``id=name`` pairs (``12=Marko,28=Mario``). Input order is kept.
    Empty input yields the default roster.
    """
    if raw is None or not raw.strip():
        return dict(DEFAULT_DISPATCHERS)

    text = raw.strip()
    pairs: list[tuple[str, str]] = []
    if text.startswith("{"):
        try:
            data = json.loads(text)
        except ValueError as exc:
            raise ConfigError(f"DISPATCHERS is not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError("DISPATCHERS JSON must be an object of id -> name")
        pairs = [(str(k), str(v)) for k, v in data.items()]
    else:
        for chunk in text.split(","):
            chunk = chunk.strip()
            if not chunk:
                continue
            if "=" not in chunk:
                raise ConfigError(f"DISPATCHERS entry '{chunk}' must look like id=name")
            key, name = chunk.split("=", 1)
            pairs.append((key.strip(), name.strip()))

    roster: Dict[int, str] = {}
    for key, name in pairs:
        try:
            dispatcher_id = int(key)
        except ValueError as exc:
            raise ConfigError(f"Dispatcher id '{key}' is not an integer") from exc
        if not name:
            raise ConfigError(f"Dispatcher {dispatcher_id} has an empty name")
        roster[dispatcher_id] = name
    if not roster:
        raise ConfigError("DISPATCHERS is set but defines no dispatchers")
    return roster
