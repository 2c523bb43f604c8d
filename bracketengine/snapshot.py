"""
JSON snapshots of a tournament.

A snapshot is the format, the entrants, the option values and the match list,
with every slot written out field by field:

    {"entrant": {"index": 3, "data": {"score": 0, "winner": false}}}
    "empty"
    "tbd"

Loading goes through Tournament.resume(), so a snapshot that does not
describe a valid bracket is rejected with the usual resume errors. Only the
default EntrantScore node data is supported.
"""

from __future__ import annotations

import dataclasses
import json
import logging
from pathlib import Path
from typing import Any

from bracketengine.models import EntrantScore, EntrantSpot, Match, Node
from bracketengine.tournaments import Tournament

logger = logging.getLogger(__name__)


def dump(tournament: Tournament) -> dict[str, Any]:
    return {
        "kind": tournament.kind.value,
        "entrants": list(tournament.entrants),
        "options": tournament.option_values.to_dict(),
        "matches": [[_dump_spot(spot) for spot in match] for match in tournament.matches],
    }


def load(data: dict[str, Any]) -> Tournament:
    """
    Rebuild a tournament from dump() output.

    Raises:
        ValueError: the data is malformed, or describes an invalid bracket
                    (InvalidNumberOfMatches / InvalidEntrant are ValueErrors).
    """
    try:
        matches = [Match([_load_spot(s) for s in raw]) for raw in data["matches"]]
        return Tournament.resume(
            data["kind"],
            data["entrants"],
            matches,
            options=data.get("options") or {},
        )
    except (KeyError, TypeError) as exc:
        raise ValueError(f"Invalid snapshot structure: {exc}") from exc


def save(path: str | Path, tournament: Tournament) -> Path:
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(json.dumps(dump(tournament), indent=2), encoding="utf-8")
    logger.info("Saved %s snapshot to %s", tournament.kind.value, out)
    return out


def load_file(path: str | Path) -> Tournament:
    src = Path(path)
    if not src.exists():
        raise FileNotFoundError(f"Snapshot not found: {src.resolve()}")
    with src.open("r", encoding="utf-8") as f:
        return load(json.load(f))


def _dump_spot(spot: EntrantSpot[Node]) -> Any:
    if spot.is_entrant:
        node = spot.value
        return {"entrant": {"index": node.index, "data": dataclasses.asdict(node.data)}}
    return spot.kind.value


def _load_spot(raw: Any) -> EntrantSpot[Node]:
    if raw == "empty":
        return EntrantSpot.empty()
    if raw == "tbd":
        return EntrantSpot.tbd()
    node = raw["entrant"]
    return EntrantSpot.entrant(Node(int(node["index"]), EntrantScore(**node.get("data", {}))))
