"""
Configuration loading from a bracket YAML file.

Uses typed dataclasses throughout so the rest of the app gets IDE
completion and type-checker support without touching raw dicts.

A bracket file names the format, lists the entrants in seed order, sets
option values and optionally records results to replay:

    format: double_elimination
    entrants: [Alpha, Bravo, Charlie, Delta]
    options: {}
    results:
      - match: 0
        winner: 0        # slot 0 or 1
      - match: 2
        reset: true
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from bracketengine.errors import OptionsError
from bracketengine.tournaments import Tournament, TournamentKind


@dataclass
class ResultEntry:
    match: int
    winner: int | None = None   # slot position; None together with reset=True
    reset: bool = False


@dataclass
class BracketConfig:
    format: TournamentKind
    entrants: list[str]
    options: dict[str, Any] = field(default_factory=dict)
    results: list[ResultEntry] = field(default_factory=list)

    def build(self) -> Tournament:
        """Create the tournament and replay every recorded result in order."""
        tournament = Tournament(self.format, self.entrants, self.options)
        for entry in self.results:
            if entry.reset:
                tournament.reset_match(entry.match)
            else:
                tournament.report_winner(entry.match, entry.winner)
        return tournament


def load_config(path: str | Path = "bracket.yaml") -> BracketConfig:
    """
    Load and validate a bracket YAML file.

    Raises:
        FileNotFoundError: the file is missing.
        ValueError: required fields are absent or invalid.
    """
    cfg_path = Path(path)
    if not cfg_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {cfg_path.resolve()}\n"
            "Copy config.example.yaml to bracket.yaml and list your entrants."
        )

    with cfg_path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    return parse_config(raw)


def parse_config(raw: Any) -> BracketConfig:
    """Build a BracketConfig from already-parsed YAML data."""
    if not isinstance(raw, dict):
        raise ValueError("Invalid bracket config structure: expected a mapping at the top level")

    try:
        config = BracketConfig(
            format=TournamentKind.parse(raw["format"]),
            entrants=[str(e) for e in raw.get("entrants") or []],
            options=dict(raw.get("options") or {}),
            results=[_parse_result(r) for r in raw.get("results") or []],
        )
    except (KeyError, TypeError, AttributeError) as exc:
        raise ValueError(f"Invalid bracket config structure: {exc}") from exc

    _validate(config)
    return config


def _parse_result(raw: dict) -> ResultEntry:
    winner = raw.get("winner")
    return ResultEntry(
        match=int(raw["match"]),
        winner=None if winner is None else int(winner),
        reset=bool(raw.get("reset", False)),
    )


def _validate(config: BracketConfig) -> None:
    try:
        Tournament.options(config.format).merge(config.options)
    except OptionsError as exc:
        raise ValueError(f"options: {exc}") from exc

    for entry in config.results:
        if entry.match < 0:
            raise ValueError(f"results: match index must be >= 0, got {entry.match}")
        if entry.reset:
            if entry.winner is not None:
                raise ValueError(f"results: match {entry.match} sets both winner and reset")
        elif entry.winner not in (0, 1):
            raise ValueError(
                f"results: match {entry.match} needs winner 0 or 1 (or reset: true), "
                f"got {entry.winner!r}"
            )
