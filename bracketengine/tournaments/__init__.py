"""
Tournament formats.

create_tournament() is the single entry point for instantiating any format.

To add a new format:
  1. Create bracketengine/tournaments/<name>.py implementing System
  2. Add a member to TournamentKind and a case to engine_class()
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from bracketengine.tournaments.base import System, UpdateFn, next_power_of_two
from bracketengine.tournaments.double_elimination import DoubleElimination
from bracketengine.tournaments.round_robin import RoundRobin, circle_entrant
from bracketengine.tournaments.single_elimination import SingleElimination
from bracketengine.tournaments.swiss import Swiss
from bracketengine.tournaments.tournament import Tournament, TournamentKind, engine_class

__all__ = [
    # Base
    "System",
    "UpdateFn",
    "next_power_of_two",
    # Implementations
    "SingleElimination",
    "DoubleElimination",
    "RoundRobin",
    "Swiss",
    "circle_entrant",
    # Facade
    "Tournament",
    "TournamentKind",
    "engine_class",
    "create_tournament",
]


def create_tournament(
    kind: TournamentKind | str,
    entrants: Iterable[Any] = (),
    options: Mapping[str, Any] | None = None,
) -> Tournament:
    """
    Build a fresh bracket.

    Args:
        kind:     "single_elimination" | "double_elimination" | "round_robin" | "swiss"
        entrants: ordered entrants; position in the list is the seed
        options:  option values, validated against the format's schema
    """
    return Tournament(kind, entrants, options)
