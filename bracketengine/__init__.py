"""
bracketengine: tournament bracket generation and match progression.

Typical use:

    from bracketengine import create_tournament

    t = create_tournament("double_elimination", ["Alpha", "Bravo", "Charlie", "Delta"])
    t.report_winner(0, slot=0)
    for match in t.matches:
        ...
"""

from __future__ import annotations

from bracketengine.errors import (
    BracketError,
    InvalidEntrant,
    InvalidNumberOfMatches,
    InvalidValue,
    MissingKey,
    OptionsError,
    ResumeError,
    UnknownKey,
)
from bracketengine.models import (
    EntrantData,
    EntrantScore,
    EntrantSpot,
    Match,
    MatchResult,
    NextMatches,
    Node,
    SpotKind,
)
from bracketengine.options import OptionKind, OptionValues, TournamentOption, TournamentOptions
from bracketengine.render import Column, MatchElement, Position, Renderer, Row, build_tree
from bracketengine.standings import Standings, StandingsEntry, median_buchholz
from bracketengine.tournaments import (
    DoubleElimination,
    RoundRobin,
    SingleElimination,
    Swiss,
    System,
    Tournament,
    TournamentKind,
    create_tournament,
)

__all__ = [
    "BracketError",
    "ResumeError",
    "InvalidEntrant",
    "InvalidNumberOfMatches",
    "OptionsError",
    "InvalidValue",
    "MissingKey",
    "UnknownKey",
    "EntrantData",
    "EntrantScore",
    "EntrantSpot",
    "Match",
    "MatchResult",
    "NextMatches",
    "Node",
    "SpotKind",
    "OptionKind",
    "OptionValues",
    "TournamentOption",
    "TournamentOptions",
    "Column",
    "MatchElement",
    "Position",
    "Renderer",
    "Row",
    "build_tree",
    "Standings",
    "StandingsEntry",
    "median_buchholz",
    "System",
    "SingleElimination",
    "DoubleElimination",
    "RoundRobin",
    "Swiss",
    "Tournament",
    "TournamentKind",
    "create_tournament",
]
