"""
Tournament: one wrapper for whichever format is active.

Callers that only learn the format at runtime (from a config file, a stored
snapshot, a request) hold a Tournament and never touch the concrete engine
classes. The set of formats is closed; TournamentKind names all of them.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Iterable, Mapping

from bracketengine.models import DataFactory, EntrantScore, Match, NextMatches
from bracketengine.options import OptionValues, TournamentOptions
from bracketengine.render import Position, Renderer, build_tree
from bracketengine.standings import Standings
from bracketengine.tournaments.base import System, UpdateFn
from bracketengine.tournaments.double_elimination import DoubleElimination
from bracketengine.tournaments.round_robin import RoundRobin
from bracketengine.tournaments.single_elimination import SingleElimination
from bracketengine.tournaments.swiss import Swiss

logger = logging.getLogger(__name__)


class TournamentKind(str, Enum):
    SINGLE_ELIMINATION = "single_elimination"
    DOUBLE_ELIMINATION = "double_elimination"
    ROUND_ROBIN = "round_robin"
    SWISS = "swiss"

    @classmethod
    def parse(cls, value: str | TournamentKind) -> TournamentKind:
        if isinstance(value, TournamentKind):
            return value
        normalised = str(value).strip().lower().replace("-", "_").replace(" ", "_")
        try:
            return cls(normalised)
        except ValueError:
            valid = ", ".join(kind.value for kind in cls)
            raise ValueError(f"Unknown tournament format: {value!r}. Valid formats: {valid}") from None


def engine_class(kind: TournamentKind) -> type[System]:
    match kind:
        case TournamentKind.SINGLE_ELIMINATION:
            return SingleElimination
        case TournamentKind.DOUBLE_ELIMINATION:
            return DoubleElimination
        case TournamentKind.ROUND_ROBIN:
            return RoundRobin
        case TournamentKind.SWISS:
            return Swiss
    raise ValueError(f"Unknown tournament format: {kind!r}")


class Tournament:
    """A bracket in any of the supported formats."""

    def __init__(
        self,
        kind: TournamentKind | str,
        entrants: Iterable[Any] = (),
        options: Mapping[str, Any] | None = None,
        data_factory: DataFactory = EntrantScore,
        *,
        _engine: System | None = None,
    ) -> None:
        self.kind = TournamentKind.parse(kind)
        self._engine = _engine or engine_class(self.kind)(entrants, options, data_factory)

    @classmethod
    def resume(
        cls,
        kind: TournamentKind | str,
        entrants: Iterable[Any],
        matches: Iterable[Match],
        options: Mapping[str, Any] | None = None,
        data_factory: DataFactory = EntrantScore,
    ) -> Tournament:
        kind = TournamentKind.parse(kind)
        engine = engine_class(kind).resume(entrants, matches, options, data_factory)
        return cls(kind, _engine=engine)

    @staticmethod
    def options(kind: TournamentKind | str) -> TournamentOptions:
        """The option schema of a format, for building forms and validating config."""
        return engine_class(TournamentKind.parse(kind)).options()

    @property
    def engine(self) -> System:
        return self._engine

    # ------------------------------------------------------------------ #
    # Entrants                                                             #
    # ------------------------------------------------------------------ #

    def push(self, entrant: Any) -> None:
        self.extend([entrant])

    def extend(self, entrants: Iterable[Any]) -> None:
        """
        Add entrants and rebuild the bracket from scratch.

        Every recorded result is discarded; option values are kept.
        """
        entrants = list(entrants)
        if not entrants:
            return
        engine = self._engine
        logger.info(
            "Adding %d entrant(s) to %s tournament; rebuilding %d matches",
            len(entrants), self.kind.value, len(engine.matches),
        )
        self._engine = type(engine)(
            [*engine.entrants, *entrants],
            engine.option_values,
            engine.data_factory,
        )

    # ------------------------------------------------------------------ #
    # Forwarded engine interface                                           #
    # ------------------------------------------------------------------ #

    @property
    def entrants(self) -> list[Any]:
        return self._engine.entrants

    @property
    def matches(self) -> list[Match]:
        return self._engine.matches

    @property
    def option_values(self) -> OptionValues:
        return self._engine.option_values

    @property
    def round_position(self) -> Position | None:
        return self._engine.round_position

    def next_matches(self, index: int) -> NextMatches:
        return self._engine.next_matches(index)

    def update_match(self, index: int, fn: UpdateFn) -> None:
        self._engine.update_match(index, fn)

    def next_bracket_round(self, rng: range) -> range:
        return self._engine.next_bracket_round(rng)

    def next_bracket(self, rng: range) -> range:
        return self._engine.next_bracket(rng)

    def next_round(self, rng: range) -> range:
        return self._engine.next_round(rng)

    def bracket_label(self, bracket: range) -> str | None:
        return self._engine.bracket_label(bracket)

    def match_position(self, index: int) -> Position | None:
        return self._engine.match_position(index)

    def render(self, renderer: Renderer) -> None:
        renderer.render(build_tree(self._engine))

    def standings(self) -> Standings:
        return self._engine.standings()

    def is_finished(self) -> bool:
        return self._engine.is_finished()

    # ------------------------------------------------------------------ #
    # Result helpers                                                       #
    # ------------------------------------------------------------------ #

    def report_winner(self, index: int, slot: int) -> None:
        """Record that the entrant in `slot` (0 or 1) of match `index` won."""
        if slot not in (0, 1):
            raise ValueError(f"slot must be 0 or 1, got {slot}")
        if 0 <= index < len(self.matches) and not self.matches[index][slot].is_entrant:
            raise ValueError(f"match {index} has no entrant in slot {slot}")

        def _apply(match: Match, result) -> None:
            result.winner_default(match[slot])
            result.loser_default(match[1 - slot])

        self._engine.update_match(index, _apply)

    def reset_match(self, index: int) -> None:
        """Undo match `index` and everything it already fed."""
        self._engine.update_match(index, lambda match, result: result.reset_default())
