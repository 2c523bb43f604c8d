"""
System: the base class every tournament format derives from.

A System owns its entrants and matches exclusively. Everything runs
synchronously to completion; callers that share an engine between writers
must serialise update_match() calls themselves.

Subclasses implement:
    _match_count()         closed-form number of matches for the entrants/options
    _build()               fresh match list
    next_matches(index)    routing of a match's winner and loser
    update_match(index, f) apply a result
    next_round(rng)        round cursor (bracket cursors default to "everything")
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, ClassVar, Iterable, Mapping

from bracketengine.errors import InvalidEntrant, InvalidNumberOfMatches
from bracketengine.models import (
    DataFactory,
    EntrantScore,
    EntrantSpot,
    Match,
    MatchResult,
    NextMatches,
    Node,
)
from bracketengine.options import TournamentOptions
from bracketengine.render import Position, Renderer, build_tree
from bracketengine.standings import Standings

logger = logging.getLogger(__name__)

UpdateFn = Callable[[Match, MatchResult], None]


def next_power_of_two(n: int) -> int:
    if n <= 1:
        return 1
    return 1 << (n - 1).bit_length()


class System(ABC):
    """Abstract base class for all tournament formats."""

    name: ClassVar[str] = ""
    round_position: ClassVar[Position | None] = Position.SPACE_AROUND

    def __init__(
        self,
        entrants: Iterable[Any] = (),
        options: Mapping[str, Any] | None = None,
        data_factory: DataFactory = EntrantScore,
        *,
        matches: Iterable[Match] | None = None,
    ) -> None:
        self._entrants: list[Any] = list(entrants)
        self._option_values = self.options().merge(options)
        self._data_factory = data_factory
        self._configure()

        if matches is None:
            self._matches: list[Match] = self._build()
            logger.debug(
                "Built %s bracket: %d entrants, %d matches",
                self.name, len(self._entrants), len(self._matches),
            )
        else:
            self._matches = list(matches)
            self._validate()
            self._on_resume()
            logger.debug(
                "Resumed %s bracket: %d entrants, %d matches",
                self.name, len(self._entrants), len(self._matches),
            )

    @classmethod
    def resume(
        cls,
        entrants: Iterable[Any],
        matches: Iterable[Match],
        options: Mapping[str, Any] | None = None,
        data_factory: DataFactory = EntrantScore,
    ):
        """
        Rebuild an engine from persisted matches.

        Raises:
            InvalidNumberOfMatches: the match count does not fit the entrants/options.
            InvalidEntrant:         a slot refers to an entrant index out of range.
        """
        return cls(entrants, options, data_factory, matches=matches)

    @classmethod
    def options(cls) -> TournamentOptions:
        """The option schema this format accepts."""
        return TournamentOptions()

    # ------------------------------------------------------------------ #
    # Read-only views                                                      #
    # ------------------------------------------------------------------ #

    @property
    def entrants(self) -> list[Any]:
        return self._entrants

    @property
    def matches(self) -> list[Match]:
        """
        The match list itself, not a copy.

        Editing it directly can leave the bracket inconsistent; it is exposed
        for administrative tooling only.
        """
        return self._matches

    @property
    def option_values(self):
        return self._option_values

    @property
    def data_factory(self) -> DataFactory:
        return self._data_factory

    # ------------------------------------------------------------------ #
    # Format interface                                                     #
    # ------------------------------------------------------------------ #

    @abstractmethod
    def next_matches(self, index: int) -> NextMatches:
        ...  # pragma: no cover

    @abstractmethod
    def update_match(self, index: int, fn: UpdateFn) -> None:
        ...  # pragma: no cover

    @abstractmethod
    def next_round(self, rng: range) -> range:
        ...  # pragma: no cover

    def next_bracket_round(self, rng: range) -> range:
        return _remaining(rng)

    def next_bracket(self, rng: range) -> range:
        return _remaining(rng)

    def bracket_label(self, bracket: range) -> str | None:
        return None

    def match_position(self, index: int) -> Position | None:
        return None

    def render(self, renderer: Renderer) -> None:
        renderer.render(build_tree(self))

    def standings(self) -> Standings:
        """Elimination formats rank by bracket position and report no table."""
        return Standings()

    def is_finished(self) -> bool:
        """True once every playable match has a recorded winner."""
        return all(
            match.is_placeholder or any(
                spot.is_entrant and spot.value.data.winner for spot in match
            )
            for match in self._matches
        )

    # ------------------------------------------------------------------ #
    # Hooks                                                                #
    # ------------------------------------------------------------------ #

    def _configure(self) -> None:
        """Read option values and derive layout metadata from len(entrants)."""

    @abstractmethod
    def _match_count(self) -> int:
        ...  # pragma: no cover

    @abstractmethod
    def _build(self) -> list[Match]:
        ...  # pragma: no cover

    def _on_resume(self) -> None:
        """Rebuild any side tables from freshly validated matches."""

    # ------------------------------------------------------------------ #
    # Shared helpers                                                       #
    # ------------------------------------------------------------------ #

    def _validate(self) -> None:
        expected = self._match_count()
        if len(self._matches) != expected:
            raise InvalidNumberOfMatches(expected=expected, found=len(self._matches))
        length = len(self._entrants)
        for match in self._matches:
            for spot in match:
                if spot.is_entrant and not 0 <= spot.value.index < length:
                    raise InvalidEntrant(index=spot.value.index, length=length)

    def _spot(self, index: int) -> EntrantSpot[Node]:
        return EntrantSpot.entrant(Node(index, self._data_factory()))

    def _collect(self, index: int, fn: UpdateFn) -> tuple[Match, MatchResult] | None:
        """Run the caller's callback on match `index`; None if out of range."""
        if not 0 <= index < len(self._matches):
            logger.warning(
                "Ignoring update for match %d: %s bracket has %d matches",
                index, self.name, len(self._matches),
            )
            return None
        match = self._matches[index]
        result = MatchResult(self._data_factory)
        fn(match, result)
        return match, result

    def _mark_result(self, match: Match, result: MatchResult) -> None:
        """Set the winner flags of the match's own slots from the declared result."""
        for outcome, flag in ((result.winner, True), (result.loser, False)):
            if outcome is None or not outcome[0].is_entrant:
                continue
            pos = match.slot_of(outcome[0].value)
            if pos is not None:
                match[pos].value.data.set_winner(flag)

    def _write(self, dest: tuple[int, int], spot: EntrantSpot[int], data: Any) -> None:
        index, pos = dest
        self._matches[index][pos] = spot.map(lambda i: Node(i, data))
        logger.debug("Match %d slot %d <- %r", index, pos, self._matches[index][pos])

    def _reset_match(self, index: int) -> None:
        for spot in self._matches[index]:
            if spot.is_entrant:
                spot.value.data.reset()

    def _reset_downstream(self, index: int) -> None:
        """
        Undo match `index` and every slot it fed, transitively.

        Slots are only cleared when they hold an entrant; Empty slots were
        fixed at construction and stay. A placeholder match that is reset
        directly keeps its construction-time forward.
        """
        self._reset_match(index)
        if self._matches[index].is_placeholder:
            return
        pending = [index]
        while pending:
            current = pending.pop()
            routing = self.next_matches(current)
            for dest in (routing.winner, routing.loser):
                if dest is None:
                    continue
                target, pos = dest
                if not self._matches[target][pos].is_entrant:
                    continue
                self._matches[target][pos] = EntrantSpot.tbd()
                self._reset_match(target)
                logger.debug("Reset match %d slot %d (fed by match %d)", target, pos, current)
                pending.append(target)


def _remaining(rng: range) -> range:
    return range(rng.start, max(rng.start, rng.stop))
