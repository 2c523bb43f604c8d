"""
Single-elimination bracket.

Layout for n entrants, p = next power of two >= n:
- Round one holds `initial` matches (p/2, or 1 for n <= 2). Match i seats
  entrant i in slot 0 and entrant initial+i in slot 1, or Empty (a bye).
- Rounds two..final follow, each half the size of the one before, so the
  final is match p-2.
- With the third_place_match option (and n > 2) one extra match at the very
  end takes the two semifinal losers.

Byes are resolved at construction: the lone entrant of a bye match is copied
straight into its round-two slot.
"""

from __future__ import annotations

import logging

from bracketengine.models import EntrantSpot, Match, NextMatches
from bracketengine.options import TournamentOptions
from bracketengine.render import Position
from bracketengine.tournaments.base import System, UpdateFn, next_power_of_two

logger = logging.getLogger(__name__)

THIRD_PLACE_MATCH = "third_place_match"


class SingleElimination(System):
    name = "single_elimination"

    @classmethod
    def options(cls) -> TournamentOptions:
        return (
            TournamentOptions.builder()
            .option(THIRD_PLACE_MATCH, "Include a match for the third place", False)
            .build()
        )

    @property
    def third_place_match(self) -> bool:
        """Whether the bracket actually carries a third-place match."""
        return self._third_place

    # ------------------------------------------------------------------ #
    # Construction                                                         #
    # ------------------------------------------------------------------ #

    def _configure(self) -> None:
        n = len(self._entrants)
        self._p = next_power_of_two(n)
        self._initial = 1 if n <= 2 else self._p // 2
        self._third_place = self._option_values.get_bool(THIRD_PLACE_MATCH) and n > 2

    def _match_count(self) -> int:
        n = len(self._entrants)
        if n == 0:
            return 0
        if n <= 2:
            return 1
        return self._p - 1 + int(self._third_place)

    def _build(self) -> list[Match]:
        n = len(self._entrants)
        if n == 0:
            return []

        matches = []
        for i in range(self._initial):
            second = self._spot(self._initial + i) if self._initial + i < n else EntrantSpot.empty()
            matches.append(Match([self._spot(i), second]))

        matches.extend(Match.tbd() for _ in range(self._match_count() - self._initial))
        self._matches = matches

        # Forward every bye into round two.
        for index in range(n, self._p):
            i = index - self._initial
            matches[self._initial + i // 2][index % 2] = self._spot(i)
            # A bye semifinal never produces a loser for the third-place match.
            loser = self.next_matches(i).loser
            if loser is not None:
                target, pos = loser
                matches[target][pos] = EntrantSpot.empty()

        return matches

    # ------------------------------------------------------------------ #
    # Progression                                                          #
    # ------------------------------------------------------------------ #

    def next_matches(self, index: int) -> NextMatches:
        count = len(self._matches)
        final = count - 2 if self._third_place else count - 1
        if index < 0 or index >= final:
            return NextMatches()

        winner = (self._initial + index // 2, index % 2)
        loser = None
        if self._third_place and index >= count - 4:
            loser = (count - 1, index % 2)
        return NextMatches(winner=winner, loser=loser)

    def update_match(self, index: int, fn: UpdateFn) -> None:
        collected = self._collect(index, fn)
        if collected is None:
            return
        match, result = collected

        if result.reset:
            logger.debug("Resetting match %d and everything it fed", index)
            self._reset_downstream(index)
            return

        self._mark_result(match, result)
        routing = self.next_matches(index)
        if result.winner is not None and routing.winner is not None:
            self._write(routing.winner, *result.winner)
        if result.loser is not None and routing.loser is not None:
            self._write(routing.loser, *result.loser)

    # ------------------------------------------------------------------ #
    # Rendering                                                            #
    # ------------------------------------------------------------------ #

    def next_round(self, rng: range) -> range:
        start = rng.start
        if start >= rng.stop:
            return range(start, start)
        if start == 0:
            stop = self._initial
        else:
            stop = self._initial + start // 2
            # The third-place match is drawn alongside the final.
            if self._third_place and stop == len(self._matches) - 1:
                stop += 1
        return range(start, min(stop, rng.stop))

    def match_position(self, index: int) -> Position | None:
        if self._third_place and index == len(self._matches) - 1:
            return Position.END
        return None
