"""
Double-elimination bracket.

One match list holds three parts:

    [0, lower)          upper bracket, laid out exactly like single elimination
    [lower, final)      lower bracket
    final               grand final: upper winner (slot 0) vs lower winner (slot 1)

With m = number of first-round upper matches, the upper rounds have
m, m/2, ..., 1 matches and the lower rounds m/2, m/2, m/4, m/4, ..., 1, 1.
Lower round 0 pairs up the first-round upper losers. Every odd lower round
takes the survivors of the round before in slot 0 and a fresh wave of upper
losers in slot 1; every even round after that halves the field.

A lower match holding a single real entrant next to an Empty slot is a bye:
as soon as that entrant arrives it is marked the winner and moved on.
"""

from __future__ import annotations

import logging

from bracketengine.models import EntrantSpot, Match, NextMatches, Node
from bracketengine.tournaments.base import System, UpdateFn, next_power_of_two

logger = logging.getLogger(__name__)


class DoubleElimination(System):
    name = "double_elimination"

    @property
    def lower_bracket_index(self) -> int:
        return self._lower

    @property
    def final_index(self) -> int:
        return self._final

    # ------------------------------------------------------------------ #
    # Construction                                                         #
    # ------------------------------------------------------------------ #

    def _configure(self) -> None:
        n = len(self._entrants)
        self._p = next_power_of_two(n)
        self._initial = 1 if n <= 2 else self._p // 2
        self._lower = self._initial * 2 - 1
        self._final = max(self._match_count() - 1, 0)

        self._upper_rounds: list[range] = []
        self._lower_rounds: list[range] = []
        if n <= 2:
            return

        start, size = 0, self._initial
        while size >= 1:
            self._upper_rounds.append(range(start, start + size))
            start, size = start + size, size // 2

        size = self._initial // 2
        while size >= 1:
            for _ in range(2):
                self._lower_rounds.append(range(start, start + size))
                start += size
            size //= 2

    def _match_count(self) -> int:
        n = len(self._entrants)
        if n == 0:
            return 0
        if n <= 2:
            return 1
        return self._initial * 4 - 2

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

        # Byes: the entrant moves up, nobody drops to the lower bracket.
        for index in range(n, self._p):
            i = index - self._initial
            routing = self.next_matches(i)
            for dest, spot in ((routing.winner, self._spot(i)), (routing.loser, EntrantSpot.empty())):
                target, pos = dest
                matches[target][pos] = spot

        # Two byes feeding the same lower match leave it with nobody at all.
        if self._lower_rounds:
            for index in self._lower_rounds[0]:
                if all(spot.is_empty for spot in matches[index]):
                    target, pos = self.next_matches(index).winner
                    matches[target][pos] = EntrantSpot.empty()

        return matches

    # ------------------------------------------------------------------ #
    # Progression                                                          #
    # ------------------------------------------------------------------ #

    def next_matches(self, index: int) -> NextMatches:
        if index < 0 or index >= self._final:
            return NextMatches()

        if index < self._lower:
            return self._upper_next(index)
        return self._lower_next(index)

    def _upper_next(self, index: int) -> NextMatches:
        r, pos = _locate(self._upper_rounds, index)

        if index == self._lower - 1:
            return NextMatches(winner=(self._final, 0), loser=(self._final - 1, 1))

        winner_round = self._upper_rounds[r + 1]
        winner = (winner_round.start + pos // 2, pos % 2)
        if r == 0:
            loser = (self._lower_rounds[0].start + pos // 2, pos % 2)
        else:
            loser = (self._lower_rounds[2 * r - 1].start + pos, 1)
        return NextMatches(winner=winner, loser=loser)

    def _lower_next(self, index: int) -> NextMatches:
        if index == self._final - 1:
            return NextMatches(winner=(self._final, 1))

        k, pos = _locate(self._lower_rounds, index)
        following = self._lower_rounds[k + 1]
        if k % 2 == 0:
            return NextMatches(winner=(following.start + pos, 0))
        return NextMatches(winner=(following.start + pos // 2, pos % 2))

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
            if result.loser[0].is_entrant:
                self._advance_byes(routing.loser[0])

    def _advance_byes(self, index: int) -> None:
        """Move a lone entrant through consecutive bye matches."""
        while True:
            match = self._matches[index]
            occupants = [spot for spot in match if spot.is_entrant]
            if not match.is_placeholder or len(occupants) != 1:
                return
            node = occupants[0].value
            node.data.set_winner(True)
            routing = self.next_matches(index)
            if routing.winner is None:
                return
            logger.debug("Match %d is a bye, entrant %d advances", index, node.index)
            target, pos = routing.winner
            self._matches[target][pos] = EntrantSpot.entrant(Node(node.index, self._data_factory()))
            index = target

    # ------------------------------------------------------------------ #
    # Rendering                                                            #
    # ------------------------------------------------------------------ #

    def next_bracket_round(self, rng: range) -> range:
        start = rng.start
        if start >= rng.stop:
            return range(start, start)
        stop = self._final if 0 < self._final and start < self._final else len(self._matches)
        return range(start, min(stop, rng.stop))

    def next_bracket(self, rng: range) -> range:
        start = rng.start
        if start >= rng.stop:
            return range(start, start)
        if not self._upper_rounds:
            stop = len(self._matches)
        elif start < self._lower:
            stop = self._lower
        elif start < self._final:
            stop = self._final
        else:
            stop = len(self._matches)
        return range(start, min(stop, rng.stop))

    def next_round(self, rng: range) -> range:
        start = rng.start
        if start >= rng.stop:
            return range(start, start)
        for round_ in (*self._upper_rounds, *self._lower_rounds):
            if round_.start == start:
                return range(start, min(round_.stop, rng.stop))
        return range(start, min(start + 1, rng.stop))

    def bracket_label(self, bracket: range) -> str | None:
        if not self._upper_rounds:
            return None
        if bracket.start < self._lower:
            return "Upper Bracket"
        if bracket.start < self._final:
            return "Lower Bracket"
        return "Final"


def _locate(rounds: list[range], index: int) -> tuple[int, int]:
    """(round number, position within round) of a match index."""
    for number, round_ in enumerate(rounds):
        if index in round_:
            return number, index - round_.start
    raise IndexError(f"match {index} is not part of this bracket")
