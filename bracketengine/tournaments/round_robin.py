"""
Round robin via the circle method.

Entrants are padded to an even count m; with an odd n the extra seat m-1 is
a phantom and whoever faces it has a bye (an Empty slot). Seat 0 stays put
while every other seat rotates by one per round.

The schedule runs n-1 rounds. With an even n that is the full circle and
every pair meets exactly once; with an odd n the last rotation is not
played, so the pairs it would have produced never meet.

There is no progression: every match is terminal.
"""

from __future__ import annotations

import logging

from bracketengine.models import EntrantSpot, Match, NextMatches
from bracketengine.options import OptionKind, TournamentOptions
from bracketengine.render import Position
from bracketengine.standings import Standings
from bracketengine.tournaments.base import System, UpdateFn

logger = logging.getLogger(__name__)

SCORE_WIN = "score_win"
SCORE_LOSS = "score_loss"


def circle_entrant(seats: int, round_: int, position: int) -> int:
    """The entrant sitting at `position` in `round_` of a `seats`-seat circle."""
    if position == 0:
        return 0
    offset = position - round_
    if offset <= 0:
        return seats - abs(offset) - 1
    return offset


class RoundRobin(System):
    name = "round_robin"
    round_position = Position.START

    @classmethod
    def options(cls) -> TournamentOptions:
        return (
            TournamentOptions.builder()
            .option(SCORE_WIN, "Points for a win", 1, OptionKind.U64)
            .option(SCORE_LOSS, "Points for a loss", 0, OptionKind.U64)
            .build()
        )

    @property
    def num_rounds(self) -> int:
        return self._rounds

    @property
    def matches_per_round(self) -> int:
        return self._seats // 2

    def _configure(self) -> None:
        n = len(self._entrants)
        self._seats = n if n % 2 == 0 else n + 1
        # n - 1 rounds; a lone entrant still gets one round with a bye
        self._rounds = 1 if n == 1 else max(n - 1, 0)
        self._score_win = self._option_values.get_int(SCORE_WIN, OptionKind.U64)
        self._score_loss = self._option_values.get_int(SCORE_LOSS, OptionKind.U64)

    def _match_count(self) -> int:
        return self._rounds * self.matches_per_round

    def _build(self) -> list[Match]:
        n = len(self._entrants)
        matches = []
        for round_ in range(self._rounds):
            for k in range(self.matches_per_round):
                first = circle_entrant(self._seats, round_, k)
                second = circle_entrant(self._seats, round_, self._seats - k - 1)
                matches.append(
                    Match([
                        self._spot(first) if first < n else EntrantSpot.empty(),
                        self._spot(second) if second < n else EntrantSpot.empty(),
                    ])
                )
        return matches

    def next_matches(self, index: int) -> NextMatches:
        return NextMatches()

    def update_match(self, index: int, fn: UpdateFn) -> None:
        collected = self._collect(index, fn)
        if collected is None:
            return
        match, result = collected
        if result.reset:
            logger.debug("Resetting round robin match %d", index)
            self._reset_match(index)
            return
        self._mark_result(match, result)

    def next_round(self, rng: range) -> range:
        start = rng.start
        if start >= rng.stop or self.matches_per_round == 0:
            return range(start, start)
        return range(start, min(start + self.matches_per_round, rng.stop))

    def standings(self) -> Standings:
        """Wins, losses and points per entrant, best first (seed breaks ties)."""
        n = len(self._entrants)
        wins = [0] * n
        losses = [0] * n
        for match in self._matches:
            if match.is_placeholder:
                continue
            nodes = [spot.value for spot in match if spot.is_entrant]
            if len(nodes) != 2 or not any(node.data.winner for node in nodes):
                continue
            for node in nodes:
                if node.data.winner:
                    wins[node.index] += 1
                else:
                    losses[node.index] += 1

        points = [won * self._score_win + lost * self._score_loss for won, lost in zip(wins, losses)]
        builder = Standings.builder().key("Wins").key("Losses").key("Points")
        for i in sorted(range(n), key=lambda i: (-points[i], i)):
            builder.entry(i, [wins[i], losses[i], points[i]])
        return builder.build()
