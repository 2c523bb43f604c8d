"""
Swiss tournament, paired with the Monrad system.

Round 0 plays seed 0 v 1, 2 v 3, ... Every later round is paired once the
round before it is complete: entrants are ranked by score (highest first,
lower seed first on ties) and neighbours in that ranking play each other.
With an odd field the entrant left at the bottom of the ranking sits the
round out and is credited a bye.

Rematches are not avoided.

Rounds:            ceil(log2(n))  (none for n <= 1)
Matches per round: n // 2

Completion is tracked in a per-match done table rather than by inspecting
the slots, so a reset match is unambiguously "not played" again.
"""

from __future__ import annotations

import logging
import math

from bracketengine.models import EntrantSpot, Match, MatchResult, NextMatches
from bracketengine.options import OptionKind, TournamentOptions
from bracketengine.render import Position
from bracketengine.standings import Standings, median_buchholz
from bracketengine.tournaments.base import System, UpdateFn

logger = logging.getLogger(__name__)

SCORE_WIN = "score_win"
SCORE_LOSS = "score_loss"
SCORE_BYE = "score_bye"


class Swiss(System):
    name = "swiss"
    round_position = Position.START

    @classmethod
    def options(cls) -> TournamentOptions:
        return (
            TournamentOptions.builder()
            .option(SCORE_WIN, "Score for a win", 1, OptionKind.U64)
            .option(SCORE_LOSS, "Score for a loss", 0, OptionKind.U64)
            .option(SCORE_BYE, "Score for a bye", 1, OptionKind.U64)
            .build()
        )

    @property
    def num_rounds(self) -> int:
        return self._rounds

    @property
    def matches_per_round(self) -> int:
        return len(self._entrants) // 2

    @property
    def scores(self) -> list[int]:
        """Current score of every entrant, by entrant index."""
        return list(self._scores)

    @property
    def matches_done(self) -> list[bool]:
        return list(self._done)

    # ------------------------------------------------------------------ #
    # Construction                                                         #
    # ------------------------------------------------------------------ #

    def _configure(self) -> None:
        n = len(self._entrants)
        self._rounds = math.ceil(math.log2(n)) if n > 1 else 0
        self._score_win = self._option_values.get_int(SCORE_WIN, OptionKind.U64)
        self._score_loss = self._option_values.get_int(SCORE_LOSS, OptionKind.U64)
        self._score_bye = self._option_values.get_int(SCORE_BYE, OptionKind.U64)
        self._scores: list[int] = [0] * n
        # match index -> (winner entrant, loser entrant) credited for it
        self._credited: dict[int, tuple[int | None, int | None]] = {}

    def _match_count(self) -> int:
        return self._rounds * self.matches_per_round

    def _build(self) -> list[Match]:
        matches = [
            Match([self._spot(i), self._spot(i + 1)])
            for i in range(0, self.matches_per_round * 2, 2)
        ]
        matches.extend(Match.tbd() for _ in range(self._match_count() - len(matches)))
        self._done = [False] * len(matches)
        self._built = 1 if matches else 0
        if matches:
            self._credit_byes(0, matches)
        return matches

    def _on_resume(self) -> None:
        self._done = [False] * len(self._matches)
        self._built = 0
        for round_ in range(self._rounds):
            if any(spot.is_tbd for match in self._round_matches(round_) for spot in match):
                break
            self._built += 1

        for index, match in enumerate(self._matches[: self._built * self.matches_per_round]):
            winner = next((s.value.index for s in match if s.is_entrant and s.value.data.winner), None)
            if winner is None:
                continue
            loser = next((s.value.index for s in match if s.is_entrant and s.value.index != winner), None)
            self._done[index] = True
            self._credited[index] = (winner, loser)
        self._recompute_scores()

    # ------------------------------------------------------------------ #
    # Progression                                                          #
    # ------------------------------------------------------------------ #

    def next_matches(self, index: int) -> NextMatches:
        return NextMatches()

    def update_match(self, index: int, fn: UpdateFn) -> None:
        collected = self._collect(index, fn)
        if collected is None:
            return
        match, result = collected
        round_ = index // self.matches_per_round

        if result.reset:
            self._reset_match(index)
            if self._done[index]:
                self._done[index] = False
                del self._credited[index]
                self._recompute_scores()
                logger.debug("Reset match %d, scores now %s", index, self._scores)
            return

        if round_ >= self._built:
            logger.warning("Ignoring result for match %d: round %d is not paired yet", index, round_)
            return

        self._mark_result(match, result)
        self._credit(index, result)
        self._build_next_round(round_)

    def _credit(self, index: int, result: MatchResult) -> None:
        """Record who won match `index`; a changed result replaces the old credit."""
        outcome = (_entrant_index(result.winner), _entrant_index(result.loser))
        if self._credited.get(index) == outcome:
            return
        if self._done[index]:
            logger.debug("Match %d corrected: %s -> %s", index, self._credited[index], outcome)
        self._done[index] = True
        self._credited[index] = outcome
        self._recompute_scores()

    def _build_next_round(self, round_: int) -> None:
        following = round_ + 1
        if following >= self._rounds or following != self._built:
            return
        start = round_ * self.matches_per_round
        if not all(self._done[start : start + self.matches_per_round]):
            return

        ranking = self.ranking()
        matches = self._round_matches(following)
        for k in range(len(matches)):
            matches[k] = Match([self._spot(ranking[2 * k]), self._spot(ranking[2 * k + 1])])
        self._built += 1
        self._credit_byes(following, matches)
        logger.info("Swiss round %d paired: %s", following, [(m[0].value.index, m[1].value.index) for m in matches])

    def _round_matches(self, round_: int) -> _RoundView:
        start = round_ * self.matches_per_round
        return _RoundView(self._matches, range(start, start + self.matches_per_round))

    def ranking(self) -> list[int]:
        """Entrant indices ordered by score descending, seed ascending."""
        return sorted(range(len(self._entrants)), key=lambda i: (-self._scores[i], i))

    # ------------------------------------------------------------------ #
    # Scores                                                               #
    # ------------------------------------------------------------------ #

    def _bye_of(self, matches) -> int | None:
        """The entrant absent from a fully paired round, for odd fields."""
        if len(self._entrants) % 2 == 0:
            return None
        seated = {spot.value.index for match in matches for spot in match if spot.is_entrant}
        missing = [i for i in range(len(self._entrants)) if i not in seated]
        return missing[0] if len(missing) == 1 else None

    def _credit_byes(self, round_: int, matches) -> None:
        bye = self._bye_of(matches)
        if bye is not None:
            self._scores[bye] += self._score_bye
            logger.debug("Entrant %d has a bye in round %d", bye, round_)

    def _recompute_scores(self) -> None:
        scores = [0] * len(self._entrants)
        for winner, loser in self._credited.values():
            if winner is not None:
                scores[winner] += self._score_win
            if loser is not None:
                scores[loser] += self._score_loss
        for round_ in range(self._built):
            bye = self._bye_of(self._round_matches(round_))
            if bye is not None:
                scores[bye] += self._score_bye
        self._scores = scores

    def standings(self) -> Standings:
        """
        Wins, losses, byes, score and median Buchholz per entrant.

        Only completed matches count. Buchholz runs over the win counts of
        every opponent faced. Sorted by (score, Buchholz) descending.
        """
        n = len(self._entrants)
        wins = [0] * n
        losses = [0] * n
        byes = [0] * n
        opponents: list[list[int]] = [[] for _ in range(n)]

        for round_ in range(self._built):
            start = round_ * self.matches_per_round
            for index in range(start, start + self.matches_per_round):
                if not self._done[index]:
                    continue
                winner, loser = self._credited[index]
                if winner is not None:
                    wins[winner] += 1
                if loser is not None:
                    losses[loser] += 1
                pair = [s.value.index for s in self._matches[index] if s.is_entrant]
                if len(pair) == 2:
                    opponents[pair[0]].append(pair[1])
                    opponents[pair[1]].append(pair[0])
            bye = self._bye_of(self._round_matches(round_))
            if bye is not None:
                byes[bye] += 1

        scores = [
            wins[i] * self._score_win + losses[i] * self._score_loss + byes[i] * self._score_bye
            for i in range(n)
        ]
        buchholz = [median_buchholz(wins[o] for o in opponents[i]) for i in range(n)]

        builder = (
            Standings.builder()
            .key("Wins").key("Losses").key("Byes").key("Score").key("Buchholz")
        )
        for i in sorted(range(n), key=lambda i: (-scores[i], -buchholz[i], i)):
            builder.entry(i, [wins[i], losses[i], byes[i], scores[i], buchholz[i]])
        return builder.build()

    # ------------------------------------------------------------------ #
    # Rendering                                                            #
    # ------------------------------------------------------------------ #

    def next_round(self, rng: range) -> range:
        start = rng.start
        if start >= rng.stop or self.matches_per_round == 0:
            return range(start, start)
        return range(start, min(start + self.matches_per_round, rng.stop))


class _RoundView:
    """Writable window over one round of the match list."""

    def __init__(self, matches: list[Match], rng: range) -> None:
        self._matches = matches
        self._range = rng

    def __len__(self) -> int:
        return len(self._range)

    def __iter__(self):
        return (self._matches[i] for i in self._range)

    def __getitem__(self, k: int) -> Match:
        return self._matches[self._range[k]]

    def __setitem__(self, k: int, match: Match) -> None:
        self._matches[self._range[k]] = match


def _entrant_index(outcome) -> int | None:
    if outcome is None or not outcome[0].is_entrant:
        return None
    return outcome[0].value
