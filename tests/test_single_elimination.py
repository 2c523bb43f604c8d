"""
Tests for SingleElimination: bracket layout, bye forwarding, result
propagation, third-place routing, reset and resume validation.
"""

from __future__ import annotations

import unittest

import pytest

from bracketengine.errors import InvalidEntrant, InvalidNumberOfMatches, InvalidValue, UnknownKey
from bracketengine.models import EntrantSpot, Match, NextMatches, Node
from bracketengine.render import Position
from bracketengine.tournaments import SingleElimination, next_power_of_two


# --------------------------------------------------------------------------- #
# Helpers                                                                      #
# --------------------------------------------------------------------------- #

def make_entrants(n: int) -> list[str]:
    return [f"P{i}" for i in range(n)]


def slot(spot: EntrantSpot) -> int | str:
    if spot.is_entrant:
        return spot.value.index
    return "-" if spot.is_empty else "?"


def layout(matches: list[Match]) -> list[tuple]:
    """Matches as tuples of entrant indices, "-" for Empty and "?" for TBD."""
    return [tuple(slot(s) for s in m) for m in matches]


def win(position: int):
    """Update callback: the entrant in `position` beats the other one."""
    def _apply(match, result):
        result.winner_default(match[position])
        result.loser_default(match[1 - position])
    return _apply


def expected_count(n: int, third_place: bool = False) -> int:
    if n == 0:
        return 0
    if n <= 2:
        return 1
    return next_power_of_two(n) - 1 + int(third_place)


# --------------------------------------------------------------------------- #
# Layout                                                                       #
# --------------------------------------------------------------------------- #

class TestLayout:
    @pytest.mark.parametrize("third_place", [False, True])
    def test_match_count_and_bounds(self, third_place):
        for n in range(0, 33):
            bracket = SingleElimination(
                make_entrants(n), {"third_place_match": third_place}
            )
            assert len(bracket.matches) == expected_count(n, third_place), n
            for match in bracket.matches:
                for spot in match:
                    if spot.is_entrant:
                        assert 0 <= spot.value.index < n

    def test_no_entrants(self):
        assert SingleElimination([]).matches == []

    def test_one_entrant_gets_a_bye(self):
        assert layout(SingleElimination(make_entrants(1)).matches) == [(0, "-")]

    def test_two_entrants(self):
        assert layout(SingleElimination(make_entrants(2)).matches) == [(0, 1)]

    def test_four_entrants(self):
        bracket = SingleElimination(make_entrants(4))
        assert layout(bracket.matches) == [(0, 2), (1, 3), ("?", "?")]

    def test_fresh_nodes_carry_default_data(self):
        bracket = SingleElimination(make_entrants(2))
        assert bracket.matches[0] == Match([EntrantSpot.entrant(Node(0)), EntrantSpot.entrant(Node(1))])

    def test_three_entrants_forward_the_bye(self):
        bracket = SingleElimination(make_entrants(3))
        assert layout(bracket.matches) == [(0, 2), (1, "-"), ("?", 1)]

    def test_five_entrants_forward_three_byes(self):
        bracket = SingleElimination(make_entrants(5))
        assert layout(bracket.matches) == [
            (0, 4), (1, "-"), (2, "-"), (3, "-"),
            ("?", 1), (2, 3),
            ("?", "?"),
        ]

    def test_third_place_match_appended(self):
        bracket = SingleElimination(make_entrants(4), {"third_place_match": True})
        assert layout(bracket.matches) == [(0, 2), (1, 3), ("?", "?"), ("?", "?")]
        assert bracket.third_place_match

    def test_third_place_ignored_for_two_entrants(self):
        bracket = SingleElimination(make_entrants(2), {"third_place_match": True})
        assert len(bracket.matches) == 1
        assert not bracket.third_place_match

    def test_bye_semifinal_leaves_third_place_slot_empty(self):
        bracket = SingleElimination(make_entrants(3), {"third_place_match": True})
        assert layout(bracket.matches) == [(0, 2), (1, "-"), ("?", 1), ("?", "-")]


# --------------------------------------------------------------------------- #
# Routing                                                                      #
# --------------------------------------------------------------------------- #

class TestNextMatches:
    def test_eight_entrants(self):
        bracket = SingleElimination(make_entrants(8))
        assert bracket.next_matches(0) == NextMatches(winner=(4, 0))
        assert bracket.next_matches(3) == NextMatches(winner=(5, 1))
        assert bracket.next_matches(5) == NextMatches(winner=(6, 1))
        assert bracket.next_matches(6).is_terminal

    def test_semifinal_losers_go_to_third_place(self):
        bracket = SingleElimination(make_entrants(8), {"third_place_match": True})
        assert bracket.next_matches(0) == NextMatches(winner=(4, 0))
        assert bracket.next_matches(4) == NextMatches(winner=(6, 0), loser=(7, 0))
        assert bracket.next_matches(5) == NextMatches(winner=(6, 1), loser=(7, 1))
        assert bracket.next_matches(6).is_terminal
        assert bracket.next_matches(7).is_terminal

    def test_out_of_range_is_terminal(self):
        bracket = SingleElimination(make_entrants(4))
        assert bracket.next_matches(99).is_terminal


# --------------------------------------------------------------------------- #
# Updates                                                                      #
# --------------------------------------------------------------------------- #

class UpdateMatchTests(unittest.TestCase):

    def test_results_fill_the_final(self):
        bracket = SingleElimination(make_entrants(4))

        bracket.update_match(0, win(0))
        self.assertEqual(layout(bracket.matches)[2], (0, "?"))

        bracket.update_match(1, win(1))
        self.assertEqual(layout(bracket.matches)[2], (0, 3))

    def test_winner_flag_recorded_on_played_match(self):
        bracket = SingleElimination(make_entrants(4))
        bracket.update_match(1, win(1))
        self.assertTrue(bracket.matches[1][1].value.data.winner)
        self.assertFalse(bracket.matches[1][0].value.data.winner)

    def test_result_data_starts_next_match(self):
        bracket = SingleElimination(make_entrants(4))

        def _apply(match, result):
            data = bracket.data_factory()
            data.score = 7
            result.set_winner(match[0], data)

        bracket.update_match(0, _apply)
        self.assertEqual(bracket.matches[2][0].value.data.score, 7)

    def test_third_place_match_receives_losers(self):
        bracket = SingleElimination(make_entrants(4), {"third_place_match": True})
        bracket.update_match(0, win(0))
        bracket.update_match(1, win(1))
        self.assertEqual(layout(bracket.matches)[2:], [(0, 3), (2, 1)])

    def test_out_of_range_update_is_ignored(self):
        bracket = SingleElimination(make_entrants(4))
        calls = []
        bracket.update_match(99, lambda m, r: calls.append(m))
        self.assertEqual(calls, [])
        self.assertEqual(layout(bracket.matches), [(0, 2), (1, 3), ("?", "?")])

    def test_finished_after_final(self):
        bracket = SingleElimination(make_entrants(4))
        for index in range(3):
            self.assertFalse(bracket.is_finished())
            bracket.update_match(index, win(0))
        self.assertTrue(bracket.is_finished())


class ResetTests(unittest.TestCase):

    def _played(self) -> SingleElimination:
        bracket = SingleElimination(make_entrants(8))
        for index in range(4):
            bracket.update_match(index, win(0))
        bracket.update_match(4, win(0))
        return bracket

    def test_reset_clears_downstream_chain(self):
        bracket = self._played()
        self.assertEqual(layout(bracket.matches)[4:], [(0, 1), (2, 3), (0, "?")])

        bracket.update_match(0, lambda m, r: r.reset_default())

        self.assertEqual(layout(bracket.matches)[4:], [("?", 1), (2, 3), ("?", "?")])
        self.assertFalse(bracket.matches[0][0].value.data.winner)
        self.assertFalse(bracket.matches[4][1].value.data.winner)

    def test_reset_is_idempotent(self):
        bracket = self._played()
        bracket.update_match(0, lambda m, r: r.reset_default())
        once = layout(bracket.matches)
        bracket.update_match(0, lambda m, r: r.reset_default())
        self.assertEqual(layout(bracket.matches), once)

    def test_reset_clears_third_place_slot(self):
        bracket = SingleElimination(make_entrants(4), {"third_place_match": True})
        bracket.update_match(0, win(0))
        bracket.update_match(0, lambda m, r: r.reset_default())
        self.assertEqual(layout(bracket.matches)[2:], [("?", "?"), ("?", "?")])

    def test_reset_of_bye_keeps_forwarded_entrant(self):
        bracket = SingleElimination(make_entrants(3))
        bracket.update_match(1, lambda m, r: r.reset_default())
        self.assertEqual(layout(bracket.matches), [(0, 2), (1, "-"), ("?", 1)])


# --------------------------------------------------------------------------- #
# Resume                                                                       #
# --------------------------------------------------------------------------- #

class TestResume:
    def test_round_trip(self):
        entrants = make_entrants(6)
        bracket = SingleElimination(entrants)
        bracket.update_match(0, win(1))
        resumed = SingleElimination.resume(entrants, bracket.matches)
        assert resumed.matches == bracket.matches

    def test_wrong_match_count(self):
        entrants = make_entrants(4)
        matches = SingleElimination(entrants).matches[:2]
        with pytest.raises(InvalidNumberOfMatches) as info:
            SingleElimination.resume(entrants, matches)
        assert (info.value.expected, info.value.found) == (3, 2)

    def test_third_place_changes_expected_count(self):
        entrants = make_entrants(4)
        matches = SingleElimination(entrants).matches
        with pytest.raises(InvalidNumberOfMatches) as info:
            SingleElimination.resume(entrants, matches, {"third_place_match": True})
        assert (info.value.expected, info.value.found) == (4, 3)

    def test_entrant_out_of_bounds(self):
        entrants = make_entrants(4)
        matches = SingleElimination(entrants).matches
        matches[2] = Match([EntrantSpot.entrant(Node(9)), EntrantSpot.tbd()])
        with pytest.raises(InvalidEntrant) as info:
            SingleElimination.resume(entrants, matches)
        assert (info.value.index, info.value.length) == (9, 4)
        assert "only 4 entrants" in str(info.value)


# --------------------------------------------------------------------------- #
# Options & rendering                                                          #
# --------------------------------------------------------------------------- #

class TestOptions:
    def test_schema(self):
        schema = SingleElimination.options()
        assert list(schema) == ["third_place_match"]
        assert schema["third_place_match"].value is False
        assert schema["third_place_match"].name == "Include a match for the third place"

    def test_unknown_option(self):
        with pytest.raises(UnknownKey):
            SingleElimination(make_entrants(4), {"best_of": 3})

    def test_mistyped_option(self):
        with pytest.raises(InvalidValue):
            SingleElimination(make_entrants(4), {"third_place_match": 1})


class TestRounds:
    def test_round_ranges(self):
        bracket = SingleElimination(make_entrants(8))
        assert bracket.next_round(range(0, 7)) == range(0, 4)
        assert bracket.next_round(range(4, 7)) == range(4, 6)
        assert bracket.next_round(range(6, 7)) == range(6, 7)
        assert not bracket.next_round(range(7, 7))

    def test_third_place_shares_final_round(self):
        bracket = SingleElimination(make_entrants(8), {"third_place_match": True})
        assert bracket.next_round(range(6, 8)) == range(6, 8)
        assert bracket.match_position(7) is Position.END
        assert bracket.match_position(6) is None

    def test_single_match(self):
        bracket = SingleElimination(make_entrants(1))
        assert bracket.next_round(range(0, 1)) == range(0, 1)
