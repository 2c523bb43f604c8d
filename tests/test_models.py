"""
Tests for the shared data model and the standings builder.
"""

from __future__ import annotations

import unittest

import pytest

from bracketengine.models import (
    EntrantData,
    EntrantScore,
    EntrantSpot,
    Match,
    MatchResult,
    NextMatches,
    Node,
)
from bracketengine.standings import Standings


class EntrantSpotTests(unittest.TestCase):

    def test_kinds(self):
        self.assertTrue(EntrantSpot.entrant(3).is_entrant)
        self.assertTrue(EntrantSpot.empty().is_empty)
        self.assertTrue(EntrantSpot.tbd().is_tbd)

    def test_map_passes_gaps_through(self):
        self.assertEqual(EntrantSpot.entrant(2).map(lambda i: i * 10), EntrantSpot.entrant(20))
        self.assertEqual(EntrantSpot.empty().map(lambda i: i * 10), EntrantSpot.empty())
        self.assertEqual(EntrantSpot.tbd().map(lambda i: i * 10), EntrantSpot.tbd())

    def test_index_spots_are_hashable(self):
        spots = {EntrantSpot.entrant(1), EntrantSpot.entrant(1), EntrantSpot.empty(), EntrantSpot.tbd()}
        self.assertEqual(len(spots), 3)

    def test_node_spots_are_not_hashable(self):
        with self.assertRaises(TypeError):
            hash(EntrantSpot.entrant(Node(0)))

    def test_repr(self):
        self.assertEqual(repr(EntrantSpot.entrant(1)), "Entrant(1)")
        self.assertEqual(repr(EntrantSpot.empty()), "Empty")
        self.assertEqual(repr(EntrantSpot.tbd()), "TBD")


class MatchTests(unittest.TestCase):

    def test_exactly_two_slots(self):
        with self.assertRaises(ValueError):
            Match([EntrantSpot.tbd()])

    def test_placeholder(self):
        self.assertTrue(Match([EntrantSpot.entrant(Node(0)), EntrantSpot.empty()]).is_placeholder)
        self.assertFalse(Match.tbd().is_placeholder)

    def test_slot_of(self):
        match = Match([EntrantSpot.tbd(), EntrantSpot.entrant(Node(5))])
        self.assertEqual(match.slot_of(5), 1)
        self.assertIsNone(match.slot_of(0))

    def test_default_data(self):
        data = EntrantScore(score=3, winner=True)
        self.assertIsInstance(data, EntrantData)
        data.reset()
        self.assertEqual(data, EntrantScore())


class TestMatchResult:
    def test_defaults_use_factory(self):
        match = Match([EntrantSpot.entrant(Node(4)), EntrantSpot.entrant(Node(7))])
        result = MatchResult().winner_default(match[1]).loser_default(match[0])
        assert result.winner == (EntrantSpot.entrant(7), EntrantScore())
        assert result.loser == (EntrantSpot.entrant(4), EntrantScore())
        assert not result.reset

    def test_reset_default(self):
        result = MatchResult().reset_default()
        assert result.reset
        assert result.winner[0].is_tbd and result.loser[0].is_tbd

    def test_next_matches_terminal(self):
        assert NextMatches().is_terminal
        assert not NextMatches(loser=(3, 1)).is_terminal


class TestStandingsBuilder:
    def test_build(self):
        standings = (
            Standings.builder()
            .key("Wins")
            .key("Points")
            .entry(2, [3, 9])
            .entry(0, [1, 3])
            .build()
        )
        assert standings.keys == ["Wins", "Points"]
        assert [e.index for e in standings] == [2, 0]
        assert standings.as_rows()[0] == {"index": 2, "Wins": 3, "Points": 9}

    def test_value_count_must_match_keys(self):
        with pytest.raises(ValueError):
            Standings.builder().key("Wins").entry(0, [1, 2])

    def test_empty(self):
        assert len(Standings()) == 0
