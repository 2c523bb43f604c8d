"""
Tests for bracket YAML loading and result replay.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from bracketengine.config import BracketConfig, ResultEntry, load_config, parse_config
from bracketengine.tournaments import TournamentKind

EXAMPLE = Path(__file__).resolve().parent.parent / "config.example.yaml"


def write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "bracket.yaml"
    path.write_text(text, encoding="utf-8")
    return path


class TestLoadConfig:
    def test_example_file(self):
        config = load_config(EXAMPLE)
        assert config.format is TournamentKind.SINGLE_ELIMINATION
        assert config.entrants == ["Alpha", "Bravo", "Charlie", "Delta", "Echo", "Foxtrot"]
        assert config.options == {"third_place_match": True}
        assert config.results == [ResultEntry(match=0, winner=0), ResultEntry(match=1, winner=1)]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            load_config(tmp_path / "nope.yaml")

    def test_minimal_file(self, tmp_path):
        path = write(tmp_path, "format: swiss\nentrants: [A, B, C]\n")
        config = load_config(path)
        assert config == BracketConfig(format=TournamentKind.SWISS, entrants=["A", "B", "C"])

    def test_entrants_are_strings(self, tmp_path):
        path = write(tmp_path, "format: round_robin\nentrants: [1, 2]\n")
        assert load_config(path).entrants == ["1", "2"]


class TestParseConfig:
    @pytest.mark.parametrize(
        "raw, message",
        [
            ([], "expected a mapping"),
            ({"entrants": ["A"]}, "structure"),
            ({"format": "ladder"}, "Unknown tournament format"),
            ({"format": "swiss", "options": {"score_bye": -1}}, "options"),
            ({"format": "swiss", "options": {"rounds": 3}}, "options"),
            ({"format": "swiss", "results": [{"winner": 0}]}, "structure"),
            ({"format": "swiss", "results": [{"match": -1, "winner": 0}]}, "match index"),
            ({"format": "swiss", "results": [{"match": 0, "winner": 2}]}, "winner 0 or 1"),
            ({"format": "swiss", "results": [{"match": 0}]}, "winner 0 or 1"),
            (
                {"format": "swiss", "results": [{"match": 0, "winner": 1, "reset": True}]},
                "both winner and reset",
            ),
        ],
    )
    def test_invalid(self, raw, message):
        with pytest.raises(ValueError, match=message):
            parse_config(raw)

    def test_reset_entry(self):
        config = parse_config(
            {"format": "single_elimination", "entrants": ["A", "B"],
             "results": [{"match": 0, "reset": True}]}
        )
        assert config.results == [ResultEntry(match=0, reset=True)]


class TestBuild:
    def test_replays_results(self):
        tournament = load_config(EXAMPLE).build()
        assert tournament.option_values.get_bool("third_place_match")
        final_four = tournament.matches[4]
        assert [s.value.index for s in final_four] == [0, 5]

    def test_reset_replayed(self):
        config = parse_config(
            {
                "format": "single_elimination",
                "entrants": ["A", "B", "C", "D"],
                "results": [{"match": 0, "winner": 0}, {"match": 0, "reset": True}],
            }
        )
        tournament = config.build()
        assert tournament.matches[2][0].is_tbd
        assert not tournament.matches[0][0].value.data.winner

    def test_result_for_open_match_fails(self):
        config = parse_config(
            {"format": "single_elimination", "entrants": ["A", "B", "C", "D"],
             "results": [{"match": 2, "winner": 0}]}
        )
        with pytest.raises(ValueError, match="no entrant"):
            config.build()
