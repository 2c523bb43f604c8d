"""
Format-agnostic render tree.

Every format exposes three range cursors:

    next_bracket_round(range(start, end)) -> range
    next_bracket(range(start, end))       -> range
    next_round(range(start, end))         -> range

`start` is where the caller left off, `end` bounds the enclosing group. Each
returns the next group of match indices beginning at `start`, or an empty
range once nothing is left. The iterator classes below hold that cursor state
explicitly and nest as

    BracketRounds -> BracketRound -> Bracket -> Round -> match index

build_tree() turns the walk into Row / Column / MatchElement nodes and a
Renderer receives the finished tree. Renderers only lay things out; they never
need to know which format produced the tree.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Iterator, Protocol, Union

if TYPE_CHECKING:
    from bracketengine.models import Match
    from bracketengine.tournaments.base import System


class Position(str, Enum):
    """Advisory placement hint for a renderer."""

    START = "start"
    END = "end"
    SPACE_AROUND = "space_around"
    SPACE_BETWEEN = "space_between"


@dataclass
class MatchElement:
    index: int
    position: Position | None = None
    label: str | None = None


@dataclass
class Row:
    """Children laid out horizontally."""

    children: list[Element] = field(default_factory=list)
    label: str | None = None
    position: Position | None = None


@dataclass
class Column:
    """Children laid out vertically."""

    children: list[Element] = field(default_factory=list)
    label: str | None = None
    position: Position | None = None


Element = Union[Row, Column, MatchElement]


class Renderer(Protocol):
    def render(self, root: Element) -> None: ...


class RangeCursors(Protocol):
    """What the cursor iterators need from a format engine."""

    @property
    def matches(self) -> list[Match]: ...

    def next_bracket_round(self, rng: range) -> range: ...

    def next_bracket(self, rng: range) -> range: ...

    def next_round(self, rng: range) -> range: ...


# ------------------------------------------------------------------ #
# Cursor iterators                                                     #
# ------------------------------------------------------------------ #

class _Cursor:
    """Walks a bounded range by repeatedly asking the engine for the next group."""

    def __init__(self, system: RangeCursors, bounds: range) -> None:
        self._system = system
        self.range = bounds
        self._cursor = bounds.start

    def __iter__(self):
        return self

    def _advance(self) -> range:
        if self._cursor >= self.range.stop:
            raise StopIteration
        rng = self._next(range(self._cursor, self.range.stop))
        if not rng or rng.start != self._cursor:
            raise StopIteration
        rng = range(rng.start, min(rng.stop, self.range.stop))
        self._cursor = rng.stop
        return rng

    def _next(self, rng: range) -> range:
        raise NotImplementedError


class BracketRounds(_Cursor):
    """Top level: every bracket round of the engine."""

    def __init__(self, system: RangeCursors) -> None:
        super().__init__(system, range(len(system.matches)))

    def _next(self, rng: range) -> range:
        return self._system.next_bracket_round(rng)

    def __next__(self) -> BracketRound:
        return BracketRound(self._system, self._advance())


class BracketRound(_Cursor):
    def _next(self, rng: range) -> range:
        return self._system.next_bracket(rng)

    def __next__(self) -> Bracket:
        return Bracket(self._system, self._advance())


class Bracket(_Cursor):
    def _next(self, rng: range) -> range:
        return self._system.next_round(rng)

    def __next__(self) -> Round:
        return Round(self._advance())


class Round:
    """A contiguous run of match indices."""

    def __init__(self, rng: range) -> None:
        self.range = rng

    def __iter__(self) -> Iterator[int]:
        return iter(self.range)

    def __len__(self) -> int:
        return len(self.range)


# ------------------------------------------------------------------ #
# Tree construction                                                    #
# ------------------------------------------------------------------ #

def build_tree(system: System) -> Row:
    """
    Walk the engine's cursors and build the element tree.

    Root Row -> one Column per bracket round -> one Row per bracket ->
    one Column per round -> MatchElement leaves.
    """
    root = Row()
    for bracket_round in BracketRounds(system):
        round_column = Column()
        for bracket in bracket_round:
            bracket_row = Row(label=system.bracket_label(bracket.range))
            for round_ in bracket:
                bracket_row.children.append(
                    Column(
                        children=[
                            MatchElement(index=i, position=system.match_position(i))
                            for i in round_
                        ],
                        position=system.round_position,
                    )
                )
            round_column.children.append(bracket_row)
        root.children.append(round_column)
    return root
