"""
Data model shared by every tournament format.

Entrants are a plain list; an entrant's position in that list is its id
everywhere else. Matches are a list of Match objects, and a match's position
in that list is its permanent index. Which index belongs to which round (or
bracket) is derived by each format purely from the number of entrants and
its options.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Generic, Iterator, Protocol, TypeVar, runtime_checkable

T = TypeVar("T")
U = TypeVar("U")


class SpotKind(str, Enum):
    ENTRANT = "entrant"
    EMPTY = "empty"   # permanently vacant (a bye)
    TBD = "tbd"       # filled later by an upstream match


@dataclass(frozen=True)
class EntrantSpot(Generic[T]):
    """
    A single slot of a match: an occupant, a permanent gap, or not yet known.

    Hashable only when the occupant is; spots holding a Node are not.
    """

    kind: SpotKind
    value: T | None = None

    @classmethod
    def entrant(cls, value: T) -> EntrantSpot[T]:
        return cls(SpotKind.ENTRANT, value)

    @classmethod
    def empty(cls) -> EntrantSpot[Any]:
        return cls(SpotKind.EMPTY)

    @classmethod
    def tbd(cls) -> EntrantSpot[Any]:
        return cls(SpotKind.TBD)

    @property
    def is_entrant(self) -> bool:
        return self.kind is SpotKind.ENTRANT

    @property
    def is_empty(self) -> bool:
        return self.kind is SpotKind.EMPTY

    @property
    def is_tbd(self) -> bool:
        return self.kind is SpotKind.TBD

    def map(self, fn: Callable[[T], U]) -> EntrantSpot[U]:
        """Apply fn to the occupant; Empty and TBD pass through unchanged."""
        if self.is_entrant:
            return EntrantSpot(SpotKind.ENTRANT, fn(self.value))
        return EntrantSpot(self.kind)

    def __repr__(self) -> str:
        if self.is_entrant:
            return f"Entrant({self.value!r})"
        return "Empty" if self.is_empty else "TBD"


@runtime_checkable
class EntrantData(Protocol):
    """Per-slot auxiliary data carried by a Node."""

    winner: bool

    def reset(self) -> None: ...

    def set_winner(self, winner: bool) -> None: ...


@dataclass
class EntrantScore:
    """Default node data: a score and a winner flag."""

    score: int = 0
    winner: bool = False

    def reset(self) -> None:
        self.score = 0
        self.winner = False

    def set_winner(self, winner: bool) -> None:
        self.winner = winner


DataFactory = Callable[[], EntrantData]


@dataclass
class Node:
    """An entrant index placed in a match slot, plus that slot's data."""

    index: int
    data: Any = field(default_factory=EntrantScore)


@dataclass
class Match:
    """Exactly two slots, positions 0 and 1."""

    entrants: list[EntrantSpot[Node]]

    def __post_init__(self) -> None:
        self.entrants = list(self.entrants)
        if len(self.entrants) != 2:
            raise ValueError(f"a match has exactly 2 slots, got {len(self.entrants)}")

    @classmethod
    def tbd(cls) -> Match:
        return cls([EntrantSpot.tbd(), EntrantSpot.tbd()])

    @property
    def is_placeholder(self) -> bool:
        """True if either slot is permanently empty."""
        return any(spot.is_empty for spot in self.entrants)

    def slot_of(self, index: int) -> int | None:
        """Return the slot position holding entrant `index`, if any."""
        for pos, spot in enumerate(self.entrants):
            if spot.is_entrant and spot.value.index == index:
                return pos
        return None

    def __getitem__(self, pos: int) -> EntrantSpot[Node]:
        return self.entrants[pos]

    def __setitem__(self, pos: int, spot: EntrantSpot[Node]) -> None:
        self.entrants[pos] = spot

    def __iter__(self) -> Iterator[EntrantSpot[Node]]:
        return iter(self.entrants)

    def __len__(self) -> int:
        return 2


# (spot of an entrant index, data for the slot it moves into)
Outcome = tuple[EntrantSpot[int], Any]


@dataclass
class MatchResult:
    """
    Collected by the callback passed to update_match().

    `winner` and `loser` name the entrant leaving this match and carry the
    data that entrant starts its next match with. `reset` asks the engine to
    undo this match and everything it already fed downstream.
    """

    data_factory: DataFactory = field(default=EntrantScore, repr=False, compare=False)
    winner: Outcome | None = None
    loser: Outcome | None = None
    reset: bool = False

    def set_winner(self, spot: EntrantSpot[Node], data: Any) -> MatchResult:
        self.winner = (_index_spot(spot), data)
        return self

    def set_loser(self, spot: EntrantSpot[Node], data: Any) -> MatchResult:
        self.loser = (_index_spot(spot), data)
        return self

    def winner_default(self, spot: EntrantSpot[Node]) -> MatchResult:
        return self.set_winner(spot, self.data_factory())

    def loser_default(self, spot: EntrantSpot[Node]) -> MatchResult:
        return self.set_loser(spot, self.data_factory())

    def reset_default(self) -> MatchResult:
        self.winner = (EntrantSpot.tbd(), self.data_factory())
        self.loser = (EntrantSpot.tbd(), self.data_factory())
        self.reset = True
        return self


def _index_spot(spot: EntrantSpot[Node]) -> EntrantSpot[int]:
    return spot.map(lambda node: node.index)


@dataclass(frozen=True)
class NextMatches:
    """Where the winner and loser of a match go: (match index, slot position)."""

    winner: tuple[int, int] | None = None
    loser: tuple[int, int] | None = None

    @property
    def is_terminal(self) -> bool:
        return self.winner is None and self.loser is None
