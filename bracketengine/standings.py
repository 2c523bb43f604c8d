"""
Standings tables.

A Standings object is a list of column keys plus one entry per ranked
entrant, already sorted. Values are plain Python scalars (bool, int, float,
str) in the same order as the keys.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, Union

EntryValue = Union[bool, int, float, str]


@dataclass
class StandingsEntry:
    index: int   # entrant index
    values: list[EntryValue] = field(default_factory=list)


@dataclass
class Standings:
    keys: list[str] = field(default_factory=list)
    entries: list[StandingsEntry] = field(default_factory=list)

    @classmethod
    def builder(cls) -> StandingsBuilder:
        return StandingsBuilder()

    def __iter__(self) -> Iterator[StandingsEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def as_rows(self) -> list[dict[str, EntryValue]]:
        """One {key: value} dict per entry, plus the entrant index under "index"."""
        return [
            {"index": entry.index, **dict(zip(self.keys, entry.values))}
            for entry in self.entries
        ]


class StandingsBuilder:
    def __init__(self) -> None:
        self._keys: list[str] = []
        self._entries: list[StandingsEntry] = []

    def key(self, key: str) -> StandingsBuilder:
        self._keys.append(key)
        return self

    def entry(self, index: int, values: Iterable[EntryValue]) -> StandingsBuilder:
        values = list(values)
        if len(values) != len(self._keys):
            raise ValueError(
                f"standings entry for {index} has {len(values)} values, "
                f"expected {len(self._keys)}"
            )
        self._entries.append(StandingsEntry(index=index, values=values))
        return self

    def build(self) -> Standings:
        return Standings(keys=list(self._keys), entries=list(self._entries))


def median_buchholz(values: Iterable[int]) -> int:
    """
    Sum opponent values with a running extreme-value exclusion.

    The highest value seen so far and the lowest value seen so far are held
    back. A value displaced from the high slot is offered to the low slot,
    and a value displaced from the low slot is added to the total, so both
    extremes are treated alike whatever order the values arrive in.
    Whatever is held back at the end is never counted.
    """
    total = 0
    highest: int | None = None
    lowest: int | None = None
    for value in values:
        if highest is None or value > highest:
            highest, value = value, highest
            if value is None:
                continue
        if lowest is None or value < lowest:
            lowest, value = value, lowest
            if value is None:
                continue
        total += value
    return total
