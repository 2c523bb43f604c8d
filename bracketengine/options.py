"""
Options registry.

Each format advertises a schema (TournamentOptions): option key -> display
name + default value. Callers pass a plain value set (OptionValues or any
mapping), which is merged into the schema: unknown keys and mistyped values
are rejected, missing keys fall back to their defaults.

Values are stored as plain Python values; OptionKind describes which values a
key accepts. bool is never accepted where an integer is expected.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, Mapping

from bracketengine.errors import InvalidValue, MissingKey, UnknownKey

_I64_MIN = -(1 << 63)
_I64_MAX = (1 << 63) - 1
_U64_MAX = (1 << 64) - 1


class OptionKind(str, Enum):
    BOOL = "bool"
    I64 = "i64"
    U64 = "u64"
    STRING = "string"

    @classmethod
    def infer(cls, value: object) -> OptionKind | None:
        """Best-matching kind for a raw value, or None if no kind fits."""
        if isinstance(value, bool):
            return cls.BOOL
        if isinstance(value, int):
            if _I64_MAX < value <= _U64_MAX:
                return cls.U64
            return cls.I64 if _I64_MIN <= value <= _I64_MAX else None
        if isinstance(value, str):
            return cls.STRING
        return None

    def accepts(self, value: object) -> bool:
        match self:
            case OptionKind.BOOL:
                return isinstance(value, bool)
            case OptionKind.I64:
                return _is_int(value) and _I64_MIN <= value <= _I64_MAX
            case OptionKind.U64:
                return _is_int(value) and 0 <= value <= _U64_MAX
            case OptionKind.STRING:
                return isinstance(value, str)
        return False


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _describe(value: object) -> str:
    kind = OptionKind.infer(value)
    if kind is None:
        return type(value).__name__
    if kind is OptionKind.I64 and value >= 0:  # type: ignore[operator]
        # Non-negative ints satisfy both integer kinds.
        return "integer"
    return kind.value


@dataclass(frozen=True)
class TournamentOption:
    """One schema entry."""

    name: str    # human readable, for UI generation
    value: Any   # default
    kind: OptionKind

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "kind": self.kind.value, "default": self.value}


class OptionValues(Mapping[str, Any]):
    """A set of option values keyed by option key (no display names)."""

    def __init__(self, values: Mapping[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = dict(values or {})

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"OptionValues({self._values!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Mapping):
            return self._values == dict(other)
        return NotImplemented

    def get_bool(self, key: str) -> bool:
        return self._typed(key, OptionKind.BOOL)

    def get_int(self, key: str, kind: OptionKind = OptionKind.I64) -> int:
        return self._typed(key, kind)

    def get_str(self, key: str) -> str:
        return self._typed(key, OptionKind.STRING)

    def to_dict(self) -> dict[str, Any]:
        return dict(self._values)

    def _typed(self, key: str, kind: OptionKind) -> Any:
        if key not in self._values:
            raise MissingKey(key)
        value = self._values[key]
        if not kind.accepts(value):
            raise InvalidValue(key, _describe(value), kind.value)
        return value


class TournamentOptions(Mapping[str, TournamentOption]):
    """An options schema: key -> TournamentOption."""

    def __init__(self, options: Mapping[str, TournamentOption] | None = None) -> None:
        self._options: dict[str, TournamentOption] = dict(options or {})

    @classmethod
    def builder(cls) -> OptionsBuilder:
        return OptionsBuilder()

    def __getitem__(self, key: str) -> TournamentOption:
        return self._options[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._options)

    def __len__(self) -> int:
        return len(self._options)

    def __repr__(self) -> str:
        return f"TournamentOptions({self._options!r})"

    def defaults(self) -> OptionValues:
        return OptionValues({key: opt.value for key, opt in self._options.items()})

    def merge(self, values: Mapping[str, Any] | None = None) -> OptionValues:
        """
        Validate `values` against this schema and fill in missing defaults.

        Raises:
            UnknownKey:   a key is not defined by the schema.
            InvalidValue: a value does not match the kind of its default.
        """
        merged = self.defaults().to_dict()
        for key, value in (values or {}).items():
            option = self._options.get(key)
            if option is None:
                raise UnknownKey(key)
            if not option.kind.accepts(value):
                raise InvalidValue(key, _describe(value), option.kind.value)
            merged[key] = value
        return OptionValues(merged)

    def to_dict(self) -> dict[str, dict[str, Any]]:
        return {key: opt.to_dict() for key, opt in self._options.items()}


class OptionsBuilder:
    def __init__(self) -> None:
        self._options: dict[str, TournamentOption] = {}

    def option(
        self,
        key: str,
        name: str,
        default: Any,
        kind: OptionKind | None = None,
    ) -> OptionsBuilder:
        kind = kind or OptionKind.infer(default)
        if kind is None or not kind.accepts(default):
            raise ValueError(f"Unsupported default for option {key!r}: {default!r}")
        self._options[key] = TournamentOption(name=name, value=default, kind=kind)
        return self

    def build(self) -> TournamentOptions:
        return TournamentOptions(self._options)
