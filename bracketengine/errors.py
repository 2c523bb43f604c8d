"""
Exception hierarchy for the bracket engine.

Resume errors are raised only while reconstructing an engine from persisted
matches. Option errors are raised while merging configuration values, before
any engine exists. Both branches subclass ValueError so callers that treat
bad input generically (the CLI, config loading) can catch them together.
"""

from __future__ import annotations


class BracketError(Exception):
    """Base class for every error raised by bracketengine."""


# ------------------------------------------------------------------ #
# Resume / validation                                                  #
# ------------------------------------------------------------------ #

class ResumeError(BracketError, ValueError):
    """Persisted matches do not describe a valid bracket."""


class InvalidNumberOfMatches(ResumeError):
    def __init__(self, expected: int, found: int) -> None:
        self.expected = expected
        self.found = found
        super().__init__(f"invalid number of matches: expected {expected}, found {found}")


class InvalidEntrant(ResumeError):
    def __init__(self, index: int, length: int) -> None:
        self.index = index
        self.length = length
        super().__init__(
            f"invalid entrant: match refers to entrant at {index} "
            f"but only {length} entrants are given"
        )


# ------------------------------------------------------------------ #
# Options                                                              #
# ------------------------------------------------------------------ #

class OptionsError(BracketError, ValueError):
    """An option value set does not fit its schema."""


class UnknownKey(OptionsError):
    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"unknown option key: {key!r}")


class MissingKey(OptionsError):
    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"missing option key: {key!r}")


class InvalidValue(OptionsError):
    def __init__(self, key: str, found: str, expected: str) -> None:
        self.key = key
        self.found = found
        self.expected = expected
        super().__init__(f"invalid value for option {key!r}: found {found}, expected {expected}")
