"""Exception types raised by charmi."""

from __future__ import annotations


class CharmiError(Exception):
    """Base class for all charmi errors."""


class DefinitionParseError(CharmiError, ValueError):
    """A definition could not be parsed (bad TOML or wrong field types)."""


class UnknownColorError(CharmiError, LookupError):
    """A named color is not part of the fixed palette."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown color name: {name!r}")
        self.name = name


class AlphabetExhaustedError(CharmiError, RuntimeError):
    """Encoding ran out of candidate gap or color-index characters."""
