"""Segments: the atomic styled runs a row is made of.

There are exactly four kinds of segment:

* :class:`Textual` -- styled text.
* :class:`Empty` -- a transparent, unstyled gap.
* :class:`Effect` -- a style-only run that tints whatever it is drawn over.
* :class:`HalfChar` -- one half of a double-width character that was cut by
  a clip boundary.

Segments are immutable values. Rows combine them through
:class:`charmi.row.Row`, which keeps adjacent compatible segments fused.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from charmi.style import PLAIN, ColorSupport, Style
from charmi.width import is_single_width, text_width


def _check_char(value: str, what: str) -> None:
    if len(value) != 1:
        raise ValueError(f"{what} must be a single character, got {value!r}")


def check_fill_char(value: str | None, what: str = "fill") -> None:
    """Reject a cell replacement that is not ``None`` or one column wide."""
    if value is None:
        return
    _check_char(value, what)
    if not is_single_width(value):
        raise ValueError(f"{what} must occupy exactly one column, got {value!r}")


@dataclass(frozen=True)
class Textual:
    text: str
    style: Style = PLAIN

    @property
    def width(self) -> int:
        return text_width(self.text)

    def with_effect(self, effect: Style) -> Textual:
        return Textual(self.text, self.style + effect)

    def render(self, support: ColorSupport = "truecolor") -> str:
        return self.style.apply(self.text, support)


@dataclass(frozen=True)
class Empty:
    length: int

    def __post_init__(self) -> None:
        if self.length < 0:
            raise ValueError(f"Gap length must not be negative: {self.length}")

    @property
    def width(self) -> int:
        return self.length

    def with_effect(self, effect: Style) -> Effect:
        return Effect(self.length, effect)

    def render(self, support: ColorSupport = "truecolor") -> str:
        return " " * self.length


@dataclass(frozen=True)
class Effect:
    length: int
    style: Style

    def __post_init__(self) -> None:
        if self.length < 0:
            raise ValueError(f"Effect length must not be negative: {self.length}")

    @property
    def width(self) -> int:
        return self.length

    def with_effect(self, effect: Style) -> Effect:
        return Effect(self.length, self.style + effect)

    def render(self, support: ColorSupport = "truecolor") -> str:
        return self.style.apply(" " * self.length, support)


@dataclass(frozen=True)
class HalfChar:
    """Left (``first_half``) or right half of a double-width character.

    ``replace_char`` is what is displayed while the half stays unpaired;
    ``None`` displays a space.
    """

    half_char: str
    replace_char: str | None
    first_half: bool
    style: Style = PLAIN

    def __post_init__(self) -> None:
        _check_char(self.half_char, "half_char")
        check_fill_char(self.replace_char, "replace_char")

    @property
    def width(self) -> int:
        return 1

    def with_effect(self, effect: Style) -> HalfChar:
        return HalfChar(self.half_char, self.replace_char, self.first_half, self.style + effect)

    def render(self, support: ColorSupport = "truecolor") -> str:
        return self.style.apply(self.replace_char or " ", support)


Segment = Union[Textual, Empty, Effect, HalfChar]
