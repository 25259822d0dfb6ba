"""Colors, text styles, and ANSI SGR rendering.

A :class:`Style` carries an optional foreground color, an optional
background color, and a set of text attributes. Colors come in three kinds
that mirror the three palette tiers a terminal may support: a named color
from the fixed 16-color palette, an indexed xterm-256 color, and an explicit
RGB triple.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Union

from charmi.errors import UnknownColorError

ColorSupport = Literal["truecolor", "ansi256", "basic", "plain"]

Attribute = Literal[
    "bold",
    "dim",
    "italic",
    "underlined",
    "slow_blink",
    "rapid_blink",
    "reverse",
    "hidden",
    "crossed_out",
]

ATTRIBUTE_CODES: dict[str, int] = {
    "bold": 1,
    "dim": 2,
    "italic": 3,
    "underlined": 4,
    "slow_blink": 5,
    "rapid_blink": 6,
    "reverse": 7,
    "hidden": 8,
    "crossed_out": 9,
}

RESET = "\x1b[0m"


# ---------------------------------------------------------------------------
# Colors
# ---------------------------------------------------------------------------

# Canonical palette order; the position is the xterm index of the color.
PALETTE_NAMES: tuple[str, ...] = (
    "black",
    "dark red",
    "dark green",
    "dark yellow",
    "dark blue",
    "dark magenta",
    "dark cyan",
    "grey",
    "dark grey",
    "red",
    "green",
    "yellow",
    "blue",
    "magenta",
    "cyan",
    "white",
)

_PALETTE_RGB: tuple[tuple[int, int, int], ...] = (
    (0, 0, 0),
    (128, 0, 0),
    (0, 128, 0),
    (128, 128, 0),
    (0, 0, 128),
    (128, 0, 128),
    (0, 128, 128),
    (192, 192, 192),
    (128, 128, 128),
    (255, 0, 0),
    (0, 255, 0),
    (255, 255, 0),
    (0, 0, 255),
    (255, 0, 255),
    (0, 255, 255),
    (255, 255, 255),
)

_CUBE_LEVELS = (0, 95, 135, 175, 215, 255)


@dataclass(frozen=True)
class NamedColor:
    """One of the 16 colors of the fixed named palette."""

    name: str

    def __post_init__(self) -> None:
        if self.name not in PALETTE_NAMES:
            raise UnknownColorError(self.name)

    @property
    def index(self) -> int:
        return PALETTE_NAMES.index(self.name)

    @property
    def rgb(self) -> tuple[int, int, int]:
        return _PALETTE_RGB[self.index]


@dataclass(frozen=True)
class AnsiColor:
    """An indexed color of the xterm 256-color palette."""

    index: int

    def __post_init__(self) -> None:
        if not 0 <= self.index <= 255:
            raise ValueError(f"ANSI color index out of range: {self.index}")

    @property
    def rgb(self) -> tuple[int, int, int]:
        return _ansi256_to_rgb(self.index)


@dataclass(frozen=True)
class RgbColor:
    """An explicit 24-bit color."""

    r: int
    g: int
    b: int

    def __post_init__(self) -> None:
        for channel in (self.r, self.g, self.b):
            if not 0 <= channel <= 255:
                raise ValueError(f"RGB channel out of range: {channel}")

    @property
    def rgb(self) -> tuple[int, int, int]:
        return (self.r, self.g, self.b)


Color = Union[NamedColor, AnsiColor, RgbColor]

BLACK = NamedColor("black")
DARK_RED = NamedColor("dark red")
DARK_GREEN = NamedColor("dark green")
DARK_YELLOW = NamedColor("dark yellow")
DARK_BLUE = NamedColor("dark blue")
DARK_MAGENTA = NamedColor("dark magenta")
DARK_CYAN = NamedColor("dark cyan")
GREY = NamedColor("grey")
DARK_GREY = NamedColor("dark grey")
RED = NamedColor("red")
GREEN = NamedColor("green")
YELLOW = NamedColor("yellow")
BLUE = NamedColor("blue")
MAGENTA = NamedColor("magenta")
CYAN = NamedColor("cyan")
WHITE = NamedColor("white")


# ---------------------------------------------------------------------------
# Named color lookup table (built once, on first use)
# ---------------------------------------------------------------------------

_COLOR_ALIASES: dict[str, str] = {
    "darkred": "dark red",
    "darkgreen": "dark green",
    "darkyellow": "dark yellow",
    "darkblue": "dark blue",
    "navy": "dark blue",
    "darkmagenta": "dark magenta",
    "purple": "dark magenta",
    "darkcyan": "dark cyan",
    "teal": "dark cyan",
    "gray": "grey",
    "darkgrey": "dark grey",
    "dark gray": "dark grey",
    "darkgray": "dark grey",
    "lime": "green",
    "aqua": "cyan",
}

_color_names: dict[str, NamedColor] | None = None


def _get_color_names() -> dict[str, NamedColor]:
    global _color_names
    if _color_names is None:
        table = {name: NamedColor(name) for name in PALETTE_NAMES}
        for alias, name in _COLOR_ALIASES.items():
            table[alias] = table[name]
        _color_names = table
    return _color_names


def named_color(name: str) -> NamedColor:
    """Resolve a (case-insensitive) color name or alias.

    Raises :class:`~charmi.errors.UnknownColorError` if the name is not in
    the palette.
    """
    color = _get_color_names().get(name.strip().lower())
    if color is None:
        raise UnknownColorError(name)
    return color


def to_color(value: Color | str | int | tuple[int, int, int] | list[int]) -> Color:
    """Coerce a color name, palette index, or RGB triple to a :data:`Color`."""
    if isinstance(value, (NamedColor, AnsiColor, RgbColor)):
        return value
    if isinstance(value, str):
        return named_color(value)
    if isinstance(value, bool):
        raise ValueError(f"Not a color: {value!r}")
    if isinstance(value, int):
        return AnsiColor(value)
    if isinstance(value, (tuple, list)) and len(value) == 3:
        r, g, b = value
        return RgbColor(r, g, b)
    raise ValueError(f"Not a color: {value!r}")


# ---------------------------------------------------------------------------
# Palette conversions
# ---------------------------------------------------------------------------


def _ansi256_to_rgb(index: int) -> tuple[int, int, int]:
    if index < 16:
        return _PALETTE_RGB[index]
    if index < 232:
        i = index - 16
        return (_CUBE_LEVELS[i // 36], _CUBE_LEVELS[(i // 6) % 6], _CUBE_LEVELS[i % 6])
    v = 8 + (index - 232) * 10
    return (v, v, v)


def _distance(a: tuple[int, int, int], b: tuple[int, int, int]) -> int:
    return (a[0] - b[0]) ** 2 + (a[1] - b[1]) ** 2 + (a[2] - b[2]) ** 2


def _cube_level(v: int) -> int:
    if v < 48:
        return 0
    if v < 115:
        return 1
    return (v - 35) // 40


def rgb_to_ansi256(r: int, g: int, b: int) -> int:
    """Return the xterm-256 index closest to the given RGB color."""
    ri, gi, bi = _cube_level(r), _cube_level(g), _cube_level(b)
    cube_index = 16 + 36 * ri + 6 * gi + bi
    cube_rgb = (_CUBE_LEVELS[ri], _CUBE_LEVELS[gi], _CUBE_LEVELS[bi])

    avg = (r + g + b) // 3
    gray_step = 23 if avg > 238 else max((avg - 3) // 10, 0)
    gray_value = 8 + gray_step * 10
    gray_index = 232 + gray_step

    if _distance((r, g, b), cube_rgb) <= _distance((r, g, b), (gray_value,) * 3):
        return cube_index
    return gray_index


def nearest_named(rgb: tuple[int, int, int]) -> NamedColor:
    """Return the named palette color closest to *rgb*."""
    best = min(range(len(PALETTE_NAMES)), key=lambda i: _distance(rgb, _PALETTE_RGB[i]))
    return NamedColor(PALETTE_NAMES[best])


def _color_params(color: Color, support: ColorSupport, background: bool) -> list[str]:
    """SGR parameters selecting *color* at the given support tier."""
    if support == "plain":
        return []

    if isinstance(color, AnsiColor) and support == "basic":
        color = NamedColor(PALETTE_NAMES[color.index]) if color.index < 16 else nearest_named(color.rgb)
    elif isinstance(color, RgbColor) and support == "basic":
        color = nearest_named(color.rgb)
    elif isinstance(color, RgbColor) and support == "ansi256":
        color = AnsiColor(rgb_to_ansi256(color.r, color.g, color.b))

    if isinstance(color, NamedColor):
        i = color.index
        base = 30 + i if i < 8 else 90 + (i - 8)
        return [str(base + 10 if background else base)]
    if isinstance(color, AnsiColor):
        return ["48" if background else "38", "5", str(color.index)]
    return ["48" if background else "38", "2", str(color.r), str(color.g), str(color.b)]


# ---------------------------------------------------------------------------
# Style
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Style:
    """Foreground, background, and attributes of a run of cells.

    Colors may be given as anything :func:`to_color` accepts; they are
    normalized on construction.
    """

    fg: Color | None = None
    bg: Color | None = None
    attributes: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if self.fg is not None:
            object.__setattr__(self, "fg", to_color(self.fg))
        if self.bg is not None:
            object.__setattr__(self, "bg", to_color(self.bg))
        attributes = frozenset(self.attributes)
        unknown = attributes - ATTRIBUTE_CODES.keys()
        if unknown:
            raise ValueError(f"Unknown text attributes: {sorted(unknown)}")
        object.__setattr__(self, "attributes", attributes)

    def merge(self, other: Style) -> Style:
        """Overlay *other* on this style: set fields of *other* win, attributes union."""
        return Style(
            fg=other.fg if other.fg is not None else self.fg,
            bg=other.bg if other.bg is not None else self.bg,
            attributes=self.attributes | other.attributes,
        )

    def __add__(self, other: Style) -> Style:
        return self.merge(other)

    def with_fg(self, color: Color | str | int | tuple[int, int, int] | None) -> Style:
        return Style(fg=color, bg=self.bg, attributes=self.attributes)

    def with_bg(self, color: Color | str | int | tuple[int, int, int] | None) -> Style:
        return Style(fg=self.fg, bg=color, attributes=self.attributes)

    def with_attributes(self, *names: Attribute) -> Style:
        return Style(fg=self.fg, bg=self.bg, attributes=self.attributes | frozenset(names))

    @property
    def is_plain(self) -> bool:
        return self.fg is None and self.bg is None and not self.attributes

    def sgr(self, support: ColorSupport = "truecolor") -> str:
        """Return the SGR escape sequence selecting this style, or ``""``."""
        if support == "plain" or self.is_plain:
            return ""
        params = [str(code) for code in sorted(ATTRIBUTE_CODES[a] for a in self.attributes)]
        if self.fg is not None:
            params.extend(_color_params(self.fg, support, background=False))
        if self.bg is not None:
            params.extend(_color_params(self.bg, support, background=True))
        return f"\x1b[{';'.join(params)}m"

    def apply(self, text: str, support: ColorSupport = "truecolor") -> str:
        """Wrap *text* in this style's SGR sequence and a reset."""
        code = self.sgr(support)
        if not code or not text:
            return text
        return f"{code}{text}{RESET}"


PLAIN = Style()
