"""Compact character-grid definitions of images, animations, and actors.

An image definition stores three parallel character planes:

* ``text`` -- the literal characters, with a configurable *gap* character
  marking transparent cells;
* ``fg`` and ``bg`` -- one index character per display column, looked up in
  ``values.colors``; a space means "no color".

Definitions are pydantic models, read from TOML with :mod:`tomllib` and
written with :mod:`tomli_w`.
"""

from __future__ import annotations

import logging
import tomllib
from itertools import zip_longest
from typing import Any, Iterator, TypeVar, Union

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from charmi.config import DecodeOptions
from charmi.errors import AlphabetExhaustedError, DefinitionParseError, UnknownColorError
from charmi.image import Image
from charmi.row import Row
from charmi.segment import Effect, Empty, HalfChar, Textual
from charmi.style import PLAIN, AnsiColor, Color, NamedColor, Style, to_color
from charmi.width import char_width, is_single_width, text_width

logger = logging.getLogger(__name__)

ColorDef = Union[str, int, tuple[int, int, int]]

# Never '\' or '"'; the color alphabet also never contains ' ', which means
# "no color" in the fg/bg planes.
GAP_CANDIDATES = " -_=~*+,./;!#$%&':?@^`|{}[]<>()0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"
COLOR_CANDIDATES = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ!#$%&'()*+,-./0123456789:;<=>?@[]^_`{|}~"


# --- Models ---


def _check_single_char(value: str) -> str:
    if len(value) != 1:
        raise ValueError(f"must be a single character, got {value!r}")
    return value


class Values(BaseModel):
    """Lookup tables shared by the planes of a definition."""

    model_config = ConfigDict(populate_by_name=True)

    colors: dict[str, ColorDef] | None = None
    attr: dict[str, str] | None = None
    gap: str | None = None

    @field_validator("gap")
    @classmethod
    def check_gap(cls, value: str | None) -> str | None:
        return None if value is None else _check_single_char(value)

    @field_validator("colors", "attr")
    @classmethod
    def check_char_keys(cls, value: dict[str, Any] | None) -> dict[str, Any] | None:
        if value is not None:
            for key in value:
                _check_single_char(key)
        return value

    def merge(self, other: Values) -> Values:
        """Layer *other* over this block; *other* wins on every conflict."""
        return Values(
            colors=_merge_maps(self.colors, other.colors),
            attr=_merge_maps(self.attr, other.attr),
            gap=other.gap if other.gap is not None else self.gap,
        )

    def __add__(self, other: Values) -> Values:
        return self.merge(other)


def _merge_maps(lower: dict[str, Any] | None, upper: dict[str, Any] | None) -> dict[str, Any] | None:
    if lower is None:
        return None if upper is None else dict(upper)
    if upper is None:
        return dict(lower)
    return {**lower, **upper}


def layer_values(lower: Values | None, upper: Values | None) -> Values | None:
    """``lower + upper`` where either side may be missing."""
    if lower is None:
        return upper
    if upper is None:
        return lower
    return lower + upper


_ModelT = TypeVar("_ModelT", bound="_TomlModel")


class _TomlModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_toml(cls: type[_ModelT], text: str) -> _ModelT:
        """Parse and validate TOML *text*.

        Raises :class:`~charmi.errors.DefinitionParseError` for malformed
        TOML or fields of the wrong shape.
        """
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as e:
            raise DefinitionParseError(f"Invalid TOML: {e}") from e
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise DefinitionParseError(f"Invalid {cls.__name__}: {e}") from e

    def to_toml(self) -> str:
        return tomli_w.dumps(self.model_dump(mode="json", by_alias=True, exclude_none=True))


class ImageDef(_TomlModel):
    text: str | None = None
    fg: str | None = None
    bg: str | None = None
    attr: str | None = None  # reserved, carried through unchanged
    values: Values | None = None


class FrameDef(ImageDef):
    timing: float = Field(ge=0)


class AnimationDef(_TomlModel):
    frames: list[FrameDef] = Field(default_factory=list, alias="f")
    values: Values | None = None


class ActorDef(_TomlModel):
    animations: dict[str, AnimationDef] = Field(default_factory=dict, alias="a")
    values: Values | None = None


# --- Colors ---


def color_to_def(color: Color) -> ColorDef:
    if isinstance(color, NamedColor):
        return color.name
    if isinstance(color, AnsiColor):
        return color.index
    return (color.r, color.g, color.b)


def color_from_def(value: ColorDef) -> Color:
    """Resolve a color definition; raises ``UnknownColorError`` for bad names."""
    if isinstance(value, list):
        value = tuple(value)
    return to_color(value)


def _color_map(values: Values, options: DecodeOptions) -> dict[str, Color]:
    colors: dict[str, Color] = {}
    for key, value in (values.colors or {}).items():
        try:
            colors[key] = color_from_def(value)
        except UnknownColorError:
            if options.strict_colors:
                raise
            logger.warning("Unknown color %r for index %r; leaving those cells uncolored", value, key)
        except ValueError as e:
            raise DefinitionParseError(f"Invalid color for index {key!r}: {e}") from e
    return colors


# --- Encoding ---


def _alphabet(preferred: str) -> Iterator[str]:
    yield from preferred
    for cp in range(0x80, 0x110000):
        if 0xD800 <= cp <= 0xDFFF:
            continue
        ch = chr(cp)
        if is_single_width(ch):
            yield ch


def _pick_gap_char(used: set[str]) -> str:
    for ch in _alphabet(GAP_CANDIDATES):
        if ch not in used:
            return ch
    raise AlphabetExhaustedError("No unused character left for the gap")


def _assign_color_chars(colors: list[Color]) -> dict[Color, str]:
    alphabet = _alphabet(COLOR_CANDIDATES)
    assigned: dict[Color, str] = {}
    for color in colors:
        ch = next(alphabet, None)
        if ch is None:
            raise AlphabetExhaustedError(f"No index character left for {len(colors)} colors")
        assigned[color] = ch
    return assigned


def _join_plane(lines: list[str]) -> str | None:
    text = "\n".join(lines).rstrip("\n")
    return text + "\n" if text else None


def encode_image(image: Image) -> ImageDef:
    """Encode *image* as a definition.

    Text attributes are not encoded, and rows that hold nothing but gaps
    come back empty on decode.
    """
    used_chars: set[str] = set()
    used_colors: dict[Color, None] = {}

    def note_style(style: Style) -> None:
        for color in (style.fg, style.bg):
            if color is not None:
                used_colors.setdefault(color)

    for row in image:
        for segment in row:
            match segment:
                case Textual(text=text, style=style):
                    used_chars.update(text)
                    note_style(style)
                case HalfChar(replace_char=replace_char, style=style):
                    used_chars.add(replace_char or " ")
                    note_style(style)
                case Effect(style=style):
                    note_style(style)
                case Empty():
                    pass

    gap = _pick_gap_char(used_chars)
    color_chars = _assign_color_chars(list(used_colors))
    logger.debug("Encoding image with gap %r and %d colors", gap, len(color_chars))

    def index(color: Color | None) -> str:
        return " " if color is None else color_chars[color]

    text_lines: list[str] = []
    fg_lines: list[str] = []
    bg_lines: list[str] = []
    for row in image:
        text: list[str] = []
        fg: list[str] = []
        bg: list[str] = []
        for segment in row:
            match segment:
                case Empty(length=length):
                    text.append(gap * length)
                    fg.append(" " * length)
                    bg.append(" " * length)
                case Effect(length=length, style=style):
                    text.append(gap * length)
                    fg.append(index(style.fg) * length)
                    bg.append(index(style.bg) * length)
                case HalfChar(replace_char=replace_char, style=style):
                    text.append(replace_char or " ")
                    fg.append(index(style.fg))
                    bg.append(index(style.bg))
                case Textual(text=chars, style=style):
                    for ch in chars:
                        columns = char_width(ch)
                        text.append(ch)
                        fg.append(index(style.fg) * columns)
                        bg.append(index(style.bg) * columns)
        text_lines.append("".join(text).rstrip(gap))
        fg_lines.append("".join(fg).rstrip(" "))
        bg_lines.append("".join(bg).rstrip(" "))

    values = None
    if gap != " " or color_chars:
        values = Values(
            colors={ch: color_to_def(color) for color, ch in color_chars.items()} or None,
            gap=gap if gap != " " else None,
        )
    return ImageDef(
        text=_join_plane(text_lines),
        fg=_join_plane(fg_lines),
        bg=_join_plane(bg_lines),
        values=values,
    )


# --- Decoding ---


def _split_lines(text: str | None) -> list[str]:
    """Split on ``\\n`` (dropping one trailing newline and any ``\\r``)."""
    if not text:
        return []
    if text.endswith("\n"):
        text = text[:-1]
    return [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]


def _style_rows(defn: ImageDef, colors: dict[str, Color]) -> list[list[Style | None]]:
    fg_lines = [line.rstrip(" ") for line in _split_lines(defn.fg)]
    bg_lines = [line.rstrip(" ") for line in _split_lines(defn.bg)]
    rows: list[list[Style | None]] = []
    for fg_line, bg_line in zip_longest(fg_lines, bg_lines, fillvalue=""):
        cells: list[Style | None] = []
        for fg_ch, bg_ch in zip_longest(fg_line, bg_line):
            fg = colors.get(fg_ch) if fg_ch is not None else None
            bg = colors.get(bg_ch) if bg_ch is not None else None
            cells.append(Style(fg=fg, bg=bg) if fg is not None or bg is not None else None)
        rows.append(cells)
    return rows


def decode_image(defn: ImageDef, options: DecodeOptions | None = None) -> Image:
    """Build an image from *defn*.

    Each cell whose text is the gap character becomes an effect when the
    fg/bg planes give it a color and a transparent gap otherwise; any other
    character becomes text in the resolved style. Every row has its trailing
    gap trimmed.
    """
    options = options or DecodeOptions()
    values = defn.values or Values()
    gap = values.gap or " "
    colors = _color_map(values, options)

    text_lines = _split_lines(defn.text)
    style_rows = _style_rows(defn, colors)
    height = max(len(text_lines), len(style_rows))
    width = max(
        max((text_width(line) for line in text_lines), default=0),
        max((len(cells) for cells in style_rows), default=0),
    )

    image = Image()
    for y in range(height):
        line = text_lines[y] if y < len(text_lines) else ""
        cells = style_rows[y] if y < len(style_rows) else []
        row = Row()
        x = 0
        for ch in line:
            if x >= width:
                break
            style = cells[x] if x < len(cells) else None
            _decode_cell(row, ch, gap, style)
            x += char_width(ch)
        while x < width:
            _decode_cell(row, gap, gap, cells[x] if x < len(cells) else None)
            x += 1
        row.trim_end()
        image.push_row(row)
    return image


def _decode_cell(row: Row, ch: str, gap: str, style: Style | None) -> None:
    if ch == gap:
        if style is not None:
            row.add_effect(1, style)
        else:
            row.add_gap(1)
    else:
        row.add_char(ch, style or PLAIN)
