"""Multi-row images: drawing, clipping, sizing, and a render cache."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Iterable, Iterator

from charmi.config import DecodeOptions, RenderOptions
from charmi.row import Row
from charmi.style import Style

if TYPE_CHECKING:
    from charmi.definition import ImageDef


class Image:
    """An ordered, possibly jagged, list of rows.

    ``lines()`` memoizes the rendering with default options. The cache is
    dropped by every mutating method here and is also checked against the
    generation counter of each row, so rows mutated through ``new_row()`` or
    ``rows`` are re-rendered on the next read.
    """

    __slots__ = ("_rows", "_lines", "_lines_key")

    def __init__(self, rows: Iterable[Row] = ()) -> None:
        self._rows: list[Row] = list(rows)
        self._lines: tuple[str, ...] | None = None
        self._lines_key: tuple[tuple[int, int], ...] = ()

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> Image:
        return cls(Row.of_plain_text(line) for line in lines)

    @classmethod
    def from_toml(cls, text: str, options: DecodeOptions | None = None) -> Image:
        from charmi.definition import ImageDef, decode_image

        return decode_image(ImageDef.from_toml(text), options)

    def to_definition(self) -> ImageDef:
        from charmi.definition import encode_image

        return encode_image(self)

    def to_toml(self) -> str:
        return self.to_definition().to_toml()

    def copy(self) -> Image:
        return Image(row.copy() for row in self._rows)

    # --- Accessors ---

    @property
    def rows(self) -> tuple[Row, ...]:
        return tuple(self._rows)

    @property
    def width(self) -> int:
        return max((row.width for row in self._rows), default=0)

    @property
    def height(self) -> int:
        return len(self._rows)

    def is_empty(self) -> bool:
        return not self._rows

    def __iter__(self) -> Iterator[Row]:
        return iter(self._rows)

    def __len__(self) -> int:
        return len(self._rows)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Image):
            return NotImplemented
        return self._rows == other._rows

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Image({self._rows!r})"

    # --- Building ---

    def _invalidate(self) -> None:
        self._lines = None

    def push_row(self, row: Row) -> Image:
        self._rows.append(row)
        self._invalidate()
        return self

    def new_row(self) -> Row:
        """Append an empty row and return it for in-place building."""
        row = Row()
        self.push_row(row)
        return row

    def with_row(self, build: Callable[[Row], object]) -> Image:
        """Append a row populated by ``build(row)``; returns ``self``."""
        build(self.new_row())
        return self

    def with_blank_row(self) -> Image:
        return self.push_row(Row())

    def apply_effect(self, style: Style) -> Image:
        for row in self._rows:
            row.apply_effect(style)
        self._invalidate()
        return self

    # --- Composition ---

    def draw(self, other: Image, x: int, y: int, fill: str | None = None) -> Image:
        """Return a copy of this image with *other* drawn at ``(x, y)``.

        Rows are added as needed to fit *other*; this image is unchanged.
        """
        result = self.copy()
        other_rows = other._rows
        if y < 0:
            other_rows = other_rows[-y:]
            y = 0
        rows = result._rows
        while len(rows) < y + len(other_rows):
            rows.append(Row())
        for i, row in enumerate(other_rows):
            rows[y + i] = rows[y + i].draw(row, x, fill)
        return result

    def clip(self, x: int, y: int, width: int, height: int, fill: str | None = None) -> Image:
        """Return rows ``[y, y + height)`` each clipped to ``(x, width)``.

        Nothing is padded: rows or columns past the image's own extent are
        simply absent from the result.
        """
        if y < 0:
            height += y
            y = 0
        if height <= 0:
            return Image()
        return Image(row.clip(x, width, fill) for row in self._rows[y : y + height])

    def fit_to_size(self, width: int, height: int, fill_char: str | None = None) -> Image:
        """Force this image, in place, into exactly ``width`` x ``height`` cells."""
        del self._rows[max(height, 0) :]
        for row in self._rows:
            row.fit_to_len(width, fill_char)
        while len(self._rows) < height:
            self._rows.append(Row().fit_to_len(width, fill_char))
        self._invalidate()
        return self

    # --- Rendering ---

    def _cache_key(self) -> tuple[tuple[int, int], ...]:
        return tuple((id(row), row.generation) for row in self._rows)

    def lines(self) -> tuple[str, ...]:
        """Return the rendered rows with default options, memoized."""
        key = self._cache_key()
        if self._lines is None or key != self._lines_key:
            self._lines = tuple(row.render() for row in self._rows)
            self._lines_key = key
        return self._lines

    def render(self, options: RenderOptions | None = None) -> list[str]:
        if options is None or options == RenderOptions():
            return list(self.lines())
        return [row.render(options) for row in self._rows]

    def debug_string(self, options: RenderOptions | None = None) -> str:
        return "\n".join(self.render(options))

    def __str__(self) -> str:
        return self.debug_string()
