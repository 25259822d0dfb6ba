"""A single display line of segments: fusion, clipping, drawing, and wrapping.

Every mutating method keeps two invariants:

* adjacent segments of the same kind and style are fused into one, and
* a trailing left :class:`~charmi.segment.HalfChar` is only ever followed by
  its matching right half; anything else collapses it to its replacement
  character (or a one-cell gap) first.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Iterable, Iterator

from charmi.config import RenderOptions
from charmi.segment import Effect, Empty, HalfChar, Segment, Textual, check_fill_char
from charmi.style import PLAIN, Style
from charmi.width import char_width, text_width

if TYPE_CHECKING:
    from charmi.image import Image

# Maximal runs of whitespace or non-whitespace
_TOKEN_RE = re.compile(r"\s+|\S+")


class Row:
    """An ordered run of segments forming one display line.

    Widths and offsets are measured in terminal columns. ``fill`` arguments
    name the character shown in place of a double-width character that a
    clip boundary cuts in half; ``None`` shows a blank cell instead.
    """

    __slots__ = ("_segments", "_generation")

    def __init__(self, segments: Iterable[Segment] = ()) -> None:
        self._segments: list[Segment] = []
        self._generation = 0
        for segment in segments:
            self.add_segment(segment)

    # --- Constructors ---

    @classmethod
    def of_text(cls, text: str, style: Style = PLAIN) -> Row:
        return cls().add_text(text, style)

    @classmethod
    def of_plain_text(cls, text: str) -> Row:
        return cls().add_text(text, PLAIN)

    @classmethod
    def of_char(cls, ch: str, style: Style = PLAIN) -> Row:
        return cls().add_char(ch, style)

    @classmethod
    def of_gap(cls, length: int) -> Row:
        return cls().add_gap(length)

    @classmethod
    def of_effect(cls, length: int, style: Style) -> Row:
        return cls().add_effect(length, style)

    def copy(self) -> Row:
        row = Row()
        row._segments = list(self._segments)
        return row

    # --- Accessors ---

    @property
    def segments(self) -> tuple[Segment, ...]:
        return tuple(self._segments)

    @property
    def generation(self) -> int:
        """Counter bumped on every mutation; used to validate render caches."""
        return self._generation

    @property
    def width(self) -> int:
        return sum(segment.width for segment in self._segments)

    def is_empty(self) -> bool:
        return not self._segments

    def __iter__(self) -> Iterator[Segment]:
        return iter(self._segments)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Row):
            return NotImplemented
        return self._segments == other._segments

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Row({self._segments!r})"

    def render(self, options: RenderOptions | None = None) -> str:
        support = (options or RenderOptions()).color_support
        return "".join(segment.render(support) for segment in self._segments)

    def __str__(self) -> str:
        return self.render()

    # --- Appending ---

    def _touch(self) -> None:
        self._generation += 1

    def _wider_than(self, columns: int) -> bool:
        total = 0
        for segment in self._segments:
            total += segment.width
            if total > columns:
                return True
        return False

    def _fuse_tail_half_char(self) -> None:
        if not self._segments:
            return
        last = self._segments[-1]
        if isinstance(last, HalfChar) and (last.first_half or self._wider_than(1)):
            self._segments.pop()
            self._touch()
            if last.replace_char is not None:
                self.add_text(last.replace_char, last.style)
            else:
                self.add_gap(1)

    def add_gap(self, length: int) -> Row:
        if length < 0:
            raise ValueError(f"Gap length must not be negative: {length}")
        if length == 0:
            return self
        self._fuse_tail_half_char()
        last = self._segments[-1] if self._segments else None
        if isinstance(last, Empty):
            self._segments[-1] = Empty(last.length + length)
        else:
            self._segments.append(Empty(length))
        self._touch()
        return self

    def add_effect(self, length: int, style: Style) -> Row:
        if length < 0:
            raise ValueError(f"Effect length must not be negative: {length}")
        if length == 0:
            return self
        self._fuse_tail_half_char()
        last = self._segments[-1] if self._segments else None
        if isinstance(last, Effect) and last.style == style:
            self._segments[-1] = Effect(last.length + length, style)
        else:
            self._segments.append(Effect(length, style))
        self._touch()
        return self

    def add_text(self, text: str, style: Style = PLAIN) -> Row:
        if not text:
            return self
        self._fuse_tail_half_char()
        last = self._segments[-1] if self._segments else None
        if isinstance(last, Textual) and last.style == style:
            self._segments[-1] = Textual(last.text + text, style)
        else:
            self._segments.append(Textual(text, style))
        self._touch()
        return self

    def add_plain_text(self, text: str) -> Row:
        return self.add_text(text, PLAIN)

    def add_char(self, ch: str, style: Style = PLAIN) -> Row:
        if len(ch) != 1:
            raise ValueError(f"Expected a single character, got {ch!r}")
        return self.add_text(ch, style)

    def add_half_char(
        self,
        half_char: str,
        replace_char: str | None = None,
        first_half: bool = True,
        style: Style = PLAIN,
    ) -> Row:
        """Append one half of the double-width character *half_char*.

        A right half directly after the matching left half fuses both back
        into the full character, styled with the left style overlaid by the
        right one. A right half anywhere but at the start of the row is shown
        as *replace_char* (or a one-cell gap) straight away.
        """
        check_fill_char(replace_char, "replace_char")
        if char_width(half_char) < 2:
            return self
        if self._segments:
            last = self._segments[-1]
            if isinstance(last, HalfChar) and last.first_half:
                self._segments.pop()
                self._touch()
                if half_char == last.half_char and not first_half:
                    return self.add_text(half_char, last.style + style)
                if last.replace_char is not None:
                    self.add_text(last.replace_char, last.style)
                else:
                    self.add_gap(1)
            if not first_half:
                if replace_char is not None:
                    return self.add_text(replace_char, style)
                return self.add_gap(1)
        self._segments.append(HalfChar(half_char, replace_char, first_half, style))
        self._touch()
        return self

    def add_segment(self, segment: Segment) -> Row:
        match segment:
            case Textual(text=text, style=style):
                return self.add_text(text, style)
            case Empty(length=length):
                return self.add_gap(length)
            case Effect(length=length, style=style):
                return self.add_effect(length, style)
            case HalfChar(half_char=half_char, replace_char=replace_char, first_half=first_half, style=style):
                return self.add_half_char(half_char, replace_char, first_half, style)
        raise TypeError(f"Not a segment: {segment!r}")

    def extend(self, other: Row) -> Row:
        for segment in other._segments:
            self.add_segment(segment)
        return self

    def __iadd__(self, other: Row | Segment | str) -> Row:
        if isinstance(other, Row):
            return self.extend(other)
        if isinstance(other, str):
            return self.add_plain_text(other)
        return self.add_segment(other)

    # --- Fluent copies ---

    def with_gap(self, length: int) -> Row:
        return self.copy().add_gap(length)

    def with_effect(self, length: int, style: Style) -> Row:
        return self.copy().add_effect(length, style)

    def with_text(self, text: str, style: Style = PLAIN) -> Row:
        return self.copy().add_text(text, style)

    def with_plain_text(self, text: str) -> Row:
        return self.copy().add_plain_text(text)

    def with_char(self, ch: str, style: Style = PLAIN) -> Row:
        return self.copy().add_char(ch, style)

    def with_half_char(
        self,
        half_char: str,
        replace_char: str | None = None,
        first_half: bool = True,
        style: Style = PLAIN,
    ) -> Row:
        return self.copy().add_half_char(half_char, replace_char, first_half, style)

    # --- Whole-row edits ---

    def apply_effect(self, style: Style) -> Row:
        """Overlay *style* on every segment; gaps become effects."""
        tinted = [segment.with_effect(style) for segment in self._segments]
        self._segments = []
        for segment in tinted:
            self.add_segment(segment)
        self._touch()
        return self

    def trim_end(self) -> int:
        """Drop a trailing gap, returning its length (0 if there was none)."""
        if self._segments and isinstance(self._segments[-1], Empty):
            length = self._segments.pop().width
            self._touch()
            return length
        return 0

    def pad_to(self, length: int) -> Row:
        width = self.width
        if width < length:
            self.add_gap(length - width)
        return self

    def fit_to_len(self, length: int, fill_char: str | None = None) -> Row:
        """Pad or clip this row to exactly *length* columns.

        Padding uses *fill_char* as plain text, or a gap when it is ``None``.
        When clipping, *fill_char* also replaces a cut double-width character.
        """
        check_fill_char(fill_char, "fill_char")
        width = self.width
        if width < length:
            if fill_char is not None:
                self.add_plain_text(fill_char * (length - width))
            else:
                self.add_gap(length - width)
        elif width > length:
            self._segments = self.clip(0, length, fill_char)._segments
            self._touch()
        return self

    # --- Clipping and drawing ---

    def clip(self, start: int, width: int, fill: str | None = None) -> Row:
        """Return the columns ``[start, start + width)`` of this row.

        The result is never padded: a window reaching past the end of the
        row yields a shorter row.
        """
        check_fill_char(fill)
        result = Row()
        if start < 0:
            width += start
            start = 0
        if width <= 0:
            return result

        clip_end = start + width
        seg_start = 0
        for segment in self._segments:
            seg_width = segment.width
            seg_end = seg_start + seg_width
            if seg_start >= clip_end:
                break
            if start < seg_end:
                if seg_start >= start and seg_end <= clip_end:
                    result.add_segment(segment)
                else:
                    skip = max(start - seg_start, 0)
                    take = min(clip_end - seg_start, seg_width)
                    match segment:
                        case Effect(style=style):
                            result.add_effect(take - skip, style)
                        case Empty():
                            result.add_gap(take - skip)
                        case HalfChar():
                            result.add_segment(segment)
                        case Textual(text=text, style=style):
                            _clip_text(result, text, style, skip, take, fill)
            seg_start = seg_end
        return result

    def draw(self, other: Row, x: int, fill: str | None = None) -> Row:
        """Return this row with *other* drawn over it starting at column *x*.

        Gaps in *other* show this row through; effects tint it; text and
        half characters replace it. The result is as wide as the wider of
        this row and ``x + other.width``.
        """
        check_fill_char(fill)
        if x < 0:
            other = other.clip(-x, other.width + x, fill)
            x = 0

        result = self.clip(0, x, fill) if x > 0 else Row()
        self_width = self.width
        if self_width < x:
            result.add_gap(x - self_width)

        position = result.width
        for segment in other._segments:
            seg_width = segment.width
            match segment:
                case Effect(style=style):
                    # An effect edge inside a double-width character splits it
                    under = self.clip(position, seg_width, fill).apply_effect(style)
                    under_width = under.width
                    result.extend(under)
                    if under_width < seg_width:
                        result.add_effect(seg_width - under_width, style)
                case Empty():
                    under = self.clip(position, seg_width, fill)
                    under_width = under.width
                    result.extend(under)
                    if under_width < seg_width:
                        result.add_gap(seg_width - under_width)
                case Textual() | HalfChar():
                    result.add_segment(segment)
            position += seg_width

        result_width = result.width
        if result_width < self_width:
            result.extend(self.clip(result_width, self_width - result_width, fill))
        return result

    # --- Wrapping ---

    def wrap(self, width: int) -> Image:
        """Greedily word-wrap this row into an image at most *width* wide.

        Words that do not fit move to the next line; words wider than a
        whole line, and runs of whitespace, are broken between characters
        (with a hyphen at mid-word breaks when ``width > 2``).
        """
        from charmi.image import Image

        image = Image()
        if width <= 0:
            image.push_row(self.copy())
            return image

        row = Row()
        row_len = 0
        for segment in self._segments:
            seg_width = segment.width
            if row_len + seg_width <= width:
                row.add_segment(segment)
                row_len += seg_width
                if row_len == width:
                    image.push_row(row)
                    row = Row()
                    row_len = 0
            elif isinstance(segment, Textual):
                row, row_len = _wrap_text(image, row, row_len, segment.text, segment.style, width)
            elif isinstance(segment, (Empty, Effect)):
                head = width - row_len
                remaining = seg_width - head
                _add_run(row, segment, head)
                image.push_row(row)
                row = Row()
                while remaining >= width:
                    _add_run(image.new_row(), segment, width)
                    remaining -= width
                _add_run(row, segment, remaining)
                row_len = remaining

        if row_len > 0:
            image.push_row(row)
        return image


def _clip_text(
    row: Row,
    text: str,
    style: Style,
    skip: int,
    take: int,
    fill: str | None,
) -> None:
    """Append the columns ``[skip, take)`` of *text* to *row*."""
    kept: list[str] = []
    tail_half: str | None = None
    index = 0
    for ch in text:
        current = index
        ch_width = char_width(ch)
        index = current + ch_width
        if skip > 0 and index <= skip:
            continue
        if current >= take:
            break
        if ch_width == 2:
            if current + 1 == skip:
                # Cut in half at the start of the window
                row.add_half_char(ch, fill, False, style)
                continue
            if current + 1 == take:
                # Cut in half at the end of the window
                tail_half = ch
                break
        kept.append(ch)
    row.add_text("".join(kept), style)
    if tail_half is not None:
        row.add_half_char(tail_half, fill, True, style)


def _add_run(row: Row, segment: Empty | Effect, length: int) -> None:
    if isinstance(segment, Effect):
        row.add_effect(length, segment.style)
    else:
        row.add_gap(length)


def _wrap_text(
    image: Image,
    row: Row,
    row_len: int,
    text: str,
    style: Style,
    width: int,
) -> tuple[Row, int]:
    for token_match in _TOKEN_RE.finditer(text):
        token = token_match.group()
        token_width = text_width(token)
        is_space = token[0].isspace()

        if row_len + token_width <= width:
            row.add_text(token, style)
            row_len += token_width
            if row_len == width:
                image.push_row(row)
                row = Row()
                row_len = 0
        elif is_space or token_width > width:
            # Too long for any line, or whitespace: split between characters
            hyphenate = not is_space and width > 2
            target = width - 1 if hyphenate else width
            placed = 0
            last = len(token) - 1
            for i, ch in enumerate(token):
                ch_width = char_width(ch)
                if row_len + ch_width <= target:
                    row.add_char(ch, style)
                    row_len += ch_width
                    placed += 1
                    if row_len == target and (not hyphenate or i < last):
                        if hyphenate:
                            row.add_char("-", style)
                        image.push_row(row)
                        row = Row()
                        row_len = 0
                        placed = 0
                else:
                    if hyphenate and placed:
                        row.add_char("-", style)
                        row_len += 1
                    row.add_text(" " * (width - row_len), style)
                    image.push_row(row)
                    row = Row.of_char(ch, style)
                    row_len = ch_width
                    placed = 1
                    if row_len >= width:
                        image.push_row(row)
                        row = Row()
                        row_len = 0
                        placed = 0
        else:
            # Move the word to the next line
            row.add_text(" " * (width - row_len), style)
            image.push_row(row)
            row = Row.of_text(token, style)
            row_len = token_width
            if row_len == width:
                image.push_row(row)
                row = Row()
                row_len = 0
    return row, row_len
