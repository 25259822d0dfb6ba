"""Tests for Row.wrap -- greedy word wrapping into an image."""

from __future__ import annotations

from charmi.config import RenderOptions
from charmi.row import Row
from charmi.segment import Effect, Empty, Textual
from charmi.style import BLUE, RED, YELLOW, Style

BLUE_FG = Style(fg=BLUE)
YELLOW_FG = Style(fg=YELLOW)
PLAIN_RENDER = RenderOptions(color_support="plain")


def plain_lines(row: Row, width: int) -> list[str]:
    return row.wrap(width).render(PLAIN_RENDER)


class TestWrapText:
    def test_styled_paragraph(self) -> None:
        row = (
            Row.of_text("What happens when you eat a ", BLUE_FG)
            .add_text("beagel", YELLOW_FG)
            .add_text("? Does it change your deoxyriboneucleic acid?", BLUE_FG)
        )
        image = row.wrap(14)
        assert image.render(PLAIN_RENDER) == [
            "What happens  ",
            "when you eat a",
            " beagel? Does ",
            "it change your",
            " deoxyriboneu-",
            "cleic acid?",
        ]
        assert image.rows[2].segments == (
            Textual(" ", BLUE_FG),
            Textual("beagel", YELLOW_FG),
            Textual("? Does ", BLUE_FG),
        )

    def test_rows_never_exceed_width(self) -> None:
        row = Row.of_plain_text("the quick brown fox jumps over the lazy dog")
        for width in range(3, 20):
            assert all(r.width <= width for r in row.wrap(width))

    def test_short_text_is_one_row(self) -> None:
        assert plain_lines(Row.of_plain_text("hi there"), 20) == ["hi there"]

    def test_long_word_hyphenated(self) -> None:
        assert plain_lines(Row.of_plain_text("abcde"), 3) == ["ab-", "cd-", "e"]

    def test_no_hyphen_at_end_of_word(self) -> None:
        assert plain_lines(Row.of_plain_text("abcd"), 3) == ["ab-", "cd"]

    def test_no_hyphen_when_narrow(self) -> None:
        assert plain_lines(Row.of_plain_text("abcde"), 2) == ["ab", "cd", "e"]

    def test_non_positive_width_returns_copy(self) -> None:
        row = Row.of_plain_text("hello world")
        image = row.wrap(0)
        assert image.height == 1
        assert image.rows[0] == row
        assert image.rows[0] is not row


class TestWrapRuns:
    def test_gap_spans_rows(self) -> None:
        image = Row.of_gap(5).wrap(2)
        assert [r.segments for r in image] == [(Empty(2),), (Empty(2),), (Empty(1),)]

    def test_effect_carries_remainder(self) -> None:
        red = Style(bg=RED)
        image = Row.of_plain_text("ab").add_effect(4, red).add_plain_text("c").wrap(3)
        assert [r.segments for r in image] == [
            (Textual("ab"), Effect(1, red)),
            (Effect(3, red),),
            (Textual("c"),),
        ]


class TestWrapWideChars:
    def test_wide_words_move_whole(self) -> None:
        assert plain_lines(Row.of_plain_text("世界 ab"), 4) == ["世界", " ab"]

    def test_wide_word_hyphenated(self) -> None:
        assert plain_lines(Row.of_plain_text("世界世"), 3) == ["世-", "界-", "世"]

    def test_half_char_after_full_row_is_kept(self) -> None:
        row = Row.of_plain_text("a世").add_half_char("界", "x", True)
        assert plain_lines(row, 2) == ["a ", "世", "x"]

    def test_rows_never_exceed_width(self) -> None:
        row = Row.of_plain_text("世界 a世b").add_half_char("界", "x", True).add_plain_text(" cd")
        for width in range(2, 12):
            image = row.wrap(width)
            assert all(r.width <= width for r in image)
            assert "x" in "".join(image.render(PLAIN_RENDER))
