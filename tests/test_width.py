"""Tests for charmi.width -- per-character display width."""

from __future__ import annotations

from charmi.width import char_width, is_single_width, text_width


class TestCharWidth:
    def test_ascii(self) -> None:
        assert char_width("a") == 1

    def test_wide_cjk(self) -> None:
        assert char_width("世") == 2

    def test_combining_mark_is_zero(self) -> None:
        assert char_width("\u0301") == 0

    def test_control_characters_are_zero(self) -> None:
        assert char_width("\x1b") == 0
        assert char_width("\x7f") == 0
        assert char_width("\x85") == 0

    def test_is_single_width(self) -> None:
        assert is_single_width("a")
        assert not is_single_width("世")
        assert not is_single_width("\n")


class TestTextWidth:
    def test_empty(self) -> None:
        assert text_width("") == 0

    def test_ascii_fast_path(self) -> None:
        assert text_width("hello world") == 11

    def test_mixed(self) -> None:
        assert text_width("世Hello界world") == 14

    def test_cached_result_is_stable(self) -> None:
        assert text_width("日本語") == 6
        assert text_width("日本語") == 6
