"""Tests for charmi.definition -- encode/decode and TOML I/O of images."""

from __future__ import annotations

import logging

import pytest
from charmi import definition
from charmi.config import DecodeOptions
from charmi.definition import ImageDef, Values, decode_image, encode_image
from charmi.errors import AlphabetExhaustedError, DefinitionParseError, UnknownColorError
from charmi.image import Image
from charmi.row import Row
from charmi.segment import Effect, Empty, Textual
from charmi.style import BLUE, GREEN, RED, AnsiColor, RgbColor, Style

# ---------------------------------------------------------------------------
# Round trips
# ---------------------------------------------------------------------------


class TestRoundTrip:
    def test_definition_round_trip(self, sample_image: Image) -> None:
        assert decode_image(encode_image(sample_image)) == sample_image

    def test_toml_round_trip(self, sample_image: Image) -> None:
        assert Image.from_toml(sample_image.to_toml()) == sample_image

    def test_encoded_planes(self, sample_image: Image) -> None:
        defn = encode_image(sample_image)
        assert defn.text == "Hello  世界\n     x\nend\n"
        assert defn.fg == "aaaaa  bbbb\n\n   eee\n"
        assert defn.bg == "       cccc\n   dd\n"
        assert defn.values == Values(colors={"a": "red", "b": 27, "c": "blue", "d": (10, 20, 30), "e": "green"})

    def test_plain_image_has_no_values(self) -> None:
        defn = encode_image(Image.from_lines(["ab", "c"]))
        assert defn == ImageDef(text="ab\nc\n")

    def test_gap_avoids_used_characters(self) -> None:
        image = Image([Row.of_plain_text("a b").add_gap(1).add_plain_text("c")])
        defn = encode_image(image)
        assert defn.text == "a b-c\n"
        assert defn.values == Values(gap="-")
        assert decode_image(defn) == image

    def test_effect_only_row(self) -> None:
        image = Image([Row.of_effect(2, Style(bg=RED))])
        defn = encode_image(image)
        assert defn.text is None
        assert decode_image(defn) == image

    def test_half_char_decodes_as_its_replacement(self) -> None:
        image = Image([Row().add_half_char("世", "x", False).add_plain_text("a")])
        assert decode_image(encode_image(image)) == Image.from_lines(["xa"])

    def test_empty_image(self) -> None:
        assert encode_image(Image()) == ImageDef()
        assert decode_image(ImageDef()) == Image()


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


class TestDecode:
    def test_wide_char_consumes_two_style_columns(self) -> None:
        defn = ImageDef(text="世a\n", fg="rrb\n", values=Values(colors={"r": "red", "b": "blue"}))
        image = decode_image(defn)
        assert image.rows[0].segments == (Textual("世", Style(fg=RED)), Textual("a", Style(fg=BLUE)))

    def test_gap_cells_become_effects_or_gaps(self) -> None:
        defn = ImageDef(text="..x\n", bg=" g\n", values=Values(gap=".", colors={"g": "green"}))
        assert decode_image(defn).rows[0].segments == (Empty(1), Effect(1, Style(bg=GREEN)), Textual("x"))

    def test_style_planes_extend_rows(self) -> None:
        defn = ImageDef(text="a\n", fg=" rr\n", values=Values(colors={"r": 196}))
        assert decode_image(defn).rows[0].segments == (Textual("a"), Effect(2, Style(fg=AnsiColor(196))))

    def test_rgb_colors(self) -> None:
        defn = ImageDef(text="a\n", fg="r\n", values=Values(colors={"r": [1, 2, 3]}))
        assert decode_image(defn).rows[0].segments == (Textual("a", Style(fg=RgbColor(1, 2, 3))),)

    def test_trailing_gaps_are_trimmed(self) -> None:
        defn = ImageDef(text="ab\nabcd\n")
        assert decode_image(defn).rows == (Row.of_plain_text("ab"), Row.of_plain_text("abcd"))

    def test_crlf_lines(self) -> None:
        assert decode_image(ImageDef(text="ab\r\ncd\r\n")) == Image.from_lines(["ab", "cd"])

    def test_unknown_color_degrades_with_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        defn = ImageDef(text="ab\n", fg="zz\n", values=Values(colors={"z": "chartreuse"}))
        with caplog.at_level(logging.WARNING, logger="charmi.definition"):
            image = decode_image(defn)
        assert image == Image.from_lines(["ab"])
        assert "chartreuse" in caplog.text

    def test_unknown_color_strict(self) -> None:
        defn = ImageDef(text="ab\n", fg="zz\n", values=Values(colors={"z": "chartreuse"}))
        with pytest.raises(UnknownColorError):
            decode_image(defn, DecodeOptions(strict_colors=True))

    def test_out_of_range_index(self) -> None:
        defn = ImageDef(text="a\n", fg="z\n", values=Values(colors={"z": 300}))
        with pytest.raises(DefinitionParseError):
            decode_image(defn)


# ---------------------------------------------------------------------------
# Values and parsing
# ---------------------------------------------------------------------------


class TestValues:
    def test_merge_right_wins(self) -> None:
        merged = Values(colors={"a": "red"}, gap=".") + Values(colors={"a": "blue", "b": 1})
        assert merged == Values(colors={"a": "blue", "b": 1}, gap=".")

    def test_merge_keeps_missing_maps(self) -> None:
        merged = Values(attr={"x": "bold"}) + Values(gap="#")
        assert merged == Values(attr={"x": "bold"}, gap="#")

    def test_gap_must_be_single_char(self) -> None:
        with pytest.raises(ValueError):
            Values(gap="ab")


class TestParsing:
    def test_from_toml(self) -> None:
        defn = ImageDef.from_toml('text = "ab\\n"\n[values]\ngap = "."\n')
        assert defn == ImageDef(text="ab\n", values=Values(gap="."))

    def test_invalid_toml(self) -> None:
        with pytest.raises(DefinitionParseError):
            ImageDef.from_toml("text = ")

    def test_wrong_field_type(self) -> None:
        with pytest.raises(DefinitionParseError):
            ImageDef.from_toml("text = 5")

    def test_parse_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            Image.from_toml("[values]\ngap = 'ab'")


# ---------------------------------------------------------------------------
# Alphabet exhaustion
# ---------------------------------------------------------------------------


class TestAlphabetExhaustion:
    def test_gap_exhausted(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(definition, "_alphabet", lambda preferred: iter("ab"))
        with pytest.raises(AlphabetExhaustedError):
            encode_image(Image.from_lines(["ab"]))

    def test_colors_exhausted(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(definition, "_alphabet", lambda preferred: iter("ab"))
        image = Image([Row.of_text("x", Style(fg=RED)).add_text("y", Style(fg=GREEN)).add_text("z", Style(fg=BLUE))])
        with pytest.raises(AlphabetExhaustedError):
            encode_image(image)
