from pathlib import Path

import pytest
from charmi import BLUE, GREEN, RED, AnsiColor, Image, RgbColor, Row, Style


@pytest.fixture
def base_row() -> Row:
    """A row mixing single- and double-width characters (14 columns wide)."""
    return Row.of_plain_text("世Hello界world")


@pytest.fixture
def sample_image() -> Image:
    """Three rows mixing gaps, effects, named, indexed, and RGB colors."""
    return (
        Image()
        .with_row(lambda r: r.add_text("Hello", Style(fg=RED)).add_gap(2).add_text("世界", Style(fg=AnsiColor(27), bg=BLUE)))
        .with_row(lambda r: r.add_gap(3).add_effect(2, Style(bg=RgbColor(10, 20, 30))).add_plain_text("x"))
        .with_row(lambda r: r.add_plain_text("end").add_effect(3, Style(fg=GREEN)))
    )


@pytest.fixture
def data_dir() -> Path:
    return Path(__file__).parent / "data"
