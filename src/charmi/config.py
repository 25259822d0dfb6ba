"""Option objects for rendering and decoding."""

from __future__ import annotations

from dataclasses import dataclass

from charmi.style import ColorSupport


@dataclass
class RenderOptions:
    """Controls how styled cells are turned into terminal text.

    ``color_support`` picks the palette tier used for SGR color codes:
    ``"truecolor"`` emits colors as given, ``"ansi256"`` maps RGB colors to
    the nearest xterm-256 index, ``"basic"`` maps everything to the 16 named
    colors, and ``"plain"`` emits no escape codes at all.
    """

    color_support: ColorSupport = "truecolor"


@dataclass
class DecodeOptions:
    """Controls how definitions are turned into images.

    With ``strict_colors`` an unknown color name raises
    :class:`~charmi.errors.UnknownColorError`; otherwise the affected cells
    are left uncolored and a warning is logged.
    """

    strict_colors: bool = False
