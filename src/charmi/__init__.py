"""charmi: character-grid compositing and animation for styled terminal images."""

# Animations and actors
from charmi.animation import Actor, Animation, AnimationFrame

# Options
from charmi.config import DecodeOptions, RenderOptions

# Definitions
from charmi.definition import (
    ActorDef,
    AnimationDef,
    FrameDef,
    ImageDef,
    Values,
    decode_image,
    encode_image,
)

# Errors
from charmi.errors import AlphabetExhaustedError, CharmiError, DefinitionParseError, UnknownColorError

# Images and rows
from charmi.image import Image

# File loading
from charmi.loader import load, load_actor, load_animation, load_image, save
from charmi.row import Row

# Segments
from charmi.segment import Effect, Empty, HalfChar, Segment, Textual

# Styles and colors
from charmi.style import (
    BLACK,
    BLUE,
    CYAN,
    DARK_BLUE,
    DARK_CYAN,
    DARK_GREEN,
    DARK_GREY,
    DARK_MAGENTA,
    DARK_RED,
    DARK_YELLOW,
    GREEN,
    GREY,
    MAGENTA,
    PLAIN,
    RED,
    WHITE,
    YELLOW,
    AnsiColor,
    Color,
    ColorSupport,
    NamedColor,
    RgbColor,
    Style,
    named_color,
)

# Width
from charmi.width import char_width, text_width

__all__ = [
    # Animations and actors
    "Actor",
    "Animation",
    "AnimationFrame",
    # Options
    "DecodeOptions",
    "RenderOptions",
    # Definitions
    "ActorDef",
    "AnimationDef",
    "FrameDef",
    "ImageDef",
    "Values",
    "decode_image",
    "encode_image",
    # Errors
    "AlphabetExhaustedError",
    "CharmiError",
    "DefinitionParseError",
    "UnknownColorError",
    # Images and rows
    "Image",
    "Row",
    # File loading
    "load",
    "load_actor",
    "load_animation",
    "load_image",
    "save",
    # Segments
    "Effect",
    "Empty",
    "HalfChar",
    "Segment",
    "Textual",
    # Styles and colors
    "BLACK",
    "BLUE",
    "CYAN",
    "DARK_BLUE",
    "DARK_CYAN",
    "DARK_GREEN",
    "DARK_GREY",
    "DARK_MAGENTA",
    "DARK_RED",
    "DARK_YELLOW",
    "GREEN",
    "GREY",
    "MAGENTA",
    "PLAIN",
    "RED",
    "WHITE",
    "YELLOW",
    "AnsiColor",
    "Color",
    "ColorSupport",
    "NamedColor",
    "RgbColor",
    "Style",
    "named_color",
    # Width
    "char_width",
    "text_width",
]
