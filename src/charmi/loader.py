"""Read and write definition files.

Image files use the extensions ``.charmi``, ``.charmie``, ``.charmi.toml``
and ``.charmie.toml``; actor files use ``.charmia`` and ``.charmia.toml``.
Animation files have no reserved extension and are read with
:func:`load_animation`.
"""

from __future__ import annotations

import logging
from pathlib import Path

from charmi.animation import Actor, Animation
from charmi.config import DecodeOptions
from charmi.image import Image

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = ("charmi", "charmie", "charmi.toml", "charmie.toml")
ACTOR_EXTENSIONS = ("charmia", "charmia.toml")


def _read(path: str | Path) -> str:
    path = Path(path)
    logger.debug("Loading definition from %s", path)
    return path.read_text(encoding="utf-8")


def load_image(path: str | Path, options: DecodeOptions | None = None) -> Image:
    return Image.from_toml(_read(path), options)


def load_animation(path: str | Path, options: DecodeOptions | None = None) -> Animation:
    return Animation.from_toml(_read(path), options)


def load_actor(path: str | Path, options: DecodeOptions | None = None) -> Actor:
    return Actor.from_toml(_read(path), options)


def _matches(path: Path, extensions: tuple[str, ...]) -> bool:
    name = path.name.lower()
    return any(name.endswith("." + ext) for ext in extensions)


def load(path: str | Path, options: DecodeOptions | None = None) -> Image | Actor:
    """Load an image or an actor, chosen by the file extension."""
    path = Path(path)
    if _matches(path, IMAGE_EXTENSIONS):
        return load_image(path, options)
    if _matches(path, ACTOR_EXTENSIONS):
        return load_actor(path, options)
    raise ValueError(f"Unrecognized definition file extension: {path.name}")


def save(path: str | Path, value: Image | Animation | Actor) -> None:
    """Write *value* to *path* as a TOML definition."""
    path = Path(path)
    path.write_text(value.to_toml(), encoding="utf-8")
    logger.debug("Saved %s to %s", type(value).__name__, path)
