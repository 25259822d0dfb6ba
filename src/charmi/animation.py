"""Timed sequences of images, and actors holding named animations."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, Mapping

from charmi.config import DecodeOptions
from charmi.definition import ActorDef, AnimationDef, FrameDef, Values, decode_image, encode_image, layer_values
from charmi.image import Image

logger = logging.getLogger(__name__)


@dataclass
class AnimationFrame:
    """A single frame of an animation."""

    image: Image


class Animation:
    """Frames paired with how long each one is shown.

    Durations are per frame, in whatever unit the caller samples with.
    """

    def __init__(self, frames: Iterable[tuple[float, Image | AnimationFrame]] = ()) -> None:
        self._frames: list[tuple[float, AnimationFrame]] = []
        for duration, frame in frames:
            self.add_frame(duration, frame)

    # --- Definitions ---

    @classmethod
    def from_definition(
        cls,
        defn: AnimationDef,
        options: DecodeOptions | None = None,
        inherited: Values | None = None,
    ) -> Animation:
        """Decode every frame, layering frame values over animation values.

        *inherited* sits below the animation's own values (used by actors).
        """
        shared = layer_values(inherited, defn.values)
        animation = cls()
        for frame_def in defn.frames:
            values = layer_values(shared, frame_def.values)
            image = decode_image(frame_def.model_copy(update={"values": values}), options)
            animation.add_frame(frame_def.timing, image)
        return animation

    def to_definition(self) -> AnimationDef:
        frames = [
            FrameDef(timing=duration, **encode_image(frame.image).model_dump())
            for duration, frame in self._frames
        ]
        return AnimationDef(frames=frames)

    @classmethod
    def from_toml(cls, text: str, options: DecodeOptions | None = None) -> Animation:
        return cls.from_definition(AnimationDef.from_toml(text), options)

    def to_toml(self) -> str:
        return self.to_definition().to_toml()

    # --- Frames ---

    def add_frame(self, duration: float, frame: Image | AnimationFrame) -> Animation:
        if duration < 0:
            raise ValueError(f"Frame duration must not be negative: {duration}")
        if isinstance(frame, Image):
            frame = AnimationFrame(frame)
        self._frames.append((duration, frame))
        return self

    def extend(self, other: Animation) -> Animation:
        self._frames.extend(other._frames)
        return self

    def __iadd__(self, other: Animation) -> Animation:
        return self.extend(other)

    @property
    def frames(self) -> tuple[AnimationFrame, ...]:
        return tuple(frame for _, frame in self._frames)

    @property
    def duration(self) -> float:
        return sum(duration for duration, _ in self._frames)

    def frame(self, index: int) -> AnimationFrame:
        return self._frames[index][1]

    def frame_for_timing(self, timing: float) -> AnimationFrame | None:
        """Return the frame shown at *timing*, or ``None`` once the animation is over."""
        elapsed = 0.0
        for duration, frame in self._frames:
            elapsed += duration
            if elapsed > timing:
                return frame
        return None

    def image_for_timing(self, timing: float) -> Image | None:
        frame = self.frame_for_timing(timing)
        return frame.image if frame is not None else None

    def __iter__(self) -> Iterator[tuple[float, AnimationFrame]]:
        return iter(self._frames)

    def __len__(self) -> int:
        return len(self._frames)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Animation):
            return NotImplemented
        return self._frames == other._frames

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Animation({self._frames!r})"


class Actor:
    """A set of animations looked up by name."""

    def __init__(self, animations: Mapping[str, Animation] | Iterable[tuple[str, Animation]] = ()) -> None:
        self._animations: dict[str, Animation] = dict(animations)

    @classmethod
    def from_definition(cls, defn: ActorDef, options: DecodeOptions | None = None) -> Actor:
        actor = cls()
        for name, animation_def in defn.animations.items():
            actor.insert_animation(name, Animation.from_definition(animation_def, options, defn.values))
        logger.debug("Decoded actor with animations %s", actor.names)
        return actor

    def to_definition(self) -> ActorDef:
        return ActorDef(animations={name: animation.to_definition() for name, animation in self._animations.items()})

    @classmethod
    def from_toml(cls, text: str, options: DecodeOptions | None = None) -> Actor:
        return cls.from_definition(ActorDef.from_toml(text), options)

    def to_toml(self) -> str:
        return self.to_definition().to_toml()

    def animation(self, name: str) -> Animation | None:
        return self._animations.get(name)

    def insert_animation(self, name: str, animation: Animation) -> Actor:
        self._animations[name] = animation
        return self

    @property
    def names(self) -> list[str]:
        return list(self._animations)

    def __contains__(self, name: object) -> bool:
        return name in self._animations

    def __iter__(self) -> Iterator[tuple[str, Animation]]:
        return iter(self._animations.items())

    def __len__(self) -> int:
        return len(self._animations)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Actor):
            return NotImplemented
        return self._animations == other._animations

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Actor({self._animations!r})"
