"""Render options and the JSON configuration file format."""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from typing import Any, cast

from PIL import ImageColor

from cfrs.errors import ConfigError, InvalidDimensions, _require

RGB = tuple[int, int, int]

MAX_DIMENSION = 16384

DEFAULT_PALETTE: tuple[RGB, ...] = (
    (255, 255, 255),  # white
    (0, 0, 0),  # black
    (0, 0, 255),  # blue
    (0, 255, 0),  # green
    (0, 255, 255),  # cyan
    (255, 0, 0),  # red
    (255, 0, 255),  # magenta
    (255, 255, 0),  # yellow
)


# -------------------------
# Field validation
# -------------------------


def _as_float(x: Any, path: str) -> float:
    _require(
        isinstance(x, (int, float)) and not isinstance(x, bool),
        f"{path} must be a number",
    )
    return float(x)


def _as_int(x: Any, path: str) -> int:
    _require(
        isinstance(x, int) and not isinstance(x, bool), f"{path} must be an integer"
    )
    return int(x)


def _as_str(x: Any, path: str) -> str:
    _require(isinstance(x, str), f"{path} must be a string")
    return cast(str, x)


def _as_bool(x: Any, path: str) -> bool:
    _require(isinstance(x, bool), f"{path} must be a boolean")
    return cast(bool, x)


def _as_dict(x: Any, path: str) -> dict[str, Any]:
    _require(isinstance(x, dict), f"{path} must be an object")
    return cast(dict[str, Any], x)


def parse_color(value: Any, path: str = "color") -> RGB:
    """Accept a colour name, a hex string or an ``[r, g, b]`` triple."""
    if isinstance(value, str):
        try:
            rgb = ImageColor.getrgb(value)
        except ValueError as e:
            raise ConfigError(f"{path}: unknown colour {value!r}") from e
        return (rgb[0], rgb[1], rgb[2])

    _require(
        isinstance(value, Sequence) and len(value) == 3,
        f"{path} must be a colour name, hex string or [r, g, b]",
    )
    channels = tuple(_as_int(c, f"{path}[{i}]") for i, c in enumerate(value))
    _require(all(0 <= c <= 255 for c in channels), f"{path} channels must be 0..255")
    return (channels[0], channels[1], channels[2])


def check_dimensions(width: Any, height: Any) -> None:
    for name, value in (("width", width), ("height", height)):
        if not isinstance(value, int) or isinstance(value, bool):
            raise InvalidDimensions(f"{name} must be an integer, got {value!r}")
        if not 0 < value <= MAX_DIMENSION:
            raise InvalidDimensions(
                f"{name} must be between 1 and {MAX_DIMENSION}, got {value}"
            )


# -------------------------
# Records
# -------------------------


@dataclass(frozen=True)
class TurtleConfig:
    """Tunables of the turtle interpreter.

    The defaults give eight headings 45 degrees apart, halve the step on each
    ``S`` and cycle through the eight-colour palette starting at white.
    """

    step: float = 10.0
    angle_deg: float = 45.0
    clockwise: bool = True
    shrink: float = 0.5
    pen_width: int = 1
    palette: tuple[RGB, ...] = DEFAULT_PALETTE
    start_color: int = 0
    start_heading_deg: float = 0.0

    def __post_init__(self) -> None:
        _require(self.step > 0, "turtle.step must be > 0")
        _require(0 < self.shrink < 1, "turtle.shrink must be between 0 and 1")
        _require(self.pen_width >= 1, "turtle.pen_width must be >= 1")
        _require(len(self.palette) > 0, "turtle.palette must not be empty")
        _require(
            0 <= self.start_color < len(self.palette),
            "turtle.start_color must index into turtle.palette",
        )

    @property
    def rotation(self) -> float:
        return self.angle_deg if self.clockwise else -self.angle_deg


@dataclass(frozen=True)
class RenderOptions:
    width: int = 256
    height: int = 256
    background: RGB = (0, 0, 0)
    delay_ms: int = 100
    # False renders the whole grammar as one frame (static output).
    animate: bool = True
    # Each frame also shows everything drawn by the frames before it.
    accumulate: bool = False
    workers: int = 1
    turtle: TurtleConfig = field(default_factory=TurtleConfig)

    def with_overrides(self, **changes: Any) -> RenderOptions:
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


# -------------------------
# Config file parsing
# -------------------------


def _parse_turtle(obj: dict[str, Any]) -> TurtleConfig:
    defaults = TurtleConfig()

    palette = defaults.palette
    if "palette" in obj:
        raw = obj["palette"]
        _require(isinstance(raw, list), "turtle.palette must be a list")
        palette = tuple(
            parse_color(c, f"turtle.palette[{i}]") for i, c in enumerate(raw)
        )

    return TurtleConfig(
        step=_as_float(obj.get("step", defaults.step), "turtle.step"),
        angle_deg=_as_float(obj.get("angle", defaults.angle_deg), "turtle.angle"),
        clockwise=_as_bool(obj.get("clockwise", defaults.clockwise), "turtle.clockwise"),
        shrink=_as_float(obj.get("shrink", defaults.shrink), "turtle.shrink"),
        pen_width=_as_int(obj.get("pen_width", defaults.pen_width), "turtle.pen_width"),
        palette=palette,
        start_color=_as_int(
            obj.get("start_color", defaults.start_color), "turtle.start_color"
        ),
        start_heading_deg=_as_float(
            obj.get("heading", defaults.start_heading_deg), "turtle.heading"
        ),
    )


def parse_options(obj: Any) -> tuple[str | None, RenderOptions]:
    """Parse a config object into ``(grammar, options)``.

    The grammar is optional in the file (it may be given on the command line).
    """
    obj = _as_dict(obj, "root")
    defaults = RenderOptions()

    grammar = obj.get("grammar")
    if grammar is not None:
        grammar = _as_str(grammar, "grammar")

    canvas = _as_dict(obj.get("canvas", {}), "canvas")
    width = canvas.get("width", defaults.width)
    height = canvas.get("height", defaults.height)
    check_dimensions(width, height)

    background = defaults.background
    if "background" in canvas:
        background = parse_color(canvas["background"], "canvas.background")

    animation = _as_dict(obj.get("animation", {}), "animation")
    delay_ms = _as_int(animation.get("delay_ms", defaults.delay_ms), "animation.delay_ms")
    _require(delay_ms > 0, "animation.delay_ms must be > 0")
    accumulate = _as_bool(
        animation.get("accumulate", defaults.accumulate), "animation.accumulate"
    )

    workers = _as_int(obj.get("workers", defaults.workers), "workers")
    _require(workers >= 1, "workers must be >= 1")

    turtle = _parse_turtle(_as_dict(obj.get("turtle", {}), "turtle"))

    return grammar, RenderOptions(
        width=width,
        height=height,
        background=background,
        delay_ms=delay_ms,
        accumulate=accumulate,
        workers=workers,
        turtle=turtle,
    )


def load_json(path: str) -> dict[str, Any]:
    with open(path, encoding="utf-8") as f:
        try:
            return cast(dict[str, Any], json.load(f))
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in {path}: {e}") from e
