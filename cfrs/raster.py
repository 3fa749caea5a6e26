"""Fit frame geometry to the canvas and draw it into a pixel buffer."""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray
from PIL import Image, ImageDraw

from cfrs.interpreter import Bounds, Frame, PathSegment, Point


def compute_bounds(segments: Iterable[PathSegment]) -> Bounds | None:
    """Axis-aligned bounds over all segment endpoints, ``None`` if empty."""
    min_x = min_y = math.inf
    max_x = max_y = -math.inf
    seen = False
    for seg in segments:
        seen = True
        for x, y in (seg.start, seg.end):
            if x < min_x:
                min_x = x
            if x > max_x:
                max_x = x
            if y < min_y:
                min_y = y
            if y > max_y:
                max_y = y
    if not seen:
        return None
    return (min_x, min_y, max_x, max_y)


@dataclass(frozen=True)
class Transform:
    scale: float
    offset_x: float
    offset_y: float
    width: int
    height: int

    def apply(self, p: Point) -> Point:
        return (p[0] * self.scale + self.offset_x, p[1] * self.scale + self.offset_y)

    def to_pixel(self, p: Point) -> tuple[int, int]:
        x, y = self.apply(p)
        px = min(max(math.floor(x), 0), self.width - 1)
        py = min(max(math.floor(y), 0), self.height - 1)
        return (px, py)


def fit_transform(bounds: Bounds | None, width: int, height: int) -> Transform:
    """Uniform scale and centring translation mapping ``bounds`` onto the canvas.

    With no bounds the whole canvas stands in for them.
    """
    if bounds is None:
        bounds = (0.0, 0.0, float(width), float(height))

    min_x, min_y, max_x, max_y = bounds
    extent = max(max_x - min_x, max_y - min_y)
    scale = min(width, height) / extent if extent > 0 else 1.0

    offset_x = (width - (max_x - min_x) * scale) / 2 - min_x * scale
    offset_y = (height - (max_y - min_y) * scale) / 2 - min_y * scale
    return Transform(scale, offset_x, offset_y, width, height)


@dataclass(frozen=True)
class RasterBuffer:
    """Read-only RGB pixels, shape ``(height, width, 3)``."""

    pixels: NDArray[np.uint8]

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    def to_image(self) -> Image.Image:
        return Image.fromarray(self.pixels)


def rasterize(frame: Frame) -> RasterBuffer:
    """Draw ``frame`` onto a fresh ``frame.width`` x ``frame.height`` buffer.

    Segments are drawn in emission order, so later segments paint over
    earlier ones.
    """
    bounds = frame.bounds if frame.bounds is not None else compute_bounds(frame.segments)
    transform = fit_transform(bounds, frame.width, frame.height)

    image = Image.new("RGB", (frame.width, frame.height), frame.background)
    draw = ImageDraw.Draw(image)
    for seg in frame.segments:
        draw.line(
            [transform.to_pixel(seg.start), transform.to_pixel(seg.end)],
            fill=seg.color,
            width=seg.width,
        )

    pixels = np.asarray(image, dtype=np.uint8).copy()
    pixels.setflags(write=False)
    return RasterBuffer(pixels)
