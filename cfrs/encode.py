"""Write rendered frames to image files and traced frames to SVG."""

from __future__ import annotations

import os
from pathlib import Path

from PIL import Image

from cfrs.errors import ConfigError, _require
from cfrs.interpreter import Frame
from cfrs.log import get_logger
from cfrs.raster import compute_bounds, fit_transform
from cfrs.sequencer import FrameSequence

logger = get_logger(__name__)

STATIC_FORMATS = {
    ".bmp": "BMP",
    ".png": "PNG",
    ".jpg": "JPEG",
    ".jpeg": "JPEG",
    ".webp": "WEBP",
}
ANIMATED_FORMATS = {".gif": "GIF"}


def _ensure_parent_dir(path: str | Path) -> None:
    os.makedirs(os.path.dirname(os.path.abspath(path)) or ".", exist_ok=True)


def is_animated_path(path: str | Path) -> bool:
    return Path(path).suffix.lower() in ANIMATED_FORMATS


def save_sequence(sequence: FrameSequence, output_path: str | Path) -> Path:
    """Encode ``sequence`` according to the extension of ``output_path``.

    The GIF writer folds a frame that is pixel-identical to the one before it
    into that frame and adds the two delays, so the file can hold fewer
    frames than ``sequence`` while its total play time is unchanged.
    """
    path = Path(output_path)
    ext = path.suffix.lower()
    _require(len(sequence) > 0, "nothing to save: frame sequence is empty")

    images = [frame.buffer.to_image() for frame in sequence]

    if ext in ANIMATED_FORMATS:
        _ensure_parent_dir(path)
        # GIF stores durations in 10 ms units.
        durations = [max(int(round(f.delay_ms / 10.0)) * 10, 10) for f in sequence]
        first, *rest = images
        first.save(
            path,
            save_all=True,
            append_images=rest,
            format=ANIMATED_FORMATS[ext],
            duration=durations if rest else durations[0],
            loop=0,
        )
    elif ext in STATIC_FORMATS:
        if sequence.is_animated:
            raise ConfigError(
                f"{ext} holds a single image but {len(sequence)} frames were rendered"
            )
        _ensure_parent_dir(path)
        images[0].save(path, format=STATIC_FORMATS[ext])
    else:
        supported = sorted([*STATIC_FORMATS, *ANIMATED_FORMATS, ".svg"])
        raise ConfigError(
            f"unsupported output format {ext or '(none)'!r}; use one of {', '.join(supported)}"
        )

    logger.info("wrote %d frame(s) to %s", len(images), path)
    return path


def load_frames(path: str | Path) -> list[Image.Image]:
    """Read every frame of an image file back as RGB images."""
    frames: list[Image.Image] = []
    with Image.open(path) as img:
        for i in range(getattr(img, "n_frames", 1)):
            img.seek(i)
            frames.append(img.convert("RGB"))
    return frames


# -------------------------
# SVG writing
# -------------------------


def _fmt(x: float, precision: int) -> str:
    # Normalise -0.0 so it never produces "-0" in SVG output.
    if not x:
        x = 0.0
    s = f"{x:.{precision}f}"
    if "." in s:
        s = s.rstrip("0").rstrip(".")
    return s or "0"


def _hex(rgb: tuple[int, int, int]) -> str:
    return "#{:02x}{:02x}{:02x}".format(*rgb)


def write_svg(
    frame: Frame,
    *,
    out_path: str | Path,
    precision: int = 3,
    title: str | None = None,
) -> None:
    """Write ``frame`` as SVG, normalized to its canvas like the raster output."""
    _require(0 <= precision <= 10, "precision must be between 0 and 10")

    bounds = frame.bounds if frame.bounds is not None else compute_bounds(frame.segments)
    transform = fit_transform(bounds, frame.width, frame.height)

    lines: list[str] = []
    lines.append('<?xml version="1.0" encoding="UTF-8"?>')
    lines.append(
        '<svg xmlns="http://www.w3.org/2000/svg" version="1.1" '
        f'viewBox="0 0 {frame.width} {frame.height}" '
        f'width="{frame.width}" height="{frame.height}">'
    )

    if title:
        safe_title = (
            title.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
        )
        lines.append(f"  <title>{safe_title}</title>")

    lines.append(
        f'  <rect x="0" y="0" width="{frame.width}" height="{frame.height}" '
        f'fill="{_hex(frame.background)}" />'
    )

    for seg in frame.segments:
        x1, y1 = transform.apply(seg.start)
        x2, y2 = transform.apply(seg.end)
        lines.append(
            f'  <line x1="{_fmt(x1, precision)}" y1="{_fmt(y1, precision)}" '
            f'x2="{_fmt(x2, precision)}" y2="{_fmt(y2, precision)}" '
            f'stroke="{_hex(seg.color)}" stroke-width="{seg.width}" '
            'stroke-linecap="square" />'
        )

    lines.append("</svg>")

    _ensure_parent_dir(out_path)
    with open(out_path, "w", encoding="utf-8") as f:
        f.write("\n".join(lines))
        f.write("\n")
    logger.info("wrote %d segment(s) to %s", len(frame.segments), out_path)
