"""Split a grammar into frames and render each of them."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

from cfrs.config import RGB, RenderOptions, check_dimensions
from cfrs.grammar import Token, TopLevelPart, split_top_level, tokenize
from cfrs.interpreter import Frame, PathSegment, expand, initial_state, run
from cfrs.log import get_logger
from cfrs.raster import RasterBuffer, compute_bounds, rasterize

logger = get_logger(__name__)


@dataclass(frozen=True)
class RenderedFrame:
    buffer: RasterBuffer
    delay_ms: int


@dataclass(frozen=True)
class FrameSequence:
    frames: tuple[RenderedFrame, ...]
    width: int
    height: int
    background: RGB

    def __len__(self) -> int:
        return len(self.frames)

    def __iter__(self) -> Iterator[RenderedFrame]:
        return iter(self.frames)

    def __getitem__(self, index: int) -> RenderedFrame:
        return self.frames[index]

    @property
    def is_animated(self) -> bool:
        return len(self.frames) > 1


def partition(tokens: Sequence[Token], *, animate: bool = True) -> list[TopLevelPart]:
    if not animate:
        return [TopLevelPart((), tuple(tokens))]
    return split_top_level(tokens)


def trace(grammar: str, options: RenderOptions | None = None) -> list[Frame]:
    """Expand ``grammar`` into per-frame geometry without rasterizing it.

    Each frame draws one top-level group from the state left by the initial
    turtle and the loose top-level tokens before that group. A group restores
    that state when it closes, so frame k matches group k in the single-frame
    render. Loose tokens only move the turtle; their own strokes appear in
    the single-frame render only. Frames appear in the left-to-right order of
    their groups.
    """
    options = options or RenderOptions()
    check_dimensions(options.width, options.height)

    tokens = tokenize(grammar)
    parts = partition(tokens, animate=options.animate)
    state = initial_state(options.turtle, options.width, options.height)

    per_part: list[list[PathSegment]] = []
    for part in parts:
        _, state = run(part.lead, options.turtle, state)
        per_part.append(expand(part.group, options.turtle, state))

    if options.accumulate and len(per_part) > 1:
        running: list[PathSegment] = []
        cumulative: list[tuple[PathSegment, ...]] = []
        for segments in per_part:
            running.extend(segments)
            cumulative.append(tuple(running))
        # Shared bounds keep the drawing still while it grows.
        shared = compute_bounds(running)
        return [
            Frame(segs, options.width, options.height, options.background, bounds=shared)
            for segs in cumulative
        ]

    return [
        Frame(tuple(segments), options.width, options.height, options.background)
        for segments in per_part
    ]


def render(grammar: str, options: RenderOptions | None = None) -> FrameSequence:
    """Render ``grammar`` into an ordered sequence of raster frames.

    Raises GrammarError or ConfigError; nothing is returned on failure.
    """
    options = options or RenderOptions()
    frames = trace(grammar, options)

    if options.workers > 1 and len(frames) > 1:
        # map() yields in submission order, not completion order.
        with ThreadPoolExecutor(max_workers=options.workers) as pool:
            buffers = list(pool.map(rasterize, frames))
    else:
        buffers = [rasterize(frame) for frame in frames]

    logger.debug(
        "rendered %d frame(s) at %dx%d", len(buffers), options.width, options.height
    )
    return FrameSequence(
        frames=tuple(RenderedFrame(buf, options.delay_ms) for buf in buffers),
        width=options.width,
        height=options.height,
        background=options.background,
    )
