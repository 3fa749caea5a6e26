"""Turtle interpreter: tokens in, line segments out."""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass, replace

from cfrs.config import RGB, TurtleConfig
from cfrs.grammar import Token, TokenKind
from cfrs.log import get_logger
from cfrs.state import StateStack, TurtleState

logger = get_logger(__name__)

Point = tuple[float, float]
Bounds = tuple[float, float, float, float]


@dataclass(frozen=True)
class PathSegment:
    start: Point
    end: Point
    width: int
    color: RGB


@dataclass(frozen=True)
class Frame:
    """Geometry of one output image, before normalization."""

    segments: tuple[PathSegment, ...]
    width: int
    height: int
    background: RGB
    # When set, normalization uses these bounds instead of the segments' own.
    bounds: Bounds | None = None


def initial_state(config: TurtleConfig, width: int, height: int) -> TurtleState:
    return TurtleState(
        x=(width - 1) / 2,
        y=(height - 1) / 2,
        heading_deg=config.start_heading_deg,
        step=config.step,
        pen_width=config.pen_width,
        color_index=config.start_color,
    )


def _advance(state: TurtleState) -> Point:
    rad = math.radians(state.heading_deg)
    # Heading 0 is "up" in screen coordinates, so y decreases.
    return (state.x + state.step * math.sin(rad), state.y - state.step * math.cos(rad))


def run(
    tokens: Iterable[Token],
    config: TurtleConfig,
    start: TurtleState,
) -> tuple[list[PathSegment], TurtleState]:
    """Interpret ``tokens`` from ``start``; return the segments and final state.

    Groups do not get a fresh state: ``[`` only records a restore point, and
    everything inside the group keeps mutating the same turtle until the
    matching ``]`` puts the snapshot back.
    """
    state = start
    stack = StateStack()
    segments: list[PathSegment] = []
    palette_size = len(config.palette)

    for tok in tokens:
        kind = tok.kind

        if kind is TokenKind.FORWARD:
            nx, ny = _advance(state)
            segments.append(
                PathSegment(
                    start=(state.x, state.y),
                    end=(nx, ny),
                    width=state.pen_width,
                    color=config.palette[state.color_index],
                )
            )
            state = replace(state, x=nx, y=ny)
        elif kind is TokenKind.SHRINK:
            state = replace(state, step=state.step * config.shrink)
        elif kind is TokenKind.ROTATE:
            state = replace(
                state, heading_deg=(state.heading_deg + config.rotation) % 360.0
            )
        elif kind is TokenKind.COLOR_ADVANCE:
            state = replace(state, color_index=(state.color_index + 1) % palette_size)
        elif kind is TokenKind.GROUP_OPEN:
            stack.push(state)
        elif kind is TokenKind.GROUP_CLOSE:
            state = stack.pop(tok.position)
        else:
            raise AssertionError(f"unhandled token kind {kind!r}")

    logger.debug("expanded %d segments", len(segments))
    return segments, state


def expand(
    tokens: Iterable[Token],
    config: TurtleConfig,
    start: TurtleState,
) -> list[PathSegment]:
    """Interpret ``tokens`` from ``start`` and return the drawn segments."""
    segments, _ = run(tokens, config, start)
    return segments
