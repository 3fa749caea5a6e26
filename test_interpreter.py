#!/usr/bin/env python3
import math

import pytest

from cfrs.config import DEFAULT_PALETTE, TurtleConfig
from cfrs.errors import ConfigError, UnbalancedBrackets
from cfrs.grammar import Token, TokenKind, tokenize
from cfrs.interpreter import PathSegment, expand, initial_state
from cfrs.state import TurtleState


def _length(seg: PathSegment) -> float:
    return math.hypot(seg.end[0] - seg.start[0], seg.end[1] - seg.start[1])


class TestTurtle:
    def setup_method(self) -> None:
        self.config = TurtleConfig()
        self.start = TurtleState(
            x=0.0, y=0.0, heading_deg=0.0, step=10.0, pen_width=1, color_index=0
        )

    def _expand(self, grammar: str, config: TurtleConfig | None = None) -> list[PathSegment]:
        return expand(tokenize(grammar), config or self.config, self.start)

    def test_forward_draws_up(self) -> None:
        segments = self._expand("F")
        assert len(segments) == 1
        seg = segments[0]
        assert seg.start == (0.0, 0.0)
        assert seg.end[0] == pytest.approx(0)
        assert seg.end[1] == pytest.approx(-10)
        assert seg.width == 1
        assert seg.color == DEFAULT_PALETTE[0]

    def test_forward_chains(self) -> None:
        segments = self._expand("FF")
        assert segments[1].start == segments[0].end
        assert segments[1].end[1] == pytest.approx(-20)

    def test_rotate_clockwise(self) -> None:
        segments = self._expand("RF")
        assert segments[0].end[0] == pytest.approx(10 * math.sqrt(0.5))
        assert segments[0].end[1] == pytest.approx(-10 * math.sqrt(0.5))

    def test_rotate_two_steps_points_right(self) -> None:
        segments = self._expand("RRF")
        assert segments[0].end[0] == pytest.approx(10)
        assert segments[0].end[1] == pytest.approx(0, abs=1e-9)

    def test_rotate_counterclockwise(self) -> None:
        config = TurtleConfig(clockwise=False)
        segments = self._expand("RRF", config)
        assert segments[0].end[0] == pytest.approx(-10)
        assert segments[0].end[1] == pytest.approx(0, abs=1e-9)

    def test_eight_rotations_wrap(self) -> None:
        segments = self._expand("RRRRRRRRF")
        assert segments[0].end[0] == pytest.approx(0, abs=1e-9)
        assert segments[0].end[1] == pytest.approx(-10)

    def test_shrink(self) -> None:
        segments = self._expand("SF")
        assert _length(segments[0]) == pytest.approx(5)

    def test_shrink_custom_factor(self) -> None:
        config = TurtleConfig(shrink=0.25)
        segments = self._expand("SSF", config)
        assert _length(segments[0]) == pytest.approx(10 * 0.25 * 0.25)

    def test_rotate_and_shrink_draw_nothing(self) -> None:
        assert self._expand("RSRC") == []

    def test_color_advance(self) -> None:
        segments = self._expand("FCF")
        assert segments[0].color == DEFAULT_PALETTE[0]
        assert segments[1].color == DEFAULT_PALETTE[1]

    def test_color_wraps(self) -> None:
        segments = self._expand("C" * len(DEFAULT_PALETTE) + "F")
        assert segments[0].color == DEFAULT_PALETTE[0]

    def test_custom_palette(self) -> None:
        config = TurtleConfig(palette=((1, 2, 3), (4, 5, 6)))
        segments = self._expand("FCFCF", config)
        assert [s.color for s in segments] == [(1, 2, 3), (4, 5, 6), (1, 2, 3)]

    def test_group_restores_state(self) -> None:
        # The second F must use the pre-group step and position.
        segments = self._expand("[SSF]F")
        assert len(segments) == 2
        assert _length(segments[0]) == pytest.approx(2.5)
        assert _length(segments[1]) == pytest.approx(10)
        assert segments[1].start == (0.0, 0.0)

    def test_group_restores_heading_and_color(self) -> None:
        segments = self._expand("[RRCF]F")
        assert segments[0].color == DEFAULT_PALETTE[1]
        assert segments[1].color == DEFAULT_PALETTE[0]
        assert segments[1].end[0] == pytest.approx(0, abs=1e-9)
        assert segments[1].end[1] == pytest.approx(-10)

    def test_group_shares_state_with_outside(self) -> None:
        # Mutations before a group are visible inside it.
        segments = self._expand("S[F]")
        assert _length(segments[0]) == pytest.approx(5)

    def test_nested_groups(self) -> None:
        segments = self._expand("F[RF[RF]F]F")
        # after the outer group the turtle is back at the tip of the first F
        assert segments[-1].start[0] == pytest.approx(0)
        assert segments[-1].start[1] == pytest.approx(-10)
        assert segments[-1].end[1] == pytest.approx(-20)

    def test_pop_empty_stack(self) -> None:
        tokens = (
            Token(TokenKind.FORWARD, 0),
            Token(TokenKind.GROUP_CLOSE, 1),
        )
        with pytest.raises(UnbalancedBrackets) as exc:
            expand(tokens, self.config, self.start)
        assert exc.value.position == 1

    def test_deterministic(self) -> None:
        grammar = "[CF[SRF[SRF]][SRRRF]]RF"
        assert self._expand(grammar) == self._expand(grammar)


class TestInitialState:
    def test_canvas_center(self) -> None:
        state = initial_state(TurtleConfig(pen_width=3, start_color=2), 256, 128)
        assert state.x == pytest.approx(127.5)
        assert state.y == pytest.approx(63.5)
        assert state.heading_deg == 0
        assert state.step == 10
        assert state.pen_width == 3
        assert state.color_index == 2


class TestTurtleConfig:
    def test_invalid_shrink(self) -> None:
        with pytest.raises(ConfigError):
            TurtleConfig(shrink=1.5)

    def test_invalid_step(self) -> None:
        with pytest.raises(ConfigError):
            TurtleConfig(step=0)

    def test_start_color_out_of_range(self) -> None:
        with pytest.raises(ConfigError):
            TurtleConfig(palette=((0, 0, 0),), start_color=1)

    def test_rotation_sign(self) -> None:
        assert TurtleConfig(angle_deg=30).rotation == 30
        assert TurtleConfig(angle_deg=30, clockwise=False).rotation == -30
