from __future__ import annotations

from dataclasses import dataclass

from cfrs.errors import UnbalancedBrackets


@dataclass(frozen=True)
class TurtleState:
    """Drawing state of the turtle.

    Coordinates are screen coordinates (y grows downwards). A heading of 0
    points up; headings grow clockwise on screen.
    """

    x: float
    y: float
    heading_deg: float
    step: float
    pen_width: int
    color_index: int


class StateStack:
    """Snapshots saved by ``[`` and restored by ``]``.

    States are immutable, so a pushed snapshot can never be altered by the
    interpreter after the push.
    """

    def __init__(self) -> None:
        self._items: list[TurtleState] = []

    def __len__(self) -> int:
        return len(self._items)

    @property
    def depth(self) -> int:
        return len(self._items)

    def push(self, state: TurtleState) -> None:
        self._items.append(state)

    def pop(self, position: int | None = None) -> TurtleState:
        if not self._items:
            raise UnbalancedBrackets(position, "pop on empty state stack")
        return self._items.pop()

    def peek(self) -> TurtleState | None:
        return self._items[-1] if self._items else None
