"""Tokenizer and validator for the bracketed drawing grammar.

Alphabet:
  F  draw forward one step
  S  shrink the step length
  R  rotate the heading by the configured increment
  C  advance to the next palette colour
  [  open a group (save turtle state)
  ]  close a group (restore turtle state)
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from cfrs.errors import EmptyInput, UnbalancedBrackets, UnknownSymbol


class TokenKind(Enum):
    FORWARD = "F"
    SHRINK = "S"
    ROTATE = "R"
    COLOR_ADVANCE = "C"
    GROUP_OPEN = "["
    GROUP_CLOSE = "]"


_BY_SYMBOL = {kind.value: kind for kind in TokenKind}

ALPHABET = "".join(_BY_SYMBOL)


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    position: int

    @property
    def symbol(self) -> str:
        return self.kind.value


def tokenize(grammar: str) -> tuple[Token, ...]:
    """Validate ``grammar`` and return its tokens in textual order.

    Raises EmptyInput, UnknownSymbol or UnbalancedBrackets. The reported
    position for an unclosed ``[`` is the innermost one still open at the end.
    """
    if not grammar:
        raise EmptyInput()

    tokens: list[Token] = []
    open_positions: list[int] = []

    for i, ch in enumerate(grammar):
        kind = _BY_SYMBOL.get(ch)
        if kind is None:
            raise UnknownSymbol(i, ch)

        if kind is TokenKind.GROUP_OPEN:
            open_positions.append(i)
        elif kind is TokenKind.GROUP_CLOSE:
            if not open_positions:
                raise UnbalancedBrackets(i, "unmatched ']'")
            open_positions.pop()

        tokens.append(Token(kind, i))

    if open_positions:
        raise UnbalancedBrackets(open_positions[-1], "unclosed '['")

    return tuple(tokens)


def max_depth(tokens: Sequence[Token]) -> int:
    depth = deepest = 0
    for tok in tokens:
        if tok.kind is TokenKind.GROUP_OPEN:
            depth += 1
            deepest = max(deepest, depth)
        elif tok.kind is TokenKind.GROUP_CLOSE:
            depth -= 1
    return deepest


@dataclass(frozen=True)
class TopLevelPart:
    """One top-level group and the loose tokens written just before it."""

    lead: tuple[Token, ...]
    group: tuple[Token, ...]


def split_top_level(tokens: Sequence[Token]) -> list[TopLevelPart]:
    """Split a validated token sequence at its top-level groups.

    With two or more top-level groups there is one part per group, whose
    ``lead`` holds the loose top-level tokens since the previous group. Loose
    tokens after the last group belong to no part. With fewer than two groups
    the whole sequence is returned as a single part with an empty lead.
    """
    parts: list[TopLevelPart] = []
    lead: list[Token] = []
    group: list[Token] = []
    depth = 0

    for tok in tokens:
        if tok.kind is TokenKind.GROUP_OPEN:
            depth += 1
        if depth == 0:
            if tok.kind is TokenKind.GROUP_CLOSE:
                raise UnbalancedBrackets(tok.position, "unmatched ']'")
            lead.append(tok)
            continue

        group.append(tok)
        if tok.kind is TokenKind.GROUP_CLOSE:
            depth -= 1
            if depth == 0:
                parts.append(TopLevelPart(tuple(lead), tuple(group)))
                lead = []
                group = []

    if len(parts) < 2:
        return [TopLevelPart((), tuple(tokens))]
    return parts
