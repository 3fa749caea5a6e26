"""Exceptions raised by cfrs.

Everything derives from :class:`CfrsError` (a ``ValueError``) so callers that
only care about "bad input" can catch a single type.
"""

from __future__ import annotations


class CfrsError(ValueError):
    pass


# -------------------------
# Grammar errors
# -------------------------


class GrammarError(CfrsError):
    """A grammar string that cannot be tokenized or interpreted."""

    def __init__(self, message: str, position: int | None = None) -> None:
        if position is not None:
            message = f"{message} (at position {position})"
        super().__init__(message)
        self.position = position


class EmptyInput(GrammarError):
    def __init__(self) -> None:
        super().__init__("grammar must be non-empty")


class UnknownSymbol(GrammarError):
    def __init__(self, position: int, symbol: str) -> None:
        super().__init__(f"unknown symbol {symbol!r}", position)
        self.symbol = symbol


class UnbalancedBrackets(GrammarError):
    def __init__(self, position: int | None, message: str = "unbalanced brackets") -> None:
        super().__init__(message, position)


# -------------------------
# Configuration errors
# -------------------------


class ConfigError(CfrsError):
    pass


class InvalidDimensions(ConfigError):
    pass


def _require(cond: bool, msg: str) -> None:
    if not cond:
        raise ConfigError(msg)
