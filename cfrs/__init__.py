"""Render self-similar figures from a bracketed turtle grammar."""

from cfrs.config import RenderOptions, TurtleConfig  # noqa: F401
from cfrs.errors import (  # noqa: F401
    CfrsError,
    ConfigError,
    EmptyInput,
    GrammarError,
    InvalidDimensions,
    UnbalancedBrackets,
    UnknownSymbol,
)
from cfrs.grammar import Token, TokenKind, tokenize  # noqa: F401
from cfrs.interpreter import Frame, PathSegment  # noqa: F401
from cfrs.raster import RasterBuffer  # noqa: F401
from cfrs.sequencer import FrameSequence, RenderedFrame, render, trace  # noqa: F401

__version__ = "0.1.0"
