"""Command line interface.

Run:
  cfrs render "[CF[RF]]" out.png
  cfrs render "[F][RF][RRF]" out.gif --interval 200
  cfrs validate "[SF[RF]]"
  cfrs random --seed 123
  cfrs --help
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from cfrs.config import RenderOptions, load_json, parse_color, parse_options
from cfrs.encode import is_animated_path, save_sequence, write_svg
from cfrs.errors import CfrsError, ConfigError
from cfrs.grammar import max_depth, tokenize
from cfrs.log import get_logger
from cfrs.randomgen import random_grammar
from cfrs.sequencer import partition, render, trace

logger = get_logger(__name__)

HELP_EPILOG = r"""
GRAMMAR

  F  draw forward one step in the current colour
  S  multiply the step length by the shrink factor (default 0.5)
  R  rotate the heading clockwise by the turn angle (default 45 degrees)
  C  advance to the next palette colour
     (white, black, blue, green, cyan, red, magenta, yellow, then wrap)
  [  save the turtle state
  ]  restore the state saved by the matching [

  The turtle starts at the canvas centre heading up. The drawing is scaled
  uniformly to fit the canvas and centred.

FRAMES

  Writing to .gif renders one frame per top-level group: "[F][RF]" gives a
  two-frame animation. Other formats (.png .bmp .jpg .jpeg .webp .svg) draw
  the whole grammar into a single image.

CONFIG FILE (--config)

    {
      "grammar": "[CF[SRF][SRRRF]]",
      "canvas": {"width": 256, "height": 256, "background": "black"},
      "turtle": {"step": 10, "angle": 45, "clockwise": true, "shrink": 0.5,
                 "pen_width": 1, "palette": ["white", "#ff8800"],
                 "start_color": 0, "heading": 0},
      "animation": {"delay_ms": 100, "accumulate": false},
      "workers": 1
    }

  Command line flags override values from the file.
"""


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="cfrs",
        description="Render bracketed fractal grammars to images and animations.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=HELP_EPILOG,
    )

    sub = p.add_subparsers(dest="cmd", required=True)

    pr = sub.add_parser("render", help="Render a grammar to an image file.")
    pr.add_argument(
        "grammar",
        nargs="?",
        default=None,
        help="Grammar string (may come from --config instead).",
    )
    pr.add_argument("output", help="Output path; the extension picks the format.")
    pr.add_argument("--config", help="JSON file with render options.")
    pr.add_argument("--width", type=int, default=None, help="Canvas width (256).")
    pr.add_argument("--height", type=int, default=None, help="Canvas height (256).")
    pr.add_argument(
        "-b", "--background", default=None, help="Colour name or hex (black)."
    )
    pr.add_argument(
        "--interval",
        type=int,
        default=None,
        help="Delay between animation frames in milliseconds (100).",
    )
    pr.add_argument(
        "--accumulate",
        action="store_true",
        default=None,
        help="Keep earlier frames visible in later ones.",
    )
    pr.add_argument(
        "--workers", type=int, default=None, help="Threads used to rasterize frames."
    )

    pv = sub.add_parser("validate", help="Check a grammar and print a summary.")
    pv.add_argument("grammar", help="Grammar string.")

    pg = sub.add_parser("random", help="Print a random grammar.")
    pg.add_argument(
        "--seed", type=int, default=None, help="Seed for repeatable randomness."
    )
    pg.add_argument("--length", type=int, default=None, help="Number of draws.")

    return p


# -------------------------
# Commands
# -------------------------


def _resolve_render_args(args: argparse.Namespace) -> tuple[str, RenderOptions]:
    grammar: str | None = None
    options = RenderOptions()
    if args.config:
        grammar, options = parse_options(load_json(args.config))
    if args.grammar is not None:
        grammar = args.grammar
    if grammar is None:
        raise ConfigError("no grammar given on the command line or in --config")

    background = None
    if args.background is not None:
        background = parse_color(args.background, "--background")

    options = options.with_overrides(
        width=args.width,
        height=args.height,
        background=background,
        delay_ms=args.interval,
        accumulate=args.accumulate,
        workers=args.workers,
    )
    if options.delay_ms <= 0:
        raise ConfigError("--interval must be > 0")
    if options.workers < 1:
        raise ConfigError("--workers must be >= 1")
    return grammar, options


def cmd_render(args: argparse.Namespace) -> None:
    grammar, options = _resolve_render_args(args)
    output = Path(args.output)

    if output.suffix.lower() == ".svg":
        frames = trace(grammar, options.with_overrides(animate=False))
        write_svg(frames[0], out_path=output, title=grammar)
        return

    animate = is_animated_path(output)
    sequence = render(grammar, options.with_overrides(animate=animate))
    save_sequence(sequence, output)


def cmd_validate(grammar: str) -> None:
    tokens = tokenize(grammar)
    frames = trace(grammar)
    segments = sum(len(f.segments) for f in frames)

    print(f"length: {len(grammar)}")
    print(f"tokens: {len(tokens)}")
    print(f"max depth: {max_depth(tokens)}")
    print(f"frames: {len(partition(tokens))}")
    print(f"segments: {segments}")


def cmd_random(seed: int | None, length: int | None) -> None:
    if length is not None and length < 1:
        raise ConfigError("--length must be >= 1")
    print(random_grammar(seed, length))


def main(argv: list[str] | None = None) -> int:
    ap = build_argparser()
    args = ap.parse_args(argv)

    try:
        if args.cmd == "render":
            cmd_render(args)
        elif args.cmd == "validate":
            cmd_validate(args.grammar)
        elif args.cmd == "random":
            cmd_random(args.seed, args.length)
        else:
            raise AssertionError("unreachable")
    except CfrsError as e:
        logger.debug("command %s failed", args.cmd, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except OSError as e:
        print(f"File error: {e}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
