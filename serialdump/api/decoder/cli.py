#!/usr/bin/env python3
"""
`serialdump.api.decoder` command-line interface.

Prints a serialized string (a session file, a cache entry, a database column
dump, ...) in a YAML-like format with comments so that it's human readable.
Each line is annotated with the input byte offset it starts at; references
name the line their target was first written on.

This is the entrypoint for `python -m serialdump.api.decoder ...` (via
`__main__.py`) and for the `serialdump` console script.
"""

from __future__ import annotations

import argparse
import logging
import sys
from contextlib import ExitStack
from pathlib import Path
from typing import BinaryIO, TextIO

from .errors import DecodeError
from .parser import decode_stream

logger = logging.getLogger(__name__)

STDIN_PATH = "-"


def _open_input(stack: ExitStack, path: str) -> BinaryIO:
    if path == STDIN_PATH:
        return sys.stdin.buffer
    return stack.enter_context(open(path, "rb"))


def _open_output(stack: ExitStack, out: Path | None) -> TextIO:
    if out is None:
        return sys.stdout
    return stack.enter_context(out.open("w", encoding="utf-8", newline="\n"))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="serialdump",
        description=(
            "Analyse a serialized string (session file or other serialize() output) and print it in "
            "YAML-like format with comments so that it's human readable."
        ),
    )
    parser.add_argument("input", help='Input file, or "-" to read standard input')
    parser.add_argument("--out", type=Path, help="Write the tree to this path instead of stdout")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log decode progress to stderr")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    with ExitStack() as stack:
        try:
            in_stream = _open_input(stack, args.input)
        except OSError as exc:
            sys.stderr.write(f"could not open {args.input}: {exc.strerror or exc}\n")
            return 1
        try:
            out_stream = _open_output(stack, args.out)
        except OSError as exc:
            sys.stderr.write(f"could not open {args.out}: {exc.strerror or exc}\n")
            return 1

        try:
            summary = decode_stream(in_stream, out_stream)
        except DecodeError as exc:
            out_stream.flush()
            sys.stderr.write(f"error: {exc}\n")
            return 1
        except RecursionError:
            out_stream.flush()
            sys.stderr.write("error: input nested too deeply to decode\n")
            return 1

    logger.info(
        "%s: %d bytes, %d lines, %d references",
        args.input,
        summary.bytes_consumed,
        summary.lines,
        summary.references,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
