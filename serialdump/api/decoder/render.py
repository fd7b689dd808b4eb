"""
Line and comment rendering.

Output is streamed: text is written as soon as it is decoded, and every line
ends with a sparse comment block collected while that line was being
written. The block is flushed just before the line break, ordered by
`CommentKind`, then cleared.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Dict, TextIO

INDENT = "  "
COMMENT_MARKER = "  # "
COMMENT_SEPARATOR = " - "


class CommentKind(IntEnum):
    LINE = 0
    VISIBILITY = 1
    CLASS = 2
    BYTE = 3
    REFERENCE = 4


class LineWriter:
    """Owns the output stream, the line counter and the nesting depth."""

    def __init__(self, out: TextIO):
        self._out = out
        self.depth = 0
        self.line = 1
        self.line_start_byte = 0
        self._comments: Dict[CommentKind, str] = {}

    def write(self, text: str) -> None:
        self._out.write(text)

    def comment(self, kind: CommentKind, text: str) -> None:
        self._comments[kind] = text

    def newline(self, position: int) -> None:
        """
        End the current line at input offset `position`.

        The byte comment carries `position` and is only attached when the line
        consumed input since the previous line break.
        """
        if position != self.line_start_byte:
            self._comments[CommentKind.BYTE] = str(position)
        if self._comments:
            block = COMMENT_SEPARATOR.join(self._comments[kind] for kind in sorted(self._comments))
            self._out.write(COMMENT_MARKER + block)
        self._comments = {}

        self._out.write("\n" + INDENT * self.depth)
        self.line += 1
        self.line_start_byte = position
