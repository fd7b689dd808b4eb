"""
Streaming decoder for the byte-length-prefixed serialization format.

One `SerializedStreamDecoder` owns all mutable state for one run: the byte
cursor, the line writer (line counter, depth, pending comments) and the
reference table. Nothing is shared between instances, so independent streams
can be decoded side by side with separate decoders.

Grammar (one type byte, then):
- `N;`                          null
- `b:0;` / `b:1;`               boolean
- `i:<int>;`                    integer
- `d:<float>;`                  float
- `s:<len>:"<bytes>";`          byte string, `len` counts bytes
- `a:<n>:{<key><value>...}`     array
- `O:<len>:"<class>":<n>:{...}` object
- `C:<len>:"<class>":<len>:{<payload>}` custom-serialized object
- `r:<id>;` / `R:<id>;`         reference to an earlier value

Decoding is plain recursive descent, so nesting depth is bounded by the
interpreter's recursion limit (a little over 300 levels with the default).
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import BinaryIO, Optional, TextIO, Tuple

from .cursor import ByteCursor
from .errors import InvalidKeyType, InvalidReferenceId, MalformedPropertyKey, PayloadLengthMismatch, UnexpectedTag
from .export import Scalar, export_bytes, export_literal
from .primitives import read_number, read_string
from .references import ReferenceEntry, ReferenceTable
from .render import CommentKind, LineWriter

logger = logging.getLogger(__name__)

ROOT_PATH = "#"
EXPECTED_TAGS = "a,b,C,d,i,N,O,R,r or s"


@dataclass
class DecodeSummary:
    bytes_consumed: int
    lines: int
    references: int
    values: int
    resolutions: int


def _text(raw: bytes) -> str:
    return raw.decode("utf-8", errors="backslashreplace")


def split_property_key(key: bytes, offset: int) -> Tuple[bytes, bytes]:
    """
    Split a `\\0<class>\\0<name>` property key into (declaring class, name).

    `*` as the declaring class marks a protected member; any other class name
    marks a private member of that class. Only a private member of the
    object's own class is annotated.
    """
    end = key.find(b"\0", 1)
    if end == -1:
        raise MalformedPropertyKey(export_bytes(key[1:]), 'a string containing another "\\0"', offset)
    return key[1:end], key[end + 1 :]


class SerializedStreamDecoder:
    def __init__(self, in_stream: BinaryIO, out_stream: TextIO):
        self.cursor = ByteCursor(in_stream)
        self.writer = LineWriter(out_stream)
        self.references = ReferenceTable()
        self.values = 0
        self.resolutions = 0

    def parse(self) -> DecodeSummary:
        """Decode exactly one top-level value and terminate the output line."""
        logger.debug("decoding serialized value")
        self.parse_value()
        self._newline()
        summary = DecodeSummary(
            bytes_consumed=self.cursor.position,
            lines=self.writer.line - 1,
            references=self.references.registered,
            values=self.values,
            resolutions=self.resolutions,
        )
        logger.debug("decoded %s", summary)
        return summary

    def _newline(self) -> None:
        self.writer.newline(self.cursor.position)

    def _register(self, value: Scalar, path: str) -> None:
        self.references.register(self.writer.line, value, path)

    def _write_scalar(self, value: Scalar, path: str) -> None:
        self._register(value, path)
        self.writer.write(export_literal(value))

    def parse_value(self, path: str = ROOT_PATH) -> None:
        cursor = self.cursor
        tag = cursor.read_byte()
        value: Scalar

        if tag == b"N":
            cursor.expect(b";")
            value = None
        elif tag == b"b":
            cursor.expect(b":")
            char = cursor.read_byte()
            if char == b"0":
                value = False
            elif char == b"1":
                value = True
            else:
                cursor.unexpected(char, '"0" or "1"')
            cursor.expect(b";")
        elif tag == b"i":
            cursor.expect(b":")
            value = read_number(cursor)
        elif tag == b"d":
            cursor.expect(b":")
            value = read_number(cursor, fraction=True)
        elif tag == b"s":
            cursor.expect(b":")
            value = read_string(cursor)
            cursor.expect(b";")
        elif tag == b"a":
            self.values += 1
            self._register(b"", path)
            cursor.expect(b":")
            if self.writer.depth == 0:
                self.writer.write("array:")
            self._parse_sequence(path)
            return
        elif tag == b"O":
            self.values += 1
            self._register(b"", path)
            cursor.expect(b":")
            if self.writer.depth == 0:
                self.writer.write("object:")
            class_name = read_string(cursor)
            self.writer.comment(CommentKind.CLASS, _text(class_name))
            cursor.expect(b":")
            self._parse_sequence(path, class_name)
            return
        elif tag == b"C":
            self.values += 1
            self._register(b"", path)
            self._parse_custom(path)
            return
        elif tag in (b"r", b"R"):
            self.values += 1
            cursor.expect(b":")
            ref_id = read_number(cursor)
            entry = self._resolve(ref_id)
            if tag == b"r":
                self._register(entry.value, path)
            else:
                self.resolutions += 1
            return
        else:
            cursor.unexpected(tag, EXPECTED_TAGS, UnexpectedTag)

        self.values += 1
        self._write_scalar(value, path)

    def _parse_custom(self, path: str) -> None:
        cursor = self.cursor
        cursor.expect(b":")
        class_name = read_string(cursor)
        self.writer.comment(CommentKind.CLASS, _text(class_name))
        cursor.expect(b":")
        length = read_number(cursor)
        cursor.expect(b"{")
        if length > 0:
            # The payload is only readable when it is itself one serialized value.
            stop_at = cursor.position + length
            self.parse_value(path)
            if cursor.position != stop_at:
                raise PayloadLengthMismatch(stop_at, cursor.position, _text(class_name))
        cursor.expect(b"}")

    def _resolve(self, ref_id: int) -> ReferenceEntry:
        entry = self.references.get(ref_id)
        if entry is None:
            raise InvalidReferenceId(
                str(ref_id),
                f"a legal reference number (1 to {len(self.references) - 1})",
                self.cursor.position,
            )
        writer = self.writer
        writer.depth += 1
        self._newline()
        writer.write("$ref: " + export_literal(entry.value))
        writer.comment(CommentKind.LINE, f"line {entry.line}")
        writer.comment(CommentKind.REFERENCE, f"ref {entry.path}")
        writer.depth -= 1
        return entry

    def _parse_sequence(self, path: str, class_name: Optional[bytes] = None) -> None:
        cursor = self.cursor
        count = read_number(cursor)
        cursor.expect(b"{")
        if count > 0:
            self.writer.depth += 1
            for _ in range(count):
                self._newline()
                self._parse_entry(path, class_name)
            self.writer.depth -= 1
        else:
            self.writer.write("[]")
        cursor.expect(b"}")

    def _parse_entry(self, path: str, class_name: Optional[bytes]) -> None:
        cursor = self.cursor
        tag = cursor.read_byte()
        if tag == b"i":
            cursor.expect(b":")
            key = str(read_number(cursor))
            rendered = key
        elif tag == b"s":
            cursor.expect(b":")
            raw = read_string(cursor)
            if class_name and raw[:1] == b"\0":
                declaring, raw = split_property_key(raw, cursor.position)
                if declaring != b"*" and declaring == class_name:
                    self.writer.comment(CommentKind.VISIBILITY, f"private of {_text(declaring)}")
            cursor.expect(b";")
            key = _text(raw)
            rendered = export_bytes(raw)
        else:
            cursor.unexpected(tag, '"i" or "s"', InvalidKeyType)

        self.writer.write(rendered + ": ")
        self.parse_value(f"{path}/{key}")


def decode_stream(in_stream: BinaryIO, out_stream: TextIO) -> DecodeSummary:
    """Decode one value from `in_stream` and write the tree to `out_stream`."""
    return SerializedStreamDecoder(in_stream, out_stream).parse()


def decode_bytes(data: bytes) -> str:
    out = io.StringIO()
    decode_stream(io.BytesIO(data), out)
    return out.getvalue()
