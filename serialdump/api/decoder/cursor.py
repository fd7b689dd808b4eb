"""
Byte cursor over a readable binary stream.

Reads are byte-exact and unbuffered beyond what the stream itself does:
string lengths in the format are byte counts, so nothing here decodes text.
`position` counts every byte consumed since the start of the stream,
including bytes consumed on a failing read.
"""

from __future__ import annotations

from typing import BinaryIO, NoReturn, Union

from .errors import UnexpectedEndOfInput, UnexpectedToken
from .export import export_bytes


class ByteCursor:
    def __init__(self, stream: BinaryIO):
        self._stream = stream
        self.position = 0

    def read_byte(self) -> bytes:
        """Return the next byte as a length-1 bytes object."""
        data = self._stream.read(1)
        if not data:
            raise UnexpectedEndOfInput(self.position)
        self.position += 1
        return data

    def read_exact(self, n: int) -> bytes:
        if n == 0:
            return b""
        chunks = []
        remaining = n
        while remaining > 0:
            data = self._stream.read(remaining)
            if not data:
                raise UnexpectedEndOfInput(self.position)
            self.position += len(data)
            remaining -= len(data)
            chunks.append(data)
        return b"".join(chunks)

    def expect(self, expected: Union[bytes, str]) -> None:
        """Read one byte and fail unless it equals `expected`."""
        if isinstance(expected, str):
            expected = expected.encode("ascii")
        actual = self.read_byte()
        if actual != expected:
            self.unexpected(actual, export_bytes(expected))

    def unexpected(
        self, actual: bytes, expected: str, error: type[UnexpectedToken] = UnexpectedToken
    ) -> NoReturn:
        raise error(export_bytes(actual), expected, self.position)
