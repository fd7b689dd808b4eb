"""
Decode failures.

Every failure is terminal: the decoder never catches or retries its own
errors, and the first one unwinds the whole decode. Each error carries the
absolute byte offset at which it was detected so malformed input can be
located with a hex viewer.
"""

from __future__ import annotations

from typing import Optional


class DecodeError(Exception):
    """Base decode error."""

    def __init__(self, message: str, offset: int):
        super().__init__(f"{message} at byte {offset}")
        self.offset = offset


class UnexpectedEndOfInput(DecodeError):
    """Raised when the stream runs out in the middle of a token."""

    def __init__(self, offset: int):
        super().__init__("Unexpected end of input", offset)


class UnexpectedToken(DecodeError):
    """Raised when the bytes read do not match what the grammar allows."""

    def __init__(self, actual: str, expected: str, offset: int):
        super().__init__(f"Encountered {actual}, expected {expected}", offset)
        self.actual = actual
        self.expected = expected


class MalformedNumber(UnexpectedToken):
    """Raised on a byte that cannot continue or terminate a number."""


class UnexpectedTag(UnexpectedToken):
    """Raised on a type byte outside the nine known value tags."""


class InvalidKeyType(UnexpectedToken):
    """Raised when an array/object key is neither an integer nor a string."""


class MalformedPropertyKey(UnexpectedToken):
    """Raised when a NUL-prefixed property key has no closing NUL."""


class InvalidReferenceId(UnexpectedToken):
    """Raised when a reference points outside the already registered values."""


class PayloadLengthMismatch(DecodeError):
    """Raised when a custom-serialized payload does not end where it declared."""

    def __init__(self, expected_end: int, offset: int, class_name: Optional[str] = None):
        what = "Serializable object" if class_name is None else f"Serializable object {class_name}"
        super().__init__(f"{what} was expected to end at {expected_end}, stopped", offset)
        self.expected_end = expected_end
