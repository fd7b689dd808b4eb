"""
Primitive readers layered on the byte cursor: delimited numbers and
length-prefixed quoted byte strings.
"""

from __future__ import annotations

from typing import Union

from .cursor import ByteCursor
from .errors import MalformedNumber

DIGITS = b"0123456789"
TERMINATORS = (b":", b";")


def read_number(cursor: ByteCursor, fraction: bool = False) -> Union[int, float]:
    """
    Read `-?digits` (plus `.digits` when `fraction` is set) up to a `:` or
    `;` terminator. The terminator is consumed and dropped; callers know
    which one their context uses.

    With `fraction` set the result is always a float, accumulated digit by
    digit as successive tenths.
    """
    negative = False
    char = cursor.read_byte()
    if char == b"-":
        negative = True
        char = cursor.read_byte()
    if char not in DIGITS:
        cursor.unexpected(char, 'a number or "-"' if not negative else "a number", MalformedNumber)

    value: Union[int, float] = int(char)
    while True:
        char = cursor.read_byte()
        if char in TERMINATORS:
            if fraction:
                value = float(value)
            return -value if negative else value
        if char == b"." and fraction:
            break
        if char not in DIGITS:
            expected = 'a number, ".", ":" or ";"' if fraction else 'a number, ":" or ";"'
            cursor.unexpected(char, expected, MalformedNumber)
        value = 10 * value + int(char)

    value = float(value)
    multiplier = 0.1
    digits = 0
    while True:
        char = cursor.read_byte()
        if char in DIGITS:
            value += multiplier * int(char)
            multiplier /= 10
            digits += 1
        elif char in TERMINATORS and digits:
            return -value if negative else value
        else:
            cursor.unexpected(char, 'a number, ":" or ";"' if digits else "a number", MalformedNumber)


def read_string(cursor: ByteCursor) -> bytes:
    """Read `<length>:"<length raw bytes>"`; the length counts bytes, not characters."""
    length = read_number(cursor)
    if length < 0:
        raise MalformedNumber(str(length), "a string length of 0 or more", cursor.position)
    cursor.expect(b'"')
    value = cursor.read_exact(length)
    cursor.expect(b'"')
    return value
