"""
Literal exporter: renders one decoded scalar as a single-line literal.

Byte strings are opaque (the format stores byte counts, not text), so they are
rendered from their raw bytes:
- plain text renders single-quoted, with an embedded quote doubled;
- anything holding a control byte (0x00-0x1F, 0x7F) or bytes that are not
  valid UTF-8 renders double-quoted with backslash escapes.

Neither form can contain a raw line break, so every rendered entity occupies
exactly one output line.
"""

from __future__ import annotations

import re
from typing import Union

Scalar = Union[None, bool, int, float, bytes]

_CONTROL_BYTES = re.compile(rb"[\x00-\x1f\x7f]")
_LINE_BREAKS = re.compile(r"[\r\n]")

_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def _escape_text(text: str) -> str:
    out = []
    for ch in text:
        code = ord(ch)
        if ch in _ESCAPES:
            out.append(_ESCAPES[ch])
        elif 0xDC80 <= code <= 0xDCFF:
            # surrogateescape marker for a byte that is not valid UTF-8
            out.append(f"\\x{code - 0xDC00:02x}")
        elif code < 0x20 or code == 0x7F:
            out.append(f"\\u{code:04x}")
        else:
            out.append(ch)
    return '"' + "".join(out) + '"'


def export_bytes(value: bytes) -> str:
    try:
        text = value.decode("utf-8")
    except UnicodeDecodeError:
        return _escape_text(value.decode("utf-8", errors="surrogateescape"))
    if _CONTROL_BYTES.search(value):
        return _escape_text(text)
    return "'" + text.replace("'", "''") + "'"


def format_float(value: float) -> str:
    # 14 significant digits hides the noise of tenths accumulation
    return format(value, ".14G")


def export_literal(value: Scalar) -> str:
    """Render a scalar the way it is shown in the tree."""
    if isinstance(value, (bytes, bytearray)):
        return export_bytes(bytes(value))
    if value is None:
        text = "NULL"
    elif isinstance(value, bool):
        text = "true" if value else "false"
    elif isinstance(value, float):
        text = format_float(value)
    elif isinstance(value, int):
        text = str(value)
    else:
        raise TypeError(f"cannot export {type(value).__name__}")
    return _LINE_BREAKS.sub(" ", text)
