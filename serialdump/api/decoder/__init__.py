"""
Decoder for the legacy byte-length-prefixed object-graph serialization format
(`N;`, `b:1;`, `i:42;`, `s:5:"hello";`, `a:1:{...}`, `O:3:"Foo":...`, ...).

The decoder is one-way and diagnostic: it renders the value as an indented
text tree, annotated with input byte offsets, class names, property
visibility and the line on which each back-reference target was defined. The
output is not meant to be fed back into an encoder.

Scope / non-goals:
- No schema validation of decoded values.
- No partial results: the first malformed token aborts the decode.

Preferred imports:
- `from serialdump.api.decoder import decode_stream, decode_bytes`
- `from serialdump.api.decoder import errors` for the failure types.
"""

from __future__ import annotations

from . import errors as errors  # noqa: F401
from .errors import (  # noqa: F401
    DecodeError,
    InvalidKeyType,
    InvalidReferenceId,
    MalformedNumber,
    MalformedPropertyKey,
    PayloadLengthMismatch,
    UnexpectedEndOfInput,
    UnexpectedTag,
    UnexpectedToken,
)
from .export import export_literal  # noqa: F401
from .parser import DecodeSummary, SerializedStreamDecoder, decode_bytes, decode_stream  # noqa: F401

__all__ = [
    "errors",
    # engine
    "DecodeSummary",
    "SerializedStreamDecoder",
    "decode_bytes",
    "decode_stream",
    "export_literal",
    # errors
    "DecodeError",
    "InvalidKeyType",
    "InvalidReferenceId",
    "MalformedNumber",
    "MalformedPropertyKey",
    "PayloadLengthMismatch",
    "UnexpectedEndOfInput",
    "UnexpectedTag",
    "UnexpectedToken",
]
