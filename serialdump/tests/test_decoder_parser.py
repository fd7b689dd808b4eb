import io

import pytest

from serialdump.api.decoder import (
    InvalidKeyType,
    InvalidReferenceId,
    MalformedNumber,
    MalformedPropertyKey,
    PayloadLengthMismatch,
    SerializedStreamDecoder,
    UnexpectedEndOfInput,
    UnexpectedTag,
    UnexpectedToken,
    decode_bytes,
    decode_stream,
)
from serialdump.api.decoder.parser import split_property_key


def _decode(data: bytes):
    out = io.StringIO()
    decoder = SerializedStreamDecoder(io.BytesIO(data), out)
    summary = decoder.parse()
    return out.getvalue(), decoder, summary


@pytest.mark.parametrize(
    "data, expected",
    [
        (b"N;", "NULL  # 2\n"),
        (b"i:42;", "42  # 5\n"),
        (b"i:-42;", "-42  # 6\n"),
        (b"b:1;", "true  # 4\n"),
        (b"b:0;", "false  # 4\n"),
        (b"d:1.5;", "1.5  # 6\n"),
        (b"d:-0.25;", "-0.25  # 8\n"),
        (b's:5:"hello";', "'hello'  # 12\n"),
        (b"a:0:{}", "array:[]  # 6\n"),
    ],
)
def test_top_level_values(data, expected):
    assert decode_bytes(data) == expected


def test_array_entries_with_byte_offsets():
    out = decode_bytes(b'a:2:{i:0;s:1:"a";i:1;s:1:"b";}')
    assert out == "array:  # 5\n  0: 'a'  # 17\n  1: 'b'  # 30\n"


def test_back_reference_cites_definition_line():
    out = decode_bytes(b'a:2:{i:0;s:1:"a";i:1;R:2;}')
    assert out == (
        "array:  # 5\n"
        "  0: 'a'  # 17\n"
        "  1:   # 25\n"
        "    $ref: 'a'  # line 2 - 26 - ref #/0\n"
    )


def test_repeated_references_cite_first_definition_line():
    out = decode_bytes(b'a:3:{i:0;s:1:"a";i:1;R:2;i:2;R:2;}')
    ref_lines = [line for line in out.splitlines() if "$ref:" in line]
    assert len(ref_lines) == 2
    assert all("line 2" in line for line in ref_lines)


def test_reference_to_composite_renders_empty_literal():
    out = decode_bytes(b"a:2:{i:0;R:1;i:1;i:7;}")
    assert out == (
        "array:  # 5\n"
        "  0:   # 13\n"
        "    $ref: ''  # line 1 - ref #\n"
        "  1: 7  # 22\n"
    )


def test_byte_offset_marks_lines_that_consumed_input():
    lines = decode_bytes(b"a:2:{i:0;R:1;i:1;i:7;}").splitlines()
    ref_line, next_line = lines[2], lines[3]
    # the reference line reads nothing itself
    assert ref_line.endswith("# line 1 - ref #")
    assert next_line.endswith("  # 22")


def test_protected_key_has_no_visibility_comment():
    data = b'O:3:"Foo":1:{s:4:"\x00*\x00b";N;}'
    assert decode_bytes(data) == "object:  # Foo - 13\n  'b': NULL  # 27\n"


def test_nested_array_has_no_prefix():
    out = decode_bytes(b'a:1:{s:1:"k";a:1:{i:0;N;}}')
    assert out == "array:  # 5\n  'k':   # 17\n    0: NULL  # 25\n"


def test_object_with_visibility_comments():
    data = b'O:3:"Foo":2:{s:6:"\x00Foo\x00a";i:1;s:4:"\x00*\x00b";b:0;}'
    out = decode_bytes(data)
    assert out == (
        "object:  # Foo - 13\n"
        "  'a': 1  # private of Foo - 30\n"
        "  'b': false  # 46\n"
    )


def test_private_key_of_other_class_has_no_visibility_comment():
    data = b'O:3:"Foo":1:{s:6:"\x00Bar\x00a";N;}'
    out = decode_bytes(data)
    assert "'a': NULL" in out
    assert "private" not in out


def test_nul_prefixed_key_outside_object_is_plain():
    out = decode_bytes(b'a:1:{s:3:"\x00a\x00";N;}')
    assert '"\\u0000a\\u0000": NULL' in out


def test_custom_serialized_object():
    out, decoder, summary = _decode(b'C:3:"Foo":4:{i:7;}')
    assert out == "7  # Foo - 18\n"
    assert summary.bytes_consumed == 18
    assert summary.references == 2


def test_custom_serialized_object_empty_payload():
    assert decode_bytes(b'C:3:"Foo":0:{}') == "  # Foo - 14\n"


def test_custom_serialized_payload_length_mismatch():
    with pytest.raises(PayloadLengthMismatch) as exc:
        decode_bytes(b'C:3:"Foo":5:{i:7;}')
    assert exc.value.offset == 17
    assert exc.value.expected_end == 18
    assert "at byte 17" in str(exc.value)


def test_self_registering_reference_adds_entry():
    out, decoder, summary = _decode(b'a:2:{i:0;s:1:"x";i:1;r:2;}')
    assert "$ref: 'x'" in out
    entries = decoder.references.entries()
    assert len(entries) == 3
    assert entries[2].value == b"x"
    assert entries[2].path == "#/1"
    assert entries[2].line == 4


def test_reference_count_matches_values_minus_resolutions():
    data = b'a:4:{i:0;s:1:"x";i:1;R:2;i:2;r:2;i:3;a:1:{i:0;R:3;}}'
    _, decoder, summary = _decode(data)
    assert summary.resolutions == 2
    assert summary.references == summary.values - summary.resolutions
    assert summary.references == len(decoder.references) - 1


def test_references_registered_in_pre_order():
    _, decoder, _ = _decode(b'a:1:{i:0;a:1:{s:1:"k";i:3;}}')
    assert [e.path for e in decoder.references.entries()] == ["#", "#/0", "#/0/k"]
    assert [e.line for e in decoder.references.entries()] == [1, 2, 3]


def test_trailing_bytes_are_not_read():
    stream = io.BytesIO(b"N;trailing garbage")
    out = io.StringIO()
    summary = decode_stream(stream, out)
    assert summary.bytes_consumed == 2
    assert stream.tell() == 2
    assert out.getvalue() == "NULL  # 2\n"


def test_decoding_is_deterministic():
    data = b'O:8:"stdClass":2:{s:1:"a";a:1:{i:0;d:0.5;}s:1:"b";R:3;}'
    assert decode_bytes(data) == decode_bytes(data)


def test_independent_decoders_do_not_share_state():
    first = io.StringIO()
    second = io.StringIO()
    a = SerializedStreamDecoder(io.BytesIO(b"a:1:{i:0;i:1;}"), first)
    b = SerializedStreamDecoder(io.BytesIO(b"N;"), second)
    a.parse()
    b.parse()
    assert len(a.references) == 3
    assert len(b.references) == 2
    assert second.getvalue() == "NULL  # 2\n"


def test_multibyte_string_length_is_byte_count():
    assert decode_bytes('s:2:"é";'.encode("utf-8")) == "'é'  # 9\n"
    with pytest.raises(UnexpectedToken) as exc:
        decode_bytes('s:1:"é";'.encode("utf-8"))
    assert exc.value.offset == 7


def test_control_bytes_in_string_value():
    assert decode_bytes(b's:3:"a\nb";').startswith('"a\\nb"')


@pytest.mark.parametrize(
    "data, error, offset",
    [
        (b"b:2;", UnexpectedToken, 3),
        (b"x", UnexpectedTag, 1),
        (b"i:4", UnexpectedEndOfInput, 3),
        (b's:5:"hel', UnexpectedEndOfInput, 8),
        (b"", UnexpectedEndOfInput, 0),
        (b"i:4x;", MalformedNumber, 4),
        (b"i:1.5;", MalformedNumber, 4),
        (b"d:1.;", MalformedNumber, 5),
        (b"a:1:{d:1;N;}", InvalidKeyType, 6),
        (b'O:3:"Foo":1:{s:4:"\x00Foo";N;}', MalformedPropertyKey, 23),
        (b"R:1;", InvalidReferenceId, 4),
        (b"a:1:{i:0;R:3;}", InvalidReferenceId, 13),
        (b"a:1:{i:0;R:0;}", InvalidReferenceId, 13),
        (b"a:1:{i:0;r:2;}", InvalidReferenceId, 13),
        (b"N:", UnexpectedToken, 2),
    ],
)
def test_errors_carry_byte_offset(data, error, offset):
    with pytest.raises(error) as exc:
        decode_bytes(data)
    assert exc.value.offset == offset
    assert str(exc.value).endswith(f"at byte {offset}")


def test_boolean_error_message():
    with pytest.raises(UnexpectedToken) as exc:
        decode_bytes(b"b:2;")
    assert str(exc.value) == "Encountered '2', expected \"0\" or \"1\" at byte 3"


def test_output_is_streamed_before_failure():
    out = io.StringIO()
    with pytest.raises(UnexpectedTag):
        decode_stream(io.BytesIO(b"a:2:{i:0;i:1;i:1;?"), out)
    assert out.getvalue().startswith("array:  # 5\n  0: 1")


def test_split_property_key():
    assert split_property_key(b"\x00Foo\x00bar", 0) == (b"Foo", b"bar")
    assert split_property_key(b"\x00*\x00", 0) == (b"*", b"")
    with pytest.raises(MalformedPropertyKey) as exc:
        split_property_key(b"\x00Foo", 9)
    assert exc.value.offset == 9
