"""
Deterministic protobuf wire encoding.

Only the subset of protobuf the transaction format needs is implemented:
varint scalars (`uint32`, `uint64`, enums) and length-delimited fields
(`string`, `bytes`, embedded messages).

Encoding rules (the verifier re-encodes and hashes the same bytes, so these
are not optional):

1. Fields are written in ascending field-number order. Every message encoder
   in this package builds its output by concatenating fields in that order.
2. Scalars equal to their proto3 default (0, "", b"") are omitted.
3. Elements of repeated fields are always written, even when empty.
4. Embedded messages are written whenever present, even when their own
   encoding is empty.

Decoding is strict: truncated input, unsupported wire types, and fields the
caller does not expect all raise `DecodeError`.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Iterator, NamedTuple

from txsign.errors import DecodeError

from .varint import VarintError, decode_varint, encode_varint


class WireType(IntEnum):
    """Protobuf wire types used by the transaction format."""

    VARINT = 0
    I64 = 1
    LEN = 2
    I32 = 5


class Field(NamedTuple):
    """One decoded field: number, wire type, and raw value."""

    number: int
    wire_type: WireType
    value: int | bytes
    offset: int


def encode_tag(number: int, wire_type: WireType) -> bytes:
    """Encode a field key: `(number << 3) | wire_type`."""
    if number < 1:
        raise ValueError(f"Field numbers start at 1, got {number}")
    return encode_varint((number << 3) | int(wire_type))


def encode_uint(number: int, value: int) -> bytes:
    """Encode a varint scalar; the default value 0 is omitted."""
    if value == 0:
        return b""
    return encode_tag(number, WireType.VARINT) + encode_varint(int(value))


def encode_bytes(number: int, value: bytes, *, always: bool = False) -> bytes:
    """
    Encode a length-delimited field.

    Args:
        number: Field number.
        value: Payload bytes.
        always: Write the field even when `value` is empty (repeated
            elements and embedded messages).
    """
    if not value and not always:
        return b""
    return encode_tag(number, WireType.LEN) + encode_varint(len(value)) + value


def encode_string(number: int, value: str) -> bytes:
    """Encode a UTF-8 string field; the empty string is omitted."""
    return encode_bytes(number, value.encode("utf-8"))


def encode_message(number: int, payload: bytes) -> bytes:
    """Encode an embedded message, present even when its payload is empty."""
    return encode_bytes(number, payload, always=True)


def encode_repeated(number: int, payloads: list[bytes] | tuple[bytes, ...]) -> bytes:
    """Encode every element of a repeated length-delimited field, in order."""
    return b"".join(encode_bytes(number, payload, always=True) for payload in payloads)


def iter_fields(data: bytes, type_name: str) -> Iterator[Field]:
    """
    Walk the top-level fields of an encoded message.

    Args:
        data: Encoded message.
        type_name: Message name used in error reports.

    Yields:
        Each field in wire order.

    Raises:
        DecodeError: On truncation, field number 0, or unsupported wire types.
    """
    pos = 0
    while pos < len(data):
        start = pos
        try:
            key, consumed = decode_varint(data, pos)
        except VarintError as exc:
            raise DecodeError(type_name, f"bad field key: {exc}", offset=pos) from exc
        pos += consumed

        number, raw_wire_type = key >> 3, key & 0x07
        if number == 0:
            raise DecodeError(type_name, "field number 0 is reserved", offset=start)

        if raw_wire_type == WireType.VARINT:
            try:
                value, consumed = decode_varint(data, pos)
            except VarintError as exc:
                raise DecodeError(type_name, f"field {number}: {exc}", offset=pos) from exc
            pos += consumed
            yield Field(number, WireType.VARINT, value, start)

        elif raw_wire_type == WireType.LEN:
            try:
                length, consumed = decode_varint(data, pos)
            except VarintError as exc:
                raise DecodeError(type_name, f"field {number}: {exc}", offset=pos) from exc
            pos += consumed
            end = pos + length
            if end > len(data):
                raise DecodeError(
                    type_name,
                    f"field {number} needs {length} bytes, {len(data) - pos} left",
                    offset=pos,
                )
            yield Field(number, WireType.LEN, data[pos:end], start)
            pos = end

        else:
            raise DecodeError(
                type_name, f"unsupported wire type {raw_wire_type} for field {number}", offset=start
            )


def expect_varint(field: Field, type_name: str, *, bits: int = 64) -> int:
    """Return a varint field's value, checking wire type and width."""
    if field.wire_type is not WireType.VARINT or not isinstance(field.value, int):
        raise DecodeError(type_name, f"field {field.number} must be a varint", offset=field.offset)
    if field.value >= 1 << bits:
        raise DecodeError(
            type_name, f"field {field.number} overflows uint{bits}", offset=field.offset
        )
    return field.value


def expect_bytes(field: Field, type_name: str) -> bytes:
    """Return a length-delimited field's payload, checking wire type."""
    if field.wire_type is not WireType.LEN or not isinstance(field.value, bytes):
        raise DecodeError(
            type_name, f"field {field.number} must be length-delimited", offset=field.offset
        )
    return field.value


def expect_string(field: Field, type_name: str) -> str:
    """Return a length-delimited field's payload decoded as UTF-8."""
    payload = expect_bytes(field, type_name)
    try:
        return payload.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DecodeError(
            type_name, f"field {field.number} is not valid UTF-8", offset=field.offset
        ) from exc


def unknown_field(field: Field, type_name: str) -> DecodeError:
    """Build the error raised for a field the schema does not define."""
    return DecodeError(type_name, f"unknown field {field.number}", offset=field.offset)


def encode_any(type_url: str, value: bytes) -> bytes:
    """Encode a `google.protobuf.Any` (`type_url = 1`, `value = 2`)."""
    return encode_string(1, type_url) + encode_bytes(2, value)


def decode_any(data: bytes) -> tuple[str, bytes]:
    """Decode a `google.protobuf.Any` into `(type_url, value)`."""
    type_url, value = "", b""
    for field in iter_fields(data, "Any"):
        if field.number == 1:
            type_url = expect_string(field, "Any")
        elif field.number == 2:
            value = expect_bytes(field, "Any")
        else:
            raise unknown_field(field, "Any")
    return type_url, value
