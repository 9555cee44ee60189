"""
Unsigned LEB128 varint encoding and decoding.

Protobuf tags, lengths, and every integer field of the transaction wire
format are varints: 7 data bits per byte, low-order group first, MSB set on
every byte except the last.

    300 -> [0xAC, 0x02]

The encoder always emits the minimal form. The decoder refuses inputs longer
than 10 bytes (the most a 64-bit value can need).
"""

from __future__ import annotations

MAX_VARINT_BYTES = 10
"""Upper bound on the encoded size of a 64-bit value."""


class VarintError(Exception):
    """Raised when varint encoding or decoding fails."""


def encode_varint(value: int) -> bytes:
    """
    Encode an unsigned integer as LEB128 varint.

    Args:
        value: Non-negative integer to encode. Maximum: 2^64 - 1.

    Returns:
        Varint-encoded bytes (1 to 10 bytes).

    Raises:
        ValueError: If value is negative or wider than 64 bits.
    """
    if value < 0:
        raise ValueError("Varint must be non-negative")
    if value >= 1 << 64:
        raise ValueError(f"Varint {value} does not fit in 64 bits")

    result = bytearray()
    while value >= 0x80:
        result.append((value & 0x7F) | 0x80)
        value >>= 7
    result.append(value)
    return bytes(result)


def decode_varint(data: bytes, offset: int = 0) -> tuple[int, int]:
    """
    Decode a varint from bytes at the given offset.

    Args:
        data: Input bytes containing the varint.
        offset: Starting position in data.

    Returns:
        Tuple of (decoded_value, bytes_consumed).

    Raises:
        VarintError: If the input is truncated, longer than 10 bytes, or
            encodes a value wider than 64 bits.
    """
    result = 0
    shift = 0
    pos = offset

    while True:
        if pos >= len(data):
            raise VarintError("Truncated varint")

        byte = data[pos]
        pos += 1

        result |= (byte & 0x7F) << shift
        shift += 7

        if not (byte & 0x80):
            break

        if pos - offset >= MAX_VARINT_BYTES:
            raise VarintError("Varint too long")

    if result >= 1 << 64:
        raise VarintError("Varint overflows 64 bits")

    return result, pos - offset
