"""Deterministic wire encodings: varints, protobuf fields, canonical amino JSON."""

from .amino_json import canonical_bytes, sorted_json
from .varint import VarintError, decode_varint, encode_varint

__all__ = [
    "canonical_bytes",
    "sorted_json",
    "VarintError",
    "decode_varint",
    "encode_varint",
]
