"""Reusable value types: strict models, bounded integers, fixed-size bytes, bit arrays."""

from .base import CamelModel, StrictBaseModel
from .bitfields import CompactBitArray
from .byte_arrays import BaseBytes, Bytes20, Bytes64
from .uint import BaseUint, Uint32, Uint64

__all__ = [
    "CamelModel",
    "StrictBaseModel",
    "CompactBitArray",
    "BaseBytes",
    "Bytes20",
    "Bytes64",
    "BaseUint",
    "Uint32",
    "Uint64",
]
