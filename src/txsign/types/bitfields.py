"""
Compact bit array used by multisignature mode info.

The ledger stores "which members signed" as a `CompactBitArray`:

- `elems` holds the bits packed MSB-first: bit `i` lives in byte `i // 8`
  under the mask `1 << (7 - i % 8)`.
- `extra_bits_stored` is `size % 8`, the number of meaningful bits in the
  last byte. Zero means every byte is fully used.

This is the opposite bit order of a little-endian bitlist; a verifier that
reads the bits back in a different order attributes the signatures to the
wrong members and rejects the transaction.
"""

from __future__ import annotations

from typing import Iterable

from pydantic import model_validator
from typing_extensions import Self

from .base import StrictBaseModel
from .uint import Uint32


class CompactBitArray(StrictBaseModel):
    """Immutable, MSB-first packed bit array with an explicit trailing-bit count."""

    extra_bits_stored: Uint32 = Uint32(0)
    """Number of bits used in the final byte (0 when the final byte is full)."""

    elems: bytes = b""
    """Packed bit data."""

    @model_validator(mode="after")
    def _check_layout(self) -> Self:
        """Reject layouts whose trailing-bit count cannot describe the byte data."""
        if self.extra_bits_stored >= 8:
            raise ValueError(f"extra_bits_stored must be < 8, got {self.extra_bits_stored}")
        if self.extra_bits_stored and not self.elems:
            raise ValueError("extra_bits_stored is set but elems is empty")
        return self

    @classmethod
    def from_bits(cls, bits: Iterable[bool]) -> Self:
        """
        Pack a sequence of booleans.

        Args:
            bits: Bit values, index 0 first.

        Returns:
            The packed array. Padding bits in the last byte are zero.
        """
        values = [bool(bit) for bit in bits]
        elems = bytearray((len(values) + 7) // 8)
        for i, bit in enumerate(values):
            if bit:
                elems[i // 8] |= 1 << (7 - i % 8)
        return cls(extra_bits_stored=Uint32(len(values) % 8), elems=bytes(elems))

    @property
    def size(self) -> int:
        """Number of meaningful bits."""
        if self.extra_bits_stored == 0:
            return len(self.elems) * 8
        return (len(self.elems) - 1) * 8 + int(self.extra_bits_stored)

    def get(self, index: int) -> bool:
        """Return bit `index`; out-of-range indices read as unset."""
        if index < 0 or index >= self.size:
            return False
        return bool(self.elems[index // 8] & (1 << (7 - index % 8)))

    @property
    def bits(self) -> tuple[bool, ...]:
        """All meaningful bits, index 0 first."""
        return tuple(self.get(i) for i in range(self.size))

    def count_set_bits(self) -> int:
        """Number of set bits within `size` (padding is ignored)."""
        return sum(self.bits)

    def set_indices(self) -> tuple[int, ...]:
        """Ascending indices of the set bits."""
        return tuple(i for i, bit in enumerate(self.bits) if bit)

    def __repr__(self) -> str:
        """Render as a bit string, e.g. `CompactBitArray(x_x__)`."""
        rendered = "".join("x" if bit else "_" for bit in self.bits)
        return f"{type(self).__name__}({rendered})"
