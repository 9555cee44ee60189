"""
Addresses: 20-byte digests of public keys, displayed as bech32.

Derivation is specific to the key variant:

- secp256k1:  RIPEMD160(SHA256(compressed_key))
- ed25519:    SHA256(key)[:20]
- threshold:  SHA256(amino(threshold_key))[:20]

A threshold key's address hashes its own amino encoding (threshold plus
members in stored order), never the members' addresses.
"""

from __future__ import annotations

import hashlib
from typing import assert_never

from bech32 import bech32_decode, bech32_encode, convertbits
from Crypto.Hash import RIPEMD160
from typing_extensions import Self

from txsign.config import DEFAULT_ADDRESS_PREFIX
from txsign.errors import DecodeError
from txsign.types import Bytes20

from .codec import encode_amino_pubkey
from .pubkey import Curve, PublicKey, SinglePublicKey, ThresholdPublicKey


class Address(Bytes20):
    """Raw 20-byte account address."""

    def to_bech32(self, prefix: str = DEFAULT_ADDRESS_PREFIX) -> str:
        """Render with a human-readable prefix and checksum."""
        words = convertbits(bytes(self), 8, 5)
        if words is None:
            raise ValueError("cannot convert address to 5-bit words")
        return bech32_encode(prefix, words)

    @classmethod
    def from_bech32(cls, text: str, *, prefix: str | None = None) -> Self:
        """
        Parse a bech32 address.

        Args:
            text: The bech32 string.
            prefix: If given, the prefix the address must carry.

        Raises:
            DecodeError: On a bad checksum, wrong prefix, or wrong length.
        """
        hrp, words = bech32_decode(text)
        if hrp is None or words is None:
            raise DecodeError("Address", f"invalid bech32 string {text!r}")
        if prefix is not None and hrp != prefix:
            raise DecodeError("Address", f"expected prefix {prefix!r}, got {hrp!r}")
        data = convertbits(words, 5, 8, False)
        if data is None or len(data) != cls.LENGTH:
            raise DecodeError("Address", f"{text!r} does not hold {cls.LENGTH} bytes")
        return cls(bytes(data))

    @classmethod
    def coerce(cls, value: "Address | str | bytes") -> Self:
        """Accept an `Address`, raw 20 bytes, or a bech32 string."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            return cls.from_bech32(value)
        return cls(value)


def bech32_prefix(text: str) -> str:
    """Return the human-readable prefix of a bech32 address."""
    hrp, _ = bech32_decode(text)
    if hrp is None:
        raise DecodeError("Address", f"invalid bech32 string {text!r}")
    return hrp


def _single_address(key: SinglePublicKey) -> bytes:
    match key.curve:
        case Curve.SECP256K1:
            return RIPEMD160.new(hashlib.sha256(key.key).digest()).digest()
        case Curve.ED25519:
            return hashlib.sha256(key.key).digest()[:20]
        case _:
            assert_never(key.curve)


def raw_address(key: PublicKey) -> Address:
    """Derive the raw 20-byte address of any public key."""
    match key:
        case SinglePublicKey():
            return Address(_single_address(key))
        case ThresholdPublicKey():
            return Address(hashlib.sha256(encode_amino_pubkey(key)).digest()[:20])
        case _:
            assert_never(key)


def derive_address(key: PublicKey, prefix: str = DEFAULT_ADDRESS_PREFIX) -> str:
    """Derive the bech32 address of any public key under `prefix`."""
    return raw_address(key).to_bech32(prefix)
