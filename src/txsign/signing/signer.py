"""
Signing capabilities.

A `Signer` is anything that owns one single public key and can sign bytes
with the matching private key: a hardware wallet, a remote service, or the
in-memory key below. The signing session only ever sees this protocol; key
material never crosses it.

Signature format expected by the ledger for both curves: 64 bytes.

- secp256k1: ECDSA over SHA-256, `r || s` big-endian, `s` in the lower half
  of the group order (high-S signatures are rejected as malleable).
- ed25519: the standard 64-byte Ed25519 signature.
"""

from __future__ import annotations

import hashlib
from typing import Protocol, assert_never, runtime_checkable

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed25519
from cryptography.hazmat.primitives.asymmetric.utils import (
    Prehashed,
    decode_dss_signature,
    encode_dss_signature,
)

from txsign.keys import Curve, SinglePublicKey

SECP256K1_ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
"""Order `n` of the secp256k1 group."""


@runtime_checkable
class Signer(Protocol):
    """An external signing capability for one key."""

    @property
    def public_key(self) -> SinglePublicKey:
        """The key this capability signs for."""
        ...

    def sign(self, data: bytes) -> bytes:
        """Sign `data`, returning a 64-byte signature."""
        ...


class InMemorySigner:
    """
    A signer holding its private key in process memory.

    Suitable for tests and tooling. Production setups usually plug in a
    remote or hardware `Signer` instead.
    """

    def __init__(self, curve: Curve, secret: bytes) -> None:
        """
        Load a 32-byte secret.

        Raises:
            ValueError: If the secret is not 32 bytes or not a valid scalar.
        """
        if len(secret) != 32:
            raise ValueError(f"Expected a 32-byte secret, got {len(secret)}")
        self._curve = curve
        match curve:
            case Curve.SECP256K1:
                self._secp = ec.derive_private_key(int.from_bytes(secret, "big"), ec.SECP256K1())
                raw = self._secp.public_key().public_bytes(
                    encoding=serialization.Encoding.X962,
                    format=serialization.PublicFormat.CompressedPoint,
                )
            case Curve.ED25519:
                self._ed = ed25519.Ed25519PrivateKey.from_private_bytes(secret)
                raw = self._ed.public_key().public_bytes_raw()
            case _:
                assert_never(curve)
        self._public_key = SinglePublicKey(curve=curve, key=raw)

    @classmethod
    def secp256k1(cls, secret: bytes) -> InMemorySigner:
        return cls(Curve.SECP256K1, secret)

    @classmethod
    def ed25519(cls, secret: bytes) -> InMemorySigner:
        return cls(Curve.ED25519, secret)

    @classmethod
    def from_seed(cls, curve: Curve, seed: str) -> InMemorySigner:
        """Derive a throwaway key from a text seed (SHA-256 of the seed)."""
        return cls(curve, hashlib.sha256(seed.encode("utf-8")).digest())

    @property
    def public_key(self) -> SinglePublicKey:
        return self._public_key

    def sign(self, data: bytes) -> bytes:
        match self._curve:
            case Curve.SECP256K1:
                digest = hashlib.sha256(data).digest()
                der_signature = self._secp.sign(
                    digest, ec.ECDSA(Prehashed(hashes.SHA256()), deterministic_signing=True)
                )
                r, s = decode_dss_signature(der_signature)
                if s > SECP256K1_ORDER // 2:
                    s = SECP256K1_ORDER - s
                return r.to_bytes(32, "big") + s.to_bytes(32, "big")
            case Curve.ED25519:
                return self._ed.sign(data)
            case _:
                assert_never(self._curve)

    def __repr__(self) -> str:
        return f"InMemorySigner({self._public_key!r})"


def verify_signature(public_key: SinglePublicKey, data: bytes, signature: bytes) -> bool:
    """
    Check a 64-byte signature over `data`.

    High-S secp256k1 signatures are reported invalid, as the ledger does.
    Returns False rather than raising on any malformed input.
    """
    if len(signature) != 64:
        return False
    try:
        match public_key.curve:
            case Curve.SECP256K1:
                r = int.from_bytes(signature[:32], "big")
                s = int.from_bytes(signature[32:], "big")
                if s > SECP256K1_ORDER // 2:
                    return False
                point = ec.EllipticCurvePublicKey.from_encoded_point(
                    ec.SECP256K1(), public_key.key
                )
                point.verify(
                    encode_dss_signature(r, s),
                    hashlib.sha256(data).digest(),
                    ec.ECDSA(Prehashed(hashes.SHA256())),
                )
            case Curve.ED25519:
                ed25519.Ed25519PublicKey.from_public_bytes(public_key.key).verify(signature, data)
            case _:
                assert_never(public_key.curve)
    except (InvalidSignature, ValueError):
        return False
    return True
