"""
Key encodings: legacy amino binary and protobuf `Any`.

Amino is what the ledger hashes to derive a threshold key's address; the
protobuf `Any` form is what a signer info carries on the wire.

Amino layouts (prefix bytes are the registered amino type prefixes):

    secp256k1:  eb5ae987 || uvarint(33) || key
    ed25519:    1624de64 || uvarint(32) || key
    threshold:  22c1f7e2 || 0x08 uvarint(threshold)
                         || for each member: 0x12 uvarint(len) amino(member)
"""

from __future__ import annotations

from typing import assert_never

from pydantic import ValidationError

from txsign.encoding import encode_varint
from txsign.encoding import protobuf as pb
from txsign.errors import DecodeError, InvalidThresholdError
from txsign.types import Uint32

from .pubkey import Curve, PublicKey, SinglePublicKey, ThresholdPublicKey

AMINO_PREFIXES: dict[Curve, bytes] = {
    Curve.SECP256K1: bytes.fromhex("eb5ae987"),
    Curve.ED25519: bytes.fromhex("1624de64"),
}
"""Amino type prefix per single-key curve."""

THRESHOLD_AMINO_PREFIX = bytes.fromhex("22c1f7e2")
"""Amino type prefix for `tendermint/PubKeyMultisigThreshold`."""

TYPE_URLS: dict[Curve, str] = {
    Curve.SECP256K1: "/cosmos.crypto.secp256k1.PubKey",
    Curve.ED25519: "/cosmos.crypto.ed25519.PubKey",
}
"""Protobuf type URL per single-key curve."""

THRESHOLD_TYPE_URL = "/cosmos.crypto.multisig.LegacyAminoPubKey"
"""Protobuf type URL of a threshold key."""


def encode_amino_pubkey(key: PublicKey) -> bytes:
    """Encode a key in legacy amino binary form."""
    match key:
        case SinglePublicKey():
            return AMINO_PREFIXES[key.curve] + encode_varint(len(key.key)) + key.key
        case ThresholdPublicKey():
            return (
                THRESHOLD_AMINO_PREFIX
                + pb.encode_uint(1, int(key.threshold))
                + pb.encode_repeated(2, [encode_amino_pubkey(member) for member in key.members])
            )
        case _:
            assert_never(key)


def encode_pubkey_any(key: PublicKey) -> bytes:
    """Encode a key as a protobuf `Any`."""
    match key:
        case SinglePublicKey():
            return pb.encode_any(TYPE_URLS[key.curve], pb.encode_bytes(1, key.key))
        case ThresholdPublicKey():
            inner = pb.encode_uint(1, int(key.threshold)) + pb.encode_repeated(
                2, [encode_pubkey_any(member) for member in key.members]
            )
            return pb.encode_any(THRESHOLD_TYPE_URL, inner)
        case _:
            assert_never(key)


def _decode_single(curve: Curve, value: bytes) -> SinglePublicKey:
    type_name = TYPE_URLS[curve]
    raw = b""
    for field in pb.iter_fields(value, type_name):
        if field.number != 1:
            raise pb.unknown_field(field, type_name)
        raw = pb.expect_bytes(field, type_name)
    try:
        return SinglePublicKey(curve=curve, key=raw)
    except ValidationError as exc:
        raise DecodeError(type_name, str(exc)) from exc


def _decode_member(data: bytes) -> SinglePublicKey:
    # The type URL is checked before the member payload is parsed.
    type_url, value = pb.decode_any(data)
    if type_url == THRESHOLD_TYPE_URL:
        raise DecodeError(THRESHOLD_TYPE_URL, "nested threshold keys are not supported")
    for curve, url in TYPE_URLS.items():
        if type_url == url:
            return _decode_single(curve, value)
    raise DecodeError("PublicKey", f"unsupported key type {type_url!r}")


def _decode_threshold(value: bytes) -> ThresholdPublicKey:
    threshold = 0
    members: list[SinglePublicKey] = []
    for field in pb.iter_fields(value, THRESHOLD_TYPE_URL):
        if field.number == 1:
            threshold = pb.expect_varint(field, THRESHOLD_TYPE_URL, bits=32)
        elif field.number == 2:
            members.append(_decode_member(pb.expect_bytes(field, THRESHOLD_TYPE_URL)))
        else:
            raise pb.unknown_field(field, THRESHOLD_TYPE_URL)
    try:
        return ThresholdPublicKey(threshold=Uint32(threshold), members=tuple(members))
    except InvalidThresholdError as exc:
        raise DecodeError(THRESHOLD_TYPE_URL, exc.message) from exc


def decode_pubkey_any(data: bytes) -> PublicKey:
    """
    Decode a protobuf `Any` holding a public key.

    Member order of a threshold key is preserved exactly as encoded.

    Raises:
        DecodeError: On malformed bytes, unknown type URLs, or invalid keys.
    """
    type_url, value = pb.decode_any(data)
    for curve, url in TYPE_URLS.items():
        if type_url == url:
            return _decode_single(curve, value)
    if type_url == THRESHOLD_TYPE_URL:
        return _decode_threshold(value)
    raise DecodeError("PublicKey", f"unsupported key type {type_url!r}")
