"""
The signed transaction envelope and its broadcast encoding.

Protobuf layout:

    TxRaw      { bytes body_bytes = 1; bytes auth_info_bytes = 2; repeated bytes signatures = 3; }
    AuthInfo   { repeated SignerInfo signer_infos = 1; Fee fee = 2; }
    SignerInfo { Any public_key = 1; ModeInfo mode_info = 2; uint64 sequence = 3; }

The `i`-th signature slot belongs to the `i`-th signer info. For a threshold
signer the slot holds an encoded `MultiSignature`, not a raw signature.
"""

from __future__ import annotations

import hashlib
from typing import Sequence

from pydantic import ValidationError, model_validator
from typing_extensions import Self

from txsign.encoding import protobuf as pb
from txsign.errors import DecodeError, MalformedEnvelopeError, TxSignError
from txsign.keys import PublicKey, decode_pubkey_any, encode_pubkey_any
from txsign.types import StrictBaseModel, Uint64

from .fees import Fee
from .mode_info import ModeInfo, decode_mode_info, encode_mode_info


class SignerInfo(StrictBaseModel):
    """Who signed and how."""

    public_key: PublicKey
    """The signer's key (single or threshold)."""

    mode_info: ModeInfo
    """How the signature slot is to be verified."""

    sequence: Uint64
    """The sequence the signer signed with."""

    def encode_bytes(self) -> bytes:
        return (
            pb.encode_message(1, encode_pubkey_any(self.public_key))
            + pb.encode_message(2, encode_mode_info(self.mode_info))
            + pb.encode_uint(3, int(self.sequence))
        )

    @classmethod
    def decode_bytes(cls, data: bytes) -> Self:
        public_key: PublicKey | None = None
        mode_info: ModeInfo | None = None
        sequence = 0
        for field in pb.iter_fields(data, "SignerInfo"):
            match field.number:
                case 1:
                    public_key = decode_pubkey_any(pb.expect_bytes(field, "SignerInfo"))
                case 2:
                    mode_info = decode_mode_info(pb.expect_bytes(field, "SignerInfo"))
                case 3:
                    sequence = pb.expect_varint(field, "SignerInfo")
                case _:
                    raise pb.unknown_field(field, "SignerInfo")
        if public_key is None:
            raise DecodeError("SignerInfo", "missing public key")
        if mode_info is None:
            raise DecodeError("SignerInfo", "missing mode info")
        return cls(public_key=public_key, mode_info=mode_info, sequence=Uint64(sequence))


class SignedTxEnvelope(StrictBaseModel):
    """A transaction ready for broadcast."""

    body_bytes: bytes
    """Encoded `TxBody`, byte-identical to what every signer saw."""

    fee: Fee

    signer_infos: tuple[SignerInfo, ...]

    signatures: tuple[bytes, ...]
    """One slot per signer info, same order."""

    @model_validator(mode="after")
    def _check_slots(self) -> Self:
        """Signer infos and signature slots must pair up one-to-one."""
        if len(self.signer_infos) != len(self.signatures):
            raise MalformedEnvelopeError(len(self.signer_infos), len(self.signatures))
        return self

    def auth_info_bytes(self) -> bytes:
        """Encoded `AuthInfo`."""
        return pb.encode_repeated(
            1, [info.encode_bytes() for info in self.signer_infos]
        ) + pb.encode_message(2, self.fee.encode_bytes())


def build_signed_envelope(
    body_bytes: bytes,
    fee: Fee,
    signer_infos: Sequence[SignerInfo],
    signatures: Sequence[bytes],
) -> SignedTxEnvelope:
    """
    Assemble an envelope. Signatures are not verified.

    Raises:
        MalformedEnvelopeError: If the counts of signer infos and signatures differ.
    """
    if len(signer_infos) != len(signatures):
        raise MalformedEnvelopeError(len(signer_infos), len(signatures))
    return SignedTxEnvelope(
        body_bytes=bytes(body_bytes),
        fee=fee,
        signer_infos=tuple(signer_infos),
        signatures=tuple(bytes(signature) for signature in signatures),
    )


def encode_for_broadcast(envelope: SignedTxEnvelope) -> bytes:
    """Encode the envelope as `TxRaw`, the bytes a node accepts."""
    return (
        pb.encode_bytes(1, envelope.body_bytes)
        + pb.encode_bytes(2, envelope.auth_info_bytes())
        + pb.encode_repeated(3, list(envelope.signatures))
    )


def _decode_auth_info(data: bytes) -> tuple[list[SignerInfo], Fee]:
    signer_infos: list[SignerInfo] = []
    fee = Fee()
    for field in pb.iter_fields(data, "AuthInfo"):
        if field.number == 1:
            signer_infos.append(SignerInfo.decode_bytes(pb.expect_bytes(field, "AuthInfo")))
        elif field.number == 2:
            fee = Fee.decode_bytes(pb.expect_bytes(field, "AuthInfo"))
        else:
            raise pb.unknown_field(field, "AuthInfo")
    return signer_infos, fee


def decode(data: bytes) -> SignedTxEnvelope:
    """
    Decode `TxRaw` bytes back into an envelope.

    Every failure surfaces as `DecodeError`; no partial envelope is returned.
    """
    try:
        body_bytes = b""
        auth_info_bytes = b""
        signatures: list[bytes] = []
        for field in pb.iter_fields(data, "TxRaw"):
            match field.number:
                case 1:
                    body_bytes = pb.expect_bytes(field, "TxRaw")
                case 2:
                    auth_info_bytes = pb.expect_bytes(field, "TxRaw")
                case 3:
                    signatures.append(pb.expect_bytes(field, "TxRaw"))
                case _:
                    raise pb.unknown_field(field, "TxRaw")

        signer_infos, fee = _decode_auth_info(auth_info_bytes)
        return build_signed_envelope(body_bytes, fee, signer_infos, signatures)
    except DecodeError:
        raise
    except (TxSignError, ValidationError) as exc:
        raise DecodeError("TxRaw", str(exc)) from exc


def tx_hash(tx_bytes: bytes) -> str:
    """Transaction identifier: upper-case hex SHA-256 of the broadcast bytes."""
    return hashlib.sha256(tx_bytes).hexdigest().upper()
