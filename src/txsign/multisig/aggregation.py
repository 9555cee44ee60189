"""
Combine member signatures into a threshold-key signature.

The ledger verifies a multisig by walking the threshold key's members in
stored order, reading the bit array to learn which members signed, and
consuming signatures from the list in that same order. Aggregation therefore
has exactly one job: produce a bit array and a signature list that agree with
the stored member order.

Whether enough members signed is for the ledger to decide. Aggregation only
refuses inputs it cannot place at all.
"""

from __future__ import annotations

import logging
from typing import Mapping

from pydantic import model_validator
from typing_extensions import Self

from txsign.encoding import protobuf as pb
from txsign.errors import DecodeError, NoSignaturesError, UnknownSignerError
from txsign.keys import Address, SinglePublicKey, ThresholdPublicKey, raw_address
from txsign.tx import MultiModeInfo, SignMode, SingleModeInfo
from txsign.types import Bytes64, CompactBitArray, StrictBaseModel

logger = logging.getLogger(__name__)


class RawSignature(StrictBaseModel):
    """One signer's signature over the sign bytes, with the key that made it."""

    public_key: SinglePublicKey
    signature: Bytes64


class MultisigSignatureData(StrictBaseModel):
    """
    The signature slot of a threshold signer.

    `signatures[j]` belongs to the member at the `j`-th set bit of
    `bit_array`.
    """

    bit_array: CompactBitArray
    signatures: tuple[bytes, ...]

    @model_validator(mode="after")
    def _check_counts(self) -> Self:
        """One signature per set bit."""
        if self.bit_array.count_set_bits() != len(self.signatures):
            raise ValueError(
                f"bit array has {self.bit_array.count_set_bits()} set bits "
                f"but {len(self.signatures)} signatures were given"
            )
        return self

    def encode_bytes(self) -> bytes:
        """Encode as protobuf `MultiSignature{repeated bytes signatures = 1}`."""
        return pb.encode_repeated(1, list(self.signatures))

    def mode_info(self) -> MultiModeInfo:
        """Mode info to place in the threshold signer's `SignerInfo`."""
        return MultiModeInfo(
            bitarray=self.bit_array,
            mode_infos=tuple(
                SingleModeInfo(mode=SignMode.LEGACY_AMINO_JSON) for _ in self.signatures
            ),
        )

    @classmethod
    def decode(cls, mode_info: MultiModeInfo, data: bytes) -> Self:
        """
        Rebuild from a decoded mode info and the matching signature slot.

        Raises:
            DecodeError: On malformed bytes or when the counts disagree.
        """
        signatures: list[bytes] = []
        for field in pb.iter_fields(data, "MultiSignature"):
            if field.number != 1:
                raise pb.unknown_field(field, "MultiSignature")
            signatures.append(pb.expect_bytes(field, "MultiSignature"))
        if len(signatures) != len(mode_info.mode_infos):
            raise DecodeError(
                "MultiSignature",
                f"{len(signatures)} signatures for {len(mode_info.mode_infos)} mode infos",
            )
        try:
            return cls(bit_array=mode_info.bitarray, signatures=tuple(signatures))
        except ValueError as exc:
            raise DecodeError("MultiSignature", str(exc)) from exc


def aggregate(
    threshold_key: ThresholdPublicKey,
    signatures_by_address: Mapping[Address | str, RawSignature],
) -> MultisigSignatureData:
    """
    Place collected signatures according to the key's stored member order.

    Args:
        threshold_key: The multisig key being signed for.
        signatures_by_address: Signatures keyed by the signer's address, as
            raw `Address` values or bech32 strings. Iteration order is
            irrelevant.

    Returns:
        Bit `i` set iff member `i` signed; signatures in ascending member index.

    Raises:
        UnknownSignerError: If an address is not a member, or a signature's
            public key does not derive to the address it is filed under.
        NoSignaturesError: If the mapping is empty.
    """
    collected: dict[Address, RawSignature] = {}
    for key, raw in signatures_by_address.items():
        address = Address.coerce(key)
        if raw_address(raw.public_key) != address:
            raise UnknownSignerError(
                address.to_bech32(), detail="public key does not derive to this address"
            )
        collected[address] = raw

    member_addresses = [raw_address(member) for member in threshold_key.members]
    for address in collected:
        if address not in member_addresses:
            raise UnknownSignerError(address.to_bech32())

    if not collected:
        raise NoSignaturesError(len(threshold_key.members))

    bits = [address in collected for address in member_addresses]
    signatures = tuple(
        bytes(collected[address].signature)
        for address in member_addresses
        if address in collected
    )

    logger.debug(
        "Aggregated %d of %d member signatures (threshold %d)",
        len(signatures),
        len(member_addresses),
        int(threshold_key.threshold),
    )
    return MultisigSignatureData(bit_array=CompactBitArray.from_bits(bits), signatures=signatures)
