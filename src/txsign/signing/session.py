"""
Signing sessions: collect member signatures and finalize transactions.

A multisig round has three steps:

1. Fetch `SignerData` for the threshold key's account once.
2. Each member signs the same sign bytes (`collect_signature`), in any order
   or concurrently (`gather_signatures`).
3. Once enough signatures are in, `finalize_multisig_tx` aggregates them and
   builds the envelope.

Every member must sign with the same messages, fee, memo and `SignerData`.
Nothing here can detect a member who signed different bytes; the ledger
rejects the transaction instead.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable, Mapping, Sequence

from txsign.errors import SigningFailedError
from txsign.keys import Address, ThresholdPublicKey, raw_address
from txsign.multisig import MultisigSignatureData, RawSignature, aggregate
from txsign.tx import (
    Fee,
    Message,
    SignedTxEnvelope,
    SignerData,
    SignerInfo,
    SignMode,
    SingleModeInfo,
    build_sign_bytes,
    build_signed_envelope,
    encode_tx_body,
)
from txsign.types import Bytes64, Uint64

from .signer import Signer

logger = logging.getLogger(__name__)


def collect_signature(
    signer: Signer,
    signer_address: Address | str,
    messages: Sequence[Message],
    fee: Fee,
    memo: str,
    signer_data: SignerData,
) -> RawSignature:
    """
    Have one signer sign the transaction's sign bytes.

    The capability is invoked exactly once.

    Args:
        signer: The member's signing capability.
        signer_address: The member's address (raw or bech32).
        messages: Transaction messages, in order.
        fee: Transaction fee.
        memo: Transaction memo.
        signer_data: Account number, sequence and chain id of the signing account.

    Returns:
        The signature together with the signer's public key.

    Raises:
        SigningFailedError: If the signer's key does not match
            `signer_address`, the sign bytes cannot be built, the capability
            raises, or it returns something other than 64 bytes.
    """
    address = Address.coerce(signer_address)
    label = address.to_bech32()

    public_key = signer.public_key
    if raw_address(public_key) != address:
        raise SigningFailedError(label, "public-key", "signer key does not derive to this address")

    try:
        sign_bytes = build_sign_bytes(messages, fee, memo, signer_data)
    except (TypeError, ValueError) as exc:
        raise SigningFailedError(label, "sign-bytes", str(exc)) from exc

    try:
        signature = signer.sign(sign_bytes)
    except Exception as exc:
        raise SigningFailedError(label, "sign", f"{type(exc).__name__}: {exc}") from exc

    if not isinstance(signature, (bytes, bytearray)) or len(signature) != Bytes64.LENGTH:
        raise SigningFailedError(
            label, "verify-output", f"expected a {Bytes64.LENGTH}-byte signature"
        )

    logger.debug("Collected signature from %s (sequence %s)", label, signer_data.sequence)
    return RawSignature(public_key=public_key, signature=Bytes64(signature))


async def gather_signatures(
    signers: Iterable[Signer],
    messages: Sequence[Message],
    fee: Fee,
    memo: str,
    signer_data: SignerData,
) -> dict[Address, RawSignature]:
    """
    Collect signatures from several signers concurrently.

    Each capability runs in a worker thread. All of them share the one
    `signer_data`. The call returns once every signer has finished.

    Raises:
        ValueError: If the same key appears twice.
        SigningFailedError: The first failure among the signers.
    """
    pending = list(signers)
    addresses = [raw_address(signer.public_key) for signer in pending]
    if len(set(addresses)) != len(addresses):
        raise ValueError("each signer may appear only once")

    signatures = await asyncio.gather(
        *(
            asyncio.to_thread(
                collect_signature, signer, address, messages, fee, memo, signer_data
            )
            for signer, address in zip(pending, addresses, strict=True)
        )
    )
    logger.info("Gathered %d signatures for chain %s", len(signatures), signer_data.chain_id)
    return dict(zip(addresses, signatures, strict=True))


def finalize_multisig_tx(
    threshold_key: ThresholdPublicKey,
    sequence: int,
    fee: Fee,
    body_bytes: bytes,
    signatures_by_address: Mapping[Address | str, RawSignature],
) -> SignedTxEnvelope:
    """
    Build the signed envelope of a threshold-key transaction.

    Args:
        threshold_key: The multisig key.
        sequence: The sequence every member signed with.
        fee: The fee every member signed.
        body_bytes: Encoded body of the messages and memo every member signed.
        signatures_by_address: Collected signatures keyed by member address.

    Returns:
        An envelope with one signer info and one `MultiSignature` slot.

    Raises:
        UnknownSignerError: If a signature does not belong to a member.
        NoSignaturesError: If no signatures were supplied.
    """
    data: MultisigSignatureData = aggregate(threshold_key, signatures_by_address)
    signer_info = SignerInfo(
        public_key=threshold_key,
        mode_info=data.mode_info(),
        sequence=Uint64(sequence),
    )
    logger.info(
        "Finalized %d-of-%d multisig tx with %d signatures",
        int(threshold_key.threshold),
        len(threshold_key.members),
        len(data.signatures),
    )
    return build_signed_envelope(body_bytes, fee, [signer_info], [data.encode_bytes()])


def sign_single_tx(
    signer: Signer,
    messages: Sequence[Message],
    fee: Fee,
    memo: str,
    signer_data: SignerData,
) -> SignedTxEnvelope:
    """
    Sign and assemble a transaction for one single-key signer.

    Raises:
        SigningFailedError: If signing fails.
    """
    address = raw_address(signer.public_key)
    raw = collect_signature(signer, address, messages, fee, memo, signer_data)
    signer_info = SignerInfo(
        public_key=raw.public_key,
        mode_info=SingleModeInfo(mode=SignMode.LEGACY_AMINO_JSON),
        sequence=signer_data.sequence,
    )
    return build_signed_envelope(
        encode_tx_body(messages, memo), fee, [signer_info], [bytes(raw.signature)]
    )
