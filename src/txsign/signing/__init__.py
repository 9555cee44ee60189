"""Signing capabilities and the signing session coordinator."""

from txsign.multisig import RawSignature

from .session import collect_signature, finalize_multisig_tx, gather_signatures, sign_single_tx
from .signer import InMemorySigner, Signer, verify_signature

__all__ = [
    "RawSignature",
    "collect_signature",
    "finalize_multisig_tx",
    "gather_signatures",
    "sign_single_tx",
    "InMemorySigner",
    "Signer",
    "verify_signature",
]
