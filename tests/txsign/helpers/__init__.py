"""Shared builders for txsign tests."""

from .builders import (
    CHAIN_ID,
    MEMO,
    make_fee,
    make_send_message,
    make_signer_data,
    make_signers,
    make_threshold_key,
)

__all__ = [
    "CHAIN_ID",
    "MEMO",
    "make_fee",
    "make_send_message",
    "make_signer_data",
    "make_signers",
    "make_threshold_key",
]
