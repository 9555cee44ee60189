"""Key and address model: single and threshold public keys, address derivation."""

from .address import Address, bech32_prefix, derive_address, raw_address
from .codec import decode_pubkey_any, encode_amino_pubkey, encode_pubkey_any
from .pubkey import (
    Curve,
    PublicKey,
    SinglePublicKey,
    ThresholdPublicKey,
    create_threshold_public_key,
)

__all__ = [
    "Address",
    "bech32_prefix",
    "derive_address",
    "raw_address",
    "decode_pubkey_any",
    "encode_amino_pubkey",
    "encode_pubkey_any",
    "Curve",
    "PublicKey",
    "SinglePublicKey",
    "ThresholdPublicKey",
    "create_threshold_public_key",
]
