"""Canonical transaction encoding: messages, fees, sign bytes, and the signed envelope."""

from .envelope import (
    SignedTxEnvelope,
    SignerInfo,
    build_signed_envelope,
    decode,
    encode_for_broadcast,
    tx_hash,
)
from .fees import DEFAULT_FEE_TABLE, Coin, Fee, FeeTable, single_amount_fee
from .messages import Message, TxBody, decode_tx_body, encode_tx_body
from .mode_info import (
    ModeInfo,
    MultiModeInfo,
    SignMode,
    SingleModeInfo,
    decode_compact_bit_array,
    decode_mode_info,
    encode_compact_bit_array,
    encode_mode_info,
)
from .sign_doc import SignerData, build_sign_bytes, make_sign_doc

__all__ = [
    "SignedTxEnvelope",
    "SignerInfo",
    "build_signed_envelope",
    "decode",
    "encode_for_broadcast",
    "tx_hash",
    "DEFAULT_FEE_TABLE",
    "Coin",
    "Fee",
    "FeeTable",
    "single_amount_fee",
    "Message",
    "TxBody",
    "decode_tx_body",
    "encode_tx_body",
    "ModeInfo",
    "MultiModeInfo",
    "SignMode",
    "SingleModeInfo",
    "decode_compact_bit_array",
    "decode_mode_info",
    "encode_compact_bit_array",
    "encode_mode_info",
    "SignerData",
    "build_sign_bytes",
    "make_sign_doc",
]
