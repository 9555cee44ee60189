"""
Sign documents and sign bytes.

The bytes a signer signs are the canonical JSON of the legacy amino
`StdSignDoc`:

    {"account_number": "7",
     "chain_id": "testing",
     "fee": {"amount": [{"amount": "2000", "denom": "ucosm"}], "gas": "80000"},
     "memo": "Use your tokens wisely",
     "msgs": [{"type": "cosmos-sdk/MsgSend", "value": {...}}],
     "sequence": "3"}

(rendered without whitespace, keys sorted). The ledger rebuilds this document
from the decoded transaction plus the signer's account number and sequence,
so the output must be a function of exactly
`(messages, fee, memo, chain_id, account_number, sequence)`.
"""

from __future__ import annotations

from typing import Any, Sequence

from txsign.encoding import canonical_bytes
from txsign.types import StrictBaseModel, Uint64

from .fees import Fee
from .messages import Message


class SignerData(StrictBaseModel):
    """
    Chain state a signature is bound to.

    Fetch once per signing round and share the same value with every signer
    of that round: members that sign with different sequences produce sign
    bytes that cannot be combined.
    """

    account_number: Uint64
    """The signing account's number."""

    sequence: Uint64
    """The account's replay-protection counter, as the ledger expects it now."""

    chain_id: str
    """Identifier of the target chain."""


def make_sign_doc(
    messages: Sequence[Message], fee: Fee, memo: str, signer: SignerData
) -> dict[str, Any]:
    """Build the `StdSignDoc` object (integers rendered as strings)."""
    return {
        "account_number": str(signer.account_number),
        "chain_id": signer.chain_id,
        "fee": fee.to_amino(),
        "memo": memo,
        "msgs": [message.to_amino() for message in messages],
        "sequence": str(signer.sequence),
    }


def build_sign_bytes(
    messages: Sequence[Message], fee: Fee, memo: str, signer: SignerData
) -> bytes:
    """
    Produce the bytes each signer signs.

    Equal inputs (including message order) always give identical bytes.

    Raises:
        ValueError: If a message has no amino rendering.
    """
    return canonical_bytes(make_sign_doc(messages, fee, memo, signer))
