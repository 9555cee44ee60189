"""Deterministic keys, messages and fees for tests."""

from __future__ import annotations

from txsign.keys import Curve, ThresholdPublicKey, create_threshold_public_key
from txsign.signing import InMemorySigner
from txsign.tx import Fee, Message, SignerData, single_amount_fee

CHAIN_ID = "simd-testing"
"""Chain id used by every test sign document."""

MEMO = "Use your tokens wisely"
"""Memo used by the multisig scenarios."""


def make_signers(count: int, curve: Curve = Curve.SECP256K1) -> list[InMemorySigner]:
    """`count` signers with stable, distinct keys."""
    return [InMemorySigner.from_seed(curve, f"member-{curve.value}-{i}") for i in range(count)]


def make_threshold_key(signers: list[InMemorySigner], threshold: int) -> ThresholdPublicKey:
    return create_threshold_public_key([signer.public_key for signer in signers], threshold)


def make_send_message(from_address: str, to_address: str, amount: int = 1234) -> Message:
    """
    A bank send in both renderings.

    The protobuf value is a hand-encoded `MsgSend{from_address=1, to_address=2,
    amount=3}`; the content only has to be stable.
    """
    coin = b"\x0a\x05ucosm\x12" + bytes([len(str(amount))]) + str(amount).encode()
    value = (
        b"\x0a" + bytes([len(from_address)]) + from_address.encode()
        + b"\x12" + bytes([len(to_address)]) + to_address.encode()
        + b"\x1a" + bytes([len(coin)]) + coin
    )
    return Message(
        type_url="/cosmos.bank.v1beta1.MsgSend",
        value=value,
        amino_type="cosmos-sdk/MsgSend",
        amino_value={
            "amount": [{"amount": str(amount), "denom": "ucosm"}],
            "from_address": from_address,
            "to_address": to_address,
        },
    )


def make_fee(amount: int = 2000, gas_limit: int = 200_000) -> Fee:
    return single_amount_fee(amount, "ucosm", gas_limit)


def make_signer_data(account_number: int = 7, sequence: int = 3) -> SignerData:
    return SignerData(account_number=account_number, sequence=sequence, chain_id=CHAIN_ID)
