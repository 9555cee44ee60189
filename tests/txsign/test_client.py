"""Tests for the single-signer signing client."""

from typing import Any, Mapping

import pytest

from tests.txsign.helpers import CHAIN_ID, make_fee, make_send_message, make_signers
from txsign.broadcast import AccountInfo
from txsign.client import SigningClient
from txsign.errors import AccountNotFoundError
from txsign.keys import derive_address
from txsign.signing import verify_signature
from txsign.tx import DEFAULT_FEE_TABLE, SignerData, build_sign_bytes, decode, tx_hash
from txsign.types import Uint64

SIGNER = make_signers(1)[0]
SENDER = derive_address(SIGNER.public_key)
MESSAGES = [make_send_message(SENDER, "cosmos1recipient")]


class FakeNode:
    """Account state plus a transport that records what it receives."""

    def __init__(self, known: bool = True, code: int = 0) -> None:
        self.known = known
        self.code = code
        self.submitted: list[bytes] = []

    async def get_account(self, address: str) -> AccountInfo | None:
        if not self.known:
            return None
        return AccountInfo(address=address, account_number=Uint64(9), sequence=Uint64(2))

    async def broadcast(self, tx_bytes: bytes) -> Mapping[str, Any]:
        self.submitted.append(tx_bytes)
        return {"code": self.code, "txhash": tx_hash(tx_bytes), "raw_log": "out of gas"}


def make_client(node: FakeNode) -> SigningClient:
    return SigningClient(node, node, SIGNER, chain_id=CHAIN_ID)


class TestSigningClient:
    """Sign with fresh account state and submit."""

    def test_sender_address(self) -> None:
        assert make_client(FakeNode()).sender_address == SENDER

    @pytest.mark.anyio
    async def test_uses_fee_table_entry(self) -> None:
        envelope = await make_client(FakeNode()).sign(MESSAGES, fee_kind="send")
        assert envelope.fee == DEFAULT_FEE_TABLE.send
        assert envelope.signer_infos[0].sequence == 2

    @pytest.mark.anyio
    async def test_explicit_fee_wins(self) -> None:
        fee = make_fee(1, 1)
        envelope = await make_client(FakeNode()).sign(MESSAGES, fee=fee, fee_kind="send")
        assert envelope.fee == fee

    @pytest.mark.anyio
    async def test_sign_and_broadcast(self) -> None:
        node = FakeNode()
        result = await make_client(node).sign_and_broadcast(MESSAGES, memo="hello")

        assert result.is_success
        (tx_bytes,) = node.submitted
        assert result.tx_hash == tx_hash(tx_bytes)

        envelope = decode(tx_bytes)
        signer_data = SignerData(account_number=Uint64(9), sequence=Uint64(2), chain_id=CHAIN_ID)
        sign_bytes = build_sign_bytes(MESSAGES, DEFAULT_FEE_TABLE.exec, "hello", signer_data)
        assert verify_signature(SIGNER.public_key, sign_bytes, envelope.signatures[0])

    @pytest.mark.anyio
    async def test_rejection_returned_as_result(self) -> None:
        result = await make_client(FakeNode(code=11)).sign_and_broadcast(MESSAGES)
        assert not result.is_success
        assert result.raw_log == "out of gas"

    @pytest.mark.anyio
    async def test_unknown_account(self) -> None:
        with pytest.raises(AccountNotFoundError):
            await make_client(FakeNode(known=False)).sign(MESSAGES)
