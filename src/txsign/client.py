"""
A signing client: one signer, one node, one fee table.

Glues the pieces together for the common single-signer flow:

    async with RestClient(ClientConfig(base_url=url)) as rest:
        client = SigningClient(rest, rest, signer, chain_id="testing")
        result = await client.sign_and_broadcast([msg], fee_kind="send")
"""

from __future__ import annotations

import logging
from typing import Sequence

from txsign.broadcast import (
    AccountQuery,
    BroadcastResult,
    Transport,
    fetch_signer_data,
    interpret_broadcast,
)
from txsign.config import DEFAULT_ADDRESS_PREFIX
from txsign.keys import derive_address
from txsign.signing import Signer, sign_single_tx
from txsign.tx import (
    DEFAULT_FEE_TABLE,
    Fee,
    FeeTable,
    Message,
    SignedTxEnvelope,
    encode_for_broadcast,
    tx_hash,
)

logger = logging.getLogger(__name__)


class SigningClient:
    """Signs with one `Signer` and submits through one `Transport`."""

    def __init__(
        self,
        query: AccountQuery,
        transport: Transport,
        signer: Signer,
        *,
        chain_id: str,
        fees: FeeTable = DEFAULT_FEE_TABLE,
        prefix: str = DEFAULT_ADDRESS_PREFIX,
    ) -> None:
        self.query = query
        self.transport = transport
        self.signer = signer
        self.chain_id = chain_id
        self.fees = fees
        self.sender_address = derive_address(signer.public_key, prefix)

    async def sign(
        self,
        messages: Sequence[Message],
        *,
        fee: Fee | None = None,
        fee_kind: str = "exec",
        memo: str = "",
    ) -> SignedTxEnvelope:
        """
        Sign `messages` with fresh account state.

        Args:
            messages: Messages to include, in order.
            fee: Explicit fee; overrides `fee_kind`.
            fee_kind: Entry of the fee table to use when `fee` is not given.
            memo: Transaction memo.

        Raises:
            AccountNotFoundError: If the sender has no on-chain account.
            SigningFailedError: If the signer fails.
        """
        signer_data = await fetch_signer_data(self.query, self.sender_address, self.chain_id)
        chosen = fee if fee is not None else self.fees.for_kind(fee_kind)
        return sign_single_tx(self.signer, messages, chosen, memo, signer_data)

    async def broadcast(self, envelope: SignedTxEnvelope) -> BroadcastResult:
        """Submit an envelope (single or multisig) and classify the outcome."""
        tx_bytes = encode_for_broadcast(envelope)
        logger.info("Submitting tx %s", tx_hash(tx_bytes))
        return interpret_broadcast(await self.transport.broadcast(tx_bytes))

    async def sign_and_broadcast(
        self,
        messages: Sequence[Message],
        *,
        fee: Fee | None = None,
        fee_kind: str = "exec",
        memo: str = "",
    ) -> BroadcastResult:
        envelope = await self.sign(messages, fee=fee, fee_kind=fee_kind, memo=memo)
        return await self.broadcast(envelope)
