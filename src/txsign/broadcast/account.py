"""
The chain-state and transport boundary.

The signing core never talks to a node itself. It consumes two narrow
capabilities:

- `AccountQuery`: look up an account's number and sequence.
- `Transport`: submit encoded transaction bytes.

`RestClient` implements both over HTTP; tests substitute in-memory fakes.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Protocol, runtime_checkable

from txsign.errors import AccountNotFoundError
from txsign.keys import Address
from txsign.tx import SignerData
from txsign.types import StrictBaseModel, Uint64

logger = logging.getLogger(__name__)


class AccountInfo(StrictBaseModel):
    """On-chain state of one account."""

    address: str
    """Bech32 address."""

    account_number: Uint64
    sequence: Uint64


@runtime_checkable
class AccountQuery(Protocol):
    """Looks up account state."""

    async def get_account(self, address: str) -> AccountInfo | None:
        """Return the account, or None when it does not exist."""
        ...


@runtime_checkable
class Transport(Protocol):
    """Submits encoded transactions."""

    async def broadcast(self, tx_bytes: bytes) -> Mapping[str, Any]:
        """Submit `TxRaw` bytes and return the node's raw response."""
        ...


async def fetch_signer_data(
    query: AccountQuery, address: Address | str, chain_id: str
) -> SignerData:
    """
    Build the `SignerData` of a signing round.

    Raises:
        AccountNotFoundError: If the account has no on-chain state.
    """
    text = address if isinstance(address, str) else address.to_bech32()
    account = await query.get_account(text)
    if account is None:
        raise AccountNotFoundError(text)
    logger.debug(
        "Account %s: number %s, sequence %s", text, account.account_number, account.sequence
    )
    return SignerData(
        account_number=account.account_number, sequence=account.sequence, chain_id=chain_id
    )
