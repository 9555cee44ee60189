"""Tests for fetching signer data through an account query."""

import pytest

from txsign.broadcast import AccountInfo, AccountQuery, fetch_signer_data
from txsign.errors import AccountNotFoundError
from txsign.keys import Address
from txsign.types import Uint64

KNOWN = "cosmos1known"


class FakeAccountQuery:
    """In-memory account state."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    async def get_account(self, address: str) -> AccountInfo | None:
        self.calls.append(address)
        if address != KNOWN:
            return None
        return AccountInfo(address=address, account_number=Uint64(12), sequence=Uint64(3))


class TestFetchSignerData:
    """Signer data comes from on-chain state."""

    def test_fake_satisfies_protocol(self) -> None:
        assert isinstance(FakeAccountQuery(), AccountQuery)

    @pytest.mark.anyio
    async def test_existing_account(self) -> None:
        data = await fetch_signer_data(FakeAccountQuery(), KNOWN, "testing")
        assert (data.account_number, data.sequence, data.chain_id) == (12, 3, "testing")

    @pytest.mark.anyio
    async def test_missing_account(self) -> None:
        with pytest.raises(AccountNotFoundError) as exc_info:
            await fetch_signer_data(FakeAccountQuery(), "cosmos1missing", "testing")
        assert exc_info.value.address == "cosmos1missing"

    @pytest.mark.anyio
    async def test_raw_address_rendered_as_bech32(self) -> None:
        query = FakeAccountQuery()
        address = Address(b"\x01" * 20)
        with pytest.raises(AccountNotFoundError):
            await fetch_signer_data(query, address, "testing")
        assert query.calls == [address.to_bech32()]
