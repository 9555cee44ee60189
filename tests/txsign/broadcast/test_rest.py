"""Tests for the REST gateway client, against a mocked transport."""

import base64
import json

import httpx
import pytest

from txsign.broadcast import ClientConfig, RestClient, interpret_broadcast
from txsign.errors import DecodeError, TransportError

ADDRESS = "cosmos1qypqxpq9qcrsszg2pvxq6rs0zqg3yyc5lzv7xu"


def make_client(handler, **config: object) -> RestClient:
    """Build a client whose requests are answered by `handler`."""
    return RestClient(
        ClientConfig(base_url="http://node.test/", **config),  # type: ignore[arg-type]
        transport=httpx.MockTransport(handler),
    )


class TestChainId:
    """Node info lookup."""

    @pytest.mark.anyio
    async def test_reads_network(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/cosmos/base/tendermint/v1beta1/node_info"
            return httpx.Response(200, json={"default_node_info": {"network": "testing"}})

        async with make_client(handler) as client:
            assert await client.chain_id() == "testing"

    @pytest.mark.anyio
    async def test_missing_network(self) -> None:
        async with make_client(lambda request: httpx.Response(200, json={})) as client:
            with pytest.raises(DecodeError, match="missing network"):
                await client.chain_id()


class TestGetAccount:
    """Account lookup."""

    @pytest.mark.anyio
    async def test_base_account(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == f"/cosmos/auth/v1beta1/accounts/{ADDRESS}"
            account = {
                "@type": "/cosmos.auth.v1beta1.BaseAccount",
                "address": ADDRESS,
                "account_number": "12",
                "sequence": "3",
            }
            return httpx.Response(200, json={"account": account})

        async with make_client(handler) as client:
            account = await client.get_account(ADDRESS)
        assert account is not None
        assert (account.address, account.account_number, account.sequence) == (ADDRESS, 12, 3)

    @pytest.mark.anyio
    async def test_vesting_account_unwrapped(self) -> None:
        body = {
            "account": {
                "@type": "/cosmos.vesting.v1beta1.ContinuousVestingAccount",
                "base_vesting_account": {},
                "base_account": {"address": ADDRESS, "account_number": "5"},
            }
        }
        async with make_client(lambda request: httpx.Response(200, json=body)) as client:
            account = await client.get_account(ADDRESS)
        assert account is not None
        assert account.account_number == 5
        assert account.sequence == 0

    @pytest.mark.anyio
    async def test_not_found(self) -> None:
        async with make_client(lambda request: httpx.Response(404, json={})) as client:
            assert await client.get_account(ADDRESS) is None

    @pytest.mark.anyio
    async def test_server_error(self) -> None:
        async with make_client(lambda request: httpx.Response(500, text="boom")) as client:
            with pytest.raises(TransportError) as exc_info:
                await client.get_account(ADDRESS)
        assert exc_info.value.status_code == 500

    @pytest.mark.anyio
    async def test_bad_account_number(self) -> None:
        body = {"account": {"address": ADDRESS, "account_number": "-1"}}
        async with make_client(lambda request: httpx.Response(200, json=body)) as client:
            with pytest.raises(DecodeError):
                await client.get_account(ADDRESS)


class TestBroadcast:
    """Transaction submission."""

    @pytest.mark.anyio
    async def test_posts_base64_bytes(self) -> None:
        seen: dict[str, object] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen.update(json.loads(request.content))
            assert request.method == "POST"
            assert request.url.path == "/cosmos/tx/v1beta1/txs"
            return httpx.Response(
                200, json={"tx_response": {"code": 0, "txhash": "AB" * 32, "raw_log": "[]"}}
            )

        async with make_client(handler, broadcast_mode="BROADCAST_MODE_ASYNC") as client:
            raw = await client.broadcast(b"\x0a\x00")

        assert seen == {
            "tx_bytes": base64.b64encode(b"\x0a\x00").decode(),
            "mode": "BROADCAST_MODE_ASYNC",
        }
        assert interpret_broadcast(raw).tx_hash == "AB" * 32

    @pytest.mark.anyio
    async def test_network_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with make_client(handler) as client:
            with pytest.raises(TransportError, match="network error"):
                await client.broadcast(b"")

    @pytest.mark.anyio
    async def test_non_json_response(self) -> None:
        async with make_client(lambda request: httpx.Response(200, text="<html>")) as client:
            with pytest.raises(TransportError, match="not JSON"):
                await client.broadcast(b"")
