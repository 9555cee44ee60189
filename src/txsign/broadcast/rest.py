"""
REST gateway client.

Talks to a node's gRPC-gateway REST API:

- `GET  /cosmos/base/tendermint/v1beta1/node_info` for the chain id;
- `GET  /cosmos/auth/v1beta1/accounts/{address}` for account state;
- `POST /cosmos/tx/v1beta1/txs` to submit a transaction.
"""

from __future__ import annotations

import base64
import logging
from typing import Any, Literal

import httpx
from pydantic import ValidationError

from txsign.config import DEFAULT_REST_URL, DEFAULT_TIMEOUT
from txsign.errors import DecodeError, TransportError
from txsign.types import StrictBaseModel, Uint64

from .account import AccountInfo

logger = logging.getLogger(__name__)

NODE_INFO_ENDPOINT = "/cosmos/base/tendermint/v1beta1/node_info"
ACCOUNTS_ENDPOINT = "/cosmos/auth/v1beta1/accounts/{address}"
BROADCAST_ENDPOINT = "/cosmos/tx/v1beta1/txs"


class ClientConfig(StrictBaseModel):
    """Connection settings of a `RestClient`."""

    base_url: str = DEFAULT_REST_URL
    """Gateway root, e.g. `http://localhost:1317`."""

    timeout: float = DEFAULT_TIMEOUT
    """Per-request timeout in seconds."""

    broadcast_mode: Literal["BROADCAST_MODE_SYNC", "BROADCAST_MODE_ASYNC"] = "BROADCAST_MODE_SYNC"
    """How long the node waits before answering a submission."""


class RestClient:
    """
    `AccountQuery` and `Transport` over the REST gateway.

    Use as an async context manager, or call `aclose()` when done.
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or ClientConfig()
        self._client = httpx.AsyncClient(
            base_url=self.config.base_url.rstrip("/"),
            timeout=self.config.timeout,
            transport=transport,
        )

    async def __aenter__(self) -> RestClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            return await self._client.request(method, path, **kwargs)
        except httpx.RequestError as exc:
            raise TransportError(str(exc.request.url), f"network error: {exc}") from exc

    @staticmethod
    def _json(response: httpx.Response) -> dict[str, Any]:
        if response.is_error:
            raise TransportError(
                str(response.request.url), response.text[:200], status_code=response.status_code
            )
        try:
            body = response.json()
        except ValueError as exc:
            raise TransportError(str(response.request.url), "response is not JSON") from exc
        if not isinstance(body, dict):
            raise TransportError(str(response.request.url), "response is not a JSON object")
        return body

    async def chain_id(self) -> str:
        """The network name the node reports."""
        body = self._json(await self._request("GET", NODE_INFO_ENDPOINT))
        try:
            return str(body["default_node_info"]["network"])
        except (KeyError, TypeError) as exc:
            raise DecodeError("NodeInfo", f"missing network: {exc}") from exc

    async def get_account(self, address: str) -> AccountInfo | None:
        """
        Look up an account.

        Returns:
            The account state, or None when the node does not know the address.
        """
        response = await self._request("GET", ACCOUNTS_ENDPOINT.format(address=address))
        if response.status_code == 404:
            logger.debug("Account %s not found", address)
            return None
        account = self._json(response).get("account")
        if not isinstance(account, dict):
            return None
        # Vesting and module accounts wrap the base account.
        if isinstance(account.get("base_account"), dict):
            account = account["base_account"]
        if not account.get("address"):
            return None
        try:
            return AccountInfo(
                address=str(account["address"]),
                account_number=Uint64(int(account.get("account_number") or 0)),
                sequence=Uint64(int(account.get("sequence") or 0)),
            )
        except (ValueError, TypeError, OverflowError, ValidationError) as exc:
            raise DecodeError("Account", str(exc)) from exc

    async def broadcast(self, tx_bytes: bytes) -> dict[str, Any]:
        """
        Submit encoded transaction bytes.

        Returns:
            The node's raw response; classify with `interpret_broadcast`.
        """
        payload = {
            "tx_bytes": base64.b64encode(tx_bytes).decode("ascii"),
            "mode": self.config.broadcast_mode,
        }
        logger.info("Broadcasting %d-byte transaction", len(tx_bytes))
        response = await self._request("POST", BROADCAST_ENDPOINT, json=payload)
        # Rejected transactions come back with HTTP 200 and a non-zero code,
        # so only non-JSON failures are transport errors.
        return self._json(response)
