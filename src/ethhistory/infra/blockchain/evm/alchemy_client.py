"""Alchemy JSON-RPC client: asset transfer listing and receipt lookup."""

from typing import Any

import httpx

from ethhistory.exceptions import ExternalServiceError, PermanentServiceError, RateLimitError
from ethhistory.infra.http.rate_limited_client import RateLimitedClient

# JSON-RPC errors that mean the request itself is wrong
PERMANENT_RPC_CODES = {-32600, -32601, -32602}
RATE_LIMIT_RPC_CODES = {429, -32005}

# HTTP statuses worth retrying even though they are 4xx
RETRYABLE_4XX = {408, 425}


class AlchemyClient:
    """Thin JSON-RPC wrapper. No retries here; callers wrap calls in a BackoffExecutor."""

    def __init__(self, url: str, http_client: RateLimitedClient) -> None:
        self._url = url
        self._http = http_client

    async def _call(self, method: str, params: list) -> Any:
        payload = {"jsonrpc": "2.0", "id": 1, "method": method, "params": params}
        try:
            resp = await self._http.post(self._url, json=payload)
        except httpx.RequestError as e:
            raise ExternalServiceError(f"Alchemy transport error ({method}): {e!r}") from e

        status = resp.status_code
        if status == 429:
            raise RateLimitError(f"Alchemy rate limited ({method})")
        if status >= 500 or status in RETRYABLE_4XX:
            raise ExternalServiceError(f"Alchemy HTTP {status} ({method})")
        if status >= 400:
            raise PermanentServiceError(f"Alchemy HTTP {status} ({method}): {resp.text[:200]}")

        try:
            data = resp.json()
        except ValueError as e:
            raise ExternalServiceError(f"Alchemy returned a non-JSON body ({method})") from e
        if not isinstance(data, dict):
            raise ExternalServiceError(f"Alchemy returned an unexpected body ({method})")

        error = data.get("error")
        if error:
            code = error.get("code") if isinstance(error, dict) else None
            msg = error.get("message", str(error)) if isinstance(error, dict) else str(error)
            if code in RATE_LIMIT_RPC_CODES:
                raise RateLimitError(f"Alchemy rate limited ({method}): {msg}")
            if code in PERMANENT_RPC_CODES:
                raise PermanentServiceError(f"Alchemy RPC error {code} ({method}): {msg}")
            raise ExternalServiceError(f"Alchemy RPC error {code} ({method}): {msg}")

        return data.get("result")

    async def get_asset_transfers(self, params: dict[str, Any]) -> dict:
        """alchemy_getAssetTransfers — returns {"transfers": [...], "pageKey"?: str}."""
        result = await self._call("alchemy_getAssetTransfers", [params])
        if result is None:
            return {"transfers": []}
        if not isinstance(result, dict):
            raise ExternalServiceError("alchemy_getAssetTransfers returned a non-object result")
        return result

    async def get_transaction_receipt(self, tx_hash: str) -> dict | None:
        """eth_getTransactionReceipt — None when the node does not know the hash."""
        result = await self._call("eth_getTransactionReceipt", [tx_hash])
        if result is not None and not isinstance(result, dict):
            raise ExternalServiceError("eth_getTransactionReceipt returned a non-object result")
        return result
