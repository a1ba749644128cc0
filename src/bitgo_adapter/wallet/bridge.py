"""Wallet SDK bridge backend.

The wallet SDK is a JavaScript library, so it runs in a small sidecar
process. This module talks to that sidecar over JSON/HTTP:

    GET  /health
    POST /api/v2/{coin}/keychain/create   {"seed": "<hex>"}
    POST /api/v2/{coin}/tx/verify         VerifyOptions.to_payload()
    POST /api/v2/{coin}/tx/sign           {"txPrebuild": ..., "prv": ...}

The bridge is local; any calls the SDK makes to remote coin services
happen inside it.
"""

import logging
from typing import Any, Optional

import httpx

from bitgo_adapter.wallet.base import (
    BaseCoin,
    Keychain,
    SigningError,
    VerificationError,
    VerifyOptions,
    WalletComponent,
    WalletComponentError,
)

logger = logging.getLogger(__name__)


class BridgeWalletComponent(WalletComponent):
    """Wallet component backed by the SDK bridge.

    Example:
        wallet = BridgeWalletComponent("http://127.0.0.1:3080", env="test")
        keychain = await wallet.coin("btc").create_keychain(seed)
    """

    def __init__(
        self,
        base_url: str,
        env: str = "test",
        timeout: float = 30.0,
        token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize bridge component.

        Args:
            base_url: Bridge base URL
            env: Wallet SDK environment forwarded on every request
            timeout: Request timeout in seconds
            token: Optional bearer token
            transport: Optional httpx transport override (tests)
        """
        super().__init__(env)
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._token = token
        self._transport = transport

    def coin(self, coin_type: str) -> "BridgeCoin":
        return BridgeCoin(self, coin_type)

    def _headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "X-Wallet-Env": self.env,
        }
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers=self._headers(),
            timeout=self.timeout,
            transport=self._transport,
        )

    async def request(
        self,
        method: str,
        path: str,
        json: Optional[dict] = None,
        error_class: type[WalletComponentError] = WalletComponentError,
    ) -> Any:
        """Send a request to the bridge and decode the JSON response.

        Args:
            method: HTTP method
            path: Path relative to the bridge base URL
            json: Request body
            error_class: Exception type raised for non-2xx responses

        Returns:
            Decoded response body

        Raises:
            WalletComponentError (or error_class) on failure
        """
        try:
            async with self._client() as client:
                response = await client.request(method, path, json=json)
        except httpx.HTTPError as e:
            logger.error(f"Wallet bridge request {method} {path} failed: {e}")
            raise WalletComponentError(f"Wallet bridge unreachable: {e}") from e

        if response.is_success:
            try:
                return response.json()
            except ValueError as e:
                raise WalletComponentError(
                    f"Invalid JSON from wallet bridge on {path}",
                    status_code=response.status_code,
                ) from e

        message = _error_message(response)
        logger.warning(f"Wallet bridge {path} returned {response.status_code}: {message}")
        raise error_class(message, status_code=response.status_code)

    async def health_check(self) -> bool:
        """Check if the bridge answers its health endpoint."""
        try:
            await self.request("GET", "/health")
            return True
        except WalletComponentError:
            return False


class BridgeCoin(BaseCoin):
    """Per-coin operations routed through the bridge."""

    def __init__(self, component: BridgeWalletComponent, coin_type: str):
        super().__init__(coin_type)
        self._component = component

    def _path(self, suffix: str) -> str:
        return f"/api/v2/{self.coin_type}/{suffix}"

    async def create_keychain(self, seed: bytes) -> Keychain:
        data = await self._component.request(
            "POST",
            self._path("keychain/create"),
            json={"seed": bytes(seed).hex()},
        )
        if not isinstance(data, dict):
            raise WalletComponentError("Unexpected keychain response from wallet bridge")
        return Keychain.from_dict(data)

    async def verify_transaction(self, options: VerifyOptions) -> bool:
        data = await self._component.request(
            "POST",
            self._path("tx/verify"),
            json=options.to_payload(),
            error_class=VerificationError,
        )
        # Only an explicit {"valid": true} counts as verified
        if isinstance(data, dict):
            return data.get("valid") is True
        return data is True

    async def sign_transaction(self, tx_prebuild: Any, prv: Optional[str]) -> dict:
        return await self._component.request(
            "POST",
            self._path("tx/sign"),
            json={"txPrebuild": tx_prebuild, "prv": prv},
            error_class=SigningError,
        )


def _error_message(response: httpx.Response) -> str:
    """Extract the bridge's error message from a failed response."""
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"

    if isinstance(body, dict):
        for key in ("error", "message"):
            if body.get(key):
                return str(body[key])
    return f"HTTP {response.status_code}"
