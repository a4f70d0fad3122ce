"""Low-level HTTP protocol handler for the Vault init endpoint."""

import json
from typing import Any

import aiohttp

from vaultinit.exceptions import ApiError, ConnectionError, ProtocolError

INIT_PATH = "/v1/sys/init"


def base_url(address: str) -> str:
    """Normalize a node address into a base URL.

    Addresses without a scheme are contacted over plain HTTP.
    """
    address = address.rstrip("/")
    if "://" not in address:
        return f"http://{address}"
    return address


class VaultProtocol:
    """Low-level protocol handler for a single Vault node."""

    def __init__(self, session: aiohttp.ClientSession, address: str) -> None:
        self._session = session
        self._address = address
        self._base_url = base_url(address)

    async def get_init_status(self) -> bool:
        """Request initialization status.

        Returns True if the node is initialized.
        """
        response = await self._request("GET", INIT_PATH)

        if not isinstance(response, dict):
            raise ProtocolError(f"Expected JSON object, got {type(response).__name__}")

        initialized = response.get("initialized")
        if not isinstance(initialized, bool):
            raise ProtocolError(f"Malformed init status from {self._address}: {response!r}")

        return initialized

    async def init(self, payload: dict[str, Any]) -> Any:
        """Send an init request.

        Returns the decoded JSON body.
        """
        return await self._request("PUT", INIT_PATH, payload)

    async def _request(self, method: str, path: str, payload: dict[str, Any] | None = None) -> Any:
        """Issue one request and decode the JSON response."""
        url = f"{self._base_url}{path}"

        try:
            async with self._session.request(method, url, json=payload) as response:
                if response.status >= 400:
                    # Proxies in front of Vault answer errors with HTML
                    raise ApiError(response.status, _errors(await response.text()))
                try:
                    return await response.json(content_type=None)
                except ValueError as e:
                    raise ProtocolError(f"Invalid JSON from {url}: {e}") from e
        except TimeoutError as e:
            raise ConnectionError(f"Request to {url} timed out") from e
        except aiohttp.ClientError as e:
            raise ConnectionError(f"Failed to reach {url}: {e}") from e


def _errors(text: str) -> list[str]:
    """Extract the error list from an error body, falling back to the raw text."""
    try:
        body = json.loads(text)
    except ValueError:
        text = text.strip()
        return [text] if text else []
    if isinstance(body, dict) and isinstance(body.get("errors"), list):
        return [str(error) for error in body["errors"]]
    return []
