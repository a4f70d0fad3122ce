"""High-level connection interface for a Vault node."""

import logging
from typing import Any

import aiohttp

from vaultinit.exceptions import ConnectionError
from vaultinit.models import InitRequest, InitResult
from vaultinit.protocol import VaultProtocol

logger = logging.getLogger(__name__)


class VaultConnection:
    """High-level async connection to one Vault node."""

    def __init__(
        self,
        address: str,
        *,
        timeout: float = 10.0,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        """Initialize connection (does not connect yet).

        Args:
            address: Node address, e.g. "http://10.0.0.1:8200"
            timeout: Total timeout per request in seconds
            session: Shared HTTP session; left open on close if given
        """
        self._address = address
        self._timeout = timeout
        self._session = session
        self._owns_session = session is None
        self._protocol: VaultProtocol | None = None

    async def connect(self) -> None:
        """Open the HTTP session used to talk to the node."""
        if self._protocol is not None:
            return

        if self._session is None:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self._timeout),
            )

        self._protocol = VaultProtocol(self._session, self._address)
        logger.debug(f"Connected to {self._address}")

    async def close(self) -> None:
        """Close the connection."""
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None
        self._protocol = None

    async def __aenter__(self) -> "VaultConnection":
        await self.connect()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    def _ensure_connected(self) -> VaultProtocol:
        if self._protocol is None:
            raise ConnectionError("Not connected")
        return self._protocol

    async def init_status(self) -> bool:
        """Check whether the node has been initialized."""
        protocol = self._ensure_connected()
        return await protocol.get_init_status()

    async def initialize(self, request: InitRequest) -> InitResult:
        """Initialize the node.

        Not idempotent: a second call against the same node fails.
        """
        protocol = self._ensure_connected()
        body = await protocol.init(request.to_payload())
        return InitResult.from_payload(body)
