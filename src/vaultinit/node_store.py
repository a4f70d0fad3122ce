"""Node store interfaces for cluster discovery."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import aiohttp

from vaultinit.exceptions import DiscoveryError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NodeInfo:
    """Information about a discovered cluster node."""

    address: str


class NodeStore(ABC):
    """Abstract interface for looking up the nodes behind a service name."""

    service: str

    @abstractmethod
    async def get_nodes(self) -> list[NodeInfo]:
        """Get nodes in discovery order."""
        ...


class MemoryNodeStore(NodeStore):
    """In-memory node store."""

    def __init__(self, initial_addresses: list[str] | None = None, *, service: str = "static") -> None:
        self.service = service
        self._nodes: list[NodeInfo] = []
        if initial_addresses:
            for addr in initial_addresses:
                self._nodes.append(NodeInfo(address=addr))

    async def get_nodes(self) -> list[NodeInfo]:
        """Get nodes in discovery order."""
        return list(self._nodes)


class ConsulNodeStore(NodeStore):
    """Node store backed by the Consul catalog.

    Reads are issued with ``?stale`` so any Consul server can answer; the
    catalog is allowed to lag behind the cluster.
    """

    def __init__(
        self,
        service: str,
        *,
        consul_address: str = "127.0.0.1:8500",
        consul_scheme: str = "http",
        token: str | None = None,
        datacenter: str | None = None,
        node_scheme: str | None = None,
        timeout: float = 10.0,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        """Initialize Consul node store.

        Args:
            service: Catalog service name the Vault nodes are registered under
            consul_address: Consul agent address in "host:port" format
            consul_scheme: Scheme used to reach Consul
            token: ACL token sent as X-Consul-Token
            datacenter: Datacenter to query instead of the agent's own
            node_scheme: Scheme for discovered node URLs, defaults to consul_scheme
            timeout: Total request timeout in seconds
            session: Shared HTTP session; left open if given
        """
        self.service = service
        if "://" not in consul_address:
            consul_address = f"{consul_scheme}://{consul_address}"
        self._consul_url = consul_address.rstrip("/")
        self._token = token
        self._datacenter = datacenter
        self._node_scheme = node_scheme or consul_scheme
        self._timeout = timeout
        self._session = session

    async def get_nodes(self) -> list[NodeInfo]:
        """Query the catalog for the service's nodes."""
        url = f"{self._consul_url}/v1/catalog/service/{quote(self.service, safe='')}"
        params = {"stale": ""}
        if self._datacenter:
            params["dc"] = self._datacenter
        headers = {"X-Consul-Token": self._token} if self._token else {}

        logger.debug(f"Looking up service '{self.service}' at {self._consul_url}")

        session = self._session
        if session is None:
            session = aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=self._timeout))
        try:
            entries = await self._fetch(session, url, params, headers)
        finally:
            if self._session is None:
                await session.close()

        nodes = [self._node_info(entry) for entry in entries]
        logger.info(f"Discovered {len(nodes)} node(s) under service '{self.service}'")
        return nodes

    async def _fetch(
        self,
        session: aiohttp.ClientSession,
        url: str,
        params: dict[str, str],
        headers: dict[str, str],
    ) -> list[Any]:
        try:
            async with session.get(url, params=params, headers=headers) as response:
                if response.status >= 400:
                    text = await response.text()
                    raise DiscoveryError(
                        f"Consul catalog query for '{self.service}' failed "
                        f"[{response.status}]: {text.strip()}"
                    )
                try:
                    entries = await response.json(content_type=None)
                except ValueError as e:
                    raise DiscoveryError(f"Invalid JSON from Consul catalog: {e}") from e
        except TimeoutError as e:
            raise DiscoveryError(f"Consul catalog query to {url} timed out") from e
        except aiohttp.ClientError as e:
            raise DiscoveryError(f"Failed to query Consul catalog at {url}: {e}") from e

        if entries is None:
            return []
        if not isinstance(entries, list):
            raise DiscoveryError(f"Expected list from Consul catalog, got {type(entries).__name__}")
        return entries

    def _node_info(self, entry: Any) -> NodeInfo:
        """Map one catalog entry to a node URL."""
        if not isinstance(entry, dict):
            raise DiscoveryError(f"Malformed catalog entry: {entry!r}")

        # ServiceAddress is empty when the service was registered without one
        host = entry.get("ServiceAddress") or entry.get("Address")
        port = entry.get("ServicePort")
        if not host or not isinstance(port, int):
            raise DiscoveryError(f"Catalog entry has no usable address: {entry!r}")

        return NodeInfo(address=f"{self._node_scheme}://{host}:{port}")
