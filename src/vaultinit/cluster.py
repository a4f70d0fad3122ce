"""Cluster discovery and initialization status classification."""

import enum
import functools
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Protocol

from vaultinit.connection import VaultConnection
from vaultinit.exceptions import ProbeError, VaultInitError
from vaultinit.node_store import NodeStore

logger = logging.getLogger(__name__)

ConnectionFactory = Callable[[str], VaultConnection]


class NodeStatus(enum.Enum):
    """Initialization status of a single node."""

    INITIALIZED = "initialized"
    NOT_INITIALIZED = "not initialized"

    @property
    def exit_code(self) -> int:
        """Process exit code reported in check mode."""
        return 0 if self is NodeStatus.INITIALIZED else 2


@dataclass(frozen=True)
class Initialized:
    """At least one node is initialized; the first one found."""

    address: str


@dataclass(frozen=True)
class Uninitialized:
    """Every probed node is uninitialized, in discovery order."""

    addresses: tuple[str, ...]


@dataclass(frozen=True)
class Empty:
    """No nodes were discovered."""


ClusterState = Initialized | Uninitialized | Empty


class Probe(Protocol):
    async def probe(self, address: str) -> NodeStatus: ...


class StatusProbe:
    """Queries the initialization status of one node at a time."""

    def __init__(self, connection_factory: ConnectionFactory | None = None, *, timeout: float = 10.0) -> None:
        self._connect = connection_factory or functools.partial(VaultConnection, timeout=timeout)

    async def probe(self, address: str) -> NodeStatus:
        """Return the node's status.

        Raises ProbeError carrying the address if the status can't be read.
        """
        try:
            async with self._connect(address) as conn:
                initialized = await conn.init_status()
        except VaultInitError as e:
            raise ProbeError(address, e) from e

        status = NodeStatus.INITIALIZED if initialized else NodeStatus.NOT_INITIALIZED
        logger.debug(f"{address}: {status.value}")
        return status


class ClusterClient:
    """Client that discovers nodes and classifies their initialization state."""

    def __init__(
        self,
        node_store: NodeStore,
        *,
        probe: Probe | None = None,
        timeout: float = 10.0,
    ) -> None:
        """Initialize cluster client.

        Args:
            node_store: Store for cluster node information
            probe: Status probe, defaults to a StatusProbe over HTTP
            timeout: Request timeout in seconds for the default probe
        """
        self._node_store = node_store
        self._probe = probe or StatusProbe(timeout=timeout)

    async def discover(self) -> list[str]:
        """Look up node addresses in discovery order."""
        nodes = await self._node_store.get_nodes()
        return [node.address for node in nodes]

    async def classify(self, addresses: Sequence[str]) -> ClusterState:
        """Probe addresses in order and reduce the results to a cluster state.

        Stops at the first initialized node; later addresses are not probed.
        A probe failure aborts the whole pass.
        """
        uninitialized: list[str] = []

        for address in addresses:
            status = await self._probe.probe(address)
            if status is NodeStatus.INITIALIZED:
                return Initialized(address)
            uninitialized.append(address)

        if not uninitialized:
            return Empty()

        return Uninitialized(tuple(uninitialized))

    async def scan(self) -> ClusterState:
        """Discover nodes and classify them."""
        return await self.classify(await self.discover())
