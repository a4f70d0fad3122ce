"""Async Vault initialization with cluster discovery."""

from vaultinit.actions import Action, AutoInit, ReportAmbiguous, ReportNotFound, ReportRedirect, select
from vaultinit.cluster import (
    ClusterClient,
    ClusterState,
    Empty,
    Initialized,
    NodeStatus,
    StatusProbe,
    Uninitialized,
)
from vaultinit.connection import VaultConnection
from vaultinit.exceptions import (
    AlreadyInitializedError,
    ApiError,
    ClusterError,
    ConnectionError,
    DiscoveryError,
    InitError,
    ProbeError,
    ProtocolError,
    ValidationError,
    VaultInitError,
)
from vaultinit.models import InitRequest, InitResult
from vaultinit.node_store import ConsulNodeStore, MemoryNodeStore, NodeInfo, NodeStore
from vaultinit.orchestrator import InitOrchestrator

__all__ = [
    "initialize",
    "check_status",
    "InitRequest",
    "InitResult",
    "InitOrchestrator",
    "VaultConnection",
    "ClusterClient",
    "StatusProbe",
    "NodeStatus",
    "ClusterState",
    "Initialized",
    "Uninitialized",
    "Empty",
    "Action",
    "ReportRedirect",
    "ReportNotFound",
    "AutoInit",
    "ReportAmbiguous",
    "select",
    "NodeStore",
    "NodeInfo",
    "MemoryNodeStore",
    "ConsulNodeStore",
    "VaultInitError",
    "ConnectionError",
    "ProtocolError",
    "ApiError",
    "ValidationError",
    "DiscoveryError",
    "ClusterError",
    "ProbeError",
    "InitError",
    "AlreadyInitializedError",
]

__version__ = "0.1.0"


async def initialize(
    address: str,
    request: InitRequest,
    *,
    timeout: float = 10.0,
) -> InitResult:
    """Initialize a Vault node.

    Args:
        address: Node address, e.g. "http://10.0.0.1:8200"
        request: Key share parameters
        timeout: Request timeout in seconds

    Returns:
        The unseal keys, recovery keys and root token
    """
    return await InitOrchestrator(timeout=timeout).initialize(address, request)


async def check_status(address: str, *, timeout: float = 10.0) -> NodeStatus:
    """Check whether a Vault node is initialized.

    Args:
        address: Node address, e.g. "http://10.0.0.1:8200"
        timeout: Request timeout in seconds

    Returns:
        NodeStatus.INITIALIZED or NodeStatus.NOT_INITIALIZED
    """
    return await InitOrchestrator(timeout=timeout).check_status(address)
