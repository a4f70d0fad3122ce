"""Exceptions for vault-init."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from vaultinit.models import InitResult


class VaultInitError(Exception):
    """Base exception for vault-init errors."""

    pass


class ConnectionError(VaultInitError):
    """Error reaching a node over the network."""

    pass


class ProtocolError(VaultInitError):
    """Response could not be understood."""

    pass


class ApiError(VaultInitError):
    """Remote API answered with an error status."""

    status: int
    errors: list[str]

    def __init__(self, status: int, errors: list[str]) -> None:
        self.status = status
        self.errors = errors
        detail = "; ".join(errors) if errors else "no error details"
        super().__init__(f"[{status}] {detail}")


class ValidationError(VaultInitError):
    """Invalid request or configuration, rejected before anything is sent."""

    pass


class DiscoveryError(VaultInitError):
    """Service discovery backend unreachable or returned garbage."""

    pass


class ClusterError(VaultInitError):
    """Cluster-related error (no nodes found, etc)."""

    pass


class ProbeError(VaultInitError):
    """Initialization status of a node could not be determined."""

    address: str
    cause: Exception

    def __init__(self, address: str, cause: Exception) -> None:
        self.address = address
        self.cause = cause
        super().__init__(f"Error checking initialization status of {address}: {cause}")


class InitError(VaultInitError):
    """Initialization call failed.

    result is set when the node was initialized but the response failed
    validation; it holds the only copy of the key material.
    """

    address: str
    result: "InitResult | None"

    def __init__(self, address: str, message: str, *, result: "InitResult | None" = None) -> None:
        self.address = address
        self.result = result
        super().__init__(f"Error initializing Vault at {address}: {message}")


class AlreadyInitializedError(InitError):
    """Target node has already been initialized."""

    pass
