"""Mapping from cluster state to the action taken on it."""

from dataclasses import dataclass

from vaultinit.cluster import ClusterState, Empty, Initialized, Uninitialized


@dataclass(frozen=True)
class ReportRedirect:
    """Point the operator at an already initialized node."""

    address: str


@dataclass(frozen=True)
class ReportNotFound:
    """Nothing answered under the service name."""


@dataclass(frozen=True)
class AutoInit:
    """Exactly one uninitialized node; safe to initialize it."""

    address: str


@dataclass(frozen=True)
class ReportAmbiguous:
    """Several uninitialized nodes; the operator has to pick one."""

    addresses: tuple[str, ...]


Action = ReportRedirect | ReportNotFound | AutoInit | ReportAmbiguous


def select(state: ClusterState) -> Action:
    """Select the action for a cluster state. Pure."""
    match state:
        case Initialized(address=address):
            return ReportRedirect(address)
        case Uninitialized(addresses=(address,)):
            return AutoInit(address)
        case Uninitialized(addresses=addresses) if addresses:
            return ReportAmbiguous(addresses)
        case _:
            return ReportNotFound()
