"""Initialization orchestration: discovery, action selection and init."""

import functools
import logging
from collections.abc import Callable

from vaultinit.actions import AutoInit, ReportAmbiguous, ReportNotFound, ReportRedirect, select
from vaultinit.cluster import ClusterClient, ConnectionFactory, NodeStatus, StatusProbe
from vaultinit.connection import VaultConnection
from vaultinit.exceptions import (
    AlreadyInitializedError,
    ApiError,
    ClusterError,
    InitError,
    VaultInitError,
)
from vaultinit.models import InitRequest, InitResult
from vaultinit.node_store import NodeStore
from vaultinit.render import export_command, render_ambiguous, render_init_result, render_redirect

logger = logging.getLogger(__name__)


class InitOrchestrator:
    """Drives a single initialization pass against a Vault cluster.

    Holds no state between runs. Nothing is retried.
    """

    def __init__(
        self,
        *,
        timeout: float = 10.0,
        connection_factory: ConnectionFactory | None = None,
        emit: Callable[[str], None] = print,
        windows: bool | None = None,
    ) -> None:
        """Initialize orchestrator.

        Args:
            timeout: Request timeout in seconds for the default connections
            connection_factory: Builds a connection for an address
            emit: Receives each line of operator output
            windows: Render Windows shell commands; detected when None
        """
        self._connect = connection_factory or functools.partial(VaultConnection, timeout=timeout)
        self._probe = StatusProbe(self._connect)
        self._emit = emit
        self._windows = windows

    async def initialize(self, address: str, request: InitRequest) -> InitResult:
        """Initialize the node at address.

        Issues exactly one init call. Raises AlreadyInitializedError if the
        node was initialized before, InitError for any other failure.
        """
        logger.info(f"Initializing Vault at {address}")
        try:
            async with self._connect(address) as conn:
                result = await conn.initialize(request)
        except ApiError as e:
            if any("already initialized" in error for error in e.errors):
                raise AlreadyInitializedError(address, str(e)) from e
            raise InitError(address, str(e)) from e
        except VaultInitError as e:
            raise InitError(address, str(e)) from e

        # The node is initialized by now; the result rides on the error
        if len(result.keys) != request.expected_keys:
            raise InitError(
                address,
                f"expected {request.expected_keys} unseal keys, got {len(result.keys)}",
                result=result,
            )
        if len(result.recovery_keys) != request.recovery_shares:
            raise InitError(
                address,
                f"expected {request.recovery_shares} recovery keys, got {len(result.recovery_keys)}",
                result=result,
            )

        return result

    async def check_status(self, address: str) -> NodeStatus:
        """Report whether the node at address is initialized."""
        return await self._probe.probe(address)

    async def run(
        self,
        request: InitRequest,
        *,
        address: str | None = None,
        discovery: NodeStore | None = None,
        check: bool = False,
    ) -> int:
        """Run one pass and return the process exit code.

        With discovery, nodes are looked up and classified first; otherwise
        address is used directly.
        """
        if discovery is None:
            if address is None:
                raise ValueError("either address or discovery is required")
            return await self._run_single(address, request, check)

        cluster = ClusterClient(discovery, probe=self._probe)
        state = await cluster.scan()
        action = select(state)
        logger.info(f"Discovery under '{discovery.service}' selected {action}")

        match action:
            case ReportRedirect(address=found):
                self._output(render_redirect(found, windows=self._windows))
                return 0
            case ReportNotFound():
                raise ClusterError(
                    f"Failed to discover Vault nodes under the service name '{discovery.service}'"
                )
            case ReportAmbiguous(addresses=found):
                self._output(render_ambiguous(discovery.service, found, windows=self._windows))
                return 0
            case AutoInit(address=found):
                self._emit(f"Discovered Vault at '{found}'\n")
                try:
                    return await self._run_single(found, request, check)
                finally:
                    self._emit("Set the following environment variable to operate on the discovered Vault:\n")
                    self._emit(export_command(found, windows=self._windows))

        raise AssertionError(f"unhandled action {action!r}")

    async def _run_single(self, address: str, request: InitRequest, check: bool) -> int:
        if check:
            status = await self.check_status(address)
            if status is NodeStatus.INITIALIZED:
                self._emit("Vault has been initialized")
            else:
                self._emit("Vault is not initialized")
            return status.exit_code

        try:
            result = await self.initialize(address, request)
        except InitError as e:
            if e.result is not None:
                self._output(render_init_result(e.result, request))
            raise
        self._output(render_init_result(result, request))
        return 0

    def _output(self, lines: list[str]) -> None:
        for line in lines:
            self._emit(line)
