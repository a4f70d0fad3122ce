"""Pytest configuration for vault-init tests."""

import pytest

from fakes import FakeCluster
from vaultinit.models import InitRequest


@pytest.fixture
def init_request() -> InitRequest:
    """Default 5/3 request."""
    return InitRequest(secret_shares=5, secret_threshold=3)


@pytest.fixture
def output() -> list[str]:
    """Collects emitted output lines."""
    return []


@pytest.fixture
def fake_cluster() -> FakeCluster:
    """Two uninitialized nodes."""
    return FakeCluster({"10.0.0.1:8200": False, "10.0.0.2:8200": False})
