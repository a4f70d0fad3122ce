"""Integration test fixtures for vault-init.

These tests require a running Vault server.
Start a throwaway one with:
    vault server -dev -dev-listen-address=127.0.0.1:8200
and set VAULT_TEST_ADDR=http://127.0.0.1:8200.
"""

import os

import pytest

VAULT_TEST_ADDR = os.environ.get("VAULT_TEST_ADDR", "")


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "integration: marks tests as requiring a running Vault")


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    if VAULT_TEST_ADDR:
        return
    skip = pytest.mark.skip(reason="VAULT_TEST_ADDR not set")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip)


@pytest.fixture
def vault_address() -> str:
    """Get the test Vault address."""
    return VAULT_TEST_ADDR
