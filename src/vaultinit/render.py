"""Operator-facing text for discovery reports and init results."""

import sys

from vaultinit.models import InitRequest, InitResult


def export_command(address: str, *, windows: bool | None = None) -> str:
    """Shell line that points VAULT_ADDR at address."""
    if windows is None:
        windows = sys.platform == "win32"
    if "://" not in address:
        address = f"http://{address}"
    if windows:
        return f"\tset VAULT_ADDR={address}"
    return f"\texport VAULT_ADDR='{address}'"


def render_redirect(address: str, *, windows: bool | None = None) -> list[str]:
    return [
        f"Discovered an initialized Vault node at '{address}'\n",
        "Set the following environment variable to operate on the discovered Vault:\n",
        export_command(address, windows=windows),
    ]


def render_ambiguous(service: str, addresses: tuple[str, ...], *, windows: bool | None = None) -> list[str]:
    lines = [
        f"Discovered more than one uninitialized Vaults under the service name '{service}'\n",
        "To initialize all Vaults, set any *one* of the following and run 'vault-init':",
    ]
    lines.extend(export_command(address, windows=windows) for address in addresses)
    return lines


def render_init_result(result: InitResult, request: InitRequest) -> list[str]:
    """Render key material.

    Keys are numbered from 1 in the order the server returned them; that
    order must be kept for threshold reconstruction.
    """
    lines = [f"Unseal Key {i}: {key}" for i, key in enumerate(result.keys, start=1)]
    lines.extend(f"Recovery Key {i}: {key}" for i, key in enumerate(result.recovery_keys, start=1))
    lines.append(f"Initial Root Token: {result.root_token}")

    if request.stored_shares < 1:
        threshold = request.secret_threshold
        lines.append(
            "\n"
            f"Vault initialized with {request.secret_shares} keys and a key threshold of {threshold}. Please\n"
            "securely distribute the above keys. When the Vault is re-sealed,\n"
            f"restarted, or stopped, you must provide at least {threshold} of these keys\n"
            "to unseal it again.\n\n"
            f"Vault does not store the master key. Without at least {threshold} keys,\n"
            "your Vault will remain permanently sealed."
        )
    else:
        lines.append("\nVault initialized successfully.")

    if result.recovery_keys:
        lines.append(
            "\n"
            f"Recovery key initialized with {request.recovery_shares} keys and a key threshold "
            f"of {request.recovery_threshold}. Please\n"
            "securely distribute the above keys."
        )

    return lines
