"""Command-line entry point."""

import argparse
import asyncio
import base64
import binascii
import logging
import sys
from pathlib import Path

import pydantic

from vaultinit.config import Settings
from vaultinit.exceptions import ValidationError, VaultInitError
from vaultinit.models import InitRequest
from vaultinit.node_store import ConsulNodeStore
from vaultinit.orchestrator import InitOrchestrator

logger = logging.getLogger(__name__)


class ArgumentParser(argparse.ArgumentParser):
    """Parser whose usage errors surface as ValidationError.

    argparse exits with 2 on bad flags, which check mode reserves for
    "not initialized".
    """

    def error(self, message: str) -> None:  # type: ignore[override]
        self.print_usage(sys.stderr)
        raise ValidationError(message)


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = ArgumentParser(
        prog="vault-init",
        description=(
            "Initialize a new Vault server. Connects to a Vault server and "
            "initializes it for the first time; can't be used on an "
            "already-initialized Vault."
        ),
    )
    parser.add_argument("--address", default=settings.vault_addr, help="Vault address (VAULT_ADDR)")
    parser.add_argument(
        "--check",
        action="store_true",
        help="only check status: exit 0 if initialized, 2 if not, 1 on error",
    )
    parser.add_argument("--key-shares", type=int, default=5, help="number of key shares")
    parser.add_argument("--key-threshold", type=int, default=3, help="shares required to reconstruct")
    parser.add_argument("--stored-shares", type=int, default=0, help="number of unseal keys to store")
    parser.add_argument("--pgp-keys", default="", help="comma separated PGP public key files")
    parser.add_argument("--recovery-shares", type=int, default=0, help="number of recovery key shares")
    parser.add_argument("--recovery-threshold", type=int, default=0, help="recovery shares required")
    parser.add_argument("--recovery-pgp-keys", default="", help="like --pgp-keys, for recovery shares")
    parser.add_argument(
        "--auto",
        metavar="SERVICE",
        default="",
        help="discover Vault nodes registered in Consul under SERVICE",
    )
    parser.add_argument("--consul-address", default=settings.consul_addr, help="Consul address (CONSUL_HTTP_ADDR)")
    parser.add_argument("--timeout", type=float, default=settings.timeout, help="request timeout in seconds")
    parser.add_argument("--log-level", default=settings.log_level, help="logging level")
    return parser


def load_pgp_keys(value: str) -> tuple[str, ...]:
    """Read comma separated key files into base64 strings, in order."""
    if not value:
        return ()

    keys = []
    for entry in value.split(","):
        entry = entry.strip()
        if entry.startswith("keybase:"):
            raise ValidationError(f"keybase lookups are not supported: {entry}")
        try:
            data = Path(entry).read_bytes()
        except OSError as e:
            raise ValidationError(f"cannot read PGP key {entry}: {e}") from e
        keys.append(_encode_key(data))
    return tuple(keys)


def _encode_key(data: bytes) -> str:
    text = data.strip()
    try:
        base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError):
        return base64.b64encode(data).decode("ascii")
    return text.decode("ascii")


def build_request(args: argparse.Namespace) -> InitRequest:
    return InitRequest(
        secret_shares=args.key_shares,
        secret_threshold=args.key_threshold,
        stored_shares=args.stored_shares,
        pgp_keys=load_pgp_keys(args.pgp_keys),
        recovery_shares=args.recovery_shares,
        recovery_threshold=args.recovery_threshold,
        recovery_pgp_keys=load_pgp_keys(args.recovery_pgp_keys),
    )


def main(argv: list[str] | None = None) -> int:
    """Run the command and return its exit code."""
    try:
        settings = Settings()
    except pydantic.ValidationError as e:
        print(f"Error: invalid environment: {e}", file=sys.stderr)
        return 1

    try:
        args = build_parser(settings).parse_args(argv)
    except ValidationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        request = build_request(args)
        orchestrator = InitOrchestrator(timeout=args.timeout)
        discovery = None
        if args.auto:
            discovery = ConsulNodeStore(
                args.auto,
                consul_address=args.consul_address,
                consul_scheme=settings.consul_scheme,
                token=settings.consul_token,
                timeout=args.timeout,
            )
        return asyncio.run(
            orchestrator.run(request, address=args.address, discovery=discovery, check=args.check)
        )
    except VaultInitError as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1
