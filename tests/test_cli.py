"""Tests for the command-line entry point."""

import base64
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from vaultinit.cli import build_parser, build_request, load_pgp_keys, main
from vaultinit.config import Settings
from vaultinit.exceptions import ClusterError, ValidationError
from vaultinit.node_store import ConsulNodeStore


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("VAULT_ADDR", "CONSUL_HTTP_ADDR", "CONSUL_HTTP_SSL", "CONSUL_HTTP_TOKEN", "VAULT_CLIENT_TIMEOUT", "VAULTINIT_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


class TestLoadPgpKeys:
    def test_empty(self) -> None:
        assert load_pgp_keys("") == ()

    def test_binary_and_base64_in_order(self, tmp_path: Path) -> None:
        binary = tmp_path / "a.gpg"
        binary.write_bytes(b"\x99\x01\x0d\xff")
        armored = tmp_path / "b.b64"
        armored.write_text("bWVoCg==\n")

        keys = load_pgp_keys(f"{binary},{armored}")

        assert keys == (base64.b64encode(b"\x99\x01\x0d\xff").decode(), "bWVoCg==")

    def test_keybase_rejected(self) -> None:
        with pytest.raises(ValidationError, match="keybase"):
            load_pgp_keys("keybase:someone")

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ValidationError, match="cannot read"):
            load_pgp_keys(str(tmp_path / "nope"))


class TestBuildRequest:
    def test_defaults(self) -> None:
        args = build_parser(Settings()).parse_args([])
        request = build_request(args)
        assert request.secret_shares == 5
        assert request.secret_threshold == 3
        assert request.recovery_shares == 0

    def test_flags(self) -> None:
        args = build_parser(Settings()).parse_args(
            ["--key-shares", "7", "--key-threshold", "4", "--recovery-shares", "3", "--recovery-threshold", "2"]
        )
        request = build_request(args)
        assert (request.secret_shares, request.secret_threshold) == (7, 4)
        assert (request.recovery_shares, request.recovery_threshold) == (3, 2)


class TestMain:
    def test_direct(self) -> None:
        with patch("vaultinit.cli.InitOrchestrator.run", new_callable=AsyncMock, return_value=0) as run:
            assert main(["--address", "http://10.0.0.1:8200"]) == 0

        assert run.call_args.kwargs["address"] == "http://10.0.0.1:8200"
        assert run.call_args.kwargs["discovery"] is None
        assert run.call_args.kwargs["check"] is False

    def test_address_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("VAULT_ADDR", "http://env:8200")

        with patch("vaultinit.cli.InitOrchestrator.run", new_callable=AsyncMock, return_value=0) as run:
            main([])

        assert run.call_args.kwargs["address"] == "http://env:8200"

    def test_check_exit_code(self) -> None:
        with patch("vaultinit.cli.InitOrchestrator.run", new_callable=AsyncMock, return_value=2):
            assert main(["--check"]) == 2

    def test_auto_uses_consul(self) -> None:
        with patch("vaultinit.cli.InitOrchestrator.run", new_callable=AsyncMock, return_value=0) as run:
            main(["--auto", "vault", "--consul-address", "consul:8500"])

        discovery = run.call_args.kwargs["discovery"]
        assert isinstance(discovery, ConsulNodeStore)
        assert discovery.service == "vault"

    def test_error_exit_code(self, capsys: pytest.CaptureFixture[str]) -> None:
        error = ClusterError("Failed to discover Vault nodes under the service name 'vault'")
        with patch("vaultinit.cli.InitOrchestrator.run", new_callable=AsyncMock, side_effect=error):
            assert main(["--auto", "vault"]) == 1

        assert "Error: Failed to discover" in capsys.readouterr().err

    def test_invalid_request(self, capsys: pytest.CaptureFixture[str]) -> None:
        with patch("vaultinit.cli.InitOrchestrator.run", new_callable=AsyncMock) as run:
            assert main(["--key-shares", "2", "--key-threshold", "3"]) == 1

        run.assert_not_called()
        assert "secret_threshold" in capsys.readouterr().err

    def test_invalid_environment(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        monkeypatch.setenv("VAULT_CLIENT_TIMEOUT", "never")
        assert main([]) == 1
        err = capsys.readouterr().err
        assert "Error: invalid environment" in err
        assert "vault_client_timeout" in err.lower()

    @pytest.mark.parametrize(
        "argv",
        [
            ["--check", "--timeout", "soon"],
            ["--check", "--no-such-flag"],
            ["--key-shares"],
        ],
    )
    def test_bad_flags_exit_1(self, argv: list[str], capsys: pytest.CaptureFixture[str]) -> None:
        with patch("vaultinit.cli.InitOrchestrator.run", new_callable=AsyncMock) as run:
            assert main(argv) == 1

        run.assert_not_called()
        err = capsys.readouterr().err
        assert err.startswith("usage: vault-init")
        assert "Error:" in err

    def test_help_still_exits_0(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--help"])
        assert exc_info.value.code == 0
