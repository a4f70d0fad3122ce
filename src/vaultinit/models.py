"""Request and result values exchanged with the init endpoint."""

from dataclasses import dataclass
from typing import Any

from vaultinit.exceptions import ProtocolError, ValidationError


@dataclass(frozen=True)
class InitRequest:
    """Parameters for splitting the master key and recovery key.

    Invariants are checked on construction so an invalid request never
    reaches the server.
    """

    secret_shares: int = 5
    secret_threshold: int = 3
    stored_shares: int = 0
    pgp_keys: tuple[str, ...] = ()
    recovery_shares: int = 0
    recovery_threshold: int = 0
    recovery_pgp_keys: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        # Accept lists from callers but store tuples
        object.__setattr__(self, "pgp_keys", tuple(self.pgp_keys))
        object.__setattr__(self, "recovery_pgp_keys", tuple(self.recovery_pgp_keys))
        self._validate_secret()
        self._validate_recovery()

    def _validate_secret(self) -> None:
        if self.secret_shares < 1:
            raise ValidationError("secret_shares must be at least 1")
        if not 1 <= self.secret_threshold <= self.secret_shares:
            raise ValidationError(
                f"secret_threshold must be between 1 and secret_shares ({self.secret_shares}), "
                f"got {self.secret_threshold}"
            )
        if not 0 <= self.stored_shares <= self.secret_shares:
            raise ValidationError(
                f"stored_shares must be between 0 and secret_shares ({self.secret_shares}), "
                f"got {self.stored_shares}"
            )
        if self.pgp_keys and len(self.pgp_keys) != self.secret_shares:
            raise ValidationError(
                f"got {len(self.pgp_keys)} PGP keys for {self.secret_shares} secret shares"
            )

    def _validate_recovery(self) -> None:
        if self.recovery_shares < 0:
            raise ValidationError("recovery_shares cannot be negative")
        if self.recovery_shares == 0:
            if self.recovery_threshold != 0:
                raise ValidationError("recovery_threshold requires recovery_shares")
        elif not 1 <= self.recovery_threshold <= self.recovery_shares:
            raise ValidationError(
                f"recovery_threshold must be between 1 and recovery_shares "
                f"({self.recovery_shares}), got {self.recovery_threshold}"
            )
        if self.recovery_pgp_keys and len(self.recovery_pgp_keys) != self.recovery_shares:
            raise ValidationError(
                f"got {len(self.recovery_pgp_keys)} recovery PGP keys "
                f"for {self.recovery_shares} recovery shares"
            )

    @property
    def expected_keys(self) -> int:
        """Number of unseal keys the server hands back."""
        return self.secret_shares - self.stored_shares

    def to_payload(self) -> dict[str, Any]:
        """Encode as the JSON body of an init request."""
        return {
            "secret_shares": self.secret_shares,
            "secret_threshold": self.secret_threshold,
            "stored_shares": self.stored_shares,
            "pgp_keys": list(self.pgp_keys),
            "recovery_shares": self.recovery_shares,
            "recovery_threshold": self.recovery_threshold,
            "recovery_pgp_keys": list(self.recovery_pgp_keys),
        }


@dataclass(frozen=True)
class InitResult:
    """Key material returned by a successful init call."""

    root_token: str
    keys: tuple[str, ...] = ()
    keys_base64: tuple[str, ...] = ()
    recovery_keys: tuple[str, ...] = ()
    recovery_keys_base64: tuple[str, ...] = ()

    def __repr__(self) -> str:
        return (
            f"InitResult(keys={len(self.keys)}, recovery_keys={len(self.recovery_keys)}, "
            "root_token=<redacted>)"
        )

    @classmethod
    def from_payload(cls, data: Any) -> "InitResult":
        """Decode the JSON body of an init response."""
        if not isinstance(data, dict):
            raise ProtocolError(f"Expected JSON object, got {type(data).__name__}")

        root_token = data.get("root_token")
        if not isinstance(root_token, str) or not root_token:
            raise ProtocolError("Init response has no root_token")

        return cls(
            root_token=root_token,
            keys=_string_list(data, "keys"),
            keys_base64=_string_list(data, "keys_base64"),
            recovery_keys=_string_list(data, "recovery_keys"),
            recovery_keys_base64=_string_list(data, "recovery_keys_base64"),
        )


def _string_list(data: dict[str, Any], name: str) -> tuple[str, ...]:
    value = data.get(name)
    if value is None:
        return ()
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ProtocolError(f"Init response field {name!r} is not a list of strings")
    return tuple(value)
