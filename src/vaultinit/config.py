"""Environment-derived defaults for the command line."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_VAULT_ADDR = "https://127.0.0.1:8200"
DEFAULT_CONSUL_ADDR = "127.0.0.1:8500"


class Settings(BaseSettings):
    """Process-level settings.

    Read once at startup; nothing in the library reads the environment.
    """

    model_config = SettingsConfigDict(populate_by_name=True, env_ignore_empty=True, extra="ignore")

    vault_addr: str = Field(default=DEFAULT_VAULT_ADDR, validation_alias="VAULT_ADDR")
    consul_addr: str = Field(default=DEFAULT_CONSUL_ADDR, validation_alias="CONSUL_HTTP_ADDR")
    consul_ssl: bool = Field(default=False, validation_alias="CONSUL_HTTP_SSL")
    consul_token: str | None = Field(default=None, validation_alias="CONSUL_HTTP_TOKEN")
    timeout: float = Field(default=60.0, gt=0, validation_alias="VAULT_CLIENT_TIMEOUT")
    log_level: str = Field(default="WARNING", validation_alias="VAULTINIT_LOG_LEVEL")

    @field_validator("log_level")
    @classmethod
    def upper_log_level(cls, v: str) -> str:
        return v.upper()

    @property
    def consul_scheme(self) -> str:
        return "https" if self.consul_ssl else "http"
