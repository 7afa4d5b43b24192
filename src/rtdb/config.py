"""Client configuration.

Configuration is read from an explicit YAML file, from ~/.rtdb/config.yaml,
or from ``RTDB_*`` environment variables, in that order.
"""

import os
from pathlib import Path
from typing import Annotated

from pydantic import Field, field_validator

from .config_base import ConfigModel
from .errors import ConfigError
from .transaction import MAX_TRANSACTION_ATTEMPTS

CONFIG_FILE = Path.home() / ".rtdb" / "config.yaml"

ENV_DATABASE_URL = "RTDB_DATABASE_URL"
ENV_ACCESS_TOKEN = "RTDB_ACCESS_TOKEN"
ENV_TIMEOUT = "RTDB_TIMEOUT"


class ClientConfig(ConfigModel):
    """Settings shared by every Reference created from one Client."""

    database_url: str
    """Database base URL, e.g. https://my-db.firebaseio.com"""

    access_token: str | None = None
    """OAuth2 bearer token; requests are unauthenticated when unset."""

    timeout: Annotated[float, Field(gt=0)] | None = 30.0
    """Default per-request timeout in seconds (None disables it)."""

    max_transaction_attempts: int = Field(default=MAX_TRANSACTION_ATTEMPTS, ge=1)
    """Conditional writes a transaction may issue before giving up."""

    @field_validator("database_url")
    @classmethod
    def check_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("database_url must start with http:// or https://")
        return v.rstrip("/")

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """Build configuration from ``RTDB_*`` environment variables.

        Raises:
            ConfigError: If RTDB_DATABASE_URL is not set or a value is invalid
        """
        url = os.environ.get(ENV_DATABASE_URL)
        if not url:
            raise ConfigError(
                f"No configuration found: set {ENV_DATABASE_URL} or create {CONFIG_FILE}"
            )

        values: dict = {"database_url": url}
        if os.environ.get(ENV_ACCESS_TOKEN):
            values["access_token"] = os.environ[ENV_ACCESS_TOKEN]
        if os.environ.get(ENV_TIMEOUT):
            values["timeout"] = os.environ[ENV_TIMEOUT]
        return cls.load_or_default(None, **values)

    @classmethod
    def load(cls, path: Path | None = None) -> "ClientConfig":
        """Load configuration from the first available source.

        Args:
            path: Explicit YAML file; must exist when given

        Raises:
            ConfigError: If no source provides a valid configuration
        """
        if path is not None:
            return cls.from_yaml(path)
        if CONFIG_FILE.exists():
            return cls.from_yaml(CONFIG_FILE)
        return cls.from_env()

    def save(self, path: Path = CONFIG_FILE) -> None:
        """Write configuration to ``path``, creating its directory."""
        path.parent.mkdir(parents=True, exist_ok=True)
        self.to_yaml(path)
