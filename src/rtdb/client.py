"""Database client: binds configuration and transport, hands out References."""

import logging

from .adapter import RequestAdapter
from .config import ClientConfig
from .paths import NodePath
from .reference import Reference
from .transport import HttpxTransport, TokenAuth, Transport

logger = logging.getLogger(__name__)


class Client:
    """Entry point for reading and writing one database.

    The base endpoint is fixed at construction; References created from the
    client share its adapter and transport.
    """

    def __init__(self, config: ClientConfig, transport: Transport | None = None):
        """Initialize client.

        Args:
            config: Database URL, credentials and limits
            transport: HTTP transport; an ``HttpxTransport`` using
                ``config.access_token`` is created when omitted
        """
        self.config = config
        if transport is None:
            auth = TokenAuth(config.access_token) if config.access_token else None
            transport = HttpxTransport(auth=auth, timeout=config.timeout)
        self.transport = transport
        self.adapter = RequestAdapter(transport, config.database_url, timeout=config.timeout)
        logger.debug(f"client created for {config.database_url}")

    @classmethod
    def from_url(cls, database_url: str, **kwargs) -> "Client":
        """Convenience constructor from a bare URL plus config overrides.

        Raises:
            ConfigError: If the URL or an override is invalid
        """
        transport = kwargs.pop("transport", None)
        config = ClientConfig.load_or_default(None, database_url=database_url, **kwargs)
        return cls(config, transport=transport)

    def reference(self, path: str = "/") -> Reference:
        """Reference to the node at ``path``.

        Raises:
            ValidationError: If ``path`` holds characters not allowed in keys
        """
        return Reference(self, NodePath.parse(path))

    def close(self) -> None:
        self.transport.close()

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
