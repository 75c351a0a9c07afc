"""FastMCP server exposing the episode and character catalog."""

from __future__ import annotations

import importlib.metadata
import logging
from typing import Any, TYPE_CHECKING

import httpx
from fastmcp.server import FastMCP

from ..catalog import CatalogClient
from .config import Settings
from .resolver import BatchFanOutResolver
from .routes import register_rest_routes
from .tools import register_catalog_tools


logger = logging.getLogger(__name__)


settings = Settings()
SERVER_NAME = "Episode Catalog"


try:
    __version__ = importlib.metadata.version("mcp-catalog")
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.0.0"


class CatalogServer(FastMCP):
    """FastMCP server with an attached catalog client and resolver."""

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:  # noqa: D401 - short description inherited
        self._catalog_settings = settings or Settings()
        self._http_client = http_client
        self._owns_http_client = http_client is None

        class _ServerLifespan:
            def __init__(self, catalog_server: "CatalogServer") -> None:
                self._catalog_server = catalog_server

            async def __aenter__(self) -> None:  # noqa: D401 - matching protocol
                return None

            async def __aexit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
                await self._catalog_server.close()

        def _lifespan(app: FastMCP) -> _ServerLifespan:  # noqa: ARG001
            return _ServerLifespan(self)

        super().__init__(name=SERVER_NAME, lifespan=_lifespan)
        self._catalog: CatalogClient | None = None
        self._resolver: BatchFanOutResolver | None = None
        register_catalog_tools(self)
        register_rest_routes(self)

    @property
    def catalog_settings(self) -> Settings:
        return self._catalog_settings

    @property
    def http_client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=self.catalog_settings.request_timeout
            )
            self._owns_http_client = True
        return self._http_client

    @property
    def catalog(self) -> CatalogClient:
        if self._catalog is None:
            self._catalog = CatalogClient(
                self.http_client, self.catalog_settings.catalog_url
            )
        return self._catalog

    @property
    def resolver(self) -> BatchFanOutResolver:
        if self._resolver is None:
            self._resolver = BatchFanOutResolver(
                self.catalog.get_character,
                batch_limit=self.catalog_settings.character_batch_limit,
            )
        return self._resolver

    def reset_clients(self) -> None:
        """Drop cached catalog helpers so updated settings take effect."""

        self._catalog = None
        self._resolver = None

    async def close(self) -> None:
        if self._http_client is not None and self._owns_http_client:
            await self._http_client.aclose()
            self._http_client = None
        self.reset_clients()


server = CatalogServer(settings=settings)


def main(argv: list[str] | None = None) -> None:
    """Entry point retained for ``python -m mcp_catalog.server``."""

    from .cli import main as cli_main

    cli_main(argv)


if __name__ == "__main__":
    main()


if TYPE_CHECKING:
    from .cli import RunConfig as RunConfig


def __getattr__(name: str) -> Any:
    if name == "RunConfig":
        from .cli import RunConfig as _RunConfig

        return _RunConfig
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "CatalogServer",
    "server",
    "settings",
    "main",
    "RunConfig",
]
