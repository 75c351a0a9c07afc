"""Command line interface for :mod:`mcp_catalog.server`."""

from __future__ import annotations

import argparse
import logging
import os
from dataclasses import dataclass, field

from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware

from . import CatalogServer, server, settings


catalog_server: CatalogServer = server


@dataclass
class RunConfig:
    """Runtime configuration for FastMCP transport servers."""

    host: str | None = None
    port: int | None = None
    path: str | None = None
    cors_origins: list[str] = field(default_factory=list)

    def to_kwargs(self) -> dict[str, object]:
        """Return keyword arguments compatible with ``FastMCP.run``."""

        kwargs: dict[str, object] = {}
        if self.host is not None:
            kwargs["host"] = self.host
        if self.port is not None:
            kwargs["port"] = self.port
        if self.path:
            kwargs["path"] = self.path
        if self.cors_origins:
            kwargs["middleware"] = [
                Middleware(
                    CORSMiddleware,
                    allow_origins=list(self.cors_origins),
                    allow_methods=["*"],
                    allow_headers=["*"],
                )
            ]
        return kwargs


def _resolve_log_level(cli_value: str | None) -> str:
    """Return the desired log level name based on CLI or environment input."""

    env_value = os.getenv("LOG_LEVEL")
    if cli_value:
        return cli_value
    if env_value:
        return env_value.lower()
    return "info"


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for running the catalog facade."""

    parser = argparse.ArgumentParser(description="Run the catalog facade server")
    parser.add_argument("--bind", default="127.0.0.1", help="Host address to bind to")
    parser.add_argument("--port", type=int, default=8000, help="Port to listen on")
    parser.add_argument(
        "--transport",
        choices=["stdio", "sse", "streamable-http"],
        default="streamable-http",
        help="Transport protocol to use",
    )
    parser.add_argument("--mount", help="Mount path for the MCP HTTP endpoint")
    parser.add_argument(
        "--catalog-base-url",
        default=settings.catalog_url,
        help="Base URL of the upstream catalog API (env: CATALOG_BASE_URL)",
    )
    parser.add_argument(
        "--batch-limit",
        type=int,
        default=settings.character_batch_limit,
        help="Maximum character IDs per batch request (env: CHARACTER_BATCH_LIMIT)",
    )
    parser.add_argument(
        "--log-level",
        type=str.lower,
        choices=["critical", "error", "warning", "info", "debug", "notset"],
        help="Logging verbosity (env: LOG_LEVEL)",
    )
    args = parser.parse_args(argv)

    env_transport = os.getenv("MCP_TRANSPORT")
    env_host = (
        os.getenv("MCP_HOST")
        if os.getenv("MCP_HOST") is not None
        else os.getenv("MCP_BIND")
    )
    env_port = os.getenv("MCP_PORT")
    env_mount = os.getenv("MCP_MOUNT")

    transport = env_transport or args.transport
    valid_transports = {"stdio", "sse", "streamable-http"}
    if transport not in valid_transports:
        parser.error(
            "transport must be one of stdio, sse, or streamable-http (via --transport or MCP_TRANSPORT)"
        )

    host = env_host or args.bind
    port: int | None
    if env_port is not None:
        try:
            port = int(env_port)
        except ValueError:
            parser.error("MCP_PORT must be an integer")
    else:
        port = args.port

    mount = env_mount or args.mount

    if transport == "stdio" and mount:
        parser.error("--mount or MCP_MOUNT is not allowed when transport is stdio")
    if args.batch_limit <= 0:
        parser.error("--batch-limit must be positive")

    run_config = RunConfig()
    if transport != "stdio":
        run_config.host = host
        run_config.port = port
        if mount:
            run_config.path = mount
        run_config.cors_origins = list(settings.cors_origins)

    settings.catalog_base_url = args.catalog_base_url
    settings.character_batch_limit = args.batch_limit
    catalog_server.reset_clients()

    log_level_name = _resolve_log_level(args.log_level)
    logging.basicConfig(level=getattr(logging, log_level_name.upper(), logging.INFO))

    catalog_server.run(transport=transport, **run_config.to_kwargs())


__all__ = ["RunConfig", "main", "server", "CatalogServer", "catalog_server", "settings"]
