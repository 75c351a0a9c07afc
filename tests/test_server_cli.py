from unittest.mock import patch

import asyncio

import httpx
import pytest
from starlette.middleware.cors import CORSMiddleware
from starlette.testclient import TestClient

from mcp_catalog import server as server_package
from mcp_catalog.server import cli as server
from mcp_catalog.server.config import Settings

from payloads import CATALOG_URL, character_payload


@pytest.fixture(scope="module", autouse=True)
def close_server_module():
    yield
    asyncio.run(server.catalog_server.close())


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in ("MCP_TRANSPORT", "MCP_HOST", "MCP_BIND", "MCP_PORT", "MCP_MOUNT", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    base_url = server.settings.catalog_base_url
    batch_limit = server.settings.character_batch_limit
    origins = list(server.settings.cors_origins)
    yield
    server.settings.catalog_base_url = base_url
    server.settings.character_batch_limit = batch_limit
    server.settings.cors_origins = origins
    server.catalog_server.reset_clients()


def test_main_defaults_to_streamable_http_on_loopback():
    with patch.object(server.catalog_server, "run") as mock_run:
        server.main([])

    mock_run.assert_called_once()
    kwargs = mock_run.call_args.kwargs
    assert kwargs["transport"] == "streamable-http"
    assert kwargs["host"] == "127.0.0.1"
    assert kwargs["port"] == 8000
    assert "path" not in kwargs
    (middleware,) = kwargs["middleware"]
    assert middleware.cls is CORSMiddleware
    assert middleware.kwargs["allow_origins"] == ["http://localhost:4200"]


def test_main_stdio_runs():
    with patch.object(server.catalog_server, "run") as mock_run:
        server.main(["--transport", "stdio"])
        mock_run.assert_called_once_with(transport="stdio")


def test_main_mount_disallowed_for_stdio():
    with pytest.raises(SystemExit):
        server.main(["--transport", "stdio", "--mount", "/mcp"])


def test_main_http_with_mount_runs():
    server.settings.cors_origins = []
    with patch.object(server.catalog_server, "run") as mock_run:
        server.main(
            ["--transport", "sse", "--bind", "0.0.0.0", "--port", "9000", "--mount", "/mcp"]
        )
        mock_run.assert_called_once_with(
            transport="sse", host="0.0.0.0", port=9000, path="/mcp"
        )


def test_main_catalog_overrides():
    with patch.object(server.catalog_server, "run"):
        server.main(
            [
                "--transport",
                "stdio",
                "--catalog-base-url",
                "http://catalog.local/api/",
                "--batch-limit",
                "5",
            ]
        )

    assert server.settings.catalog_url == "http://catalog.local/api"
    assert server.catalog_server.catalog.base_url == "http://catalog.local/api"
    assert server.catalog_server.resolver.batch_limit == 5


def test_main_rejects_non_positive_batch_limit():
    with pytest.raises(SystemExit):
        server.main(["--batch-limit", "0"])


def test_env_overrides_cli_arguments(monkeypatch):
    monkeypatch.setenv("MCP_TRANSPORT", "sse")
    monkeypatch.setenv("MCP_HOST", "1.2.3.4")
    monkeypatch.setenv("MCP_PORT", "1234")
    monkeypatch.setenv("MCP_MOUNT", "/env")
    server.settings.cors_origins = []
    with patch.object(server.catalog_server, "run") as mock_run:
        server.main(
            [
                "--transport",
                "stdio",
                "--bind",
                "0.0.0.0",
                "--port",
                "8000",
                "--mount",
                "/cli",
            ]
        )
        mock_run.assert_called_once_with(
            transport="sse", host="1.2.3.4", port=1234, path="/env"
        )


def test_env_bind_is_used_without_host(monkeypatch):
    monkeypatch.setenv("MCP_BIND", "10.0.0.1")
    server.settings.cors_origins = []
    with patch.object(server.catalog_server, "run") as mock_run:
        server.main([])
        mock_run.assert_called_once_with(
            transport="streamable-http", host="10.0.0.1", port=8000
        )


def test_env_invalid_port(monkeypatch):
    monkeypatch.setenv("MCP_PORT", "not-a-port")
    with pytest.raises(SystemExit):
        server.main([])


def test_env_invalid_transport(monkeypatch):
    monkeypatch.setenv("MCP_TRANSPORT", "carrier-pigeon")
    with pytest.raises(SystemExit):
        server.main([])


def test_run_config_reexport():
    assert server_package.RunConfig is server.RunConfig
    assert server.RunConfig().to_kwargs() == {}


def test_cors_middleware_allows_configured_origin():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=character_payload(1))

    catalog_server = server_package.CatalogServer(
        settings=Settings(CATALOG_BASE_URL=CATALOG_URL),
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )
    kwargs = server.RunConfig(cors_origins=["http://localhost:4200"]).to_kwargs()
    client = TestClient(catalog_server.http_app(middleware=kwargs["middleware"]))

    allowed = client.get(
        "/api/characters/1", headers={"Origin": "http://localhost:4200"}
    )
    denied = client.get("/api/characters/1", headers={"Origin": "http://evil.test"})

    assert allowed.status_code == 200
    assert allowed.headers["access-control-allow-origin"] == "http://localhost:4200"
    assert "access-control-allow-origin" not in denied.headers
