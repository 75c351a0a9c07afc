import os
import sys
from pathlib import Path

# Package root for the library, tests directory for the shared payload helpers
ROOT = Path(__file__).resolve().parents[1]
for path in (ROOT, Path(__file__).resolve().parent):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

_CATALOG_ENVIRONMENT = (
    "CATALOG_BASE_URL",
    "CATALOG_TIMEOUT",
    "CHARACTER_BATCH_LIMIT",
    "CORS_ORIGINS",
    "MCP_TRANSPORT",
    "MCP_HOST",
    "MCP_BIND",
    "MCP_PORT",
    "MCP_MOUNT",
)


def pytest_configure(config):
    """Build the module-level server settings from defaults only."""

    for name in _CATALOG_ENVIRONMENT:
        os.environ.pop(name, None)
