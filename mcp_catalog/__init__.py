"""mcp-catalog package."""

from __future__ import annotations

__all__ = []
