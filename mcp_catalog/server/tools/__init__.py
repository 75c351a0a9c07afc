"""MCP tool registration helpers."""

from __future__ import annotations

from .catalog import register_catalog_tools

__all__ = ["register_catalog_tools"]
