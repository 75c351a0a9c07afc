"""Episode and character lookup tools for the catalog MCP server."""

from __future__ import annotations

import asyncio
from typing import Annotated, TYPE_CHECKING

from fastmcp.exceptions import ToolError
from pydantic import Field

from ...common.errors import CatalogError
from ...common.references import character_id_from_reference
from ...common.types import Character, Episode, EpisodePage
from ...common.validation import chunk_sequence

if TYPE_CHECKING:  # pragma: no cover - imported for type checking only
    from .. import CatalogServer


def register_catalog_tools(server: "CatalogServer") -> None:
    """Register catalog lookup tools on the provided server."""

    def _catalog_tool(name: str, *, title: str, operation: str):
        return server.tool(
            name,
            title=title,
            meta={"category": "catalog", "operation": operation},
        )

    @_catalog_tool("get-episodes", title="List episodes", operation="list")
    async def get_episodes(
        page: Annotated[
            int,
            Field(description="1-based page of the episode listing", ge=1, examples=[1]),
        ] = 1,
    ) -> EpisodePage:
        """Return one page of the episode listing."""

        try:
            return await server.catalog.get_episodes(page)
        except CatalogError as exc:
            raise ToolError(str(exc)) from exc

    @_catalog_tool("get-episode", title="Get episode", operation="lookup")
    async def get_episode(
        episode_id: Annotated[
            int, Field(description="Episode ID", ge=1, examples=[28])
        ],
    ) -> Episode:
        """Return a single episode by ID."""

        try:
            return await server.catalog.get_episode(episode_id)
        except CatalogError as exc:
            raise ToolError(str(exc)) from exc

    @_catalog_tool("get-character", title="Get character", operation="lookup")
    async def get_character(
        character_id: Annotated[
            int, Field(description="Character ID", ge=1, examples=[1])
        ],
    ) -> Character:
        """Return a single character by ID."""

        try:
            return await server.catalog.get_character(character_id)
        except CatalogError as exc:
            raise ToolError(str(exc)) from exc

    @_catalog_tool("get-characters", title="Get characters", operation="batch")
    async def get_characters(
        ids: Annotated[
            list[int],
            Field(
                description="Character IDs; results keep this order",
                min_length=1,
                examples=[[1, 2, 3]],
            ),
        ],
    ) -> list[Character]:
        """Return several characters in the order requested."""

        try:
            return await server.resolver.resolve_characters(ids)
        except CatalogError as exc:
            raise ToolError(str(exc)) from exc

    @_catalog_tool(
        "get-episode-characters",
        title="Get episode characters",
        operation="batch",
    )
    async def get_episode_characters(
        episode_id: Annotated[
            int, Field(description="Episode ID", ge=1, examples=[28])
        ],
    ) -> list[Character]:
        """Return every character appearing in an episode, in credit order."""

        try:
            episode = await server.catalog.get_episode(episode_id)
            ids = [character_id_from_reference(url) for url in episode.characters]
            batches = await asyncio.gather(
                *(
                    server.resolver.resolve_characters(chunk)
                    for chunk in chunk_sequence(ids, server.resolver.batch_limit)
                )
            )
        except CatalogError as exc:
            raise ToolError(str(exc)) from exc
        return [character for batch in batches for character in batch]


__all__ = ["register_catalog_tools"]
