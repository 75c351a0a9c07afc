"""Per-user session combining the facade client and a character cache."""

from __future__ import annotations

import logging
from types import TracebackType

import httpx

from ..common.cache import CharacterCache
from ..common.types import Character, Episode, EpisodePage
from .batching import CacheFirstBatchingClient
from .config import ClientSettings
from .facade import FacadeClient

logger = logging.getLogger(__name__)


class CatalogSession:
    """Browse episodes and resolve their characters through one cache.

    Create one session per user; the character cache lives and dies with it.
    """

    def __init__(
        self,
        settings: ClientSettings | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        cache: CharacterCache | None = None,
    ) -> None:
        self.settings = settings or ClientSettings()
        self._owns_http_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(
            timeout=self.settings.request_timeout
        )
        self.facade = FacadeClient(self._http_client, self.settings.facade_url)
        self.characters = CacheFirstBatchingClient(
            self.facade.get_characters_batch,
            base_url=self.settings.character_base_url,
            batch_limit=self.settings.batch_limit,
            cache=cache
            if cache is not None
            else CharacterCache(self.settings.cache_max_entries),
            coalesce_in_flight=self.settings.coalesce_in_flight,
        )

    async def __aenter__(self) -> "CatalogSession":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def close(self) -> None:
        await self.characters.wait_pending()
        if self._owns_http_client:
            await self._http_client.aclose()

    async def episodes(self, page: int = 1) -> EpisodePage:
        return await self.facade.get_episodes(page)

    async def episode(self, episode_id: int) -> Episode:
        return await self.facade.get_episode(episode_id)

    async def episode_characters(self, episode: Episode | int) -> list[Character]:
        """Return the characters of ``episode`` in the order it lists them."""

        if isinstance(episode, int):
            episode = await self.episode(episode)
        logger.info(
            "Loading %d characters for episode %d", len(episode.characters), episode.id
        )
        return await self.characters.resolve_characters_by_reference(
            episode.characters
        )


__all__ = ["CatalogSession"]
