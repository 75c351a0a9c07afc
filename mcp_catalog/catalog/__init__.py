"""Async client for the upstream episode and character catalog."""

from __future__ import annotations

import logging
from typing import Any, cast

import httpx
from pydantic import ValidationError

from ..common.errors import NotFoundError, UpstreamFailureError
from ..common.types import (
    CatalogEndpoint,
    Character,
    Episode,
    EpisodePage,
    JSONMapping,
)
from ..common.validation import require_positive

DEFAULT_CATALOG_BASE_URL = "https://rickandmortyapi.com/api"


class CatalogClient:
    """Fetch raw and typed catalog entities over HTTP."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str = DEFAULT_CATALOG_BASE_URL,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self._client = client
        self.base_url = base_url.rstrip("/")
        self._logger = logger or logging.getLogger(__name__)

    def endpoint_url(self, endpoint: CatalogEndpoint) -> str:
        return f"{self.base_url}/{endpoint}"

    async def fetch_entity(
        self, endpoint: CatalogEndpoint, entity_id: int
    ) -> JSONMapping:
        """Return the raw JSON object for one entity."""

        require_positive(entity_id, name=f"{endpoint} id")
        url = f"{self.endpoint_url(endpoint)}/{entity_id}"
        self._logger.debug("Fetching %s %d", endpoint, entity_id)
        return await self._get_json(url, endpoint=endpoint, identifier=entity_id)

    async def fetch_page(self, endpoint: CatalogEndpoint, page: int) -> JSONMapping:
        """Return one raw listing page (``page`` is 1-based)."""

        require_positive(page, name="page")
        self._logger.info("Fetching %s page %d", endpoint, page)
        return await self._get_json(
            self.endpoint_url(endpoint),
            endpoint=f"{endpoint} page",
            identifier=page,
            params={"page": page},
        )

    async def get_episodes(self, page: int = 1) -> EpisodePage:
        data = await self.fetch_page("episode", page)
        return _validate(EpisodePage, data, f"episode page {page}")

    async def get_episode(self, episode_id: int) -> Episode:
        data = await self.fetch_entity("episode", episode_id)
        return _validate(Episode, data, f"episode {episode_id}")

    async def get_character(self, character_id: int) -> Character:
        data = await self.fetch_entity("character", character_id)
        return _validate(Character, data, f"character {character_id}")

    async def _get_json(
        self,
        url: str,
        *,
        endpoint: str,
        identifier: int,
        params: dict[str, Any] | None = None,
    ) -> JSONMapping:
        try:
            resp = await self._client.get(url, params=params)
        except httpx.HTTPError as exc:
            self._logger.exception("HTTP error fetching %s %s", endpoint, identifier)
            raise UpstreamFailureError(
                f"Error contacting catalog for {endpoint} {identifier}: {exc}"
            ) from exc
        if resp.status_code == 404:
            self._logger.warning("Catalog has no %s %s", endpoint, identifier)
            raise NotFoundError(endpoint, identifier)
        if not resp.is_success:
            raise UpstreamFailureError(
                f"Catalog returned HTTP {resp.status_code} for {endpoint} {identifier}",
                status_code=resp.status_code,
            )
        try:
            data = resp.json()
        except ValueError as exc:
            raise UpstreamFailureError(
                f"Catalog returned invalid JSON for {endpoint} {identifier}"
            ) from exc
        if not isinstance(data, dict):
            raise UpstreamFailureError(
                f"Catalog returned a non-object payload for {endpoint} {identifier}"
            )
        return cast(JSONMapping, data)


def _validate(model: type[Any], data: JSONMapping, label: str) -> Any:
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise UpstreamFailureError(f"Unexpected catalog payload for {label}") from exc


__all__ = ["CatalogClient", "DEFAULT_CATALOG_BASE_URL"]
