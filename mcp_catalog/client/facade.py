"""HTTP client for the catalog facade's REST routes."""

from __future__ import annotations

import logging
from typing import Any, Sequence

import httpx
from pydantic import TypeAdapter, ValidationError

from ..common.errors import (
    CatalogError,
    InvalidArgumentError,
    NotFoundError,
    UpstreamFailureError,
)
from ..common.types import Character, Episode, EpisodePage
from ..common.validation import require_positive

_CHARACTER_LIST = TypeAdapter(list[Character])


class FacadeClient:
    """Call the facade REST API and map failures onto the error taxonomy."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self._client = client
        self.base_url = base_url.rstrip("/")
        self._logger = logger or logging.getLogger(__name__)

    async def get_episodes(self, page: int = 1) -> EpisodePage:
        require_positive(page, name="page")
        data = await self._get("/api/episodes", params={"page": page})
        return _validate(EpisodePage.model_validate, data)

    async def get_episode(self, episode_id: int) -> Episode:
        require_positive(episode_id, name="episode id")
        data = await self._get(f"/api/episodes/{episode_id}")
        return _validate(Episode.model_validate, data)

    async def get_character(self, character_id: int) -> Character:
        require_positive(character_id, name="character id")
        data = await self._get(f"/api/characters/{character_id}")
        return _validate(Character.model_validate, data)

    async def get_characters_batch(self, ids: Sequence[int]) -> list[Character]:
        """Resolve ``ids`` through the facade's batch endpoint, in order."""

        joined = ",".join(str(require_positive(i, name="character id")) for i in ids)
        self._logger.info("Requesting batch of %d characters", len(ids))
        data = await self._get("/api/characters/batch", params={"ids": joined})
        return _validate(_CHARACTER_LIST.validate_python, data)

    async def _get(self, path: str, *, params: dict[str, Any] | None = None) -> Any:
        url = f"{self.base_url}{path}"
        try:
            resp = await self._client.get(url, params=params)
        except httpx.HTTPError as exc:
            self._logger.exception("HTTP error calling facade %s", path)
            raise UpstreamFailureError(f"Error contacting facade: {exc}") from exc
        if resp.is_success:
            try:
                return resp.json()
            except ValueError as exc:
                raise UpstreamFailureError(
                    f"Facade returned invalid JSON for {path}"
                ) from exc
        raise _error_from_response(resp, path)


def _error_from_response(resp: httpx.Response, path: str) -> CatalogError:
    try:
        body = resp.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}
    message = str(body.get("details") or body.get("message") or resp.text or path)
    if resp.status_code == 400:
        return InvalidArgumentError(message)
    if resp.status_code == 404:
        identifier = body.get("id")
        return NotFoundError(
            str(body.get("entity") or path),
            identifier if isinstance(identifier, int) else 0,
        )
    return UpstreamFailureError(
        f"Facade returned HTTP {resp.status_code} for {path}: {message}",
        status_code=resp.status_code,
    )


def _validate(validator: Any, data: Any) -> Any:
    try:
        return validator(data)
    except ValidationError as exc:
        raise UpstreamFailureError("Unexpected facade payload") from exc


__all__ = ["FacadeClient"]
