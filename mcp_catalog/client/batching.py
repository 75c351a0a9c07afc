"""Cache-first, batched resolution of character references.

The client keeps one :class:`~mcp_catalog.common.cache.CharacterCache` per
instance. Each request only sends references that are neither cached nor
repeated, split into batches no larger than the configured limit. Results are
reassembled from the cache so the output always mirrors the input order.

The fetch cycle for a request runs in its own task. A caller that is
cancelled stops waiting, but the task still finishes and caches whatever it
resolved.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Sequence

from ..common.cache import CharacterCache
from ..common.errors import InconsistencyError
from ..common.references import (
    EntityReference,
    canonical_character_url,
    character_id_from_reference,
)
from ..common.types import Character
from ..common.validation import DEFAULT_BATCH_LIMIT, chunk_sequence, require_positive
from .config import DEFAULT_CHARACTER_BASE_URL

BatchFetcher = Callable[[Sequence[int]], Awaitable[Sequence[Character]]]


class CacheFirstBatchingClient:
    """Resolve character references through a cache and a batch fetcher."""

    def __init__(
        self,
        fetch_batch: BatchFetcher,
        *,
        base_url: str = DEFAULT_CHARACTER_BASE_URL,
        batch_limit: int = DEFAULT_BATCH_LIMIT,
        cache: CharacterCache | None = None,
        coalesce_in_flight: bool = False,
        logger: logging.Logger | None = None,
    ) -> None:
        self._fetch_batch = fetch_batch
        self.base_url = base_url.rstrip("/")
        self.batch_limit = require_positive(batch_limit, name="batch_limit")
        self.cache = cache if cache is not None else CharacterCache()
        self.coalesce_in_flight = coalesce_in_flight
        self._logger = logger or logging.getLogger(__name__)
        self._in_flight: dict[str, asyncio.Task[None]] = {}
        self._tasks: set[asyncio.Task[None]] = set()

    async def resolve_characters_by_reference(
        self, references: Sequence[EntityReference]
    ) -> list[Character]:
        """Return one character per reference, in the order given."""

        ids = [character_id_from_reference(ref) for ref in references]
        keys = [self.cache_key(character_id) for character_id in ids]
        missing = {
            key: character_id
            for key, character_id in zip(keys, ids)
            if key not in self.cache
        }
        if not missing:
            return self._reassemble(keys)

        waiting: list[asyncio.Task[None]] = []
        to_fetch: dict[str, int] = {}
        for key, character_id in missing.items():
            task = self._in_flight.get(key) if self.coalesce_in_flight else None
            if task is None:
                to_fetch[key] = character_id
            elif task not in waiting:
                waiting.append(task)
        launched = self._launch(to_fetch) if to_fetch else None
        if launched is not None:
            waiting.append(launched)

        results = await asyncio.shield(
            asyncio.gather(*waiting, return_exceptions=True)
        )
        failures = [
            (task, result)
            for task, result in zip(waiting, results)
            if isinstance(result, BaseException)
        ]
        for task, result in failures:
            if task is launched:
                raise result
        # A borrowed fetch only fails this request if it left one of our keys out.
        if failures and any(key not in self.cache for key in missing):
            raise failures[0][1]
        return self._reassemble(keys)

    async def wait_pending(self) -> None:
        """Wait for fetches that outlived their callers."""

        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    def cache_key(self, reference: EntityReference) -> str:
        """Return the canonical cache key for *reference*."""

        return canonical_character_url(reference, self.base_url)

    def _launch(self, keys: dict[str, int]) -> asyncio.Task[None]:
        task = asyncio.ensure_future(self._fetch_and_merge(keys))
        if self.coalesce_in_flight:
            for key in keys:
                self._in_flight[key] = task
        self._tasks.add(task)
        task.add_done_callback(self._task_done)
        return task

    def _task_done(self, task: asyncio.Task[None]) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            self._logger.debug("Character fetch task finished with an error")

    async def _fetch_and_merge(self, keys: dict[str, int]) -> None:
        ids = list(keys.values())
        chunks = list(chunk_sequence(ids, self.batch_limit))
        self._logger.info(
            "Fetching %d uncached characters in %d batch(es)", len(ids), len(chunks)
        )
        current = asyncio.current_task()
        try:
            results = await asyncio.gather(
                *(self._fetch_batch(chunk) for chunk in chunks),
                return_exceptions=True,
            )
        finally:
            for key in keys:
                if self._in_flight.get(key) is current:
                    del self._in_flight[key]

        failure: BaseException | None = None
        for chunk, result in zip(chunks, results):
            if isinstance(result, BaseException):
                self._logger.warning(
                    "Batch for characters %s failed: %s",
                    ",".join(str(i) for i in chunk),
                    result,
                )
                if failure is None:
                    failure = result
                continue
            for character in result:
                self.cache.add(self.cache_key(character.id), character)
        if failure is not None:
            raise failure

    def _reassemble(self, keys: Sequence[str]) -> list[Character]:
        characters: list[Character] = []
        for key in keys:
            character = self.cache.get(key)
            if character is None:
                raise InconsistencyError(f"No cached character for {key}")
            characters.append(character)
        return characters


__all__ = ["BatchFetcher", "CacheFirstBatchingClient"]
