"""Concurrent fan-out resolution of character batches."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Sequence

from ..common.errors import CatalogError
from ..common.types import Character
from ..common.validation import DEFAULT_BATCH_LIMIT, require_ids

CharacterFetcher = Callable[[int], Awaitable[Character]]


@dataclass(frozen=True, slots=True)
class ResolutionOutcome:
    """Result of resolving one ID: either a character or the error raised."""

    id: int
    character: Character | None = None
    error: CatalogError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


FailurePolicy = Callable[[Sequence[ResolutionOutcome]], list[Character]]


def fail_whole_batch(outcomes: Sequence[ResolutionOutcome]) -> list[Character]:
    """Return every character, or raise the error of the first failed ID."""

    for outcome in outcomes:
        if outcome.error is not None:
            raise outcome.error
    return [outcome.character for outcome in outcomes if outcome.character is not None]


class BatchFanOutResolver:
    """Resolve many characters by issuing one concurrent fetch per ID."""

    def __init__(
        self,
        fetch_character: CharacterFetcher,
        *,
        batch_limit: int = DEFAULT_BATCH_LIMIT,
        failure_policy: FailurePolicy = fail_whole_batch,
        logger: logging.Logger | None = None,
    ) -> None:
        self._fetch_character = fetch_character
        self.batch_limit = batch_limit
        self._failure_policy = failure_policy
        self._logger = logger or logging.getLogger(__name__)

    async def resolve_characters(self, ids: Sequence[int]) -> list[Character]:
        """Return characters aligned index-for-index with ``ids``."""

        outcomes = await self.resolve_character_outcomes(ids)
        return self._failure_policy(outcomes)

    async def resolve_character_outcomes(
        self, ids: Sequence[int]
    ) -> list[ResolutionOutcome]:
        """Fetch every ID concurrently and report a per-ID outcome."""

        ids = require_ids(ids, limit=self.batch_limit)
        self._logger.info("Resolving %d characters", len(ids))
        results = await asyncio.gather(
            *(self._fetch_outcome(i) for i in ids), return_exceptions=True
        )
        outcomes: list[ResolutionOutcome] = []
        for result in results:
            if isinstance(result, BaseException):
                raise result
            outcomes.append(result)
        failed = [outcome.id for outcome in outcomes if not outcome.ok]
        if failed:
            self._logger.warning(
                "Failed to resolve %d of %d characters: %s",
                len(failed),
                len(ids),
                ",".join(str(i) for i in failed),
            )
        return outcomes

    async def _fetch_outcome(self, character_id: int) -> ResolutionOutcome:
        try:
            character = await self._fetch_character(character_id)
        except CatalogError as exc:
            return ResolutionOutcome(id=character_id, error=exc)
        return ResolutionOutcome(id=character_id, character=character)


__all__ = [
    "BatchFanOutResolver",
    "CharacterFetcher",
    "DEFAULT_BATCH_LIMIT",
    "FailurePolicy",
    "ResolutionOutcome",
    "fail_whole_batch",
]
