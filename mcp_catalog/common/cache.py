"""Session-scoped, append-only cache of resolved characters."""

from __future__ import annotations

import logging
import time
from typing import Callable

from .types import Character


class CharacterCache:
    """Map canonical character references to resolved characters.

    Entries are never evicted or replaced. ``max_entries`` does not cap the
    cache; crossing it logs a single capacity warning so unbounded growth is
    visible. ``clock`` stamps each insertion and is injectable for tests and
    for a future expiry policy.
    """

    _logger = logging.getLogger(__name__)

    def __init__(
        self,
        max_entries: int | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries is not None and max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self.max_entries = max_entries
        self._clock = clock
        self._entries: dict[str, Character] = {}
        self._inserted_at: dict[str, float] = {}
        self._capacity_warned = False

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: str) -> Character | None:
        return self._entries.get(key)

    def add(self, key: str, character: Character) -> None:
        """Store ``character`` under ``key`` unless an entry already exists."""

        existing = self._entries.get(key)
        if existing is not None:
            if existing != character:
                self._logger.warning(
                    "Ignoring differing payload for cached character %s", key
                )
            return
        self._entries[key] = character
        self._inserted_at[key] = self._clock()
        if (
            self.max_entries is not None
            and len(self._entries) > self.max_entries
            and not self._capacity_warned
        ):
            self._capacity_warned = True
            self._logger.warning(
                "Character cache exceeded %d entries; entries are never evicted",
                self.max_entries,
            )

    def inserted_at(self, key: str) -> float | None:
        """Return the clock reading recorded when ``key`` was cached."""

        return self._inserted_at.get(key)
