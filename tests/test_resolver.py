import asyncio
import logging

import pytest

from mcp_catalog.common.errors import (
    InvalidArgumentError,
    NotFoundError,
    UpstreamFailureError,
)
from mcp_catalog.common.types import Character
from mcp_catalog.server.resolver import BatchFanOutResolver, fail_whole_batch

from payloads import character_payload


class FakeCatalog:
    """Single-entity fetcher recording calls, with per-ID latency and failures."""

    def __init__(self, *, missing=(), broken=(), delays=None) -> None:
        self.calls: list[int] = []
        self.missing = set(missing)
        self.broken = set(broken)
        self.delays = delays or {}
        self.active = 0
        self.max_active = 0

    async def get_character(self, character_id: int) -> Character:
        self.calls.append(character_id)
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            await asyncio.sleep(self.delays.get(character_id, 0))
        finally:
            self.active -= 1
        if character_id in self.missing:
            raise NotFoundError("character", character_id)
        if character_id in self.broken:
            raise UpstreamFailureError("catalog unavailable", status_code=503)
        return Character.model_validate(character_payload(character_id))


def test_results_align_with_input_order_regardless_of_completion():
    catalog = FakeCatalog(delays={5: 0.03, 2: 0.01})
    resolver = BatchFanOutResolver(catalog.get_character)

    result = asyncio.run(resolver.resolve_characters([5, 2, 9, 1]))

    assert [c.id for c in result] == [5, 2, 9, 1]
    assert catalog.max_active == 4


def test_duplicates_are_fetched_again_at_this_layer():
    catalog = FakeCatalog()
    resolver = BatchFanOutResolver(catalog.get_character)

    result = asyncio.run(resolver.resolve_characters([3, 1, 3, 2]))

    assert [c.id for c in result] == [3, 1, 3, 2]
    assert sorted(catalog.calls) == [1, 2, 3, 3]


@pytest.mark.parametrize(
    "ids, message",
    [
        ([], "must not be empty"),
        (list(range(1, 22)), "at most 20 entries"),
        ([1, 0, 2], "must be positive"),
        ([1, -4], "must be positive"),
    ],
)
def test_invalid_batches_issue_no_fetches(ids, message):
    catalog = FakeCatalog()
    resolver = BatchFanOutResolver(catalog.get_character)

    with pytest.raises(InvalidArgumentError, match=message):
        asyncio.run(resolver.resolve_characters(ids))
    assert catalog.calls == []


def test_batch_limit_is_configurable():
    catalog = FakeCatalog()
    resolver = BatchFanOutResolver(catalog.get_character, batch_limit=3)

    assert len(asyncio.run(resolver.resolve_characters([1, 2, 3]))) == 3
    with pytest.raises(InvalidArgumentError):
        asyncio.run(resolver.resolve_characters([1, 2, 3, 4]))


def test_exactly_twenty_ids_are_accepted():
    catalog = FakeCatalog()
    resolver = BatchFanOutResolver(catalog.get_character)

    result = asyncio.run(resolver.resolve_characters(list(range(20, 0, -1))))

    assert [c.id for c in result] == list(range(20, 0, -1))


def test_one_missing_character_fails_the_whole_batch(caplog):
    catalog = FakeCatalog(missing={7})
    resolver = BatchFanOutResolver(catalog.get_character)

    with caplog.at_level(logging.WARNING, logger="mcp_catalog.server.resolver"):
        with pytest.raises(NotFoundError) as exc:
            asyncio.run(resolver.resolve_characters([1, 7, 2]))

    assert exc.value.identifier == 7
    assert sorted(catalog.calls) == [1, 2, 7]
    assert "Failed to resolve 1 of 3 characters: 7" in caplog.text


def test_upstream_failure_is_surfaced_distinctly():
    catalog = FakeCatalog(broken={2})
    resolver = BatchFanOutResolver(catalog.get_character)

    with pytest.raises(UpstreamFailureError) as exc:
        asyncio.run(resolver.resolve_characters([1, 2]))
    assert exc.value.status_code == 503


def test_first_failing_index_wins():
    catalog = FakeCatalog(missing={4}, broken={2}, delays={2: 0.02})
    resolver = BatchFanOutResolver(catalog.get_character)

    with pytest.raises(UpstreamFailureError):
        asyncio.run(resolver.resolve_characters([1, 2, 4]))


def test_outcomes_report_each_id():
    catalog = FakeCatalog(missing={7}, broken={9})
    resolver = BatchFanOutResolver(catalog.get_character)

    outcomes = asyncio.run(resolver.resolve_character_outcomes([7, 1, 9]))

    assert [o.id for o in outcomes] == [7, 1, 9]
    assert [o.ok for o in outcomes] == [False, True, False]
    assert isinstance(outcomes[0].error, NotFoundError)
    assert outcomes[1].character is not None and outcomes[1].character.id == 1
    assert isinstance(outcomes[2].error, UpstreamFailureError)


def test_failure_policy_is_swappable():
    catalog = FakeCatalog(missing={7})

    def skip_missing(outcomes):
        return [o.character for o in outcomes if o.character is not None]

    resolver = BatchFanOutResolver(catalog.get_character, failure_policy=skip_missing)

    result = asyncio.run(resolver.resolve_characters([1, 7, 2]))

    assert [c.id for c in result] == [1, 2]


def test_fail_whole_batch_passes_through_successes():
    catalog = FakeCatalog()
    resolver = BatchFanOutResolver(catalog.get_character)
    outcomes = asyncio.run(resolver.resolve_character_outcomes([2, 1]))

    assert [c.id for c in fail_whole_batch(outcomes)] == [2, 1]


def test_unexpected_errors_propagate_after_siblings_finish():
    finished: list[int] = []

    async def explode_first(character_id: int) -> Character:
        if character_id == 1:
            raise KeyError(character_id)
        await asyncio.sleep(0.02)
        finished.append(character_id)
        return Character.model_validate(character_payload(character_id))

    resolver = BatchFanOutResolver(explode_first)

    with pytest.raises(KeyError):
        asyncio.run(resolver.resolve_characters([1, 2, 3]))
    # Siblings are joined before the error surfaces, not cancelled at loop shutdown.
    assert sorted(finished) == [2, 3]
