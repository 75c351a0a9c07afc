"""Validation helpers shared across packages."""

from __future__ import annotations

import re
from typing import Iterable, Sequence, TypeVar

from .errors import InvalidArgumentError

T = TypeVar("T")

DEFAULT_BATCH_LIMIT = 20

_ID_LIST_PATTERN = re.compile(r"^\d+(,\d+)*$")


def require_positive(value: int, *, name: str) -> int:
    """Return *value* if it is a positive integer, otherwise raise an error."""

    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidArgumentError(f"{name} must be an int")
    if value <= 0:
        raise InvalidArgumentError(f"{name} must be positive")
    return value


def require_ids(ids: Sequence[int], *, limit: int, name: str = "ids") -> list[int]:
    """Validate a batch of entity IDs against the configured batch limit."""

    ids = list(ids)
    if not ids:
        raise InvalidArgumentError(f"{name} must not be empty")
    if len(ids) > limit:
        raise InvalidArgumentError(
            f"{name} must contain at most {limit} entries (got {len(ids)})"
        )
    for value in ids:
        require_positive(value, name=name)
    return ids


def parse_id_list(raw: str | None, *, name: str = "ids") -> list[int]:
    """Parse a comma-separated list of positive integers such as ``"1,2,3"``."""

    if raw is None or not raw.strip():
        raise InvalidArgumentError(f"{name} is required")
    compact = ",".join(part.strip() for part in raw.split(","))
    if not _ID_LIST_PATTERN.match(compact):
        raise InvalidArgumentError(
            f"{name} must be positive integers separated by commas"
        )
    parsed = [int(part) for part in compact.split(",")]
    for value in parsed:
        require_positive(value, name=name)
    return parsed


def parse_page(raw: str | None) -> int:
    """Return the 1-based page number from a query value, defaulting to 1."""

    if raw is None or raw == "":
        return 1
    try:
        page = int(raw)
    except ValueError as exc:
        raise InvalidArgumentError("page must be an integer") from exc
    return require_positive(page, name="page")


def chunk_sequence(items: Sequence[T], size: int) -> Iterable[Sequence[T]]:
    """Yield ``items`` in chunks of at most ``size`` elements."""

    size = require_positive(int(size), name="size")
    for start in range(0, len(items), size):
        yield items[start : start + size]


__all__ = [
    "DEFAULT_BATCH_LIMIT",
    "require_positive",
    "require_ids",
    "parse_id_list",
    "parse_page",
    "chunk_sequence",
]
