"""Shared utilities for the server and client packages."""

from __future__ import annotations

from .cache import CharacterCache
from .errors import (
    CatalogError,
    InconsistencyError,
    InvalidArgumentError,
    NotFoundError,
    UpstreamFailureError,
)
from .references import EntityReference, canonical_character_url
from .types import Character, Episode, EpisodePage, JSONValue
from .validation import require_positive

__all__ = [
    "CharacterCache",
    "CatalogError",
    "InconsistencyError",
    "InvalidArgumentError",
    "NotFoundError",
    "UpstreamFailureError",
    "EntityReference",
    "canonical_character_url",
    "Character",
    "Episode",
    "EpisodePage",
    "JSONValue",
    "require_positive",
]
