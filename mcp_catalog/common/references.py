"""Parsing of character references into IDs and canonical cache keys."""

from __future__ import annotations

from typing import TypeAlias
from urllib.parse import urlsplit

from .errors import InvalidArgumentError
from .validation import require_positive

EntityReference: TypeAlias = int | str

CHARACTER_SEGMENT = "character"


def character_id_from_reference(reference: EntityReference) -> int:
    """Return the numeric character ID denoted by *reference*.

    ``reference`` may be a positive integer, a numeric string, or a character
    URL ending in ``/character/<id>``.
    """

    if isinstance(reference, bool):
        raise InvalidArgumentError(f"Invalid character reference: {reference!r}")
    if isinstance(reference, int):
        return require_positive(reference, name="character id")
    if not isinstance(reference, str):
        raise InvalidArgumentError(f"Invalid character reference: {reference!r}")

    text = reference.strip()
    if text.isdigit():
        return require_positive(int(text), name="character id")

    segments = [segment for segment in urlsplit(text).path.split("/") if segment]
    if (
        len(segments) < 2
        or segments[-2] != CHARACTER_SEGMENT
        or not segments[-1].isdigit()
    ):
        raise InvalidArgumentError(f"Invalid character reference: {reference!r}")
    return require_positive(int(segments[-1]), name="character id")


def canonical_character_url(reference: EntityReference, base_url: str) -> str:
    """Return the canonical URL for *reference* under ``base_url``."""

    character_id = character_id_from_reference(reference)
    return f"{base_url.rstrip('/')}/{character_id}"


__all__ = [
    "EntityReference",
    "character_id_from_reference",
    "canonical_character_url",
]
