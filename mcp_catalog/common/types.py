"""Type definitions for catalog episodes and characters."""

from __future__ import annotations

from typing import List, Literal, Mapping, Optional, Sequence, TypeAlias

from pydantic import BaseModel, ConfigDict, Field


CatalogEndpoint: TypeAlias = Literal["episode", "character"]


class _CatalogModel(BaseModel):
    """Immutable model that tolerates extra upstream fields."""

    model_config = ConfigDict(frozen=True, extra="ignore")


class Location(_CatalogModel):
    """Named location reference attached to a character."""

    name: str = ""
    url: str = ""


class Character(_CatalogModel):
    """Character record as returned by the catalog."""

    id: int
    name: str
    url: str
    status: str = ""
    species: str = ""
    type: str = ""
    gender: str = ""
    origin: Optional[Location] = None
    location: Optional[Location] = None
    image: Optional[str] = None
    episode: List[str] = Field(default_factory=list)
    created: Optional[str] = None


class Episode(_CatalogModel):
    """Episode record with the URLs of the characters appearing in it."""

    id: int
    name: str
    url: str
    air_date: str = ""
    episode: str = ""
    characters: List[str] = Field(default_factory=list)
    created: Optional[str] = None


class PaginationInfo(_CatalogModel):
    count: int
    pages: int
    next: Optional[str] = None
    prev: Optional[str] = None


class EpisodePage(_CatalogModel):
    """One page of the episode listing."""

    info: PaginationInfo
    results: List[Episode] = Field(default_factory=list)


JSONScalar: TypeAlias = str | int | float | bool | None
JSONValue: TypeAlias = JSONScalar | Sequence["JSONValue"] | Mapping[str, "JSONValue"]
JSONMapping: TypeAlias = Mapping[str, JSONValue]


__all__ = [
    "CatalogEndpoint",
    "Location",
    "Character",
    "Episode",
    "PaginationInfo",
    "EpisodePage",
    "JSONValue",
    "JSONMapping",
]
