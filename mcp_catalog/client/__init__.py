"""Client-side access to the catalog facade."""

from __future__ import annotations

from .batching import BatchFetcher, CacheFirstBatchingClient
from .config import ClientSettings
from .facade import FacadeClient
from .session import CatalogSession

__all__ = [
    "BatchFetcher",
    "CacheFirstBatchingClient",
    "CatalogSession",
    "ClientSettings",
    "FacadeClient",
]
