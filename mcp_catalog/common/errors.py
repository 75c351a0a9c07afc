"""Error taxonomy shared by the facade server and its clients."""

from __future__ import annotations


class CatalogError(Exception):
    """Base class for catalog lookup failures."""


class InvalidArgumentError(CatalogError, ValueError):
    """Malformed or out-of-policy input; raised before any network access."""


class NotFoundError(CatalogError):
    """The upstream catalog confirmed that an entity does not exist."""

    def __init__(self, entity: str, identifier: int) -> None:
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} {identifier} was not found")


class UpstreamFailureError(CatalogError):
    """Transport error or unexpected status from the catalog."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class InconsistencyError(CatalogError, RuntimeError):
    """A requested reference has no cache entry after a successful fetch."""


__all__ = [
    "CatalogError",
    "InvalidArgumentError",
    "NotFoundError",
    "UpstreamFailureError",
    "InconsistencyError",
]
