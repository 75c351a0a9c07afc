"""Mapping of catalog errors onto HTTP responses."""

from __future__ import annotations

import logging

from starlette.responses import JSONResponse

from ..common.errors import (
    CatalogError,
    InconsistencyError,
    InvalidArgumentError,
    NotFoundError,
    UpstreamFailureError,
)

logger = logging.getLogger(__name__)


def error_response(exc: CatalogError) -> JSONResponse:
    """Return the JSON error response for a catalog failure."""

    if isinstance(exc, InvalidArgumentError):
        return JSONResponse(
            {"message": "Invalid request", "details": str(exc)}, status_code=400
        )
    if isinstance(exc, NotFoundError):
        return JSONResponse(
            {
                "message": str(exc),
                "details": str(exc),
                "entity": exc.entity,
                "id": exc.identifier,
            },
            status_code=404,
        )
    if isinstance(exc, UpstreamFailureError):
        logger.error("Upstream catalog failure: %s", exc)
        return JSONResponse(
            {"message": "Error processing the request", "details": str(exc)},
            status_code=502,
        )
    if isinstance(exc, InconsistencyError):
        logger.error("Inconsistent catalog state: %s", exc)
    return JSONResponse({"message": "Internal server error"}, status_code=500)


__all__ = ["error_response"]
