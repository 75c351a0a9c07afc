"""REST endpoints consumed by the web UI."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Awaitable, Callable

from fastapi import FastAPI, Query
from fastapi.openapi.docs import get_swagger_ui_html
from fastapi.openapi.utils import get_openapi
from pydantic import BaseModel
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from ..common.errors import CatalogError
from ..common.types import Character, Episode, EpisodePage
from ..common.validation import parse_id_list, parse_page, require_positive
from .responses import error_response

if TYPE_CHECKING:  # pragma: no cover - imported for type checking only
    from . import CatalogServer

logger = logging.getLogger(__name__)

API_TITLE = "Catalog REST API"


def _json(payload: BaseModel | list[Character]) -> JSONResponse:
    if isinstance(payload, list):
        return JSONResponse([item.model_dump(mode="json") for item in payload])
    return JSONResponse(payload.model_dump(mode="json"))


async def _respond(
    call: Callable[[], Awaitable[BaseModel | list[Character]]],
) -> Response:
    try:
        return _json(await call())
    except CatalogError as exc:
        return error_response(exc)


def _path_id(request: Request, name: str) -> int:
    return require_positive(request.path_params[name], name=name)


def register_rest_routes(server: "CatalogServer") -> None:
    """Register the catalog REST routes and API docs on ``server``."""

    @server.custom_route("/api/episodes", methods=["GET"])
    async def list_episodes(request: Request) -> Response:
        """Return one page of episodes."""

        raw_page = request.query_params.get("page")
        logger.info("Listing episodes page %s", raw_page or 1)

        async def _call() -> EpisodePage:
            return await server.catalog.get_episodes(parse_page(raw_page))

        return await _respond(_call)

    @server.custom_route("/api/episodes/{episode_id:int}", methods=["GET"])
    async def get_episode(request: Request) -> Response:
        """Return one episode."""

        async def _call() -> Episode:
            return await server.catalog.get_episode(_path_id(request, "episode_id"))

        return await _respond(_call)

    @server.custom_route("/api/characters/batch", methods=["GET"])
    async def get_characters(request: Request) -> Response:
        """Return characters for a comma-separated ``ids`` list, in order."""

        raw_ids = request.query_params.get("ids")
        logger.info("Resolving characters for ids %s", raw_ids)

        async def _call() -> list[Character]:
            return await server.resolver.resolve_characters(parse_id_list(raw_ids))

        return await _respond(_call)

    @server.custom_route("/api/characters/{character_id:int}", methods=["GET"])
    async def get_character(request: Request) -> Response:
        """Return one character."""

        async def _call() -> Character:
            return await server.catalog.get_character(
                _path_id(request, "character_id")
            )

        return await _respond(_call)

    @server.custom_route("/openapi.json", methods=["GET"])
    async def openapi_json(request: Request) -> Response:  # noqa: ARG001
        """Return the OpenAPI schema for REST endpoints."""
        return JSONResponse(
            build_openapi_schema(server.catalog_settings.character_batch_limit)
        )

    @server.custom_route("/docs", methods=["GET"])
    async def rest_docs(request: Request) -> Response:  # noqa: ARG001
        """Serve Swagger UI for REST endpoints."""
        return get_swagger_ui_html(openapi_url="/openapi.json", title=API_TITLE)


def build_openapi_schema(batch_limit: int) -> dict[str, object]:
    """Describe the REST routes using FastAPI stub handlers."""

    app = FastAPI()
    errors = {
        400: {"description": "Invalid request"},
        404: {"description": "Entity not found"},
        502: {"description": "Upstream catalog failure"},
    }

    @app.get("/api/episodes", response_model=EpisodePage, responses=errors)
    async def list_episodes(page: int = Query(1, ge=1)) -> None:  # noqa: ARG001
        """Return one page of episodes."""

    @app.get("/api/episodes/{episode_id}", response_model=Episode, responses=errors)
    async def get_episode(episode_id: int) -> None:  # noqa: ARG001
        """Return one episode."""

    @app.get(
        "/api/characters/batch", response_model=list[Character], responses=errors
    )
    async def get_characters(
        ids: str = Query(
            ...,
            pattern=r"^\d+(,\d+)*$",
            description=f"Comma-separated character IDs (at most {batch_limit})",
            examples=["1,2,3"],
        ),
    ) -> None:  # noqa: ARG001
        """Return characters in the order requested."""

    @app.get(
        "/api/characters/{character_id}", response_model=Character, responses=errors
    )
    async def get_character(character_id: int) -> None:  # noqa: ARG001
        """Return one character."""

    return get_openapi(title=API_TITLE, version="1.0.0", routes=app.routes)


__all__ = ["register_rest_routes", "build_openapi_schema"]
