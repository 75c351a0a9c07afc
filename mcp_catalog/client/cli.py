"""Command-line interface for browsing the catalog through the facade."""

from __future__ import annotations

import asyncio
import logging

import click

from ..common.errors import CatalogError
from .config import ClientSettings
from .session import CatalogSession


_LOG_LEVELS = click.Choice(
    ["critical", "error", "warning", "info", "debug", "notset"],
    case_sensitive=False,
)


@click.group()
@click.option(
    "--facade-url",
    envvar="FACADE_URL",
    show_envvar=True,
    default=None,
    help="Base URL of the catalog facade",
)
@click.option(
    "--log-level",
    envvar="LOG_LEVEL",
    show_envvar=True,
    type=_LOG_LEVELS,
    default="warning",
    show_default=True,
    help="Logging level for console output",
)
@click.pass_context
def main(ctx: click.Context, facade_url: str | None, log_level: str) -> None:
    """Browse episodes and their characters."""

    logging.basicConfig(level=getattr(logging, log_level.upper(), logging.WARNING))
    settings = ClientSettings()
    if facade_url:
        settings.facade_url = facade_url
    ctx.obj = settings


@main.command()
@click.option(
    "--page",
    type=click.IntRange(min=1),
    default=1,
    show_default=True,
    help="1-based page of the episode listing",
)
@click.pass_obj
def episodes(settings: ClientSettings, page: int) -> None:
    """List one page of episodes."""

    async def _run() -> None:
        async with CatalogSession(settings) as session:
            listing = await session.episodes(page)
        for episode in listing.results:
            click.echo(f"{episode.id}\t{episode.episode}\t{episode.name}")
        click.echo(f"page {page}/{listing.info.pages} ({listing.info.count} episodes)")

    _run_or_fail(_run())


@main.command("episode-characters")
@click.argument("episode_id", type=click.IntRange(min=1))
@click.pass_obj
def episode_characters(settings: ClientSettings, episode_id: int) -> None:
    """List the characters appearing in EPISODE_ID."""

    async def _run() -> None:
        async with CatalogSession(settings) as session:
            characters = await session.episode_characters(episode_id)
        for character in characters:
            click.echo(f"{character.id}\t{character.name}\t{character.status}")

    _run_or_fail(_run())


def _run_or_fail(coro) -> None:  # noqa: ANN001
    try:
        asyncio.run(coro)
    except CatalogError as exc:
        raise click.ClickException(str(exc)) from exc


if __name__ == "__main__":
    main()
