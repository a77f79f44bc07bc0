"""Enrich media paths concurrently and reduce the results for output."""

from __future__ import annotations

import locale
import logging
from typing import Any, Awaitable, Callable, Iterable, Literal, Sequence, TypeVar

from .config import Mode
from .models import Movie, MovieLibrary, ShowLibrary, ShowSeasonEpisode
from .pool import Rejected, SettledResult, fulfilled_values, run_pool
from .services.assembler import EntityAssembler
from .services.resolver import CatalogClient, MemoizedResolver

logger = logging.getLogger(__name__)

OutputFormat = Literal["list", "library"]

T = TypeVar("T")


class EnrichmentError(RuntimeError):
    """Raised in strict mode when one or more paths could not be enriched."""

    def __init__(self, failures: Sequence[tuple[str, BaseException]]) -> None:
        self.failures = list(failures)
        listed = ", ".join(f"{path} ({reason})" for path, reason in self.failures)
        super().__init__(f"Failed to enrich {len(self.failures)} path(s): {listed}")


async def enrich_paths(
    paths: Sequence[str],
    build: Callable[[str], Awaitable[T]],
    *,
    concurrency: int | None,
    strict: bool = False,
) -> list[T]:
    """Run ``build`` for every path and return the fulfilled values in order.

    Rejected paths are logged and left out, or raised together when ``strict``.
    """

    results = await run_pool(
        [lambda path=path: build(path) for path in paths], concurrency
    )
    _report_rejections(paths, results, strict=strict)
    return fulfilled_values(results)


async def enrich_movies(
    paths: Sequence[str],
    assembler: EntityAssembler,
    *,
    concurrency: int | None = 2,
    strict: bool = False,
) -> list[Movie]:
    return await enrich_paths(
        paths, assembler.movie, concurrency=concurrency, strict=strict
    )


async def enrich_episodes(
    paths: Sequence[str],
    assembler: EntityAssembler,
    *,
    concurrency: int | None = 2,
    strict: bool = False,
) -> list[ShowSeasonEpisode]:
    return await enrich_paths(
        paths, assembler.show_season_episode, concurrency=concurrency, strict=strict
    )


def build_movie_library(movies: Iterable[Movie]) -> MovieLibrary:
    """Deduplicate movies by id and order the ids by title, ignoring case."""

    library = MovieLibrary()
    for movie in movies:
        library.movies.setdefault(movie.id, movie)
    library.data = sorted(
        library.movies, key=lambda movie_id: library.movies[movie_id].title.casefold()
    )
    return library


def episode_sort_key(item: ShowSeasonEpisode) -> tuple[Any, ...]:
    """Order by show title, season number, episode number, then path.

    Missing season or episode numbers sort after present ones.
    """

    season_number = item.season.number
    episode_number = item.episode.number
    return (
        locale.strxfrm(item.show.title.casefold()),
        season_number is None,
        season_number or 0,
        episode_number is None,
        episode_number or 0,
        item.episode.fullpath,
    )


def build_show_library(items: Iterable[ShowSeasonEpisode]) -> ShowLibrary:
    """Deduplicate shows, seasons and episodes and nest their ids in order."""

    library = ShowLibrary()
    for item in sorted(items, key=episode_sort_key):
        show, season, episode = item.show, item.season, item.episode
        library.shows.setdefault(show.id, show)
        library.seasons.setdefault(season.id, season)
        library.episodes.setdefault(episode.id, episode)
        library.add_episode(show.id, season.id, episode.id)
    return library


async def enrich(
    paths: Sequence[str],
    client: CatalogClient,
    *,
    mode: Mode = "movie",
    concurrency: int | None = 2,
    full_image_url: bool = False,
    output_format: OutputFormat = "list",
    strict: bool = False,
) -> Any:
    """Enrich ``paths`` and return a JSON-serialisable payload."""

    resolver = MemoizedResolver(client)
    image_base_url = await resolver.image_base_url() if full_image_url else None
    assembler = EntityAssembler(resolver, image_base_url)
    logger.info(
        "Enriching %d %s path(s) with concurrency %s",
        len(paths),
        mode,
        concurrency,
    )

    if mode == "movie":
        movies = await enrich_movies(
            paths, assembler, concurrency=concurrency, strict=strict
        )
        if output_format == "library":
            return build_movie_library(movies).to_payload()
        return [movie.to_payload() for movie in movies]

    episodes = await enrich_episodes(
        paths, assembler, concurrency=concurrency, strict=strict
    )
    if output_format == "library":
        return build_show_library(episodes).to_payload()
    return [item.to_payload() for item in episodes]


def _report_rejections(
    paths: Sequence[str], results: Sequence[SettledResult[Any]], *, strict: bool
) -> None:
    failures = [
        (path, result.reason)
        for path, result in zip(paths, results)
        if isinstance(result, Rejected)
    ]
    for path, reason in failures:
        logger.warning("Dropping %s: %s", path, reason)
    if strict and failures:
        raise EnrichmentError(failures)
