"""Memoized, hierarchical lookups against the remote catalog."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Hashable, Protocol, TypeVar

logger = logging.getLogger(__name__)

V = TypeVar("V")

Detail = dict[str, Any]


class CatalogClient(Protocol):
    """The remote lookups the resolver depends on."""

    async def search_movie(self, title: str, year: int | None = None) -> int | None: ...

    async def movie_info(self, movie_id: int) -> Detail: ...

    async def search_tv(self, title: str, year: int | None = None) -> int | None: ...

    async def tv_info(self, show_id: int) -> Detail: ...

    async def season_info(self, show_id: int, season_number: int) -> Detail: ...

    async def image_base_url(self) -> str | None: ...


class MemoizedResolver:
    """Share one future per lookup key across every task of a run.

    The future for a key is created and stored before the lookup starts and
    before any ``await``, so on a single event loop a second caller for the
    same key can never slip in between and trigger a duplicate request.
    Entries are never evicted: a failed lookup keeps failing with the same
    exception for every caller.
    """

    def __init__(self, client: CatalogClient) -> None:
        self._client = client
        self._show_ids: dict[str, asyncio.Future[int | None]] = {}
        self._show_details: dict[int, asyncio.Future[Detail | None]] = {}
        self._season_details: dict[tuple[int, int], asyncio.Future[Detail | None]] = {}
        self._movie_ids: dict[tuple[str, int | None], asyncio.Future[int | None]] = {}
        self._movie_details: dict[int, asyncio.Future[Detail | None]] = {}
        self._image_base_url: asyncio.Future[str | None] | None = None

    def show_id(self, title: str, year: int | None = None) -> asyncio.Future[int | None]:
        """Return the TMDB id of the show called ``title``.

        Keyed by title only: the first caller's year is the one searched with.
        """

        return self._memoize(
            self._show_ids, title, lambda: self._client.search_tv(title, year)
        )

    def show_detail(self, show_id: int | None) -> asyncio.Future[Detail | None]:
        if show_id is None:
            return _resolved(None)
        return self._memoize(
            self._show_details, show_id, lambda: self._client.tv_info(show_id)
        )

    def season_detail(
        self, show_id: int | None, season_number: int
    ) -> asyncio.Future[Detail | None]:
        if show_id is None:
            return _resolved(None)
        return self._memoize(
            self._season_details,
            (show_id, season_number),
            lambda: self._client.season_info(show_id, season_number),
        )

    def movie_id(self, title: str, year: int | None = None) -> asyncio.Future[int | None]:
        return self._memoize(
            self._movie_ids, (title, year), lambda: self._client.search_movie(title, year)
        )

    def movie_detail(self, movie_id: int | None) -> asyncio.Future[Detail | None]:
        if movie_id is None:
            return _resolved(None)
        return self._memoize(
            self._movie_details, movie_id, lambda: self._client.movie_info(movie_id)
        )

    def image_base_url(self) -> asyncio.Future[str | None]:
        if self._image_base_url is None:
            self._image_base_url = asyncio.ensure_future(self._client.image_base_url())
        return self._image_base_url

    @staticmethod
    def _memoize(
        cache: dict[Any, asyncio.Future[V]],
        key: Hashable,
        lookup: Callable[[], Awaitable[V]],
    ) -> asyncio.Future[V]:
        future = cache.get(key)
        if future is None:
            future = asyncio.ensure_future(lookup())
            cache[key] = future
            logger.debug("Started catalog lookup for %r", key)
        return future


def _resolved(value: V) -> asyncio.Future[V]:
    future: asyncio.Future[V] = asyncio.get_running_loop().create_future()
    future.set_result(value)
    return future
