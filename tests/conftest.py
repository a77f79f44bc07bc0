"""Pytest configuration and test helpers."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import pytest

# Ensure the packages are importable when running tests without an editable
# install. This mirrors the runtime layout where ``enricher`` sits at the
# project root.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture
def anyio_backend() -> str:
    """Force AnyIO tests to run on asyncio without requiring trio."""

    return "asyncio"


class StubCatalog:
    """In-memory catalog client that records every lookup it serves.

    ``movies``/``shows`` map a title to a TMDB id, ``details`` maps ids to
    detail payloads and ``seasons`` maps ``(show_id, season)`` to payloads.
    Set ``error`` to make every lookup raise it.
    """

    def __init__(
        self,
        *,
        movies: dict[str, int] | None = None,
        shows: dict[str, int] | None = None,
        details: dict[int, dict[str, Any]] | None = None,
        seasons: dict[tuple[int, int], dict[str, Any]] | None = None,
        image_base: str | None = "https://image.example.com/original",
        error: Exception | None = None,
    ) -> None:
        self.movies = movies or {}
        self.shows = shows or {}
        self.details = details or {}
        self.seasons = seasons or {}
        self.image_base = image_base
        self.error = error
        self.calls: list[tuple[Any, ...]] = []

    async def _serve(self, call: tuple[Any, ...], value: Any) -> Any:
        self.calls.append(call)
        if self.error is not None:
            raise self.error
        return value

    def count(self, name: str) -> int:
        return sum(1 for call in self.calls if call[0] == name)

    async def search_movie(self, title: str, year: int | None = None) -> int | None:
        return await self._serve(("search_movie", title, year), self.movies.get(title))

    async def movie_info(self, movie_id: int) -> dict[str, Any]:
        return await self._serve(("movie_info", movie_id), self.details.get(movie_id, {}))

    async def search_tv(self, title: str, year: int | None = None) -> int | None:
        return await self._serve(("search_tv", title, year), self.shows.get(title))

    async def tv_info(self, show_id: int) -> dict[str, Any]:
        return await self._serve(("tv_info", show_id), self.details.get(show_id, {}))

    async def season_info(self, show_id: int, season_number: int) -> dict[str, Any]:
        return await self._serve(
            ("season_info", show_id, season_number),
            self.seasons.get((show_id, season_number), {}),
        )

    async def image_base_url(self) -> str | None:
        return await self._serve(("image_base_url",), self.image_base)


@pytest.fixture
def stub_catalog_factory():
    return StubCatalog
