"""Client for the parts of The Movie Database (TMDB) API used for enrichment."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..config import Settings

logger = logging.getLogger(__name__)


class TMDBError(RuntimeError):
    """Raised when a TMDB request fails or returns an unusable payload."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class TMDBClient:
    """Thin wrapper around the TMDB v3 HTTP API."""

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient):
        if not settings.tmdb_api_key:
            raise ValueError("TMDB API key is required when initialising TMDBClient")
        self._settings = settings
        self._client = http_client

    @classmethod
    def build_http_client(cls, settings: Settings) -> httpx.AsyncClient:
        """Return an ``httpx.AsyncClient`` pointed at the configured API."""

        return httpx.AsyncClient(
            base_url=str(settings.tmdb_api_url).rstrip("/"),
            timeout=httpx.Timeout(settings.request_timeout_seconds, connect=10.0),
        )

    async def search_movie(self, title: str, year: int | None = None) -> int | None:
        """Return the id of the first movie matching ``title``."""

        params: dict[str, Any] = {"query": title}
        if year:
            params["year"] = year
        payload = await self._get("/search/movie", params)
        return self._first_result_id(payload)

    async def movie_info(self, movie_id: int) -> dict[str, Any]:
        return await self._get(f"/movie/{movie_id}")

    async def search_tv(self, title: str, year: int | None = None) -> int | None:
        """Return the id of the first TV show matching ``title``."""

        params: dict[str, Any] = {"query": title}
        if year:
            params["first_air_date_year"] = year
        payload = await self._get("/search/tv", params)
        return self._first_result_id(payload)

    async def tv_info(self, show_id: int) -> dict[str, Any]:
        return await self._get(f"/tv/{show_id}")

    async def season_info(self, show_id: int, season_number: int) -> dict[str, Any]:
        return await self._get(f"/tv/{show_id}/season/{season_number}")

    async def image_base_url(self) -> str | None:
        """Return the prefix that turns TMDB image paths into full URLs."""

        payload = await self._get("/configuration")
        images = payload.get("images")
        if not isinstance(images, dict):
            return None
        base_url = images.get("secure_base_url") or images.get("base_url")
        if not isinstance(base_url, str) or not base_url:
            return None
        return f"{base_url.rstrip('/')}/{self._settings.tmdb_image_size}"

    async def _get(
        self, endpoint: str, params: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        query: dict[str, Any] = {"api_key": self._settings.tmdb_api_key}
        if self._settings.tmdb_language:
            query["language"] = self._settings.tmdb_language
        if params:
            query.update(params)

        try:
            response = await self._client.get(endpoint, params=query)
        except httpx.HTTPError as exc:
            logger.warning("TMDB request to %s failed: %s", endpoint, exc)
            raise TMDBError(f"TMDB request to {endpoint} failed: {exc}") from exc

        if response.status_code >= 400:
            logger.warning(
                "TMDB request to %s failed (%s): %s",
                endpoint,
                response.status_code,
                response.text,
            )
            raise TMDBError(
                f"TMDB request to {endpoint} failed with status {response.status_code}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise TMDBError(f"Unexpected non-JSON TMDB response for {endpoint}") from exc
        if not isinstance(payload, dict):
            raise TMDBError(f"Unexpected TMDB response structure for {endpoint}")
        return payload

    @staticmethod
    def _first_result_id(payload: dict[str, Any]) -> int | None:
        results = payload.get("results") or []
        if not isinstance(results, list) or not results:
            return None
        first = results[0]
        if not isinstance(first, dict):
            return None
        try:
            return int(first["id"])
        except (KeyError, TypeError, ValueError):
            return None
