"""Build normalized movie and episode records from catalog lookups."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from ..models import Episode, Movie, Season, Show, ShowSeasonEpisode
from ..parsing import parse_episode_path, parse_movie_path
from .resolver import Detail, MemoizedResolver

logger = logging.getLogger(__name__)


def image_url(base: str | None, path: Any) -> str | None:
    """Prefix an image path with ``base`` when one is configured."""

    if not isinstance(path, str) or not path:
        return None
    return f"{base}{path}" if base else path


def entity_id(remote_id: Any, fallback: str) -> str:
    """Stringify a numeric remote id, or use ``fallback`` when there is none."""

    if isinstance(remote_id, int) and not isinstance(remote_id, bool):
        return str(remote_id)
    return fallback


def season_fallback_id(title: str, season_number: int) -> str:
    return f"{title}-{season_number}"


class EntityAssembler:
    """Turn file paths into records using a shared :class:`MemoizedResolver`."""

    def __init__(self, resolver: MemoizedResolver, image_base_url: str | None = None):
        self._resolver = resolver
        self._image_base_url = image_base_url

    async def movie(self, fullpath: str) -> Movie:
        """Return the movie record for ``fullpath``.

        Lookup failures produce a record keyed by the path itself.
        """

        parsed = parse_movie_path(fullpath)
        try:
            movie_id = await self._resolver.movie_id(parsed.title, parsed.year)
            detail = await self._resolver.movie_detail(movie_id)
        except Exception as exc:
            logger.warning("Movie lookup failed for %s: %s", fullpath, exc)
            return Movie(id=fullpath, fullpath=fullpath, title=parsed.title)

        detail = detail or {}
        return Movie(
            id=entity_id(detail.get("id"), fullpath),
            fullpath=fullpath,
            title=detail.get("title") or parsed.title,
            description=detail.get("overview"),
            backdrop=image_url(self._image_base_url, detail.get("backdrop_path")),
            poster=image_url(self._image_base_url, detail.get("poster_path")),
        )

    async def show_season_episode(self, fullpath: str) -> ShowSeasonEpisode:
        """Return the show, season and episode records for an episode file."""

        parsed = parse_episode_path(fullpath)
        title = parsed.title
        season_number = parsed.season_number
        try:
            show_id = await self._resolver.show_id(title, parsed.year)
            show, season = await asyncio.gather(
                self._resolver.show_detail(show_id),
                self._resolver.season_detail(show_id, season_number),
            )
        except Exception as exc:
            logger.warning("Show lookup failed for %s: %s", fullpath, exc)
            return ShowSeasonEpisode(
                show=Show(id=title, title=title),
                season=Season(
                    id=season_fallback_id(title, season_number), number=season_number
                ),
                episode=Episode(id=fullpath, fullpath=fullpath),
            )

        show = show or {}
        season = season or {}
        episode = find_episode(season, parsed.episode_number) or {}
        base = self._image_base_url
        return ShowSeasonEpisode(
            show=Show(
                id=entity_id(show.get("id"), title),
                title=show.get("name") or title,
                description=show.get("overview"),
                backdrop=image_url(base, show.get("backdrop_path")),
                poster=image_url(base, show.get("poster_path")),
            ),
            season=Season(
                id=entity_id(season.get("id"), season_fallback_id(title, season_number)),
                title=season.get("name"),
                description=season.get("overview"),
                number=_as_int(season.get("season_number"), season_number),
                poster=image_url(base, season.get("poster_path")),
            ),
            episode=Episode(
                id=entity_id(episode.get("id"), fullpath),
                title=episode.get("name"),
                description=episode.get("overview"),
                number=_as_int(episode.get("episode_number"), None),
                still=image_url(base, episode.get("still_path")),
                fullpath=fullpath,
            ),
        )


def find_episode(season: Detail, episode_number: int) -> Detail | None:
    """Return the episode numbered ``episode_number`` in a season payload."""

    for episode in season.get("episodes") or []:
        if isinstance(episode, dict) and episode.get("episode_number") == episode_number:
            return episode
    return None


def _as_int(value: Any, default: int | None) -> int | None:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return default
