"""Pydantic models describing enriched media records."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class MediaRecord(BaseModel):
    """Base class for records rendered to JSON with empty fields omitted."""

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class Movie(MediaRecord):
    """A single movie file enriched with TMDB metadata."""

    id: str
    fullpath: str
    title: str
    description: str | None = None
    backdrop: str | None = None
    poster: str | None = None


class Show(MediaRecord):
    id: str
    title: str
    description: str | None = None
    backdrop: str | None = None
    poster: str | None = None


class Season(MediaRecord):
    id: str
    title: str | None = None
    description: str | None = None
    number: int | None = None
    poster: str | None = None


class Episode(MediaRecord):
    id: str
    title: str | None = None
    description: str | None = None
    number: int | None = None
    still: str | None = None
    fullpath: str


class ShowSeasonEpisode(MediaRecord):
    """The show, season and episode a single episode file belongs to."""

    show: Show
    season: Season
    episode: Episode


class MovieLibrary(MediaRecord):
    """Deduplicated movies keyed by id plus the display order of their ids."""

    movies: dict[str, Movie] = Field(default_factory=dict)
    data: list[str] = Field(default_factory=list)


class ShowLibrary(MediaRecord):
    """Deduplicated shows, seasons and episodes plus their nesting.

    ``data`` maps show ids to season ids to the ordered, distinct episode ids
    of that season.
    """

    shows: dict[str, Show] = Field(default_factory=dict)
    seasons: dict[str, Season] = Field(default_factory=dict)
    episodes: dict[str, Episode] = Field(default_factory=dict)
    data: dict[str, dict[str, list[str]]] = Field(default_factory=dict)

    def add_episode(self, show_id: str, season_id: str, episode_id: str) -> None:
        """Append ``episode_id`` to its season's list unless already present."""

        episode_ids = self.data.setdefault(show_id, {}).setdefault(season_id, [])
        if episode_id not in episode_ids:
            episode_ids.append(episode_id)
