"""Extract search terms from media file paths."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Any

from guessit import guessit

DEFAULT_SEASON_NUMBER = 1
DEFAULT_EPISODE_NUMBER = 0


@dataclass(slots=True)
class ParsedMovie:
    title: str
    year: int | None


@dataclass(slots=True)
class ParsedEpisode:
    title: str
    season_number: int
    episode_number: int
    year: int | None


def parse_movie_path(fullpath: str) -> ParsedMovie:
    """Return the title and release year guessed from a movie file name."""

    filename = PurePosixPath(fullpath).name
    info = guessit(filename, {"type": "movie"})
    return ParsedMovie(
        title=_title(info, filename),
        year=_first_int(info.get("year")),
    )


def parse_episode_path(fullpath: str) -> ParsedEpisode:
    """Return the show title, season, episode and year of an episode file.

    Multi-season or multi-episode files use their first number.
    """

    filename = PurePosixPath(fullpath).name
    info = guessit(filename, {"type": "episode"})
    season = _first_int(info.get("season"))
    episode = _first_int(info.get("episode"))
    return ParsedEpisode(
        title=_title(info, filename),
        season_number=season or DEFAULT_SEASON_NUMBER,
        episode_number=episode or DEFAULT_EPISODE_NUMBER,
        year=_first_int(info.get("year")),
    )


def _title(info: Any, filename: str) -> str:
    title = info.get("title")
    if isinstance(title, list):
        title = " ".join(str(part) for part in title)
    if isinstance(title, str) and title.strip():
        return title.strip()
    return PurePosixPath(filename).stem or filename


def _first_int(value: Any) -> int | None:
    if isinstance(value, list):
        value = value[0] if value else None
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
