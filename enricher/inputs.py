"""Read the list of media paths to enrich."""

from __future__ import annotations

from typing import TextIO


def split_paths(raw: str) -> list[str]:
    """Return the non-blank lines of ``raw`` in order."""

    return [line.rstrip("\r") for line in raw.split("\n") if line.strip()]


def read_paths(stream: TextIO) -> list[str]:
    """Read ``stream`` to completion and return the paths it lists."""

    return split_paths(stream.read())
