"""Enrich media file paths with metadata from The Movie Database."""

from __future__ import annotations

from importlib import import_module
from typing import Any

__all__ = ["enrich", "EnrichmentError"]


def __getattr__(name: str) -> Any:
    if name in __all__:
        module = import_module("enricher.pipeline")
        return getattr(module, name)
    raise AttributeError(f"module 'enricher' has no attribute {name}")
