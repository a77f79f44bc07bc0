"""Compatibility shim exposing the command line application."""

from __future__ import annotations

from enricher.cli import app

__all__ = ["app"]
