"""Module executed when running ``python -m tmdb_enrich``."""

from __future__ import annotations

from enricher.cli import app


def main() -> None:
    """Run the command line application."""

    app()


if __name__ == "__main__":  # pragma: no cover - runtime entrypoint
    main()
