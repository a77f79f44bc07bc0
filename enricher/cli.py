"""Command line interface: enrich media paths read from stdin with TMDB data."""

from __future__ import annotations

import asyncio
import json
import locale
import logging
import sys
from typing import Any, Optional

import typer

from .config import Settings, get_settings
from .inputs import read_paths
from .pipeline import enrich
from .services.tmdb import TMDBClient

logger = logging.getLogger(__name__)

MODE_CHOICES = ("movie", "tv-show")
FORMAT_CHOICES = ("list", "library")

app = typer.Typer(
    help="Read media file paths (one per line) and print TMDB metadata as JSON.",
    add_completion=False,
)


@app.command()
def main(
    input_file: Optional[typer.FileText] = typer.Argument(
        None, help="File listing media paths. Reads stdin when omitted."
    ),
    mode: str = typer.Option(
        "movie", "--mode", "-m", help="Type of media listed: movie or tv-show.", show_default=True
    ),
    output_format: str = typer.Option(
        "list",
        "--format",
        "-f",
        help="Emit a plain list, or a library of records keyed by id.",
        show_default=True,
    ),
    concurrency: Optional[int] = typer.Option(
        None,
        "--concurrency",
        "-c",
        help="Maximum simultaneous lookups; 0 or less removes the limit. Defaults to CONCURRENCY.",
    ),
    full_image_url: bool = typer.Option(
        False,
        "--full-image-url/--image-path",
        help="Prefix image paths with the TMDB image base URL.",
        show_default=True,
    ),
    strict: bool = typer.Option(
        False, "--strict", help="Exit with an error when any path fails to enrich."
    ),
    api_key: Optional[str] = typer.Option(
        None, "--api-key", envvar="TMDB_API_KEY", help="TMDB API key."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output to stderr."),
) -> None:
    """Enrich media paths with TMDB metadata."""

    if mode not in MODE_CHOICES:
        raise typer.BadParameter(
            f"must be one of: {', '.join(MODE_CHOICES)}", param_hint="--mode"
        )
    if output_format not in FORMAT_CHOICES:
        raise typer.BadParameter(
            f"must be one of: {', '.join(FORMAT_CHOICES)}", param_hint="--format"
        )

    settings = get_settings()
    resolved_key = api_key or settings.tmdb_api_key
    if not resolved_key:
        typer.echo("Error: API key not found.", err=True)
        typer.echo(
            "  Set your TheMovieDataBase API key in the TMDB_API_KEY environment variable.",
            err=True,
        )
        raise typer.Exit(code=1)
    settings = settings.model_copy(update={"tmdb_api_key": resolved_key})

    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level_number,
        stream=sys.stderr,
    )
    use_environment_collation()

    paths = read_paths(input_file if input_file is not None else sys.stdin)
    resolved_concurrency = settings.concurrency if concurrency is None else concurrency

    try:
        payload = asyncio.run(
            run(
                paths,
                settings,
                mode=mode,
                concurrency=resolved_concurrency,
                full_image_url=full_image_url,
                output_format=output_format,
                strict=strict,
            )
        )
    except Exception as exc:
        logger.debug("Enrichment aborted", exc_info=True)
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))


def use_environment_collation() -> None:
    """Sort show titles with the collation rules of the user's locale."""

    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as exc:
        logger.warning("Falling back to code point title order: %s", exc)


async def run(
    paths: list[str],
    settings: Settings,
    **options: Any,
) -> Any:
    """Open the TMDB HTTP client for the duration of one enrichment run."""

    async with TMDBClient.build_http_client(settings) as http_client:
        client = TMDBClient(settings, http_client)
        return await enrich(paths, client, **options)
