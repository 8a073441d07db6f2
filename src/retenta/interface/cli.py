"""Retenta CLI: review, selection and statistics commands over the local progress file."""

import asyncio
import dataclasses
import json
import logging
import sys
from pathlib import Path
from typing import Annotated, NoReturn

import typer

from retenta.application.config import resolve_config
from retenta.application.factory import get_progress_service

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="retenta: spaced-repetition scheduling for vocabulary.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(help="Manage retenta configuration.")
app.add_typer(config_app, name="config")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
    progress_file: Annotated[
        Path | None, typer.Option("--progress-file", help="Override the progress JSON file.")
    ] = None,
    language: Annotated[
        str | None, typer.Option("--language", "-l", help="Language code, e.g. 'es'.")
    ] = None,
):
    """Global settings for retenta."""
    ctx.ensure_object(dict)
    ctx.obj["overrides"] = {
        "progress_path": progress_file,
        "language": language,
        "verbose": verbose or None,
    }


def _config(ctx: typer.Context):
    config = resolve_config((ctx.obj or {}).get("overrides"))
    if config.verbose:
        logging.getLogger("retenta").setLevel(logging.DEBUG)
    return config


def _service(ctx: typer.Context):
    config = _config(ctx)
    return config, get_progress_service(config)


def _fail(e: Exception) -> NoReturn:
    typer.secho(f"Error: {e}", fg="red", err=True)
    raise typer.Exit(2)


def _record_json(record) -> str:
    return json.dumps(record.to_dict(), indent=2)


# ---------------------------------------------------------------------------
# Root commands
# ---------------------------------------------------------------------------


@app.command()
def review(
    ctx: typer.Context,
    word: Annotated[str, typer.Argument(help="Word that was reviewed.")],
    quality: Annotated[int, typer.Argument(help="Quality rating 0-5 (>= 3 is a success).")],
):
    """Record a [bold green]review[/bold green] with an explicit quality rating."""
    try:
        config, service = _service(ctx)
        record = asyncio.run(service.review(word, config.language, quality))
    except ValueError as e:
        _fail(e)
    typer.echo(_record_json(record))


@app.command()
def interact(
    ctx: typer.Context,
    word: Annotated[str, typer.Argument(help="Word the learner interacted with.")],
    kind: Annotated[
        str,
        typer.Argument(help="hover, pronunciation, context, ignored or clicked."),
    ],
):
    """Record a page interaction; its kind decides the quality rating."""
    try:
        config, service = _service(ctx)
        record = asyncio.run(service.record_interaction(word, config.language, kind))
    except ValueError as e:
        _fail(e)
    typer.echo(_record_json(record))


@app.command()
def select(
    ctx: typer.Context,
    words: Annotated[list[str], typer.Argument(help="Words visible on the page.")],
    budget: Annotated[
        int | None, typer.Option(help="Maximum number of words to annotate.")
    ] = None,
):
    """Pick which page words to annotate: due reviews first, then new words."""
    try:
        config, service = _service(ctx)
        selected = asyncio.run(service.select_for_page(config.language, words, budget))
    except ValueError as e:
        _fail(e)
    for word in selected:
        typer.echo(word)


@app.command()
def due(
    ctx: typer.Context,
    limit: Annotated[int | None, typer.Option(help="Maximum number of items.")] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """List words due for review, most overdue first."""
    try:
        config, service = _service(ctx)
        items = asyncio.run(service.due(config.language, limit))
    except ValueError as e:
        _fail(e)

    if json_output:
        typer.echo(
            json.dumps(
                [{"word": d.item, "overdueMs": d.overdue, **d.record.to_dict()} for d in items],
                indent=2,
            )
        )
        return

    if not items:
        typer.secho("Nothing due.", fg="green")
        return
    for d in items:
        typer.echo(f"{d.item}  overdue {d.overdue / 3_600_000:.1f}h  mastery {d.record.mastery}")


@app.command()
def stats(
    ctx: typer.Context,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Show learning statistics for the configured language."""
    try:
        config, service = _service(ctx)
        result = asyncio.run(service.statistics(config.language))
    except ValueError as e:
        _fail(e)

    if json_output:
        typer.echo(json.dumps(dataclasses.asdict(result), indent=2))
        return

    typer.echo(f"Language: {config.language}")
    typer.echo(f"Words tracked: {result.total_words}")
    typer.secho(f"Mastered: {result.mastered_words}", fg="green")
    typer.echo(f"In progress: {result.words_in_progress}")
    typer.secho(
        f"Due for review: {result.words_due_for_review}",
        fg="yellow" if result.words_due_for_review else "green",
    )
    typer.echo(f"Average mastery: {result.average_mastery:.1f}")
    typer.echo(f"Reviewed today: {result.today_reviews}")


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show(ctx: typer.Context):
    """Display final resolved configuration."""
    config = _config(ctx)
    d = {k: str(v) if isinstance(v, Path) else v for k, v in config.model_dump().items()}
    typer.echo(json.dumps(d, indent=2))


# ---------------------------------------------------------------------------
# Server
# ---------------------------------------------------------------------------


@app.command()
def serve(
    port: Annotated[int, typer.Option(help="Port to bind the server to.")] = 8779,
    host: Annotated[str, typer.Option(help="Host to bind the server to.")] = "127.0.0.1",
    reload: Annotated[bool, typer.Option(help="Enable auto-reload.")] = False,
):
    """Run the background HTTP server used by the page annotator."""
    import uvicorn

    logger.info(f"Starting retenta server on {host}:{port}")
    uvicorn.run("retenta.server:app", host=host, port=port, reload=reload)
