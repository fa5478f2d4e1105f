"""
Operator Command Line

    wp-search-indexer reindex [--type TYPE] [--verbose]
    wp-search-indexer get-config [--index NAME] [--settings] [--synonyms] [--rules]
    wp-search-indexer set-config [--index NAME] [--settings] [--synonyms] [--rules]
    wp-search-indexer index-prefix
    wp-search-indexer serve
"""

from __future__ import annotations

import json
import logging
from typing import List, Optional

import typer

from .api.dependencies import get_content_client, get_registry, get_search_client
from .config import get_settings
from .core.errors import IndexerError, InvalidArgumentError
from .indexing.reindex import Reindexer
from .search.client import SearchIndex
from .search.index_config import (
    RULES,
    SETTINGS,
    SYNONYMS,
    fetch_index_config,
    push_index_config,
)
from .search.naming import GLOBAL_INDEX, index_name

logger = logging.getLogger("indexer.cli")

app = typer.Typer(help="Index WordPress content in the search service.")


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _fail(message: str, code: int = 1) -> None:
    typer.secho(f"Error: {message}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=code)


def _kinds(settings: bool, synonyms: bool, rules: bool) -> List[str]:
    return [
        kind
        for kind, wanted in ((SETTINGS, settings), (SYNONYMS, synonyms), (RULES, rules))
        if wanted
    ]


def _existing_index(logical_name: str) -> SearchIndex:
    settings = get_settings()
    index = get_search_client().init_index(
        index_name(logical_name, settings.algolia_index_prefix, settings.wp_table_prefix)
    )
    if not index.exists():
        _fail(f"Index {index.name} does not exist!")
    return index


@app.command()
def reindex(
    content_type: Optional[str] = typer.Option(
        None, "--type", help="Only reindex this content type (indexes are not cleared)."
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Report every item and batch."),
):
    """Rebuild the global and people indexes from WordPress."""
    settings = get_settings()
    _configure_logging(settings.log_level)

    reindexer = Reindexer(
        get_search_client(),
        get_content_client(),
        get_registry(),
        settings,
        echo=typer.echo,
        verbose=verbose,
    )

    try:
        report = reindexer.run(content_type)
    except InvalidArgumentError as exc:
        _fail(str(exc), code=2)
    except IndexerError as exc:
        _fail(str(exc))

    typer.echo(
        f"{report.records_indexed} records from {report.items_indexed} items indexed, "
        f"{report.batches_saved} batch(es) saved, {report.batches_failed} failed"
    )

    if not report.ok:
        for error in report.errors:
            typer.secho(f"Warning: {error}", fg=typer.colors.YELLOW, err=True)
        raise typer.Exit(code=1)

    typer.secho("Success: reindex complete", fg=typer.colors.GREEN)


@app.command("get-config")
def get_config(
    index: str = typer.Option(GLOBAL_INDEX, "--index", help="Logical index name."),
    settings: bool = typer.Option(False, "--settings"),
    synonyms: bool = typer.Option(False, "--synonyms"),
    rules: bool = typer.Option(False, "--rules"),
):
    """Print the live configuration of an index as JSON."""
    try:
        search_index = _existing_index(index)
        config = fetch_index_config(search_index, _kinds(settings, synonyms, rules))
    except IndexerError as exc:
        _fail(str(exc))

    for kind, data in config.items():
        typer.secho(
            f'{kind.capitalize()} for index "{search_index.name}"',
            fg=typer.colors.CYAN,
        )
        typer.echo(json.dumps(data, indent=4) + "\n")


@app.command("set-config")
def set_config(
    index: str = typer.Option(GLOBAL_INDEX, "--index", help="Logical index name."),
    settings: bool = typer.Option(False, "--settings"),
    synonyms: bool = typer.Option(False, "--synonyms"),
    rules: bool = typer.Option(False, "--rules"),
):
    """Push the local JSON configuration files to an index."""
    config_dir = get_settings().search_config_dir

    try:
        search_index = _existing_index(index)
        pushed = push_index_config(
            search_index, config_dir, index, _kinds(settings, synonyms, rules)
        )
    except IndexerError as exc:
        _fail(str(exc))

    for kind in pushed:
        typer.secho(f"Success: Pushed {kind} to {search_index.name}", fg=typer.colors.GREEN)


@app.command("index-prefix")
def index_prefix():
    """Print the index name prefix used by the search front end."""
    settings = get_settings()
    typer.echo(index_name("", settings.algolia_index_prefix, settings.wp_table_prefix))


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", "--host"),
    port: int = typer.Option(8000, "--port"),
):
    """Start the webhook API server."""
    import uvicorn

    _configure_logging(get_settings().log_level)
    logger.info("Starting webhook server on %s:%d", host, port)
    uvicorn.run("wp_search_indexer.main:app", host=host, port=port)


if __name__ == "__main__":
    app()
