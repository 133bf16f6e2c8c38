"""Main CLI application for podshelf."""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from podshelf.core.config import Config
from podshelf.core.errors import PodshelfError
from podshelf.core.log import setup_logging

app = typer.Typer(
    name="podshelf",
    help="Podcast subscription backend with a curated catalog of missing episodes.",
    no_args_is_help=True,
)

console = Console()
error_console = Console(stderr=True)


class State:
    """Global CLI state."""

    def __init__(self) -> None:
        self.verbose: bool = False
        self.config: Config | None = None


state = State()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from podshelf import __version__

        console.print(f"podshelf version {__version__}")
        raise typer.Exit()


def _fail(error: Exception) -> None:
    error_console.print(f"[red]Error:[/red] {error}")
    raise typer.Exit(1) from None


def _database():
    from podshelf.db.database import Database

    assert state.config is not None
    database = Database.from_config(state.config.database)
    database.init()
    return database


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log to the console as well as the log file"),
    ] = False,
    config_path: Annotated[
        str | None,
        typer.Option("--config", help="Path to configuration file"),
    ] = None,
    version: Annotated[  # noqa: ARG001
        bool,
        typer.Option("--version", callback=version_callback, is_eager=True, help="Show version"),
    ] = False,
) -> None:
    """podshelf - podcast episodes with curated missing episodes."""
    state.verbose = verbose
    try:
        state.config = Config.load(config_path)
    except PodshelfError as e:
        _fail(e)

    setup_logging(
        log_file=state.config.logging.file,
        verbose=verbose,
        level=state.config.logging.level,
    )


@app.command()
def serve(
    host: Annotated[str | None, typer.Option("--host", help="Interface to bind")] = None,
    port: Annotated[int | None, typer.Option("--port", "-p", help="Port to listen on")] = None,
) -> None:
    """Run the HTTP API."""
    from podshelf.api import create_app

    assert state.config is not None

    flask_app = create_app(state.config, database=_database())
    flask_app.run(
        host=host or state.config.server.host,
        port=port or state.config.server.port,
        debug=not state.config.is_production and state.verbose,
    )


@app.command("init-db")
def init_db() -> None:
    """Create the database tables."""
    _database()
    console.print("[green]Database initialized.[/green]")


@app.command()
def episodes(
    feed_url: Annotated[str, typer.Argument(help="RSS feed URL of the podcast")],
    skip_catalog: Annotated[
        bool,
        typer.Option("--skip-catalog", help="Show the live feed only"),
    ] = False,
) -> None:
    """List a podcast's episodes merged with catalog missing episodes."""
    from podshelf.cli.output import display_episodes
    from podshelf.services.catalog import CatalogService
    from podshelf.services.episodes import EpisodeService
    from podshelf.services.feeds import FeedService

    assert state.config is not None

    try:
        catalog = None if skip_catalog else CatalogService(_database())
        service = EpisodeService(FeedService(timeout=state.config.feeds.timeout), catalog)
        with console.status(f"Fetching episodes from [bold]{feed_url}[/bold]"):
            records = service.get_episodes(feed_url)
    except PodshelfError as e:
        _fail(e)

    display_episodes(records, console)


@app.command("import-catalog")
def import_catalog(
    metadata_file: Annotated[
        Path,
        typer.Argument(help="JSON file holding an array of missing-episode records"),
    ],
) -> None:
    """Import missing episodes from a JSON metadata file."""
    from podshelf.cli.output import display_report
    from podshelf.services.catalog import CatalogService

    try:
        report = CatalogService(_database()).import_file(metadata_file)
    except PodshelfError as e:
        _fail(e)

    display_report(report, console)


@app.command()
def maintain(
    base_names: Annotated[
        bool,
        typer.Option("--base-names", help="Only fill in missing podcast and base names"),
    ] = False,
) -> None:
    """Re-derive episode numbers and podcast names of catalog entries."""
    from podshelf.cli.output import display_report
    from podshelf.services.catalog import CatalogService

    try:
        catalog = CatalogService(_database())
        report = catalog.backfill_base_names() if base_names else catalog.rederive_fields()
    except PodshelfError as e:
        _fail(e)

    display_report(report, console)


@app.command("search-catalog")
def search_catalog(
    name: Annotated[str, typer.Argument(help="Podcast name to look for")],
) -> None:
    """Show catalog entries that loosely match a podcast name."""
    from podshelf.cli.output import display_catalog_entries
    from podshelf.core.titles import base_name
    from podshelf.services.catalog import CatalogService

    try:
        entries = CatalogService(_database()).find_candidates(name, base_name(name) or name)
    except PodshelfError as e:
        _fail(e)

    display_catalog_entries(entries, console)


@app.command("create-user")
def create_user(
    username: Annotated[str, typer.Argument(help="Login name")],
    email: Annotated[str, typer.Argument(help="Email address")],
) -> None:
    """Create a user and print its API token."""
    from podshelf.services.auth import Authenticator

    try:
        user_id, token = Authenticator(_database()).create_user(username, email)
    except PodshelfError as e:
        _fail(e)

    console.print(f"[green]Created user {username} (id {user_id}).[/green]")
    console.print(f"API token: [bold]{token}[/bold]")


if __name__ == "__main__":
    app()
