"""CLI output formatting utilities."""

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from podshelf.core.models import BatchReport, CatalogEntry, EpisodeRecord


def display_episodes(episodes: list[EpisodeRecord], console: Console) -> None:
    """Display a reconciled episode list in a table."""
    if not episodes:
        console.print("[yellow]No episodes found.[/yellow]")
        return

    table = Table(title=f"Episodes of {escape(episodes[0].podcast_title)}")
    table.add_column("#", style="dim", width=6)
    table.add_column("Title", style="bold")
    table.add_column("Published", style="green")
    table.add_column("Source", style="cyan")

    for episode in episodes:
        if episode.publish_date:
            published = episode.publish_date.strftime("%Y-%m-%d")
        else:
            published = episode.date_text or "-"
        source = "[magenta]catalog[/magenta]" if episode.from_catalog else "feed"
        table.add_row(
            str(episode.episode_number) if episode.episode_number is not None else "-",
            escape(episode.title),
            published,
            source,
        )

    console.print(table)


def display_catalog_entries(entries: list[CatalogEntry], console: Console) -> None:
    """Display catalog entries in a table."""
    if not entries:
        console.print("[yellow]No missing episodes found.[/yellow]")
        return

    table = Table(title="Missing Episodes")
    table.add_column("#", style="dim", width=6)
    table.add_column("Podcast", style="cyan")
    table.add_column("Title", style="bold")
    table.add_column("Published", style="green")

    for entry in entries:
        table.add_row(
            str(entry.episode_number) if entry.episode_number is not None else "-",
            escape(entry.podcast_name or "-"),
            escape(entry.title),
            entry.publish_date.strftime("%Y-%m-%d") if entry.publish_date else "-",
        )

    console.print(table)


def display_report(report: BatchReport, console: Console) -> None:
    """Summarize a batch operation, listing per-entry errors."""
    console.print(f"[green]{report.message}[/green]")
    for error in report.errors:
        title = escape(error["title"] or "<untitled>")
        console.print(f"  [red]x[/red] {title}: {escape(error['error'] or '')}")
