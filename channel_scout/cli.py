"""CLI for Channel Scout."""

import asyncio
from typing import NoReturn

import typer
from rich.console import Console
from rich.table import Table

from channel_scout.channel.query import ChannelQuery
from channel_scout.channel.schemas import CatalogPage
from channel_scout.channel.service import ChannelCatalogService
from channel_scout.core.config import Settings, get_settings
from channel_scout.core.exceptions import CatalogError, UpstreamFetchError
from channel_scout.core.logging_config import setup_logging
from channel_scout.database import get_db_manager_context

app = typer.Typer(help="Channel Scout - discover YouTube channels and browse the catalog")
console = Console()

MIN_OPTION = typer.Option(None, "--min", help="Minimum subscriber count (default 0)")
MAX_OPTION = typer.Option(None, "--max", help="Maximum subscriber count (default ceiling)")
PAGE_OPTION = typer.Option(None, "--page", help="1-based page number")


def _build_query(
    settings: Settings,
    minimum: str | None,
    maximum: str | None,
    page: str | None,
) -> ChannelQuery:
    return ChannelQuery.from_params(
        minimum,
        maximum,
        page,
        page_size=settings.catalog_page_size,
        ceiling=settings.catalog_max_subscribers,
    )


def _display_page(result: CatalogPage, query: ChannelQuery) -> None:
    """Render a catalog page as a table."""
    table = Table(
        title=(
            f"Channels {query.min_subscribers:,}-{query.max_subscribers:,} subscribers "
            f"(page {query.page}, {result.total} total)"
        )
    )
    table.add_column("ID", style="dim")
    table.add_column("Title", style="cyan")
    table.add_column("Subscribers", justify="right", style="green")
    table.add_column("Views", justify="right")
    table.add_column("Videos", justify="right")
    table.add_column("URL")

    def fmt(value: int | None) -> str:
        return "-" if value is None else f"{value:,}"

    for item in result.items:
        table.add_row(
            item.id,
            item.title,
            fmt(item.subscriber_count),
            fmt(item.view_count),
            fmt(item.video_count),
            item.channel_url,
        )

    console.print(table)


def _fail(e: CatalogError) -> NoReturn:
    console.print(f"[red]✗ {e.message}[/red]")
    if isinstance(e, UpstreamFetchError) and e.body is not None:
        console.print(f"[dim]Upstream response ({e.status_code}): {e.body}[/dim]")
    raise typer.Exit(code=1)


@app.command("list")
def list_channels(
    minimum: str | None = MIN_OPTION,
    maximum: str | None = MAX_OPTION,
    page: str | None = PAGE_OPTION,
) -> None:
    """Show one page of the stored catalog."""
    settings = get_settings()
    setup_logging(settings.log_level)

    async def _read() -> tuple[ChannelQuery, CatalogPage]:
        query = _build_query(settings, minimum, maximum, page)
        async with get_db_manager_context(settings) as db:
            service = ChannelCatalogService(settings, db.channels, db.channel_stats)
            return query, await service.list_channels(query)

    try:
        query, result = asyncio.run(_read())
    except CatalogError as e:
        _fail(e)

    _display_page(result, query)


@app.command()
def refresh(
    minimum: str | None = MIN_OPTION,
    maximum: str | None = MAX_OPTION,
    page: str | None = PAGE_OPTION,
) -> None:
    """Rediscover channels from YouTube, store them and show one page."""
    settings = get_settings()
    setup_logging(settings.log_level)

    async def _refresh() -> tuple[ChannelQuery, int, CatalogPage]:
        query = _build_query(settings, minimum, maximum, page)
        async with get_db_manager_context(settings) as db:
            service = ChannelCatalogService(settings, db.channels, db.channel_stats)
            refreshed, result = await service.refresh_channels(query)
            return query, refreshed, result

    console.print(
        f"[bold blue]Discovering channels for {settings.discovery_keyword!r} "
        f"(region {settings.discovery_region})...[/bold blue]"
    )
    try:
        query, refreshed, result = asyncio.run(_refresh())
    except CatalogError as e:
        _fail(e)

    console.print(f"[green]✓ Refreshed {refreshed} channels[/green]")
    _display_page(result, query)


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", help="Bind address"),
    port: int = typer.Option(8000, help="Bind port"),
    reload: bool = typer.Option(False, help="Reload on code changes"),
) -> None:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    uvicorn.run("channel_scout.api.app:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
