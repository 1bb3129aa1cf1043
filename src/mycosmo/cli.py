"""Command-line interface for the MyCosmo project."""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Optional

import httpx
import structlog
import typer
from rich.console import Console
from rich.table import Table

from mycosmo.credentials import NASA_KEY, NEWS_KEY, CredentialStore
from mycosmo.exceptions import ObservationValidationError
from mycosmo.images import load_image_files
from mycosmo.models import (
    CelestialBody,
    ImportanceLevel,
    Observation,
    ObservationCategory,
    ObservationDraft,
    ObservationFilter,
    NewsFilter,
    NewsType,
)
from mycosmo.services import (
    DailyPictureFetcher,
    HomeCoordinator,
    MarsRoverFetcher,
    NewsCoordinator,
    NewsSearchFetcher,
    ObservationService,
    SolarSystemCoordinator,
    SolarSystemFetcher,
    SpaceNewsFetcher,
    SQLObservationStore,
)
from mycosmo.services.coordinators import CONFIGURATION_NEEDED, LoadSlot
from mycosmo.settings import Settings, get_settings
from mycosmo.utils import format_timestamp, truncate

console = Console()
app = typer.Typer(help="MyCosmo – astronomy companion")
obs_app = typer.Typer(help="Personal observation log")
app.add_typer(obs_app, name="obs")
KEY_NAMES = {"nasa": NASA_KEY, "news": NEWS_KEY}
logger = structlog.get_logger(__name__)


@app.callback()
def main() -> None:
    """Configure logging from settings before any command runs."""
    settings = Settings.load()
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
    )


def _http_client(settings: Settings) -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=settings.http_timeout)


def _observation_service(settings: Settings) -> ObservationService:
    return ObservationService(SQLObservationStore.from_settings(settings), jpeg_quality=settings.jpeg_quality)


def _report_failure(slot: LoadSlot, what: str) -> None:
    if slot.error_state == CONFIGURATION_NEEDED:
        console.print(
            f"[yellow]Configuration needed:[/yellow] {slot.error}\n"
            "Run `mycosmo set-key nasa <KEY>` (or `news`) to add one."
        )
    else:
        console.print(f"[red]{what} is currently unavailable.[/red]")
    raise typer.Exit(code=1)


def _resolve_key_name(service: str) -> str:
    key = KEY_NAMES.get(service.lower())
    if key is None:
        raise typer.BadParameter("Service must be 'nasa' or 'news'.")
    return key


@app.command()
def config(
    json_output: bool = typer.Option(False, "--json", help="Output settings as JSON"),
) -> None:
    """Display the resolved settings (API keys are masked)."""
    settings = get_settings()
    payload = settings.model_dump(mode="json")
    for field in ("nasa_api_key", "news_api_key", "solar_system_api_key"):
        if payload.get(field):
            payload[field] = "****"
    if json_output:
        typer.echo(json.dumps(payload, indent=2))
        return
    table = Table(title="MyCosmo Settings")
    table.add_column("Key")
    table.add_column("Value", overflow="fold")
    for key, value in payload.items():
        table.add_row(key, "—" if value is None else str(value))
    console.print(table)


@app.command("set-key")
def set_key(
    service: str = typer.Argument(..., help="nasa or news"),
    value: str = typer.Argument(..., help="API key"),
) -> None:
    """Store an API key in the local credential file."""
    key = _resolve_key_name(service)
    if not value.strip():
        raise typer.BadParameter("API key must not be empty.")
    settings = get_settings()
    CredentialStore(settings.credentials_path).set(key, value)
    console.print(f"[green]Saved {service.lower()} API key.[/green]")


@app.command("clear-key")
def clear_key(service: str = typer.Argument(..., help="nasa or news")) -> None:
    """Remove a stored API key."""
    key = _resolve_key_name(service)
    settings = get_settings()
    if CredentialStore(settings.credentials_path).clear(key):
        console.print(f"[green]Removed {service.lower()} API key.[/green]")
    else:
        console.print(f"[yellow]No {service.lower()} API key was stored.")


@app.command()
def quota() -> None:
    """Show the remaining NASA API requests for the configured key."""

    async def runner() -> int | None:
        settings = get_settings()
        async with _http_client(settings) as client:
            return await DailyPictureFetcher(client, settings).remaining_requests()

    remaining = asyncio.run(runner())
    if remaining is None:
        console.print("[yellow]Remaining requests unknown.")
    else:
        console.print(f"Remaining NASA API requests: [bold]{remaining}[/bold]")


@app.command()
def apod() -> None:
    """Show NASA's Astronomy Picture of the Day."""

    async def runner() -> NewsCoordinator:
        settings = get_settings()
        async with _http_client(settings) as client:
            coordinator = NewsCoordinator(
                DailyPictureFetcher(client, settings), SpaceNewsFetcher(client, settings)
            )
            await coordinator.load_picture()
        return coordinator

    coordinator = asyncio.run(runner())
    picture = coordinator.picture.value
    if picture is None:
        _report_failure(coordinator.picture, "The picture of the day")
    table = Table(title=picture.title, show_header=False)
    table.add_column("Field")
    table.add_column("Value", overflow="fold")
    table.add_row("Date", picture.date)
    table.add_row("Media", picture.media_kind)
    table.add_row("URL", picture.best_image_url)
    table.add_row("Explanation", picture.explanation)
    console.print(table)


@app.command()
def rover() -> None:
    """Show the latest Mars rover photos from the past week."""

    async def runner():
        settings = get_settings()
        async with _http_client(settings) as client:
            return await MarsRoverFetcher(client, settings).fetch_latest()

    photos = asyncio.run(runner())
    if not photos:
        console.print("[yellow]No rover photos found in the past week.")
        return
    table = Table(title=f"Mars rover photos ({photos[0].earth_date})")
    table.add_column("ID")
    table.add_column("Sol")
    table.add_column("Camera")
    table.add_column("Rover")
    table.add_column("Image", overflow="fold")
    for photo in photos:
        table.add_row(str(photo.id), str(photo.sol), photo.camera.full_name, photo.rover.name, photo.image_url)
    console.print(table)


@app.command()
def news(
    topic: NewsFilter = typer.Option(NewsFilter.ALL, "--filter", "-f", help="News topic"),
    pages: int = typer.Option(1, min=1, help="Number of pages to load"),
) -> None:
    """Search astronomy news by topic."""

    async def runner() -> HomeCoordinator:
        settings = get_settings()
        async with _http_client(settings) as client:
            coordinator = HomeCoordinator(
                DailyPictureFetcher(client, settings), NewsSearchFetcher(client, settings)
            )
            await coordinator.change_filter(topic)
            if coordinator.news.value is not None:
                for _ in range(pages - 1):
                    if not await coordinator.load_more():
                        break
        return coordinator

    coordinator = asyncio.run(runner())
    if coordinator.news.value is None:
        _report_failure(coordinator.news, "News")
    if coordinator.more_error is not None:
        console.print(f"[yellow]Stopped after page {coordinator.page}: more news unavailable.")
    articles = coordinator.articles
    if not articles:
        console.print("[yellow]No articles found.")
        return
    table = Table(title=f"{topic.value} news ({len(articles)} articles)")
    table.add_column("Published")
    table.add_column("Source")
    table.add_column("Title", overflow="fold")
    table.add_column("Link", overflow="fold")
    for article in articles:
        table.add_row(
            format_timestamp(article.published_at), article.source_name, article.title, article.url
        )
    console.print(table)


@app.command("space-news")
def space_news(
    news_type: NewsType = typer.Option(NewsType.ALL, "--type", "-t", help="Content category"),
    limit: int = typer.Option(20, min=1, max=100, help="Maximum entries"),
) -> None:
    """Show the latest entries from the Spaceflight News API."""

    async def runner() -> NewsCoordinator:
        settings = get_settings()
        async with _http_client(settings) as client:
            coordinator = NewsCoordinator(
                DailyPictureFetcher(client, settings), SpaceNewsFetcher(client, settings), limit=limit
            )
            coordinator.selected_type = news_type
            await coordinator.load_news()
        return coordinator

    coordinator = asyncio.run(runner())
    if coordinator.news.value is None:
        _report_failure(coordinator.news, "Space news")
    table = Table(title=f"Space news – {news_type.value}")
    table.add_column("Published")
    table.add_column("Site")
    table.add_column("Title", overflow="fold")
    table.add_column("Summary", overflow="fold")
    for article in coordinator.articles:
        table.add_row(
            format_timestamp(article.published_at),
            article.news_site,
            article.title,
            truncate(article.summary, 120),
        )
    console.print(table)


@app.command()
def planets(name: Optional[str] = typer.Option(None, "--name", "-n", help="Show one planet")) -> None:
    """Browse the planets of the solar system."""

    async def runner() -> SolarSystemCoordinator:
        settings = get_settings()
        async with _http_client(settings) as client:
            coordinator = SolarSystemCoordinator(SolarSystemFetcher(client, settings))
            await coordinator.load_planets()
        return coordinator

    coordinator = asyncio.run(runner())
    if coordinator.planets.value is None:
        _report_failure(coordinator.planets, "Solar system data")
    if name:
        planet = coordinator.find(name)
        if planet is None:
            console.print(f"[red]Unknown planet: {name}[/red]")
            raise typer.Exit(code=1)
        table = Table(title=planet.english_name, show_header=False)
        table.add_column("Field")
        table.add_column("Value", overflow="fold")
        table.add_row("Radius", planet.formatted_radius)
        table.add_row("Gravity", planet.formatted_gravity)
        table.add_row("Mass", planet.formatted_mass)
        table.add_row("Temperature", planet.formatted_temperature)
        table.add_row("Axial tilt", f"{planet.axial_tilt}°")
        table.add_row("Moons", str(planet.moon_count))
        table.add_row("Fun fact", planet.random_fun_fact())
        console.print(table)
        return
    table = Table(title="Solar System")
    table.add_column("Planet")
    table.add_column("Radius")
    table.add_column("Gravity")
    table.add_column("Moons")
    for planet in coordinator.planets.value:
        table.add_row(planet.english_name, planet.formatted_radius, planet.formatted_gravity, str(planet.moon_count))
    console.print(table)


@obs_app.command("add")
def obs_add(
    title: str = typer.Option(..., help="Observation title"),
    description: str = typer.Option(..., "--description", "-d", help="What you observed"),
    body: CelestialBody = typer.Option(CelestialBody.EARTH, help="Celestial body"),
    custom_body: str = typer.Option("", help="Body name when --body Other"),
    category: ObservationCategory = typer.Option(ObservationCategory.OTHER, help="Category"),
    importance: ImportanceLevel = typer.Option(ImportanceLevel.MEDIUM, help="Importance"),
    image: Optional[list[Path]] = typer.Option(
        None, "--image", "-i", exists=True, dir_okay=False, readable=True, help="Photo (first is primary)"
    ),
) -> None:
    """Record a new observation."""
    draft = ObservationDraft(
        title=title,
        description=description,
        celestial_body=body,
        custom_body_name=custom_body,
        category=category,
        importance=importance,
    )
    service = _observation_service(get_settings())
    try:
        observation = service.create(draft, load_image_files(image or []))
    except ObservationValidationError as exc:
        for field, reason in exc.errors.items():
            console.print(f"[red]{field}[/red]: {reason}")
        raise typer.Exit(code=1) from exc
    console.print(
        f"[green]Saved observation[/green] {observation.id[:8]} • {observation.title} ({observation.display_name})"
    )


@obs_app.command("list")
def obs_list(
    category: Optional[ObservationCategory] = typer.Option(None, help="Filter by category"),
    importance: Optional[ImportanceLevel] = typer.Option(None, help="Filter by importance"),
    body: Optional[CelestialBody] = typer.Option(None, help="Filter by celestial body"),
) -> None:
    """List observations, newest first."""
    service = _observation_service(get_settings())
    items = service.list(ObservationFilter(category=category, importance=importance, celestial_body=body))
    if not items:
        console.print("[yellow]No observations found. Use `mycosmo obs add` to record one.")
        return
    _print_observations(items)


@obs_app.command("show")
def obs_show(observation_id: str = typer.Argument(..., help="Observation ID or prefix")) -> None:
    """Show one observation."""
    service = _observation_service(get_settings())
    observation = _find_observation(service, observation_id)
    table = Table(title=observation.title, show_header=False)
    table.add_column("Field")
    table.add_column("Value", overflow="fold")
    table.add_row("ID", observation.id)
    table.add_row("Date", observation.timestamp.strftime("%b %d, %Y"))
    table.add_row("Body", observation.display_name)
    table.add_row("Category", observation.category.value)
    table.add_row("Importance", observation.importance.value)
    table.add_row("Images", str(observation.image_count))
    table.add_row("Description", observation.description)
    console.print(table)


@obs_app.command("delete")
def obs_delete(
    observation_id: Optional[list[str]] = typer.Argument(None, help="Observation IDs or prefixes"),
    index: Optional[list[int]] = typer.Option(None, "--index", help="Row number from `obs list` (1-based)"),
) -> None:
    """Delete observations by ID or by list position."""
    service = _observation_service(get_settings())
    if index:
        current = service.list()
        invalid = [value for value in index if value < 1 or value > len(current)]
        if invalid:
            raise typer.BadParameter(f"No observation at row(s): {', '.join(map(str, invalid))}")
        removed = service.delete_at([value - 1 for value in index], current)
    elif observation_id:
        targets = [_find_observation(service, value) for value in observation_id]
        removed = service.store.delete_many(targets)
    else:
        raise typer.BadParameter("Provide observation IDs or --index.")
    console.print(f"[green]Deleted {removed} observation(s).[/green]")


def _find_observation(service: ObservationService, prefix: str) -> Observation:
    matches = [item for item in service.list() if item.id.startswith(prefix)]
    if len(matches) != 1:
        reason = "not found" if not matches else "ambiguous"
        console.print(f"[red]Observation {prefix} {reason}.[/red]")
        raise typer.Exit(code=1)
    return matches[0]


def _print_observations(items: list[Observation]) -> None:
    table = Table(title="Observations")
    table.add_column("#")
    table.add_column("ID")
    table.add_column("Date")
    table.add_column("Title")
    table.add_column("Body")
    table.add_column("Category")
    table.add_column("Importance")
    table.add_column("Images")
    for row, item in enumerate(items, start=1):
        table.add_row(
            str(row),
            item.id[:8],
            item.timestamp.strftime("%Y-%m-%d"),
            truncate(item.title, 40),
            item.display_name,
            item.category.value,
            item.importance.value,
            str(item.image_count),
        )
    console.print(table)
