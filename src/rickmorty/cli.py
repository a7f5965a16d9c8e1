"""Console front-end for browsing episodes and characters.

Responsibilities (and nothing more):
- Configure structlog
- Build AppState via the lifespan context manager
- Run store loads on worker threads and print what observers receive
"""

from __future__ import annotations

import logging
import sys
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING

import click
import structlog

from rickmorty import __version__
from rickmorty.config import Settings
from rickmorty.errors import ApiError
from rickmorty.state import lifespan

if TYPE_CHECKING:
    from rickmorty.models import Character, Episode

log = structlog.get_logger()


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(settings: Settings) -> None:
    """Route structlog to stderr at ``settings.logging.level``.

    ``text`` is for an interactive terminal: short wall-clock timestamps and
    colour only when stderr is a tty. ``json`` emits one object per line with
    ISO timestamps and structured tracebacks, for piping into a collector.
    """
    log_level = logging.getLevelNamesMapping()[settings.logging.level]

    processors: list[structlog.types.Processor] = [structlog.processors.add_log_level]
    if settings.logging.format == "json":
        processors += [
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            # observer_callback_error is logged with exc_info
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors += [
            structlog.processors.TimeStamper(fmt="%H:%M:%S", utc=False),
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        # stdout carries command output only
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


# ---------------------------------------------------------------------------
# Observer
# ---------------------------------------------------------------------------


class CollectingObserver:
    """DataObserver that records events from any number of worker threads."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.episodes: list[Episode] = []
        self.characters: dict[int, list[Character]] = {}
        self.errors: list[str] = []

    def on_episodes_loaded(self, episodes: list[Episode]) -> None:
        with self._lock:
            self.episodes = episodes

    def on_characters_loaded(self, episode_id: int, characters: list[Character]) -> None:
        with self._lock:
            self.characters[episode_id] = characters

    def on_loading_state_changed(self, is_loading: bool) -> None:
        log.debug("loading_state_changed", is_loading=is_loading)

    def on_error(self, message: str) -> None:
        with self._lock:
            self.errors.append(message)

    def raise_for_errors(self) -> None:
        with self._lock:
            if self.errors:
                raise click.ClickException("; ".join(self.errors))


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------


def format_episode(episode: Episode) -> str:
    return f"{episode.id:>3}  {episode.episode_code}  {episode.name}  ({episode.air_date})"


def format_character(character: Character) -> str:
    line = f"{character.id:>4}  {character.name} [{character.status}] {character.species}"
    if character.type:
        line += f" ({character.type})"
    return line


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(__version__, prog_name="rickmorty")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Override logging.level from the environment or rickmorty.yaml.",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str | None) -> None:
    """Browse Rick and Morty episodes and characters."""
    settings = Settings(logging={"level": log_level.upper()}) if log_level else Settings()
    _setup_logging(settings)
    ctx.obj = settings


@cli.command("episodes")
@click.option("--season", type=int, default=None, help="Only list this season.")
@click.pass_obj
def episodes_cmd(settings: Settings, season: int | None) -> None:
    """List all episodes."""
    observer = CollectingObserver()
    with lifespan(settings) as state:
        state.store.add_observer(observer)
        state.store.load_all_episodes()
    observer.raise_for_errors()

    for episode in observer.episodes:
        if season is None or episode.season == season:
            click.echo(format_episode(episode))


@cli.command("characters")
@click.argument("episode_id", type=int)
@click.pass_obj
def characters_cmd(settings: Settings, episode_id: int) -> None:
    """List the characters appearing in EPISODE_ID, sorted by name."""
    observer = CollectingObserver()
    with lifespan(settings) as state:
        state.store.add_observer(observer)
        state.store.load_all_episodes()
        observer.raise_for_errors()
        state.store.load_characters_for_episode(episode_id)
        episode = state.store.get_episode(episode_id)
    observer.raise_for_errors()

    if episode is not None:
        click.echo(format_episode(episode))
    for character in observer.characters.get(episode_id, []):
        click.echo(format_character(character))


@cli.command("character")
@click.argument("character_id", type=int)
@click.pass_obj
def character_cmd(settings: Settings, character_id: int) -> None:
    """Show a single character."""
    with lifespan(settings) as state:
        try:
            character = state.api_client.fetch_character(character_id)
        except ApiError as exc:
            raise click.ClickException(exc.message) from exc

    if character is None:
        raise click.ClickException(f"Character not found: {character_id}")
    click.echo(format_character(character))
    click.echo(f"      origin: {character.origin.name}")
    click.echo(f"      location: {character.location.name}")
    click.echo(f"      gender: {character.gender}")
    click.echo(f"      episodes: {len(character.episode_ids)}")


@cli.command("location")
@click.argument("location_id", type=int)
@click.pass_obj
def location_cmd(settings: Settings, location_id: int) -> None:
    """Show a single location."""
    with lifespan(settings) as state:
        try:
            location = state.api_client.fetch_location(location_id)
        except ApiError as exc:
            raise click.ClickException(exc.message) from exc

    if location is None:
        raise click.ClickException(f"Location not found: {location_id}")
    click.echo(f"{location.id:>3}  {location.name}")
    click.echo(f"     type: {location.type}")
    click.echo(f"     dimension: {location.dimension}")
    click.echo(f"     residents: {len(location.resident_ids)}")


@cli.command("random")
@click.argument("episode_ids", type=int, nargs=-1, required=True)
@click.pass_obj
def random_cmd(settings: Settings, episode_ids: tuple[int, ...]) -> None:
    """Load characters for EPISODE_IDS concurrently and show one at random."""
    observer = CollectingObserver()
    with lifespan(settings) as state:
        state.store.add_observer(observer)
        state.store.load_all_episodes()
        observer.raise_for_errors()

        with ThreadPoolExecutor(max_workers=settings.workers.max_workers) as pool:
            list(pool.map(state.store.load_characters_for_episode, episode_ids))

        character = state.store.get_random_cached_character()
        cached = state.store.get_cached_character_count()
    observer.raise_for_errors()

    if character is None:
        raise click.ClickException("No characters cached")
    click.echo(format_character(character))
    click.echo(f"      picked from {cached} cached characters")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
