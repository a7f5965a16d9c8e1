"""Application state container.

AppState is created once at startup (inside the ``lifespan`` context manager)
and handed to every CLI command. The lifespan owns the httpx client, so the
connection pool is released when the command finishes.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from rickmorty.api_client import ApiClient
from rickmorty.fetcher import Fetcher, build_http_client
from rickmorty.store import DataStore

if TYPE_CHECKING:
    from collections.abc import Iterator

    import httpx

    from rickmorty.config import Settings

log = structlog.get_logger()


@dataclass
class AppState:
    """Holds all shared runtime state."""

    settings: Settings
    http_client: httpx.Client
    fetcher: Fetcher
    api_client: ApiClient
    store: DataStore


@contextmanager
def lifespan(settings: Settings) -> Iterator[AppState]:
    """Create and tear down all shared resources for one run."""
    http_client = build_http_client(settings.http)
    fetcher = Fetcher(http_client)
    api_client = ApiClient(fetcher, base_url=settings.api.base_url)
    state = AppState(
        settings=settings,
        http_client=http_client,
        fetcher=fetcher,
        api_client=api_client,
        store=DataStore(api_client),
    )
    log.info("app_started", base_url=settings.api.base_url)
    try:
        yield state
    finally:
        http_client.close()
        log.info("app_stopped")
