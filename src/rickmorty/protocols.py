"""Protocol interfaces for swappable components.

ApiClient and DataStore reference these protocols, not the concrete
implementations. This allows:
- Tests to drive the client through an in-memory route table instead of httpx
- The store to run against any client exposing the same fetch operations
- Any consumer (console, GUI bridge, test mock) to observe the store
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Sequence

    from rickmorty.models import Character, Episode, Location


class HttpClientProtocol(Protocol):
    """Blocking GET capability.

    Returns the response body, or raises ``TransportError`` tagged as
    not-found, timeout, network error or invalid response.
    """

    def get(self, url: str) -> str: ...


class ApiClientProtocol(Protocol):
    """Interface for the Rick and Morty API client."""

    def fetch_all_episodes(self) -> list[Episode]: ...

    def fetch_episode(self, episode_id: int) -> Episode | None: ...

    def fetch_characters(self, ids: Sequence[int]) -> list[Character]: ...

    def fetch_character(self, character_id: int) -> Character | None: ...

    def fetch_location(self, location_id: int) -> Location | None: ...


class DataObserver(Protocol):
    """Receives DataStore events.

    Callbacks run synchronously on whichever thread performed the load.
    Marshalling to a UI thread is the observer's own concern.
    """

    def on_episodes_loaded(self, episodes: list[Episode]) -> None: ...

    def on_characters_loaded(self, episode_id: int, characters: list[Character]) -> None: ...

    def on_loading_state_changed(self, is_loading: bool) -> None: ...

    def on_error(self, message: str) -> None: ...
