"""Thread-safe in-memory store for episodes and characters.

Sits between the UI and the ApiClient. Episodes are fetched once and kept for
the life of the process; characters are fetched lazily, per episode, and only
for ids not already cached. Every state change is pushed to registered
observers.

Locking: ``_observers_lock`` guards the observer registry, ``_data_lock``
guards everything else. Neither lock is held during network I/O or while
observer callbacks run.
"""

from __future__ import annotations

import random
import threading
from operator import attrgetter
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from collections.abc import Callable

    from rickmorty.models import Character, Episode
    from rickmorty.protocols import ApiClientProtocol, DataObserver

log = structlog.get_logger()

_by_name = attrgetter("name")


class DataStore:
    """Cache-aware orchestration of API fetches with observer notifications.

    ``load_*`` methods block on the network and are meant to run on worker
    threads. Queries never fetch and never notify; they are safe from any
    thread.
    """

    def __init__(
        self,
        api_client: ApiClientProtocol,
        *,
        rng: random.Random | None = None,
    ) -> None:
        self._api = api_client
        self._rng = rng if rng is not None else random.Random()

        self._observers: list[DataObserver] = []
        self._observers_lock = threading.Lock()

        self._episodes: list[Episode] = []
        self._episodes_by_id: dict[int, Episode] = {}
        self._episodes_loaded = False
        self._characters: dict[int, Character] = {}
        self._resolved_episodes: set[int] = set()
        self._data_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Observer registry
    # ------------------------------------------------------------------

    def add_observer(self, observer: DataObserver) -> None:
        with self._observers_lock:
            self._observers.append(observer)

    def remove_observer(self, observer: DataObserver) -> None:
        """Deregister ``observer``. Unknown observers are ignored."""
        with self._observers_lock:
            self._observers = [o for o in self._observers if o is not observer]

    def _notify(self, event: str, deliver: Callable[[DataObserver], None]) -> None:
        # Snapshot so callbacks may add or remove observers without deadlocking
        with self._observers_lock:
            observers = list(self._observers)
        for observer in observers:
            try:
                deliver(observer)
            except Exception:
                log.error("observer_callback_error", event=event, exc_info=True)

    def _notify_episodes_loaded(self, episodes: list[Episode]) -> None:
        self._notify("episodes_loaded", lambda o: o.on_episodes_loaded(episodes))

    def _notify_characters_loaded(self, episode_id: int, characters: list[Character]) -> None:
        self._notify(
            "characters_loaded",
            lambda o: o.on_characters_loaded(episode_id, characters),
        )

    def _notify_loading_state_changed(self, is_loading: bool) -> None:
        self._notify("loading_state_changed", lambda o: o.on_loading_state_changed(is_loading))

    def _notify_error(self, message: str) -> None:
        self._notify("error", lambda o: o.on_error(message))

    # ------------------------------------------------------------------
    # Loads
    # ------------------------------------------------------------------

    def load_all_episodes(self) -> None:
        """Fetch all episodes once; later calls replay the cached list.

        On failure the store stays unloaded, so calling again retries.
        """
        with self._data_lock:
            cached = list(self._episodes) if self._episodes_loaded else None

        if cached is not None:
            log.debug("episodes_cache_hit", count=len(cached))
            self._notify_episodes_loaded(cached)
            return

        self._notify_loading_state_changed(True)
        try:
            episodes = self._api.fetch_all_episodes()
        except Exception as exc:
            log.error("episodes_load_failed", error=str(exc))
            self._notify_loading_state_changed(False)
            self._notify_error(str(exc))
            return

        with self._data_lock:
            self._episodes = list(episodes)
            self._episodes_by_id = {e.id: e for e in self._episodes}
            self._episodes_loaded = True
            snapshot = list(self._episodes)

        log.info("episodes_loaded", count=len(snapshot))
        self._notify_loading_state_changed(False)
        self._notify_episodes_loaded(snapshot)

    def load_characters_for_episode(self, episode_id: int) -> None:
        """Resolve every character of one episode, fetching only uncached ids.

        Requires episodes to be loaded first; an unknown episode id is
        reported through ``on_error``. Concurrent calls for the same
        unresolved episode may each issue the batch fetch.
        """
        with self._data_lock:
            cached = (
                self._characters_for_episode_locked(episode_id)
                if episode_id in self._resolved_episodes
                else None
            )

        if cached is not None:
            log.debug("episode_characters_cache_hit", episode_id=episode_id, count=len(cached))
            self._notify_characters_loaded(episode_id, cached)
            return

        self._notify_loading_state_changed(True)
        try:
            with self._data_lock:
                episode = self._episodes_by_id.get(episode_id)
                if episode is None:
                    raise LookupError(f"Episode not found: {episode_id}")
                # An episode may repeat a link; each id is requested once
                missing = [
                    cid
                    for cid in dict.fromkeys(episode.character_ids)
                    if cid not in self._characters
                ]

            log.info(
                "episode_characters_resolve",
                episode_id=episode_id,
                referenced=len(episode.character_ids),
                missing=len(missing),
            )

            if missing:
                fetched = self._api.fetch_characters(missing)
                with self._data_lock:
                    for character in fetched:
                        self._characters[character.id] = character

            with self._data_lock:
                self._resolved_episodes.add(episode_id)
                characters = self._characters_for_episode_locked(episode_id)
        except Exception as exc:
            log.error("episode_characters_load_failed", episode_id=episode_id, error=str(exc))
            self._notify_loading_state_changed(False)
            self._notify_error(str(exc))
            return

        self._notify_loading_state_changed(False)
        self._notify_characters_loaded(episode_id, characters)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _characters_for_episode_locked(self, episode_id: int) -> list[Character]:
        """Cached characters of an episode, sorted by name. Caller holds ``_data_lock``."""
        episode = self._episodes_by_id.get(episode_id)
        if episode is None:
            return []
        characters = [
            self._characters[cid] for cid in episode.character_ids if cid in self._characters
        ]
        return sorted(characters, key=_by_name)

    def get_episodes(self) -> list[Episode]:
        with self._data_lock:
            return list(self._episodes)

    def get_episode(self, episode_id: int) -> Episode | None:
        with self._data_lock:
            return self._episodes_by_id.get(episode_id)

    def get_characters_for_episode(self, episode_id: int) -> list[Character]:
        """Already-cached characters of an episode, sorted by name. Never fetches."""
        with self._data_lock:
            return self._characters_for_episode_locked(episode_id)

    def get_character(self, character_id: int) -> Character | None:
        with self._data_lock:
            return self._characters.get(character_id)

    def get_all_cached_characters(self) -> list[Character]:
        with self._data_lock:
            return list(self._characters.values())

    def get_random_cached_character(self) -> Character | None:
        with self._data_lock:
            if not self._characters:
                return None
            return self._rng.choice(list(self._characters.values()))

    def get_cached_character_count(self) -> int:
        with self._data_lock:
            return len(self._characters)

    def are_episodes_loaded(self) -> bool:
        with self._data_lock:
            return self._episodes_loaded

    def are_characters_loaded_for_episode(self, episode_id: int) -> bool:
        with self._data_lock:
            return episode_id in self._resolved_episodes
