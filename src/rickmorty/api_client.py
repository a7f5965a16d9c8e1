"""Rick and Morty REST API client.

Builds endpoint URLs, walks paginated collections, validates JSON bodies into
domain models, and translates every transport failure into an ``ApiError``.
Single-item lookups are the one exception: a 404 there means "no such
resource" and is returned as ``None``.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, TypeVar

import structlog
from pydantic import BaseModel, ValidationError

from rickmorty.errors import ApiError, ErrorCode, TransportError, TransportErrorKind
from rickmorty.models import Character, Episode, Location, Page

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from rickmorty.protocols import HttpClientProtocol

log = structlog.get_logger()

DEFAULT_BASE_URL = "https://rickandmortyapi.com/api"

# How much of an unparseable body is logged for diagnostics
_BODY_PREVIEW_CHARS = 500

ModelT = TypeVar("ModelT", bound=BaseModel)
ResultT = TypeVar("ResultT")


def _translate(exc: TransportError) -> ApiError:
    if exc.kind == TransportErrorKind.NOT_FOUND:
        return ApiError(ErrorCode.NOT_FOUND, exc.message)
    # Timeouts, connection failures and bad statuses all look the same upstream
    return ApiError(ErrorCode.NETWORK_ERROR, exc.message)


class ApiClient:
    """Synchronous client for the public Rick and Morty API.

    Safe to share between threads as long as the injected HTTP capability is.
    """

    def __init__(self, http: HttpClientProtocol, base_url: str = DEFAULT_BASE_URL) -> None:
        self._http = http
        self._base_url = base_url.rstrip("/")

    # ------------------------------------------------------------------
    # Transport and parsing
    # ------------------------------------------------------------------

    def _get(self, url: str) -> str:
        try:
            return self._http.get(url)
        except TransportError as exc:
            raise _translate(exc) from exc

    def _get_optional(self, url: str) -> str | None:
        try:
            return self._http.get(url)
        except TransportError as exc:
            if exc.kind == TransportErrorKind.NOT_FOUND:
                return None
            raise _translate(exc) from exc

    def _parse(self, url: str, body: str, parse: Callable[[str], ResultT]) -> ResultT:
        try:
            return parse(body)
        except (ValidationError, ValueError) as exc:
            log.error(
                "json_parse_error",
                url=url,
                error=str(exc),
                body_prefix=body[:_BODY_PREVIEW_CHARS],
            )
            raise ApiError(ErrorCode.PARSE_ERROR, f"JSON parse error: {exc}") from exc

    def _fetch_one(self, path: str, model: type[ModelT]) -> ModelT | None:
        url = f"{self._base_url}{path}"
        body = self._get_optional(url)
        if body is None:
            log.info("resource_not_found", url=url)
            return None
        return self._parse(url, body, model.model_validate_json)

    # ------------------------------------------------------------------
    # Pagination
    # ------------------------------------------------------------------

    def fetch_all_paginated(self, endpoint: str, model: type[ModelT]) -> list[ModelT]:
        """Fetch every item of a collection endpoint by following ``info.next``.

        Pages are fetched one at a time, in order. Results keep page order and
        intra-page order. Any failure aborts the traversal; no partial list is
        ever returned.
        """
        page_model = Page[model]  # type: ignore[valid-type]
        results: list[ModelT] = []
        url: str | None = f"{self._base_url}{endpoint}"
        page_number = 1

        while url:
            body = self._get(url)
            page = self._parse(url, body, page_model.model_validate_json)
            log.debug(
                "page_fetched",
                endpoint=endpoint,
                page=page_number,
                pages=page.info.pages,
                count=page.info.count,
            )
            results.extend(page.results)
            url = page.info.next
            page_number += 1

        log.info("paginated_fetch_complete", endpoint=endpoint, items=len(results))
        return results

    # ------------------------------------------------------------------
    # Episodes
    # ------------------------------------------------------------------

    def fetch_all_episodes(self) -> list[Episode]:
        return self.fetch_all_paginated("/episode", Episode)

    def fetch_episode(self, episode_id: int) -> Episode | None:
        return self._fetch_one(f"/episode/{episode_id}", Episode)

    # ------------------------------------------------------------------
    # Characters
    # ------------------------------------------------------------------

    def fetch_characters(self, ids: Sequence[int]) -> list[Character]:
        """Fetch a batch of characters in a single request.

        The API answers a one-id batch with a bare object and larger batches
        with an array; both are normalised to a list.
        """
        if not ids:
            log.debug("characters_fetch_skipped", reason="empty_ids")
            return []

        log.info("characters_fetch", count=len(ids))
        url = f"{self._base_url}/character/{','.join(str(i) for i in ids)}"
        body = self._get(url)
        characters = self._parse(url, body, _parse_character_batch)
        log.info("characters_fetched", requested=len(ids), received=len(characters))
        return characters

    def fetch_character(self, character_id: int) -> Character | None:
        return self._fetch_one(f"/character/{character_id}", Character)

    # ------------------------------------------------------------------
    # Locations
    # ------------------------------------------------------------------

    def fetch_location(self, location_id: int) -> Location | None:
        return self._fetch_one(f"/location/{location_id}", Location)


def _parse_character_batch(body: str) -> list[Character]:
    payload = json.loads(body)
    if isinstance(payload, list):
        return [Character.model_validate(item) for item in payload]
    return [Character.model_validate(payload)]
