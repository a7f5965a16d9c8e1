"""HTTP capability backed by httpx.

All network I/O goes through a single Fetcher instance shared by every worker
thread. The Fetcher receives an httpx.Client via constructor injection; the
application lifespan owns the client lifecycle.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import structlog

from rickmorty.errors import TransportError, TransportErrorKind

if TYPE_CHECKING:
    from rickmorty.config import HttpSettings

log = structlog.get_logger()


def build_http_client(settings: HttpSettings) -> httpx.Client:
    """Create the shared httpx client. Called once at startup."""
    return httpx.Client(
        follow_redirects=settings.follow_redirects,
        timeout=httpx.Timeout(settings.timeout_seconds),
        headers={"User-Agent": settings.user_agent},
        limits=httpx.Limits(
            max_connections=10,
            max_keepalive_connections=5,
        ),
    )


class Fetcher:
    """Blocking GET implementing HttpClientProtocol."""

    def __init__(self, client: httpx.Client) -> None:
        self._client = client

    def get(self, url: str) -> str:
        """Fetch ``url`` and return the body text.

        Raises TransportError on timeouts, network errors and non-2xx
        responses. 404 is reported separately so callers can treat it as
        "no such resource".
        """
        log.debug("http_get", url=url)
        try:
            response = self._client.get(url)
        except httpx.TimeoutException as exc:
            log.warning("http_get_failed", url=url, reason="timeout")
            raise TransportError(
                TransportErrorKind.TIMEOUT,
                f"HTTP request timed out: {exc}",
            ) from exc
        except httpx.HTTPError as exc:
            log.warning("http_get_failed", url=url, reason="network", error=str(exc))
            raise TransportError(
                TransportErrorKind.NETWORK_ERROR,
                f"HTTP request failed: {exc}",
            ) from exc

        if response.status_code == 404:
            log.warning("http_not_found", url=url)
            raise TransportError(TransportErrorKind.NOT_FOUND, "Resource not found", 404)

        if not response.is_success:
            log.error("http_get_failed", url=url, status_code=response.status_code)
            raise TransportError(
                TransportErrorKind.INVALID_RESPONSE,
                f"HTTP error: {response.status_code}",
                response.status_code,
            )

        log.debug(
            "http_get_complete",
            url=url,
            status_code=response.status_code,
            content_length=len(response.text),
        )
        return response.text
