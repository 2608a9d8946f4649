"""iTunes-backed catalog search and the shared outbound HTTP primitive."""

from __future__ import annotations

import logging
from typing import Any, Iterator

import requests

from catalog.models import SongCandidate, clean_text
from config import settings
from engine.errors import InvalidInputError, UpstreamUnavailableError
from engine.events import log_event


class CatalogClient:
    """Searches the iTunes catalog and fetches third-party pages as text.

    Every call is a single attempt. Failures surface as
    ``UpstreamUnavailableError``; messaging is left to the caller.
    """

    def __init__(
        self,
        *,
        search_url: str = settings.ITUNES_SEARCH_URL,
        limit: int = settings.SEARCH_RESULT_LIMIT,
        timeout_sec: float = settings.HTTP_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ) -> None:
        self.search_url = search_url
        self.limit = limit
        self.timeout_sec = timeout_sec
        self.session = session or requests.Session()

    def _get(self, url: str, *, params: dict[str, Any] | None = None, headers: dict[str, str] | None = None):
        try:
            response = self.session.get(url, params=params, headers=headers, timeout=self.timeout_sec)
        except requests.RequestException as exc:
            log_event(logging.WARNING, "upstream_request_failed", url=url, error=str(exc))
            raise UpstreamUnavailableError(f"Request to {url} failed: {exc}") from exc
        if not 200 <= response.status_code < 300:
            log_event(logging.WARNING, "upstream_bad_status", url=url, status=response.status_code)
            raise UpstreamUnavailableError(f"Upstream returned HTTP {response.status_code} for {url}")
        return response

    def fetch_text(self, url: str, headers: dict[str, str] | None = None) -> str:
        """GET ``url`` and return the body as text."""
        return self._get(url, headers=headers).text

    def search(self, query: str) -> list[SongCandidate]:
        """Return up to ``limit`` songs in the catalog's own relevance order."""
        term = (query or "").strip()
        if not term:
            raise InvalidInputError("Search query is required")
        if len(term) > settings.MAX_QUERY_LENGTH:
            raise InvalidInputError(f"Search query must be at most {settings.MAX_QUERY_LENGTH} characters")

        response = self._get(
            self.search_url,
            params={"term": term, "media": "music", "entity": "song", "limit": self.limit},
        )
        try:
            payload = response.json()
        except ValueError as exc:
            log_event(logging.WARNING, "catalog_search_failed", query=term, error=str(exc))
            raise UpstreamUnavailableError("Catalog returned an unreadable response") from exc
        if not isinstance(payload, dict):
            raise UpstreamUnavailableError("Catalog returned an unexpected response")

        return list(_iter_songs(payload.get("results") or [], self.limit))


def _iter_songs(results: list[Any], limit: int) -> Iterator[SongCandidate]:
    emitted = 0
    for raw in results:
        if emitted >= limit:
            return
        if not isinstance(raw, dict):
            continue
        track_name = clean_text(raw.get("trackName"))
        artist_name = clean_text(raw.get("artistName"))
        if not track_name or not artist_name:
            continue
        track_id = raw.get("trackId")
        yield SongCandidate(
            track_name=track_name,
            artist_name=artist_name,
            track_id=str(track_id) if track_id is not None else None,
            album_name=clean_text(raw.get("collectionName")),
            artwork_url=_artwork_url(raw),
        )
        emitted += 1


def _artwork_url(raw: dict[str, Any]) -> str | None:
    large = clean_text(raw.get("artworkUrl100"))
    if large:
        return large.replace("100x100", "200x200")
    return clean_text(raw.get("artworkUrl60"))
