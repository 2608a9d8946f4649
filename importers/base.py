from __future__ import annotations

import logging
import re
import secrets
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Iterable, Sequence

from catalog.client import CatalogClient
from catalog.models import ImportResult, SongCandidate
from config import settings
from engine.errors import NoSongsFoundError
from engine.events import log_event

UNKNOWN_ARTIST = "Unknown Artist"

# Parse failures a strategy may hit on markup it does not recognize.
# RecursionError comes from json.loads on pathologically nested payloads.
_STRATEGY_ERRORS = (ValueError, TypeError, KeyError, AttributeError, RecursionError)


@dataclass(frozen=True)
class StrategyResult:
    songs: list[SongCandidate] = field(default_factory=list)
    playlist_name: str | None = None


class ExtractionStrategy(ABC):
    name = "strategy"

    @abstractmethod
    def extract(self, page: str) -> StrategyResult:
        """Recover songs (and optionally a playlist name) from raw page text."""
        raise NotImplementedError


class PlaylistPageImporter(ABC):
    """Imports a shared playlist by scraping the platform's embed page.

    The reference is validated before any request is made. The page is then
    fetched once and handed to ``strategies`` in order until one of them
    yields songs.
    """

    PLATFORM_NAME = "Playlist"

    def __init__(self, client: CatalogClient, strategies: Iterable[ExtractionStrategy] | None = None) -> None:
        self.client = client
        self.strategies = list(strategies) if strategies is not None else self.default_strategies()

    @abstractmethod
    def parse_reference(self, text: str) -> Any:
        raise NotImplementedError

    @abstractmethod
    def embed_url(self, reference: Any) -> str:
        raise NotImplementedError

    @abstractmethod
    def default_strategies(self) -> list[ExtractionStrategy]:
        raise NotImplementedError

    @property
    def default_playlist_name(self) -> str:
        return f"{self.PLATFORM_NAME} Playlist"

    def import_playlist(self, text: str) -> ImportResult:
        reference = self.parse_reference(text)
        url = self.embed_url(reference)
        log_event(logging.INFO, "import_started", platform=self.PLATFORM_NAME, url=url)

        page = self.client.fetch_text(url, headers=browser_headers())
        result = run_strategy_chain(
            self.strategies,
            page,
            default_name=self.default_playlist_name,
            platform=self.PLATFORM_NAME,
        )

        log_event(
            logging.INFO,
            "import_completed",
            platform=self.PLATFORM_NAME,
            url=url,
            playlist_name=result.playlist_name,
            tracks_discovered=len(result.songs),
        )
        return result


def browser_headers() -> dict[str, str]:
    return {
        "User-Agent": settings.BROWSER_USER_AGENT,
        "Accept": settings.BROWSER_ACCEPT,
    }


def run_strategy_chain(
    strategies: Sequence[ExtractionStrategy],
    page: str,
    *,
    default_name: str,
    platform: str | None = None,
) -> ImportResult:
    """Try ``strategies`` in order and return the first non-empty song list.

    A strategy that raises on unexpected markup counts as empty. The playlist
    name is the last one reported by any strategy that ran.
    """
    playlist_name = None
    for strategy in strategies:
        try:
            outcome = strategy.extract(page)
        except _STRATEGY_ERRORS as exc:
            log_event(
                logging.WARNING,
                "import_strategy_failed",
                platform=platform,
                strategy=strategy.name,
                error=str(exc),
            )
            continue
        if outcome.playlist_name:
            playlist_name = outcome.playlist_name
        if outcome.songs:
            log_event(
                logging.INFO,
                "import_strategy_matched",
                platform=platform,
                strategy=strategy.name,
                tracks=len(outcome.songs),
            )
            return ImportResult(playlist_name=playlist_name or default_name, songs=list(outcome.songs))
        log_event(logging.INFO, "import_strategy_empty", platform=platform, strategy=strategy.name)

    raise NoSongsFoundError(
        "Could not find any songs in this playlist. Please make sure the playlist is public."
    )


def synthesize_track_id(prefix: str) -> str:
    # Not reproducible: re-importing the same playlist yields new ids.
    return f"{prefix}-{int(time.time() * 1000)}-{secrets.token_hex(4)}"


def find_script_payload(page: str, pattern: re.Pattern[str]) -> str | None:
    match = pattern.search(page or "")
    if not match:
        return None
    return match.group(1)


def walk_path(obj: Any, path: Sequence[str]) -> Any:
    node = obj
    for key in path:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node


def preview_songs(songs: Sequence[SongCandidate], limit: int = settings.IMPORT_PREVIEW_LIMIT) -> tuple[list[SongCandidate], int]:
    """Split songs into the shown head and the count of songs left out."""
    shown = list(songs[: max(0, limit)])
    return shown, len(songs) - len(shown)
