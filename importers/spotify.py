from __future__ import annotations

import json
import re
import urllib.parse
from typing import Any

from catalog.models import SongCandidate, clean_text

from .base import (
    ExtractionStrategy,
    PlaylistPageImporter,
    StrategyResult,
    find_script_payload,
    synthesize_track_id,
    walk_path,
)
from .references import extract_spotify_playlist_id

_NEXT_DATA_RE = re.compile(r'<script[^>]+id="__NEXT_DATA__"[^>]*>(.+?)</script>', re.DOTALL)
_ENTITY_PATH = ("props", "pageProps", "state", "data", "entity")


class NextDataStrategy(ExtractionStrategy):
    """Reads the playlist entity out of the embed page's ``__NEXT_DATA__`` blob."""

    name = "spotify_next_data"

    def extract(self, page: str) -> StrategyResult:
        payload = find_script_payload(page, _NEXT_DATA_RE)
        if payload is None:
            return StrategyResult()
        entity = walk_path(json.loads(payload), _ENTITY_PATH)
        if not isinstance(entity, dict):
            return StrategyResult()

        songs = []
        for track in entity.get("trackList") or []:
            song = _song_from_track(track)
            if song is not None:
                songs.append(song)
        return StrategyResult(songs=songs, playlist_name=clean_text(entity.get("name")))


def _song_from_track(track: Any) -> SongCandidate | None:
    if not isinstance(track, dict):
        return None
    uri = clean_text(track.get("uri"))
    title = clean_text(track.get("title"))
    subtitle = clean_text(track.get("subtitle"))
    if not uri or not title or not subtitle:
        return None
    track_id = clean_text(track.get("uid")) or clean_text(uri.split(":")[-1]) or synthesize_track_id("spotify")
    return SongCandidate(
        track_name=title,
        artist_name=subtitle,
        track_id=track_id,
        artwork_url=_first_image_url(track.get("album")) or _first_image_url(track),
    )


def _first_image_url(container: Any) -> str | None:
    if not isinstance(container, dict):
        return None
    images = container.get("images") or []
    if images and isinstance(images[0], dict):
        return clean_text(images[0].get("url"))
    return None


class SpotifyEmbedImporter(PlaylistPageImporter):
    PLATFORM_NAME = "Spotify"
    _EMBED_URL = "https://open.spotify.com/embed/playlist/{playlist_id}"

    def parse_reference(self, text: str) -> str:
        return extract_spotify_playlist_id(text)

    def embed_url(self, reference: str) -> str:
        return self._EMBED_URL.format(playlist_id=urllib.parse.quote(reference, safe=""))

    def default_strategies(self) -> list[ExtractionStrategy]:
        return [NextDataStrategy()]
