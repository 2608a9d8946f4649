from __future__ import annotations

import html
import json
import logging
import re
import urllib.parse
from typing import Any, Iterator

from catalog.models import SongCandidate, clean_text
from config import settings
from engine.events import log_event

from .base import (
    UNKNOWN_ARTIST,
    ExtractionStrategy,
    PlaylistPageImporter,
    StrategyResult,
    find_script_payload,
    synthesize_track_id,
)
from .references import AppleMusicReference, extract_apple_music_reference

_LINKED_DATA_RE = re.compile(
    r'<script[^>]*type="application/ld\+json"[^>]*>\s*(\{.*?\})\s*</script>', re.DOTALL
)
_PAGE_TITLE_RE = re.compile(r"<title>([^<]+)</title>")
_TRACK_TITLE_RE = re.compile(r'data-testid="track-title"[^>]*>([^<]+)<')
_TRACK_ARTIST_RE = re.compile(r'data-testid="track-subtitle"[^>]*>([^<]+)<')
_SERVER_DATA_RE = re.compile(r'<script[^>]+id="serialized-server-data"[^>]*>([^<]+)</script>')
_TITLE_SUFFIXES = (" - Apple Music", " on Apple Music")
_ARTWORK_SIZE = "200"


class LinkedDataStrategy(ExtractionStrategy):
    """Reads the schema.org ``MusicPlaylist`` document embedded as JSON-LD."""

    name = "apple_linked_data"

    def extract(self, page: str) -> StrategyResult:
        document = None
        for match in _LINKED_DATA_RE.finditer(page or ""):
            try:
                candidate = json.loads(match.group(1))
            except (ValueError, RecursionError):
                log_event(logging.INFO, "linked_data_block_skipped", strategy=self.name)
                continue
            if isinstance(candidate, dict) and isinstance(candidate.get("track"), list):
                document = candidate
                break
            if document is None and isinstance(candidate, dict):
                document = candidate
        if document is None:
            return StrategyResult()

        songs = []
        for track in document.get("track") or []:
            song = _song_from_recording(track)
            if song is not None:
                songs.append(song)
        return StrategyResult(songs=songs, playlist_name=clean_text(document.get("name")))


def _song_from_recording(track: Any) -> SongCandidate | None:
    if not isinstance(track, dict):
        return None
    title = clean_text(track.get("name"))
    url = clean_text(track.get("url")) or clean_text(track.get("@id"))
    if not title or not url:
        return None
    return SongCandidate(
        track_name=title,
        artist_name=_artist_names(track.get("byArtist")) or UNKNOWN_ARTIST,
        track_id=_track_id_from_url(url) or synthesize_track_id("apple"),
    )


def _artist_names(by_artist: Any) -> str | None:
    if isinstance(by_artist, dict):
        return clean_text(by_artist.get("name"))
    if isinstance(by_artist, list):
        names = [clean_text(entry.get("name")) for entry in by_artist if isinstance(entry, dict)]
        return ", ".join(name for name in names if name) or None
    return None


def _track_id_from_url(url: str) -> str | None:
    parsed = urllib.parse.urlparse(url)
    song_param = urllib.parse.parse_qs(parsed.query).get("i")
    if song_param and song_param[0].isdigit():
        return song_param[0]
    tail = parsed.path.rstrip("/").rsplit("/", 1)[-1]
    return tail if tail.isdigit() else None


class TrackAttributeStrategy(ExtractionStrategy):
    """Pairs ``track-title`` and ``track-subtitle`` nodes by position."""

    name = "apple_track_attributes"

    def extract(self, page: str) -> StrategyResult:
        page = page or ""
        playlist_name = None
        title_match = _PAGE_TITLE_RE.search(page)
        if title_match:
            playlist_name = html.unescape(title_match.group(1))
            for suffix in _TITLE_SUFFIXES:
                playlist_name = playlist_name.replace(suffix, "")
            playlist_name = clean_text(playlist_name)

        titles = [html.unescape(text).strip() for text in _TRACK_TITLE_RE.findall(page)]
        artists = [html.unescape(text).strip() for text in _TRACK_ARTIST_RE.findall(page)]

        songs = []
        for index, title in enumerate(titles):
            if not title:
                continue
            artist = artists[index] if index < len(artists) else ""
            songs.append(
                SongCandidate(
                    track_name=title,
                    artist_name=artist or UNKNOWN_ARTIST,
                    track_id=synthesize_track_id("apple"),
                )
            )
        return StrategyResult(songs=songs, playlist_name=playlist_name)


class ServerStateStrategy(ExtractionStrategy):
    """Searches the serialized server state for ``songs`` resources at any position."""

    name = "apple_server_state"

    def __init__(self, max_depth: int = settings.STATE_TREE_MAX_DEPTH) -> None:
        self.max_depth = max_depth

    def extract(self, page: str) -> StrategyResult:
        payload = find_script_payload(page, _SERVER_DATA_RE)
        if payload is None:
            return StrategyResult()
        state = json.loads(payload)

        songs = []
        for node in find_song_nodes(state, self.max_depth):
            song = _song_from_resource(node)
            if song is not None:
                songs.append(song)
        return StrategyResult(songs=songs)


def find_song_nodes(node: Any, max_depth: int, depth: int = 0) -> Iterator[dict[str, Any]]:
    """Yield ``songs`` resources in pre-order, never looking deeper than ``max_depth``."""
    if depth > max_depth:
        return
    if isinstance(node, list):
        for item in node:
            yield from find_song_nodes(item, max_depth, depth + 1)
    elif isinstance(node, dict):
        if node.get("type") == "songs" and isinstance(node.get("attributes"), dict):
            yield node
            return
        for value in node.values():
            yield from find_song_nodes(value, max_depth, depth + 1)


def _song_from_resource(node: dict[str, Any]) -> SongCandidate | None:
    attributes = node["attributes"]
    title = clean_text(attributes.get("name"))
    artist = clean_text(attributes.get("artistName"))
    if not title or not artist:
        return None
    artwork = attributes.get("artwork")
    artwork_url = clean_text(artwork.get("url")) if isinstance(artwork, dict) else None
    if artwork_url:
        artwork_url = artwork_url.replace("{w}", _ARTWORK_SIZE).replace("{h}", _ARTWORK_SIZE)
    return SongCandidate(
        track_name=title,
        artist_name=artist,
        track_id=clean_text(node.get("id")) or synthesize_track_id("apple"),
        album_name=clean_text(attributes.get("albumName")),
        artwork_url=artwork_url,
    )


class AppleMusicEmbedImporter(PlaylistPageImporter):
    PLATFORM_NAME = "Apple Music"
    _EMBED_URL = "https://embed.music.apple.com/{storefront}/playlist/playlist/{playlist_id}"

    def parse_reference(self, text: str) -> AppleMusicReference:
        return extract_apple_music_reference(text)

    def embed_url(self, reference: AppleMusicReference) -> str:
        return self._EMBED_URL.format(
            storefront=urllib.parse.quote(reference.storefront, safe=""),
            playlist_id=urllib.parse.quote(reference.playlist_id, safe=""),
        )

    def default_strategies(self) -> list[ExtractionStrategy]:
        return [LinkedDataStrategy(), TrackAttributeStrategy(), ServerStateStrategy()]
