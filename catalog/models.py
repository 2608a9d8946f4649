"""Canonical song records shared by catalog search and playlist importers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class SongCandidate:
    """A song that has not been placed in a playlist yet (no ``id``/``addedAt``)."""

    track_name: str
    artist_name: str
    track_id: str | None = None
    album_name: str | None = None
    artwork_url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "trackId": self.track_id,
            "trackName": self.track_name,
            "artistName": self.artist_name,
            "albumName": self.album_name,
            "artworkUrl": self.artwork_url,
        }


@dataclass(frozen=True)
class ImportResult:
    playlist_name: str
    songs: list[SongCandidate] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "playlistName": self.playlist_name,
            "songs": [song.to_dict() for song in self.songs],
            "totalTracks": len(self.songs),
        }


def clean_text(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None
