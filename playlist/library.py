"""Playlist operations on top of the flat playlist store."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping
from uuid import uuid4

from catalog.models import SongCandidate, clean_text
from db.playlist_store import JSONPlaylistStore
from engine.errors import InvalidInputError, PlaylistNotFoundError, SongNotFoundError
from engine.events import log_event
from importers.base import synthesize_track_id


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _find_playlist(playlists: list[dict[str, Any]], playlist_id: str) -> dict[str, Any]:
    for playlist in playlists:
        if playlist.get("id") == playlist_id:
            return playlist
    raise PlaylistNotFoundError("Playlist not found")


def _song_fields(source: SongCandidate | Mapping[str, Any]) -> dict[str, Any]:
    data = source.to_dict() if isinstance(source, SongCandidate) else dict(source or {})
    track_name = clean_text(data.get("trackName"))
    artist_name = clean_text(data.get("artistName"))
    if not track_name or not artist_name:
        raise InvalidInputError("Track name and artist are required")
    track_id = data.get("trackId")
    if isinstance(track_id, str):
        track_id = clean_text(track_id)
    return {
        "trackId": track_id,
        "trackName": track_name,
        "artistName": artist_name,
        "albumName": clean_text(data.get("albumName")),
        "artworkUrl": clean_text(data.get("artworkUrl")),
    }


def _stamp(fields: dict[str, Any]) -> dict[str, Any]:
    return {"id": str(uuid4()), **fields, "addedAt": _utc_now()}


class PlaylistLibrary:
    """Create, browse and edit playlists.

    Each mutating call is one read-modify-write cycle over the whole store.
    Song order is insertion order and is never changed here.
    """

    def __init__(self, store: JSONPlaylistStore) -> None:
        self.store = store

    def list_playlists(self) -> list[dict[str, Any]]:
        return [
            {
                "id": playlist.get("id"),
                "name": playlist.get("name"),
                "songCount": len(playlist.get("songs") or []),
                "createdAt": playlist.get("createdAt"),
            }
            for playlist in self.store.read_all()
        ]

    def create_playlist(self, name: str | None) -> dict[str, Any]:
        cleaned = clean_text(name)
        if not cleaned:
            raise InvalidInputError("Playlist name is required")
        playlists = self.store.read_all()
        playlist = {"id": str(uuid4()), "name": cleaned, "songs": [], "createdAt": _utc_now()}
        playlists.append(playlist)
        self.store.write_all(playlists)
        logging.info("Playlist created id=%s name=%s", playlist["id"], cleaned)
        return playlist

    def get_playlist(self, playlist_id: str) -> dict[str, Any]:
        return _find_playlist(self.store.read_all(), playlist_id)

    def delete_playlist(self, playlist_id: str) -> None:
        playlists = self.store.read_all()
        playlist = _find_playlist(playlists, playlist_id)
        playlists.remove(playlist)
        self.store.write_all(playlists)
        logging.info("Playlist deleted id=%s songs=%d", playlist_id, len(playlist.get("songs") or []))

    def add_song(self, playlist_id: str, song: SongCandidate | Mapping[str, Any]) -> dict[str, Any]:
        fields = _song_fields(song)
        playlists = self.store.read_all()
        playlist = _find_playlist(playlists, playlist_id)
        record = _stamp(fields)
        playlist.setdefault("songs", []).append(record)
        self.store.write_all(playlists)
        return record

    def bulk_add_songs(
        self,
        playlist_id: str,
        songs: Iterable[SongCandidate | Mapping[str, Any]] | None,
    ) -> list[dict[str, Any]]:
        """Append ``songs`` in order; nothing is written unless every entry is valid."""
        entries = list(songs or [])
        if not entries:
            raise InvalidInputError("Songs array is required")
        prepared = []
        for index, entry in enumerate(entries):
            try:
                fields = _song_fields(entry)
            except InvalidInputError as exc:
                raise InvalidInputError(f"Song {index}: {exc}") from exc
            if fields["trackId"] in (None, ""):
                fields["trackId"] = synthesize_track_id("imported")
            prepared.append(fields)

        playlists = self.store.read_all()
        playlist = _find_playlist(playlists, playlist_id)
        records = [_stamp(fields) for fields in prepared]
        playlist.setdefault("songs", []).extend(records)
        self.store.write_all(playlists)
        log_event(logging.INFO, "playlist_bulk_add", playlist_id=playlist_id, added=len(records))
        return records

    def remove_song(self, playlist_id: str, song_id: str) -> None:
        playlists = self.store.read_all()
        playlist = _find_playlist(playlists, playlist_id)
        songs = playlist.get("songs") or []
        for index, song in enumerate(songs):
            if song.get("id") == song_id:
                del songs[index]
                self.store.write_all(playlists)
                return
        raise SongNotFoundError("Song not found")
