"""Persistence helpers for Mixtape."""

from db.playlist_store import JSONPlaylistStore

__all__ = ["JSONPlaylistStore"]
