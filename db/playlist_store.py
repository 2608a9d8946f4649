"""Flat-file persistence for playlists.

The whole collection lives in one JSON document. Every mutation reads the
document, changes it in memory and writes it back; there is no locking, so
concurrent writers may lose updates.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from engine.errors import PlaylistStoreError
from engine.paths import PLAYLISTS_FILE, ensure_dir


class JSONPlaylistStore:
    def __init__(self, path: str | os.PathLike[str] | None = None) -> None:
        self.path = Path(path) if path else PLAYLISTS_FILE

    def read_all(self) -> list[dict[str, Any]]:
        """Return every playlist, creating an empty document on first use."""
        if not self.path.exists():
            self.write_all([])
            return []
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            logging.error("Error reading playlists from %s: %s", self.path, exc)
            raise PlaylistStoreError(f"Failed to read {self.path}") from exc
        try:
            playlists = json.loads(text or "[]")
        except json.JSONDecodeError as exc:
            logging.error("Playlists file %s is not valid JSON: %s", self.path, exc)
            raise PlaylistStoreError(f"Playlists file {self.path} is corrupt") from exc
        if not isinstance(playlists, list):
            logging.error("Playlists file %s does not hold a list", self.path)
            raise PlaylistStoreError(f"Playlists file {self.path} is corrupt")
        return playlists

    def write_all(self, playlists: list[dict[str, Any]]) -> None:
        """Replace the whole document; the write is atomic (temp file then replace)."""
        ensure_dir(self.path.parent)
        temp_path = self.path.with_name(f".{self.path.name}.tmp")
        try:
            temp_path.write_text(json.dumps(playlists, indent=2, ensure_ascii=False), encoding="utf-8")
            temp_path.replace(self.path)
        except (OSError, TypeError, ValueError) as exc:
            logging.error("Error writing playlists to %s: %s", self.path, exc)
            raise PlaylistStoreError(f"Failed to write {self.path}") from exc
