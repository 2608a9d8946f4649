"""Playlist export helpers."""

from __future__ import annotations

import re
from typing import Any, Mapping

_INVALID_FS_CHARS_RE = re.compile(r'[<>:"/\\|?*]')
_MULTISPACE_RE = re.compile(r"\s+")


def render_text(playlist: Mapping[str, Any]) -> str:
    """Render one ``Artist - Title`` line per song, in playlist order."""
    return "\n".join(
        f"{song.get('artistName')} - {song.get('trackName')}" for song in playlist.get("songs") or []
    )


def export_filename(playlist_name: str | None) -> str:
    safe_name = sanitize_playlist_name(playlist_name or "") or "playlist"
    return f"{safe_name}.txt"


def sanitize_playlist_name(name: str) -> str:
    """Return a filesystem-safe playlist name."""
    text = _INVALID_FS_CHARS_RE.sub("", str(name))
    text = _MULTISPACE_RE.sub(" ", text).strip()
    return text.rstrip(" .")
