"""Playlist reference parsing for share links, URIs and bare identifiers."""

from __future__ import annotations

import re
from dataclasses import dataclass

from config import settings
from engine.errors import InvalidInputError, InvalidReferenceError

_SPOTIFY_ID_RE = re.compile(r"^[A-Za-z0-9]{22}$")
# open.spotify.com/playlist/<id>, spotify:playlist:<id>
_SPOTIFY_LINK_RE = re.compile(r"playlist[/:]([A-Za-z0-9]{22})(?![A-Za-z0-9])")

_APPLE_ID_RE = re.compile(r"^pl\.[A-Za-z0-9]+$")
# music.apple.com/us/playlist/todays-hits/pl.f4d1..., embed.music.apple.com/..., etc.
_APPLE_LINK_RE = re.compile(
    r"music\.apple\.com/(?:([a-z]{2})/)?(?:embed/)?playlist/(?:[^/?#]+/)?(pl\.[A-Za-z0-9]+)"
)


@dataclass(frozen=True)
class AppleMusicReference:
    storefront: str
    playlist_id: str


def _clean_reference(text: str | None, platform: str) -> str:
    value = (text or "").strip()
    if not value:
        raise InvalidInputError(f"{platform} playlist URL is required")
    if len(value) > settings.MAX_REFERENCE_LENGTH:
        raise InvalidInputError(f"{platform} playlist URL is too long")
    return value


def extract_spotify_playlist_id(text: str | None) -> str:
    value = _clean_reference(text, "Spotify")
    if _SPOTIFY_ID_RE.match(value):
        return value
    match = _SPOTIFY_LINK_RE.search(value)
    if match:
        return match.group(1)
    raise InvalidReferenceError("Invalid Spotify playlist URL")


def extract_apple_music_reference(text: str | None) -> AppleMusicReference:
    value = _clean_reference(text, "Apple Music")
    match = _APPLE_LINK_RE.search(value)
    if match:
        return AppleMusicReference(
            storefront=match.group(1) or settings.DEFAULT_APPLE_STOREFRONT,
            playlist_id=match.group(2),
        )
    if _APPLE_ID_RE.match(value):
        return AppleMusicReference(storefront=settings.DEFAULT_APPLE_STOREFRONT, playlist_id=value)
    raise InvalidReferenceError("Invalid Apple Music playlist URL")
