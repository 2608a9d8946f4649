"""Shared-playlist importers that scrape third-party embed pages."""

from .apple_music import AppleMusicEmbedImporter
from .base import ExtractionStrategy, PlaylistPageImporter, StrategyResult, preview_songs
from .references import AppleMusicReference, extract_apple_music_reference, extract_spotify_playlist_id
from .spotify import SpotifyEmbedImporter

__all__ = [
    "AppleMusicEmbedImporter",
    "AppleMusicReference",
    "ExtractionStrategy",
    "PlaylistPageImporter",
    "SpotifyEmbedImporter",
    "StrategyResult",
    "extract_apple_music_reference",
    "extract_spotify_playlist_id",
    "preview_songs",
]
