from .errors import (
    InvalidInputError,
    InvalidReferenceError,
    MixtapeError,
    NoSongsFoundError,
    PlaylistNotFoundError,
    PlaylistStoreError,
    SongNotFoundError,
    UpstreamUnavailableError,
)
from .events import log_event

__all__ = [
    "InvalidInputError",
    "InvalidReferenceError",
    "MixtapeError",
    "NoSongsFoundError",
    "PlaylistNotFoundError",
    "PlaylistStoreError",
    "SongNotFoundError",
    "UpstreamUnavailableError",
    "log_event",
]
