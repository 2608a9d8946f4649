"""Error taxonomy shared by the catalog client, importers and playlist library."""

from __future__ import annotations


class MixtapeError(Exception):
    pass


class InvalidInputError(MixtapeError):
    """Request is malformed; raised before any network or storage access."""


class InvalidReferenceError(InvalidInputError):
    """Text is not a recognizable playlist URL, URI or identifier."""


class UpstreamUnavailableError(MixtapeError):
    """A third-party endpoint errored, timed out or returned a non-2xx status."""


class NoSongsFoundError(MixtapeError):
    """Every extraction strategy came back empty."""


class PlaylistNotFoundError(MixtapeError):
    pass


class SongNotFoundError(MixtapeError):
    pass


class PlaylistStoreError(MixtapeError):
    """The playlists document could not be read or written."""
