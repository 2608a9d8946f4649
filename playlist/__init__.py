"""Playlist operations and exports."""

from playlist.export import export_filename, render_text
from playlist.library import PlaylistLibrary

__all__ = ["PlaylistLibrary", "export_filename", "render_text"]
