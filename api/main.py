#!/usr/bin/env python3
import json
import logging
import os
import urllib.parse
from contextlib import asynccontextmanager

import anyio
from fastapi import Body, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel

from catalog.client import CatalogClient
from config import settings
from db.playlist_store import JSONPlaylistStore
from engine.errors import (
    InvalidInputError,
    NoSongsFoundError,
    PlaylistNotFoundError,
    PlaylistStoreError,
    SongNotFoundError,
    UpstreamUnavailableError,
)
from engine.json_utils import safe_json
from engine.paths import LOG_DIR, WEBUI_DIR, ensure_dir
from importers.apple_music import AppleMusicEmbedImporter
from importers.base import PlaylistPageImporter, preview_songs
from importers.spotify import SpotifyEmbedImporter
from playlist.export import export_filename, render_text
from playlist.library import PlaylistLibrary

APP_NAME = "Mixtape API"
SEARCH_FAILED_MESSAGE = "Failed to search songs"
STORE_FAILED_MESSAGE = "Failed to access playlists"


class PlaylistCreateRequest(BaseModel):
    name: str | None = None


class SongPayload(BaseModel):
    trackId: str | int | None = None
    trackName: str | None = None
    artistName: str | None = None
    albumName: str | None = None
    artworkUrl: str | None = None


class BulkSongsRequest(BaseModel):
    songs: list[SongPayload] | None = None


class SafeJSONResponse(JSONResponse):
    def render(self, content):
        return json.dumps(
            safe_json(content),
            ensure_ascii=False,
            allow_nan=False,
            separators=(",", ":"),
        ).encode("utf-8")


def _setup_logging(log_dir):
    ensure_dir(log_dir)
    root = logging.getLogger("")
    log_path = os.path.join(log_dir, "mixtape.log")
    root.setLevel(logging.INFO)
    for handler in root.handlers:
        if isinstance(handler, logging.FileHandler):
            if os.path.abspath(getattr(handler, "baseFilename", "")) == os.path.abspath(log_path):
                return
    file_handler = logging.FileHandler(log_path)
    file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
    file_handler.setLevel(logging.INFO)
    root.addHandler(file_handler)


def _init_state(state):
    state.catalog_client = CatalogClient()
    state.library = PlaylistLibrary(JSONPlaylistStore())
    state.spotify_importer = SpotifyEmbedImporter(state.catalog_client)
    state.apple_music_importer = AppleMusicEmbedImporter(state.catalog_client)


@asynccontextmanager
async def lifespan(app: FastAPI):
    _setup_logging(LOG_DIR)
    logging.info("%s started; playlists file %s", APP_NAME, app.state.library.store.path)
    yield
    logging.info("%s shutting down", APP_NAME)


app = FastAPI(
    title=APP_NAME,
    description="Personal playlist manager with catalog search and shared-playlist import.",
    default_response_class=SafeJSONResponse,
    lifespan=lifespan,
)
app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])
_init_state(app.state)


async def _library_call(fn, *args):
    try:
        return await anyio.to_thread.run_sync(fn, *args)
    except InvalidInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except (PlaylistNotFoundError, SongNotFoundError) as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except PlaylistStoreError as exc:
        logging.error("Playlist store failure: %s", exc)
        raise HTTPException(status_code=500, detail=STORE_FAILED_MESSAGE)
    except Exception as exc:
        logging.exception("Playlist operation failed: %s", exc)
        raise HTTPException(status_code=500, detail=STORE_FAILED_MESSAGE)


@app.get("/api/playlists")
async def list_playlists():
    return await _library_call(app.state.library.list_playlists)


@app.post("/api/playlists", status_code=201)
async def create_playlist(payload: PlaylistCreateRequest = Body(default=PlaylistCreateRequest())):
    return await _library_call(app.state.library.create_playlist, payload.name)


@app.get("/api/playlists/{playlist_id}")
async def get_playlist(playlist_id: str):
    return await _library_call(app.state.library.get_playlist, playlist_id)


@app.delete("/api/playlists/{playlist_id}")
async def delete_playlist(playlist_id: str):
    await _library_call(app.state.library.delete_playlist, playlist_id)
    return {"success": True}


@app.post("/api/playlists/{playlist_id}/songs", status_code=201)
async def add_song(playlist_id: str, payload: SongPayload):
    return await _library_call(app.state.library.add_song, playlist_id, payload.model_dump())


@app.post("/api/playlists/{playlist_id}/songs/bulk", status_code=201)
async def bulk_add_songs(playlist_id: str, payload: BulkSongsRequest = Body(default=BulkSongsRequest())):
    songs = [song.model_dump() for song in payload.songs or []]
    added = await _library_call(app.state.library.bulk_add_songs, playlist_id, songs)
    return {"added": len(added), "songs": added}


@app.delete("/api/playlists/{playlist_id}/songs/{song_id}")
async def remove_song(playlist_id: str, song_id: str):
    await _library_call(app.state.library.remove_song, playlist_id, song_id)
    return {"success": True}


@app.get("/api/playlists/{playlist_id}/export")
async def export_playlist(playlist_id: str):
    playlist = await _library_call(app.state.library.get_playlist, playlist_id)
    filename = urllib.parse.quote(export_filename(playlist.get("name")))
    return PlainTextResponse(
        render_text(playlist),
        headers={"Content-Disposition": f"inline; filename*=UTF-8''{filename}"},
    )


@app.get("/api/search")
async def search_songs(q: str | None = Query(None)):
    try:
        songs = await anyio.to_thread.run_sync(app.state.catalog_client.search, q or "")
    except InvalidInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except UpstreamUnavailableError as exc:
        logging.error("Catalog search error: %s", exc)
        raise HTTPException(status_code=500, detail=SEARCH_FAILED_MESSAGE)
    except Exception as exc:
        logging.exception("Catalog search failed: %s", exc)
        raise HTTPException(status_code=500, detail=SEARCH_FAILED_MESSAGE)
    return [song.to_dict() for song in songs]


async def _import_playlist(importer: PlaylistPageImporter, url: str | None, preview: bool):
    failure_message = (
        f"Failed to fetch {importer.PLATFORM_NAME} playlist. Make sure the playlist is public."
    )
    try:
        result = await anyio.to_thread.run_sync(importer.import_playlist, url or "")
    except InvalidInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except (UpstreamUnavailableError, NoSongsFoundError) as exc:
        logging.error("%s import error: %s", importer.PLATFORM_NAME, exc)
        raise HTTPException(status_code=500, detail=failure_message)
    except Exception as exc:
        logging.exception("%s import failed: %s", importer.PLATFORM_NAME, exc)
        raise HTTPException(status_code=500, detail=failure_message)

    body = result.to_dict()
    if preview:
        shown, remaining = preview_songs(result.songs, settings.IMPORT_PREVIEW_LIMIT)
        body["songs"] = [song.to_dict() for song in shown]
        body["remaining"] = remaining
    return body


@app.get("/api/spotify/playlist")
async def import_spotify_playlist(
    url: str | None = Query(None),
    preview: bool = Query(False),
):
    return await _import_playlist(app.state.spotify_importer, url, preview)


@app.get("/api/applemusic/playlist")
async def import_apple_music_playlist(
    url: str | None = Query(None),
    preview: bool = Query(False),
):
    return await _import_playlist(app.state.apple_music_importer, url, preview)


if os.path.isdir(WEBUI_DIR):
    app.mount("/", StaticFiles(directory=WEBUI_DIR, html=True), name="webui")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("api.main:app", host=settings.SERVER_HOST, port=settings.SERVER_PORT, reload=False)
