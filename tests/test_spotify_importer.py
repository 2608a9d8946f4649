from __future__ import annotations

import json

import pytest

from engine.errors import InvalidReferenceError, NoSongsFoundError, UpstreamUnavailableError
from importers.spotify import NextDataStrategy, SpotifyEmbedImporter

PLAYLIST_ID = "37i9dQZF1DXcBWIGoYBM5M"


def _embed_page(entity) -> str:
    data = {"props": {"pageProps": {"state": {"data": {"entity": entity}}}}}
    return (
        "<html><head></head><body>"
        f'<script id="__NEXT_DATA__" type="application/json">{json.dumps(data)}</script>'
        "</body></html>"
    )


def _track(uid, title, subtitle, **extra):
    return {"uid": uid, "uri": f"spotify:track:{uid}-uri", "title": title, "subtitle": subtitle, **extra}


def test_import_reads_embed_entity_in_source_order(recording_fetcher) -> None:
    entity = {
        "name": "Today's Top Hits",
        "trackList": [
            _track("a1", "Song A", "Artist A", album={"images": [{"url": "https://img/a.jpg"}]}),
            _track("b2", "Song B", "Artist B", images=[{"url": "https://img/b.jpg"}]),
            _track("a1", "Song A", "Artist A"),
        ],
    }
    fetcher = recording_fetcher(page=_embed_page(entity))

    result = SpotifyEmbedImporter(fetcher).import_playlist(
        f"https://open.spotify.com/playlist/{PLAYLIST_ID}?si=abc"
    )

    assert result.playlist_name == "Today's Top Hits"
    assert [song.track_name for song in result.songs] == ["Song A", "Song B", "Song A"]
    assert [song.track_id for song in result.songs] == ["a1", "b2", "a1"]
    assert result.songs[0].artwork_url == "https://img/a.jpg"
    assert result.songs[1].artwork_url == "https://img/b.jpg"
    assert result.songs[2].artwork_url is None
    assert fetcher.calls[0]["url"] == f"https://open.spotify.com/embed/playlist/{PLAYLIST_ID}"
    assert "Mozilla/5.0" in fetcher.calls[0]["headers"]["User-Agent"]


def test_tracks_without_uri_title_or_subtitle_are_dropped() -> None:
    entity = {
        "name": "Mixed",
        "trackList": [
            {"title": "No Uri", "subtitle": "Artist"},
            {"uri": "spotify:track:x", "subtitle": "Artist"},
            {"uri": "spotify:track:y", "title": "No Artist", "subtitle": "  "},
            {"uri": "spotify:track:z9", "title": "Kept", "subtitle": "Artist Z"},
        ],
    }

    outcome = NextDataStrategy().extract(_embed_page(entity))

    assert [song.track_name for song in outcome.songs] == ["Kept"]
    assert outcome.songs[0].track_id == "z9"


def test_missing_name_falls_back_to_platform_default(recording_fetcher) -> None:
    fetcher = recording_fetcher(page=_embed_page({"trackList": [_track("c3", "Song C", "Artist C")]}))

    result = SpotifyEmbedImporter(fetcher).import_playlist(PLAYLIST_ID)

    assert result.playlist_name == "Spotify Playlist"


@pytest.mark.parametrize(
    "page",
    [
        "<html>no data here</html>",
        '<script id="__NEXT_DATA__" type="application/json">{not json</script>',
        _embed_page({"name": "Empty", "trackList": []}),
    ],
)
def test_pages_without_songs_raise_no_songs_found(recording_fetcher, page) -> None:
    with pytest.raises(NoSongsFoundError):
        SpotifyEmbedImporter(recording_fetcher(page=page)).import_playlist(PLAYLIST_ID)


def test_invalid_reference_makes_no_request(recording_fetcher) -> None:
    fetcher = recording_fetcher(page=_embed_page({}))

    with pytest.raises(InvalidReferenceError):
        SpotifyEmbedImporter(fetcher).import_playlist("not a url")

    assert fetcher.calls == []


def test_upstream_failure_skips_every_strategy(recording_fetcher) -> None:
    class ExplodingStrategy(NextDataStrategy):
        def extract(self, page):
            raise AssertionError("strategy must not run")

    fetcher = recording_fetcher(error=UpstreamUnavailableError("Upstream returned HTTP 404"))

    with pytest.raises(UpstreamUnavailableError):
        SpotifyEmbedImporter(fetcher, strategies=[ExplodingStrategy()]).import_playlist(PLAYLIST_ID)

    assert len(fetcher.calls) == 1


def test_pathologically_nested_next_data_counts_as_no_songs(recording_fetcher) -> None:
    nested = "[" * 100000 + "]" * 100000
    page = f'<script id="__NEXT_DATA__" type="application/json">{nested}</script>'

    with pytest.raises(NoSongsFoundError):
        SpotifyEmbedImporter(recording_fetcher(page=page)).import_playlist(PLAYLIST_ID)
