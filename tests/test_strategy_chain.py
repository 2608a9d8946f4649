from __future__ import annotations

import pytest

from catalog.models import SongCandidate
from engine.errors import NoSongsFoundError
from importers.base import (
    ExtractionStrategy,
    StrategyResult,
    preview_songs,
    run_strategy_chain,
    synthesize_track_id,
    walk_path,
)


class _Static(ExtractionStrategy):
    def __init__(self, name, songs=(), playlist_name=None, error=None):
        self.name = name
        self.songs = list(songs)
        self.playlist_name = playlist_name
        self.error = error
        self.pages = []

    def extract(self, page):
        self.pages.append(page)
        if self.error is not None:
            raise self.error
        return StrategyResult(songs=self.songs, playlist_name=self.playlist_name)


def _song(name):
    return SongCandidate(track_name=name, artist_name="Artist")


def test_chain_keeps_last_reported_name_and_first_songs() -> None:
    first = _Static("first", playlist_name="From Metadata")
    second = _Static("second", playlist_name="From Title")
    third = _Static("third", songs=[_song("A"), _song("B")])
    unused = _Static("unused", songs=[_song("Z")])

    result = run_strategy_chain([first, second, third, unused], "<html>", default_name="X Playlist")

    assert result.playlist_name == "From Title"
    assert [song.track_name for song in result.songs] == ["A", "B"]
    assert first.pages == second.pages == third.pages == ["<html>"]
    assert unused.pages == []


@pytest.mark.parametrize("error", [ValueError("bad json"), KeyError("entity"), TypeError("none"), AttributeError("x")])
def test_chain_treats_parse_errors_as_empty(error) -> None:
    result = run_strategy_chain(
        [_Static("broken", error=error), _Static("ok", songs=[_song("A")])],
        "",
        default_name="X Playlist",
    )

    assert result.playlist_name == "X Playlist"
    assert len(result.songs) == 1


def test_chain_does_not_swallow_unexpected_errors() -> None:
    with pytest.raises(RuntimeError):
        run_strategy_chain([_Static("boom", error=RuntimeError("bug"))], "", default_name="X Playlist")


def test_exhausted_chain_raises() -> None:
    with pytest.raises(NoSongsFoundError):
        run_strategy_chain([_Static("a"), _Static("b", playlist_name="Named")], "", default_name="X Playlist")


def test_synthesized_ids_carry_prefix_and_differ() -> None:
    ids = {synthesize_track_id("apple") for _ in range(50)}

    assert len(ids) == 50
    assert all(track_id.startswith("apple-") for track_id in ids)


def test_preview_shows_fifty_and_counts_the_rest() -> None:
    songs = [_song(f"S{idx}") for idx in range(73)]

    shown, remaining = preview_songs(songs)

    assert len(shown) == 50
    assert shown[0].track_name == "S0"
    assert remaining == 23
    assert preview_songs(songs[:3]) == (songs[:3], 0)


def test_walk_path_stops_on_non_objects() -> None:
    payload = {"props": {"pageProps": {"state": None}}}

    assert walk_path(payload, ("props", "pageProps")) == {"state": None}
    assert walk_path(payload, ("props", "pageProps", "state", "data")) is None
