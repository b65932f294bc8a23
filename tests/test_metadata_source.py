from __future__ import annotations

from lyricbar.library.store import TrackStore
from lyricbar.sources.metadata import MetadataSource


def test_unsynced_lyrics_field_wins():
    store = TrackStore()
    track = store.add({"unsynced lyrics": "one", "UNSYNCEDLYRICS": "two", "lyrics": "three"})
    assert MetadataSource(store).fetch(track) == "one"


def test_falls_back_through_synonyms():
    store = TrackStore()
    src = MetadataSource(store)
    assert src.fetch(store.add({"UNSYNCEDLYRICS": "two", "lyrics": "three"})) == "two"
    assert src.fetch(store.add({"lyrics": "three"})) == "three"


def test_no_lyrics_fields_is_absent():
    store = TrackStore()
    assert MetadataSource(store).fetch(store.add({"artist": "Foo", "title": "Bar"})) is None


def test_value_is_returned_as_is():
    store = TrackStore()
    text = "  verse\r\n\r\nchorus  "
    assert MetadataSource(store).fetch(store.add({"lyrics": text})) == text
