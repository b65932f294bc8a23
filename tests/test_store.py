from __future__ import annotations

import threading
import time
from unittest.mock import patch

from lyricbar.library.lock import SharedLock
from lyricbar.library.store import TrackStore


def test_readers_share_the_lock():
    lock = SharedLock()
    inside = threading.Barrier(2, timeout=2)

    def reader():
        with lock.read():
            inside.wait()

    threads = [threading.Thread(target=reader) for _ in range(2)]
    for th in threads:
        th.start()
    for th in threads:
        th.join(timeout=3)
    assert not any(th.is_alive() for th in threads)


def test_writer_waits_for_readers():
    lock = SharedLock()
    events: list[str] = []
    writer_started = threading.Event()

    def writer():
        writer_started.set()
        with lock.write():
            events.append("write")

    with lock.read():
        th = threading.Thread(target=writer)
        th.start()
        writer_started.wait(timeout=2)
        time.sleep(0.05)
        events.append("read done")
    th.join(timeout=2)

    assert events == ["read done", "write"]


def test_playing_track_is_tracked_by_identity():
    store = TrackStore()
    a = store.add({"title": "x"})
    b = store.add({"title": "x"})
    store.set_playing(a)
    assert store.is_playing(a)
    assert not store.is_playing(b)
    store.discard(a)
    assert store.playing() is None


def test_selection():
    store = TrackStore()
    a = store.add({"title": "a"})
    b = store.add({"title": "b"})
    store.select(b)
    with store.read_lock():
        assert list(store.selected()) == [b]
        assert list(store.items()) == [a, b]


def test_set_meta_updates_and_clears():
    store = TrackStore()
    track = store.add({})
    store.set_meta(track, "artist", "Foo")
    with store.read_lock():
        assert store.find_meta(track, "artist") == "Foo"
    store.set_meta(track, "artist", None)
    with store.read_lock():
        assert store.find_meta(track, "artist") is None


def test_add_file_uses_tags(tmp_path):
    path = tmp_path / "song.flac"
    with patch("lyricbar.library.store.read_tags", return_value={"artist": "A", "title": "T"}):
        track = TrackStore().add_file(path)
    assert track.meta == {"artist": "A", "title": "T"}
    assert track.uri == str(path)


def test_emit_if_playing_only_calls_back_for_the_playing_item():
    store = TrackStore()
    playing = store.add({"title": "A"})
    other = store.add({"title": "B"})
    store.set_playing(playing)
    calls: list[str] = []

    assert store.emit_if_playing(playing, lambda: calls.append("A"))
    assert not store.emit_if_playing(other, lambda: calls.append("B"))
    assert calls == ["A"]
