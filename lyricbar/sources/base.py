from __future__ import annotations

from lyricbar.library.store import PlayItem, TrackStore


class LyricsSource:
    """A way to obtain lyrics for a track. Returns None when it has nothing."""

    name: str

    def __init__(self, store: TrackStore):
        self.store = store

    def fetch(self, track: PlayItem) -> str | None:
        raise NotImplementedError
