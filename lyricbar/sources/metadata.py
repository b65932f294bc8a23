from __future__ import annotations

from lyricbar.library.store import PlayItem
from lyricbar.library.tags import LYRICS_FIELDS

from .base import LyricsSource


class MetadataSource(LyricsSource):
    name = "metadata"

    def fetch(self, track: PlayItem) -> str | None:
        with self.store.read_lock():
            for field in LYRICS_FIELDS:
                lyrics = self.store.find_meta(track, field)
                if lyrics is not None:
                    return lyrics
        return None
