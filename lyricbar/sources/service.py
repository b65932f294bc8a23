from __future__ import annotations

import logging
import threading
from typing import Iterable

from lyricbar.cache.disk import DiskCache
from lyricbar.config import AppConfig
from lyricbar.i18n import t
from lyricbar.library.store import PlayItem, TrackStore

from .base import LyricsSource
from .metadata import MetadataSource
from .script import ScriptSource
from .types import LyricsResponse, TrackKey

logger = logging.getLogger(__name__)


class LyricsView:
    """Receives the text to show for the current track."""

    def set_lyrics(self, text: str) -> None:
        raise NotImplementedError


def _track_key(store: TrackStore, track: PlayItem) -> TrackKey:
    # caller holds the read lock
    return TrackKey(
        artist=store.find_meta(track, "artist"),
        title=store.find_meta(track, "title"),
    )


def read_track_key(store: TrackStore, track: PlayItem) -> TrackKey:
    with store.read_lock():
        return _track_key(store, track)


class LyricsService:
    """
    Resolves lyrics for a track: embedded tags, then the disk cache, then
    each source in order. Only source results are written to the cache.
    """

    def __init__(
        self,
        cfg: AppConfig,
        store: TrackStore,
        view: LyricsView,
        *,
        cache: DiskCache | None = None,
        sources: Iterable[LyricsSource] | None = None,
        only_playing: bool = True,
    ):
        self.cfg = cfg
        self.store = store
        self.view = view
        self.cache = cache or DiskCache(cfg.cache_dir)
        self.metadata = MetadataSource(store)
        self.sources: tuple[LyricsSource, ...] = (
            tuple(sources) if sources is not None else self._build_sources(cfg, store)
        )
        self.only_playing = only_playing

        status = self.cache.ensure_root_exists()
        if status:
            logger.error("Cannot create lyrics cache directory %s (errno %s)", self.cache.root, status)

    @staticmethod
    def _build_sources(cfg: AppConfig, store: TrackStore) -> tuple[LyricsSource, ...]:
        return (ScriptSource(store, cfg),)

    def on_track_changed(self, track: PlayItem) -> threading.Thread:
        worker = threading.Thread(
            target=self.update_lyrics,
            args=(track,),
            name="lyricbar-update",
            daemon=True,
        )
        worker.start()
        return worker

    def _emit(self, track: PlayItem, text: str) -> None:
        if not self.only_playing:
            self.view.set_lyrics(text)
        elif not self.store.emit_if_playing(track, lambda: self.view.set_lyrics(text)):
            logger.debug("%r is no longer playing, dropping lyrics update", track)

    def _fetch(self, src: LyricsSource, track: PlayItem) -> str | None:
        try:
            return src.fetch(track)
        except Exception:
            logger.exception("Lyrics source '%s' failed", src.name)
            return None

    def update_lyrics(self, track: PlayItem) -> LyricsResponse:
        lyrics = self._fetch(self.metadata, track)
        if lyrics is not None:
            self._emit(track, lyrics)
            return LyricsResponse(text=lyrics, source=self.metadata.name)

        key = read_track_key(self.store, track)
        artist, title = key.artist, key.title
        if artist and title:
            lyrics = self.cache.load(artist, title)
            if lyrics is not None:
                self._emit(track, lyrics)
                return LyricsResponse(text=lyrics, source="cache")

            self._emit(track, t("loading"))

            # Nothing in the tags or cache; ask the sources and cache the first hit.
            for src in self.sources:
                lyrics = self._fetch(src, track)
                if lyrics is not None:
                    self._emit(track, lyrics)
                    if not self.cache.save(artist, title, lyrics):
                        logger.warning("Lyrics for %s were not cached", key.display)
                    return LyricsResponse(text=lyrics, source=src.name)
        else:
            logger.debug("No artist/title for %r, skipping cache and sources", track)

        self._emit(track, t("lyrics_not_found"))
        return LyricsResponse(text=None, source=None)


def remove_from_cache(store: TrackStore, cache: DiskCache) -> int:
    """Delete cached lyrics of every selected item. Always returns 0."""
    with store.read_lock():
        keys = [_track_key(store, it) for it in store.selected()]
    for key in keys:
        if cache.exists(key.artist, key.title):
            cache.remove(key.artist, key.title)
    return 0
