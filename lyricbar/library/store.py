from __future__ import annotations

import logging
from contextlib import AbstractContextManager
from pathlib import Path
from typing import Callable, Iterator

from .lock import SharedLock
from .tags import read_tags

logger = logging.getLogger(__name__)


class PlayItem:
    """
    A playable item owned by a TrackStore.

    Handles are compared by identity. Metadata must only be touched
    through the owning store, under its lock.
    """

    __slots__ = ("meta", "selected", "uri")

    def __init__(self, meta: dict[str, str] | None = None, *, uri: str = ""):
        self.meta: dict[str, str] = dict(meta or {})
        self.selected = False
        self.uri = uri

    def __repr__(self) -> str:
        return f"PlayItem({self.uri or self.meta.get('title', '?')!r})"


class TrackStore:
    """In-memory playlist: items, selection, the playing item, one shared lock."""

    def __init__(self) -> None:
        self._lock = SharedLock()
        self._items: list[PlayItem] = []
        self._playing: PlayItem | None = None

    def read_lock(self) -> AbstractContextManager[None]:
        return self._lock.read()

    def write_lock(self) -> AbstractContextManager[None]:
        return self._lock.write()

    # Reads below expect the caller to hold read_lock().

    def find_meta(self, track: PlayItem, key: str) -> str | None:
        return track.meta.get(key)

    def items(self) -> Iterator[PlayItem]:
        return iter(list(self._items))

    def selected(self) -> Iterator[PlayItem]:
        return iter([it for it in self._items if it.selected])

    # Self-locking operations.

    def add(self, meta: dict[str, str], *, uri: str = "") -> PlayItem:
        item = PlayItem(meta, uri=uri)
        with self.write_lock():
            self._items.append(item)
        return item

    def discard(self, track: PlayItem) -> None:
        with self.write_lock():
            if track in self._items:
                self._items.remove(track)
            if self._playing is track:
                self._playing = None

    def add_file(self, path: Path) -> PlayItem:
        meta = read_tags(path)
        if not meta:
            logger.info("No tags in %s", path)
        return self.add(meta, uri=str(path))

    def set_meta(self, track: PlayItem, key: str, value: str | None) -> None:
        with self.write_lock():
            if value is None:
                track.meta.pop(key, None)
            else:
                track.meta[key] = value

    def select(self, track: PlayItem, selected: bool = True) -> None:
        with self.write_lock():
            track.selected = selected

    def set_playing(self, track: PlayItem | None) -> None:
        with self.write_lock():
            self._playing = track

    def playing(self) -> PlayItem | None:
        with self.read_lock():
            return self._playing

    def is_playing(self, track: PlayItem) -> bool:
        return self.playing() is track

    def emit_if_playing(self, track: PlayItem, emit: Callable[[], None]) -> bool:
        """
        Call ``emit`` only while ``track`` is the playing item.

        The read lock is held across the call, so ``set_playing`` cannot
        swap the track out in between. ``emit`` must not take this lock.
        """
        with self.read_lock():
            if self._playing is not track:
                return False
            emit()
            return True
