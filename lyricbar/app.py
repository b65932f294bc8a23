from __future__ import annotations

import logging
import signal
import time

from lyricbar.config import AppConfig
from lyricbar.i18n import t
from lyricbar.library.store import PlayItem, TrackStore
from lyricbar.library.tags import read_tags
from lyricbar.mpris.client import MprisClient, TrackInfo
from lyricbar.mpris.errors import NoPlayersFound, PlayerUnavailable
from lyricbar.render.ansi import AnsiRenderer
from lyricbar.sources.service import LyricsService

logger = logging.getLogger(__name__)


def item_from_track_info(store: TrackStore, ti: TrackInfo) -> PlayItem:
    """Register the player's current track, merging in tags from a local file."""
    meta: dict[str, str] = {}
    path = ti.local_path
    if path is not None and path.is_file():
        meta.update(read_tags(path))
    # The player's view of artist/title wins over file tags.
    meta.update(ti.as_meta())
    return store.add(meta, uri=ti.url)


def watch(cfg: AppConfig, *, preferred_player: str | None) -> int:
    """
    Main watch loop:
    MPRIS -> track change -> worker thread resolves lyrics -> renderer.
    """
    store = TrackStore()
    renderer = AnsiRenderer(use_alt_screen=cfg.use_alt_screen)
    svc = LyricsService(cfg, store, renderer)

    renderer.enter()

    def _on_sigint(signum, frame):
        renderer.exit()
        raise KeyboardInterrupt

    signal.signal(signal.SIGINT, _on_sigint)

    tick_s = 1.0 / max(cfg.refresh_hz, 0.1)
    last_track_key: str | None = None
    current: PlayItem | None = None

    def _forget_current() -> None:
        nonlocal current
        if current is not None:
            # workers still holding the item finish, but can no longer emit
            store.discard(current)
            current = None

    try:
        while True:
            try:
                client = MprisClient.pick_player(preferred=preferred_player)
                ti = client.track_info()
            except NoPlayersFound:
                last_track_key = None
                _forget_current()
                renderer.render("lyricbar", [t("no_mpris_players")])
                time.sleep(1.0)
                continue
            except PlayerUnavailable as e:
                renderer.render("lyricbar", [t("mpris_unavailable", error=str(e))])
                time.sleep(0.5)
                continue

            if ti.track_key != last_track_key:
                last_track_key = ti.track_key
                _forget_current()
                if not ti.track_key:
                    renderer.render("lyricbar", [t("no_track")])
                else:
                    item = item_from_track_info(store, ti)
                    current = item
                    store.set_playing(item)
                    renderer.set_title(f"{ti.artist} - {ti.title}" if ti.artist else ti.title)
                    logger.debug("Track changed: %s", ti.track_key)
                    svc.on_track_changed(item)

            time.sleep(tick_s)
    except KeyboardInterrupt:
        return 0
    finally:
        renderer.exit()
