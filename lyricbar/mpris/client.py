from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Any
from urllib.parse import unquote, urlparse

import dbus

from .errors import NoPlayersFound, PlayerUnavailable

logger = logging.getLogger(__name__)

MPRIS_PREFIX = "org.mpris.MediaPlayer2."
PLAYER_IFACE = "org.mpris.MediaPlayer2.Player"


@dataclass(frozen=True, slots=True)
class TrackInfo:
    title: str
    artist: str
    album: str
    url: str
    # xesam:asText, the lyrics some players expose
    lyrics: str | None
    # stable-ish identifier for "track changed" checks
    track_key: str

    @property
    def local_path(self) -> Path | None:
        parsed = urlparse(self.url)
        if parsed.scheme != "file":
            return None
        return Path(unquote(parsed.path))

    def as_meta(self) -> dict[str, str]:
        """Metadata in the field names the lyrics pipeline reads."""
        meta = {"artist": self.artist, "title": self.title, "album": self.album}
        meta = {k: v for k, v in meta.items() if v}
        if self.lyrics:
            meta["lyrics"] = self.lyrics
        return meta


def _to_str(value: Any) -> str:
    try:
        return str(value)
    except Exception:
        return ""


def _join_artist(value: Any) -> str:
    if isinstance(value, (list, tuple, dbus.Array)):
        return ", ".join(_to_str(x) for x in value if _to_str(x))
    return _to_str(value)


def track_info_from_metadata(md: dict[str, Any]) -> TrackInfo:
    title = _to_str(md.get("xesam:title", "")) or ""
    artist = _join_artist(md.get("xesam:artist", [])) or ""
    album = _to_str(md.get("xesam:album", "")) or ""
    url = _to_str(md.get("xesam:url", "")) or ""
    lyrics = _to_str(md.get("xesam:asText", "")) or None
    track_id = _to_str(md.get("mpris:trackid", "")) or ""
    key = " | ".join(x for x in (artist, title, album, url, track_id) if x)
    return TrackInfo(title=title, artist=artist, album=album, url=url, lyrics=lyrics, track_key=key)


class MprisClient:
    def __init__(self, service_name: str):
        self.service_name = service_name
        self._bus = dbus.SessionBus()
        self._obj = self._bus.get_object(service_name, "/org/mpris/MediaPlayer2")
        self._props = dbus.Interface(self._obj, "org.freedesktop.DBus.Properties")

    @staticmethod
    def list_players() -> list[str]:
        try:
            bus = dbus.SessionBus()
            return [s for s in bus.list_names() if s.startswith(MPRIS_PREFIX)]
        except dbus.DBusException as e:
            # No session bus (headless, CI): treat as "no players".
            logger.debug("Unable to connect to D-Bus session bus: %s", e)
            return []

    @staticmethod
    def pick_player(preferred: str | None = None) -> "MprisClient":
        players = MprisClient.list_players()
        if not players:
            raise NoPlayersFound("No active MPRIS players")

        if preferred:
            # allow passing short name like "deadbeef"
            for s in players:
                if s == preferred or s.endswith("." + preferred):
                    return MprisClient(s)
            logger.warning("Preferred player '%s' not found, falling back", preferred)

        for s in players:
            try:
                c = MprisClient(s)
                if c.playback_status().lower() == "playing":
                    return c
            except (dbus.DBusException, PlayerUnavailable) as e:
                logger.debug("Skipping player %s: %s", s, e)

        return MprisClient(players[0])

    def playback_status(self) -> str:
        try:
            return _to_str(self._props.Get(PLAYER_IFACE, "PlaybackStatus"))
        except dbus.DBusException as e:
            raise PlayerUnavailable(str(e)) from e

    def metadata(self) -> dict[str, Any]:
        try:
            return dict(self._props.Get(PLAYER_IFACE, "Metadata"))
        except dbus.DBusException as e:
            raise PlayerUnavailable(str(e)) from e

    def track_info(self) -> TrackInfo:
        return track_info_from_metadata(self.metadata())
