from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from mutagen import File as MutagenFile
from mutagen import MutagenError
from mutagen.id3 import ID3
from mutagen.mp4 import MP4Tags

logger = logging.getLogger(__name__)

# Field names used for embedded lyrics, in lookup priority order.
LYRICS_FIELDS = ("unsynced lyrics", "UNSYNCEDLYRICS", "lyrics")

_VORBIS_LYRICS = {
    "UNSYNCEDLYRICS": "UNSYNCEDLYRICS",
    "LYRICS": "lyrics",
}
_ID3_TXXX_LYRICS = {
    "TXXX:UNSYNCEDLYRICS": "UNSYNCEDLYRICS",
    "TXXX:LYRICS": "lyrics",
}
MP4_LYRICS_KEY = "\xa9lyr"


def _first(values: Any) -> str:
    if isinstance(values, (list, tuple)):
        return ", ".join(str(v) for v in values if str(v))
    return str(values) if values is not None else ""


def _id3_lyrics(tags: ID3) -> dict[str, str]:
    out: dict[str, str] = {}
    uslt = [f.text for f in tags.getall("USLT") if f.text]
    if uslt:
        out["unsynced lyrics"] = uslt[0]
    for frame_id, field in _ID3_TXXX_LYRICS.items():
        frame = tags.get(frame_id)
        if frame is not None and frame.text:
            out[field] = _first(frame.text)
    return out


def _mp4_lyrics(tags: MP4Tags) -> dict[str, str]:
    value = tags.get(MP4_LYRICS_KEY)
    return {"lyrics": _first(value)} if value else {}


def _vorbis_lyrics(tags: Any) -> dict[str, str]:
    out: dict[str, str] = {}
    for key, field in _VORBIS_LYRICS.items():
        # Vorbis comment keys are case-insensitive
        value = tags.get(key)
        if value:
            out[field] = _first(value)
    return out


def _embedded_lyrics(path: Path) -> dict[str, str]:
    audio = MutagenFile(path)
    if audio is None or audio.tags is None:
        return {}
    tags = audio.tags
    if isinstance(tags, ID3):
        return _id3_lyrics(tags)
    if isinstance(tags, MP4Tags):
        return _mp4_lyrics(tags)
    return _vorbis_lyrics(tags)


def read_tags(path: Path) -> dict[str, str]:
    """
    Read artist/title/album and embedded lyrics from an audio file.

    Returns an empty dict if the file cannot be parsed.
    """
    try:
        easy = MutagenFile(path, easy=True)
        if easy is None:
            logger.warning("Unsupported audio file: %s", path)
            return {}
        meta: dict[str, str] = {}
        for field in ("artist", "title", "album"):
            value = _first(easy.get(field) or [])
            if value:
                meta[field] = value
        meta.update(_embedded_lyrics(path))
    except (MutagenError, OSError) as e:
        logger.warning("Cannot read tags from %s: %s", path, e)
        return {}
    return meta
