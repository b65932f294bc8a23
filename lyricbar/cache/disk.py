from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from .paths import cached_filename, mkpath

logger = logging.getLogger(__name__)


class DiskCache:
    """
    One flat file per song under ``root``; content is the lyrics text.

    All failures are reported through return values: a cache that cannot
    be read behaves like an empty one.
    """

    def __init__(self, root: Path):
        self.root = root

    def path_for(self, artist: str, title: str) -> Path:
        return cached_filename(self.root, artist, title)

    def ensure_root_exists(self) -> int:
        return mkpath(self.root, 0o755)

    def exists(self, artist: str | None, title: str | None) -> bool:
        if not artist or not title:
            return False
        return self.path_for(artist, title).exists()

    def load(self, artist: str | None, title: str | None) -> str | None:
        if not artist or not title:
            return None
        path = self.path_for(artist, title)
        logger.debug("Cache lookup: %s", path)
        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as e:
            logger.warning("Cannot read cached lyrics %s: %s", path, e)
            return None
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            logger.warning("Cached lyrics %s are not valid UTF-8: %s", path, e)
            return None

    def save(self, artist: str, title: str, text: str) -> bool:
        path = self.path_for(artist, title)
        tmp_name: str | None = None
        try:
            # Same directory as the target so os.replace stays on one filesystem.
            fd, tmp_name = tempfile.mkstemp(dir=self.root, prefix=".lyricbar-", suffix=".tmp")
            with os.fdopen(fd, "wb") as f:
                f.write(text.encode("utf-8"))
            # mkstemp creates 0600 files
            os.chmod(tmp_name, 0o644)
            os.replace(tmp_name, path)
        except (OSError, ValueError) as e:
            logger.error("Could not write cached lyrics %s: %s", path, e)
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    pass
            return False
        logger.debug("Cached lyrics for %s - %s at %s", artist, title, path)
        return True

    def remove(self, artist: str | None, title: str | None) -> bool:
        if not artist or not title:
            return False
        path = self.path_for(artist, title)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except (OSError, ValueError) as e:
            logger.warning("Cannot remove cached lyrics %s: %s", path, e)
            return False
        logger.info("Removed cached lyrics %s", path)
        return True
