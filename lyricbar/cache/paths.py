from __future__ import annotations

import errno
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

_SEPARATORS = tuple(s for s in (os.sep, os.altsep) if s)


def _sanitize(part: str) -> str:
    for sep in _SEPARATORS:
        part = part.replace(sep, "_")
    return part


def cached_filename(root: Path, artist: str, title: str) -> Path:
    """
    Cache file for (artist, title): ``<root>/<artist>-<title>``.

    Only path separators are replaced (with ``_``); everything else is
    passed through, so unusual names may still be rejected by the OS.
    """
    return root / f"{_sanitize(artist)}-{_sanitize(title)}"


def mkpath(path: Path, mode: int = 0o755) -> int:
    """
    Create ``path`` and any missing parents, one component at a time.

    Returns 0 on success or the errno of the first failing ``mkdir``.
    Directories created before the failure are left in place.
    """
    current = Path(path.anchor)
    for part in path.parts[len(current.parts):]:
        current = current / part
        try:
            os.mkdir(current, mode)
        except FileExistsError:
            if not current.is_dir():
                logger.error("Cannot create %s: a file is in the way", current)
                return errno.ENOTDIR
        except OSError as e:
            logger.error("Cannot create %s: %s", current, e)
            return e.errno or errno.EIO
    return 0
