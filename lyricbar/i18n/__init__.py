from __future__ import annotations

import json
import logging
from importlib.resources import files

logger = logging.getLogger(__name__)

SUPPORTED = ("en", "ru")

# Used when a locale file lacks a key the pipeline emits.
_FALLBACK = {
    "loading": "Loading...",
    "lyrics_not_found": "Lyrics not found",
}

_current_lang = "en"
_strings: dict[str, str] = {}


def _load_locale(lang: str) -> dict[str, str]:
    try:
        path = files("lyricbar.i18n") / f"{lang}.json"
        return dict(json.loads(path.read_text(encoding="utf-8")))
    except (OSError, ValueError) as e:
        logger.warning("Cannot load locale '%s': %s", lang, e)
        return {}


def normalize_lang(lang: str | None) -> str:
    lang_lower = (lang or "en").lower()
    return lang_lower if lang_lower in SUPPORTED else "en"


def set_lang(lang: str | None) -> None:
    global _current_lang, _strings
    _current_lang = normalize_lang(lang)
    _strings = _load_locale(_current_lang)


def current_lang() -> str:
    return _current_lang


def t(key: str, **kwargs: str | int) -> str:
    if not _strings:
        set_lang(_current_lang)
    s = _strings.get(key) or _FALLBACK.get(key, key)
    if kwargs:
        try:
            return s.format(**kwargs)
        except KeyError:
            return s
    return s


# Load default on import
set_lang("en")
