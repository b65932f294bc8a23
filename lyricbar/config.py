from __future__ import annotations

import json
import logging
from dataclasses import dataclass
import os
from pathlib import Path

logger = logging.getLogger(__name__)

# Shared with the deadbeef lyricbar plugin so both read the same entries.
CACHE_SUBDIR = Path("deadbeef") / "lyrics"


def _config_dir() -> Path:
    xdg = os.getenv("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "lyricbar"
    return Path.home() / ".config" / "lyricbar"


def _config_file() -> Path:
    return _config_dir() / "config.json"


def _cache_dir() -> Path:
    xdg = os.getenv("XDG_CACHE_HOME")
    base = Path(xdg) if xdg else Path.home() / ".cache"
    return base / CACHE_SUBDIR


@dataclass(frozen=True)
class AppConfig:
    # Storage
    cache_dir: Path
    config_dir: Path

    # Locale
    lang: str

    # External lyrics command
    custom_command: str
    script_timeout_s: float | None

    # MPRIS
    preferred_player: str | None

    # Rendering
    refresh_hz: float
    use_alt_screen: bool


def load_config() -> AppConfig:
    config_dir = _config_dir()
    stored = _load_stored(config_dir)

    timeout = float(os.getenv("LYRICBAR_SCRIPT_TIMEOUT", "60"))
    use_alt_screen = os.getenv("LYRICBAR_ALT_SCREEN", "1") not in ("0", "false", "False")

    return AppConfig(
        cache_dir=_cache_dir(),
        config_dir=config_dir,
        lang=_pick_lang(stored),
        custom_command=_pick_command(stored),
        script_timeout_s=timeout if timeout > 0 else None,
        preferred_player=os.getenv("LYRICBAR_PLAYER") or None,
        refresh_hz=float(os.getenv("LYRICBAR_REFRESH_HZ", "4.0")),
        use_alt_screen=use_alt_screen,
    )


def _load_stored(config_dir: Path) -> dict[str, str]:
    cfg_path = config_dir / "config.json"
    if not cfg_path.exists():
        return {}
    try:
        data = json.loads(cfg_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable config %s: %s", cfg_path, e)
        return {}
    if not isinstance(data, dict):
        return {}
    return {str(k): str(v) for k, v in data.items() if v is not None}


def _pick_lang(stored: dict[str, str]) -> str:
    # Priority: config.json → LYRICBAR_LANG → "EN"
    raw = stored.get("lang", "").upper()
    if raw in ("RU", "EN"):
        return raw
    env_lang = os.getenv("LYRICBAR_LANG")
    if env_lang and env_lang.upper() in ("RU", "EN"):
        return env_lang.upper()
    return "EN"


def _pick_command(stored: dict[str, str]) -> str:
    # An explicit empty value in config.json disables the script provider.
    if "customcmd" in stored:
        return stored["customcmd"].strip()
    return os.getenv("LYRICBAR_CUSTOMCMD", "").strip()


def save_config_value(key: str, value: str) -> Path:
    cfg_path = _config_file()
    cfg_path.parent.mkdir(parents=True, exist_ok=True)
    data: dict[str, str] = {}
    if cfg_path.exists():
        try:
            data = json.loads(cfg_path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            data = {}
    data[key] = value
    cfg_path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
    return cfg_path


def save_config_lang(lang: str) -> None:
    save_config_value("lang", lang.upper())
