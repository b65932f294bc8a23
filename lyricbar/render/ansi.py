from __future__ import annotations

import shutil
import signal
import sys
import threading
from dataclasses import dataclass
from typing import Callable

import colorama
from colorama import Fore, Style

from lyricbar.sources.service import LyricsView

CSI = "\x1b["


@dataclass(frozen=True, slots=True)
class Theme:
    title: str = Fore.CYAN + Style.BRIGHT
    text: str = Style.NORMAL
    reset: str = Style.RESET_ALL


class AnsiRenderer(LyricsView):
    """
    Full-screen lyrics view. ``set_lyrics`` may be called from worker
    threads; frames are drawn under a lock.
    """

    def __init__(self, use_alt_screen: bool = True, theme: Theme | None = None):
        self.use_alt_screen = use_alt_screen
        self.theme = theme or Theme()
        self.title = ""
        self._entered = False
        # reentrant: the SIGWINCH handler may fire while a frame is drawn
        self._lock = threading.RLock()
        self._resize_handler: Callable[[], None] | None = None
        self._last_render_args: tuple[str, list[str]] | None = None

    def __enter__(self):
        self.enter()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.exit()

    def enter(self) -> None:
        if self._entered:
            return
        colorama.just_fix_windows_console()
        if self.use_alt_screen:
            sys.stdout.write(CSI + "?1049h")  # alt screen
        sys.stdout.write(CSI + "?25l")  # hide cursor
        sys.stdout.write(CSI + "H" + CSI + "2J")  # home + clear
        sys.stdout.flush()
        self._entered = True

        def _on_resize(signum=None, frame=None):
            if self._last_render_args:
                self.render(*self._last_render_args)

        self._resize_handler = _on_resize
        if hasattr(signal, "SIGWINCH"):
            signal.signal(signal.SIGWINCH, _on_resize)

    def exit(self) -> None:
        if not self._entered:
            return
        if self._resize_handler and hasattr(signal, "SIGWINCH"):
            signal.signal(signal.SIGWINCH, signal.SIG_DFL)
        self._resize_handler = None
        sys.stdout.write(self.theme.reset)
        sys.stdout.write(CSI + "?25h")  # show cursor
        if self.use_alt_screen:
            sys.stdout.write(CSI + "?1049l")  # normal screen
        sys.stdout.flush()
        self._entered = False
        self._last_render_args = None

    def set_title(self, title: str) -> None:
        self.title = title

    def set_lyrics(self, text: str) -> None:
        self.render(self.title, [ln.rstrip() for ln in text.splitlines()])

    def render(self, title: str, lines: list[str]) -> None:
        with self._lock:
            self._last_render_args = (title, lines)

            _cols, rows = shutil.get_terminal_size(fallback=(80, 24))
            # reserve 1 line for title
            body_rows = max(rows - 1, 1)

            out: list[str] = [f"{self.theme.title}♫ {title} ♫{self.theme.reset}"]
            out.extend(f"{self.theme.text}{ln}{self.theme.reset}" for ln in lines[:body_rows])

            sys.stdout.write(CSI + "H" + CSI + "2J")
            sys.stdout.write("\n".join(out))
            sys.stdout.write(self.theme.reset)
            sys.stdout.flush()
