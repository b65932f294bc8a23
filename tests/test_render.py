from __future__ import annotations

import signal
import threading
from unittest.mock import patch

from lyricbar.render.ansi import AnsiRenderer


class TestAnsiRendererSigwinch:
    def test_sigwinch_registered_on_enter(self):
        renderer = AnsiRenderer(use_alt_screen=False)
        old_handler = signal.getsignal(signal.SIGWINCH)

        renderer.enter()
        try:
            assert signal.getsignal(signal.SIGWINCH) != old_handler
        finally:
            renderer.exit()
            signal.signal(signal.SIGWINCH, old_handler)

    def test_sigwinch_restored_on_exit(self):
        renderer = AnsiRenderer(use_alt_screen=False)
        old_handler = signal.getsignal(signal.SIGWINCH)

        renderer.enter()
        renderer.exit()

        assert signal.getsignal(signal.SIGWINCH) == signal.SIG_DFL
        signal.signal(signal.SIGWINCH, old_handler)

    def test_sigwinch_redraws_last_frame(self, capsys):
        renderer = AnsiRenderer(use_alt_screen=False)
        renderer.enter()
        renderer.render("Title", ["A", "B"])

        with patch.object(renderer, "render") as mock_render:
            renderer._resize_handler()
        mock_render.assert_called_once_with("Title", ["A", "B"])
        renderer.exit()
        assert renderer._last_render_args is None


class TestSetLyrics:
    def test_set_lyrics_splits_lines_under_title(self, capsys):
        renderer = AnsiRenderer(use_alt_screen=False)
        renderer.set_title("Foo - Bar")
        renderer.set_lyrics("first  \nsecond\n")

        assert renderer._last_render_args == ("Foo - Bar", ["first", "second"])
        out = capsys.readouterr().out
        assert "Foo - Bar" in out
        assert "first" in out and "second" in out

    def test_concurrent_updates_do_not_interleave(self, capsys):
        renderer = AnsiRenderer(use_alt_screen=False)
        threads = [threading.Thread(target=renderer.set_lyrics, args=(f"text {i}",)) for i in range(8)]
        for th in threads:
            th.start()
        for th in threads:
            th.join(timeout=2)

        title, lines = renderer._last_render_args
        assert len(lines) == 1 and lines[0].startswith("text ")
