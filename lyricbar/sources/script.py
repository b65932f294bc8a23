from __future__ import annotations

import logging
import shlex
import subprocess

from lyricbar.config import AppConfig
from lyricbar.library.store import PlayItem, TrackStore
from lyricbar.titleformat import TemplateError, compile_format

from .base import LyricsSource

logger = logging.getLogger(__name__)


class ScriptSource(LyricsSource):
    """
    Runs the user's lyrics command and returns what it prints.

    The command is a title-format template, e.g.
    ``fetch-lyrics "%artist%" "%title%"``. It is split into arguments with
    shell quoting rules and executed without a shell.
    """

    name = "script"

    def __init__(self, store: TrackStore, cfg: AppConfig):
        super().__init__(store)
        self.cfg = cfg

    def build_command(self, track: PlayItem) -> list[str] | None:
        template = self.cfg.custom_command
        if not template:
            return None
        try:
            compiled = compile_format(template)
        except TemplateError as e:
            logger.error("Invalid script command %r: %s", template, e)
            return None

        with self.store.read_lock():
            values = {f: self.store.find_meta(track, f) for f in compiled.fields}
        try:
            command_line = compiled.evaluate(values.get)
        except TemplateError as e:
            logger.error("Invalid script command %r: %s", template, e)
            return None

        try:
            argv = shlex.split(command_line)
        except ValueError as e:
            logger.error("Cannot parse script command %r: %s", command_line, e)
            return None
        if not argv:
            logger.error("Script command %r expands to nothing", template)
            return None
        return argv

    def fetch(self, track: PlayItem) -> str | None:
        argv = self.build_command(track)
        if argv is None:
            return None

        logger.debug("Running lyrics script: %s", shlex.join(argv))
        try:
            proc = subprocess.run(
                argv,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                stdin=subprocess.DEVNULL,
                timeout=self.cfg.script_timeout_s,
                check=False,
            )
        except subprocess.TimeoutExpired:
            logger.error("Lyrics script timed out after %ss: %s", self.cfg.script_timeout_s, argv[0])
            return None
        except (OSError, ValueError) as e:
            logger.error("Cannot run lyrics script %s: %s", argv[0], e)
            return None

        if proc.stderr:
            logger.debug("Lyrics script stderr: %s", proc.stderr.decode("utf-8", errors="replace").rstrip())

        if proc.returncode != 0 or not proc.stdout:
            logger.debug("Lyrics script gave nothing (exit status %s)", proc.returncode)
            return None

        try:
            text = proc.stdout.decode("utf-8")
        except UnicodeDecodeError:
            text = None
        if text is None or "\x00" in text:
            logger.error("Lyrics script output is not a valid UTF-8 string")
            return None
        return text
