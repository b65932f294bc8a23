from __future__ import annotations

from pathlib import Path
import typer

from lyricbar.app import watch as watch_loop
from lyricbar.cache.disk import DiskCache
from lyricbar.config import load_config, save_config_lang, save_config_value
from lyricbar.i18n import set_lang, t
from lyricbar.library.store import PlayItem, TrackStore
from lyricbar.logging_setup import setup_logging
from lyricbar.mpris.client import MprisClient
from lyricbar.sources.service import LyricsService, LyricsView, read_track_key, remove_from_cache


app = typer.Typer(no_args_is_help=True, add_completion=False)


class _LastTextView(LyricsView):
    """Keeps only the final text of a resolution."""

    def __init__(self) -> None:
        self.text: str | None = None

    def set_lyrics(self, text: str) -> None:
        self.text = text


def _collect_tracks(store: TrackStore, files: list[Path], artist: str | None, title: str | None) -> list[PlayItem]:
    items = [store.add_file(f) for f in files]
    if artist or title:
        meta = {k: v for k, v in (("artist", artist), ("title", title)) if v}
        items.append(store.add(meta))
    if not items:
        typer.echo("Error: pass audio files or --artist/--title", err=True)
        raise typer.Exit(code=2)
    return items


@app.command()
def watch(
    player: str | None = typer.Option(None, "--player", help="MPRIS service or short name (e.g. deadbeef)"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
    refresh_hz: float | None = typer.Option(None, "--refresh-hz", help="Polling frequency (Hz)"),
    no_alt_screen: bool = typer.Option(False, "--no-alt-screen", help="Do not use alternate screen buffer"),
):
    """
    Show lyrics of the track playing in an MPRIS player.
    """
    cfg = load_config()
    if refresh_hz is not None:
        cfg = cfg.__class__(**{**cfg.__dict__, "refresh_hz": refresh_hz})
    if no_alt_screen:
        cfg = cfg.__class__(**{**cfg.__dict__, "use_alt_screen": False})

    setup_logging(debug)
    set_lang(cfg.lang)
    raise typer.Exit(code=watch_loop(cfg, preferred_player=player or cfg.preferred_player))


@app.command()
def players():
    """List available MPRIS players."""
    for p in MprisClient.list_players():
        typer.echo(p)


@app.command()
def lookup(
    files: list[Path] = typer.Argument(None, help="Audio files to read tags from"),
    artist: str | None = typer.Option(None, "--artist", "-a"),
    title: str | None = typer.Option(None, "--title", "-t"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
):
    """Resolve lyrics (tags, cache, then the lyrics command) and print them."""
    cfg = load_config()
    setup_logging(debug)
    set_lang(cfg.lang)

    store = TrackStore()
    items = _collect_tracks(store, files or [], artist, title)
    view = _LastTextView()
    svc = LyricsService(cfg, store, view, only_playing=False)

    code = 0
    for item in items:
        res = svc.update_lyrics(item)
        if len(items) > 1:
            typer.echo(f"== {read_track_key(store, item).display}")
        if res.text is None:
            typer.echo(t("lyrics_not_found"), err=True)
            code = 1
        else:
            typer.echo(res.text.rstrip("\n"))
    raise typer.Exit(code=code)


@app.command()
def cache(
    files: list[Path] = typer.Argument(None, help="Audio files to read tags from"),
    artist: str | None = typer.Option(None, "--artist", "-a"),
    title: str | None = typer.Option(None, "--title", "-t"),
    remove: bool = typer.Option(False, "--remove", help="Delete the cached lyrics"),
):
    """Show or remove cached lyrics for tracks."""
    cfg = load_config()
    set_lang(cfg.lang)
    disk = DiskCache(cfg.cache_dir)

    if not files and not artist and not title:
        typer.echo(cfg.cache_dir)
        return

    store = TrackStore()
    items = _collect_tracks(store, files or [], artist, title)
    keys = [read_track_key(store, it) for it in items]

    if remove:
        for it in items:
            store.select(it)
        before = [disk.exists(k.artist, k.title) for k in keys]
        remove_from_cache(store, disk)
        for k, was_cached in zip(keys, before):
            label = disk.path_for(k.artist or "", k.title or "")
            typer.echo(t("cache_removed", path=str(label)) if was_cached else t("cache_missing", path=str(label)))
        return

    for k in keys:
        label = disk.path_for(k.artist or "", k.title or "")
        if disk.exists(k.artist, k.title):
            typer.echo(t("cache_present", path=str(label)))
        else:
            typer.echo(t("cache_missing", path=str(label)))


@app.command()
def config(
    command: str | None = typer.Option(None, "--command", help="Lyrics command template, e.g. 'lyrics.sh \"%artist%\" \"%title%\"'"),
    lang: str | None = typer.Option(None, "--lang", help="Interface language: EN or RU"),
):
    """Show or change settings."""
    if lang is not None:
        if lang.upper() not in ("EN", "RU"):
            raise typer.BadParameter("lang must be one of: EN, RU")
        save_config_lang(lang)
    if command is not None:
        path = save_config_value("customcmd", command)
        typer.echo(t("config_saved", path=str(path)))

    cfg = load_config()
    typer.echo(f"lang={cfg.lang}")
    typer.echo(f"customcmd={cfg.custom_command}")
    typer.echo(f"cache_dir={cfg.cache_dir}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
