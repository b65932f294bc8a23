from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class TrackKey:
    artist: str | None
    title: str | None

    @property
    def display(self) -> str:
        if self.artist and self.title:
            return f"{self.artist} - {self.title}"
        return self.title or self.artist or "Unknown track"


@dataclass(frozen=True, slots=True)
class LyricsResponse:
    text: str | None
    source: str | None

    @property
    def has_lyrics(self) -> bool:
        return self.text is not None
