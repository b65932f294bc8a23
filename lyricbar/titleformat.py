"""
Minimal title formatting for the lyrics command template.

``%artist%`` expands to the track's ``artist`` field (empty if missing),
``%%`` to a literal ``%``. Everything else is copied through verbatim.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import regex

# Longest command line accepted after expansion.
MAX_COMMAND_LEN = 4096

_TOKEN_RE = regex.compile(r"%%|%([^%]*)%|%|[^%]+")
_FIELD_RE = regex.compile(r"[\p{L}\p{N} _:.\-]+")


class TemplateError(ValueError):
    pass


@dataclass(frozen=True, slots=True)
class Literal:
    text: str


@dataclass(frozen=True, slots=True)
class Field:
    name: str


@dataclass(frozen=True, slots=True)
class CompiledFormat:
    parts: tuple[Literal | Field, ...]

    @property
    def fields(self) -> tuple[str, ...]:
        return tuple(p.name for p in self.parts if isinstance(p, Field))

    def evaluate(
        self,
        lookup: Callable[[str], str | None],
        *,
        max_len: int | None = MAX_COMMAND_LEN,
    ) -> str:
        out: list[str] = []
        for part in self.parts:
            if isinstance(part, Literal):
                out.append(part.text)
            else:
                out.append(lookup(part.name) or "")
        result = "".join(out)
        if max_len is not None and len(result) > max_len:
            raise TemplateError(f"formatted command exceeds {max_len} characters")
        return result


def compile_format(template: str) -> CompiledFormat:
    parts: list[Literal | Field] = []
    for m in _TOKEN_RE.finditer(template):
        token = m.group(0)
        if token == "%%":
            parts.append(Literal("%"))
        elif token == "%":
            raise TemplateError(f"unterminated field at offset {m.start()}")
        elif m.group(1) is not None:
            name = m.group(1)
            if not _FIELD_RE.fullmatch(name):
                raise TemplateError(f"invalid field name {name!r} at offset {m.start()}")
            parts.append(Field(name))
        else:
            parts.append(Literal(token))
    return CompiledFormat(tuple(parts))
