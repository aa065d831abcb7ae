"""Colour palette and styled text pieces shared by the terminal screens."""

from __future__ import annotations

import enum
from collections.abc import Iterable
from dataclasses import dataclass

APP_NAME = " cortexmem "


class Color(enum.Enum):
    """The palette used by every screen, as RGB triples."""

    BASE = (30, 30, 46)
    SURFACE0 = (49, 50, 68)
    SURFACE1 = (69, 71, 90)
    TEXT = (205, 214, 244)
    SUBTEXT = (166, 173, 200)
    BLUE = (137, 180, 250)
    GREEN = (166, 227, 161)
    YELLOW = (249, 226, 175)
    RED = (243, 139, 168)
    MAUVE = (203, 166, 247)
    LAVENDER = (180, 190, 254)

    @property
    def rgb(self) -> tuple[int, int, int]:
        return self.value

    @property
    def hex(self) -> str:
        red, green, blue = self.value
        return f"#{red:02x}{green:02x}{blue:02x}"


@dataclass(frozen=True)
class Segment:
    """A run of text drawn with one foreground and background colour."""

    text: str
    fg: Color | None = None
    bg: Color | None = None


Line = list[Segment]


def title_bar(*args: Segment | str) -> Line:
    """The application name followed by the given pieces.

    Plain strings are drawn in the subdued text colour.
    """
    line: Line = [Segment(APP_NAME, Color.MAUVE, Color.SURFACE0)]
    for piece in args:
        if isinstance(piece, Segment):
            line.append(piece)
        else:
            line.append(Segment(str(piece), Color.SUBTEXT))
    return line


def help_bar(bindings: Iterable[tuple[str, str]]) -> Line:
    """Key hints: each key is drawn highlighted, followed by what it does."""
    line: Line = []
    for key, label in bindings:
        line.append(Segment(f" {key} ", Color.BASE, Color.MAUVE))
        line.append(Segment(f" {label} ", Color.SUBTEXT))
    return line