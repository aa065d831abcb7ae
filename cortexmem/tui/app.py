"""Terminal browser state: the current screen and the stack of screens behind it."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Union


class Key(enum.Enum):
    ESC = "esc"
    ENTER = "enter"
    BACKSPACE = "backspace"
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"
    HOME = "home"
    END = "end"
    CHAR = "char"


@dataclass(frozen=True)
class KeyEvent:
    """A key press; ``char`` holds the character when ``code`` is ``Key.CHAR``."""

    code: Key
    char: str = ""

    @classmethod
    def from_char(cls, char: str) -> KeyEvent:
        return cls(Key.CHAR, char)

    def is_char(self, *chars: str) -> bool:
        return self.code is Key.CHAR and self.char in chars


@dataclass
class Dashboard:
    """Overview of stored observations."""


@dataclass
class Search:
    query: str = ""
    cursor: int = 0


@dataclass
class SearchResults:
    query: str
    results: list[Any] = field(default_factory=list)
    selected: int = 0


@dataclass
class ObservationDetail:
    obs: Any
    scroll: int = 0


@dataclass
class Timeline:
    center: int
    items: list[Any] = field(default_factory=list)
    selected: int = 0


@dataclass
class Sessions:
    sessions: list[Any] = field(default_factory=list)
    selected: int = 0


@dataclass
class SessionDetail:
    session: Any
    observations: list[Any] = field(default_factory=list)
    selected: int = 0


Screen = Union[
    Dashboard,
    Search,
    SearchResults,
    ObservationDetail,
    Timeline,
    Sessions,
    SessionDetail,
]


class App:
    """State of the terminal browser."""

    def __init__(self, server: Any) -> None:
        self.server = server
        self.screen: Screen = Dashboard()
        self.should_quit = False
        self.screen_stack: list[Screen] = []

    def push_screen(self, screen: Screen) -> None:
        """Show a new screen, keeping the current one to return to."""
        self.screen_stack.append(self.screen)
        self.screen = screen

    def pop_screen(self) -> None:
        """Return to the previous screen; stay put if there is none."""
        if self.screen_stack:
            self.screen = self.screen_stack.pop()