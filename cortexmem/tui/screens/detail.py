"""Observation detail screen: every field of one observation, scrollable."""

from __future__ import annotations

from typing import Any

from ..app import App, Key, KeyEvent, ObservationDetail, Timeline
from ..widgets import Color, Line, Segment, help_bar, title_bar

MAX_SCROLL = 65_535

_BINDINGS = [
    ("Esc", "Back"),
    ("j/k/\u2191/\u2193", "Scroll"),
    ("t", "Timeline"),
    ("q", "Quit"),
]


def _text_lines(text: str) -> list[str]:
    """Split text into lines the way a line iterator does: no trailing empty line."""
    if not text:
        return []
    parts = text.split("\n")
    if parts[-1] == "":
        parts.pop()
    return [part.removesuffix("\r") for part in parts]


def _labelled_list(label: str, values: list[str] | None, color: Color) -> list[Line]:
    if not values:
        return []
    return [[Segment(label, Color.YELLOW), Segment(", ".join(values), color)]]


def _content_lines(obs: Any) -> list[Line]:
    lines: list[Line] = [
        [Segment("Title: ", Color.YELLOW), Segment(obs.title, Color.TEXT)],
        [
            Segment("Type: ", Color.YELLOW),
            Segment(obs.obs_type, Color.LAVENDER),
            Segment("  Tier: ", Color.YELLOW),
            Segment(obs.tier, Color.LAVENDER),
            Segment("  Scope: ", Color.YELLOW),
            Segment(obs.scope, Color.LAVENDER),
        ],
        [Segment("Project: ", Color.YELLOW), Segment(obs.project, Color.BLUE)],
        [],
        [Segment("Content:", Color.YELLOW)],
    ]
    lines.extend([Segment(text, Color.TEXT)] for text in _text_lines(obs.content))
    lines.append([])

    lines.extend(_labelled_list("Concepts: ", obs.concepts, Color.GREEN))
    lines.extend(_labelled_list("Facts: ", obs.facts, Color.GREEN))
    lines.extend(_labelled_list("Files: ", obs.files, Color.BLUE))
    lines.append([])

    lines.append(
        [
            Segment("Created: ", Color.YELLOW),
            Segment(obs.created_at, Color.SUBTEXT),
            Segment("  Updated: ", Color.YELLOW),
            Segment(obs.updated_at, Color.SUBTEXT),
        ]
    )
    lines.append(
        [
            Segment("Access count: ", Color.YELLOW),
            Segment(str(obs.access_count), Color.TEXT),
            Segment("  Revisions: ", Color.YELLOW),
            Segment(str(obs.revision_count), Color.TEXT),
        ]
    )
    if obs.topic_key is not None:
        lines.append([Segment("Topic: ", Color.YELLOW), Segment(obs.topic_key, Color.MAUVE)])
    return lines


def render(app: App) -> list[Line]:
    """Lines of the detail screen, with the content scrolled; empty on another screen."""
    screen = app.screen
    if not isinstance(screen, ObservationDetail):
        return []
    obs = screen.obs
    lines: list[Line] = [
        title_bar(Segment(f" observation #{obs.id} ", Color.SUBTEXT)),
        [],
        [Segment(" Detail ", Color.BLUE)],
    ]
    lines.extend(_content_lines(obs)[screen.scroll :])
    lines.append([])
    lines.append(help_bar(_BINDINGS))
    return lines


def handle_input(app: App, key: KeyEvent) -> None:
    """Go back, quit, scroll, or open the timeline around the observation."""
    screen = app.screen
    if key.code is Key.ESC:
        app.pop_screen()
    elif key.is_char("q"):
        app.should_quit = True
    elif key.is_char("j") or key.code is Key.DOWN:
        if isinstance(screen, ObservationDetail):
            screen.scroll = min(screen.scroll + 1, MAX_SCROLL)
    elif key.is_char("k") or key.code is Key.UP:
        if isinstance(screen, ObservationDetail):
            screen.scroll = max(screen.scroll - 1, 0)
    elif key.is_char("t"):
        if isinstance(screen, ObservationDetail):
            obs_id = screen.obs.id
            try:
                items = list(app.server.call_timeline(obs_id, None, screen.obs.project))
            except Exception:
                return
            app.push_screen(Timeline(center=obs_id, items=items, selected=0))