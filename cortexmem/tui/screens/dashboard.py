"""Dashboard screen: totals by tier and type, and the entry points to other screens."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from ..app import App, Search, Sessions
from ..widgets import Color, Line, Segment, help_bar, title_bar

_COLUMN_WIDTH = 20

_BINDINGS = [("q", "Quit"), ("s//", "Search"), ("n", "Sessions")]


def _table(title: str, heading: str, rows: Iterable[tuple[str, int]]) -> list[Line]:
    lines: list[Line] = [
        [Segment(f" {title} ", Color.BLUE)],
        [
            Segment(heading.ljust(_COLUMN_WIDTH), Color.YELLOW),
            Segment("Count", Color.YELLOW),
        ],
        [],
    ]
    for name, count in rows:
        lines.append(
            [
                Segment(str(name).ljust(_COLUMN_WIDTH), Color.LAVENDER),
                Segment(str(count), Color.TEXT),
            ]
        )
    return lines


def render(app: App) -> list[Line]:
    """Lines of the dashboard: title, statistics and key hints."""
    lines: list[Line] = [title_bar(Segment(" dashboard ", Color.SUBTEXT)), []]
    lines.append([Segment(" Statistics ", Color.BLUE)])

    try:
        stats: Any = app.server.call_stats(None)
    except Exception:
        lines.append([Segment("Failed to load statistics", Color.RED)])
    else:
        lines.append(
            [
                Segment("Total observations: ", Color.SUBTEXT),
                Segment(str(stats.total), Color.GREEN),
            ]
        )
        lines.append([])
        lines.extend(_table("By Tier", "Tier", stats.by_tier))
        lines.append([])
        lines.extend(_table("By Type", "Type", stats.by_type))

    lines.append([])
    lines.append(help_bar(_BINDINGS))
    return lines


def handle_input(app: App, key: Any) -> None:
    """Quit, open the search prompt, or list sessions."""
    if key.is_char("q"):
        app.should_quit = True
    elif key.is_char("s", "/"):
        app.push_screen(Search())
    elif key.is_char("n"):
        sessions = list(app.server.call_list_sessions(None))
        app.push_screen(Sessions(sessions=sessions, selected=0))