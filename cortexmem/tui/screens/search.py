"""Search prompt and search results screens."""

from __future__ import annotations

from typing import Any

from ..app import App, Key, KeyEvent, ObservationDetail, Search, SearchResults
from ..widgets import Color, Line, Segment, help_bar, title_bar

_INPUT_BINDINGS = [("Esc", "Back"), ("Enter", "Search")]
_RESULTS_BINDINGS = [
    ("Esc", "Back"),
    ("j/k/\u2191/\u2193", "Navigate"),
    ("Enter", "Open"),
    ("q", "Quit"),
]

HINT = "Type your search query and press Enter to search."


def render_input(app: App) -> list[Line]:
    """Lines of the search prompt; empty on another screen."""
    screen = app.screen
    if not isinstance(screen, Search):
        return []
    return [
        title_bar(Segment(" search ", Color.SUBTEXT)),
        [],
        [Segment(" Query ", Color.BLUE)],
        [Segment(screen.query, Color.TEXT)],
        [],
        [Segment(HINT, Color.SUBTEXT)],
        [],
        help_bar(_INPUT_BINDINGS),
    ]


def _result_line(result: Any, selected: bool) -> Line:
    bg = Color.SURFACE0 if selected else Color.BASE
    line: Line = [
        Segment(f" {result.id:>4} ", Color.SUBTEXT, bg),
        Segment(f"[{result.obs_type}] ", Color.YELLOW, bg),
        Segment(result.title, Color.MAUVE if selected else Color.TEXT, bg),
        Segment(f"  ({result.score:.2f})", Color.GREEN, bg),
    ]
    concepts = ", ".join(result.concepts or [])
    if concepts:
        line.append(Segment(f"  [{concepts}]", Color.BLUE, bg))
    return line


def render_results(app: App) -> list[Line]:
    """Lines of the results list; empty on another screen."""
    screen = app.screen
    if not isinstance(screen, SearchResults):
        return []
    lines: list[Line] = [
        title_bar(
            Segment(" results for ", Color.SUBTEXT),
            Segment(f'"{screen.query}"', Color.YELLOW),
            Segment(f" ({len(screen.results)} found)", Color.SUBTEXT),
        ),
        [],
    ]
    if not screen.results:
        lines.append([Segment("No results found.", Color.SUBTEXT)])
    else:
        lines.append([Segment(" Results ", Color.BLUE)])
        lines.extend(
            _result_line(result, index == screen.selected)
            for index, result in enumerate(screen.results)
        )
    lines.append([])
    lines.append(help_bar(_RESULTS_BINDINGS))
    return lines


def handle_input(app: App, key: KeyEvent) -> None:
    """Edit the query, run the search on Enter, or go back."""
    screen = app.screen
    if key.code is Key.ESC:
        app.pop_screen()
        return
    if not isinstance(screen, Search):
        return

    if key.code is Key.ENTER:
        if screen.query:
            results = list(app.server.call_search(screen.query, None, None, None, None))
            app.screen = SearchResults(query=screen.query, results=results, selected=0)
    elif key.code is Key.BACKSPACE:
        if screen.cursor > 0:
            pos = screen.cursor - 1
            screen.query = screen.query[:pos] + screen.query[pos + 1 :]
            screen.cursor = pos
    elif key.code is Key.LEFT:
        if screen.cursor > 0:
            screen.cursor -= 1
    elif key.code is Key.RIGHT:
        if screen.cursor < len(screen.query):
            screen.cursor += 1
    elif key.code is Key.HOME:
        screen.cursor = 0
    elif key.code is Key.END:
        screen.cursor = len(screen.query)
    elif key.code is Key.CHAR:
        pos = screen.cursor
        screen.query = screen.query[:pos] + key.char + screen.query[pos:]
        screen.cursor += 1


def handle_results_input(app: App, key: KeyEvent) -> None:
    """Move through the results, open one, go back, or quit."""
    screen = app.screen
    if key.code is Key.ESC:
        app.pop_screen()
    elif key.is_char("q"):
        app.should_quit = True
    elif key.is_char("j") or key.code is Key.DOWN:
        if isinstance(screen, SearchResults) and screen.selected < len(screen.results) - 1:
            screen.selected += 1
    elif key.is_char("k") or key.code is Key.UP:
        if isinstance(screen, SearchResults) and screen.selected > 0:
            screen.selected -= 1
    elif key.code is Key.ENTER:
        if not isinstance(screen, SearchResults):
            return
        if not 0 <= screen.selected < len(screen.results):
            return
        try:
            obs = app.server.call_get(screen.results[screen.selected].id)
        except Exception:
            return
        if obs is not None:
            app.push_screen(ObservationDetail(obs=obs, scroll=0))