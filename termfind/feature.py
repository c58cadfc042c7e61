#!/usr/bin/env python3
"""
Find feature installation

Wires a SearchCoordinator for one searchable surface and its view:

    from termfind.feature import install_find_feature

    finder = install_find_feature(editor.buf, editor.view, on_result=bar.update_match_label)
    finder.submit(entry.get_text())

The view's draw function should call finder.sink.draw(cr, ...) so the current
match gets painted.
"""

from typing import Optional, Callable, Any

from termfind.config import FindSettings, load_settings, configure_logging
from termfind.coordinator import SearchCoordinator
from termfind.engine import LineSearchEngine
from termfind.glib_dispatch import GLibDispatcher
from termfind.highlight import ViewHighlightSink, SearchableView


def has_find_support(view: Any) -> bool:
    """Check that the view can show a highlighted match"""
    return hasattr(view, 'queue_draw')


def install_find_feature(surface: Any, view: SearchableView,
                         settings: Optional[FindSettings] = None,
                         on_result: Optional[Callable[[int], None]] = None) -> SearchCoordinator:
    """
    Build a coordinator that searches surface and highlights on view.

    Args:
        surface: Buffer exposing total() and get_line()
        view: View exposing current_match and queue_draw()
        settings: Find settings, loaded from the environment if omitted
        on_result: Called on the main loop with the match count of each search

    Returns:
        The SearchCoordinator; its sink is the ViewHighlightSink for drawing
    """
    if not has_find_support(view):
        raise TypeError(f"{type(view).__name__} cannot display search highlights (no queue_draw)")

    settings = settings or load_settings()
    configure_logging(settings.log_level)

    return SearchCoordinator(
        surface,
        LineSearchEngine(max_matches=settings.max_matches),
        ViewHighlightSink(view, rgba=settings.highlight_rgba),
        dispatcher=GLibDispatcher(timeout_ms=settings.engine_timeout_ms),
        on_result=on_result,
        settings=settings,
    )
