"""
Highlight sinks

The coordinator only ever calls highlight(span) and clear_all(). The view
adapter below maps those onto an editor-style view (current_match attribute,
optional _scroll_to_match, queue_draw) and paints the current match with
cairo from the view's draw function.
"""

import logging
from typing import Protocol, Optional, Tuple

import cairo

from termfind.config import DEFAULT_HIGHLIGHT_RGBA
from termfind.match_set import MatchSpan

logger = logging.getLogger(__name__)


class HighlightSink(Protocol):
    def highlight(self, span: MatchSpan) -> None:
        ...

    def clear_all(self) -> None:
        ...


class SearchableView(Protocol):
    """Protocol defining the interface required for search UI"""

    current_match: Optional[MatchSpan]

    def queue_draw(self) -> None:
        """Request a redraw of the view"""
        ...


class ViewHighlightSink:
    def __init__(self, view: SearchableView, rgba: Tuple[float, float, float, float] = DEFAULT_HIGHLIGHT_RGBA):
        self.view = view
        self.rgba = rgba
        self.current: Optional[MatchSpan] = None

    def highlight(self, span: MatchSpan) -> None:
        self.current = span
        self.view.current_match = span
        if hasattr(self.view, '_scroll_to_match'):
            self.view._scroll_to_match(span)
        self.view.queue_draw()

    def clear_all(self) -> None:
        if self.current is None and getattr(self.view, 'current_match', None) is None:
            return
        self.current = None
        self.view.current_match = None
        self.view.queue_draw()

    def draw(self, cr: cairo.Context, line_h: float, char_w: float,
             scroll_line: int = 0, x_offset: float = 0) -> bool:
        """
        Paint the current match onto cr.

        Args:
            cr: Cairo context of the view's draw function
            line_h: Height of one line in pixels
            char_w: Width of one character cell in pixels (monospace grid)
            scroll_line: First visible line
            x_offset: Left edge of the text area (after the line-number gutter)

        Returns:
            True if anything was painted
        """
        span = self.current
        if span is None:
            return False

        cr.save()
        cr.set_antialias(cairo.ANTIALIAS_NONE)
        cr.set_source_rgba(*self.rgba)
        right_edge = cr.clip_extents()[2]
        for ln in range(span.start_line, span.end_line + 1):
            x1 = x_offset + (span.start_col if ln == span.start_line else 0) * char_w
            # Rows before the last one run to the edge of the view
            x2 = x_offset + span.end_col * char_w if ln == span.end_line else right_edge
            y = (ln - scroll_line) * line_h
            cr.rectangle(x1, y, x2 - x1, line_h)
        cr.fill()
        cr.restore()
        return True
