"""Viewport controller — scroll offset arithmetic over the flattened rows.

Invariant: ``0 <= scroll_offset <= max(0, total_rows - visible_rows)``.
Every function here returns a new ``ViewState`` that satisfies it.
"""

from __future__ import annotations

from ghamon.models.state import ViewState

# Title, info/progress line, blank line, column header.
HEADER_HEIGHT = 4
# Key-binding hints.
FOOTER_HEIGHT = 1

SCROLL_UP_KEYS = frozenset({"up", "k"})
SCROLL_DOWN_KEYS = frozenset({"down", "j"})
PAGE_UP_KEYS = frozenset({"pageup"})
PAGE_DOWN_KEYS = frozenset({"pagedown"})
HOME_KEYS = frozenset({"home"})
END_KEYS = frozenset({"end"})

SCROLL_KEYS = (
    SCROLL_UP_KEYS | SCROLL_DOWN_KEYS | PAGE_UP_KEYS | PAGE_DOWN_KEYS | HOME_KEYS | END_KEYS
)


def visible_rows(height: int) -> int:
    """Number of table rows that fit between the header and the footer."""
    return max(1, height - HEADER_HEIGHT - FOOTER_HEIGHT)


def clamp(scroll_offset: int, total_rows: int, visible: int) -> int:
    """Clamp an offset into ``[0, max(0, total_rows - visible)]``."""
    return min(max(0, scroll_offset), max(0, total_rows - visible))


def reclamp(view: ViewState, total_rows: int) -> ViewState:
    """Re-establish the invariant after the row count changed."""
    offset = clamp(view.scroll_offset, total_rows, visible_rows(view.height))
    if offset == view.scroll_offset:
        return view
    return view.model_copy(update={"scroll_offset": offset})


def resize(view: ViewState, width: int, height: int, total_rows: int) -> ViewState:
    """Apply a new terminal size, keeping the offset unless clamping forces it."""
    resized = view.model_copy(update={"width": width, "height": height})
    return reclamp(resized, total_rows)


def scroll(view: ViewState, key: str, total_rows: int) -> ViewState:
    """Move the viewport in response to a scroll key.

    Unknown keys leave the view unchanged.
    """
    page = visible_rows(view.height)
    offset = view.scroll_offset
    if key in SCROLL_UP_KEYS:
        offset -= 1
    elif key in SCROLL_DOWN_KEYS:
        offset += 1
    elif key in PAGE_UP_KEYS:
        offset -= page
    elif key in PAGE_DOWN_KEYS:
        offset += page
    elif key in HOME_KEYS:
        offset = 0
    elif key in END_KEYS:
        offset = total_rows
    else:
        return view
    return view.model_copy(
        update={"scroll_offset": clamp(offset, total_rows, page)}
    )
