"""What the board shows for a given snapshot, size and moment."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import tzinfo

from catenary_matrix.differ import HighlightState
from catenary_matrix.grid import GridView, project_grid
from catenary_matrix.layout import rows_visible
from catenary_matrix.models import Snapshot
from catenary_matrix.table import TableView, project_table

VIEW_ICONS = {"table": "📋", "grid": "🧭"}


@dataclass(frozen=True)
class BoardState:
    """User-controlled board settings."""

    view: str
    location_name: str
    use_24h: bool = False
    scroll: int = 0


def toggle_time_format(state: BoardState) -> BoardState:
    """Switch between 12-hour and 24-hour times."""
    return replace(state, use_24h=not state.use_24h)


def scroll_by(state: BoardState, delta: int) -> BoardState:
    """Move the table viewport by delta rows, never above the first row.

    The lower bound depends on how many rows the snapshot has, so
    project_board() clamps it when the board is projected.
    """
    return replace(state, scroll=max(0, state.scroll + delta))


@dataclass(frozen=True)
class LoadingView:
    """Shown until the first snapshot arrives."""

    message: str = "Loading..."
    error: str | None = None


@dataclass(frozen=True)
class BoardView:
    """A fully resolved board ready to paint."""

    title: str
    footer: str
    error: str | None
    width: int
    height: int
    visible_rows: int
    body: TableView | GridView
    scroll: int = 0


def footer_text(state: BoardState) -> str:
    # The t key label names the format it switches to
    target = "12h" if state.use_24h else "24h"
    return f"[r: refresh] [t: {target}] [esc: back] [q: quit]"


def project_board(
    snapshot: Snapshot | None,
    highlights: HighlightState,
    state: BoardState,
    width: int,
    height: int,
    now_ms: int,
    error: str | None = None,
    tz: tzinfo | None = None,
) -> LoadingView | BoardView:
    """Project the current snapshot into the view selected by state."""
    if snapshot is None:
        return LoadingView(error=error)

    now = now_ms // 1000
    footer = footer_text(state)
    title = f"{VIEW_ICONS.get(state.view, '')} {state.location_name} — {footer}"
    visible = rows_visible(height)
    scroll = 0
    if state.view == "grid":
        body = project_grid(snapshot, highlights, now, now_ms, width, state.use_24h, tz)
    else:
        body = project_table(snapshot, now, width, state.use_24h, tz)
        scroll = min(state.scroll, max(0, len(body.rows) - visible))
    return BoardView(
        title=title,
        footer=footer,
        error=error,
        width=width,
        height=height,
        visible_rows=visible,
        body=body,
        scroll=scroll,
    )
