"""rich-based departure board renderer.

Turns the view models from board.project_board() into rich renderables:
a rounded panel of fixed-width text rows for the table view, and a grid
of bordered route cards inside a double panel for the grid view.

The renderer is stateless. Call render() every frame; blinking borders
and countdowns are already resolved in the view model for that moment.
"""

from __future__ import annotations

from functools import lru_cache

from rich import box
from rich.color import Color, ColorParseError
from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from catenary_matrix.board import BoardView, LoadingView
from catenary_matrix.grid import Card, GridView
from catenary_matrix.table import TableRow, TableView

HEADER_COLOR = "#8888FF"
TEXT_COLOR = "#CCCCCC"
MUTED_COLOR = "#999999"
ERROR_COLOR = "red"
FALLBACK_COLOR = "#888888"

# Minimum card height in lines, border included
CARD_MIN_HEIGHT = 8


@lru_cache(maxsize=256)
def safe_color(value: str, fallback: str = FALLBACK_COLOR) -> str:
    """Return value if rich can parse it as a color, else fallback.

    Route colors come straight from agency feeds and are not always valid.
    """
    try:
        Color.parse(value)
    except ColorParseError:
        return fallback
    return value


class BoardRenderer:
    """Paints board view models as rich renderables."""

    def render(self, view: BoardView | LoadingView) -> RenderableType:
        if isinstance(view, LoadingView):
            return self.render_loading(view)
        if isinstance(view.body, GridView):
            return self._render_grid(view, view.body)
        return self._render_table(view, view.body)

    def render_loading(self, view: LoadingView) -> RenderableType:
        """Plain loading text, with the last fetch error underneath if any."""
        text = Text(view.message)
        if view.error:
            text.append("\n")
            text.append(view.error, style=ERROR_COLOR)
        return text

    def _render_table(self, view: BoardView, table: TableView) -> RenderableType:
        layout = table.layout
        lines: list[Text] = []
        if view.error:
            lines.append(Text(view.error, style=ERROR_COLOR))

        header = Text(style=HEADER_COLOR)
        # +2 for the route color swatch in front of each row
        header.append("ROUTE".ljust(layout.route + 2))
        header.append("DESTINATION".ljust(layout.destination))
        header.append("DEPARTS")
        lines.append(header)

        room = max(0, view.visible_rows - (1 if view.error else 0))
        start = min(view.scroll, max(0, len(table.rows) - room))
        for row in table.rows[start:start + room]:
            lines.append(self._table_row(row, layout.dot, layout.sep))

        return Panel(
            Group(*lines),
            title=view.title,
            title_align="left",
            box=box.ROUNDED,
            width=view.width,
            height=view.height,
        )

    def _table_row(self, row: TableRow, dot_width: int, sep_width: int) -> Text:
        text = Text()
        text.append("▉ ", style=safe_color(row.route_color))
        text.append(row.route_cell, style=TEXT_COLOR)
        text.append(row.destination_cell, style=TEXT_COLOR)
        text.append("● "[:dot_width], style=safe_color(row.dot_color))
        main_color = "#FF3333" if row.is_canceled else "#FFFFFF"
        text.append(row.main_cell, style=f"bold {main_color}")
        text.append(" " * sep_width)
        text.append(row.suffix_cell, style="#FF5555" if row.is_delayed else MUTED_COLOR)
        return text

    def _render_grid(self, view: BoardView, grid: GridView) -> RenderableType:
        parts: list[RenderableType] = []
        if view.error:
            parts.append(Text(view.error, style=ERROR_COLOR))

        layout = Table.grid(padding=(0, 1))
        for _ in range(grid.columns):
            layout.add_column(width=grid.card_width)
        cards = [self._card(card, grid.card_width) for card in grid.cards]
        for start in range(0, len(cards), grid.columns):
            chunk = cards[start:start + grid.columns]
            chunk += [Text("")] * (grid.columns - len(chunk))
            layout.add_row(*chunk)
        parts.append(layout)

        return Panel(
            Group(*parts),
            title=view.title,
            title_align="left",
            box=box.DOUBLE,
            width=view.width,
            height=view.height,
        )

    def _card(self, card: Card, width: int) -> Panel:
        body = Text()
        for i, direction in enumerate(card.directions):
            if i:
                body.append("\n")
            body.append("→ ")
            body.append(direction.headsign, style="bold")
            for trip in direction.trips:
                body.append("\n")
                body.append(f"{trip.time} ({trip.minutes_until}m)", style=safe_color(trip.color))
        lines = sum(1 + len(d.trips) for d in card.directions)
        return Panel(
            body,
            title=card.title,
            border_style=safe_color(card.border_color),
            width=width,
            height=max(CARD_MIN_HEIGHT, lines + 2),
            padding=(0, 1),
        )
