"""Adaptive column sizing for the table and grid views.

Everything here is a pure function of the terminal size and time format.

Table columns (character widths):

  | ▉ | ROUTE | DESTINATION | ● | MAIN TIME | sep | DELAY SUFFIX |
  |   | 18%   | 55%         |   time column (the rest)            |

Route and destination have minimum widths so a narrow terminal truncates
their text instead of collapsing them. The time column is split into
fixed sub-columns; the delay suffix takes whatever is left.
"""

from __future__ import annotations

from dataclasses import dataclass

ROUTE_SHARE = 0.18
DEST_SHARE = 0.55
MIN_ROUTE_WIDTH = 10
MIN_DEST_WIDTH = 22
MIN_TIME_WIDTH = 18
# Border, route color swatch and spacing outside the three columns
TABLE_CHROME = 6

DOT_WIDTH = 2
# "23:59" vs "11:59 PM"
MAIN_WIDTH_24H = 5
MAIN_WIDTH_12H = 8
SEP_WIDTH = 1

# (minimum terminal width, columns), widest first
GRID_BREAKPOINTS = ((160, 4), (120, 3), (80, 2))
CARD_GUTTER = 2

# Board border, title and header lines
VERTICAL_CHROME = 4


@dataclass(frozen=True)
class TableLayout:
    """Character widths for one table row."""

    route: int
    destination: int
    time: int
    dot: int
    main: int
    sep: int
    suffix: int


def table_layout(width: int, use_24h: bool) -> TableLayout:
    """Column widths for the table view at a given terminal width."""
    route = max(MIN_ROUTE_WIDTH, int(width * ROUTE_SHARE))
    destination = max(MIN_DEST_WIDTH, int(width * DEST_SHARE))
    time_width = max(MIN_TIME_WIDTH, width - route - destination - TABLE_CHROME)
    main = MAIN_WIDTH_24H if use_24h else MAIN_WIDTH_12H
    # MIN_TIME_WIDTH leaves room for every fixed sub-column, so the suffix
    # absorbs the remainder and is never negative.
    suffix = time_width - DOT_WIDTH - main - SEP_WIDTH
    return TableLayout(
        route=route,
        destination=destination,
        time=time_width,
        dot=DOT_WIDTH,
        main=main,
        sep=SEP_WIDTH,
        suffix=suffix,
    )


def grid_columns(width: int) -> int:
    """Number of card columns for the grid view."""
    for min_width, columns in GRID_BREAKPOINTS:
        if width >= min_width:
            return columns
    return 1


def grid_card_width(width: int) -> int:
    """Width of one grid card, leaving a gutter between cards."""
    return max(1, width // grid_columns(width) - CARD_GUTTER)


def rows_visible(height: int) -> int:
    """Rows that fit in the scrolling body below the title and header."""
    return max(1, height - VERTICAL_CHROME)


def fit(text: str, width: int, gap: int = 1) -> str:
    """Truncate text to leave `gap` trailing blanks, then pad to width."""
    if width <= 0:
        return ""
    return text[: max(0, width - gap)].ljust(width)
