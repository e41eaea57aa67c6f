"""Chronological table projection of a snapshot."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo

from catenary_matrix.differ import DEFAULT_ROUTE_COLOR
from catenary_matrix.layout import TableLayout, fit, table_layout
from catenary_matrix.models import Snapshot, derive_status, effective_time, format_time

# Rows beyond this are never built, however tall the terminal
MAX_ROWS = 120

STATUS_DOT_COLORS = {
    "canceled": "#000000",
    "delayed": "#FF3333",
    "live": "#00FF66",
    "scheduled": "#CCCCCC",
}

# Combining long stroke overlay, drawn through each character
STRIKE = "̶"


@dataclass(frozen=True)
class TableRow:
    """One departure row, with text already fitted to the layout."""

    trip_id: str
    route_label: str
    route_color: str
    destination: str
    status: str
    dot_color: str
    effective_time: int
    main_time: str
    suffix: str
    route_cell: str
    destination_cell: str
    main_cell: str
    suffix_cell: str

    @property
    def is_canceled(self) -> bool:
        return self.status == "canceled"

    @property
    def is_delayed(self) -> bool:
        return self.status == "delayed"


@dataclass(frozen=True)
class TableView:
    layout: TableLayout
    rows: tuple[TableRow, ...]


def strike(text: str) -> str:
    """Strike through every character of text."""
    return "".join(c + STRIKE for c in text)


def project_table(
    snapshot: Snapshot,
    now: int,
    width: int,
    use_24h: bool,
    tz: tzinfo | None = None,
) -> TableView:
    """Build the table view: every future trip, soonest first.

    Trips are flattened across routes and directions, kept only if their
    effective time is strictly after now, and stably sorted so equal times
    keep their upstream order.
    """
    layout = table_layout(width, use_24h)
    flat = [
        (group, direction, trip)
        for group in snapshot.route_groups
        for direction in group.directions
        for trip in direction.trips
    ]
    upcoming = [item for item in flat if effective_time(item[2]) > now]
    upcoming.sort(key=lambda item: effective_time(item[2]))

    rows = []
    for group, direction, trip in upcoming[:MAX_ROWS]:
        status = derive_status(trip, now)
        scheduled = format_time(trip.departure_schedule, use_24h, tz)
        realtime = (
            format_time(trip.departure_realtime, use_24h, tz)
            if trip.departure_realtime is not None
            else scheduled
        )
        # The main time is always the scheduled one; a delay shows next to it.
        suffix = f"→ {realtime} (+{status.delay_minutes}m)" if status.is_delayed else ""
        main_cell = fit(scheduled, layout.main, gap=0)
        if status.is_canceled:
            # Strike only the visible text; combining marks take no columns
            shown = main_cell.rstrip()
            main_cell = strike(shown) + " " * (layout.main - len(shown))
        rows.append(
            TableRow(
                trip_id=trip.trip_id,
                route_label=group.label,
                route_color=group.color or DEFAULT_ROUTE_COLOR,
                destination=direction.headsign,
                status=status.status,
                dot_color=STATUS_DOT_COLORS[status.status],
                effective_time=status.effective_time,
                main_time=strike(scheduled) if status.is_canceled else scheduled,
                suffix=suffix,
                route_cell=fit(group.label, layout.route),
                destination_cell=fit(direction.headsign, layout.destination),
                main_cell=main_cell,
                suffix_cell=fit(suffix, layout.suffix, gap=0),
            )
        )
    return TableView(layout=layout, rows=tuple(rows))
