"""Route-grouped card projection of a snapshot."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo

from catenary_matrix.differ import HighlightState
from catenary_matrix.layout import grid_card_width, grid_columns
from catenary_matrix.models import Snapshot, derive_status, effective_time, format_time

# Cards only show departures within the next 150 minutes
CUTOFF_SECONDS = 150 * 60
# Departures listed per direction on a card
TRIPS_PER_DIRECTION = 3


@dataclass(frozen=True)
class CardTrip:
    trip_id: str
    effective_time: int
    time: str
    minutes_until: int
    color: str


@dataclass(frozen=True)
class CardDirection:
    direction_id: str
    headsign: str
    trips: tuple[CardTrip, ...]


@dataclass(frozen=True)
class Card:
    """One route's card: its title, border color and upcoming trips."""

    chateau_id: str
    title: str
    border_color: str
    highlighted: bool
    directions: tuple[CardDirection, ...]


@dataclass(frozen=True)
class GridView:
    columns: int
    card_width: int
    cards: tuple[Card, ...]


def countdown_color(minutes: int) -> str:
    """Green when imminent, yellow within half an hour, grey otherwise."""
    if minutes < 5:
        return "#00FF66"
    if minutes < 30:
        return "#FFFF33"
    return "#CCCCCC"


def in_window(when: int, now: int) -> bool:
    """True if a departure is in the future and inside the cutoff."""
    return 0 < when - now <= CUTOFF_SECONDS


def project_grid(
    snapshot: Snapshot,
    highlights: HighlightState,
    now: int,
    now_ms: int,
    width: int,
    use_24h: bool,
    tz: tzinfo | None = None,
) -> GridView:
    """Build the grid view: one card per route with departures in the window.

    Directions with no trip in the window are dropped, and a route with no
    remaining directions gets no card at all. Trips keep upstream order,
    which the feed already sorts by time.
    """
    cards = []
    for group in snapshot.route_groups:
        directions = []
        for direction in group.directions:
            trips = [t for t in direction.trips if in_window(effective_time(t), now)]
            if not trips:
                continue
            card_trips = []
            for trip in trips[:TRIPS_PER_DIRECTION]:
                status = derive_status(trip, now)
                when = status.effective_time
                minutes = status.minutes_until
                card_trips.append(
                    CardTrip(
                        trip_id=trip.trip_id,
                        effective_time=when,
                        time=format_time(when, use_24h, tz),
                        minutes_until=minutes,
                        color=countdown_color(minutes),
                    )
                )
            directions.append(
                CardDirection(
                    direction_id=direction.direction_id,
                    headsign=direction.headsign,
                    trips=tuple(card_trips),
                )
            )
        if not directions:
            continue
        cards.append(
            Card(
                chateau_id=group.chateau_id,
                title=group.label,
                border_color=highlights.border_color(group.chateau_id, group.color, now_ms),
                highlighted=highlights.is_active(group.chateau_id, now_ms),
                directions=tuple(directions),
            )
        )
    return GridView(
        columns=grid_columns(width),
        card_width=grid_card_width(width),
        cards=tuple(cards),
    )
