"""Data models for nearby-departure snapshots and per-trip status."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, tzinfo

# A departure more than 5 minutes behind schedule counts as delayed.
DELAY_THRESHOLD_SECONDS = 300

# Placeholder for a missing time, matching the board's em dash.
MISSING_TIME = "—"


@dataclass(frozen=True)
class Trip:
    """One scheduled or real-time departure of a vehicle from the stop.

    Times are unix seconds. Either may be None when the upstream feed has
    no value; when both are missing the trip's effective time is 0, which
    always sorts first and is filtered out as being in the past.

    Attributes:
        trip_id: Upstream GTFS trip identifier.
        departure_schedule: Scheduled departure time, or None.
        departure_realtime: Real-time predicted departure, or None when the
            agency publishes no prediction for this trip.
        arrival_schedule: Scheduled arrival time, or None.
        arrival_realtime: Real-time predicted arrival, or None.
        cancelled: True if the agency has cancelled this trip.
        deleted: True if the trip was removed from the real-time feed.
        platform: Platform code, or None if not reported.
    """

    trip_id: str
    departure_schedule: int | None = None
    departure_realtime: int | None = None
    arrival_schedule: int | None = None
    arrival_realtime: int | None = None
    cancelled: bool = False
    deleted: bool = False
    platform: str | None = None


@dataclass(frozen=True)
class Direction:
    """A headsign and the trips heading towards it, in upstream order."""

    direction_id: str
    headsign: str
    trips: tuple[Trip, ...] = ()


@dataclass(frozen=True)
class RouteGroup:
    """One route serving the queried location.

    Attributes:
        chateau_id: Stable route/operator identifier, unique per snapshot.
        route_id: Agency route identifier.
        short_name: Short route label (e.g. "22"), may be empty.
        long_name: Long route label, used when short_name is empty.
        color: Route color as "#RRGGBB", or empty if the agency has none.
        text_color: Text color paired with color.
        route_type: GTFS route_type (0 tram, 1 subway, 2 rail, 3 bus, ...).
        closest_distance: Distance in meters from the queried coordinates.
        directions: Directions in upstream enumeration order.
    """

    chateau_id: str
    route_id: str = ""
    short_name: str = ""
    long_name: str = ""
    color: str = ""
    text_color: str = ""
    route_type: int = 3
    closest_distance: float = 0.0
    directions: tuple[Direction, ...] = ()

    @property
    def label(self) -> str:
        """Display label: short name, falling back to long name."""
        return self.short_name or self.long_name or ""


@dataclass(frozen=True)
class Snapshot:
    """The full result of one successful fetch. Replaced wholesale."""

    route_groups: tuple[RouteGroup, ...] = ()
    fetched_at: float = 0.0

    def by_route(self) -> dict[str, RouteGroup]:
        """Route groups keyed by chateau_id."""
        return {group.chateau_id: group for group in self.route_groups}

    def __len__(self) -> int:
        return len(self.route_groups)


@dataclass(frozen=True)
class TripStatus:
    """Display-ready fields derived from a Trip at a fixed point in time."""

    effective_time: int
    delay_seconds: int
    is_delayed: bool
    is_canceled: bool
    is_live: bool
    minutes_until: int

    @property
    def status(self) -> str:
        """One of "canceled", "delayed", "live" or "scheduled"."""
        if self.is_canceled:
            return "canceled"
        if self.is_delayed:
            return "delayed"
        if self.is_live:
            return "live"
        return "scheduled"

    @property
    def delay_minutes(self) -> int:
        """Delay rounded to whole minutes, never negative."""
        return max(0, round(self.delay_seconds / 60))


def effective_time(trip: Trip) -> int:
    """Real-time departure if known, else scheduled, else 0."""
    if trip.departure_realtime is not None:
        return trip.departure_realtime
    if trip.departure_schedule is not None:
        return trip.departure_schedule
    return 0


def derive_status(trip: Trip, now: int) -> TripStatus:
    """Derive delay, liveness and countdown for a trip.

    Args:
        trip: The trip to inspect.
        now: Current time in unix seconds.
    """
    when = effective_time(trip)
    realtime = trip.departure_realtime
    scheduled = trip.departure_schedule
    delay = realtime - scheduled if realtime is not None and scheduled is not None else 0
    return TripStatus(
        effective_time=when,
        delay_seconds=delay,
        is_delayed=delay > DELAY_THRESHOLD_SECONDS,
        is_canceled=trip.cancelled,
        is_live=realtime is not None and not trip.cancelled,
        # Floor division keeps departures that just left at -1, not 0.
        minutes_until=(when - now) // 60,
    )


def format_time(seconds: int | None, use_24h: bool, tz: tzinfo | None = None) -> str:
    """Format a unix timestamp as "23:59" or "11:59 PM".

    The 12-hour form keeps a zero-padded hour so both formats have a fixed
    width. Local time is used unless tz is given.
    """
    if not seconds:
        return MISSING_TIME
    dt = datetime.fromtimestamp(seconds, tz)
    return dt.strftime("%H:%M" if use_24h else "%I:%M %p")


def _optional_int(value) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _text(value) -> str:
    """Labels are shown as text even when a feed sends a number."""
    if value is None or isinstance(value, (dict, list)):
        return ""
    return str(value)


def parse_trip(raw: dict) -> Trip:
    """Parse a raw trip dict from the nearby-departures response."""
    platform = raw.get("platform")
    return Trip(
        trip_id=str(raw.get("trip_id") or ""),
        departure_schedule=_optional_int(raw.get("departure_schedule")),
        departure_realtime=_optional_int(raw.get("departure_realtime")),
        arrival_schedule=_optional_int(raw.get("arrival_schedule")),
        arrival_realtime=_optional_int(raw.get("arrival_realtime")),
        cancelled=bool(raw.get("cancelled", False)),
        deleted=bool(raw.get("deleted", False)),
        platform=str(platform) if platform is not None else None,
    )


def parse_direction(direction_key: str, raw: dict) -> Direction:
    """Parse one entry of a route's directions mapping."""
    trips = raw.get("trips")
    if not isinstance(trips, list):
        trips = []
    return Direction(
        direction_id=str(raw.get("direction_id", direction_key)),
        headsign=_text(raw.get("headsign")),
        trips=tuple(parse_trip(t) for t in trips if isinstance(t, dict)),
    )


def parse_route_group(raw: dict) -> RouteGroup:
    """Parse a raw route group from the departures list."""
    directions = raw.get("directions")
    if not isinstance(directions, dict):
        directions = {}
    route_type = _optional_int(raw.get("route_type"))
    try:
        distance = float(raw.get("closest_distance") or 0.0)
    except (TypeError, ValueError):
        distance = 0.0
    return RouteGroup(
        chateau_id=str(raw.get("chateau_id") or ""),
        route_id=str(raw.get("route_id") or ""),
        short_name=_text(raw.get("short_name")),
        long_name=_text(raw.get("long_name")),
        color=_normalize_color(raw.get("color")),
        text_color=_normalize_color(raw.get("text_color")),
        route_type=route_type if route_type is not None else 3,
        closest_distance=distance,
        # dicts keep insertion order, which is the upstream enumeration order
        directions=tuple(
            parse_direction(str(key), value)
            for key, value in directions.items()
            if isinstance(value, dict)
        ),
    )


def parse_snapshot(raw: dict, fetched_at: float = 0.0) -> Snapshot:
    """Parse a full nearby-departures response body.

    Raises:
        ValueError: If the body is not an object with a departures list.
    """
    if not isinstance(raw, dict):
        raise ValueError("Nearby departures response is not a JSON object")
    departures = raw.get("departures")
    if not isinstance(departures, list):
        raise ValueError("Nearby departures response has no departures list")
    return Snapshot(
        route_groups=tuple(parse_route_group(d) for d in departures if isinstance(d, dict)),
        fetched_at=fetched_at,
    )


def _normalize_color(value) -> str:
    """Agencies send colors with or without a leading '#'."""
    if not value:
        return ""
    value = str(value).strip()
    return value if value.startswith("#") else f"#{value}"
