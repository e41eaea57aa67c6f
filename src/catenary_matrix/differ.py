"""Change detection between consecutive snapshots, for card highlighting."""

from __future__ import annotations

from itertools import islice

from catenary_matrix.models import RouteGroup, Snapshot, effective_time

# Only the next few departures matter: a route whose 4th departure moved
# should not flash.
COMPARED_TRIPS = 3

# How long a highlight stays active after a change, in milliseconds
HIGHLIGHT_WINDOW_MS = 3000

# Full blink cycle in milliseconds. First half = accent, second = neutral.
BLINK_PERIOD_MS = 400

HIGHLIGHT_ACCENT = "#00FF66"
HIGHLIGHT_NEUTRAL = "#222222"
# Border for routes the agency gives no color
DEFAULT_ROUTE_COLOR = "#888888"


def first_times(group: RouteGroup, count: int = COMPARED_TRIPS) -> tuple[int, ...]:
    """First `count` effective times in direction-then-trip enumeration order."""
    times = (
        effective_time(trip)
        for direction in group.directions
        for trip in direction.trips
    )
    return tuple(islice(times, count))


def diff_snapshots(
    previous: Snapshot | None,
    current: Snapshot,
    now_ms: int,
) -> dict[str, int]:
    """Return {chateau_id: now_ms} for routes whose next departures moved.

    Routes that appear in only one of the two snapshots are not compared.
    """
    if previous is None:
        return {}
    old_groups = previous.by_route()
    changed: dict[str, int] = {}
    for group in current.route_groups:
        old = old_groups.get(group.chateau_id)
        if old is None:
            continue
        if first_times(old) != first_times(group):
            changed[group.chateau_id] = now_ms
    return changed


class HighlightState:
    """When each route last changed, with lazy expiry.

    Entries are overwritten on every new change and never removed; whether
    a highlight is still showing is decided at read time.
    """

    def __init__(self, window_ms: int = HIGHLIGHT_WINDOW_MS) -> None:
        self.window_ms = window_ms
        self._changed_at: dict[str, int] = {}

    def mark(self, changes: dict[str, int]) -> None:
        """Record change timestamps from diff_snapshots()."""
        self._changed_at.update(changes)

    def changed_at(self, route_id: str) -> int | None:
        return self._changed_at.get(route_id)

    def is_active(self, route_id: str, now_ms: int) -> bool:
        """True while now_ms is within the window after the last change."""
        ts = self._changed_at.get(route_id)
        return ts is not None and now_ms - ts < self.window_ms

    def border_color(self, route_id: str, base_color: str, now_ms: int) -> str:
        """Card border color: blinking while highlighted, else the route color."""
        if self.is_active(route_id, now_ms):
            if now_ms % BLINK_PERIOD_MS < BLINK_PERIOD_MS // 2:
                return HIGHLIGHT_ACCENT
            return HIGHLIGHT_NEUTRAL
        return base_color or DEFAULT_ROUTE_COLOR

    def __len__(self) -> int:
        return len(self._changed_at)
