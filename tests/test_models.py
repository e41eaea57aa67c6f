"""Tests for catenary_matrix.models."""

from datetime import timezone

import pytest

from catenary_matrix.models import (
    Snapshot,
    Trip,
    derive_status,
    effective_time,
    format_time,
    parse_route_group,
    parse_snapshot,
    parse_trip,
)
from catenary_matrix.table import project_table

from conftest import NOW, make_trip


class TestParseTrip:
    """Tests for parse_trip() converting raw trip dicts to Trip objects."""

    def test_normal_trip(self, sample_trip_raw):
        """Verify that a real-time trip parses all fields the board uses."""
        trip = parse_trip(sample_trip_raw)
        assert trip.trip_id == "3041234"
        assert trip.departure_schedule == NOW + 600
        assert trip.departure_realtime == NOW + 720
        assert trip.arrival_schedule == NOW + 540
        assert trip.cancelled is False
        assert trip.deleted is False
        assert trip.platform == "2"

    def test_scheduled_only(self, sample_trip_scheduled_only):
        """Verify that a null realtime stays None rather than becoming 0."""
        trip = parse_trip(sample_trip_scheduled_only)
        assert trip.departure_realtime is None
        assert trip.departure_schedule == NOW + 1800
        assert trip.platform is None

    def test_missing_fields(self):
        """Verify graceful handling when the trip dict is nearly empty."""
        trip = parse_trip({})
        assert trip.trip_id == ""
        assert trip.departure_schedule is None
        assert trip.departure_realtime is None
        assert trip.cancelled is False

    def test_garbage_time_becomes_none(self):
        """Verify that a non-numeric time is treated as missing."""
        trip = parse_trip({"trip_id": "x", "departure_schedule": "soon"})
        assert trip.departure_schedule is None


class TestParseRouteGroup:
    """Tests for parse_route_group()."""

    def test_fields(self, sample_route_raw):
        group = parse_route_group(sample_route_raw)
        assert group.chateau_id == "santaclaravta"
        assert group.short_name == "22"
        assert group.route_type == 3
        assert group.closest_distance == pytest.approx(41.7)

    def test_color_gets_hash_prefix(self, sample_route_raw):
        """Verify that agency colors without '#' are normalized."""
        group = parse_route_group(sample_route_raw)
        assert group.color == "#29B6F6"
        assert group.text_color == "#000000"

    def test_directions_keep_upstream_order(self, sample_route_raw):
        group = parse_route_group(sample_route_raw)
        assert [d.headsign for d in group.directions] == ["Eastridge", "Palo Alto Transit Center"]
        assert [t.trip_id for t in group.directions[0].trips] == ["3041234", "3045678"]

    def test_label_falls_back_to_long_name(self, sample_rail_route_raw):
        group = parse_route_group(sample_rail_route_raw)
        assert group.label == "Local Weekday"
        assert group.color == ""

    def test_label_empty_when_no_names(self):
        group = parse_route_group({"chateau_id": "x", "directions": {}})
        assert group.label == ""
        assert group.directions == ()

    def test_directions_list_treated_as_empty(self):
        """Verify that a directions array (instead of an object) is ignored."""
        group = parse_route_group({
            "chateau_id": "a",
            "directions": [{"headsign": "North", "trips": [{"trip_id": "1"}]}],
        })
        assert group.directions == ()

    def test_trips_not_a_list_treated_as_empty(self):
        group = parse_route_group({
            "chateau_id": "a",
            "directions": {"0": {"headsign": "North", "trips": 5}},
        })
        assert group.directions[0].headsign == "North"
        assert group.directions[0].trips == ()

    def test_numeric_labels_become_text(self):
        """Verify that numeric names and headsigns are parsed as strings."""
        group = parse_route_group({
            "chateau_id": "a",
            "short_name": 22,
            "long_name": 500,
            "directions": {"0": {"headsign": 7, "trips": []}},
        })
        assert group.short_name == "22"
        assert group.long_name == "500"
        assert group.label == "22"
        assert group.directions[0].headsign == "7"


class TestParseSnapshot:
    """Tests for parse_snapshot()."""

    def test_parses_all_routes(self, sample_nearby_response):
        snapshot = parse_snapshot(sample_nearby_response, fetched_at=123.0)
        assert len(snapshot) == 2
        assert snapshot.fetched_at == 123.0
        assert set(snapshot.by_route()) == {"santaclaravta", "caltrain"}

    def test_empty_departures(self):
        snapshot = parse_snapshot({"departures": []})
        assert snapshot == Snapshot()

    def test_missing_departures_raises(self):
        with pytest.raises(ValueError):
            parse_snapshot({"error": "rate limited"})

    def test_non_object_raises(self):
        with pytest.raises(ValueError):
            parse_snapshot(["not", "an", "object"])

    def test_numeric_labels_project_into_table(self):
        """Verify that a feed with numeric labels still renders as table rows."""
        snapshot = parse_snapshot({"departures": [{
            "chateau_id": "a",
            "short_name": 22,
            "directions": {"0": {
                "headsign": 7,
                "trips": [{"trip_id": "t", "departure_schedule": NOW + 600}],
            }},
        }]})
        rows = project_table(snapshot, NOW, 100, True, tz=timezone.utc).rows
        assert rows[0].route_label == "22"
        assert rows[0].destination == "7"
        assert rows[0].route_cell.startswith("22")


class TestEffectiveTime:
    """Tests for the realtime → scheduled → 0 fallback."""

    def test_prefers_realtime(self):
        assert effective_time(make_trip(scheduled=100, realtime=160)) == 160

    def test_falls_back_to_scheduled(self):
        assert effective_time(make_trip(scheduled=100)) == 100

    def test_both_missing_is_zero(self):
        assert effective_time(make_trip()) == 0

    def test_realtime_only(self):
        assert effective_time(make_trip(realtime=50)) == 50


class TestDeriveStatus:
    """Tests for derive_status()."""

    def test_delayed_trip(self):
        """A trip 400s late is delayed and shows +7m (round(400/60))."""
        status = derive_status(make_trip(scheduled=NOW + 600, realtime=NOW + 1000), NOW)
        assert status.delay_seconds == 400
        assert status.is_delayed is True
        assert status.is_live is True
        assert status.delay_minutes == 7
        assert status.status == "delayed"

    def test_exactly_five_minutes_is_not_delayed(self):
        status = derive_status(make_trip(scheduled=NOW, realtime=NOW + 300), NOW)
        assert status.is_delayed is False
        assert status.status == "live"

    def test_scheduled_only(self):
        status = derive_status(make_trip(scheduled=NOW + 120), NOW)
        assert status.delay_seconds == 0
        assert status.is_live is False
        assert status.status == "scheduled"
        assert status.minutes_until == 2

    def test_cancelled_is_never_live(self):
        status = derive_status(make_trip(scheduled=NOW + 60, realtime=NOW + 60, cancelled=True), NOW)
        assert status.is_canceled is True
        assert status.is_live is False
        assert status.status == "canceled"

    def test_cancelled_wins_over_delay(self):
        status = derive_status(make_trip(scheduled=NOW, realtime=NOW + 900, cancelled=True), NOW)
        assert status.is_delayed is True
        assert status.status == "canceled"

    def test_early_trip_has_negative_delay(self):
        status = derive_status(make_trip(scheduled=NOW + 600, realtime=NOW + 480), NOW)
        assert status.delay_seconds == -120
        assert status.delay_minutes == 0

    def test_minutes_until_floors(self):
        status = derive_status(make_trip(scheduled=NOW + 119), NOW)
        assert status.minutes_until == 1

    def test_minutes_until_negative_for_past(self):
        status = derive_status(make_trip(scheduled=NOW - 30), NOW)
        assert status.minutes_until == -1

    def test_deterministic(self):
        trip = Trip(trip_id="a", departure_schedule=NOW + 600, departure_realtime=NOW + 1000)
        assert derive_status(trip, NOW) == derive_status(trip, NOW)


class TestFormatTime:
    """Tests for format_time()."""

    def test_24h(self):
        # 2025-10-09 08:53:20 UTC
        assert format_time(NOW, True, timezone.utc) == "08:53"

    def test_12h_pads_hour(self):
        assert format_time(NOW, False, timezone.utc) == "08:53 AM"

    def test_12h_afternoon(self):
        assert format_time(NOW + 6 * 3600, False, timezone.utc) == "02:53 PM"

    def test_missing(self):
        assert format_time(None, True) == "—"
