"""Shared fixtures with sample Birch API JSON responses."""

import pytest

from catenary_matrix.models import Direction, RouteGroup, Snapshot, Trip

# Fixed "now" for deterministic projections (unix seconds)
NOW = 1_760_000_000


def make_trip(
    trip_id: str = "t1",
    scheduled: int | None = None,
    realtime: int | None = None,
    cancelled: bool = False,
) -> Trip:
    return Trip(
        trip_id=trip_id,
        departure_schedule=scheduled,
        departure_realtime=realtime,
        cancelled=cancelled,
    )


def make_group(
    chateau_id: str = "vta",
    trips: list[Trip] | None = None,
    short_name: str = "22",
    long_name: str = "Palo Alto - Eastridge",
    color: str = "#29B6F6",
    headsign: str = "Eastridge",
    directions: list[Direction] | None = None,
) -> RouteGroup:
    if directions is None:
        directions = [Direction(direction_id="0", headsign=headsign, trips=tuple(trips or []))]
    return RouteGroup(
        chateau_id=chateau_id,
        route_id=chateau_id.upper(),
        short_name=short_name,
        long_name=long_name,
        color=color,
        directions=tuple(directions),
    )


def make_snapshot(*groups: RouteGroup) -> Snapshot:
    return Snapshot(route_groups=tuple(groups), fetched_at=float(NOW))


@pytest.fixture
def sample_trip_raw():
    """A single real-time trip running two minutes late."""
    return {
        "trip_id": "3041234",
        "gtfs_frequency_start_time": None,
        "gtfs_schedule_start_day": "20251009",
        "is_frequency": False,
        "departure_schedule": NOW + 600,
        "departure_realtime": NOW + 720,
        "arrival_schedule": NOW + 540,
        "arrival_realtime": NOW + 660,
        "stop_id": "60112",
        "trip_short_name": "",
        "tz": "America/Los_Angeles",
        "is_interpolated": False,
        "cancelled": False,
        "deleted": False,
        "platform": "2",
        "level_id": None,
    }


@pytest.fixture
def sample_trip_scheduled_only():
    """A trip with no real-time prediction."""
    return {
        "trip_id": "3045678",
        "departure_schedule": NOW + 1800,
        "departure_realtime": None,
        "arrival_schedule": None,
        "arrival_realtime": None,
        "cancelled": False,
        "deleted": False,
        "platform": None,
    }


@pytest.fixture
def sample_trip_cancelled():
    """A cancelled trip that still has a real-time time."""
    return {
        "trip_id": "3049999",
        "departure_schedule": NOW + 900,
        "departure_realtime": NOW + 900,
        "cancelled": True,
        "deleted": False,
    }


@pytest.fixture
def sample_route_raw(sample_trip_raw, sample_trip_scheduled_only, sample_trip_cancelled):
    """A bus route with two directions."""
    return {
        "chateau_id": "santaclaravta",
        "route_id": "22",
        "color": "29B6F6",
        "text_color": "#000000",
        "short_name": "22",
        "long_name": "Palo Alto - Eastridge",
        "route_type": 3,
        "closest_distance": 41.7,
        "directions": {
            "22-0": {
                "headsign": "Eastridge",
                "direction_id": "22-0",
                "trips": [sample_trip_raw, sample_trip_scheduled_only],
            },
            "22-1": {
                "headsign": "Palo Alto Transit Center",
                "direction_id": "22-1",
                "trips": [sample_trip_cancelled],
            },
        },
    }


@pytest.fixture
def sample_rail_route_raw():
    """A rail route with a single direction and no colors."""
    return {
        "chateau_id": "caltrain",
        "route_id": "Local",
        "color": "",
        "text_color": "",
        "short_name": "",
        "long_name": "Local Weekday",
        "route_type": 2,
        "closest_distance": 120.0,
        "directions": {
            "SB": {
                "headsign": "Tamien",
                "direction_id": "SB",
                "trips": [
                    {
                        "trip_id": "151",
                        "departure_schedule": NOW + 300,
                        "departure_realtime": None,
                        "cancelled": False,
                        "deleted": False,
                    }
                ],
            }
        },
    }


@pytest.fixture
def sample_nearby_response(sample_route_raw, sample_rail_route_raw):
    """Full body of GET /nearbydeparturesfromcoords."""
    return {
        "number_of_stops_searched_through": 12,
        "bus_limited_metres": 1500.0,
        "rail_and_other_limited_metres": 5000.0,
        "departures": [sample_route_raw, sample_rail_route_raw],
        "stop": {},
        "debug": {},
    }


@pytest.fixture
def sample_search_response():
    """Body of GET /text_search_v1 with one ranked id missing from stops."""
    return {
        "stops_section": {
            "stops": {
                "santaclaravta": {
                    "60112": {
                        "gtfs_id": "60112",
                        "name": "San Jose Diridon Station",
                        "point": {"x": -121.9027, "y": 37.3297},
                    },
                },
                "caltrain": {
                    "70261": {
                        "gtfs_id": "70261",
                        "name": "San Jose Diridon Caltrain",
                        "point": {"x": -121.9030, "y": 37.3300},
                    },
                },
            },
            "ranking": [
                {"gtfs_id": "70261", "score": 0.98},
                {"gtfs_id": "missing", "score": 0.50},
                {"gtfs_id": "60112", "score": 0.40},
            ],
        }
    }


@pytest.fixture
def sample_config_yaml(tmp_path):
    """Create a temporary YAML config file."""
    yaml_content = """location:
  name: "Palo Alto"
  lat: 37.4434
  lon: -122.1651

board:
  view: grid
  use_24h: true

refresh:
  interval_seconds: 30

api:
  base_url: "http://localhost:8080"
  timeout_seconds: 5

display:
  fps: 20
"""
    config_file = tmp_path / "config.yaml"
    config_file.write_text(yaml_content)
    return str(config_file)
