"""Catenary Birch API client."""

from __future__ import annotations

import time
from dataclasses import dataclass

import requests

from catenary_matrix.config import Config
from catenary_matrix.models import Snapshot, parse_snapshot


@dataclass(frozen=True)
class StopResult:
    """A stop returned by the text search endpoint."""

    name: str
    lat: float
    lon: float


class BirchClient:
    """Client for the Catenary Birch departures API."""

    def __init__(self, config: Config) -> None:
        """Initialize the Birch API client.

        Creates a requests.Session for HTTP connection reuse across polls.
        The session sets an Accept: application/json header for all requests.

        Args:
            config: Application configuration. Used for the base URL and
                the per-request timeout.
        """
        self.config = config
        self.base_url = config.api.base_url.rstrip("/")
        self.timeout = config.api.timeout_seconds
        self.session = requests.Session()
        self.session.headers.update({"Accept": "application/json"})

    def get_nearby_departures(self, lat: float, lon: float) -> dict:
        """Fetch the raw nearby-departures body for a coordinate.

        GET /nearbydeparturesfromcoords?lat={lat}&lon={lon}
        """
        resp = self.session.get(
            f"{self.base_url}/nearbydeparturesfromcoords",
            params={"lat": lat, "lon": lon},
            timeout=self.timeout,
        )
        resp.raise_for_status()
        return resp.json()

    def fetch_snapshot(self, lat: float, lon: float, now: float | None = None) -> Snapshot:
        """Fetch and parse nearby departures into a Snapshot.

        Raises:
            requests.RequestException: On network errors or non-2xx status.
            ValueError: If the body is not valid JSON or has no departures list.
        """
        raw = self.get_nearby_departures(lat, lon)
        return parse_snapshot(raw, fetched_at=time.time() if now is None else now)

    def search_stops(self, query: str) -> list[StopResult]:
        """Search for stops by name.

        GET /text_search_v1?text={query}

        Results follow the ranking list; ranked ids that are missing from
        the stops section are skipped.
        """
        if not query.strip():
            return []
        resp = self.session.get(
            f"{self.base_url}/text_search_v1",
            params={"text": query},
            timeout=self.timeout,
        )
        resp.raise_for_status()
        section = resp.json().get("stops_section") or {}
        # stops is keyed by chateau, then by stop id
        by_gtfs_id = {}
        for chateau_stops in (section.get("stops") or {}).values():
            for stop in chateau_stops.values():
                by_gtfs_id.setdefault(stop.get("gtfs_id"), stop)

        results: list[StopResult] = []
        for entry in section.get("ranking") or []:
            stop = by_gtfs_id.get(entry.get("gtfs_id"))
            if stop is None:
                continue
            point = stop.get("point") or {}
            results.append(
                StopResult(
                    name=stop.get("name", "Unknown"),
                    lat=float(point.get("y", 0.0)),
                    lon=float(point.get("x", 0.0)),
                )
            )
        return results
