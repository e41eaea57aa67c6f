"""Cooperative snapshot poller driven by the app's frame loop."""

from __future__ import annotations

import logging
import time
from typing import Callable

from catenary_matrix.api import BirchClient
from catenary_matrix.differ import HighlightState, diff_snapshots
from catenary_matrix.models import Snapshot

logger = logging.getLogger(__name__)

FETCH_ERROR_MESSAGE = "⚠ Unable to refresh data."


class SnapshotPoller:
    """Owns fetch scheduling and the current snapshot for one location.

    There is no background thread: the frame loop calls tick() and the
    fetch runs inline when the periodic deadline has passed. A manual
    refresh_now() fetches immediately without moving that deadline.

    Every fetch gets an increasing request number. A completion older than
    the last applied one is dropped, so a slow response can never
    overwrite newer data.

    Attributes:
        snapshot: Last successfully fetched snapshot, or None before the
            first success.
        highlights: Per-route change timestamps fed by the differ.
        error: User-visible message after a failed fetch, cleared on the
            next success.
        last_updated: Unix time of the last successful fetch (0.0 if none).
    """

    def __init__(
        self,
        client: BirchClient,
        lat: float,
        lon: float,
        interval_seconds: int = 60,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._client = client
        self._lat = lat
        self._lon = lon
        self._interval = interval_seconds
        self._clock = clock
        self.snapshot: Snapshot | None = None
        self.highlights = HighlightState()
        self.error: str | None = None
        self.last_updated = 0.0
        self._running = False
        self._next_due: float | None = None
        self._issued = 0
        self._applied = 0

    @property
    def running(self) -> bool:
        return self._running

    @property
    def next_due(self) -> float | None:
        """Unix time of the next periodic fetch, or None when stopped."""
        return self._next_due

    def start(self) -> None:
        """Fetch immediately and schedule periodic fetches."""
        if self._running:
            return
        self._running = True
        self._next_due = self._clock() + self._interval
        logger.info(
            "Polling (%.4f, %.4f) every %ds", self._lat, self._lon, self._interval
        )
        self._fetch()

    def tick(self) -> bool:
        """Run the periodic fetch if it is due. Returns True if one ran."""
        if not self._running or self._next_due is None:
            return False
        now = self._clock()
        if now < self._next_due:
            return False
        # Skip missed slots (e.g. after a slow fetch) instead of catching up
        while self._next_due <= now:
            self._next_due += self._interval
        self._fetch()
        return True

    def refresh_now(self) -> bool:
        """Fetch out of band. The periodic schedule is left untouched."""
        logger.debug("Manual refresh requested")
        return self._fetch()

    def stop(self) -> None:
        """Cancel periodic fetching. Safe to call more than once."""
        if self._running:
            logger.info("Stopped polling")
        self._running = False
        self._next_due = None

    def _fetch(self) -> bool:
        """Fetch one snapshot and apply the outcome. Returns True on success."""
        self._issued += 1
        seq = self._issued
        t0 = self._clock()
        try:
            snapshot = self._client.fetch_snapshot(self._lat, self._lon, now=t0)
        except Exception as exc:
            self._apply_failure(seq, exc)
            return False
        applied = self._apply_snapshot(seq, snapshot)
        if applied:
            logger.info(
                "Fetched %d routes (%.1fs)", len(snapshot), self._clock() - t0
            )
        return applied

    def _apply_snapshot(self, seq: int, snapshot: Snapshot) -> bool:
        if not self._running:
            logger.debug("Discarding response #%d: poller stopped", seq)
            return False
        if seq < self._applied:
            logger.debug("Discarding stale response #%d (have #%d)", seq, self._applied)
            return False
        now_ms = int(self._clock() * 1000)
        previous, self.snapshot = self.snapshot, snapshot
        changes = diff_snapshots(previous, snapshot, now_ms)
        if changes:
            logger.debug("Departures changed for %s", ", ".join(sorted(changes)))
            self.highlights.mark(changes)
        self.error = None
        self.last_updated = self._clock()
        self._applied = seq
        return True

    def _apply_failure(self, seq: int, exc: Exception) -> None:
        if not self._running or seq < self._applied:
            return
        logger.warning("Failed to fetch departures: %s", exc, exc_info=True)
        self.error = FETCH_ERROR_MESSAGE
