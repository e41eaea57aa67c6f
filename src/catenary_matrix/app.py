"""Main application orchestrator for the live departure board."""

from __future__ import annotations

import logging
import signal
import time
from dataclasses import replace

from catenary_matrix.api import BirchClient
from catenary_matrix.board import (
    BoardState,
    BoardView,
    project_board,
    scroll_by,
    toggle_time_format,
)
from catenary_matrix.config import Config
from catenary_matrix.poller import SnapshotPoller
from catenary_matrix.renderer import BoardRenderer
from catenary_matrix.table import MAX_ROWS

logger = logging.getLogger(__name__)


class BoardApp:
    """Polls departures for one location and paints the board every frame."""

    def __init__(self, config: Config) -> None:
        """Initialize the board application.

        The terminal display is created in run(), not here, so constructing
        the app (e.g. in tests) does not take over the terminal.

        Args:
            config: Fully assembled application configuration.
        """
        self.config = config
        self.client = BirchClient(config)
        self.poller = SnapshotPoller(
            self.client,
            lat=config.location.lat,
            lon=config.location.lon,
            interval_seconds=config.refresh.interval_seconds,
        )
        self.renderer = BoardRenderer()
        self.state = BoardState(
            view=config.board.view,
            location_name=config.location.name,
            use_24h=config.board.use_24h,
        )
        self.frame_interval = 1.0 / config.display.fps
        self._page_rows = 10
        self._running = False

    def handle_key(self, key: str) -> bool:
        """Apply one key press. Returns False if the board should close."""
        if key == "r":
            self.poller.refresh_now()
        elif key == "t":
            self.state = toggle_time_format(self.state)
            logger.debug("Time format: %s", "24h" if self.state.use_24h else "12h")
        elif key in ("up", "down"):
            self.state = scroll_by(self.state, 1 if key == "down" else -1)
        elif key in ("pageup", "pagedown"):
            page = self._page_rows if key == "pagedown" else -self._page_rows
            self.state = scroll_by(self.state, page)
        elif key == "home":
            self.state = replace(self.state, scroll=0)
        elif key == "end":
            # Clamped to the last full page on the next frame
            self.state = scroll_by(self.state, MAX_ROWS)
        elif key in ("escape", "q"):
            logger.info("Received %s keypress", key)
            return False
        return True

    def frame(self, width: int, height: int, now: float | None = None):
        """Project and render the board for one frame."""
        now_ms = int((time.time() if now is None else now) * 1000)
        view = project_board(
            self.poller.snapshot,
            self.poller.highlights,
            self.state,
            width,
            height,
            now_ms,
            error=self.poller.error,
        )
        if isinstance(view, BoardView):
            # Keep the stored offset inside the rows that exist now
            self._page_rows = view.visible_rows
            self.state = replace(self.state, scroll=view.scroll)
        return self.renderer.render(view)

    def run(self) -> None:
        """Run the main application loop."""
        from catenary_matrix.display import TerminalDisplay

        signal.signal(signal.SIGTERM, lambda *_: setattr(self, "_running", False))
        logger.info(
            "Starting board for %s (%s view, refresh=%ds)",
            self.state.location_name,
            self.state.view,
            self.config.refresh.interval_seconds,
        )
        display = TerminalDisplay()
        try:
            display.update(self.frame(*display.size))
            self.poller.start()
            self._running = True
            while self._running:
                for key in display.read_keys():
                    if not self.handle_key(key):
                        self._running = False
                        break
                if not self._running:
                    break
                self.poller.tick()
                display.update(self.frame(*display.size))
                time.sleep(self.frame_interval)
        finally:
            self.poller.stop()
            display.close()
