"""Configuration loading: defaults → YAML overlay → argparse overlay."""

from __future__ import annotations

import argparse
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

VIEWS = ("table", "grid")


@dataclass
class LocationConfig:
    """The location whose nearby departures are shown.

    Attributes:
        name: Label shown in the board title.
        lat: Latitude in decimal degrees.
        lon: Longitude in decimal degrees.
    """

    # Default location: San José Diridon
    name: str = "San Jose Diridon"
    lat: float = 37.3297
    lon: float = -121.9027


@dataclass
class BoardConfig:
    """Board presentation settings.

    Attributes:
        view: "table" for the dense chronological list, "grid" for the
            route-grouped card view.
        use_24h: Show times as "23:59" instead of "11:59 PM". Can be
            toggled at runtime with the t key.
    """

    view: str = "table"
    use_24h: bool = False


@dataclass
class RefreshConfig:
    """API refresh interval settings.

    Attributes:
        interval_seconds: Seconds between periodic fetches. Manual refreshes
            (r key) happen in addition to these and do not shift them.
    """

    interval_seconds: int = 60


@dataclass
class ApiConfig:
    """Upstream departures API settings."""

    base_url: str = "https://birch.catenarymaps.org"
    # Per-request timeout for every API call
    timeout_seconds: int = 10


@dataclass
class DisplayConfig:
    """Terminal display settings.

    Attributes:
        fps: Target frames per second for the render loop. Highlight blinking
            has a 400 ms period, so values below 5 make it stutter.
        log_file: Where log output goes while the live board owns the
            terminal.
    """

    fps: int = 10
    log_file: str = "catenary-matrix.log"


@dataclass
class Config:
    """Top-level application configuration.

    Assembled from three layers with increasing priority:
      1. Hardcoded defaults (dataclass field values)
      2. YAML file overlay (config.yaml or --config path)
      3. CLI argument overlay (--lat, --view, --refresh, etc.)

    Attributes:
        location: Location to query.
        board: View mode and time format.
        refresh: Poll interval.
        api: Upstream API settings.
        display: Terminal display settings.
        search: CLI-only: stop name to search for (--search).
        fetch_test: CLI-only: if True, print departures to stdout and exit.
        debug: CLI-only: if True, enable debug-level logging.
    """

    location: LocationConfig = field(default_factory=LocationConfig)
    board: BoardConfig = field(default_factory=BoardConfig)
    refresh: RefreshConfig = field(default_factory=RefreshConfig)
    api: ApiConfig = field(default_factory=ApiConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    # CLI-only flags (not persisted in YAML)
    search: str | None = None
    fetch_test: bool = False
    debug: bool = False


def _apply_yaml(config: Config, yaml_path: str) -> None:
    """Overlay YAML config values onto the Config object."""
    if not os.path.exists(yaml_path):
        return

    with open(yaml_path, "r") as f:
        data = yaml.safe_load(f)

    if not data:
        return

    if "location" in data:
        loc = data["location"]
        for key in ("name", "lat", "lon"):
            if key in loc:
                setattr(config.location, key, loc[key])

    if "board" in data:
        b = data["board"]
        for key in ("view", "use_24h"):
            if key in b:
                setattr(config.board, key, b[key])
        if config.board.view not in VIEWS:
            raise ValueError(f"board.view must be one of {VIEWS}, got {config.board.view!r}")

    if "refresh" in data:
        r = data["refresh"]
        if "interval_seconds" in r:
            config.refresh.interval_seconds = r["interval_seconds"]

    if "api" in data:
        a = data["api"]
        for key in ("base_url", "timeout_seconds"):
            if key in a:
                setattr(config.api, key, a[key])

    if "display" in data:
        d = data["display"]
        for key in ("fps", "log_file"):
            if key in d:
                setattr(config.display, key, d[key])


def _build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser.

    All arguments are optional overlays on top of YAML config.
    """
    parser = argparse.ArgumentParser(
        prog="catenary-matrix",
        description="Terminal transit departure board",
    )
    parser.add_argument(
        "--config",
        type=str,
        help="Path to YAML config file",
    )
    parser.add_argument(
        "--lat",
        type=float,
        help="Latitude of the location to show",
    )
    parser.add_argument(
        "--lon",
        type=float,
        help="Longitude of the location to show",
    )
    parser.add_argument(
        "--name",
        type=str,
        help="Display name for the location",
    )
    parser.add_argument(
        "--view",
        choices=VIEWS,
        help="Board view: chronological table or route grid",
    )
    parser.add_argument(
        "--24h",
        dest="use_24h",
        action="store_true",
        default=None,
        help="Start with 24-hour times",
    )
    parser.add_argument(
        "--refresh",
        type=int,
        help="Refresh interval in seconds",
    )
    parser.add_argument(
        "--search",
        type=str,
        help="Search for a stop by name and print its coordinates",
    )
    parser.add_argument(
        "--fetch-test",
        action="store_true",
        default=False,
        help="Fetch and print live departures to stdout",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Enable debug logging",
    )
    return parser


def _apply_args(config: Config, args: argparse.Namespace) -> None:
    """Overlay CLI arguments onto the Config object."""
    if args.lat is not None:
        config.location.lat = args.lat
    if args.lon is not None:
        config.location.lon = args.lon

    if args.name:
        config.location.name = args.name
    elif args.lat is not None or args.lon is not None:
        # Coordinates without a name: label them like a manual pick
        config.location.name = f"Manual ({config.location.lat:.3f}, {config.location.lon:.3f})"

    if args.view:
        config.board.view = args.view

    if args.use_24h is True:
        config.board.use_24h = True

    if args.refresh is not None:
        config.refresh.interval_seconds = args.refresh

    if args.search:
        config.search = args.search

    config.fetch_test = args.fetch_test
    config.debug = args.debug


def load_config(
    yaml_path: str | None = None,
    cli_args: list[str] | None = None,
) -> Config:
    """Load config: defaults → YAML overlay → argparse overlay.

    Args:
        yaml_path: Path to YAML config file. Defaults to config.yaml in project root.
        cli_args: CLI arguments list. None means use sys.argv.
    """
    config = Config()

    parser = _build_parser()
    args = parser.parse_args(cli_args if cli_args is not None else None)

    # Default YAML path: config.yaml in project root (three levels up from
    # this file). CLI --config overrides.
    if yaml_path is None:
        if args.config:
            yaml_path = args.config
        else:
            yaml_path = os.path.join(
                Path(__file__).resolve().parent.parent.parent, "config.yaml"
            )

    _apply_yaml(config, yaml_path)
    _apply_args(config, args)

    return config
