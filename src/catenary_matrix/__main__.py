"""Entry point for catenary-matrix."""

import logging
import sys
import time

from catenary_matrix.config import load_config

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def run_fetch_test(config):
    """Fetch and print live departures for the configured location."""
    from catenary_matrix.api import BirchClient
    from catenary_matrix.models import derive_status
    from catenary_matrix.table import project_table

    client = BirchClient(config)
    loc = config.location
    print(f"\n=== {loc.name} ({loc.lat:.4f}, {loc.lon:.4f}) ===\n")

    now = int(time.time())
    snapshot = client.fetch_snapshot(loc.lat, loc.lon)
    table = project_table(snapshot, now, width=100, use_24h=config.board.use_24h)
    if not table.rows:
        print("  No upcoming departures")
        return

    for row in table.rows:
        minutes = (row.effective_time - now) // 60
        print(
            f"  {row.route_cell}| {row.destination_cell}| "
            f"{row.main_time:<8} {row.suffix:<20}| {minutes:>4} min | {row.status}"
        )


def run_search(config):
    """Search for stops by name."""
    from catenary_matrix.api import BirchClient

    client = BirchClient(config)
    results = client.search_stops(config.search)
    if not results:
        print("No stops found.")
        return
    for i, stop in enumerate(results, 1):
        print(f"  {i}. {stop.name}  [--lat {stop.lat:.5f} --lon {stop.lon:.5f}]")


def run_app(config):
    """Run the live terminal board."""
    from catenary_matrix.app import BoardApp

    app = BoardApp(config)
    app.run()


def main():
    """CLI entry point for the catenary-matrix application.

    Loads configuration (defaults -> YAML -> CLI args), sets up logging,
    then dispatches to one of three modes based on CLI flags:
      --fetch-test:  print live departures to stdout and exit
      --search:      look up stop coordinates by name and exit
      (default):     run the live departure board
    """
    config = load_config()

    level = logging.DEBUG if config.debug else logging.INFO
    if config.fetch_test or config.search:
        # Log to stderr so stdout is clean for --fetch-test and --search output.
        logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)
    else:
        # The live board owns the terminal; log lines would tear the screen.
        logging.basicConfig(level=level, format=LOG_FORMAT, filename=config.display.log_file)

    logger = logging.getLogger(__name__)
    logger.debug("Config loaded: %s, debug=%s", config.location.name, config.debug)

    try:
        if config.fetch_test:
            logger.info("Running fetch test")
            run_fetch_test(config)
        elif config.search:
            logger.info("Searching for stop: %s", config.search)
            run_search(config)
        else:
            logger.info("Starting departure board")
            run_app(config)
    except KeyboardInterrupt:
        print("\nShutting down.")
        sys.exit(0)
    except Exception as e:
        logger.error("Unexpected error: %s", e, exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
