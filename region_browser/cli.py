"""Command line entry point: launch the window or run one-off lookups."""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from typing import List, Optional, Sequence, TextIO

from .app import build_controller, build_places_client
from .formatting import format_population
from .http_client import get_shared_session
from .integrations.city_dataset import CityDatasetFetcher
from .integrations.state_search import StateSearchProvider
from .logging_utils import configure_logging, get_logger, install_exception_logging
from .settings import Settings, load_settings
from .sorting import sort_cities
from .state import CityRecord, Option, SortDirection
from .version import APP_VERSION

_log = get_logger("cli")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="region-browser",
        description="Search states and browse their cities.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {APP_VERSION}")
    parser.add_argument("--api-root", help="Base URL of the places service")
    parser.add_argument("--prefs", help="Preferences file (default: ~/.region_browser/preferences.json)")
    parser.add_argument("--no-persist", action="store_true", help="Do not read or write preferences")
    parser.add_argument("--log-level", help="Logging level, e.g. DEBUG or INFO")

    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("gui", help="Open the browser window (default)")

    states = subparsers.add_parser("states", help="Print states matching a query")
    states.add_argument("query")

    cities = subparsers.add_parser("cities", help="Print the cities of a state")
    cities.add_argument("state_id")
    cities.add_argument("--sort", choices=("asc", "desc"), help="Order rows by id")
    return parser


def _resolve_settings(args: argparse.Namespace) -> Settings:
    settings = load_settings().with_overrides(
        api_root=args.api_root,
        prefs_path=args.prefs,
        log_level=args.log_level,
    )
    if args.no_persist:
        settings = replace(settings, prefs_path=None)
    return settings


def _print_options(options: Sequence[Option], out: TextIO) -> None:
    if not options:
        print("No matching states.", file=out)
        return
    width = max(len(str(option.value)) for option in options)
    for option in options:
        print(f"{str(option.value):<{width}}  {option.label}", file=out)


def _print_cities(records: Sequence[CityRecord], out: TextIO) -> None:
    if not records:
        print("No cities found.", file=out)
        return
    rows: List[tuple[str, str, str]] = [
        (str(record.id), record.city, format_population(record.population)) for record in records
    ]
    id_width = max(len("Id"), *(len(row[0]) for row in rows))
    city_width = max(len("City"), *(len(row[1]) for row in rows))
    pop_width = max(len("Population"), *(len(row[2]) for row in rows))
    print(f"{'Id':<{id_width}}  {'City':<{city_width}}  {'Population':>{pop_width}}", file=out)
    for identifier, city, population in rows:
        print(f"{identifier:<{id_width}}  {city:<{city_width}}  {population:>{pop_width}}", file=out)


def _run_states(settings: Settings, query: str, out: TextIO) -> int:
    api = build_places_client(settings, get_shared_session())
    outcome = StateSearchProvider(api, cache_ttl=0).search(query)
    if not outcome.ok:
        print(f"State search failed: {outcome.error}", file=sys.stderr)
        return 1
    _print_options(outcome.value or (), out)
    return 0


def _run_cities(settings: Settings, state_id: str, sort: Optional[str], out: TextIO) -> int:
    api = build_places_client(settings, get_shared_session())
    value = int(state_id) if state_id.isdigit() else state_id
    outcome = CityDatasetFetcher(api).fetch_for(Option(value=value, label=state_id))
    if not outcome.ok:
        print(f"City lookup failed: {outcome.error}", file=sys.stderr)
        return 1
    records = list(outcome.value or ())
    direction = SortDirection.coerce(sort)
    if direction is not None:
        records = sort_cities(records, direction)
    _print_cities(records, out)
    return 0


def _run_gui(settings: Settings) -> int:
    try:
        import tkinter as tk
    except ImportError:
        print("Tkinter is not available; use the 'states' or 'cities' commands instead.", file=sys.stderr)
        return 2

    from .ui.browser_window import BrowserWindow

    controller = build_controller(settings)
    root = tk.Tk()
    BrowserWindow(root, controller)
    controller.start()
    root.mainloop()
    return 0


def main(argv: Optional[Sequence[str]] = None, out: Optional[TextIO] = None) -> int:
    out = out or sys.stdout
    args = _build_parser().parse_args(argv)
    settings = _resolve_settings(args)
    configure_logging(settings.log_level)
    install_exception_logging()
    _log.debug("Using places service at %s", settings.api_root)

    if args.command == "states":
        return _run_states(settings, args.query, out)
    if args.command == "cities":
        return _run_cities(settings, args.state_id, args.sort, out)
    return _run_gui(settings)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
