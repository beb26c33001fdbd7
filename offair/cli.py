"""Command-line entry point and the top-level menus."""

from __future__ import annotations

import argparse
import os
import sqlite3
import sys
from contextlib import closing
from typing import Any, Callable, Mapping, Optional, Sequence

from dotenv import load_dotenv
from termcolor import colored

from offair.airport_menu import modify_airport, search_airport_by_icao
from offair.database import default_db_path, init_db
from offair.fbo_menu import (
    find_distance_between_airports,
    find_optimal_menu,
    list_airports_with_fbos_menu,
    list_distances_menu,
)
from offair.prompts import (
    BACK_TO_MAIN_MENU_LABEL,
    EXIT_MESSAGE,
    LIST_AIRPORTS_WITH_FBOS_MENU_LABEL,
    LIST_DISTANCES_BETWEEN_FBOS_MENU_LABEL,
    SYNC_FBOS_MENU_LABEL,
    Prompter,
)
from offair.sync import sync_fbos_menu

WELCOME_MESSAGE = "Welcome to OffAir, the OnAir companion CLI!"

AIRPORTS_LABEL = "Airports"
FBOS_LABEL = "FBOs"
EXIT_LABEL = "Exit"
AIRPORT_LOOKUP_LABEL = "Airport Lookup"
MODIFY_AIRPORT_LABEL = "Modify Airport"
FIND_DISTANCE_LABEL = "Find Distance Between Airports"
FIND_OPTIMAL_LABEL = "Find Optimal FBO Locations"
FIND_REDUNDANT_LABEL = "[PRESENTLY BROKEN] Find Redundant FBOs"

ApiFactory = Callable[[], Any]


def main_menu(
    conn: sqlite3.Connection,
    prompter: Prompter,
    api_factory: ApiFactory,
    environ: Optional[Mapping[str, str]] = None,
) -> None:
    """Run the main menu until the user exits."""
    while True:
        option = prompter.select(
            "Select an option:", (AIRPORTS_LABEL, FBOS_LABEL, EXIT_LABEL)
        )
        if option == AIRPORTS_LABEL:
            airports_menu(conn, prompter, api_factory)
        elif option == FBOS_LABEL:
            fbo_optimiser_menu(conn, prompter, api_factory, environ)
        elif option == EXIT_LABEL:
            prompter.echo(EXIT_MESSAGE)
            return


def airports_menu(
    conn: sqlite3.Connection, prompter: Prompter, api_factory: ApiFactory
) -> None:
    """Run the airports menu until the user goes back."""
    while True:
        option = prompter.select(
            "Airports:",
            (AIRPORT_LOOKUP_LABEL, MODIFY_AIRPORT_LABEL, BACK_TO_MAIN_MENU_LABEL),
        )
        if option == AIRPORT_LOOKUP_LABEL:
            search_airport_by_icao(conn, prompter, api_factory)
        elif option == MODIFY_AIRPORT_LABEL:
            modify_airport(conn, prompter, api_factory)
        elif option == BACK_TO_MAIN_MENU_LABEL:
            return


def fbo_optimiser_menu(
    conn: sqlite3.Connection,
    prompter: Prompter,
    api_factory: ApiFactory,
    environ: Optional[Mapping[str, str]] = None,
) -> None:
    """Run the FBO menu until the user goes back."""
    actions: dict[str, Callable[[], Any]] = {
        LIST_AIRPORTS_WITH_FBOS_MENU_LABEL: lambda: list_airports_with_fbos_menu(
            conn, prompter, api_factory
        ),
        LIST_DISTANCES_BETWEEN_FBOS_MENU_LABEL: lambda: list_distances_menu(
            conn, prompter
        ),
        FIND_DISTANCE_LABEL: lambda: find_distance_between_airports(conn, prompter),
        FIND_OPTIMAL_LABEL: lambda: find_optimal_menu(conn, prompter, environ),
        # The redundancy analysis is listed but deliberately not run from here.
        FIND_REDUNDANT_LABEL: lambda: None,
        SYNC_FBOS_MENU_LABEL: lambda: sync_fbos_menu(
            conn, prompter, api_factory, environ
        ),
    }
    options = (*actions, BACK_TO_MAIN_MENU_LABEL)
    while True:
        option = prompter.select("FBOs:", options)
        if option == BACK_TO_MAIN_MENU_LABEL:
            return
        actions[option]()


def _read_line(prompt: str) -> str:
    return input(prompt)


def _unconfigured_api_client() -> Any:
    """Report that no remote API client is configured."""
    raise RuntimeError("no OnAir API client is configured")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Start the interactive program; returns the process exit status."""
    parser = argparse.ArgumentParser(
        prog="offair", description="OnAir companion for airports and FBOs."
    )
    parser.add_argument(
        "--db", help="path of the database file (default: ~/.offair/offair.db)"
    )
    args = parser.parse_args(argv)

    load_dotenv(".env")

    try:
        conn = init_db(args.db if args.db else default_db_path())
    except (OSError, sqlite3.Error, RuntimeError, ValueError) as exc:
        print(f"Failed to initialize database: {exc}", file=sys.stderr)
        return 1

    with closing(conn):
        print(colored(WELCOME_MESSAGE, "cyan", attrs=["bold"]))
        prompter = Prompter(input_func=_read_line)
        try:
            main_menu(conn, prompter, _unconfigured_api_client, os.environ)
        except (EOFError, KeyboardInterrupt):
            print()
    return 0


if __name__ == "__main__":
    sys.exit(main())