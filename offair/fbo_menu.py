"""Interactive FBO management and analysis menus."""

from __future__ import annotations

import sqlite3
from typing import Any, Callable, Mapping, Optional

from termcolor import colored

from offair.adapters import adapt_airport
from offair.database import (
    AirportNotFoundError,
    get_airport,
    save_airport,
    update_airport_field,
)
from offair.distances import list_distances_between_fbos
from offair.fbo_ops import FBOError, add_fbo, list_airports_with_fbos, remove_fbo
from offair.models import Airport
from offair.network import InsufficientFBOsError, calculate_distance
from offair.optimal import find_optimal_fbo_locations
from offair.prompts import (
    ADD_FBO_MENU_LABEL,
    AIRPORTS_WITH_FBOS_PROMPT,
    BACK_MENU_LABEL,
    REMOVE_FBO_MENU_LABEL,
    Prompter,
    prompt_for_airport_type,
)
from offair.redundant import find_redundant_fbos
from offair.settings import load_settings

ApiFactory = Callable[[], Any]


def _bold(text: str) -> str:
    return colored(text, attrs=["bold"])


def _red(text: str) -> str:
    return colored(text, "red")


def _yellow(text: str) -> str:
    return colored(text, "yellow")


def _green(text: str) -> str:
    return colored(text, "green")


def _cyan(text: str) -> str:
    return colored(text, "cyan")


def _lookup(conn: sqlite3.Connection, icao: str) -> Optional[Airport]:
    try:
        return get_airport(conn, icao)
    except (AirportNotFoundError, sqlite3.Error):
        return None


def _fetch_airport(
    conn: sqlite3.Connection, prompter: Prompter, api_factory: ApiFactory, icao: str
) -> Optional[Airport]:
    """Fetch an airport online, complete it and store it; None on failure."""
    prompter.echo(
        f"{_yellow('Airport with ICAO')} {_bold(icao)} "
        f"{_yellow('not found. Fetching from the API...')}"
    )
    try:
        client = api_factory()
    except Exception as exc:
        prompter.echo(f"{_red('Error initializing API client:')} {exc}")
        prompter.echo(
            _yellow(
                "Please set the ONAIR_API_KEY environment variable in your .env file."
            )
        )
        return None

    try:
        api_airport = client.get_airport(icao)
    except Exception as exc:
        prompter.echo(f"{_red('Error fetching airport from API:')} {exc}")
        return None

    airport = adapt_airport(api_airport)
    if not airport.country_code:
        prompter.echo(
            f"{_yellow('Airport with ICAO')} {_bold(icao)} "
            f"{_yellow('has no country code. Please enter a country code:')}"
        )
        country_code = prompter.ask_text(
            "Enter country code (blank to go back to ICAO input):"
        )
        if not country_code:
            return None
        airport.country_code = country_code.upper()

    prompt_for_airport_type(prompter, airport)

    try:
        save_airport(conn, airport)
    except sqlite3.Error as exc:
        prompter.echo(f"{_red('Error inserting airport into database:')} {exc}")
        return None

    prompter.echo(f"{airport.icao} {_cyan('fetched from API and added to database.')}")
    return airport


def add_fbo_menu(
    conn: sqlite3.Connection, prompter: Prompter, api_factory: ApiFactory
) -> None:
    """Open FBOs at airports entered by ICAO until a blank code is given."""
    while True:
        icao = prompter.ask_text("Enter ICAO of the airport (blank to go back):")
        if not icao:
            return
        icao = icao.upper()

        airport = _lookup(conn, icao)
        if airport is None:
            airport = _fetch_airport(conn, prompter, api_factory, icao)
            if airport is None:
                continue

        if airport.airport_type is None:
            prompt_for_airport_type(prompter, airport)
            try:
                update_airport_field(conn, airport, "airport_type")
            except sqlite3.Error as exc:
                prompter.echo(f"{_red('Error updating airport:')} {exc}")

        try:
            add_fbo(conn, icao)
        except (FBOError, AirportNotFoundError, sqlite3.Error) as exc:
            prompter.echo(f"{_red('Error:')} {exc}")
        else:
            prompter.echo(f"{_green('FBO added at')} {_bold(icao)}")
        prompter.echo()


def find_distance_between_airports(
    conn: sqlite3.Connection, prompter: Prompter
) -> None:
    """Show the great-circle distance between two stored airports."""
    icao1 = prompter.ask_text("Enter first ICAO (blank to go back):")
    if not icao1:
        return
    icao1 = icao1.upper()

    icao2 = prompter.ask_text("Enter second ICAO (blank to go back):")
    if not icao2:
        return
    icao2 = icao2.upper()

    if icao1 == icao2:
        prompter.echo(
            f"{_red('Error:')} Both ICAOs are the same. Please enter different ICAOs."
        )
        return

    airports = []
    for icao in (icao1, icao2):
        airport = _lookup(conn, icao)
        if airport is None:
            prompter.echo(f"{_red('Error:')} {_bold(icao)} not found in the database.")
            return
        airports.append(airport)

    for icao, airport in zip((icao1, icao2), airports):
        if not airport.has_coordinates():
            prompter.echo(
                f"{_red('Error:')} {_bold(icao)} "
                "does not have latitude or longitude information."
            )
            return

    first, second = airports
    distance = calculate_distance(
        first.latitude, first.longitude, second.latitude, second.longitude
    )

    prompter.echo(f"\n{_bold(_cyan('Distance Calculation Result:'))}")
    prompter.echo(
        f"{_bold('From:')} {_cyan(first.name)} ({_bold(icao1)}) "
        f"{_bold('To:')} {_cyan(second.name)} ({_bold(icao2)})"
    )
    prompter.echo(f"{_bold('Distance:')} {distance:.2f} {_green('nm')}\n")


def list_airports_with_fbos_menu(
    conn: sqlite3.Connection, prompter: Prompter, api_factory: ApiFactory
) -> None:
    """List airports with FBOs and let the user add or remove FBOs."""
    while True:
        try:
            airports = list_airports_with_fbos(conn)
        except FBOError as exc:
            prompter.echo(f"{_red('Error:')} {exc}")
            return

        by_label = {f"{airport.name} ({airport.icao})": airport.icao for airport in airports}
        options = (*by_label, ADD_FBO_MENU_LABEL, BACK_MENU_LABEL)
        selection = prompter.select(AIRPORTS_WITH_FBOS_PROMPT, options)

        if selection == BACK_MENU_LABEL:
            return
        if selection == ADD_FBO_MENU_LABEL:
            add_fbo_menu(conn, prompter, api_factory)
        else:
            fbo_options(conn, prompter, by_label[selection])


def fbo_options(conn: sqlite3.Connection, prompter: Prompter, icao: str) -> None:
    """Offer actions for the FBO at one airport."""
    choice = prompter.select(
        f"FBO at {icao}:", (REMOVE_FBO_MENU_LABEL, BACK_MENU_LABEL)
    )
    if choice != REMOVE_FBO_MENU_LABEL:
        return
    try:
        remove_fbo(conn, icao)
    except (FBOError, AirportNotFoundError, sqlite3.Error) as exc:
        prompter.echo(f"{_red('Error:')} {exc}")
    else:
        prompter.echo(f"FBO at {icao} removed.")


def list_distances_menu(conn: sqlite3.Connection, prompter: Prompter) -> None:
    """Print the FBO network distance report."""
    try:
        result = list_distances_between_fbos(conn)
    except (RuntimeError, sqlite3.Error) as exc:
        prompter.echo(f"{_red('Error:')} {exc}")
        return
    prompter.echo(result)


def find_optimal_menu(
    conn: sqlite3.Connection,
    prompter: Prompter,
    environ: Optional[Mapping[str, str]] = None,
) -> None:
    """Print the ranking of airports suited to a new FBO."""
    settings = load_settings(environ)
    try:
        result = find_optimal_fbo_locations(
            conn,
            settings.optimal_distance,
            settings.max_distance,
            settings.require_lights,
            settings.preferred_size,
        )
    except (RuntimeError, sqlite3.Error) as exc:
        prompter.echo(f"{_red('Error:')} {exc}")
        return
    prompter.echo(_bold(_cyan("Calculating optimal FBO locations...")))
    prompter.echo(result)


def find_redundant_menu(
    conn: sqlite3.Connection,
    prompter: Prompter,
    environ: Optional[Mapping[str, str]] = None,
) -> None:
    """Print the report of FBOs that contribute little to the network."""
    settings = load_settings(environ)
    try:
        result = find_redundant_fbos(
            conn,
            settings.optimal_distance,
            settings.max_distance,
            settings.require_lights,
            settings.preferred_size,
            settings.redundancy_threshold,
        )
    except (RuntimeError, InsufficientFBOsError, sqlite3.Error) as exc:
        prompter.echo(f"{_red('Error:')} {exc}")
        return
    prompter.echo(result)
    prompter.echo()