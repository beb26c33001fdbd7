"""Interactive airport lookup and editing."""

from __future__ import annotations

import sqlite3
from typing import Any, Callable, Optional

from termcolor import colored

from offair.adapters import adapt_airport
from offair.database import (
    AirportNotFoundError,
    get_airport,
    save_airport,
    update_airport_field,
)
from offair.models import Airport
from offair.prompts import (
    AD_MENU_LABEL,
    ALA_MENU_LABEL,
    AIRPORT_TYPE_CODES,
    BACK_MENU_LABEL,
    CANCEL_MENU_LABEL,
    CLEAR_MENU_LABEL,
    NOT_SET_MENU_LABEL,
    Prompter,
    prompt_for_airport_type,
)

MODIFY_COUNTRY_CODE_LABEL = "Modify Country Code"
MODIFY_STATE_LABEL = "Modify State"
MODIFY_COUNTRY_NAME_LABEL = "Modify Country Name"
MODIFY_CITY_LABEL = "Modify City"
MODIFY_AIRPORT_TYPE_LABEL = "Modify Airport Type"

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


def _fetch_from_api(
    prompter: Prompter,
    api_factory: ApiFactory,
    icao: str,
    infer_australia: bool,
) -> Optional[Airport]:
    """Fetch an airport online and complete its country code and type.

    Returns None when the fetch fails or the user backs out.
    """
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
        prompter.echo(
            f"{colored('Error fetching airport from API:', 'red', attrs=['bold'])} {exc}"
        )
        return None

    airport = adapt_airport(api_airport)

    if not airport.country_code and infer_australia and icao.startswith("Y"):
        airport.country_code = "AU"
    elif not airport.country_code:
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
    return airport


def _store_fetched(
    conn: sqlite3.Connection, prompter: Prompter, airport: Airport
) -> bool:
    try:
        save_airport(conn, airport)
    except sqlite3.Error as exc:
        prompter.echo(f"{_red('Error inserting airport into database:')} {exc}")
        return False
    return True


def _ensure_airport_type(
    conn: sqlite3.Connection, prompter: Prompter, airport: Airport
) -> None:
    if airport.airport_type is not None:
        return
    prompt_for_airport_type(prompter, airport)
    try:
        update_airport_field(conn, airport, "airport_type")
    except sqlite3.Error as exc:
        prompter.echo(f"{_red('Error updating airport:')} {exc}")


def _resolve_airport(
    conn: sqlite3.Connection,
    prompter: Prompter,
    api_factory: ApiFactory,
    icao: str,
    infer_australia: bool,
    added_message: Callable[[Airport], str],
) -> Optional[Airport]:
    airport = _lookup(conn, icao)
    if airport is None:
        airport = _fetch_from_api(prompter, api_factory, icao, infer_australia)
        if airport is None or not _store_fetched(conn, prompter, airport):
            return None
        prompter.echo(added_message(airport))
    _ensure_airport_type(conn, prompter, airport)
    return airport


def _location_line(airport: Airport) -> Optional[str]:
    if not airport.has_coordinates():
        return None
    return f"{_bold('Location:')} {airport.latitude:.6f}, {airport.longitude:.6f}"


def search_airport_by_icao(
    conn: sqlite3.Connection, prompter: Prompter, api_factory: ApiFactory
) -> None:
    """Look up airports by ICAO until a blank code is entered.

    A three-letter code is taken as Australian and prefixed with "Y".
    """
    while True:
        icao = prompter.ask_text("Enter ICAO (blank to go back):")
        if not icao:
            return
        if len(icao) == 3:
            icao = "Y" + icao
        icao = icao.upper()

        airport = _resolve_airport(
            conn,
            prompter,
            api_factory,
            icao,
            infer_australia=True,
            added_message=lambda _airport: _green("Added to database."),
        )
        if airport is None:
            continue

        prompter.echo(
            f"{_bold('Airport found:')} {_cyan(airport.name)} "
            f"{_bold('(' + airport.icao + ')')} {_green('in ' + airport.country_code)}"
        )
        location = _location_line(airport)
        if location is not None:
            prompter.echo(location)
        prompter.echo()


def _field_line(label: str, value: Optional[str]) -> str:
    shown = value if value is not None else _yellow("Not set")
    return f"{_bold(label)} {shown}"


def _show_airport(prompter: Prompter, airport: Airport) -> None:
    prompter.echo(
        f"{_bold('Airport:')} {_cyan(airport.name)} "
        f"{_bold('(' + airport.icao + ')')} {_green('in ' + airport.country_code)}"
    )
    prompter.echo(_field_line("Country Name:", airport.country_name))
    prompter.echo(_field_line("State:", airport.state))
    prompter.echo(_field_line("City:", airport.city))
    location = _location_line(airport)
    if location is not None:
        prompter.echo(location)
    prompter.echo(_field_line("Airport Type:", airport.airport_type))
    prompter.echo()


def modify_airport(
    conn: sqlite3.Connection, prompter: Prompter, api_factory: ApiFactory
) -> None:
    """Edit stored airport details until a blank ICAO is entered."""
    editors = {
        MODIFY_COUNTRY_CODE_LABEL: modify_country_code,
        MODIFY_STATE_LABEL: modify_state,
        MODIFY_COUNTRY_NAME_LABEL: modify_country_name,
        MODIFY_CITY_LABEL: modify_city,
        MODIFY_AIRPORT_TYPE_LABEL: modify_airport_type,
    }
    options = (*editors, BACK_MENU_LABEL)

    while True:
        icao = prompter.ask_text(
            "Enter ICAO of the airport to modify (blank to go back):"
        )
        if not icao:
            return
        icao = icao.upper()

        airport = _resolve_airport(
            conn,
            prompter,
            api_factory,
            icao,
            infer_australia=False,
            added_message=lambda fetched: (
                f"{fetched.icao} {_green('fetched and added to database.')}"
            ),
        )
        if airport is None:
            continue

        while True:
            _show_airport(prompter, airport)
            choice = prompter.select("Select field to modify:", options)
            if choice == BACK_MENU_LABEL:
                break
            editors[choice](conn, prompter, airport)


def _save_field(
    conn: sqlite3.Connection, prompter: Prompter, airport: Airport, field: str
) -> bool:
    try:
        update_airport_field(conn, airport, field)
    except sqlite3.Error as exc:
        prompter.echo(f"{_red('Error updating airport:')} {exc}")
        return False
    return True


def modify_country_code(
    conn: sqlite3.Connection, prompter: Prompter, airport: Airport
) -> None:
    """Ask for a new country code; a blank answer cancels."""
    country_code = prompter.ask_text(
        "Enter new country code (blank to cancel):", airport.country_code
    )
    if not country_code:
        return
    country_code = country_code.upper()
    airport.country_code = country_code
    if _save_field(conn, prompter, airport, "country_code"):
        prompter.echo(f"{_green('Country code updated to')} {_bold(country_code)}")


def _modify_optional_text(
    conn: sqlite3.Connection,
    prompter: Prompter,
    airport: Airport,
    field: str,
    description: str,
) -> None:
    current = getattr(airport, field)
    value = prompter.ask_text(
        f"Enter new {description} (blank to clear):", current or ""
    )
    setattr(airport, field, value or None)
    if not _save_field(conn, prompter, airport, field):
        return
    label = description[0].upper() + description[1:]
    if value:
        prompter.echo(f"{_green(label + ' updated to')} {_bold(value)}")
    else:
        prompter.echo(_green(f"{label} cleared."))


def modify_state(conn: sqlite3.Connection, prompter: Prompter, airport: Airport) -> None:
    """Ask for a new state; an empty value clears it."""
    _modify_optional_text(conn, prompter, airport, "state", "state")


def modify_country_name(
    conn: sqlite3.Connection, prompter: Prompter, airport: Airport
) -> None:
    """Ask for a new country name; an empty value clears it."""
    _modify_optional_text(conn, prompter, airport, "country_name", "country name")


def modify_city(conn: sqlite3.Connection, prompter: Prompter, airport: Airport) -> None:
    """Ask for a new city; an empty value clears it."""
    _modify_optional_text(conn, prompter, airport, "city", "city")


def modify_airport_type(
    conn: sqlite3.Connection, prompter: Prompter, airport: Airport
) -> None:
    """Choose a new airport type, clear it, or cancel."""
    current = airport.airport_type if airport.airport_type is not None else NOT_SET_MENU_LABEL
    choice = prompter.select(
        f"Current airport type: {current}. Select new type:",
        (ALA_MENU_LABEL, AD_MENU_LABEL, CLEAR_MENU_LABEL, CANCEL_MENU_LABEL),
    )
    if choice == CANCEL_MENU_LABEL:
        return
    airport.airport_type = AIRPORT_TYPE_CODES.get(choice)
    if not _save_field(conn, prompter, airport, "airport_type"):
        return
    if choice == CLEAR_MENU_LABEL:
        prompter.echo(_green("Airport type cleared."))
    else:
        prompter.echo(f"{_green('Airport type updated to')} {_bold(choice)}")