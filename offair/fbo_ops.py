"""Adding, removing and listing FBOs at stored airports."""

from __future__ import annotations

import sqlite3

from offair.database import get_airport
from offair.models import Airport


class FBOError(Exception):
    """Raised when an FBO cannot be added or removed."""


def _select_airports(conn: sqlite3.Connection, sql: str) -> list[Airport]:
    cursor = conn.execute(sql)
    names = [column[0] for column in cursor.description]
    return [Airport.from_row(dict(zip(names, row))) for row in cursor.fetchall()]


def add_fbo(conn: sqlite3.Connection, icao: str) -> None:
    """Open an FBO at the airport with the given ICAO code."""
    airport = get_airport(conn, icao)

    if airport.has_fbo:
        raise FBOError(f"airport {icao} already has an FBO")
    if not airport.has_coordinates():
        raise FBOError(
            f"airport {icao} does not have latitude or longitude information"
        )

    try:
        conn.execute(
            """
            INSERT INTO fbos (airport_id, icao, name, latitude, longitude)
            VALUES (?, ?, ?, ?, ?)
            """,
            (
                airport.id,
                airport.icao,
                f"{airport.name} FBO",
                airport.latitude,
                airport.longitude,
            ),
        )
    except sqlite3.Error as exc:
        conn.rollback()
        raise FBOError(f"error adding FBO: {exc}") from exc

    try:
        conn.execute("UPDATE airports SET has_fbo = 1 WHERE id = ?", (airport.id,))
    except sqlite3.Error as exc:
        conn.commit()
        raise FBOError(f"error updating airport: {exc}") from exc
    conn.commit()


def remove_fbo(conn: sqlite3.Connection, icao: str) -> None:
    """Close the FBO at the airport with the given ICAO code."""
    airport = get_airport(conn, icao)

    if not airport.has_fbo:
        raise FBOError(f"airport {icao} does not have an FBO")

    try:
        conn.execute("DELETE FROM fbos WHERE airport_id = ?", (airport.id,))
    except sqlite3.Error as exc:
        conn.rollback()
        raise FBOError(f"error removing FBO: {exc}") from exc

    try:
        conn.execute("UPDATE airports SET has_fbo = 0 WHERE id = ?", (airport.id,))
    except sqlite3.Error as exc:
        conn.commit()
        raise FBOError(f"error updating airport: {exc}") from exc
    conn.commit()


def list_airports_with_fbos(conn: sqlite3.Connection) -> list[Airport]:
    """Return every stored airport that has an FBO."""
    try:
        return _select_airports(conn, "SELECT * FROM airports WHERE has_fbo = 1")
    except sqlite3.Error as exc:
        raise FBOError(f"error fetching airports with FBOs: {exc}") from exc