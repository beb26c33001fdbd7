"""SQLite storage for airports and FBOs."""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Optional, Union

from offair.models import AIRPORT_COLUMNS, Airport

DB_NAME = "offair.db"
APP_DIR_NAME = ".offair"

_UPDATABLE_FIELDS = frozenset(AIRPORT_COLUMNS) - {"id"}


class AirportNotFoundError(LookupError):
    """Raised when no airport with the requested ICAO is stored."""

    def __init__(self, icao: str) -> None:
        super().__init__(f"airport with ICAO {icao} not found")
        self.icao = icao


def default_db_path() -> Path:
    """Return the database location in the user's home directory."""
    return Path.home() / APP_DIR_NAME / DB_NAME


def init_db(path: Optional[Union[str, Path]] = None) -> sqlite3.Connection:
    """Open (creating if needed) the database and ensure its schema."""
    db_path = Path(path) if path is not None else default_db_path()
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    try:
        create_tables(conn)
        add_airport_type_column(conn)
    except sqlite3.Error:
        conn.close()
        raise
    return conn


def create_tables(conn: sqlite3.Connection) -> None:
    """Create the airports and fbos tables if they do not exist."""
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS airports (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            icao TEXT NOT NULL UNIQUE,
            country_code TEXT NOT NULL,
            iata TEXT,
            state TEXT,
            country_name TEXT,
            city TEXT,
            latitude REAL,
            longitude REAL,
            elevation REAL,
            size INTEGER,
            is_military BOOLEAN DEFAULT FALSE,
            has_lights BOOLEAN DEFAULT FALSE,
            is_basecamp BOOLEAN DEFAULT FALSE,
            map_surface_type INTEGER,
            is_in_simbrief BOOLEAN DEFAULT FALSE,
            display_name TEXT,
            has_fbo BOOLEAN DEFAULT FALSE,
            airport_type TEXT
        )
        """
    )
    try:
        conn.execute("ALTER TABLE airports ADD COLUMN airport_type TEXT")
    except sqlite3.OperationalError:
        pass
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS fbos (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            airport_id TEXT NOT NULL,
            icao TEXT NOT NULL,
            name TEXT NOT NULL,
            latitude REAL NOT NULL,
            longitude REAL NOT NULL,
            FOREIGN KEY (airport_id) REFERENCES airports(id),
            UNIQUE(icao)
        )
        """
    )
    conn.commit()


def add_airport_type_column(conn: sqlite3.Connection) -> None:
    """Add the airport_type column unless it is already present."""
    try:
        conn.execute("ALTER TABLE airports ADD COLUMN airport_type TEXT")
    except sqlite3.OperationalError as exc:
        if "duplicate column name" not in str(exc):
            raise
    conn.commit()


def get_airport(conn: sqlite3.Connection, icao: str) -> Airport:
    """Fetch the airport with the given ICAO code."""
    cursor = conn.execute("SELECT * FROM airports WHERE icao = ?", (icao,))
    row = cursor.fetchone()
    if row is None:
        raise AirportNotFoundError(icao)
    names = [column[0] for column in cursor.description]
    return Airport.from_row(dict(zip(names, row)))


def save_airport(conn: sqlite3.Connection, airport: Airport) -> None:
    """Insert the airport, replacing any stored airport with the same key."""
    columns = ", ".join(AIRPORT_COLUMNS)
    placeholders = ", ".join(f":{column}" for column in AIRPORT_COLUMNS)
    conn.execute(
        f"INSERT OR REPLACE INTO airports ({columns}) VALUES ({placeholders})",
        airport.to_params(),
    )
    conn.commit()


def update_airport_field(conn: sqlite3.Connection, airport: Airport, field: str) -> None:
    """Write one field of the airport back to the database."""
    if field not in _UPDATABLE_FIELDS:
        raise ValueError(f"unknown airport field: {field}")
    conn.execute(
        f"UPDATE airports SET {field} = ? WHERE id = ?",
        (getattr(airport, field), airport.id),
    )
    conn.commit()