"""Synchronisation of the local FBO table with the company's FBOs online."""

from __future__ import annotations

import os
import sqlite3
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping, Optional

from termcolor import colored

from offair.adapters import adapt_fbo
from offair.models import FBO
from offair.prompts import Prompter


@dataclass
class SyncReport:
    """Counts of what a synchronisation changed."""

    added: int = 0
    updated: int = 0
    unchanged: int = 0
    removed: int = 0

    @property
    def total(self) -> int:
        """FBOs present after the sync."""
        return self.added + self.updated + self.unchanged


def _red(text: str) -> str:
    return colored(text, "red")


def _existing_fbos(conn: sqlite3.Connection) -> list[FBO]:
    cursor = conn.execute("SELECT * FROM fbos")
    names = [column[0] for column in cursor.description]
    return [FBO.from_row(dict(zip(names, row))) for row in cursor.fetchall()]


def sync_fbos(
    conn: sqlite3.Connection,
    api_fbos: Iterable[Mapping[str, Any]],
    echo: Callable[[str], None],
) -> SyncReport:
    """Make the fbos table match the given API FBO records.

    Individual row failures are reported through echo and skipped.
    """
    try:
        existing = _existing_fbos(conn)
    except (sqlite3.Error, TypeError, ValueError, KeyError) as exc:
        conn.rollback()
        raise RuntimeError(f"error fetching existing FBOs: {exc}") from exc

    echo(f"Found {len(existing)} existing FBOs in database.")

    by_airport = {fbo.airport_id: fbo for fbo in existing}
    synced_airports: set[str] = set()
    report = SyncReport()

    for api_fbo in api_fbos:
        fbo = adapt_fbo(api_fbo)
        synced_airports.add(fbo.airport_id)
        current = by_airport.get(fbo.airport_id)

        if current is None:
            try:
                conn.execute(
                    """
                    INSERT INTO fbos (airport_id, icao, name, latitude, longitude)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (fbo.airport_id, fbo.icao, fbo.name, fbo.latitude, fbo.longitude),
                )
            except sqlite3.Error as exc:
                echo(f"{_red('Error inserting FBO:')} {exc}")
                continue
            try:
                conn.execute(
                    "UPDATE airports SET has_fbo = 1 WHERE id = ?", (fbo.airport_id,)
                )
            except sqlite3.Error as exc:
                echo(f"{_red('Error updating airport:')} {exc}")
                continue
            echo(f"Added FBO at {fbo.name} ({fbo.icao})")
            report.added += 1
        elif (current.name, current.latitude, current.longitude) != (
            fbo.name,
            fbo.latitude,
            fbo.longitude,
        ):
            try:
                conn.execute(
                    """
                    UPDATE fbos
                    SET name = ?, latitude = ?, longitude = ?
                    WHERE airport_id = ?
                    """,
                    (fbo.name, fbo.latitude, fbo.longitude, fbo.airport_id),
                )
            except sqlite3.Error as exc:
                echo(f"{_red('Error updating FBO:')} {exc}")
                continue
            echo(f"Updated FBO at {fbo.name} ({fbo.icao})")
            report.updated += 1
        else:
            report.unchanged += 1

    for fbo in existing:
        if fbo.airport_id in synced_airports:
            continue
        try:
            conn.execute("DELETE FROM fbos WHERE airport_id = ?", (fbo.airport_id,))
        except sqlite3.Error as exc:
            echo(f"{_red('Error removing FBO:')} {exc}")
            continue
        try:
            conn.execute(
                "UPDATE airports SET has_fbo = 0 WHERE id = ?", (fbo.airport_id,)
            )
        except sqlite3.Error as exc:
            echo(f"{_red('Error updating airport:')} {exc}")
            continue
        echo(f"Removed FBO at {fbo.name} ({fbo.icao})")
        report.removed += 1

    try:
        conn.commit()
    except sqlite3.Error as exc:
        raise RuntimeError(str(exc)) from exc
    return report


def sync_fbos_menu(
    conn: sqlite3.Connection,
    prompter: Prompter,
    api_factory: Callable[[], Any],
    environ: Optional[Mapping[str, str]] = None,
) -> Optional[SyncReport]:
    """Fetch the company's FBOs and synchronise them, reporting progress.

    api_factory returns a client with a get_company_fbos(company_id) method.
    Returns None when the sync did not run to completion.
    """
    env = os.environ if environ is None else environ
    company_id = env.get("ONAIR_COMPANY_ID", "")
    if not company_id:
        prompter.echo(
            f"{_red('Error:')} ONAIR_COMPANY_ID is not set in the environment"
        )
        return None

    try:
        client = api_factory()
    except Exception as exc:
        prompter.echo(f"{_red('Error:')} {exc}")
        return None

    prompter.echo("Fetching FBOs from OnAir API...")
    try:
        api_fbos = list(client.get_company_fbos(company_id) or [])
    except Exception as exc:
        prompter.echo(f"{_red('Error:')} {exc}")
        return None

    if not api_fbos:
        prompter.echo("No FBOs found for the company.")
        return None

    prompter.echo(f"Found {len(api_fbos)} FBOs from API.")

    try:
        report = sync_fbos(conn, api_fbos, prompter.echo)
    except RuntimeError as exc:
        prompter.echo(f"{_red('Error:')} {exc}")
        return None

    prompter.echo(f"{colored('Success:', 'green')} FBOs synchronized successfully.")
    prompter.echo(f"  Added: {report.added}")
    prompter.echo(f"  Updated: {report.updated}")
    prompter.echo(f"  Unchanged: {report.unchanged}")
    prompter.echo(f"  Removed: {report.removed}")
    prompter.echo(f"  Total: {report.total}")
    return report