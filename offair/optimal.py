"""Ranking of candidate airports for new FBOs."""

from __future__ import annotations

import math
import sqlite3
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, TypeVar

from termcolor import colored

from offair.models import Airport
from offair.network import calculate_distance, is_optimal

T = TypeVar("T")

TOP_CANDIDATES = 10
TOP_CONNECTIONS = 5


@dataclass
class CandidateScore:
    """A candidate airport and its suitability score (0-100)."""

    airport: Airport
    score: float


def _bold(text: str) -> str:
    return colored(text, attrs=["bold"])


def _color(text: str, color: str) -> str:
    return colored(text, color)


def _select_airports(conn: sqlite3.Connection, sql: str) -> list[Airport]:
    cursor = conn.execute(sql)
    names = [column[0] for column in cursor.description]
    return [Airport.from_row(dict(zip(names, row))) for row in cursor.fetchall()]


def _connection_score(distance: float, optimal_distance: float) -> float:
    if optimal_distance == 0:
        deviation = math.nan if distance == 0 else math.inf
    else:
        deviation = abs(distance - optimal_distance) / optimal_distance * 100.0
    if math.isnan(deviation):
        return math.nan
    return 100.0 - min(100.0, deviation)


def _exchange_sort_desc(items: Sequence[T], key: Callable[[T], float]) -> list[T]:
    # Deliberately an unstable exchange sort: the order of ties is part of
    # the report's observable behaviour.
    ordered = list(items)
    for i in range(len(ordered)):
        for j in range(i + 1, len(ordered)):
            if key(ordered[i]) < key(ordered[j]):
                ordered[i], ordered[j] = ordered[j], ordered[i]
    return ordered


def score_candidate(
    candidate: Airport,
    fbos: Sequence[Airport],
    optimal_distance: float,
    require_lights: bool,
    preferred_size: Optional[int],
) -> Optional[CandidateScore]:
    """Score a candidate against existing FBOs; None when it cannot be scored."""
    if not candidate.has_coordinates():
        return None

    distances = [
        calculate_distance(
            candidate.latitude, candidate.longitude, fbo.latitude, fbo.longitude
        )
        for fbo in fbos
        if fbo.has_coordinates()
    ]
    if not distances:
        return None

    total = len(distances)
    optimal_count = sum(is_optimal(d, optimal_distance) for d in distances)

    if optimal_count == 0:
        score = 0.0
    else:
        score = sum(_connection_score(d, optimal_distance) for d in distances) / total
        score += optimal_count / total * 20.0

    if score > 100.0:
        score = 100.0

    if preferred_size is not None and candidate.size is not None:
        if candidate.size == preferred_size:
            score += 15.0
        elif abs(candidate.size - preferred_size) == 1:
            score += 7.5

    if not require_lights and not candidate.has_lights:
        score -= 10.0

    if score < 0:
        score = 0.0
    if score > 100.0:
        score = 100.0

    score = 0.0 if math.isnan(score) else float(math.floor(score))
    return CandidateScore(airport=candidate, score=score)


def _header(
    optimal_distance: float,
    max_distance: float,
    require_lights: bool,
    preferred_size: Optional[int],
    airport_count: int,
    fbo_count: int,
    candidate_count: int,
) -> list[str]:
    lines = [
        f"{_bold('Using:')} {_bold('optimal distance:')} {optimal_distance:.2f} nm, "
        f"{_bold('maximum distance:')} {max_distance:.2f} nm\n"
    ]
    if require_lights:
        lines.append(
            f"{_bold('Requiring airports with lights:')} {_color('Yes', 'green')}\n"
        )
    else:
        lines.append(
            f"{_bold('Requiring airports with lights:')} {_color('No', 'yellow')} "
            f"{_color('(airports without lights receive a score penalty)', 'yellow')}\n"
        )
    if preferred_size is not None:
        lines.append(
            f"{_bold('Preferred airport size:')} "
            f"{_color(str(preferred_size), 'green')} "
            f"{_color('(exact match receives bonus points,', 'green')} "
            f"{_color('sizes within ±1 receive smaller bonus)', 'green')}\n"
        )
    lines.append(
        f"{_bold('Found:')} {airport_count} airports, {fbo_count} existing FBOs, "
        f"and {candidate_count} candidate airports.\n"
    )
    return lines


def _candidate_lines(
    rank: int, entry: CandidateScore, fbos: Sequence[Airport], optimal_distance: float
) -> list[str]:
    airport = entry.airport
    connections: list[tuple[str, float, float]] = []
    total = 0
    for fbo in fbos:
        if not fbo.has_coordinates() or not airport.has_coordinates():
            continue
        distance = calculate_distance(
            airport.latitude, airport.longitude, fbo.latitude, fbo.longitude
        )
        total += 1
        if is_optimal(distance, optimal_distance):
            connections.append(
                (fbo.icao, distance, _connection_score(distance, optimal_distance))
            )

    connections = _exchange_sort_desc(connections, key=lambda c: c[2])
    eligible = len(connections)
    shown = connections[:TOP_CONNECTIONS]

    int_score = int(entry.score)
    if int_score >= 80:
        colored_score = _color(str(int_score), "green")
    elif int_score >= 50:
        colored_score = _color(str(int_score), "yellow")
    else:
        colored_score = _color(str(int_score), "red")

    name = _bold(airport.name) + " " + _color(f"({airport.icao})", "cyan")
    score_section = _bold(f"Score: {colored_score}")
    connections_section = _bold(f"Connections: {eligible}/{total}")
    lines = [f"{rank:<3d} {name:<40}  {score_section:<15}  {connections_section:<20}\n"]

    if shown:
        details = ", ".join(
            f"{icao} ({math.floor(distance + 0.5)} nm)" for icao, distance, _ in shown
        )
        lines.append(f"   {details}\n")
    return lines


def find_optimal_fbo_locations(
    conn: sqlite3.Connection,
    optimal_distance: float,
    max_distance: float,
    require_lights: bool,
    preferred_size: Optional[int],
) -> str:
    """Return a report ranking airports that would suit a new FBO."""
    try:
        airports = _select_airports(
            conn,
            "SELECT * FROM airports WHERE latitude IS NOT NULL AND longitude IS NOT NULL",
        )
    except sqlite3.Error as exc:
        raise RuntimeError(f"error fetching airports: {exc}") from exc
    try:
        existing = _select_airports(conn, "SELECT * FROM airports WHERE has_fbo = 1")
    except sqlite3.Error as exc:
        raise RuntimeError(f"error fetching existing FBOs: {exc}") from exc

    if len(existing) < 2:
        return _bold(
            _color(
                "There are fewer than 2 FBOs in the network. "
                "No optimization analysis possible.",
                "yellow",
            )
        )

    valid_count = sum(fbo.has_coordinates() for fbo in existing)
    if valid_count < 2:
        return _bold(
            _color(
                f"Found {len(existing)} FBOs in total, but only {valid_count} have "
                "valid latitude/longitude information. At least 2 FBOs with "
                "coordinates are needed for optimization analysis.",
                "yellow",
            )
        )

    fbo_ids = {fbo.id for fbo in existing}
    candidates = [
        airport
        for airport in airports
        if airport.id not in fbo_ids and (airport.has_lights or not require_lights)
    ]

    scored = (
        score_candidate(c, existing, optimal_distance, require_lights, preferred_size)
        for c in candidates
    )
    ranked = _exchange_sort_desc(
        [entry for entry in scored if entry is not None and entry.score > 0],
        key=lambda entry: entry.score,
    )

    parts = _header(
        optimal_distance,
        max_distance,
        require_lights,
        preferred_size,
        len(airports),
        len(existing),
        len(candidates),
    )
    parts.append(
        f"\n{_bold(_color('Top recommended airports for new FBOs:', 'cyan'))}\n"
    )
    for rank, entry in enumerate(ranked[:TOP_CANDIDATES], start=1):
        parts.extend(_candidate_lines(rank, entry, existing, optimal_distance))
    return "".join(parts)