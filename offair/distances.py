"""Pairwise distances and proximity clusters across the FBO network."""

from __future__ import annotations

import math
import sqlite3
from itertools import combinations
from typing import NamedTuple, Sequence

from termcolor import colored

from offair.models import FBO, Airport
from offair.network import calculate_distance

SHORT_DISTANCE_NM = 300.0
TOP_CONNECTIONS = 5
NOTE_THRESHOLD = 10


class _Pair(NamedTuple):
    first: FBO
    second: FBO
    distance: float


def _bold(text: str) -> str:
    return colored(text, attrs=["bold"])


def _color(text: str, color: str) -> str:
    return colored(text, color)


def _fbo_distance(a: FBO, b: FBO) -> float:
    return calculate_distance(a.latitude, a.longitude, b.latitude, b.longitude)


def _select_airports(conn: sqlite3.Connection, sql: str) -> list[Airport]:
    cursor = conn.execute(sql)
    names = [column[0] for column in cursor.description]
    return [Airport.from_row(dict(zip(names, row))) for row in cursor.fetchall()]


def _select_fbos(conn: sqlite3.Connection) -> list[FBO]:
    cursor = conn.execute(
        """
        SELECT f.id, f.airport_id, f.icao, f.name, a.latitude, a.longitude
        FROM fbos f
        JOIN airports a ON f.airport_id = a.id
        """
    )
    names = [column[0] for column in cursor.description]
    return [FBO.from_row(dict(zip(names, row))) for row in cursor.fetchall()]


def _exchange_sort_asc(pairs: Sequence[_Pair]) -> list[_Pair]:
    # An unstable exchange sort: the order of equal distances is part of the report.
    ordered = list(pairs)
    for i in range(len(ordered)):
        for j in range(i + 1, len(ordered)):
            if ordered[i].distance > ordered[j].distance:
                ordered[i], ordered[j] = ordered[j], ordered[i]
    return ordered


def find_clusters(
    fbos: Sequence[FBO], radius: float = SHORT_DISTANCE_NM
) -> list[list[str]]:
    """Group FBO ICAO codes lying within radius of each cluster's first member.

    Only clusters with at least two members are returned.
    """
    visited: set[str] = set()
    clusters: list[list[str]] = []
    for i, origin in enumerate(fbos):
        if origin.icao in visited:
            continue
        cluster = [origin.icao]
        visited.add(origin.icao)
        for j, other in enumerate(fbos):
            if j == i or other.icao in visited:
                continue
            if _fbo_distance(origin, other) <= radius:
                cluster.append(other.icao)
                visited.add(other.icao)
        if len(cluster) >= 2:
            clusters.append(cluster)
    return clusters


def _connection_line(rank: int, pair: _Pair) -> str:
    return (
        f"  {rank}. {_bold(pair.first.icao)} {_color('to', 'blue')} "
        f"{_bold(pair.second.icao)}: {pair.distance:.2f} nm\n"
    )


def list_distances_between_fbos(conn: sqlite3.Connection) -> str:
    """Return a report of distances, extremes and clusters among FBOs."""
    try:
        total = _select_airports(conn, "SELECT * FROM airports WHERE has_fbo = 1")
    except sqlite3.Error as exc:
        raise RuntimeError(f"error fetching airports with FBOs: {exc}") from exc

    try:
        fbos = _select_fbos(conn)
    except (sqlite3.Error, TypeError, ValueError) as exc:
        raise RuntimeError(f"error fetching FBOs: {exc}") from exc

    if len(total) < 2:
        return _bold(
            _color(
                "There are fewer than 2 FBOs in the network. "
                "No distance analysis possible.",
                "yellow",
            )
        )

    if len(fbos) < 2:
        return _bold(
            _color(
                f"Found {len(total)} FBOs in total, but fewer than 2 have valid "
                "coordinate information. At least 2 FBOs with coordinates are "
                "needed to calculate distances.",
                "yellow",
            )
        )

    pairs = [_Pair(a, b, _fbo_distance(a, b)) for a, b in combinations(fbos, 2)]

    min_distance = math.inf
    max_distance = 0.0
    shortest_names = ("", "")
    longest_names = ("", "")
    for pair in pairs:
        if pair.distance < min_distance:
            min_distance = pair.distance
            shortest_names = (pair.first.icao, pair.second.icao)
        if pair.distance > max_distance:
            max_distance = pair.distance
            longest_names = (pair.first.icao, pair.second.icao)

    ordered = _exchange_sort_asc(pairs)
    average = sum(pair.distance for pair in pairs) / len(pairs)

    parts = [
        f"{_bold(_color('FBO Network Analysis:', 'cyan'))}\n\n",
        f"{_bold('Summary Statistics:')}\n",
        f"  • {_bold('Total FBOs')}: {len(fbos)}\n",
        f"  • {_bold('Total connections')}: {len(pairs)}\n",
        f"  • {_bold('Average distance')}: {average:.2f} nm\n",
        f"  • {_bold('Shortest connection')}: {min_distance:.2f} nm "
        f"({_bold(shortest_names[0])} to {_bold(shortest_names[1])})\n",
        f"  • {_bold('Longest connection')}: {max_distance:.2f} nm "
        f"({_bold(longest_names[0])} to {_bold(longest_names[1])})\n\n",
    ]

    limit = min(TOP_CONNECTIONS, len(ordered))
    parts.append(f"{_bold(_color('Closest Connections:', 'green'))}\n")
    parts.extend(
        _connection_line(rank, pair) for rank, pair in enumerate(ordered[:limit], 1)
    )
    parts.append("\n")

    start = max(len(ordered) - limit, 0)
    parts.append(f"{_bold(_color('Furthest Connections:', 'red'))}\n")
    parts.extend(
        _connection_line(rank, pair) for rank, pair in enumerate(ordered[start:], 1)
    )
    parts.append("\n")

    parts.append(f"{_bold(_color('FBO Clusters:', 'yellow'))}\n")
    clusters = find_clusters(fbos, SHORT_DISTANCE_NM)
    for number, cluster in enumerate(clusters, 1):
        parts.append(
            f"  {_bold('Cluster')} {number}: {', '.join(cluster)} "
            f"(within {SHORT_DISTANCE_NM:.0f} nm)\n"
        )
    if not clusters:
        parts.append(
            f"  {_color(f'No clusters found within {SHORT_DISTANCE_NM:.0f} nm', 'yellow')}\n"
        )

    if len(pairs) > NOTE_THRESHOLD:
        parts.append(
            f"\n{_bold(_color('Note:', 'yellow'))} {len(pairs)} "
            f"{_color('total connections exist. Only the most significant are shown above.', 'yellow')}\n"
        )

    return "".join(parts)