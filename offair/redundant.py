"""Detection of FBOs that contribute little to the network."""

from __future__ import annotations

import math
import sqlite3
from dataclasses import dataclass
from typing import Optional, Sequence

from termcolor import colored

from offair.models import Airport
from offair.network import (
    InsufficientFBOsError,
    NetworkMetrics,
    calculate_distance,
    calculate_network_metrics,
    calculate_redundancy_score,
)

COLOCATION_NM = 10.0
NEAREST_SHOWN = 3


@dataclass
class FBOScore:
    """An FBO airport and how redundant it is (higher is more redundant)."""

    fbo: Airport
    score: float


def _bold(text: str) -> str:
    return colored(text, attrs=["bold"])


def _color(text: str, color: str) -> str:
    return colored(text, color)


def _select_airports(conn: sqlite3.Connection, sql: str) -> list[Airport]:
    cursor = conn.execute(sql)
    names = [column[0] for column in cursor.description]
    return [Airport.from_row(dict(zip(names, row))) for row in cursor.fetchall()]


def _relative_change(new: float, old: float) -> float:
    if old == 0:
        diff = new - old
        return math.nan if diff == 0 else math.copysign(math.inf, diff)
    return (new - old) / old


def _rank(
    fbos: Sequence[Airport],
    initial_metrics: NetworkMetrics,
    optimal_distance: float,
    require_lights: bool,
    preferred_size: Optional[int],
) -> list[FBOScore]:
    if len(fbos) < 2:
        return []
    scores: list[FBOScore] = []
    for index, fbo in enumerate(fbos):
        remaining = [*fbos[:index], *fbos[index + 1 :]]
        try:
            metrics = calculate_network_metrics(remaining, optimal_distance)
        except InsufficientFBOsError:
            continue
        score = calculate_redundancy_score(initial_metrics, metrics)

        if preferred_size is not None and fbo.size is not None:
            if fbo.size != preferred_size:
                score += 5.0 if abs(fbo.size - preferred_size) == 1 else 10.0

        if require_lights and fbo.has_lights:
            score -= 10.0

        scores.append(FBOScore(fbo=fbo, score=score))
    return sorted(scores, key=lambda entry: entry.score, reverse=True)


def _is_colocated(candidate: Airport, selected: Sequence[FBOScore]) -> bool:
    if not candidate.has_coordinates():
        return False
    return any(
        calculate_distance(
            chosen.fbo.latitude,
            chosen.fbo.longitude,
            candidate.latitude,
            candidate.longitude,
        )
        < COLOCATION_NM
        for chosen in selected
        if chosen.fbo.has_coordinates()
    )


def select_redundant_fbos(
    fbos: Sequence[Airport],
    initial_metrics: NetworkMetrics,
    optimal_distance: float,
    require_lights: bool,
    preferred_size: Optional[int],
    redundancy_threshold: float,
) -> list[FBOScore]:
    """Repeatedly pick the most redundant FBO above the threshold, skipping co-located ones."""
    selected: list[FBOScore] = []
    removed_ids: set[str] = set()
    current = list(fbos)

    while True:
        ranked = _rank(
            current, initial_metrics, optimal_distance, require_lights, preferred_size
        )
        if not ranked or not ranked[0].score > redundancy_threshold:
            break

        picked: Optional[FBOScore] = None
        for entry in ranked:
            if not entry.score > redundancy_threshold:
                break
            if entry.fbo.id not in removed_ids and not _is_colocated(
                entry.fbo, selected
            ):
                picked = entry
                break

        if picked is None:
            break

        selected.append(picked)
        removed_ids.add(picked.fbo.id)
        for index, fbo in enumerate(current):
            if fbo.id == picked.fbo.id:
                del current[index]
                break

        if len(current) < 2 or len(selected) == len(fbos) - 1:
            break

    return selected


def _config_lines(
    optimal_distance: float,
    max_distance: float,
    require_lights: bool,
    preferred_size: Optional[int],
    redundancy_threshold: float,
    fbo_count: int,
) -> list[str]:
    lines = [
        f"{_bold(_color('FBO Redundancy Analysis:', 'cyan'))}\n\n",
        f"{_bold('Using:')} {_bold('optimal distance:')} {optimal_distance:.2f} nm, "
        f"{_bold('maximum distance:')} {max_distance:.2f} nm\n",
    ]
    answer = _color("Yes", "green") if require_lights else _color("No", "yellow")
    lines.append(f"{_bold('Requiring airports with lights:')} {answer}\n")
    if preferred_size is not None:
        lines.append(f"{_bold('Preferred airport size:')} {preferred_size}\n")
    lines.append(
        f"{_bold('Redundancy threshold:')} {redundancy_threshold:.1f} "
        f"{_color('(scores range from 0-100, higher threshold = less aggressive)', 'yellow')}\n"
    )
    lines.append(f"{_bold('Found:')} {fbo_count} existing FBOs in the network.\n\n")
    return lines


def _no_redundancy_text(redundancy_threshold: float) -> str:
    return _bold(_color("Scenario Assessment: ", "green")) + (
        f"Based on the analysis with a redundancy threshold of {redundancy_threshold:.1f}, "
        "no FBOs are considered redundant in the current network. "
        "The existing FBO distribution provides optimal coverage given the specified criteria.\n\n"
        "No changes are recommended at this time. If you wish to identify more FBOs for "
        "potential removal, you can lower the redundancy threshold by setting the "
        "FBO_REDUNDANCY_THRESHOLD environment variable.\n\n"
        "The redundancy score ranges from 0 to 100, with higher scores indicating FBOs that "
        "contribute less to the network. A threshold of 100 is very strict (no FBOs will be "
        "considered redundant), while a threshold of 50 is moderate, and a threshold of 0 "
        "would consider all FBOs for potential removal (not recommended)."
    )


def _metrics_lines(
    existing: Sequence[Airport],
    optimized: Sequence[Airport],
    initial: NetworkMetrics,
    final: NetworkMetrics,
) -> list[str]:
    lines = [_bold("Network Metrics Comparison:\n")]

    fbo_symbol = "+" if len(optimized) >= len(existing) else "-"
    fbo_percent = abs((len(optimized) - len(existing)) / len(existing) * 100)
    lines.append(
        f"  • {_bold('Total FBOs')}: {len(existing)} → {len(optimized)} "
        f"({fbo_symbol}{fbo_percent:.0f}%)\n"
    )

    dist_symbol = "+" if final.average_distance > initial.average_distance else "-"
    dist_percent = abs(
        _relative_change(final.average_distance, initial.average_distance) * 100
    )
    lines.append(
        f"  • {_bold('Average distance between FBOs')}: "
        f"{initial.average_distance:.2f} nm → {final.average_distance:.2f} nm "
        f"({dist_symbol}{dist_percent:.2f}%)\n"
    )

    eff_symbol = "+" if final.efficiency_score > initial.efficiency_score else "-"
    eff_percent = abs(
        _relative_change(final.efficiency_score, initial.efficiency_score) * 100
    )
    lines.append(
        f"  • {_bold('Network efficiency score')}: "
        f"{initial.efficiency_score:.2f} → {final.efficiency_score:.2f} "
        f"({eff_symbol}{eff_percent:.2f}%)\n\n"
    )
    return lines


def _removal_lines(
    rank: int, entry: FBOScore, optimized: Sequence[Airport]
) -> list[str]:
    fbo = entry.fbo
    text = f"{entry.score:.1f}"
    if entry.score >= 20:
        colored_score = _color(text, "red")
    elif entry.score >= 10:
        colored_score = _color(text, "yellow")
    else:
        colored_score = _color(text, "green")

    lines = [
        f"{rank}. {_bold(fbo.name)} {_color(f'({fbo.icao})', 'cyan')} - "
        f"Redundancy Score: {colored_score}\n"
    ]

    if fbo.has_coordinates():
        nearest = sorted(
            (
                (
                    other.icao,
                    calculate_distance(
                        fbo.latitude, fbo.longitude, other.latitude, other.longitude
                    ),
                )
                for other in optimized
                if other.has_coordinates()
            ),
            key=lambda pair: pair[1],
        )
        if nearest:
            shown = ", ".join(
                f"{icao} ({distance:.0f} nm)" for icao, distance in nearest[:NEAREST_SHOWN]
            )
            lines.append(f"   Nearest alternative FBOs: {shown}\n")
    return lines


def find_redundant_fbos(
    conn: sqlite3.Connection,
    optimal_distance: float,
    max_distance: float,
    require_lights: bool,
    preferred_size: Optional[int],
    redundancy_threshold: float,
) -> str:
    """Return a report of FBOs that could be removed without harming the network."""
    try:
        total = _select_airports(conn, "SELECT * FROM airports WHERE has_fbo = 1")
    except sqlite3.Error as exc:
        raise RuntimeError(f"error fetching existing FBOs: {exc}") from exc

    if len(total) < 2:
        return _bold(
            _color(
                "There are fewer than 2 FBOs in the network. "
                "No redundancy analysis possible.",
                "yellow",
            )
        )

    try:
        existing = _select_airports(
            conn,
            "SELECT * FROM airports WHERE has_fbo = 1 "
            "AND latitude IS NOT NULL AND longitude IS NOT NULL",
        )
    except sqlite3.Error as exc:
        raise RuntimeError(f"error fetching existing FBOs: {exc}") from exc

    if len(existing) < 2:
        return _bold(
            _color(
                f"Found {len(total)} FBOs in total, but only {len(existing)} have "
                "valid latitude/longitude information. At least 2 FBOs with "
                "coordinates are needed for redundancy analysis.",
                "yellow",
            )
        )

    try:
        initial = calculate_network_metrics(existing, optimal_distance)
    except InsufficientFBOsError as exc:
        return _bold(_color(f"Error calculating network metrics: {exc}", "yellow"))

    redundant = select_redundant_fbos(
        existing,
        initial,
        optimal_distance,
        require_lights,
        preferred_size,
        redundancy_threshold,
    )

    parts = _config_lines(
        optimal_distance,
        max_distance,
        require_lights,
        preferred_size,
        redundancy_threshold,
        len(existing),
    )

    if not redundant:
        parts.append(_no_redundancy_text(redundancy_threshold))
        return "".join(parts)

    removed_ids = {entry.fbo.id for entry in redundant}
    optimized = [fbo for fbo in existing if fbo.id not in removed_ids]
    final = calculate_network_metrics(optimized, optimal_distance)

    parts.append(
        _bold(_color("Scenario Assessment: ", "green"))
        + (
            f"The analysis identified {len(redundant)} FBOs that could be considered "
            "redundant without significantly impacting network coverage. "
            f"With the current redundancy threshold of {redundancy_threshold:.1f}, only FBOs "
            "with scores above this value are considered for removal, ensuring that only the "
            "most redundant FBOs are identified while maintaining adequate network coverage.\n\n"
            "The redundancy score ranges from 0 to 100, with higher scores indicating FBOs "
            "that contribute less to the network. The scores are calculated using a stable "
            "algorithm that considers how each FBO affects the overall network metrics when "
            "removed. This approach ensures consistent results across different threshold "
            "values.\n\n"
        )
    )
    parts.extend(_metrics_lines(existing, optimized, initial, final))
    parts.append(_bold(_color("Recommended FBOs for removal:", "yellow")) + "\n")
    for rank, entry in enumerate(redundant, start=1):
        parts.extend(_removal_lines(rank, entry, optimized))
    return "".join(parts)