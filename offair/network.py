"""Distance and network-quality calculations for FBO networks."""

from __future__ import annotations

import math
from dataclasses import dataclass
from itertools import combinations
from typing import Sequence

from offair.models import Airport

EARTH_RADIUS_NM = 3440.0
OPTIMAL_TOLERANCE = 0.2


class InsufficientFBOsError(ValueError):
    """Raised when a network is too small to measure."""


@dataclass(frozen=True)
class NetworkMetrics:
    """Summary figures describing an FBO network."""

    average_distance: float
    efficiency_score: float
    optimal_connections: int
    total_connections: int


def calculate_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in nautical miles between two points in degrees."""
    lat1_rad, lon1_rad = math.radians(lat1), math.radians(lon1)
    lat2_rad, lon2_rad = math.radians(lat2), math.radians(lon2)
    d_lat = lat2_rad - lat1_rad
    d_lon = lon2_rad - lon1_rad
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_NM * c


def is_optimal(distance: float, optimal_distance: float) -> bool:
    """True when a distance lies within 20% of the optimal distance."""
    return abs(distance - optimal_distance) <= OPTIMAL_TOLERANCE * optimal_distance


def _div(numerator: float, denominator: float) -> float:
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator)
    return numerator / denominator


def calculate_network_metrics(
    fbos: Sequence[Airport], optimal_distance: float
) -> NetworkMetrics:
    """Measure average spacing and efficiency of a set of FBO airports."""
    if len(fbos) < 2:
        raise InsufficientFBOsError("need at least 2 FBOs to calculate network metrics")

    located = [fbo for fbo in fbos if fbo.has_coordinates()]
    if len(located) < 2:
        raise InsufficientFBOsError(
            "need at least 2 FBOs with valid coordinates to calculate network "
            f"metrics, found {len(located)}"
        )

    distances = [
        calculate_distance(a.latitude, a.longitude, b.latitude, b.longitude)
        for a, b in combinations(located, 2)
    ]
    if not distances:
        raise InsufficientFBOsError(
            f"found {len(located)} FBOs with valid coordinates but no valid "
            "connections between them"
        )

    connections = len(distances)
    optimal_connections = sum(is_optimal(d, optimal_distance) for d in distances)
    average = sum(distances) / connections

    optimal_ratio = optimal_connections / connections
    distance_score = 100.0 - min(
        100.0, _div(abs(average - optimal_distance), optimal_distance) * 100.0
    )
    return NetworkMetrics(
        average_distance=average,
        efficiency_score=optimal_ratio * 50.0 + distance_score * 0.5,
        optimal_connections=optimal_connections,
        total_connections=connections,
    )


def calculate_redundancy_score(original: NetworkMetrics, new: NetworkMetrics) -> float:
    """Score in 0-100 of how redundant a removed FBO was; above 50 means removal helps."""
    distance_change = _div(
        new.average_distance - original.average_distance, original.average_distance
    )
    efficiency_change = _div(
        new.efficiency_score - original.efficiency_score, original.efficiency_score
    )
    original_ratio = _div(original.optimal_connections, original.total_connections)
    new_ratio = _div(new.optimal_connections, new.total_connections)
    ratio_change = new_ratio - original_ratio

    efficiency_component = math.log1p(abs(efficiency_change)) * 20.0
    if efficiency_change < 0:
        efficiency_component = -efficiency_component

    ratio_component = math.log1p(abs(ratio_change)) * 15.0
    if ratio_change < 0:
        ratio_component = -ratio_component

    distance_component = math.log1p(abs(distance_change)) * 10.0
    if distance_change > 0:
        distance_component = -distance_component

    raw_score = efficiency_component + ratio_component + distance_component
    try:
        denominator = 1.0 + math.exp(-raw_score / 10.0)
    except OverflowError:
        denominator = math.inf
    return 100.0 / denominator