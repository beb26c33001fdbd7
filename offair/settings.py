"""FBO analysis settings read from the environment."""

from __future__ import annotations

import math
import os
import re
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_OPTIMAL_DISTANCE = "800"
DEFAULT_MAX_DISTANCE = "1200"
DEFAULT_REQUIRE_LIGHTS = "true"
DEFAULT_REDUNDANCY_THRESHOLD = "100.0"
MIN_AIRPORT_SIZE = 0
MAX_AIRPORT_SIZE = 5

_INTEGER = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class FBOSettings:
    """Parameters used by the FBO optimisation and redundancy analyses."""

    optimal_distance: float = 800.0
    max_distance: float = 1200.0
    require_lights: bool = True
    preferred_size: Optional[int] = None
    redundancy_threshold: float = 100.0


def _parse_float(text: str) -> float:
    if text != text.strip():
        return 0.0
    try:
        value = float(text)
    except ValueError:
        return 0.0
    return 0.0 if math.isnan(value) and text.lower() not in {"nan", "+nan", "-nan"} else value


def _parse_size(text: str) -> Optional[int]:
    if not _INTEGER.fullmatch(text):
        return None
    size = int(text)
    if MIN_AIRPORT_SIZE <= size <= MAX_AIRPORT_SIZE:
        return size
    return None


def load_settings(environ: Optional[Mapping[str, str]] = None) -> FBOSettings:
    """Read settings from the environment; unparsable numbers become 0."""
    env = os.environ if environ is None else environ
    optimal = env.get("FBO_NM_OPTIMAL", "") or DEFAULT_OPTIMAL_DISTANCE
    maximum = env.get("FBO_NM_MAX", "") or DEFAULT_MAX_DISTANCE
    lights = env.get("FBO_REQ_LIGHTS", "") or DEFAULT_REQUIRE_LIGHTS
    size = env.get("FBO_PREFERRED_SIZE", "")
    threshold = env.get("FBO_REDUNDANCY_THRESHOLD", "") or DEFAULT_REDUNDANCY_THRESHOLD
    return FBOSettings(
        optimal_distance=_parse_float(optimal),
        max_distance=_parse_float(maximum),
        require_lights=lights == "true",
        preferred_size=_parse_size(size) if size else None,
        redundancy_threshold=_parse_float(threshold),
    )