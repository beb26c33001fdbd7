"""Conversion of remote API records into local database records."""

from __future__ import annotations

import dataclasses
from datetime import datetime
from typing import Any, Mapping, Optional

from offair.models import FBO, AircraftType, Airport


def _optional_text(value: Optional[str]) -> Optional[str]:
    return value if value else None


def adapt_airport(api_airport: Mapping[str, Any]) -> Airport:
    """Convert an API airport mapping into a local airport record."""
    now = datetime.now()
    return Airport(
        id=str(api_airport.get("id", "")),
        name=api_airport.get("name", ""),
        icao=api_airport.get("icao", ""),
        country_code=api_airport.get("country_code", "") or "",
        iata=_optional_text(api_airport.get("iata")),
        state=_optional_text(api_airport.get("state")),
        country_name=_optional_text(api_airport.get("country_name")),
        city=_optional_text(api_airport.get("city")),
        latitude=float(api_airport.get("latitude", 0.0) or 0.0),
        longitude=float(api_airport.get("longitude", 0.0) or 0.0),
        elevation=float(api_airport.get("elevation", 0.0) or 0.0),
        size=int(api_airport.get("size", 0) or 0),
        is_military=bool(api_airport.get("is_military", False)),
        has_lights=bool(api_airport.get("has_lights", False)),
        is_basecamp=bool(api_airport.get("is_basecamp", False)),
        map_surface_type=int(api_airport.get("map_surface_type", 0) or 0),
        is_in_simbrief=bool(api_airport.get("is_in_simbrief", False)),
        display_name=_optional_text(api_airport.get("display_name")),
        has_fbo=False,
        airport_type=None,
        created_at=now,
        modified_at=now,
    )


def adapt_aircraft_type(aircraft_type: AircraftType) -> AircraftType:
    """Return the aircraft type with missing timestamps filled in."""
    now = datetime.now()
    return dataclasses.replace(
        aircraft_type,
        created_at=aircraft_type.created_at or now,
        modified_at=aircraft_type.modified_at or now,
    )


def adapt_fbo(api_fbo: Mapping[str, Any]) -> FBO:
    """Convert an API FBO mapping, with its nested airport, into an FBO record."""
    airport = api_fbo.get("airport") or {}
    return FBO(
        airport_id=str(api_fbo.get("airport_id", "")),
        icao=airport.get("icao", ""),
        name=api_fbo.get("name", ""),
        latitude=float(airport.get("latitude", 0.0) or 0.0),
        longitude=float(airport.get("longitude", 0.0) or 0.0),
    )