"""Data records for airports, FBOs and aircraft types."""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime
from typing import Any, Mapping, Optional

AIRPORT_COLUMNS = (
    "id",
    "name",
    "icao",
    "country_code",
    "iata",
    "state",
    "country_name",
    "city",
    "latitude",
    "longitude",
    "elevation",
    "size",
    "is_military",
    "has_lights",
    "is_basecamp",
    "map_surface_type",
    "is_in_simbrief",
    "display_name",
    "has_fbo",
    "airport_type",
)

_AIRPORT_BOOLEANS = frozenset(
    {"is_military", "has_lights", "is_basecamp", "is_in_simbrief", "has_fbo"}
)


def _as_dict(row: Any) -> dict[str, Any]:
    if isinstance(row, Mapping):
        return dict(row)
    return {key: row[key] for key in row.keys()}


@dataclass
class Airport:
    """An airport as stored in the local database."""

    id: str
    name: str
    icao: str
    country_code: str = ""
    iata: Optional[str] = None
    state: Optional[str] = None
    country_name: Optional[str] = None
    city: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    elevation: Optional[float] = None
    size: Optional[int] = None
    is_military: bool = False
    has_lights: bool = False
    is_basecamp: bool = False
    map_surface_type: Optional[int] = None
    is_in_simbrief: bool = False
    display_name: Optional[str] = None
    has_fbo: bool = False
    airport_type: Optional[str] = None
    created_at: Optional[datetime] = None
    modified_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Any) -> "Airport":
        """Build an airport from a database row or mapping."""
        data = _as_dict(row)
        known = {f.name for f in fields(cls)}
        values = {key: value for key, value in data.items() if key in known}
        for key in _AIRPORT_BOOLEANS:
            values[key] = bool(values.get(key) or False)
        values["id"] = str(values.get("id", ""))
        return cls(**values)

    def to_params(self) -> dict[str, Any]:
        """Return the column values used to store this airport."""
        return {column: getattr(self, column) for column in AIRPORT_COLUMNS}

    def has_coordinates(self) -> bool:
        """True when both latitude and longitude are known."""
        return self.latitude is not None and self.longitude is not None


@dataclass
class FBO:
    """A fixed base of operations at an airport."""

    airport_id: str
    icao: str
    name: str
    latitude: float
    longitude: float
    id: Optional[int] = None

    @classmethod
    def from_row(cls, row: Any) -> "FBO":
        """Build an FBO from a database row or mapping."""
        data = _as_dict(row)
        return cls(
            id=data.get("id"),
            airport_id=str(data["airport_id"]),
            icao=data["icao"],
            name=data["name"],
            latitude=float(data["latitude"]),
            longitude=float(data["longitude"]),
        )


@dataclass
class AircraftType:
    """An aircraft type and its performance figures."""

    id: str = ""
    created_at: Optional[datetime] = None
    modified_at: Optional[datetime] = None
    hash: str = ""
    aircraft_class_id: str = ""
    creation_date: Optional[datetime] = None
    last_moderation_date: Optional[datetime] = None
    display_name: str = ""
    type_name: str = ""
    flights_count: int = 0
    time_between_overhaul: int = 0
    hightime_airframe: int = 0
    airport_min_size: int = 0
    empty_weight: float = 0.0
    maximum_gross_weight: float = 0.0
    estimated_cruise_ff: float = 0.0
    base_price: float = 0.0
    fuel_total_capacity_in_gallons: float = 0.0
    engine_type: int = 0
    number_of_engines: int = 0
    seats: int = 0
    needs_copilot: bool = False
    fuel_type: int = 0
    maximum_cargo_weight: float = 0.0
    maximum_range_in_hour: float = 0.0
    maximum_range_in_nm: float = 0.0
    design_speed_vs0: float = 0.0
    design_speed_vs1: float = 0.0
    design_speed_vc: float = 0.0
    is_disabled: bool = False
    luxe_factor: float = 0.0
    glider_has_engine: bool = False
    standard_seat_weight: float = 0.0
    is_fighter: bool = False
    equipment_level: int = 0


@dataclass
class AircraftTypeAtAirport(AircraftType):
    """An aircraft type together with how many are at an airport."""

    count: int = 0