from datetime import datetime

from offair.adapters import adapt_aircraft_type, adapt_airport, adapt_fbo
from offair.models import AircraftType


def test_adapt_airport_empty_strings_become_none():
    airport = adapt_airport(
        {"id": 17, "name": "Field", "icao": "YFLD", "country_code": "",
         "iata": "", "state": "", "city": "", "display_name": ""}
    )
    assert airport.id == "17"
    assert airport.iata is None
    assert airport.state is None
    assert airport.city is None
    assert airport.display_name is None
    assert airport.country_code == ""


def test_adapt_airport_numeric_fields_always_set():
    airport = adapt_airport({"id": "x", "name": "Field", "icao": "YFLD"})
    assert airport.latitude == 0.0
    assert airport.longitude == 0.0
    assert airport.size == 0
    assert airport.has_coordinates() is True


def test_adapt_airport_defaults_and_copies():
    airport = adapt_airport(
        {"id": "x", "name": "Field", "icao": "YFLD", "state": "QLD",
         "has_lights": True, "latitude": -27.4, "longitude": 153.1, "size": 4}
    )
    assert airport.has_fbo is False
    assert airport.airport_type is None
    assert airport.has_lights is True
    assert airport.state == "QLD"
    assert (airport.latitude, airport.longitude, airport.size) == (-27.4, 153.1, 4)
    assert airport.created_at is not None and airport.modified_at is not None


def test_adapt_aircraft_type_fills_missing_timestamps():
    adapted = adapt_aircraft_type(AircraftType(display_name="Twin"))
    assert isinstance(adapted.created_at, datetime)
    assert isinstance(adapted.modified_at, datetime)
    assert adapted.display_name == "Twin"


def test_adapt_aircraft_type_keeps_existing_timestamps():
    stamp = datetime(2020, 1, 2, 3, 4, 5)
    adapted = adapt_aircraft_type(AircraftType(created_at=stamp, modified_at=stamp))
    assert adapted.created_at == stamp
    assert adapted.modified_at == stamp


def test_adapt_fbo_uses_nested_airport():
    fbo = adapt_fbo(
        {"airport_id": "a1", "name": "Field FBO",
         "airport": {"icao": "YFLD", "latitude": -27.4, "longitude": 153.1}}
    )
    assert fbo.airport_id == "a1"
    assert fbo.icao == "YFLD"
    assert fbo.name == "Field FBO"
    assert (fbo.latitude, fbo.longitude) == (-27.4, 153.1)
    assert fbo.id is None