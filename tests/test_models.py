from offair.models import (
    AIRPORT_COLUMNS,
    FBO,
    AircraftType,
    AircraftTypeAtAirport,
    Airport,
)


def _row(**overrides):
    row = {
        "id": "abc",
        "name": "Sample Field",
        "icao": "YSMP",
        "country_code": "AU",
        "iata": None,
        "state": None,
        "country_name": None,
        "city": None,
        "latitude": -33.5,
        "longitude": 151.2,
        "elevation": None,
        "size": 3,
        "is_military": 0,
        "has_lights": 1,
        "is_basecamp": 0,
        "map_surface_type": None,
        "is_in_simbrief": 1,
        "display_name": None,
        "has_fbo": 0,
        "airport_type": None,
    }
    row.update(overrides)
    return row


def test_from_row_converts_booleans():
    airport = Airport.from_row(_row())
    assert airport.has_lights is True
    assert airport.is_military is False
    assert airport.is_in_simbrief is True
    assert airport.has_fbo is False


def test_from_row_ignores_unknown_columns():
    airport = Airport.from_row(_row(extra_column="x"))
    assert airport.icao == "YSMP"
    assert airport.size == 3


def test_to_params_round_trip():
    airport = Airport.from_row(_row(state="NSW", airport_type="AD"))
    params = airport.to_params()
    assert tuple(params) == AIRPORT_COLUMNS
    assert Airport.from_row(params) == airport


def test_has_coordinates():
    assert Airport.from_row(_row()).has_coordinates() is True
    assert Airport.from_row(_row(latitude=None)).has_coordinates() is False
    assert Airport.from_row(_row(longitude=None)).has_coordinates() is False


def test_fbo_from_row():
    fbo = FBO.from_row(
        {"id": 4, "airport_id": "abc", "icao": "YSMP", "name": "Sample FBO",
         "latitude": -33.5, "longitude": 151.2}
    )
    assert fbo.id == 4
    assert fbo.airport_id == "abc"
    assert (fbo.latitude, fbo.longitude) == (-33.5, 151.2)


def test_aircraft_type_at_airport_inherits_fields():
    entry = AircraftTypeAtAirport(display_name="Light Twin", seats=6, count=2)
    assert isinstance(entry, AircraftType)
    assert entry.display_name == "Light Twin"
    assert entry.seats == 6
    assert entry.count == 2