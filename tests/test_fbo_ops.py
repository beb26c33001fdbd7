import pytest

from offair.database import AirportNotFoundError, get_airport, init_db, save_airport
from offair.fbo_ops import FBOError, add_fbo, list_airports_with_fbos, remove_fbo
from offair.models import Airport


@pytest.fixture
def conn(tmp_path):
    connection = init_db(tmp_path / "test.db")
    yield connection
    connection.close()


def _airport(icao, **kwargs):
    values = dict(
        id=f"id-{icao}",
        name=f"{icao} Field",
        icao=icao,
        country_code="AU",
        latitude=-33.9,
        longitude=151.2,
    )
    values.update(kwargs)
    return Airport(**values)


def test_add_fbo_inserts_row_and_flags_airport(conn):
    save_airport(conn, _airport("YSSY", name="Sydney"))
    add_fbo(conn, "YSSY")

    row = conn.execute(
        "SELECT airport_id, name, latitude, longitude FROM fbos WHERE icao = ?",
        ("YSSY",),
    ).fetchone()
    assert row[0] == "id-YSSY"
    assert row[1] == "Sydney FBO"
    assert row[2] == -33.9
    assert row[3] == 151.2
    assert get_airport(conn, "YSSY").has_fbo is True


def test_add_fbo_twice_fails(conn):
    save_airport(conn, _airport("YSSY"))
    add_fbo(conn, "YSSY")
    with pytest.raises(FBOError, match="already has an FBO"):
        add_fbo(conn, "YSSY")


def test_add_fbo_unknown_airport(conn):
    with pytest.raises(AirportNotFoundError):
        add_fbo(conn, "ZZZZ")


def test_add_fbo_without_coordinates(conn):
    save_airport(conn, _airport("YNOC", latitude=None, longitude=None))
    with pytest.raises(FBOError, match="latitude or longitude"):
        add_fbo(conn, "YNOC")
    count = conn.execute("SELECT COUNT(*) FROM fbos").fetchone()[0]
    assert count == 0


def test_remove_fbo_round_trip(conn):
    save_airport(conn, _airport("YMML"))
    add_fbo(conn, "YMML")
    remove_fbo(conn, "YMML")

    assert get_airport(conn, "YMML").has_fbo is False
    count = conn.execute("SELECT COUNT(*) FROM fbos").fetchone()[0]
    assert count == 0


def test_remove_fbo_when_none_present(conn):
    save_airport(conn, _airport("YMML"))
    with pytest.raises(FBOError, match="does not have an FBO"):
        remove_fbo(conn, "YMML")


def test_remove_fbo_unknown_airport(conn):
    with pytest.raises(AirportNotFoundError):
        remove_fbo(conn, "ZZZZ")


def test_list_airports_with_fbos(conn):
    save_airport(conn, _airport("YSSY"))
    save_airport(conn, _airport("YMML"))
    save_airport(conn, _airport("YBBN"))
    add_fbo(conn, "YSSY")
    add_fbo(conn, "YBBN")

    icaos = sorted(a.icao for a in list_airports_with_fbos(conn))
    assert icaos == ["YBBN", "YSSY"]


def test_list_airports_with_fbos_empty(conn):
    save_airport(conn, _airport("YSSY"))
    assert list_airports_with_fbos(conn) == []