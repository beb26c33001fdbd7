import re

import pytest

from offair.database import init_db, save_airport
from offair.distances import find_clusters, list_distances_between_fbos
from offair.fbo_ops import add_fbo
from offair.models import FBO, Airport
from offair.network import calculate_distance

ANSI = re.compile(r"\x1b\[[0-9;]*m")


def plain(text):
    return ANSI.sub("", text)


def make_fbo(icao, lat, lon):
    return FBO(airport_id=icao, icao=icao, name=f"{icao} FBO", latitude=lat, longitude=lon)


@pytest.fixture
def conn(tmp_path):
    connection = init_db(tmp_path / "offair.db")
    yield connection
    connection.close()


def add_airport(conn, icao, lat, lon, with_fbo=True):
    save_airport(
        conn,
        Airport(id=icao, name=f"{icao} Field", icao=icao, country_code="AU",
                latitude=lat, longitude=lon),
    )
    if with_fbo:
        add_fbo(conn, icao)


def test_find_clusters_groups_nearby():
    fbos = [make_fbo("AAAA", 0, 0), make_fbo("BBBB", 0, 1), make_fbo("CCCC", 0, 10)]
    assert find_clusters(fbos, 300.0) == [["AAAA", "BBBB"]]


def test_find_clusters_large_radius_single_cluster():
    fbos = [make_fbo("AAAA", 0, 0), make_fbo("BBBB", 0, 1), make_fbo("CCCC", 0, 10)]
    assert find_clusters(fbos, 10000.0) == [["AAAA", "BBBB", "CCCC"]]


def test_find_clusters_small_radius_none():
    fbos = [make_fbo("AAAA", 0, 0), make_fbo("BBBB", 0, 1)]
    assert find_clusters(fbos, 1.0) == []


def test_find_clusters_measured_from_first_member_only():
    fbos = [make_fbo("AAAA", 0, 0), make_fbo("BBBB", 0, 4), make_fbo("CCCC", 0, 8)]
    clusters = find_clusters(fbos, 300.0)
    assert clusters == [["AAAA", "BBBB"]]
    assert all("CCCC" not in cluster for cluster in clusters)


def test_fewer_than_two_fbos(conn):
    add_airport(conn, "AAAA", 0, 0)
    result = plain(list_distances_between_fbos(conn))
    assert "fewer than 2 FBOs" in result


def test_flags_without_fbo_rows(conn):
    add_airport(conn, "AAAA", 0, 0, with_fbo=False)
    add_airport(conn, "BBBB", 0, 1, with_fbo=False)
    conn.execute("UPDATE airports SET has_fbo = 1")
    conn.commit()
    result = plain(list_distances_between_fbos(conn))
    assert result.startswith("Found 2 FBOs in total, but fewer than 2")


def test_report_summary_and_ordering(conn):
    add_airport(conn, "AAAA", 0, 0)
    add_airport(conn, "BBBB", 0, 1)
    add_airport(conn, "CCCC", 0, 10)
    result = plain(list_distances_between_fbos(conn))

    ab = calculate_distance(0, 0, 0, 1)
    ac = calculate_distance(0, 0, 0, 10)
    assert "Total FBOs: 3" in result
    assert "Total connections: 3" in result
    assert f"Shortest connection: {ab:.2f} nm (AAAA to BBBB)" in result
    assert f"Longest connection: {ac:.2f} nm (AAAA to CCCC)" in result

    closest = result.split("Closest Connections:\n")[1].splitlines()
    assert closest[0] == f"  1. AAAA to BBBB: {ab:.2f} nm"
    assert closest[2] == f"  3. AAAA to CCCC: {ac:.2f} nm"
    assert "Cluster 1: AAAA, BBBB (within 300 nm)" in result
    assert "Note:" not in result


def test_no_clusters_message(conn):
    add_airport(conn, "AAAA", 0, 0)
    add_airport(conn, "BBBB", 0, 20)
    result = plain(list_distances_between_fbos(conn))
    assert "No clusters found within 300 nm" in result


def test_note_for_many_connections(conn):
    for index, icao in enumerate(["AAAA", "BBBB", "CCCC", "DDDD", "EEEE", "FFFF"]):
        add_airport(conn, icao, 0, index * 10)
    result = plain(list_distances_between_fbos(conn))
    assert "Note: 15 total connections exist." in result
    furthest = result.split("Furthest Connections:\n")[1].split("\n\n")[0].splitlines()
    assert len(furthest) == 5