import io

import pytest

from offair.database import AirportNotFoundError, get_airport, init_db, save_airport
from offair.fbo_menu import (
    add_fbo_menu,
    fbo_options,
    find_distance_between_airports,
    find_optimal_menu,
    find_redundant_menu,
    list_airports_with_fbos_menu,
    list_distances_menu,
)
from offair.fbo_ops import add_fbo
from offair.models import Airport
from offair.network import calculate_distance
from offair.prompts import Prompter


class Script:
    def __init__(self, *answers):
        self.answers = list(answers)
        self.prompts = []

    def __call__(self, prompt):
        self.prompts.append(prompt)
        if not self.answers:
            raise EOFError
        return self.answers.pop(0)


def make_prompter(*answers):
    script = Script(*answers)
    out = io.StringIO()
    return Prompter(input_func=script, output=out), out, script


class FakeClient:
    def __init__(self, airports):
        self.airports = airports

    def get_airport(self, icao):
        try:
            return self.airports[icao]
        except KeyError:
            raise LookupError(f"unknown airport {icao}") from None


def sydney(**overrides):
    values = dict(
        id="1", name="Sydney", icao="YSSY", country_code="AU",
        latitude=-33.9461, longitude=151.1772, has_lights=True, airport_type="AD",
    )
    values.update(overrides)
    return Airport(**values)


def melbourne(**overrides):
    values = dict(
        id="2", name="Melbourne", icao="YMML", country_code="AU",
        latitude=-37.6733, longitude=144.8433, has_lights=True, airport_type="AD",
    )
    values.update(overrides)
    return Airport(**values)


@pytest.fixture
def conn(tmp_path):
    connection = init_db(str(tmp_path / "offair.db"))
    yield connection
    connection.close()


def failing_factory():
    raise RuntimeError("no client")


def test_distance_between_airports(conn):
    save_airport(conn, sydney())
    save_airport(conn, melbourne())
    prompter, out, _ = make_prompter("yssy", "ymml")
    find_distance_between_airports(conn, prompter)
    a, b = sydney(), melbourne()
    expected = calculate_distance(a.latitude, a.longitude, b.latitude, b.longitude)
    text = out.getvalue()
    assert f"{expected:.2f}" in text
    assert "Distance Calculation Result:" in text


def test_distance_same_icao(conn):
    prompter, out, _ = make_prompter("yssy", "YSSY")
    find_distance_between_airports(conn, prompter)
    assert "Both ICAOs are the same" in out.getvalue()


def test_distance_unknown_airport(conn):
    save_airport(conn, sydney())
    prompter, out, _ = make_prompter("yssy", "ymml")
    find_distance_between_airports(conn, prompter)
    assert "not found in the database." in out.getvalue()


def test_distance_missing_coordinates(conn):
    save_airport(conn, sydney())
    save_airport(conn, melbourne(latitude=None, longitude=None))
    prompter, out, _ = make_prompter("yssy", "ymml")
    find_distance_between_airports(conn, prompter)
    assert "does not have latitude or longitude information." in out.getvalue()


def test_distance_blank_first_icao_asks_once(conn):
    prompter, out, script = make_prompter("")
    find_distance_between_airports(conn, prompter)
    assert len(script.prompts) == 1
    assert out.getvalue() == ""


def test_add_fbo_menu_existing_airport(conn):
    save_airport(conn, sydney())
    prompter, out, _ = make_prompter("yssy", "")
    add_fbo_menu(conn, prompter, failing_factory)
    assert get_airport(conn, "YSSY").has_fbo is True
    assert "FBO added at" in out.getvalue()


def test_add_fbo_menu_prompts_for_missing_type(conn):
    save_airport(conn, sydney(airport_type=None))
    prompter, _, _ = make_prompter("yssy", "2", "")
    add_fbo_menu(conn, prompter, failing_factory)
    stored = get_airport(conn, "YSSY")
    assert stored.airport_type == "AD"
    assert stored.has_fbo is True


def test_add_fbo_menu_twice_reports_error(conn):
    save_airport(conn, sydney())
    prompter, out, _ = make_prompter("yssy", "yssy", "")
    add_fbo_menu(conn, prompter, failing_factory)
    assert "already has an FBO" in out.getvalue()


def test_add_fbo_menu_fetches_from_api(conn):
    client = FakeClient(
        {
            "YKXX": {
                "id": "77", "name": "Kingsford", "icao": "YKXX",
                "country_code": "", "latitude": -30.0, "longitude": 140.0,
            }
        }
    )
    prompter, out, _ = make_prompter("ykxx", "au", "1", "")
    add_fbo_menu(conn, prompter, lambda: client)
    stored = get_airport(conn, "YKXX")
    assert stored.country_code == "AU"
    assert stored.airport_type == "ALA"
    assert stored.has_fbo is True
    assert "fetched from API and added to database." in out.getvalue()


def test_add_fbo_menu_api_unavailable(conn):
    prompter, out, _ = make_prompter("ykxx", "")
    add_fbo_menu(conn, prompter, failing_factory)
    assert "Error initializing API client:" in out.getvalue()
    with pytest.raises(AirportNotFoundError):
        get_airport(conn, "YKXX")


def test_fbo_options_removes(conn):
    save_airport(conn, sydney())
    add_fbo(conn, "YSSY")
    prompter, out, _ = make_prompter("1")
    fbo_options(conn, prompter, "YSSY")
    assert get_airport(conn, "YSSY").has_fbo is False
    assert "FBO at YSSY removed." in out.getvalue()


def test_fbo_options_without_fbo_reports_error(conn):
    save_airport(conn, sydney())
    prompter, out, _ = make_prompter("Remove FBO")
    fbo_options(conn, prompter, "YSSY")
    assert "does not have an FBO" in out.getvalue()


def test_list_menu_remove_then_back(conn):
    save_airport(conn, sydney())
    add_fbo(conn, "YSSY")
    prompter, out, _ = make_prompter("Sydney (YSSY)", "Remove FBO", "Back")
    list_airports_with_fbos_menu(conn, prompter, failing_factory)
    assert get_airport(conn, "YSSY").has_fbo is False
    assert "Sydney (YSSY)" in out.getvalue()


def test_list_menu_add_fbo(conn):
    save_airport(conn, sydney())
    prompter, _, _ = make_prompter("Add FBO", "yssy", "", "Back")
    list_airports_with_fbos_menu(conn, prompter, failing_factory)
    assert get_airport(conn, "YSSY").has_fbo is True


def test_list_distances_menu_too_few(conn):
    prompter, out, _ = make_prompter()
    list_distances_menu(conn, prompter)
    assert "fewer than 2 FBOs" in out.getvalue()


def test_list_distances_menu_report(conn):
    save_airport(conn, sydney())
    save_airport(conn, melbourne())
    add_fbo(conn, "YSSY")
    add_fbo(conn, "YMML")
    prompter, out, _ = make_prompter()
    list_distances_menu(conn, prompter)
    text = out.getvalue()
    assert "FBO Network Analysis:" in text
    assert "Total connections" in text


def test_find_optimal_menu_too_few(conn):
    prompter, out, _ = make_prompter()
    find_optimal_menu(conn, prompter, {})
    text = out.getvalue()
    assert "Calculating optimal FBO locations..." in text
    assert "fewer than 2 FBOs" in text


def test_find_optimal_menu_report(conn):
    save_airport(conn, sydney())
    save_airport(conn, melbourne())
    add_fbo(conn, "YSSY")
    add_fbo(conn, "YMML")
    prompter, out, _ = make_prompter()
    find_optimal_menu(conn, prompter, {})
    text = out.getvalue()
    assert "Top recommended airports for new FBOs:" in text
    assert "800.00 nm" in text


def test_find_redundant_menu_none_redundant(conn):
    save_airport(conn, sydney())
    save_airport(conn, melbourne())
    add_fbo(conn, "YSSY")
    add_fbo(conn, "YMML")
    prompter, out, _ = make_prompter()
    find_redundant_menu(conn, prompter, {})
    text = out.getvalue()
    assert "no FBOs are considered redundant" in text
    assert "Redundancy threshold:" in text


def test_find_redundant_menu_too_few(conn):
    prompter, out, _ = make_prompter()
    find_redundant_menu(conn, prompter, {})
    assert "No redundancy analysis possible." in out.getvalue()