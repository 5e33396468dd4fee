import requests

from insider_locator.core.reverse_geocoder import ReverseGeocoder

from conftest import make_response, make_session


def test_country_from_address_block():
    session = make_session(make_response({"display_name": "...", "address": {"country": "United States"}}))

    geocoder = ReverseGeocoder(session=session, url="https://geo.test/reverse", timeout=4)

    assert geocoder.country_for(37.77, -122.42) == "United States"
    params = session.request.call_args[1]["params"]
    assert params["lat"] == 37.77
    assert params["lon"] == -122.42
    assert "api_key" not in params


def test_top_level_country_wins():
    session = make_session(make_response({"country": "India", "address": {"country": "Elsewhere"}}))
    assert ReverseGeocoder(session=session).country_for(28.6, 77.2) == "India"


def test_api_key_is_sent():
    session = make_session(make_response({"country": "India"}))

    ReverseGeocoder(session=session, api_key="secret").country_for(28.6, 77.2)

    assert session.request.call_args[1]["params"]["api_key"] == "secret"


def test_failures_give_none():
    assert ReverseGeocoder(session=make_session(error=requests.ConnectionError())).country_for(0, 0) is None
    assert ReverseGeocoder(session=make_session(make_response(status_code=401))).country_for(0, 0) is None
    assert ReverseGeocoder(session=make_session(make_response({"error": "Unable to geocode"}))).country_for(0, 0) is None
    assert ReverseGeocoder(session=make_session(make_response({"country": "  "}))).country_for(0, 0) is None
