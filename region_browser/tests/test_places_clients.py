import pytest

from region_browser.integrations.city_dataset import CityDatasetFetcher, place_to_city
from region_browser.integrations.places_api import PlacesApiClient
from region_browser.integrations.state_search import StateSearchProvider
from region_browser.state import (
    DECODE_ERROR,
    SKIPPED,
    TRANSPORT_ERROR,
    CityRecord,
    Option,
)


def _api(session) -> PlacesApiClient:
    return PlacesApiClient("http://places.test/", session=session, timeout=5)


def test_search_maps_places_to_options_in_service_order(fake_session) -> None:
    fake_session.route(
        "states",
        {"places": [{"id": "TX", "state": "Texas"}, {"id": "CA", "state": "California"}]},
    )
    outcome = StateSearchProvider(_api(fake_session)).search("a")

    assert outcome.ok
    assert outcome.value == (Option(value="TX", label="Texas"), Option(value="CA", label="California"))
    assert fake_session.calls == [("http://places.test/states", {"query": "a"})]


def test_search_skips_places_without_id(fake_session) -> None:
    fake_session.route("states", {"places": [{"state": "Nowhere"}, {"id": 5, "state": "Ohio"}, "junk"]})
    outcome = StateSearchProvider(_api(fake_session)).search("o")
    assert outcome.value == (Option(value=5, label="Ohio"),)


def test_search_transport_failure_resolves_empty(fake_session, connection_error) -> None:
    fake_session.route("states", connection_error)
    outcome = StateSearchProvider(_api(fake_session)).search("Cal")

    assert not outcome.ok
    assert outcome.kind == TRANSPORT_ERROR
    assert outcome.value == ()


def test_search_non_200_is_a_transport_failure(fake_session, make_response) -> None:
    fake_session.route("states", make_response({"places": []}, status_code=503))
    outcome = StateSearchProvider(_api(fake_session)).search("Cal")
    assert outcome.kind == TRANSPORT_ERROR
    assert outcome.error == "HTTP 503"


@pytest.mark.parametrize(
    "response_kwargs",
    [
        {"invalid_json": True},
        {"payload": ["not", "an", "object"]},
        {"payload": {"places": "nope"}},
    ],
)
def test_search_malformed_payload_is_a_decode_failure(fake_session, make_response, response_kwargs) -> None:
    fake_session.route("states", make_response(**response_kwargs))
    outcome = StateSearchProvider(_api(fake_session)).search("Cal")
    assert outcome.kind == DECODE_ERROR
    assert outcome.value == ()


def test_missing_places_key_means_no_results(fake_session) -> None:
    fake_session.route("states", {})
    outcome = StateSearchProvider(_api(fake_session)).search("Cal")
    assert outcome.ok
    assert outcome.value == ()


def test_search_results_are_cached_until_ttl_expires(fake_session) -> None:
    now = [100.0]
    fake_session.route("states", {"places": [{"id": "CA", "state": "California"}]})
    provider = StateSearchProvider(_api(fake_session), cache_ttl=60, clock=lambda: now[0])

    provider.search("Cal")
    provider.search("Cal")
    assert len(fake_session.calls_to("states")) == 1

    now[0] += 61
    provider.search("Cal")
    assert len(fake_session.calls_to("states")) == 2

    provider.clear_cache()
    provider.search("Cal")
    assert len(fake_session.calls_to("states")) == 3


def test_failed_searches_are_not_cached(fake_session, connection_error) -> None:
    fake_session.route("states", connection_error)
    provider = StateSearchProvider(_api(fake_session), cache_ttl=60)
    provider.search("Cal")
    provider.search("Cal")
    assert len(fake_session.calls_to("states")) == 2


def test_fetch_maps_cities(fake_session) -> None:
    fake_session.route(
        "cities",
        {
            "places": [
                {"id": 2, "city": "San Jose", "population": 1000000},
                {"id": 1, "city": "Los Angeles", "population": "4,000,000"},
            ]
        },
    )
    outcome = CityDatasetFetcher(_api(fake_session)).fetch_for(Option(value="CA", label="California"))

    assert outcome.ok
    assert outcome.value == (
        CityRecord(id=2, city="San Jose", population=1_000_000),
        CityRecord(id=1, city="Los Angeles", population=4_000_000),
    )
    assert fake_session.calls_to("cities") == [{"state_id": "CA"}]


@pytest.mark.parametrize("selection", [None, Option(value="", label="Blank")])
def test_fetch_without_selection_value_issues_no_request(fake_session, selection) -> None:
    outcome = CityDatasetFetcher(_api(fake_session)).fetch_for(selection)
    assert outcome.kind == SKIPPED
    assert fake_session.calls == []


def test_fetch_transport_failure_has_no_dataset(fake_session, connection_error) -> None:
    fake_session.route("cities", connection_error)
    outcome = CityDatasetFetcher(_api(fake_session)).fetch_for(Option(value="CA", label="California"))
    assert outcome.kind == TRANSPORT_ERROR
    assert outcome.value is None


def test_fetch_skips_malformed_rows(fake_session) -> None:
    fake_session.route(
        "cities",
        {
            "places": [
                {"id": 1, "city": "Ok", "population": 10},
                {"id": None, "city": "No id", "population": 10},
                {"id": 3, "city": "No population"},
            ]
        },
    )
    outcome = CityDatasetFetcher(_api(fake_session)).fetch_for(Option(value="CA", label="California"))
    assert outcome.value == (CityRecord(id=1, city="Ok", population=10),)


def test_place_to_city_rejects_boolean_population() -> None:
    with pytest.raises(ValueError):
        place_to_city({"id": 1, "city": "x", "population": True})
