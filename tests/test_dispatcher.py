"""Tests for the wine weather query dispatcher."""

from __future__ import annotations

import itertools
from typing import Any, Dict

import pytest

from wine_weather.contracts import INVALID_PARAMS, METHOD_NOT_FOUND
from wine_weather.dataset import DEFAULT_DATASET, DEFAULT_DATASET_PAYLOAD, load_dataset
from wine_weather.dispatcher import (
    LOCATION_REQUIRED_MESSAGE,
    LOCATION_TYPE_MESSAGE,
    QueryDispatcher,
    SearchType,
    dispatch,
    timestamp_id,
)

REGIONS = ["Mendoza Region", "Marlborough Region", "Western Australia Region"]


@pytest.fixture
def dispatcher() -> QueryDispatcher:
    return QueryDispatcher(id_generator=itertools.count(1).__next__)


def _regions(response: Dict[str, Any]) -> list:
    return [record["id"]["region"] for record in response["result"]]


@pytest.mark.parametrize("region", REGIONS)
def test_location_search_matches_region_case_insensitively(
    dispatcher: QueryDispatcher, region: str
) -> None:
    response = dispatcher.dispatch("Search by location", {"region": region.upper()})

    assert "error" not in response
    assert _regions(response) == [region], "Expected exactly the matching region"


def test_location_search_country_is_case_insensitive(dispatcher: QueryDispatcher) -> None:
    response = dispatcher.dispatch("Search by location", {"country": "argentina"})

    assert response["jsonrpc"] == "2.0"
    assert len(response["result"]) == 1
    record = response["result"][0]
    assert record["id"] == {
        "region": "Mendoza Region",
        "country": "Argentina",
        "report_date": "2025-07-26",
    }
    assert record["params"]["primary_driver"] == "Longwave Solar Radiation"
    assert record["params"]["climate_variability_month_to_month_percentage"] == 4.2
    assert record["method"] == "getReport"


def test_location_search_requires_both_filters_to_match(dispatcher: QueryDispatcher) -> None:
    matching = dispatcher.dispatch(
        "Search by location", {"region": "marlborough region", "country": "NEW ZEALAND"}
    )
    mismatched = dispatcher.dispatch(
        "Search by location", {"region": "Marlborough Region", "country": "Australia"}
    )

    assert _regions(matching) == ["Marlborough Region"]
    assert mismatched["result"] == [], "Region and country are combined with AND"


def test_location_search_without_match_returns_empty_result(dispatcher: QueryDispatcher) -> None:
    response = dispatcher.dispatch("Search by location", {"region": "Barossa Valley"})

    assert response == {"jsonrpc": "2.0", "id": 1, "result": []}


@pytest.mark.parametrize(
    "params",
    [None, {}, {"region": ""}, {"region": "", "country": ""}, {"vintage": "2025"}],
)
def test_location_search_without_filters_is_invalid_params(
    dispatcher: QueryDispatcher, params: Any
) -> None:
    response = dispatcher.dispatch("Search by location", params)

    assert "result" not in response
    assert response["error"] == {"code": INVALID_PARAMS, "message": LOCATION_REQUIRED_MESSAGE}
    assert response["error"]["message"] == "Invalid params: 'region' or 'country' is required."


@pytest.mark.parametrize("params", [{"region": 42}, {"country": ["Argentina"]}, "Argentina"])
def test_location_search_rejects_non_string_filters(
    dispatcher: QueryDispatcher, params: Any
) -> None:
    response = dispatcher.dispatch("Search by location", params)

    assert "result" not in response
    assert response["error"] == {"code": INVALID_PARAMS, "message": LOCATION_TYPE_MESSAGE}


def test_location_search_preserves_dataset_order(dispatcher: QueryDispatcher) -> None:
    payload = dict(DEFAULT_DATASET_PAYLOAD)
    extra = {
        "jsonrpc": "2.0",
        "method": "getReport",
        "id": {"region": "Mendoza Region", "country": "Argentina", "report_date": "2025-08-26"},
        "params": {
            "climate_variability_month_to_month_percentage": 1.5,
            "primary_driver": "Temperature",
            "primary_driver_share_percent": 9.1,
        },
    }
    payload["reports"] = list(payload["reports"]) + [extra]
    custom = QueryDispatcher(load_dataset(payload), id_generator=lambda: 7)

    response = custom.dispatch("Search by location", {"country": "Argentina"})

    dates = [record["id"]["report_date"] for record in response["result"]]
    assert dates == ["2025-07-26", "2025-08-26"]


def test_most_recent_keeps_dataset_order_on_tied_dates(dispatcher: QueryDispatcher) -> None:
    response = dispatcher.dispatch("Search most Recent")

    assert _regions(response) == REGIONS, "Tied dates must keep dataset order"


def test_most_recent_sorts_descending_and_limits_to_three() -> None:
    payload = dict(DEFAULT_DATASET_PAYLOAD)
    reports = [dict(report) for report in payload["reports"]]
    reports[0] = {**reports[0], "id": {**reports[0]["id"], "report_date": "2025-05-26"}}
    reports[2] = {**reports[2], "id": {**reports[2]["id"], "report_date": "2025-09-26"}}
    reports.append(
        {
            "jsonrpc": "2.0",
            "method": "getReport",
            "id": {"region": "Napa Valley", "country": "United States", "report_date": "2025-07-26"},
            "params": {
                "climate_variability_month_to_month_percentage": 2.0,
                "primary_driver": "Precipitation",
                "primary_driver_share_percent": 12.5,
            },
        }
    )
    payload["reports"] = reports
    custom = QueryDispatcher(load_dataset(payload), id_generator=lambda: 1)

    response = custom.dispatch("Search most Recent")

    assert [record["id"]["region"] for record in response["result"]] == [
        "Western Australia Region",
        "Marlborough Region",
        "Napa Valley",
    ]


def test_most_recent_returns_all_when_fewer_than_three() -> None:
    payload = dict(DEFAULT_DATASET_PAYLOAD)
    payload["reports"] = list(payload["reports"])[:2]
    custom = QueryDispatcher(load_dataset(payload), id_generator=lambda: 1)

    response = custom.dispatch("Search most Recent", {"region": "ignored"})

    assert len(response["result"]) == 2


def test_definitions_returns_glossary(dispatcher: QueryDispatcher) -> None:
    response = dispatcher.dispatch("Search Definitions", {"region": "ignored"})

    definitions = response["result"]
    assert set(definitions) == {"Climate Variability", "Primary Driver", "Month to Month Change"}
    assert all(isinstance(text, str) and text for text in definitions.values())


@pytest.mark.parametrize("query_type", ["bogus", "search by location", "", None])
def test_unknown_search_type_is_method_not_found(
    dispatcher: QueryDispatcher, query_type: Any
) -> None:
    response = dispatcher.dispatch(query_type)

    assert response == {
        "jsonrpc": "2.0",
        "id": 1,
        "error": {"code": METHOD_NOT_FOUND, "message": "Method not found"},
    }


def test_each_call_gets_a_fresh_id(dispatcher: QueryDispatcher) -> None:
    first = dispatcher.dispatch("Search Definitions")
    second = dispatcher.dispatch("bogus")

    assert (first["id"], second["id"]) == (1, 2)


def test_repeated_calls_return_identical_content() -> None:
    first = dispatch("Search by location", {"country": "Australia"})
    second = dispatch("Search by location", {"country": "Australia"})

    assert first["result"] == second["result"]
    assert isinstance(first["id"], int)


def test_search_type_enum_is_accepted(dispatcher: QueryDispatcher) -> None:
    response = dispatcher.dispatch(SearchType.MOST_RECENT)

    assert len(response["result"]) == 3


def test_mutating_a_response_leaves_dataset_untouched(dispatcher: QueryDispatcher) -> None:
    response = dispatcher.dispatch("Search most Recent")
    response["result"][0]["id"]["region"] = "Tampered"
    response["result"].clear()

    definitions = dispatcher.dispatch("Search Definitions")["result"]
    definitions["Primary Driver"] = "Tampered"

    assert DEFAULT_DATASET.reports[0].region == "Mendoza Region"
    assert DEFAULT_DATASET.definitions["Primary Driver"] != "Tampered"
    assert _regions(dispatcher.dispatch("Search most Recent")) == REGIONS


def test_timestamp_id_is_milliseconds() -> None:
    first = timestamp_id()
    second = timestamp_id()

    assert second >= first
    assert first > 1_600_000_000_000, "Expected epoch milliseconds"
