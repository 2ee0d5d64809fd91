"""Quality evaluator tests."""

from __future__ import annotations

from indexguard.engine.quality import (
    AirportPageData,
    RoutePageData,
    airport_record_input,
    evaluate_airport_page_quality,
    evaluate_page_quality,
    evaluate_route_page_quality,
    route_record_input,
    validate_intro_text,
)
from indexguard.engine.types import PageQualityInput

from .conftest import make_airport, make_flights, make_route


def test_no_primary_data_short_circuits():
    result = evaluate_page_quality(PageQualityInput(poi_count=4, weather_data_available=True))
    assert result.indexable is False
    assert result.quality_score == 0
    assert result.unique_data_points == []
    assert result.allowed_sections == []
    assert result.missing_data_points == ["flights", "route_data", "airport_data"]
    assert result.reason == "No flights or data available"


def test_score_counts_distinct_categories():
    data = PageQualityInput(flights_count=12, airlines_count=3, distance_available=True, has_route_data=True)
    result = evaluate_page_quality(data)
    assert result.indexable is True
    assert result.quality_score == 3
    assert result.unique_data_points == ["flights:12", "airlines:3", "distance"]
    assert "pois" in result.missing_data_points
    assert "weather" in result.missing_data_points
    assert result.allowed_sections == [
        "flight_schedule",
        "airlines_list",
        "distance_info",
        "statistics",
        "airline_comparison",
    ]


def test_two_categories_are_not_enough():
    data = PageQualityInput(flights_count=4, routes_count=2, has_airport_data=True)
    result = evaluate_page_quality(data)
    assert result.indexable is False
    assert result.quality_score == 2
    assert result.reason == "Insufficient unique data blocks: 2/3 required"
    assert result.allowed_sections == ["flight_schedule", "routes_list"]


def test_bonus_sections_need_strict_thresholds():
    data = PageQualityInput(
        flights_count=10,
        airlines_count=1,
        schedules_count=7,
        terminals_count=2,
        has_airport_data=True,
    )
    result = evaluate_page_quality(data)
    assert result.indexable is True
    assert "statistics" not in result.allowed_sections
    assert "airline_comparison" not in result.allowed_sections
    assert result.allowed_sections[-1] == "calendar_view"


def test_explicit_block_count_overrides_tally():
    data = PageQualityInput(flights_count=1, unique_data_blocks=5, has_route_data=True)
    result = evaluate_page_quality(data)
    assert result.indexable is True
    assert result.quality_score == 5
    assert result.unique_data_points == ["flights:1"]


def test_minimum_blocks_comes_from_config(engine_config):
    engine_config.raw["min_unique_blocks"] = 2
    data = PageQualityInput(flights_count=4, routes_count=2, has_airport_data=True)
    assert evaluate_page_quality(data, engine_config.raw).indexable is True


def test_evaluation_is_pure():
    data = PageQualityInput(flights_count=3, airlines_count=2, poi_count=1, has_route_data=True)
    assert evaluate_page_quality(data) == evaluate_page_quality(data)


def test_route_adapter_counts_type_and_frequency():
    data = RoutePageData(
        flights=make_flights(2),
        route=make_route(flights_per_day="1 flight"),
        route_type="domestic",
    )
    result = evaluate_route_page_quality(data)
    # flights, route type and daily frequency; only flights has an evaluator category
    assert result.quality_score == 3
    assert result.indexable is True
    assert result.unique_data_points == ["flights:2"]


def test_route_adapter_ignores_unavailable_duration():
    data = RoutePageData(flights=make_flights(1), route=make_route(flights_per_day=""), average_duration="Data not available")
    result = evaluate_route_page_quality(data)
    assert result.quality_score == 1
    assert "duration" in result.missing_data_points


def test_airport_adapter_counts_activity_counters():
    airport = make_airport(terminals=[])
    data = AirportPageData(airport=airport, flights=make_flights(3, airlines=["AA"]))
    result = evaluate_airport_page_quality(data)
    # flights, airlines, destinations, departures, arrivals
    assert result.quality_score == 5
    assert result.indexable is True
    assert result.unique_data_points == ["flights:3", "airlines:1"]


def test_airport_record_input_uses_counters():
    airport = make_airport(departures=15, destinations=9)
    data = airport_record_input(airport, make_flights(4, airlines=["AA", "DL"]))
    assert data.flights_count == 15
    assert data.airlines_count == 2
    assert data.routes_count == 9
    assert data.terminals_count == 2
    assert data.has_airport_data is True


def test_route_record_input_assumes_distance():
    data = route_record_input(make_route(average_duration=None, typical_duration="3h"), make_flights(3))
    assert data.flights_count == 3
    assert data.distance_available is True
    assert data.duration_available is True
    assert evaluate_page_quality(data).indexable is True


def test_intro_text_must_cite_data():
    points = {"flights_count": 42, "airlines_count": 3, "distance": "2,475 mi"}
    result = validate_intro_text("There are 42 weekly flights covering 2,475 mi.", points)
    assert result.is_valid is True
    assert result.referenced_data_points == ["flights_count", "distance"]


def test_intro_text_airline_mention_counts():
    result = validate_intro_text("Several airlines fly this route, 3 in total.", {"airlines_count": 3})
    assert result.referenced_data_points == ["airlines_count", "airlines"]
    assert result.is_valid is True


def test_blank_intro_is_invalid():
    assert validate_intro_text("   ", {"flights_count": 1}).is_valid is False
    assert validate_intro_text("A lovely route.", {"flights_count": 7}).is_valid is False


def test_full_route_page_scenario():
    data = PageQualityInput(
        flights_count=12,
        airlines_count=3,
        routes_count=5,
        terminals_count=2,
        distance_available=True,
        duration_available=True,
    )
    result = evaluate_page_quality(data)
    assert result.quality_score == 6
    assert result.indexable is True
    assert {
        "flight_schedule",
        "airlines_list",
        "routes_list",
        "terminals_info",
        "distance_info",
        "duration_info",
        "statistics",
        "airline_comparison",
    } <= set(result.allowed_sections)


def test_score_matches_data_points_for_every_combination():
    for mask in range(1 << 6):
        data = PageQualityInput(
            flights_count=4 if mask & 1 else 0,
            airlines_count=2 if mask & 2 else 0,
            poi_count=3 if mask & 4 else 0,
            weather_data_available=bool(mask & 8),
            terminals_count=1 if mask & 16 else 0,
            duration_available=bool(mask & 32),
            has_route_data=True,
        )
        result = evaluate_page_quality(data)
        assert result.quality_score == len(result.unique_data_points)
        assert result.indexable == (result.quality_score >= 3)
        assert len(result.unique_data_points) + len(result.missing_data_points) == 9
