"""Page quality evaluation.

A page is indexable only when it is backed by at least three distinct
data categories and by some primary data (flights, a route or an
airport). The evaluation also decides which content sections the page
may render.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .types import (
    AirportRecord,
    FlightRecord,
    IntroValidation,
    PageQualityCheck,
    PageQualityInput,
    RouteRecord,
)

DURATION_UNAVAILABLE = "Data not available"

# (input field, data point label, section, counted). Counted categories
# record "label:count"; flags record the bare label.
_CATEGORIES = (
    ("flights_count", "flights", "flight_schedule", True),
    ("airlines_count", "airlines", "airlines_list", True),
    ("poi_count", "pois", "pois", True),
    ("schedules_count", "schedules", "schedule_calendar", True),
    ("weather_data_available", "weather", "weather_info", False),
    ("routes_count", "routes", "routes_list", True),
    ("terminals_count", "terminals", "terminals_info", True),
    ("distance_available", "distance", "distance_info", False),
    ("duration_available", "duration", "duration_info", False),
)

_AIRLINE_MENTION_RE = re.compile(r"\bairlines?\b", re.IGNORECASE)


@dataclass(frozen=True)
class RoutePageData:
    """Domain objects backing a route page."""

    flights: Sequence[FlightRecord] = ()
    route: Optional[RouteRecord] = None
    pois: Sequence[Any] = ()
    airlines: Sequence[str] = ()
    distance: Optional[str] = None
    average_duration: Optional[str] = None
    route_type: Optional[str] = None
    busiest_hours: Optional[str] = None
    cheapest_months: Optional[str] = None


@dataclass(frozen=True)
class AirportPageData:
    """Domain objects backing an airport page."""

    airport: Optional[AirportRecord] = None
    flights: Sequence[FlightRecord] = ()
    routes_from: Sequence[RouteRecord] = ()
    pois: Sequence[Any] = ()
    terminals: Sequence[Any] = ()
    busiest_hours: Optional[str] = None


def evaluate_page_quality(
    data: PageQualityInput,
    config: Dict[str, Any] | None = None,
) -> PageQualityCheck:
    """Score the distinct data categories of a page and decide indexability."""

    settings = config or {}
    if data.flights_count == 0 and not data.has_route_data and not data.has_airport_data:
        return PageQualityCheck(
            indexable=False,
            quality_score=0,
            unique_data_points=[],
            missing_data_points=["flights", "route_data", "airport_data"],
            allowed_sections=[],
            reason="No flights or data available",
        )

    unique_data_points: List[str] = []
    missing_data_points: List[str] = []
    allowed_sections: List[str] = []

    for attr, label, section, is_counted in _CATEGORIES:
        value = getattr(data, attr)
        if is_counted and (value or 0) > 0:
            unique_data_points.append(f"{label}:{value}")
        elif not is_counted and value:
            unique_data_points.append(label)
        else:
            missing_data_points.append(label)
            continue
        allowed_sections.append(section)

    if data.unique_data_blocks is not None:
        quality_score = data.unique_data_blocks
    else:
        quality_score = len(unique_data_points)

    minimum = int(settings.get("min_unique_blocks", 3))
    if quality_score < minimum:
        return PageQualityCheck(
            indexable=False,
            quality_score=quality_score,
            unique_data_points=unique_data_points,
            missing_data_points=missing_data_points,
            allowed_sections=allowed_sections,
            reason=f"Insufficient unique data blocks: {quality_score}/{minimum} required",
        )

    if data.flights_count > int(settings.get("statistics_min_flights", 10)):
        allowed_sections.append("statistics")
    if data.airlines_count > int(settings.get("comparison_min_airlines", 1)):
        allowed_sections.append("airline_comparison")
    if data.schedules_count > 0:
        allowed_sections.append("calendar_view")

    return PageQualityCheck(
        indexable=True,
        quality_score=quality_score,
        unique_data_points=unique_data_points,
        missing_data_points=missing_data_points,
        allowed_sections=allowed_sections,
    )


def _has_duration(value: Optional[str]) -> bool:
    return bool(value) and value != DURATION_UNAVAILABLE


def distinct_airlines(flights: Sequence[FlightRecord]) -> int:
    return len({flight.airline_iata for flight in flights if flight.airline_iata})


def evaluate_route_page_quality(
    data: RoutePageData,
    config: Dict[str, Any] | None = None,
) -> PageQualityCheck:
    """Evaluate a route page from its domain objects.

    The block count is tallied here from the source fields and passed as
    an override, so it can differ from the evaluator's own tally (route
    type and daily frequency count here but have no evaluator category).
    """

    flights_count = len(data.flights or ())
    airlines_count = len(data.airlines or ())
    poi_count = len(data.pois or ())
    has_duration = _has_duration(data.average_duration)

    unique_data_blocks = 0
    if flights_count > 0:
        unique_data_blocks += 1
    if airlines_count > 0:
        unique_data_blocks += 1
    if poi_count > 0:
        unique_data_blocks += 1
    if data.distance:
        unique_data_blocks += 1
    if has_duration:
        unique_data_blocks += 1
    if data.route_type:
        unique_data_blocks += 1
    if data.route is not None and data.route.flights_per_day:
        unique_data_blocks += 1

    return evaluate_page_quality(
        PageQualityInput(
            flights_count=flights_count,
            airlines_count=airlines_count,
            poi_count=poi_count,
            unique_data_blocks=unique_data_blocks,
            distance_available=bool(data.distance),
            duration_available=has_duration,
            has_route_data=data.route is not None,
        ),
        config,
    )


def evaluate_airport_page_quality(
    data: AirportPageData,
    config: Dict[str, Any] | None = None,
) -> PageQualityCheck:
    """Evaluate an airport page from its domain objects.

    Like the route adapter, the block count is tallied separately and
    includes the airport's own activity counters.
    """

    flights = data.flights or ()
    flights_count = len(flights)
    routes_count = len(data.routes_from or ())
    poi_count = len(data.pois or ())
    airlines_count = distinct_airlines(flights)
    terminals_count = len(data.terminals or ())
    airport = data.airport

    unique_data_blocks = 0
    if flights_count > 0:
        unique_data_blocks += 1
    if airlines_count > 0:
        unique_data_blocks += 1
    if routes_count > 0:
        unique_data_blocks += 1
    if poi_count > 0:
        unique_data_blocks += 1
    if airport is not None and airport.destinations_count:
        unique_data_blocks += 1
    if terminals_count > 0:
        unique_data_blocks += 1
    if airport is not None and airport.departure_count:
        unique_data_blocks += 1
    if airport is not None and airport.arrival_count:
        unique_data_blocks += 1

    return evaluate_page_quality(
        PageQualityInput(
            flights_count=flights_count,
            airlines_count=airlines_count,
            poi_count=poi_count,
            unique_data_blocks=unique_data_blocks,
            routes_count=routes_count,
            terminals_count=terminals_count,
            has_airport_data=airport is not None,
        ),
        config,
    )


def airport_record_input(airport: AirportRecord, flights: Sequence[FlightRecord] = ()) -> PageQualityInput:
    """Minimal quality input for a persisted airport, used by batch jobs."""

    return PageQualityInput(
        flights_count=airport.departure_count or 0,
        airlines_count=distinct_airlines(flights),
        routes_count=airport.destinations_count or 0,
        terminals_count=len(airport.terminals or ()),
        has_airport_data=True,
    )


def route_record_input(route: RouteRecord, flights: Sequence[FlightRecord] = ()) -> PageQualityInput:
    """Minimal quality input for a persisted route; distance is always assumed."""

    return PageQualityInput(
        flights_count=len(flights),
        airlines_count=distinct_airlines(flights),
        distance_available=True,
        duration_available=bool(route.average_duration or route.typical_duration),
        has_route_data=True,
    )


def validate_intro_text(
    intro_text: str,
    data_points: Mapping[str, Any],
    config: Dict[str, Any] | None = None,
) -> IntroValidation:
    """Check that an intro paragraph cites enough real data points."""

    if not intro_text or not intro_text.strip():
        return IntroValidation(is_valid=False, referenced_data_points=[])

    referenced: List[str] = []
    for name in ("flights_count", "airlines_count", "routes_count", "terminals_count"):
        value = data_points.get(name)
        if value is not None and str(value) in intro_text:
            referenced.append(name)
    for name in ("distance", "duration", "frequency"):
        value = data_points.get(name)
        if value and str(value) in intro_text:
            referenced.append(name)
    for name in ("departure_count", "arrival_count", "destinations_count"):
        value = data_points.get(name)
        if value is not None and str(value) in intro_text:
            referenced.append(name)

    airlines_count = data_points.get("airlines_count")
    if airlines_count and _AIRLINE_MENTION_RE.search(intro_text):
        referenced.append("airlines")

    minimum = int((config or {}).get("intro", {}).get("min_data_points", 2))
    return IntroValidation(is_valid=len(referenced) >= minimum, referenced_data_points=referenced)
