"""Activity checks deciding whether an entity may exist as an indexed page.

Each check is a pure function of the primary entity and its flights. A
missing primary entity always fails closed with a reason string.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Sequence

from .errors import UnknownPageTypeError
from .types import AirportRecord, FlightRecord, IndexingCheck, RouteRecord

_EMPTY_FREQUENCIES = {"0 flights", "0-0 flights"}


def should_index_route(
    flights: Sequence[FlightRecord] | None,
    route: Optional[RouteRecord],
    config: Dict[str, Any] | None = None,
) -> IndexingCheck:
    """Return whether a route page has real scheduled activity."""

    if route is None:
        return IndexingCheck(False, "Route not found")
    if not flights:
        return IndexingCheck(False, "No active flights")
    if not route.has_flight_data:
        return IndexingCheck(False, "Route has no flight data")
    frequency = route.flights_per_day
    if not frequency or frequency in _EMPTY_FREQUENCIES:
        return IndexingCheck(False, "Zero flights per day")
    return IndexingCheck(True)


def should_index_airport(
    airport: Optional[AirportRecord],
    flights: Sequence[FlightRecord] | None,
    config: Dict[str, Any] | None = None,
) -> IndexingCheck:
    """Return whether an airport page has enough departures and arrivals."""

    if airport is None:
        return IndexingCheck(False, "Airport not found")

    total_activity = (airport.departure_count or 0) + (airport.arrival_count or 0)
    if total_activity == 0:
        return IndexingCheck(False, "No airport activity")
    if not airport.destinations_count:
        return IndexingCheck(False, "No destinations served")

    minimum = int((config or {}).get("airport_min_activity", 5))
    if total_activity < minimum and len(flights or ()) < minimum:
        return IndexingCheck(False, f"Insufficient activity (less than {minimum} flights)")
    return IndexingCheck(True)


def should_index_airline_route(
    flights: Sequence[FlightRecord] | None,
    route: Optional[RouteRecord],
    config: Dict[str, Any] | None = None,
) -> IndexingCheck:
    if route is None:
        return IndexingCheck(False, "Route not found")
    if not flights:
        return IndexingCheck(False, "No airline flights on route")
    return IndexingCheck(True)


def should_index_airline_airport(
    flights: Sequence[FlightRecord] | None,
    airport: Optional[AirportRecord],
    config: Dict[str, Any] | None = None,
) -> IndexingCheck:
    if airport is None:
        return IndexingCheck(False, "Airport not found")
    if not flights:
        return IndexingCheck(False, "No airline flights from airport")
    minimum = int((config or {}).get("airline_airport_min_flights", 3))
    if len(flights) < minimum:
        return IndexingCheck(False, f"Insufficient flights (less than {minimum})")
    return IndexingCheck(True)


def check_indexing_eligibility(
    page_type: str,
    payload: Mapping[str, Any],
    config: Dict[str, Any] | None = None,
) -> IndexingCheck:
    """Dispatch ``payload`` to the check for ``page_type``.

    The payload carries ``flights`` plus either ``route`` or ``airport``.
    """

    normalized = page_type.strip().lower().replace("_", "-")
    flights = payload.get("flights") or []
    if normalized == "route":
        return should_index_route(flights, payload.get("route"), config)
    if normalized == "airport":
        return should_index_airport(payload.get("airport"), flights, config)
    if normalized == "airline-route":
        return should_index_airline_route(flights, payload.get("route"), config)
    if normalized == "airline-airport":
        return should_index_airline_airport(flights, payload.get("airport"), config)
    raise UnknownPageTypeError(page_type)
