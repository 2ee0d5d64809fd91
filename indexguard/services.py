"""ORM-backed catalog used by the indexing engine.

:class:`DjangoCatalog` converts model rows into the engine's frozen
records. Primary lookups that hit a database error return ``None`` so
the gate fails closed; list fetches let the error propagate to the
caller, which decides whether that category may fail open.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from django.db import DatabaseError, connections

from .engine.types import AirlineRecord, AirportRecord, FlightRecord, RouteRecord
from .models import Airline, Airport, Flight, Route

logger = logging.getLogger(__name__)


def airport_record(airport: Airport) -> AirportRecord:
    return AirportRecord(
        iata=airport.iata.upper(),
        city=airport.city or None,
        country=airport.country or None,
        name=airport.name or None,
        departure_count=airport.departure_count,
        arrival_count=airport.arrival_count,
        destinations_count=airport.destinations_count,
        terminals=list(airport.terminals or []),
    )


def route_record(route: Route) -> RouteRecord:
    return RouteRecord(
        origin_iata=route.origin_iata.upper(),
        destination_iata=route.destination_iata.upper(),
        destination_city=route.destination_city,
        flights_per_day=route.flights_per_day,
        has_flight_data=route.has_flight_data,
        average_duration=route.average_duration or None,
        typical_duration=route.typical_duration or None,
        is_domestic=route.is_domestic,
    )


def airline_record(airline: Airline) -> AirlineRecord:
    return AirlineRecord(
        code=airline.code.upper(),
        name=airline.name,
        iata=airline.iata.upper() or None,
        country=airline.country or None,
    )


def flight_record(flight: Flight) -> FlightRecord:
    return FlightRecord(
        airline_iata=flight.airline_iata.upper() or None,
        flight_number=flight.flight_number,
        origin_iata=flight.origin_iata.upper(),
        destination_iata=flight.destination_iata.upper(),
    )


class DjangoCatalog:
    """Catalog source reading airports, routes, airlines and flights from the ORM."""

    def close_thread_connections(self) -> None:
        """Close the calling thread's database connections."""

        connections.close_all()

    def fetch_candidate_routes_from_airport(self, iata: str) -> List[RouteRecord]:
        """Routes departing ``iata``, busiest first."""

        queryset = Route.objects.filter(origin_iata__iexact=iata).order_by('-weekly_flights', 'destination_iata')
        return [route_record(route) for route in queryset]

    def fetch_route(self, origin: str, destination: str) -> Optional[RouteRecord]:
        try:
            route = Route.objects.filter(
                origin_iata__iexact=origin,
                destination_iata__iexact=destination,
            ).first()
        except DatabaseError:
            logger.warning("Route lookup %s-%s failed", origin, destination, exc_info=True)
            return None
        return route_record(route) if route is not None else None

    def fetch_airport(self, iata: str) -> Optional[AirportRecord]:
        try:
            airport = Airport.objects.filter(iata__iexact=iata).first()
        except DatabaseError:
            logger.warning("Airport lookup %s failed", iata, exc_info=True)
            return None
        return airport_record(airport) if airport is not None else None

    def fetch_airports_sample(self, n: int) -> List[AirportRecord]:
        return [airport_record(airport) for airport in Airport.objects.order_by('iata')[:n]]

    def fetch_routes_sample(self, n: int, has_flight_data: bool = True) -> List[RouteRecord]:
        queryset = Route.objects.all()
        if has_flight_data:
            queryset = queryset.filter(has_flight_data=True)
        return [route_record(route) for route in queryset.order_by('origin_iata', 'destination_iata')[:n]]

    def fetch_airline_catalog(self) -> Dict[str, AirlineRecord]:
        return {airline.code.lower(): airline_record(airline) for airline in Airline.objects.all()}

    def fetch_airport_flights(self, iata: str) -> List[FlightRecord]:
        return [flight_record(flight) for flight in Flight.objects.filter(origin_iata__iexact=iata)]

    def fetch_route_flights(self, origin: str, destination: str) -> List[FlightRecord]:
        queryset = Flight.objects.filter(origin_iata__iexact=origin, destination_iata__iexact=destination)
        return [flight_record(flight) for flight in queryset]
