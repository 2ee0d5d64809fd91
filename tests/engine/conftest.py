"""Shared fixtures for engine tests."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

import pytest

from indexguard.engine import duplicates
from indexguard.engine.config import load_config
from indexguard.engine.types import (
    AirlineRecord,
    AirportRecord,
    FlightRecord,
    RelatedEntity,
    RouteRecord,
)


@pytest.fixture()
def engine_config():
    """Provide a mutable copy of the default engine configuration."""

    return load_config(None)


@pytest.fixture()
def hash_store():
    return duplicates.InMemoryHashStore()


@pytest.fixture()
def usage_store():
    return duplicates.PatternUsageStore()


def make_route(
    origin: str = "JFK",
    destination: str = "LAX",
    *,
    city: str = "Los Angeles",
    flights_per_day: str = "5 flights",
    has_flight_data: bool = True,
    average_duration: str | None = "6h 10m",
    typical_duration: str | None = None,
) -> RouteRecord:
    return RouteRecord(
        origin_iata=origin,
        destination_iata=destination,
        destination_city=city,
        flights_per_day=flights_per_day,
        has_flight_data=has_flight_data,
        average_duration=average_duration,
        typical_duration=typical_duration,
    )


def make_airport(
    iata: str = "JFK",
    *,
    city: str | None = "New York",
    departures: int = 120,
    arrivals: int = 118,
    destinations: int = 40,
    terminals: Iterable[dict] | None = None,
) -> AirportRecord:
    return AirportRecord(
        iata=iata,
        city=city,
        country="US",
        name=f"{iata} International",
        departure_count=departures,
        arrival_count=arrivals,
        destinations_count=destinations,
        terminals=list(terminals if terminals is not None else [{"name": "T1"}, {"name": "T4"}]),
    )


def make_flights(
    count: int,
    *,
    origin: str = "JFK",
    destination: str = "LAX",
    airlines: Iterable[str] = ("AA", "DL", "B6"),
) -> List[FlightRecord]:
    codes = list(airlines)
    return [
        FlightRecord(
            airline_iata=codes[index % len(codes)] if codes else None,
            flight_number=str(100 + index),
            origin_iata=origin,
            destination_iata=destination,
        )
        for index in range(count)
    ]


def make_airline(code: str, name: str, *, country: str = "US", iata: str | None = None) -> AirlineRecord:
    return AirlineRecord(code=code, name=name, iata=iata or code, country=country)


def make_candidates(prefix: str, count: int, *, indexable: bool = True) -> List[RelatedEntity]:
    return [
        RelatedEntity(id=f"{prefix}-{index}", should_index=indexable, entity=make_route("JFK", f"X{index:02d}"))
        for index in range(count)
    ]


class FakeCatalog:
    """In-memory catalog source for engine tests."""

    def __init__(
        self,
        *,
        airports: Iterable[AirportRecord] = (),
        routes: Iterable[RouteRecord] = (),
        airlines: Iterable[AirlineRecord] = (),
        flights: Iterable[FlightRecord] = (),
    ) -> None:
        self.airports = list(airports)
        self.routes = list(routes)
        self.airlines = list(airlines)
        self.flights = list(flights)
        self.failing: Dict[str, Exception] = {}

    def fail(self, method: str, error: Exception | None = None) -> None:
        self.failing[method] = error or RuntimeError(f"{method} unavailable")

    def _check(self, method: str) -> None:
        if method in self.failing:
            raise self.failing[method]

    def fetch_candidate_routes_from_airport(self, iata: str) -> List[RouteRecord]:
        self._check("fetch_candidate_routes_from_airport")
        return [route for route in self.routes if route.origin_iata == iata.upper()]

    def fetch_route(self, origin: str, destination: str) -> Optional[RouteRecord]:
        self._check("fetch_route")
        for route in self.routes:
            if route.origin_iata == origin.upper() and route.destination_iata == destination.upper():
                return route
        return None

    def fetch_airports_sample(self, n: int) -> List[AirportRecord]:
        self._check("fetch_airports_sample")
        return self.airports[:n]

    def fetch_routes_sample(self, n: int, has_flight_data: bool = True) -> List[RouteRecord]:
        self._check("fetch_routes_sample")
        routes = [route for route in self.routes if route.has_flight_data or not has_flight_data]
        return routes[:n]

    def fetch_airline_catalog(self) -> Dict[str, AirlineRecord]:
        self._check("fetch_airline_catalog")
        return {airline.code.lower(): airline for airline in self.airlines}

    def fetch_airport_flights(self, iata: str) -> List[FlightRecord]:
        self._check("fetch_airport_flights")
        return [flight for flight in self.flights if flight.origin_iata == iata.upper()]

    def fetch_route_flights(self, origin: str, destination: str) -> List[FlightRecord]:
        self._check("fetch_route_flights")
        return [
            flight
            for flight in self.flights
            if flight.origin_iata == origin.upper() and flight.destination_iata == destination.upper()
        ]
