"""Data-access interface consumed by the engine.

Implementations must return ``None`` when a primary entity cannot be
found. Retry policy, if any, belongs to the implementation.

A source may also define ``close_thread_connections()``; the audit calls
it on each worker thread after every task so per-thread resources such
as database connections do not outlive the task.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Protocol

from .types import AirlineRecord, AirportRecord, FlightRecord, RouteRecord


class CatalogSource(Protocol):
    def fetch_candidate_routes_from_airport(self, iata: str) -> List[RouteRecord]:
        ...

    def fetch_route(self, origin: str, destination: str) -> Optional[RouteRecord]:
        ...

    def fetch_airports_sample(self, n: int) -> List[AirportRecord]:
        ...

    def fetch_routes_sample(self, n: int, has_flight_data: bool = True) -> List[RouteRecord]:
        ...

    def fetch_airline_catalog(self) -> Dict[str, AirlineRecord]:
        """Return airlines keyed by lower-cased code."""
        ...

    def fetch_airport_flights(self, iata: str) -> List[FlightRecord]:
        ...

    def fetch_route_flights(self, origin: str, destination: str) -> List[FlightRecord]:
        ...


def route_url(route: RouteRecord) -> str:
    return f"/flights/{route.key}"


def airport_url(iata: str) -> str:
    return f"/airports/{iata.lower()}"


def airline_url(code: str) -> str:
    return f"/airlines/{code.lower()}"


def blog_url(slug: str) -> str:
    return f"/blog/{slug}"
